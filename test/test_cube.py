#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Tests of the volumetric output.
'''


import numpy as np
import pytest
from ase.io.cube import read_cube_data

from dftsystem.cube import write_cube, OUTTITLE, INTITLE
from dftsystem.density import Density


@pytest.fixture
def small():
    '''Density with five grid points.'''

    tmp = np.array([0.5, 1.5, 2.5, 3.5, 4.5]).reshape((5, 1, 1))

    return Density(grid=tmp, cell=np.diag([5.0, 1.0, 1.0]))


def test_output_wrapped_after_six_values(small, tmp_path):
    outputs = [0.25 * ii for ii in range(7)]

    outname, inname = write_cube(str(tmp_path / 'pred'), small, outputs)

    with open(outname, 'r') as fid:
        lines = fid.read().splitlines()

    assert lines[0] == OUTTITLE
    assert lines[1] == ''
    assert lines[2].split()[0] == '1'
    assert lines[6] == '1 1 0.0 0.0 0.0'
    assert len(lines) == 9
    assert len(lines[7]) == 6 * 12
    np.testing.assert_allclose(np.array(lines[7].split(), dtype=float),
                               outputs[:6])
    np.testing.assert_allclose(np.array(lines[8].split(), dtype=float),
                               outputs[6:])

    with open(inname, 'r') as fid:
        lines = fid.read().splitlines()

    assert lines[0] == INTITLE
    assert len(lines) == 8
    np.testing.assert_allclose(np.array(lines[7].split(), dtype=float),
                               small.values)


def test_input_cube_readable(small, tmp_path):
    _, inname = write_cube(str(tmp_path / 'sub' / 'pred'), small, [])

    data, atoms = read_cube_data(inname)

    assert data.shape == (5, 1, 1)
    np.testing.assert_allclose(data.ravel(), small.values)
    np.testing.assert_allclose(atoms.get_cell().lengths(), [5.0, 1.0, 1.0],
                               atol=1e-5)
