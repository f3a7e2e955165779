#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Shared fixtures of the dftsystem tests.
'''


import numpy as np
import pytest
from ase import Atoms

from dftsystem.density import Density
from dftsystem.readers import READERS, FetchError
from dftsystem.config import ConfigurationError
from dftsystem.structure import Structure


class FakeReader:
    '''In-memory reader, providing fixed data for every request.'''


    def __init__(self, code, grid, cell, structure, properties, user,
                 density_train=''):
        self.code = code
        self.grid = grid
        self.cell = cell
        self.structure = structure
        self.properties = properties
        self.user = user
        self.density_train = density_train
        self.calls = []
        self.closed = False


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def close(self):
        self.closed = True


    def _check(self, fname, role):
        if not fname:
            raise FetchError("No file registered for '" + role + "'.")


    def read_density(self, fname, stride):
        self._check(fname, 'density')
        self.calls.append(('read_density', fname, stride))
        density = Density(grid=self.grid.copy(), cell=self.cell,
                          train=self.density_train)
        density.downsample(stride)
        return density


    def read_structure(self, fname):
        self._check(fname, 'structure')
        self.calls.append(('read_structure', fname))
        return self.structure


    def get_property(self, name, fname):
        self._check(fname, name)
        self.calls.append(('get_property', name, fname))
        try:
            return self.properties[name]
        except KeyError as exc:
            raise FetchError("Property '" + name + "' unavailable.") from exc


    def get_user_property(self, index, fname):
        self._check(fname, 'user')
        self.calls.append(('get_user_property', index, fname))
        return np.array(self.user[index], dtype=float)


@pytest.fixture
def grid():
    '''Smooth, strictly positive 8x8x8 test density.'''

    xx = np.linspace(0.0, 2.0 * np.pi, 8, endpoint=False)
    gx, gy, gz = np.meshgrid(xx, xx, xx, indexing='ij')

    return 2.0 + np.sin(gx) * np.cos(gy) + 0.5 * np.cos(gz)


@pytest.fixture
def cell():
    return np.diag([2.0, 2.0, 2.0])


@pytest.fixture
def structure():
    atoms = Atoms('H2O', positions=[[0.0, 0.0, 0.0], [0.0, 0.76, 0.59],
                                    [0.0, -0.76, 0.59]],
                  cell=[4.0, 4.0, 4.0], pbc=True)

    return Structure(atoms=atoms)


@pytest.fixture
def properties():
    return {'energy': -14.5, 'gw_gap': 3.2, 'fermi': -1.25, 'user': 0.75}


@pytest.fixture
def user():
    return [[0.1, 0.2], [1.0, 2.0, 3.0], [4.0], [7.5, 8.5]]


class FakeBackend:
    '''Data handed out by the fake readers, the created readers are
       collected in the order of their construction.'''


    def __init__(self, grid, cell, structure, properties, user):
        self.grid = grid
        self.cell = cell
        self.structure = structure
        self.properties = properties
        self.user = user
        self.density_train = ''
        self.created = []


    def get_reader(self, code):
        if code not in READERS:
            raise ConfigurationError(
                "Interface to code '" + str(code) + "' has not been "
                "implemented.")
        reader = FakeReader(code, self.grid, self.cell, self.structure,
                            self.properties, self.user, self.density_train)
        self.created.append(reader)
        return reader


@pytest.fixture
def fake_reader(monkeypatch, grid, cell, structure, properties, user):
    '''Patches the reader selection of the System class.'''

    backend = FakeBackend(grid, cell, structure, properties, user)
    monkeypatch.setattr('dftsystem.system.get_reader', backend.get_reader)

    return backend
