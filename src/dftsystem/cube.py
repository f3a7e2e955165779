#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Volumetric Output

Dumps the network outputs and the input density in Gaussian cube format,
for visualization purposes.
'''


import os

from dftsystem.density import AA__BOHR


OUTTITLE = 'This is the output of the density network'
INTITLE = 'This is the input to the density network'

# values per line and field width of the volumetric data
NPERLINE = 6
FIELDWIDTH = 12


def write_cube(fname, density, outputs):
    '''Writes the outputs and the density to two cube files.

    Args:

        fname (str): basename of the files, '.out.cube' and '.in.cube' get
            appended
        density (Density): density providing the grid header and the
            input values
        outputs (list): network outputs, one value per evaluation

    Returns:

        fnames (tuple): paths of the output and the input cube file

    '''

    outname = str(fname) + '.out.cube'
    inname = str(fname) + '.in.cube'

    dirname = os.path.dirname(os.path.abspath(outname))
    os.makedirs(dirname, exist_ok=True)

    with open(outname, 'w') as fid:
        _write_header(fid, OUTTITLE, density)
        _write_values(fid, outputs)

    with open(inname, 'w') as fid:
        _write_header(fid, INTITLE, density)
        _write_values(fid, density.values)

    return outname, inname


def _write_header(fid, title, density):
    '''Writes the cube header with a single placeholder atom.'''

    fid.write(title + '\n')
    fid.write('\n')
    fid.write('{:5d}{:12.6f}{:12.6f}{:12.6f}\n'.format(
        1, *(density.origin * AA__BOHR)))
    density.cube_header(fid)
    fid.write('1 1 0.0 0.0 0.0\n')


def _write_values(fid, values):
    '''Writes the volumetric data, six values per line.'''

    count = 0

    for value in values:
        count += 1
        fid.write('{:{width}.6g}'.format(value, width=FIELDWIDTH))
        if count % NPERLINE == 0:
            fid.write('\n')

    if count % NPERLINE != 0:
        fid.write('\n')
