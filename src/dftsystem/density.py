#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Volumetric Density Field

The Density class stores a (charge) density on a regular three-dimensional
grid, together with the geometry of the unit cell, and implements the
transforms applied before the density is fed to the network.
'''


import numpy as np


# conversion factors
BOHR__AA = 0.529177249
AA__BOHR = 1.0 / BOHR__AA


class Density:
    '''Basic Volumetric Density Class.'''


    def __init__(self, grid=None, cell=None, origin=None, train=''):
        '''Initializes a Density object.

        Args:

            grid (3darray): density values on the regular grid, an empty
                density is created if not provided
            cell (2darray): lattice vectors in Angstrom (as rows)
            origin (1darray): origin of the grid in Angstrom
            train (str): optional training dataset label of the density

        '''

        if grid is None:
            grid = np.empty((0, 0, 0), dtype=float)

        grid = np.array(grid, dtype=float)

        if grid.ndim != 3:
            msg = 'Invalid density grid, 3-dimensional array expected.'
            raise DensityError(msg)

        if cell is None:
            cell = np.zeros((3, 3), dtype=float)

        cell = np.array(cell, dtype=float)

        if cell.shape != (3, 3):
            msg = 'Invalid cell, expected three lattice vectors.'
            raise DensityError(msg)

        if origin is None:
            origin = np.zeros(3, dtype=float)

        self._grid = grid
        self._cell = cell
        self._origin = np.array(origin, dtype=float)
        self._voxel = _voxel_vectors(cell, grid.shape)

        self.train = train


    def __len__(self):
        return self._grid.size


    @property
    def npoints(self):
        '''Defines property, providing the number of grid points.

        Returns:

            npoints (int): total number of grid points

        '''

        return self._grid.size


    @property
    def shape(self):
        '''Defines property, providing the grid dimensions.'''

        return self._grid.shape


    @property
    def grid(self):
        '''Defines property, providing the three-dimensional grid.'''

        return self._grid


    @property
    def values(self):
        '''Defines property, providing the flattened grid values.

        Returns:

            values (1darray): view on the grid values in C-order

        '''

        return self._grid.reshape(-1)


    @property
    def cell(self):
        '''Defines property, providing the lattice vectors in Angstrom.'''

        return self._cell


    @property
    def origin(self):
        '''Defines property, providing the origin of the grid in Angstrom.'''

        return self._origin


    @property
    def voxel(self):
        '''Defines property, providing the voxel step vectors in Angstrom.

        Returns:

            voxel (2darray): step vectors along the three grid axes (as rows)

        '''

        return self._voxel


    @property
    def volume(self):
        '''Defines property, providing the volume of the unit cell.

        Returns:

            volume (float): cell volume in cubic Angstrom

        '''

        return abs(np.linalg.det(self._cell))


    @property
    def dv(self):
        '''Defines property, providing the volume of a single voxel.

        Returns:

            dv (float): voxel volume in cubic Angstrom

        '''

        return abs(np.linalg.det(self._voxel))


    def normalize(self, value):
        '''Scales the density, so that the integral over the cell matches
           the given value.

        Args:

            value (float): target value of the integrated density

        '''

        total = np.sum(self._grid) * self.dv

        if total == 0.0:
            msg = 'Unable to normalize a density that integrates to zero.'
            raise DensityError(msg)

        self._grid *= value / total


    def variance(self, bounds):
        '''Zeroes all voxels whose local variance lies outside of the
           given bounds. The local variance of a voxel is evaluated over its
           periodic 3x3x3 neighbourhood.

        Args:

            bounds (tuple): lower and upper bound of the local variance,
                no gating is performed if None

        '''

        if bounds is None or self.npoints == 0:
            return

        if len(bounds) != 2 or bounds[0] > bounds[1]:
            msg = 'Invalid variance bounds, specify (lower, upper).'
            raise DensityError(msg)

        shifts = [(ix, iy, iz) for ix in (-1, 0, 1) for iy in (-1, 0, 1)
                  for iz in (-1, 0, 1)]

        tmp1 = np.zeros(self._grid.shape, dtype=float)
        tmp2 = np.zeros(self._grid.shape, dtype=float)
        for shift in shifts:
            neighbour = np.roll(self._grid, shift, axis=(0, 1, 2))
            tmp1 += neighbour
            tmp2 += neighbour**2

        mean = tmp1 / len(shifts)
        # guard against tiny negative values due to cancellation
        localvar = np.maximum(tmp2 / len(shifts) - mean**2, 0.0)

        mask = (localvar < bounds[0]) | (localvar > bounds[1])
        self._grid[mask] = 0.0


    def conv_matrix(self, size):
        '''Compresses the density by block-averaging onto size**3 cells.

        Args:

            size (int): number of blocks along each grid axis

        '''

        if size < 1:
            msg = 'Invalid compression size, positive integer expected.'
            raise DensityError(msg)

        if size > min(self._grid.shape):
            msg = 'Compression size ' + str(size) + \
                ' exceeds the density grid ' + str(self._grid.shape) + '.'
            raise DensityError(msg)

        blocks = [np.array_split(np.arange(nn), size)
                  for nn in self._grid.shape]
        starts = [[block[0] for block in axis] for axis in blocks]
        counts = [np.array([len(block) for block in axis]) for axis in blocks]

        tmp = self._grid
        for axis in range(3):
            tmp = np.add.reduceat(tmp, starts[axis], axis=axis)

        weights = counts[0][:, None, None] * counts[1][None, :, None] \
            * counts[2][None, None, :]

        self._grid = tmp / weights
        self._voxel = _voxel_vectors(self._cell, self._grid.shape)


    def downsample(self, stride):
        '''Keeps every stride-th grid point along each axis. Repeated calls
           reduce the resolution further.

        Args:

            stride (int): sampling stride

        '''

        if stride < 1:
            msg = 'Invalid sampling stride, positive integer expected.'
            raise DensityError(msg)

        if stride == 1:
            return

        self._grid = np.ascontiguousarray(
            self._grid[::stride, ::stride, ::stride])
        self._voxel = self._voxel * stride


    def cube_header(self, fid):
        '''Writes the grid axes in Gaussian cube format.

        Args:

            fid (file): open text file to write to

        '''

        for nn, step in zip(self._grid.shape, self._voxel * AA__BOHR):
            fid.write('{:5d}{:12.6f}{:12.6f}{:12.6f}\n'.format(nn, *step))


def _voxel_vectors(cell, shape):
    '''Calculates the voxel step vectors of a regular grid.'''

    voxel = np.zeros((3, 3), dtype=float)

    for ii, nn in enumerate(shape):
        if nn > 0:
            voxel[ii, :] = cell[ii, :] / nn

    return voxel


class DensityError(Exception):
    '''Exception thrown by the Density class.'''
