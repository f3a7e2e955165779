#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Training Dataset Format

The Sysdata class collects assembled training examples and dumps them as a
contiguous HDF5 dataset.
'''


import os
import h5py
import numpy as np
from loguru import logger


class Sysdata:
    '''Basic Training Dataset Class.'''


    def __init__(self, systems):
        '''Initializes a Sysdata object.

        Args:

            systems (list): list of assembled System objects

        '''

        if not isinstance(systems, list):
            msg = 'Expected training examples as list.'
            raise SysdataError(msg)

        if len(systems) == 0:
            msg = 'Empty list of training examples provided.'
            raise SysdataError(msg)

        for isys, system in enumerate(systems):
            if system.target is None:
                msg = 'Training example ' + str(isys + 1) + \
                    ' does not provide a target.'
                raise SysdataError(msg)

        self._systems = systems
        self._nsystems = len(systems)
        self._weights = np.ones((self._nsystems,), dtype=int)


    def dump(self, fname):
        '''Dumps the training examples as a contiguous HDF5 dataset.

        Args:

            fname (str): filename of dataset file to write

        '''

        if not isinstance(fname, str):
            msg = 'Invalid dataset filename, string expected.'
            raise SysdataError(msg)

        fname = os.path.abspath(fname)
        os.makedirs(os.path.dirname(fname), exist_ok=True)

        with h5py.File(fname, 'w') as fid:
            rootgrp = fid.create_group('sysdata')

            datagrp = rootgrp.create_group('dataset')
            datagrp.attrs['ndatapoints'] = self._nsystems

            for isys, system in enumerate(self._systems):
                subroot = datagrp.create_group('datapoint{}'.format(isys + 1))
                hdf_append_weight(subroot, self._weights[isys])
                subroot.attrs['train'] = system.train
                subroot.attrs['prefactor'] = system.prefactor
                hdf_append_target(subroot, system.target)
                hdf_append_features(subroot, system.features)

        logger.info("Dumped {} training example(s) to '{}'.",
                    self._nsystems, fname)


    @property
    def weights(self):
        '''Defines property, providing the weight of each datapoint.

        Returns:

            weights (1darray): integer-valued array of datapoint weights

        '''

        return self._weights


    @weights.setter
    def weights(self, weights):
        '''Sets user-specified weighting of each datapoint.'''

        weights = np.array(weights)

        if weights.ndim != 1 or len(weights) != self._nsystems:
            msg = 'Invalid weights found, 1-dimensional list or array ' + \
                'with one entry per datapoint expected.'
            raise SysdataError(msg)

        if not issubclass(weights.dtype.type, np.integer) or any(weights < 1):
            msg = 'Invalid weight(s) found, choose positive integers.'
            raise SysdataError(msg)

        self._weights = weights


    @property
    def ndatapoints(self):
        '''Defines property, providing the number of datapoints.

        Returns:

            nsystems (int): total number of datapoints

        '''

        return self._nsystems


def hdf_append_weight(root, weight):
    '''Appends the datapoint weight to a given hdf group.

    Args:

        root (hdf group): hdf group
        weight (int): positive integer weight of current datapoint

    '''

    root.attrs['weight'] = weight


def hdf_append_target(root, target):
    '''Appends the target value to a given hdf group.

    Args:

        root (hdf group): hdf group
        target (float): target value of the datapoint

    '''

    dset = root.create_dataset('target', (1,), dtype='float')
    dset[...] = target


def hdf_append_features(root, features):
    '''Appends the ordered feature vectors to a given hdf group.

    Args:

        root (hdf group): hdf group
        features (FeatureSet): feature vectors of the datapoint

    '''

    featgrp = root.create_group('features')
    featgrp.attrs['nfeatures'] = len(features)
    featgrp.attrs['locked'] = int(features.locked)

    for ifeat, (name, vector) in enumerate(zip(features.names, features)):
        dset = featgrp.create_dataset(
            'feature{}'.format(ifeat + 1), vector.shape, dtype='float')
        dset[...] = vector
        dset.attrs['name'] = name


class SysdataError(Exception):
    '''Exception thrown by the Sysdata class.'''
