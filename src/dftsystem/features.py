#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Feature Collection

The FeatureSet class owns the named feature vectors of a single training
example (the arena) together with their order of appearance and the
target value. Once locked, no further vectors may be appended.
'''


import numpy as np


class FeatureSet:
    '''Basic Feature Collection Class.'''


    def __init__(self):
        '''Initializes an empty, unlocked FeatureSet object.'''

        self._arena = {}
        self._order = []
        self._locked = False
        self._target = None


    def __len__(self):
        return len(self._order)


    def __iter__(self):
        for name in self._order:
            yield self._arena[name]


    def __getitem__(self, ii):
        try:
            name = self._order[ii]
        except IndexError as exc:
            msg = 'Feature index ' + str(ii) + ' out of range.'
            raise FeatureSetError(msg) from exc

        return self._arena[name]


    def append(self, name, vector, replace=False):
        '''Appends a named feature vector.

        The vector is stored without copying, float arrays are kept by
        reference. A name appended more than once refers to the vector
        stored first, unless replace is set.

        Args:

            name (str): name of the feature vector
            vector (1darray): feature values
            replace (bool): true, if a stored vector of the same name
                should be replaced

        '''

        if self._locked:
            msg = "Unable to append feature '" + name + \
                "', the feature set is locked."
            raise FeatureSetError(msg)

        vector = np.asarray(vector, dtype=float)

        if vector.ndim != 1:
            msg = "Invalid feature '" + name + \
                "', 1-dimensional vector expected."
            raise FeatureSetError(msg)

        if replace or name not in self._arena:
            self._arena[name] = vector

        self._order.append(name)


    def get(self, name):
        '''Returns the feature vector stored under the given name.'''

        try:
            return self._arena[name]
        except KeyError as exc:
            msg = "No feature named '" + name + "' present."
            raise FeatureSetError(msg) from exc


    def lock(self, locked=True):
        '''Locks (or unlocks) the feature set.'''

        self._locked = bool(locked)


    @property
    def locked(self):
        '''Defines property, providing the lock status.

        Returns:

            locked (bool): true, if no further vectors may be appended

        '''

        return self._locked


    @property
    def names(self):
        '''Defines property, providing the ordered feature names.'''

        return list(self._order)


    @property
    def target(self):
        '''Defines property, providing the target value.

        Returns:

            target (float): target value or None, if not yet set

        '''

        return self._target


    @target.setter
    def target(self, target):
        '''Sets the target value, independent of the lock status.'''

        self._target = float(target)


class FeatureSetError(Exception):
    '''Exception thrown by the FeatureSet class.'''
