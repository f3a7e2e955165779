#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Structure Descriptor

The Structure class wraps the atomic configuration of a datapoint and
provides the local energy correction, i.e. the referencing of total
energies to species-resolved reference energies.
'''


from collections import Counter
import numpy as np
from loguru import logger

from dftsystem.config import ConfigurationError


class Structure:
    '''Basic Structure Descriptor Class.'''


    def __init__(self, atoms=None, train='', fe=None):
        '''Initializes a Structure object.

        Args:

            atoms (ase.Atoms): atomic configuration, an empty descriptor is
                created if not provided
            train (str): optional training dataset label of the structure
            fe (dict): reference energies per species, found alongside the
                structure

        '''

        self._atoms = atoms
        self.train = train

        if fe is None:
            fe = {}
        self._fe = dict(fe)


    def __len__(self):
        return self.natoms


    @property
    def atoms(self):
        '''Defines property, providing the atomic configuration.'''

        return self._atoms


    @property
    def natoms(self):
        '''Defines property, providing the number of atoms.'''

        if self._atoms is None:
            return 0

        return len(self._atoms)


    @property
    def fe(self):
        '''Defines property, providing the structure's reference energies.

        Returns:

            fe (dict): reference energy per species

        '''

        return dict(self._fe)


    def as_vector(self):
        '''Flattens the structure into a single feature vector.

        Returns:

            vector (1darray): atomic numbers, followed by the cartesian
                coordinates of all atoms in Angstrom

        '''

        if self._atoms is None:
            return np.empty((0,), dtype=float)

        return np.concatenate(
            (np.asarray(self._atoms.get_atomic_numbers(), dtype=float),
             np.asarray(self._atoms.get_positions(), dtype=float).ravel()))


    def train_local(self, params, energy):
        '''Applies the local energy correction to a total energy.

        Args:

            params (FunctionalParams): functional parameters, providing the
                global reference energies
            energy (float): total energy to correct

        Returns:

            energy (float): total energy, referenced to the species-resolved
                reference energies of the structure's composition

        '''

        if self._atoms is None:
            logger.warning('Local energy correction requested without a '
                           'structure, energy is left unchanged.')
            return energy

        refs = params.fe
        refs.update(self._fe)

        composition = Counter(self._atoms.get_chemical_symbols())

        missing = sorted(set(composition) - set(refs))
        if missing:
            msg = 'Missing reference energies for species: ' + \
                ', '.join(missing)
            raise ConfigurationError(msg)

        correction = sum(count * refs[species]
                         for species, count in composition.items())

        return energy - correction
