#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Training Example Assembly

The System class turns the outputs of a single DFT calculation into one
labeled training example: an ordered set of feature vectors and a target.
'''


import numpy as np
from loguru import logger

from dftsystem.config import ConfigurationError
from dftsystem.cube import write_cube
from dftsystem.density import Density
from dftsystem.features import FeatureSet
from dftsystem.plan import build_plan
from dftsystem.readers import get_reader
from dftsystem.structure import Structure


DEFAULT_TRAIN = 'train'
DEFAULT_USER_TARGET = 'user'


class System:
    '''Basic Training Example Class.'''


    def __init__(self, files, params):
        '''Initializes a System object by assembling all features and the
           target. Construction either succeeds completely or raises.

        Args:

            files (dict): mapping of file roles to paths, the 'code' entry
                selects the DFT reader, an optional 'train' entry sets the
                default training dataset label, the custom reader takes
                its generic user target from the 'user_target' entry
                (defaults to the file 'user')
            params (FunctionalParams): functional parameters

        '''

        if 'code' not in files:
            msg = "No backend code specified, 'code' file role required."
            raise ConfigurationError(msg)

        self._code = files['code']
        self.train = files.get('train', DEFAULT_TRAIN)
        self.prefactor = 1.0

        self.density = Density()
        self.structure = Structure()
        self.features = FeatureSet()

        self._outputs = []

        steps, target = build_plan(params, self._code)

        with get_reader(self._code) as reader:
            for step in steps:
                logger.debug("Processing input '{}' ({}).", step.name,
                             step.kind)
                self._process(step, reader, files)
            self.features.target = self._resolve_target(
                target, reader, files, params)

        logger.info("Assembled {} feature vector(s) with target {} ({}).",
                    len(self.features), self.features.target, self.train)


    def _process(self, step, reader, files):
        '''Applies a single input step of the transform plan.'''

        if step.kind == 'density':
            if self.density.npoints == 0:
                self.density = reader.read_density(files.get('density'),
                                                   step.stride)
            if step.norm is not None:
                self.density.normalize(step.norm)
            self.density.variance(step.var_bounds)
            if step.nconv is not None:
                self.density.conv_matrix(step.nconv)
            # the density gets sampled at read-in as well
            self.density.downsample(step.stride)
            self.features.append(step.name, self.density.values,
                                 replace=True)
            self.prefactor *= self.density.dv
            if step.intensive:
                self.prefactor /= self.density.volume
            if self.density.train:
                self.train = self.density.train

        elif step.kind == 'inert':
            # density^2 is recognized, but not implemented
            pass

        elif step.kind == 'user':
            self.features.append(
                step.name,
                reader.get_user_property(step.index, files.get('user')))

        elif step.kind == 'structure':
            self.structure = reader.read_structure(files.get(step.name))
            if self.structure.train:
                self.train = self.structure.train
            self.features.append(step.name, self.structure.as_vector())
            self.features.lock()

        elif step.kind == 'random':
            self.features.append(step.name, np.random.random_sample((1,)))

        else:
            value = reader.get_property(step.name, files.get(step.name))
            self.features.append(step.name, np.array([value], dtype=float))


    def _resolve_target(self, target, reader, files, params):
        '''Evaluates the target step of the transform plan.'''

        if target.kind == 'gw_gap':
            return reader.get_property('gw_gap', files.get('gw_gap'))

        if target.kind == 'user':
            if target.index is None:
                # generic user target of the custom reader, kept apart from
                # the user property vectors
                return reader.get_property(
                    'user', files.get('user_target', DEFAULT_USER_TARGET))
            return reader.get_user_property(
                target.index, files.get('user'))[0]

        if target.kind == 'energy':
            energy = reader.get_property('energy', files.get('energy'))
            if params.fe or self.structure.fe:
                energy = self.structure.train_local(params, energy)
            return energy

        return reader.get_property(target.name, files.get(target.name))


    @property
    def code(self):
        '''Defines property, providing the backend code of the reader.'''

        return self._code


    @property
    def target(self):
        '''Defines property, providing the target value.'''

        return self.features.target


    @property
    def outputs(self):
        '''Defines property, providing the stored network outputs.'''

        return list(self._outputs)


    def store_output(self, value):
        '''Stores a single network output for later visualization.

        Args:

            value (float): network output

        '''

        self._outputs.append(float(value))


    def write_cube(self, fname):
        '''Writes the stored outputs and the density in cube format.

        Args:

            fname (str): basename of the '.out.cube' and '.in.cube' files

        Returns:

            fnames (tuple): paths of the output and the input cube file

        '''

        return write_cube(fname, self.density, self._outputs)
