#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Functional Parameters

The FunctionalParams class holds the user settings that decide which
physical quantities enter the network as inputs, how the electron density
gets transformed and which quantity serves as training target.
'''


import numpy as np
from omegaconf import DictConfig, OmegaConf


# compression of the density is only performed below this matrix size
NCONV_MAX = 10

DEFAULTS = {
    'inputs': [],
    'output': 'energy',
    'norm_cd': False,
    'norm_cd_val': 1.0,
    'var_bounds': None,
    'nconv': NCONV_MAX,
    'sample_step': 1,
    'intensive': False,
    'fe': {},
}


class FunctionalParams:
    '''Basic Functional Parameter Class.'''


    def __init__(self, inputs, output='energy', norm_cd=False,
                 norm_cd_val=1.0, var_bounds=None, nconv=NCONV_MAX,
                 sample_step=1, intensive=False, fe=None):
        '''Initializes a FunctionalParams object.

        Args:

            inputs (list): ordered names of the network inputs, e.g.
                'density', 'structure', 'user1', 'random' or any scalar
                property the DFT reader is able to provide
            output (str): name of the quantity to train on
            norm_cd (bool): true, if the density should be normalized
            norm_cd_val (float): value the integrated density is scaled to
            var_bounds (list): lower and upper bound of the local density
                variance, voxels outside the window get zeroed
            nconv (int): size of the compressed density matrix, no
                compression is performed for values of NCONV_MAX or larger
            sample_step (int): sampling stride of the density grid
            intensive (bool): true, if the target is a per-volume quantity
            fe (dict): reference energies per species, used to reference
                the total energy (e.g. formation energies)

        '''

        if isinstance(inputs, str) or not _isiterable(inputs):
            msg = 'Expected network inputs as list of names.'
            raise ConfigurationError(msg)

        self._inputs = [str(entry) for entry in inputs]

        if not isinstance(output, str) or not output:
            msg = 'Invalid output specification, non-empty string expected.'
            raise ConfigurationError(msg)
        self._output = output

        self._norm_cd = bool(norm_cd)
        self._norm_cd_val = _tofloat(norm_cd_val, 'norm_cd_val')

        if var_bounds is None:
            self._var_bounds = None
        else:
            bounds = list(var_bounds)
            if len(bounds) != 2:
                msg = 'Invalid variance bounds, specify (lower, upper).'
                raise ConfigurationError(msg)
            lower = _tofloat(bounds[0], 'var_bounds')
            upper = _tofloat(bounds[1], 'var_bounds')
            if lower > upper:
                msg = 'Invalid variance bounds, lower exceeds upper bound.'
                raise ConfigurationError(msg)
            self._var_bounds = (lower, upper)

        self._nconv = _topositiveint(nconv, 'nconv')
        self._sample_step = _topositiveint(sample_step, 'sample_step')
        self._intensive = bool(intensive)

        if fe is None:
            fe = {}
        if not isinstance(fe, dict):
            msg = 'Expected reference energies as mapping of species.'
            raise ConfigurationError(msg)
        self._fe = {str(species): _tofloat(energy, 'fe')
                    for species, energy in fe.items()}


    @classmethod
    def from_config(cls, cfg):
        '''Creates a FunctionalParams object from a mapping.

        Args:

            cfg (dict or DictConfig): configuration, unknown keys are rejected

        Returns:

            params (FunctionalParams): resolved functional parameters

        '''

        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)

        if not isinstance(cfg, dict):
            msg = 'Invalid configuration, mapping expected.'
            raise ConfigurationError(msg)

        unknown = sorted(set(cfg) - set(DEFAULTS))
        if unknown:
            msg = 'Unrecognized configuration key(s): ' + ', '.join(unknown)
            raise ConfigurationError(msg)

        if 'inputs' not in cfg:
            msg = 'Configuration lacks the list of network inputs.'
            raise ConfigurationError(msg)

        settings = dict(DEFAULTS)
        settings.update(cfg)

        return cls(**settings)


    @property
    def ninputs(self):
        '''Defines property, providing the number of network inputs.

        Returns:

            ninputs (int): number of configured inputs

        '''

        return len(self._inputs)


    @property
    def inputs(self):
        '''Defines property, providing the ordered input names.

        Returns:

            inputs (list): names of the configured inputs

        '''

        return list(self._inputs)


    @property
    def output(self):
        '''Defines property, providing the name of the target quantity.'''

        return self._output


    @property
    def norm_cd(self):
        '''Defines property, providing hint whether to normalize the density.'''

        return self._norm_cd


    @property
    def norm_cd_val(self):
        '''Defines property, providing the density normalization value.'''

        return self._norm_cd_val


    @property
    def var_bounds(self):
        '''Defines property, providing the local variance window.

        Returns:

            var_bounds (tuple): lower and upper bound or None (no gating)

        '''

        return self._var_bounds


    @property
    def nconv(self):
        '''Defines property, providing the size of the compressed density.'''

        return self._nconv


    @property
    def sample_step(self):
        '''Defines property, providing the density sampling stride.'''

        return self._sample_step


    @property
    def intensive(self):
        '''Defines property, providing hint whether the output is intensive.'''

        return self._intensive


    @property
    def fe(self):
        '''Defines property, providing the global reference energies.

        Returns:

            fe (dict): reference energy per species

        '''

        return dict(self._fe)


def load_config(fname):
    '''Reads functional parameters from a YAML file.

    Args:

        fname (str): path to the YAML configuration file

    Returns:

        params (FunctionalParams): resolved functional parameters

    '''

    try:
        cfg = OmegaConf.load(fname)
    except OSError as exc:
        msg = "Error while reading configuration file '" + str(fname) + "'."
        raise ConfigurationError(msg) from exc

    return FunctionalParams.from_config(cfg)


def _isiterable(obj):
    '''Checks whether an object can be iterated over.'''

    try:
        iter(obj)
    except TypeError:
        return False

    return True


def _tofloat(value, name):
    '''Converts a configuration value to float.'''

    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        msg = "Invalid value for '" + name + "', number expected."
        raise ConfigurationError(msg) from exc


def _topositiveint(value, name):
    '''Converts a configuration value to a positive integer.'''

    number = _tofloat(value, name)

    if isinstance(value, bool) or not np.isfinite(number) \
       or int(number) != value or value < 1:
        msg = "Invalid value for '" + name + "', positive integer expected."
        raise ConfigurationError(msg)

    return int(value)


class ConfigurationError(Exception):
    '''Exception thrown by an invalid configuration or backend selection.'''
