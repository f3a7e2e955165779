#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Transform Plan

Resolves the functional parameters once into an ordered list of input steps
and a single target step. Every step only carries the parameters its
transform needs, so that the assembly itself never consults the full
configuration.

Pipeline constraint: a structure input locks the feature set, therefore it
has to be the last input that contributes a feature vector.
'''


from dftsystem.config import NCONV_MAX, ConfigurationError


# input names that do not fall back to a scalar DFT property
DENSITY = 'density'
DENSITY2 = 'density^2'
STRUCTURE = 'structure'
RANDOM = 'random'
USER = 'user'

# input steps that do not append a feature vector
NONAPPENDING = ('inert',)

CUSTOM_CODE = 'prophet'


class InputStep:
    '''Single entry of the transform plan.'''


    def __init__(self, kind, name, index=None):
        '''Initializes an InputStep object.

        Args:

            kind (str): one of 'density', 'inert', 'user', 'structure',
                'random' or 'property'
            name (str): configured input name, also used as file role
            index (int): index of the user property (kind 'user' only)

        '''

        self.kind = kind
        self.name = name
        self.index = index


    def __repr__(self):
        return 'InputStep({!r}, {!r})'.format(self.kind, self.name)


class DensityStep(InputStep):
    '''Density entry of the transform plan, carrying all density options.'''


    def __init__(self, norm, var_bounds, nconv, stride, intensive):
        '''Initializes a DensityStep object.

        Args:

            norm (float): normalization target or None (no normalization)
            var_bounds (tuple): variance window or None (no gating)
            nconv (int): compression size or None (no compression)
            stride (int): sampling stride of the density grid
            intensive (bool): true, if the prefactor gets divided by the
                cell volume

        '''

        super().__init__(DENSITY, DENSITY)

        self.norm = norm
        self.var_bounds = var_bounds
        self.nconv = nconv
        self.stride = stride
        self.intensive = intensive


class TargetStep:
    '''Target entry of the transform plan.'''


    def __init__(self, kind, name, index=None):
        '''Initializes a TargetStep object.

        Args:

            kind (str): one of 'gw_gap', 'user', 'energy' or 'property'
            name (str): configured output name, also used as file role
            index (int): index of the user property, None for the generic
                user property of the custom reader

        '''

        self.kind = kind
        self.name = name
        self.index = index


    def __repr__(self):
        return 'TargetStep({!r}, {!r})'.format(self.kind, self.name)


def build_plan(params, code):
    '''Resolves the functional parameters into a transform plan.

    Args:

        params (FunctionalParams): functional parameters
        code (str): backend code of the DFT reader

    Returns:

        steps (list): ordered input steps
        target (TargetStep): step resolving the training target

    '''

    steps = [_input_step(params, name) for name in params.inputs]

    locked_by = None
    for step in steps:
        if locked_by is not None and step.kind not in NONAPPENDING:
            msg = "Input '" + step.name + "' follows the structure input '" \
                + locked_by + "', which has to be the last input."
            raise ConfigurationError(msg)
        if step.kind == STRUCTURE:
            locked_by = step.name

    return steps, _target_step(params, code)


def _input_step(params, name):
    '''Creates the plan entry of a single input name.'''

    if name == DENSITY:
        norm = params.norm_cd_val if params.norm_cd else None
        nconv = params.nconv if params.nconv < NCONV_MAX else None
        return DensityStep(norm, params.var_bounds, nconv,
                           params.sample_step, params.intensive)

    if name == DENSITY2:
        return InputStep('inert', name)

    if name.startswith(USER):
        return InputStep(USER, name, index=user_index(name))

    if name == STRUCTURE:
        return InputStep(STRUCTURE, name)

    if name == RANDOM:
        return InputStep(RANDOM, name)

    return InputStep('property', name)


def _target_step(params, code):
    '''Creates the plan entry of the training target.'''

    output = params.output

    if output == 'gw_gap':
        return TargetStep('gw_gap', output)

    if output.startswith(USER):
        if code == CUSTOM_CODE:
            return TargetStep(USER, output)
        return TargetStep(USER, output, index=user_index(output))

    if output == 'energy':
        return TargetStep('energy', output)

    return TargetStep('property', output)


def user_index(name):
    '''Extracts the property index of a user input.

    Args:

        name (str): name of the form 'user<n>'

    Returns:

        index (int): property index n

    '''

    suffix = name[len(USER):]

    if not suffix.isdigit():
        msg = "Invalid user property '" + name + \
            "', expected 'user' followed by an integer index."
        raise ConfigurationError(msg)

    return int(suffix)
