#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Tests of the transform plan.
'''


import pytest

from dftsystem.config import FunctionalParams, ConfigurationError
from dftsystem.plan import build_plan, user_index, DensityStep


def test_input_kinds():
    params = FunctionalParams(['density', 'density^2', 'user12', 'fermi',
                               'random', 'structure'])

    steps, _ = build_plan(params, 'vasp')

    assert [step.kind for step in steps] == \
        ['density', 'inert', 'user', 'property', 'random', 'structure']
    assert steps[2].index == 12
    assert steps[3].name == 'fermi'


def test_density_step_options():
    params = FunctionalParams(['density'], norm_cd=True, norm_cd_val=4.0,
                              var_bounds=(0.0, 1.0), nconv=3, sample_step=2,
                              intensive=True)

    steps, _ = build_plan(params, 'qe')
    step = steps[0]

    assert isinstance(step, DensityStep)
    assert step.norm == 4.0
    assert step.var_bounds == (0.0, 1.0)
    assert step.nconv == 3
    assert step.stride == 2
    assert step.intensive


def test_density_step_disabled_options():
    params = FunctionalParams(['density'], norm_cd_val=4.0, nconv=12)

    steps, _ = build_plan(params, 'qe')

    assert steps[0].norm is None
    assert steps[0].nconv is None
    assert steps[0].var_bounds is None


def test_structure_must_be_last():
    params = FunctionalParams(['structure', 'density'])

    with pytest.raises(ConfigurationError, match='density'):
        build_plan(params, 'qe')


def test_inert_input_after_structure():
    params = FunctionalParams(['structure', 'density^2'])

    steps, _ = build_plan(params, 'qe')

    assert [step.kind for step in steps] == ['structure', 'inert']


@pytest.mark.parametrize('output, kind', [
    ('gw_gap', 'gw_gap'),
    ('energy', 'energy'),
    ('fermi', 'property'),
    ('user4', 'user'),
])
def test_target_kinds(output, kind):
    params = FunctionalParams(['random'], output=output)

    _, target = build_plan(params, 'fhiaims')

    assert target.kind == kind
    assert target.name == output


def test_user_target_index():
    params = FunctionalParams(['random'], output='user4')

    _, target = build_plan(params, 'vasp')
    _, custom = build_plan(params, 'prophet')

    assert target.index == 4
    assert custom.index is None


def test_generic_user_target_custom_reader():
    params = FunctionalParams(['random'], output='user')

    _, target = build_plan(params, 'prophet')

    assert target.kind == 'user'

    with pytest.raises(ConfigurationError):
        build_plan(params, 'vasp')


@pytest.mark.parametrize('name', ['user', 'userX', 'user-1', 'user1a'])
def test_invalid_user_index(name):
    with pytest.raises(ConfigurationError):
        user_index(name)
