#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Tests of the feature collection.
'''


import numpy as np
import pytest

from dftsystem.features import FeatureSet, FeatureSetError


def test_append_keeps_order():
    features = FeatureSet()

    features.append('fermi', [1.0])
    features.append('user2', [2.0, 3.0])

    assert len(features) == 2
    assert features.names == ['fermi', 'user2']
    np.testing.assert_allclose(features[1], [2.0, 3.0])
    assert [len(vector) for vector in features] == [1, 2]


def test_append_by_reference():
    features = FeatureSet()
    vector = np.zeros(4)

    features.append('density', vector)
    vector[2] = 5.0

    assert features.get('density') is vector
    assert features[0][2] == 5.0


def test_repeated_name_keeps_first_vector():
    features = FeatureSet()

    features.append('random', [0.1])
    features.append('random', [0.9])

    assert features.names == ['random', 'random']
    np.testing.assert_allclose(features[1], [0.1])


def test_repeated_name_replaced():
    features = FeatureSet()

    features.append('density', [0.1, 0.2])
    features.append('density', [0.3], replace=True)

    np.testing.assert_allclose(features[0], [0.3])


def test_locked_rejects_append():
    features = FeatureSet()
    features.append('fermi', [1.0])
    features.lock()

    assert features.locked

    with pytest.raises(FeatureSetError):
        features.append('random', [0.5])

    assert features.names == ['fermi']


def test_target_independent_of_lock():
    features = FeatureSet()

    assert features.target is None

    features.lock()
    features.target = -3

    assert features.target == -3.0


def test_non_vector_rejected():
    features = FeatureSet()

    with pytest.raises(FeatureSetError):
        features.append('grid', np.ones((2, 2)))


def test_invalid_access():
    features = FeatureSet()

    with pytest.raises(FeatureSetError):
        features[0]

    with pytest.raises(FeatureSetError):
        features.get('density')
