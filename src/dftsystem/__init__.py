#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
Training example assembly from the outputs of electronic structure codes.
'''


from dftsystem.config import FunctionalParams, ConfigurationError, load_config
from dftsystem.density import Density, DensityError
from dftsystem.features import FeatureSet, FeatureSetError
from dftsystem.readers import get_reader, FetchError
from dftsystem.structure import Structure
from dftsystem.system import System
from dftsystem.sysdata import Sysdata, SysdataError
