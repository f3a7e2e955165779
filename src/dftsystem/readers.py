#------------------------------------------------------------------------------#
#  DFTSYSTEM: Training Example Assembly from DFT Outputs                       #
#  Copyright (C) 2020 - 2025  T. W. van der Heide                              #
#                                                                              #
#  See the LICENSE file for terms of usage and distribution.                   #
#------------------------------------------------------------------------------#


'''
DFT Output Readers

Every reader provides the same four capabilities: reading the density,
reading the structure, extracting a scalar property and extracting a user
defined property vector. Parsing is delegated to the ASE Python package.

Supported backend codes: 'vasp', 'qe', 'fhiaims' and 'prophet' (plain text
and ASE readable files).
'''


import os
import numpy as np
import ase.io
from ase.io.cube import read_cube
from ase.calculators.vasp import VaspChargeDensity
from ase.calculators.calculator import PropertyNotImplementedError
from ase.dft.bandgap import bandgap
from loguru import logger

from dftsystem.config import ConfigurationError
from dftsystem.density import Density
from dftsystem.structure import Structure


# exceptions of the parsers that indicate an unusable file
PARSEERRORS = (OSError, ValueError, KeyError, IndexError, StopIteration,
               AttributeError, PropertyNotImplementedError)

# prefix of the info keys, carrying reference energies of a structure
FEPREFIX = 'fe_'


class DftReader:
    '''Basic DFT Output Reader Class.'''

    code = None

    # ASE formats of the (final) output and the structure file
    outformat = None
    strucformat = None


    def __init__(self):
        '''Initializes an open DftReader object.'''

        self._closed = False


    def __enter__(self):
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def close(self):
        '''Releases the reader, further requests are rejected.'''

        if not self._closed:
            logger.debug("Releasing '{}' reader.", self.code)
        self._closed = True


    @property
    def closed(self):
        '''Defines property, providing hint whether the reader is released.'''

        return self._closed


    def read_density(self, fname, stride):
        '''Reads the density and samples it with the given stride.

        Args:

            fname (str): path to the density file
            stride (int): sampling stride of the density grid

        Returns:

            density (Density): volumetric density

        '''

        fname = self._checkfile(fname, 'density')

        try:
            with open(fname, 'r') as cubefile:
                cube = read_cube(cubefile)
        except PARSEERRORS as exc:
            msg = "Error while reading density file '" + fname + "'."
            raise FetchError(msg) from exc

        # origin of the grid in Angstrom
        density = Density(grid=cube['data'],
                          cell=cube['atoms'].get_cell()[:, :],
                          origin=cube['origin'][:3])
        density.downsample(stride)

        return density


    def read_structure(self, fname):
        '''Reads the atomic configuration.

        Args:

            fname (str): path to the structure file

        Returns:

            structure (Structure): structure descriptor

        '''

        fname = self._checkfile(fname, 'structure')

        try:
            atoms = ase.io.read(fname, format=self.strucformat)
        except PARSEERRORS as exc:
            msg = "Error while reading structure file '" + fname + "'."
            raise FetchError(msg) from exc

        return structure_from_atoms(atoms)


    def get_property(self, name, fname):
        '''Extracts a scalar property from the DFT output.

        Args:

            name (str): name of the property
            fname (str): path to the output file

        Returns:

            value (float): property value

        '''

        fname = self._checkfile(fname, name)

        try:
            atoms = ase.io.read(fname, format=self.outformat, index=-1)
        except PARSEERRORS as exc:
            msg = "Error while reading output file '" + fname + "'."
            raise FetchError(msg) from exc

        return output_property(atoms, name, fname)


    def get_user_property(self, index, fname):
        '''Extracts a user defined property vector.

        Args:

            index (int): zero-based line of the user file
            fname (str): path to the user file, each line holding the
                whitespace separated values of one property

        Returns:

            values (1darray): property vector

        '''

        fname = self._checkfile(fname, 'user')

        try:
            with open(fname, 'r') as userfile:
                lines = [line.split('#')[0].split() for line in userfile]
            lines = [line for line in lines if line]
            values = np.array(lines[index], dtype=float)
        except PARSEERRORS as exc:
            msg = "Error while reading user property " + str(index) + \
                " from file '" + fname + "'."
            raise FetchError(msg) from exc

        if values.size == 0:
            msg = "Empty user property " + str(index) + \
                " in file '" + fname + "'."
            raise FetchError(msg)

        return values


    def _checkfile(self, fname, role):
        '''Checks that a requested file is registered and present.'''

        if self._closed:
            msg = "Reader '" + str(self.code) + "' already released."
            raise FetchError(msg)

        if not fname:
            msg = "No file registered for '" + role + "'."
            raise FetchError(msg)

        fname = str(fname)

        if not os.path.isfile(fname):
            msg = "File '" + fname + "' for '" + role + "' not found."
            raise FetchError(msg)

        logger.debug("Reading '{}' from '{}'.", role, fname)

        return fname


class VaspReader(DftReader):
    '''VASP reader (CHGCAR, POSCAR, OUTCAR).'''

    code = 'vasp'
    outformat = 'vasp-out'
    strucformat = 'vasp'


    def read_density(self, fname, stride):
        '''Reads a CHGCAR file and samples it with the given stride.'''

        fname = self._checkfile(fname, 'density')

        try:
            chgcar = VaspChargeDensity(fname)
            data = chgcar.chg[-1]
            atoms = chgcar.atoms[-1]
        except PARSEERRORS as exc:
            msg = "Error while reading CHGCAR file '" + fname + "'."
            raise FetchError(msg) from exc

        density = Density(grid=data, cell=atoms.get_cell()[:, :])
        density.downsample(stride)

        return density


class QeReader(DftReader):
    '''Quantum Espresso reader (pp.x cube file, pw.x output).'''

    code = 'qe'
    outformat = 'espresso-out'
    strucformat = 'espresso-out'


class FhiaimsReader(DftReader):
    '''FHI-aims reader (cube file, geometry.in, aims output).'''

    code = 'fhiaims'
    outformat = 'aims-output'
    strucformat = 'aims'


class CustomReader(DftReader):
    '''Reader for plain files (cube, ASE readable structure, key-value).'''

    code = 'prophet'


    def get_property(self, name, fname):
        '''Extracts a scalar property from a key-value file.

        Args:

            name (str): name of the property
            fname (str): path to a file with lines of the form 'name value'

        Returns:

            value (float): property value

        '''

        fname = self._checkfile(fname, name)

        try:
            with open(fname, 'r') as propfile:
                for line in propfile:
                    words = line.split('#')[0].split()
                    if len(words) >= 2 and words[0] == name:
                        return float(words[1])
        except PARSEERRORS as exc:
            msg = "Error while reading property '" + name + \
                "' from file '" + fname + "'."
            raise FetchError(msg) from exc

        msg = "Property '" + name + "' not found in file '" + fname + "'."
        raise FetchError(msg)


READERS = {
    'vasp': VaspReader,
    'qe': QeReader,
    'fhiaims': FhiaimsReader,
    'prophet': CustomReader,
}


def get_reader(code):
    '''Creates the reader of the given backend code.

    Args:

        code (str): backend code, one of 'vasp', 'qe', 'fhiaims', 'prophet'

    Returns:

        reader (DftReader): open reader instance

    '''

    try:
        reader = READERS[code]
    except (KeyError, TypeError) as exc:
        msg = "Interface to code '" + str(code) + \
            "' has not been implemented."
        raise ConfigurationError(msg) from exc

    return reader()


def structure_from_atoms(atoms):
    '''Creates a structure descriptor from an ASE atoms object.

    The info dictionary may carry a 'train' label as well as reference
    energies, stored under the keys 'fe_<species>'.

    Args:

        atoms (ase.Atoms): atomic configuration

    Returns:

        structure (Structure): structure descriptor

    '''

    train = str(atoms.info.get('train', ''))

    fe = {}
    for key, value in atoms.info.items():
        if key.startswith(FEPREFIX):
            fe[key[len(FEPREFIX):]] = float(value)

    return Structure(atoms=atoms, train=train, fe=fe)


def output_property(atoms, name, fname):
    '''Extracts a scalar property of a parsed DFT output.

    Args:

        atoms (ase.Atoms): final configuration with attached calculator
        name (str): name of the property
        fname (str): path of the parsed file, used for error messages

    Returns:

        value (float): property value

    '''

    try:
        if name == 'energy':
            value = atoms.get_potential_energy()
        elif name == 'free_energy':
            value = atoms.get_potential_energy(force_consistent=True)
        elif name == 'fermi':
            value = atoms.calc.get_fermi_level()
        elif name == 'volume':
            value = atoms.get_volume()
        elif name == 'natoms':
            value = len(atoms)
        elif name == 'band_gap':
            value = bandgap(atoms.calc, output=None)[0]
        else:
            msg = "Property '" + name + "' is not available from file '" + \
                fname + "'."
            raise FetchError(msg)
    except PARSEERRORS as exc:
        msg = "Error while extracting property '" + name + \
            "' from file '" + fname + "'."
        raise FetchError(msg) from exc

    if value is None:
        msg = "Property '" + name + "' not present in file '" + fname + "'."
        raise FetchError(msg)

    return float(value)


class FetchError(Exception):
    '''Exception thrown by a reader that fails to provide requested data.'''
