#!/usr/bin/env python3
from setuptools import setup


setup(
    name='dftsystem',
    version='0.1',
    description='Training Example Assembly from DFT Outputs',
    author='T. W. van der Heide',
    url='https://github.com/vanderhe/fortnet',
    platforms='platform independent',
    package_dir={'': 'src'},
    packages=['dftsystem'],
    classifiers=[
        'Programming Language :: Python',
        'Environment :: Console',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering',
    ],
    long_description='''
Training Example Assembly from DFT Outputs
------------------------------------------
These Python classes turn the outputs of electronic structure codes (VASP,
Quantum Espresso, FHI-aims or plain text files) into labeled training
examples, i.e. an ordered set of feature vectors and a single target value.
The Sysdata class collects such examples into HDF5 datasets.
''',
    python_requires='>=3.8',
    install_requires=['numpy', 'h5py', 'ase', 'loguru', 'omegaconf'],
    extras_require={'test': ['pytest']},
)
