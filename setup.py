#!/usr/bin/env python
from setuptools import setup

install_requires = [
      "numpy>=1.15.0",
      "scipy>=1.6.0",
      "matplotlib"
      ]

setup(name='upmssfm',
      version='0.0.1',
      description='Adaptive split-step Fourier propagation of optical pulses',
      author='upmssfm developers',
      author_email='',
      install_requires=install_requires,
      extras_require={'test': ['pytest']},
      packages=['upmssfm']
     )
