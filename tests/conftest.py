#!/usr/bin/env python
# Test configuration and shared fixtures

import os

# Disable cache
for key in ["DIR", "MMAP", "COMPRESS", "VERBOSE", "LEVEL"]:
    os.environ.pop("SEQWARP_CACHE_{:s}".format(key), None)

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(628318530)


@pytest.fixture
def mueller_example():
    # Example taken from:
    # Meinard Mueller, Fundamentals of Music Processing
    X = np.array([[1], [3], [3], [8], [1]])
    Y = np.array([[2], [0], [0], [8], [7], [2]])
    return X, Y
