#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Distance functions
==================

Pairwise distances between two feature vectors.  Any of these may be
supplied as the distance function of `seqwarp.Dtw` or as the ``metric``
of `seqwarp.sequence.dtw`.

.. autosummary::
    :toctree: generated/

    euclidean_distance
    manhattan_distance
    chebyshev_distance
    minkowski_distance
"""

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike
from scipy.spatial import distance as spd

from .util.exceptions import InvalidInputError, ParameterError

__all__ = [
    "euclidean_distance",
    "manhattan_distance",
    "chebyshev_distance",
    "minkowski_distance",
]


def __as_vectors(x: ArrayLike, y: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))

    if x.ndim != 1 or y.ndim != 1:
        raise InvalidInputError(
            "Feature vectors must be one-dimensional, "
            "given x.shape={}, y.shape={}".format(x.shape, y.shape)
        )

    if x.shape != y.shape:
        raise InvalidInputError(
            "Feature vectors must have the same length, "
            "given len(x)={:d}, len(y)={:d}".format(len(x), len(y))
        )

    return x, y


def euclidean_distance(x: ArrayLike, y: ArrayLike) -> float:
    """Euclidean (L2) distance between two feature vectors.

    Parameters
    ----------
    x, y : array-like [shape=(d,)]
        Feature vectors of equal length

    Returns
    -------
    distance : float >= 0

    Raises
    ------
    InvalidInputError
        If ``x`` and ``y`` differ in length

    Examples
    --------
    >>> seqwarp.euclidean_distance([0, 0], [3, 4])
    5.0
    """
    x, y = __as_vectors(x, y)
    return float(spd.euclidean(x, y))


def manhattan_distance(x: ArrayLike, y: ArrayLike) -> float:
    """Manhattan (L1, city block) distance between two feature vectors.

    Examples
    --------
    >>> seqwarp.manhattan_distance([0, 0], [3, 4])
    7.0
    """
    x, y = __as_vectors(x, y)
    return float(spd.cityblock(x, y))


def chebyshev_distance(x: ArrayLike, y: ArrayLike) -> float:
    """Chebyshev (L-infinity) distance between two feature vectors.

    Examples
    --------
    >>> seqwarp.chebyshev_distance([0, 0], [3, 4])
    4.0
    """
    x, y = __as_vectors(x, y)
    return float(spd.chebyshev(x, y))


def minkowski_distance(x: ArrayLike, y: ArrayLike, p: float = 2) -> float:
    """Minkowski distance of order ``p`` between two feature vectors.

    ``p=1`` is the Manhattan distance, ``p=2`` the Euclidean distance.
    Use `functools.partial` to bind ``p`` when supplying this as a
    distance function.

    Parameters
    ----------
    x, y : array-like [shape=(d,)]
        Feature vectors of equal length
    p : float >= 1
        Order of the norm

    Returns
    -------
    distance : float >= 0

    Raises
    ------
    ParameterError
        If ``p < 1``, which does not define a metric
    InvalidInputError
        If ``x`` and ``y`` differ in length

    Examples
    --------
    >>> from functools import partial
    >>> dist = partial(seqwarp.minkowski_distance, p=3)
    >>> dist([0, 0], [1, 1])
    1.2599210498948732
    """
    if not p >= 1:
        raise ParameterError("p={} must be at least 1".format(p))

    x, y = __as_vectors(x, y)
    return float(spd.minkowski(x, y, p=p))
