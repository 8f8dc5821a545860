#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Input validation utilities"""

import numpy as np

from .exceptions import InvalidInputError, ParameterError
from .._typing import _FeatureSequence

__all__ = ["valid_sequence", "valid_cost"]


def valid_sequence(X: _FeatureSequence, *, name: str = "X") -> np.ndarray:
    """Determine whether a variable contains a valid sequence of feature vectors.

    A valid sequence:

        - is non-empty
        - converts to a floating-point `np.ndarray` of shape ``(n, d)``,
          i.e., every feature vector has the same dimension ``d >= 1``
        - is finite everywhere

    Parameters
    ----------
    X : array-like [shape=(n, d)]
        The sequence of feature vectors to validate
    name : str
        Name of the argument, used in error messages

    Returns
    -------
    X : np.ndarray [shape=(n, d), dtype=float64]
        The validated sequence

    Raises
    ------
    InvalidInputError
        If any of the conditions specified above fails

    Examples
    --------
    >>> seqwarp.util.valid_sequence([[0.0, 1.0], [2.0, 3.0]]).shape
    (2, 2)

    >>> seqwarp.util.valid_sequence([[0.0, 1.0], [2.0]])
    Traceback (most recent call last):
    ...
    seqwarp.util.exceptions.InvalidInputError: X must be a sequence of equal-length numeric feature vectors
    """
    try:
        X = np.asarray(X, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            "{} must be a sequence of equal-length numeric "
            "feature vectors".format(name)
        ) from exc

    if X.size == 0:
        raise InvalidInputError("{} must be non-empty, shape={}".format(name, X.shape))

    if X.ndim != 2:
        raise InvalidInputError(
            "{} must have shape (n_frames, n_features), "
            "given shape={}".format(name, X.shape)
        )

    if not np.all(np.isfinite(X)):
        raise InvalidInputError("{} is not finite everywhere".format(name))

    return X


def valid_cost(C: np.ndarray) -> np.ndarray:
    """Check that a local cost matrix is two-dimensional, non-empty,
    and contains no negative or NaN entries.

    Infinite entries are permitted: they mark forbidden matches.

    Parameters
    ----------
    C : np.ndarray [shape=(n, m)]
        Local cost matrix

    Returns
    -------
    C : np.ndarray [shape=(n, m), dtype=float64]
        C-contiguous copy (or view) of the input

    Raises
    ------
    ParameterError
        If ``C`` is not a non-empty two-dimensional array
    InvalidInputError
        If ``C`` contains negative or NaN entries
    """
    C = np.ascontiguousarray(C, dtype=np.float64)

    if C.ndim != 2 or C.size == 0:
        raise ParameterError(
            "Cost matrix must be a non-empty 2-d array, "
            "given shape={}".format(C.shape)
        )

    if np.any(np.isnan(C)):
        raise InvalidInputError("Local distances must not be NaN")

    if np.any(C < 0):
        raise InvalidInputError("Local distances must be non-negative")

    return C
