#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""A single cell of the DTW cost matrix"""

from typing import NamedTuple

__all__ = ["DtwPoint"]


class DtwPoint(NamedTuple):
    """One cell ``(i, j)`` of a filled DTW cost matrix.

    Attributes
    ----------
    i : int
        Row index, i.e., position in the source sequence
    j : int
        Column index, i.e., position in the target sequence
    local_distance : float
        Distance between source feature vector ``i`` and target feature vector ``j``
    accumulated_distance : float
        Minimal total cost of any alignment path from ``(0, 0)`` to ``(i, j)``
    """

    i: int
    j: int
    local_distance: float
    accumulated_distance: float
