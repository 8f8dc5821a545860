#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Aligner
=======

.. autosummary::
    :toctree: generated/

    Dtw
"""

from typing import List, Optional, Tuple, Union

import numpy as np

from .distance import euclidean_distance
from .point import DtwPoint
from .sequence import PassType, accumulate, as_pass_type, cost_matrix, dtw_backtracking
from .util.exceptions import NotComputedError, ParameterError
from ._typing import _DistanceFunction, _FeatureSequence, _PassTypeName

__all__ = ["Dtw"]


class Dtw(object):
    """Dynamic time warping between two sequences of feature vectors.

    The aligner stores a distance function and a pass type.  Each call to
    `compute_distance` fills a fresh cost matrix, which can then be
    queried with `get_points`, `get_final_point` and `get_path` until
    the next call.

    Instances are not thread-safe: use one aligner per concurrent
    computation.

    Parameters
    ----------
    distance_function : callable
        ``distance_function(x, y) -> float``, a deterministic non-negative
        distance between two feature vectors, each
        given as one-dimensional ``float64`` `np.ndarray` rows
    pass_type : PassType or str
        Topology of allowed moves, ``"neighbors"`` or ``"diagonals"``

    See Also
    --------
    seqwarp.sequence.dtw

    Examples
    --------
    >>> aligner = seqwarp.Dtw()
    >>> aligner.compute_distance([[0], [1], [2]], [[0], [2]])
    1.0
    >>> aligner.get_path()
    [(0, 0), (1, 0), (2, 1)]
    >>> aligner.get_final_point()
    DtwPoint(i=2, j=1, local_distance=0.0, accumulated_distance=1.0)

    Use a different distance and the slope-bounded topology

    >>> aligner = seqwarp.Dtw(seqwarp.manhattan_distance, pass_type="diagonals")
    """

    def __init__(
        self,
        distance_function: _DistanceFunction = euclidean_distance,
        pass_type: Union[_PassTypeName, PassType] = PassType.NEIGHBORS,
    ):
        self._distance_function: _DistanceFunction = euclidean_distance
        self._pass_type: PassType = PassType.NEIGHBORS
        self._local: Optional[np.ndarray] = None
        self._accumulated: Optional[np.ndarray] = None
        self._steps: Optional[np.ndarray] = None

        self.configure(distance_function=distance_function, pass_type=pass_type)

    def __repr__(self) -> str:
        return "<Dtw distance_function={}, pass_type={}, filled={}>".format(
            getattr(self._distance_function, "__name__", self._distance_function),
            self._pass_type.value,
            self.is_filled,
        )

    def configure(
        self,
        distance_function: Optional[_DistanceFunction] = None,
        pass_type: Optional[Union[_PassTypeName, PassType]] = None,
    ) -> None:
        """Change the distance function and/or the pass type.

        Any previously filled matrix is discarded.

        Parameters
        ----------
        distance_function : callable or None
            New distance function. If None, the current one is kept.
        pass_type : PassType, str or None
            New pass type. If None, the current one is kept.

        Raises
        ------
        ParameterError
            If ``distance_function`` is not callable, or ``pass_type``
            does not name a supported topology
        """
        if distance_function is not None:
            if not callable(distance_function):
                raise ParameterError(
                    "distance_function={!r} must be callable".format(distance_function)
                )
            self._distance_function = distance_function

        if pass_type is not None:
            self._pass_type = as_pass_type(pass_type)

        self._clear()

    @property
    def distance_function(self) -> _DistanceFunction:
        """The distance function applied to every pair of feature vectors"""
        return self._distance_function

    @property
    def pass_type(self) -> PassType:
        """The topology of allowed moves"""
        return self._pass_type

    @property
    def is_filled(self) -> bool:
        """True once `compute_distance` has succeeded"""
        return self._accumulated is not None

    def compute_distance(self, source: _FeatureSequence, target: _FeatureSequence) -> float:
        """Compute the DTW distance between two sequences of feature vectors.

        Parameters
        ----------
        source : array-like [shape=(N, K)]
            The sequence aligned along the rows of the cost matrix
        target : array-like [shape=(M, K)]
            The sequence aligned along the columns of the cost matrix

        Returns
        -------
        distance : float
            Accumulated cost at ``(N - 1, M - 1)``, the lowest total cost
            of any alignment path

        Raises
        ------
        InvalidInputError
            If either sequence is empty or malformed, or their feature
            dimensions differ.
            The aligner is left unfilled.

        Warns
        -----
        UserWarning
            If no finite-cost alignment exists

        Notes
        -----
        Exceptions raised by the distance function propagate unchanged,
        and leave the aligner unfilled.
        """
        self._clear()

        C = cost_matrix(source, target, metric=self._distance_function)
        D, D_steps = accumulate(C, self._pass_type)

        for array in (C, D, D_steps):
            array.flags.writeable = False

        self._local, self._accumulated, self._steps = C, D, D_steps
        return float(D[-1, -1])

    def get_points(self) -> Tuple[Tuple[DtwPoint, ...], ...]:
        """Return the filled matrix as rows of `DtwPoint`.

        Returns
        -------
        points : tuple of tuples of DtwPoint
            ``points[i][j]`` is cell ``(i, j)``

        Raises
        ------
        NotComputedError
            If no alignment has been computed
        """
        local, accumulated = self.local_cost, self.accumulated_cost
        n_rows, n_cols = accumulated.shape

        return tuple(
            tuple(
                DtwPoint(i, j, float(local[i, j]), float(accumulated[i, j]))
                for j in range(n_cols)
            )
            for i in range(n_rows)
        )

    def get_final_point(self) -> DtwPoint:
        """Return the point in the last row and column of the filled matrix.

        Raises
        ------
        NotComputedError
            If no alignment has been computed
        """
        local, accumulated = self.local_cost, self.accumulated_cost
        i, j = accumulated.shape[0] - 1, accumulated.shape[1] - 1
        return DtwPoint(i, j, float(local[i, j]), float(accumulated[i, j]))

    def get_path(self) -> List[Tuple[int, int]]:
        """Backtrack the lowest-cost alignment path.

        Ties between predecessors of equal cost are resolved in the order
        given by `PassType.steps`, the same order used while filling.

        Returns
        -------
        path : list of (int, int)
            Index pairs from ``(0, 0)`` to ``(N - 1, M - 1)``

        Raises
        ------
        NotComputedError
            If no alignment has been computed
        ParameterError
            If no finite-cost path exists
        """
        self._check_filled()
        return [(int(i), int(j)) for i, j in dtw_backtracking(self._steps)]

    @property
    def local_cost(self) -> np.ndarray:
        """Read-only local distance matrix of the last alignment"""
        self._check_filled()
        return self._local

    @property
    def accumulated_cost(self) -> np.ndarray:
        """Read-only accumulated cost matrix of the last alignment"""
        self._check_filled()
        return self._accumulated

    def _clear(self) -> None:
        self._local = None
        self._accumulated = None
        self._steps = None

    def _check_filled(self) -> None:
        if not self.is_filled:
            raise NotComputedError(
                "No alignment has been computed; call compute_distance first"
            )
