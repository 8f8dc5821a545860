#!/usr/bin/env python
# -*- encoding: utf-8 -*-
"""
Sequential alignment
====================

Dynamic time warping
--------------------
.. autosummary::
    :toctree: generated/

    PassType
    cost_matrix
    dtw
    dtw_backtracking
"""

import enum
import warnings
from typing import Optional, Tuple, Union

import numpy as np
from numba import jit
from scipy.spatial.distance import cdist

from ._cache import cache
from .util.exceptions import InvalidInputError, ParameterError
from .util.utils import valid_sequence, valid_cost
from ._typing import _FeatureSequence, _MetricSpec, _PassTypeName

__all__ = ["PassType", "cost_matrix", "dtw", "dtw_backtracking"]


class PassType(enum.Enum):
    """Topology of the moves allowed between cells of the cost matrix.

    Each member carries its predecessor offsets ``(di, dj)`` in tie-break
    order: when several predecessors share the minimal cumulative cost,
    the one listed first is used.

    NEIGHBORS
        The classical recurrence: diagonal ``(1, 1)``, left ``(0, 1)``,
        up ``(1, 0)``.

    DIAGONALS
        Slope-bounded moves: diagonal ``(1, 1)``, and the skips ``(1, 2)``
        and ``(2, 1)``.  Cells in the first two rows or columns cannot
        reach back two steps, and use the NEIGHBORS moves instead.

    Strings are accepted case-insensitively:

    >>> seqwarp.PassType("Diagonals")
    <PassType.DIAGONALS: 'diagonals'>
    """

    NEIGHBORS = "neighbors"
    DIAGONALS = "diagonals"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None

    @property
    def steps(self) -> np.ndarray:
        """Predecessor offsets, shape ``(n_steps, 2)``, in tie-break order."""
        return _STEPS[self].copy()

    @property
    def fallback_steps(self) -> np.ndarray:
        """Offsets used where ``steps`` would reach outside the matrix."""
        return _STEPS[PassType.NEIGHBORS].copy()


_STEPS = {
    PassType.NEIGHBORS: np.array([[1, 1], [0, 1], [1, 0]], dtype=np.intp),
    PassType.DIAGONALS: np.array([[1, 1], [1, 2], [2, 1]], dtype=np.intp),
}


def as_pass_type(pass_type: Union[_PassTypeName, PassType]) -> PassType:
    """Coerce a pass type name into a `PassType`.

    Raises
    ------
    ParameterError
        If ``pass_type`` does not name a supported topology
    """
    try:
        return PassType(pass_type)
    except ValueError as exc:
        raise ParameterError(
            "Unsupported pass_type={!r}, must be one of {}".format(
                pass_type, [member.value for member in PassType]
            )
        ) from exc


def cost_matrix(
    X: _FeatureSequence, Y: _FeatureSequence, *, metric: _MetricSpec = "euclidean"
) -> np.ndarray:
    """Compute the local cost matrix between two sequences of feature vectors.

    Parameters
    ----------
    X : array-like [shape=(N, K)]
        Sequence of ``N`` feature vectors of dimension ``K``
    Y : array-like [shape=(M, K)]
        Sequence of ``M`` feature vectors of dimension ``K``
    metric : callable or str
        Either a function ``metric(x, y) -> float`` called once for every
        pair ``(X[i], Y[j])`` in row-major order, or the name of a metric
        understood by `scipy.spatial.distance.cdist`.

        A callable receives each feature vector as a one-dimensional
        ``float64`` `np.ndarray` (a row of ``np.asarray(X, dtype=float)``),
        not the caller's original element.

        Exceptions raised by a callable metric propagate unchanged.

    Returns
    -------
    C : np.ndarray [shape=(N, M)]
        ``C[i, j]`` is the distance between ``X[i]`` and ``Y[j]``

    Raises
    ------
    InvalidInputError
        If either sequence is empty or malformed, if the feature
        dimensions of ``X`` and ``Y`` differ, or if the metric produced
        negative or NaN distances
    ParameterError
        If ``metric`` is neither callable nor a known `cdist` metric

    Examples
    --------
    >>> seqwarp.cost_matrix([[0], [1], [2]], [[0], [2]])
    array([[0., 2.],
           [1., 1.],
           [2., 0.]])
    """
    X = valid_sequence(X, name="X")
    Y = valid_sequence(Y, name="Y")

    if X.shape[1] != Y.shape[1]:
        raise InvalidInputError(
            "Feature dimensions must match, "
            "given X.shape={}, Y.shape={}".format(X.shape, Y.shape)
        )

    if isinstance(metric, str):
        try:
            C = cdist(X, Y, metric=metric)
        except ValueError as exc:
            raise ParameterError(
                "scipy.spatial.distance.cdist returned an error "
                "for metric={!r}".format(metric)
            ) from exc

    elif callable(metric):
        C = np.empty((X.shape[0], Y.shape[0]), dtype=np.float64)
        for i, x_i in enumerate(X):
            for j, y_j in enumerate(Y):
                C[i, j] = metric(x_i, y_j)

    else:
        raise ParameterError(
            "metric={!r} must be callable or a metric name".format(metric)
        )

    return valid_cost(C)


def accumulate(
    C: np.ndarray, pass_type: Union[_PassTypeName, PassType] = PassType.NEIGHBORS
) -> Tuple[np.ndarray, np.ndarray]:
    """Fill the accumulated cost matrix for a local cost matrix.

    Parameters
    ----------
    C : np.ndarray [shape=(N, M)]
        Local cost matrix, as produced by `cost_matrix`
    pass_type : PassType or str
        Topology of allowed moves

    Returns
    -------
    D : np.ndarray [shape=(N, M)]
        Accumulated cost matrix.  ``D[-1, -1]`` is the total alignment cost.
    steps : np.ndarray [shape=(N, M, 2), dtype=int]
        ``steps[i, j]`` is the offset ``(di, dj)`` to the predecessor that
        realises ``D[i, j]``; ``(-1, -1)`` at the origin and wherever no
        predecessor has finite cost.

    Warns
    -----
    UserWarning
        If the total alignment cost is infinite
    """
    pass_type = as_pass_type(pass_type)
    C = valid_cost(C)

    step_sizes = pass_type.steps
    fallback = pass_type.fallback_steps
    reach_0, reach_1 = step_sizes.max(axis=0)

    # initialize whole matrix with infinity values
    D = np.full(C.shape, np.inf, dtype=np.float64)

    # initialize step matrix with -1
    D_steps = np.full(C.shape + (2,), -1, dtype=np.intp)

    D, D_steps = __dtw_calc_accu_cost(C, D, D_steps, step_sizes, fallback, reach_0, reach_1)

    if not np.isfinite(D[-1, -1]):
        warnings.warn(
            "No finite-cost alignment exists between the two sequences; "
            "total cost is {}".format(D[-1, -1]),
            category=UserWarning,
            stacklevel=3,
        )

    return D, D_steps


@cache(level=20)
def dtw(
    X: Optional[_FeatureSequence] = None,
    Y: Optional[_FeatureSequence] = None,
    *,
    C: Optional[np.ndarray] = None,
    metric: _MetricSpec = "euclidean",
    pass_type: Union[_PassTypeName, PassType] = PassType.NEIGHBORS,
    backtrack: bool = True,
    return_steps: bool = False,
) -> Union[np.ndarray, Tuple[np.ndarray, ...]]:
    """Dynamic time warping (DTW).

    This function fills the accumulated cost matrix of two sequences of
    feature vectors and backtracks the lowest-cost warping path.
    No length normalization or band constraint is applied: the full
    ``N x M`` matrix is computed.

    Parameters
    ----------
    X : array-like [shape=(N, K)]
        Sequence of feature vectors
    Y : array-like [shape=(M, K)]
        Sequence of feature vectors
    C : np.ndarray [shape=(N, M)]
        Precomputed local cost matrix. If supplied, X and Y must not be
        supplied and ``metric`` will be ignored.
    metric : callable or str
        Distance between two feature vectors, see `cost_matrix`.
    pass_type : PassType or str
        Topology of allowed moves, ``"neighbors"`` or ``"diagonals"``.
    backtrack : bool
        Enable backtracking of the warping path.
    return_steps : bool
        If True, also return the step array for use with `dtw_backtracking`.

    Returns
    -------
    D : np.ndarray [shape=(N, M)]
        Accumulated cost matrix.  ``D[N - 1, M - 1]`` is the total alignment cost.
    wp : np.ndarray [shape=(L, 2)]
        Warping path with index pairs, from ``(0, 0)`` to ``(N - 1, M - 1)``.
        Only returned when ``backtrack`` is True.
    steps : np.ndarray [shape=(N, M, 2)]
        Predecessor offsets. Only returned when ``return_steps`` is True.

    Raises
    ------
    ParameterError
        If an incompatible combination of X, Y, and C is supplied,
        or if backtracking finds no finite-cost path.
    InvalidInputError
        If the sequences are empty or their feature dimensions differ.

    Warns
    -----
    UserWarning
        If the total alignment cost is infinite.

    See Also
    --------
    seqwarp.Dtw

    Examples
    --------
    >>> X = [[0], [1], [2]]
    >>> Y = [[0], [2]]
    >>> D, wp = seqwarp.sequence.dtw(X, Y)
    >>> D
    array([[0., 2.],
           [1., 1.],
           [3., 1.]])
    >>> wp
    array([[0, 0],
           [1, 0],
           [2, 1]])
    """
    if C is None and (X is None or Y is None):
        raise ParameterError("If C is not supplied, both X and Y must be supplied")
    if C is not None and (X is not None or Y is not None):
        raise ParameterError("If C is supplied, both X and Y must not be supplied")

    if C is None:
        C = cost_matrix(X, Y, metric=metric)

    D, D_steps = accumulate(C, pass_type)

    return_values = [D]

    if backtrack:
        return_values.append(dtw_backtracking(D_steps))

    if return_steps:
        return_values.append(D_steps)

    if len(return_values) > 1:
        return tuple(return_values)
    else:
        return return_values[0]


@jit(nopython=True, cache=False)  # type: ignore
def __dtw_calc_accu_cost(
    C, D, D_steps, step_sizes, fallback, reach_0, reach_1
):  # pragma: no cover
    """Calculate the accumulated cost matrix D.

    Use dynamic programming to calculate the accumulated costs.

    Parameters
    ----------
    C : np.ndarray [shape=(N, M)]
        pre-computed cost matrix
    D : np.ndarray [shape=(N, M)]
        accumulated cost matrix, initialized to infinity
    D_steps : np.ndarray [shape=(N, M, 2)]
        predecessor offsets used for calculating D, initialized to -1
    step_sizes : np.ndarray [shape=[n, 2]]
        allowed predecessor offsets, in tie-break order
    fallback : np.ndarray [shape=[k, 2]]
        offsets used for cells closer to the border than ``reach_0, reach_1``
    reach_0, reach_1 : int
        maximum offset in ``step_sizes`` in dim 0 and dim 1

    Returns
    -------
    D : np.ndarray [shape=(N, M)]
    D_steps : np.ndarray [shape=(N, M, 2)]
    """
    D[0, 0] = C[0, 0]

    for cur_n in range(C.shape[0]):
        for cur_m in range(C.shape[1]):
            if cur_n == 0 and cur_m == 0:
                continue

            if cur_n < reach_0 or cur_m < reach_1:
                cur_steps = fallback
            else:
                cur_steps = step_sizes

            for cur_step_idx in range(cur_steps.shape[0]):
                prev_n = cur_n - cur_steps[cur_step_idx, 0]
                prev_m = cur_m - cur_steps[cur_step_idx, 1]
                if prev_n < 0 or prev_m < 0:
                    continue

                cur_cost = D[prev_n, prev_m] + C[cur_n, cur_m]

                # strict comparison: earlier steps win ties
                if cur_cost < D[cur_n, cur_m]:
                    D[cur_n, cur_m] = cur_cost
                    D_steps[cur_n, cur_m, 0] = cur_steps[cur_step_idx, 0]
                    D_steps[cur_n, cur_m, 1] = cur_steps[cur_step_idx, 1]

    return D, D_steps


@jit(nopython=True, cache=False)  # type: ignore
def __dtw_backtracking(D_steps):  # pragma: no cover
    """Backtrack optimal warping path.

    Uses the saved predecessor offsets from the cost accumulation
    step to backtrack the index pairs of an optimal warping path,
    from the last cell towards the origin.  Stops early if it hits a
    cell with no recorded predecessor.

    Parameters
    ----------
    D_steps : np.ndarray [shape=(N, M, 2)]
        Saved predecessor offsets

    Returns
    -------
    wp : list [shape=(L,)]
        Warping path with index pairs, in reverse order.
    """
    wp = []
    cur_n = D_steps.shape[0] - 1
    cur_m = D_steps.shape[1] - 1
    wp.append((cur_n, cur_m))

    while cur_n > 0 or cur_m > 0:
        step_n = D_steps[cur_n, cur_m, 0]
        step_m = D_steps[cur_n, cur_m, 1]
        # no recorded predecessor, or an offset that would stall or leave the matrix
        if step_n <= 0 and step_m <= 0:
            break
        if step_n > cur_n or step_m > cur_m:
            break

        cur_n = cur_n - step_n
        cur_m = cur_m - step_m
        wp.append((cur_n, cur_m))

    return wp


def dtw_backtracking(steps: np.ndarray) -> np.ndarray:
    """Backtrack a warping path.

    Uses the saved predecessor offsets from the cost accumulation
    step to backtrack the index pairs of an optimal warping path.

    Parameters
    ----------
    steps : np.ndarray [shape=(N, M, 2)]
        Step matrix, as returned by `dtw` with ``return_steps=True``

    Returns
    -------
    wp : np.ndarray [shape=(L, 2)]
        Warping path with index pairs, starting at ``(0, 0)``
        and ending at ``(N - 1, M - 1)``.

    Raises
    ------
    ParameterError
        If ``steps`` is malformed, or if no finite-cost path connects
        the last cell to the origin

    See Also
    --------
    dtw

    Examples
    --------
    >>> D, steps = seqwarp.sequence.dtw([[0], [1], [2]], [[0], [2]],
    ...                                 backtrack=False, return_steps=True)
    >>> seqwarp.sequence.dtw_backtracking(steps)
    array([[0, 0],
           [1, 0],
           [2, 1]])
    """
    steps = np.asarray(steps)
    if steps.ndim != 3 or steps.shape[-1] != 2 or steps.size == 0:
        raise ParameterError(
            "steps must have shape (N, M, 2), given shape={}".format(steps.shape)
        )

    unset = np.all(steps == -1, axis=-1)
    forward = np.all(steps >= 0, axis=-1) & (steps.sum(axis=-1) >= 1)
    if not np.all(unset | forward):
        bad = tuple(np.argwhere(~(unset | forward))[0])
        raise ParameterError(
            "steps must hold (-1, -1) or a non-negative offset (di, dj) "
            "with di + dj >= 1; invalid entry at {}".format(bad)
        )

    wp = __dtw_backtracking(np.ascontiguousarray(steps, dtype=np.intp))
    wp = np.asarray(wp, dtype=int).reshape((-1, 2))[::-1]

    if wp[0, 0] != 0 or wp[0, 1] != 0:
        raise ParameterError(
            "No finite-cost warping path reaches (0, 0); "
            "backtracking stopped at {}".format(tuple(wp[0]))
        )

    return np.ascontiguousarray(wp)
