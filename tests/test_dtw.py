#!/usr/bin/env python
# -*- encoding: utf-8 -*-

import seqwarp
import numpy as np
from scipy.spatial.distance import cdist

import pytest


def test_dtw_global(mueller_example):
    X, Y = mueller_example

    gt_D = np.array(
        [
            [1.0, 2.0, 3.0, 10.0, 16.0, 17.0],
            [2.0, 4.0, 5.0, 8.0, 12.0, 13.0],
            [3.0, 5.0, 7.0, 10.0, 12.0, 13.0],
            [9.0, 11.0, 13.0, 7.0, 8.0, 14.0],
            [10, 10.0, 11.0, 14.0, 13.0, 9.0],
        ]
    )

    mut_D, _ = seqwarp.sequence.dtw(X, Y)
    assert np.array_equal(gt_D, mut_D)

    # Check that it works without backtracking
    mut_D2 = seqwarp.sequence.dtw(X, Y, backtrack=False)
    assert np.array_equal(mut_D, mut_D2)


def test_dtw_global_callable_metric(mueller_example):
    X, Y = mueller_example

    D_named, wp_named = seqwarp.sequence.dtw(X, Y, metric="euclidean")
    D_func, wp_func = seqwarp.sequence.dtw(X, Y, metric=seqwarp.euclidean_distance)

    assert np.allclose(D_named, D_func)
    assert np.array_equal(wp_named, wp_func)


def test_dtw_global_supplied_distance_matrix(mueller_example):
    X, Y = mueller_example

    C = cdist(X, Y, metric="euclidean")

    D0, wp0 = seqwarp.sequence.dtw(X, Y)

    # Supply precomputed distance matrix and specify an invalid distance
    # metric to verify that it isn't used.
    D1, wp1 = seqwarp.sequence.dtw(C=C, metric="invalid")

    assert np.array_equal(D0, D1)
    assert np.array_equal(wp0, wp1)


def test_dtw_global_boundary():
    X = np.array([1, 2, 3, 4, 5])[:, np.newaxis]
    Y = np.array([1, 1, 1, 2, 4, 5, 6, 5, 5])[:, np.newaxis]
    gt_wp = np.array(
        [[0, 0], [0, 1], [0, 2], [1, 3], [2, 3], [3, 4], [4, 5], [4, 6], [4, 7], [4, 8]]
    )

    D, wp = seqwarp.sequence.dtw(X, Y)
    assert np.array_equal(gt_wp, wp)


def test_dtw_three_by_two():
    X = [[0], [1], [2]]
    Y = [[0], [2]]

    gt_D = np.array([[0.0, 2.0], [1.0, 1.0], [3.0, 1.0]])

    # (2, 1) ties between diagonal (1, 0) and up (1, 1): diagonal wins
    gt_wp = np.array([[0, 0], [1, 0], [2, 1]])

    D, wp = seqwarp.sequence.dtw(X, Y)
    assert np.array_equal(gt_D, D)
    assert np.array_equal(gt_wp, wp)
    assert D[-1, -1] == 1.0


@pytest.mark.parametrize(
    "pass_type, gt_D, gt_wp",
    [
        (
            "neighbors",
            [[0.0, 4.0, 5.0], [1.0, 3.0, 3.0], [3.0, 3.0, 4.0]],
            [[0, 0], [1, 1], [2, 2]],
        ),
        (
            "diagonals",
            [[0.0, 4.0, 5.0], [1.0, 3.0, 3.0], [3.0, 3.0, 2.0]],
            [[0, 0], [1, 0], [2, 2]],
        ),
    ],
)
def test_dtw_pass_types(pass_type, gt_D, gt_wp):
    X = [[1], [2], [3]]
    Y = [[1], [5], [2]]

    D, wp = seqwarp.sequence.dtw(X, Y, pass_type=pass_type)
    assert np.array_equal(np.asarray(gt_D), D)
    assert np.array_equal(np.asarray(gt_wp), wp)


def test_dtw_diagonals_skip_cells():
    X = [[1], [2], [3]]
    Y = [[1], [5], [2], [3]]

    gt_D = np.array(
        [
            [0.0, 4.0, 5.0, 7.0],
            [1.0, 3.0, 3.0, 4.0],
            [3.0, 3.0, 2.0, 3.0],
        ]
    )

    D, wp = seqwarp.sequence.dtw(X, Y, pass_type=seqwarp.PassType.DIAGONALS)
    assert np.array_equal(gt_D, D)
    assert np.array_equal(np.array([[0, 0], [1, 1], [1, 2], [2, 3]]), wp)


def test_dtw_return_steps(mueller_example):
    X, Y = mueller_example

    D1, wp1 = seqwarp.sequence.dtw(X, Y)
    D2, steps = seqwarp.sequence.dtw(X, Y, backtrack=False, return_steps=True)
    wp2 = seqwarp.sequence.dtw_backtracking(steps)

    assert np.array_equal(D1, D2)
    assert np.array_equal(wp1, wp2)
    assert steps.shape == D1.shape + (2,)
    assert np.array_equal(steps[0, 0], [-1, -1])

    D3, wp3, steps3 = seqwarp.sequence.dtw(X, Y, return_steps=True)
    assert np.array_equal(wp1, wp3)
    assert np.array_equal(steps, steps3)


def test_dtw_single_frames():
    D, wp = seqwarp.sequence.dtw([[1.0, 2.0]], [[4.0, 6.0]])
    assert D.shape == (1, 1)
    assert D[0, 0] == 5.0
    assert np.array_equal(wp, [[0, 0]])


def test_cost_matrix():
    C = seqwarp.cost_matrix([[0], [1], [2]], [[0], [2]])
    assert np.array_equal(C, [[0.0, 2.0], [1.0, 1.0], [2.0, 0.0]])


def test_cost_matrix_call_order():
    calls = []

    def metric(x, y):
        calls.append((x[0], y[0]))
        return 0.0

    seqwarp.cost_matrix([[0], [1]], [[10], [11], [12]], metric=metric)
    assert calls == [(0, 10), (0, 11), (0, 12), (1, 10), (1, 11), (1, 12)]


@pytest.mark.xfail(raises=seqwarp.ParameterError)
def test_dtw_incompatible_args_01():
    seqwarp.sequence.dtw(C=np.ones((2, 2)), X=[[1]], Y=[[1]])


@pytest.mark.xfail(raises=seqwarp.ParameterError)
def test_dtw_incompatible_args_02():
    seqwarp.sequence.dtw(C=None, X=None, Y=None)


@pytest.mark.xfail(raises=seqwarp.ParameterError)
def test_dtw_bad_pass_type():
    seqwarp.sequence.dtw([[1]], [[1]], pass_type="horizontal")


@pytest.mark.xfail(raises=seqwarp.ParameterError)
def test_dtw_bad_metric_name():
    seqwarp.sequence.dtw([[1]], [[1]], metric="not-a-metric")


@pytest.mark.xfail(raises=seqwarp.ParameterError)
def test_dtw_bad_metric_type():
    seqwarp.sequence.dtw([[1]], [[1]], metric=3)


@pytest.mark.xfail(raises=seqwarp.InvalidInputError)
def test_dtw_nan_fail():
    C = np.ones((10, 10))
    C[4, 6] = np.nan
    seqwarp.sequence.dtw(C=C)


@pytest.mark.xfail(raises=seqwarp.InvalidInputError)
def test_dtw_negative_fail():
    seqwarp.sequence.dtw([[1], [2]], [[1]], metric=lambda x, y: -1.0)


@pytest.mark.parametrize(
    "X, Y",
    [
        ([], [[1]]),
        ([[1]], []),
        ([[1], [2, 3]], [[1]]),
        ([[1, 2]], [[1]]),
        ([1, 2, 3], [[1]]),
        ([[np.nan]], [[1]]),
    ],
)
def test_dtw_invalid_input(X, Y):
    with pytest.raises(seqwarp.InvalidInputError):
        seqwarp.sequence.dtw(X, Y)


def test_dtw_global_inf():
    # Construct a cost matrix where full alignment is impossible
    C = np.zeros((4, 4), dtype=float)
    C[-1, -1] = np.inf

    with pytest.warns(UserWarning):
        with pytest.raises(seqwarp.ParameterError):
            seqwarp.sequence.dtw(C=C)

    with pytest.warns(UserWarning):
        D = seqwarp.sequence.dtw(C=C, backtrack=False)
    assert np.isinf(D[-1, -1])
    assert np.all(np.isfinite(D[:-1, :-1]))


def test_dtw_partial_inf():
    # Forbidden matches route the path around them
    C = np.zeros((3, 3), dtype=float)
    C[1, 1] = np.inf

    D, wp = seqwarp.sequence.dtw(C=C)
    assert D[-1, -1] == 0.0
    assert (1, 1) not in {tuple(p) for p in wp}


@pytest.mark.parametrize(
    "steps", [np.zeros((3, 3)), np.zeros((3, 3, 3)), np.zeros((0, 3, 2))]
)
def test_dtw_backtracking_bad_shape(steps):
    with pytest.raises(seqwarp.ParameterError):
        seqwarp.sequence.dtw_backtracking(steps)


def test_pass_type_names():
    assert seqwarp.PassType("neighbors") is seqwarp.PassType.NEIGHBORS
    assert seqwarp.PassType("Diagonals") is seqwarp.PassType.DIAGONALS
    assert np.array_equal(seqwarp.PassType.NEIGHBORS.steps, [[1, 1], [0, 1], [1, 0]])
    assert np.array_equal(seqwarp.PassType.DIAGONALS.steps, [[1, 1], [1, 2], [2, 1]])

    # steps are copies, not the internal tables
    steps = seqwarp.PassType.NEIGHBORS.steps
    steps[:] = 0
    assert np.array_equal(seqwarp.PassType.NEIGHBORS.steps, [[1, 1], [0, 1], [1, 0]])


@pytest.mark.parametrize(
    "steps",
    [
        # stalled offsets would never move towards the origin
        np.zeros((3, 3, 2), dtype=int),
        np.full((2, 4, 2), [0, 0], dtype=int),
        # mixed sign and negative offsets
        np.full((3, 3, 2), [-1, 1], dtype=int),
        np.full((3, 3, 2), [-2, -2], dtype=int),
    ],
)
def test_dtw_backtracking_bad_offsets(steps):
    with pytest.raises(seqwarp.ParameterError):
        seqwarp.sequence.dtw_backtracking(steps)


def test_dtw_backtracking_offset_out_of_bounds():
    # an offset larger than the remaining distance to the border
    steps = np.full((3, 3, 2), -1, dtype=int)
    steps[2, 2] = [5, 1]

    with pytest.raises(seqwarp.ParameterError):
        seqwarp.sequence.dtw_backtracking(steps)


def test_cost_matrix_metric_receives_rows():
    seen = []

    def metric(x, y):
        seen.append((x, y))
        return float(np.sum(np.abs(x - y)))

    seqwarp.cost_matrix([[0, 1], [2, 3]], [[0, 1]], metric=metric)

    for x, y in seen:
        assert isinstance(x, np.ndarray) and isinstance(y, np.ndarray)
        assert x.dtype == np.float64 and y.dtype == np.float64
        assert x.shape == (2,) and y.shape == (2,)
