import numpy as np
from numpy.testing import assert_almost_equal, assert_equal

from classifunc.neighbors._vote import (
    kernel_class_scores,
    knn_class_scores,
    scores_to_label,
    scores_to_proba,
)


def test_knn_class_scores():
    dist = np.array(
        [
            [0.0, 3.0],
            [1.0, 2.0],
            [2.0, 1.0],
            [3.0, 0.0],
        ]
    )
    y = np.array([0, 0, 1, 1])
    assert_equal(knn_class_scores(dist, y, 2, 1), [[1, 0], [0, 1]])
    assert_equal(knn_class_scores(dist, y, 2, 3), [[2, 1], [1, 2]])
    assert_equal(knn_class_scores(dist, y, 2, 4), [[2, 2], [2, 2]])


def test_knn_class_scores_ties_in_training_order():
    dist = np.array([[1.0], [1.0], [1.0]])
    assert_equal(knn_class_scores(dist, np.array([1, 0, 0]), 2, 1), [[0], [1]])
    assert_equal(knn_class_scores(dist, np.array([0, 1, 1]), 2, 1), [[1], [0]])


def test_knn_class_scores_unobserved_class():
    dist = np.array([[0.0], [1.0]])
    assert_equal(knn_class_scores(dist, np.array([2, 2]), 3, 2), [[0], [0], [2]])


def test_kernel_class_scores():
    weights = np.array(
        [
            [0.5, 0.0],
            [0.25, 1.0],
            [1.0, 0.0],
        ]
    )
    y = np.array([0, 1, 0])
    assert_almost_equal(kernel_class_scores(weights, y, 2), [[1.5, 0.0], [0.25, 1.0]])


def test_scores_to_proba():
    scores = np.array([[3.0, 0.0], [1.0, 2.0]])
    assert_almost_equal(scores_to_proba(scores), [[0.75, 0.25], [0.0, 1.0]])


def test_scores_to_proba_zero_scores_uniform():
    scores = np.array([[0.0, 1.0], [0.0, 1.0], [0.0, 2.0]])
    proba = scores_to_proba(scores)
    assert_almost_equal(proba, [[1 / 3, 1 / 3, 1 / 3], [0.25, 0.25, 0.5]])
    assert_almost_equal(proba.sum(axis=1), 1.0)


def test_scores_to_label_first_class_wins_ties():
    classes = np.array(["a", "b", "c"])
    scores = np.array([[1.0, 0.0, 2.0], [1.0, 2.0, 2.0], [0.0, 2.0, 2.0]])
    assert_equal(scores_to_label(scores, classes), ["a", "b", "a"])
