# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np

__all__ = [
    "knn_class_scores",
    "kernel_class_scores",
    "scores_to_proba",
    "scores_to_label",
]


def knn_class_scores(dist, y, n_classes, k):
    """
    Count the labels of the k nearest neighbors of every query.

    Parameters
    ----------
    dist : ndarray of shape (n_train, n_query)
        The distance between the training and query curves.
    y : ndarray of shape (n_train, )
        The class index of each training curve.
    n_classes : int
        The number of classes.
    k : int
        The number of neighbors.

    Returns
    -------
    ndarray of shape (n_classes, n_query)
        The number of neighbors of each class.

    Notes
    -----
    Neighbors with equal distance are ranked by their order in the training
    data.
    """
    closest = np.argsort(dist, axis=0, kind="stable")[:k]
    labels = y[closest]
    scores = np.empty((n_classes, dist.shape[1]), dtype=float)
    for i in range(n_classes):
        scores[i] = np.sum(labels == i, axis=0)
    return scores


def kernel_class_scores(weights, y, n_classes):
    """
    Sum the kernel weights of every query by the class of the training curves.

    Parameters
    ----------
    weights : ndarray of shape (n_train, n_query)
        The kernel weight of each training curve for each query.
    y : ndarray of shape (n_train, )
        The class index of each training curve.
    n_classes : int
        The number of classes.

    Returns
    -------
    ndarray of shape (n_classes, n_query)
        The summed weight of each class.
    """
    scores = np.zeros((n_classes, weights.shape[1]), dtype=float)
    np.add.at(scores, y, weights)
    return scores


def scores_to_proba(scores):
    """
    Normalize class scores to probabilities.

    If all scores of a query are zero, every class is equally probable.

    Parameters
    ----------
    scores : ndarray of shape (n_classes, n_query)
        The class scores.

    Returns
    -------
    ndarray of shape (n_query, n_classes)
        The probability of each class.
    """
    total = scores.sum(axis=0)
    proba = np.full(scores.shape, 1.0 / scores.shape[0])
    nonzero = total > 0
    proba[:, nonzero] = scores[:, nonzero] / total[nonzero]
    return proba.T


def scores_to_label(scores, classes):
    """
    Select the class with the largest score.

    Ties are resolved in favor of the first class in `classes`.

    Parameters
    ----------
    scores : ndarray of shape (n_classes, n_query)
        The class scores.
    classes : ndarray of shape (n_classes, )
        The class labels.

    Returns
    -------
    ndarray of shape (n_query, )
        The label of each query.
    """
    return np.take(classes, np.argmax(scores, axis=0))
