# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np

from ..exceptions import InvalidMetricError, MetricComputationError, ShapeMismatchError
from ..utils.validation import check_array, check_option
from ._metric import (
    BrayCurtisMetric,
    CallableMetric,
    CanberraMetric,
    ChebyshevMetric,
    CorrelationMetric,
    CosineMetric,
    DtwMetric,
    EuclideanMetric,
    GlobalMaxMetric,
    GlobalMinMetric,
    JumpMetric,
    LpMetric,
    ManhattanMetric,
    MeanMetric,
    MinkowskiMetric,
    PointsMetric,
    RelativeAreasMetric,
    ShortEuclideanMetric,
)

CUSTOM_METRIC = "custom.metric"

_METRICS = {
    "euclidean": EuclideanMetric,
    "manhattan": ManhattanMetric,
    "minkowski": MinkowskiMetric,
    "chebyshev": ChebyshevMetric,
    "canberra": CanberraMetric,
    "braycurtis": BrayCurtisMetric,
    "cosine": CosineMetric,
    "correlation": CorrelationMetric,
    "short_euclidean": ShortEuclideanMetric,
    "lp": LpMetric,
    "mean": MeanMetric,
    "rel_areas": RelativeAreasMetric,
    "jump": JumpMetric,
    "points": PointsMetric,
    "glob_max": GlobalMaxMetric,
    "glob_min": GlobalMinMetric,
    "dtw": DtwMetric,
}


def metric_choices():
    """
    List the admissible metrics.

    Returns
    -------
    list
        The names of the built-in metrics and ``"custom.metric"``.
    """
    return sorted(_METRICS.keys()) + [CUSTOM_METRIC]


def _callable_metric(f):
    def wrap(**metric_params):
        return CallableMetric(f, **metric_params)

    return wrap


def check_metric(metric, custom_metric=None):
    """
    Resolve a metric into a metric factory.

    Parameters
    ----------
    metric : str or callable
        The name of the metric, ``"custom.metric"`` or a callable.
    custom_metric : callable, optional
        The function used if ``metric="custom.metric"``.

    Returns
    -------
    callable
        A factory ``Metric(**metric_params)``.
    """
    if callable(metric):
        return _callable_metric(metric)
    elif metric == CUSTOM_METRIC:
        if not callable(custom_metric):
            raise InvalidMetricError(
                "metric='custom.metric' requires a callable custom_metric, got "
                f"{custom_metric!r}"
            )
        return _callable_metric(custom_metric)
    elif isinstance(metric, str):
        return check_option(_METRICS, metric, "metric", error=InvalidMetricError)
    else:
        raise InvalidMetricError(
            f"metric must be a str or callable, got {type(metric).__qualname__}"
        )


def _make_metric(metric, metric_params=None, custom_metric=None):
    Metric = check_metric(metric, custom_metric)
    metric_params = metric_params if metric_params is not None else {}
    try:
        return Metric(**metric_params)
    except (TypeError, ValueError) as e:
        raise InvalidMetricError(
            f"invalid metric_params {metric_params!r} for metric {metric!r}: {e}"
        ) from e


def _check_distance(dist, metric):
    invalid = ~np.isfinite(dist) | (dist < 0)
    if invalid.any():
        index = tuple(int(i) for i in np.argwhere(invalid)[0])
        raise MetricComputationError(
            f"The metric {metric.name!r} returned {dist[index]} for the pair "
            f"{index}; distances must be finite and non-negative.",
            index=index,
        )
    return dist


def _check_curves(x, name):
    x = check_array(x, ensure_2d=False, dtype=float, input_name=name)
    if x.ndim == 1:
        x = x.reshape(1, -1)
    return x


def _pairwise_distance(x, y, metric):
    if y is None:
        return _check_distance(metric.within(x), metric)

    if x.shape[1] != y.shape[1]:
        raise ShapeMismatchError(
            f"x has {x.shape[1]} timesteps, but y has {y.shape[1]} timesteps."
        )
    return _check_distance(metric.pairwise(x, y), metric)


def pairwise_distance(
    x, y=None, *, metric="euclidean", metric_params=None, custom_metric=None
):
    """
    Compute the distance between every pair of curves.

    Parameters
    ----------
    x : array-like of shape (n_timesteps, ) or (x_samples, n_timesteps)
        The first curves. Rows of the distance matrix.
    y : array-like of shape (n_timesteps, ) or (y_samples, n_timesteps), optional
        The second curves. Columns of the distance matrix. If None, compute
        the distance between every pair of curves in `x`.
    metric : str or callable, optional
        The distance metric. See :func:`metric_choices` for the admissible
        metrics. If ``"custom.metric"``, use `custom_metric`.
    metric_params : dict, optional
        Parameters to the metric.
    custom_metric : callable, optional
        A function ``f(x, y, **metric_params)`` used if
        ``metric="custom.metric"``.

    Returns
    -------
    ndarray of shape (x_samples, y_samples)
        The distance matrix. If `y` is None, the matrix is symmetric with zero
        diagonal.

    Warnings
    --------
    Passing a callable to the `metric` parameter has a significant performance
    implication.

    Examples
    --------
    >>> from classifunc.distance import pairwise_distance
    >>> pairwise_distance([[0, 0, 0], [1, 1, 1]], metric="manhattan")
    array([[0., 3.],
           [3., 0.]])
    """
    metric = _make_metric(metric, metric_params, custom_metric)
    x = _check_curves(x, "x")
    if y is not None:
        y = _check_curves(y, "y")
    return _pairwise_distance(x, y, metric)


def paired_distance(
    x, y, *, metric="euclidean", metric_params=None, custom_metric=None
):
    """
    Compute the distance between the i:th curve in `x` and the i:th in `y`.

    Parameters
    ----------
    x : array-like of shape (n_timesteps, ) or (n_samples, n_timesteps)
        The first curves.
    y : array-like of shape (n_timesteps, ) or (n_samples, n_timesteps)
        The second curves.
    metric : str or callable, optional
        The distance metric. See :func:`metric_choices` for the admissible
        metrics.
    metric_params : dict, optional
        Parameters to the metric.
    custom_metric : callable, optional
        A function ``f(x, y, **metric_params)`` used if
        ``metric="custom.metric"``.

    Returns
    -------
    ndarray of shape (n_samples, )
        The distances.
    """
    metric = _make_metric(metric, metric_params, custom_metric)
    x = _check_curves(x, "x")
    y = _check_curves(y, "y")
    if x.shape != y.shape:
        raise ShapeMismatchError(
            f"x and y must have the same shape, got {x.shape} and {y.shape}."
        )

    dist = metric.paired(x, y)
    return _check_distance(dist, metric)
