# Authors: Isak Samsten
# License: BSD 3 clause

import math
import numbers

import numpy as np
from scipy.spatial.distance import cdist
from sklearn.utils.validation import check_scalar

from ..exceptions import MetricComputationError

__all__ = [
    "Metric",
    "ScipyMetric",
    "EuclideanMetric",
    "ManhattanMetric",
    "MinkowskiMetric",
    "ChebyshevMetric",
    "CanberraMetric",
    "BrayCurtisMetric",
    "CosineMetric",
    "CorrelationMetric",
    "ShortEuclideanMetric",
    "LpMetric",
    "MeanMetric",
    "RelativeAreasMetric",
    "JumpMetric",
    "PointsMetric",
    "GlobalMaxMetric",
    "GlobalMinMetric",
    "DtwMetric",
    "CallableMetric",
]


class Metric:
    """Base class for all metrics.

    Subclasses implement ``_distance`` which computes the distance between
    curves along the last axis, broadcasting over the remaining axes.
    """

    name = None

    def pairwise(self, X, Y):
        """Distance between every row of X and every row of Y.

        Parameters
        ----------
        X : ndarray of shape (n_x, n_timesteps)
            The first curves.
        Y : ndarray of shape (n_y, n_timesteps)
            The second curves.

        Returns
        -------
        ndarray of shape (n_x, n_y)
            The distances.
        """
        dist = np.empty((X.shape[0], Y.shape[0]), dtype=float)
        for i in range(X.shape[0]):
            dist[i] = self._distance(X[i], Y)
        return dist

    def paired(self, X, Y):
        """Distance between the i:th row of X and the i:th row of Y."""
        return self._distance(X, Y)

    def within(self, X):
        """Distance between every pair of rows of X.

        The returned matrix is symmetric with a zero diagonal.
        """
        dist = self.pairwise(X, X)
        dist = (dist + dist.T) / 2
        np.fill_diagonal(dist, 0)
        return dist

    def _distance(self, x, y):
        raise NotImplementedError()


class _PairMetric(Metric):
    """Metric evaluated on a single pair of curves at a time."""

    def pairwise(self, X, Y):
        dist = np.empty((X.shape[0], Y.shape[0]), dtype=float)
        for i in range(X.shape[0]):
            for j in range(Y.shape[0]):
                dist[i, j] = self._pair_distance(X[i], Y[j], (i, j))
        return dist

    def paired(self, X, Y):
        return np.array(
            [self._pair_distance(X[i], Y[i], (i, i)) for i in range(X.shape[0])],
            dtype=float,
        )

    def within(self, X):
        n_samples = X.shape[0]
        dist = np.zeros((n_samples, n_samples), dtype=float)
        for i in range(n_samples):
            for j in range(i + 1, n_samples):
                dist[i, j] = self._pair_distance(X[i], X[j], (i, j))
                dist[j, i] = dist[i, j]
        return dist

    def _pair_distance(self, x, y, index):
        raise NotImplementedError()


class ScipyMetric(Metric):
    """Metric computed by :func:`scipy.spatial.distance.cdist`."""

    scipy_name = None

    def __init__(self, **scipy_params):
        self.scipy_params = scipy_params

    def pairwise(self, X, Y):
        dist = cdist(X, Y, metric=self.scipy_name, **self.scipy_params)
        # cdist can return small negative values due to round-off
        return np.maximum(dist, 0, out=dist)

    def paired(self, X, Y):
        return np.array(
            [
                self.pairwise(X[i : i + 1], Y[i : i + 1])[0, 0]
                for i in range(X.shape[0])
            ],
            dtype=float,
        )


class EuclideanMetric(ScipyMetric):
    name = "euclidean"
    scipy_name = "euclidean"

    def __init__(self):
        super().__init__()


class ManhattanMetric(ScipyMetric):
    name = "manhattan"
    scipy_name = "cityblock"

    def __init__(self):
        super().__init__()


class MinkowskiMetric(ScipyMetric):
    name = "minkowski"
    scipy_name = "minkowski"

    def __init__(self, p=2):
        check_scalar(p, "p", numbers.Real, min_val=1)
        super().__init__(p=p)


class ChebyshevMetric(ScipyMetric):
    name = "chebyshev"
    scipy_name = "chebyshev"

    def __init__(self):
        super().__init__()


class CanberraMetric(ScipyMetric):
    name = "canberra"
    scipy_name = "canberra"

    def __init__(self):
        super().__init__()


class BrayCurtisMetric(ScipyMetric):
    name = "braycurtis"
    scipy_name = "braycurtis"

    def __init__(self):
        super().__init__()


class _NormalizedScipyMetric(ScipyMetric):
    """Metric normalized by a quantity that vanishes for degenerate curves.

    The distance between two degenerate curves is 0 and the distance between
    a degenerate and a non-degenerate curve is 1.
    """

    def pairwise(self, X, Y):
        with np.errstate(invalid="ignore", divide="ignore"):
            dist = super().pairwise(X, Y)

        x_degenerate = self._degenerate(X)[:, np.newaxis]
        y_degenerate = self._degenerate(Y)[np.newaxis, :]
        dist[x_degenerate & y_degenerate] = 0.0
        dist[x_degenerate ^ y_degenerate] = 1.0
        return dist

    def _degenerate(self, X):
        raise NotImplementedError()


class CosineMetric(_NormalizedScipyMetric):
    """Cosine distance. Curves with zero norm are degenerate."""

    name = "cosine"
    scipy_name = "cosine"

    def __init__(self):
        super().__init__()

    def _degenerate(self, X):
        return np.all(X == 0, axis=1)


class CorrelationMetric(_NormalizedScipyMetric):
    """Correlation distance. Constant curves are degenerate."""

    name = "correlation"
    scipy_name = "correlation"

    def __init__(self):
        super().__init__()

    def _degenerate(self, X):
        return np.ptp(X, axis=1) == 0


def _check_interval(start, end, n_timesteps):
    if end is None:
        end = n_timesteps
    if not 0 <= start < end <= n_timesteps:
        raise ValueError(
            f"The interval must satisfy 0 <= start < end <= n_timesteps "
            f"({n_timesteps}), got start={start} and end={end}"
        )
    return start, end


class _IntervalMetric(Metric):
    def __init__(self, start=0, end=None):
        check_scalar(start, "start", numbers.Integral, min_val=0)
        if end is not None:
            check_scalar(end, "end", numbers.Integral, min_val=1)
        self.start = start
        self.end = end

    def _interval(self, x):
        start, end = _check_interval(self.start, self.end, x.shape[-1])
        return x[..., start:end]


class ShortEuclideanMetric(_IntervalMetric):
    """Euclidean distance over the timesteps ``start:end``."""

    name = "short_euclidean"

    def _distance(self, x, y):
        return np.sqrt(np.sum((self._interval(x) - self._interval(y)) ** 2, axis=-1))


class LpMetric(_IntervalMetric):
    """Lp-distance over the timesteps ``start:end``."""

    name = "lp"

    def __init__(self, p=2, start=0, end=None):
        check_scalar(p, "p", numbers.Real, min_val=1)
        super().__init__(start=start, end=end)
        self.p = p

    def _distance(self, x, y):
        diff = np.abs(self._interval(x) - self._interval(y))
        return np.sum(diff**self.p, axis=-1) ** (1 / self.p)


class MeanMetric(Metric):
    """Absolute difference between the mean of the curves."""

    name = "mean"

    def _distance(self, x, y):
        return np.abs(np.mean(x, axis=-1) - np.mean(y, axis=-1))


class RelativeAreasMetric(_IntervalMetric):
    """Absolute difference between the relative area over ``start:end``.

    The relative area of a curve is the area under the absolute curve over
    the timesteps ``start:end`` divided by the area over all timesteps. The
    relative area of a zero curve is undefined: the distance between two zero
    curves is 0 and the distance between a zero curve and any other curve
    is 1.
    """

    name = "rel_areas"

    def _relative_area(self, x):
        total = np.sum(np.abs(x), axis=-1)
        with np.errstate(invalid="ignore", divide="ignore"):
            return np.sum(np.abs(self._interval(x)), axis=-1) / total, total == 0

    def _distance(self, x, y):
        area_x, zero_x = self._relative_area(x)
        area_y, zero_y = self._relative_area(y)
        with np.errstate(invalid="ignore"):
            dist = np.abs(area_x - area_y)
        return np.where(zero_x & zero_y, 0.0, np.where(zero_x | zero_y, 1.0, dist))


class JumpMetric(Metric):
    """Absolute difference between the jumps of the curves at timestep ``t``.

    The jump of a curve at timestep ``t`` is ``x[t] - x[t - 1]``. If `t` is
    None, the middle timestep is used.
    """

    name = "jump"

    def __init__(self, t=None):
        if t is not None:
            check_scalar(t, "t", numbers.Integral, min_val=1)
        self.t = t

    def _distance(self, x, y):
        n_timesteps = x.shape[-1]
        t = max(n_timesteps // 2, 1) if self.t is None else self.t
        if t >= n_timesteps:
            raise ValueError(
                f"t must be smaller than n_timesteps ({n_timesteps}), got {t}"
            )

        jump_x = x[..., t] - x[..., t - 1]
        jump_y = y[..., t] - y[..., t - 1]
        return np.abs(jump_x - jump_y)


class PointsMetric(Metric):
    """Sum of absolute differences at the timesteps ``t``.

    If `t` is None, the middle timestep is used.
    """

    name = "points"

    def __init__(self, t=None):
        if t is not None:
            t = np.atleast_1d(np.asarray(t))
            if t.ndim != 1 or not np.issubdtype(t.dtype, np.integer) or t.size == 0:
                raise TypeError("t must be an int or a non-empty list of int")
            if np.any(t < 0):
                raise ValueError(f"t must be non-negative, got {t.tolist()}")
        self.t = t

    def _distance(self, x, y):
        n_timesteps = x.shape[-1]
        t = np.array([n_timesteps // 2]) if self.t is None else self.t
        if np.any(t >= n_timesteps):
            raise ValueError(
                f"t must be smaller than n_timesteps ({n_timesteps}), "
                f"got {t.tolist()}"
            )
        return np.sum(np.abs(x[..., t] - y[..., t]), axis=-1)


class GlobalMaxMetric(Metric):
    """Absolute difference between the maximum of the curves."""

    name = "glob_max"

    def _distance(self, x, y):
        return np.abs(np.max(x, axis=-1) - np.max(y, axis=-1))


class GlobalMinMetric(Metric):
    """Absolute difference between the minimum of the curves."""

    name = "glob_min"

    def _distance(self, x, y):
        return np.abs(np.min(x, axis=-1) - np.min(y, axis=-1))


def _compute_warp_size(x_size, r, *, y_size=0):
    return max(math.floor(max(x_size, y_size) * r), 1)


def _dtw_alignment(x, y, warp_size):
    x_size = x.shape[0]
    y_size = y.shape[0]
    cost = np.full((x_size, y_size), np.inf)
    for i in range(x_size):
        for j in range(max(0, i - warp_size), min(y_size, i + warp_size + 1)):
            if i == 0 and j == 0:
                prev = 0.0
            else:
                prev = min(
                    cost[i - 1, j] if i > 0 else np.inf,
                    cost[i, j - 1] if j > 0 else np.inf,
                    cost[i - 1, j - 1] if i > 0 and j > 0 else np.inf,
                )
            cost[i, j] = prev + (x[i] - y[j]) ** 2
    return cost


class DtwMetric(_PairMetric):
    """Dynamic time warping with a Sakoe-Chiba band.

    Parameters
    ----------
    r : float, optional
        The warping window in [0, 1] as a fraction of the number of timesteps.
    """

    name = "dtw"

    def __init__(self, r=1.0):
        check_scalar(r, "r", numbers.Real, min_val=0, max_val=1)
        self.r = r

    def _pair_distance(self, x, y, index):
        warp_size = _compute_warp_size(x.shape[0], self.r, y_size=y.shape[0])
        return math.sqrt(_dtw_alignment(x, y, warp_size)[-1, -1])


class CallableMetric(_PairMetric):
    """Metric computed by a user-supplied function.

    Parameters
    ----------
    func : callable
        A function ``func(x, y, **params)`` returning a non-negative float.
    **params : dict
        Additional keyword arguments passed to `func`.
    """

    name = "custom.metric"

    def __init__(self, func, **params):
        self.func = func
        self.params = params

    def _pair_distance(self, x, y, index):
        try:
            value = float(self.func(x, y, **self.params))
        except Exception as e:
            raise MetricComputationError(
                f"The custom metric failed for the pair {index}: {e}", index=index
            ) from e

        if not math.isfinite(value) or value < 0:
            raise MetricComputationError(
                f"The custom metric must return a finite non-negative value, "
                f"got {value} for the pair {index}",
                index=index,
            )
        return value
