# Authors: Isak Samsten
# License: BSD 3 clause

import numbers
import warnings

import numpy as np
from scipy.interpolate import CubicSpline, make_interp_spline
from sklearn.base import TransformerMixin
from sklearn.utils._param_validation import Interval, StrOptions
from sklearn.utils.validation import check_is_fitted

from ..base import BaseEstimator
from ..exceptions import MissingValueWarning, UnevenGridWarning
from ..utils.validation import check_array, check_grid, is_evenly_spaced

__all__ = [
    "fill_missing",
    "respace",
    "difference_derivative",
    "basis_derivative",
    "FunctionalTransform",
]


def fill_missing(X, grid):
    """
    Fill missing values using a cubic spline through the observed values.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_timesteps)
        The curves, with missing values encoded as `np.nan`.
    grid : array-like of shape (n_timesteps, )
        The grid of the curves.

    Returns
    -------
    ndarray of shape (n_samples, n_timesteps)
        The curves without missing values.
    """
    X = check_array(X, allow_nan=True, dtype=float)
    grid = check_grid(grid, X.shape[1])
    filled = X.copy()
    for i in np.nonzero(np.isnan(X).any(axis=1))[0]:
        valid = np.isfinite(X[i])
        if valid.sum() < 2:
            raise ValueError(
                f"Unable to fill the missing values of sample {i}; at least two "
                "observed values are required."
            )
        filled[i] = CubicSpline(grid[valid], X[i, valid])(grid)

    return filled


def respace(X, grid):
    """
    Respace the curves onto an evenly spaced grid.

    Each curve is interpolated using a cubic spline and evaluated at
    ``n_timesteps`` evenly spaced points between the first and last grid point.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_timesteps)
        The curves.
    grid : array-like of shape (n_timesteps, )
        The grid of the curves.

    Returns
    -------
    ndarray of shape (n_samples, n_timesteps)
        The curves evaluated on the evenly spaced grid.
    """
    X = check_array(X, dtype=float)
    grid = check_grid(grid, X.shape[1])
    if X.shape[1] < 2:
        return X.copy()

    even_grid = np.linspace(grid[0], grid[-1], grid.shape[0])
    return CubicSpline(grid, X, axis=1)(even_grid)


def difference_derivative(X, n=1):
    """
    Compute the n-th order successive differences of the curves.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_timesteps)
        The curves.
    n : int, optional
        The number of times values are differenced.

    Returns
    -------
    ndarray of shape (n_samples, n_timesteps - n)
        The differenced curves.
    """
    X = check_array(X, dtype=float, ensure_min_timesteps=n + 1)
    return np.diff(X, n=n, axis=-1)


def basis_derivative(X, grid, n=1):
    """
    Compute the n-th derivative of the curves from a B-spline representation.

    An interpolating B-spline of degree ``max(3, n + 1)`` (bounded by
    ``n_timesteps - 1``) is fitted to every curve and its n-th derivative is
    evaluated on the grid.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_timesteps)
        The curves.
    grid : array-like of shape (n_timesteps, )
        The grid of the curves.
    n : int, optional
        The order of the derivative.

    Returns
    -------
    ndarray of shape (n_samples, n_timesteps)
        The derivative of the curves evaluated on the grid.
    """
    X = check_array(X, dtype=float, ensure_min_timesteps=n + 1)
    grid = check_grid(grid, X.shape[1])
    if n == 0:
        return X.copy()

    k = min(max(3, n + 1), X.shape[1] - 1)
    spline = make_interp_spline(grid, X, k=k, axis=1)
    return spline.derivative(n)(grid)


class FunctionalTransform(TransformerMixin, BaseEstimator):
    """
    Prepare curves for distance computations.

    The transformation fills missing values, respaces curves sampled on an
    uneven grid and, optionally, computes a derivative of the curves. The
    transformation is fit once on the training curves and then applied
    identically to any new curves sampled on the same grid.

    Parameters
    ----------
    n_derivative : int, optional
        The order of the derivative. If 0, no derivative is computed.
    derivative_method : {"difference", "basis"}, optional
        The method used to compute the derivative.

        - if "difference", compute successive differences. The resulting
          curves have ``n_timesteps - n_derivative`` timesteps, each placed at
          the mean of the grid points it is computed from.
        - if "basis", differentiate an interpolating B-spline. The resulting
          curves have ``n_timesteps`` timesteps on the same grid.
    derived : bool, optional
        If True, the curves are already derivatives and no derivative is
        computed regardless of `n_derivative`.

    Attributes
    ----------
    grid_ : ndarray of shape (n_timesteps, )
        The grid of the input curves.
    evenly_spaced_ : bool
        If the grid of the input curves is evenly spaced.
    grid_out_ : ndarray of shape (n_timesteps_out, )
        The grid of the transformed curves.

    Examples
    --------
    >>> import numpy as np
    >>> from classifunc.transform import FunctionalTransform
    >>> X = np.arange(20, dtype=float).reshape(2, 10) ** 2
    >>> FunctionalTransform(n_derivative=1).fit_transform(X).shape
    (2, 9)
    """

    _parameter_constraints: dict = {
        "n_derivative": [Interval(numbers.Integral, 0, None, closed="left")],
        "derivative_method": [StrOptions({"difference", "basis"})],
        "derived": ["boolean"],
    }

    def __init__(self, n_derivative=0, *, derivative_method="difference", derived=False):
        self.n_derivative = n_derivative
        self.derivative_method = derivative_method
        self.derived = derived

    def fit(self, X, y=None, grid=None):
        """
        Fit the transformation.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timesteps)
            The curves.
        y : ignored, optional
            Ignored.
        grid : array-like of shape (n_timesteps, ), optional
            The grid of the curves. If None, the grid is
            ``0, 1, ..., n_timesteps - 1``.

        Returns
        -------
        self
            This instance.
        """
        self._validate_params()
        X = self._validate_data(X, allow_nan=True)
        self.grid_ = check_grid(grid, X.shape[1])
        if self._compute_derivative() and self.n_derivative >= X.shape[1]:
            raise ValueError(
                f"n_derivative must be smaller than the number of timesteps "
                f"({X.shape[1]}), got {self.n_derivative}"
            )

        self.evenly_spaced_ = is_evenly_spaced(self.grid_)
        if self.evenly_spaced_:
            grid = self.grid_
        else:
            warnings.warn(
                "The grid is not evenly spaced. The curves will be respaced "
                "using a spline representation.",
                UnevenGridWarning,
            )
            grid = np.linspace(self.grid_[0], self.grid_[-1], self.grid_.shape[0])

        if self._compute_derivative() and self.derivative_method == "difference":
            window = np.ones(self.n_derivative + 1) / (self.n_derivative + 1)
            self.grid_out_ = np.convolve(grid, window, mode="valid")
        else:
            self.grid_out_ = grid

        return self

    def transform(self, X):
        """
        Transform the curves.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_timesteps)
            The curves.

        Returns
        -------
        ndarray of shape (n_samples, n_timesteps_out)
            The transformed curves.
        """
        check_is_fitted(self)
        X = self._validate_data(X, reset=False, allow_nan=True)

        if np.isnan(X).any():
            warnings.warn(
                "There are missing values in X. They will be filled using a "
                "spline representation.",
                MissingValueWarning,
            )
            X = fill_missing(X, self.grid_)

        if not self.evenly_spaced_:
            X = respace(X, self.grid_)

        if not self._compute_derivative():
            return X

        if self.derivative_method == "difference":
            return difference_derivative(X, n=self.n_derivative)
        else:
            return basis_derivative(X, self.grid_out_, n=self.n_derivative)

    def _compute_derivative(self):
        return not self.derived and self.n_derivative > 0

    def __sklearn_tags__(self):
        tags = super().__sklearn_tags__()
        tags.input_tags.allow_nan = True
        return tags
