# Authors: Isak Samsten
# License: BSD 3 clause

import numpy as np
from sklearn.utils.validation import _check_y
from sklearn.utils.validation import check_array as sklearn_check_array
from sklearn.utils.validation import check_consistent_length

from ..exceptions import ShapeMismatchError

__all__ = [
    "check_option",
    "check_array",
    "check_X_y",
    "check_grid",
    "is_evenly_spaced",
]


def _estimator_name(estimator):
    if estimator is None:
        return "estimator"
    elif isinstance(estimator, str):
        return estimator
    else:
        return estimator.__class__.__name__


def check_option(dict, key, name, error=ValueError):
    """Return the value of ``key`` in ``dict`` or raise ``error``.

    Parameters
    ----------
    dict : dict
        The available options.
    key : str
        The option to look up.
    name : str
        The name of the parameter, used in the error message.
    error : type, optional
        The exception raised for an unknown option.

    Returns
    -------
    object
        The value of the option.
    """
    if key in dict:
        return dict[key]
    else:
        keys = ["'%s'" % key for key in sorted(list(dict.keys()))]
        if len(keys) == 1:
            msg = f"{name} must be {keys[0]}, got {key!r}"
        else:
            msg = f"{name} must be {', '.join(keys[:-1])} or {keys[-1]}, got {key!r}"

        raise error(msg)


def _num_timesteps(X):
    """Return the number of timesteps of ``X``

    Parameters
    ----------
    X : object
        The object to guess the number of timesteps from.

    Returns
    -------
    n_timesteps : int
        The number of timesteps
    """
    type_ = type(X)
    if type_.__module__ == "builtins":
        type_name = type_.__qualname__
    else:
        type_name = f"{type_.__module__}.{type_.__qualname__}"
    message = f"Unable to find the number of timesteps from X of type {type_name}"
    if not hasattr(X, "__len__") and not hasattr(X, "shape"):
        if not hasattr(X, "__array__"):
            raise TypeError(message)
        X = np.asarray(X)

    if hasattr(X, "shape"):
        if not hasattr(X.shape, "__len__") or len(X.shape) != 2:
            message += f" with shape {X.shape}"
            raise TypeError(message)
        return X.shape[-1]

    first_sample = X[0]

    # Do not consider an array-like of strings or dicts to be a 2D array
    if isinstance(first_sample, (str, bytes, dict)):
        message += f" where the samples are of type {type(first_sample).__qualname__}"
        raise TypeError(message)

    try:
        return len(first_sample)
    except Exception as err:
        raise TypeError(message) from err


def check_X_y(
    x,
    y,
    *,
    dtype=float,
    order="C",
    copy=False,
    ensure_2d=True,
    allow_nan=False,
    ensure_min_samples=1,
    ensure_min_timesteps=1,
    estimator=None,
):
    """Validate curves and labels.

    The labels must not contain missing values and must have one label per
    curve.

    Parameters
    ----------
    x : array-like of shape (n_samples, n_timesteps)
        The curves.
    y : array-like of shape (n_samples, )
        The labels.
    dtype : type, optional
        The data type of the curves.
    order : {"C", "F"}, optional
        The memory layout of the curves.
    copy : bool, optional
        Force a copy of the curves.
    ensure_2d : bool, optional
        Raise an error if the curves are not a 2d-array.
    allow_nan : bool, optional
        Allow missing values in the curves.
    ensure_min_samples : int, optional
        The minimum number of curves.
    ensure_min_timesteps : int, optional
        The minimum number of timesteps.
    estimator : str or estimator instance, optional
        Used in error messages.

    Returns
    -------
    x : ndarray of shape (n_samples, n_timesteps)
        The validated curves.
    y : ndarray of shape (n_samples, )
        The validated labels.
    """
    if y is None:
        raise ValueError(
            f"{_estimator_name(estimator)} requires y to be passed, "
            "but the target y is None"
        )
    x = check_array(
        x,
        allow_nan=allow_nan,
        ensure_min_samples=ensure_min_samples,
        ensure_min_timesteps=ensure_min_timesteps,
        order=order,
        copy=copy,
        ensure_2d=ensure_2d,
        dtype=dtype,
        estimator=estimator,
    )

    y = _check_y(np.asarray(y), estimator=estimator)
    try:
        check_consistent_length(x, y)
    except ValueError as e:
        raise ShapeMismatchError(str(e)) from e

    if y.dtype == object and any(label is None for label in y):
        raise ValueError("Input y contains missing labels.")

    return x, y


def check_array(
    array,
    *,
    dtype="numeric",
    order="C",
    copy=False,
    ravel_1d=False,
    ensure_2d=True,
    allow_nan=False,
    ensure_min_samples=1,
    ensure_min_timesteps=1,
    estimator=None,
    input_name="",
):
    """Delegate array validation to scikit-learn
    :func:`sklearn.utils.validation.check_array` with classifunc defaults and
    conventions.

    - by default we convert arrays to c-order
    - we optionally allow missing values, but never infinite values
    - we never allow for sparse arrays or arrays with more than two dimensions

    Parameters
    ----------
    array : object
        Input object to check / convert.

    dtype : 'numeric', type, list of type or None, optional
        Data type of result. If None, the dtype of the input is preserved.
        If "numeric", dtype is preserved unless array.dtype is object.

    order : {'F', 'C'} or None, optional
        Whether an array will be forced to be fortran or c-style.

    copy : bool, optional
        Whether a forced copy will be triggered. If copy=False, a copy might
        be triggered by a conversion.

    ravel_1d : bool, optional
        Whether to ravel 1d arrays or column vectors, it the array is neither an
        error is raised.

    ensure_2d : bool, optional
        Whether to raise a value error if array is not 2D.

    allow_nan : bool, optional
        Whether to accept np.nan in array.

    ensure_min_samples : int, optional
        Make sure that the array has a minimum number of samples in its first
        axis (rows for a 2D array). Setting to 0 disables this check.

    ensure_min_timesteps : int, optional
        Make sure that the 2D array has some minimum number of timesteps
        (columns). The default value of 1 rejects empty datasets.

    estimator : str or estimator instance, default=None
        If passed, include the name of the estimator in warning messages.

    input_name : str, default=""
        The data name used to construct the error message.

    Returns
    -------
    array_converted : object
        The converted and validated array.
    """
    array = sklearn_check_array(
        array,
        accept_sparse=False,
        accept_large_sparse=False,
        dtype=dtype,
        order=order,
        copy=copy,
        ensure_all_finite=False,
        ensure_2d=ensure_2d,
        allow_nd=False,
        ensure_min_samples=ensure_min_samples,
        ensure_min_features=0,
        estimator=estimator,
        input_name=input_name,
    )

    if ravel_1d:
        if array.ndim == 1:
            return array.ravel(order=order)
        elif array.ndim == 2 and array.shape[1] == 1:
            return array.ravel(order=order)
        else:
            raise ValueError(
                "Found array with dim %d. %s expect 1 dim or column vector"
                % (array.ndim, _estimator_name(estimator))
            )

    context = " by %s" % _estimator_name(estimator) if estimator is not None else ""
    if ensure_min_timesteps > 0 and array.ndim == 2:
        n_timesteps = array.shape[-1]
        if n_timesteps < ensure_min_timesteps:
            raise ValueError(
                "Found array with %d timestep(s) (shape=%s) while"
                " a minimum of %d is required%s."
                % (n_timesteps, array.shape, ensure_min_timesteps, context)
            )

    if np.issubdtype(array.dtype, np.floating):
        padded_input_name = input_name + " " if input_name else ""
        if not allow_nan and np.isnan(array).any():
            raise ValueError(f"Input {padded_input_name}contains NaN.")

        if np.isinf(array).any():
            raise ValueError(f"Input {padded_input_name}contains infinity.")

    return array


def check_grid(grid, n_timesteps):
    """Validate the grid of a curve matrix.

    Parameters
    ----------
    grid : array-like of shape (n_timesteps, ) or None
        The grid. If None, the grid defaults to ``0, 1, ..., n_timesteps - 1``.
    n_timesteps : int
        The number of columns of the curve matrix.

    Returns
    -------
    ndarray of shape (n_timesteps, )
        The validated grid.
    """
    if grid is None:
        return np.arange(n_timesteps, dtype=float)

    grid = check_array(grid, ensure_2d=False, dtype=float, input_name="grid")
    if grid.ndim != 1:
        raise ValueError(f"grid must be one dimensional, got {grid.ndim} dimensions")

    if grid.shape[0] != n_timesteps:
        raise ShapeMismatchError(
            f"grid has {grid.shape[0]} points, but the curves have "
            f"{n_timesteps} timesteps."
        )

    if n_timesteps > 1 and np.any(np.diff(grid) <= 0):
        raise ValueError("grid must be strictly increasing.")

    return grid


def is_evenly_spaced(grid, rtol=1.5e-8):
    """Check if the grid is evenly spaced.

    The grid is compared to an evenly spaced grid between the first and last
    grid point, using the mean absolute difference relative to the mean
    absolute grid value.

    Parameters
    ----------
    grid : ndarray of shape (n_timesteps, )
        The grid.
    rtol : float, optional
        The tolerance of the mean relative difference.

    Returns
    -------
    bool
        True if the grid is evenly spaced.
    """
    grid = np.asarray(grid, dtype=float)
    if grid.shape[0] <= 2:
        return True

    even = np.linspace(grid[0], grid[-1], grid.shape[0])
    scale = np.mean(np.abs(grid))
    diff = np.mean(np.abs(grid - even))
    if scale > rtol:
        diff /= scale

    return diff <= rtol
