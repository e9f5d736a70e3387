# Authors: Isak Samsten
# License: BSD 3 clause

import math
import numbers

from sklearn.utils.validation import check_scalar

from ..utils.validation import check_array
from ._metric import _compute_warp_size, _dtw_alignment

__all__ = [
    "dtw_alignment",
    "dtw_distance",
]


def dtw_distance(x, y, *, r=1.0):
    """Compute the dynamic time warping distance

    Parameters
    ----------
    x : array-like of shape (x_timestep, )
        The first curve

    y : array-like of shape (y_timestep, )
        The second curve

    r : float, optional
        The warping window in [0, 1] as a fraction of max(x_timestep, y_timestep)

    Returns
    -------
    distance : float
        The dynamic time warping distance

    See Also
    --------
    dtw_alignment : compute the dtw alignment matrix
    """
    return math.sqrt(dtw_alignment(x, y, r=r)[-1, -1])


def dtw_alignment(x, y, *, r=1.0):
    """Compute the dynamic time warping alignment matrix

    Parameters
    ----------
    x : array-like of shape (x_timestep, )
        The first curve

    y : array-like of shape (y_timestep, )
        The second curve

    r : float, optional
        The warping window in [0, 1] as a fraction of max(x_timestep, y_timestep)

    Returns
    -------
    ndarray of shape (x_timestep, y_timestep)
        The cumulative squared cost of the optimal alignment ending at each
        cell. Cells outside the warping window are infinite.
    """
    check_scalar(r, "r", numbers.Real, min_val=0, max_val=1)
    x = check_array(x, ravel_1d=True, ensure_2d=False, dtype=float)
    y = check_array(y, ravel_1d=True, ensure_2d=False, dtype=float)
    warp_size = _compute_warp_size(x.shape[0], r, y_size=y.shape[0])
    return _dtw_alignment(x, y, warp_size)
