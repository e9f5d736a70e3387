# Authors: Isak Samsten
# License: BSD 3 clause

import math
import numbers

import numpy as np

from ..exceptions import (
    InvalidBandwidthError,
    InvalidKernelError,
    KernelComputationError,
)
from ..utils.validation import check_option

__all__ = [
    "normal",
    "cosine",
    "epanechnikov",
    "triangular",
    "quartic",
    "uniform",
    "asymmetric_normal",
    "asymmetric_cosine",
    "asymmetric_epanechnikov",
    "asymmetric_triangular",
    "asymmetric_quartic",
    "asymmetric_uniform",
    "check_bandwidth",
    "check_kernel",
    "kernel_choices",
    "kernel_weights",
]

CUSTOM_KERNEL = "custom.ker"


def _symmetric_support(u):
    return np.abs(u) <= 1


def _asymmetric_support(u):
    return (u >= 0) & (u <= 1)


def normal(u):
    """Gaussian kernel, ``exp(-u^2 / 2) / sqrt(2 pi)``."""
    u = np.asarray(u, dtype=float)
    return np.exp(-0.5 * u**2) / math.sqrt(2 * math.pi)


def cosine(u):
    """Cosine kernel, ``pi / 4 cos(pi u / 2)`` for ``|u| <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_symmetric_support(u), math.pi / 4 * np.cos(math.pi / 2 * u), 0.0)


def epanechnikov(u):
    """Epanechnikov kernel, ``3 / 4 (1 - u^2)`` for ``|u| <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_symmetric_support(u), 0.75 * (1 - u**2), 0.0)


def triangular(u):
    """Triangular kernel, ``1 - |u|`` for ``|u| <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_symmetric_support(u), 1 - np.abs(u), 0.0)


def quartic(u):
    """Quartic (biweight) kernel, ``15 / 16 (1 - u^2)^2`` for ``|u| <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_symmetric_support(u), 15 / 16 * (1 - u**2) ** 2, 0.0)


def uniform(u):
    """Uniform kernel, ``1 / 2`` for ``|u| <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_symmetric_support(u), 0.5, 0.0)


def asymmetric_normal(u):
    """Asymmetric Gaussian kernel, ``2 normal(u)`` for ``u >= 0``."""
    u = np.asarray(u, dtype=float)
    return np.where(u >= 0, 2 * normal(u), 0.0)


def asymmetric_cosine(u):
    """Asymmetric cosine kernel, ``pi / 2 cos(pi u / 2)`` for ``0 <= u <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(
        _asymmetric_support(u), math.pi / 2 * np.cos(math.pi / 2 * u), 0.0
    )


def asymmetric_epanechnikov(u):
    """Asymmetric Epanechnikov kernel, ``3 / 2 (1 - u^2)`` for ``0 <= u <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_asymmetric_support(u), 1.5 * (1 - u**2), 0.0)


def asymmetric_triangular(u):
    """Asymmetric triangular kernel, ``2 (1 - u)`` for ``0 <= u <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_asymmetric_support(u), 2 * (1 - u), 0.0)


def asymmetric_quartic(u):
    """Asymmetric quartic kernel, ``15 / 8 (1 - u^2)^2`` for ``0 <= u <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_asymmetric_support(u), 15 / 8 * (1 - u**2) ** 2, 0.0)


def asymmetric_uniform(u):
    """Asymmetric uniform kernel, ``1`` for ``0 <= u <= 1``."""
    u = np.asarray(u, dtype=float)
    return np.where(_asymmetric_support(u), 1.0, 0.0)


_KERNELS = {
    "normal": normal,
    "cosine": cosine,
    "epanechnikov": epanechnikov,
    "triangular": triangular,
    "quartic": quartic,
    "biweight": quartic,
    "uniform": uniform,
    "asymmetric_normal": asymmetric_normal,
    "asymmetric_cosine": asymmetric_cosine,
    "asymmetric_epanechnikov": asymmetric_epanechnikov,
    "asymmetric_triangular": asymmetric_triangular,
    "asymmetric_quartic": asymmetric_quartic,
    "asymmetric_uniform": asymmetric_uniform,
}


def kernel_choices():
    """
    List the admissible kernels.

    Returns
    -------
    list
        The names of the built-in kernels and ``"custom.ker"``.
    """
    return sorted(_KERNELS.keys()) + [CUSTOM_KERNEL]


class _ElementwiseKernel:
    """Apply a user-supplied kernel to one distance at a time."""

    def __init__(self, func):
        self.func = func

    def __call__(self, u):
        u = np.asarray(u, dtype=float)
        weights = np.empty(u.shape, dtype=float)
        for index in np.ndindex(*u.shape):
            try:
                value = float(self.func(u[index]))
            except Exception as e:
                raise KernelComputationError(
                    f"The custom kernel failed for the distance at {index}: {e}",
                    index=index,
                ) from e

            if not math.isfinite(value) or value < 0:
                raise KernelComputationError(
                    "The custom kernel must return a finite non-negative value, "
                    f"got {value} for the distance at {index}",
                    index=index,
                )
            weights[index] = value
        return weights


def check_kernel(kernel, custom_kernel=None):
    """
    Resolve a kernel into a function of the scaled distances.

    Parameters
    ----------
    kernel : str or callable
        The name of the kernel, ``"custom.ker"`` or a callable.
    custom_kernel : callable, optional
        The function ``f(u)`` used if ``kernel="custom.ker"``.

    Returns
    -------
    callable
        A function mapping an array of scaled distances to weights.
    """
    if callable(kernel):
        return _ElementwiseKernel(kernel)
    elif kernel == CUSTOM_KERNEL:
        if not callable(custom_kernel):
            raise InvalidKernelError(
                "kernel='custom.ker' requires a callable custom_kernel, got "
                f"{custom_kernel!r}"
            )
        return _ElementwiseKernel(custom_kernel)
    elif isinstance(kernel, str):
        return check_option(_KERNELS, kernel, "kernel", error=InvalidKernelError)
    else:
        raise InvalidKernelError(
            f"kernel must be a str or callable, got {type(kernel).__qualname__}"
        )


def check_bandwidth(bandwidth):
    """Check that the bandwidth is a strictly positive real number."""
    if (
        isinstance(bandwidth, bool)
        or not isinstance(bandwidth, numbers.Real)
        or not math.isfinite(bandwidth)
        or bandwidth <= 0
    ):
        raise InvalidBandwidthError(
            f"bandwidth must be a finite real number > 0, got {bandwidth!r}"
        )
    return float(bandwidth)


def kernel_weights(dist, bandwidth=1.0, *, kernel="normal", custom_kernel=None):
    """
    Compute kernel weights of distances.

    The weight of a distance ``d`` is ``K(d / bandwidth)``.

    Parameters
    ----------
    dist : array-like
        The distances.
    bandwidth : float, optional
        The bandwidth of the kernel.
    kernel : str or callable, optional
        The kernel. See :func:`kernel_choices` for the admissible kernels. If
        ``"custom.ker"``, use `custom_kernel`.
    custom_kernel : callable, optional
        A function ``f(u)`` used if ``kernel="custom.ker"``.

    Returns
    -------
    ndarray
        The kernel weights, with the same shape as `dist`.

    Examples
    --------
    >>> from classifunc.kernel import kernel_weights
    >>> kernel_weights([0.0, 1.0, 4.0], 2.0, kernel="triangular")
    array([1. , 0.5, 0. ])
    """
    bandwidth = check_bandwidth(bandwidth)
    kernel_func = check_kernel(kernel, custom_kernel)
    return kernel_func(np.asarray(dist, dtype=float) / bandwidth)
