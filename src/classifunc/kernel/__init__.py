# Authors: Isak Samsten
# License: BSD 3 clause
"""Kernel functions for weighting distances."""

from ._kernel import (
    asymmetric_cosine,
    asymmetric_epanechnikov,
    asymmetric_normal,
    asymmetric_quartic,
    asymmetric_triangular,
    asymmetric_uniform,
    check_bandwidth,  # noqa: F401
    check_kernel,  # noqa: F401
    cosine,
    epanechnikov,
    kernel_choices,
    kernel_weights,
    normal,
    quartic,
    triangular,
    uniform,
)

__all__ = [
    "kernel_choices",
    "kernel_weights",
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
]
