# Authors: Isak Samsten
# License: BSD 3 clause
"""Utilities for validating curves and estimators."""

from .validation import check_array, check_grid, check_X_y, is_evenly_spaced

__all__ = [
    "check_array",
    "check_X_y",
    "check_grid",
    "is_evenly_spaced",
]
