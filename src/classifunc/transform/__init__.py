# Authors: Isak Samsten
# License: BSD 3 clause
"""Transform raw curves before computing distances."""

from ._functional import (
    FunctionalTransform,
    basis_derivative,
    difference_derivative,
    fill_missing,
    respace,
)

__all__ = [
    "FunctionalTransform",
    "fill_missing",
    "respace",
    "difference_derivative",
    "basis_derivative",
]
