"""
Distance computations between curves.

The :py:mod:`classifunc.distance` module includes functions for computing
paired and pairwise distances between curves using metrics and semimetrics
for functional data.
"""

# Authors: Isak Samsten
# License: BSD 3 clause

from ._distance import (
    check_metric,  # noqa: F401
    metric_choices,
    paired_distance,
    pairwise_distance,
)
from .dtw import dtw_alignment, dtw_distance

__all__ = [
    "metric_choices",
    "pairwise_distance",
    "paired_distance",
    "dtw_distance",
    "dtw_alignment",
]
