# Authors: Isak Samsten
# License: BSD 3 clause
"""Nearest neighbor and kernel classifiers for curves."""

from ._neighbors import KernelClassifier, KNeighborsClassifier

__all__ = [
    "KNeighborsClassifier",
    "KernelClassifier",
]
