# Authors: Isak Samsten
# License: BSD 3 clause
"""Custom warnings and errors used across classifunc."""

from sklearn.utils._param_validation import InvalidParameterError

__all__ = [
    "InvalidMetricError",
    "InvalidKernelError",
    "InvalidBandwidthError",
    "InvalidNeighborsError",
    "ShapeMismatchError",
    "MetricComputationError",
    "KernelComputationError",
    "MissingValueWarning",
    "UnevenGridWarning",
]


class InvalidMetricError(InvalidParameterError):
    """Raised when the metric is not a known metric or a valid custom metric."""


class InvalidKernelError(InvalidParameterError):
    """Raised when the kernel is not a known kernel or a valid custom kernel."""


class InvalidBandwidthError(InvalidParameterError):
    """Raised when the kernel bandwidth is not strictly positive."""


class InvalidNeighborsError(InvalidParameterError):
    """Raised when the number of neighbors is outside ``[1, n_samples]``."""


class ShapeMismatchError(ValueError):
    """Raised when the shapes of the curves, grid or labels disagree.

    Inherits from ValueError to be compatible with the errors raised by
    scikit-learn on inconsistent input.
    """


class MetricComputationError(ValueError):
    """Raised when a distance is non-finite, negative or cannot be computed.

    Attributes
    ----------
    index : tuple
        The ``(row, column)`` index of the offending pair of curves.
    """

    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index


class KernelComputationError(ValueError):
    """Raised when a kernel weight is non-finite, negative or cannot be computed.

    Attributes
    ----------
    index : tuple
        The ``(row, column)`` index of the offending distance.
    """

    def __init__(self, message, index=None):
        super().__init__(message)
        self.index = index


class MissingValueWarning(UserWarning):
    """Warning used to notify that missing values were filled by interpolation."""


class UnevenGridWarning(UserWarning):
    """Warning used to notify that curves were respaced onto an even grid."""
