# Authors: Isak Samsten
# License: BSD 3 clause

"""
Classifunc - nearest neighbor and kernel classifiers for functional data.

Classifunc classifies curves sampled on a grid using a large family of
(semi-)metrics, optionally computed on derivatives of the curves, and
integrates seamlessly with `scikit-learn <https://scikit-learn.org>`__.
"""
from .version import version as __version__

__all__ = [
    "__version__",
]
