# Authors: Isak Samsten
# License: BSD 3 clause

import numbers
from abc import ABCMeta, abstractmethod

import numpy as np
from sklearn.base import ClassifierMixin
from sklearn.utils._param_validation import Interval, StrOptions
from sklearn.utils.multiclass import check_classification_targets
from sklearn.utils.validation import check_is_fitted

from ..base import BaseEstimator
from ..distance._distance import _make_metric, _pairwise_distance
from ..exceptions import InvalidNeighborsError
from ..kernel._kernel import check_bandwidth, check_kernel
from ..transform import FunctionalTransform
from ._vote import (
    kernel_class_scores,
    knn_class_scores,
    scores_to_label,
    scores_to_proba,
)

__all__ = [
    "KNeighborsClassifier",
    "KernelClassifier",
]


class BaseFunctionalClassifier(ClassifierMixin, BaseEstimator, metaclass=ABCMeta):
    """Base class for classifiers of curves based on pairwise distances."""

    _parameter_constraints: dict = {
        "metric": [str, callable],
        "metric_params": [dict, None],
        "custom_metric": [callable, None],
        "n_derivative": [Interval(numbers.Integral, 0, None, closed="left")],
        "derived": ["boolean"],
        "derivative_method": [StrOptions({"difference", "basis"})],
    }

    @abstractmethod
    def __init__(
        self,
        *,
        metric="euclidean",
        metric_params=None,
        custom_metric=None,
        n_derivative=0,
        derived=False,
        derivative_method="difference",
    ):
        self.metric = metric
        self.metric_params = metric_params
        self.custom_metric = custom_metric
        self.n_derivative = n_derivative
        self.derived = derived
        self.derivative_method = derivative_method

    def fit(self, x, y, grid=None):
        """
        Fit the classifier to the training curves.

        Parameters
        ----------
        x : array-like of shape (n_samples, n_timesteps)
            The training curves. Missing values are filled using a spline
            representation.
        y : array-like of shape (n_samples, )
            The class labels.
        grid : array-like of shape (n_timesteps, ), optional
            The grid on which the curves are sampled. If None, the grid is
            ``0, 1, ..., n_timesteps - 1``.

        Returns
        -------
        self
            This instance.
        """
        self._validate_params()
        x, y = self._validate_data(x, y, allow_nan=True)
        check_classification_targets(y)
        self.metric_ = _make_metric(self.metric, self.metric_params, self.custom_metric)
        self._check_hyperparameters(x.shape[0])

        self.transform_ = FunctionalTransform(
            n_derivative=self.n_derivative,
            derivative_method=self.derivative_method,
            derived=self.derived,
        ).fit(x, grid=grid)
        self._fit_X = self.transform_.transform(x).copy()  # Align naming with sklearn
        self.classes_, self._y = np.unique(y, return_inverse=True)
        return self

    def predict_proba(self, x=None, *, leave_one_out=False):
        """
        Compute probability estimates for the curves in x.

        Parameters
        ----------
        x : array-like of shape (n_samples, n_timesteps), optional
            The curves. If None, estimate the probabilities of the training
            curves.
        leave_one_out : bool, optional
            If True and `x` is None, a training curve does not contribute to
            its own estimate.

        Returns
        -------
        ndarray of shape (n_samples, n_classes)
            The probability of each class for each curve, with classes in the
            order of `classes_`.
        """
        return scores_to_proba(self._class_scores(x, leave_one_out))

    def predict(self, x=None, *, leave_one_out=False):
        """
        Compute the class label for the curves in x.

        Parameters
        ----------
        x : array-like of shape (n_samples, n_timesteps), optional
            The curves. If None, predict the labels of the training curves.
        leave_one_out : bool, optional
            If True and `x` is None, a training curve does not contribute to
            its own prediction.

        Returns
        -------
        ndarray of shape (n_samples, )
            The class label for each curve.
        """
        return scores_to_label(self._class_scores(x, leave_one_out), self.classes_)

    def _distance(self, x):
        if x is None:
            return _pairwise_distance(self._fit_X, None, self.metric_)

        x = self._validate_data(x, reset=False, allow_nan=True)
        return _pairwise_distance(self._fit_X, self.transform_.transform(x), self.metric_)

    def _class_scores(self, x, leave_one_out):
        check_is_fitted(self)
        if leave_one_out and x is not None:
            raise ValueError("leave_one_out=True requires x to be None")

        return self._aggregate(self._distance(x), leave_one_out)

    @abstractmethod
    def _check_hyperparameters(self, n_samples):
        pass

    @abstractmethod
    def _aggregate(self, dist, leave_one_out):
        pass

    def __sklearn_tags__(self):
        tags = super().__sklearn_tags__()
        tags.input_tags.allow_nan = True
        return tags


class KNeighborsClassifier(BaseFunctionalClassifier):
    """
    Classifier implementing k-nearest neighbors for curves.

    Parameters
    ----------
    n_neighbors : int, optional
        The number of neighbors. Must be in ``[1, n_samples]``.
    metric : str or callable, optional
        The distance metric. See :func:`~classifunc.distance.metric_choices`
        for the admissible metrics. If ``"custom.metric"``, use
        `custom_metric`.
    metric_params : dict, optional
        Optional parameters to the distance metric.
    custom_metric : callable, optional
        A function ``f(x, y, **metric_params)`` used if
        ``metric="custom.metric"``.
    n_derivative : int, optional
        The order of the derivative of the curves used to compute distances.
    derived : bool, optional
        If True, the curves are already derivatives.
    derivative_method : {"difference", "basis"}, optional
        The method used to compute derivatives. See
        :class:`~classifunc.transform.FunctionalTransform`.

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes, )
        Known class labels.
    n_neighbors_ : int
        The number of neighbors.
    metric_ : Metric
        The distance metric.
    transform_ : FunctionalTransform
        The transformation applied to curves before computing distances.

    Notes
    -----
    Neighbors with equal distance are ranked by their order in the training
    data, and equal votes are resolved in favor of the first class in
    `classes_`.

    Examples
    --------
    >>> import numpy as np
    >>> from classifunc.neighbors import KNeighborsClassifier
    >>> X = np.array([np.sin(np.linspace(0, 3, 10) + i) for i in range(4)])
    >>> clf = KNeighborsClassifier(n_neighbors=1).fit(X, ["A", "A", "B", "B"])
    >>> clf.predict(X[:1])
    array(['A'], dtype='<U1')
    """

    _parameter_constraints: dict = {
        **BaseFunctionalClassifier._parameter_constraints,
        "n_neighbors": [numbers.Integral],
    }

    def __init__(
        self,
        n_neighbors=5,
        *,
        metric="euclidean",
        metric_params=None,
        custom_metric=None,
        n_derivative=0,
        derived=False,
        derivative_method="difference",
    ):
        super().__init__(
            metric=metric,
            metric_params=metric_params,
            custom_metric=custom_metric,
            n_derivative=n_derivative,
            derived=derived,
            derivative_method=derivative_method,
        )
        self.n_neighbors = n_neighbors

    def _check_hyperparameters(self, n_samples):
        if isinstance(self.n_neighbors, bool) or not (
            1 <= self.n_neighbors <= n_samples
        ):
            raise InvalidNeighborsError(
                f"n_neighbors must be in [1, {n_samples}], got {self.n_neighbors}"
            )
        self.n_neighbors_ = int(self.n_neighbors)

    def _aggregate(self, dist, leave_one_out):
        if leave_one_out:
            if self.n_neighbors_ >= dist.shape[0]:
                raise InvalidNeighborsError(
                    f"n_neighbors must be in [1, {dist.shape[0] - 1}] if "
                    f"leave_one_out=True, got {self.n_neighbors_}"
                )
            dist = dist.copy()
            np.fill_diagonal(dist, np.inf)

        return knn_class_scores(dist, self._y, len(self.classes_), self.n_neighbors_)


class KernelClassifier(BaseFunctionalClassifier):
    """
    Classifier weighting every training curve by a kernel of its distance.

    The score of a class is the sum of ``K(d / bandwidth)`` over the training
    curves of that class, where ``d`` is the distance between the training
    curve and the query.

    Parameters
    ----------
    bandwidth : float, optional
        The bandwidth of the kernel. Must be larger than 0.
    kernel : str or callable, optional
        The kernel. See :func:`~classifunc.kernel.kernel_choices` for the
        admissible kernels. If ``"custom.ker"``, use `custom_kernel`.
    custom_kernel : callable, optional
        A function ``f(u)`` used if ``kernel="custom.ker"``. The function is
        applied to one scaled distance at a time.
    metric : str or callable, optional
        The distance metric. See :func:`~classifunc.distance.metric_choices`
        for the admissible metrics. If ``"custom.metric"``, use
        `custom_metric`.
    metric_params : dict, optional
        Optional parameters to the distance metric.
    custom_metric : callable, optional
        A function ``f(x, y, **metric_params)`` used if
        ``metric="custom.metric"``.
    n_derivative : int, optional
        The order of the derivative of the curves used to compute distances.
    derived : bool, optional
        If True, the curves are already derivatives.
    derivative_method : {"difference", "basis"}, optional
        The method used to compute derivatives. See
        :class:`~classifunc.transform.FunctionalTransform`.

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes, )
        Known class labels.
    bandwidth_ : float
        The bandwidth of the kernel.
    kernel_ : callable
        The kernel function.
    metric_ : Metric
        The distance metric.
    transform_ : FunctionalTransform
        The transformation applied to curves before computing distances.

    Notes
    -----
    If every kernel weight of a query is zero, for example if the query is
    outside the support of the kernel for all training curves, every class
    is equally probable.

    Examples
    --------
    >>> import numpy as np
    >>> from classifunc.neighbors import KernelClassifier
    >>> X = np.array([np.sin(np.linspace(0, 3, 10) + i) for i in range(4)])
    >>> clf = KernelClassifier(bandwidth=100, kernel="uniform")
    >>> clf.fit(X, ["A", "A", "B", "B"]).predict_proba(X[:1])
    array([[0.5, 0.5]])
    """

    _parameter_constraints: dict = {
        **BaseFunctionalClassifier._parameter_constraints,
        "bandwidth": [numbers.Real],
        "kernel": [str, callable],
        "custom_kernel": [callable, None],
    }

    def __init__(
        self,
        bandwidth=1.0,
        *,
        kernel="normal",
        custom_kernel=None,
        metric="euclidean",
        metric_params=None,
        custom_metric=None,
        n_derivative=0,
        derived=False,
        derivative_method="difference",
    ):
        super().__init__(
            metric=metric,
            metric_params=metric_params,
            custom_metric=custom_metric,
            n_derivative=n_derivative,
            derived=derived,
            derivative_method=derivative_method,
        )
        self.bandwidth = bandwidth
        self.kernel = kernel
        self.custom_kernel = custom_kernel

    def _check_hyperparameters(self, n_samples):
        self.bandwidth_ = check_bandwidth(self.bandwidth)
        self.kernel_ = check_kernel(self.kernel, self.custom_kernel)

    def _aggregate(self, dist, leave_one_out):
        weights = self.kernel_(dist / self.bandwidth_)
        if leave_one_out:
            np.fill_diagonal(weights, 0)

        return kernel_class_scores(weights, self._y, len(self.classes_))
