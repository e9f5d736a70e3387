import pickle

import numpy as np
import pytest
from numpy.testing import assert_almost_equal, assert_equal
from sklearn.base import clone
from sklearn.exceptions import NotFittedError

from classifunc.distance import pairwise_distance
from classifunc.exceptions import (
    InvalidBandwidthError,
    InvalidKernelError,
    InvalidMetricError,
    InvalidNeighborsError,
    MetricComputationError,
    MissingValueWarning,
    ShapeMismatchError,
)
from classifunc.neighbors import KernelClassifier, KNeighborsClassifier
from classifunc.utils._testing import (
    assert_exhaustive_parameter_checks,
    assert_parameter_checks,
)


@pytest.fixture
def ab_curves():
    grid = np.arange(1, 11, dtype=float)
    X = np.vstack(
        [
            np.sin(grid / 3),
            np.sin(grid / 3) + 0.2,
            np.cos(grid / 3),
            np.cos(grid / 3) - 0.2,
        ]
    )
    y = np.array(["A", "A", "B", "B"])
    return X, y, grid


@pytest.fixture
def level_curves():
    X = np.repeat(np.array([[0.0], [1.0], [10.0], [11.0]]), 5, axis=1)
    y = np.array(["A", "B", "A", "B"])
    return X, y


def test_kneighbors_identical_query(ab_curves):
    X, y, grid = ab_curves
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y, grid=grid)
    assert_equal(clf.predict(X[:1]), ["A"])
    assert_equal(clf.predict_proba(X[:1]), [[1.0, 0.0]])
    assert_equal(clf.classes_, ["A", "B"])


def test_kernel_uniform_large_bandwidth(ab_curves):
    X, y, grid = ab_curves
    clf = KernelClassifier(bandwidth=1e6, kernel="uniform").fit(X, y, grid=grid)
    query = np.vstack([X, np.zeros((1, 10)), np.linspace(-1, 1, 10)])
    assert_equal(clf.predict_proba(query), np.full((6, 2), 0.5))


def test_kneighbors_all_neighbors_class_frequency(X_train, y_train, X_test):
    y = y_train.copy()
    y[:5] = "other"
    clf = KNeighborsClassifier(n_neighbors=X_train.shape[0]).fit(X_train, y)
    _, counts = np.unique(y, return_counts=True)
    proba = clf.predict_proba(X_test)
    assert_almost_equal(proba, np.tile(counts / y.shape[0], (X_test.shape[0], 1)))


def test_kernel_large_bandwidth_class_frequency(X_train, y_train, X_test):
    y = y_train.copy()
    y[:5] = "other"
    clf = KernelClassifier(bandwidth=1e8).fit(X_train, y)
    _, counts = np.unique(y, return_counts=True)
    proba = clf.predict_proba(X_test)
    assert_almost_equal(proba, np.tile(counts / y.shape[0], (X_test.shape[0], 1)))


@pytest.mark.parametrize(
    "clf",
    [
        KNeighborsClassifier(n_neighbors=3),
        KNeighborsClassifier(n_neighbors=1, metric="manhattan"),
        KNeighborsClassifier(n_neighbors=3, metric="dtw", metric_params={"r": 0.1}),
        KNeighborsClassifier(n_neighbors=3, n_derivative=1),
        KNeighborsClassifier(n_derivative=1, derivative_method="basis"),
        KernelClassifier(),
        KernelClassifier(bandwidth=2.0, kernel="epanechnikov"),
        KernelClassifier(bandwidth=5.0, kernel="asymmetric_quartic"),
        KernelClassifier(metric="correlation", bandwidth=0.5),
    ],
)
def test_classifier_accuracy(clf, X_train, X_test, y_train, y_test):
    clf.fit(X_train, y_train)
    proba = clf.predict_proba(X_test)
    assert proba.shape == (X_test.shape[0], 2)
    assert_almost_equal(proba.sum(axis=1), 1.0)
    assert np.all(proba >= 0)
    assert_equal(clf.predict(X_test), clf.classes_[np.argmax(proba, axis=1)])
    assert clf.score(X_test, y_test) == 1.0


@pytest.mark.parametrize(
    "clf", [KNeighborsClassifier(n_neighbors=3), KernelClassifier(bandwidth=2.0)]
)
def test_classifier_single_query(clf, X_train, X_test, y_train):
    clf.fit(X_train, y_train)
    assert clf.predict_proba(X_test[:1]).shape == (1, 2)
    assert clf.predict(X_test[:1]).shape == (1,)


def test_kernel_zero_weights_uniform(ab_curves):
    X, y, grid = ab_curves
    clf = KernelClassifier(bandwidth=0.01, kernel="triangular").fit(X, y, grid=grid)
    proba = clf.predict_proba(np.full((1, 10), 100.0))
    assert_equal(proba, [[0.5, 0.5]])
    assert_equal(clf.predict(np.full((1, 10), 100.0)), ["A"])


def test_kneighbors_in_sample(level_curves):
    X, y = level_curves
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y)
    assert_equal(clf.predict(), y)
    assert_equal(clf.predict(), clf.predict(X))
    assert_almost_equal(clf.predict_proba(), clf.predict_proba(X))


def test_kneighbors_leave_one_out(level_curves):
    X, y = level_curves
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y)
    assert_equal(clf.predict(leave_one_out=True), ["B", "A", "B", "A"])


def test_kernel_leave_one_out(level_curves):
    X, y = level_curves
    clf = KernelClassifier(bandwidth=3.0, kernel="uniform").fit(X, y)
    assert_equal(clf.predict_proba(), np.full((4, 2), 0.5))
    assert_equal(
        clf.predict_proba(leave_one_out=True), [[0, 1], [1, 0], [0, 1], [1, 0]]
    )


def test_leave_one_out_with_x(level_curves):
    X, y = level_curves
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y)
    with pytest.raises(ValueError, match="leave_one_out"):
        clf.predict(X, leave_one_out=True)


def test_kneighbors_leave_one_out_too_many_neighbors(level_curves):
    X, y = level_curves
    clf = KNeighborsClassifier(n_neighbors=4).fit(X, y)
    with pytest.raises(InvalidNeighborsError):
        clf.predict(leave_one_out=True)


@pytest.mark.parametrize("n_neighbors", [0, -1, 5, True])
def test_kneighbors_invalid_n_neighbors(level_curves, n_neighbors):
    X, y = level_curves
    with pytest.raises(InvalidNeighborsError):
        KNeighborsClassifier(n_neighbors=n_neighbors).fit(X, y)


@pytest.mark.parametrize("bandwidth", [0, -1.0, np.inf])
def test_kernel_invalid_bandwidth(level_curves, bandwidth):
    X, y = level_curves
    with pytest.raises(InvalidBandwidthError):
        KernelClassifier(bandwidth=bandwidth).fit(X, y)


@pytest.mark.parametrize(
    "kernel, custom_kernel", [("unknown", None), ("custom.ker", None)]
)
def test_kernel_invalid_kernel(level_curves, kernel, custom_kernel):
    X, y = level_curves
    with pytest.raises(InvalidKernelError):
        KernelClassifier(kernel=kernel, custom_kernel=custom_kernel).fit(X, y)


@pytest.mark.parametrize(
    "metric, metric_params",
    [("unknown", None), ("custom.metric", None), ("lp", {"q": 1})],
)
@pytest.mark.parametrize("Classifier", [KNeighborsClassifier, KernelClassifier])
def test_classifier_invalid_metric(level_curves, Classifier, metric, metric_params):
    X, y = level_curves
    with pytest.raises(InvalidMetricError):
        Classifier(metric=metric, metric_params=metric_params).fit(X, y)


def test_classifier_label_mismatch(level_curves):
    X, y = level_curves
    with pytest.raises(ShapeMismatchError):
        KNeighborsClassifier(n_neighbors=1).fit(X, y[:3])


def test_classifier_grid_mismatch(level_curves):
    X, y = level_curves
    with pytest.raises(ShapeMismatchError):
        KNeighborsClassifier(n_neighbors=1).fit(X, y, grid=np.arange(4))


def test_classifier_query_mismatch(X_train, y_train, X_test):
    clf = KernelClassifier().fit(X_train, y_train)
    with pytest.raises(ShapeMismatchError):
        clf.predict(X_test[:, :-2])


@pytest.mark.parametrize("Classifier", [KNeighborsClassifier, KernelClassifier])
def test_classifier_not_fitted(Classifier, X_test):
    with pytest.raises(NotFittedError):
        Classifier().predict(X_test)


def test_classifier_predict_does_not_mutate(X_train, y_train, X_test):
    clf = KNeighborsClassifier(n_neighbors=3).fit(X_train, y_train)
    fit_X = clf._fit_X.copy()
    params = clf.get_params()
    X = X_test.copy()
    clf.predict_proba(X)
    clf.predict(leave_one_out=True)
    assert_equal(clf._fit_X, fit_X)
    assert_equal(X, X_test)
    assert clf.get_params() == params


def test_classifier_does_not_store_input(X_train, y_train):
    X = X_train.copy()
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y_train)
    X[:] = 0
    assert_equal(clf.predict(X_train), y_train)


def test_classifier_custom_metric(X_train, y_train, X_test):
    def l2(x, y):
        return np.sqrt(np.sum((x - y) ** 2))

    clf = KernelClassifier(metric="custom.metric", custom_metric=l2)
    clf.fit(X_train[:6], y_train[:6])
    expected = KernelClassifier().fit(X_train[:6], y_train[:6])
    assert_almost_equal(clf.predict_proba(X_test), expected.predict_proba(X_test))


def test_classifier_custom_metric_failure(X_train, y_train, X_test):
    def metric(x, y):
        return np.nan

    clf = KNeighborsClassifier(n_neighbors=1, metric=metric).fit(X_train, y_train)
    with pytest.raises(MetricComputationError) as excinfo:
        clf.predict(X_test)

    assert excinfo.value.index == (0, 0)


def test_kernel_custom_kernel(X_train, y_train, X_test):
    clf = KernelClassifier(
        bandwidth=2.0,
        kernel="custom.ker",
        custom_kernel=lambda u: np.exp(-0.5 * u**2),
    ).fit(X_train, y_train)
    expected = KernelClassifier(bandwidth=2.0).fit(X_train, y_train)
    assert_almost_equal(clf.predict_proba(X_test), expected.predict_proba(X_test))


def test_classifier_derivative_removes_offset():
    grid = np.linspace(0, 1, 20)
    X = np.vstack([np.sin(grid) + c for c in range(6)])
    y = np.array(["a", "a", "a", "a", "b", "b"])
    clf = KernelClassifier(n_derivative=1).fit(X, y)
    proba = clf.predict_proba(np.sin(grid)[np.newaxis] + 100)
    assert_almost_equal(proba, [[4 / 6, 2 / 6]])


def test_classifier_derived_skips_derivative(ab_curves):
    X, y, grid = ab_curves
    clf = KNeighborsClassifier(n_neighbors=1, n_derivative=2, derived=True)
    clf.fit(X, y, grid=grid)
    assert clf._fit_X.shape == X.shape
    assert_equal(clf.predict(X), y)


def test_classifier_transform_matches_distance(X_train, y_train, X_test):
    clf = KNeighborsClassifier(n_neighbors=1, n_derivative=1).fit(X_train, y_train)
    assert_almost_equal(clf._fit_X, np.diff(X_train, axis=1))
    assert_almost_equal(
        clf._distance(X_test),
        pairwise_distance(np.diff(X_train, axis=1), np.diff(X_test, axis=1)),
    )


def test_classifier_missing_values(ab_curves):
    X, y, grid = ab_curves
    X_missing = X.copy()
    X_missing[0, 3] = np.nan
    with pytest.warns(MissingValueWarning):
        clf = KNeighborsClassifier(n_neighbors=1).fit(X_missing, y, grid=grid)

    assert not np.isnan(clf._fit_X).any()
    assert_equal(clf.predict(X), y)


def test_classifier_non_numeric_labels(ab_curves):
    X, _, grid = ab_curves
    y = np.array([2, 2, 7, 7])
    clf = KNeighborsClassifier(n_neighbors=1).fit(X, y, grid=grid)
    assert_equal(clf.classes_, [2, 7])
    assert_equal(clf.predict(X), y)


@pytest.mark.parametrize(
    "clf",
    [
        KNeighborsClassifier(n_neighbors=3, metric="dtw", metric_params={"r": 0.1}),
        KernelClassifier(bandwidth=2.0, kernel="cosine", n_derivative=1),
    ],
)
def test_classifier_clone(clf, X_train, y_train, X_test):
    clf.fit(X_train, y_train)
    clf2 = clone(clf).fit(X_train, y_train)
    assert clf2.get_params() == clf.get_params()
    assert_almost_equal(clf2.predict_proba(X_test), clf.predict_proba(X_test))


def test_classifier_pickle(X_train, y_train, X_test):
    clf = KernelClassifier(bandwidth=2.0).fit(X_train, y_train)
    state = clf.__getstate__()
    assert "_classifunc_version" in state
    clf2 = pickle.loads(pickle.dumps(clf))
    assert_equal(clf2.predict_proba(X_test), clf.predict_proba(X_test))


def test_classifier_pickle_version_mismatch(X_train, y_train):
    clf = KernelClassifier().fit(X_train, y_train)
    state = clf.__getstate__()
    state["_classifunc_version"] = "0.0.1"
    clf2 = KernelClassifier()
    with pytest.warns(UserWarning, match="0.0.1"):
        clf2.__setstate__(state)


@pytest.mark.parametrize("clf", [KNeighborsClassifier(), KernelClassifier()])
def test_classifier_parameter_checks(clf):
    assert_exhaustive_parameter_checks(clf)
    assert_parameter_checks(clf)


@pytest.mark.parametrize("metric", ["correlation", "cosine"])
def test_kneighbors_degenerate_curves(metric):
    grid = np.linspace(0, 1, 10)
    X = np.vstack([np.zeros(10), np.full(10, 2.0), grid, grid**2])
    y = np.array(["a", "a", "b", "b"])
    clf = KNeighborsClassifier(n_neighbors=1, metric=metric).fit(X, y)
    assert_equal(clf.predict(X), y)
    assert_equal(clf.predict(), y)


def test_kernel_derivative_of_linear_curves():
    grid = np.arange(10.0)
    X = np.vstack([grid, 2 * grid + 1, np.sin(grid / 3), np.sin(grid / 3) + grid])
    y = np.array(["a", "a", "b", "b"])
    clf = KernelClassifier(bandwidth=0.1, metric="correlation", n_derivative=1)
    clf.fit(X, y)
    assert_equal(clf.predict(X[:2]), ["a", "a"])
