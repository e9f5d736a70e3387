import numpy as np
import pytest


def _make_curves(n_samples, n_timesteps, random_state):
    rng = np.random.RandomState(random_state)
    grid = np.linspace(0, 1, n_timesteps)
    y = np.repeat(["cos", "sin"], n_samples // 2)
    X = np.empty((y.shape[0], n_timesteps))
    for i, label in enumerate(y):
        f = np.sin if label == "sin" else np.cos
        X[i] = f(2 * np.pi * grid) + rng.normal(scale=0.01, size=n_timesteps)
    return X, y, grid


@pytest.fixture(scope="session")
def curves():
    X_train, y_train, grid = _make_curves(20, 50, 1)
    X_test, y_test, _ = _make_curves(10, 50, 2)
    return X_train, X_test, y_train, y_test, grid


@pytest.fixture(scope="session")
def X_train(curves):
    return curves[0]


@pytest.fixture(scope="session")
def X_test(curves):
    return curves[1]


@pytest.fixture(scope="session")
def y_train(curves):
    return curves[2]


@pytest.fixture(scope="session")
def y_test(curves):
    return curves[3]


@pytest.fixture(scope="session")
def grid(curves):
    return curves[4]
