# Authors: Isak Samsten
# License: BSD 3 clause
"""Base classes for all estimators."""

import warnings

from sklearn.base import BaseEstimator as SklearnBaseEstimator

from . import __version__
from .exceptions import ShapeMismatchError
from .utils.validation import _num_timesteps, check_array, check_X_y

__all__ = [
    "BaseEstimator",
]


class BaseEstimator(SklearnBaseEstimator):
    """Base estimator for all classifunc estimators."""

    # Same additions as scikit-learn
    def __getstate__(self):
        """Get the state of the estimator.

        Add a new element to the dict we return `_classifunc_version` which
        is we use to warn when setting the state.

        Returns
        -------
        dict
            The state
        """
        try:
            state = super().__getstate__()
        except AttributeError:
            state = self.__dict__.copy()

        if type(self).__module__.startswith("classifunc."):
            return dict(state.items(), _classifunc_version=__version__)
        else:
            return state

    # Same check as scikit-learn
    def __setstate__(self, state):
        """Set the state of the estimator.

        Gives a warning if a user tries to unpickle a object serialized
        from a older version of classifunc.

        Parameters
        ----------
        state : The state
        """
        if type(self).__module__.startswith("classifunc."):
            pickle_version = state.pop("_classifunc_version", "pre-0.1")
            if pickle_version != __version__:
                warnings.warn(
                    "Trying to unpickle estimator {0} from version {1} when "
                    "using version {2}. This might lead to breaking code or "
                    "invalid results. Use at your own risk.".format(
                        self.__class__.__name__, pickle_version, __version__
                    ),
                    UserWarning,
                )
        try:
            super().__setstate__(state)
        except AttributeError:
            self.__dict__.update(state)

    # Disable feature names since the columns of a curve matrix are grid points
    def _check_feature_names(self, X, *, reset):
        pass

    def _check_n_features(self, X, reset):
        self._check_n_timesteps(X, reset)

    def _check_n_timesteps(self, X, reset):
        n_timesteps = _num_timesteps(X)
        if reset:
            self.n_timesteps_in_ = n_timesteps
            self.n_dims_in_ = 1

            # Set n_features_in_ for compatibility with scikit-learn
            self.n_features_in_ = n_timesteps
            return

        if not hasattr(self, "n_timesteps_in_"):
            # Skip this check if the expected number of timesteps was not
            # recorded by calling fit first.
            return

        if n_timesteps != self.n_timesteps_in_:
            raise ShapeMismatchError(
                f"X has {n_timesteps} timesteps, but {self.__class__.__name__} "
                f"is expecting {self.n_timesteps_in_} timesteps as input."
            )

    # We override sklearn but delegate to classifunc's check_array
    # and check_X_y
    def _validate_data(self, X, y="no_validation", reset=True, **check_params):
        check_params = {"estimator": self, **check_params}
        if isinstance(y, str) and y == "no_validation":
            X = check_array(X, input_name="X", **check_params)
            out = X
        else:
            X, y = check_X_y(X, y, **check_params)
            out = X, y

        self._check_n_timesteps(X, reset=reset)
        return out
