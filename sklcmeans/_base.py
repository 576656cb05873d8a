"""Common machinery of the c-means estimators.

:class:`_BaseCMeans` holds what :class:`~sklcmeans.FuzzyCMeans` and
:class:`~sklcmeans.PossibilisticCMeans` share: parameter constraints, input
validation, partition matrix initialisation, the fixed-point loop and the
prediction helpers. Subclasses provide ``fit`` and
``_membership_from_centers``.
"""

from __future__ import annotations

import warnings
from numbers import Integral, Real

import numpy as np
from sklearn.base import BaseEstimator, ClusterMixin, TransformerMixin
from sklearn.exceptions import ConvergenceWarning
from sklearn.utils._param_validation import Interval, StrOptions
from sklearn.utils.validation import check_is_fitted, validate_data

from ._kernels import _pairwise_distance, get_kernels


class _BaseCMeans(TransformerMixin, ClusterMixin, BaseEstimator):
    """Base class for 2-D c-means estimators with fuzzifier ``m = 2``."""

    _parameter_constraints: dict = {
        "n_clusters": [Interval(Integral, 1, None, closed="left")],
        "tol": [Interval(Real, 0, None, closed="neither")],
        "init": [StrOptions({"deterministic", "random"}), np.ndarray],
        "max_iter": [None, Interval(Integral, 1, None, closed="left")],
        "record_path": [bool],
        "random_state": ["random_state"],
        "use_numba": [bool],
        "numba_threads": [None, Interval(Integral, 1, None, closed="left")],
        "verbose": [Interval(Integral, 0, None, closed="left")],
    }

    # ------------------------------------------------------------------
    def _check_data(self, X, reset):
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=reset,
            dtype=np.float64,
            order="C",
            accept_large_sparse=False,
        )
        if X.shape[1] != 2:
            raise ValueError(
                f"{type(self).__name__} clusters 2-dimensional points, "
                f"got X with {X.shape[1]} features."
            )
        if reset and X.shape[0] < self.n_clusters:
            raise ValueError(
                f"n_samples={X.shape[0]} should be >= "
                f"n_clusters={self.n_clusters}."
            )
        return X

    def _kernels(self):
        return get_kernels(self.use_numba, self.numba_threads)

    def _init_partition(self, X, rng):
        """Build the initial partition matrix.

        Parameters
        ----------
        X : ndarray of shape (n_samples, 2)
            Validated object set.
        rng : RandomState
            Random generator, used by ``init='random'`` only.

        Returns
        -------
        U : ndarray of shape (n_samples, n_clusters)
            Initial partition matrix.
        """
        n_samples = X.shape[0]
        K = self.n_clusters
        if isinstance(self.init, np.ndarray):
            U = np.array(self.init, dtype=np.float64, order="C")
            if U.shape != (n_samples, K):
                raise ValueError(
                    "init array should have shape (n_samples, n_clusters) = "
                    f"{(n_samples, K)}, got {U.shape}."
                )
            return U
        if self.init == "random":
            # rows are not normalised, the center update divides by the
            # column weight anyway
            return rng.random_sample((n_samples, K))
        # round-robin hard assignment
        U = np.zeros((n_samples, K), dtype=np.float64)
        U[np.arange(n_samples), np.arange(n_samples) % K] = 1.0
        return U

    def _run_fixed_point(self, X, U, update, kernels, path, label):
        """Alternate center and partition updates until the matrix settles.

        Parameters
        ----------
        X : ndarray of shape (n_samples, 2)
            Object set.
        U : ndarray of shape (n_samples, n_clusters)
            Partition matrix entering the loop.
        update : callable
            ``update(X, centers, U) -> U_new`` computing the next partition
            matrix from the freshly updated centers and the current matrix.
        kernels : Kernels
            Backend kernel set.
        path : list or None
            When a list, every center configuration is appended to it.
        label : str
            Prefix of the progress messages.

        Returns
        -------
        centers : ndarray of shape (n_clusters, 2)
        U : ndarray of shape (n_samples, n_clusters)
        n_iter : int
        converged : bool
        """
        verbose = self.verbose
        n_iter = 0
        while True:
            centers = kernels.centers(X, U)
            if path is not None:
                path.append(centers.copy())
            U_new = update(X, centers, U)
            shift = kernels.shift(U_new, U)
            U = U_new
            n_iter += 1
            if verbose > 1:
                print(f"[{label}] Iteration {n_iter}, partition shift {shift:<.3e}.")
            if shift < self.tol:
                if verbose:
                    print(
                        f"[{label}] Converged at iteration {n_iter} "
                        f"(partition shift {shift:<.3e} < tol {self.tol:<.3e})."
                    )
                return centers, U, n_iter, True
            if self.max_iter is not None and n_iter >= self.max_iter:
                warnings.warn(
                    f"{label} did not converge within max_iter={self.max_iter} "
                    f"iterations (partition shift {shift:.3e} >= tol "
                    f"{self.tol:.3e}).",
                    ConvergenceWarning,
                    stacklevel=3,
                )
                return centers, U, n_iter, False

    def _store_path(self, path):
        if path is None:
            self.search_path_ = None
        else:
            self.search_path_ = np.stack(path)

    # ------------------------------------------------------------------
    def determine_cluster_centers(self, X, random=False, return_path=False):
        """Run the clustering on ``X`` and return the cluster centers.

        Sets ``init`` to ``'random'`` or ``'deterministic'`` and
        ``record_path`` to ``return_path`` before fitting. Every call starts
        over from a fresh initial partition matrix.

        Parameters
        ----------
        X : array-like of shape (n_samples, 2)
            Object set.
        random : bool, default=False
            Draw the initial partition matrix uniformly at random instead of
            using the round-robin assignment.
        return_path : bool, default=False
            Also return the search path.

        Returns
        -------
        centers : ndarray of shape (n_clusters, 2)
            Final cluster centers.
        search_path : ndarray of shape (n_steps, n_clusters, 2)
            Every center configuration in chronological order. Only returned
            when ``return_path`` is true.
        """
        self.set_params(
            init="random" if random else "deterministic",
            record_path=bool(return_path),
        )
        self.fit(X)
        centers = self.cluster_centers_.copy()
        if return_path:
            return centers, self.search_path_.copy()
        return centers

    def predict(self, X):
        """Index of the cluster with the highest membership for each sample."""
        return np.argmax(self.membership(X), axis=1)

    def transform(self, X):
        """Euclidean distances of the samples to the cluster centers."""
        check_is_fitted(self, "cluster_centers_")
        X = self._check_data(X, reset=False)
        return _pairwise_distance(X, self.cluster_centers_)

    def membership(self, X):
        """Partition matrix of ``X`` with respect to the fitted model.

        Parameters
        ----------
        X : array-like of shape (n_samples, 2)
            Samples.

        Returns
        -------
        U : ndarray of shape (n_samples, n_clusters)
            Membership (FCM) or typicality (PCM) degrees.
        """
        check_is_fitted(self, "cluster_centers_")
        X = self._check_data(X, reset=False)
        return self._membership_from_centers(X, self._kernels())

    def fit_predict(self, X, y=None):
        """Fit the model and return the training labels."""
        return self.fit(X, y).labels_

    def fit_membership(self, X, y=None):
        """Fit the model and return the training partition matrix."""
        return self.fit(X, y).U_
