"""Fuzzy C-Means clustering of 2-D points.

The estimator alternates two updates with fuzzifier ``m = 2``:

* cluster centers as the membership-squared weighted mean of the objects,
  ``v_k = sum_i u_ik^2 x_i / sum_i u_ik^2``;
* memberships from normalised inverse distances,
  ``u_ik = (1 / d_ik) / sum_j (1 / d_ij)``,

until the Frobenius norm of the change of the partition matrix drops below
``tol``. An object lying exactly on a center gets membership ``1.0`` there.

References
----------

.. [1] J. C. Bezdek. *Pattern Recognition with Fuzzy Objective Function
   Algorithms*, Plenum Press, 1981.
"""

from __future__ import annotations

import numpy as np
from sklearn.base import _fit_context
from sklearn.utils import check_random_state

from ._base import _BaseCMeans


class FuzzyCMeans(_BaseCMeans):
    """Fuzzy C-Means clustering.

    Parameters
    ----------
    n_clusters : int, default=2
        Number of clusters.
    tol : float, default=1e-7
        Termination threshold on the Frobenius norm of the change of the
        partition matrix between two iterations.
    init : {'deterministic', 'random'} or ndarray of shape (n_samples, n_clusters), default='deterministic'
        Initial partition matrix.
        * 'deterministic' : object ``i`` gets membership 1 in cluster
          ``i % n_clusters`` and 0 elsewhere. Reproducible.
        * 'random' : memberships drawn uniformly from [0, 1).
        * ndarray : user provided partition matrix.
    max_iter : int or None, default=None
        Iteration ceiling. ``None`` iterates until convergence, however
        long that takes. When the ceiling is hit a
        :class:`~sklearn.exceptions.ConvergenceWarning` is emitted and
        ``converged_`` is ``False``.
    record_path : bool, default=False
        Record every center configuration in ``search_path_``.
    random_state : int, RandomState instance or None, default=None
        Seed of the random initial partition matrix.
    use_numba : bool, default=False
        Evaluate the updates with the parallel numba kernels.
    numba_threads : int or None, default=None
        Number of numba threads. Ignored unless ``use_numba=True``.
    verbose : int, default=0
        Verbosity level. ``1`` prints the convergence summary, ``2`` also
        prints the partition shift of every iteration.

    Attributes
    ----------
    cluster_centers_ : ndarray of shape (n_clusters, 2)
        Final cluster centers.
    U_ : ndarray of shape (n_samples, n_clusters)
        Final partition matrix. Rows sum to 1.
    labels_ : ndarray of shape (n_samples,)
        Cluster with the highest membership for each training sample.
    search_path_ : ndarray of shape (n_iter_, n_clusters, 2) or None
        Centers of every iteration in chronological order, ``None`` unless
        ``record_path=True``.
    n_iter_ : int
        Number of iterations run.
    converged_ : bool
        Whether the partition shift fell below ``tol``.
    n_features_in_ : int
        Number of features seen during :meth:`fit` (always 2).

    See Also
    --------
    PossibilisticCMeans : Possibilistic variant bootstrapped from this one.

    Examples
    --------
    >>> import numpy as np
    >>> from sklcmeans import FuzzyCMeans
    >>> X = np.array([[0.1, 0.3], [0.1, 0.5], [0.1, 0.7],
    ...               [0.7, 0.3], [0.7, 0.7], [0.8, 0.5], [0.9, 0.5]])
    >>> fcm = FuzzyCMeans(n_clusters=2).fit(X)
    >>> np.sort(fcm.cluster_centers_[:, 0]).round(6)
    array([0.147071, 0.758779])
    """

    def __init__(
        self,
        n_clusters=2,
        *,
        tol=1e-7,
        init="deterministic",
        max_iter=None,
        record_path=False,
        random_state=None,
        use_numba=False,
        numba_threads=None,
        verbose=0,
    ):
        self.n_clusters = n_clusters
        self.tol = tol
        self.init = init
        self.max_iter = max_iter
        self.record_path = record_path
        self.random_state = random_state
        self.use_numba = use_numba
        self.numba_threads = numba_threads
        self.verbose = verbose

    def _membership_from_centers(self, X, kernels):
        return kernels.fcm_membership(X, self.cluster_centers_)

    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None):
        """Compute Fuzzy C-Means clustering.

        Parameters
        ----------
        X : array-like of shape (n_samples, 2)
            Object set.
        y : Ignored
            Present for API consistency.

        Returns
        -------
        self : object
            Fitted estimator.
        """
        X = self._check_data(X, reset=True)
        rng = check_random_state(self.random_state)
        kernels = self._kernels()
        U = self._init_partition(X, rng)
        if self.verbose:
            print("[FCM] Initialization complete")

        path = [] if self.record_path else None
        centers, U, n_iter, converged = self._run_fixed_point(
            X,
            U,
            lambda X, centers, U: kernels.fcm_membership(X, centers),
            kernels,
            path,
            "FCM",
        )

        self.cluster_centers_ = centers
        self.U_ = U
        self.labels_ = np.argmax(U, axis=1)
        self.n_iter_ = n_iter
        self.converged_ = converged
        self._store_path(path)
        return self
