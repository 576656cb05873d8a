"""Possibilistic C-Means clustering of 2-D points.

Possibilistic memberships (typicalities) are not normalised across
clusters, so every cluster carries its own scale ``eta_k``: the squared
distance at which the typicality of an object drops to 0.5,

    u_ik = 1 / (1 + d_ik^2 / eta_k).

The estimator starts from a :class:`~sklcmeans.FuzzyCMeans` solution and
then runs ``n_passes`` passes. Each pass updates the centers once from the
partition matrix it starts with, estimates

    eta_k = sum_i (u_ik^2)^2 d_ik^2 / sum_i u_ik^2

from those centers, and iterates center and typicality updates with this
fixed scale until the partition matrix settles. Later passes re-estimate
the scale from the matrix the previous pass left behind.

References
----------

.. [1] R. Krishnapuram and J. M. Keller. *A Possibilistic Approach to
   Clustering*, IEEE Transactions on Fuzzy Systems, 1(2), 1993.
"""

from __future__ import annotations

from numbers import Integral

import numpy as np
from sklearn.base import _fit_context
from sklearn.utils._param_validation import Interval

from ._base import _BaseCMeans
from ._fcm import FuzzyCMeans


class PossibilisticCMeans(_BaseCMeans):
    """Possibilistic C-Means clustering.

    Parameters
    ----------
    n_clusters : int, default=2
        Number of clusters.
    n_passes : int, default=1
        Number of passes, each re-estimating the cluster scales before
        iterating the typicality updates to convergence.
    tol : float, default=1e-7
        Termination threshold on the Frobenius norm of the change of the
        partition matrix, used by the bootstrap FCM run as well.
    init : {'deterministic', 'random'} or ndarray of shape (n_samples, n_clusters), default='deterministic'
        Initial partition matrix of the bootstrap FCM run, see
        :class:`FuzzyCMeans`.
    max_iter : int or None, default=None
        Iteration ceiling applied to the bootstrap run and to every pass.
        ``None`` iterates until convergence.
    record_path : bool, default=False
        Record every center configuration, those of the bootstrap run
        first, in ``search_path_``.
    random_state : int, RandomState instance or None, default=None
        Seed of the random initial partition matrix.
    use_numba : bool, default=False
        Evaluate the updates with the parallel numba kernels.
    numba_threads : int or None, default=None
        Number of numba threads. Ignored unless ``use_numba=True``.
    verbose : int, default=0
        Verbosity level. ``1`` prints convergence summaries and the scales
        of each pass, ``2`` also prints the partition shift of every
        iteration.

    Attributes
    ----------
    cluster_centers_ : ndarray of shape (n_clusters, 2)
        Final cluster centers.
    U_ : ndarray of shape (n_samples, n_clusters)
        Final typicality matrix. Rows do not sum to 1 in general.
    scale_ : ndarray of shape (n_clusters,)
        Cluster scales estimated in the last pass.
    labels_ : ndarray of shape (n_samples,)
        Cluster with the highest typicality for each training sample.
    search_path_ : ndarray of shape (n_steps, n_clusters, 2) or None
        Centers of every iteration, bootstrap included, ``None`` unless
        ``record_path=True``.
    n_iter_ : int
        Total number of iterations, bootstrap included.
    converged_ : bool
        Whether the bootstrap run and every pass converged.
    n_features_in_ : int
        Number of features seen during :meth:`fit` (always 2).

    See Also
    --------
    FuzzyCMeans : Probabilistic variant used for the bootstrap.

    Examples
    --------
    >>> import numpy as np
    >>> from sklcmeans import PossibilisticCMeans
    >>> X = np.array([[0.1, 0.3], [0.1, 0.5], [0.1, 0.7],
    ...               [0.7, 0.3], [0.7, 0.7], [0.8, 0.5], [0.9, 0.5]])
    >>> pcm = PossibilisticCMeans(n_clusters=2, n_passes=2).fit(X)
    >>> np.sort(pcm.cluster_centers_[:, 0]).round(5)
    array([0.1    , 0.80176])
    """

    _parameter_constraints: dict = {
        **_BaseCMeans._parameter_constraints,
        "n_passes": [Interval(Integral, 1, None, closed="left")],
    }

    def __init__(
        self,
        n_clusters=2,
        *,
        n_passes=1,
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
        self.n_passes = n_passes
        self.tol = tol
        self.init = init
        self.max_iter = max_iter
        self.record_path = record_path
        self.random_state = random_state
        self.use_numba = use_numba
        self.numba_threads = numba_threads
        self.verbose = verbose

    def _membership_from_centers(self, X, kernels):
        return kernels.pcm_typicality(X, self.cluster_centers_, self.scale_)

    def _bootstrap(self, X):
        """Fit the FCM run the passes start from."""
        fcm = FuzzyCMeans(
            n_clusters=self.n_clusters,
            tol=self.tol,
            init=self.init,
            max_iter=self.max_iter,
            record_path=True,
            random_state=self.random_state,
            use_numba=self.use_numba,
            numba_threads=self.numba_threads,
            verbose=self.verbose,
        )
        return fcm.fit(X)

    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None):
        """Compute Possibilistic C-Means clustering.

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
        fcm = self._bootstrap(X)
        kernels = self._kernels()

        U = fcm.U_.copy()
        path = list(fcm.search_path_) if self.record_path else None
        n_iter = fcm.n_iter_
        converged = fcm.converged_
        scale = None

        def typicality(X, centers, U):
            # the scale is estimated once per pass, from the first centers
            nonlocal scale
            if scale is None:
                scale = kernels.scale(X, U, centers)
            return kernels.pcm_typicality(X, centers, scale)

        for p in range(1, self.n_passes + 1):
            scale = None
            centers, U, it, ok = self._run_fixed_point(
                X, U, typicality, kernels, path, f"PCM pass {p}"
            )
            n_iter += it
            converged = converged and ok
            if self.verbose:
                print(f"[PCM pass {p}] scale {np.array2string(scale, precision=6)}")

        self.cluster_centers_ = centers
        self.U_ = U
        self.scale_ = scale
        self.labels_ = np.argmax(U, axis=1)
        self.n_iter_ = n_iter
        self.converged_ = converged
        self._store_path(path)
        return self
