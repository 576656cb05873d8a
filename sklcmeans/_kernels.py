"""Update kernels shared by the c-means estimators.

Every step of the fixed-point iteration is available in two backends with
identical semantics:

* a vectorised NumPy implementation (single thread, the default);
* a numba implementation compiled with ``parallel=True`` whose ``prange``
  loops run on numba's thread pool.

Each kernel writes a fresh output array and returns only after all workers
finished, so successive calls form the barrier between the center update,
scale estimation, membership update and convergence metric. Workers own
disjoint rows of the output: the center update is parallel over clusters,
the membership and typicality updates over objects and the scale estimate
over clusters. Reductions always run over the object index in order, which
keeps the numba results identical for any number of threads.

NaN cells of a partition matrix (an object lying exactly on a center, or a
NaN center left by an empty cluster) are replaced by ``1.0``.
"""

from __future__ import annotations

from collections import namedtuple

import numpy as np
from numba import config, njit, prange, set_num_threads

Kernels = namedtuple(
    "Kernels",
    ["centers", "fcm_membership", "pcm_typicality", "scale", "shift"],
)

###############################################################################
# Shared primitives


def _pairwise_distance(X, centers):
    """Euclidean distances, shape ``(n_samples, n_clusters)``.

    Computed from coordinate differences so that an object lying on a center
    gives an exact zero.
    """
    diff = X[:, np.newaxis, :] - centers[np.newaxis, :, :]
    return np.sqrt(np.sum(diff * diff, axis=2))


def _partition_shift(U_new, U_old):
    """Frobenius norm of the change between two partition matrices."""
    return float(np.linalg.norm(U_new - U_old))


###############################################################################
# NumPy backend


def _update_centers_numpy(X, U):
    W = U * U
    with np.errstate(divide="ignore", invalid="ignore"):
        return (W.T @ X) / np.sum(W, axis=0)[:, np.newaxis]


def _fcm_membership_numpy(X, centers):
    D = _pairwise_distance(X, centers)
    with np.errstate(divide="ignore", invalid="ignore"):
        inv = 1.0 / D
        U = inv / np.sum(inv, axis=1, keepdims=True)
    U[np.isnan(U)] = 1.0
    return U


def _pcm_typicality_numpy(X, centers, scale):
    D2 = _pairwise_distance(X, centers) ** 2
    with np.errstate(divide="ignore", invalid="ignore"):
        U = 1.0 / (1.0 + D2 / scale[np.newaxis, :])
    U[np.isnan(U)] = 1.0
    return U


def _estimate_scale_numpy(X, U, centers):
    D2 = _pairwise_distance(X, centers) ** 2
    W = U * U
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.sum(W * W * D2, axis=0) / np.sum(W, axis=0)


###############################################################################
# numba backend
#
# error_model="numpy" makes x / 0.0 produce inf or NaN instead of raising,
# and fastmath stays off since it would drop the NaN checks.


@njit(parallel=True, error_model="numpy")
def _update_centers_numba(X, U):  # pragma: no cover - compiled
    n_samples, n_clusters = U.shape
    centers = np.empty((n_clusters, 2), dtype=np.float64)
    for k in prange(n_clusters):
        sum_x = 0.0
        sum_y = 0.0
        sum_w = 0.0
        for i in range(n_samples):
            w = U[i, k] * U[i, k]
            sum_x += w * X[i, 0]
            sum_y += w * X[i, 1]
            sum_w += w
        centers[k, 0] = sum_x / sum_w
        centers[k, 1] = sum_y / sum_w
    return centers


@njit(parallel=True, error_model="numpy")
def _fcm_membership_numba(X, centers):  # pragma: no cover - compiled
    n_samples = X.shape[0]
    n_clusters = centers.shape[0]
    U = np.empty((n_samples, n_clusters), dtype=np.float64)
    for i in prange(n_samples):
        inv = np.empty(n_clusters, dtype=np.float64)
        total = 0.0
        for k in range(n_clusters):
            dx = X[i, 0] - centers[k, 0]
            dy = X[i, 1] - centers[k, 1]
            inv[k] = 1.0 / np.sqrt(dx * dx + dy * dy)
            total += inv[k]
        for k in range(n_clusters):
            u = inv[k] / total
            if np.isnan(u):
                u = 1.0
            U[i, k] = u
    return U


@njit(parallel=True, error_model="numpy")
def _pcm_typicality_numba(X, centers, scale):  # pragma: no cover - compiled
    n_samples = X.shape[0]
    n_clusters = centers.shape[0]
    U = np.empty((n_samples, n_clusters), dtype=np.float64)
    for i in prange(n_samples):
        for k in range(n_clusters):
            dx = X[i, 0] - centers[k, 0]
            dy = X[i, 1] - centers[k, 1]
            d = np.sqrt(dx * dx + dy * dy)
            u = 1.0 / (1.0 + d * d / scale[k])
            if np.isnan(u):
                u = 1.0
            U[i, k] = u
    return U


@njit(parallel=True, error_model="numpy")
def _estimate_scale_numba(X, U, centers):  # pragma: no cover - compiled
    n_samples, n_clusters = U.shape
    scale = np.empty(n_clusters, dtype=np.float64)
    for k in prange(n_clusters):
        num = 0.0
        den = 0.0
        for i in range(n_samples):
            dx = X[i, 0] - centers[k, 0]
            dy = X[i, 1] - centers[k, 1]
            d = np.sqrt(dx * dx + dy * dy)
            w = U[i, k] * U[i, k]
            num += w * w * d * d
            den += w
        scale[k] = num / den
    return scale


###############################################################################
# Backend selection

NUMPY_KERNELS = Kernels(
    centers=_update_centers_numpy,
    fcm_membership=_fcm_membership_numpy,
    pcm_typicality=_pcm_typicality_numpy,
    scale=_estimate_scale_numpy,
    shift=_partition_shift,
)

NUMBA_KERNELS = Kernels(
    centers=_update_centers_numba,
    fcm_membership=_fcm_membership_numba,
    pcm_typicality=_pcm_typicality_numba,
    scale=_estimate_scale_numba,
    shift=_partition_shift,
)


def get_kernels(use_numba=False, numba_threads=None):
    """Return the kernel set for the requested backend.

    Parameters
    ----------
    use_numba : bool, default=False
        Select the parallel numba kernels instead of the NumPy ones.
    numba_threads : int or None, default=None
        Size of the numba thread pool used by subsequent parallel regions
        of the calling thread. Values above the pool size numba was started
        with are capped to it. Ignored for the NumPy backend.

    Returns
    -------
    kernels : Kernels
        Named tuple of the update functions.
    """
    if not use_numba:
        return NUMPY_KERNELS
    if numba_threads is not None:
        set_num_threads(min(int(numba_threads), config.NUMBA_NUM_THREADS))
    return NUMBA_KERNELS
