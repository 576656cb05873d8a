"""Helpers for consumers of fitted cluster centers."""

import numpy as np
from sklearn.metrics import euclidean_distances
from sklearn.utils import check_array


def to_pixel(points, pixel_offset):
    """Map unit-square coordinates to pixel cells.

    Cell ``t`` covers ``[t / pixel_offset, u_t)`` on each axis where the
    upper bound ``u_t = (t + 1) / pixel_offset`` is rounded half up to two
    decimals. Coordinates outside every cell map to 0.

    Parameters
    ----------
    points : array-like of shape (n_points, 2)
        Point coordinates, normally within ``[0, 1)``.
    pixel_offset : int
        Number of pixel cells per axis.

    Returns
    -------
    pixels : ndarray of shape (n_points, 2), dtype=int64
        Pixel cell of each coordinate.
    """
    points = check_array(points, dtype=np.float64, ensure_all_finite=False)
    if pixel_offset < 1:
        raise ValueError(f"pixel_offset should be >= 1, got {pixel_offset}.")
    pixels = np.zeros(points.shape, dtype=np.int64)
    for t in range(pixel_offset):
        lower = t / pixel_offset
        upper = np.floor((lower + 1 / pixel_offset) * 100.0 + 0.5) / 100.0
        pixels[(points >= lower) & (points < upper)] = t
    return pixels


def match_centers(centers, reference, atol=3e-6):
    """Pair computed centers with reference centers regardless of labeling.

    Every center is paired with its nearest reference center. The pairing
    is accepted when it is one-to-one and every coordinate lies within
    ``atol`` of its partner.

    Parameters
    ----------
    centers : array-like of shape (n_clusters, 2)
        Computed cluster centers.
    reference : array-like of shape (n_clusters, 2)
        Reference centers.
    atol : float, default=3e-6
        Absolute tolerance per coordinate.

    Returns
    -------
    order : ndarray of shape (n_clusters,) or None
        ``reference[order[k]]`` is the partner of ``centers[k]``, ``None``
        when the centers do not match the reference.
    """
    centers = check_array(centers, dtype=np.float64, ensure_all_finite=False)
    reference = check_array(reference, dtype=np.float64)
    if centers.shape != reference.shape:
        raise ValueError(
            f"centers {centers.shape} and reference {reference.shape} "
            "should have the same shape."
        )
    if not np.all(np.isfinite(centers)):
        return None
    order = np.argmin(euclidean_distances(centers, reference), axis=1)
    if len(set(order)) != len(order):
        return None
    if not np.all(np.abs(centers - reference[order]) < atol):
        return None
    return order
