"""Public API for the :mod:`sklcmeans` package.

The package exposes fixed-point c-means estimators for 2-dimensional point
sets:

* :class:`~sklcmeans.FuzzyCMeans` – Fuzzy C-Means with fuzzifier ``m = 2``.
* :class:`~sklcmeans.PossibilisticCMeans` – Possibilistic C-Means
    bootstrapped from a Fuzzy C-Means solution, with per-cluster scales
    re-estimated over ``n_passes`` passes.

All estimators follow the scikit-learn estimator API (``fit``, ``predict``,
``transform``) and provide ``determine_cluster_centers`` returning the
centers (and optionally the search path), plus ``membership`` and
``fit_membership`` returning partition matrices.
"""

from ._fcm import FuzzyCMeans
from ._pcm import PossibilisticCMeans

__all__ = ["FuzzyCMeans", "PossibilisticCMeans"]

# Light-weight version attribute for now; adjust if setuptools_scm is adopted.
__version__ = "0.1.0"
