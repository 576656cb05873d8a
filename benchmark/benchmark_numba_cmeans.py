"""Numba acceleration benchmark for FuzzyCMeans and PossibilisticCMeans.

Measures wall-clock speed of both estimators with the NumPy kernels and
with the parallel numba kernels at several thread counts, on a synthetic
2-D dataset with deterministic initialisation.

Run:

    python benchmark/benchmark_numba_cmeans.py
"""

import statistics
import time

import numpy as np
from numba import config
from sklearn.datasets import make_blobs

from sklcmeans import FuzzyCMeans, PossibilisticCMeans

"""
Benchmark: NumPy kernels vs numba kernels.

Key Points:
- Deterministic (round-robin) initialisation, so every run does the same work.
- One unmeasured JIT warm-up run precedes the timings.
- Results must be identical for every numba thread count.
"""


def make_data(n_samples=20000, n_clusters=5, seed=42):
    X, y = make_blobs(
        n_samples=n_samples,
        centers=n_clusters,
        cluster_std=0.6,
        center_box=(-10.0, 10.0),
        random_state=seed,
    )
    return X, y


def time_run(estimator_cls, X, n_clusters, repeats=3, **params):
    durations = []
    model = None
    for r in range(repeats):
        model = estimator_cls(n_clusters=n_clusters, tol=1e-5, **params)
        t0 = time.time()
        model.fit(X)
        t1 = time.time()
        durations.append(t1 - t0)
    return {
        'durations': durations,
        'mean': statistics.mean(durations),
        'std': statistics.pstdev(durations) if len(durations) > 1 else 0.0,
        'n_iter': model.n_iter_,
        'centers': model.cluster_centers_,
    }


def warmup(X, n_clusters):
    print('[Warmup] Running one unmeasured JIT warm-up (numba).')
    PossibilisticCMeans(n_clusters=n_clusters, tol=1e-2, use_numba=True).fit(X[:500])


def main():
    X, _ = make_data()
    n_clusters = 5
    warmup(X, n_clusters)

    threads = sorted({1, max(1, config.NUMBA_NUM_THREADS // 2), config.NUMBA_NUM_THREADS})
    for estimator_cls in (FuzzyCMeans, PossibilisticCMeans):
        name = estimator_cls.__name__
        print(f'\n=== {name} numba Benchmark ===')
        header = f"{'Variant':18s} {'Mean(s)':>10s} {'Std(s)':>9s} {'Iter':>6s}  Durations"
        print(header)
        print('-' * len(header))
        base = time_run(estimator_cls, X, n_clusters)
        print(f"{'NumPy':18s} {base['mean']:10.4f} {base['std']:9.4f} {base['n_iter']:6d}  {base['durations']}")
        reference = None
        for n_threads in threads:
            res = time_run(estimator_cls, X, n_clusters, use_numba=True, numba_threads=n_threads)
            label = f'numba x{n_threads}'
            print(f"{label:18s} {res['mean']:10.4f} {res['std']:9.4f} {res['n_iter']:6d}  {res['durations']}")
            if reference is None:
                reference = res['centers']
            elif not np.array_equal(reference, res['centers']):
                print('[Warn] Centers differ between thread counts.')
            if res['mean'] > 0:
                print(f"{'':18s} speedup vs NumPy: {base['mean'] / res['mean']:.2f}x")

    print('\nDone.')


if __name__ == '__main__':
    main()
