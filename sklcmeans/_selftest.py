"""Self-test of the c-means estimators against golden reference centers.

Clusters a fixed 7-point object set into two clusters with FCM and with PCM
after one and two passes, and prints ``ok`` or ``error`` per check
depending on whether the centers match the reference values within
``3e-6`` per coordinate (in any cluster order).

Run:

    cmeans-selftest
    cmeans-selftest --random --seed 3 --use-numba --threads 2
"""

import argparse
import platform
import sys
import time

import numpy as np

from . import __version__
from ._fcm import FuzzyCMeans
from ._pcm import PossibilisticCMeans
from .utils import match_centers

OBJECTS = np.array(
    [
        [0.1, 0.3],
        [0.1, 0.5],
        [0.1, 0.7],
        [0.7, 0.3],
        [0.7, 0.7],
        [0.8, 0.5],
        [0.9, 0.5],
    ]
)
FCM_REFERENCE = np.array([[0.147070835, 0.5], [0.758778663, 0.5]])
PCM1_REFERENCE = np.array([[0.102492638, 0.5], [0.83065648, 0.5]])
PCM2_REFERENCE = np.array([[0.10000244, 0.5], [0.801756421, 0.5]])
DELTA = 3e-6


def build_parser():
    parser = argparse.ArgumentParser(
        prog="cmeans-selftest",
        description="Check FCM and PCM against golden reference centers.",
    )
    parser.add_argument(
        "--random",
        action="store_true",
        help="use a random initial partition matrix instead of round-robin",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument("--tol", type=float, default=1e-7, help="termination threshold")
    parser.add_argument(
        "--use-numba", action="store_true", help="use the parallel numba kernels"
    )
    parser.add_argument("--threads", type=int, default=None, help="numba threads")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    t0 = time.perf_counter()
    print(f"\nsklcmeans {__version__}\n")

    common = dict(
        n_clusters=2,
        tol=args.tol,
        random_state=args.seed,
        use_numba=args.use_numba,
        numba_threads=args.threads,
    )
    checks = [
        ("FCM Test", FuzzyCMeans(**common), FCM_REFERENCE),
        (
            "PCM Test (1st pass)",
            PossibilisticCMeans(n_passes=1, **common),
            PCM1_REFERENCE,
        ),
        (
            "PCM Test (2nd pass)",
            PossibilisticCMeans(n_passes=2, **common),
            PCM2_REFERENCE,
        ),
    ]

    passed = True
    for name, estimator, reference in checks:
        centers = estimator.determine_cluster_centers(OBJECTS, random=args.random)
        ok = match_centers(centers, reference, atol=DELTA) is not None
        passed = passed and ok
        print(f"{name}: {'ok' if ok else 'error'}")

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    print(f"{elapsed_ms:.0f} ms")
    print(f"{platform.system()} {platform.release()} {platform.machine()}")
    return 0 if passed else 1


if __name__ == "__main__":
    sys.exit(main())
