"""
Search paths of FCM and PCM
===========================

This example clusters the 7-point reference object set with FuzzyCMeans
and with PossibilisticCMeans after one and two passes, and draws the path
every cluster center travelled from its first to its final position.

It is intended for the gallery and requires matplotlib to render plots.
"""

import matplotlib.pyplot as plt
import numpy as np

from sklcmeans import FuzzyCMeans, PossibilisticCMeans
from sklcmeans.utils import to_pixel

X = np.array(
    [[0.1, 0.3], [0.1, 0.5], [0.1, 0.7], [0.7, 0.3], [0.7, 0.7], [0.8, 0.5], [0.9, 0.5]]
)

estimators = [
    ("FCM", FuzzyCMeans(n_clusters=2)),
    ("PCM (1 pass)", PossibilisticCMeans(n_clusters=2, n_passes=1)),
    ("PCM (2 passes)", PossibilisticCMeans(n_clusters=2, n_passes=2)),
]

fig, axes = plt.subplots(1, len(estimators), figsize=(4 * len(estimators), 4))
for ax, (title, est) in zip(axes, estimators):
    centers, path = est.determine_cluster_centers(X, return_path=True)
    ax.scatter(X[:, 0], X[:, 1], c=est.U_[:, 0], cmap="coolwarm", s=40, vmin=0, vmax=1)
    for k in range(centers.shape[0]):
        ax.plot(path[:, k, 0], path[:, k, 1], "-", lw=1, color="gray")
    ax.scatter(centers[:, 0], centers[:, 1], marker="x", s=80, c="black")
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_title(f"{title}, {est.n_iter_} iterations")
    print(title, "center pixels (100x100):", to_pixel(centers, 100).tolist())

plt.tight_layout()
plt.show()
