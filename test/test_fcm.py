import numpy as np
import pytest
from sklearn.exceptions import ConvergenceWarning, NotFittedError
from sklearn.utils._testing import assert_allclose, assert_array_equal

from sklcmeans import FuzzyCMeans
from sklcmeans.utils import match_centers

FCM_REFERENCE = np.array([[0.147070835, 0.5], [0.758778663, 0.5]])


def _objects():
    return np.array(
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


def _toy_data():
    rng = np.random.RandomState(0)
    X1 = rng.normal(loc=0.0, scale=0.3, size=(30, 2))
    X2 = rng.normal(loc=5.0, scale=0.3, size=(10, 2))
    return np.vstack([X1, X2])


def test_fcm_reference_centers():
    fcm = FuzzyCMeans(n_clusters=2).fit(_objects())
    assert fcm.converged_
    assert match_centers(fcm.cluster_centers_, FCM_REFERENCE) is not None


def test_fcm_reference_centers_numba():
    fcm = FuzzyCMeans(n_clusters=2, use_numba=True, numba_threads=2).fit(_objects())
    assert match_centers(fcm.cluster_centers_, FCM_REFERENCE) is not None


def test_fcm_random_init_reaches_reference():
    fcm = FuzzyCMeans(n_clusters=2, init="random", random_state=0)
    centers = fcm.determine_cluster_centers(_objects(), random=True)
    assert match_centers(centers, FCM_REFERENCE) is not None


def test_fcm_numba_thread_count_does_not_change_result():
    X = _toy_data()
    one = FuzzyCMeans(n_clusters=3, use_numba=True, numba_threads=1).fit(X)
    many = FuzzyCMeans(n_clusters=3, use_numba=True, numba_threads=4).fit(X)
    assert_array_equal(one.cluster_centers_, many.cluster_centers_)
    assert_array_equal(one.U_, many.U_)
    assert one.n_iter_ == many.n_iter_


def test_fcm_numba_matches_numpy():
    X = _toy_data()
    fcm_np = FuzzyCMeans(n_clusters=2).fit(X)
    fcm_nb = FuzzyCMeans(n_clusters=2, use_numba=True).fit(X)
    assert_allclose(fcm_np.cluster_centers_, fcm_nb.cluster_centers_, atol=1e-6)
    assert_allclose(fcm_np.U_, fcm_nb.U_, atol=1e-6)


def test_fcm_membership_bounds_and_row_sums():
    fcm = FuzzyCMeans(n_clusters=2).fit(_toy_data())
    U = fcm.U_
    assert U.shape == (40, 2)
    assert np.all(U >= 0.0) and np.all(U <= 1.0)
    assert np.allclose(U.sum(axis=1), 1.0, atol=1e-9)
    assert_array_equal(fcm.labels_, np.argmax(U, axis=1))


def test_fcm_deterministic_repeated_calls():
    X = _objects()
    fcm = FuzzyCMeans(n_clusters=2)
    first = fcm.determine_cluster_centers(X)
    U_first = fcm.U_.copy()
    second = fcm.determine_cluster_centers(X)
    assert_array_equal(first, second)
    assert_array_equal(U_first, fcm.U_)
    # accessors return the same values on every query
    assert_array_equal(fcm.cluster_centers_, fcm.cluster_centers_.copy())
    assert_array_equal(fcm.cluster_centers_, second)


def test_fcm_search_path():
    X = _objects()
    fcm = FuzzyCMeans(n_clusters=2)
    centers, path = fcm.determine_cluster_centers(X, return_path=True)
    assert path.shape == (fcm.n_iter_, 2, 2)
    assert_array_equal(path[-1], centers)
    # the first entry comes from the round-robin partition
    assert_allclose(path[0][0], X[[0, 2, 4, 6]].mean(axis=0))
    assert_allclose(path[0][1], X[[1, 3, 5]].mean(axis=0))

    fcm.determine_cluster_centers(X, return_path=False)
    assert fcm.search_path_ is None


def test_fcm_object_on_center_gets_full_membership():
    X = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 1.0], [1.0, 1.0]])
    init = np.array([[1.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.0, 1.0]])
    for use_numba in (False, True):
        fcm = FuzzyCMeans(n_clusters=2, init=init, use_numba=use_numba).fit(X)
        assert fcm.n_iter_ == 1
        assert_array_equal(fcm.cluster_centers_, [[0.0, 0.0], [1.0, 1.0]])
        assert_array_equal(fcm.U_, init)


def test_fcm_empty_cluster_propagates_nan_center():
    X = _objects()
    init = np.zeros((7, 2))
    init[:, 0] = 1.0
    for use_numba in (False, True):
        fcm = FuzzyCMeans(n_clusters=2, init=init, max_iter=1, use_numba=use_numba)
        with pytest.warns(ConvergenceWarning):
            fcm.fit(X)
        assert not fcm.converged_
        assert np.all(np.isnan(fcm.cluster_centers_[1]))
        assert_allclose(fcm.cluster_centers_[0], X.mean(axis=0))
        assert_array_equal(fcm.U_, np.ones((7, 2)))


def test_fcm_max_iter_ceiling():
    X = _objects()
    with pytest.warns(ConvergenceWarning, match="max_iter=2"):
        fcm = FuzzyCMeans(n_clusters=2, max_iter=2).fit(X)
    assert fcm.n_iter_ == 2
    assert not fcm.converged_

    unbounded = FuzzyCMeans(n_clusters=2).fit(X)
    bounded = FuzzyCMeans(n_clusters=2, max_iter=10_000).fit(X)
    assert bounded.converged_
    assert_array_equal(unbounded.cluster_centers_, bounded.cluster_centers_)
    assert_array_equal(unbounded.U_, bounded.U_)


@pytest.mark.parametrize(
    "params",
    [
        {"n_clusters": 0},
        {"tol": 0.0},
        {"tol": -1e-3},
        {"max_iter": 0},
        {"init": "k-means++"},
        {"numba_threads": 0},
    ],
)
def test_fcm_invalid_params(params):
    with pytest.raises(ValueError):
        FuzzyCMeans(**params).fit(_objects())


def test_fcm_invalid_data():
    with pytest.raises(ValueError):
        FuzzyCMeans(n_clusters=2).fit(np.empty((0, 2)))
    with pytest.raises(ValueError, match="2-dimensional"):
        FuzzyCMeans(n_clusters=2).fit(np.ones((5, 3)))
    with pytest.raises(ValueError, match="n_clusters"):
        FuzzyCMeans(n_clusters=8).fit(_objects())
    with pytest.raises(ValueError, match="init array"):
        FuzzyCMeans(n_clusters=2, init=np.ones((3, 2))).fit(_objects())


def test_fcm_predict_transform_membership():
    X = _objects()
    with pytest.raises(NotFittedError):
        FuzzyCMeans().predict(X)

    fcm = FuzzyCMeans(n_clusters=2).fit(X)
    X_new = np.array([[0.0, 0.5], [1.0, 0.5], [0.15, 0.45]])
    D = fcm.transform(X_new)
    assert D.shape == (3, 2)
    assert_array_equal(fcm.predict(X_new), np.argmin(D, axis=1))
    U = fcm.membership(X_new)
    assert np.allclose(U.sum(axis=1), 1.0)
    assert_array_equal(fcm.fit_predict(X), fcm.labels_)
    assert_array_equal(fcm.fit_membership(X), fcm.U_)
    with pytest.raises(ValueError):
        fcm.predict(np.ones((2, 3)))


def test_fcm_verbose(capsys):
    FuzzyCMeans(n_clusters=2, verbose=2).fit(_objects())
    out = capsys.readouterr().out
    assert "Initialization complete" in out
    assert "Iteration 1, partition shift" in out
    assert "Converged at iteration" in out


if __name__ == "__main__":
    test_fcm_reference_centers()
    test_fcm_reference_centers_numba()
    test_fcm_numba_thread_count_does_not_change_result()
    test_fcm_membership_bounds_and_row_sums()
    test_fcm_search_path()
    test_fcm_object_on_center_gets_full_membership()
