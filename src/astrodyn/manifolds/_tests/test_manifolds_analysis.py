import numpy as np
import pytest

from astrodyn.exceptions import InvalidParameterError
from astrodyn.manifolds import (
    eigenvalue_decomposition,
    libration_stability_analysis,
    stability_indices,
    surface_of_section,
)

MU_EM = 0.012150584395829193


def test_discrete_classification():
    A = np.diag([4.0, 0.25, 1.0, 1.0, 1.00001, 0.5])
    sn, un, cn, Ws, Wu, Wc = eigenvalue_decomposition(A, discrete=1)
    assert sorted(sn.real) == [0.25, 0.5]
    assert un.real.tolist() == [4.0]
    assert len(cn) == 3
    assert Ws.shape == (6, 2) and Wu.shape == (6, 1) and Wc.shape == (6, 3)


def test_continuous_classification():
    A = np.diag([-2.0, 3.0, 0.0, 1e-6, -1e-6, 5.0])
    sn, un, cn, *_ = eigenvalue_decomposition(A, discrete=0)
    assert sn.real.tolist() == [-2.0]
    assert sorted(un.real) == [3.0, 5.0]
    assert len(cn) == 3


def test_collinear_point_is_saddle_center():
    sn, un, cn, *_ = libration_stability_analysis(MU_EM, 1)
    assert len(sn) == 1 and len(un) == 1 and len(cn) == 4
    assert un[0].real == pytest.approx(-sn[0].real)
    assert np.allclose(cn.real, 0.0, atol=1e-12)


def test_stability_indices_of_symplectic_matrix():
    lam, theta = 50.0, 0.7
    c, s = np.cos(theta), np.sin(theta)
    M = np.zeros((6, 6))
    M[0, 0], M[1, 1] = lam, 1 / lam
    M[2:4, 2:4] = [[1.0, 0.3], [0.0, 1.0]]
    M[4:, 4:] = [[c, -s], [s, c]]

    nu, eigvals, eigvecs = stability_indices(M)
    assert nu.shape == (3,)
    assert nu[0] == pytest.approx(1.0)
    assert nu[1] == pytest.approx(0.5 * (lam + 1 / lam))
    assert nu[2] == pytest.approx(np.cos(theta))
    assert eigvals.shape == (6,) and eigvecs.shape == (6, 6)


def test_surface_of_section_crossings():
    mu = 0.1
    t = np.linspace(0.0, 2 * np.pi, 2001)
    X = np.zeros((t.size, 6))
    X[:, 0] = (1 - mu) + 0.2 * np.cos(t)
    X[:, 1] = 0.2 * np.sin(t)

    pts, times = surface_of_section(X, t, mu, M=2)
    np.testing.assert_allclose(times, [np.pi / 2, 3 * np.pi / 2], atol=1e-6)
    np.testing.assert_allclose(pts[:, 0], 1 - mu, atol=1e-12)

    upper, t_upper = surface_of_section(X, t, mu, M=2, C=1)
    assert upper.shape == (1, 6)
    assert upper[0, 1] > 0

    none, t_none = surface_of_section(X, t, mu, M=1)
    assert none.shape == (0, 6) and t_none.size == 0


def test_surface_of_section_validation():
    X = np.zeros((3, 6))
    with pytest.raises(InvalidParameterError):
        surface_of_section(X, np.arange(3.0), MU_EM, M=5)
    with pytest.raises(InvalidParameterError):
        surface_of_section(X, np.arange(3.0), MU_EM, C=2)
    with pytest.raises(InvalidParameterError):
        surface_of_section(X, np.arange(4.0), MU_EM)
