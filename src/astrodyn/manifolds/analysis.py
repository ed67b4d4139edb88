"""
Stability analysis for equilibria and periodic orbits of the CR3BP.

Provides the classification of eigenvalues of a Jacobian or monodromy matrix
into stable, unstable and center subspaces, the stability indices of a
periodic orbit, and Poincaré sections of propagated trajectories.
"""

import logging

import numpy as np

from astrodyn.config import STABILITY_DELTA
from astrodyn.core.lagrange_points import lagrange_point
from astrodyn.dynamics.equations import jacobian_crtbp
from astrodyn.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


def _zero_small_imag_part(values, tol=1e-12):
    """Drop imaginary parts that are negligible relative to the magnitude."""
    values = np.asarray(values, dtype=np.complex128)
    small = np.abs(values.imag) <= tol * np.maximum(np.abs(values), 1.0)
    return np.where(small, values.real + 0j, values)


def eigenvalue_decomposition(A, discrete=0, delta=STABILITY_DELTA):
    """
    Compute and classify eigenvalues and eigenvectors of a matrix into stable,
    unstable, and center subspaces.

    Parameters
    ----------
    A : ndarray
        Square matrix to analyze
    discrete : int, optional
        Classification mode:
        * 0: continuous-time system (classify by real part sign)
        * 1: discrete-time system (classify by magnitude relative to 1)
    delta : float, optional
        Tolerance for classification

    Returns
    -------
    tuple
        (sn, un, cn, Ws, Wu, Wc) containing:
        - sn: stable eigenvalues
        - un: unstable eigenvalues
        - cn: center eigenvalues
        - Ws: eigenvectors spanning stable subspace
        - Wu: eigenvectors spanning unstable subspace
        - Wc: eigenvectors spanning center subspace
    """
    A = np.asarray(A, dtype=np.float64)
    eigvals, eigvecs = np.linalg.eig(A)
    eigvals = _zero_small_imag_part(eigvals, tol=1e-14)

    if discrete == 1:
        measure = np.abs(eigvals) - 1.0
    else:
        measure = eigvals.real

    stable = measure < -delta
    unstable = measure > delta
    center = ~(stable | unstable)

    # Eigenvectors are returned with unit norm
    eigvecs = eigvecs.astype(np.complex128)

    return (
        eigvals[stable], eigvals[unstable], eigvals[center],
        eigvecs[:, stable], eigvecs[:, unstable], eigvecs[:, center]
    )


def libration_stability_analysis(mu, L_i, discrete=0, delta=STABILITY_DELTA):
    """
    Analyze the stability properties of a libration point.

    Returns the (sn, un, cn, Ws, Wu, Wc) tuple of :func:`eigenvalue_decomposition`
    for the Jacobian of the vector field at ``L_i``.
    """
    x, y, z = lagrange_point(mu, L_i)
    A = jacobian_crtbp(x, y, z, mu)
    return eigenvalue_decomposition(A, discrete, delta)


def stability_indices(M):
    """
    Compute stability indices from a monodromy matrix.

    Parameters
    ----------
    M : array_like
        6x6 monodromy matrix from a periodic orbit

    Returns
    -------
    tuple
        (nu, eigvals, eigvecs) containing:
        - nu: Array of 3 stability indices
        - eigvals: Array of 6 eigenvalues of the monodromy matrix, sorted by
          decreasing distance of their magnitude from 1 within each pair
        - eigvecs: Matrix of eigenvectors corresponding to the eigenvalues

    Notes
    -----
    The monodromy matrix of a Hamiltonian system is symplectic, so its
    eigenvalues come in reciprocal pairs (λ, 1/λ) and one pair sits at 1. The
    stability index of a pair is ν = (λ + 1/λ)/2; the orbit is linearly stable
    when every index satisfies |ν| ≤ 1.
    """
    eigvals, eigvecs = np.linalg.eig(np.asarray(M, dtype=np.float64))

    # Pair each eigenvalue with the one closest to its reciprocal
    remaining = list(range(len(eigvals)))
    pairs = []
    while remaining:
        i = remaining.pop(0)
        j = min(remaining, key=lambda k: abs(eigvals[k] * eigvals[i] - 1.0))
        remaining.remove(j)
        if abs(eigvals[j]) > abs(eigvals[i]):
            i, j = j, i
        pairs.append((i, j))

    # Trivial pair first, then by decreasing |ν|
    def index_of(pair):
        lam = eigvals[pair[0]]
        return 0.5 * (lam + 1.0 / lam)

    pairs.sort(key=lambda p: (abs(eigvals[p[0]] - 1.0) > 1e-3, -abs(index_of(p))))
    if abs(eigvals[pairs[0][0]] - 1.0) > 1e-3:
        logger.warning(f"No eigenvalue pair at 1; monodromy may not belong to a periodic orbit: {eigvals}")

    order = [k for pair in pairs for k in pair]
    nu = np.array([index_of(p) for p in pairs], dtype=np.complex128)
    return nu, eigvals[order], eigvecs[:, order]


_SECTION_PLANES = {
    0: lambda mu: 0.0,
    1: lambda mu: -mu,
    2: lambda mu: 1.0 - mu,
}


def surface_of_section(X, T, mu, M=2, C=0):
    """
    Compute the surface-of-section for the CR3BP at specified plane crossings.

    Parameters
    ----------
    X : ndarray
        State trajectory with shape (n_points, 6)
    T : ndarray
        Time stamps corresponding to the points in the state trajectory
    mu : float
        CR3BP mass parameter
    M : {0, 1, 2}, optional
        Determines which plane to use for the section:
        * 0: x = 0 (center-of-mass plane)
        * 1: x = -mu (larger primary plane)
        * 2: x = 1-mu (smaller primary plane) (default)
    C : {-1, 0, 1}, optional
        Crossing condition on y-coordinate:
        * 1: accept crossings with y >= 0
        * -1: accept crossings with y <= 0
        * 0: accept both (default)

    Returns
    -------
    Xy0 : ndarray
        State vectors at the crossing points, shape (n_crossings, 6)
    Ty0 : ndarray
        Times of the crossing points, shape (n_crossings,)

    Notes
    -----
    Crossings are located from sign changes of the shifted x-coordinate
    between consecutive samples and refined by linear interpolation, so the
    returned states lie on the plane up to the sampling resolution.
    """
    if M not in _SECTION_PLANES:
        raise InvalidParameterError(f"Invalid plane selector M={M}, must be 0, 1, or 2")
    if C not in (-1, 0, 1):
        raise InvalidParameterError(f"Invalid crossing condition C={C}, must be -1, 0, or 1")

    X = np.asarray(X, dtype=np.float64)
    T = np.asarray(T, dtype=np.float64)
    if X.ndim != 2 or X.shape[1] != 6 or T.shape != (X.shape[0],):
        raise InvalidParameterError(f"Trajectory shapes do not match: X {X.shape}, T {T.shape}")

    d = _SECTION_PLANES[M](mu)
    s = X[:, 0] - d

    # Sign change between k and k+1, counting a sample exactly on the plane once
    k = np.nonzero((s[:-1] * s[1:] < 0) | ((s[1:] == 0) & (s[:-1] != 0)))[0]
    if s.size and s[0] == 0:
        k = np.concatenate(([-1], k))

    Xy0, Ty0 = [], []
    for idx in k:
        if idx < 0:
            x_c, t_c = X[0], T[0]
        else:
            w = s[idx] / (s[idx] - s[idx + 1])
            x_c = X[idx] + w * (X[idx + 1] - X[idx])
            t_c = T[idx] + w * (T[idx + 1] - T[idx])
        if C == 0 or C * x_c[1] >= 0:
            Xy0.append(x_c)
            Ty0.append(t_c)

    logger.debug(f"Surface of section x={d:.6f}: {len(Ty0)} crossings")
    return np.array(Xy0).reshape(-1, 6), np.array(Ty0)
