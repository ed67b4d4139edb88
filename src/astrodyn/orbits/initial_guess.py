"""
Analytical initial guesses for periodic orbits about the collinear points.

- Lyapunov orbits: the planar periodic solution of the dynamics linearized
  about the libration point.
- Halo orbits: Richardson's third-order expansion, evaluated at the x-z plane
  crossing (tau1 = 0).

Both return a state on the y = 0 plane with velocity along y only, which is the
form the symmetric differential corrector expects.
"""

import numpy as np

from astrodyn.core.lagrange_points import collinear_gamma, lagrange_point
from astrodyn.dynamics.equations import jacobian_crtbp
from astrodyn.exceptions import InvalidParameterError
from astrodyn.orbits.utils import _check_libration_point


def _in_plane_frequency(Uxx, Uyy):
    """
    Frequency of the oscillatory in-plane mode about a collinear point.

    Solves w^4 - (4 - Uxx - Uyy) w^2 + Uxx*Uyy = 0 for its positive root; at the
    collinear points Uxx*Uyy < 0 so exactly one root is positive.
    """
    b = 4.0 - Uxx - Uyy
    return np.sqrt(0.5 * (b + np.sqrt(b * b - 4.0 * Uxx * Uyy)))


def lyapunov_orbit_ic(mu, L_i, Ax=1e-3):
    """
    Initial condition for a planar Lyapunov orbit from the linearized dynamics.

    The linear solution x = xL + Ax cos(wt), y = -(w^2 + Uxx)/(2w) Ax sin(wt)
    is evaluated at t = 0.

    Parameters
    ----------
    mu : float
        Mass parameter of the CR3BP system
    L_i : int
        Collinear libration point index (1, 2 or 3)
    Ax : float, optional
        Signed x-displacement from the libration point. Default is 1e-3.

    Returns
    -------
    ndarray
        State [x, 0, 0, 0, vy, 0] in the rotating frame
    """
    _check_libration_point(L_i)
    xL = lagrange_point(mu, L_i)[0]

    A = jacobian_crtbp(xL, 0.0, 0.0, mu)
    Uxx, Uyy = A[3, 0], A[4, 1]
    w = _in_plane_frequency(Uxx, Uyy)

    vy = -0.5 * (w * w + Uxx) * Ax
    return np.array([xL + Ax, 0.0, 0.0, 0.0, vy, 0.0], dtype=np.float64)


def _richardson_c(mu, L_i, gamma, n):
    """Legendre coefficient c_n of the potential expansion about a collinear point."""
    if L_i == 1:
        return (mu + (-1)**n * (1 - mu) * gamma**(n + 1) / (1 - gamma)**(n + 1)) / gamma**3
    if L_i == 2:
        return ((-1)**n * mu + (-1)**n * (1 - mu) * gamma**(n + 1) / (1 + gamma)**(n + 1)) / gamma**3
    return ((1 - mu) + mu * gamma**(n + 1) / (1 + gamma)**(n + 1)) / gamma**3


def halo_orbit_ic(mu, L_i, Az=0.01, northern=True):
    """
    Initial condition for a halo orbit from Richardson's third-order expansion.

    Parameters
    ----------
    mu : float
        Mass parameter of the CR3BP system
    L_i : int
        Collinear libration point index (1, 2 or 3)
    Az : float, optional
        Out-of-plane amplitude in units of gamma (the libration point's distance
        to its nearest primary). Default is 0.01.
    northern : bool, optional
        Northern (z0 > 0) or southern (z0 < 0) branch

    Returns
    -------
    ndarray
        State [x, 0, z, 0, vy, 0] in the rotating frame

    Raises
    ------
    InvalidParameterError
        If the amplitude-frequency relation has no real in-plane amplitude
    """
    _check_libration_point(L_i)
    gamma = collinear_gamma(mu, L_i)
    won, primary = {1: (1, 1 - mu), 2: (-1, 1 - mu), 3: (1, -mu)}[L_i]
    dn = 1 if northern else -1

    c2, c3, c4 = (_richardson_c(mu, L_i, gamma, n) for n in (2, 3, 4))

    lam = np.sqrt(0.5 * ((2 - c2) + np.sqrt((c2 - 2)**2 + 4 * (c2 - 1) * (1 + 2 * c2))))
    k = 2 * lam / (lam**2 + 1 - c2)
    delta = lam**2 - c2

    d1 = (3 * lam**2 / k) * (k * (6 * lam**2 - 1) - 2 * lam)
    d2 = (8 * lam**2 / k) * (k * (11 * lam**2 - 1) - 2 * lam)

    a21 = (3 * c3 * (k**2 - 2)) / (4 * (1 + 2 * c2))
    a22 = (3 * c3) / (4 * (1 + 2 * c2))
    a23 = -(3 * c3 * lam / (4 * k * d1)) * (3 * k**3 * lam - 6 * k * (k - lam) + 4)
    a24 = -(3 * c3 * lam / (4 * k * d1)) * (2 + 3 * k * lam)

    b21 = -(3 * c3 * lam / (2 * d1)) * (3 * k * lam - 4)
    b22 = (3 * c3 * lam) / d1

    d21 = -c3 / (2 * lam**2)

    a31 = (
        -(9 * lam / (4 * d2)) * (4 * c3 * (k * a23 - b21) + k * c4 * (4 + k**2))
        + ((9 * lam**2 + 1 - c2) / (2 * d2)) * (3 * c3 * (2 * a23 - k * b21) + c4 * (2 + 3 * k**2))
    )
    a32 = -(1 / d2) * (
        (9 * lam / 4) * (4 * c3 * (k * a24 - b22) + k * c4)
        + 1.5 * (9 * lam**2 + 1 - c2) * (c3 * (k * b22 + d21 - 2 * a24) - c4)
    )

    b31 = (0.375 / d2) * (
        8 * lam * (3 * c3 * (k * b21 - 2 * a23) - c4 * (2 + 3 * k**2))
        + (9 * lam**2 + 1 + 2 * c2) * (4 * c3 * (k * a23 - b21) + k * c4 * (4 + k**2))
    )
    b32 = (1 / d2) * (
        9 * lam * (c3 * (k * b22 + d21 - 2 * a24) - c4)
        + 0.375 * (9 * lam**2 + 1 + 2 * c2) * (4 * c3 * (k * a24 - b22) + k * c4)
    )

    d31 = (3 / (64 * lam**2)) * (4 * c3 * a24 + c4)
    d32 = (3 / (64 * lam**2)) * (4 * c3 * (a23 - d21) + c4 * (4 + k**2))

    s_den = 2 * lam * (lam * (1 + k**2) - 2 * k)
    s1 = (
        1.5 * c3 * (2 * a21 * (k**2 - 2) - a23 * (k**2 + 2) - 2 * k * b21)
        - 0.375 * c4 * (3 * k**4 - 8 * k**2 + 8)
    ) / s_den
    s2 = (
        1.5 * c3 * (2 * a22 * (k**2 - 2) + a24 * (k**2 + 2) + 2 * k * b22 + 5 * d21)
        + 0.375 * c4 * (12 - k**2)
    ) / s_den

    a1 = -1.5 * c3 * (2 * a21 + a23 + 5 * d21) - 0.375 * c4 * (12 - k**2)
    a2 = 1.5 * c3 * (a24 - 2 * a22) + 1.125 * c4

    l1 = a1 + 2 * lam**2 * s1
    l2 = a2 + 2 * lam**2 * s2

    # Amplitude constraint l1*Ax^2 + l2*Az^2 + delta = 0
    Ax2 = (-delta - l2 * Az**2) / l1
    if Ax2 < 0:
        raise InvalidParameterError(f"No real in-plane amplitude for Az={Az} about L{L_i}")
    Ax = np.sqrt(Ax2)

    # Expansion at tau1 = 0: every sine term vanishes
    x = a21 * Ax**2 + a22 * Az**2 - Ax + (a23 * Ax**2 - a24 * Az**2) + (a31 * Ax**3 - a32 * Ax * Az**2)
    z = dn * (Az - 2 * d21 * Ax * Az + (d32 * Az * Ax**2 - d31 * Az**3))
    ydot = lam * (k * Ax + 2 * (b21 * Ax**2 - b22 * Az**2) + 3 * (b31 * Ax**3 - b32 * Ax * Az**2))

    return np.array([primary + gamma * (x - won), 0.0, gamma * z, 0.0, gamma * ydot, 0.0], dtype=np.float64)
