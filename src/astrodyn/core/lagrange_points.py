"""
Computation of Lagrange (libration) points in the CR3BP.

The collinear points are found with mpmath's secant root finder on dΩ/dx at
high precision; the triangular points are closed-form.
"""

import mpmath as mp
import numpy as np

from astrodyn.config import MPMATH_DPS
from astrodyn.exceptions import InvalidParameterError

mp.mp.dps = MPMATH_DPS


def _dOmega_dx(x, mu):
    """
    Derivative of the effective potential along the x-axis.

    The collinear libration points are the zeros of this function.
    """
    r1 = abs(x + mu)
    r2 = abs(x - (1 - mu))
    return x - (1 - mu) * (x + mu) / (r1**3) - mu * (x - (1 - mu)) / (r2**3)


# Starting pairs for the secant iteration, one per collinear point
_COLLINEAR_STARTS = {
    1: lambda mu: [-mu + 0.01, 1 - mu - 0.01],
    2: lambda mu: [1.0, 2.0],
    3: lambda mu: [-mu - 0.01, -2.0],
}


def lagrange_point(mu, point_index):
    """
    Position of a single Lagrange point.

    Parameters
    ----------
    mu : float
        Mass parameter of the CR3BP system (ratio of smaller to total mass)
    point_index : int
        Lagrange point index (1-5)

    Returns
    -------
    ndarray
        3D vector [x, y, z] in the rotating frame
    """
    if point_index in _COLLINEAR_STARTS:
        x = mp.findroot(lambda x: _dOmega_dx(x, mu), _COLLINEAR_STARTS[point_index](mu))
        return np.array([float(x), 0.0, 0.0], dtype=np.float64)
    if point_index in (4, 5):
        y = np.sqrt(3) / 2 if point_index == 4 else -np.sqrt(3) / 2
        return np.array([0.5 - mu, y, 0.0], dtype=np.float64)
    raise InvalidParameterError(f"Invalid Lagrange point index {point_index}. Must be 1-5.")


def lagrange_points(mu):
    """Positions of L1 through L5 as a (5, 3) array."""
    return np.vstack([lagrange_point(mu, i) for i in range(1, 6)])


def collinear_gamma(mu, point_index):
    """
    Distance from a collinear point to its nearest primary.

    For L1 and L2 this is measured from the smaller primary at x = 1 - mu, for
    L3 from the larger primary at x = -mu. All distances are in units of the
    primary separation.
    """
    if point_index not in _COLLINEAR_STARTS:
        raise InvalidParameterError(f"L{point_index} is not a collinear point")
    x = lagrange_point(mu, point_index)[0]
    if point_index == 1:
        return (1 - mu) - x
    if point_index == 2:
        return x - (1 - mu)
    return -mu - x
