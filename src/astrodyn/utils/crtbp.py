"""
Unit conversions for the Circular Restricted Three-Body Problem (CR3BP).

The non-dimensional units in the CR3BP are based on these conventions:
- Distance unit: distance between the primary bodies
- Time unit: inverse of the mean motion (1/n)
- Mass unit: sum of the primary and secondary masses
"""

import numba
import numpy as np

from astrodyn.config import FASTMATH
from astrodyn.utils.constants import G


@numba.njit(fastmath=FASTMATH, cache=True)
def mass_parameter(primary_mass, secondary_mass):
    """
    Mass parameter μ = m₂/(m₁ + m₂) of a primary/secondary pair.

    Parameters
    ----------
    primary_mass : float
        Mass of the primary body (m₁) in kilograms
    secondary_mass : float
        Mass of the secondary body (m₂) in kilograms

    Returns
    -------
    float
        Mass parameter μ (dimensionless)
    """
    return secondary_mass / (primary_mass + secondary_mass)


@numba.njit(fastmath=FASTMATH, cache=True)
def mean_motion(primary_mass, secondary_mass, distance):
    """
    Angular velocity of the primaries about their barycenter (rad/s).

    Kepler's third law: n² = G(m₁+m₂)/r³.
    """
    return np.sqrt(G * (primary_mass + secondary_mass) / distance**3)


@numba.njit(fastmath=FASTMATH, cache=True)
def to_crtbp_units(state_si, m1, m2, distance):
    """
    Convert an SI state vector into the dimensionless rotating-frame units.

    Parameters
    ----------
    state_si : ndarray, shape (6,)
        [x, y, z, vx, vy, vz] in meters and meters/sec
    m1 : float
        Mass of primary in kilograms.
    m2 : float
        Mass of secondary in kilograms.
    distance : float
        Distance between the two primaries in meters.

    Returns
    -------
    ndarray, shape (6,)
        The dimensionless state vector.
    """
    n = mean_motion(m1, m2, distance)
    out = np.empty(6, dtype=np.float64)
    for k in range(3):
        out[k] = state_si[k] / distance
        out[k + 3] = state_si[k + 3] / (distance * n)
    return out


@numba.njit(fastmath=FASTMATH, cache=True)
def to_si_units(state_dimless, m1, m2, distance):
    """Inverse of :func:`to_crtbp_units`."""
    n = mean_motion(m1, m2, distance)
    out = np.empty(6, dtype=np.float64)
    for k in range(3):
        out[k] = state_dimless[k] * distance
        out[k + 3] = state_dimless[k + 3] * distance * n
    return out


@numba.njit(fastmath=FASTMATH, cache=True)
def dimless_time(T, m1, m2, distance):
    """Convert seconds to dimensionless CR3BP time (one unit is 1/n seconds)."""
    return T * mean_motion(m1, m2, distance)


@numba.njit(fastmath=FASTMATH, cache=True)
def si_time(T_dimless, m1, m2, distance):
    """Convert dimensionless CR3BP time to seconds."""
    return T_dimless / mean_motion(m1, m2, distance)
