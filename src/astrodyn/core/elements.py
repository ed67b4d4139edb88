"""
Two-body orbital element conversions.

Conversions between Cartesian states and classical orbital elements for a
central body with gravitational parameter ``mu``. Angles are in radians and
wrapped to [0, 2π).

Singular geometries are resolved by convention: for equatorial orbits the
ascending node is taken along +x (Ω = 0), and for circular orbits periapsis is
placed at the node (ω = 0). The remaining angle is absorbed into the true
anomaly so that the round trip still reproduces the state.
"""

import enum

import numpy as np

from astrodyn.core.state import CartesianState, OrbitalElements
from astrodyn.exceptions import InvalidParameterError

_TWO_PI = 2.0 * np.pi


class Conic(enum.Enum):
    CIRCULAR = "circular"
    ELLIPTICAL = "elliptical"
    PARABOLIC = "parabolic"
    HYPERBOLIC = "hyperbolic"


def _split(state):
    vec = np.asarray(state, dtype=np.float64).ravel()
    if vec.size != 6:
        raise ValueError(f"Expected a 6-component state, got {vec.size}")
    return vec[:3], vec[3:]


def _eccentricity_vector(r, v, mu):
    rmag = np.linalg.norm(r)
    return ((v @ v - mu / rmag) * r - (r @ v) * v) / mu


def specific_energy(state, mu):
    """Specific orbital energy v²/2 - mu/r."""
    r, v = _split(state)
    return 0.5 * (v @ v) - mu / np.linalg.norm(r)


def eccentricity(state, mu):
    """Scalar eccentricity of a Cartesian state about a body with parameter mu."""
    r, v = _split(state)
    return float(np.linalg.norm(_eccentricity_vector(r, v, mu)))


def semimajor_axis(state, mu):
    """Semi-major axis -mu/(2ε); infinite for a parabolic state."""
    energy = specific_energy(state, mu)
    if energy == 0.0:
        return np.inf
    return float(-mu / (2.0 * energy))


def orbital_period(a, mu):
    """Keplerian period 2π√(a³/mu); infinite for open orbits."""
    if not np.isfinite(a) or a <= 0:
        return np.inf
    return float(_TWO_PI * np.sqrt(a**3 / mu))


def conic(e, tol=1e-8):
    """
    Classify a conic section by eccentricity.

    Parameters
    ----------
    e : float
        Eccentricity (non-negative)
    tol : float, optional
        Band around 0 and 1 treated as circular and parabolic.

    Returns
    -------
    Conic
    """
    if e < 0 or not np.isfinite(e):
        raise InvalidParameterError(f"Eccentricity must be finite and non-negative, got {e}")
    if e < tol:
        return Conic.CIRCULAR
    if abs(e - 1.0) <= tol:
        return Conic.PARABOLIC
    if e < 1.0:
        return Conic.ELLIPTICAL
    return Conic.HYPERBOLIC


def cartesian_to_elements(state, mu, tol=1e-11):
    """
    Convert a Cartesian state to classical orbital elements.

    Parameters
    ----------
    state : CartesianState or array_like
        [x, y, z, vx, vy, vz]
    mu : float
        Gravitational parameter of the central body
    tol : float, optional
        Threshold below which the orbit is treated as circular (on e) or
        equatorial (on |n|/|h|).

    Returns
    -------
    OrbitalElements
    """
    r, v = _split(state)
    h = np.cross(r, v)
    hmag = np.linalg.norm(h)
    if hmag == 0.0:
        raise InvalidParameterError("Rectilinear state has no orbital plane")
    h_hat = h / hmag

    e_vec = _eccentricity_vector(r, v, mu)
    e = np.linalg.norm(e_vec)
    a = semimajor_axis(np.concatenate((r, v)), mu)
    inc = np.arccos(np.clip(h_hat[2], -1.0, 1.0))

    # Reference directions in the orbital plane
    node = np.cross([0.0, 0.0, 1.0], h)
    nmag = np.linalg.norm(node)
    node_hat = node / nmag if nmag > tol * hmag else np.array([1.0, 0.0, 0.0])
    peri_hat = e_vec / e if e > tol else node_hat

    raan = np.arctan2(node_hat[1], node_hat[0])
    argp = np.arctan2(np.cross(node_hat, peri_hat) @ h_hat, node_hat @ peri_hat)
    nu = np.arctan2(np.cross(peri_hat, r) @ h_hat, peri_hat @ r)

    return OrbitalElements(
        e=float(e),
        a=float(a),
        i=float(inc),
        raan=float(raan % _TWO_PI),
        argp=float(argp % _TWO_PI),
        nu=float(nu % _TWO_PI),
    )


def _rotation(raan, inc, argp):
    cO, sO = np.cos(raan), np.sin(raan)
    ci, si = np.cos(inc), np.sin(inc)
    cw, sw = np.cos(argp), np.sin(argp)
    R3_raan = np.array([[cO, -sO, 0.0], [sO, cO, 0.0], [0.0, 0.0, 1.0]])
    R1_inc = np.array([[1.0, 0.0, 0.0], [0.0, ci, -si], [0.0, si, ci]])
    R3_w = np.array([[cw, -sw, 0.0], [sw, cw, 0.0], [0.0, 0.0, 1.0]])
    return R3_raan @ R1_inc @ R3_w


def elements_to_cartesian(elements, mu):
    """
    Convert classical orbital elements to a Cartesian state.

    Parameters
    ----------
    elements : OrbitalElements or array_like
        [e, a, i, raan, argp, nu]
    mu : float
        Gravitational parameter of the central body

    Returns
    -------
    CartesianState
    """
    e, a, inc, raan, argp, nu = np.asarray(elements, dtype=np.float64).ravel()

    p = a * (1.0 - e * e)  # semilatus rectum
    if not np.isfinite(p) or p <= 0:
        raise InvalidParameterError(f"Elements e={e}, a={a} do not describe a non-degenerate conic")

    denom = 1.0 + e * np.cos(nu)
    if denom <= 0:
        raise InvalidParameterError(f"True anomaly {nu} lies outside the hyperbola's asymptotes")
    rmag = p / denom

    r_pqw = np.array([rmag * np.cos(nu), rmag * np.sin(nu), 0.0])
    v_pqw = np.sqrt(mu / p) * np.array([-np.sin(nu), e + np.cos(nu), 0.0])

    R = _rotation(raan, inc, argp)
    return CartesianState.from_array(np.concatenate((R @ r_pqw, R @ v_pqw)))
