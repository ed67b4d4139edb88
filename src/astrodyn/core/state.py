"""
State vector types.

Plain value containers with named-field access. Both types are frozen
dataclasses; use :meth:`replace` to obtain a modified copy and
:meth:`to_array` (or ``numpy.asarray``) to hand them to the numerical code.
"""

import dataclasses
from dataclasses import dataclass

import numpy as np


class _VectorMixin:
    """Shared array conversions for six-component value types."""

    @classmethod
    def from_array(cls, values):
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size != 6:
            raise ValueError(f"{cls.__name__} needs 6 components, got {values.size}")
        return cls(*(float(v) for v in values))

    @classmethod
    def zeros(cls):
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def to_array(self):
        return np.array(dataclasses.astuple(self), dtype=np.float64)

    def __array__(self, dtype=None, copy=None):
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    def is_finite(self):
        return bool(np.all(np.isfinite(self.to_array())))


@dataclass(frozen=True)
class CartesianState(_VectorMixin):
    """
    Cartesian position and velocity [x, y, z, vx, vy, vz].

    Units are whatever the owning system uses: km and km/s for a two-body
    problem, or the non-dimensional rotating frame for the CR3BP.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0

    @property
    def position(self):
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @property
    def velocity(self):
        return np.array([self.vx, self.vy, self.vz], dtype=np.float64)


@dataclass(frozen=True)
class OrbitalElements(_VectorMixin):
    """
    Classical orbital elements.

    Attributes
    ----------
    e : float
        Eccentricity
    a : float
        Semi-major axis (negative for hyperbolic orbits)
    i : float
        Inclination [rad]
    raan : float
        Right ascension of the ascending node Ω [rad]
    argp : float
        Argument of periapsis ω [rad]
    nu : float
        True anomaly ν [rad]
    """
    e: float = 0.0
    a: float = 0.0
    i: float = 0.0
    raan: float = 0.0
    argp: float = 0.0
    nu: float = 0.0
