"""
Dynamical parameter sets.

Each dynamical system owns exactly one parameter type, and each parameter type
reports its :class:`System` tag. The dynamics factory in
:mod:`astrodyn.dynamics.equations` uses that tag to look up the equations of
motion, so a parameter instance alone determines which model is integrated.
"""

import enum
import math
from dataclasses import dataclass

import numpy as np

from astrodyn.exceptions import InvalidParameterError
from astrodyn.utils.constants import Constants, G
from astrodyn.utils.crtbp import mass_parameter


class System(enum.Enum):
    TWO_BODY = "r2bp"
    CR3B = "cr3bp"


@dataclass(frozen=True)
class R2BParameters:
    """
    Restricted two-body problem parameters.

    Attributes
    ----------
    mu : float
        Gravitational parameter G*M of the central body (any consistent units).
    """
    mu: float

    def __post_init__(self):
        if not math.isfinite(self.mu) or self.mu <= 0:
            raise InvalidParameterError(f"Gravitational parameter must be positive, got {self.mu}")

    @property
    def system(self):
        return System.TWO_BODY

    @classmethod
    def from_mass(cls, mass, units="km"):
        """Build parameters from a body mass in kg; ``units`` is 'km' or 'm'."""
        gm = G * mass
        if units == "km":
            gm = gm * 1e-9
        elif units != "m":
            raise InvalidParameterError(f"Unknown length unit '{units}'")
        return cls(float(gm))

    @classmethod
    def from_body(cls, name, units="km"):
        return cls.from_mass(Constants.get_mass(name), units=units)

    def to_array(self):
        return np.array([self.mu], dtype=np.float64)

    def __array__(self, dtype=None, copy=None):
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)


@dataclass(frozen=True)
class CR3BParameters:
    """
    Circular restricted three-body problem parameters.

    Attributes
    ----------
    mu : float
        Mass ratio m₂/(m₁ + m₂), 0 < mu < 1. mu = 0.5 is the degenerate
        equal-mass case.
    """
    mu: float

    def __post_init__(self):
        if not math.isfinite(self.mu) or not (0.0 < self.mu < 1.0):
            raise InvalidParameterError(f"Mass ratio must lie in (0, 1), got {self.mu}")

    @property
    def system(self):
        return System.CR3B

    @classmethod
    def from_masses(cls, primary_mass, secondary_mass):
        return cls(float(mass_parameter(primary_mass, secondary_mass)))

    @classmethod
    def from_bodies(cls, primary, secondary):
        return cls.from_masses(Constants.get_mass(primary), Constants.get_mass(secondary))

    def to_array(self):
        return np.array([self.mu], dtype=np.float64)

    def __array__(self, dtype=None, copy=None):
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)
