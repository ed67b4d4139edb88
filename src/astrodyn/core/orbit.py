"""
Orbit: a state paired with the parameters of the system it lives in.

An :class:`Orbit` is constructed once and is read-only afterward. Derived
quantities (elements, eccentricity, energy) are computed on each access and
never cached on the instance.
"""

from dataclasses import dataclass
from typing import Union

from astrodyn.core.elements import (
    Conic,
    cartesian_to_elements,
    conic,
    eccentricity,
    orbital_period,
    semimajor_axis,
    specific_energy,
)
from astrodyn.core.energy import crtbp_energy, jacobi_constant
from astrodyn.core.parameters import CR3BParameters, R2BParameters, System
from astrodyn.core.state import CartesianState
from astrodyn.dynamics.equations import dynamics
from astrodyn.dynamics.propagator import propagate
from astrodyn.exceptions import InvalidParameterError


@dataclass(frozen=True)
class Orbit:
    """
    A Cartesian state together with its dynamical parameters.

    Attributes
    ----------
    state : CartesianState
    parameters : R2BParameters or CR3BParameters
    """
    state: CartesianState
    parameters: Union[R2BParameters, CR3BParameters]

    def __post_init__(self):
        if not isinstance(self.state, CartesianState):
            object.__setattr__(self, "state", CartesianState.from_array(self.state))

    @property
    def system(self):
        return self.parameters.system

    def _require(self, system, quantity):
        if self.system is not system:
            raise InvalidParameterError(f"{quantity} is only defined for {system.name} orbits")

    # Two-body quantities

    @property
    def elements(self):
        self._require(System.TWO_BODY, "Orbital elements")
        return cartesian_to_elements(self.state, self.parameters.mu)

    @property
    def eccentricity(self):
        self._require(System.TWO_BODY, "Eccentricity")
        return eccentricity(self.state, self.parameters.mu)

    @property
    def conic(self) -> Conic:
        return conic(self.eccentricity)

    @property
    def specific_energy(self):
        self._require(System.TWO_BODY, "Specific energy")
        return specific_energy(self.state, self.parameters.mu)

    @property
    def period(self):
        self._require(System.TWO_BODY, "Keplerian period")
        return orbital_period(semimajor_axis(self.state, self.parameters.mu), self.parameters.mu)

    # CR3BP quantities

    @property
    def energy(self):
        self._require(System.CR3B, "Rotating-frame energy")
        return crtbp_energy(self.state, self.parameters.mu)

    @property
    def jacobi_constant(self):
        self._require(System.CR3B, "Jacobi constant")
        return jacobi_constant(self.state, self.parameters.mu)

    def dynamics(self, stm=False):
        return dynamics(self.parameters, stm=stm)

    def propagate(self, tf, t0=0.0, **kwargs):
        """Propagate the orbit's state from t0 to tf; see :func:`propagate`."""
        return propagate(self.state, self.parameters, (t0, tf), **kwargs)
