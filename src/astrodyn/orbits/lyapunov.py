"""
Planar Lyapunov orbits about the collinear libration points.

Lyapunov orbits cross the x-axis perpendicularly twice per revolution. They
are corrected by adjusting the initial y-velocity alone, and the family is
continued by stepping the initial x position away from the libration point.
"""

from astrodyn.core.lagrange_points import lagrange_point
from astrodyn.orbits.base import PeriodicOrbit
from astrodyn.orbits.corrector import OrbitFamily
from astrodyn.orbits.initial_guess import lyapunov_orbit_ic


class LyapunovOrbit(PeriodicOrbit):
    """
    Lyapunov orbit implementation for the CR3BP.

    Attributes
    ----------
    mu : float
        Mass parameter of the CR3BP system
    initial_state : ndarray
        Initial state vector [x, 0, 0, 0, vy, 0]
    period : float
        Orbital period
    L_i : int
        Libration point index (1-3)
    """

    _continuation_index = 0

    @property
    def family(self):
        return OrbitFamily.LYAPUNOV

    def _offset(self):
        return self.initial_state[0] - lagrange_point(self.mu, self.L_i or 1)[0]

    def _default_step(self):
        return 1e-4 if self._offset() >= 0 else -1e-4

    def _predict(self, family, step):
        next_state = super()._predict(family, step)
        if len(family) == 1:
            # Near L_i the y-velocity grows linearly with the x-offset
            offset = family[-1]._offset()
            if offset != 0.0:
                next_state[4] *= (offset + step) / offset
        return next_state

    @classmethod
    def initial_guess(cls, mu, L_i, amplitude=1e-3, **kwargs):
        """Uncorrected Lyapunov orbit from the linearized dynamics about ``L_i``."""
        return cls(mu, lyapunov_orbit_ic(mu, L_i, Ax=amplitude), L_i=L_i)

