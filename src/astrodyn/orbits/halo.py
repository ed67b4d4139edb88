"""
Halo orbits about the collinear libration points.

Halo orbits are three-dimensional and symmetric about the x-z plane. The
out-of-plane position z0 is held fixed while x0 and vy0 are corrected, and
the family is continued by stepping z0.
"""

from astrodyn.orbits.base import PeriodicOrbit
from astrodyn.orbits.corrector import OrbitFamily
from astrodyn.orbits.initial_guess import halo_orbit_ic


class HaloOrbit(PeriodicOrbit):
    """
    Halo orbit implementation for the CR3BP.

    Attributes
    ----------
    mu : float
        Mass parameter of the CR3BP system
    initial_state : ndarray
        Initial state vector [x, 0, z, 0, vy, 0]
    period : float
        Orbital period
    L_i : int
        Libration point index (1-3)
    northern : bool
        Whether this is a northern (z>0) or southern (z<0) family Halo orbit
    """

    _continuation_index = 2

    def __init__(self, mu, initial_state, period=None, L_i=None, northern=None):
        super().__init__(mu, initial_state, period, L_i)
        self.northern = bool(self.initial_state[2] >= 0) if northern is None else northern

    @property
    def family(self):
        return OrbitFamily.HALO_NORTHERN if self.northern else OrbitFamily.HALO_SOUTHERN

    def _default_step(self):
        return 1e-4 if self.northern else -1e-4

    def _spawn(self, state):
        return HaloOrbit(self.mu, state, L_i=self.L_i, northern=self.northern)

    @classmethod
    def initial_guess(cls, mu, L_i, amplitude=0.01, northern=True, **kwargs):
        """Uncorrected halo orbit from Richardson's third-order expansion."""
        return cls(mu, halo_orbit_ic(mu, L_i, Az=amplitude, northern=northern), L_i=L_i, northern=northern)
