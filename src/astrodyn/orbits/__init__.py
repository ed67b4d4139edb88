"""
Symmetric periodic orbits of the CR3BP.

This package provides:
- Analytical initial guesses for Lyapunov and halo orbits
- The shooting differential corrector and its result type
- Orbit classes with stability analysis, manifolds and family continuation
"""

from .initial_guess import lyapunov_orbit_ic, halo_orbit_ic
from .corrector import (
    OrbitFamily,
    PeriodicOrbitSolution,
    correct,
    differential_correction,
    initial_guess
)
from .base import PeriodicOrbit
from .lyapunov import LyapunovOrbit
from .halo import HaloOrbit

__all__ = [
    'lyapunov_orbit_ic',
    'halo_orbit_ic',
    'OrbitFamily',
    'PeriodicOrbitSolution',
    'correct',
    'differential_correction',
    'initial_guess',
    'PeriodicOrbit',
    'LyapunovOrbit',
    'HaloOrbit'
]
