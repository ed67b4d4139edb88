"""
astrodyn: periodic orbits and invariant manifolds of the restricted two- and
three-body problems.

Subpackages
-----------
core       Cartesian states, orbital elements, parameter sets, libration points
dynamics   Equations of motion, variational equations and propagation
orbits     Lyapunov and halo orbits by differential correction
manifolds  Monodromy eigenanalysis and stable/unstable manifolds
utils      Physical constants and CR3BP unit conversions
"""

from astrodyn.exceptions import (
    AstrodynError,
    InvalidParameterError,
    ConvergenceError,
    DivergenceError,
    DegenerateMonodromyError
)
from astrodyn.core import (
    CartesianState,
    OrbitalElements,
    System,
    R2BParameters,
    CR3BParameters,
    cartesian_to_elements,
    elements_to_cartesian
)
from astrodyn.dynamics import dynamics, propagate, compute_stm, monodromy
from astrodyn.core.orbit import Orbit
from astrodyn.manifolds import diverge, converge, compute_manifold
from astrodyn.orbits import (
    OrbitFamily,
    PeriodicOrbitSolution,
    differential_correction,
    LyapunovOrbit,
    HaloOrbit
)

__version__ = "0.1.0"

__all__ = [
    'AstrodynError',
    'InvalidParameterError',
    'ConvergenceError',
    'DivergenceError',
    'DegenerateMonodromyError',
    'CartesianState',
    'OrbitalElements',
    'System',
    'R2BParameters',
    'CR3BParameters',
    'cartesian_to_elements',
    'elements_to_cartesian',
    'Orbit',
    'dynamics',
    'propagate',
    'compute_stm',
    'monodromy',
    'diverge',
    'converge',
    'compute_manifold',
    'OrbitFamily',
    'PeriodicOrbitSolution',
    'differential_correction',
    'LyapunovOrbit',
    'HaloOrbit'
]
