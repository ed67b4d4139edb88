"""
Core value types and closed-form relations.

- state:           Cartesian states and orbital elements
- parameters:      Two-body and CR3BP parameter sets with their system tag
- elements:        Element conversions and conic classification
- lagrange_points: Libration point locations
- energy:          CR3BP energy and Jacobi constant
"""

from .state import CartesianState, OrbitalElements
from .parameters import System, R2BParameters, CR3BParameters
from .elements import (
    Conic,
    cartesian_to_elements,
    elements_to_cartesian,
    eccentricity,
    semimajor_axis,
    specific_energy,
    orbital_period,
    conic
)
from .lagrange_points import lagrange_point, lagrange_points, collinear_gamma
from .energy import crtbp_energy, jacobi_constant, energy_to_jacobi, jacobi_to_energy

__all__ = [
    'CartesianState',
    'OrbitalElements',
    'System',
    'R2BParameters',
    'CR3BParameters',
    'Conic',
    'cartesian_to_elements',
    'elements_to_cartesian',
    'eccentricity',
    'semimajor_axis',
    'specific_energy',
    'orbital_period',
    'conic',
    'lagrange_point',
    'lagrange_points',
    'collinear_gamma',
    'crtbp_energy',
    'jacobi_constant',
    'energy_to_jacobi',
    'jacobi_to_energy'
]
