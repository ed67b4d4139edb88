"""
Equations of motion and numerical propagation.

This package provides:
- CR3BP and two-body vector fields, Jacobians and variational equations
- The :func:`dynamics` factory keyed by the parameter set's system tag
- Trajectory propagation with optional STM and event detection
- State transition and monodromy matrices
"""

from .equations import (
    crtbp_accel,
    jacobian_crtbp,
    crtbp_variational,
    r2bp_accel,
    jacobian_r2bp,
    r2bp_variational,
    dynamics,
    jacobian
)
from .propagator import Trajectory, propagate, plane_crossing
from .stm import compute_stm, monodromy

__all__ = [
    # Equations
    'crtbp_accel',
    'jacobian_crtbp',
    'crtbp_variational',
    'r2bp_accel',
    'jacobian_r2bp',
    'r2bp_variational',
    'dynamics',
    'jacobian',

    # Propagation
    'Trajectory',
    'propagate',
    'plane_crossing',

    # STM analysis
    'compute_stm',
    'monodromy'
]
