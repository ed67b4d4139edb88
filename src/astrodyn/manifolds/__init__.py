"""
Invariant manifolds and stability of periodic orbits.

- analysis: eigenvalue classification, stability indices, Poincaré sections
- manifold: diverge/converge perturbations and manifold generation
"""

from .analysis import (
    eigenvalue_decomposition,
    libration_stability_analysis,
    stability_indices,
    surface_of_section
)
from .manifold import ManifoldResult, compute_manifold, converge, diverge

__all__ = [
    'eigenvalue_decomposition',
    'libration_stability_analysis',
    'stability_indices',
    'surface_of_section',
    'ManifoldResult',
    'compute_manifold',
    'converge',
    'diverge'
]
