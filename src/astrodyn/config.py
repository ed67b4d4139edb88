"""
Default numerical settings for astrodyn.

Every public routine takes these values as keyword defaults, so they can be
overridden per call without touching this module.
"""

import numpy as np

FASTMATH = False  # Global flag for Numba's fastmath option

# Integrator defaults (scipy.integrate.solve_ivp)
METHOD = "DOP853"
RTOL = 3e-14
ATOL = 1e-14

# Differential corrector
MAX_ITER = 50
TOL = 1e-12
CROSSING_T_MAX = 2 * np.pi  # longest search window for the y=0 crossing

# Manifolds
MANIFOLD_EPS = 1e-6
STABILITY_DELTA = 1e-4
MANIFOLD_TF = 0.7 * 2 * np.pi
MANIFOLD_POINTS = 50

# Precision control
MPMATH_DPS = 50  # Decimal places for mpmath root finding
