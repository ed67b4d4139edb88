"""
State Transition Matrix (STM) computations.

The STM Phi(t, 0) maps perturbations of the initial state to perturbations at
time t, dx(t) = Phi(t, 0) dx(0). It is integrated jointly with the state from
the identity at t = 0 and is the basis for:

1. Differential correction of periodic orbits
2. Monodromy matrices and their Floquet multipliers
3. Transporting eigendirections along an orbit for manifold seeding
"""

import logging

import numpy as np

from astrodyn.config import ATOL, METHOD, RTOL
from astrodyn.core.parameters import CR3BParameters
from astrodyn.dynamics.propagator import propagate
from astrodyn.exceptions import DivergenceError

logger = logging.getLogger(__name__)


def _as_parameters(mu):
    return mu if hasattr(mu, "system") else CR3BParameters(float(mu))


def compute_stm(x0, mu, tf, steps=None, rtol=RTOL, atol=ATOL, method=METHOD, **solve_kwargs):
    """
    Integrate a state and its STM from t=0 to t=tf.

    Parameters
    ----------
    x0 : array_like
        Initial state vector [x, y, z, vx, vy, vz]
    mu : float or parameter set
        CR3BP mass ratio, or any parameter dataclass (two-body included)
    tf : float
        Final integration time; negative values integrate backward
    steps : int, optional
        Number of evenly spaced output samples
    **solve_kwargs
        Additional keyword arguments passed to :func:`propagate`

    Returns
    -------
    Trajectory
        With ``stms`` of shape (n_times, 6, 6)
    """
    return propagate(x0, _as_parameters(mu), (0.0, tf), stm=True, steps=steps,
                     rtol=rtol, atol=atol, method=method, **solve_kwargs)


def monodromy(state, mu, period, dynamics_with_stm=None, rtol=RTOL, atol=ATOL, method=METHOD):
    """
    Monodromy matrix of a periodic orbit.

    Propagates ``state`` augmented with the identity STM over one full
    ``period`` and returns the STM block at the final time. For an exactly
    periodic orbit one eigenvalue of the result equals 1, the direction
    tangent to the orbit.

    Parameters
    ----------
    state : array_like
        A point on the periodic orbit
    mu : float or CR3BParameters
        Mass ratio of the system
    period : float
        Full orbital period
    dynamics_with_stm : callable, optional
        ``f(y, parameters, t)`` acting on 42-vectors. Defaults to the
        variational equations of ``mu``'s system.

    Returns
    -------
    ndarray, shape (6, 6)

    Raises
    ------
    DivergenceError
        If the integration fails or produces a non-finite matrix
    """
    parameters = _as_parameters(mu)

    traj = propagate(state, parameters, (0.0, period), stm=True, rtol=rtol, atol=atol,
                     method=method, vector_field=dynamics_with_stm)
    success, message, M = traj.success, traj.message, traj.final_stm

    if not success or not np.all(np.isfinite(M)):
        raise DivergenceError(f"Monodromy propagation failed: {message}", state=np.asarray(state))

    logger.debug(f"Monodromy over T={period:.6f}: |det| = {abs(np.linalg.det(M)):.6e}")
    return M
