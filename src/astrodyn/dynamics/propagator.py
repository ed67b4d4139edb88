"""
Numerical propagation of trajectories.

Thin layer over :func:`scipy.integrate.solve_ivp` that integrates the vector
field returned by :func:`astrodyn.dynamics.equations.dynamics`, optionally
together with the state transition matrix, and reshapes the output into a
:class:`Trajectory`. Backward propagation is obtained by passing a final time
smaller than the initial one.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from scipy.integrate import solve_ivp

from astrodyn.config import ATOL, METHOD, RTOL
from astrodyn.dynamics.equations import dynamics

logger = logging.getLogger(__name__)


@dataclass
class Trajectory:
    """Sampled output of a propagation."""
    times: np.ndarray
    states: np.ndarray
    stms: Optional[np.ndarray] = None
    t_events: List[np.ndarray] = field(default_factory=list)
    y_events: List[np.ndarray] = field(default_factory=list)
    success: bool = True
    message: str = ""

    @property
    def final_state(self):
        return self.states[-1]

    @property
    def final_stm(self):
        if self.stms is None:
            raise ValueError("Trajectory was propagated without the STM")
        return self.stms[-1]

    def __len__(self):
        return len(self.times)


def plane_crossing(index=1, value=0.0, direction=0, terminal=True):
    """
    Build a solve_ivp event for the crossing ``state[index] == value``.

    Parameters
    ----------
    index : int, optional
        State component to monitor. Default is 1 (the y=0 plane).
    value : float, optional
        Plane offset. Default is 0.
    direction : {-1, 0, 1}, optional
        Crossing direction that triggers the event (0 for both).
    terminal : bool, optional
        Stop the integration at the first crossing. Default is True.
    """
    def event(t, y):
        return y[index] - value

    event.terminal = terminal
    event.direction = direction
    return event


def _split_augmented(y, stm):
    """Split a (n, 6|42) block into states and (n, 6, 6) STMs."""
    if not stm:
        return y, None
    return y[:, :6], y[:, 6:].reshape(-1, 6, 6)


def propagate(initial_state, parameters, t_span, stm=False, initial_stm=None, events=None,
              steps=None, t_eval=None, rtol=RTOL, atol=ATOL, method=METHOD,
              max_step=np.inf, dense_output=False, vector_field=None):
    """
    Propagate a state under the dynamics selected by ``parameters``.

    Parameters
    ----------
    initial_state : array_like or CartesianState
        Initial state vector [x, y, z, vx, vy, vz]
    parameters : R2BParameters or CR3BParameters
        Dynamical parameters; select the equations of motion
    t_span : tuple of float
        (t0, tf); tf < t0 integrates backward in time
    stm : bool, optional
        Propagate the state transition matrix alongside the state
    initial_stm : ndarray, optional
        Initial STM (6x6 identity by default)
    events : callable or list of callables, optional
        solve_ivp events evaluated on the (possibly augmented) vector
    steps : int, optional
        Number of evenly spaced output samples; ignored if ``t_eval`` is given.
        By default the integrator's own steps are returned.
    t_eval : array_like, optional
        Explicit output times
    rtol, atol : float, optional
        Integrator tolerances
    method : str, optional
        solve_ivp method. Default is 'DOP853'.
    max_step : float, optional
        Maximum allowed step size for the integrator
    dense_output : bool, optional
        Keep solve_ivp's continuous solution (exposed as ``trajectory.sol``)
    vector_field : callable, optional
        Replacement ``f(y, parameters, t)``; must match the layout implied by ``stm``

    Returns
    -------
    Trajectory
    """
    t0, tf = float(t_span[0]), float(t_span[-1])
    x0 = np.asarray(initial_state, dtype=np.float64).ravel()

    if stm:
        phi0 = np.eye(6, dtype=np.float64) if initial_stm is None else np.asarray(initial_stm, dtype=np.float64)
        y0 = np.concatenate((x0, phi0.ravel()))
    else:
        y0 = x0

    f = vector_field if vector_field is not None else dynamics(parameters, stm=stm)

    def rhs(t, y):
        return f(y, parameters, t)

    if t_eval is None and steps is not None:
        t_eval = np.linspace(t0, tf, steps)

    sol = solve_ivp(
        rhs, (t0, tf), y0,
        t_eval=t_eval, events=events,
        rtol=rtol, atol=atol,
        method=method, dense_output=dense_output,
        max_step=max_step
    )

    if not sol.success:
        logger.warning(f"Integration from t={t0:.6f} to t={tf:.6f} failed: {sol.message}")

    states, stms = _split_augmented(sol.y.T, stm)

    trajectory = Trajectory(
        times=sol.t,
        states=states,
        stms=stms,
        t_events=list(sol.t_events) if sol.t_events is not None else [],
        y_events=list(sol.y_events) if sol.y_events is not None else [],
        success=bool(sol.success),
        message=str(sol.message),
    )
    if dense_output:
        trajectory.sol = sol.sol
    return trajectory
