"""
Helpers shared by the periodic-orbit routines.

The shooting step needs the first return of a trajectory to the x-z plane
(y = 0). It is located with a terminal solve_ivp event whose direction is
opposite to the initial y-velocity, so the departure from the plane at t = 0
is never mistaken for the crossing.
"""

import numpy as np

from astrodyn.config import CROSSING_T_MAX
from astrodyn.core.parameters import CR3BParameters
from astrodyn.dynamics.propagator import plane_crossing, propagate
from astrodyn.exceptions import DivergenceError, InvalidParameterError


def _find_x_crossing(x0, mu, stm=False, t_max=CROSSING_T_MAX, **solver_kwargs):
    """
    Find the time and state at which an orbit next crosses the y=0 plane.

    Parameters
    ----------
    x0 : array_like
        Initial state vector [x, y, z, vx, vy, vz] in the rotating frame
    mu : float
        Mass parameter of the CR3BP system (ratio of smaller to total mass)
    stm : bool, optional
        Also return the STM at the crossing
    t_max : float, optional
        Longest time to search for the crossing
    **solver_kwargs
        Forwarded to :func:`propagate`

    Returns
    -------
    t_cross : float
        Time of the crossing
    x_cross : ndarray
        State vector at the crossing
    phi_cross : ndarray or None
        6x6 STM at the crossing when ``stm`` is True

    Raises
    ------
    DivergenceError
        If no crossing occurs within ``t_max``
    """
    x0 = np.asarray(x0, dtype=np.float64)
    if x0[1] == 0.0 and x0[4] == 0.0:
        raise DivergenceError("State starts on the y=0 plane with zero y-velocity", state=x0)

    direction = -np.sign(x0[4]) if x0[1] == 0.0 else 0
    event = plane_crossing(index=1, value=0.0, direction=direction, terminal=True)

    traj = propagate(x0, CR3BParameters(mu), (0.0, t_max), stm=stm, events=event, **solver_kwargs)

    if not traj.t_events or traj.t_events[0].size == 0:
        raise DivergenceError(
            f"No y=0 crossing within t={t_max:.3f} ({traj.message})",
            state=x0
        )

    t_cross = float(traj.t_events[0][0])
    y_cross = traj.y_events[0][0]
    phi_cross = y_cross[6:].reshape(6, 6) if stm else None
    return t_cross, y_cross[:6].copy(), phi_cross


def _check_libration_point(L_i, allowed=(1, 2, 3)):
    if L_i not in allowed:
        raise InvalidParameterError(f"Libration point L{L_i} not supported; expected one of {allowed}")
