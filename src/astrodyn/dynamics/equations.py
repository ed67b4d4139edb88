"""
Equations of motion and variational equations.

The numerical kernels are Numba-compiled and operate on plain arrays. State
vectors are [x, y, z, vx, vy, vz]; when the state transition matrix (STM) is
propagated alongside, the augmented vector has 42 entries laid out as::

    [x, y, z, vx, vy, vz, Phi[0, 0], Phi[0, 1], ..., Phi[5, 5]]

i.e. the state followed by the row-major flattening of Phi. The STM obeys
dPhi/dt = A(x) Phi, where A is the Jacobian of the vector field.

:func:`dynamics` is the public entry point: it selects the kernel for a
parameter set through a lookup keyed by the parameter's :class:`System` tag.
"""

import numba
import numpy as np

from astrodyn.config import FASTMATH
from astrodyn.core.parameters import System


@numba.njit(fastmath=FASTMATH, cache=True, error_model="numpy")
def crtbp_accel(state, mu):
    """
    Time derivative of a CR3BP rotating-frame state.

    The larger primary sits at (-mu, 0, 0) and the smaller at (1 - mu, 0, 0).
    """
    x, y, z, vx, vy, vz = state[0], state[1], state[2], state[3], state[4], state[5]

    r1 = np.sqrt((x + mu)**2 + y**2 + z**2)
    r2 = np.sqrt((x - (1 - mu))**2 + y**2 + z**2)

    ax = 2*vy + x - (1 - mu)*(x + mu) / r1**3 - mu*(x - 1 + mu) / r2**3
    ay = -2*vx + y - (1 - mu)*y / r1**3 - mu*y / r2**3
    az = -(1 - mu)*z / r1**3 - mu*z / r2**3

    out = np.empty(6, dtype=np.float64)
    out[0] = vx
    out[1] = vy
    out[2] = vz
    out[3] = ax
    out[4] = ay
    out[5] = az
    return out


@numba.njit(fastmath=FASTMATH, cache=True, error_model="numpy")
def jacobian_crtbp(x, y, z, mu):
    """
    6x6 Jacobian of the CR3BP vector field in the rotating frame.

    The matrix is structured as::

         [ 0      0      0      1   0   0 ]
         [ 0      0      0      0   1   0 ]
         [ 0      0      0      0   0   1 ]
         [ omgxx  omgxy  omgxz  0   2   0 ]
         [ omgxy  omgyy  omgyz -2   0   0 ]
         [ omgxz  omgyz  omgzz  0   0   0 ]

    where omg** are second partials of the effective potential.
    """
    mu2 = 1.0 - mu

    r2 = (x + mu)**2 + y**2 + z**2
    R2 = (x - mu2)**2 + y**2 + z**2
    r3 = r2**1.5
    r5 = r2**2.5
    R3 = R2**1.5
    R5 = R2**2.5

    omgxx = 1.0 \
        + mu2/r5 * 3.0*(x + mu)**2 \
        + mu/R5 * 3.0*(x - mu2)**2 \
        - (mu2/r3 + mu/R3)

    omgyy = 1.0 \
        + mu2/r5 * 3.0*(y**2) \
        + mu/R5 * 3.0*(y**2) \
        - (mu2/r3 + mu/R3)

    omgzz = 0.0 \
        + mu2/r5 * 3.0*(z**2) \
        + mu/R5 * 3.0*(z**2) \
        - (mu2/r3 + mu/R3)

    omgxy = 3.0*y * (mu2*(x + mu)/r5 + mu*(x - mu2)/R5)
    omgxz = 3.0*z * (mu2*(x + mu)/r5 + mu*(x - mu2)/R5)
    omgyz = 3.0*y*z*(mu2/r5 + mu/R5)

    F = np.zeros((6, 6), dtype=np.float64)

    F[0, 3] = 1.0
    F[1, 4] = 1.0
    F[2, 5] = 1.0

    F[3, 0] = omgxx
    F[3, 1] = omgxy
    F[3, 2] = omgxz

    F[4, 0] = omgxy
    F[4, 1] = omgyy
    F[4, 2] = omgyz

    F[5, 0] = omgxz
    F[5, 1] = omgyz
    F[5, 2] = omgzz

    # Coriolis terms
    F[3, 4] = 2.0
    F[4, 3] = -2.0

    return F


@numba.njit(fastmath=FASTMATH, cache=True, error_model="numpy")
def r2bp_accel(state, mu):
    """Time derivative of a two-body state about a point mass with parameter mu."""
    x, y, z = state[0], state[1], state[2]
    r3 = (x*x + y*y + z*z)**1.5

    out = np.empty(6, dtype=np.float64)
    out[0] = state[3]
    out[1] = state[4]
    out[2] = state[5]
    out[3] = -mu * x / r3
    out[4] = -mu * y / r3
    out[5] = -mu * z / r3
    return out


@numba.njit(fastmath=FASTMATH, cache=True, error_model="numpy")
def jacobian_r2bp(x, y, z, mu):
    """
    6x6 Jacobian of the two-body vector field.

    The gravity-gradient block is mu/r^5 * (3 r r^T - r^2 I).
    """
    r2 = x*x + y*y + z*z
    r5 = r2**2.5
    pos = np.array([x, y, z])

    F = np.zeros((6, 6), dtype=np.float64)
    F[0, 3] = 1.0
    F[1, 4] = 1.0
    F[2, 5] = 1.0
    for i in range(3):
        for j in range(3):
            g = 3.0 * pos[i] * pos[j]
            if i == j:
                g -= r2
            F[3 + i, j] = mu * g / r5
    return F


@numba.njit(fastmath=FASTMATH, cache=True)
def _stm_derivative(F, y):
    """Assemble d/dt of the 42-vector from the Jacobian F and the state rates."""
    out = np.empty(42, dtype=np.float64)
    for i in range(6):
        for j in range(6):
            s = 0.0
            for k in range(6):
                s += F[i, k] * y[6 + 6*k + j]
            out[6 + 6*i + j] = s
    return out


@numba.njit(fastmath=FASTMATH, cache=True)
def crtbp_variational(y, mu):
    """
    CR3BP equations of motion augmented with the variational equations.

    ``y`` is the 42-vector [state, row-major Phi]; the result has the same layout.
    """
    out = _stm_derivative(jacobian_crtbp(y[0], y[1], y[2], mu), y)
    out[:6] = crtbp_accel(y[:6], mu)
    return out


@numba.njit(fastmath=FASTMATH, cache=True)
def r2bp_variational(y, mu):
    """Two-body equations of motion augmented with the variational equations."""
    out = _stm_derivative(jacobian_r2bp(y[0], y[1], y[2], mu), y)
    out[:6] = r2bp_accel(y[:6], mu)
    return out


# One (state kernel, augmented kernel, jacobian) triple per dynamical system
_KERNELS = {
    System.CR3B: (crtbp_accel, crtbp_variational, jacobian_crtbp),
    System.TWO_BODY: (r2bp_accel, r2bp_variational, jacobian_r2bp),
}


def _mass_parameter(parameters):
    mu = getattr(parameters, "mu", None)
    if mu is None:
        mu = np.asarray(parameters, dtype=np.float64).ravel()[0]
    return float(mu)


def _kernels(parameters):
    try:
        return _KERNELS[parameters.system]
    except (AttributeError, KeyError):
        raise TypeError(f"No dynamics registered for parameters of type {type(parameters).__name__}") from None


def dynamics(parameters, stm=False):
    """
    Build the vector field for a dynamical system.

    Parameters
    ----------
    parameters : R2BParameters or CR3BParameters
        Parameter set; its ``system`` tag selects the equations of motion.
    stm : bool, optional
        If True, the returned function expects and returns 42-vectors
        (state followed by the row-major STM). Default is False.

    Returns
    -------
    callable
        ``f(state, parameters, t) -> derivative`` with the same length as
        ``state``. ``parameters`` may be a parameter dataclass or an array whose
        first entry is mu. The function holds no state and is safe to call
        concurrently.

    Notes
    -----
    Singular configurations (a state exactly on a primary) produce non-finite
    derivatives; guarding against them is left to the caller.
    """
    accel, variational, _ = _kernels(parameters)
    kernel = variational if stm else accel

    def f(state, params, t):
        return kernel(np.asarray(state, dtype=np.float64), _mass_parameter(params))

    f.stm = stm
    f.system = parameters.system
    return f


def jacobian(parameters, state):
    """Jacobian of the vector field of ``parameters``' system at ``state``."""
    _, _, jac = _kernels(parameters)
    x, y, z = np.asarray(state, dtype=np.float64)[:3]
    return jac(x, y, z, _mass_parameter(parameters))
