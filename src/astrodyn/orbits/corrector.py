"""
Differential correction of symmetric periodic orbits in the CR3BP.

Orbits that are symmetric about the x-z plane cross y = 0 perpendicularly
twice per revolution. Starting on that plane with velocity along y only, the
corrector propagates to the next crossing and drives the velocity components
that must vanish there (vx, and vz for halo orbits) to zero with Newton steps
built from the state transition matrix. The crossing time is half the period.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from astrodyn.config import CROSSING_T_MAX, MAX_ITER, TOL
from astrodyn.core.state import CartesianState
from astrodyn.dynamics.equations import crtbp_accel
from astrodyn.exceptions import ConvergenceError, DivergenceError, InvalidParameterError
from astrodyn.orbits.initial_guess import halo_orbit_ic, lyapunov_orbit_ic
from astrodyn.orbits.utils import _check_libration_point, _find_x_crossing

logger = logging.getLogger(__name__)


class OrbitFamily(enum.IntEnum):
    """Periodic-orbit families handled by the corrector."""
    LYAPUNOV = 1
    HALO_NORTHERN = 2
    HALO_SOUTHERN = 3

    @property
    def planar(self):
        return self is OrbitFamily.LYAPUNOV

    @property
    def northern(self):
        return self is not OrbitFamily.HALO_SOUTHERN


# (free initial components, targeted crossing components)
_SCHEMES = {
    True: ([4], [3]),
    False: ([0, 4], [3, 5]),
}


@dataclass(frozen=True, eq=False)
class PeriodicOrbitSolution:
    """
    Converged initial condition of a symmetric periodic orbit.

    Attributes
    ----------
    state : ndarray
        Initial state [x, 0, z, 0, vy, 0] on the x-z plane
    half_period : float
        Time of the first return to y = 0
    iterations : int
        Number of Newton corrections applied
    residual : float
        Norm of the targeted velocity components at the crossing
    family : OrbitFamily
    libration_point : int or None
        Collinear point the orbit was seeded from, if known
    mu : float or None
        Mass ratio the orbit was corrected for
    """
    state: np.ndarray
    half_period: float
    iterations: int
    residual: float
    family: OrbitFamily
    libration_point: Optional[int] = None
    mu: Optional[float] = None

    @property
    def period(self):
        return 2.0 * self.half_period

    def to_cartesian_state(self):
        return CartesianState.from_array(self.state)


def validate_mass_ratio(mu):
    """Reject mass ratios outside (0, 0.5)."""
    try:
        value = float(mu)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Mass ratio must be a real number, got {mu!r}") from exc
    if not np.isfinite(value) or not 0.0 < value < 0.5:
        raise InvalidParameterError(f"Mass ratio must satisfy 0 < mu < 0.5, got {mu!r}")
    return value


def validate_family(family):
    """Coerce ``family`` to :class:`OrbitFamily`, rejecting unknown selectors."""
    if isinstance(family, bool):
        raise InvalidParameterError(f"Unknown orbit family {family!r}")
    try:
        return OrbitFamily(family)
    except ValueError as exc:
        raise InvalidParameterError(
            f"Unknown orbit family {family!r}; expected one of {[int(f) for f in OrbitFamily]}"
        ) from exc


def _correction_jacobian(x_cross, phi, mu, free, targets):
    """
    Sensitivity of the targeted crossing components to the free initial ones.

    The crossing time moves with the initial state, dt = -Phi[1, free] dx0 / vy,
    which adds the rank-one term built from the vector field at the crossing.
    """
    xdot = crtbp_accel(x_cross, mu)
    return phi[np.ix_(targets, free)] - np.outer(xdot[targets], phi[1, free]) / x_cross[4]


def correct(x0_guess, mu, family=OrbitFamily.LYAPUNOV, max_iter=MAX_ITER, tol=TOL,
            t_max=CROSSING_T_MAX, libration_point=None, **solver_kwargs):
    """
    Refine an initial guess into a symmetric periodic orbit.

    Parameters
    ----------
    x0_guess : array_like
        Guess [x, 0, z, 0, vy, 0]; ``z`` is held fixed for halo orbits
    mu : float
        Mass ratio, 0 < mu < 0.5
    family : OrbitFamily or int
        Selects the free and targeted components
    max_iter : int, optional
        Maximum number of Newton corrections. Default is 50.
    tol : float, optional
        Tolerance on the norm of the targeted components. Default is 1e-12.
    t_max : float, optional
        Longest time searched for the y=0 crossing
    libration_point : int, optional
        Recorded on the solution
    **solver_kwargs
        Forwarded to the integrator

    Returns
    -------
    PeriodicOrbitSolution

    Raises
    ------
    InvalidParameterError
        For an invalid mass ratio, family or iteration budget
    ConvergenceError
        If ``max_iter`` corrections do not meet ``tol``
    DivergenceError
        If an iterate becomes non-finite, the crossing is lost or the
        correction is singular
    """
    mu = validate_mass_ratio(mu)
    family = validate_family(family)
    if int(max_iter) < 0:
        raise InvalidParameterError(f"max_iter must be non-negative, got {max_iter}")
    if not tol > 0:
        raise InvalidParameterError(f"tol must be positive, got {tol}")

    x0 = np.array(x0_guess, dtype=np.float64).reshape(6)
    if not np.all(np.isfinite(x0)):
        raise DivergenceError("Initial guess is not finite", state=x0, iterations=0)

    free, targets = _SCHEMES[family.planar]
    residual = np.inf

    for iteration in range(int(max_iter) + 1):
        try:
            t_cross, x_cross, phi = _find_x_crossing(x0, mu, stm=True, t_max=t_max, **solver_kwargs)
        except DivergenceError as exc:
            logger.error(f"{family.name}: lost the y=0 crossing at iteration {iteration}")
            raise DivergenceError(str(exc), state=x0.copy(), residual=residual, iterations=iteration) from exc

        if not (np.all(np.isfinite(x_cross)) and np.all(np.isfinite(phi))):
            logger.error(f"{family.name}: non-finite crossing state at iteration {iteration}")
            raise DivergenceError("Propagation produced a non-finite state",
                                  state=x0.copy(), residual=residual, iterations=iteration)

        residual = float(np.linalg.norm(x_cross[targets]))
        logger.debug(f"{family.name} iteration {iteration}: residual={residual:.3e}, t_half={t_cross:.12f}")

        if residual <= tol:
            logger.info(f"{family.name} orbit converged in {iteration} iterations "
                        f"(residual={residual:.3e}, period={2 * t_cross:.12f})")
            return PeriodicOrbitSolution(
                state=x0.copy(),
                half_period=t_cross,
                iterations=iteration,
                residual=residual,
                family=family,
                libration_point=libration_point,
                mu=mu
            )

        if iteration == max_iter:
            break

        J = _correction_jacobian(x_cross, phi, mu, free, targets)
        try:
            dx = np.linalg.solve(J, -x_cross[targets])
        except np.linalg.LinAlgError as exc:
            logger.error(f"{family.name}: singular correction at iteration {iteration}")
            raise DivergenceError("Singular correction Jacobian", state=x0.copy(),
                                  residual=residual, iterations=iteration) from exc

        x0[free] += dx
        if not np.all(np.isfinite(x0)):
            logger.error(f"{family.name}: non-finite correction at iteration {iteration}")
            raise DivergenceError("Correction produced a non-finite state",
                                  state=x0.copy(), residual=residual, iterations=iteration + 1)

    logger.error(f"{family.name} orbit did not converge in {max_iter} iterations (residual={residual:.3e})")
    raise ConvergenceError(
        f"No convergence after {max_iter} iterations (residual={residual:.3e}, tol={tol:.1e})",
        state=x0.copy(), residual=residual, iterations=int(max_iter)
    )


def initial_guess(mu, family, amplitude=None, libration_point=1):
    """
    Analytical starting state for ``family`` about a collinear point.

    ``amplitude`` is Ax for Lyapunov orbits (default 1e-3) and the normalized
    Az for halo orbits (default 0.01).
    """
    mu = validate_mass_ratio(mu)
    family = validate_family(family)
    _check_libration_point(libration_point)

    if family.planar:
        return lyapunov_orbit_ic(mu, libration_point, 1e-3 if amplitude is None else amplitude)
    return halo_orbit_ic(mu, libration_point, 0.01 if amplitude is None else amplitude,
                         northern=family.northern)


def differential_correction(mu, family, amplitude=None, libration_point=1, max_iter=MAX_ITER,
                            tol=TOL, **solver_kwargs):
    """
    Compute a Lyapunov or halo orbit from its analytical approximation.

    Parameters
    ----------
    mu : float
        Mass ratio, 0 < mu < 0.5
    family : OrbitFamily or int
        1 for Lyapunov, 2 for northern halo, 3 for southern halo
    amplitude : float, optional
        Seeds the initial guess, see :func:`initial_guess`
    libration_point : int, optional
        Collinear point (1, 2 or 3). Default is 1.
    max_iter, tol :
        Iteration cap and residual tolerance of the corrector

    Returns
    -------
    PeriodicOrbitSolution
    """
    mu = validate_mass_ratio(mu)
    family = validate_family(family)

    x0 = initial_guess(mu, family, amplitude, libration_point)
    logger.debug(f"{family.name} initial guess about L{libration_point}: {x0}")
    return correct(x0, mu, family, max_iter=max_iter, tol=tol,
                   libration_point=libration_point, **solver_kwargs)
