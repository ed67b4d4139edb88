"""
Manifold computation module for the Circular Restricted Three-Body Problem (CR3BP).

The stable and unstable manifolds of a hyperbolic periodic orbit are seeded by
displacing points of the orbit along the eigendirections of its monodromy
matrix. The eigenvector found at the initial point is carried to every other
point of the orbit with the state transition matrix, so a single
eigendecomposition serves the whole sample.

Each seeded trajectory is integrated independently (stable branches backward in
time, unstable branches forward), optionally on a thread pool, and the results
are gathered in sample order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from astrodyn.config import MANIFOLD_EPS, MANIFOLD_POINTS, MANIFOLD_TF, STABILITY_DELTA
from astrodyn.core.parameters import CR3BParameters
from astrodyn.dynamics.propagator import Trajectory, propagate
from astrodyn.dynamics.stm import compute_stm
from astrodyn.exceptions import DegenerateMonodromyError, DivergenceError, InvalidParameterError
from astrodyn.manifolds.analysis import surface_of_section

logger = logging.getLogger(__name__)


def _select_eigendirection(monodromy, stable, delta=STABILITY_DELTA, state=None):
    """
    Pick the dominant real stable or unstable eigenpair of a monodromy matrix.

    Only real eigenvalues qualify. Among those with |λ| > 1 + delta (unstable)
    the largest is chosen, among those with |λ| < 1 - delta (stable) the
    smallest. The eigenvector is returned real, with unit norm and its
    largest-magnitude component positive.

    ``state`` is only attached to the error for diagnosis. The error residual
    is the largest |log|λ|| over the real eigenvalues, i.e. how far the most
    hyperbolic real eigenvalue got from the unit circle.

    Raises
    ------
    DegenerateMonodromyError
        If no real eigenvalue clears the threshold
    """
    M = np.asarray(monodromy, dtype=np.float64)
    if M.shape != (6, 6) or not np.all(np.isfinite(M)):
        raise DegenerateMonodromyError(f"Monodromy must be a finite 6x6 matrix, got shape {M.shape}",
                                       state=state)

    eigvals, eigvecs = np.linalg.eig(M)
    mags = np.abs(eigvals)
    real = np.abs(eigvals.imag) <= 1e-8 * np.maximum(mags, 1e-300)

    if stable:
        candidates = np.nonzero(real & (mags < 1.0 - delta))[0]
    else:
        candidates = np.nonzero(real & (mags > 1.0 + delta))[0]

    if candidates.size == 0:
        kind = "stable" if stable else "unstable"
        real_mags = mags[real]
        metric = float(np.max(np.abs(np.log(real_mags)))) if real_mags.size else 0.0
        logger.error(f"No real {kind} eigenvalue beyond 1 +/- {delta:g}: {eigvals}")
        raise DegenerateMonodromyError(
            f"Monodromy has no real {kind} eigenvalue beyond 1 +/- {delta:g}",
            eigenvalues=eigvals, state=state, residual=metric
        )

    # Furthest from the unit circle
    k = candidates[np.argmax(np.abs(np.log(mags[candidates])))]

    w = np.real(eigvecs[:, k])
    w = w / np.linalg.norm(w)
    if w[np.argmax(np.abs(w))] < 0:
        w = -w
    return float(np.real(eigvals[k])), w


def _perturb(state, stm_at_point, direction, eps):
    """Displace ``state`` by ``eps`` in position along ``stm_at_point @ direction``."""
    x = np.asarray(state, dtype=np.float64).reshape(6)
    v = np.asarray(stm_at_point, dtype=np.float64).reshape(6, 6) @ direction

    full = np.linalg.norm(v)
    if not np.isfinite(full) or full == 0.0:
        raise DivergenceError("Transported eigendirection vanished or is not finite",
                              state=x, residual=float(full))

    scale = np.linalg.norm(v[:3])
    if scale <= 1e-12 * full:
        scale = full
    return x + eps * v / scale


def diverge(state, stm_at_point, monodromy, eps=MANIFOLD_EPS, delta=STABILITY_DELTA):
    """
    Perturb a point of a periodic orbit onto its unstable manifold.

    Parameters
    ----------
    state : array_like
        Point of the periodic orbit
    stm_at_point : array_like
        6x6 STM from the orbit's initial point to ``state``
    monodromy : array_like
        6x6 monodromy matrix at the orbit's initial point
    eps : float, optional
        Position-space size of the displacement; the sign picks the branch
    delta : float, optional
        Minimum distance of |λ| from 1 for an eigenvalue to count as unstable

    Returns
    -------
    ndarray
        New perturbed state; the inputs are left untouched

    Raises
    ------
    DegenerateMonodromyError
        If ``monodromy`` has no real unstable eigenvalue
    """
    _, w = _select_eigendirection(monodromy, stable=False, delta=delta,
                                  state=np.array(state, dtype=np.float64))
    return _perturb(state, stm_at_point, w, eps)


def converge(state, stm_at_point, monodromy, eps=MANIFOLD_EPS, delta=STABILITY_DELTA):
    """Perturb a point of a periodic orbit onto its stable manifold.

    Mirrors :func:`diverge` with the stable eigendirection.
    """
    _, w = _select_eigendirection(monodromy, stable=True, delta=delta,
                                  state=np.array(state, dtype=np.float64))
    return _perturb(state, stm_at_point, w, eps)


@dataclass
class ManifoldResult:
    """Container for manifold computation results."""
    stable: bool
    eigenvalue: float
    initial_states: List[np.ndarray] = field(default_factory=list)
    trajectories: List[Optional[Trajectory]] = field(default_factory=list)
    section_points: np.ndarray = field(default_factory=lambda: np.empty((0, 6)))
    section_times: np.ndarray = field(default_factory=lambda: np.empty(0))
    success_count: int = 0
    attempt_count: int = 0

    @property
    def success_rate(self) -> float:
        """Return the success rate of manifold computations."""
        return self.success_count / max(1, self.attempt_count)


def _propagate_branch(x0W, parameters, tf, steps, solver_kwargs):
    traj = propagate(x0W, parameters, (0.0, tf), steps=steps, **solver_kwargs)
    if not traj.success or not np.all(np.isfinite(traj.states)):
        return None
    return traj


def compute_manifold(x0, period, mu, stable=True, direction=1, n_points=MANIFOLD_POINTS,
                     eps=MANIFOLD_EPS, tf=MANIFOLD_TF, steps=1000, section=2, n_workers=None,
                     show_progress=True, delta=STABILITY_DELTA, **solver_kwargs):
    """
    Computes the stable or unstable manifold of a periodic orbit in the CR3BP.

    Parameters
    ----------
    x0 : array_like
        Initial state of the periodic orbit
    period : float
        Full period of the orbit
    mu : float
        Mass parameter of the CR3BP system
    stable : bool, optional
        Stable (True, integrated backward) or unstable (False, integrated
        forward) manifold. Default is True.
    direction : {1, -1}, optional
        Branch of the manifold
    n_points : int, optional
        Number of points sampled evenly in time along the orbit
    eps : float, optional
        Position-space size of the initial displacement
    tf : float, optional
        Integration time of each manifold trajectory
    steps : int, optional
        Output samples per trajectory
    section : {0, 1, 2}, optional
        Plane of the Poincaré section (see :func:`surface_of_section`)
    n_workers : int, optional
        Propagate the trajectories on a thread pool with this many workers.
        Runs sequentially when None or 1.
    show_progress : bool, optional
        Whether to display a progress bar during computation
    **solver_kwargs
        Additional keyword arguments passed to the numerical integrator

    Returns
    -------
    ManifoldResult

    Raises
    ------
    InvalidParameterError
        For an invalid sample count, branch or time span
    DegenerateMonodromyError
        If the orbit has no real eigendirection of the requested kind
    """
    if int(n_points) < 1:
        raise InvalidParameterError(f"n_points must be positive, got {n_points}")
    if direction not in (1, -1):
        raise InvalidParameterError(f"direction must be 1 or -1, got {direction}")
    if not (period > 0 and tf > 0):
        raise InvalidParameterError(f"period and tf must be positive, got {period}, {tf}")

    parameters = CR3BParameters(mu)
    kind = "stable" if stable else "unstable"
    logger.info(f"Computing {kind} manifold ({'positive' if direction == 1 else 'negative'} branch) "
                f"from {n_points} points")

    t_samples = np.linspace(0.0, period, int(n_points) + 1)
    orbit = compute_stm(x0, mu, period, t_eval=t_samples, **solver_kwargs)
    if not orbit.success:
        raise DivergenceError(f"Periodic orbit propagation failed: {orbit.message}", state=np.asarray(x0))

    eigenvalue, w = _select_eigendirection(orbit.final_stm, stable=stable, delta=delta,
                                           state=np.array(x0, dtype=np.float64))
    logger.debug(f"{kind} eigenvalue {eigenvalue:.6e}")

    seeds = [_perturb(orbit.states[k], orbit.stms[k], w, direction * eps) for k in range(int(n_points))]
    t_final = -tf if stable else tf

    def task(x0W):
        return _propagate_branch(x0W, parameters, t_final, steps, solver_kwargs)

    desc = f"{kind.capitalize()} manifold"
    if n_workers is not None and n_workers > 1:
        # Threads avoid pickling the numba kernels
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            trajectories = list(tqdm(executor.map(task, seeds), total=len(seeds), desc=desc,
                                     disable=not show_progress))
    else:
        trajectories = [task(x0W) for x0W in tqdm(seeds, desc=desc, disable=not show_progress)]

    result = ManifoldResult(stable=stable, eigenvalue=eigenvalue, initial_states=seeds,
                            trajectories=trajectories, attempt_count=len(seeds))

    points, times = [], []
    for k, traj in enumerate(trajectories):
        if traj is None:
            logger.warning(f"Manifold trajectory {k} failed to propagate")
            continue
        result.success_count += 1
        Xy0, Ty0 = surface_of_section(traj.states, traj.times, mu, M=section)
        points.extend(Xy0)
        times.extend(Ty0)

    result.section_points = np.array(points).reshape(-1, 6)
    result.section_times = np.array(times)

    logger.info(f"Manifold computation completed. Success rate: {result.success_count}/{result.attempt_count} "
                f"points ({result.success_rate * 100:.1f}%), {len(times)} section crossings")
    return result
