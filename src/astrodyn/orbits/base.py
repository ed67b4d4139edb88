"""
Base class for periodic orbits in the Circular Restricted Three-Body Problem.

This module defines the interface shared by the symmetric periodic orbits
(Lyapunov and halo): differential correction, propagation over one period,
monodromy and stability analysis, invariant manifolds and natural-parameter
continuation of the family.
"""

from abc import ABC, abstractmethod

import numpy as np
from tqdm import tqdm

from astrodyn.config import MAX_ITER, TOL
from astrodyn.core.energy import crtbp_energy, energy_to_jacobi
from astrodyn.core.parameters import CR3BParameters
from astrodyn.dynamics.propagator import propagate
from astrodyn.dynamics.stm import monodromy
from astrodyn.exceptions import InvalidParameterError
from astrodyn.manifolds.analysis import stability_indices
from astrodyn.manifolds.manifold import compute_manifold
from astrodyn.orbits.corrector import correct, validate_mass_ratio


class PeriodicOrbit(ABC):
    """
    Abstract base class for periodic orbits in the CR3BP.

    Attributes
    ----------
    mu : float
        Mass parameter of the CR3BP system
    initial_state : ndarray
        Initial state vector [x, y, z, vx, vy, vz]
    period : float or None
        Orbital period, known once the orbit has been corrected
    L_i : int
        Libration point index (1-3)
    solution : PeriodicOrbitSolution or None
        Result of the last differential correction
    """

    # State component stepped during family continuation
    _continuation_index = 0

    def __init__(self, mu, initial_state, period=None, L_i=None):
        self.mu = validate_mass_ratio(mu)
        self.initial_state = np.array(initial_state, dtype=np.float64).reshape(6)
        self.period = period
        self.L_i = L_i
        self.solution = None
        self._stability_info = None

    def __repr__(self):
        period = "None" if self.period is None else f"{self.period:.6f}"
        return f"{type(self).__name__}(mu={self.mu!r}, L_i={self.L_i}, state={self.initial_state}, period={period})"

    @property
    @abstractmethod
    def family(self):
        """The :class:`OrbitFamily` handled by the corrector."""

    @property
    def energy(self):
        """Compute the energy (Hamiltonian) value of the orbit."""
        return crtbp_energy(self.initial_state, self.mu)

    @property
    def jacobi_constant(self):
        """Compute the Jacobi constant of the orbit."""
        return energy_to_jacobi(self.energy)

    def _require_period(self):
        if self.period is None:
            raise InvalidParameterError(
                f"{type(self).__name__} has no period; run differential_correction() first"
            )

    def differential_correction(self, tol=TOL, max_iter=MAX_ITER, **kwargs):
        """
        Correct the initial state into a periodic orbit.

        Parameters
        ----------
        tol : float, optional
            Tolerance for the differential corrector. Default is 1e-12.
        max_iter : int, optional
            Maximum number of iterations for the differential corrector. Default is 50.
        **kwargs
            Additional keyword arguments passed to the integrator

        Returns
        -------
        ndarray
            Corrected initial state
        """
        solution = correct(self.initial_state, self.mu, self.family, max_iter=max_iter, tol=tol,
                           libration_point=self.L_i, **kwargs)
        self.solution = solution
        self.initial_state = solution.state.copy()
        self.period = solution.period
        self._stability_info = None
        return self.initial_state

    def propagate(self, steps=1000, **kwargs):
        """
        Propagate the orbit for one period.

        Returns
        -------
        Trajectory
            ``steps`` samples evenly spaced over one period
        """
        self._require_period()
        return propagate(self.initial_state, CR3BParameters(self.mu), (0.0, self.period),
                         steps=steps, **kwargs)

    def monodromy(self, **kwargs):
        """6x6 STM over one period from the initial state."""
        self._require_period()
        return monodromy(self.initial_state, self.mu, self.period, **kwargs)

    def compute_stability(self, **kwargs):
        """
        Compute stability information for the orbit.

        Returns
        -------
        tuple
            (stability_indices, eigenvalues, eigenvectors) from the monodromy matrix
        """
        self._stability_info = stability_indices(self.monodromy(**kwargs))
        return self._stability_info

    @property
    def is_stable(self):
        """True if every stability index satisfies |ν| ≤ 1 up to round-off."""
        if self._stability_info is None:
            self.compute_stability()
        nu = self._stability_info[0]
        return bool(np.all(np.abs(nu) <= 1.0 + 1e-6))

    def manifold(self, stable=True, direction=1, **kwargs):
        """Stable or unstable manifold of the orbit, see :func:`compute_manifold`."""
        self._require_period()
        return compute_manifold(self.initial_state, self.period, self.mu, stable=stable,
                                direction=direction, **kwargs)

    @abstractmethod
    def _default_step(self):
        """Continuation step that grows the orbit's amplitude."""

    def _spawn(self, state):
        return type(self)(self.mu, state, L_i=self.L_i)

    def _predict(self, family, step):
        """
        Initial guess for the next family member.

        Once two members are known the whole state is extrapolated linearly
        through them (secant predictor); the continuation component itself is
        always exactly one ``step`` beyond the last member.
        """
        last = family[-1].initial_state
        next_state = last.copy()
        if len(family) > 1:
            next_state += last - family[-2].initial_state
        next_state[self._continuation_index] = last[self._continuation_index] + step
        return next_state

    def generate_family(self, n_orbits=10, step=None, tol=TOL, max_iter=MAX_ITER,
                        show_progress=True, **kwargs):
        """
        Generate a family of orbits by natural-parameter continuation.

        Each member starts from a prediction built from the corrected members
        before it, with the continuation component stepped by ``step``, and is
        corrected again.

        Parameters
        ----------
        n_orbits : int, optional
            Number of family members including this orbit. Default is 10.
        step : float, optional
            Increment of the continuation component; defaults to a small step
            that grows the amplitude
        tol, max_iter :
            Corrector settings for every member
        show_progress : bool, optional
            Display a progress bar

        Returns
        -------
        list
            Orbit objects of the family, this orbit first
        """
        if self.period is None:
            self.differential_correction(tol=tol, max_iter=max_iter, **kwargs)
        if step is None:
            step = self._default_step()

        family = [self]
        for _ in tqdm(range(1, int(n_orbits)), desc=f"{type(self).__name__} family",
                      disable=not show_progress):
            orbit = self._spawn(self._predict(family, step))
            orbit.differential_correction(tol=tol, max_iter=max_iter, **kwargs)
            family.append(orbit)

        return family

    @classmethod
    @abstractmethod
    def initial_guess(cls, mu, L_i, amplitude, **kwargs):
        """
        Generate an initial guess for an orbit of this type.

        Parameters
        ----------
        mu : float
            Mass parameter of the CR3BP system
        L_i : int
            Libration point index (1-3)
        amplitude : float
            Characteristic amplitude parameter for the orbit

        Returns
        -------
        PeriodicOrbit
            An uncorrected orbit object
        """
