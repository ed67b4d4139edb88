import numpy as np
import pytest

from astrodyn.core import CartesianState, CR3BParameters, crtbp_energy
from astrodyn.dynamics import monodromy, propagate
from astrodyn.exceptions import ConvergenceError, DivergenceError, InvalidParameterError
from astrodyn.orbits import (
    OrbitFamily,
    PeriodicOrbitSolution,
    correct,
    differential_correction,
    initial_guess,
)

MU_EM = 0.012150584395829193


@pytest.fixture(scope="module")
def lyapunov_solution():
    return differential_correction(MU_EM, OrbitFamily.LYAPUNOV, amplitude=1e-3, libration_point=1)


@pytest.fixture(scope="module")
def halo_solution():
    return differential_correction(MU_EM, 2, amplitude=0.01, libration_point=1, tol=1e-11)


def test_lyapunov_converges(lyapunov_solution):
    sol = lyapunov_solution
    assert isinstance(sol, PeriodicOrbitSolution)
    assert sol.family is OrbitFamily.LYAPUNOV
    assert sol.iterations <= 50
    assert sol.residual < 1e-12
    assert sol.state[1] == 0.0 and sol.state[2] == 0.0
    assert sol.period == pytest.approx(2 * sol.half_period)
    # Small planar orbits about L1 have a period near 2.69
    assert sol.period == pytest.approx(2.69, abs=0.02)


def test_lyapunov_closes_after_one_period(lyapunov_solution):
    sol = lyapunov_solution
    traj = propagate(sol.state, CR3BParameters(MU_EM), (0.0, sol.period))
    np.testing.assert_allclose(traj.final_state, sol.state, rtol=0, atol=1e-8)


def test_halo_converges_out_of_plane(halo_solution):
    sol = halo_solution
    assert sol.family is OrbitFamily.HALO_NORTHERN
    assert sol.residual <= 1e-11
    assert sol.state[2] > 0, "Northern halo starts above the x-y plane"
    assert sol.libration_point == 1
    assert sol.mu == MU_EM

    cartesian = sol.to_cartesian_state()
    assert isinstance(cartesian, CartesianState)
    np.testing.assert_array_equal(cartesian.to_array(), sol.state)
    assert cartesian.z == sol.state[2]

    traj = propagate(sol.state, CR3BParameters(MU_EM), (0.0, sol.period), steps=200)
    assert np.max(np.abs(traj.states[:, 2])) > 1e-4
    np.testing.assert_allclose(traj.final_state, sol.state, rtol=0, atol=1e-7)


def test_southern_halo_mirrors_northern(halo_solution):
    south = differential_correction(MU_EM, OrbitFamily.HALO_SOUTHERN, amplitude=0.01, tol=1e-11)
    mirrored = halo_solution.state * np.array([1, 1, -1, 1, 1, -1])
    np.testing.assert_allclose(south.state, mirrored, rtol=0, atol=1e-9)
    assert south.period == pytest.approx(halo_solution.period, abs=1e-9)


def test_monodromy_has_unit_eigenvalue(lyapunov_solution):
    sol = lyapunov_solution
    M = monodromy(sol.state, MU_EM, sol.period)
    eigvals = np.linalg.eigvals(M)
    assert np.min(np.abs(np.abs(eigvals) - 1.0)) < 1e-6
    assert np.max(np.abs(eigvals)) > 10, "Planar L1 orbits are strongly unstable"


def test_correction_is_deterministic():
    a = differential_correction(MU_EM, 1, amplitude=2e-3)
    b = differential_correction(MU_EM, 1, amplitude=2e-3)
    assert np.array_equal(a.state, b.state)
    assert a.half_period == b.half_period
    assert a.iterations == b.iterations


def test_energy_of_solution_matches_propagation(lyapunov_solution):
    sol = lyapunov_solution
    traj = propagate(sol.state, CR3BParameters(MU_EM), (0.0, sol.half_period))
    assert crtbp_energy(traj.final_state, MU_EM) == pytest.approx(crtbp_energy(sol.state, MU_EM), abs=1e-11)


@pytest.mark.parametrize("mu", [0.0, 0.5, -0.01, 0.7, np.nan, "earth"])
def test_invalid_mass_ratio(mu):
    with pytest.raises(InvalidParameterError):
        differential_correction(mu, OrbitFamily.LYAPUNOV)


@pytest.mark.parametrize("family", [0, 4, -1, "halo", True])
def test_invalid_family(family):
    with pytest.raises(InvalidParameterError):
        differential_correction(MU_EM, family)


def test_invalid_libration_point():
    with pytest.raises(InvalidParameterError):
        differential_correction(MU_EM, 1, libration_point=4)


def test_exhausted_budget_reports_last_iterate():
    guess = initial_guess(MU_EM, OrbitFamily.LYAPUNOV, amplitude=1e-2)
    with pytest.raises(ConvergenceError) as info:
        correct(guess, MU_EM, OrbitFamily.LYAPUNOV, max_iter=0)
    err = info.value
    assert err.iterations == 0
    assert err.residual > 1e-12
    np.testing.assert_array_equal(err.state, guess)


def test_one_iteration_is_not_enough_for_a_large_orbit():
    guess = initial_guess(MU_EM, OrbitFamily.LYAPUNOV, amplitude=2e-2)
    with pytest.raises(ConvergenceError) as info:
        correct(guess, MU_EM, OrbitFamily.LYAPUNOV, max_iter=1)
    assert info.value.iterations == 1
    assert np.all(np.isfinite(info.value.state))


def test_non_finite_guess_diverges():
    guess = np.array([np.nan, 0.0, 0.0, 0.0, 0.1, 0.0])
    with pytest.raises(DivergenceError) as info:
        correct(guess, MU_EM, OrbitFamily.LYAPUNOV)
    assert info.value.state is not None


def test_guess_without_crossing_diverges():
    # Starting on the plane with no y-velocity never leaves it
    with pytest.raises(DivergenceError):
        correct(np.array([0.8, 0.0, 0.0, 0.0, 0.0, 0.0]), MU_EM, OrbitFamily.LYAPUNOV)
