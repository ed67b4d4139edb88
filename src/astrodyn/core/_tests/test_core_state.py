import numpy as np
import pytest

from astrodyn.core import (
    CartesianState,
    Conic,
    CR3BParameters,
    OrbitalElements,
    R2BParameters,
    System,
    cartesian_to_elements,
    collinear_gamma,
    conic,
    crtbp_energy,
    elements_to_cartesian,
    energy_to_jacobi,
    jacobi_constant,
    jacobi_to_energy,
    lagrange_point,
    lagrange_points,
)
from astrodyn.core.lagrange_points import _dOmega_dx
from astrodyn.core.orbit import Orbit
from astrodyn.exceptions import InvalidParameterError

MU_EARTH = 398600.4418  # km^3/s^2
MU_EM = 0.012150584395829193


@pytest.fixture
def leo_state():
    return CartesianState(7000.0, -1200.0, 300.0, 1.1, 7.3, 0.9)


def test_state_array_conversions(leo_state):
    arr = np.asarray(leo_state)
    assert arr.shape == (6,)
    assert arr.dtype == np.float64
    assert CartesianState.from_array(arr) == leo_state
    np.testing.assert_array_equal(leo_state.position, arr[:3])
    np.testing.assert_array_equal(leo_state.velocity, arr[3:])


def test_state_is_immutable(leo_state):
    with pytest.raises(AttributeError):
        leo_state.x = 0.0
    moved = leo_state.replace(x=1.0)
    assert moved.x == 1.0
    assert leo_state.x == 7000.0


def test_zero_initialization_and_finiteness():
    assert CartesianState.zeros().to_array().tolist() == [0.0] * 6
    assert OrbitalElements.zeros().to_array().tolist() == [0.0] * 6
    assert not CartesianState(np.nan, 0, 0, 0, 0, 0).is_finite()
    with pytest.raises(ValueError):
        CartesianState.from_array([1.0, 2.0, 3.0])


def test_parameter_validation():
    assert CR3BParameters(MU_EM).system is System.CR3B
    assert R2BParameters(MU_EARTH).system is System.TWO_BODY
    for bad in (0.0, 1.0, -0.1, np.nan):
        with pytest.raises(InvalidParameterError):
            CR3BParameters(bad)
    with pytest.raises(InvalidParameterError):
        R2BParameters(-1.0)
    # InvalidParameterError is also a ValueError
    with pytest.raises(ValueError):
        R2BParameters(0.0)


def test_parameters_from_bodies():
    em = CR3BParameters.from_bodies("earth", "moon")
    assert em.mu == pytest.approx(0.01215, abs=1e-4)
    earth = R2BParameters.from_body("Earth")
    assert earth.mu == pytest.approx(MU_EARTH, rel=1e-3)
    np.testing.assert_array_equal(np.asarray(earth), [earth.mu])


@pytest.mark.parametrize("elements", [
    OrbitalElements(0.1, 7000.0, 0.5, 1.0, 2.0, 0.3),
    OrbitalElements(0.7, 26000.0, 1.1, 4.0, 0.4, 5.5),
    OrbitalElements(1.5, -10000.0, 0.3, 0.2, 1.2, 0.5),
])
def test_elements_round_trip(elements):
    state = elements_to_cartesian(elements, MU_EARTH)
    recovered = cartesian_to_elements(state, MU_EARTH)
    np.testing.assert_allclose(recovered.to_array(), elements.to_array(), rtol=1e-9, atol=1e-9)

    again = elements_to_cartesian(recovered, MU_EARTH)
    np.testing.assert_allclose(again.to_array(), state.to_array(), rtol=1e-10, atol=1e-8)


def test_state_round_trip(leo_state):
    elements = cartesian_to_elements(leo_state, MU_EARTH)
    state = elements_to_cartesian(elements, MU_EARTH)
    np.testing.assert_allclose(state.to_array(), leo_state.to_array(), rtol=1e-10, atol=1e-8)


def test_circular_equatorial_convention():
    v = np.sqrt(MU_EARTH / 7000.0)
    state = CartesianState(0.0, 7000.0, 0.0, -v, 0.0, 0.0)
    elements = cartesian_to_elements(state, MU_EARTH)
    assert elements.e < 1e-10
    assert elements.i == pytest.approx(0.0, abs=1e-12)
    assert elements.raan == 0.0
    # All the angle is absorbed into the true anomaly
    assert elements.argp + elements.nu == pytest.approx(np.pi / 2, abs=1e-9)


def test_conic_classification():
    assert conic(0.0) is Conic.CIRCULAR
    assert conic(0.5) is Conic.ELLIPTICAL
    assert conic(1.0) is Conic.PARABOLIC
    assert conic(2.0) is Conic.HYPERBOLIC
    with pytest.raises(InvalidParameterError):
        conic(-0.1)


def test_degenerate_elements_rejected():
    with pytest.raises(InvalidParameterError):
        elements_to_cartesian(OrbitalElements(1.0, 7000.0, 0.0, 0.0, 0.0, 0.0), MU_EARTH)
    with pytest.raises(InvalidParameterError):
        # Beyond the asymptote of a hyperbola with e=2
        elements_to_cartesian(OrbitalElements(2.0, -7000.0, 0.0, 0.0, 0.0, 2.5), MU_EARTH)


def test_two_body_orbit_properties(leo_state):
    orbit = Orbit(leo_state, R2BParameters(MU_EARTH))
    assert orbit.conic is Conic.ELLIPTICAL
    assert orbit.eccentricity == pytest.approx(orbit.elements.e)
    assert orbit.specific_energy < 0
    a = orbit.elements.a
    assert orbit.period == pytest.approx(2 * np.pi * np.sqrt(a**3 / MU_EARTH))
    with pytest.raises(InvalidParameterError):
        orbit.jacobi_constant


def test_cr3bp_orbit_properties():
    orbit = Orbit(np.array([0.8, 0.0, 0.0, 0.0, 0.1, 0.0]), CR3BParameters(MU_EM))
    assert isinstance(orbit.state, CartesianState)
    assert orbit.jacobi_constant == pytest.approx(-2 * orbit.energy)
    with pytest.raises(InvalidParameterError):
        orbit.elements


def test_lagrange_points():
    points = lagrange_points(MU_EM)
    assert points.shape == (5, 3)
    assert points[0, 0] == pytest.approx(0.836915, abs=1e-6)
    assert points[1, 0] == pytest.approx(1.155682, abs=1e-6)
    assert points[2, 0] == pytest.approx(-1.005063, abs=1e-6)
    for i in (1, 2, 3):
        assert abs(float(_dOmega_dx(lagrange_point(MU_EM, i)[0], MU_EM))) < 1e-12
    np.testing.assert_allclose(points[3], [0.5 - MU_EM, np.sqrt(3) / 2, 0.0])
    with pytest.raises(InvalidParameterError):
        lagrange_point(MU_EM, 6)


def test_collinear_gamma():
    x1 = lagrange_point(MU_EM, 1)[0]
    assert collinear_gamma(MU_EM, 1) == pytest.approx(1 - MU_EM - x1)
    assert collinear_gamma(MU_EM, 3) == pytest.approx(-MU_EM - lagrange_point(MU_EM, 3)[0])
    with pytest.raises(InvalidParameterError):
        collinear_gamma(MU_EM, 4)


def test_energy_and_jacobi():
    state = np.array([0.8, 0.05, 0.01, 0.02, 0.1, -0.01])
    E = crtbp_energy(state, MU_EM)
    C = jacobi_constant(state, MU_EM)
    assert C == pytest.approx(energy_to_jacobi(E))
    assert jacobi_to_energy(C) == pytest.approx(E)
    # Zero-velocity value at L1 sits between the L1 and L2 gateway energies
    E1 = crtbp_energy(np.r_[lagrange_point(MU_EM, 1), 0, 0, 0], MU_EM)
    E2 = crtbp_energy(np.r_[lagrange_point(MU_EM, 2), 0, 0, 0], MU_EM)
    assert E1 < E2
