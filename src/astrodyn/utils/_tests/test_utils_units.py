import numpy as np
import pytest

from astrodyn.utils import (
    Constants,
    dimless_time,
    mass_parameter,
    mean_motion,
    si_time,
    to_crtbp_units,
    to_si_units,
)


@pytest.fixture
def earth_moon():
    return (
        Constants.get_mass("earth"),
        Constants.get_mass("moon"),
        Constants.get_orbital_distance("earth", "moon"),
    )


def test_mass_parameter(earth_moon):
    m1, m2, _ = earth_moon
    assert mass_parameter(m1, m2) == pytest.approx(0.01215, abs=1e-4)


def test_mean_motion_gives_sidereal_month(earth_moon):
    period_days = 2 * np.pi / mean_motion(*earth_moon) / 86400.0
    assert period_days == pytest.approx(27.3, abs=0.2)


def test_state_unit_round_trip(earth_moon):
    state_si = np.array([3.0e8, -1.0e7, 2.0e6, 100.0, 950.0, -3.0])
    dimless = to_crtbp_units(state_si, *earth_moon)
    assert dimless[0] == pytest.approx(3.0e8 / earth_moon[2])
    np.testing.assert_allclose(to_si_units(dimless, *earth_moon), state_si, rtol=1e-14)


def test_time_round_trip(earth_moon):
    one_day = 86400.0
    assert si_time(dimless_time(one_day, *earth_moon), *earth_moon) == pytest.approx(one_day)
    assert dimless_time(si_time(2 * np.pi, *earth_moon), *earth_moon) == pytest.approx(2 * np.pi)


def test_unknown_body():
    with pytest.raises(KeyError):
        Constants.get_mass("pluto")
    with pytest.raises(KeyError):
        Constants.get_orbital_distance("moon", "earth")
    assert Constants.get_gm("earth") == pytest.approx(3.986e14, rel=1e-3)
