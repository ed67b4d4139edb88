"""
Physical constants for astrodynamics computations.

All values are SI (kg, m) and stored as numpy float64. The body table covers
the primaries used to build two-body and CR3BP parameter sets.

References
----------
- IAU 2015 Resolution B3
- NASA JPL Solar System Dynamics (https://ssd.jpl.nasa.gov/)
"""

import numpy as np

#: float: Universal gravitational constant (m^3 kg^-1 s^-2)
G = np.float64(6.67430e-11)

#: float: Mass of the Sun (kg)
M_sun = np.float64(1.989e30)

#: float: Mass of the Earth (kg)
M_earth = np.float64(5.972e24)

#: float: Mass of the Moon (kg)
M_moon = np.float64(7.348e22)

#: float: Mass of Jupiter (kg)
M_jupiter = np.float64(1.898e27)

#: float: Mean Earth-Moon distance (m)
R_earth_moon = np.float64(384400e3)

#: float: Mean Sun-Earth distance (m)
R_earth_sun = np.float64(149.6e9)

#: float: Mean Sun-Jupiter distance (m)
R_sun_jupiter = np.float64(778.5e9)

#: float: Equatorial radius of the Earth (m)
R_earth = np.float64(6378.137e3)

#: float: Mean radius of the Moon (m)
R_moon = np.float64(1737.4e3)


class Constants:
    """Lookup of body masses and primary-secondary distances by name."""

    _masses = {
        "sun": M_sun,
        "earth": M_earth,
        "moon": M_moon,
        "jupiter": M_jupiter,
    }

    _distances = {
        ("earth", "moon"): R_earth_moon,
        ("sun", "earth"): R_earth_sun,
        ("sun", "jupiter"): R_sun_jupiter,
    }

    @classmethod
    def get_mass(cls, body):
        try:
            return cls._masses[body.lower()]
        except KeyError:
            raise KeyError(f"Unknown body '{body}'") from None

    @classmethod
    def get_gm(cls, body):
        """Gravitational parameter G*M of a body in m^3/s^2."""
        return G * cls.get_mass(body)

    @classmethod
    def get_orbital_distance(cls, primary, secondary):
        key = (primary.lower(), secondary.lower())
        try:
            return cls._distances[key]
        except KeyError:
            raise KeyError(f"No orbital distance for {primary}-{secondary}") from None
