"""
Physical constants and unit conversions.
"""

from .constants import G, Constants
from .crtbp import (
    mass_parameter,
    mean_motion,
    to_crtbp_units,
    to_si_units,
    dimless_time,
    si_time
)

__all__ = [
    'G',
    'Constants',
    'mass_parameter',
    'mean_motion',
    'to_crtbp_units',
    'to_si_units',
    'dimless_time',
    'si_time'
]
