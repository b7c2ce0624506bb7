"""
astrocoords.reference.sidereal
------------------------------
Local apparent sidereal time.

LST = GMST(UT) + equation of the equinoxes + east longitude, wrapped to
[0, 2pi). UT1 is taken equal to UTC.
"""

from __future__ import annotations

import erfa

from ..core.angle import wrap_2pi
from .time_scales import MJD_ZERO

# Ratio of the solar to the sidereal day: converts sidereal angle to
# elapsed civil seconds.
SIDEREAL_TO_SOLAR = 365.2422 / 366.2422


def gast(mjd_utc: float) -> float:
    """Greenwich apparent sidereal time (radians) for MJD(UTC)."""
    return erfa.gst94(MJD_ZERO, mjd_utc)


def local_sidereal_time(mjd_utc: float, longitude: float = 0.0) -> float:
    """Local apparent sidereal time in radians, [0, 2pi). Longitude east-positive."""
    return wrap_2pi(gast(mjd_utc) + longitude)
