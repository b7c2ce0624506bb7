"""
astrocoords.reference.velocity
------------------------------
Line-of-sight velocity corrections (km/s).

Every function returns the component of the observer's (or frame origin's)
motion along the line of sight to (ra, dec), positive when receding from
the target.
"""

from __future__ import annotations

import math

import numpy as np

from .astrometry import galactic_to_equatorial
from .ephemerides import AU_KM, earth_state
from .spherical import to_cartesian

# Equatorial rotation speed of the Earth (km/s)
EARTH_ROTATION_SPEED = 0.4655

_AU_PER_DAY_TO_KM_S = AU_KM / 86400.0


def _apex(speed: float, glon_deg: float, glat_deg: float) -> np.ndarray:
    ra, dec = galactic_to_equatorial(math.radians(glon_deg), math.radians(glat_deg))
    return speed * to_cartesian(ra, dec)


# Solar motion relative to the kinematic LSR: 20 km/s toward
# RA 18h Dec +30 (B1900), expressed in J2000.
_SUN_WRT_LSRK = np.array([0.29000, -17.31726, 10.00141])

# Solar motion relative to the dynamical LSR (Delhaye 1965)
_SUN_WRT_LSRD = _apex(16.6, 53.0, 25.0)

# Rotation of the dynamical LSR about the Galactic centre
_LSRD_WRT_GALACTIC_CENTRE = _apex(220.0, 90.0, 0.0)

# Solar motion relative to the mean of the Local Group
_SUN_WRT_LOCAL_GROUP = _apex(300.0, 90.0, 0.0)


def _receding(apex: np.ndarray, ra: float, dec: float) -> float:
    return -float(apex @ to_cartesian(ra, dec))


def diurnal(lat: float, ha: float, dec: float) -> float:
    """Earth rotation term for an observer at latitude `lat`."""
    return EARTH_ROTATION_SPEED * math.cos(lat) * math.sin(ha) * math.cos(dec)


def orbital(ra: float, dec: float, mjd_tt: float, *, barycentric: bool = False) -> float:
    """Earth orbital term, heliocentric by default."""
    _, vh, _, vb = earth_state(mjd_tt)
    v = vb if barycentric else vh
    return -float(v @ to_cartesian(ra, dec)) * _AU_PER_DAY_TO_KM_S


def lsr_kinematic(ra: float, dec: float) -> float:
    return _receding(_SUN_WRT_LSRK, ra, dec)


def lsr_dynamical(ra: float, dec: float) -> float:
    return _receding(_SUN_WRT_LSRD, ra, dec)


def galactocentric(ra: float, dec: float) -> float:
    return _receding(_LSRD_WRT_GALACTIC_CENTRE, ra, dec)


def local_group(ra: float, dec: float) -> float:
    return _receding(_SUN_WRT_LOCAL_GROUP, ra, dec)
