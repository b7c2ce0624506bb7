from __future__ import annotations

import math
from typing import Optional, Tuple

import erfa
import numpy as np

from ..core.angle import wrap_2pi

HALF_PI = 0.5 * math.pi
_TANGENT_TINY = 1e-6


# ------------------------------------------------------------
# Equatorial <-> horizon
# ------------------------------------------------------------

def hadec_to_azel(ha: float, dec: float, lat: float) -> Tuple[float, float]:
    """
    (hour angle, declination) -> (azimuth, elevation) for latitude `lat`.
    Azimuth is measured north through east, [0, 2pi).
    Valid at the poles, where azimuth degenerates.
    """
    az, el = erfa.hd2ae(ha, dec, lat)
    return float(az), float(el)


def azel_to_hadec(az: float, el: float, lat: float) -> Tuple[float, float]:
    """(azimuth, elevation) -> (hour angle, declination)."""
    ha, dec = erfa.ae2hd(az, el, lat)
    return float(ha), float(dec)


def parallactic_angle(ha: float, dec: float, lat: float) -> float:
    return float(erfa.hd2pa(ha, dec, lat))


def airmass(el: float) -> float:
    """
    Airmass from elevation using Hardie's polynomial in (sec z - 1).
    The zenith distance is capped at 87 degrees, beyond which the
    polynomial is no longer meaningful.
    """
    zd = HALF_PI - el
    seczm1 = 1.0 / math.cos(min(1.52, abs(zd))) - 1.0
    return 1.0 + seczm1 * (0.9981833 - seczm1 * (0.002875 + 0.0008083 * seczm1))


# ------------------------------------------------------------
# Tangent plane
# ------------------------------------------------------------

def tangent_plane_offsets(ra: float, dec: float, ra0: float, dec0: float) -> Optional[Tuple[float, float]]:
    """
    Standard coordinates (xi, eta) of (ra, dec) on the plane tangent at
    (ra0, dec0). Returns None when the star is too far from the tangent point
    for a projection (90 degrees or more).
    """
    sdecz, cdecz = math.sin(dec0), math.cos(dec0)
    sdec, cdec = math.sin(dec), math.cos(dec)
    radif = ra - ra0
    sradif, cradif = math.sin(radif), math.cos(radif)

    denom = sdec * sdecz + cdec * cdecz * cradif
    if denom <= _TANGENT_TINY:
        return None
    xi = cdec * sradif / denom
    eta = (sdec * cdecz - cdec * sdecz * cradif) / denom
    return xi, eta


# ------------------------------------------------------------
# Vectors
# ------------------------------------------------------------

def to_cartesian(lon: float, lat: float) -> np.ndarray:
    return np.asarray(erfa.s2c(lon, lat), dtype=float)


def from_cartesian(v: np.ndarray) -> Tuple[float, float]:
    lon, lat = erfa.c2s(np.asarray(v, dtype=float))
    return wrap_2pi(float(lon)), float(lat)


def from_cartesian_r(v: np.ndarray) -> Tuple[float, float, float]:
    lon, lat, r = erfa.p2s(np.asarray(v, dtype=float))
    return wrap_2pi(float(lon)), float(lat), float(r)
