"""
astrocoords.reference.astrometry
--------------------------------
Mean/apparent place reduction and frame rotations.

The IAU 2006/2000A reductions come from ERFA. The FK4 (B1950) <-> FK5
(J2000) conversion follows the Standish (1982) rotation with E-term removal,
as used by the classic SLALIB routines; ERFA has no FK4 support.

All angles are radians; proper motions are radians per year in RA (dRA/dt,
not cos(dec) * dRA/dt) and Dec; parallax is arcsec; radial velocity km/s.
"""

from __future__ import annotations

import math
from typing import Tuple

import erfa
import numpy as np

from ..core.angle import wrap_2pi
from .spherical import from_cartesian, to_cartesian
from .time_scales import MJD_ZERO, besselian_epoch_to_mjd, julian_epoch

# arcsec per radian, and the same per century (proper motions in arcsec/century)
DR2AS = 180.0 * 3600.0 / math.pi
PMF = 100.0 * DR2AS

TROPICAL_YEAR = 365.242198781
JULIAN_YEAR = 365.25


# ============================================================
# Mean <-> apparent
# ============================================================

def mean_to_apparent(
    ra: float,
    dec: float,
    mjd_tt: float,
    *,
    pm_ra: float = 0.0,
    pm_dec: float = 0.0,
    parallax: float = 0.0,
    rv: float = 0.0,
) -> Tuple[float, float]:
    """
    J2000 mean place (epoch 2000.0) -> geocentric apparent place of date.

    Applies proper motion, parallax, light deflection, annual aberration,
    precession and nutation. The returned RA is referred to the true
    equinox of date, so that LST - RA is the apparent hour angle.
    """
    ri, di, eo = erfa.atci13(ra, dec, pm_ra, pm_dec, parallax, rv, MJD_ZERO, mjd_tt)
    return wrap_2pi(float(ri) - float(eo)), float(di)


def apparent_to_mean(ra_app: float, dec_app: float, mjd_tt: float) -> Tuple[float, float]:
    """
    Geocentric apparent place of date -> J2000 mean place (inverse of
    `mean_to_apparent` for a star with no proper motion or parallax).
    """
    eo = erfa.eo06a(MJD_ZERO, mjd_tt)
    rc, dc, _ = erfa.atic13(wrap_2pi(ra_app + float(eo)), dec_app, MJD_ZERO, mjd_tt)
    return wrap_2pi(float(rc)), float(dc)


# ============================================================
# FK4 (B1950) <-> FK5 (J2000)
# ============================================================

# E-terms of aberration (radians) and their rate (arcsec per tropical century)
_E_TERMS = np.array([-1.62557e-6, -0.31919e-6, -0.13843e-6])
_E_TERMS_DOT = np.array([+1.245e-3, -1.580e-3, -0.659e-3])

# Position rotation FK4 -> FK5
_FK4_TO_FK5 = np.array([
    [+0.9999256782, -0.0111820611, -0.0048579477],
    [+0.0111820610, +0.9999374784, -0.0000271765],
    [+0.0048579479, -0.0000271474, +0.9999881997],
])

# Fictitious FK4 proper motion induced by position (arcsec per century)
_FK4_TO_FK5_DOT = np.array([
    [-0.000551, -0.238565, +0.435739],
    [+0.238514, -0.002667, -0.008541],
    [-0.435623, +0.012254, +0.002117],
])


def _remove_e_terms(r0: np.ndarray, a: np.ndarray) -> np.ndarray:
    return r0 - a + float(r0 @ a) * r0


def _add_e_terms(v: np.ndarray, a: np.ndarray) -> np.ndarray:
    u = v / np.linalg.norm(v)
    w = u + a - float(u @ a) * u
    return w / np.linalg.norm(w)


def fk4_to_fk5(ra1950: float, dec1950: float, bepoch: float = 1950.0) -> Tuple[float, float]:
    """
    FK4 B1950 position observed at Besselian epoch `bepoch` -> FK5 J2000,
    assuming zero proper motion in the FK5 system.
    """
    r0 = to_cartesian(ra1950, dec1950)
    a1 = _E_TERMS + (bepoch - 1950.0) / PMF * _E_TERMS_DOT
    v1 = _remove_e_terms(r0, a1)

    pos = _FK4_TO_FK5 @ v1
    vel = (_FK4_TO_FK5_DOT @ v1)

    # Allow for the fictitious proper motion in FK4
    w = (julian_epoch(besselian_epoch_to_mjd(bepoch)) - 2000.0) / PMF
    return from_cartesian(pos + w * vel)


def fk5_to_fk4(ra2000: float, dec2000: float, bepoch: float = 1950.0) -> Tuple[float, float]:
    """
    FK5 J2000 (zero FK5 proper motion) -> FK4 B1950 position at Besselian
    epoch `bepoch`. Exact inverse of `fk4_to_fk5` up to the second-order
    E-term approximation.
    """
    p = to_cartesian(ra2000, dec2000)
    w = (julian_epoch(besselian_epoch_to_mjd(bepoch)) - 2000.0) / PMF
    v1 = np.linalg.solve(_FK4_TO_FK5 + w * _FK4_TO_FK5_DOT, p)
    a1 = _E_TERMS + (bepoch - 1950.0) / PMF * _E_TERMS_DOT
    return from_cartesian(_add_e_terms(v1, a1))


def fk4_to_fk5_with_motion(
    ra1950: float,
    dec1950: float,
    pm_ra: float,
    pm_dec: float,
) -> Tuple[float, float, float, float]:
    """
    FK4 B1950 position and proper motion (radians per tropical year, dRA/dt)
    -> FK5 J2000 position at epoch 2000.0 and proper motion (radians per
    Julian year).

    The velocity rotation is approximated by the position rotation plus the
    position-dependent fictitious motion; radial velocity is taken as zero.
    """
    sr, cr = math.sin(ra1950), math.cos(ra1950)
    sd, cd = math.sin(dec1950), math.cos(dec1950)
    # to radians per tropical century
    ur = pm_ra * 100.0
    ud = pm_dec * 100.0

    r0 = np.array([cr * cd, sr * cd, sd])
    r0dot = np.array([
        -sr * cd * ur - cr * sd * ud,
        cr * cd * ur - sr * sd * ud,
        cd * ud,
    ])

    a = _E_TERMS
    adot = _E_TERMS_DOT / DR2AS
    v1 = _remove_e_terms(r0, a)
    v1dot = r0dot - adot + float(r0 @ adot) * r0

    # The fictitious FK4 motion enters the FK5 proper motion only; the
    # position is carried from epoch 1950 to 2000 along the true motion.
    centuries = (2000.0 - 1950.0) * JULIAN_YEAR / TROPICAL_YEAR / 100.0
    pos = _FK4_TO_FK5 @ (v1 + centuries * v1dot)
    vel = _FK4_TO_FK5 @ v1dot + (_FK4_TO_FK5_DOT @ v1) / DR2AS

    x, y, z = pos
    xd, yd, zd = vel
    rxy2 = x * x + y * y
    r2 = rxy2 + z * z
    rxy = math.sqrt(rxy2)
    ra = wrap_2pi(math.atan2(y, x))
    dec = math.atan2(z, rxy)

    if rxy2 > 0.0:
        ra_dot = (x * yd - y * xd) / rxy2
        dec_dot = (zd * rxy2 - z * (x * xd + y * yd)) / (r2 * rxy)
    else:
        ra_dot = 0.0
        dec_dot = 0.0

    # radians per tropical century -> radians per Julian year
    per_year = JULIAN_YEAR / TROPICAL_YEAR / 100.0
    return ra, dec, ra_dot * per_year, dec_dot * per_year


# ============================================================
# Galactic, supergalactic, ecliptic
# ============================================================

# Galactic -> supergalactic (de Vaucouleurs et al. 1976)
_GAL_TO_SUPERGAL = np.array([
    [-0.735742574804, +0.677261296414, +0.000000000000],
    [-0.074553778365, -0.080991471307, +0.993922590400],
    [+0.673145302109, +0.731271165817, +0.110081262225],
])


def equatorial_to_galactic(ra: float, dec: float) -> Tuple[float, float]:
    lon, lat = erfa.icrs2g(ra, dec)
    return wrap_2pi(float(lon)), float(lat)


def galactic_to_equatorial(glon: float, glat: float) -> Tuple[float, float]:
    ra, dec = erfa.g2icrs(glon, glat)
    return wrap_2pi(float(ra)), float(dec)


def galactic_to_supergalactic(glon: float, glat: float) -> Tuple[float, float]:
    return from_cartesian(_GAL_TO_SUPERGAL @ to_cartesian(glon, glat))


def supergalactic_to_galactic(sglon: float, sglat: float) -> Tuple[float, float]:
    return from_cartesian(_GAL_TO_SUPERGAL.T @ to_cartesian(sglon, sglat))


def equatorial_to_ecliptic(ra: float, dec: float, mjd_tt: float) -> Tuple[float, float]:
    """J2000 RA/Dec -> ecliptic longitude/latitude (mean ecliptic and equinox of date)."""
    lon, lat = erfa.eqec06(MJD_ZERO, mjd_tt, ra, dec)
    return wrap_2pi(float(lon)), float(lat)
