"""
astrocoords.reference.ephemerides
---------------------------------
Solar-system positions for the planet and orbital-element sources.

Pipeline for every body:
  1) geocentric astrometric position (light-time corrected, ICRS axes, AU)
  2) annual aberration, light deflection, precession-nutation  -> apparent
  3) topocentric shift for the observer                         -> ApparentPlace

Step 1 is pluggable through the `PlanetEphemeris` protocol. The default,
`ErfaEphemeris`, uses the ERFA analytical theories (EPV00 for the Earth,
PLAN94 for the major planets, MOON98 for the Moon) and a Keplerian orbit
for Pluto. A JPL-kernel provider lives in `astrocoords.ephemeris`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple

import erfa
import numpy as np

from ..core.types import ApparentPlace
from .astrometry import DR2AS, mean_to_apparent
from .sidereal import gast
from .spherical import from_cartesian_r, to_cartesian
from .time_scales import MJD_J2000, MJD_ZERO

AU_KM = 149597870.7
AU_M = AU_KM * 1000.0
C_KM_S = 299792.458
C_AU_PER_DAY = C_KM_S * 86400.0 / AU_KM

GAUSS_K = 0.01720209895
EPS_J2000 = 84381.406 / DR2AS   # mean obliquity of the ecliptic at J2000

PLANETS = (
    "sun", "mercury", "venus", "moon", "mars",
    "jupiter", "saturn", "uranus", "neptune", "pluto",
)

# Equatorial radii (km) for the apparent diameter
PLANET_RADII_KM: Dict[str, float] = {
    "sun": 696000.0,
    "mercury": 2439.7,
    "venus": 6051.8,
    "moon": 1737.4,
    "mars": 3389.5,
    "jupiter": 69911.0,
    "saturn": 58232.0,
    "uranus": 25362.0,
    "neptune": 24622.0,
    "pluto": 1188.3,
}

_PLAN94_INDEX = {
    "mercury": 1,
    "venus": 2,
    "mars": 4,
    "jupiter": 5,
    "saturn": 6,
    "uranus": 7,
    "neptune": 8,
}

_LIGHT_TIME_PASSES = 3
_KEPLER_MAX_ITER = 50
_KEPLER_TOL = 1e-12


# ============================================================
# Orbital elements
# ============================================================

@dataclass(frozen=True)
class OrbitalElements:
    """
    Osculating elements, angles in radians, distances in AU.

    The form is chosen by which optional fields are present:
      dm given           -> major planet: perih is the longitude of
                            perihelion, aorl the mean longitude, dm the
                            daily motion (radians/day)
      aorl given, no dm  -> minor planet: perih is the argument of
                            perihelion, aorl the mean anomaly
      neither            -> comet: epoch is the perihelion epoch and
                            aorq the perihelion distance
    """
    epoch: float    # MJD (TT)
    orbinc: float
    anode: float
    perih: float
    aorq: float
    e: float
    aorl: Optional[float] = None
    dm: Optional[float] = None

    @property
    def form(self) -> int:
        if self.dm is not None:
            return 1
        if self.aorl is not None:
            return 2
        return 3


# Pluto, J2000 mean ecliptic elements (Standish, JPL)
PLUTO_ELEMENTS = OrbitalElements(
    epoch=MJD_J2000,
    orbinc=math.radians(17.14001206),
    anode=math.radians(110.30393684),
    perih=math.radians(224.06891629),
    aorq=39.48211675,
    e=0.24882730,
    aorl=math.radians(238.92903833),
    dm=math.radians(145.20780515) / 36525.0,
)


def _solve_elliptic(m: float, e: float) -> Optional[Tuple[float, float]]:
    """Kepler's equation. Returns (true anomaly, r/a) or None."""
    m = math.remainder(m, 2.0 * math.pi)
    ea = m if e < 0.8 else math.copysign(math.pi, m)
    for _ in range(_KEPLER_MAX_ITER):
        d = (ea - e * math.sin(ea) - m) / (1.0 - e * math.cos(ea))
        ea -= d
        if abs(d) < _KEPLER_TOL:
            break
    else:
        return None
    nu = 2.0 * math.atan2(math.sqrt(1.0 + e) * math.sin(0.5 * ea),
                          math.sqrt(1.0 - e) * math.cos(0.5 * ea))
    return nu, 1.0 - e * math.cos(ea)


def _solve_hyperbolic(m: float, e: float) -> Optional[Tuple[float, float]]:
    """Hyperbolic Kepler equation e sinh H - H = M. Returns (nu, r/|a|) or None."""
    h = math.asinh(m / e)
    for _ in range(_KEPLER_MAX_ITER):
        d = (e * math.sinh(h) - h - m) / (e * math.cosh(h) - 1.0)
        h -= d
        if abs(d) < _KEPLER_TOL:
            break
    else:
        return None
    nu = 2.0 * math.atan(math.sqrt((e + 1.0) / (e - 1.0)) * math.tanh(0.5 * h))
    return nu, e * math.cosh(h) - 1.0


def _solve_parabolic(dt: float, q: float) -> Tuple[float, float]:
    """Barker's equation. Returns (nu, r)."""
    w = 3.0 * GAUSS_K * dt / math.sqrt(2.0 * q ** 3)
    y = (0.5 * w + math.sqrt(0.25 * w * w + 1.0)) ** (1.0 / 3.0)
    s = y - 1.0 / y
    return 2.0 * math.atan(s), q * (1.0 + s * s)


def heliocentric_position(el: OrbitalElements, mjd_tt: float) -> Optional[np.ndarray]:
    """
    Heliocentric position (AU, J2000 equatorial axes) from elements, or
    None when the elements are degenerate or the orbit cannot be solved.
    """
    e = el.e
    if not (math.isfinite(e) and e >= 0.0 and el.aorq > 0.0):
        return None

    form = el.form
    if form in (1, 2):
        if e >= 1.0:
            return None
        a = el.aorq
        if form == 1:
            omega = el.perih - el.anode
            m = el.aorl - el.perih + el.dm * (mjd_tt - el.epoch)
        else:
            omega = el.perih
            m = el.aorl + GAUSS_K / a ** 1.5 * (mjd_tt - el.epoch)
        sol = _solve_elliptic(m, e)
        if sol is None:
            return None
        nu, r = sol[0], a * sol[1]
    else:
        omega = el.perih
        q = el.aorq
        dt = mjd_tt - el.epoch
        if e == 1.0:
            nu, r = _solve_parabolic(dt, q)
        elif e < 1.0:
            a = q / (1.0 - e)
            sol = _solve_elliptic(GAUSS_K / a ** 1.5 * dt, e)
            if sol is None:
                return None
            nu, r = sol[0], a * sol[1]
        else:
            a = q / (e - 1.0)
            sol = _solve_hyperbolic(GAUSS_K / a ** 1.5 * dt, e)
            if sol is None:
                return None
            nu, r = sol[0], a * sol[1]

    u = omega + nu
    cn, sn = math.cos(el.anode), math.sin(el.anode)
    cu, su = math.cos(u), math.sin(u)
    ci, si = math.cos(el.orbinc), math.sin(el.orbinc)
    x = r * (cn * cu - sn * su * ci)
    y = r * (sn * cu + cn * su * ci)
    z = r * su * si

    ce, se = math.cos(EPS_J2000), math.sin(EPS_J2000)
    pos = np.array([x, y * ce - z * se, y * se + z * ce])
    if not np.all(np.isfinite(pos)):
        return None
    return pos


# ============================================================
# Earth
# ============================================================

def earth_state(mjd_tt: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Earth heliocentric and barycentric position (AU) and velocity (AU/day):
    (helio_p, helio_v, bary_p, bary_v).
    """
    pvh, pvb = erfa.epv00(MJD_ZERO, mjd_tt)
    return (
        np.asarray(pvh["p"], dtype=float),
        np.asarray(pvh["v"], dtype=float),
        np.asarray(pvb["p"], dtype=float),
        np.asarray(pvb["v"], dtype=float),
    )


def observer_position(mjd_utc: float, long: float, lat: float, alt: float) -> np.ndarray:
    """Geocentric observer position (AU) on the true equator and equinox of date."""
    x, y, z = np.asarray(erfa.gd2gc(1, long, lat, alt), dtype=float) / AU_M
    theta = gast(mjd_utc)
    ct, st = math.cos(theta), math.sin(theta)
    return np.array([x * ct - y * st, x * st + y * ct, z])


# ============================================================
# Providers
# ============================================================

class PlanetEphemeris(Protocol):
    def astrometric(self, body: str, mjd_tt: float) -> np.ndarray:
        """Geocentric astrometric position of `body` (AU, ICRS axes)."""
        ...


def _light_time_corrected(helio_at, earth_helio: np.ndarray, mjd_tt: float) -> Optional[np.ndarray]:
    tau = 0.0
    geo = None
    for _ in range(_LIGHT_TIME_PASSES):
        p = helio_at(mjd_tt - tau)
        if p is None:
            return None
        geo = p - earth_helio
        tau = float(np.linalg.norm(geo)) / C_AU_PER_DAY
    return geo


def elements_astrometric(el: OrbitalElements, mjd_tt: float) -> Optional[np.ndarray]:
    earth_helio = earth_state(mjd_tt)[0]
    return _light_time_corrected(lambda t: heliocentric_position(el, t), earth_helio, mjd_tt)


class ErfaEphemeris:
    """Analytical ephemerides from ERFA (arcsecond-level accuracy)."""

    def astrometric(self, body: str, mjd_tt: float) -> np.ndarray:
        body = body.lower()
        if body == "moon":
            pv = erfa.moon98(MJD_ZERO, mjd_tt)
            p = np.asarray(pv["p"], dtype=float)
            v = np.asarray(pv["v"], dtype=float)
            return p - v * float(np.linalg.norm(p)) / C_AU_PER_DAY

        earth_helio = earth_state(mjd_tt)[0]
        if body == "sun":
            return -earth_helio
        if body == "pluto":
            geo = _light_time_corrected(
                lambda t: heliocentric_position(PLUTO_ELEMENTS, t), earth_helio, mjd_tt
            )
            if geo is None:
                raise ValueError("Pluto orbit could not be solved")
            return geo
        if body in _PLAN94_INDEX:
            n = _PLAN94_INDEX[body]

            def helio(t: float) -> np.ndarray:
                return np.asarray(erfa.plan94(MJD_ZERO, t, n)["p"], dtype=float)

            return _light_time_corrected(helio, earth_helio, mjd_tt)
        raise KeyError(f"Unknown planet '{body}'. Available: {list(PLANETS)}")


DEFAULT_EPHEMERIS: PlanetEphemeris = ErfaEphemeris()


# ============================================================
# Apparent, topocentric
# ============================================================

def topocentric_place(
    geo_astrometric: np.ndarray,
    mjd_utc: float,
    mjd_tt: float,
    long: float = 0.0,
    lat: float = 0.0,
    alt: float = 0.0,
    radius_km: float = 0.0,
) -> ApparentPlace:
    """
    Topocentric apparent RA/Dec (true equinox of date), distance (AU) and
    angular diameter of a body from its geocentric astrometric position.
    """
    ra, dec, dist = from_cartesian_r(geo_astrometric)
    ra_app, dec_app = mean_to_apparent(ra, dec, mjd_tt)
    top = dist * to_cartesian(ra_app, dec_app) - observer_position(mjd_utc, long, lat, alt)
    ra_top, dec_top, dist_top = from_cartesian_r(top)

    diameter = 0.0
    if radius_km > 0.0:
        diameter = 2.0 * math.asin(min(1.0, radius_km / (dist_top * AU_KM)))
    return ApparentPlace(ra_top, dec_top, diameter, dist_top)


def planet_place(
    body: str,
    mjd_utc: float,
    mjd_tt: float,
    long: float = 0.0,
    lat: float = 0.0,
    alt: float = 0.0,
    ephemeris: Optional[PlanetEphemeris] = None,
) -> ApparentPlace:
    eph = ephemeris if ephemeris is not None else DEFAULT_EPHEMERIS
    geo = eph.astrometric(body, mjd_tt)
    return topocentric_place(geo, mjd_utc, mjd_tt, long, lat, alt, PLANET_RADII_KM[body.lower()])


def elements_place(
    el: OrbitalElements,
    mjd_utc: float,
    mjd_tt: float,
    long: float = 0.0,
    lat: float = 0.0,
    alt: float = 0.0,
) -> Optional[ApparentPlace]:
    """As `planet_place`, for an orbit. None when the elements are degenerate."""
    geo = elements_astrometric(el, mjd_tt)
    if geo is None:
        return None
    return topocentric_place(geo, mjd_utc, mjd_tt, long, lat, alt)
