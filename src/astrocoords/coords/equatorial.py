from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..core.angle import DAS2R, Angle, HourAngle
from ..core.errors import CoordinateTypeError
from ..core.observer import ObserverContext
from ..core.types import ApparentPlace
from ..reference import astrometry
from .base import Coords, to_radians

DR2AS = 1.0 / DAS2R

_NATIVE = {
    "J2000": "radec",
    "B1950": "radec1950",
    "GALACTIC": "glonglat",
    "SUPERGALACTIC": "sglonglat",
}


class Equatorial(Coords):
    """
    A fixed position on the sky, stored as FK5 J2000 with proper motion
    (arcsec/year, RA as dRA/dt) and parallax (arcsec).

    type selects the input frame: J2000 and B1950 use ra/dec, GALACTIC and
    SUPERGALACTIC use long/lat.
    """

    type = "RADEC"

    def __init__(
        self,
        *,
        ra=None,
        dec=None,
        long=None,
        lat=None,
        type: str = "J2000",
        units: Optional[str] = None,
        pm: Sequence[float] = (0.0, 0.0),
        parallax: float = 0.0,
        **kw,
    ) -> None:
        super().__init__(**kw)

        frame = str(type).upper()
        if frame not in _NATIVE:
            raise CoordinateTypeError(f"Supplied coordinate type [{type}] not recognized")

        if isinstance(pm, (str, bytes)) or not hasattr(pm, "__len__") or len(pm) != 2:
            raise TypeError("Proper motions must be supplied as a two-element sequence")
        pm_ra, pm_dec = float(pm[0]), float(pm[1])
        parallax = float(parallax)

        if frame in ("J2000", "B1950"):
            if ra is None or dec is None:
                raise ValueError(f"{frame} coordinates need both ra and dec")
            ra = to_radians(ra, units, hours=True)
            dec = to_radians(dec, units)
        else:
            if long is None or lat is None:
                raise ValueError(f"{frame} coordinates need both long and lat")
            long = to_radians(long, units)
            lat = to_radians(lat, units)

        if frame == "J2000":
            ra2000, dec2000 = ra, dec
        elif frame == "B1950":
            if pm_ra != 0.0 or pm_dec != 0.0 or parallax != 0.0:
                ra2000, dec2000, pmr, pmd = astrometry.fk4_to_fk5_with_motion(
                    ra, dec, pm_ra * DAS2R, pm_dec * DAS2R
                )
                pm_ra, pm_dec = pmr * DR2AS, pmd * DR2AS
            else:
                ra2000, dec2000 = astrometry.fk4_to_fk5(ra, dec, 1950.0)
        elif frame == "GALACTIC":
            ra2000, dec2000 = astrometry.galactic_to_equatorial(long, lat)
        else:
            glon, glat = astrometry.supergalactic_to_galactic(long, lat)
            ra2000, dec2000 = astrometry.galactic_to_equatorial(glon, glat)

        self._ra2000 = ra2000
        self._dec2000 = dec2000
        self._pm = (pm_ra, pm_dec)
        self._parallax = parallax
        self.native = _NATIVE[frame]

    @property
    def pm(self) -> Tuple[float, float]:
        return self._pm

    @property
    def parallax(self) -> float:
        return self._parallax

    def radec(self, ctx: Optional[ObserverContext] = None) -> Tuple[HourAngle, Angle]:
        """
        Catalogue J2000 position. Not moved for proper motion: that is only
        applied to the apparent place.
        """
        return HourAngle(self._ra2000), Angle(self._dec2000)

    def apparent_at(self, ctx: ObserverContext) -> ApparentPlace:
        ra, dec = astrometry.mean_to_apparent(
            self._ra2000,
            self._dec2000,
            ctx.mjd_tt,
            pm_ra=self._pm[0] * DAS2R,
            pm_dec=self._pm[1] * DAS2R,
            parallax=self._parallax,
        )
        return ApparentPlace(ra, dec)

    def array(self) -> tuple:
        return (self.type, self._ra2000, self._dec2000) + (None,) * 8

    def summary(self) -> str:
        ra, dec = self.radec()
        return f"{self.name or '':<16s}  {ra.string():<12s}  {dec.string():<13s}  J2000"

    def __str__(self) -> str:
        ra, dec = self.radec()
        return f"{ra.string()} {dec.string()}"
