from __future__ import annotations

from typing import Optional

from ..core.angle import wrap_2pi, wrap_pi
from ..core.observer import ObserverContext
from ..core.types import ApparentPlace
from .base import Coords, to_radians


class Interpolated(Coords):
    """
    Apparent RA/Dec interpolated linearly between two (MJD, RA, Dec)
    anchors. Outside the anchors the nearer anchor is used unchanged, which
    is only an approximation for a moving target.
    """

    type = "INTERP"

    def __init__(
        self,
        *,
        mjd1: float,
        mjd2: float,
        ra1,
        dec1,
        ra2,
        dec2,
        units: Optional[str] = None,
        **kw,
    ) -> None:
        super().__init__(**kw)
        self._mjd1 = float(mjd1)
        self._mjd2 = float(mjd2)
        self._ra1 = to_radians(ra1, units, hours=True)
        self._dec1 = to_radians(dec1, units)
        self._ra2 = to_radians(ra2, units, hours=True)
        self._dec2 = to_radians(dec2, units)

    def apparent_at(self, ctx: ObserverContext) -> ApparentPlace:
        mjd = ctx.mjd
        span = self._mjd2 - self._mjd1
        if span == 0.0:
            frac = 0.0
        else:
            frac = min(1.0, max(0.0, (mjd - self._mjd1) / span))

        # RA goes the short way round
        ra = wrap_2pi(self._ra1 + frac * wrap_pi(self._ra2 - self._ra1))
        dec = self._dec1 + frac * (self._dec2 - self._dec1)
        return ApparentPlace(ra, dec)

    def array(self) -> tuple:
        return (self.type, self._ra1, self._dec1, self._mjd1,
                self._ra2, self._dec2, self._mjd2) + (None,) * 4
