from __future__ import annotations

from typing import Optional

from ..core.angle import AngleRange, Angle, HourAngle, wrap_2pi
from ..core.observer import ObserverContext
from ..core.types import ApparentPlace
from ..reference.spherical import azel_to_hadec
from .base import Coords, to_radians


class FixedAzEl(Coords):
    """
    Fixed on the Earth at an azimuth and elevation. The apparent RA follows
    the sidereal time, so it changes as time advances.
    """

    type = "FIXED"

    def __init__(self, *, az, el, units: Optional[str] = None, **kw) -> None:
        super().__init__(**kw)
        self._az = to_radians(az, units)
        self._el = to_radians(el, units)
        self.native = "azel"

    def apparent_at(self, ctx: ObserverContext) -> ApparentPlace:
        ha, dec = azel_to_hadec(self._az, self._el, ctx.lat)
        return ApparentPlace(wrap_2pi(ctx.lst - ha), dec)

    def array(self) -> tuple:
        return (self.type, self._az, self._el) + (None,) * 8

    def summary(self) -> str:
        az = Angle(self._az, range=AngleRange.UNSIGNED_2PI)
        el = Angle(self._el)
        return f"{self.name or '':<16s}  {az.string():<12s}  {el.string():<13s}  AZEL"


class FixedHaDec(Coords):
    """
    Fixed at an hour angle and declination on the telescope meridian.
    Without a telescope the meridian is Greenwich and the latitude 0.
    """

    type = "FIXED"

    def __init__(self, *, ha, dec, units: Optional[str] = None, **kw) -> None:
        super().__init__(**kw)
        self._ha = to_radians(ha, units, hours=True)
        self._dec = to_radians(dec, units)
        self.native = "hadec"

    def apparent_at(self, ctx: ObserverContext) -> ApparentPlace:
        return ApparentPlace(wrap_2pi(ctx.lst - self._ha), self._dec)

    def array(self) -> tuple:
        return (self.type, self._ha, self._dec) + (None,) * 8

    def summary(self) -> str:
        ha = HourAngle(self._ha, range=AngleRange.SIGNED_PI)
        dec = Angle(self._dec)
        return f"{self.name or '':<16s}  {ha.string():<12s}  {dec.string():<13s}  HADEC"
