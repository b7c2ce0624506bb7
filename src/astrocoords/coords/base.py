"""
astrocoords.coords.base
-----------------------
Behaviour shared by every coordinate source.

A source knows only how to produce an apparent place for an
ObserverContext (`apparent_at`). Everything observer-relative is derived
here from that one hook. Each accessor takes an optional explicit `ctx`;
without one, the context is built from the cached `telescope` and
`datetime` (the current time if none is stored or `usenow` is set).

Angle accessors return `Angle.in_format(fmt)`: radians by default, an
Angle object for AngleFormat.OBJECT.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from datetime import datetime as _datetime
from typing import Iterator, List, Optional, Tuple, Union

from ..core.angle import Angle, AngleFormat, AngleRange, HourAngle
from ..core.observer import ObserverContext, Telescope, get_telescope
from ..core.time import TimeInstant
from ..core.types import ApparentPlace, Event, Timestep, VelocityDefinition, VelocityFrame
from ..reference import astrometry
from ..reference.ephemerides import C_KM_S
from ..reference.spherical import airmass, parallactic_angle, tangent_plane_offsets
from ..solver.horizon import HorizonSolver, observed
from ..solver.observability import is_observable
from ..solver.params import SolverParams
from ..solver.sampler import calculate
from ..solver.velocity import VelocityFrameCalculator

Format = Union[AngleFormat, str, None]
TimeLike = Union[TimeInstant, _datetime, None]


def to_radians(value, units: Optional[str] = None, *, hours: bool = False) -> float:
    """
    Convert constructor input to radians. Without units, non-numeric strings
    are sexagesimal (hours when `hours` is set, degrees otherwise) and
    numbers are radians.
    """
    cls = HourAngle if hours else Angle
    if isinstance(value, Angle):
        return value.radians
    if units is None:
        units = "radians"
        if isinstance(value, str):
            try:
                float(value)
            except ValueError:
                units = "sexagesimal"
    return cls.parse(value, units).radians


def _as_instant(value: TimeLike) -> Optional[TimeInstant]:
    if value is None or isinstance(value, TimeInstant):
        return value
    if isinstance(value, _datetime):
        return TimeInstant.from_datetime(value)
    raise TypeError(f"datetime must be a TimeInstant or an aware datetime, got {type(value).__name__}")


class Coords:
    type = "BASE"
    body: Optional[str] = None
    always_observable = False

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        comment: Optional[str] = None,
        telescope: Union[Telescope, str, None] = None,
        datetime: TimeLike = None,
        rv: float = 0.0,
        vdefn=None,
        vframe=None,
        redshift: Optional[float] = None,
        params: Optional[SolverParams] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._name = name
        self._comment = comment
        self._telescope: Optional[Telescope] = None
        self._datetime: Optional[TimeInstant] = None
        self.usenow = False
        self.native = "apparent"
        self.params = params
        self.logger = logger

        self.telescope = telescope
        if datetime is not None:
            self.datetime = datetime

        if redshift is not None:
            self.vdefn = VelocityDefinition.REDSHIFT
            self.vframe = VelocityFrame.coerce(vframe)
            self.rv = redshift * C_KM_S
        else:
            self.vdefn = VelocityDefinition.coerce(vdefn)
            self.vframe = VelocityFrame.coerce(vframe)
            self.rv = float(rv)

    # ------------------------------------------------------------
    # Cached state
    # ------------------------------------------------------------

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value

    @property
    def comment(self) -> str:
        return self._comment if self._comment is not None else ""

    @comment.setter
    def comment(self, value: Optional[str]) -> None:
        self._comment = value

    @property
    def telescope(self) -> Optional[Telescope]:
        return self._telescope

    @telescope.setter
    def telescope(self, value: Union[Telescope, str, None]) -> None:
        if isinstance(value, str):
            value = get_telescope(value)
        if value is not None and not isinstance(value, Telescope):
            raise TypeError(f"telescope must be a Telescope or a telescope name, got {type(value).__name__}")
        self._telescope = value

    @property
    def datetime(self) -> TimeInstant:
        """The stored instant, or now if none is stored or `usenow` is set."""
        if self._datetime is not None and not self.usenow:
            return self._datetime
        return TimeInstant.now()

    @datetime.setter
    def datetime(self, value: TimeLike) -> None:
        self._datetime = _as_instant(value)
        self.usenow = False

    @property
    def has_datetime(self) -> bool:
        return self._datetime is not None

    @contextmanager
    def datetime_guard(self, instant: TimeLike) -> Iterator["Coords"]:
        """Temporarily set `datetime`; the previous state is always restored."""
        saved, saved_usenow = self._datetime, self.usenow
        self.datetime = instant
        try:
            yield self
        finally:
            self._datetime = saved
            self.usenow = saved_usenow

    def context(self, ctx: Optional[ObserverContext] = None) -> ObserverContext:
        if ctx is not None:
            return ctx
        return ObserverContext(self._telescope, self.datetime)

    # ------------------------------------------------------------
    # Variant hooks
    # ------------------------------------------------------------

    def apparent_at(self, ctx: ObserverContext) -> Optional[ApparentPlace]:
        raise NotImplementedError

    def default_horizon(self) -> float:
        return 0.0

    def array(self) -> tuple:
        """Type plus ten positional slots, as a fixed-width summary row."""
        return (self.type,) + (None,) * 10

    def summary(self) -> str:
        return f"{self.name or '':<16s}  {'':<12s}  {'':<13s}  {self.type}"

    def __str__(self) -> str:
        return self.type

    # ------------------------------------------------------------
    # Apparent and catalogue positions
    # ------------------------------------------------------------

    def apparent(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[HourAngle, Angle]]:
        place = self.apparent_at(self.context(ctx))
        if place is None:
            return None
        return HourAngle(place.ra), Angle(place.dec)

    def ra_app(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        app = self.apparent(ctx)
        return None if app is None else app[0].in_format(fmt)

    def dec_app(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        app = self.apparent(ctx)
        return None if app is None else app[1].in_format(fmt)

    def radec(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[HourAngle, Angle]]:
        """J2000 RA/Dec, from the apparent place for sources without a catalogue position."""
        ctx = self.context(ctx)
        place = self.apparent_at(ctx)
        if place is None:
            return None
        ra, dec = astrometry.apparent_to_mean(place.ra, place.dec, ctx.mjd_tt)
        return HourAngle(ra), Angle(dec)

    def ra(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        rd = self.radec(ctx)
        return None if rd is None else rd[0].in_format(fmt)

    def dec(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        rd = self.radec(ctx)
        return None if rd is None else rd[1].in_format(fmt)

    def radec1950(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[HourAngle, Angle]]:
        rd = self.radec(ctx)
        if rd is None:
            return None
        ra, dec = astrometry.fk5_to_fk4(rd[0].radians, rd[1].radians, 1950.0)
        return HourAngle(ra), Angle(dec)

    def glonglat(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[Angle, Angle]]:
        rd = self.radec(ctx)
        if rd is None:
            return None
        lon, lat = astrometry.equatorial_to_galactic(rd[0].radians, rd[1].radians)
        return Angle(lon, range=AngleRange.UNSIGNED_2PI), Angle(lat)

    def sglonglat(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[Angle, Angle]]:
        gal = self.glonglat(ctx)
        if gal is None:
            return None
        lon, lat = astrometry.galactic_to_supergalactic(gal[0].radians, gal[1].radians)
        return Angle(lon, range=AngleRange.UNSIGNED_2PI), Angle(lat)

    def ecllonglat(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[Angle, Angle]]:
        """Ecliptic coordinates on the mean ecliptic and equinox of date."""
        ctx = self.context(ctx)
        rd = self.radec(ctx)
        if rd is None:
            return None
        lon, lat = astrometry.equatorial_to_ecliptic(rd[0].radians, rd[1].radians, ctx.mjd_tt)
        return Angle(lon, range=AngleRange.UNSIGNED_2PI), Angle(lat)

    # ------------------------------------------------------------
    # Observer-relative
    # ------------------------------------------------------------

    def ha(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        """Hour angle, normalized to (-12h, 12h]."""
        obs = observed(self, self.context(ctx))
        if obs is None:
            return None
        return HourAngle(obs[0], range=AngleRange.SIGNED_PI).in_format(fmt)

    def azel(self, ctx: Optional[ObserverContext] = None) -> Optional[Tuple[Angle, Angle]]:
        obs = observed(self, self.context(ctx))
        if obs is None:
            return None
        _, az, el, _ = obs
        return Angle(az, range=AngleRange.UNSIGNED_2PI), Angle(el)

    def az(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        ae = self.azel(ctx)
        return None if ae is None else ae[0].in_format(fmt)

    def el(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        ae = self.azel(ctx)
        return None if ae is None else ae[1].in_format(fmt)

    def pa(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        ctx = self.context(ctx)
        obs = observed(self, ctx)
        if obs is None:
            return None
        ha, _, _, place = obs
        return Angle(parallactic_angle(ha, place.dec, ctx.lat)).in_format(fmt)

    def airmass(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        el = self.el(ctx=ctx)
        return None if el is None else airmass(el)

    def is_observable(self, ctx: Optional[ObserverContext] = None) -> bool:
        return is_observable(self, self.context(ctx))

    # ------------------------------------------------------------
    # Rise, set, transit
    # ------------------------------------------------------------

    def solver(self) -> HorizonSolver:
        return HorizonSolver(self, self.params, self.logger)

    def ha_set(
        self,
        horizon: Optional[float] = None,
        fmt: Format = None,
        *,
        ctx: Optional[ObserverContext] = None,
    ):
        ha0 = self.solver().ha_set(self.context(ctx), horizon)
        if ha0 is None:
            return None
        return HourAngle(ha0, range=AngleRange.SIGNED_PI).in_format(fmt)

    def meridian_time(self, event=Event.NEXT, *, ctx: Optional[ObserverContext] = None) -> Optional[TimeInstant]:
        return self.solver().meridian_time(self.context(ctx), Event.coerce(event))

    def rise_time(
        self,
        horizon: Optional[float] = None,
        event=Event.NEXT,
        *,
        ctx: Optional[ObserverContext] = None,
    ) -> Optional[TimeInstant]:
        """
        Rise time, or None if the source never crosses `horizon` or the
        search fails. Never-rises and never-sets are not distinguished.
        """
        return self.solver().rise_time(self.context(ctx), horizon, Event.coerce(event)).instant

    def set_time(
        self,
        horizon: Optional[float] = None,
        event=Event.NEXT,
        *,
        ctx: Optional[ObserverContext] = None,
    ) -> Optional[TimeInstant]:
        return self.solver().set_time(self.context(ctx), horizon, Event.coerce(event)).instant

    def transit_el(self, fmt: Format = None, *, ctx: Optional[ObserverContext] = None):
        el = self.solver().transit_el(self.context(ctx))
        return None if el is None else Angle(el).in_format(fmt)

    def calculate(
        self,
        start: TimeLike,
        end: TimeLike,
        inc: float,
        units: Format = None,
    ) -> Union[List[Timestep], List[dict]]:
        """
        Positions at the cached telescope every `inc` seconds. With `units`
        each step is returned as a dict of converted values.
        """
        steps = calculate(self, _as_instant(start), _as_instant(end), inc, self._telescope)
        if units is None:
            return steps
        return [s.in_format(units) for s in steps]

    # ------------------------------------------------------------
    # Separation
    # ------------------------------------------------------------

    def offsets(self, other: "Coords", ctx: Optional[ObserverContext] = None) -> Optional[Tuple[Angle, Angle]]:
        """Tangent-plane (xi, eta) of `other` about this source."""
        ctx = self.context(ctx)
        here = self.apparent_at(ctx)
        there = other.apparent_at(ctx)
        if here is None or there is None:
            return None
        xy = tangent_plane_offsets(there.ra, there.dec, here.ra, here.dec)
        if xy is None:
            return None
        return Angle(xy[0]), Angle(xy[1])

    def distance(self, other: "Coords", ctx: Optional[ObserverContext] = None) -> Optional[Angle]:
        xy = self.offsets(other, ctx)
        if xy is None:
            return None
        return Angle(math.hypot(xy[0].radians, xy[1].radians))

    # ------------------------------------------------------------
    # Velocity
    # ------------------------------------------------------------

    @property
    def redshift(self) -> Optional[float]:
        if self.vdefn in (VelocityDefinition.OPTICAL, VelocityDefinition.REDSHIFT):
            return self.rv / C_KM_S
        return None

    def velocity_frames(self, ctx: Optional[ObserverContext] = None) -> Optional[VelocityFrameCalculator]:
        """Frame velocities for the current position, or None without one."""
        return VelocityFrameCalculator.for_source(self, self.context(ctx))

    def _frames(self, ctx: Optional[ObserverContext], name: str, *args, **kw) -> Optional[float]:
        frames = self.velocity_frames(ctx)
        if frames is None:
            return None
        return getattr(frames, name)(*args, **kw)

    def verot(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "verot")

    def vorb(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vorb")

    def vhelio(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vhelio")

    def vbary(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vbary")

    def vlsrk(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vlsrk")

    def vlsrd(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vlsrd")

    def vgalc(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vgalc")

    def vlg(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vlg")

    def vdiff(self, frame_to, frame_from, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "vdiff", frame_to, frame_from)

    def obsvel(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "obsvel", self.rv, self.vframe)

    def doppler(self, ctx: Optional[ObserverContext] = None) -> Optional[float]:
        return self._frames(ctx, "doppler", self.rv, self.vdefn, self.vframe, redshift=self.redshift)

    # ------------------------------------------------------------
    # Report
    # ------------------------------------------------------------

    def status(self, ctx: Optional[ObserverContext] = None) -> str:
        """Multi-line description of the current position."""
        ctx = self.context(ctx)
        lines = []
        if self.name:
            lines.append(f"Target name:    {self.name}")
        lines.append(f"Coordinate type:{self.type}")

        if self.type != "CAL":
            obs = observed(self, ctx)
            if obs is None:
                lines.append("No position available")
            else:
                ha, az, el, place = obs
                solver = self.solver()
                lines.append(f"Elevation:      {math.degrees(el)} deg")
                lines.append(f"Azimuth  :      {math.degrees(az)} deg")
                lines.append(f"Hour angle:     {HourAngle(ha, range=AngleRange.SIGNED_PI).hours} hrs")
                lines.append(f"Apparent RA :   {HourAngle(place.ra).string()}")
                lines.append(f"Apparent dec:   {Angle(place.dec).string()}")

                mt = solver.meridian_time(ctx)
                lines.append(f"Time of next transit:{mt.isoformat() if mt is not None else '??'}")
                tel = solver.transit_el(ctx)
                lines.append(f"Transit El:     {math.degrees(tel) if tel is not None else '??'} deg")
                ha0 = solver.ha_set(ctx)
                ha0_hrs = HourAngle(ha0, range=AngleRange.SIGNED_PI).hours if ha0 is not None else "??"
                lines.append(f"Hour Ang. (set):{ha0_hrs} hrs")

                rise = solver.rise_time(ctx).instant
                if rise is not None:
                    lines.append(f"Next Rise time:      {rise.isoformat()}")
                sett = solver.set_time(ctx).instant
                if sett is not None:
                    lines.append(f"Next Set time:       {sett.isoformat()}")

                rd = self.radec(ctx)
                if rd is not None:
                    lines.append(f"RA (J2000):     {rd[0].string()}")
                    lines.append(f"Dec(J2000):     {rd[1].string()}")

        if ctx.telescope is not None:
            lines.append(f"Telescope:      {ctx.telescope.fullname or ctx.telescope.name}")
            if self.is_observable(ctx):
                lines.append("The target is currently observable")
            else:
                lines.append("The target is not currently observable")

        lines.append(f"For time {ctx.instant.isoformat()}")
        lines.append(f"LST: {HourAngle(ctx.lst).hours}")
        return "\n".join(lines) + "\n"
