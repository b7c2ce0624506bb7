"""
astrocoords.solver.horizon
--------------------------
Meridian transit, hour angle at a horizon, and rise/set times.

All routines take the probe instant explicitly through an ObserverContext;
nothing here mutates the source.

Outline:
  transit   fixed-point iteration on (apparent RA - LST), jumping a
            growing number of search steps when the estimate lands on
            the wrong side of the reference instant
  ha_set    cos H0 = (sin h - sin phi sin dec) / (cos phi cos dec)
  rise/set  transit -/+ H0 as a first guess, then walk the elevation
            onto the horizon with a step that is halved and reversed
            whenever the gap to the horizon stops shrinking
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Protocol, Tuple

from ..core.angle import DS2R, wrap_pi
from ..core.observer import ObserverContext
from ..core.time import TimeInstant
from ..core.types import ApparentPlace, Event, HorizonCrossingResult
from ..reference.sidereal import SIDEREAL_TO_SOLAR
from ..reference.spherical import hadec_to_azel
from .params import SolverParams, params_for

log = logging.getLogger(__name__)


class CrossingSource(Protocol):
    """What the solver needs from a coordinate source."""

    @property
    def body(self) -> Optional[str]: ...

    def apparent_at(self, ctx: ObserverContext) -> Optional[ApparentPlace]: ...

    def default_horizon(self) -> float: ...


def observed(source: CrossingSource, ctx: ObserverContext) -> Optional[Tuple[float, float, float, ApparentPlace]]:
    """(hour angle, azimuth, elevation, apparent place), or None without a position."""
    place = source.apparent_at(ctx)
    if place is None:
        return None
    ha = wrap_pi(ctx.lst - place.ra)
    az, el = hadec_to_azel(ha, place.dec, ctx.lat)
    return ha, az, el, place


class HorizonSolver:
    def __init__(
        self,
        source: CrossingSource,
        params: Optional[SolverParams] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.source = source
        self.params = params if params is not None else params_for(source.body or "")
        self.log = logger if logger is not None else log

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    @property
    def _time_scale(self) -> float:
        # The Sun's hour angle already runs on solar time
        return 1.0 if self.source.body == "sun" else SIDEREAL_TO_SOLAR

    def elevation(self, ctx: ObserverContext) -> Optional[float]:
        obs = observed(self.source, ctx)
        return None if obs is None else obs[2]

    def _resolve_horizon(self, horizon: Optional[float]) -> float:
        return self.source.default_horizon() if horizon is None else horizon

    # ------------------------------------------------------------
    # Meridian transit
    # ------------------------------------------------------------

    def _transit_offset(self, ctx: ObserverContext) -> Optional[float]:
        """Seconds from ctx.instant to the nearest transit, to first order."""
        place = self.source.apparent_at(ctx)
        if place is None:
            return None
        offset = wrap_pi(place.ra - ctx.lst)
        return offset / DS2R * self._time_scale

    def _transit(self, ctx: ObserverContext, direction: Event) -> Optional[TimeInstant]:
        p = self.params
        ref = ctx.instant
        jump = p.transit_step_hours * 3600.0

        guess = ref
        prev: Optional[TimeInstant] = None
        self.log.debug("Transit search %s from %s", direction.name, ref)
        for count in range(1, p.transit_max_iter + 1):
            offset = self._transit_offset(ctx.at(guess))
            if offset is None:
                return None
            mtime = guess + offset

            if direction is Event.NEXT and mtime < ref:
                mtime = mtime + count * jump
            elif direction is Event.PREVIOUS and mtime >= ref:
                mtime = mtime - count * jump

            self.log.debug("  iteration %d: meridian time %s", count, mtime)
            if prev is not None and abs(mtime - prev) <= p.transit_tol_s:
                return mtime
            prev = mtime
            guess = mtime

        self.log.warning(
            "Meridian time calculation failed to converge after %d iterations; using %s",
            p.transit_max_iter, guess,
        )
        return guess

    def meridian_time(self, ctx: ObserverContext, event: Event = Event.NEXT) -> Optional[TimeInstant]:
        """
        Time of upper transit. NEXT gives the first transit at or after the
        reference instant, PREVIOUS the last one before it, NEAREST whichever
        of those two is closer. None only when the source has no position.
        """
        event = Event.coerce(event)
        if event is not Event.NEAREST:
            return self._transit(ctx, event)

        nxt = self._transit(ctx, Event.NEXT)
        prv = self._transit(ctx, Event.PREVIOUS)
        if nxt is None or prv is None:
            return nxt if nxt is not None else prv
        ref = ctx.instant
        return nxt if abs(nxt - ref) <= abs(prv - ref) else prv

    def transit_el(self, ctx: ObserverContext) -> Optional[float]:
        mt = self.meridian_time(ctx, Event.NEXT)
        if mt is None:
            return None
        return self.elevation(ctx.at(mt))

    # ------------------------------------------------------------
    # Hour angle at the horizon
    # ------------------------------------------------------------

    def ha_set(self, ctx: ObserverContext, horizon: Optional[float] = None) -> Optional[float]:
        """
        Hour angle (radians of solar time) at which the source reaches
        `horizon`, using the declination at ctx.instant. None if it never
        does.
        """
        horizon = self._resolve_horizon(horizon)
        place = self.source.apparent_at(ctx)
        if place is None:
            return None

        lat = ctx.lat
        dec = place.dec
        cos_ha0 = (math.sin(horizon) - math.sin(lat) * math.sin(dec)) / (math.cos(lat) * math.cos(dec))

        if self.source.body == "moon" and abs(cos_ha0) > 1.0:
            # Near transit the Moon's declination moves too fast for the
            # geometric formula; measure the setting hour angle directly.
            cos_ha0 = self._moon_cos_ha0(ctx, horizon, cos_ha0)

        if abs(cos_ha0) > 1.0:
            return None

        return math.acos(cos_ha0) * self._time_scale

    def _moon_cos_ha0(self, ctx: ObserverContext, horizon: float, cos_ha0: float) -> float:
        mt = self.meridian_time(ctx, Event.NEXT)
        if mt is None:
            return cos_ha0
        at_transit = ctx.at(mt)
        el = self.elevation(at_transit)
        if el is None or el <= horizon:
            return cos_ha0
        crossing = self.refine(at_transit, horizon, -1)
        if crossing.instant is None:
            return cos_ha0
        seconds = crossing.instant - mt
        self.log.debug("Moon setting hour angle measured iteratively: %.1f s after transit", seconds)
        return math.cos(seconds * DS2R)

    # ------------------------------------------------------------
    # Iterative elevation
    # ------------------------------------------------------------

    def refine(self, ctx: ObserverContext, refel: float, grad: int) -> HorizonCrossingResult:
        """
        Walk from ctx.instant to the instant the elevation equals `refel`.
        grad is +1 for a rising source and -1 for a setting one.
        """
        p = self.params
        t = ctx.instant
        el = self.elevation(ctx)
        if el is None:
            return HorizonCrossingResult.failed()
        if abs(el - refel) <= p.el_tol:
            return HorizonCrossingResult.found(t)

        self.log.debug(
            "Iterating %s elevation %.6f rad toward %.6f rad from %s",
            "rise" if grad > 0 else "set", el, refel, t,
        )

        inc = p.refine_step_s
        sign = grad if el < refel else -grad
        seen_above = el > refel
        seen_below = el < refel
        prev_gap: Optional[float] = None

        for _ in range(p.refine_max_steps):
            gap = abs(el - refel)
            if prev_gap is not None and gap >= prev_gap:
                # Diverging: turn round with half the step
                sign = -sign
                inc *= 0.5
                self.log.debug("  diverging; step now %.3f s", inc)
                if inc < p.step_floor_s:
                    if seen_above and seen_below:
                        return HorizonCrossingResult.found(t)
                    return HorizonCrossingResult.failed()

            t = t + sign * inc
            prev_gap = gap
            el = self.elevation(ctx.at(t))
            if el is None:
                return HorizonCrossingResult.failed()
            seen_above = seen_above or el > refel
            seen_below = seen_below or el < refel
            self.log.debug("  elevation %.6f rad at %s", el, t)

            if abs(el - refel) <= p.el_tol:
                return HorizonCrossingResult.found(t)

        return HorizonCrossingResult.failed()

    # ------------------------------------------------------------
    # Rise and set
    # ------------------------------------------------------------

    def _transits(self, ctx: ObserverContext) -> List[TimeInstant]:
        """Two transits either side of the reference instant."""
        found: List[TimeInstant] = []
        prv = self._transit(ctx, Event.PREVIOUS)
        nxt = self._transit(ctx, Event.NEXT)
        if prv is not None:
            found.append(prv)
            before = self._transit(ctx.at(prv - 1.0), Event.PREVIOUS)
            if before is not None:
                found.append(before)
        if nxt is not None:
            found.append(nxt)
            after = self._transit(ctx.at(nxt + 1.0), Event.NEXT)
            if after is not None:
                found.append(after)

        unique: List[TimeInstant] = []
        for t in sorted(found):
            if not unique or abs(t - unique[-1]) > 60.0:
                unique.append(t)
        return unique

    def _crossing(
        self,
        ctx: ObserverContext,
        horizon: Optional[float],
        event: Event,
        grad: int,
    ) -> HorizonCrossingResult:
        event = Event.coerce(event)
        refel = self._resolve_horizon(horizon)
        ref = ctx.instant

        if event is Event.NEAREST:
            after = self._crossing(ctx, refel, Event.NEXT, grad)
            before = self._crossing(ctx, refel, Event.PREVIOUS, grad)
            if after.instant is None:
                return before if before.instant is not None else after
            if before.instant is None:
                return after
            return after if abs(after.instant - ref) <= abs(before.instant - ref) else before

        estimates: List[TimeInstant] = []
        for transit in self._transits(ctx):
            ha0 = self.ha_set(ctx.at(transit), refel)
            if ha0 is None:
                continue
            estimates.append(transit + (-grad) * ha0 / DS2R)

        if not estimates:
            return HorizonCrossingResult.never()

        slack = self.params.candidate_slack_s
        if event is Event.NEXT:
            candidates = sorted(t for t in estimates if t - ref >= -slack)
        else:
            candidates = sorted((t for t in estimates if t - ref < slack), reverse=True)

        for estimate in candidates:
            self.log.debug("Refining %s candidate %s", "rise" if grad > 0 else "set", estimate)
            result = self.refine(ctx.at(estimate), refel, grad)
            if result.instant is None:
                continue
            if event is Event.NEXT and result.instant >= ref:
                return result
            if event is Event.PREVIOUS and result.instant < ref:
                return result

        return HorizonCrossingResult.failed()

    def rise_time(
        self,
        ctx: ObserverContext,
        horizon: Optional[float] = None,
        event: Event = Event.NEXT,
    ) -> HorizonCrossingResult:
        return self._crossing(ctx, horizon, event, +1)

    def set_time(
        self,
        ctx: ObserverContext,
        horizon: Optional[float] = None,
        event: Event = Event.NEXT,
    ) -> HorizonCrossingResult:
        return self._crossing(ctx, horizon, event, -1)
