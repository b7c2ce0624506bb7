from __future__ import annotations

from typing import Optional

from ..core.angle import Angle
from ..core.observer import ObserverContext
from ..core.types import ApparentPlace
from ..reference.ephemerides import PLANETS, PlanetEphemeris, planet_place
from ..solver.params import MOON_DEFAULT_HORIZON, SUN_DEFAULT_HORIZON
from .base import Coords


class Planet(Coords):
    """The Sun, the Moon or a major planet, by name."""

    type = "PLANET"

    def __init__(self, planet: str, *, ephemeris: Optional[PlanetEphemeris] = None, **kw) -> None:
        key = str(planet).strip().lower()
        if key not in PLANETS:
            raise ValueError(f"Unknown planet '{planet}'. Available: {list(PLANETS)}")
        kw.setdefault("name", key)
        super().__init__(**kw)
        self._planet = key
        self.ephemeris = ephemeris

    @property
    def planet(self) -> str:
        return self._planet

    @property
    def body(self) -> str:
        return self._planet

    @property
    def name(self) -> str:
        """For planets the name is always the planet name."""
        return self._planet

    @name.setter
    def name(self, value) -> None:
        raise AttributeError(f"The name of a planet is fixed as '{self._planet}'")

    def apparent_at(self, ctx: ObserverContext) -> ApparentPlace:
        return planet_place(
            self._planet, ctx.mjd, ctx.mjd_tt,
            ctx.long, ctx.lat, ctx.alt,
            ephemeris=self.ephemeris,
        )

    def diam(self, ctx: Optional[ObserverContext] = None) -> Angle:
        """Apparent angular diameter."""
        return Angle(self.apparent_at(self.context(ctx)).diameter)

    def default_horizon(self) -> float:
        if self._planet == "sun":
            return SUN_DEFAULT_HORIZON
        if self._planet == "moon":
            return MOON_DEFAULT_HORIZON
        return 0.0

    def array(self) -> tuple:
        return (self._planet,) + (None,) * 10

    def summary(self) -> str:
        return f"{self._planet:<16s}  {'':<12s}  {'':<13s}  PLANET"

    def __str__(self) -> str:
        return self._planet.upper()
