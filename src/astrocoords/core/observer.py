from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Dict, List, Literal, Optional

from ..reference.sidereal import local_sidereal_time
from .angle import Angle
from .time import TimeInstant


@dataclass(frozen=True)
class TelescopeLimits:
    """
    Pointing limits, radians. AZEL mounts use the elevation bounds; HADEC
    mounts use the hour-angle and declination bounds.
    """
    kind: Literal["AZEL", "HADEC"]
    el_min: float = 0.0
    el_max: float = 0.5 * math.pi
    ha_min: float = -math.pi
    ha_max: float = math.pi
    dec_min: float = -0.5 * math.pi
    dec_max: float = 0.5 * math.pi


@dataclass(frozen=True)
class Telescope:
    """Observer location. Longitude is east-positive; altitude in metres."""
    name: str
    long: float
    lat: float
    alt: float = 0.0
    fullname: Optional[str] = None
    limits: Optional[TelescopeLimits] = None

    @classmethod
    def from_sexagesimal(cls, name: str, long: str, lat: str, alt: float = 0.0, **kw) -> "Telescope":
        return cls(
            name=name,
            long=Angle.parse(long, "sexagesimal").radians,
            lat=Angle.parse(lat, "sexagesimal").radians,
            alt=alt,
            **kw,
        )

    def renamed(self, name: str) -> "Telescope":
        """
        Look `name` up in the active registry. Renaming a telescope
        means observing from a different site, so position and limits
        are reloaded with the name.
        """
        return get_telescope(name)


def _deg(d: float) -> float:
    return math.radians(d)


def _hrs(h: float) -> float:
    return math.radians(15.0 * h)


@dataclass
class TelescopeRegistry:
    _telescopes: Dict[str, Telescope] = field(default_factory=dict)

    def get(self, name: str) -> Telescope:
        key = name.upper()
        if key not in self._telescopes:
            raise KeyError(f"Unknown telescope '{name}'. Available: {sorted(self._telescopes)}")
        return self._telescopes[key]

    def list(self) -> List[str]:
        return sorted(self._telescopes.keys())

    def register(self, telescope: Telescope, *, overwrite: bool = False) -> None:
        key = telescope.name.upper()
        if (not overwrite) and (key in self._telescopes):
            raise KeyError(f"Telescope '{key}' already exists. Use overwrite=True to replace.")
        self._telescopes[key] = replace(telescope, name=key)


def build_registry() -> TelescopeRegistry:
    reg = TelescopeRegistry()
    reg.register(Telescope.from_sexagesimal(
        "JCMT", "-155:28:37.20", "19:49:22.11", 4111.0,
        fullname="James Clerk Maxwell Telescope",
        limits=TelescopeLimits("AZEL", el_min=_deg(5.0), el_max=_deg(88.0)),
    ))
    reg.register(Telescope.from_sexagesimal(
        "UKIRT", "-155:28:13.18", "19:49:20.75", 4198.5,
        fullname="United Kingdom Infrared Telescope",
        limits=TelescopeLimits("HADEC", ha_min=_hrs(-4.5), ha_max=_hrs(4.5),
                               dec_min=_deg(-42.0), dec_max=_deg(60.0)),
    ))
    reg.register(Telescope.from_sexagesimal(
        "CSO", "-155:28:31.79", "19:49:20.78", 4080.0,
        fullname="Caltech Submillimeter Observatory",
        limits=TelescopeLimits("AZEL", el_min=_deg(10.0), el_max=_deg(87.0)),
    ))
    reg.register(Telescope.from_sexagesimal(
        "AAT", "149:03:57.91", "-31:16:37.34", 1164.0,
        fullname="Anglo-Australian Telescope",
        limits=TelescopeLimits("HADEC", ha_min=_hrs(-5.5), ha_max=_hrs(5.5),
                               dec_min=_deg(-90.0), dec_max=_deg(59.0)),
    ))
    reg.register(Telescope.from_sexagesimal(
        "JACH", "-155:05:28.0", "19:42:03.0", 10.0,
        fullname="Joint Astronomy Centre, Hilo",
    ))
    return reg


TELESCOPES = build_registry()

_active: TelescopeRegistry = TELESCOPES


def set_registry(reg: TelescopeRegistry) -> None:
    """Replace the registry that telescope names are resolved against."""
    global _active
    _active = reg


def active_registry() -> TelescopeRegistry:
    return _active


def get_telescope(name: str) -> Telescope:
    return _active.get(name)


@dataclass(frozen=True)
class ObserverContext:
    """
    The (observer, instant) pair every position calculation is made for.
    With no telescope the observer sits on the equator at Greenwich.
    """
    telescope: Optional[Telescope]
    instant: TimeInstant

    @property
    def long(self) -> float:
        return self.telescope.long if self.telescope is not None else 0.0

    @property
    def lat(self) -> float:
        return self.telescope.lat if self.telescope is not None else 0.0

    @property
    def alt(self) -> float:
        return self.telescope.alt if self.telescope is not None else 0.0

    @property
    def mjd(self) -> float:
        return self.instant.mjd

    @property
    def mjd_tt(self) -> float:
        return self.instant.mjd_tt

    @property
    def lst(self) -> float:
        return local_sidereal_time(self.instant.mjd, self.long)

    def at(self, instant: TimeInstant) -> "ObserverContext":
        return ObserverContext(self.telescope, instant)

    def shifted(self, seconds: float) -> "ObserverContext":
        return ObserverContext(self.telescope, self.instant + seconds)
