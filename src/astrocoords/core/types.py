from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Union

from .angle import Angle, HourAngle
from .errors import UnsupportedVelocityDefinition
from .time import TimeInstant


class Event(IntEnum):
    """Which of the adjacent events a rise/set/transit query wants."""
    PREVIOUS = -1
    NEAREST = 0
    NEXT = 1

    @classmethod
    def coerce(cls, value: Union["Event", int, str, None]) -> "Event":
        if value is None:
            return cls.NEXT
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls[value.strip().upper()]
        if value > 0:
            return cls.NEXT
        if value < 0:
            return cls.PREVIOUS
        return cls.NEAREST


class CrossingStatus(Enum):
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"
    NEVER_CROSSES = "never_crosses"


@dataclass(frozen=True)
class HorizonCrossingResult:
    """
    Outcome of a rise/set search. `instant` is None unless the search
    converged. A source that never rises and one that never sets both
    report NEVER_CROSSES.
    """
    instant: Optional[TimeInstant]
    status: CrossingStatus

    @classmethod
    def found(cls, instant: TimeInstant) -> "HorizonCrossingResult":
        return cls(instant, CrossingStatus.CONVERGED)

    @classmethod
    def never(cls) -> "HorizonCrossingResult":
        return cls(None, CrossingStatus.NEVER_CROSSES)

    @classmethod
    def failed(cls) -> "HorizonCrossingResult":
        return cls(None, CrossingStatus.NOT_CONVERGED)

    def __bool__(self) -> bool:
        return self.instant is not None


@dataclass(frozen=True)
class ApparentPlace:
    """Apparent RA/Dec of date (radians), plus what planets also report."""
    ra: float
    dec: float
    diameter: float = 0.0           # radians
    distance: Optional[float] = None  # AU


@dataclass(frozen=True)
class Timestep:
    instant: TimeInstant
    elevation: Angle
    azimuth: Angle
    parang: Angle
    lst: HourAngle

    def in_format(self, fmt=None) -> dict:
        """The angles converted with `Angle.in_format`; LST stays in radians."""
        return {
            "time": self.instant,
            "elevation": self.elevation.in_format(fmt),
            "azimuth": self.azimuth.in_format(fmt),
            "parang": self.parang.in_format(fmt),
            "lst": self.lst.radians,
        }


class VelocityDefinition(Enum):
    RADIO = "RADIO"
    OPTICAL = "OPTICAL"
    REDSHIFT = "REDSHIFT"
    RELATIVISTIC = "RELATIVISTIC"

    @classmethod
    def coerce(cls, value: Union["VelocityDefinition", str, None]) -> "VelocityDefinition":
        if value is None:
            return cls.OPTICAL
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key.startswith("REL"):
            return cls.RELATIVISTIC
        if key.startswith("RAD"):
            return cls.RADIO
        if key.startswith("OPT"):
            return cls.OPTICAL
        if key in ("REDSHIFT", "Z"):
            return cls.REDSHIFT
        raise UnsupportedVelocityDefinition(f"Unsupported velocity definition '{value}'")


class VelocityFrame(Enum):
    TOPO = "TOPO"   # observer
    GEO = "GEO"     # Earth centre
    HEL = "HEL"     # Sun
    BARY = "BARY"   # solar system barycentre
    LSRK = "LSRK"   # kinematic local standard of rest
    LSRD = "LSRD"   # dynamical local standard of rest
    GAL = "GAL"     # Galactic centre
    LG = "LG"       # Local Group

    @classmethod
    def coerce(cls, value: Union["VelocityFrame", str, None]) -> "VelocityFrame":
        if value is None:
            return cls.HEL
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        aliases = {
            "TOPOCENTRIC": cls.TOPO,
            "GEOCENTRIC": cls.GEO,
            "HELIO": cls.HEL,
            "HELIOCENTRIC": cls.HEL,
            "BARYCENTRIC": cls.BARY,
            "LSR": cls.LSRK,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls[key]
        except KeyError:
            raise UnsupportedVelocityDefinition(f"Unsupported velocity frame '{value}'") from None
