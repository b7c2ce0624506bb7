from __future__ import annotations

import time as _time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import total_ordering

from ..reference import time_scales as ts


@total_ordering
@dataclass(frozen=True)
class TimeInstant:
    """
    An instant in UTC, stored as POSIX epoch seconds.

    Only epoch seconds and MJD are assumed derivable; calendar fields are
    produced on demand through `datetime`.
    """
    epoch: float

    @classmethod
    def now(cls) -> "TimeInstant":
        return cls(_time.time())

    @classmethod
    def from_epoch(cls, epoch: float) -> "TimeInstant":
        return cls(float(epoch))

    @classmethod
    def from_datetime(cls, dt: datetime) -> "TimeInstant":
        if dt.tzinfo is None:
            raise ValueError("datetime must be timezone-aware (UTC)")
        return cls(dt.astimezone(timezone.utc).timestamp())

    @classmethod
    def from_mjd(cls, mjd: float) -> "TimeInstant":
        return cls(ts.mjd_to_epoch(mjd))

    @property
    def mjd(self) -> float:
        return ts.epoch_to_mjd(self.epoch)

    @property
    def jd(self) -> float:
        return self.mjd + ts.MJD_ZERO

    @property
    def mjd_tt(self) -> float:
        return ts.mjd_utc_to_mjd_tt(self.mjd)

    @property
    def datetime(self) -> datetime:
        return datetime.fromtimestamp(self.epoch, tz=timezone.utc)

    def clone(self) -> "TimeInstant":
        return TimeInstant(self.epoch)

    def isoformat(self) -> str:
        return self.datetime.isoformat()

    def __add__(self, seconds: float) -> "TimeInstant":
        if isinstance(seconds, TimeInstant):
            return NotImplemented
        return TimeInstant(self.epoch + float(seconds))

    def __sub__(self, other):
        if isinstance(other, TimeInstant):
            return self.epoch - other.epoch
        return TimeInstant(self.epoch - float(other))

    def __lt__(self, other: "TimeInstant") -> bool:
        if not isinstance(other, TimeInstant):
            return NotImplemented
        return self.epoch < other.epoch

    def __str__(self) -> str:
        return self.isoformat()
