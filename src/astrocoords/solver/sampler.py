from __future__ import annotations

from typing import List, Optional

from ..core.angle import Angle, AngleRange, HourAngle
from ..core.observer import Telescope, ObserverContext
from ..core.time import TimeInstant
from ..core.types import Timestep
from ..reference.spherical import parallactic_angle
from .horizon import CrossingSource, observed


def calculate(
    source: CrossingSource,
    start: TimeInstant,
    end: TimeInstant,
    inc: float,
    telescope: Optional[Telescope] = None,
) -> List[Timestep]:
    """
    Positions from `start` to `end` inclusive, every `inc` seconds. The end
    instant is only included if the increment lands on it exactly. Steps
    where the source has no position are skipped.
    """
    if inc <= 0:
        raise ValueError("Increment must be greater than zero")

    steps: List[Timestep] = []
    current = start
    while current <= end:
        ctx = ObserverContext(telescope, current)
        obs = observed(source, ctx)
        if obs is not None:
            ha, az, el, place = obs
            steps.append(Timestep(
                instant=current,
                elevation=Angle(el),
                azimuth=Angle(az, range=AngleRange.UNSIGNED_2PI),
                parang=Angle(parallactic_angle(ha, place.dec, ctx.lat)),
                lst=HourAngle(ctx.lst),
            ))
        current = current + inc
    return steps
