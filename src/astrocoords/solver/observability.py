from __future__ import annotations

from typing import Optional

from ..core.observer import ObserverContext, TelescopeLimits
from .horizon import observed


def within_limits(limits: Optional[TelescopeLimits], el: float, ha: float, dec: float) -> bool:
    """
    Bounds are exclusive: a source sitting exactly on a limit is not
    observable. `ha` must be normalized to (-pi, pi].
    """
    if limits is None:
        return False
    if limits.kind == "AZEL":
        return limits.el_min < el < limits.el_max
    if limits.kind == "HADEC":
        return limits.ha_min < ha < limits.ha_max and limits.dec_min < dec < limits.dec_max
    return False


def is_observable(source, ctx: ObserverContext) -> bool:
    """
    False without a telescope, without limits, or without a position.
    Calibration sources are always observable.
    """
    if getattr(source, "always_observable", False):
        return True
    if ctx.telescope is None:
        return False
    obs = observed(source, ctx)
    if obs is None:
        return False
    ha, _, el, place = obs
    return within_limits(ctx.telescope.limits, el, ha, place.dec)
