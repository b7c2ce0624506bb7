from __future__ import annotations

import logging
from typing import Optional

from ..core.errors import AstroCoordsError
from .base import Coords
from .calibration import Calibration
from .elements import Elements, has_epoch
from .equatorial import Equatorial
from .fixed import FixedAzEl, FixedHaDec
from .interpolated import Interpolated
from .planet import Planet

log = logging.getLogger(__name__)

# Keys that only describe a source, never select its variant
_COMMON = ("name", "comment", "telescope", "datetime", "rv", "vdefn", "vframe", "redshift", "params", "logger")


def _common(kw: dict) -> dict:
    return {k: kw[k] for k in _COMMON if k in kw}


def _try(build, kw: dict) -> Optional[Coords]:
    try:
        return build()
    except (AstroCoordsError, ValueError, KeyError) as e:
        log.debug("Could not build coordinates from %s: %s", sorted(kw), e)
        return None


def make_coords(**kw) -> Optional[Coords]:
    """
    Build the coordinate source that the supplied keys describe, or None.

    Tried in order: planet, elements (with EPOCH or EPOCHPERIH), mjd1
    (interpolated), type (equatorial), az/el/ha (fixed), and no keys at
    all (calibration). A planet name that is not a planet falls through,
    so the same keys may carry a target name and its coordinates.
    """
    if kw.get("planet") is not None:
        obj = _try(lambda: Planet(kw["planet"], **{k: v for k, v in _common(kw).items() if k != "name"}), kw)
        if obj is not None:
            return obj

    common = _common(kw)
    if has_epoch(kw.get("elements")):
        return _try(lambda: Elements(kw["elements"], **common), kw)

    if "mjd1" in kw:
        keys = ("mjd1", "mjd2", "ra1", "dec1", "ra2", "dec2")
        if any(kw.get(k) is None for k in keys):
            return None
        return _try(lambda: Interpolated(**{k: kw[k] for k in keys}, units=kw.get("units"), **common), kw)

    if kw.get("type") is not None:
        keys = ("ra", "dec", "long", "lat", "type", "units", "pm", "parallax")
        return _try(lambda: Equatorial(**{k: kw[k] for k in keys if k in kw}, **common), kw)

    if "az" in kw or "el" in kw:
        if kw.get("az") is None or kw.get("el") is None:
            return None
        return _try(lambda: FixedAzEl(az=kw.get("az"), el=kw.get("el"), units=kw.get("units"), **common), kw)

    if "ha" in kw:
        if kw.get("ha") is None or kw.get("dec") is None:
            return None
        return _try(lambda: FixedHaDec(ha=kw.get("ha"), dec=kw.get("dec"), units=kw.get("units"), **common), kw)

    if not kw:
        return Calibration()

    return None
