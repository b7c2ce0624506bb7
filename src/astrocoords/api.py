from __future__ import annotations

from typing import List, Optional

from .coords.base import Coords
from .coords.factory import make_coords
from .core.angle import Angle
from .core.observer import Telescope, active_registry, get_telescope, set_registry
from .solver.params import (
    AST_TWILIGHT,
    CIVIL_TWILIGHT,
    MOON_RISE_SET,
    NAUT_TWILIGHT,
    SUN_RISE_SET,
)


def list_telescopes() -> List[str]:
    return active_registry().list()


def register_telescope(telescope: Telescope, *, overwrite: bool = False) -> None:
    active_registry().register(telescope, overwrite=overwrite)


def distance(c1: Coords, c2: Coords) -> Optional[Angle]:
    """Tangent-plane separation of c2 from c1 at c1's telescope and time."""
    return c1.distance(c2)


__all__ = [
    "make_coords",
    "distance",
    "list_telescopes",
    "get_telescope",
    "register_telescope",
    "set_registry",
    "SUN_RISE_SET",
    "CIVIL_TWILIGHT",
    "NAUT_TWILIGHT",
    "AST_TWILIGHT",
    "MOON_RISE_SET",
]
