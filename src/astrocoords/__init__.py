"""astrocoords public API.

Keep this surface small: users should mostly interact with `make_coords`
and the coordinate classes re-exported here.
"""

import logging

from .api import (
    make_coords,
    distance,
    list_telescopes,
    get_telescope,
    register_telescope,
    set_registry,
    SUN_RISE_SET,
    CIVIL_TWILIGHT,
    NAUT_TWILIGHT,
    AST_TWILIGHT,
    MOON_RISE_SET,
)
from .coords import (
    Calibration,
    Coords,
    Elements,
    Equatorial,
    FixedAzEl,
    FixedHaDec,
    Interpolated,
    Planet,
)
from .core.angle import Angle, AngleFormat, AngleRange, HourAngle
from .core.errors import AstroCoordsError, CoordinateTypeError, ParseError, UnsupportedVelocityDefinition
from .core.observer import ObserverContext, Telescope, TelescopeLimits
from .core.time import TimeInstant
from .core.types import CrossingStatus, Event, HorizonCrossingResult, VelocityDefinition, VelocityFrame
from .solver.horizon import HorizonSolver
from .solver.params import SolverParams

logging.getLogger(__name__).addHandler(logging.NullHandler())

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
    "Coords",
    "Calibration",
    "Elements",
    "Equatorial",
    "FixedAzEl",
    "FixedHaDec",
    "Interpolated",
    "Planet",
    "Angle",
    "AngleFormat",
    "AngleRange",
    "HourAngle",
    "AstroCoordsError",
    "CoordinateTypeError",
    "ParseError",
    "UnsupportedVelocityDefinition",
    "ObserverContext",
    "Telescope",
    "TelescopeLimits",
    "TimeInstant",
    "CrossingStatus",
    "Event",
    "HorizonCrossingResult",
    "VelocityDefinition",
    "VelocityFrame",
    "HorizonSolver",
    "SolverParams",
]
