"""
astrocoords.solver.params
-------------------------
Tuning constants for the horizon-crossing solver, and the standard
horizon elevations.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.angle import DAS2R

# Standard horizons (radians)
SUN_RISE_SET = -50.0 * 60.0 * DAS2R     # refraction plus solar semi-diameter
CIVIL_TWILIGHT = math.radians(-6.0)
NAUT_TWILIGHT = math.radians(-12.0)
AST_TWILIGHT = math.radians(-18.0)
# Upper limb of the Moon after parallax and refraction; an approximation only
MOON_RISE_SET = 5.0 * 60.0 * DAS2R

# Default horizons used when the caller gives none
SUN_DEFAULT_HORIZON = SUN_RISE_SET
MOON_DEFAULT_HORIZON = math.radians(-0.8)


@dataclass(frozen=True)
class SolverParams:
    # Meridian transit fixed-point iteration
    transit_step_hours: float = 12.0
    transit_max_iter: int = 10
    transit_tol_s: float = 1.0

    # Rise/set refinement
    refine_step_s: float = 60.0
    el_tol: float = 5.0 * DAS2R
    step_floor_s: float = 0.2
    refine_max_steps: int = 2000

    # Candidate crossings further than this outside the requested
    # direction are not refined
    candidate_slack_s: float = 3600.0


DEFAULT_PARAMS = SolverParams()

# The Moon moves about 13 degrees a day against the stars
MOON_PARAMS = SolverParams(transit_step_hours=6.0, refine_step_s=600.0)


def params_for(body: str) -> SolverParams:
    return MOON_PARAMS if body == "moon" else DEFAULT_PARAMS
