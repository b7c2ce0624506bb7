#ephemeris/jpl.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..reference.time_scales import MJD_ZERO
from . import require_ephemeris

# Kernel segment names. DE4xx kernels carry barycentres for the outer planets.
_TARGETS = {
    "sun": "sun",
    "mercury": "mercury barycenter",
    "venus": "venus barycenter",
    "moon": "moon",
    "mars": "mars barycenter",
    "jupiter": "jupiter barycenter",
    "saturn": "saturn barycenter",
    "uranus": "uranus barycenter",
    "neptune": "neptune barycenter",
    "pluto": "pluto barycenter",
}


@dataclass
class SkyfieldEphemeris:
    """
    Geocentric astrometric positions from a JPL kernel read by skyfield.

    Requires optional deps and a local kernel file (e.g. de421.bsp):
      pip install "astrocoords[ephemeris]"
    """
    eph: object
    ts: object

    @classmethod
    def load(cls, kernel_path: str) -> "SkyfieldEphemeris":
        require_ephemeris()
        from skyfield.api import load, load_file  # type: ignore

        return cls(eph=load_file(kernel_path), ts=load.timescale())

    def astrometric(self, body: str, mjd_tt: float) -> np.ndarray:
        key = body.lower()
        if key not in _TARGETS:
            raise KeyError(f"Unknown planet '{body}'. Available: {sorted(_TARGETS)}")
        t = self.ts.tt_jd(MJD_ZERO + mjd_tt)
        earth = self.eph["earth"]
        target = self.eph[_TARGETS[key]]
        return np.asarray(earth.at(t).observe(target).position.au, dtype=float)
