"""
astrocoords.solver.velocity
---------------------------
Observer/target line-of-sight velocities in the standard frames, and the
Doppler factor for a target radial velocity.

Every frame velocity is the motion of the observer relative to that
frame's origin along the line of sight, in km/s, positive when the
observer recedes from the target. Each is built on the previous one:

  TOPO 0
  GEO  verot                      diurnal rotation
  HEL  verot + vorb               Earth about the Sun
  BARY verot + Earth about the barycentre
  LSRK vhelio + kinematic LSR
  LSRD vhelio + dynamical LSR
  GAL  vlsrd + Galactic rotation
  LG   vhelio + Sun about the Local Group
"""

from __future__ import annotations

import math
from typing import Optional

from ..core.errors import UnsupportedVelocityDefinition
from ..core.observer import ObserverContext
from ..core.types import ApparentPlace, VelocityDefinition, VelocityFrame
from ..reference import velocity as vel
from ..reference.astrometry import apparent_to_mean
from ..reference.ephemerides import C_KM_S
from .horizon import CrossingSource, observed


class VelocityFrameCalculator:
    def __init__(self, ctx: ObserverContext, ha: float, place: ApparentPlace) -> None:
        self.ctx = ctx
        self._ha = ha
        self._dec_app = place.dec
        self._ra2000, self._dec2000 = apparent_to_mean(place.ra, place.dec, ctx.mjd_tt)

    @classmethod
    def for_source(cls, source: CrossingSource, ctx: ObserverContext) -> Optional["VelocityFrameCalculator"]:
        """Calculator for `source` as seen from `ctx`, or None without a position."""
        obs = observed(source, ctx)
        if obs is None:
            return None
        ha, _, _, place = obs
        return cls(ctx, ha, place)

    def verot(self) -> float:
        return vel.diurnal(self.ctx.lat, self._ha, self._dec_app)

    def vorb(self) -> float:
        return vel.orbital(self._ra2000, self._dec2000, self.ctx.mjd_tt)

    def vhelio(self) -> float:
        return self.verot() + self.vorb()

    def vbary(self) -> float:
        return self.verot() + vel.orbital(self._ra2000, self._dec2000, self.ctx.mjd_tt, barycentric=True)

    def vlsrk(self) -> float:
        return self.vhelio() + vel.lsr_kinematic(self._ra2000, self._dec2000)

    def vlsrd(self) -> float:
        return self.vhelio() + vel.lsr_dynamical(self._ra2000, self._dec2000)

    def vgalc(self) -> float:
        return self.vlsrd() + vel.galactocentric(self._ra2000, self._dec2000)

    def vlg(self) -> float:
        return self.vhelio() + vel.local_group(self._ra2000, self._dec2000)

    def frame_velocity(self, frame) -> float:
        frame = VelocityFrame.coerce(frame)
        if frame is VelocityFrame.TOPO:
            return 0.0
        if frame is VelocityFrame.GEO:
            return self.verot()
        if frame is VelocityFrame.HEL:
            return self.vhelio()
        if frame is VelocityFrame.BARY:
            return self.vbary()
        if frame is VelocityFrame.LSRK:
            return self.vlsrk()
        if frame is VelocityFrame.LSRD:
            return self.vlsrd()
        if frame is VelocityFrame.GAL:
            return self.vgalc()
        if frame is VelocityFrame.LG:
            return self.vlg()
        raise UnsupportedVelocityDefinition(f"Unsupported velocity frame '{frame}'")

    def vdiff(self, frame_to, frame_from) -> float:
        """
        Velocity to add to a velocity measured in `frame_from` to express it
        in `frame_to`.
        """
        return self.frame_velocity(frame_from) - self.frame_velocity(frame_to)

    def obsvel(self, rv: float, vframe) -> float:
        """Target radial velocity `rv` (km/s, in `vframe`) as seen by the observer."""
        return rv + self.vdiff(VelocityFrame.TOPO, vframe)

    def doppler(self, rv: float, vdefn, vframe, redshift: Optional[float] = None) -> float:
        """
        Observed/rest frequency ratio for a target moving at `rv`.

        A large optical velocity is corrected with the heliocentric
        velocity whatever frame `rv` was given in.
        """
        return doppler_factor(self.obsvel(rv, vframe), vdefn,
                              redshift=redshift if redshift is not None else rv / C_KM_S,
                              frame_velocity=self.vhelio())


def doppler_factor(
    v: float,
    vdefn,
    *,
    redshift: Optional[float] = None,
    frame_velocity: float = 0.0,
) -> float:
    """
    Doppler factor for line-of-sight velocity `v` (km/s, positive receding).

    Optical velocities above 1% of c are treated as a cosmological redshift
    followed by the small-velocity correction at `frame_velocity`.
    """
    vdefn = VelocityDefinition.coerce(vdefn)
    c = C_KM_S
    if vdefn is VelocityDefinition.RADIO:
        return 1.0 - v / c
    if vdefn in (VelocityDefinition.OPTICAL, VelocityDefinition.REDSHIFT):
        if v > 0.01 * c:
            z = redshift if redshift is not None else (v - frame_velocity) / c
            return (1.0 / (1.0 + z)) * (1.0 - frame_velocity / (frame_velocity + c))
        return 1.0 - v / (v + c)
    if vdefn is VelocityDefinition.RELATIVISTIC:
        return math.sqrt((c - v) / (c + v))
    raise UnsupportedVelocityDefinition(f"Unsupported velocity definition '{vdefn}'")
