from __future__ import annotations

from typing import Dict, Mapping, Optional

from ..core.observer import ObserverContext
from ..core.types import ApparentPlace
from ..reference.ephemerides import OrbitalElements, elements_place
from ..reference.time_scales import parse_element_epoch
from .base import Coords

_REQUIRED = ("ORBINC", "ANODE", "PERIH", "AORQ", "E")


def has_epoch(elements) -> bool:
    """True when a mapping carries an EPOCH or EPOCHPERIH entry."""
    if not isinstance(elements, Mapping):
        return False
    return elements.get("EPOCH") is not None or elements.get("EPOCHPERIH") is not None


class Elements(Coords):
    """
    A body on a heliocentric orbit, from upper-case keyed elements:

      EPOCH       epoch of the elements (TT MJD, or 'YYYY Mon D.frac')
      EPOCHPERIH  epoch of perihelion, for comets
      ORBINC      inclination
      ANODE       longitude of the ascending node
      PERIH       longitude (major planets) or argument of perihelion
      AORQ        mean distance, or perihelion distance for comets (AU)
      E           eccentricity
      AORL        mean longitude (major planets) or mean anomaly
      DM          daily motion (major planets only)

    Angles are radians. The apparent place is None when the elements
    cannot be propagated.
    """

    type = "ELEMENTS"

    def __init__(self, elements: Mapping, **kw) -> None:
        super().__init__(**kw)
        if not has_epoch(elements):
            raise ValueError("Orbital elements need an EPOCH or EPOCHPERIH")
        missing = [k for k in _REQUIRED if elements.get(k) is None]
        if missing:
            raise ValueError(f"Orbital elements are missing {missing}")

        el: Dict[str, object] = dict(elements)
        epoch_key = "EPOCHPERIH" if el.get("EPOCHPERIH") is not None else "EPOCH"
        el[epoch_key] = parse_element_epoch(el[epoch_key])
        self._elements = el

        aorl = el.get("AORL")
        dm = el.get("DM")
        if epoch_key == "EPOCHPERIH":
            # a perihelion epoch only makes sense for the comet form
            aorl = dm = None
        self._orbit = OrbitalElements(
            epoch=float(el[epoch_key]),
            orbinc=float(el["ORBINC"]),
            anode=float(el["ANODE"]),
            perih=float(el["PERIH"]),
            aorq=float(el["AORQ"]),
            e=float(el["E"]),
            aorl=None if aorl is None else float(aorl),
            dm=None if (dm is None or aorl is None) else float(dm),
        )

    @property
    def elements(self) -> Dict[str, object]:
        return dict(self._elements)

    @property
    def orbit(self) -> OrbitalElements:
        return self._orbit

    def apparent_at(self, ctx: ObserverContext) -> Optional[ApparentPlace]:
        return elements_place(self._orbit, ctx.mjd, ctx.mjd_tt, ctx.long, ctx.lat, ctx.alt)

    def array(self) -> tuple:
        o = self._orbit
        return (self.type, None, None, o.epoch, o.orbinc, o.anode, o.perih, o.aorq, o.e, o.aorl, o.dm)

    def __str__(self) -> str:
        return ",".join(str(v) for v in self._elements.values())
