from __future__ import annotations

import math

from .fixed import FixedAzEl


class Calibration(FixedAzEl):
    """
    A calibration observation with no position on the sky. Placed at the
    zenith and always observable.
    """

    type = "CAL"
    always_observable = True

    def __init__(self, **kw) -> None:
        super().__init__(az=0.0, el=0.5 * math.pi, units="radians", **kw)

    def array(self) -> tuple:
        return (self.type,) + (None,) * 10

    def summary(self) -> str:
        return f"{self.name or '':<16s}  {'':<12s}  {'':<13s}  CAL"
