from .base import Coords
from .calibration import Calibration
from .elements import Elements
from .equatorial import Equatorial
from .factory import make_coords
from .fixed import FixedAzEl, FixedHaDec
from .interpolated import Interpolated
from .planet import Planet

__all__ = [
    "Coords",
    "Calibration",
    "Elements",
    "Equatorial",
    "FixedAzEl",
    "FixedHaDec",
    "Interpolated",
    "Planet",
    "make_coords",
]
