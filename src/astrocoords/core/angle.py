"""
astrocoords.core.angle
----------------------
Immutable angular quantities with a declared normalization range.

The radian value is stored exactly as supplied and normalized on every read,
so the range can be switched after construction without losing precision.
Display preferences (delimiter, decimal places) are the only mutable state.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import ParseError

TAU = 2.0 * math.pi
DAS2R = math.pi / (180.0 * 3600.0)   # arcsec -> radians
DS2R = TAU / 86400.0                 # seconds of time -> radians


class AngleRange(Enum):
    UNSIGNED_2PI = "2PI"   # [0, 2pi)
    SIGNED_PI = "PI"       # (-pi, pi]

    @classmethod
    def coerce(cls, value: Union["AngleRange", str]) -> "AngleRange":
        if isinstance(value, cls):
            return value
        key = str(value).upper().lstrip("+-")
        for member in cls:
            if member.value == key or member.name == key:
                return member
        raise ParseError(f"Unknown angle range '{value}'")


class AngleFormat(Enum):
    RADIANS = "radians"
    DEGREES = "degrees"
    HOURS = "hours"
    ARCSEC = "arcsec"
    SEXAGESIMAL = "sexagesimal"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def coerce(cls, fmt: Union["AngleFormat", str, None]) -> "AngleFormat":
        """
        Resolve a format request. None means RADIANS. Strings are matched by
        leading character ('r', 'd', 'h', 's', 'a', 'o'); 'arc...' selects
        ARCSEC.
        """
        if fmt is None:
            return cls.RADIANS
        if isinstance(fmt, cls):
            return fmt
        key = str(fmt).strip().lower()
        if key.startswith("arc"):
            return cls.ARCSEC
        if key.startswith("a"):
            return cls.ARRAY
        if key:
            for member in cls:
                if member.value[0] == key[0]:
                    return member
        raise ParseError(f"Unknown angle format '{fmt}'")


def wrap_pi(rad: float) -> float:
    """Wrap radians to (-pi, pi]."""
    w = math.fmod(rad, TAU)
    if w <= -math.pi:
        w += TAU
    elif w > math.pi:
        w -= TAU
    return w


def wrap_2pi(rad: float) -> float:
    """Wrap radians to [0, 2pi)."""
    w = math.fmod(rad, TAU)
    if w < 0.0:
        w += TAU
    if w >= TAU:
        w = 0.0
    return w


def truncate_hours(hours: float) -> float:
    return math.trunc(hours * 1000.0) / 1000.0


_SEXAGESIMAL_RE = re.compile(
    r"^\s*(?P<sign>[+-])?\s*(?P<a>\d+)(?:[:\s]+(?P<b>\d+(?:\.\d*)?))?(?:[:\s]+(?P<c>\d+(?:\.\d*)?))?\s*$"
)
_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def parse_sexagesimal(text: str) -> float:
    """
    Parse 'D:M:S', 'D M S', 'D:M' (either degrees or hours; the caller decides)
    into a signed decimal value. Minutes and seconds must lie in [0, 60).
    """
    if _NUMBER_RE.match(text):
        return float(text)
    m = _SEXAGESIMAL_RE.match(text)
    if m is None or (m.group("b") is None and m.group("c") is None):
        raise ParseError(f"Malformed sexagesimal value '{text}'")
    whole = float(m.group("a"))
    minutes = float(m.group("b")) if m.group("b") is not None else 0.0
    seconds = float(m.group("c")) if m.group("c") is not None else 0.0
    if m.group("c") is not None and m.group("b") is not None and "." in m.group("b"):
        raise ParseError(f"Fractional minutes followed by seconds in '{text}'")
    if not 0.0 <= minutes < 60.0:
        raise ParseError(f"Minutes field out of range in '{text}'")
    if not 0.0 <= seconds < 60.0:
        raise ParseError(f"Seconds field out of range in '{text}'")
    value = whole + minutes / 60.0 + seconds / 3600.0
    return -value if m.group("sign") == "-" else value


class Angle:
    """An angle. Normalized to (-pi, pi] unless another range is requested."""

    default_range = AngleRange.SIGNED_PI
    _units_per_radian = 180.0 / math.pi   # sexagesimal unit: degrees

    __slots__ = ("_radians", "_range", "delimiter", "ndp")

    def __init__(
        self,
        radians: float,
        *,
        range: Union[AngleRange, str, None] = None,
        delimiter: str = ":",
        ndp: int = 2,
    ) -> None:
        rad = float(radians)
        if not math.isfinite(rad):
            raise ValueError(f"Angle must be finite, got {radians!r}")
        self._radians = rad
        self._range = AngleRange.coerce(range) if range is not None else self.default_range
        self.delimiter = delimiter
        self.ndp = ndp

    # ------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------

    @classmethod
    def from_degrees(cls, deg: float, **kw) -> "Angle":
        return cls(math.radians(deg), **kw)

    @classmethod
    def from_hours(cls, hours: float, **kw) -> "Angle":
        return cls(math.radians(15.0 * hours), **kw)

    @classmethod
    def from_arcsec(cls, arcsec: float, **kw) -> "Angle":
        return cls(arcsec * DAS2R, **kw)

    @classmethod
    def parse(cls, value: Union[str, float, "Angle"], units: Optional[str] = None, **kw) -> "Angle":
        """
        Build an angle from user input.

        units: 'sexagesimal', 'degrees', 'radians', 'hours' or 'arcsec'
        (leading characters suffice). With no units, strings containing a
        field delimiter are read as sexagesimal and bare numbers as degrees.
        Sexagesimal values are degrees for Angle and hours for HourAngle.
        """
        if isinstance(value, Angle):
            return cls(value._radians, **kw)

        if units is None:
            if isinstance(value, str) and not _NUMBER_RE.match(value):
                units = "sexagesimal"
            else:
                units = "degrees"

        fmt = AngleFormat.coerce(units)
        if fmt is AngleFormat.SEXAGESIMAL:
            if not isinstance(value, str):
                raise ParseError(f"Sexagesimal input must be a string, got {value!r}")
            return cls(parse_sexagesimal(value) / cls._units_per_radian, **kw)

        if isinstance(value, str):
            if not _NUMBER_RE.match(value):
                raise ParseError(f"Malformed numeric angle '{value}'")
            number = float(value)
        else:
            number = float(value)

        if fmt is AngleFormat.RADIANS:
            return cls(number, **kw)
        if fmt is AngleFormat.DEGREES:
            return cls.from_degrees(number, **kw)
        if fmt is AngleFormat.HOURS:
            return cls.from_hours(number, **kw)
        if fmt is AngleFormat.ARCSEC:
            return cls.from_arcsec(number, **kw)
        raise ParseError(f"Units '{units}' cannot be used for input")

    # ------------------------------------------------------------
    # Range
    # ------------------------------------------------------------

    @property
    def range(self) -> AngleRange:
        return self._range

    @range.setter
    def range(self, value: Union[AngleRange, str]) -> None:
        self._range = AngleRange.coerce(value)

    def with_range(self, value: Union[AngleRange, str]) -> "Angle":
        return type(self)(self._radians, range=value, delimiter=self.delimiter, ndp=self.ndp)

    # ------------------------------------------------------------
    # Views
    # ------------------------------------------------------------

    @property
    def radians(self) -> float:
        if self._range is AngleRange.UNSIGNED_2PI:
            return wrap_2pi(self._radians)
        return wrap_pi(self._radians)

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    @property
    def arcsec(self) -> float:
        return self.radians / DAS2R

    @property
    def hours(self) -> float:
        return self.degrees / 15.0

    def components(self, ndp: Optional[int] = None) -> Tuple[str, int, int, float]:
        """(sign, whole, minutes, seconds) in the sexagesimal unit of this class."""
        ndp = self.ndp if ndp is None else ndp
        value = self.radians * self._units_per_radian
        sign = "-" if value < 0 else "+"
        scale = 10 ** ndp
        ticks = int(round(abs(value) * 3600.0 * scale))
        per_minute = 60 * scale
        sec_ticks = ticks % per_minute
        rest = ticks // per_minute
        return (sign, rest // 60, rest % 60, sec_ticks / scale)

    def string(self, ndp: Optional[int] = None) -> str:
        ndp = self.ndp if ndp is None else ndp
        sign, whole, minutes, seconds = self.components(ndp)
        width = 3 + ndp if ndp > 0 else 2
        d = self.delimiter
        prefix = "-" if sign == "-" else ""
        return f"{prefix}{whole:02d}{d}{minutes:02d}{d}{seconds:0{width}.{ndp}f}"

    def in_format(self, fmt: Union[AngleFormat, str, None] = None):
        """Return this angle in the requested representation (default radians)."""
        fmt = AngleFormat.coerce(fmt)
        if fmt is AngleFormat.RADIANS:
            return self.radians
        if fmt is AngleFormat.DEGREES:
            return self.degrees
        if fmt is AngleFormat.HOURS:
            return truncate_hours(self.hours)
        if fmt is AngleFormat.ARCSEC:
            return self.arcsec
        if fmt is AngleFormat.SEXAGESIMAL:
            return self.string()
        if fmt is AngleFormat.ARRAY:
            return self.components()
        return self

    # ------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------

    def __float__(self) -> float:
        return self.radians

    def __str__(self) -> str:
        return self.string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.radians!r}, range={self._range.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Angle):
            return NotImplemented
        return self.radians == other.radians

    def __hash__(self) -> int:
        return hash(self.radians)


class HourAngle(Angle):
    """An angle displayed in hours (RA, LST, hour angle). Defaults to [0, 2pi)."""

    default_range = AngleRange.UNSIGNED_2PI
    _units_per_radian = 12.0 / math.pi   # sexagesimal unit: hours

    __slots__ = ()
