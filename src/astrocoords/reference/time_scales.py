from __future__ import annotations

import math
import re
from datetime import datetime, timezone

import erfa

from ..core.errors import ParseError


# ============================================================
# Epoch constants
# ============================================================

MJD_ZERO = 2400000.5          # JD of MJD 0
MJD_UNIX_EPOCH = 40587.0      # MJD at 1970-01-01 00:00:00 UTC
MJD_J2000 = 51544.5           # MJD(TT) at J2000.0
SECONDS_PER_DAY = 86400.0
TT_MINUS_TAI = 32.184         # seconds


# ============================================================
# POSIX epoch <-> MJD(UTC)
# ============================================================

def epoch_to_mjd(epoch: float) -> float:
    """POSIX seconds -> MJD (UTC). Leap seconds are not counted, as in POSIX."""
    return MJD_UNIX_EPOCH + epoch / SECONDS_PER_DAY


def mjd_to_epoch(mjd: float) -> float:
    """MJD (UTC) -> POSIX seconds."""
    return (mjd - MJD_UNIX_EPOCH) * SECONDS_PER_DAY


# ============================================================
# datetime(UTC) -> MJD(UTC)
# ============================================================

def datetime_utc_to_mjd(dt: datetime) -> float:
    """
    datetime -> MJD (UTC). Requires timezone-aware UTC datetime.
    """
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return epoch_to_mjd(dt.astimezone(timezone.utc).timestamp())


# ============================================================
# UTC -> TT (leap-second table)
# ============================================================

def tt_minus_utc_seconds(mjd_utc: float) -> float:
    """
    TT - UTC in seconds: (TAI - UTC) from the leap-second table plus 32.184 s.
    """
    tai1, tai2 = erfa.utctai(MJD_ZERO, mjd_utc)
    tai_minus_utc = ((tai1 - MJD_ZERO) + tai2 - mjd_utc) * SECONDS_PER_DAY
    # Round away the float noise of the two-part sum; the table is in
    # whole or sub-second steps well above this resolution.
    return round(tai_minus_utc, 6) + TT_MINUS_TAI


def mjd_utc_to_mjd_tt(mjd_utc: float) -> float:
    """Convert MJD(UTC) to MJD(TT)."""
    return mjd_utc + tt_minus_utc_seconds(mjd_utc) / SECONDS_PER_DAY


# ============================================================
# Julian / Besselian epochs
# ============================================================

def julian_epoch(mjd_tt: float) -> float:
    """MJD(TT) -> Julian epoch (e.g. 2000.0)."""
    return erfa.epj(MJD_ZERO, mjd_tt)


def besselian_epoch_to_mjd(epb: float) -> float:
    """Besselian epoch (e.g. 1950.0) -> MJD."""
    djm0, djm = erfa.epb2jd(epb)
    return (djm0 - MJD_ZERO) + djm


def T_centuries(mjd_tt: float) -> float:
    """Julian centuries from J2000.0 in TT."""
    return (mjd_tt - MJD_J2000) / 36525.0


# ============================================================
# Orbital-element epochs written as 'YYYY Mon D.frac'
# ============================================================

_MONTHS = {
    name: i + 1
    for i, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
    )
}
_EPOCH_RE = re.compile(r"^\s*(\d{4})\s+([A-Za-z]{3})[a-z]*\s+(\d+(?:\.\d*)?)\s*$")
_MJD_RE = re.compile(r"^\s*\d+(\.\d*)?\s*$")


def parse_element_epoch(value) -> float:
    """
    Element epochs are either an MJD (number or numeric string) or a calendar
    string of the form '1997 Apr 1.567'. Returns MJD (TT).
    """
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value)
    if _MJD_RE.match(text):
        return float(text)
    m = _EPOCH_RE.match(text)
    if m is None:
        raise ParseError(f"Unable to recognize format for elements epoch [{value}]")
    month = _MONTHS.get(m.group(2).lower())
    if month is None:
        raise ParseError(f"Unknown month in elements epoch [{value}]")
    day = float(m.group(3))
    whole = int(math.floor(day))
    try:
        midnight = datetime(int(m.group(1)), month, whole, tzinfo=timezone.utc)
    except ValueError as e:
        raise ParseError(f"Invalid calendar date in elements epoch [{value}]") from e
    return datetime_utc_to_mjd(midnight) + (day - whole)
