# tests/test_time_scales.py

import math
from datetime import datetime, timedelta, timezone

import pytest

from astrocoords.core.errors import ParseError
from astrocoords.core.time import TimeInstant
from astrocoords.reference import sidereal
from astrocoords.reference import time_scales as ts


def test_epoch_mjd_round_trip():
    assert ts.epoch_to_mjd(0.0) == pytest.approx(40587.0)
    assert ts.mjd_to_epoch(51544.5) == pytest.approx(946728000.0)


def test_datetime_requires_timezone():
    with pytest.raises(ValueError):
        ts.datetime_utc_to_mjd(datetime(2000, 1, 1, 12))
    with pytest.raises(ValueError):
        TimeInstant.from_datetime(datetime(2000, 1, 1, 12))


def test_datetime_to_mjd():
    """J2000.0 is MJD 51544.5; other offsets are converted to UTC first."""
    assert ts.datetime_utc_to_mjd(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)) == pytest.approx(51544.5)
    hst = timezone(timedelta(hours=-10))
    assert ts.datetime_utc_to_mjd(datetime(2000, 1, 1, 2, tzinfo=hst)) == pytest.approx(51544.5)


def test_tt_minus_utc_follows_leap_seconds():
    """TAI-UTC was 32 s in 2000 and 37 s from 2017."""
    assert ts.tt_minus_utc_seconds(51544.5) == pytest.approx(64.184, abs=1e-6)
    assert ts.tt_minus_utc_seconds(58000.0) == pytest.approx(69.184, abs=1e-6)
    assert ts.mjd_utc_to_mjd_tt(58000.0) == pytest.approx(58000.0 + 69.184 / 86400.0, abs=1e-9)


def test_epochs():
    assert ts.julian_epoch(51544.5) == pytest.approx(2000.0)
    assert ts.besselian_epoch_to_mjd(1950.0) == pytest.approx(33281.923, abs=1e-3)
    assert ts.T_centuries(51544.5 + 36525.0) == pytest.approx(1.0)


def test_parse_element_epoch():
    assert ts.parse_element_epoch(50539.5) == pytest.approx(50539.5)
    assert ts.parse_element_epoch("50539.5") == pytest.approx(50539.5)
    # 1997-04-01 is MJD 50539
    assert ts.parse_element_epoch("1997 Apr 1.5") == pytest.approx(50539.5)
    assert ts.parse_element_epoch("1997 April 1.5") == pytest.approx(50539.5)
    with pytest.raises(ParseError):
        ts.parse_element_epoch("April 1 1997")
    with pytest.raises(ParseError):
        ts.parse_element_epoch("1997 Feb 30.0")


def test_time_instant_arithmetic_and_views():
    t = TimeInstant.from_epoch(1000436215)
    assert t.datetime == datetime(2001, 9, 14, 2, 56, 55, tzinfo=timezone.utc)
    later = t + 3600.0
    assert later - t == pytest.approx(3600.0)
    assert (later - 3600.0) == t
    assert t < later
    assert t.clone() == t
    assert TimeInstant.from_mjd(t.mjd).epoch == pytest.approx(t.epoch, abs=1e-4)
    assert t.jd == pytest.approx(t.mjd + 2400000.5)


def test_gast_at_j2000():
    """GMST at 2000-01-01 12h UT is 18h 41m 50.548s; the equation of the equinoxes is about -1 s."""
    gmst = math.radians(18.697374558 * 15.0)
    assert sidereal.gast(51544.5) == pytest.approx(gmst, abs=2e-4)


def test_lst_adds_east_longitude():
    mjd = 52000.25
    long = -2.7
    lst = sidereal.local_sidereal_time(mjd, long)
    assert 0.0 <= lst < 2.0 * math.pi
    expected = sidereal.local_sidereal_time(mjd) + long
    diff = (lst - expected) % (2.0 * math.pi)
    assert min(diff, 2.0 * math.pi - diff) == pytest.approx(0.0, abs=1e-12)
