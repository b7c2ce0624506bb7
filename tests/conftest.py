# tests/conftest.py

from datetime import datetime, timezone

import pytest

from astrocoords.core.observer import ObserverContext, Telescope, get_telescope
from astrocoords.core.time import TimeInstant


@pytest.fixture
def jcmt() -> Telescope:
    return get_telescope("JCMT")


@pytest.fixture
def ref_instant() -> TimeInstant:
    """2001-09-14 02:56:55 UTC, the reference epoch of the JCMT position checks."""
    return TimeInstant.from_epoch(1000436215)


@pytest.fixture
def jcmt_ctx(jcmt, ref_instant) -> ObserverContext:
    return ObserverContext(jcmt, ref_instant)


@pytest.fixture
def hilo() -> Telescope:
    """Almanac site: longitude -155:29, latitude +19:49, sea level."""
    return Telescope.from_sexagesimal("HILO", "-155:29:00", "19:49:00", 0.0)


@pytest.fixture
def almanac_ctx(hilo) -> ObserverContext:
    return ObserverContext(hilo, TimeInstant.from_datetime(datetime(2002, 7, 15, 12, 0, tzinfo=timezone.utc)))
