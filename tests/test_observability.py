# tests/test_observability.py

import math

import pytest

from astrocoords.coords import Calibration, Equatorial, FixedAzEl, FixedHaDec
from astrocoords.core.observer import ObserverContext, Telescope, TelescopeLimits
from astrocoords.solver.observability import within_limits

AZEL = TelescopeLimits("AZEL", el_min=math.radians(5.0), el_max=math.radians(88.0))
HADEC = TelescopeLimits(
    "HADEC",
    ha_min=math.radians(-67.5), ha_max=math.radians(67.5),
    dec_min=math.radians(-42.0), dec_max=math.radians(60.0),
)


def test_limits_are_exclusive():
    """A source exactly on a limit is not observable; just inside it is."""
    eps = 1e-9
    assert not within_limits(AZEL, AZEL.el_min, 0.0, 0.0)
    assert within_limits(AZEL, AZEL.el_min + eps, 0.0, 0.0)
    assert not within_limits(AZEL, AZEL.el_max, 0.0, 0.0)
    assert within_limits(AZEL, AZEL.el_max - eps, 0.0, 0.0)

    assert not within_limits(HADEC, 0.0, HADEC.ha_max, 0.0)
    assert within_limits(HADEC, 0.0, HADEC.ha_max - eps, 0.0)
    assert not within_limits(HADEC, 0.0, 0.0, HADEC.dec_min)
    assert within_limits(HADEC, 0.0, 0.0, HADEC.dec_min + eps)


def test_no_limits():
    assert not within_limits(None, 0.5, 0.0, 0.0)


@pytest.mark.parametrize("el_deg, expected", [(45.0, True), (89.0, False), (3.0, False), (-10.0, False)])
def test_azel_mount(jcmt_ctx, el_deg, expected):
    src = FixedAzEl(az=1.0, el=math.radians(el_deg))
    assert src.is_observable(jcmt_ctx) is expected


@pytest.mark.parametrize("ha_h, dec_deg, expected", [
    (1.0, 20.0, True),
    (-4.0, 0.0, True),
    (5.0, 20.0, False),
    (1.0, 65.0, False),
    (0.0, -45.0, False),
])
def test_hadec_mount(ref_instant, ha_h, dec_deg, expected):
    src = FixedHaDec(ha=math.radians(15.0 * ha_h), dec=math.radians(dec_deg), telescope="UKIRT")
    ctx = ObserverContext(src.telescope, ref_instant)
    assert src.is_observable(ctx) is expected


def test_needs_telescope_with_limits(ref_instant):
    src = Equatorial(ra=0.0, dec=0.0)
    assert not src.is_observable(ObserverContext(None, ref_instant))
    site = Telescope("NOLIMITS", long=0.0, lat=0.0)
    zenith = FixedAzEl(az=0.0, el=math.radians(60.0))
    assert not zenith.is_observable(ObserverContext(site, ref_instant))


def test_calibration_always_observable(ref_instant, jcmt):
    cal = Calibration()
    assert cal.is_observable(ObserverContext(None, ref_instant))
    # the zenith is outside the JCMT elevation limit, but calibrations are exempt
    assert cal.is_observable(ObserverContext(jcmt, ref_instant))
