# tests/test_factory.py

import math

import pytest

import astrocoords
from astrocoords import api, make_coords
from astrocoords.coords import (
    Calibration,
    Elements,
    Equatorial,
    FixedAzEl,
    FixedHaDec,
    Interpolated,
    Planet,
)
from astrocoords.core.observer import Telescope, TelescopeRegistry, build_registry

ELEMENTS = {
    "EPOCH": 51544.5,
    "ORBINC": 0.18,
    "ANODE": 1.4,
    "PERIH": 1.28,
    "AORQ": 2.77,
    "E": 0.08,
    "AORL": 0.1,
}


def test_priority_order():
    """planet, then elements, then interpolated, then typed equatorial, then fixed, then calibration."""
    assert isinstance(make_coords(planet="mars", ra=0.0, dec=0.0, type="J2000"), Planet)
    assert isinstance(make_coords(elements=ELEMENTS, ra=0.0, dec=0.0, type="J2000"), Elements)
    assert isinstance(
        make_coords(mjd1=52000.0, mjd2=52001.0, ra1=0.0, dec1=0.0, ra2=0.1, dec2=0.1, ra=0.0, dec=0.0, type="J2000"),
        Interpolated,
    )
    assert isinstance(make_coords(ra=0.0, dec=0.0, type="J2000", az=0.0, el=0.5), Equatorial)
    assert isinstance(make_coords(az=0.0, el=0.5), FixedAzEl)
    assert isinstance(make_coords(ha=0.0, dec=0.0, telescope="JCMT"), FixedHaDec)
    assert isinstance(make_coords(), Calibration)


def test_planet_name_falls_through():
    """A target name in the planet slot does not stop the coordinates being used."""
    src = make_coords(planet="M31", name="M31", ra="00:42:44.3", dec="41:16:09", type="J2000")
    assert isinstance(src, Equatorial)
    assert src.name == "M31"


def test_common_keys_are_passed(ref_instant):
    src = make_coords(ra=0.0, dec=0.0, type="J2000", name="x", comment="c", telescope="UKIRT",
                      datetime=ref_instant, rv=12.0, vdefn="radio", vframe="lsrk")
    assert src.name == "x"
    assert src.comment == "c"
    assert src.telescope.name == "UKIRT"
    assert src.datetime == ref_instant
    assert src.rv == 12.0


@pytest.mark.parametrize("kw", [
    {"type": "FK9", "ra": 0.0, "dec": 0.0},
    {"type": "J2000", "ra": "25:99:00", "dec": 0.0},
    {"type": "J2000", "ra": 0.0},
    {"elements": {"EPOCH": 51544.5, "ORBINC": 0.1}},
    {"mjd1": 52000.0, "mjd2": 52001.0, "ra1": 0.0, "dec1": 0.0},
    {"az": 0.0},
    {"ha": 0.0},
    {"name": "nothing else"},
    {"planet": "vulcan"},
])
def test_no_object_for_bad_input(kw):
    assert make_coords(**kw) is None


def test_malformed_proper_motion_is_fatal():
    with pytest.raises(TypeError):
        make_coords(ra=0.0, dec=0.0, type="J2000", pm=5.0)


def test_units_passed_through():
    src = make_coords(ra=180.0, dec=45.0, type="J2000", units="degrees")
    assert src.ra("degrees") == pytest.approx(180.0)
    assert src.dec("degrees") == pytest.approx(45.0)


def test_registry():
    reg = build_registry()
    assert "JCMT" in reg.list()
    assert reg.get("jcmt").name == "JCMT"
    assert reg.get("JCMT").limits.kind == "AZEL"
    assert reg.get("UKIRT").limits.kind == "HADEC"
    with pytest.raises(KeyError):
        reg.get("nowhere")

    site = Telescope("test", long=0.1, lat=0.2)
    reg.register(site)
    assert reg.get("TEST").lat == 0.2
    with pytest.raises(KeyError):
        reg.register(site)
    reg.register(Telescope("test", long=0.1, lat=0.3), overwrite=True)
    assert reg.get("test").lat == 0.3


def test_jcmt_location():
    jcmt = api.get_telescope("JCMT")
    assert math.degrees(jcmt.long) == pytest.approx(-(155.0 + 28.0 / 60.0 + 37.2 / 3600.0))
    assert math.degrees(jcmt.lat) == pytest.approx(19.0 + 49.0 / 60.0 + 22.11 / 3600.0)
    assert jcmt.alt == 4111.0
    assert jcmt.renamed("UKIRT").name == "UKIRT"


def test_api_registry_swap():
    original = api.list_telescopes()
    try:
        reg = TelescopeRegistry()
        reg.register(Telescope("ONLY", long=0.0, lat=0.0))
        api.set_registry(reg)
        assert api.list_telescopes() == ["ONLY"]
    finally:
        api.set_registry(astrocoords.core.observer.TELESCOPES)
    assert api.list_telescopes() == original


def test_swapped_registry_resolves_telescope_names():
    """Names given to sources are looked up in the registry set through the api."""
    try:
        reg = build_registry()
        reg.register(Telescope("MYTEL", long=0.5, lat=0.25, alt=100.0))
        api.set_registry(reg)
        src = make_coords(ra=0.0, dec=0.0, type="J2000", telescope="MYTEL")
        assert src is not None
        assert src.telescope.lat == 0.25
        assert api.get_telescope("JCMT").renamed("MYTEL").long == 0.5
    finally:
        api.set_registry(astrocoords.core.observer.TELESCOPES)
    assert make_coords(ra=0.0, dec=0.0, type="J2000", telescope="MYTEL") is None


def test_public_surface():
    for name in astrocoords.__all__:
        assert hasattr(astrocoords, name), name
