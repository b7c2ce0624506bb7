# tests/test_velocity.py

import math

import pytest

from astrocoords.coords import Equatorial, FixedHaDec
from astrocoords.core.errors import UnsupportedVelocityDefinition
from astrocoords.core.types import VelocityDefinition, VelocityFrame
from astrocoords.reference import velocity as vel
from astrocoords.reference.ephemerides import C_KM_S
from astrocoords.solver.velocity import doppler_factor


@pytest.fixture
def source(jcmt, ref_instant):
    return Equatorial(ra="15:25:07.35", dec="-00:23:35.76", telescope=jcmt, datetime=ref_instant, rv=20.0, vframe="LSRK")


def test_definition_coercion():
    assert VelocityDefinition.coerce(None) is VelocityDefinition.OPTICAL
    assert VelocityDefinition.coerce("radio") is VelocityDefinition.RADIO
    assert VelocityDefinition.coerce("Relativistic") is VelocityDefinition.RELATIVISTIC
    assert VelocityDefinition.coerce("z") is VelocityDefinition.REDSHIFT
    with pytest.raises(UnsupportedVelocityDefinition):
        VelocityDefinition.coerce("sideways")


def test_frame_coercion():
    assert VelocityFrame.coerce(None) is VelocityFrame.HEL
    assert VelocityFrame.coerce("heliocentric") is VelocityFrame.HEL
    assert VelocityFrame.coerce("LSR") is VelocityFrame.LSRK
    assert VelocityFrame.coerce("bary") is VelocityFrame.BARY
    with pytest.raises(UnsupportedVelocityDefinition):
        VelocityFrame.coerce("CMB")
    with pytest.raises(ValueError):
        Equatorial(ra=0.0, dec=0.0, vdefn="sideways")


def test_doppler_conventions():
    c = C_KM_S
    v = 300.0
    assert doppler_factor(0.0, "radio") == pytest.approx(1.0)
    assert doppler_factor(v, "radio") == pytest.approx(1.0 - v / c)
    assert doppler_factor(v, "optical") == pytest.approx(1.0 - v / (v + c))
    assert doppler_factor(v, "relativistic") == pytest.approx(math.sqrt((c - v) / (c + v)))
    # approaching sources are blue shifted
    assert doppler_factor(-v, "radio") > 1.0


def test_doppler_large_redshift():
    """Optical velocities above 1% of c are a redshift plus the small frame correction."""
    assert doppler_factor(0.1 * C_KM_S, "redshift", redshift=0.1) == pytest.approx(1.0 / 1.1)
    fv = 10.0
    expected = (1.0 / 1.1) * (1.0 - fv / (fv + C_KM_S))
    assert doppler_factor(0.1 * C_KM_S + fv, "optical", redshift=0.1, frame_velocity=fv) == pytest.approx(expected)


def test_redshift_sets_definition():
    src = Equatorial(ra=0.0, dec=0.0, redshift=0.5)
    assert src.vdefn is VelocityDefinition.REDSHIFT
    assert src.rv == pytest.approx(0.5 * C_KM_S)
    assert src.redshift == pytest.approx(0.5)
    assert Equatorial(ra=0.0, dec=0.0, vdefn="radio").redshift is None


def test_frame_chain(source):
    assert abs(source.verot()) <= vel.EARTH_ROTATION_SPEED
    assert abs(source.vorb()) < 31.0
    assert source.vhelio() == pytest.approx(source.verot() + source.vorb())
    assert abs(source.vbary() - source.vhelio()) < 0.1

    frames = source.velocity_frames()
    ra, dec = frames._ra2000, frames._dec2000
    assert source.vlsrk() == pytest.approx(source.vhelio() + vel.lsr_kinematic(ra, dec))
    assert source.vlsrd() == pytest.approx(source.vhelio() + vel.lsr_dynamical(ra, dec))
    assert source.vgalc() == pytest.approx(source.vlsrd() + vel.galactocentric(ra, dec))
    assert source.vlg() == pytest.approx(source.vhelio() + vel.local_group(ra, dec))


def test_vdiff(source):
    assert source.vdiff("TOPO", "TOPO") == 0.0
    assert source.vdiff("LSRK", "LSRK") == 0.0
    assert source.vdiff("TOPO", "HEL") == pytest.approx(source.vhelio())
    assert source.vdiff("HEL", "TOPO") == pytest.approx(-source.vhelio())
    # composition through an intermediate frame
    total = source.vdiff("TOPO", "LSRK")
    assert total == pytest.approx(source.vdiff("TOPO", "GEO") + source.vdiff("GEO", "LSRK"))


def test_obsvel_and_doppler(source):
    assert source.obsvel() == pytest.approx(20.0 + source.vlsrk())
    assert source.doppler() == pytest.approx(doppler_factor(source.obsvel(), "optical"))

    topo = Equatorial(ra=0.0, dec=0.0, rv=-5.0, vframe="TOPO", vdefn="RADIO")
    assert topo.obsvel() == pytest.approx(-5.0)
    assert topo.doppler() == pytest.approx(1.0 + 5.0 / C_KM_S)


@pytest.mark.parametrize("vframe", ["HEL", "LSRK", "GAL", "LG"])
def test_large_redshift_uses_heliocentric_correction(jcmt, ref_instant, vframe):
    """The second stage of a large optical Doppler factor uses vhelio whatever the source frame."""
    src = Equatorial(ra="15:25:07.35", dec="-00:23:35.76", telescope=jcmt, datetime=ref_instant,
                     redshift=0.2, vframe=vframe)
    vh = src.vhelio()
    expected = (1.0 / 1.2) * (1.0 - vh / (vh + C_KM_S))
    assert src.doppler() == pytest.approx(expected)


def test_diurnal_sign(jcmt_ctx):
    """Sources setting in the west recede from the rotating observer."""
    west = FixedHaDec(ha=1.0, dec=0.0, telescope="JCMT")
    east = FixedHaDec(ha=-1.0, dec=0.0, telescope="JCMT")
    assert west.verot(jcmt_ctx) > 0.0
    assert east.verot(jcmt_ctx) == pytest.approx(-west.verot(jcmt_ctx))
    expected = vel.EARTH_ROTATION_SPEED * math.cos(jcmt_ctx.lat) * math.sin(1.0)
    assert west.verot(jcmt_ctx) == pytest.approx(expected)


def test_orbital_annual_reversal():
    """Six months apart the orbital term toward a fixed ecliptic-plane direction changes sign."""
    ra = 0.5 * math.pi
    a = vel.orbital(ra, 0.0, 51623.0)   # 2000 March 20, Earth heading for RA 18h
    b = vel.orbital(ra, 0.0, 51806.0)   # 2000 September 20, heading for RA 6h
    assert a > 0.0
    assert a * b < 0.0
    assert abs(a) > 25.0 and abs(b) > 25.0
