"""
Tests for horizon, ecliptic, galactic and supergalactic conversions,
E-terms and proper motion.
"""

import math

import pytest
import libsla as sla


def _angle_diff(a, b):
    return abs(sla.drange(a - b))


@pytest.mark.unit
class TestHorizon:
    """Tests for de2h, dh2e, altaz, zd and pa."""

    def test_de2h(self):
        """Test equatorial to horizon coordinates."""
        az, el = sla.de2h(-0.3, -1.1, -0.7)
        assert abs(az - 2.820087515852369) < 1e-12
        assert abs(el - 1.132711866443304) < 1e-12

    def test_dh2e(self):
        """Test horizon to equatorial coordinates."""
        ha, dec = sla.dh2e(2.820087515852369, 1.132711866443304, -0.7)
        assert abs(ha - (-0.3)) < 1e-12
        assert abs(dec - (-1.1)) < 1e-12

    @pytest.mark.parametrize("phi", [-1.2, -0.3, 0.0, 0.6, 1.4])
    def test_round_trip(self, phi):
        """Test dh2e inverts de2h at several latitudes."""
        for ha, dec in ((-2.0, 0.4), (0.5, -0.9), (3.0, 1.2)):
            az, el = sla.de2h(ha, dec, phi)
            ha2, dec2 = sla.dh2e(az, el, phi)
            assert _angle_diff(ha2, ha) < 1e-12
            assert abs(dec2 - dec) < 1e-12

    def test_zd(self):
        """Test zenith distance."""
        assert abs(sla.zd(-1.023, -0.876, -0.432) - 0.8963914139430839) < 1e-12

    def test_zd_consistent_with_de2h(self):
        """Test zd = pi/2 - elevation."""
        _, el = sla.de2h(0.7, 0.2, 0.9)
        assert abs(sla.zd(0.7, 0.2, 0.9) - (sla.DPIBY2 - el)) < 1e-12

    def test_pa(self):
        """Test parallactic angle."""
        assert abs(sla.pa(-1.567, 1.5123, 0.987) - (-1.486288540423851)) < 1e-12

    def test_pa_at_zenith(self):
        """Test the zero result for a star exactly at the zenith."""
        assert sla.pa(0.0, 0.789, 0.789) == 0.0

    def test_altaz(self):
        """Test positions, velocities and accelerations from altaz."""
        r = sla.altaz(0.7, -0.7, -0.65)
        expected = {
            "az": 4.400560746660174,
            "azd": -0.2015438937145421,
            "azdd": -0.4381266949668748,
            "el": 1.026646506651396,
            "eld": -0.7576920683826450,
            "eldd": 0.04922465406857453,
            "pa": 1.707639969653937,
            "pad": 0.4717832355365627,
            "padd": -0.2957914128185515,
        }
        for field, want in expected.items():
            got = getattr(r, field)
            assert abs(got - want) < 1e-12, f"{field} = {got}, expected {want}"

    def test_altaz_agrees_with_de2h_and_pa(self):
        """Test that the positional outputs match de2h and pa."""
        r = sla.altaz(0.7, -0.7, -0.65)
        az, el = sla.de2h(0.7, -0.7, -0.65)
        assert _angle_diff(r.az, az) < 1e-12
        assert abs(r.el - el) < 1e-12
        assert _angle_diff(r.pa, sla.pa(0.7, -0.7, -0.65)) < 1e-12

    def test_altaz_rate_is_derivative(self):
        """Test the azimuth and elevation rates by finite differences."""
        ha, dec, phi, h = 0.3, 0.1, 0.8, 1e-6
        r = sla.altaz(ha, dec, phi)
        before = sla.de2h(ha - h, dec, phi)
        after = sla.de2h(ha + h, dec, phi)
        assert abs(sla.drange(after[0] - before[0]) / (2 * h) - r.azd) < 1e-6
        assert abs((after[1] - before[1]) / (2 * h) - r.eld) < 1e-6


@pytest.mark.unit
class TestHourAngleSolvers:
    """Tests for pda2h and pdq2h."""

    @pytest.mark.parametrize("ha", [-2.5, -1.0, -0.2, 0.4, 1.7])
    def test_pda2h_recovers_azimuth(self, ha):
        """Test that a valid hour angle reproduces the requested azimuth."""
        phi, dec = 0.5, 0.3
        az, _ = sla.de2h(ha, dec, phi)

        result = sla.pda2h(phi, dec, az)

        solutions = [
            h for h, ok in ((result.ha1, result.valid1), (result.ha2, result.valid2)) if ok
        ]
        assert solutions, f"No valid solution for ha = {ha}"
        assert any(abs(h - ha) < 1e-9 for h in solutions)
        for h in solutions:
            assert _angle_diff(sla.de2h(h, dec, phi)[0], az) < 1e-9

    def test_pda2h_no_solution(self):
        """Test that an unreachable azimuth gives no valid solution."""
        # A star close to the pole never reaches due east at this latitude
        result = sla.pda2h(1.2, 1.5, sla.DPIBY2)
        assert not result.valid1 and not result.valid2

    @pytest.mark.parametrize("ha", [-2.0, -0.6, 0.5, 2.2])
    def test_pdq2h_recovers_parallactic_angle(self, ha):
        """Test that a valid hour angle reproduces the requested parallactic angle."""
        phi, dec = 0.7, -0.2
        q = sla.pa(ha, dec, phi)

        result = sla.pdq2h(phi, dec, q)

        solutions = [
            h for h, ok in ((result.ha1, result.valid1), (result.ha2, result.valid2)) if ok
        ]
        assert solutions, f"No valid solution for ha = {ha}"
        assert any(abs(h - ha) < 1e-9 for h in solutions)
        for h in solutions:
            assert _angle_diff(sla.pa(h, dec, phi), q) < 1e-9


@pytest.mark.unit
class TestEcliptic:
    """Tests for eqecl and ecleq."""

    def test_equinox_at_j2000(self, j2000_mjd):
        """Test that the equinox is at ecliptic longitude and latitude zero."""
        dl, db = sla.eqecl(0.0, 0.0, j2000_mjd)
        assert _angle_diff(dl, 0.0) < 1e-15
        assert abs(db) < 1e-15

    def test_celestial_pole(self, j2000_mjd):
        """Test that the celestial pole is at latitude 90 deg minus the obliquity."""
        dl, db = sla.eqecl(0.0, sla.DPIBY2, j2000_mjd)
        assert abs(db - (sla.DPIBY2 - 84381.448 * sla.AS2R)) < 1e-12
        assert abs(dl - sla.DPIBY2) < 1e-12

    @pytest.mark.parametrize("date", [33282.0, 51544.5, 62502.0])
    def test_round_trip(self, date):
        """Test ecleq inverts eqecl."""
        dl, db = sla.eqecl(1.234, -0.567, date)
        ra, dec = sla.ecleq(dl, db, date)
        assert abs(ra - 1.234) < 1e-12
        assert abs(dec - (-0.567)) < 1e-12

    def test_longitude_range(self):
        """Test that ecliptic longitude is in [0, 2pi)."""
        dl, _ = sla.eqecl(6.2, -0.3, 51544.5)
        assert 0.0 <= dl < sla.D2PI


@pytest.mark.unit
class TestGalactic:
    """Tests for the galactic and supergalactic conversions."""

    def test_north_galactic_pole(self):
        """Test that the FK5 north galactic pole has b = 90 deg."""
        _, b = sla.eqgal(math.radians(192.85948), math.radians(27.12825))
        assert abs(b - sla.DPIBY2) < 1e-6

    def test_galactic_centre(self):
        """Test the J2000 position of l = b = 0."""
        ra, dec = sla.galeq(0.0, 0.0)
        assert abs(ra - math.radians(266.40500)) < 1e-5
        assert abs(dec - math.radians(-28.93617)) < 1e-5

    def test_eqgal_round_trip(self):
        """Test galeq inverts eqgal."""
        l, b = sla.eqgal(5.67, -1.23)
        ra, dec = sla.galeq(l, b)
        assert abs(ra - 5.67) < 1e-10
        assert abs(dec - (-1.23)) < 1e-10

    def test_supgal(self):
        """Test supergalactic to galactic."""
        l, b = sla.supgal(6.1, -1.4)
        assert abs(l - 3.798775860769474) < 1e-12
        assert abs(b - (-0.1397070490669407)) < 1e-12

    def test_galsup_round_trip(self):
        """Test galsup inverts supgal."""
        l, b = sla.supgal(6.1, -1.4)
        sl, sb = sla.galsup(l, b)
        assert abs(sl - 6.1) < 1e-10
        assert abs(sb - (-1.4)) < 1e-10

    def test_eg50_north_galactic_pole(self):
        """Test that the B1950 galactic pole has b = 90 deg (E-terms aside)."""
        _, b = sla.eg50(math.radians(192.25), math.radians(27.4))
        assert abs(b - sla.DPIBY2) < 1e-5

    def test_eg50_round_trip(self):
        """Test ge50 inverts eg50."""
        l, b = sla.eg50(3.955, 0.45)
        ra, dec = sla.ge50(l, b)
        assert abs(ra - 3.955) < 1e-10
        assert abs(dec - 0.45) < 1e-10

    def test_output_ranges(self):
        """Test longitude in [0, 2pi) and latitude in [-pi/2, pi/2]."""
        for func in (sla.eqgal, sla.galeq, sla.galsup, sla.supgal, sla.eg50, sla.ge50):
            lon, lat = func(6.0, -1.0)
            assert 0.0 <= lon < sla.D2PI
            assert -sla.DPIBY2 <= lat <= sla.DPIBY2


@pytest.mark.unit
class TestETerms:
    """Tests for etrms, addet and subet."""

    def test_etrms_magnitude(self):
        """Test the size of the E-terms vector at B1950."""
        a = sla.etrms(1950.0)
        expected = 0.01673011 * 20.49552 * sla.AS2R
        assert abs(math.sqrt(sum(x * x for x in a)) - expected) < 1e-15

    def test_addet_shift_is_small(self):
        """Test that E-terms shift a position by at most 0.35 arcsec."""
        ra, dec = sla.addet(2.0, -0.5, 1950.0)
        assert sla.dsep(ra, dec, 2.0, -0.5) < 0.35 * sla.AS2R

    def test_subet_inverts_addet(self):
        """Test subet(addet(x)) = x."""
        for rm, dm in ((0.1, 0.2), (3.5, -1.0), (5.9, 1.3)):
            rc, dc = sla.addet(rm, dm, 1950.0)
            r2, d2 = sla.subet(rc, dc, 1950.0)
            assert _angle_diff(r2, rm) < 1e-10
            assert abs(d2 - dm) < 1e-10


@pytest.mark.unit
class TestProperMotion:
    """Tests for pm."""

    def test_no_motion(self):
        """Test that zero motion leaves the position unchanged."""
        ra, dec = sla.pm(1.0, 0.5, 0.0, 0.0, 0.0, 0.0, 2000.0, 2050.0)
        assert abs(ra - 1.0) < 1e-15
        assert abs(dec - 0.5) < 1e-15

    def test_pure_ra_motion_on_equator(self):
        """Test motion in RA for a star on the equator."""
        ra, dec = sla.pm(1.0, 0.0, 1e-6, 0.0, 0.0, 0.0, 2000.0, 2010.0)
        assert abs(ra - (1.0 + 1e-5)) < 1e-12
        assert abs(dec) < 1e-15

    def test_pure_dec_motion(self):
        """Test motion in declination."""
        ra, dec = sla.pm(2.0, 0.3, 0.0, 2e-6, 0.0, 0.0, 2000.0, 2005.0)
        assert abs(ra - 2.0) < 1e-12
        assert abs(dec - (0.3 + 1e-5)) < 1e-12

    def test_radial_velocity_alone_does_not_move(self):
        """Test that radial velocity without transverse motion changes nothing."""
        ra, dec = sla.pm(4.0, -0.8, 0.0, 0.0, 0.5, 100.0, 2000.0, 2100.0)
        assert abs(ra - 4.0) < 1e-12
        assert abs(dec - (-0.8)) < 1e-12
