"""
Tests for precession, nutation and the ecliptic matrix.
"""

import math

import numpy as np
import pytest
import swisseph as swe
import libsla as sla


PREC_1925_1975 = [
    [9.999257249850045e-1, -1.117719859160180e-2, -4.859500474027002e-3],
    [1.117719858025860e-2, 9.999375327960091e-1, -2.716114374174549e-5],
    [4.859500500117173e-3, -2.715647545167383e-5, 9.999881921889954e-1],
]


def _assert_rotation(m, tol=1e-12):
    m = np.array(m)
    assert np.allclose(m @ m.T, np.eye(3), atol=tol)
    assert abs(np.linalg.det(m) - 1.0) < tol


@pytest.mark.unit
class TestPrecessionMatrices:
    """Tests for prec, precl and prebn."""

    def test_prec_reference(self):
        """Test the IAU 1976 matrix from 1925 to 1975."""
        m = sla.prec(1925.0, 1975.0)
        for i in range(3):
            for j in range(3):
                assert abs(m[i][j] - PREC_1925_1975[i][j]) < 1e-12, (
                    f"prec[{i}][{j}] = {m[i][j]}"
                )

    def test_precl_reference(self):
        """Test the long-interval matrix from 1925 to 1975."""
        m = sla.precl(1925.0, 1975.0)
        assert abs(m[0][0] - 9.999257331781050e-1) < 1e-12
        assert abs(m[0][1] - (-1.117658038434041e-2)) < 1e-12
        assert abs(m[0][2] - (-4.859236477249598e-3)) < 1e-12
        assert abs(m[1][1] - 9.999375397061558e-1) < 1e-12
        assert abs(m[2][2] - 9.999881934719490e-1) < 1e-12

    def test_prebn_reference(self):
        """Test the Newcomb matrix from B1925 to B1975."""
        m = sla.prebn(1925.0, 1975.0)
        assert abs(m[0][0] - 9.999257613786738e-1) < 1e-12
        assert abs(m[0][1] - (-1.117444640880939e-2)) < 1e-12
        assert abs(m[0][2] - (-4.858341150654265e-3)) < 1e-12
        assert abs(m[1][1] - 9.999375635561940e-1) < 1e-12
        assert abs(m[2][2] - 9.999881978224798e-1) < 1e-12

    @pytest.mark.parametrize("func", [sla.prec, sla.precl, sla.prebn])
    def test_rotation_matrix(self, func):
        """Test that each precession matrix is a proper rotation."""
        _assert_rotation(func(1850.0, 2100.0))

    @pytest.mark.parametrize("func", [sla.prec, sla.precl, sla.prebn])
    def test_same_epoch_is_identity(self, func):
        """Test that zero interval gives the identity matrix."""
        assert np.allclose(func(1984.0, 1984.0), np.eye(3), atol=1e-15)

    def test_prec_reverse_is_transpose(self):
        """Test that precessing back undoes precessing forward."""
        forward = np.array(sla.prec(1950.0, 2050.0))
        back = np.array(sla.prec(2050.0, 1950.0))
        assert np.allclose(back @ forward, np.eye(3), atol=1e-12)

    def test_precl_close_to_prec(self):
        """Test that the two FK5 models agree to well under an arcsecond for a century."""
        diff = np.array(sla.prec(2000.0, 2100.0)) - np.array(sla.precl(2000.0, 2100.0))
        assert np.max(np.abs(diff)) < 5e-6


@pytest.mark.unit
class TestPreces:
    """Tests for precessing mean places."""

    def test_fk4(self):
        """Test FK4 precession from 1925 to 1950."""
        ra, dec = sla.preces("FK4", 1925.0, 1950.0, 6.28, -1.123)
        assert abs(ra - 0.002403604864728447) < 1e-12
        assert abs(dec - (-1.120570643322045)) < 1e-12

    def test_fk5(self):
        """Test FK5 precession from 2050 back to 1990."""
        ra, dec = sla.preces("FK5", 2050.0, 1990.0, 0.0123, 1.0987)
        assert abs(ra - 6.282003602708382) < 1e-12
        assert abs(dec - 1.092870326188383) < 1e-12

    def test_lower_case_system(self):
        """Test that the system name is case-insensitive."""
        assert sla.preces("fk5", 2000.0, 2010.0, 1.0, 0.5) == sla.preces(
            "FK5", 2000.0, 2010.0, 1.0, 0.5
        )

    def test_unknown_system(self):
        """Test the -99 sentinel for an unknown system."""
        assert sla.preces("ICRS", 2000.0, 2010.0, 1.0, 0.5) == (-99.0, -99.0)

    def test_unknown_system_strict(self):
        """Test ValueError for an unknown system in strict mode."""
        with pytest.raises(ValueError, match="Unknown catalogue system"):
            sla.preces("ICRS", 2000.0, 2010.0, 1.0, 0.5, strict=True)

    def test_round_trip(self):
        """Test precessing forward and back."""
        ra, dec = sla.preces("FK5", 2000.0, 2100.0, 3.0, -0.4)
        ra, dec = sla.preces("FK5", 2100.0, 2000.0, ra, dec)
        assert abs(ra - 3.0) < 1e-12
        assert abs(dec - (-0.4)) < 1e-12


@pytest.mark.unit
class TestNutation:
    """Tests for nutc80, nut and prenut."""

    def test_nutc80_reference(self):
        """Test the IAU 1980 nutation components."""
        dpsi, deps, eps0 = sla.nutc80(50123.4)
        assert abs(dpsi - 3.537714281665945321e-5) < 1e-13, f"dpsi = {dpsi}"
        assert abs(deps - (-4.140590085987148317e-5)) < 1e-13, f"deps = {deps}"
        assert abs(eps0 - 0.4091016349007751) < 1e-12, f"eps0 = {eps0}"

    def test_nutation_amplitude(self, test_dates):
        """Test that nutation stays within the 18.6 year term amplitude."""
        for mjd, label in test_dates:
            dpsi, deps, _ = sla.nutc80(mjd)
            assert abs(dpsi) < 21.0 / 206264.8, f"dpsi too large for {label}"
            assert abs(deps) < 12.0 / 206264.8, f"deps too large for {label}"

    def test_nut_reference(self):
        """
        Test the IAU 1980 nutation matrix against a Shirai & Fukushima (2001)
        reference matrix, to the difference between the two models.
        """
        m = sla.nut(46012.34)
        assert abs(m[0][0] - 9.999999969492166e-1) < 1e-11
        assert abs(m[0][1] - 7.166577986249302e-5) < 1e-7
        assert abs(m[0][2] - 3.107382973077677e-5) < 1e-7
        assert abs(m[1][0] - (-7.166503970900504e-5)) < 1e-7
        assert abs(m[1][2] - (-2.381965032461830e-5)) < 1e-7
        assert abs(m[2][1] - 2.381742334472628e-5) < 1e-7

    def test_nut_matches_components(self):
        """Test that the off-diagonal terms follow from dpsi and deps."""
        dpsi, deps, eps0 = sla.nutc80(51544.5)
        m = sla.nut(51544.5)
        assert abs(m[0][1] - (-dpsi * math.cos(eps0))) < 1e-12
        assert abs(m[0][2] - (-dpsi * math.sin(eps0))) < 1e-12
        assert abs(m[1][2] - (-deps)) < 5e-9

    def test_nut_rotation(self):
        """Test that the nutation matrix is a proper rotation."""
        _assert_rotation(sla.nut(58849.0))

    def test_prenut_reference(self):
        """
        Test the combined matrix against a Shirai & Fukushima (2001) based
        reference, to the difference between the nutation models.
        """
        m = sla.prenut(1985.0, 50123.4567)
        assert abs(m[0][1] - (-2.516417057665452e-3)) < 5e-7
        assert abs(m[0][2] - (-1.093569785342370e-3)) < 5e-7
        assert abs(m[1][2] - 4.006159587358310e-5) < 5e-7

    def test_prenut_is_product(self):
        """Test prenut = nut x prec."""
        date = 55000.0
        expected = np.array(sla.nut(date)) @ np.array(sla.prec(2000.0, sla.epj(date)))
        assert np.allclose(sla.prenut(2000.0, date), expected, atol=1e-15)

    @pytest.mark.integration
    @pytest.mark.parametrize("mjd", [44239.0, 51544.5, 58849.0])
    def test_nutation_matches_swisseph(self, mjd):
        """Test nutation and mean obliquity against the Swiss Ephemeris."""
        xx, _ = swe.calc(mjd + 2400000.5, swe.ECL_NUT, swe.FLG_MOSEPH)
        dpsi, deps, eps0 = sla.nutc80(mjd)

        assert abs(dpsi - math.radians(xx[2])) < 1e-6, f"dpsi = {dpsi}"
        assert abs(deps - math.radians(xx[3])) < 1e-6, f"deps = {deps}"
        assert abs(eps0 - math.radians(xx[1])) < 1e-6, f"eps0 = {eps0}"


@pytest.mark.unit
class TestEcmat:
    """Tests for the equatorial to ecliptic matrix."""

    def test_reference(self):
        """Test the matrix at MJD 41234."""
        m = sla.ecmat(41234.0)
        assert abs(m[0][0] - 1.0) < 1e-12
        assert abs(m[1][1] - 0.917456575085716) < 1e-12
        assert abs(m[1][2] - 0.397835937079581) < 1e-12
        assert abs(m[2][1] - (-0.397835937079581)) < 1e-12
        assert abs(m[2][2] - 0.917456575085716) < 1e-12

    def test_obliquity_at_j2000(self, j2000_mjd):
        """Test that the rotation angle is 84381.448 arcsec at J2000."""
        m = sla.ecmat(j2000_mjd)
        eps = math.atan2(m[1][2], m[1][1])
        assert abs(eps - 84381.448 * sla.AS2R) < 1e-15
