"""
Unit tests for angle utilities, sexagesimal conversions and vector/matrix
routines.
"""

import math

import numpy as np
import pytest
import libsla as sla
from libsla.constants import *
from libsla.utils import anint, nint
from libsla.vectors import identity


# Axial vector and Euler rotation shared by the matrix tests
AXIAL = [-0.123, 0.0987, 0.0654]

RM1 = [
    [0.9930075842721269, 0.05902743090199868, -0.1022335560329612],
    [-0.07113807138648245, 0.9903204657727545, -0.1191836812279541],
    [0.09420887631983825, 0.1256229973879967, 0.9875948309655174],
]

RM2 = [
    [-0.1681574770810878, 0.1981362273264315, 0.9656423242187410],
    [-0.2285369373983370, 0.9450659587140423, -0.2337117924378156],
    [-0.9589024617479674, -0.2599853247796050, -0.1136384607117296],
]

RM = [
    [-0.09010460088585805, 0.3075993402463796, 0.9472400998581048],
    [-0.3161868071070688, 0.8930686362478707, -0.3200848543149236],
    [-0.9444083141897035, -0.3283459407855694, 0.01678926022795169],
]


def assert_matrix_close(got, expected, tol=1e-12):
    for i in range(3):
        for j in range(3):
            assert abs(got[i][j] - expected[i][j]) < tol, (
                f"[{i}][{j}] = {got[i][j]}, expected {expected[i][j]}"
            )


def assert_vector_close(got, expected, tol=1e-12):
    for i, (g, e) in enumerate(zip(got, expected)):
        assert abs(g - e) < tol, f"[{i}] = {g}, expected {e}"


@pytest.mark.unit
class TestAngleNormalisation:
    """Tests for drange, dranrm and rounding helpers."""

    def test_drange(self):
        """Test normalisation into +/- pi."""
        assert abs(sla.drange(-4.0) - 2.283185307179586) < 1e-12

    def test_dranrm(self):
        """Test normalisation into 0-2pi."""
        assert abs(sla.dranrm(-0.1) - 6.183185307179587) < 1e-12

    def test_drange_range(self):
        """Test that drange always lands in (-pi, pi]."""
        for angle in (-20.0, -DPI - 0.1, -1.0, 0.0, 1.0, DPI + 0.1, 20.0):
            w = sla.drange(angle)
            assert -DPI <= w <= DPI
            assert abs(math.sin(w) - math.sin(angle)) < 1e-12

    def test_dranrm_range(self):
        """Test that dranrm always lands in [0, 2pi)."""
        for angle in (-20.0, -1.0, 0.0, 1.0, D2PI + 0.5, 20.0):
            w = sla.dranrm(angle)
            assert 0.0 <= w < D2PI
            assert abs(math.cos(w) - math.cos(angle)) < 1e-12

    def test_anint_rounds_half_away_from_zero(self):
        """Test Fortran-style rounding of halves."""
        assert anint(2.5) == 3.0
        assert anint(-2.5) == -3.0
        assert nint(0.5) == 1
        assert nint(-1.4) == -1


@pytest.mark.unit
class TestSexagesimal:
    """Tests for conversions to and from sexagesimal fields."""

    def test_dd2tf(self):
        """Test days to hours, minutes, seconds."""
        assert sla.dd2tf(4, -0.987654321) == ("-", 23, 42, 13, 3333)

    def test_dr2af(self):
        """Test radians to degrees, arcminutes, arcseconds."""
        result = sla.dr2af(4, 2.345)
        assert result.sign == "+"
        assert result.whole == 134
        assert result.minutes == 21
        assert result.seconds == 30
        assert result.fraction == 9706

    def test_dr2tf(self):
        """Test radians to hours, minutes, seconds."""
        assert sla.dr2tf(4, -3.01234) == ("-", 11, 30, 22, 6484)

    def test_dd2tf_negative_ndp(self):
        """Test that a negative number of decimal places means zero."""
        assert sla.dd2tf(-2, 0.5) == ("+", 12, 0, 0, 0)

    def test_dtf2d(self):
        """Test hours, minutes, seconds to days."""
        days, status = sla.dtf2d(23, 56, 59.1)
        assert abs(days - 0.99790625) < 1e-12
        assert status == T2D_OK

    def test_dtf2r(self):
        """Test hours, minutes, seconds to radians."""
        rad, status = sla.dtf2r(23, 56, 59.1)
        assert abs(rad - 6.270029887942679) < 1e-12
        assert status == T2D_OK

    def test_daf2r(self):
        """Test degrees, arcminutes, arcseconds to radians."""
        rad, status = sla.daf2r(76, 54, 32.1)
        assert abs(rad - 1.342313819975276) < 1e-12
        assert status == D2R_OK

    @pytest.mark.parametrize(
        "fields,expected",
        [
            ((24, 0, 0.0), T2D_BAD_HOURS),
            ((12, 60, 0.0), T2D_BAD_MINUTES),
            ((12, 0, 60.0), T2D_BAD_SECONDS),
            ((-1, 60, 60.0), T2D_BAD_HOURS),
            ((12, -1, -1.0), T2D_BAD_MINUTES),
        ],
    )
    def test_dtf2d_status(self, fields, expected):
        """Test that the most significant bad field is reported."""
        days, status = sla.dtf2d(*fields)
        assert status == expected
        assert math.isfinite(days)

    @pytest.mark.parametrize(
        "fields,expected",
        [
            ((360, 0, 0.0), D2R_BAD_DEGREES),
            ((10, 60, 0.0), D2R_BAD_ARCMINUTES),
            ((10, 0, 60.0), D2R_BAD_ARCSECONDS),
            ((400, 99, 99.0), D2R_BAD_DEGREES),
        ],
    )
    def test_daf2r_status(self, fields, expected):
        """Test daf2r status values."""
        _, status = sla.daf2r(*fields)
        assert status == expected

    def test_round_trip_through_fields(self):
        """Test dr2af followed by daf2r recovers the angle."""
        angle = 1.342313819975276
        f = sla.dr2af(4, angle)
        back, status = sla.daf2r(f.whole, f.minutes, f.seconds + f.fraction / 1e4)
        assert status == D2R_OK
        assert abs(back - angle) < 1e-9


@pytest.mark.unit
class TestSphericalCartesian:
    """Tests for spherical/Cartesian conversions."""

    def test_dcs2c(self):
        """Test spherical to Cartesian."""
        assert_vector_close(
            sla.dcs2c(3.0123, -0.999),
            (-0.5366267667260525, 0.06977111097651444, -0.8409302618566215),
        )

    def test_dcc2s(self):
        """Test Cartesian to spherical."""
        a, b = sla.dcc2s([100.0, -50.0, 25.0])
        assert abs(a - (-0.4636476090008061)) < 1e-12
        assert abs(b - 0.2199879773954594) < 1e-12

    def test_dcc2s_pole(self):
        """Test that a polar vector gives zero longitude."""
        a, b = sla.dcc2s([0.0, 0.0, 2.0])
        assert a == 0.0
        assert abs(b - DPIBY2) < 1e-15

    def test_ds2c6_dc62s_round_trip(self):
        """Test position/velocity conversion and its inverse."""
        pv = sla.ds2c6(1.2, -0.4, 2.5, 1e-6, -2e-6, 3e-5)
        result = sla.dc62s(pv)
        expected = (1.2, -0.4, 2.5, 1e-6, -2e-6, 3e-5)
        for got, want in zip(result, expected):
            assert abs(got - want) < 1e-15


@pytest.mark.unit
class TestRotationMatrices:
    """Tests for rotation matrix construction and products."""

    def test_dav2m(self):
        """Test axial vector to rotation matrix."""
        assert_matrix_close(sla.dav2m(AXIAL), RM1)

    def test_deuler(self):
        """Test Euler angles to rotation matrix."""
        assert_matrix_close(sla.deuler("YZY", 2.345, -0.333, 2.222), RM2)

    def test_deuler_numeric_axes(self):
        """Test that 1/2/3 and lower case name the same axes as X/Y/Z."""
        assert sla.deuler("232", 2.345, -0.333, 2.222) == sla.deuler("yzy", 2.345, -0.333, 2.222)

    def test_dmxm(self):
        """Test matrix product."""
        assert_matrix_close(sla.dmxm(RM2, sla.dav2m(AXIAL)), RM)

    def test_dmxv_and_dimxv(self):
        """Test rotating a vector forward and back."""
        v1 = sla.dcs2c(3.0123, -0.999)
        v3 = sla.dmxv(RM2, sla.dmxv(RM1, v1))
        assert_vector_close(v3, (-0.7267487768696160, 0.5011537352639822, 0.4697671220397141))

        v4 = sla.dimxv(RM, v3)
        assert_vector_close(v4, (-0.5366267667260526, 0.06977111097651445, -0.8409302618566215))

    def test_dm2av(self):
        """Test rotation matrix to axial vector."""
        assert_vector_close(
            sla.dm2av(RM), (0.006889040510209034, -1.577473205461961, 0.5201843672856759)
        )

    def test_dm2av_identity(self):
        """Test that the identity gives a null axial vector."""
        assert sla.dm2av(identity()) == [0.0, 0.0, 0.0]

    def test_dav2m_dm2av_inverse(self):
        """Test that dm2av inverts dav2m."""
        assert_vector_close(sla.dm2av(sla.dav2m(AXIAL)), AXIAL)

    def test_rotation_is_orthogonal(self):
        """Test R.R^T = I for the Euler matrix."""
        r = np.array(sla.deuler("ZXZ", 0.3, 1.1, -2.0))
        assert np.allclose(r @ r.T, np.eye(3), atol=1e-14)


@pytest.mark.unit
class TestVectorProducts:
    """Tests for normalisation, scalar and vector products."""

    def test_dvn(self):
        """Test normalisation and modulus."""
        v5 = [x * 1000.0 for x in sla.dm2av(RM)]
        unit, modulus = sla.dvn(v5)
        assert_vector_close(unit, (0.004147420704640065, -0.9496888606842218, 0.3131674740355448))
        assert abs(modulus - 1661.042127339937) < 1e-9

    def test_dvn_null_vector(self):
        """Test that a null vector is returned with zero modulus."""
        assert sla.dvn([0.0, 0.0, 0.0]) == ([0.0, 0.0, 0.0], 0.0)

    def test_dvdv(self):
        """Test scalar product."""
        unit, _ = sla.dvn(sla.dm2av(RM))
        v1 = sla.dcs2c(3.0123, -0.999)
        assert abs(sla.dvdv(unit, v1) - (-0.3318384698006295)) < 1e-12

    def test_dvxv(self):
        """Test vector product."""
        unit, _ = sla.dvn(sla.dm2av(RM))
        v1 = sla.dcs2c(3.0123, -0.999)
        assert_vector_close(
            sla.dvxv(unit, v1), (0.7767720597123304, -0.1645663574562769, -0.5093390925544726)
        )


@pytest.mark.unit
class TestSeparationAndBearing:
    """Tests for angular separation and position angle."""

    def test_dsepv(self):
        """Test separation of two vectors of arbitrary length."""
        assert abs(sla.dsepv([1.0, 0.1, 0.2], [-3.0, 1e-3, 0.2]) - 2.8603919190246608) < 1e-7

    def test_dsep(self):
        """Test separation of two spherical positions."""
        a1, b1 = sla.dcc2s([1.0, 0.1, 0.2])
        a2, b2 = sla.dcc2s([-3.0, 1e-3, 0.2])
        assert abs(sla.dsep(a1, b1, a2, b2) - 2.8603919190246608) < 1e-7

    def test_dsep_zero(self):
        """Test zero separation of identical points."""
        assert sla.dsep(1.0, 0.5, 1.0, 0.5) == 0.0

    def test_dbear(self):
        """Test bearing between two spherical positions."""
        assert abs(sla.dbear(1.234, -0.123, 2.345, 0.789) - 0.7045970341781791) < 1e-12

    def test_dpav(self):
        """Test that dpav agrees with dbear."""
        v1 = sla.dcs2c(1.234, -0.123)
        v2 = sla.dcs2c(2.345, 0.789)
        assert abs(sla.dpav(v1, v2) - 0.7045970341781791) < 1e-12

    def test_due_north_and_east(self):
        """Test bearings of due north (0) and due east (+pi/2)."""
        assert abs(sla.dbear(1.0, 0.2, 1.0, 0.3)) < 1e-15
        assert abs(sla.dbear(1.0, 0.0, 1.1, 0.0) - DPIBY2) < 1e-15
