"""
Tests for atmospheric refraction (refro and the two-term model routines).
"""

import logging
import math

import pytest
import libsla as sla
from libsla import refraction

# Observing conditions shared by the reference values
HM = 3456.7
TDK = 280.0
PMB = 678.9
RH = 0.9
PHI = -0.3
TLR = 0.006


def refro_optical(zobs, wl=0.55, eps=1.0e-9):
    return sla.refro(zobs, HM, TDK, PMB, RH, wl, PHI, TLR, eps)


@pytest.fixture
def refco_077():
    """refco() constants at 0.77 micrometres."""
    return sla.refco(2111.1, 275.9, 709.3, 0.9, 0.77, -1.03, 0.0067, 1.0e-12)


@pytest.mark.unit
class TestRefro:
    """Tests for the refraction integral."""

    def test_optical_reference(self):
        """Test optical refraction at 1.4 rad against the reference value."""
        ref = refro_optical(1.4)
        assert abs(ref - 0.00106715763018568) < 1e-12, f"refro = {ref}"

    def test_radio_reference(self):
        """Test radio refraction at 1.4 rad against the reference value."""
        ref = refro_optical(1.4, wl=1000.0)
        assert abs(ref - 0.001296416185295403) < 1e-12, f"refro = {ref}"

    def test_strip_ceiling(self, monkeypatch, caplog):
        """Test that the strip ceiling ends the integration with a debug log."""
        monkeypatch.setattr(refraction, "REFRACTION_MAX_STRIPS", 8)
        with caplog.at_level(logging.DEBUG, logger="libsla.refraction"):
            ref = refro_optical(1.4, eps=1.0e-12)

        assert 0.0 < ref < 0.01
        assert any("strips reached" in r.getMessage() for r in caplog.records)

    def test_no_ceiling_log_when_converged(self, caplog):
        """Test that a converged integration does not log the ceiling."""
        with caplog.at_level(logging.DEBUG, logger="libsla.refraction"):
            refro_optical(0.5, eps=1.0e-6)
        assert not any("strips reached" in r.getMessage() for r in caplog.records)

    def test_zenith_is_zero(self):
        """Test that there is no refraction at the zenith."""
        assert abs(refro_optical(0.0)) < 1e-15

    def test_monotonic_in_zenith_distance(self):
        """Test that refraction grows with zenith distance up to the horizon."""
        zds = [math.radians(d) for d in (5, 20, 45, 60, 75, 85, 89, 90)]
        values = [refro_optical(z) for z in zds]
        for z, lower, higher in zip(zds[1:], values, values[1:]):
            assert higher > lower, f"refraction not increasing at {math.degrees(z)} deg"

    def test_constant_beyond_93_degrees(self):
        """Test that zenith distances beyond 93 degrees use the 93 degree value."""
        at_93 = refro_optical(1.623156204)
        assert refro_optical(math.radians(95.0)) == at_93
        assert refro_optical(math.radians(120.0)) == at_93

    def test_sign_symmetry(self):
        """Test refro(-z) = -refro(z)."""
        for z in (0.3, 1.0, 1.4):
            assert refro_optical(-z) == -refro_optical(z)

    def test_convergence_with_tighter_tolerance(self):
        """Test that halving the tolerance changes the result negligibly."""
        coarse = refro_optical(1.5, eps=2.0e-8)
        fine = refro_optical(1.5, eps=1.0e-8)
        assert abs(coarse - fine) < 2.0e-8

    def test_small_zenith_distance_approximation(self):
        """Test that refraction near the zenith is close to A tan z."""
        refa, _ = sla.refco(HM, TDK, PMB, RH, 0.55, PHI, TLR, 1.0e-10)
        z = math.radians(10.0)
        assert abs(refro_optical(z) - refa * math.tan(z)) < 1e-8

    def test_clamped_inputs(self):
        """Test that absurd inputs are clamped rather than failing."""
        ref = sla.refro(1.0, -5000.0, 50.0, -10.0, 2.0, 0.01, 0.0, 1.0, 1.0)
        assert math.isfinite(ref)
        assert ref >= 0.0


@pytest.mark.unit
class TestRefco:
    """Tests for the two-term model constants."""

    def test_refcoq_radio(self):
        """Test refcoq at a radio wavelength."""
        refa, refb = sla.refcoq(275.9, 709.3, 0.9, 101.0)
        assert abs(refa - 2.324736903790639e-4) < 1e-12
        assert abs(refb - (-2.442884551059e-7)) < 1e-15

    def test_refcoq_optical(self):
        """Test refcoq at an optical wavelength."""
        refa, refb = sla.refcoq(275.9, 709.3, 0.9, 0.77)
        assert abs(refa - 2.007406521596588e-4) < 1e-12
        assert abs(refb - (-2.264210092590e-7)) < 1e-15

    def test_refco_radio(self):
        """Test refco at a radio wavelength."""
        refa, refb = sla.refco(2111.1, 275.9, 709.3, 0.9, 101.0, -1.03, 0.0067, 1.0e-12)
        assert abs(refa - 2.324673985217244e-4) < 1e-10
        assert abs(refb - (-2.265040682496e-7)) < 1e-12

    def test_refco_optical(self, refco_077):
        """Test refco at an optical wavelength."""
        refa, refb = refco_077
        assert abs(refa - 2.007202720084551e-4) < 1e-10
        assert abs(refb - (-2.223037748876e-7)) < 1e-12

    def test_refco_matches_refro_at_fit_points(self):
        """Test that the model reproduces refro at tan z = 1 and tan z = 4."""
        refa, refb = sla.refco(HM, TDK, PMB, RH, 0.55, PHI, TLR, 1.0e-10)
        for tanz in (1.0, 4.0):
            model = refa * tanz + refb * tanz ** 3
            exact = refro_optical(math.atan(tanz), eps=1.0e-10)
            assert abs(model - exact) < 1e-14

    def test_refcoq_close_to_refco(self):
        """Test that the quick model agrees with refco to a percent or two."""
        quick_a, _ = sla.refcoq(283.0, 1013.25, 0.5, 0.55)
        full_a, _ = sla.refco(0.0, 283.0, 1013.25, 0.5, 0.55, 0.8, 0.0065, 1.0e-10)
        assert abs(quick_a - full_a) / full_a < 0.02

    def test_atmdsp(self, refco_077):
        """Test scaling the 0.77 micrometre constants to 0.5 micrometres."""
        refa, refb = refco_077
        refa2, refb2 = sla.atmdsp(275.9, 709.3, 0.9, 0.77, refa, refb, 0.5)
        assert abs(refa2 - 2.034523658888048e-4) < 1e-10
        assert abs(refb2 - (-2.250855362179e-7)) < 1e-12

    def test_atmdsp_radio_unchanged(self):
        """Test that radio wavelengths leave the constants unchanged."""
        assert sla.atmdsp(275.9, 709.3, 0.9, 200.0, 1.0e-4, -1.0e-7, 0.5) == (1.0e-4, -1.0e-7)


@pytest.mark.unit
class TestTwoTermModel:
    """Tests for refz, refv and airmas."""

    def test_refv_high_elevation(self, refco_077):
        """Test refv well above the horizon."""
        refa, refb = refco_077
        v = sla.refv(sla.dcs2c(0.345, 0.456), refa, refb)
        expected = (0.8447487047790478, 0.3035794890562339, 0.4407256738589851)
        for got, want in zip(v, expected):
            assert abs(got - want) < 1e-10, f"refv = {v}"

    def test_refv_low_elevation(self, refco_077):
        """Test refv below 3 degrees elevation."""
        refa, refb = refco_077
        v = sla.refv(sla.dcs2c(3.7, 0.03), refa, refb)
        expected = (-0.8476187691681673, -0.5295354802804889, 0.0322914582168426)
        for got, want in zip(v, expected):
            assert abs(got - want) < 1e-10, f"refv = {v}"

    def test_refz_high_elevation(self, refco_077):
        """Test refz at a small zenith distance."""
        refa, refb = refco_077
        assert abs(sla.refz(0.567, refa, refb) - 0.566872285910534) < 1e-10

    def test_refz_near_horizon(self, refco_077):
        """Test refz beyond 83 degrees."""
        refa, refb = refco_077
        assert abs(sla.refz(1.55, refa, refb) - 1.545697350690958) < 1e-10

    def test_refz_continuous_at_83_degrees(self, refco_077):
        """Test that the horizon fix-up joins the two-term model smoothly."""
        refa, refb = refco_077
        z83 = math.radians(83.0)
        below = sla.refz(z83 - 1e-9, refa, refb)
        above = sla.refz(z83 + 1e-9, refa, refb)
        assert abs(above - below) < 1e-8

    def test_refz_reduces_zenith_distance(self, refco_077):
        """Test that refraction always raises the apparent position."""
        refa, refb = refco_077
        for deg in (1, 30, 60, 80, 85, 89, 92):
            zu = math.radians(deg)
            assert sla.refz(zu, refa, refb) < zu

    def test_airmas_reference(self):
        """Test airmas against the reference value."""
        assert abs(sla.airmas(1.2354) - 3.015698990074724) < 1e-12

    def test_airmas_zenith(self):
        """Test unit air mass at the zenith."""
        assert sla.airmas(0.0) == 1.0

    def test_airmas_capped(self):
        """Test that the zenith distance is capped at 1.52 radians."""
        assert sla.airmas(1.6) == sla.airmas(1.52)
        assert sla.airmas(-1.0) == sla.airmas(1.0)
