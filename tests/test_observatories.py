"""
Tests for the observatory table, user-registered sites and terrestrial
geometry (geoc, pvobs, polmo).
"""

import logging
import math

import pytest
import libsla as sla
from libsla import state


@pytest.mark.unit
class TestObservatoryLookup:
    """Tests for obs."""

    def test_by_identifier(self):
        """Test lookup of the MMT by identifier."""
        site = sla.obs("MMT")
        assert site.name == "MMT 6.5m, Mt Hopkins"
        assert abs(site.longitude - 1.935300584055477) < 1e-10
        assert abs(site.latitude - 0.5530735081550342) < 1e-10
        assert site.height == 2608.0

    def test_by_index(self):
        """Test lookup of the first and last built-in sites by index."""
        assert sla.obs(0).id == "AAT"
        assert sla.obs(0).name == "Anglo-Australian 3.9m Telescope"
        assert sla.obs(84).id == "NANTEN2"

    def test_prefix(self):
        """Test that an abbreviated identifier returns the first match."""
        assert sla.obs("LPO").id == "LPO4.2"
        assert sla.obs("VLT").id == "VLT1"

    def test_southern_site_negative_latitude(self):
        """Test the latitude sign for a southern site."""
        assert sla.obs("AAT").latitude < 0.0
        assert sla.obs("AAT").longitude < 0.0

    def test_unknown_identifier(self):
        """Test ValueError for an unknown identifier."""
        with pytest.raises(ValueError, match="Unknown observatory"):
            sla.obs("NOWHERE")

    @pytest.mark.parametrize("index", [-1, 85, 1000])
    def test_index_out_of_range(self, index):
        """Test ValueError for an index outside the table."""
        with pytest.raises(ValueError):
            sla.obs(index)

    def test_all_sites_valid(self):
        """Test that every built-in site has plausible coordinates."""
        for i in range(85):
            site = sla.obs(i)
            assert abs(site.longitude) <= math.pi, f"{site.id} longitude"
            assert abs(site.latitude) <= math.pi / 2, f"{site.id} latitude"
            assert -100.0 < site.height < 6000.0, f"{site.id} height"


@pytest.mark.unit
class TestUserObservatories:
    """Tests for runtime registration of sites."""

    def test_registered_site_found(self):
        """Test that a registered site can be looked up by identifier and index."""
        state.add_observatory("HOME", "Backyard 20cm", 0.1, 0.9, 50.0)
        site = sla.obs("HOME")
        assert site.name == "Backyard 20cm"
        assert site.longitude == 0.1
        assert site.latitude == 0.9
        assert site.height == 50.0
        assert sla.obs(85) == site

    def test_built_in_sites_searched_first(self):
        """Test that a built-in identifier wins over a user one."""
        state.add_observatory("AAT", "Impostor", 0.0, 0.0, 0.0)
        assert sla.obs("AAT").name == "Anglo-Australian 3.9m Telescope"
        assert sla.obs(85).name == "Impostor"

    def test_clear(self):
        """Test that clearing removes user sites."""
        state.add_observatory("HOME", "Backyard 20cm", 0.1, 0.9, 50.0)
        state.clear_observatories()
        assert state.get_observatories() == []
        with pytest.raises(ValueError):
            sla.obs("HOME")

    def test_registration_logged(self, caplog):
        """Test that registration is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="libsla.state"):
            state.add_observatory("HOME", "Backyard 20cm", 0.1, 0.9, 50.0)
        assert any("HOME" in r.message for r in caplog.records)


@pytest.mark.unit
class TestGeocentric:
    """Tests for geoc, pvobs and polmo."""

    def test_geoc_equator(self):
        """Test that an equatorial site is one equatorial radius from the axis."""
        r, z = sla.geoc(0.0, 0.0)
        assert abs(r - 6378140.0 / 1.49597870e11) < 1e-15
        assert z == 0.0

    def test_geoc_pole(self):
        """Test that the polar distance is the polar radius."""
        r, z = sla.geoc(math.pi / 2, 0.0)
        polar = 6378140.0 * (1.0 - 1.0 / 298.257) / 1.49597870e11
        assert abs(r) < 1e-20
        assert abs(z - polar) < 1e-15

    def test_geoc_height(self):
        """Test that height adds along the normal."""
        r0, z0 = sla.geoc(0.6, 0.0)
        r1, z1 = sla.geoc(0.6, 1000.0)
        dist = math.hypot(r1 - r0, z1 - z0) * 1.49597870e11
        assert abs(dist - 1000.0) < 1e-6
        assert abs(math.atan2(z1 - z0, r1 - r0) - 0.6) < 1e-9

    def test_pvobs(self):
        """Test position and velocity against geoc and the rotation rate."""
        phi, h, stl = 0.5123, 3001.0, -0.567
        pv = sla.pvobs(phi, h, stl)
        r, z = sla.geoc(phi, h)

        assert abs(math.hypot(pv[0], pv[1]) - r) < 1e-17
        assert pv[2] == z
        assert abs(math.atan2(pv[1], pv[0]) - stl) < 1e-12
        speed = math.hypot(pv[3], pv[4])
        assert abs(speed - 7.292115855306589e-5 * r) < 1e-20
        assert pv[5] == 0.0
        # Velocity is perpendicular to the position in the equatorial plane
        assert abs(pv[0] * pv[3] + pv[1] * pv[4]) < 1e-25

    def test_polmo_reference(self):
        """Test polar motion corrections."""
        elong, phi, daz = sla.polmo(0.7, -0.5, 1.0e-6, -2.0e-6)
        assert abs(elong - 0.7000004837322044) < 1e-12
        assert abs(phi - (-0.4999979467222241)) < 1e-12
        assert abs(daz - 1.008982781275728e-6) < 1e-12

    def test_polmo_no_motion(self):
        """Test that zero polar motion changes nothing."""
        elong, phi, daz = sla.polmo(-1.2, 0.8, 0.0, 0.0)
        assert abs(elong - (-1.2)) < 1e-15
        assert abs(phi - 0.8) < 1e-15
        assert abs(daz) < 1e-15

    def test_polmo_at_pole(self):
        """Test that a site at the pole gives finite results."""
        elong, phi, daz = sla.polmo(0.0, math.pi / 2, 0.0, 0.0)
        assert all(math.isfinite(x) for x in (elong, phi, daz))
