"""
pytest configuration and shared fixtures for libsla tests.
"""

import math

import pytest
import libsla as sla
from libsla import state


# ============================================================================
# TEST DATA FIXTURES
# ============================================================================


@pytest.fixture
def j2000_mjd():
    """MJD of J2000.0 (2000-01-01 12:00:00 TT)."""
    return 51544.5


@pytest.fixture
def test_dates():
    """Collection of test dates (MJD) spanning the 20th and 21st centuries."""
    return [
        (15020.0, "1900"),
        (33282.0, "1950"),
        (44239.0, "1980"),
        (51544.5, "J2000"),
        (58849.0, "2020"),
        (62502.0, "2030"),
    ]


@pytest.fixture
def test_latitudes():
    """Observatory latitudes in radians, north and south."""
    return [
        ("Mauna Kea", math.radians(19.8263)),
        ("Siding Spring", math.radians(-31.2734)),
        ("La Palma", math.radians(28.7606)),
        ("Tromso", math.radians(69.6492)),
        ("Equator", 0.0),
    ]


@pytest.fixture
def dmat_system():
    """
    Symmetric 3x3 system with its inverse, solution and determinant.

    Returns:
        dict: matrix, vector, inverse, solution, det
    """
    return {
        "matrix": [
            [2.22, 1.6578, 1.380522],
            [1.6578, 1.380522, 1.22548578],
            [1.380522, 1.22548578, 1.1356276122],
        ],
        "vector": [2.28625, 1.7128825, 1.429432225],
        "inverse": [
            [18.02550629769198, -52.16386644917280607, 34.37875949717850495],
            [-52.16386644917280607, 168.1778099099805627, -118.0722869694232670],
            [34.37875949717850495, -118.0722869694232670, 86.50307003740151262],
        ],
        "solution": [
            1.002346480763383,
            0.03285594016974583489,
            0.004760688414885247309,
        ],
        "det": 0.003658344147359863,
    }


# ============================================================================
# TOLERANCE FIXTURES
# ============================================================================


@pytest.fixture
def default_tolerances():
    """Default tolerance values for comparisons."""
    return {
        "exact": 1e-12,  # closed-form results
        "angle": 1e-12,  # radians
        "matrix": 1e-12,  # rotation matrix elements
        "refraction": 1e-10,  # radians
        "single": 1e-4,  # float32 arithmetic
        "ephemeris_angle": 1e-3,  # radians, against Swiss Ephemeris
    }


# ============================================================================
# COMPARISON FIXTURES
# ============================================================================


@pytest.fixture
def angular_separation():
    """Helper returning the angle between two Cartesian vectors."""

    def _separation(v1, v2):
        return sla.dsepv(list(v1[:3]), list(v2[:3]))

    return _separation


# ============================================================================
# SETUP/TEARDOWN
# ============================================================================


@pytest.fixture(autouse=True)
def reset_library_state():
    """Clear user leap seconds and observatories around each test."""
    state.reset()

    yield

    state.reset()


# ============================================================================
# MARKERS
# ============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
