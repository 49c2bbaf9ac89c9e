"""
Shared utilities for comparison scripts.

This module provides common classes, functions, and constants used across
all comparison scripts in the suite. Angles are compared in arcseconds,
positions in AU.
"""

import math
from typing import List

import libsla as sla

# ============================================================================
# TOLERANCE THRESHOLDS
# ============================================================================

ARCSEC = sla.AS2R


class Tolerances:
    """Tolerance thresholds for different comparison types."""

    # Time scales (seconds)
    TAI_UTC = 1e-3
    TT_UTC = 1e-3

    # Sidereal time (arcsec)
    GMST = 0.2

    # Nutation IAU 1980 vs IAU 2000 (arcsec)
    NUTATION = 0.2
    OBLIQUITY = 0.2

    # Approximate ephemerides, direction (arcsec)
    EARTH_LOW = 200.0
    EARTH_EVP = 10.0
    MOON_HIGH = 40.0
    MOON_LOW = 400.0

    # Approximate ephemerides, distance (AU)
    EARTH_DISTANCE = 1e-3
    MOON_DISTANCE = 5e-6


# ============================================================================
# TEST SUBJECTS
# ============================================================================

# Format: (Name, Year, Month, Day, Hour)
STANDARD_SUBJECTS = [
    ("Standard J2000", 2000, 1, 1, 12.0),
    ("1980 May", 1980, 5, 20, 14.5),
    ("2024 November", 2024, 11, 5, 9.0),
    ("1950 October", 1950, 10, 15, 22.0),
]

LEAP_SECOND_SUBJECTS = [
    ("Before 1972 leap", 1972, 6, 30, 12.0),
    ("After 1972 leap", 1972, 7, 1, 12.0),
    ("2016 December", 2016, 12, 31, 12.0),
    ("2017 January", 2017, 1, 1, 12.0),
]

ALL_SUBJECTS = STANDARD_SUBJECTS + LEAP_SECOND_SUBJECTS

# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def subject_mjd(year: int, month: int, day: int, hour: float) -> float:
    """MJD of a subject's calendar date and hour."""
    mjd, status = sla.cldj(year, month, day)
    if status != sla.G2J_OK:
        raise ValueError(f"Bad calendar date: {year}-{month}-{day}")
    return mjd + hour / 24.0


def angular_diff(val1: float, val2: float) -> float:
    """Angular difference in arcseconds, accounting for the 2pi wrap."""
    return abs(sla.drange(val1 - val2)) / ARCSEC


def vector_angle(v1, v2) -> float:
    """Angle between two 3-vectors in arcseconds."""
    return sla.dsepv(list(v1[:3]), list(v2[:3])) / ARCSEC


def vector_norm(v) -> float:
    return math.sqrt(sum(x * x for x in v[:3]))


def format_value(value: float, decimals: int = 9, width: int = 16) -> str:
    """Format a value with consistent width."""
    return f"{value:{width}.{decimals}f}"


def format_diff(value: float, decimals: int = 6, width: int = 12) -> str:
    """Format difference value with consistent width."""
    return f"{value:{width}.{decimals}f}"


def format_status(passed: bool) -> str:
    """Format pass/fail status."""
    return "✓" if passed else "✗"


# ============================================================================
# SUMMARY STATISTICS
# ============================================================================


class TestStatistics:
    """Tracks and reports test statistics."""

    def __init__(self):
        self.total = 0
        self.passed = 0
        self.failed = 0
        self.errors = 0
        self.max_diff = 0.0
        self.diff_sum = 0.0

    def add_result(self, passed: bool, diff: float = 0.0, error: bool = False):
        """Add a test result."""
        self.total += 1
        if error:
            self.errors += 1
        elif passed:
            self.passed += 1
        else:
            self.failed += 1

        if not error:
            self.max_diff = max(self.max_diff, diff)
            self.diff_sum += diff

    def merge(self, other: "TestStatistics"):
        """Fold another set of results into this one."""
        self.total += other.total
        self.passed += other.passed
        self.failed += other.failed
        self.errors += other.errors
        self.max_diff = max(self.max_diff, other.max_diff)
        self.diff_sum += other.diff_sum

    def avg_diff(self) -> float:
        """Calculate average difference (excluding errors)."""
        count = self.total - self.errors
        return self.diff_sum / count if count > 0 else 0.0

    def pass_rate(self) -> float:
        """Calculate pass rate (excluding errors)."""
        count = self.total - self.errors
        return (self.passed / count * 100) if count > 0 else 0.0

    def print_summary(self, title: str = "SUMMARY"):
        """Print formatted summary."""
        print()
        print("=" * 80)
        print(title)
        print("=" * 80)
        print(f"Total tests:   {self.total}")
        print(f"Passed:        {self.passed} ✓")
        print(f"Failed:        {self.failed} ✗")
        print(f"Errors:        {self.errors}")
        if self.total > self.errors:
            print(f"Pass rate:     {self.pass_rate():.1f}%")
            print(f"Max diff:      {self.max_diff:.6f}")
            print(f"Avg diff:      {self.avg_diff():.6f}")
        print("=" * 80)


# ============================================================================
# COMMAND LINE HELPERS
# ============================================================================


def parse_args(args: List[str]) -> dict:
    """Parse common command line arguments."""
    return {
        "verbose": "--verbose" in args or "-v" in args,
        "quiet": "--quiet" in args or "-q" in args,
        "help": "--help" in args or "-h" in args,
    }


def print_header(title: str):
    """Print formatted header."""
    print("=" * 80)
    print(title)
    print("=" * 80)
    print()
