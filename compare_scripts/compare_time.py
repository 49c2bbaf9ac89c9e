"""
Time Scales and Earth Orientation Comparison Script

Compares libsla time scales (TAI-UTC, TT-UTC), Greenwich mean sidereal
time and IAU 1980 nutation against Skyfield and pyswisseph.
"""

import math
import sys

import swisseph as swe
from skyfield.api import load

import libsla as sla
from comparison_utils import (
    ARCSEC,
    ALL_SUBJECTS,
    STANDARD_SUBJECTS,
    Tolerances,
    TestStatistics,
    angular_diff,
    format_diff,
    format_status,
    format_value,
    parse_args,
    print_header,
    subject_mjd,
)

# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================


def compare_time_scales(ts, name: str, year, month, day, hour, verbose: bool = False) -> list:
    """
    Compare TAI-UTC and TT-UTC with Skyfield's built-in tables.

    Returns:
        List of (passed, diff) tuples
    """
    mjd = subject_mjd(year, month, day, hour)
    t = ts.utc(year, month, day, hour)
    utc_jd = mjd + 2400000.5

    results = []
    for label, ours, theirs, tol in (
        ("TAI-UTC", sla.dat(mjd), (t.tai - utc_jd) * 86400.0, Tolerances.TAI_UTC),
        ("TT-UTC", sla.dtt(mjd), (t.tt - utc_jd) * 86400.0, Tolerances.TT_UTC),
    ):
        diff = abs(ours - theirs)
        passed = diff < tol
        results.append((passed, diff))
        if verbose or not passed:
            print(
                f"[{name}] [{label:<8}] SF={format_value(theirs, 4)} SLA={format_value(ours, 4)} "
                f"Diff={format_diff(diff)} s {format_status(passed)}"
            )
    return results


def compare_gmst(ts, name: str, year, month, day, hour, verbose: bool = False) -> tuple:
    """
    Compare GMST with Skyfield.

    Returns:
        (passed, diff in arcsec)
    """
    t = ts.utc(year, month, day, hour)
    ours = sla.gmst(t.ut1 - 2400000.5)
    theirs = math.radians(t.gmst * 15.0)
    diff = angular_diff(ours, theirs)
    passed = diff < Tolerances.GMST
    print(
        f"[{name}] [GMST    ] SF={format_value(theirs)} SLA={format_value(ours)} "
        f"Diff={format_diff(diff)}\" {format_status(passed)}"
    )
    return passed, diff


def compare_nutation(name: str, year, month, day, hour, verbose: bool = False) -> list:
    """
    Compare IAU 1980 nutation and mean obliquity with the Swiss Ephemeris.

    Returns:
        List of (passed, diff in arcsec) tuples
    """
    mjd = subject_mjd(year, month, day, hour)
    xx, _ = swe.calc(mjd + 2400000.5, swe.ECL_NUT, swe.FLG_MOSEPH)
    dpsi, deps, eps0 = sla.nutc80(mjd)

    results = []
    for label, ours, theirs, tol in (
        ("dpsi", dpsi, math.radians(xx[2]), Tolerances.NUTATION),
        ("deps", deps, math.radians(xx[3]), Tolerances.NUTATION),
        ("eps0", eps0, math.radians(xx[1]), Tolerances.OBLIQUITY),
    ):
        diff = abs(ours - theirs) / ARCSEC
        passed = diff < tol
        results.append((passed, diff))
        if verbose or not passed:
            print(
                f"[{name}] [{label:<8}] SWE={format_value(theirs, 12)} SLA={format_value(ours, 12)} "
                f"Diff={format_diff(diff)}\" {format_status(passed)}"
            )
    return results


# ============================================================================
# MAIN COMPARISON RUNNER
# ============================================================================


def run_all_comparisons(verbose: bool = False) -> TestStatistics:
    """
    Run all time and Earth orientation comparisons.

    Args:
        verbose: If True, print every comparison, not only failures

    Returns:
        TestStatistics: Accumulated results
    """
    print_header("TIME SCALES AND SIDEREAL TIME COMPARISON")

    ts = load.timescale(builtin=True)
    stats = TestStatistics()

    print("\n--- Time Scales ---\n")
    for name, year, month, day, hour in ALL_SUBJECTS:
        for passed, diff in compare_time_scales(ts, name, year, month, day, hour, verbose):
            stats.add_result(passed, diff)

    print("\n--- Greenwich Mean Sidereal Time ---\n")
    for name, year, month, day, hour in STANDARD_SUBJECTS:
        passed, diff = compare_gmst(ts, name, year, month, day, hour, verbose)
        stats.add_result(passed, diff)

    print("\n--- Nutation ---\n")
    for name, year, month, day, hour in STANDARD_SUBJECTS:
        for passed, diff in compare_nutation(name, year, month, day, hour, verbose):
            stats.add_result(passed, diff)

    stats.print_summary("TIME COMPARISON SUMMARY")
    return stats


# ============================================================================
# COMMAND LINE INTERFACE
# ============================================================================


def print_help():
    """Print usage help."""
    print("Usage: python compare_time.py [OPTIONS]")
    print()
    print("Options:")
    print("  -v, --verbose           Show every comparison")
    print("  -h, --help              Show this help message")
    print()


def main():
    """Main entry point."""
    args = parse_args(sys.argv)

    if args["help"]:
        print_help()
        sys.exit(0)

    stats = run_all_comparisons(verbose=args["verbose"])
    sys.exit(0 if stats.passed == stats.total else 1)


if __name__ == "__main__":
    main()
