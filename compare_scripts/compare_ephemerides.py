"""
Approximate Ephemerides Comparison Script

Compares the libsla Earth (earth, evp) and Moon (dmoon, moon) theories
against the Swiss Ephemeris Moshier ephemeris, which needs no data files.
Positions are geometric, referred to the mean equator and equinox of date
unless stated otherwise.
"""

import sys

import swisseph as swe

import libsla as sla
from comparison_utils import (
    STANDARD_SUBJECTS,
    Tolerances,
    TestStatistics,
    format_diff,
    format_status,
    parse_args,
    print_header,
    subject_mjd,
    vector_angle,
    vector_norm,
)

MEAN_OF_DATE = (
    swe.FLG_MOSEPH
    | swe.FLG_EQUATORIAL
    | swe.FLG_XYZ
    | swe.FLG_SPEED
    | swe.FLG_NONUT
    | swe.FLG_TRUEPOS
    | swe.FLG_NOABERR
    | swe.FLG_NOGDEFL
)

# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================


def _day_in_year(year: int, month: int, day: int, hour: float) -> tuple:
    iy, id, status = sla.clyd(year, month, day)
    if status != sla.G2J_OK:
        raise ValueError(f"Bad calendar date: {year}-{month}-{day}")
    return iy, id, hour / 24.0


def _report(name: str, label: str, diff_angle: float, diff_dist: float,
            angle_tol: float, dist_tol: float, verbose: bool) -> tuple:
    passed = diff_angle < angle_tol and diff_dist < dist_tol
    if verbose or not passed:
        print(
            f"[{name}] [{label:<6}] Angle={format_diff(diff_angle, 3)}\" "
            f"Dist={format_diff(diff_dist, 8)} AU {format_status(passed)}"
        )
    return passed, diff_angle


def compare_earth(name: str, year, month, day, hour, verbose: bool = False) -> list:
    """
    Compare earth() and evp() with the negated geocentric Sun.

    Returns:
        List of (passed, angular diff in arcsec) tuples
    """
    mjd = subject_mjd(year, month, day, hour)
    results = []

    sun, _ = swe.calc(mjd + 2400000.5, swe.SUN, MEAN_OF_DATE)
    earth_swe = [-x for x in sun[:3]]

    pv = sla.earth(*_day_in_year(year, month, day, hour))
    results.append(_report(
        name, "earth",
        vector_angle(pv, earth_swe),
        abs(vector_norm(pv) - vector_norm(earth_swe)),
        Tolerances.EARTH_LOW, Tolerances.EARTH_DISTANCE, verbose,
    ))

    sun, _ = swe.calc(mjd + 2400000.5, swe.SUN, MEAN_OF_DATE | swe.FLG_J2000)
    earth_swe = [-x for x in sun[:3]]
    _, _, _, dph = sla.evp(mjd, 2000.0)
    results.append(_report(
        name, "evp",
        vector_angle(dph, earth_swe),
        abs(vector_norm(dph) - vector_norm(earth_swe)),
        Tolerances.EARTH_EVP, Tolerances.EARTH_DISTANCE, verbose,
    ))
    return results


def compare_moon(name: str, year, month, day, hour, verbose: bool = False) -> list:
    """
    Compare dmoon() and moon() with the geocentric Moon.

    Returns:
        List of (passed, angular diff in arcsec) tuples
    """
    mjd = subject_mjd(year, month, day, hour)
    moon_swe, _ = swe.calc(mjd + 2400000.5, swe.MOON, MEAN_OF_DATE)

    results = []
    for label, pv, angle_tol in (
        ("dmoon", sla.dmoon(mjd), Tolerances.MOON_HIGH),
        ("moon", sla.moon(*_day_in_year(year, month, day, hour)), Tolerances.MOON_LOW),
    ):
        results.append(_report(
            name, label,
            vector_angle(pv, moon_swe),
            abs(vector_norm(pv) - vector_norm(moon_swe)),
            angle_tol, Tolerances.MOON_DISTANCE * (10.0 if label == "moon" else 1.0),
            verbose,
        ))
    return results


# ============================================================================
# MAIN COMPARISON RUNNER
# ============================================================================


def run_all_comparisons(verbose: bool = False) -> TestStatistics:
    """
    Run all ephemeris comparisons.

    Args:
        verbose: If True, print every comparison, not only failures

    Returns:
        TestStatistics: Accumulated results
    """
    print_header("APPROXIMATE EPHEMERIDES COMPARISON")

    stats = TestStatistics()

    print("\n--- Earth ---\n")
    for name, year, month, day, hour in STANDARD_SUBJECTS:
        for passed, diff in compare_earth(name, year, month, day, hour, verbose):
            stats.add_result(passed, diff)

    print("\n--- Moon ---\n")
    for name, year, month, day, hour in STANDARD_SUBJECTS:
        for passed, diff in compare_moon(name, year, month, day, hour, verbose):
            stats.add_result(passed, diff)

    stats.print_summary("EPHEMERIDES COMPARISON SUMMARY")
    return stats


# ============================================================================
# COMMAND LINE INTERFACE
# ============================================================================


def print_help():
    """Print usage help."""
    print("Usage: python compare_ephemerides.py [OPTIONS]")
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
