"""
Run every libsla comparison against Skyfield and the Swiss Ephemeris and
print a combined summary.
"""

import sys

import compare_ephemerides
import compare_time
from comparison_utils import TestStatistics, parse_args


def main():
    args = parse_args(sys.argv)

    print("================================================================")
    print("LIBSLA vs SKYFIELD / SWISS EPHEMERIS - COMPREHENSIVE COMPARISON")
    print("================================================================")

    total = TestStatistics()
    for module in (compare_time, compare_ephemerides):
        total.merge(module.run_all_comparisons(verbose=args["verbose"]))

    print("\n\n" + "=" * 60)
    print("FINAL SUMMARY")
    print("=" * 60)
    if total.failed == 0 and total.errors == 0:
        print("ALL CHECKS PASSED! ✓")
    else:
        print(f"FOUND {total.failed + total.errors} ISSUES.")

    return 0 if total.failed == 0 and total.errors == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
