"""
Time conversion utilities for libsla.

Implements standard astronomical time functions for conversions between:
- Gregorian calendar dates and Modified Julian Dates (MJD = JD - 2400000.5)
- Julian and Besselian epochs and MJD
- UTC, TAI and TT (leap seconds, with user extensions from libsla.state)
- UT1 and Greenwich mean/apparent sidereal time

Calendar algorithms follow Hatcher (QJRAS 25, 53, 1984) and the
Explanatory Supplement to the Astronomical Almanac (1992).
"""

import math
from typing import Tuple

from .constants import (
    D2PI,
    S2R,
    AS2R,
    T2AS,
    MJD_J2000,
    MJD_B1900,
    JULIAN_YEAR,
    TROPICAL_YEAR,
    JULIAN_CENTURY,
    TT_MINUS_TAI,
    LEAP_SECONDS,
    G2J_OK,
    G2J_BAD_YEAR,
    G2J_BAD_MONTH,
    G2J_BAD_DAY,
    J2G_OK,
    J2G_BAD_DATE,
)
from .state import get_leap_seconds
from .utils import anint, nint, dranrm

# Month lengths for a non-leap year
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Valid MJD range for the calendar conversions
_MJD_MIN = -2395520.0
_MJD_MAX = 1.0e9


def _idiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _day_status(year: int, month: int, day: int) -> int:
    """G2J_BAD_DAY if day is not in the given month, otherwise G2J_OK."""
    if month == 2 and _is_leap_year(year):
        days = 29
    else:
        days = _MONTH_DAYS[month - 1]
    return G2J_BAD_DAY if (day < 1 or day > days) else G2J_OK


def _expand_year(year: int) -> int:
    """Two-digit year defaults: 0-49 means 20xx, 50-99 means 19xx."""
    if 0 <= year <= 49:
        return year + 2000
    if 50 <= year <= 99:
        return year + 1900
    return year


# =============================================================================
# CALENDAR <-> MJD
# =============================================================================


def cldj(year: int, month: int, day: int) -> Tuple[float, int]:
    """
    Gregorian calendar date to Modified Julian Date.

    Args:
        year: Year in the Gregorian calendar (-4699 or later)
        month: Month (1-12)
        day: Day of month

    Returns:
        Tuple[float, int]: (mjd, status) where status is G2J_OK,
        G2J_BAD_YEAR (MJD not computed), G2J_BAD_MONTH (MJD not computed)
        or G2J_BAD_DAY (MJD computed anyway)

    Examples:
        >>> cldj(1899, 12, 31)
        (15019.0, 0)
    """
    if year < -4699:
        return 0.0, G2J_BAD_YEAR
    if month < 1 or month > 12:
        return 0.0, G2J_BAD_MONTH

    w = _idiv(12 - month, 10)
    mjd = float(
        _idiv(1461 * (year - w + 4712), 4)
        + _idiv(306 * ((month + 9) % 12) + 5, 10)
        - _idiv(3 * _idiv(year - w + 4900, 100), 4)
        + day
        - 2399904
    )
    return mjd, _day_status(year, month, day)


def caldj(year: int, month: int, day: int) -> Tuple[float, int]:
    """
    Gregorian calendar date to MJD, with two-digit year defaults.

    Years 0-49 are taken as 2000-2049 and 50-99 as 1950-1999; other years
    are used as given. See cldj() for the status values.
    """
    return cldj(_expand_year(year), month, day)


def clyd(year: int, month: int, day: int) -> Tuple[int, int, int]:
    """
    Gregorian calendar date to year and day in year (in a Julian calendar
    aligned to the 20th/21st century Gregorian calendar).

    Args:
        year: Year (-4711 or later)
        month: Month (1-12)
        day: Day of month

    Returns:
        Tuple[int, int, int]: (year, day_in_year, status). Day in year is
        1 for January 1. The status is as for cldj(); the date is still
        computed when the day is out of range.
    """
    if year < -4711:
        return 0, 0, G2J_BAD_YEAR
    if month < 1 or month > 12:
        return 0, 0, G2J_BAD_MONTH

    # Perform the conversion via a day count
    i = _idiv(14 - month, 12)
    k = year - i
    j = (
        _idiv(1461 * (k + 4800), 4)
        + _idiv(367 * (month - 2 + 12 * i), 12)
        - _idiv(3 * _idiv(k + 4900, 100), 4)
        + day
        - 30660
    )
    k = _idiv(j - 1, 1461)
    l = j - 1461 * k
    n = _idiv(l - 1, 365) - _idiv(l, 1461)
    j = _idiv(_idiv(80 * (l - 365 * n + 30), 2447), 11)
    i = n + j
    day_in_year = 59 + l - 365 * i + _idiv(4 - n, 4) * (1 - j)
    jyear = 4 * k + i - 4716

    return jyear, day_in_year, _day_status(year, month, day)


def calyd(year: int, month: int, day: int) -> Tuple[int, int, int]:
    """clyd() with two-digit year defaults (see caldj())."""
    return clyd(_expand_year(year), month, day)


def _jd_to_calendar(d: float) -> Tuple[int, int, int]:
    """Calendar date for the whole MJD d."""
    jd = nint(d) + 2400001

    # Hatcher's algorithm, with Gregorian century corrections
    n4 = 4 * (jd + ((6 * ((4 * jd - 17918) // 146097)) // 4 + 1) // 2 - 37)
    nd10 = 10 * (((n4 - 237) % 1461) // 4) + 5

    year = n4 // 1461 - 4712
    month = ((nd10 // 306 + 2) % 12) + 1
    day = (nd10 % 306) // 10 + 1
    return year, month, day


def djcl(mjd: float) -> Tuple[int, int, int, float, int]:
    """
    Modified Julian Date to Gregorian year, month, day and fraction of day.

    Args:
        mjd: Modified Julian Date (JD - 2400000.5)

    Returns:
        Tuple: (year, month, day, fraction, status); status is J2G_OK, or
        J2G_BAD_DATE (all other values zero) for MJD outside
        -2395520 < mjd < 1e9 (before 4701 BC March 1)

    Examples:
        >>> djcl(51544.5)[:4]
        (2000, 1, 1, 0.5)
    """
    if mjd <= _MJD_MIN or mjd >= _MJD_MAX:
        return 0, 0, 0, 0.0, J2G_BAD_DATE

    # Separate day and fraction
    f = math.fmod(mjd, 1.0)
    if f < 0.0:
        f += 1.0
    d = anint(mjd - f)

    year, month, day = _jd_to_calendar(d)
    return year, month, day, f, J2G_OK


def djcal(ndp: int, mjd: float) -> Tuple[int, int, int, int, int]:
    """
    Modified Julian Date to Gregorian calendar, rounded to ndp decimal
    places of days.

    Args:
        ndp: Number of decimal places of days in the fraction
        mjd: Modified Julian Date

    Returns:
        Tuple: (year, month, day, fraction, status) where fraction is the
        fraction of a day as an integer in units of 10**-ndp days

    Note:
        Rounding is applied before the date is formed, so a fraction that
        rounds up to 1 moves the date on to the next day.

    Examples:
        >>> djcal(4, 50123.9999)
        (1996, 2, 10, 9999, 0)
    """
    if mjd <= _MJD_MIN or mjd >= _MJD_MAX:
        return 0, 0, 0, 0, J2G_BAD_DATE

    # Denominator of fraction
    fd = float(10 ** max(ndp, 0))

    # Round date and express in units of fraction
    df = anint(mjd * fd)

    # Separate day and fraction
    f = math.fmod(df, fd)
    if f < 0.0:
        f += fd
    d = (df - f) / fd

    year, month, day = _jd_to_calendar(d)
    return year, month, day, nint(f), J2G_OK


# =============================================================================
# EPOCHS
# =============================================================================


def epj(date: float) -> float:
    """Julian epoch from MJD."""
    return 2000.0 + (date - MJD_J2000) / JULIAN_YEAR


def epj2d(epj: float) -> float:
    """MJD from Julian epoch."""
    return MJD_J2000 + (epj - 2000.0) * JULIAN_YEAR


def epb(date: float) -> float:
    """Besselian epoch from MJD."""
    return 1900.0 + (date - MJD_B1900) / TROPICAL_YEAR


def epb2d(epb: float) -> float:
    """MJD from Besselian epoch."""
    return MJD_B1900 + (epb - 1900.0) * TROPICAL_YEAR


def epco(result: str, given: str, epoch: float) -> float:
    """
    Convert an epoch into the appropriate form, 'B' or 'J'.

    Args:
        result: Form required, 'B' (Besselian) or 'J' (Julian)
        given: Form of the epoch supplied, 'B' or 'J'
        epoch: Epoch to convert

    Returns:
        float: The epoch in the required form; 0.0 if either form is not
        recognised. Lower case forms are accepted.
    """
    result = result.upper()
    given = given.upper()
    if result not in ("B", "J") or given not in ("B", "J"):
        return 0.0
    if result == given:
        return epoch
    if result == "B":
        return epb(epj2d(epoch))
    return epj(epb2d(epoch))


# =============================================================================
# TIME SCALES
# =============================================================================

# TAI-UTC before 1972: (start MJD, offset, reference MJD, rate in s/day),
# newest first
_DRIFT_TABLE = (
    (39887.0, 4.21317, 39126.0, 0.002592),
    (39126.0, 4.31317, 39126.0, 0.002592),
    (39004.0, 3.84013, 38761.0, 0.001296),
    (38942.0, 3.74013, 38761.0, 0.001296),
    (38820.0, 3.64013, 38761.0, 0.001296),
    (38761.0, 3.54013, 38761.0, 0.001296),
    (38639.0, 3.44013, 38761.0, 0.001296),
    (38486.0, 3.34013, 38761.0, 0.001296),
    (38395.0, 3.24013, 38761.0, 0.001296),
    (38334.0, 1.945858, 37665.0, 0.0011232),
    (37665.0, 1.845858, 37665.0, 0.0011232),
    (37512.0, 1.372818, 37300.0, 0.001296),
    (37300.0, 1.422818, 37300.0, 0.001296),
)


def dat(utc: float) -> float:
    """
    Increment to be applied to UTC to give TAI (TAI-UTC).

    Args:
        utc: UTC date as MJD

    Returns:
        float: TAI-UTC in seconds

    Note:
        From 1972 the value comes from the leap-second table, extended by
        any steps registered with libsla.state.add_leap_second(). Before
        1972 the UTC drift formulae are used; before 1961 the 1961 formula
        is extrapolated, which is not meaningful.
    """
    for mjd, delta_at in reversed(get_leap_seconds()):
        if utc >= mjd:
            return delta_at

    for mjd, delta_at in reversed(LEAP_SECONDS):
        if utc >= mjd:
            return float(delta_at)

    for start, offset, reference, rate in _DRIFT_TABLE:
        if utc >= start:
            return offset + (utc - reference) * rate
    return 1.417818 + (utc - 37300.0) * 0.001296


def dtt(utc: float) -> float:
    """
    TT-UTC in seconds.

    Args:
        utc: UTC date as MJD

    Returns:
        float: 32.184 + TAI-UTC
    """
    return TT_MINUS_TAI + dat(utc)


def dt(epoch: float) -> float:
    """
    Approximate ET-UT (seconds) for historical epochs.

    Args:
        epoch: Julian epoch (e.g. 1850.0)

    Returns:
        float: ET-UT in seconds

    Precision:
        Stephenson & Morrison fits: 1800-1988 within a few seconds, much
        worse before 1600 (tens of minutes around 0 AD).

    References:
        Stephenson & Morrison, Phil. Trans. R. Soc. Lond. A 313, 47 (1984)
        Stephenson & Houlden, "Atlas of Historical Eclipse Maps" (1986)
    """
    t = (epoch - 1800.0) / 100.0

    if epoch >= 1708.185161980887:
        # Post-1708: parabola fitted to 1800-1988
        w = t - 0.19
        return 5.156 + 13.3066 * w * w
    if epoch >= 979.0258204760233:
        # 979-1708
        return 25.5 * t * t
    # Pre-979
    return 1360.0 + (320.0 + 44.3 * t) * t


# =============================================================================
# SIDEREAL TIME
# =============================================================================


def gmst(ut1: float) -> float:
    """
    Greenwich mean sidereal time (IAU 1982).

    Args:
        ut1: UT1 as MJD

    Returns:
        float: GMST in radians, in [0, 2pi)
    """
    tu = (ut1 - MJD_J2000) / JULIAN_CENTURY
    return dranrm(
        math.fmod(ut1, 1.0) * D2PI
        + (24110.54841 + (8640184.812866 + (0.093104 - 6.2e-6 * tu) * tu) * tu)
        * S2R
    )


def gmsta(date: float, ut1: float) -> float:
    """
    Greenwich mean sidereal time from a date and a fraction of a day.

    Args:
        date: UT1 date as MJD (integer part)
        ut1: UT1 time as fraction of a day

    Returns:
        float: GMST in radians, in [0, 2pi)

    Note:
        Splitting the date preserves precision. The arguments may be given
        either way round: the smaller is treated as the date.
    """
    if date < ut1:
        d1, d2 = date, ut1
    else:
        d1, d2 = ut1, date

    t = (d1 + (d2 - MJD_J2000)) / JULIAN_CENTURY

    return dranrm(
        S2R
        * (
            24110.54841
            + (8640184.812866 + (0.093104 - 6.2e-6 * t) * t) * t
            + 86400.0 * (math.fmod(d1, 1.0) + math.fmod(d2, 1.0))
        )
    )


def eqeqx(date: float) -> float:
    """
    Equation of the equinoxes (IAU 1994).

    Args:
        date: TDB (TT will do) as MJD

    Returns:
        float: Apparent minus mean sidereal time, in radians
    """
    from .precession import nutc80

    t = (date - MJD_J2000) / JULIAN_CENTURY

    # Longitude of the mean ascending node of the lunar orbit on the
    # ecliptic, measured from the mean equinox of date
    om = AS2R * (450160.280 + (-5.0 * T2AS - 482890.539 + (7.455 + 0.008 * t) * t) * t)

    dpsi, _, eps0 = nutc80(date)

    return dpsi * math.cos(eps0) + AS2R * (0.00264 * math.sin(om) + 0.000063 * math.sin(om + om))
