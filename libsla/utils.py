"""
Angle utilities for libsla.

Provides normalisation of angles into standard ranges and conversions between
radians/days and sexagesimal (hours or degrees, minutes, seconds) form.

Sexagesimal fields are returned as a Sexagesimal tuple: a sign character
('+' or '-') plus four integers (hours or degrees, minutes, seconds, and the
fraction of a second in units of 10**-ndp).
"""

import math
from typing import NamedTuple, Tuple
from .constants import (
    D2PI,
    DPI,
    AS2R,
    D2R_OK,
    D2R_BAD_DEGREES,
    D2R_BAD_ARCMINUTES,
    D2R_BAD_ARCSECONDS,
    T2D_OK,
    T2D_BAD_HOURS,
    T2D_BAD_MINUTES,
    T2D_BAD_SECONDS,
)

# Seconds per day
_D2S = 86400.0

# Radians to days, scaled so that hours read as degrees
_F_RADIANS_TO_DEGREE_DAYS = 15.0 / D2PI


class Sexagesimal(NamedTuple):
    """Result of a days/radians to sexagesimal conversion."""

    sign: str
    whole: int
    minutes: int
    seconds: int
    fraction: int


def anint(x: float) -> float:
    """
    Round to the nearest whole number, halves away from zero.

    Python's round() rounds halves to even; the astronomical formulae in this
    package are defined with the Fortran ANINT convention instead.
    """
    if x >= 0.0:
        return math.floor(x + 0.5)
    return -math.floor(-x + 0.5)


def nint(x: float) -> int:
    """Nearest integer, halves away from zero (Fortran NINT)."""
    return int(anint(x))


def sign(a: float, b: float) -> float:
    """Magnitude of a with the sign of b (Fortran SIGN, zero counts as positive)."""
    return abs(a) if b >= 0.0 else -abs(a)


def drange(angle: float) -> float:
    """
    Normalize angle into range +/- pi.

    Args:
        angle: Angle in radians

    Returns:
        float: Equivalent angle in the interval (-pi, pi]

    Examples:
        >>> round(drange(-4.0), 12)
        2.28318530718
    """
    w = math.fmod(angle, D2PI)
    if abs(w) >= DPI:
        w -= math.copysign(D2PI, angle)
    return w


def dranrm(angle: float) -> float:
    """
    Normalize angle into range 0-2 pi.

    Args:
        angle: Angle in radians

    Returns:
        float: Equivalent angle in the interval [0, 2pi)
    """
    w = math.fmod(angle, D2PI)
    if w < 0.0:
        w += D2PI
    return w


def dd2tf(ndp: int, days: float) -> Sexagesimal:
    """
    Convert an interval in days into hours, minutes, seconds.

    Args:
        ndp: Number of decimal places of seconds (negative treated as zero)
        days: Interval in days

    Returns:
        Sexagesimal: (sign, hours, minutes, seconds, fraction)

    Note:
        The absolute value of days may exceed 1.0; in that case the hours
        field is allowed to exceed 23.
    """
    # Power of ten giving the required resolution
    rs = float(10 ** max(ndp, 0))
    rm = rs * 60.0
    rh = rm * 60.0

    # Round the interval and express in smallest units required
    a = anint(rs * _D2S * abs(days))

    # Separate into fields
    ah = math.trunc(a / rh)
    a -= ah * rh
    am = math.trunc(a / rm)
    a -= am * rm
    asec = math.trunc(a / rs)
    af = a - asec * rs

    return Sexagesimal(
        "+" if days >= 0.0 else "-",
        max(nint(ah), 0),
        max(min(nint(am), 59), 0),
        max(min(nint(asec), 59), 0),
        max(nint(min(af, rs - 1.0)), 0),
    )


def dr2tf(ndp: int, angle: float) -> Sexagesimal:
    """Convert an angle in radians into hours, minutes, seconds."""
    return dd2tf(ndp, angle / D2PI)


def dr2af(ndp: int, angle: float) -> Sexagesimal:
    """
    Convert an angle in radians into degrees, arcminutes, arcseconds.

    Args:
        ndp: Number of decimal places of arcseconds
        angle: Angle in radians

    Returns:
        Sexagesimal: (sign, degrees, arcminutes, arcseconds, fraction)
    """
    # Scaling hours to degrees lets the days-to-hms routine do the work
    return dd2tf(ndp, angle * _F_RADIANS_TO_DEGREE_DAYS)


def dtf2d(hours: int, minutes: int, seconds: float) -> Tuple[float, int]:
    """
    Convert hours, minutes, seconds to days.

    Args:
        hours: Hours (0-23)
        minutes: Minutes (0-59)
        seconds: Seconds (0 <= s < 60)

    Returns:
        Tuple[float, int]: (days, status) where status is T2D_OK, or
        T2D_BAD_HOURS / T2D_BAD_MINUTES / T2D_BAD_SECONDS for the first
        field (most significant first) out of range

    Note:
        The interval is computed even when a field is out of range.
    """
    status = T2D_OK
    if seconds < 0.0 or seconds >= 60.0:
        status = T2D_BAD_SECONDS
    if minutes < 0 or minutes > 59:
        status = T2D_BAD_MINUTES
    if hours < 0 or hours > 23:
        status = T2D_BAD_HOURS

    days = (60.0 * (60.0 * hours + minutes) + seconds) / _D2S
    return days, status


def dtf2r(hours: int, minutes: int, seconds: float) -> Tuple[float, int]:
    """Convert hours, minutes, seconds to radians; see dtf2d() for status."""
    days, status = dtf2d(hours, minutes, seconds)
    return D2PI * days, status


def daf2r(degrees: int, arcminutes: int, arcseconds: float) -> Tuple[float, int]:
    """
    Convert degrees, arcminutes, arcseconds to radians.

    Args:
        degrees: Degrees (0-359)
        arcminutes: Arcminutes (0-59)
        arcseconds: Arcseconds (0 <= s < 60)

    Returns:
        Tuple[float, int]: (radians, status) where status is D2R_OK, or
        D2R_BAD_DEGREES / D2R_BAD_ARCMINUTES / D2R_BAD_ARCSECONDS for the
        most significant field out of range
    """
    status = D2R_OK
    if arcseconds < 0.0 or arcseconds >= 60.0:
        status = D2R_BAD_ARCSECONDS
    if arcminutes < 0 or arcminutes > 59:
        status = D2R_BAD_ARCMINUTES
    if degrees < 0 or degrees > 359:
        status = D2R_BAD_DEGREES

    radians = ((degrees * 60.0 + arcminutes) * 60.0 + arcseconds) * AS2R
    return radians, status
