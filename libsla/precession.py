"""
Precession and nutation for libsla.

Precession models:
- prec: IAU 1976 (Lieske), FK5 frame, Julian epochs
- precl: long-term model (Simon et al. 1994), valid for several millennia
- prebn: Newcomb, FK4 frame, Besselian epochs

Nutation:
- nutc80: IAU 1980 106-term series
- nut, prenut: nutation and combined precession-nutation matrices
- ecmat: equatorial to ecliptic rotation (IAU 1980 obliquity)

References:
    Lieske, J.H., Astron. Astrophys. 73, 282 (1979)
    Simon, J.L. et al., Astron. Astrophys. 282, 663 (1994)
    Seidelmann, P.K. (ed.), Explanatory Supplement to the Astronomical
    Almanac (1992), section 3.222
    Kinoshita, H., Celest. Mech. 15, 277 (1977)

FIXME: Precision - nutc80 uses the IAU 1980 series without the
    frame bias and celestial pole offsets, so agreement with modern
    IAU 2000/2006 based ephemerides is about 0.05 arcsec.

TODO: add nutc, the Shirai & Fukushima (2001) 194-term forced nutation
    series, and build nut, prenut and eqeqx on it instead of nutc80.
"""

import math
from typing import Tuple

from .constants import AS2R, T2AS, MJD_J2000, JULIAN_CENTURY, FK4, FK5
from .time_utils import epj
from .utils import drange, dranrm
from .vectors import Matrix, dcs2c, dcc2s, deuler, dmxm, dmxv

# =============================================================================
# PRECESSION
# =============================================================================


def prec(ep0: float, ep1: float) -> Matrix:
    """
    Precession matrix (IAU 1976, FK5).

    Args:
        ep0: Beginning Julian epoch
        ep1: Ending Julian epoch

    Returns:
        Matrix: Rotation taking a mean-of-ep0 vector to mean-of-ep1

    Note:
        The IAU 1976 model is accurate to well under 1 arcsec within a few
        centuries of J2000; use precl() for longer intervals.
    """
    # Interval between basic epoch J2000.0 and beginning epoch (JC)
    t0 = (ep0 - 2000.0) / 100.0

    # Interval over which precession required (JC)
    t = (ep1 - ep0) / 100.0

    # Euler angles
    tas2r = t * AS2R
    w = 2306.2181 + (1.39656 - 0.000139 * t0) * t0
    zeta = (w + ((0.30188 - 0.000344 * t0) + 0.017998 * t) * t) * tas2r
    z = (w + ((1.09468 + 0.000066 * t0) + 0.018203 * t) * t) * tas2r
    theta = (
        (2004.3109 + (-0.85330 - 0.000217 * t0) * t0)
        + ((-0.42665 - 0.000217 * t0) - 0.041833 * t) * t
    ) * tas2r

    return deuler("ZYZ", -zeta, theta, -z)


def precl(ep0: float, ep1: float) -> Matrix:
    """
    Precession matrix for long intervals (Simon et al. 1994).

    Args:
        ep0: Beginning Julian epoch
        ep1: Ending Julian epoch

    Returns:
        Matrix: Rotation taking a mean-of-ep0 vector to mean-of-ep1

    Precision:
        Better than 0.1 arcsec over +/- 2000 years and a few arcsec over
        +/- 10000 years.
    """
    # Interval between basic epoch J2000.0 and beginning epoch (1000JY)
    t0 = (ep0 - 2000.0) / 1000.0

    # Interval over which precession required (1000JY)
    t = (ep1 - ep0) / 1000.0

    # Euler angles
    tas2r = t * AS2R
    w = 23060.9097 + (
        139.7459 + (-0.0038 + (-0.5918 + (-0.0037 + 0.0007 * t0) * t0) * t0) * t0
    ) * t0

    zeta = (
        w
        + (
            30.2226
            + (-0.2523 + (-0.3840 + (-0.0014 + 0.0007 * t0) * t0) * t0) * t0
            + (
                18.0183
                + (-0.1326 + (0.0006 + 0.0005 * t0) * t0) * t0
                + (
                    -0.0583
                    + (-0.0001 + 0.0007 * t0) * t0
                    + (-0.0285 + -0.0002 * t) * t
                )
                * t
            )
            * t
        )
        * t
    ) * tas2r

    z = (
        w
        + (
            109.5270
            + (0.2446 + (-1.3913 + (-0.0134 + 0.0026 * t0) * t0) * t0) * t0
            + (
                18.2667
                + (-1.1400 + (-0.0173 + 0.0044 * t0) * t0) * t0
                + (
                    -0.2821
                    + (-0.0093 + 0.0032 * t0) * t0
                    + (-0.0301 + 0.0006 * t0 - 0.0001 * t) * t
                )
                * t
            )
            * t
        )
        * t
    ) * tas2r

    theta = (
        20042.0207
        + (-85.3131 + (-0.2111 + (0.3642 + (0.0008 + -0.0005 * t0) * t0) * t0) * t0) * t0
        + (
            -42.6566
            + (-0.2111 + (0.5463 + (0.0017 + -0.0012 * t0) * t0) * t0) * t0
            + (
                -41.8238
                + (0.0359 + (0.0027 + -0.0001 * t0) * t0) * t0
                + (
                    -0.0731
                    + (0.0019 + 0.0009 * t0) * t0
                    + (-0.0127 + 0.0011 * t0 + 0.0004 * t) * t
                )
                * t
            )
            * t
        )
        * t
    ) * tas2r

    return deuler("ZYZ", -zeta, theta, -z)


def prebn(bep0: float, bep1: float) -> Matrix:
    """
    Precession matrix (Newcomb, FK4).

    Args:
        bep0: Beginning Besselian epoch
        bep1: Ending Besselian epoch

    Returns:
        Matrix: Rotation taking a mean-of-bep0 vector to mean-of-bep1
    """
    # Interval between basic epoch B1850.0 and beginning epoch (TC)
    bigt = (bep0 - 1850.0) / 100.0

    # Interval over which precession required (TC)
    t = (bep1 - bep0) / 100.0

    # Euler angles
    tas2r = t * AS2R
    w = 2303.5548 + (1.39720 + 0.000059 * bigt) * bigt
    zeta = (w + (0.30242 - 0.000269 * bigt + 0.017996 * t) * t) * tas2r
    z = (w + (1.09478 + 0.000387 * bigt + 0.018324 * t) * t) * tas2r
    theta = (
        2005.1125
        + (-0.85294 - 0.000365 * bigt) * bigt
        + (-0.42647 - 0.000365 * bigt - 0.041802 * t) * t
    ) * tas2r

    return deuler("ZYZ", -zeta, theta, -z)


def preces(
    system: str, ep0: float, ep1: float, ra: float, dc: float, strict: bool = False
) -> Tuple[float, float]:
    """
    Precess a mean place from one epoch to another.

    Args:
        system: "FK4" (Bessel-Newcomb, Besselian epochs) or "FK5"
            (Fricke, Julian epochs)
        ep0: Starting epoch
        ep1: Ending epoch
        ra: Right ascension at ep0 (radians)
        dc: Declination at ep0 (radians)
        strict: Raise instead of returning the (-99, -99) sentinel for an
            unknown system

    Returns:
        Tuple[float, float]: (ra, dec) at ep1, ra in [0, 2pi). An unknown
        system gives (-99.0, -99.0).

    Raises:
        ValueError: If system is unknown and strict is True

    Note:
        No proper motion is applied, and for FK4 the E-terms of aberration
        are left in place; see addet()/subet().
    """
    system = system.upper()
    if system == FK4:
        pm = prebn(ep0, ep1)
    elif system == FK5:
        pm = prec(ep0, ep1)
    elif strict:
        raise ValueError(f"Unknown catalogue system: {system}")
    else:
        return -99.0, -99.0

    a, b = dcc2s(dmxv(pm, dcs2c(ra, dc)))
    return dranrm(a), b


# =============================================================================
# NUTATION
# =============================================================================

# IAU 1980 nutation series. Each row holds the multipliers of the
# fundamental arguments (l, l', F, D, Omega), then the longitude
# coefficients (A + B t) and the obliquity coefficients (C + D t), in units
# of 0.0001 arcsec.
_NUTATION_1980 = (
    (0, 0, 0, 0, 1, -171996.0, -174.2, 92025.0, 8.9),
    (0, 0, 0, 0, 2, 2062.0, 0.2, -895.0, 0.5),
    (-2, 0, 2, 0, 1, 46.0, 0.0, -24.0, 0.0),
    (2, 0, -2, 0, 0, 11.0, 0.0, 0.0, 0.0),
    (-2, 0, 2, 0, 2, -3.0, 0.0, 1.0, 0.0),
    (1, -1, 0, -1, 0, -3.0, 0.0, 0.0, 0.0),
    (0, -2, 2, -2, 1, -2.0, 0.0, 1.0, 0.0),
    (2, 0, -2, 0, 1, 1.0, 0.0, 0.0, 0.0),
    (0, 0, 2, -2, 2, -13187.0, -1.6, 5736.0, -3.1),
    (0, 1, 0, 0, 0, 1426.0, -3.4, 54.0, -0.1),
    (0, 1, 2, -2, 2, -517.0, 1.2, 224.0, -0.6),
    (0, -1, 2, -2, 2, 217.0, -0.5, -95.0, 0.3),
    (0, 0, 2, -2, 1, 129.0, 0.1, -70.0, 0.0),
    (2, 0, 0, -2, 0, 48.0, 0.0, 1.0, 0.0),
    (0, 0, 2, -2, 0, -22.0, 0.0, 0.0, 0.0),
    (0, 2, 0, 0, 0, 17.0, -0.1, 0.0, 0.0),
    (0, 1, 0, 0, 1, -15.0, 0.0, 9.0, 0.0),
    (0, 2, 2, -2, 2, -16.0, 0.1, 7.0, 0.0),
    (0, -1, 0, 0, 1, -12.0, 0.0, 6.0, 0.0),
    (-2, 0, 0, 2, 1, -6.0, 0.0, 3.0, 0.0),
    (0, -1, 2, -2, 1, -5.0, 0.0, 3.0, 0.0),
    (2, 0, 0, -2, 1, 4.0, 0.0, -2.0, 0.0),
    (0, 1, 2, -2, 1, 4.0, 0.0, -2.0, 0.0),
    (1, 0, 0, -1, 0, -4.0, 0.0, 0.0, 0.0),
    (2, 1, 0, -2, 0, 1.0, 0.0, 0.0, 0.0),
    (0, 0, -2, 2, 1, 1.0, 0.0, 0.0, 0.0),
    (0, 1, -2, 2, 0, -1.0, 0.0, 0.0, 0.0),
    (0, 1, 0, 0, 2, 1.0, 0.0, 0.0, 0.0),
    (-1, 0, 0, 1, 1, 1.0, 0.0, 0.0, 0.0),
    (0, 1, 2, -2, 0, -1.0, 0.0, 0.0, 0.0),
    (0, 0, 2, 0, 2, -2274.0, -0.2, 977.0, -0.5),
    (1, 0, 0, 0, 0, 712.0, 0.1, -7.0, 0.0),
    (0, 0, 2, 0, 1, -386.0, -0.4, 200.0, 0.0),
    (1, 0, 2, 0, 2, -301.0, 0.0, 129.0, -0.1),
    (1, 0, 0, -2, 0, -158.0, 0.0, -1.0, 0.0),
    (-1, 0, 2, 0, 2, 123.0, 0.0, -53.0, 0.0),
    (0, 0, 0, 2, 0, 63.0, 0.0, -2.0, 0.0),
    (1, 0, 0, 0, 1, 63.0, 0.1, -33.0, 0.0),
    (-1, 0, 0, 0, 1, -58.0, -0.1, 32.0, 0.0),
    (-1, 0, 2, 2, 2, -59.0, 0.0, 26.0, 0.0),
    (1, 0, 2, 0, 1, -51.0, 0.0, 27.0, 0.0),
    (0, 0, 2, 2, 2, -38.0, 0.0, 16.0, 0.0),
    (2, 0, 0, 0, 0, 29.0, 0.0, -1.0, 0.0),
    (1, 0, 2, -2, 2, 29.0, 0.0, -12.0, 0.0),
    (2, 0, 2, 0, 2, -31.0, 0.0, 13.0, 0.0),
    (0, 0, 2, 0, 0, 26.0, 0.0, -1.0, 0.0),
    (-1, 0, 2, 0, 1, 21.0, 0.0, -10.0, 0.0),
    (-1, 0, 0, 2, 1, 16.0, 0.0, -8.0, 0.0),
    (1, 0, 0, -2, 1, -13.0, 0.0, 7.0, 0.0),
    (-1, 0, 2, 2, 1, -10.0, 0.0, 5.0, 0.0),
    (1, 1, 0, -2, 0, -7.0, 0.0, 0.0, 0.0),
    (0, 1, 2, 0, 2, 7.0, 0.0, -3.0, 0.0),
    (0, -1, 2, 0, 2, -7.0, 0.0, 3.0, 0.0),
    (1, 0, 2, 2, 2, -8.0, 0.0, 3.0, 0.0),
    (1, 0, 0, 2, 0, 6.0, 0.0, 0.0, 0.0),
    (2, 0, 2, -2, 2, 6.0, 0.0, -3.0, 0.0),
    (0, 0, 0, 2, 1, -6.0, 0.0, 3.0, 0.0),
    (0, 0, 2, 2, 1, -7.0, 0.0, 3.0, 0.0),
    (1, 0, 2, -2, 1, 6.0, 0.0, -3.0, 0.0),
    (0, 0, 0, -2, 1, -5.0, 0.0, 3.0, 0.0),
    (1, -1, 0, 0, 0, 5.0, 0.0, 0.0, 0.0),
    (2, 0, 2, 0, 1, -5.0, 0.0, 3.0, 0.0),
    (0, 1, 0, -2, 0, -4.0, 0.0, 0.0, 0.0),
    (1, 0, -2, 0, 0, 4.0, 0.0, 0.0, 0.0),
    (0, 0, 0, 1, 0, -4.0, 0.0, 0.0, 0.0),
    (1, 1, 0, 0, 0, -3.0, 0.0, 0.0, 0.0),
    (1, 0, 2, 0, 0, 3.0, 0.0, 0.0, 0.0),
    (1, -1, 2, 0, 2, -3.0, 0.0, 1.0, 0.0),
    (-1, -1, 2, 2, 2, -3.0, 0.0, 1.0, 0.0),
    (-2, 0, 0, 0, 1, -2.0, 0.0, 1.0, 0.0),
    (3, 0, 2, 0, 2, -3.0, 0.0, 1.0, 0.0),
    (0, -1, 2, 2, 2, -3.0, 0.0, 1.0, 0.0),
    (1, 1, 2, 0, 2, 2.0, 0.0, -1.0, 0.0),
    (-1, 0, 2, -2, 1, -2.0, 0.0, 1.0, 0.0),
    (2, 0, 0, 0, 1, 2.0, 0.0, -1.0, 0.0),
    (1, 0, 0, 0, 2, -2.0, 0.0, 1.0, 0.0),
    (3, 0, 0, 0, 0, 2.0, 0.0, 0.0, 0.0),
    (0, 0, 2, 1, 2, 2.0, 0.0, -1.0, 0.0),
    (-1, 0, 0, 0, 2, 1.0, 0.0, -1.0, 0.0),
    (1, 0, 0, -4, 0, -1.0, 0.0, 0.0, 0.0),
    (-2, 0, 2, 2, 2, 1.0, 0.0, -1.0, 0.0),
    (-1, 0, 2, 4, 2, -2.0, 0.0, 1.0, 0.0),
    (2, 0, 0, -4, 0, -1.0, 0.0, 0.0, 0.0),
    (1, 1, 2, -2, 2, 1.0, 0.0, -1.0, 0.0),
    (1, 0, 2, 2, 1, -1.0, 0.0, 1.0, 0.0),
    (-2, 0, 2, 4, 2, -1.0, 0.0, 1.0, 0.0),
    (-1, 0, 4, 0, 2, 1.0, 0.0, 0.0, 0.0),
    (1, -1, 0, -2, 0, 1.0, 0.0, 0.0, 0.0),
    (2, 0, 2, -2, 1, 1.0, 0.0, -1.0, 0.0),
    (2, 0, 2, 2, 2, -1.0, 0.0, 0.0, 0.0),
    (1, 0, 0, 2, 1, -1.0, 0.0, 0.0, 0.0),
    (0, 0, 4, -2, 2, 1.0, 0.0, 0.0, 0.0),
    (3, 0, 2, -2, 2, 1.0, 0.0, 0.0, 0.0),
    (1, 0, 2, -2, 0, -1.0, 0.0, 0.0, 0.0),
    (0, 1, 2, 0, 1, 1.0, 0.0, 0.0, 0.0),
    (-1, -1, 0, 2, 1, 1.0, 0.0, 0.0, 0.0),
    (0, 0, -2, 0, 1, -1.0, 0.0, 0.0, 0.0),
    (0, 0, 2, -1, 2, -1.0, 0.0, 0.0, 0.0),
    (0, 1, 0, 2, 0, -1.0, 0.0, 0.0, 0.0),
    (1, 0, -2, -2, 0, -1.0, 0.0, 0.0, 0.0),
    (0, -1, 2, 0, 1, -1.0, 0.0, 0.0, 0.0),
    (1, 1, 0, -2, 1, -1.0, 0.0, 0.0, 0.0),
    (1, 0, -2, 2, 0, -1.0, 0.0, 0.0, 0.0),
    (2, 0, 0, 2, 0, 1.0, 0.0, 0.0, 0.0),
    (0, 0, 2, 4, 2, -1.0, 0.0, 0.0, 0.0),
    (0, 1, 0, 1, 0, 1.0, 0.0, 0.0, 0.0),
)

# Units of 0.0001 arcsec to radians
_U2R = AS2R / 1.0e4


def _mean_obliquity_1980(t: float) -> float:
    """Mean obliquity of the ecliptic (IAU 1980), t in Julian centuries from J2000."""
    return AS2R * (84381.448 + (-46.8150 + (-0.00059 + 0.001813 * t) * t) * t)


def nutc80(date: float) -> Tuple[float, float, float]:
    """
    Nutation components (IAU 1980).

    Args:
        date: TDB (TT will do) as MJD

    Returns:
        Tuple[float, float, float]: (dpsi, deps, eps0) in radians: nutation
        in longitude and obliquity, and the mean obliquity of date

    References:
        Explanatory Supplement to the Astronomical Almanac (1992), 3.222
    """
    # Interval between fundamental epoch J2000.0 and given date (JC)
    t = (date - MJD_J2000) / JULIAN_CENTURY

    # Mean anomaly of the Moon
    el = drange(AS2R * (485866.733 + (1325.0 * T2AS + 715922.633 + (31.310 + 0.064 * t) * t) * t))

    # Mean anomaly of the Sun
    elp = drange(AS2R * (1287099.804 + (99.0 * T2AS + 1292581.224 + (-0.577 - 0.012 * t) * t) * t))

    # Mean argument of the latitude of the Moon
    f = drange(AS2R * (335778.877 + (1342.0 * T2AS + 295263.137 + (-13.257 + 0.011 * t) * t) * t))

    # Mean elongation of the Moon from the Sun
    d = drange(AS2R * (1072261.307 + (1236.0 * T2AS + 1105601.328 + (-6.891 + 0.019 * t) * t) * t))

    # Longitude of the mean ascending node of the lunar orbit
    om = drange(AS2R * (450160.280 + (-5.0 * T2AS - 482890.539 + (7.455 + 0.008 * t) * t) * t))

    # Sum the series, smallest terms first
    dp = 0.0
    de = 0.0
    for nl, nlp, nf, nd, nom, a, b, c, dd in reversed(_NUTATION_1980):
        arg = nl * el + nlp * elp + nf * f + nd * d + nom * om
        dp += (a + b * t) * math.sin(arg)
        de += (c + dd * t) * math.cos(arg)

    return dp * _U2R, de * _U2R, _mean_obliquity_1980(t)


def nut(date: float) -> Matrix:
    """
    Nutation matrix (IAU 1980).

    Args:
        date: TDB (TT will do) as MJD

    Returns:
        Matrix: Rotation from mean to true equator and equinox of date
    """
    dpsi, deps, eps0 = nutc80(date)
    return deuler("XZX", eps0, -dpsi, -(eps0 + deps))


def prenut(epoch: float, date: float) -> Matrix:
    """
    Combined precession-nutation matrix (IAU 1976 precession, IAU 1980
    nutation).

    Args:
        epoch: Julian epoch of the mean equator and equinox
        date: TDB (TT will do) as MJD

    Returns:
        Matrix: Rotation from mean-of-epoch to true-of-date
    """
    return dmxm(nut(date), prec(epoch, epj(date)))


def ecmat(date: float) -> Matrix:
    """
    Rotation matrix from mean equatorial to ecliptic coordinates (IAU 1980).

    Args:
        date: TDB (TT will do) as MJD

    Returns:
        Matrix: Rotation about x by the mean obliquity of date
    """
    t = (date - MJD_J2000) / JULIAN_CENTURY
    return deuler("X", _mean_obliquity_1980(t), 0.0, 0.0)
