"""
Lunar ephemerides for libsla.

This module computes the geocentric position and velocity of the Moon:
- dmoon: Approximate Moon ephemeris (double precision, FK5 mean equator
  and equinox of date)
- moon: Lower-accuracy version for a calendar date (fewer terms)

Formulas are based on:
- Meeus, l'Astronomie, June 1984, p348
- Brown's lunar theory, as truncated in the Improved Lunar Ephemeris

Both routines share one set of series; moon() uses the leading terms only
and ignores the Sun's eccentricity factor.

FIXME: Precision - dmoon is good to about 10 arcsec in longitude over
1900-2100 and moon is several times worse. For better results use a full
numerical ephemeris.
"""

import math
from typing import List

from .constants import AS2R, D2R, S2R, B1950_JEPOCH, EARTH_RADIUS_AU
from .vectors import ds2c6

# Seconds per Julian century
_CJ = 3155760000.0

# =============================================================================
# FUNDAMENTAL ARGUMENTS (degrees; polynomial in centuries since 1900)
# =============================================================================

_ELP = (270.434164, 481267.8831, -0.001133, 0.0000019)  # Moon mean longitude
_EM = (358.475833, 35999.0498, -0.000150, -0.0000033)  # Sun mean anomaly
_EMP = (296.104608, 477198.8491, 0.009192, 0.0000144)  # Moon mean anomaly
_D = (350.737486, 445267.1142, -0.001436, 0.0000019)  # Mean elongation
_F = (11.250889, 483202.0251, -0.003211, -0.0000003)  # Mean distance from node
_OM = (259.183275, -1934.1420, 0.002078, 0.0000022)  # Longitude of node

# Sun's eccentricity factor
_E1 = -0.002495
_E2 = -0.00000752

# Long-period perturbation coefficients
_PAC, _PA0, _PA1 = 0.000233, 51.2, 20.2
_PBC = -0.001778
_PCC = 0.000817
_PDC = 0.002011
_PEC, _PE0, _PE1, _PE2 = 0.003964, 346.560, 132.870, -0.0091731
_PFC = 0.001964
_PGC = 0.002541
_PHC = 0.001964
_PIC = -0.024691
_PJC, _PJ0, _PJ1 = -0.004328, 275.05, -2.30
_CW1 = 0.0004664
_CW2 = 0.0000754

# =============================================================================
# SERIES: (coefficient in degrees, M, M', D, F, power of E)
# =============================================================================

_LONGITUDE_TERMS = (
    (6.288750, 0, 1, 0, 0, 0),
    (1.274018, 0, -1, 2, 0, 0),
    (0.658309, 0, 0, 2, 0, 0),
    (0.213616, 0, 2, 0, 0, 0),
    (-0.185596, 1, 0, 0, 0, 1),
    (-0.114336, 0, 0, 0, 2, 0),
    (0.058793, 0, -2, 2, 0, 0),
    (0.057212, -1, -1, 2, 0, 1),
    (0.053320, 0, 1, 2, 0, 0),
    (0.045874, -1, 0, 2, 0, 1),
    (0.041024, -1, 1, 0, 0, 1),
    (-0.034718, 0, 0, 1, 0, 0),
    (-0.030465, 1, 1, 0, 0, 1),
    (0.015326, 0, 0, 2, -2, 0),
    (-0.012528, 0, 1, 0, 2, 0),
    (-0.010980, 0, -1, 0, 2, 0),
    (0.010674, 0, -1, 4, 0, 0),
    (0.010034, 0, 3, 0, 0, 0),
    (0.008548, 0, -2, 4, 0, 0),
    (-0.007910, 1, -1, 2, 0, 1),
    (-0.006783, 1, 0, 2, 0, 1),
    (0.005162, 0, 1, -1, 0, 0),
    (0.005000, 1, 0, 1, 0, 1),
    (0.004049, -1, 1, 2, 0, 1),
    (0.003996, 0, 2, 2, 0, 0),
    (0.003862, 0, 0, 4, 0, 0),
    (0.003665, 0, -3, 2, 0, 0),
    (0.002695, -1, 2, 0, 0, 1),
    (0.002602, 0, 1, -2, -2, 0),
    (0.002396, -1, -2, 2, 0, 1),
    (-0.002349, 0, 1, 1, 0, 0),
    (0.002249, -2, 0, 2, 0, 2),
    (-0.002125, 1, 2, 0, 0, 1),
    (-0.002079, 2, 0, 0, 0, 2),
    (0.002059, -2, -1, 2, 0, 2),
    (-0.001773, 0, 1, 2, -2, 0),
    (-0.001595, 0, 0, 2, 2, 0),
    (0.001220, -1, -1, 4, 0, 1),
    (-0.001110, 0, 2, 0, 2, 0),
    (0.000892, 0, 1, -3, 0, 0),
    (-0.000811, 1, 1, 2, 0, 1),
    (0.000761, -1, -2, 4, 0, 1),
    (0.000717, -2, 1, 0, 0, 2),
    (0.000704, -2, 1, -2, 0, 2),
    (0.000693, 1, -2, 2, 0, 1),
    (0.000598, -1, 0, 2, -2, 1),
    (0.000550, 0, 1, 4, 0, 0),
    (0.000538, 0, 4, 0, 0, 0),
    (0.000521, -1, 0, 4, 0, 1),
    (0.000486, 0, 2, -1, 0, 0),
)

_LATITUDE_TERMS = (
    (5.128189, 0, 0, 0, 1, 0),
    (0.280606, 0, 1, 0, 1, 0),
    (0.277693, 0, 1, 0, -1, 0),
    (0.173238, 0, 0, 2, -1, 0),
    (0.055413, 0, -1, 2, 1, 0),
    (0.046272, 0, -1, 2, -1, 0),
    (0.032573, 0, 0, 2, 1, 0),
    (0.017198, 0, 2, 0, 1, 0),
    (0.009267, 0, 1, 2, -1, 0),
    (0.008823, 0, 2, 0, -1, 0),
    (0.008247, -1, 0, 2, -1, 1),
    (0.004323, 0, -2, 2, -1, 0),
    (0.004200, 0, 1, 2, 1, 0),
    (0.003372, -1, 0, -2, 1, 1),
    (0.002472, -1, -1, 2, 1, 1),
    (0.002222, -1, 0, 2, 1, 1),
    (0.002072, -1, -1, 2, -1, 1),
    (0.001877, -1, 1, 0, 1, 1),
    (0.001828, 0, -1, 4, -1, 0),
    (-0.001803, 1, 0, 0, 1, 1),
    (-0.001750, 0, 0, 0, 3, 0),
    (0.001570, -1, 1, 0, -1, 1),
    (-0.001487, 0, 0, 1, 1, 0),
    (-0.001481, 1, 1, 0, 1, 1),
    (0.001417, -1, -1, 0, 1, 1),
    (0.001350, -1, 0, 0, 1, 1),
    (0.001330, 0, 0, -1, 1, 0),
    (0.001106, 0, 3, 0, 1, 0),
    (0.001020, 0, 0, 4, -1, 0),
    (0.000833, 0, -1, 4, 1, 0),
    (0.000781, 0, 1, 0, -3, 0),
    (0.000670, 0, -2, 4, 1, 0),
    (0.000606, 0, 0, 2, -3, 0),
    (0.000597, 0, 2, 2, -1, 0),
    (0.000492, -1, 1, 2, -1, 1),
    (0.000450, 0, 2, -2, -1, 0),
    (0.000439, 0, 3, 0, -1, 0),
    (0.000423, 0, 2, 2, 1, 0),
    (0.000422, 0, -3, 2, -1, 0),
    (-0.000367, 1, -1, 2, 1, 1),
    (-0.000353, 1, 0, 2, 1, 1),
    (0.000331, 0, 0, 4, 1, 0),
    (0.000317, -1, 1, 2, 1, 1),
    (0.000306, -2, 0, 2, -1, 2),
    (-0.000283, 0, 1, 0, 3, 0),
)

_PARALLAX_TERMS = (
    (0.950724, 0, 0, 0, 0, 0),
    (0.051818, 0, 1, 0, 0, 0),
    (0.009531, 0, -1, 2, 0, 0),
    (0.007843, 0, 0, 2, 0, 0),
    (0.002824, 0, 2, 0, 0, 0),
    (0.000857, 0, 1, 2, 0, 0),
    (0.000533, -1, 0, 2, 0, 1),
    (0.000401, -1, -1, 2, 0, 1),
    (0.000320, -1, 1, 0, 0, 1),
    (-0.000271, 0, 0, 1, 0, 0),
    (-0.000264, 1, 1, 0, 0, 1),
    (-0.000198, 0, -1, 0, 2, 0),
    (0.000173, 0, 3, 0, 0, 0),
    (0.000167, 0, -1, 4, 0, 0),
    (-0.000111, 1, 0, 0, 0, 1),
    (0.000103, 0, -2, 4, 0, 0),
    (-0.000084, 0, 2, -2, 0, 0),
    (-0.000083, 1, 0, 2, 0, 1),
    (0.000079, 0, 2, 2, 0, 0),
    (0.000072, 0, 0, 4, 0, 0),
    (0.000064, -1, 1, 2, 0, 1),
    (-0.000063, 1, -1, 2, 0, 1),
    (0.000041, 1, 0, 1, 0, 1),
    (0.000035, -1, 2, 0, 0, 1),
    (-0.000033, 0, 3, -2, 0, 0),
    (-0.000030, 0, 1, 1, 0, 0),
    (-0.000029, 0, 0, -2, 2, 0),
    (-0.000029, 1, 2, 0, 0, 1),
    (0.000026, -2, 0, 2, 0, 2),
    (-0.000023, 0, 1, -2, 2, 0),
    (0.000019, -1, -1, 4, 0, 1),
)


def _polynomial(coeffs, t: float):
    """Angle (radians, reduced mod 360 deg) and its rate per century."""
    c0, c1, c2, c3 = coeffs
    angle = D2R * math.fmod(c0 + (c1 + (c2 + c3 * t) * t) * t, 360.0)
    rate = D2R * (c1 + (2.0 * c2 + 3.0 * c3 * t) * t)
    return angle, rate


def _sum_series(terms, args, rates, powers, cosine: bool = False):
    """
    Sum a lunar series and its time derivative.

    Terms are summed smallest first. powers maps the E exponent to
    (E**n, d(E**n)/dt).
    """
    em, emp, d, f = args
    dem, demp, dd, df = rates
    v = 0.0
    dv = 0.0
    for coeff, cm, cmp_, cd, cf, ie in reversed(terms):
        en, den = powers[ie]
        theta = cm * em + cmp_ * emp + cd * d + cf * f
        dtheta = cm * dem + cmp_ * demp + cd * dd + cf * df
        if cosine:
            ftheta = math.cos(theta)
            v += coeff * ftheta * en
            dv += coeff * (-math.sin(theta) * dtheta * en + ftheta * den)
        else:
            ftheta = math.sin(theta)
            v += coeff * ftheta * en
            dv += coeff * (math.cos(theta) * dtheta * en + ftheta * den)
    return v, dv


def dmoon(date: float) -> List[float]:
    """
    Approximate geocentric position and velocity of the Moon.

    Args:
        date: TDB as a Modified Julian Date (TT is adequate)

    Returns:
        List[float]: [x, y, z, xdot, ydot, zdot] in AU and AU/s, referred
        to the mean equator and equinox of date (FK5)

    Precision:
        About 10 arcsec in longitude, 3 arcsec in latitude and 0.2 arcsec
        in horizontal parallax over 1900-2100.

    Algorithm:
        1. Evaluate the fundamental arguments and their rates at T
           (centuries since 1900 January 0.5)
        2. Add the long-period perturbations
        3. Sum the longitude, latitude and parallax series
        4. Form the ecliptic position/velocity and rotate to the equator,
           including the FK4-FK5 equinox correction
    """
    t = (date - 15019.5) / 36525.0

    elp, delp = _polynomial(_ELP, t)
    em, dem = _polynomial(_EM, t)
    emp, demp = _polynomial(_EMP, t)
    d, dd = _polynomial(_D, t)
    f, df = _polynomial(_F, t)
    om, dom = _polynomial(_OM, t)
    sinom = math.sin(om)
    cosom = math.cos(om)
    domcom = dom * cosom

    # Long-period perturbations
    theta = D2R * (_PA0 + _PA1 * t)
    wa = math.sin(theta)
    dwa = D2R * _PA1 * math.cos(theta)
    theta = D2R * (_PE0 + (_PE1 + _PE2 * t) * t)
    wb = _PEC * math.sin(theta)
    dwb = D2R * _PEC * (_PE1 + 2.0 * _PE2 * t) * math.cos(theta)
    elp += D2R * (_PAC * wa + wb + _PFC * sinom)
    delp += D2R * (_PAC * dwa + dwb + _PFC * domcom)
    em += D2R * _PBC * wa
    dem += D2R * _PBC * dwa
    emp += D2R * (_PCC * wa + wb + _PGC * sinom)
    demp += D2R * (_PCC * dwa + dwb + _PGC * domcom)
    d += D2R * (_PDC * wa + wb + _PHC * sinom)
    dd += D2R * (_PDC * dwa + dwb + _PHC * domcom)
    wom = om + D2R * (_PJ0 + _PJ1 * t)
    dwom = dom + D2R * _PJ1
    sinwom = math.sin(wom)
    coswom = math.cos(wom)
    f += D2R * (wb + _PIC * sinom + _PJC * sinwom)
    df += D2R * (dwb + _PIC * domcom + _PJC * dwom * coswom)

    # Eccentricity factor
    e = 1.0 + (_E1 + _E2 * t) * t
    de = _E1 + 2.0 * _E2 * t
    powers = {0: (1.0, 0.0), 1: (e, de), 2: (e * e, 2.0 * e * de)}

    args = (em, emp, d, f)
    rates = (dem, demp, dd, df)

    # Longitude
    v, dv = _sum_series(_LONGITUDE_TERMS, args, rates, powers)
    el = elp + D2R * v
    del_ = (delp + D2R * dv) / _CJ

    # Latitude
    v, dv = _sum_series(_LATITUDE_TERMS, args, rates, powers)
    bf = 1.0 - _CW1 * cosom - _CW2 * coswom
    dbf = _CW1 * dom * sinom + _CW2 * dwom * sinwom
    b = D2R * v * bf
    db = D2R * (dv * bf + v * dbf) / _CJ

    # Parallax
    v, dv = _sum_series(_PARALLAX_TERMS, args, rates, powers, cosine=True)
    p = D2R * v
    dp = D2R * dv / _CJ

    # Parallax to distance (AU, AU/sec)
    sp = math.sin(p)
    r = EARTH_RADIUS_AU / sp
    dr = -r * dp * math.cos(p) / sp

    # Longitude, latitude to x, y, z (AU)
    sel = math.sin(el)
    cel = math.cos(el)
    sb = math.sin(b)
    cb = math.cos(b)
    rcb = r * cb
    rbd = r * db
    w = rbd * sb - cb * dr
    x = rcb * cel
    y = rcb * sel
    z = r * sb
    xd = -y * del_ - w * cel
    yd = x * del_ - w * sel
    zd = rbd * cb + sb * dr

    # Julian centuries since J2000
    t = (date - 51544.5) / 36525.0

    # FK4/FK5 equinox correction
    epj = 2000.0 + t * 100.0
    eqcor = S2R * (0.035 + 0.00085 * (epj - B1950_JEPOCH))

    # Mean obliquity (IAU 1976)
    eps = AS2R * (84381.448 + (-46.8150 + (-0.00059 + 0.001813 * t) * t) * t)

    # Ecliptic to equatorial, with the equinox correction
    sineps = math.sin(eps)
    coseps = math.cos(eps)
    es = eqcor * sineps
    ec = eqcor * coseps
    return [
        x - ec * y + es * z,
        eqcor * x + y * coseps - z * sineps,
        y * sineps + z * coseps,
        xd - ec * yd + es * zd,
        eqcor * xd + yd * coseps - zd * sineps,
        yd * sineps + zd * coseps,
    ]


# =============================================================================
# LOW-PRECISION VERSION
# =============================================================================

# Angle rates in degrees per Julian year, split so that the whole-turn part
# multiplies the fraction of the year only
_M_ELP0, _M_ELP1, _M_ELP1I, _M_ELP1F = 270.434164, 4812.678831, 4680.0, 132.678831
_M_EM0, _M_EM1 = 358.475833, 359.990498
_M_EMP0, _M_EMP1, _M_EMP1I, _M_EMP1F = 296.104608, 4771.988491, 4680.0, 91.988491
_M_D0, _M_D1, _M_D1I, _M_D1F = 350.737486, 4452.671142, 4320.0, 132.671142
_M_F0, _M_F1, _M_F1I, _M_F1F = 11.250889, 4832.020251, 4680.0, 152.020251

# Degrees per Julian year to radians per second
_RATE = 9.652743551e-12


def moon(iy: int, id: int, fd: float) -> List[float]:
    """
    Approximate geocentric position and velocity of the Moon
    (low precision).

    Args:
        iy: Year
        id: Day in year (1 = January 1st)
        fd: Fraction of day

    Returns:
        List[float]: [x, y, z, xdot, ydot, zdot] in AU and AU/s, mean
        equator and equinox of date

    Note:
        The date is TDB, although UT is adequate. The year must lie in
        1900-2100 for the quoted accuracy; outside it results degrade.

    Precision:
        Tens of arcseconds in position.
    """
    # Whole years and fraction of year since 1900
    yi = float(iy - 1900)
    iy4 = iy % 4
    yf = (4 * (id - 1 // (iy4 + 1)) - iy4 - 2 + 4.0 * fd) / 1461.0
    t = yi + yf

    elp = D2R * math.fmod(_M_ELP0 + _M_ELP1I * yf + _M_ELP1F * t, 360.0)
    em = D2R * math.fmod(_M_EM0 + _M_EM1 * t, 360.0)
    emp = D2R * math.fmod(_M_EMP0 + _M_EMP1I * yf + _M_EMP1F * t, 360.0)
    d = D2R * math.fmod(_M_D0 + _M_D1I * yf + _M_D1F * t, 360.0)
    f = D2R * math.fmod(_M_F0 + _M_F1I * yf + _M_F1F * t, 360.0)

    def series(terms, cosine=False):
        v = 0.0
        dv = 0.0
        for coeff, cm, cmp_, cd, cf, _ in reversed(terms):
            theta = cm * em + cmp_ * emp + cd * d + cf * f
            thetad = cm * _M_EM1 + cmp_ * _M_EMP1 + cd * _M_D1 + cf * _M_F1
            if cosine:
                v += coeff * math.cos(theta)
                dv -= coeff * math.sin(theta) * thetad
            else:
                v += coeff * math.sin(theta)
                dv += coeff * math.cos(theta) * thetad
        return v, dv

    el, eld = series(_LONGITUDE_TERMS[:39])
    el = el * D2R + elp
    eld = _RATE * (eld + _M_ELP1 / D2R)

    b, bd = series(_LATITUDE_TERMS[:29])
    b *= D2R
    bd *= _RATE

    # The constant parallax term is added separately
    p, pd = series(_PARALLAX_TERMS[1:5], cosine=True)
    p = (p + _PARALLAX_TERMS[0][0]) * D2R
    pd *= _RATE

    sp = math.sin(p)
    r = EARTH_RADIUS_AU / sp
    rd = -r * pd / sp

    x, y, z, xd, yd, zd = ds2c6(el, b, r, eld, bd, rd)

    # Mean obliquity
    eps = D2R * (23.45229 - 0.00013 * t)
    sineps = math.sin(eps)
    coseps = math.cos(eps)
    return [
        x,
        y * coseps - z * sineps,
        y * sineps + z * coseps,
        xd,
        yd * coseps - zd * sineps,
        yd * sineps + zd * coseps,
    ]
