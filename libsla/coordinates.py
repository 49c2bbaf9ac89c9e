"""
Coordinate transformations for libsla.

Horizon system:
- de2h, dh2e: hour angle/declination <-> azimuth/elevation
- altaz: azimuth, elevation and parallactic angle with their rates
- zd, pa: zenith distance and parallactic angle
- pda2h, pdq2h: hour angles for a given azimuth or parallactic angle

Ecliptic and galactic systems:
- eqecl, ecleq: J2000 equatorial <-> ecliptic of date
- eqgal, galeq: J2000 equatorial <-> IAU 1958 galactic
- eg50, ge50: B1950 FK4 equatorial <-> galactic
- galsup, supgal: galactic <-> de Vaucouleurs supergalactic

FK4 E-terms and proper motion:
- etrms, addet, subet, pm

Azimuths are measured from north through east. Hour angles are positive
west of the meridian. All angles are radians.
"""

import math
from typing import List, NamedTuple, Tuple

from .constants import AS2R, D2PI, DPI, DPIBY2
from .precession import ecmat, prec
from .time_utils import epj
from .utils import drange, dranrm, sign
from .vectors import dcc2s, dcs2c, dimxv, dmxv, dvdv

# =============================================================================
# ROTATION MATRICES
# =============================================================================

# J2000 equatorial to IAU 1958 galactic (FK5 based)
_EQ2000_TO_GAL = (
    (-0.054875539726, -0.873437108010, -0.483834985808),
    (+0.494109453312, -0.444829589425, +0.746982251810),
    (-0.867666135858, -0.198076386122, +0.455983795705),
)

# B1950 FK4 equatorial (E-terms removed) to galactic
_EQ1950_TO_GAL = (
    (-0.066988739415, -0.872755765852, -0.483538914632),
    (+0.492728466075, -0.450346958020, +0.744584633283),
    (-0.867600811151, -0.188374601723, +0.460199784784),
)

# Galactic to supergalactic
_GAL_TO_SUPGAL = (
    (-0.735742574804, +0.677261296414, +0.000000000000),
    (-0.074553778365, -0.080991471307, +0.993922590400),
    (+0.673145302109, +0.731271165817, +0.110081262225),
)

# Offset used by pda2h/pdq2h to step off exact singular cases
_TINY = 1.0e-12


class AltAz(NamedTuple):
    """Positions, velocities and accelerations from altaz()."""

    az: float
    azd: float
    azdd: float
    el: float
    eld: float
    eldd: float
    pa: float
    pad: float
    padd: float


class HourAngles(NamedTuple):
    """Two candidate hour angles, each with a validity flag."""

    ha1: float
    valid1: bool
    ha2: float
    valid2: bool


# =============================================================================
# HORIZON SYSTEM
# =============================================================================


def de2h(ha: float, dec: float, phi: float) -> Tuple[float, float]:
    """
    Hour angle and declination to azimuth and elevation.

    Args:
        ha: Hour angle (radians)
        dec: Declination (radians)
        phi: Observatory latitude (radians)

    Returns:
        Tuple[float, float]: (azimuth, elevation), azimuth in [0, 2pi)
        measured north through east

    Note:
        No refraction or diurnal aberration is applied; the sense of the
        result is geometric.
    """
    sh = math.sin(ha)
    ch = math.cos(ha)
    sd = math.sin(dec)
    cd = math.cos(dec)
    sp = math.sin(phi)
    cp = math.cos(phi)

    # Az,El as x,y,z
    x = -ch * cd * sp + sd * cp
    y = -sh * cd
    z = ch * cd * cp + sd * sp

    # To spherical
    r = math.sqrt(x * x + y * y)
    if r == 0.0:
        a = 0.0
    else:
        a = math.atan2(y, x)
        if a < 0.0:
            a += D2PI
    return a, math.atan2(z, r)


def dh2e(az: float, el: float, phi: float) -> Tuple[float, float]:
    """
    Azimuth and elevation to hour angle and declination.

    Args:
        az: Azimuth (radians, north through east)
        el: Elevation (radians)
        phi: Observatory latitude (radians)

    Returns:
        Tuple[float, float]: (hour angle, declination); the hour angle is
        in the range +/- pi
    """
    sa = math.sin(az)
    ca = math.cos(az)
    se = math.sin(el)
    ce = math.cos(el)
    sp = math.sin(phi)
    cp = math.cos(phi)

    # HA,Dec as x,y,z
    x = -ca * ce * sp + se * cp
    y = -sa * ce
    z = ca * ce * cp + se * sp

    r = math.sqrt(x * x + y * y)
    ha = 0.0 if r == 0.0 else math.atan2(y, x)
    return ha, math.atan2(z, r)


def altaz(ha: float, dec: float, phi: float) -> AltAz:
    """
    Positions, velocities and accelerations for an altazimuth telescope
    mount tracking a star.

    Args:
        ha: Hour angle (radians)
        dec: Declination (radians)
        phi: Observatory latitude (radians)

    Returns:
        AltAz: azimuth, elevation and parallactic angle, each with its
        first and second derivative with respect to hour angle (radians,
        radians per radian of HA, radians per radian**2)

    Note:
        Near the zenith the rates become very large; the horizontal
        distance from the pole is floored at 1e-15 so the results stay
        finite.
    """
    sh = math.sin(ha)
    ch = math.cos(ha)
    sd = math.sin(dec)
    cd = math.cos(dec)
    sp = math.sin(phi)
    cp = math.cos(phi)
    chcd = ch * cd
    sdcp = sd * cp
    x = -chcd * sp + sdcp
    y = -sh * cd
    z = chcd * cp + sd * sp
    rsq = x * x + y * y
    r = math.sqrt(rsq)

    # Azimuth and elevation
    a = 0.0 if rsq == 0.0 else math.atan2(y, x)
    if a < 0.0:
        a += D2PI
    e = math.atan2(z, r)

    # Parallactic angle
    c = cd * sp - ch * sdcp
    s = sh * cp
    q = math.atan2(s, c) if (c * c + s * s) > 0.0 else DPI - ha

    # Velocities and accelerations (clamped at zenith/nadir)
    if rsq < 1.0e-30:
        rsq = 1.0e-30
        r = math.sqrt(rsq)
    qd = -x * cp / rsq
    ad = sp + z * qd
    ed = cp * y / r
    edr = ed / r
    add = edr * (z * sp + (2.0 - rsq) * qd)
    edd = -r * qd * ad
    qdd = edr * (sp + 2.0 * z * qd)

    return AltAz(a, ad, add, e, ed, edd, q, qd, qdd)


def zd(ha: float, dec: float, phi: float) -> float:
    """
    Zenith distance from hour angle and declination.

    Args:
        ha: Hour angle (radians)
        dec: Declination (radians)
        phi: Observatory latitude (radians)

    Returns:
        float: Zenith distance in [0, pi]
    """
    sh = math.sin(ha)
    ch = math.cos(ha)
    sd = math.sin(dec)
    cd = math.cos(dec)
    sp = math.sin(phi)
    cp = math.cos(phi)
    x = ch * cd * sp - sd * cp
    y = sh * cd
    z = ch * cd * cp + sd * sp
    return math.atan2(math.sqrt(x * x + y * y), z)


def pa(ha: float, dec: float, phi: float) -> float:
    """
    Parallactic angle: the angle between the direction to the zenith and
    the direction to the north celestial pole, at the star.

    Returns:
        float: Parallactic angle in the range +/- pi (zero for a star on
        the meridian south of the zenith)
    """
    cp = math.cos(phi)
    sqsz = cp * math.sin(ha)
    cqsz = math.sin(phi) * math.cos(dec) - cp * math.sin(dec) * math.cos(ha)
    if sqsz == 0.0 and cqsz == 0.0:
        cqsz = 1.0
    return math.atan2(sqsz, cqsz)


def _nudge_latitude(phi: float) -> float:
    pn = drange(phi)
    if abs(abs(pn) - DPIBY2) < _TINY:
        pn -= sign(_TINY, pn)
    elif abs(pn) < _TINY:
        pn = _TINY
    return pn


def _nudge_half_turn(angle: float) -> float:
    an = drange(angle)
    if abs(abs(an) - DPI) < _TINY:
        an -= sign(_TINY, an)
    elif abs(an) < _TINY:
        an = _TINY
    return an


def pda2h(phi: float, dec: float, az: float) -> HourAngles:
    """
    Hour angles at which a star of given declination reaches a given
    azimuth.

    Args:
        phi: Observatory latitude (radians)
        dec: Declination (radians)
        az: Azimuth (radians, north through east)

    Returns:
        HourAngles: (ha1, valid1, ha2, valid2); an hour angle flagged
        invalid (and then set to zero if no solution exists at all) is not
        a real crossing

    Note:
        Exact singular cases (pole, zenith, meridian) are avoided by
        nudging the inputs by 1e-12 radians.
    """
    pn = _nudge_latitude(phi)
    an = _nudge_half_turn(az)

    dn = drange(dec)
    if abs(abs(dn) - abs(phi)) < _TINY or abs(abs(dn) - DPIBY2) < _TINY:
        dn -= sign(_TINY, dn)
    elif abs(dn) < _TINY:
        dn = _TINY

    sa = math.sin(an)
    ca = math.cos(an)
    sasp = sa * math.sin(pn)

    qt = math.sin(dn) * sa * math.cos(pn)
    qb = math.cos(dn) * math.sqrt(ca * ca + sasp * sasp)

    if abs(qt) > qb:
        return HourAngles(0.0, False, 0.0, False)

    hpt = math.asin(qt / qb)
    t = math.atan2(sasp, -ca)
    ha1 = drange(hpt - t)
    ha2 = drange(-hpt - (t + DPI))
    return HourAngles(ha1, ha1 * an <= 0.0, ha2, ha2 * an <= 0.0)


def pdq2h(phi: float, dec: float, q: float) -> HourAngles:
    """
    Hour angles at which a star of given declination has a given
    parallactic angle.

    Args:
        phi: Observatory latitude (radians)
        dec: Declination (radians)
        q: Parallactic angle (radians)

    Returns:
        HourAngles: (ha1, valid1, ha2, valid2)
    """
    pn = _nudge_latitude(phi)
    qn = _nudge_half_turn(q)

    dn = drange(dec)
    if abs(abs(dec) - abs(phi)) < _TINY or abs(abs(dec) - DPIBY2) < _TINY:
        dn -= sign(_TINY, dn)

    sq = math.sin(qn)
    cq = math.cos(qn)
    sqsd = sq * math.sin(dn)

    qt = math.sin(pn) * sq * math.cos(dn)
    qb = math.cos(pn) * math.sqrt(cq * cq + sqsd * sqsd)

    if abs(qt) > qb:
        return HourAngles(0.0, False, 0.0, False)

    hpt = math.asin(qt / qb)
    t = math.atan2(sqsd, cq)
    ha1 = drange(hpt - t)
    ha2 = drange(-hpt - (t + DPI))
    return HourAngles(ha1, ha1 * qn >= 0.0, ha2, ha2 * qn >= 0.0)


# =============================================================================
# ECLIPTIC AND GALACTIC
# =============================================================================


def _rotate(matrix, a: float, b: float, inverse: bool = False) -> Tuple[float, float]:
    v = dcs2c(a, b)
    w = dimxv(matrix, v) if inverse else dmxv(matrix, v)
    a2, b2 = dcc2s(w)
    return dranrm(a2), drange(b2)


def eqecl(dr: float, dd: float, date: float) -> Tuple[float, float]:
    """
    J2000 mean equatorial to ecliptic coordinates of date.

    Args:
        dr: J2000 right ascension (radians)
        dd: J2000 declination (radians)
        date: TDB (TT will do) as MJD

    Returns:
        Tuple[float, float]: (ecliptic longitude, latitude), mean of date
    """
    v = dmxv(prec(2000.0, epj(date)), dcs2c(dr, dd))
    dl, db = dcc2s(dmxv(ecmat(date), v))
    return dranrm(dl), drange(db)


def ecleq(dl: float, db: float, date: float) -> Tuple[float, float]:
    """
    Ecliptic coordinates of date to J2000 mean equatorial.

    Args:
        dl: Ecliptic longitude, mean of date (radians)
        db: Ecliptic latitude (radians)
        date: TDB (TT will do) as MJD

    Returns:
        Tuple[float, float]: (ra, dec), J2000
    """
    v = dimxv(ecmat(date), dcs2c(dl, db))
    dr, dd = dcc2s(dimxv(prec(2000.0, epj(date)), v))
    return dranrm(dr), drange(dd)


def eqgal(dr: float, dd: float) -> Tuple[float, float]:
    """J2000 equatorial to IAU 1958 galactic coordinates (longitude, latitude)."""
    return _rotate(_EQ2000_TO_GAL, dr, dd)


def galeq(dl: float, db: float) -> Tuple[float, float]:
    """IAU 1958 galactic to J2000 equatorial coordinates (ra, dec)."""
    return _rotate(_EQ2000_TO_GAL, dl, db, inverse=True)


def galsup(dl: float, db: float) -> Tuple[float, float]:
    """IAU 1958 galactic to de Vaucouleurs supergalactic coordinates."""
    return _rotate(_GAL_TO_SUPGAL, dl, db)


def supgal(dsl: float, dsb: float) -> Tuple[float, float]:
    """De Vaucouleurs supergalactic to IAU 1958 galactic coordinates."""
    return _rotate(_GAL_TO_SUPGAL, dsl, dsb, inverse=True)


def eg50(dr: float, dd: float) -> Tuple[float, float]:
    """
    B1950 FK4 equatorial to IAU 1958 galactic coordinates.

    Args:
        dr: B1950 right ascension (radians)
        dd: B1950 declination (radians)

    Returns:
        Tuple[float, float]: (galactic longitude, latitude)

    Note:
        The E-terms of aberration are removed before the rotation.
    """
    r, d = subet(dr, dd, 1950.0)
    return _rotate(_EQ1950_TO_GAL, r, d)


def ge50(dl: float, db: float) -> Tuple[float, float]:
    """
    IAU 1958 galactic to B1950 FK4 equatorial coordinates.

    The E-terms of aberration are added after the rotation.
    """
    r, d = dcc2s(dimxv(_EQ1950_TO_GAL, dcs2c(dl, db)))
    r, d = addet(r, d, 1950.0)
    return dranrm(r), drange(d)


# =============================================================================
# E-TERMS AND PROPER MOTION
# =============================================================================


def etrms(ep: float) -> List[float]:
    """
    E-terms of aberration (elliptic aberration) vector.

    Args:
        ep: Besselian epoch

    Returns:
        List[float]: E-terms as a 3-vector (radians)

    References:
        Smith, C.A. et al., Astron. J. 97, 265 (1989)
        Yallop, B.D. et al., Astron. J. 97, 274 (1989)
    """
    # Julian centuries since B1950
    t = (ep - 1950.0) * 1.00002135903e-2

    # Eccentricity
    e = 0.01673011 - (0.00004193 + 0.000000126 * t) * t

    # Mean obliquity
    e0 = (84404.836 - (46.8495 + (0.00319 + 0.00181 * t) * t) * t) * AS2R

    # Mean longitude of perihelion
    p = (1015489.951 + (6190.67 + (1.65 + 0.012 * t) * t) * t) * AS2R

    # E-terms
    ek = e * 20.49552 * AS2R
    cp = math.cos(p)
    return [ek * math.sin(p), -ek * cp * math.cos(e0), -ek * cp * math.sin(e0)]


def addet(rm: float, dm: float, eq: float) -> Tuple[float, float]:
    """
    Add the E-terms of aberration to a pre IAU 1976 mean place.

    Args:
        rm: Right ascension without E-terms (radians)
        dm: Declination without E-terms (radians)
        eq: Besselian epoch of the mean equator and equinox

    Returns:
        Tuple[float, float]: (ra, dec) with E-terms included
    """
    a = etrms(eq)
    v = [c + e for c, e in zip(dcs2c(rm, dm), a)]
    rc, dc = dcc2s(v)
    return dranrm(rc), dc


def subet(rc: float, dc: float, eq: float) -> Tuple[float, float]:
    """
    Remove the E-terms of aberration from a pre IAU 1976 catalogue place.

    Args:
        rc: Right ascension with E-terms (radians)
        dc: Declination with E-terms (radians)
        eq: Besselian epoch of the mean equator and equinox

    Returns:
        Tuple[float, float]: (ra, dec) without E-terms
    """
    a = etrms(eq)
    v = dcs2c(rc, dc)
    f = 1.0 + dvdv(v, a)
    rm, dm = dcc2s([c * f - e for c, e in zip(v, a)])
    return dranrm(rm), dm


# Km/s to AU/year, times arcseconds to radians
_VFR = (365.25 * 86400.0 / 149597870.0) * 4.8481368111e-6


def pm(
    r0: float,
    d0: float,
    pr: float,
    pd: float,
    px: float,
    rv: float,
    ep0: float,
    ep1: float,
) -> Tuple[float, float]:
    """
    Apply proper motion, parallax-weighted radial velocity included.

    Args:
        r0: Right ascension at epoch ep0 (radians)
        d0: Declination at epoch ep0 (radians)
        pr: Proper motion in RA (radians per year of epoch, dRA/dt)
        pd: Proper motion in Dec (radians per year of epoch)
        px: Parallax (arcsec)
        rv: Radial velocity (km/s, positive receding)
        ep0: Start epoch in years (e.g. Julian epoch)
        ep1: End epoch in years (same system as ep0)

    Returns:
        Tuple[float, float]: (ra, dec) at epoch ep1

    References:
        Explanatory Supplement to the Astronomical Almanac (1992), 3.2
    """
    p = dcs2c(r0, d0)

    # Space motion (radians per year)
    w = _VFR * rv * px
    em = [
        -pr * p[1] - pd * math.cos(r0) * math.sin(d0) + w * p[0],
        pr * p[0] - pd * math.sin(r0) * math.sin(d0) + w * p[1],
        pd * math.cos(d0) + w * p[2],
    ]

    # Apply the motion
    t = ep1 - ep0
    r1, d1 = dcc2s([p[i] + t * em[i] for i in range(3)])
    return dranrm(r1), d1
