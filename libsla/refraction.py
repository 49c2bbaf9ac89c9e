"""
Atmospheric refraction for libsla.

The rigorous model (refro) integrates the refraction integral numerically
through a two-layer atmosphere: a troposphere with a constant temperature
lapse rate, and an isothermal stratosphere above the tropopause (11 km) up to
80 km where refraction is taken to vanish. The quicker routines fit or
approximate the two-term model

    dZ = A tan Z + B tan**3 Z

Functions:
- refro: refraction by numerical integration
- refco: A and B fitted to refro()
- refcoq: A and B from a fast closed-form model
- refz: observed zenith distance from unrefracted, with a fix-up near the
  horizon
- refv: refraction applied to a direction vector
- atmdsp: scale A and B from one wavelength to another
- airmas: air mass from zenith distance

References:
    Hohenkerk, C.Y. & Sinclair, A.T., NAO Technical Note No. 63 (1985)
    Rueger, J.M., "Refractive Index Formulae for Electronic Distance
    Measurement with Radio and Millimetre Waves", Unisurv Report S-68 (2002)
    Green, R.M., "Spherical Astronomy", Cambridge University Press (1985)
    Hardie, R.H., in "Astronomical Techniques", ed. W.A. Hiltner (1962)

Precision:
    refro() is accurate to about 0.01 arcsec for zenith distances below 70
    degrees in the optical; outside that it degrades gracefully rather than
    failing. Inputs outside physically sensible ranges are silently clamped.
"""

import logging
import math
from typing import List, Sequence, Tuple

from .constants import REFRACTION_MAX_STRIPS
from .utils import drange

logger = logging.getLogger(__name__)

# =============================================================================
# MODEL CONSTANTS
# =============================================================================

_D93 = 1.623156204  # 93 degrees in radians
_GCR = 8314.32  # universal gas constant
_DMD = 28.9644  # molecular weight of dry air
_DMW = 18.0152  # molecular weight of water vapour
_S = 6378120.0  # mean Earth radius (m)
_DELTA = 18.36  # exponent of temperature dependence of water vapour pressure
_HT = 11000.0  # height of tropopause (m)
_HS = 80000.0  # upper limit for refractive effects (m)

# Optical/IR to radio switch-over (micrometres)
_OPTICAL_LIMIT_UM = 100.0


def _saturation_vapour_pressure(tdc: float, pmb: float) -> float:
    """Saturation vapour pressure (mb) over water at tdc Celsius, pressure pmb."""
    return 10.0 ** ((0.7859 + 0.03477 * tdc) / (1.0 + 0.00412 * tdc)) * (
        1.0 + pmb * (4.5e-6 + 6e-10 * tdc * tdc)
    )


def _atmt(
    r0: float,
    t0: float,
    alpha: float,
    gamm2: float,
    delm2: float,
    c1: float,
    c2: float,
    c3: float,
    c4: float,
    c5: float,
    c6: float,
    r: float,
) -> Tuple[float, float, float]:
    """
    Troposphere model.

    Returns:
        Tuple[float, float, float]: (temperature, refractive index, r dn/dr)
        at distance r from the centre of the Earth
    """
    t = max(min(t0 - alpha * (r - r0), 320.0), 100.0)
    tt0 = t / t0
    tt0gm2 = tt0 ** gamm2
    tt0dm2 = tt0 ** delm2
    dn = 1.0 + (c1 * tt0gm2 - (c2 - c5 / t) * tt0dm2) * tt0
    rdndr = r * (-c3 * tt0gm2 + (c4 - c6 / tt0) * tt0dm2)
    return t, dn, rdndr


def _atms(
    rt: float, tt: float, dnt: float, gamal: float, r: float
) -> Tuple[float, float]:
    """
    Stratosphere model.

    Returns:
        Tuple[float, float]: (refractive index, r dn/dr) at distance r from
        the centre of the Earth
    """
    b = gamal / tt
    w = (dnt - 1.0) * math.exp(-b * (r - rt))
    return 1.0 + w, -r * b * w


def _refi(dn: float, rdndr: float) -> float:
    """The refraction integrand."""
    return rdndr / (dn + rdndr)


def _zenith_from_invariant(sk0: float, r: float, dn: float) -> float:
    sine = sk0 / (r * dn)
    return math.atan2(sine, math.sqrt(max(1.0 - sine * sine, 0.0)))


def refro(
    zobs: float,
    hm: float,
    tdk: float,
    pmb: float,
    rh: float,
    wl: float,
    phi: float,
    tlr: float,
    eps: float,
) -> float:
    """
    Atmospheric refraction for radio and optical/IR wavelengths.

    Args:
        zobs: Observed zenith distance of the source (radians)
        hm: Height of the observer above sea level (metres)
        tdk: Ambient temperature at the observer (K)
        pmb: Pressure at the observer (millibar)
        rh: Relative humidity at the observer (0-1)
        wl: Effective wavelength of the source (micrometres)
        phi: Latitude of the observer (radians, astronomical)
        tlr: Temperature lapse rate in the troposphere (K/metre)
        eps: Precision required to terminate iteration (radians)

    Returns:
        float: Refraction, true minus observed zenith distance (radians)

    Note:
        Out-of-range arguments are clamped, never rejected:
        |zobs| to 93 degrees (the sign of zobs is carried to the result),
        hm to -1000..80000, tdk to 100..500, pmb to 0..10000, rh to 0..1,
        wl to at least 0.1, |tlr| to 0.001..0.01 and |eps| to 1e-12..0.1.

        The radio case is selected for wavelengths above 100 micrometres.

    Algorithm:
        The refraction integral is evaluated in the troposphere and then
        the stratosphere by Simpson's rule, starting with 8 strips and
        doubling until successive estimates agree to eps/2 or 16384 strips
        are in use. For each sample zenith distance the radius is obtained
        from the invariant n r sin z by up to four Newton-Raphson steps.

    Examples:
        >>> abs(refro(0.0, 0.0, 288.0, 1013.25, 0.5, 0.55, 0.8, 0.0065, 1e-8)) < 1e-12
        True
    """
    # Transform zobs into the normal range
    zobs1 = drange(zobs)
    zobs2 = min(abs(zobs1), _D93)

    # Keep other arguments within safe bounds
    hmok = min(max(hm, -1.0e3), _HS)
    tdkok = min(max(tdk, 100.0), 500.0)
    pmbok = min(max(pmb, 0.0), 10000.0)
    rhok = min(max(rh, 0.0), 1.0)
    wlok = max(wl, 0.1)
    alpha = min(max(abs(tlr), 0.001), 0.01)

    # Tolerance for iteration
    tol = min(max(abs(eps), 1e-12), 0.1) / 2.0

    optic = wlok <= _OPTICAL_LIMIT_UM

    # Model atmosphere parameters defined at the observer
    wlsq = wlok * wlok
    gb = 9.784 * (1.0 - 0.0026 * math.cos(phi + phi) - 0.00000028 * hmok)
    if optic:
        a = (287.6155 + (1.62887 + 0.01360 / wlsq) / wlsq) * 273.15e-6 / 1013.25
    else:
        a = 77.6890e-6
    gamal = (gb * _DMD) / _GCR
    gamma = gamal / alpha
    gamm2 = gamma - 2.0
    delm2 = _DELTA - 2.0
    tdc = tdkok - 273.15
    psat = _saturation_vapour_pressure(tdc, pmbok)
    if pmbok > 0.0:
        pwo = rhok * psat / (1.0 - (1.0 - rhok) * psat / pmbok)
    else:
        pwo = 0.0
    w = pwo * (1.0 - _DMW / _DMD) * gamma / (_DELTA - gamma)
    c1 = a * (pmbok + w) / tdkok
    if optic:
        c2 = (a * w + 11.2684e-6 * pwo) / tdkok
    else:
        c2 = (a * w + 6.3938e-6 * pwo) / tdkok
    c3 = (gamma - 1.0) * alpha * c1 / tdkok
    c4 = (_DELTA - 1.0) * alpha * c2 / tdkok
    if optic:
        c5 = 0.0
        c6 = 0.0
    else:
        c5 = 375463e-6 * pwo / tdkok
        c6 = c5 * delm2 * alpha / (tdkok * tdkok)

    tropo = (tdkok, alpha, gamm2, delm2, c1, c2, c3, c4, c5, c6)

    # Conditions at the observer
    r0 = _S + hmok
    _, dn0, rdndr0 = _atmt(r0, *tropo, r0)
    sk0 = dn0 * r0 * math.sin(zobs2)
    f0 = _refi(dn0, rdndr0)

    # Conditions in the troposphere at the tropopause
    rt = _S + max(_HT, hmok)
    tt, dnt, rdndrt = _atmt(r0, *tropo, rt)
    zt = _zenith_from_invariant(sk0, rt, dnt)
    ft = _refi(dnt, rdndrt)

    # Conditions in the stratosphere at the tropopause
    dnts, rdndrp = _atms(rt, tt, dnt, gamal, rt)
    zts = _zenith_from_invariant(sk0, rt, dnts)
    fts = _refi(dnts, rdndrp)

    # Conditions at the stratosphere limit
    rs = _S + _HS
    dns, rdndrs = _atms(rt, tt, dnt, gamal, rs)
    zs = _zenith_from_invariant(sk0, rs, dns)
    fs = _refi(dns, rdndrs)

    def troposphere(r: float) -> Tuple[float, float]:
        _, dn, rdndr = _atmt(r0, *tropo, r)
        return dn, rdndr

    def stratosphere(r: float) -> Tuple[float, float]:
        return _atms(rt, tt, dnt, gamal, r)

    # Integrate the refraction integral in two parts: first in the
    # troposphere, then in the stratosphere
    layers = (
        (troposphere, r0, zobs2, zt - zobs2, f0, ft),
        (stratosphere, rt, zts, zs - zts, fts, fs),
    )
    total = 0.0
    for model, r_start, z0, zrange, fb, ff in layers:
        total += _simpson(model, r_start, z0, zrange, fb, ff, sk0, tol)

    return -total if zobs1 < 0.0 else total


def _simpson(model, r_start, z0, zrange, fb, ff, sk0, tol) -> float:
    """
    Integrate one layer by Simpson's rule with strip doubling.

    Args:
        model: Layer model, r -> (n, r dn/dr)
        r_start: Distance from the Earth's centre at the bottom of the layer
        z0: Zenith distance at the bottom of the layer
        zrange: Zenith distance range across the layer
        fb, ff: Integrand at the bottom and top of the layer
        sk0: Invariant n r sin z
        tol: Convergence tolerance
    """
    # Previous estimate, set to force at least two passes
    refold = 1.0
    strips = 8

    # Sums of odd and even values
    fo = 0.0
    fe = 0.0

    # First pass evaluates every point, later passes only the new odd ones
    step = 1

    while True:
        h = zrange / strips
        r = r_start

        for i in range(1, strips, step):
            sz = math.sin(z0 + h * i)

            # Find r to the nearest metre, at most four iterations
            if sz > 1e-20:
                w = sk0 / sz
                rg = r
                dr = 1.0e6
                j = 0
                while abs(dr) > 1.0 and j < 4:
                    j += 1
                    dn, rdndr = model(rg)
                    dr = (rg * dn - w) / (dn + rdndr)
                    rg -= dr
                r = rg

            dn, rdndr = model(r)
            f = _refi(dn, rdndr)

            if step == 1 and i % 2 == 0:
                fe += f
            else:
                fo += f

        refp = h * (fb + 4.0 * fo + 2.0 * fe + ff) / 3.0

        if abs(refp - refold) > tol and strips < REFRACTION_MAX_STRIPS:
            refold = refp
            strips += strips
            # All current values become next pass's even values
            fe += fo
            fo = 0.0
            step = 2
        else:
            if abs(refp - refold) > tol:
                logger.debug(
                    "refro: %d strips reached with change %g above tolerance %g",
                    strips,
                    abs(refp - refold),
                    tol,
                )
            return refp


def refco(
    hm: float,
    tdk: float,
    pmb: float,
    rh: float,
    wl: float,
    phi: float,
    tlr: float,
    eps: float,
) -> Tuple[float, float]:
    """
    Constants A and B of the refraction model dZ = A tan Z + B tan**3 Z.

    The constants are fitted so that the model matches refro() exactly at
    zenith distances of 45 degrees and arctan(4) (about 76 degrees). Arguments
    are as for refro().

    Returns:
        Tuple[float, float]: (refa, refb) in radians
    """
    # Sample zenith distances: arctan(1) and arctan(4)
    atn1 = 0.7853981633974483
    atn4 = 1.325817663668033

    r1 = refro(atn1, hm, tdk, pmb, rh, wl, phi, tlr, eps)
    r2 = refro(atn4, hm, tdk, pmb, rh, wl, phi, tlr, eps)

    refa = (64.0 * r1 - r2) / 60.0
    refb = (r2 - 4.0 * r1) / 60.0
    return refa, refb


def refcoq(tdk: float, pmb: float, rh: float, wl: float) -> Tuple[float, float]:
    """
    Fast approximation to refco().

    Args:
        tdk: Ambient temperature (K)
        pmb: Pressure (millibar)
        rh: Relative humidity (0-1)
        wl: Effective wavelength (micrometres)

    Returns:
        Tuple[float, float]: (refa, refb) in radians

    Note:
        Agrees with refco() to about 1 percent for typical observing
        conditions; the observer height, latitude and lapse rate are not
        taken into account.
    """
    optic = wl <= _OPTICAL_LIMIT_UM

    t = min(max(tdk, 100.0), 500.0)
    p = min(max(pmb, 0.0), 10000.0)
    r = min(max(rh, 0.0), 1.0)
    w = min(max(wl, 0.1), 1.0e6)

    # Water vapour pressure at the observer
    if p > 0.0:
        ps = _saturation_vapour_pressure(t - 273.15, p)
        pw = r * ps / (1.0 - (1.0 - r) * ps / p)
    else:
        pw = 0.0

    # Refractive index minus 1 at the observer
    if optic:
        wlsq = w * w
        gamma = (
            (77.53484e-6 + (4.39108e-7 + 3.666e-9 / wlsq) / wlsq) * p
            - 11.2684e-6 * pw
        ) / t
    else:
        gamma = (77.6890e-6 * p - (6.3938e-6 - 0.375463 / t) * pw) / t

    # Formula for beta adapted from Stone, with empirical adjustments
    beta = 4.4474e-6 * t
    if not optic:
        beta -= 0.0074 * pw * beta

    refa = gamma * (1.0 - beta)
    refb = -gamma * (beta - gamma / 2.0)
    return refa, refb


def refz(zu: float, refa: float, refb: float) -> float:
    """
    Adjust an unrefracted zenith distance to include refraction.

    Args:
        zu: Unrefracted zenith distance of the source (radians)
        refa: tan Z coefficient (radians)
        refb: tan**3 Z coefficient (radians)

    Returns:
        float: Refracted zenith distance (radians)

    Note:
        Above 83 degrees the two-term model is replaced by an empirical
        polynomial in elevation, scaled to be continuous at 83 degrees and
        capped at 93 degrees.
    """
    # Coefficients for the high zenith distance model
    c1 = 0.55445
    c2 = -0.01133
    c3 = 0.00202
    c4 = 0.28385
    c5 = 0.02390

    # 83 degrees, and the model value there
    z83 = 83.0 / 57.29577951308232
    ref83 = (c1 + c2 * 7.0 + c3 * 49.0) / (1.0 + c4 * 7.0 + c5 * 49.0)

    zu1 = min(zu, z83)

    # Refraction correction, one Newton-Raphson iteration
    zl = zu1
    s = math.sin(zl)
    c = math.cos(zl)
    t = s / c
    tsq = t * t
    tcu = t * tsq
    zl = zl - (refa * t + refb * tcu) / (1.0 + (refa + 3.0 * refb * tsq) / (c * c))

    # Further iteration
    s = math.sin(zl)
    c = math.cos(zl)
    t = s / c
    tsq = t * t
    tcu = t * tsq
    ref = zu1 - zl + (zl - zu1 + refa * t + refb * tcu) / (
        1.0 + (refa + 3.0 * refb * tsq) / (c * c)
    )

    # Special handling for large zu
    if zu > zu1:
        e = 90.0 - min(93.0, zu * 57.29577951308232)
        e2 = e * e
        ref = (ref / ref83) * (c1 + c2 * e + c3 * e2) / (1.0 + c4 * e + c5 * e2)

    return zu - ref


def refv(vu: Sequence[float], refa: float, refb: float) -> List[float]:
    """
    Adjust an unrefracted Cartesian vector to include refraction.

    Args:
        vu: Unrefracted position of the source (Az/El 3-vector, z up)
        refa: tan Z coefficient (radians)
        refb: tan**3 Z coefficient (radians)

    Returns:
        List[float]: Refracted position (not exactly unit length)

    Note:
        Below 3 degrees elevation (z < 0.05) the refraction is held at its
        3 degree value.
    """
    x, y, z1 = vu[0], vu[1], vu[2]

    z = max(z1, 0.05)

    zsq = z * z
    rsq = x * x + y * y
    r = math.sqrt(rsq)

    wb = refb * rsq / zsq
    wt = (refa + wb) / (1.0 + (refa + 3.0 * wb) * (zsq + rsq) / zsq)

    # Apply the rotation, using the small-angle cosine
    d = wt * r / z
    cd = 1.0 - d * d / 2.0
    f = cd * (1.0 - wt)

    return [x * f, y * f, cd * (z + d * r) + (z1 - z)]


def atmdsp(
    tdk: float,
    pmb: float,
    rh: float,
    wl1: float,
    a1: float,
    b1: float,
    wl2: float,
) -> Tuple[float, float]:
    """
    Refraction constants at one wavelength from those at another.

    Args:
        tdk: Ambient temperature (K)
        pmb: Pressure (millibar)
        rh: Relative humidity (0-1)
        wl1: Reference wavelength (micrometres)
        a1: refa at wl1
        b1: refb at wl1
        wl2: Wavelength required (micrometres)

    Returns:
        Tuple[float, float]: (refa, refb) at wl2

    Note:
        For radio wavelengths (either wavelength above 100 micrometres) the
        constants are returned unchanged.
    """
    if wl1 > _OPTICAL_LIMIT_UM or wl2 > _OPTICAL_LIMIT_UM:
        return a1, b1

    tdkok = min(max(tdk, 100.0), 500.0)
    pmbok = min(max(pmb, 0.0), 10000.0)
    rhok = min(max(rh, 0.0), 1.0)

    # Partial pressure of water vapour
    psat = 10.0 ** (-8.7115 + 0.03477 * tdkok)
    pwo = rhok * psat

    # Refractivity at the two wavelengths
    w1 = 11.2684e-6 * pwo
    dn1 = (_refractivity_factor(wl1) * pmbok - w1) / tdkok
    dn2 = (_refractivity_factor(wl2) * pmbok - w1) / tdkok

    if dn1 == 0.0:
        return a1, b1

    f = dn2 / dn1
    a2 = a1 * f
    b2 = b1 * f
    if dn1 != a1:
        b2 *= 1.0 + dn1 * (dn1 - dn2) / (2.0 * (dn1 - a1))
    return a2, b2


def _refractivity_factor(wl: float) -> float:
    wlsq = max(wl, 0.1) ** 2
    return 77.5317e-6 + (0.43909e-6 + 0.00367e-6 / wlsq) / wlsq


def airmas(zd: float) -> float:
    """
    Air mass at the given zenith distance.

    Args:
        zd: Observed zenith distance (radians)

    Returns:
        float: Air mass (1 at the zenith)

    Note:
        Uses Hardie's polynomial fit to Bemporad's data in sec(ZD) - 1. The
        zenith distance is capped at 1.52 radians (about 87 degrees), beyond
        which the formula is meaningless.

    Examples:
        >>> round(airmas(1.2354), 12)
        3.015698990075
    """
    seczm1 = 1.0 / math.cos(min(1.52, abs(zd))) - 1.0
    return 1.0 + seczm1 * (0.9981833 - seczm1 * (0.002875 + 0.0008083 * seczm1))
