"""
Linear plate-model fitting for libsla.

A linear model maps measured [x, y] onto expected [X, Y]:

    X = a + b*x + c*y
    Y = d + e*x + f*y

and is held as the six coefficients [a, b, c, d, e, f]. Two model types
are fitted:
- 6-coefficient: general linear (independent scales, nonperpendicularity)
- 4-coefficient: solid body (common scale, rotation, shift, optional
  mirror image)

Functions:
- fitxy: least-squares fit of a model to matched samples (uses dmat)
- pxy: apply a model and report rms residuals
- invf: invert a model
- xy2xy: transform one point
- dcmpf: decompose a model into zero points, scales, nonperpendicularity
  and orientation
- pcd, unpcd: apply/remove pincushion or barrel distortion

References:
    P.T. Wallace, SLALIB - Positional Astronomy Library, Starlink User Note 67
"""

import logging
import math
from typing import List, Sequence, Tuple

from .constants import D2PI, FIT_OK, FIT_INSUFFICIENT, FIT_NONE
from .matrix import dmat
from .utils import drange, sign
from .vectors import dmxv

logger = logging.getLogger(__name__)

Samples = Sequence[Sequence[float]]


# =============================================================================
# FITTING
# =============================================================================


def _fit_general(expected: Samples, measured: Samples) -> Tuple[List[float], int]:
    """Six-coefficient least-squares fit."""
    n = len(measured)
    sxe = sye = sxm = sym = 0.0
    sxexm = sxeym = syeym = syexm = 0.0
    sxmxm = sxmym = symym = 0.0
    for (xe, ye), (xm, ym) in zip(expected, measured):
        sxe += xe
        sxexm += xe * xm
        sxeym += xe * ym
        sye += ye
        syeym += ye * ym
        syexm += ye * xm
        sxm += xm
        sym += ym
        sxmxm += xm * xm
        sxmym += xm * ym
        symym += ym * ym

    mat = [
        [float(n), sxm, sym],
        [sxm, sxmxm, sxmym],
        [sym, sxmym, symym],
    ]
    vec = [sxe, sxexm, sxeym]
    if dmat(mat, vec).singular:
        logger.debug("fitxy: normal equations singular for 6-coefficient model")
        return [0.0] * 6, FIT_NONE

    # mat now holds the inverse of the normal matrix, shared by both axes
    return vec + dmxv(mat, [sye, syexm, syeym]), FIT_OK


def _fit_solid_body(expected: Samples, measured: Samples) -> Tuple[List[float], int]:
    """Four-coefficient least-squares fit, trying direct and mirror image."""
    n = len(measured)
    best = None
    best_sdr2 = -1.0
    last = None
    last_singular = True
    sdr2 = -1.0

    for flip in (1.0, -1.0):
        sxe = sye = sxm = sym = 0.0
        sxxyy = sxyyx = sx2y2 = 0.0
        for (xe, ye), (xm, ym) in zip(expected, measured):
            xe *= flip
            sxe += xe
            sxxyy += xe * xm + ye * ym
            sxyyx += xe * ym - ye * xm
            sye += ye
            sxm += xm
            sym += ym
            sx2y2 += xm * xm + ym * ym

        mat = [
            [float(n), sxm, -sym, 0.0],
            [sxm, sx2y2, 0.0, sym],
            [sym, 0.0, -sx2y2, -sxm],
            [0.0, sym, sxm, float(n)],
        ]
        vec = [sxe, sxxyy, sxyyx, sye]
        last_singular = dmat(mat, vec).singular
        if not last_singular:
            a, b, c, d = vec
            sdr2 = 0.0
            for (xe, ye), (xm, ym) in zip(expected, measured):
                xr = a + b * xm - c * ym - xe * flip
                yr = d + c * xm + b * ym - ye
                sdr2 += xr * xr + yr * yr
            last = (a, b, c, d)
        else:
            sdr2 = -1.0

        if flip > 0.0 and not last_singular:
            best = last
            best_sdr2 = sdr2

    # Keep the direct solution unless the mirror image fits better
    if best_sdr2 >= 0.0 and (best_sdr2 <= sdr2 or n == 2):
        a, b, c, d = best
        return [a, b, -c, d, c, b], FIT_OK
    if not last_singular:
        a, b, c, d = last
        return [-a, -b, c, d, c, b], FIT_OK
    logger.debug("fitxy: normal equations singular for 4-coefficient model")
    return [0.0] * 6, FIT_NONE


def fitxy(itype: int, expected: Samples, measured: Samples) -> Tuple[List[float], int]:
    """
    Fit a linear model relating two sets of [x, y] coordinates.

    Args:
        itype: 4 for a solid-body fit, 6 for a general linear fit
        expected: Expected [X, Y] for each sample
        measured: Measured [x, y] for each sample

    Returns:
        Tuple[List[float], int]: (coeffs, status) where coeffs is
        [a, b, c, d, e, f] and status is FIT_OK, FIT_INSUFFICIENT (too few
        samples: 3 for itype 6, 2 for itype 4) or FIT_NONE (no solution)

    Raises:
        ValueError: If itype is not 4 or 6

    Note:
        The solid-body fit allows for a mirror image by trying a
        reflection in X and keeping whichever solution has the smaller
        residuals.
    """
    if itype not in (4, 6):
        raise ValueError(f"Unknown model type: {itype}")
    if len(expected) != len(measured):
        raise ValueError(
            f"Sample count mismatch: {len(expected)} expected, {len(measured)} measured"
        )

    needed = 3 if itype == 6 else 2
    if len(measured) < needed:
        logger.debug("fitxy: %d samples, need at least %d", len(measured), needed)
        return [0.0] * 6, FIT_INSUFFICIENT

    if itype == 6:
        return _fit_general(expected, measured)
    return _fit_solid_body(expected, measured)


def xy2xy(x1: float, y1: float, coeffs: Sequence[float]) -> Tuple[float, float]:
    """Transform one [x, y] into [X, Y] using a linear model."""
    a, b, c, d, e, f = coeffs
    return a + b * x1 + c * y1, d + e * x1 + f * y1


def pxy(
    expected: Samples, measured: Samples, coeffs: Sequence[float]
) -> Tuple[List[Tuple[float, float]], float, float, float]:
    """
    Apply a linear model to measured coordinates and compute residuals.

    Args:
        expected: Expected [X, Y] for each sample
        measured: Measured [x, y] for each sample
        coeffs: Model [a, b, c, d, e, f]

    Returns:
        Tuple: (predicted, xrms, yrms, rrms) where predicted holds the
        model [X, Y] for each sample and the rms values are of
        expected minus predicted in X, Y and radially
    """
    predicted = []
    sdx2 = 0.0
    sdy2 = 0.0
    for (xe, ye), (xm, ym) in zip(expected, measured):
        xp, yp = xy2xy(xm, ym, coeffs)
        predicted.append((xp, yp))
        dx = xe - xp
        dy = ye - yp
        sdx2 += dx * dx
        sdy2 += dy * dy

    p = max(1.0, float(len(predicted)))
    xrms = math.sqrt(sdx2 / p)
    yrms = math.sqrt(sdy2 / p)
    return predicted, xrms, yrms, math.sqrt(xrms * xrms + yrms * yrms)


def invf(coeffs: Sequence[float]) -> Tuple[List[float], bool]:
    """
    Invert a linear model.

    Args:
        coeffs: Model [a, b, c, d, e, f]

    Returns:
        Tuple[List[float], bool]: (inverse, ok); ok is False when the
        model is degenerate, and the inverse is then all zeros
    """
    a, b, c, d, e, f = coeffs
    det = b * f - c * e
    if det == 0.0:
        return [0.0] * 6, False
    return [
        (c * d - a * f) / det,
        f / det,
        -c / det,
        (a * e - b * d) / det,
        -e / det,
        b / det,
    ], True


def dcmpf(coeffs: Sequence[float]) -> Tuple[float, float, float, float, float, float]:
    """
    Decompose a linear model into geometrical parameters.

    Args:
        coeffs: Model [a, b, c, d, e, f]

    Returns:
        Tuple: (xz, yz, xs, ys, perp, orient)
            - xz, yz: Zero points
            - xs, ys: Scales (xs negative for a mirror image)
            - perp: Nonperpendicularity (radians)
            - orient: Orientation (radians)

    Note:
        The model is X = xz + xs*x' ..., where the measured axes are first
        made perpendicular by rotating each through +/- perp/2, then
        rotated through orient. See SUN/67 for the full formulation.
    """
    a, b, c, d, e, f = coeffs

    rb2e2 = math.sqrt(b * b + e * e)
    rc2f2 = math.sqrt(c * c + f * f)
    if b * f - c * e >= 0.0:
        xsc = rb2e2
    else:
        b = -b
        e = -e
        xsc = -rb2e2
    ysc = rc2f2

    # Nonperpendicularity
    p1 = math.atan2(c, f) if (c != 0.0 or f != 0.0) else 0.0
    p2 = math.atan2(e, b) if (e != 0.0 or b != 0.0) else 0.0
    p = drange(p1 + p2)

    # Orientation
    ws = c * rb2e2 - e * rc2f2
    wc = b * rc2f2 + f * rb2e2
    orient = math.atan2(ws, wc) if (ws != 0.0 or wc != 0.0) else 0.0

    # Zero points
    hp = p / 2.0
    shp = math.sin(hp)
    chp = math.cos(hp)
    sor = math.sin(orient)
    cor = math.cos(orient)
    det = xsc * ysc * (chp + shp) * (chp - shp)
    if abs(det) > 0.0:
        xz = ysc * (a * (chp * cor - shp * sor) - d * (chp * sor + shp * cor)) / det
        yz = xsc * (a * (chp * sor - shp * cor) + d * (chp * cor + shp * sor)) / det
    else:
        xz = 0.0
        yz = 0.0

    return xz, yz, xsc, ysc, p, orient


# =============================================================================
# RADIAL DISTORTION
# =============================================================================


def pcd(disco: float, x: float, y: float) -> Tuple[float, float]:
    """
    Apply pincushion/barrel distortion to a tangent-plane [x, y].

    The distortion is r' = r * (1 + disco * r^2), where r is in units of
    the focal length. disco is positive for pincushion and negative for
    barrel distortion.
    """
    f = 1.0 + disco * (x * x + y * y)
    return x * f, y * f


def unpcd(disco: float, x: float, y: float) -> Tuple[float, float]:
    """
    Remove pincushion/barrel distortion from a distorted [x, y].

    Inverse of pcd(), found by solving the cubic for the undistorted
    radius. For barrel distortion with three real roots, the one closest
    to the distorted radius is taken.

    Args:
        disco: Pincushion/barrel distortion coefficient
        x, y: Distorted coordinates (units of focal length)

    Returns:
        Tuple[float, float]: Undistorted coordinates
    """
    rp = math.sqrt(x * x + y * y)
    if rp == 0.0 or disco == 0.0:
        return x, y

    q = 1.0 / (3.0 * disco)
    r = rp / (2.0 * disco)
    w = q * q * q + r * r

    if w >= 0.0:
        # One real root
        d = math.sqrt(w)
        w = r + d
        s = sign(abs(w) ** (1.0 / 3.0), w)
        w = r - d
        t = sign(abs(w) ** (1.0 / 3.0), w)
        f = s + t
    else:
        # Three real roots
        w = 2.0 / math.sqrt(-3.0 * disco)
        c = 4.0 * rp / (disco * w * w * w)
        s = math.sqrt(1.0 - min(c * c, 1.0))
        t3 = math.atan2(s, c)
        roots = (
            w * math.cos((D2PI - t3) / 3.0),
            w * math.cos(t3 / 3.0),
            w * math.cos((D2PI + t3) / 3.0),
        )
        f = min(roots, key=lambda root: abs(root - rp))

    f = f / rp
    return f * x, f * y
