"""
Gnomonic (tangent plane) projection for libsla.

Standard coordinates (xi, eta) are in radians on the plane tangent to the
celestial sphere at the tangent point, with xi increasing eastward and eta
northward.

Functions:
- ds2tp, dv2tp: sphere -> tangent plane (spherical or vector form)
- dtp2s, dtp2v: tangent plane -> sphere
- dtps2c, dtpv2c: tangent point from a star and its standard coordinates
"""

import math
from typing import List, Optional, Sequence, Tuple

from .constants import TPP_OK, TPP_TOO_FAR, TPP_ASTAR_ON_TP, TPP_ASTAR_TOO_FAR
from .utils import dranrm

# Denominator floor for the projection
_TINY = 1.0e-6


def _projection_status(denom: float) -> Tuple[float, int]:
    """Classify and, if needed, adjust the projection denominator."""
    if denom > _TINY:
        return denom, TPP_OK
    if denom >= 0.0:
        return _TINY, TPP_TOO_FAR
    if denom > -_TINY:
        return -_TINY, TPP_ASTAR_ON_TP
    return denom, TPP_ASTAR_TOO_FAR


def ds2tp(ra: float, dec: float, raz: float, decz: float) -> Tuple[float, float, int]:
    """
    Project spherical coordinates onto the tangent plane.

    Args:
        ra: Right ascension of the star (radians)
        dec: Declination of the star (radians)
        raz: Right ascension of the tangent point (radians)
        decz: Declination of the tangent point (radians)

    Returns:
        Tuple[float, float, int]: (xi, eta, status) where status is
        TPP_OK, TPP_TOO_FAR (star too far from axis), TPP_ASTAR_ON_TP
        (antistar on tangent plane) or TPP_ASTAR_TOO_FAR (antistar too far
        from axis)
    """
    sdecz = math.sin(decz)
    sdec = math.sin(dec)
    cdecz = math.cos(decz)
    cdec = math.cos(dec)
    radif = ra - raz
    sradif = math.sin(radif)
    cradif = math.cos(radif)

    # Reciprocal of star vector length to tangent plane
    denom, status = _projection_status(sdec * sdecz + cdec * cdecz * cradif)

    xi = cdec * sradif / denom
    eta = (sdec * cdecz - cdec * sdecz * cradif) / denom
    return xi, eta, status


def dv2tp(v: Sequence[float], v0: Sequence[float]) -> Tuple[float, float, int]:
    """
    Project a direction vector onto the tangent plane.

    Args:
        v: Direction cosines of the star
        v0: Direction cosines of the tangent point

    Returns:
        Tuple[float, float, int]: (xi, eta, status), status as for ds2tp()

    Note:
        Both vectors must be of unit length (or close). The tangent point
        may be at a pole.
    """
    x, y, z = v[0], v[1], v[2]
    x0, y0, z0 = v0[0], v0[1], v0[2]
    r2 = x0 * x0 + y0 * y0
    r = math.sqrt(r2)
    if r == 0.0:
        r = 1e-20
        x0 = r

    w = x * x0 + y * y0
    d, status = _projection_status(w + z * z0)
    d *= r

    xi = (y * x0 - x * y0) / d
    eta = (z * r2 - z0 * w) / d
    return xi, eta, status


def dtp2s(xi: float, eta: float, raz: float, decz: float) -> Tuple[float, float]:
    """
    Tangent plane to spherical coordinates.

    Args:
        xi, eta: Standard coordinates of the star (radians)
        raz, decz: Spherical coordinates of the tangent point (radians)

    Returns:
        Tuple[float, float]: (ra, dec), ra in [0, 2pi)
    """
    sdecz = math.sin(decz)
    cdecz = math.cos(decz)
    denom = cdecz - eta * sdecz

    ra = dranrm(math.atan2(xi, denom) + raz)
    dec = math.atan2(sdecz + eta * cdecz, math.sqrt(xi * xi + denom * denom))
    return ra, dec


def dtp2v(xi: float, eta: float, v0: Sequence[float]) -> List[float]:
    """
    Tangent plane coordinates to direction cosines.

    Args:
        xi, eta: Standard coordinates of the star (radians)
        v0: Direction cosines of the tangent point (unit vector)

    Returns:
        List[float]: Direction cosines of the star
    """
    x, y, z = v0[0], v0[1], v0[2]
    f = math.sqrt(1.0 + xi * xi + eta * eta)
    r = math.sqrt(x * x + y * y)
    if r == 0.0:
        r = 1e-20
        x = r
    return [
        (x - (xi * y + eta * x * z) / r) / f,
        (y + (xi * x - eta * y * z) / r) / f,
        (z + eta * r) / f,
    ]


def dtps2c(
    xi: float, eta: float, ra: float, dec: float
) -> Tuple[Optional[Tuple[float, float]], Optional[Tuple[float, float]], int]:
    """
    Tangent point from the spherical and standard coordinates of a star.

    Args:
        xi, eta: Standard coordinates of the star (radians)
        ra, dec: Spherical coordinates of the star (radians)

    Returns:
        Tuple: (solution1, solution2, n) where each solution is a
        (raz, decz) pair, or None when it does not exist, and n is the
        number of solutions (0, 1 or 2)

    Note:
        When only one solution exists it is solution1; solution2 is
        then still returned, but is not a valid tangent point.
    """
    x2 = xi * xi
    y2 = eta * eta
    sd = math.sin(dec)
    cd = math.cos(dec)
    sdf = sd * math.sqrt(1.0 + x2 + y2)
    r2 = cd * cd * (1.0 + y2) - sd * sd * x2
    if r2 < 0.0:
        return None, None, 0

    r = math.sqrt(r2)
    s = sdf - eta * r
    c = sdf * eta + r
    if xi == 0.0 and r == 0.0:
        r = 1.0
    sol1 = (dranrm(ra - math.atan2(xi, r)), math.atan2(s, c))

    r = -r
    s = sdf - eta * r
    c = sdf * eta + r
    sol2 = (dranrm(ra - math.atan2(xi, r)), math.atan2(s, c))

    n = 1 if abs(sdf) < 1.0 else 2
    return sol1, sol2, n


def dtpv2c(
    xi: float, eta: float, v: Sequence[float]
) -> Tuple[Optional[List[float]], Optional[List[float]], int]:
    """
    Tangent point from the direction cosines and standard coordinates of a
    star.

    Args:
        xi, eta: Standard coordinates of the star (radians)
        v: Direction cosines of the star (unit vector)

    Returns:
        Tuple: (v01, v02, n) - the direction cosines of up to two tangent
        points (None when absent) and the number of solutions (0, 1 or 2)
    """
    x, y, z = v[0], v[1], v[2]
    rxy2 = x * x + y * y
    xi2 = xi * xi
    eta2p1 = eta * eta + 1.0
    sdf = z * math.sqrt(xi2 + eta2p1)
    r2 = rxy2 * eta2p1 - z * z * xi2
    if r2 <= 0.0:
        return None, None, 0

    def solution(r: float) -> List[float]:
        c = (sdf * eta + r) / (eta2p1 * math.sqrt(rxy2 * (r2 + xi2)))
        return [c * (x * r + y * xi), c * (y * r - x * xi), (sdf - eta * r) / eta2p1]

    r = math.sqrt(r2)
    n = 1 if abs(sdf) < 1.0 else 2
    return solution(r), solution(-r), n
