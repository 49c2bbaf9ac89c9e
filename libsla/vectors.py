"""
Vector and rotation-matrix utilities for libsla.

Three-vectors are sequences of three floats and 3x3 matrices are lists of
row lists. All products accumulate in double precision.

Functions:
- dcs2c, dcc2s: spherical <-> Cartesian direction cosines
- ds2c6, dc62s: spherical <-> Cartesian position and velocity
- dvn, dvdv, dvxv: normalisation, scalar and vector products
- dmxv, dimxv, dmxm: matrix products
- dav2m, dm2av, deuler: rotation matrix construction
- dsep, dsepv, dbear, dpav: separations, bearings and position angles
"""

import math
from typing import List, Sequence, Tuple

Vector = List[float]
Matrix = List[List[float]]


def identity() -> Matrix:
    """Return a fresh 3x3 identity matrix."""
    return [[1.0 if i == j else 0.0 for j in range(3)] for i in range(3)]


# =============================================================================
# SPHERICAL <-> CARTESIAN
# =============================================================================


def dcs2c(a: float, b: float) -> Vector:
    """
    Spherical coordinates to direction cosines.

    Args:
        a: Longitude-like angle (e.g. RA) in radians
        b: Latitude-like angle (e.g. Dec) in radians

    Returns:
        Vector: Unit vector [x, y, z]
    """
    cosb = math.cos(b)
    return [math.cos(a) * cosb, math.sin(a) * cosb, math.sin(b)]


def dcc2s(v: Sequence[float]) -> Tuple[float, float]:
    """
    Direction cosines to spherical coordinates.

    Args:
        v: Cartesian vector (need not be a unit vector)

    Returns:
        Tuple[float, float]: (a, b) with a in (-pi, pi] and b in [-pi/2, pi/2]

    Note:
        At either pole a is returned as zero.
    """
    x, y, z = v[0], v[1], v[2]
    r = math.sqrt(x * x + y * y)
    a = 0.0 if r == 0.0 else math.atan2(y, x)
    b = 0.0 if z == 0.0 else math.atan2(z, r)
    return a, b


def ds2c6(
    a: float, b: float, r: float, ad: float, bd: float, rd: float
) -> List[float]:
    """
    Spherical position and velocity to Cartesian.

    Args:
        a: Longitude (radians)
        b: Latitude (radians)
        r: Radial coordinate
        ad: Longitude derivative (radians per unit time)
        bd: Latitude derivative (radians per unit time)
        rd: Radial derivative

    Returns:
        List[float]: [x, y, z, xd, yd, zd]
    """
    sa = math.sin(a)
    ca = math.cos(a)
    sb = math.sin(b)
    cb = math.cos(b)
    rcb = r * cb
    x = rcb * ca
    y = rcb * sa
    rbd = r * bd
    w = rbd * sb - cb * rd

    return [
        x,
        y,
        r * sb,
        -y * ad - w * ca,
        x * ad - w * sa,
        rbd * cb + sb * rd,
    ]


def dc62s(pv: Sequence[float]) -> Tuple[float, float, float, float, float, float]:
    """
    Cartesian position and velocity to spherical.

    Args:
        pv: [x, y, z, xd, yd, zd]

    Returns:
        Tuple: (a, b, r, ad, bd, rd)

    Note:
        If the position is zero the velocity is used in its place to
        establish the direction. At either pole the longitude and both
        angular rates are returned as zero.
    """
    x, y, z, xd, yd, zd = pv[0], pv[1], pv[2], pv[3], pv[4], pv[5]

    rxy2 = x * x + y * y
    r2 = rxy2 + z * z

    # Null position vector: use the velocity
    if r2 == 0.0:
        x, y, z = xd, yd, zd
        rxy2 = x * x + y * y
        r2 = rxy2 + z * z

    rxy = math.sqrt(rxy2)
    xyp = x * xd + y * yd
    if rxy2 != 0.0:
        a = math.atan2(y, x)
        b = math.atan2(z, rxy)
        ad = (x * yd - y * xd) / rxy2
        bd = (zd * rxy2 - z * xyp) / (r2 * rxy)
    else:
        a = 0.0
        b = math.atan2(z, rxy) if z != 0.0 else 0.0
        ad = 0.0
        bd = 0.0

    r = math.sqrt(r2)
    rd = (xyp + z * zd) / r if r != 0.0 else 0.0
    return a, b, r, ad, bd, rd


# =============================================================================
# PRODUCTS
# =============================================================================


def dvn(v: Sequence[float]) -> Tuple[Vector, float]:
    """
    Normalise a 3-vector.

    Returns:
        Tuple[Vector, float]: (unit vector, modulus). A null vector is
        returned unchanged with modulus zero.
    """
    modulus = math.sqrt(sum(c * c for c in v[:3]))
    w = modulus if modulus > 0.0 else 1.0
    return [c / w for c in v[:3]], modulus


def dvdv(va: Sequence[float], vb: Sequence[float]) -> float:
    """Scalar product of two 3-vectors."""
    return va[0] * vb[0] + va[1] * vb[1] + va[2] * vb[2]


def dvxv(va: Sequence[float], vb: Sequence[float]) -> Vector:
    """Vector product of two 3-vectors (va x vb)."""
    return [
        va[1] * vb[2] - va[2] * vb[1],
        va[2] * vb[0] - va[0] * vb[2],
        va[0] * vb[1] - va[1] * vb[0],
    ]


def dmxv(rm: Sequence[Sequence[float]], va: Sequence[float]) -> Vector:
    """Multiply a 3-vector by a rotation matrix (rm . va)."""
    return [sum(rm[j][i] * va[i] for i in range(3)) for j in range(3)]


def dimxv(rm: Sequence[Sequence[float]], va: Sequence[float]) -> Vector:
    """Multiply a 3-vector by the inverse (transpose) of a rotation matrix."""
    return [sum(rm[i][j] * va[i] for i in range(3)) for j in range(3)]


def dmxm(a: Sequence[Sequence[float]], b: Sequence[Sequence[float]]) -> Matrix:
    """Product of two 3x3 matrices (a . b)."""
    return [
        [sum(a[i][k] * b[k][j] for k in range(3)) for j in range(3)]
        for i in range(3)
    ]


# =============================================================================
# ROTATION MATRICES
# =============================================================================


def dav2m(axvec: Sequence[float]) -> Matrix:
    """
    Form the rotation matrix corresponding to a given axial vector.

    Args:
        axvec: Axial vector; its direction is the rotation axis and its
            modulus the rotation angle in radians (right hand rule)

    Returns:
        Matrix: 3x3 rotation matrix
    """
    x, y, z = axvec[0], axvec[1], axvec[2]
    phi = math.sqrt(x * x + y * y + z * z)
    s = math.sin(phi)
    c = math.cos(phi)
    w = 1.0 - c

    if phi != 0.0:
        x /= phi
        y /= phi
        z /= phi

    return [
        [x * x * w + c, x * y * w + z * s, x * z * w - y * s],
        [x * y * w - z * s, y * y * w + c, y * z * w + x * s],
        [x * z * w + y * s, y * z * w - x * s, z * z * w + c],
    ]


def dm2av(rmat: Sequence[Sequence[float]]) -> Vector:
    """
    Determine the axial vector corresponding to a rotation matrix.

    Returns:
        Vector: Axial vector (zero for the identity)
    """
    x = rmat[1][2] - rmat[2][1]
    y = rmat[2][0] - rmat[0][2]
    z = rmat[0][1] - rmat[1][0]
    s2 = math.sqrt(x * x + y * y + z * z)
    if s2 == 0.0:
        return [0.0, 0.0, 0.0]
    c2 = rmat[0][0] + rmat[1][1] + rmat[2][2] - 1.0
    phi = math.atan2(s2 / 2.0, c2 / 2.0)
    f = phi / s2
    return [x * f, y * f, z * f]


def deuler(order: str, phi: float, theta: float, psi: float) -> Matrix:
    """
    Form a rotation matrix from the Euler angles.

    Args:
        order: Up to three axis names, each one of X/Y/Z, x/y/z or 1/2/3.
            Rotations are applied in order; an unrecognised character
            ends the sequence.
        phi: First rotation (radians)
        theta: Second rotation (radians)
        psi: Third rotation (radians)

    Returns:
        Matrix: 3x3 rotation matrix

    Examples:
        >>> m = deuler("ZYZ", 0.0, 0.0, 0.0)
        >>> m == identity()
        True
    """
    result = identity()
    angles = (phi, theta, psi)

    for axis, angle in zip(order[:3], angles):
        s = math.sin(angle)
        c = math.cos(angle)
        rotn = identity()
        known = True
        if axis in "Xx1":
            rotn[1][1] = c
            rotn[1][2] = s
            rotn[2][1] = -s
            rotn[2][2] = c
        elif axis in "Yy2":
            rotn[0][0] = c
            rotn[0][2] = -s
            rotn[2][0] = s
            rotn[2][2] = c
        elif axis in "Zz3":
            rotn[0][0] = c
            rotn[0][1] = s
            rotn[1][0] = -s
            rotn[1][1] = c
        else:
            known = False

        result = dmxm(rotn, result)
        if not known:
            break

    return result


# =============================================================================
# SEPARATIONS AND BEARINGS
# =============================================================================


def dsepv(v1: Sequence[float], v2: Sequence[float]) -> float:
    """
    Angle between two vectors.

    Args:
        v1: First vector (need not be unit length)
        v2: Second vector

    Returns:
        float: Separation in radians, in [0, pi]
    """
    _, s = dvn(dvxv(v1, v2))
    c = dvdv(v1, v2)
    return math.atan2(s, c) if (s != 0.0 or c != 0.0) else 0.0


def dsep(a1: float, b1: float, a2: float, b2: float) -> float:
    """Angle between two points on a sphere, given as spherical coordinates."""
    return dsepv(dcs2c(a1, b1), dcs2c(a2, b2))


def dbear(a1: float, b1: float, a2: float, b2: float) -> float:
    """
    Bearing (position angle) of one point on a sphere relative to another.

    Args:
        a1, b1: Spherical coordinates of the reference point
        a2, b2: Spherical coordinates of the other point

    Returns:
        float: Position angle of point 2 as seen from point 1, in the
        range +/- pi, positive through the increasing-longitude direction
    """
    da = a2 - a1
    y = math.sin(da) * math.cos(b2)
    x = math.sin(b2) * math.cos(b1) - math.cos(b2) * math.sin(b1) * math.cos(da)
    return math.atan2(y, x) if (x != 0.0 or y != 0.0) else 0.0


def dpav(v1: Sequence[float], v2: Sequence[float]) -> float:
    """Position angle of one direction vector with respect to another."""
    x1, y1, z1 = v1[0], v1[1], v1[2]
    w = math.sqrt(x1 * x1 + y1 * y1 + z1 * z1)
    if w != 0.0:
        x1 /= w
        y1 /= w
        z1 /= w

    x2, y2, z2 = v2[0], v2[1], v2[2]
    sq = y2 * x1 - x2 * y1
    cq = z2 * (x1 * x1 + y1 * y1) - z1 * (x2 * x1 + y2 * y1)
    if sq == 0.0 and cq == 0.0:
        cq = 1.0
    return math.atan2(sq, cq)
