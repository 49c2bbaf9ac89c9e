"""
Singular value decomposition engine for libsla.

Factors an m x n matrix A (m >= n) into U.diag(W).V^T where U (m x n) is
column-orthogonal and overwrites A, W holds the n non-negative singular values
and V (n x n) is orthogonal (V itself, not its transpose).

Algorithm (Golub & Reinsch, as adapted in EISPACK and SLALIB sla_SVD):
1. Householder reduction to bidiagonal form
2. Accumulation of the right-hand then left-hand transformations
3. Diagonalisation of the bidiagonal form by implicit-shift QR iteration

Companions:
- svdsol: least-squares / direct solution from a decomposition
- svdcov: covariance matrix from a decomposition

References:
    Golub & Reinsch, Numer. Math. 14, 403 (1970)
    Forsythe, Malcolm & Moler, "Computer Methods for Mathematical
    Computations" (1977)
"""

import logging
import math
from typing import List, NamedTuple, Optional, Sequence

from .constants import SVD_OK, SVD_BAD_SHAPE, SVD_MAX_ITERATIONS

logger = logging.getLogger(__name__)

# Above this the shift computation would overflow squaring f
_SHIFT_OVERFLOW_GUARD = 1.0e15


class SvdResult(NamedTuple):
    """
    Outcome of svd().

    Attributes:
        w: Singular values (length n, all >= 0 on success)
        v: Orthogonal n x n matrix V (list of rows)
        status: 0 on success, -1 if m < n, otherwise the index of a singular
            value that failed to converge (a warning; the decomposition is
            often still usable)
    """

    w: List[float]
    v: List[List[float]]
    status: int


def _sign(a: float, b: float) -> float:
    return abs(a) if b >= 0.0 else -abs(a)


def _check_dims(a: Sequence[Sequence[float]], m: int, n: int) -> None:
    if m > len(a):
        raise ValueError(f"Logical rows {m} exceed storage rows {len(a)}")
    for row in a[:m]:
        if n > len(row):
            raise ValueError(f"Logical columns {n} exceed row length {len(row)}")


def svd(
    a: List[List[float]], m: Optional[int] = None, n: Optional[int] = None
) -> SvdResult:
    """
    Singular value decomposition, U replacing A in place.

    Args:
        a: Matrix A as a list of rows; its leading m x n block is replaced
            by U
        m: Logical number of rows (default: len(a))
        n: Logical number of columns (default: len(a[0]))

    Returns:
        SvdResult: (w, v, status)

    Raises:
        ValueError: If m or n exceed the storage of a

    Note:
        If m < n nothing is computed: status is -1 and w and v are returned
        zero filled. A positive status k means singular value k did not
        converge within 30 QR iterations; this is logged as a warning but
        the decomposition is returned as far as it got.
    """
    if m is None:
        m = len(a)
    if n is None:
        n = len(a[0]) if a else 0
    _check_dims(a, m, n)

    w = [0.0] * n
    v = [[0.0] * n for _ in range(n)]
    ws = [0.0] * n

    if m < n:
        logger.warning("svd: %d rows is fewer than %d columns", m, n)
        return SvdResult(w, v, SVD_BAD_SHAPE)

    status = SVD_OK

    # -------------------------------------------------------------------------
    # Householder reduction to bidiagonal form
    # -------------------------------------------------------------------------
    g = 0.0
    scale = 0.0
    an = 0.0
    l = 0
    for i in range(n):
        l = i + 1
        ws[i] = scale * g
        g = 0.0
        s = 0.0
        scale = 0.0

        # Column reflection
        for k in range(i, m):
            scale += abs(a[k][i])
        if scale != 0.0:
            for k in range(i, m):
                x = a[k][i] / scale
                a[k][i] = x
                s += x * x
            f = a[i][i]
            g = -_sign(math.sqrt(s), f)
            h = f * g - s
            a[i][i] = f - g
            if i != n - 1:
                for j in range(l, n):
                    s = 0.0
                    for k in range(i, m):
                        s += a[k][i] * a[k][j]
                    f = s / h
                    for k in range(i, m):
                        a[k][j] += f * a[k][i]
            for k in range(i, m):
                a[k][i] *= scale
        w[i] = scale * g

        # Row reflection
        g = 0.0
        s = 0.0
        scale = 0.0
        if i != n - 1:
            row_i = a[i]
            for k in range(l, n):
                scale += abs(row_i[k])
            if scale != 0.0:
                for k in range(l, n):
                    x = row_i[k] / scale
                    row_i[k] = x
                    s += x * x
                f = row_i[l]
                g = -_sign(math.sqrt(s), f)
                h = f * g - s
                row_i[l] = f - g
                for k in range(l, n):
                    ws[k] = row_i[k] / h
                if i != m - 1:
                    for j in range(l, m):
                        row_j = a[j]
                        s = 0.0
                        for k in range(l, n):
                            s += row_j[k] * row_i[k]
                        for k in range(l, n):
                            row_j[k] += s * ws[k]
                for k in range(l, n):
                    row_i[k] *= scale

        an = max(an, abs(w[i]) + abs(ws[i]))

    # -------------------------------------------------------------------------
    # Accumulation of right-hand transformations into V
    # -------------------------------------------------------------------------
    for i in range(n - 1, -1, -1):
        if i != n - 1:
            if g != 0.0:
                for j in range(l, n):
                    v[j][i] = (a[i][j] / a[i][l]) / g
                for j in range(l, n):
                    s = 0.0
                    for k in range(l, n):
                        s += a[i][k] * v[k][j]
                    for k in range(l, n):
                        v[k][j] += s * v[k][i]
            for j in range(l, n):
                v[i][j] = 0.0
                v[j][i] = 0.0
        v[i][i] = 1.0
        g = ws[i]
        l = i

    # -------------------------------------------------------------------------
    # Accumulation of left-hand transformations into U (in place in A)
    # -------------------------------------------------------------------------
    for i in range(n - 1, -1, -1):
        l = i + 1
        g = w[i]
        if i != n - 1:
            for j in range(l, n):
                a[i][j] = 0.0
        if g != 0.0:
            if i != n - 1:
                for j in range(l, n):
                    s = 0.0
                    for k in range(l, m):
                        s += a[k][i] * a[k][j]
                    f = (s / a[i][i]) / g
                    for k in range(i, m):
                        a[k][j] += f * a[k][i]
            for j in range(i, m):
                a[j][i] /= g
        else:
            for j in range(i, m):
                a[j][i] = 0.0
        a[i][i] += 1.0

    # -------------------------------------------------------------------------
    # Diagonalisation of the bidiagonal form
    # -------------------------------------------------------------------------
    for k in range(n - 1, -1, -1):
        k1 = k - 1

        for iteration in range(1, SVD_MAX_ITERATIONS + 1):
            # Test for splitting; ws[0] is always zero so this terminates
            cancel = True
            l1 = -1
            for l in range(k, -1, -1):
                l1 = l - 1
                if an + abs(ws[l]) == an:
                    cancel = False
                    break
                if an + abs(w[l1]) == an:
                    break

            # Cancellation of ws[l] if l > 0
            if cancel:
                s = 1.0
                for i in range(l, k + 1):
                    f = s * ws[i]
                    if an + abs(f) == an:
                        break
                    g = w[i]
                    h = math.sqrt(f * f + g * g)
                    w[i] = h
                    c = g / h
                    s = -f / h
                    for row in a[:m]:
                        y = row[l1]
                        z = row[i]
                        row[l1] = y * c + z * s
                        row[i] = -y * s + z * c

            z = w[k]

            if l == k:
                # Converged: make the singular value non-negative
                if z < 0.0:
                    w[k] = -z
                    for row in v:
                        row[k] = -row[k]
                break

            if iteration == SVD_MAX_ITERATIONS:
                status = k
                logger.warning(
                    "svd: singular value %d not converged after %d iterations",
                    k,
                    SVD_MAX_ITERATIONS,
                )

            # Shift from the bottom 2x2 minor
            x = w[l]
            y = w[k1]
            g = ws[k1]
            h = ws[k]
            f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2.0 * h * y)
            g = abs(f) if abs(f) > _SHIFT_OVERFLOW_GUARD else math.sqrt(f * f + 1.0)
            f = ((x - z) * (x + z) + h * (y / (f + _sign(g, f)) - h)) / x

            # Next QR transformation
            c = 1.0
            s = 1.0
            for i1 in range(l, k1 + 1):
                i = i1 + 1
                g = ws[i]
                y = w[i]
                h = s * g
                g = c * g
                z = math.sqrt(f * f + h * h)
                ws[i1] = z
                if z != 0.0:
                    c = f / z
                    s = h / z
                else:
                    c = 1.0
                    s = 0.0
                f = x * c + g * s
                g = -x * s + g * c
                h = y * s
                y = y * c
                for row in v:
                    x = row[i1]
                    z = row[i]
                    row[i1] = x * c + z * s
                    row[i] = -x * s + z * c
                z = math.sqrt(f * f + h * h)
                w[i1] = z
                if z != 0.0:
                    c = f / z
                    s = h / z
                f = c * g + s * y
                x = -s * g + c * y
                for row in a[:m]:
                    y = row[i1]
                    z = row[i]
                    row[i1] = y * c + z * s
                    row[i] = -y * s + z * c
            ws[l] = 0.0
            ws[k] = f
            w[k] = x

    return SvdResult(w, v, status)


def svdsol(
    u: Sequence[Sequence[float]],
    w: Sequence[float],
    v: Sequence[Sequence[float]],
    b: Sequence[float],
    m: Optional[int] = None,
    n: Optional[int] = None,
) -> List[float]:
    """
    Solve A.x = b from the singular value decomposition of A.

    Args:
        u: U from svd() (the overwritten A), m x n
        w: Singular values
        v: V from svd(), n x n
        b: Right-hand side, length m
        m: Logical rows (default: len(u))
        n: Logical columns (default: len(w))

    Returns:
        List[float]: Solution x (length n)

    Note:
        Terms with a zero singular value are dropped rather than divided by,
        which is what makes this usable for rank-deficient systems. Zeroing
        small singular values before the call is the caller's job. For an
        over-determined system x is the least-squares solution.
    """
    if m is None:
        m = len(u)
    if n is None:
        n = len(w)

    # U^T.b / W, with 1/0 taken as 0
    ws = [0.0] * n
    for j in range(n):
        if w[j] != 0.0:
            s = 0.0
            for i in range(m):
                s += u[i][j] * b[i]
            ws[j] = s / w[j]

    # Multiply by V
    return [sum(v[j][jj] * ws[jj] for jj in range(n)) for j in range(n)]


def svdcov(
    w: Sequence[float], v: Sequence[Sequence[float]], n: Optional[int] = None
) -> List[List[float]]:
    """
    Covariance matrix V.diag(1/W**2).V^T from a singular value decomposition.

    Args:
        w: Singular values
        v: V from svd()
        n: Logical dimension (default: len(w))

    Returns:
        List[List[float]]: n x n symmetric covariance matrix
    """
    if n is None:
        n = len(w)

    ws = [1.0 / (wi * wi) if wi != 0.0 else 0.0 for wi in w[:n]]

    cvm = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1):
            s = 0.0
            for k in range(n):
                s += v[i][k] * v[j][k] * ws[k]
            cvm[i][j] = s
            cvm[j][i] = s
    return cvm
