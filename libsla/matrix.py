"""
Linear system solver for libsla.

Gauss-Jordan elimination with partial pivoting. The matrix is inverted in
place, the right-hand-side vector is replaced by the solution and the
determinant is returned alongside a singularity flag.

Two precisions are provided:
- dmat: IEEE double precision (Python float)
- smat: IEEE single precision (numpy.float32), with a singularity threshold
  sized for float32

Matrices are lists of row lists. The optional argument n selects the leading
n x n block of a larger allocation.

References:
    Gauss-Jordan with partial pivoting as used by the SLALIB fitting routines
    (sla_DMAT / sla_SMAT).
"""

import logging
from typing import Callable, List, NamedTuple, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Pivot and running-determinant threshold for double precision
DMAT_EPSILON = 1.0e-20

# Smallest normal float32: any pivot that does not underflow is accepted
SMAT_EPSILON = float(np.finfo(np.float32).tiny)


class MatrixSolution(NamedTuple):
    """
    Outcome of a dmat/smat call.

    Attributes:
        det: Determinant (exactly 0.0 when singular)
        singular: True if the matrix was found to be singular; the contents
            of the matrix and vector are then undefined
        ws: Pivot record, ws[k] is the row swapped into position k
    """

    det: float
    singular: bool
    ws: List[int]


def _logical_size(
    matrix: Sequence[Sequence[float]], vector: Sequence[float], n: Optional[int]
) -> int:
    """Resolve and validate the logical dimension against the storage."""
    size = len(matrix) if n is None else n
    if size < 0 or size > len(matrix) or size > len(vector):
        raise ValueError(
            f"Logical dimension {size} exceeds storage "
            f"({len(matrix)} rows, {len(vector)} vector elements)"
        )
    for row in matrix[:size]:
        if len(row) < size:
            raise ValueError(
                f"Logical dimension {size} exceeds row length {len(row)}"
            )
    return size


def _gauss_jordan(
    mat: List[list],
    vec: list,
    n: int,
    cast: Callable,
    epsilon: float,
) -> MatrixSolution:
    """
    Core elimination, carried out in the arithmetic of ``cast``.

    ``mat`` and ``vec`` hold values already converted with ``cast``.
    """
    tiny = cast(epsilon)
    one = cast(1.0)
    singular = False
    det = cast(1.0)
    ws = list(range(n))

    for k in range(n):
        # Partial pivoting: largest magnitude in column k, rows k..n-1
        amx = abs(mat[k][k])
        imx = k
        for i in range(k + 1, n):
            t = abs(mat[i][k])
            if t > amx:
                amx = t
                imx = i

        if amx < tiny:
            singular = True
            logger.debug("Singular matrix: pivot %d below %g", k, epsilon)
            continue

        if imx != k:
            mat[k], mat[imx] = mat[imx], mat[k]
            vec[k], vec[imx] = vec[imx], vec[k]
            det = -det
        ws[k] = imx

        akk = mat[k][k]
        det = det * akk
        if abs(det) < tiny:
            singular = True
            logger.debug("Singular matrix: determinant below %g at column %d", epsilon, k)
            continue

        # Normalise the pivot row
        akk = one / akk
        mat[k][k] = akk
        row_k = mat[k]
        for j in range(n):
            if j != k:
                row_k[j] = row_k[j] * akk
        yk = vec[k] * akk
        vec[k] = yk

        # Eliminate column k from every other row and from the vector
        for i in range(n):
            if i == k:
                continue
            row_i = mat[i]
            aik = row_i[k]
            for j in range(n):
                if j != k:
                    row_i[j] = row_i[j] - aik * row_k[j]
            vec[i] = vec[i] - aik * yk
        for i in range(n):
            if i != k:
                mat[i][k] = -mat[i][k] * akk

    if singular:
        return MatrixSolution(0.0, True, ws)

    # Undo the row interchanges on the columns of the inverse
    for k in range(n - 1, -1, -1):
        ki = ws[k]
        if ki != k:
            for row in mat:
                row[k], row[ki] = row[ki], row[k]

    return MatrixSolution(float(det), False, ws)


def _solve_in_place(
    matrix: List[List[float]],
    vector: List[float],
    n: Optional[int],
    cast: Callable,
    epsilon: float,
) -> MatrixSolution:
    size = _logical_size(matrix, vector, n)

    mat = [[cast(matrix[i][j]) for j in range(size)] for i in range(size)]
    vec = [cast(vector[i]) for i in range(size)]

    result = _gauss_jordan(mat, vec, size, cast, epsilon)

    # Write back into the caller's storage, leaving anything outside the
    # logical block untouched
    for i in range(size):
        row = matrix[i]
        for j in range(size):
            row[j] = float(mat[i][j])
        vector[i] = float(vec[i])

    return result


def dmat(
    matrix: List[List[float]], vector: List[float], n: Optional[int] = None
) -> MatrixSolution:
    """
    Solve A.x = b in double precision, inverting A in place.

    Args:
        matrix: Square matrix A (list of rows); replaced by its inverse
        vector: Right-hand side b; replaced by the solution x
        n: Logical dimension (default: number of rows of matrix)

    Returns:
        MatrixSolution: (det, singular, ws)

    Raises:
        ValueError: If n exceeds the storage of matrix or vector

    Note:
        Singularity is a normal outcome reported through the flag: the
        determinant is then 0.0 and matrix/vector contents are undefined.
        A pivot or running determinant below 1e-20 in magnitude marks the
        matrix singular; processing continues so the exit state is defined.

    Examples:
        >>> a = [[2.0, 0.0], [0.0, 4.0]]
        >>> b = [2.0, 2.0]
        >>> dmat(a, b).det
        8.0
        >>> b
        [1.0, 0.5]
    """
    return _solve_in_place(matrix, vector, n, float, DMAT_EPSILON)


def smat(
    matrix: List[List[float]], vector: List[float], n: Optional[int] = None
) -> MatrixSolution:
    """
    Solve A.x = b in single precision, inverting A in place.

    Identical to dmat() except that all arithmetic is carried out in
    numpy.float32. Results are written back as Python floats holding
    float32 values.

    Args:
        matrix: Square matrix A (list of rows); replaced by its inverse
        vector: Right-hand side b; replaced by the solution x
        n: Logical dimension (default: number of rows of matrix)

    Returns:
        MatrixSolution: (det, singular, ws)

    Note:
        The singularity threshold is the smallest normal float32
        (about 1.18e-38). A pivot that underflows to zero in float32 is
        therefore always reported singular, even where dmat() would still
        find a usable (if ill-conditioned) double precision pivot.
    """
    return _solve_in_place(matrix, vector, n, np.float32, SMAT_EPSILON)
