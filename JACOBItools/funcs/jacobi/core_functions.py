from numba import njit, prange
import numpy as np
from .constants import *

##########################################################################################
# Core numba JIT functions for the Jacobi eigenvalue algorithm (float64 fast path)
##########################################################################################


@njit(cache=True)
def max_offdiagonal_nb_core(x):
    """
    Largest |x[i, j]| over the open upper triangle (i < j), scanned row-major.
    A strict comparison keeps the first pivot on ties.

    Args:
        x: Working matrix (N, N)

    Returns:
        (i, j, magnitude) of the pivot; (0, 1, 0.0) when N < 2
    """
    N = x.shape[0]
    max_val = 0.0
    p = 0
    q = 1
    for i in range(N):
        for j in range(i + 1, N):
            val = abs(x[i, j])
            if val > max_val:
                max_val = val
                p = i
                q = j
    return p, q, max_val


@njit(cache=True)
def rotation_angle_nb_core(aii, ajj, aij):
    """
    Angle that annihilates aij:  theta = 0.5 * atan(2 aij / (ajj - aii)),
    or pi/4 when the diagonal entries are (nearly) equal.
    """
    denom = ajj - aii
    if abs(denom) <= DEGENERATE_TOLERANCE:
        return np.pi / 4.0
    return 0.5 * np.arctan(2.0 * aij / denom)


@njit(jacobi_rotate_sig_64, cache=True)
def jacobi_rotate_nb_core(x, S, theta, i, j):
    """
    Apply the rotation (i, j, theta) in place: x <- J^T x J and S <- S J.

    Rows i and j are read into buffers before any write, so every update
    uses the pre-rotation values.

    Args:
        x: Working matrix (N, N), symmetric
        S: Accumulated transform (N, N)
        theta: Rotation angle
        i, j: Pivot indices, i < j
    """
    N = x.shape[0]
    c = np.cos(theta)
    s = np.sin(theta)
    c2 = c * c
    s2 = s * s
    cs = c * s

    aii = x[i, i]
    ajj = x[j, j]
    aij = x[i, j]

    row_i = np.empty(N)
    row_j = np.empty(N)
    for k in range(N):
        row_i[k] = c * x[i, k] - s * x[j, k]
        row_j[k] = s * x[i, k] + c * x[j, k]

    x[i, i] = c2 * aii - 2.0 * cs * aij + s2 * ajj
    x[j, j] = s2 * aii + 2.0 * cs * aij + c2 * ajj
    x[i, j] = 0.0
    x[j, i] = 0.0
    for k in range(N):
        if k != i and k != j:
            x[i, k] = row_i[k]
            x[k, i] = row_i[k]
            x[j, k] = row_j[k]
            x[k, j] = row_j[k]

    for k in range(N):
        ski = S[k, i]
        skj = S[k, j]
        S[k, i] = c * ski - s * skj
        S[k, j] = s * ski + c * skj


@njit(cache=True)
def jacobi_diagonalize_nb_core(x, S, tolerance, max_iterations):
    """
    Rotate at the current pivot until the largest off-diagonal magnitude
    drops below tolerance.

    Args:
        x: Working matrix (N, N), overwritten with the (unsorted) diagonal form
        S: Accumulated transform (N, N), must start as the identity
        tolerance: |precision / N|
        max_iterations: rotation cap, NO_ITERATION_LIMIT for none

    Returns:
        (rotations, converged, remaining off-diagonal magnitude)
    """
    i, j, off = max_offdiagonal_nb_core(x)
    rotations = 0
    while off >= tolerance:
        if max_iterations != NO_ITERATION_LIMIT and rotations >= max_iterations:
            return rotations, False, off
        theta = rotation_angle_nb_core(x[i, i], x[j, j], x[i, j])
        jacobi_rotate_nb_core(x, S, theta, i, j)
        rotations += 1
        i, j, off = max_offdiagonal_nb_core(x)
    return rotations, True, off


@njit(sort_spectrum_sig_64, cache=True)
def sort_spectrum_nb_core(x, S, values, vectors):
    """
    Selection sort of the diagonal of x into ascending values, moving the
    matching columns of S into vectors. Equal values keep their original
    order (the earliest remaining candidate wins).

    Args:
        x: Converged working matrix (N, N)
        S: Accumulated transform (N, N)
        values: Output eigenvalues (N,)
        vectors: Output eigenvectors (N, N), column k pairs with values[k]
    """
    N = x.shape[0]
    remaining = np.empty(N, dtype=np.int64)
    for k in range(N):
        remaining[k] = k
    n_remaining = N

    for out in range(N):
        pos = 0
        min_val = x[remaining[0], remaining[0]]
        for r in range(1, n_remaining):
            val = x[remaining[r], remaining[r]]
            if val < min_val:
                min_val = val
                pos = r
        col = remaining[pos]
        values[out] = min_val
        for k in range(N):
            vectors[k, out] = S[k, col]
        for r in range(pos, n_remaining - 1):
            remaining[r] = remaining[r + 1]
        n_remaining -= 1


@njit(jacobi_field_sig_64, parallel=True, cache=True)
def jacobi_field_nb_core(matrices, tolerance, max_iterations,
                         values, vectors, rotations, converged):
    """
    Decompose a stack of symmetric matrices, one Jacobi run per matrix.

    Args:
        matrices: Input stack (M, N, N), left untouched
        tolerance: |precision / N|
        max_iterations: rotation cap, NO_ITERATION_LIMIT for none
        values: Output eigenvalues (M, N), ascending per matrix
        vectors: Output eigenvectors (M, N, N)
        rotations: Output rotation counts (M,)
        converged: Output convergence flags (M,)
    """
    M = matrices.shape[0]
    N = matrices.shape[1]

    for m in prange(M):
        x = matrices[m].copy()
        S = np.eye(N)
        n_rot, ok, off = jacobi_diagonalize_nb_core(x, S, tolerance, max_iterations)
        rotations[m] = n_rot
        converged[m] = ok
        sort_spectrum_nb_core(x, S, values[m], vectors[m])


##########################################################################################
# Generic functions parameterised by an arithmetic provider (Decimal, Fraction, float)
##########################################################################################


def max_offdiagonal_generic_core(x, ar):
    """Pivot selection on a list-of-lists matrix in the provider's arithmetic."""
    N = len(x)
    max_val = ar.zero
    p, q = 0, 1
    for i in range(N):
        for j in range(i + 1, N):
            val = ar.absolute(x[i][j])
            if ar.less(max_val, val):
                max_val = val
                p, q = i, j
    return p, q, max_val


def rotation_angle_generic_core(aii, ajj, aij, ar):
    """
    Rotation angle in the provider's arithmetic. The near-equality test on
    the diagonal is always made on the native float of (ajj - aii).
    """
    denom = ar.subtract(ajj, aii)
    if abs(ar.to_float(denom)) <= DEGENERATE_TOLERANCE:
        return ar.quarter_pi()
    two = ar.convert(2)
    half = ar.divide(ar.one, two)
    return ar.multiply(half, ar.atan(ar.divide(ar.multiply(two, aij), denom)))


def jacobi_rotate_generic_core(x, S, theta, i, j, ar):
    """Same rotation as jacobi_rotate_nb_core, on lists, in place."""
    N = len(x)
    c = ar.cos(theta)
    s = ar.sin(theta)
    c2 = ar.multiply(c, c)
    s2 = ar.multiply(s, s)
    cs2 = ar.multiply(ar.convert(2), ar.multiply(c, s))

    aii = x[i][i]
    ajj = x[j][j]
    aij = x[i][j]

    row_i = [ar.subtract(ar.multiply(c, x[i][k]), ar.multiply(s, x[j][k])) for k in range(N)]
    row_j = [ar.add(ar.multiply(s, x[i][k]), ar.multiply(c, x[j][k])) for k in range(N)]

    x[i][i] = ar.add(ar.subtract(ar.multiply(c2, aii), ar.multiply(cs2, aij)),
                     ar.multiply(s2, ajj))
    x[j][j] = ar.add(ar.add(ar.multiply(s2, aii), ar.multiply(cs2, aij)),
                     ar.multiply(c2, ajj))
    x[i][j] = ar.zero
    x[j][i] = ar.zero
    for k in range(N):
        if k != i and k != j:
            x[i][k] = row_i[k]
            x[k][i] = row_i[k]
            x[j][k] = row_j[k]
            x[k][j] = row_j[k]

    for row in S:
        ski = row[i]
        skj = row[j]
        row[i] = ar.subtract(ar.multiply(c, ski), ar.multiply(s, skj))
        row[j] = ar.add(ar.multiply(s, ski), ar.multiply(c, skj))


def jacobi_diagonalize_generic_core(x, S, tolerance, max_iterations, ar):
    """
    Convergence loop of the generic path.

    Returns:
        (rotations, converged, remaining off-diagonal magnitude)
    """
    i, j, off = max_offdiagonal_generic_core(x, ar)
    rotations = 0
    while not ar.less(off, tolerance):
        if max_iterations is not None and rotations >= max_iterations:
            return rotations, False, off
        theta = rotation_angle_generic_core(x[i][i], x[j][j], x[i][j], ar)
        jacobi_rotate_generic_core(x, S, theta, i, j, ar)
        rotations += 1
        i, j, off = max_offdiagonal_generic_core(x, ar)
    return rotations, True, off


def sort_spectrum_generic_core(x, S, ar):
    """
    Ascending selection sort of the diagonal of x with the matching
    columns of S.

    Returns:
        (values, vectors) as lists, column k of vectors pairs with values[k]
    """
    N = len(x)
    remaining = [(x[k][k], k) for k in range(N)]
    values = []
    vectors = [[None] * N for _ in range(N)]
    for out in range(N):
        pos = 0
        for r in range(1, len(remaining)):
            if ar.less(remaining[r][0], remaining[pos][0]):
                pos = r
        val, col = remaining.pop(pos)
        values.append(val)
        for k in range(N):
            vectors[k][out] = S[k][col]
    return values, vectors


def identity_generic_core(N, ar):
    return [[ar.one if i == j else ar.zero for j in range(N)] for i in range(N)]
