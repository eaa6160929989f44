"""
JACOBItools: Matrix validation

Size, element classification and symmetry checks performed before any
Jacobi rotation. Everything here raises eagerly; nothing is mutated.

Author: James R. Beattie

"""

import numbers
from decimal import Decimal
from fractions import Fraction
from typing import List, Tuple

import numpy as np

from .constants import *
from .errors import ShapeError


def matrix_size(x) -> List[int]:
    """
    Shape of a matrix given as an ndarray or nested sequences.

    Every nesting level is measured, so a 3-D nested list reports three sizes.

    Raises:
        TypeError: if x is a scalar or a string
        ShapeError: if nested rows have different shapes
    """
    if isinstance(x, np.ndarray):
        return list(x.shape)
    if not isinstance(x, (list, tuple)):
        raise TypeError(f"Unexpected type of argument in function eigs "
                        f"(expected: Array or Matrix, actual: {type(x).__name__})")
    if len(x) == 0:
        return [0, 0]
    return _nested_size(x)


def _nested_size(x) -> List[int]:
    nested = [isinstance(item, (list, tuple)) for item in x]
    if not any(nested):
        return [len(x)]
    if not all(nested):
        raise ShapeError("Dimension mismatch: mixed scalars and rows")
    sizes = [_nested_size(row) for row in x]
    if any(size != sizes[0] for size in sizes):
        raise ShapeError(f"Dimension mismatch: row sizes {sizes}")
    return [len(x)] + sizes[0]


def check_square(x) -> int:
    """Return N for an N x N matrix, else raise ShapeError."""
    size = matrix_size(x)
    if len(size) != 2 or size[0] != size[1]:
        raise ShapeError(f"Matrix must be square (size: {size})")
    return size[0]


def _element_family(value) -> str:
    # None marks an integer, which joins whatever family surrounds it
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"Unsupported element type in matrix: {type(value).__name__}")
    if isinstance(value, Decimal):
        return ARBITRARY_PRECISION
    if isinstance(value, Fraction):
        return RATIONAL
    if isinstance(value, numbers.Integral):
        return None
    if isinstance(value, (float, np.floating)):
        return FLOATING
    raise TypeError(f"Unsupported element type in matrix: {type(value).__name__}")


def classify_elements(x) -> str:
    """
    Numeric family of the matrix elements.

    Integers are exact in every family, so they take the family of the other
    elements; an all-integer matrix is floating.

    Returns:
        str: FLOATING, ARBITRARY_PRECISION or RATIONAL

    Raises:
        TypeError: on unsupported or mixed element types
    """
    if isinstance(x, np.ndarray) and x.dtype != object:
        if x.dtype.kind in "iuf":
            return FLOATING
        raise TypeError(f"Unsupported element type in matrix: {x.dtype}")

    families = set()
    for row in x:
        for value in row:
            family = _element_family(value)
            if family is not None:
                families.add(family)
    if len(families) > 1:
        raise TypeError(f"Mixed element types in matrix: {sorted(families)}")
    if not families:
        return FLOATING
    return families.pop()


def to_array(x, family: str, arithmetic=None):
    """
    Fresh working copy of x: a float64 ndarray for FLOATING, otherwise a
    list of lists with integers converted into the family.
    """
    if family == FLOATING:
        return np.array(x, dtype=np.float64)
    return [[arithmetic.convert(value) if not isinstance(value, (Decimal, Fraction))
             else value for value in row] for row in x]


def check_symmetric(a, family: str) -> None:
    """
    Exact equality of a[i][j] and a[j][i] over the strict upper triangle.
    Run on the caller's elements, before any cast to float64.

    Raises:
        TypeError: at the first (row-major) mismatch
    """
    N = len(a)
    if family == FLOATING and isinstance(a, np.ndarray):
        iu = np.triu_indices(N, 1)
        mismatch = np.flatnonzero(a[iu] != a.T[iu])
        if mismatch.size:
            i, j = iu[0][mismatch[0]], iu[1][mismatch[0]]
            raise TypeError(f"Input matrix is not symmetric "
                            f"(x[{i}][{j}] = {a[i, j]!r}, x[{j}][{i}] = {a[j, i]!r})")
        return
    for i in range(N):
        for j in range(i + 1, N):
            if a[i][j] != a[j][i]:
                raise TypeError(f"Input matrix is not symmetric "
                                f"(x[{i}][{j}] = {a[i][j]!r}, x[{j}][{i}] = {a[j][i]!r})")


def validate(x) -> Tuple[int, str]:
    """
    Square check, then classification. Returns (N, family).
    Symmetry is checked on the working copy by the caller.
    """
    N = check_square(x)
    return N, classify_elements(x)
