"""
JACOBItools: Jacobi Eigenvalue Operations

This module computes the full spectrum of real symmetric matrices with the
classical Jacobi rotation algorithm. Floating point matrices run through
Numba compiled kernels; Decimal and Fraction matrices run through the same
control flow in their own arithmetic, so arbitrary precision and rational
inputs keep their number type end to end.

Author: James R. Beattie

"""

from decimal import getcontext, localcontext
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed

from .arithmetic import FloatArithmetic, provider_for
from .constants import *
from .core_functions import *
from .errors import ConvergenceError, ShapeError
from .validation import check_square, check_symmetric, classify_elements, to_array
from ...logging import get_logger

logger = get_logger(__name__)


class EigsResult(NamedTuple):
    """Eigenvalues in ascending order; column k of vectors belongs to values[k]."""
    values: object
    vectors: object


class JacobiOperations:
    """
    A class to compute eigenvalues and eigenvectors of real symmetric matrices.

    This class provides methods for:
    - Decomposing a single matrix of floats, Decimals or Fractions
    - Computing eigenvalues only
    - Decomposing a field of symmetric matrices (N, N, ...)
    - Decomposing a batch of independent matrices in parallel
    """

    def __init__(
        self,
        use_numba: bool = True,
        precision: float = DEFAULT_PRECISION,
        max_iterations: Optional[int] = None,
        decimal_precision: Optional[int] = None,
        n_jobs: int = 1):
        """
        Initialize the JacobiOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions for float input. Defaults to True.
            precision (float, optional): Convergence tolerance before scaling by 1/N. Defaults to 1e-12.
            max_iterations (int, optional): Rotation cap per matrix. Defaults to None (no cap).
            decimal_precision (int, optional): Significant digits for Decimal input.
                Defaults to None (the caller's decimal context at call time).
            n_jobs (int, optional): joblib workers for eigs_batch. Defaults to 1.
        """
        self._check_precision(precision)
        if max_iterations is not None and max_iterations < 0:
            raise ValueError("max_iterations must be None or a non-negative integer")
        if decimal_precision is not None and decimal_precision < 1:
            raise ValueError("decimal_precision must be a positive integer")
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")

        self.use_numba = use_numba
        self.precision = precision
        self.max_iterations = max_iterations
        self.decimal_precision = decimal_precision
        self.n_jobs = n_jobs


    @staticmethod
    def _check_precision(precision) -> None:
        if not precision > 0:
            raise ValueError(f"precision must be positive. Got {precision!r}")


    def eigs(
        self,
        matrix,
        precision: Optional[float] = None) -> EigsResult:
        """
        Compute eigenvalues and eigenvectors of a real symmetric matrix.

        Args:
            matrix: Square symmetric matrix, as an ndarray or nested sequences of
                floats/ints, Decimals or Fractions (one family per matrix)
            precision (float, optional): Overrides the instance precision for this call.

        Returns:
            EigsResult: (values, vectors). ndarray input gives ndarrays, nested
                sequences give nested lists; Decimal/Fraction input keeps its type.

        Raises:
            ShapeError: if the matrix is not square
            TypeError: on unsupported, mixed or non-symmetric input
            ConvergenceError: if max_iterations is reached
        """
        if precision is None:
            precision = self.precision
        else:
            self._check_precision(precision)

        N = check_square(matrix)
        family = classify_elements(matrix)
        as_array = isinstance(matrix, np.ndarray)

        if N == 0:
            logger.debug("Empty matrix, nothing to decompose")
            if as_array:
                dtype = np.float64 if family == FLOATING else object
                return EigsResult(np.empty(0, dtype=dtype), np.empty((0, 0), dtype=dtype))
            return EigsResult([], [])

        if family == FLOATING:
            check_symmetric(matrix, FLOATING)

        if family == FLOATING and self.use_numba:
            values, vectors = self._eigs_numba(to_array(matrix, FLOATING), precision)
            if as_array:
                return EigsResult(values, vectors)
            return EigsResult(values.tolist(), vectors.tolist())

        if family == FLOATING:
            ar = FloatArithmetic()
            x = to_array(matrix, FLOATING)
            values, vectors = self._eigs_generic(x.tolist(), precision, ar)
        else:
            prec = self._resolve_decimal_precision()
            ar = provider_for(family, prec)
            with localcontext() as ctx:
                ctx.prec = prec
                x = to_array(matrix, family, ar)
                check_symmetric(x, family)
                values, vectors = self._eigs_generic(x, precision, ar)

        if as_array:
            dtype = np.float64 if family == FLOATING else object
            return EigsResult(np.array(values, dtype=dtype), np.array(vectors, dtype=dtype))
        return EigsResult(values, vectors)


    def eigenvalues(
        self,
        matrix,
        precision: Optional[float] = None):
        """Ascending eigenvalues of a real symmetric matrix (see eigs)."""
        return self.eigs(matrix, precision=precision).values


    def eigs_field(
        self,
        tensor_field: np.ndarray,
        precision: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute eigenvalues and eigenvectors of a field of symmetric matrices.

        Args:
            tensor_field: Real symmetric tensor field of shape (N, N, ...)
            precision (float, optional): Overrides the instance precision for this call.

        Returns:
            eigenvalues: Array of shape (N, ...), ascending along the first axis
            eigenvectors: Array of shape (N, N, ...); eigenvectors[:, k, ...] is the
                eigenvector of eigenvalues[k, ...]
        """
        if precision is None:
            precision = self.precision
        else:
            self._check_precision(precision)

        tensor_field = np.asarray(tensor_field)
        if tensor_field.ndim < 2 or tensor_field.shape[0] != tensor_field.shape[1]:
            raise ShapeError(f"Tensor must be square (first two dimensions must match, "
                             f"shape: {list(tensor_field.shape)})")
        if tensor_field.dtype.kind not in "iuf":
            raise TypeError(f"Tensor field must be real floating point. Got {tensor_field.dtype}")

        N = tensor_field.shape[0]
        field_shape = tensor_field.shape[2:]
        M = int(np.prod(field_shape, dtype=np.int64))
        matrices = np.ascontiguousarray(
            np.moveaxis(tensor_field, [0, 1], [-2, -1]).reshape((M, N, N)),
            dtype=np.float64)

        if not np.array_equal(matrices, np.swapaxes(matrices, 1, 2)):
            raise TypeError("Tensor field is not symmetric at every point")

        values = np.empty((M, N))
        vectors = np.empty((M, N, N))
        logger.info("Decomposing field of %d %dx%d matrices", M, N, N)

        if N > 0 and M > 0 and self.use_numba:
            rotations = np.zeros(M, dtype=np.int64)
            converged = np.ones(M, dtype=np.bool_)
            max_iter = NO_ITERATION_LIMIT if self.max_iterations is None else self.max_iterations
            jacobi_field_nb_core(matrices, abs(precision / N), max_iter,
                                 values, vectors, rotations, converged)
            if not converged.all():
                first = int(np.flatnonzero(~converged)[0])
                raise ConvergenceError(int(rotations[first]), None, abs(precision / N))
        elif N > 0:
            ar = FloatArithmetic()
            for m in range(M):
                vals, vecs = self._eigs_generic(matrices[m].tolist(), precision, ar)
                values[m] = vals
                vectors[m] = vecs

        eigenvalues = np.moveaxis(values, 0, -1).reshape((N,) + field_shape)
        eigenvectors = np.moveaxis(vectors, 0, -1).reshape((N, N) + field_shape)
        return eigenvalues, eigenvectors


    def eigs_batch(
        self,
        matrices: Sequence,
        precision: Optional[float] = None) -> List[EigsResult]:
        """
        Decompose independent symmetric matrices with joblib.

        Args:
            matrices: Sequence of matrices, each accepted by eigs
            precision (float, optional): Overrides the instance precision for this call.

        Returns:
            list of EigsResult, in input order
        """
        # workers do not share the caller's decimal context, so pin it here
        worker = JacobiOperations(
            use_numba=self.use_numba,
            precision=self.precision,
            max_iterations=self.max_iterations,
            decimal_precision=self._resolve_decimal_precision(),
            n_jobs=1)
        matrices = list(matrices)
        logger.info("Decomposing batch of %d matrices with n_jobs=%d", len(matrices), self.n_jobs)
        return Parallel(n_jobs=self.n_jobs)(
            delayed(worker.eigs)(matrix, precision) for matrix in matrices)


    def _resolve_decimal_precision(self) -> int:
        if self.decimal_precision is not None:
            return self.decimal_precision
        return getcontext().prec


    def _eigs_numba(
        self,
        x: np.ndarray,
        precision: float) -> Tuple[np.ndarray, np.ndarray]:
        N = x.shape[0]
        tolerance = abs(precision / N)
        max_iter = NO_ITERATION_LIMIT if self.max_iterations is None else self.max_iterations

        S = np.eye(N)
        rotations, converged, off = jacobi_diagonalize_nb_core(x, S, tolerance, max_iter)
        if not converged:
            raise ConvergenceError(rotations, off, tolerance)
        logger.debug("Numba path: %dx%d float64 matrix converged after %d rotations",
                     N, N, rotations)

        values = np.empty(N)
        vectors = np.empty((N, N))
        sort_spectrum_nb_core(x, S, values, vectors)
        return values, vectors


    def _eigs_generic(
        self,
        x: list,
        precision: float,
        ar) -> Tuple[list, list]:
        N = len(x)
        tolerance = ar.absolute(ar.divide(ar.convert(precision), ar.convert(N)))

        S = identity_generic_core(N, ar)
        rotations, converged, off = jacobi_diagonalize_generic_core(
            x, S, tolerance, self.max_iterations, ar)
        if not converged:
            raise ConvergenceError(rotations, off, tolerance)
        logger.debug("Generic path (%s): %dx%d matrix converged after %d rotations",
                     ar.family, N, N, rotations)
        return sort_spectrum_generic_core(x, S, ar)


def eigs(
    matrix,
    precision: float = DEFAULT_PRECISION,
    use_numba: bool = True,
    max_iterations: Optional[int] = None) -> EigsResult:
    """
    Eigenvalues (ascending) and eigenvectors (columns) of a real symmetric matrix.

        >>> values, vectors = eigs([[2, 1], [1, 2]])
    """
    return JacobiOperations(
        use_numba=use_numba,
        precision=precision,
        max_iterations=max_iterations).eigs(matrix)
