"""
JACOBItools Jacobi Eigenvalue Module

Provides the full eigen-decomposition of real symmetric matrices with the
classical Jacobi rotation algorithm: all eigenvalues in ascending order and
an orthogonal matrix whose columns are the matching eigenvectors.

Features:
- Numba-compiled fast path for float matrices
- Generic path for decimal.Decimal (arbitrary precision) and
  fractions.Fraction (rational) matrices, keeping the input number type
- Parallel decomposition of symmetric tensor fields (N, N, ...)
- joblib batch decomposition of independent matrices
"""

# Import main classes
from .operations import JacobiOperations, EigsResult, eigs
from .errors import ShapeError, ConvergenceError
from .arithmetic import (
    Arithmetic,
    FloatArithmetic,
    DecimalArithmetic,
    FractionArithmetic,
    provider_for
)

# Import core functions for advanced users
from .core_functions import (
    max_offdiagonal_nb_core,
    rotation_angle_nb_core,
    jacobi_rotate_nb_core,
    jacobi_diagonalize_nb_core,
    sort_spectrum_nb_core,
    jacobi_field_nb_core,
    max_offdiagonal_generic_core,
    rotation_angle_generic_core,
    jacobi_rotate_generic_core,
    jacobi_diagonalize_generic_core,
    sort_spectrum_generic_core
)

# Version info
__version__ = "0.1.0"
__author__ = "James R. Beattie"

# Define public API
__all__ = [
    'JacobiOperations',
    'EigsResult',
    'eigs',
    'ShapeError',
    'ConvergenceError',
    'Arithmetic',
    'FloatArithmetic',
    'DecimalArithmetic',
    'FractionArithmetic',
    'provider_for',
    # Core functions for advanced use
    'max_offdiagonal_nb_core',
    'rotation_angle_nb_core',
    'jacobi_rotate_nb_core',
    'jacobi_diagonalize_nb_core',
    'sort_spectrum_nb_core',
    'jacobi_field_nb_core',
    'max_offdiagonal_generic_core',
    'rotation_angle_generic_core',
    'jacobi_rotate_generic_core',
    'jacobi_diagonalize_generic_core',
    'sort_spectrum_generic_core'
]
