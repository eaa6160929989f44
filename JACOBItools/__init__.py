"""
JACOBItools

Jacobi eigen-decomposition of real symmetric matrices in floating point,
arbitrary precision Decimal and rational Fraction arithmetic.
"""

from .funcs.jacobi import (
    JacobiOperations,
    EigsResult,
    eigs,
    ShapeError,
    ConvergenceError
)

__version__ = "0.1.0"

__all__ = [
    'JacobiOperations',
    'EigsResult',
    'eigs',
    'ShapeError',
    'ConvergenceError'
]
