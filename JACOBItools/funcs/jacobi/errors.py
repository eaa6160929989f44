"""
Exceptions raised by the Jacobi eigenvalue module.
"""


class ShapeError(ValueError):
    """Input is not a square two dimensional matrix."""


class ConvergenceError(RuntimeError):
    """
    The rotation cap was reached before the largest off-diagonal element
    fell below the convergence tolerance.
    """

    def __init__(self, rotations, off_diagonal, tolerance):
        self.rotations = rotations
        self.off_diagonal = off_diagonal
        self.tolerance = tolerance
        message = f"Jacobi iteration did not converge after {rotations} rotations"
        if off_diagonal is not None:
            message += f" (max off-diagonal {off_diagonal!r} >= tolerance {tolerance!r})"
        super().__init__(message)
