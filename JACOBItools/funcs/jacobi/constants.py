from numba import types

##############################################################################
# Global constants
##############################################################################

DEFAULT_PRECISION = 1e-12       # convergence tolerance, scaled by 1/N
DEGENERATE_TOLERANCE = 1e-14    # |ajj - aii| below this gives theta = pi/4
NO_ITERATION_LIMIT = -1         # kernel sentinel for an uncapped loop
MPMATH_GUARD_DIGITS = 10        # extra digits for Decimal trigonometry

FLOATING = "floating"
ARBITRARY_PRECISION = "arbitrary-precision"
RATIONAL = "rational"
FAMILIES = (FLOATING, ARBITRARY_PRECISION, RATIONAL)

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signature for a single Jacobi rotation applied in place
jacobi_rotate_sig_64 = types.void(
    types.float64[:,:],           # x: working matrix (N, N)
    types.float64[:,:],           # S: accumulated transform (N, N)
    types.float64,                # theta: rotation angle
    types.int64,                  # i: pivot row
    types.int64,                  # j: pivot column
)

# Signature for the ascending selection sort of the spectrum
sort_spectrum_sig_64 = types.void(
    types.float64[:,:],           # x: converged working matrix (N, N)
    types.float64[:,:],           # S: accumulated transform (N, N)
    types.float64[:],             # values: output eigenvalues (N,)
    types.float64[:,:],           # vectors: output eigenvectors (N, N)
)

# Signature for a field of symmetric matrices
jacobi_field_sig_64 = types.void(
    types.float64[:,:,:],         # matrices: (M, N, N)
    types.float64,                # tolerance: precision / N
    types.int64,                  # max_iterations: NO_ITERATION_LIMIT for none
    types.float64[:,:],           # values: (M, N)
    types.float64[:,:,:],         # vectors: (M, N, N)
    types.int64[:],               # rotations: (M,)
    types.boolean[:],             # converged: (M,)
)
