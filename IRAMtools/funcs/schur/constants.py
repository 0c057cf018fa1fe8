from numba import types

##############################################################################
# Global constants
##############################################################################

ITERATIONS_PER_ROW = 30             # default budget: shifted steps per row of the block
EXCEPTIONAL_SHIFT_PERIOD = 10       # every n-th step without deflation uses an ad hoc shift
EXCEPTIONAL_SHIFT_FACTOR = 0.75     # ad hoc shift: diagonal + 0.75 * |subdiagonal|
EXCEPTIONAL_SHIFT_OFFDIAG = -0.4375 # off-diagonal of the ad hoc 2x2 (real double shift)

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signatures for the Hessenberg-to-Schur reduction of a range [lo, hi]
local_schurfact_real_sig_64 = types.boolean(
    types.float64[:,:],           # matrix: (n, n), Hessenberg on [lo, hi]
    types.int64,                  # lo
    types.int64,                  # hi
    types.float64[:,:],           # transform: (n, n)
    types.float64,                # tol
    types.int64,                  # maxiter
)
local_schurfact_complex_sig_c128 = types.boolean(
    types.complex128[:,:],        # matrix: (n, n), Hessenberg on [lo, hi]
    types.int64,                  # lo
    types.int64,                  # hi
    types.complex128[:,:],        # transform: (n, n)
    types.float64,                # tol
    types.int64,                  # maxiter
)
