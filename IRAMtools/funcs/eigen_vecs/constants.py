import numpy as np
from numba import types

##############################################################################
# Global constants
##############################################################################

EPSILON = np.finfo(np.float64).eps     # default pivot perturbation tolerance
SAFE_MIN = np.finfo(np.float64).tiny   # pivot floor when the matrix and shift vanish

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signatures for the shifted back-substitution (R - shift I) x = rhs
backward_subst_sig_64 = types.void(
    types.float64[:,:],           # R: (k, k) quasi-upper-triangular
    types.float64,                # shift
    types.float64[:],             # rhs: (>= k,), overwritten with x
    types.float64,                # tol
)
backward_subst_sig_c128 = types.void(
    types.complex128[:,:],        # R: (k, k) upper-triangular
    types.complex128,             # shift
    types.complex128[:],          # rhs: (>= k,), overwritten with x
    types.float64,                # tol
)
backward_subst_sig_64_c128 = types.void(
    types.float64[:,:],           # R: (k, k) real quasi-upper-triangular
    types.complex128,             # shift: e.g. one eigenvalue of a conjugate pair
    types.complex128[:],          # rhs: (>= k,), overwritten with x
    types.float64,                # tol
)

# Signature for the eigenvector of a trailing complex-conjugate 2x2 block
conjugate_pair_eigenvector_sig_64 = types.void(
    types.float64[:,:],           # R: (n, n) real quasi-upper-triangular
    types.complex128[:],          # out: (n,)
    types.float64,                # tol
)
