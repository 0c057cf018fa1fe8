import numpy as np
from numba import types

##############################################################################
# Global constants
##############################################################################

EPSILON = np.finfo(np.float64).eps     # default deflation tolerance
SAFE_MIN = np.finfo(np.float64).tiny   # smallest normal float64

##############################################################################
# Type signatures for Numba functions
##############################################################################

# Signatures for the deflation test on a subdiagonal entry
is_offdiagonal_small_sig_64 = types.boolean(
    types.float64[:,:],           # matrix: (n, n)
    types.int64,                  # j: subdiagonal entry (j+1, j)
    types.float64,                # tol
)
is_offdiagonal_small_sig_c128 = types.boolean(
    types.complex128[:,:],        # matrix: (n, n)
    types.int64,                  # j: subdiagonal entry (j+1, j)
    types.float64,                # tol
)

# Signatures for eigenvalues of a single 2x2 block given by its entries
eigenvalues_2x2_real_sig_64 = types.UniTuple(types.complex128, 2)(
    types.float64,                # a: (0, 0)
    types.float64,                # b: (0, 1)
    types.float64,                # c: (1, 0)
    types.float64,                # d: (1, 1)
)
eigenvalues_2x2_complex_sig_c128 = types.UniTuple(types.complex128, 2)(
    types.complex128,             # a: (0, 0)
    types.complex128,             # b: (0, 1)
    types.complex128,             # c: (1, 0)
    types.complex128,             # d: (1, 1)
)

# Signatures for eigenvalues of a quasi-upper-triangular range [lo, hi]
quasi_triangular_eigenvalues_sig_64 = types.void(
    types.float64[:,:],           # matrix: (n, n)
    types.int64,                  # lo
    types.int64,                  # hi
    types.float64,                # tol
    types.complex128[:],          # eigenvalues: (hi - lo + 1,)
)
quasi_triangular_eigenvalues_sig_c128 = types.void(
    types.complex128[:,:],        # matrix: (n, n)
    types.int64,                  # lo
    types.int64,                  # hi
    types.float64,                # tol
    types.complex128[:],          # eigenvalues: (hi - lo + 1,)
)
