from numba import njit
import numpy as np
import math
import cmath
from .constants import *

##########################################################################################
# Core numba JIT functions for eigenvalue operations
##########################################################################################


@njit([is_offdiagonal_small_sig_64, is_offdiagonal_small_sig_c128], cache=True)
def is_offdiagonal_small_nb_core(matrix, j, tol):
    """
    Deflation test for the subdiagonal entry (j+1, j).

    The entry is negligible when it is small relative to the two adjacent
    diagonal entries:

        |H[j+1, j]| <= tol * (|H[j, j]| + |H[j+1, j+1]|)

    Args:
        matrix: Hessenberg matrix (n, n)
        j: Column of the subdiagonal entry, 0 <= j < n - 1
        tol: Relative tolerance (machine epsilon by default in the callers)

    Returns:
        True if the matrix may be split between rows j and j+1
    """
    return abs(matrix[j + 1, j]) <= tol * (abs(matrix[j, j]) + abs(matrix[j + 1, j + 1]))


@njit([eigenvalues_2x2_real_sig_64], cache=True)
def eigenvalues_2x2_real_nb_core(a, b, c, d):
    """
    Eigenvalues of the real 2x2 block [[a, b], [c, d]].

    With p = (a - d) / 2 the eigenvalues are d + z where z solves
    z^2 - 2 p z - b c = 0. The discriminant p^2 + b c is evaluated in a
    scaled form, and the larger root z = p + sign(p) * sqrt(p^2 + b c) is formed
    without cancellation; the second root follows from z1 * z2 = -b c.

    Args:
        a, b, c, d: Block entries

    Returns:
        (lambda1, lambda2): For real eigenvalues lambda1 = d + z1, lambda2 = d + z2.
                            For a complex-conjugate pair the eigenvalue with
                            positive imaginary part comes first.
    """
    p = 0.5 * (a - d)
    bcmax = max(abs(b), abs(c))
    bcmis = min(abs(b), abs(c)) * math.copysign(1.0, b) * math.copysign(1.0, c)
    scale = max(abs(p), bcmax)
    if scale == 0.0:
        return complex(a, 0.0), complex(d, 0.0)

    # (p^2 + b c) / scale
    z = (p / scale) * p + (bcmax / scale) * bcmis
    if z >= 0.0:
        # Real eigenvalues
        z = p + math.copysign(math.sqrt(scale) * math.sqrt(z), p)
        lambda1 = d + z
        if z == 0.0:
            # p == 0 and b c == 0: double eigenvalue
            lambda2 = d
        else:
            lambda2 = d - (bcmax / z) * bcmis
        return complex(lambda1, 0.0), complex(lambda2, 0.0)

    # Complex-conjugate pair
    real_part = d + p
    imag_part = math.sqrt(scale) * math.sqrt(-z)
    return complex(real_part, imag_part), complex(real_part, -imag_part)


@njit([eigenvalues_2x2_complex_sig_c128], cache=True)
def eigenvalues_2x2_complex_nb_core(a, b, c, d):
    """
    Eigenvalues of the complex 2x2 block [[a, b], [c, d]].

    Same parametrisation as the real case, lambda = d + z with
    z^2 - 2 p z - b c = 0, using the complex square root. The sign of the root
    is chosen so that |z1| is maximal, and z2 = -b c / z1.

    Args:
        a, b, c, d: Block entries

    Returns:
        (lambda1, lambda2): lambda2 is the eigenvalue closest to d
    """
    p = 0.5 * (a - d)
    bc = b * c
    root = cmath.sqrt(p * p + bc)
    if (p.conjugate() * root).real < 0.0:
        root = -root
    z = p + root
    if abs(z) == 0.0:
        return d, d
    return d + z, d - bc / z


@njit([quasi_triangular_eigenvalues_sig_64], cache=True)
def quasi_triangular_eigenvalues_real_nb_core(matrix, lo, hi, tol, eigenvalues):
    """
    Read the eigenvalues off the diagonal blocks of a real quasi-triangular range.

    Args:
        matrix: Quasi-upper-triangular matrix (n, n)
        lo, hi: Inclusive range of the block
        tol: Deflation tolerance used to tell 1x1 from 2x2 blocks
        eigenvalues: Output (hi - lo + 1,), in diagonal order
    """
    i = lo
    while i <= hi:
        if i == hi or is_offdiagonal_small_nb_core(matrix, i, tol):
            eigenvalues[i - lo] = matrix[i, i]
            i += 1
        else:
            lambda1, lambda2 = eigenvalues_2x2_real_nb_core(
                matrix[i, i], matrix[i, i + 1], matrix[i + 1, i], matrix[i + 1, i + 1])
            eigenvalues[i - lo] = lambda1
            eigenvalues[i - lo + 1] = lambda2
            i += 2


@njit([quasi_triangular_eigenvalues_sig_c128], cache=True)
def quasi_triangular_eigenvalues_complex_nb_core(matrix, lo, hi, tol, eigenvalues):
    """
    Complex counterpart of quasi_triangular_eigenvalues_real_nb_core.

    A fully converged complex Schur factor only has 1x1 blocks; 2x2 blocks
    only show up in partially reduced input.
    """
    i = lo
    while i <= hi:
        if i == hi or is_offdiagonal_small_nb_core(matrix, i, tol):
            eigenvalues[i - lo] = matrix[i, i]
            i += 1
        else:
            lambda1, lambda2 = eigenvalues_2x2_complex_nb_core(
                matrix[i, i], matrix[i, i + 1], matrix[i + 1, i], matrix[i + 1, i + 1])
            eigenvalues[i - lo] = lambda1
            eigenvalues[i - lo + 1] = lambda2
            i += 2


##########################################################################################
# NumPy fallback functions
##########################################################################################


def is_offdiagonal_small_np_core(
    matrix: np.ndarray,
    j: int,
    tol: float) -> bool:
    """
    NumPy fallback for the deflation test of the subdiagonal entry (j+1, j).
    """
    return bool(np.abs(matrix[j + 1, j]) <= tol * (np.abs(matrix[j, j]) + np.abs(matrix[j + 1, j + 1])))


def block_eigenvalues_np_core(
    block: np.ndarray) -> np.ndarray:
    """
    NumPy fallback for the eigenvalues of a 1x1 or 2x2 block.

    Args:
        block: Array of shape (1, 1) or (2, 2)

    Returns:
        eigenvalues: complex128 array of shape (block.shape[0],)
    """
    return np.linalg.eigvals(block).astype(np.complex128)


def quasi_triangular_eigenvalues_np_core(
    matrix: np.ndarray,
    lo: int,
    hi: int,
    tol: float) -> np.ndarray:
    """
    NumPy fallback for the eigenvalues of a quasi-triangular range [lo, hi].

    Returns:
        eigenvalues: complex128 array of shape (hi - lo + 1,), in diagonal order
    """
    eigenvalues = np.empty(hi - lo + 1, dtype=np.complex128)
    i = lo
    while i <= hi:
        if i == hi or is_offdiagonal_small_np_core(matrix, i, tol):
            eigenvalues[i - lo] = matrix[i, i]
            i += 1
        else:
            eigenvalues[i - lo:i - lo + 2] = block_eigenvalues_np_core(matrix[i:i + 2, i:i + 2])
            i += 2
    return eigenvalues
