from numba import njit
import numpy as np
from .constants import *
from ..eigen_vals.core_functions import (
    eigenvalues_2x2_real_nb_core,
    block_eigenvalues_np_core
)

##########################################################################################
# Core numba JIT functions for eigenvector operations
##########################################################################################


@njit([backward_subst_sig_64, backward_subst_sig_c128, backward_subst_sig_64_c128], cache=True)
def backward_subst_nb_core(R, shift, rhs, tol):
    """
    Solve (R - shift I) x = rhs[:k] by back-substitution, x overwrites rhs[:k].

    Rows are resolved from the bottom up. A nonzero subdiagonal entry R[i, i-1]
    marks a 2x2 diagonal block whose two unknowns are solved jointly with
    Cramer's rule. Pivots (or 2x2 determinants) with magnitude below

        smin = tol * max(|shift|, max_i |R[i, i]|)

    are replaced by smin, so repeated eigenvalues give a large but finite
    solution instead of a division by zero.

    Args:
        R: (k, k) upper-triangular or quasi-upper-triangular matrix
        shift: Scalar subtracted from the diagonal
        rhs: (>= k,) right-hand side, entries beyond k are not touched
        tol: Relative pivot tolerance
    """
    k = R.shape[0]
    dmax = abs(shift)
    for i in range(k):
        dmax = max(dmax, abs(R[i, i]))
    smin = tol * dmax
    if smin == 0.0:
        smin = SAFE_MIN

    i = k - 1
    while i >= 0:
        if i > 0 and R[i, i - 1] != 0.0:
            # 2x2 block on rows i-1, i
            r0 = rhs[i - 1]
            r1 = rhs[i]
            for j in range(i + 1, k):
                r0 -= R[i - 1, j] * rhs[j]
                r1 -= R[i, j] * rhs[j]
            a = R[i - 1, i - 1] - shift
            b = R[i - 1, i]
            c = R[i, i - 1]
            d = R[i, i] - shift
            det = a * d - b * c
            if abs(det) < smin:
                rhs[i - 1] = (r0 * d - b * r1) / smin
                rhs[i] = (a * r1 - c * r0) / smin
            else:
                rhs[i - 1] = (r0 * d - b * r1) / det
                rhs[i] = (a * r1 - c * r0) / det
            i -= 2
        else:
            r = rhs[i]
            for j in range(i + 1, k):
                r -= R[i, j] * rhs[j]
            pivot = R[i, i] - shift
            if abs(pivot) < smin:
                rhs[i] = r / smin
            else:
                rhs[i] = r / pivot
            i -= 1


@njit([conjugate_pair_eigenvector_sig_64], cache=True)
def conjugate_pair_eigenvector_nb_core(R, out, tol):
    """
    Eigenvector of a real quasi-triangular R for the trailing conjugate pair.

    The trailing 2x2 block [[a, b], [c, d]] with eigenvalue lambda (positive
    imaginary part) has the eigenvector (b, lambda - a) or (lambda - d, c),
    whichever uses the larger of |b|, |c|. The leading entries solve

        (R[:n-2, :n-2] - lambda I) x = -R[:n-2, n-2:] v

    in complex arithmetic. The result is not normalized.

    Args:
        R: (n, n) real quasi-upper-triangular, n >= 2
        out: (n,) complex output
        tol: Relative pivot tolerance
    """
    n = R.shape[0]
    a = R[n - 2, n - 2]
    b = R[n - 2, n - 1]
    c = R[n - 1, n - 2]
    d = R[n - 1, n - 1]
    eigenvalue, _ = eigenvalues_2x2_real_nb_core(a, b, c, d)

    if abs(b) >= abs(c):
        v0 = complex(b, 0.0)
        v1 = eigenvalue - a
    else:
        v0 = eigenvalue - d
        v1 = complex(c, 0.0)

    out[n - 2] = v0
    out[n - 1] = v1
    for i in range(n - 2):
        out[i] = -(R[i, n - 2] * v0 + R[i, n - 1] * v1)
    backward_subst_nb_core(R[:n - 2, :n - 2], eigenvalue, out, tol)


##########################################################################################
# NumPy fallback functions
##########################################################################################


def backward_subst_np_core(
    R: np.ndarray,
    shift,
    rhs: np.ndarray,
    tol: float) -> None:
    """
    NumPy fallback for the shifted back-substitution, see backward_subst_nb_core.
    """
    k = R.shape[0]
    dmax = max([abs(shift)] + list(np.abs(np.diag(R))))
    smin = tol * dmax
    if smin == 0.0:
        smin = SAFE_MIN

    i = k - 1
    while i >= 0:
        if i > 0 and R[i, i - 1] != 0:
            block = R[i - 1:i + 1, i - 1:i + 1] - shift * np.eye(2)
            r = rhs[i - 1:i + 1] - R[i - 1:i + 1, i + 1:k] @ rhs[i + 1:k]
            det = block[0, 0] * block[1, 1] - block[0, 1] * block[1, 0]
            if abs(det) < smin:
                det = smin
            rhs[i - 1] = (r[0] * block[1, 1] - block[0, 1] * r[1]) / det
            rhs[i] = (block[0, 0] * r[1] - block[1, 0] * r[0]) / det
            i -= 2
        else:
            r = rhs[i] - R[i, i + 1:k] @ rhs[i + 1:k]
            pivot = R[i, i] - shift
            if abs(pivot) < smin:
                pivot = smin
            rhs[i] = r / pivot
            i -= 1


def conjugate_pair_eigenvector_np_core(
    R: np.ndarray,
    out: np.ndarray,
    tol: float) -> None:
    """
    NumPy fallback for the trailing conjugate-pair eigenvector, see
    conjugate_pair_eigenvector_nb_core.
    """
    n = R.shape[0]
    (a, b), (c, d) = R[n - 2:, n - 2:]
    eigenvalues = block_eigenvalues_np_core(R[n - 2:, n - 2:])
    eigenvalue = eigenvalues[np.argmax(eigenvalues.imag)]

    if abs(b) >= abs(c):
        v = np.array([b, eigenvalue - a], dtype=np.complex128)
    else:
        v = np.array([eigenvalue - d, c], dtype=np.complex128)

    out[n - 2:] = v
    out[:n - 2] = -(R[:n - 2, n - 2:] @ v)
    backward_subst_np_core(R[:n - 2, :n - 2], eigenvalue, out, tol)
