"""
IRAMtools: Schur Operations

This module reduces a range of an upper Hessenberg matrix to Schur form in
place, as needed inside every restart of the implicitly restarted Arnoldi
method. Real matrices go to quasi-upper-triangular (real Schur) form with
implicit Francis double-shift steps, complex matrices to upper-triangular form
with implicit Wilkinson single-shift steps. Every orthogonal/unitary
transformation is also accumulated into a caller-supplied transform matrix.

"""

import numpy as np
from typing import Optional
from .core_functions import *
from ..eigen_vals.operations import EigenvalueOperations


class SchurOperations:
    """
    A class to reduce Hessenberg matrices to Schur form.
    No data objects. Only methods.

    This class provides methods for:
    - Testing whether a subdiagonal entry is negligible (deflation test)
    - Reducing a Hessenberg range [lo, hi] to (quasi-)upper-triangular form
    """

    def __init__(
        self,
        use_numba: bool = True,
        debug: bool = False):
        """
        Initialize the SchurOperations class.

        Args:
            use_numba (bool, optional): Use the Numba QR iteration. If False,
                                        the block is factorized with
                                        scipy.linalg.schur. Defaults to True.
            debug (bool, optional): Print diagnostics. Defaults to False.
        """
        self.use_numba = use_numba
        self.debug = debug
        self.eigen_ops = EigenvalueOperations(use_numba=use_numba, debug=debug)
        if self.debug:
            print(f"SchurOperations: use_numba={use_numba}, debug={debug}")


    def is_subdiagonal_negligible(
        self,
        matrix: np.ndarray,
        j: int,
        tolerance: Optional[float] = None) -> bool:
        """
        Deflation test for the subdiagonal entry (j+1, j).

        See EigenvalueOperations.is_subdiagonal_negligible.
        """
        return self.eigen_ops.is_subdiagonal_negligible(matrix, j, tolerance)


    def reduce_to_schur(
        self,
        matrix: np.ndarray,
        lo: int,
        hi: int,
        transform: np.ndarray,
        tolerance: Optional[float] = None,
        max_iterations: Optional[int] = None) -> bool:
        """
        Reduce the Hessenberg range [lo, hi] of a matrix to Schur form, in place.

        On success the range is upper triangular (complex input) or quasi-upper-
        triangular with 2x2 blocks only for complex-conjugate eigenvalue pairs
        (real input), and every negligible subdiagonal entry is exactly zero.
        Rows lo..hi right of the range and columns lo..hi above it are updated as
        well, so the full matrix stays similar to the input, and the transform
        is right-multiplied by the accumulated orthogonal/unitary factor.

        Args:
            matrix: (n, n) float64 or complex128, upper Hessenberg on [lo, hi]
            lo: First index of the range (inclusive)
            hi: Last index of the range (inclusive). hi <= lo is a no-op, but both
                indices must still lie in the matrix.
            transform: (n, n) array of the same dtype, e.g. the identity or the
                       Arnoldi basis to be rotated
            tolerance: Deflation tolerance. Defaults to machine epsilon.
            max_iterations: Shifted steps allowed between two deflations.
                            Defaults to 30 * (hi - lo + 1).

        Returns:
            True if the range converged, False if the iteration budget ran out.
            On False the matrix and transform hold a valid but unfinished state.
        """
        self.eigen_ops._check_matrix(matrix)
        n = matrix.shape[0]
        if transform.shape != (n, n):
            raise ValueError(f"Transform must have shape {(n, n)}, got {transform.shape}")
        if transform.dtype != matrix.dtype:
            raise TypeError(f"Transform dtype {transform.dtype} does not match matrix dtype {matrix.dtype}")
        if not (0 <= lo <= n and hi < n):
            raise ValueError(f"Invalid range [{lo}, {hi}] for a {n}x{n} matrix")
        if hi <= lo:
            return True
        if np.any(np.tril(matrix[lo:hi + 1, lo:hi + 1], -2)):
            raise ValueError(f"Matrix must be upper Hessenberg on [{lo}, {hi}]")

        tol = self.eigen_ops.default_tolerance(matrix) if tolerance is None else float(tolerance)
        if max_iterations is None:
            max_iterations = ITERATIONS_PER_ROW * (hi - lo + 1)
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")

        if self.debug:
            print(f"SchurOperations: reducing [{lo}, {hi}] of a {n}x{n} {matrix.dtype} matrix, "
                  f"tol={tol:.3e}, max_iterations={max_iterations}")

        if not self.use_numba:
            converged = local_schurfact_np_core(matrix, lo, hi, transform)
        elif np.iscomplexobj(matrix):
            converged = local_schurfact_complex_nb_core(
                matrix, lo, hi, transform, tol, int(max_iterations))
        else:
            converged = local_schurfact_real_nb_core(
                matrix, lo, hi, transform, tol, int(max_iterations))

        if self.debug and not converged:
            print(f"Warning: SchurOperations: range [{lo}, {hi}] did not converge "
                  f"within {max_iterations} iterations")
        return bool(converged)
