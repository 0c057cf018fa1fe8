"""
IRAMtools: Eigenvalue Operations

This module reads eigenvalues off (quasi-)upper-triangular Schur factors:
the deflation test that decides where a Hessenberg matrix splits, the closed-form
eigenvalues of 1x1 and 2x2 diagonal blocks, and the eigenvalues of a whole
quasi-triangular range. Real blocks with a negative discriminant give exact
complex-conjugate pairs.

"""

import numpy as np
from typing import Optional
from .core_functions import *


class EigenvalueOperations:
    """
    A class to read eigenvalues from converged Schur factors.
    No data objects. Only methods.

    This class provides methods for:
    - Testing whether a subdiagonal entry is negligible (deflation test)
    - Computing the eigenvalues of a 1x1 or 2x2 diagonal block
    - Computing all eigenvalues of a quasi-upper-triangular range
    """

    def __init__(
        self,
        use_numba: bool = True,
        debug: bool = False):
        """
        Initialize the EigenvalueOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            debug (bool, optional): Print diagnostics. Defaults to False.
        """
        self.use_numba = use_numba
        self.debug = debug
        if self.debug:
            print(f"EigenvalueOperations: use_numba={use_numba}, debug={debug}")


    @staticmethod
    def default_tolerance(
        matrix: np.ndarray) -> float:
        """Machine epsilon of the real type underlying the matrix dtype."""
        return float(np.finfo(matrix.dtype).eps)


    def _check_matrix(
        self,
        matrix: np.ndarray) -> None:
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Matrix must be square, got shape {matrix.shape}")
        if matrix.dtype not in [np.float64, np.complex128]:
            raise TypeError(f"Matrix must be float64 or complex128, got {matrix.dtype}")


    def is_subdiagonal_negligible(
        self,
        matrix: np.ndarray,
        j: int,
        tolerance: Optional[float] = None) -> bool:
        """
        Deflation test: is the subdiagonal entry (j+1, j) negligible?

        The entry is compared with the magnitudes of the diagonal entries (j, j)
        and (j+1, j+1), so the large subdiagonal of a genuine complex-conjugate
        2x2 block never counts as negligible.

        Args:
            matrix: Hessenberg matrix (n, n)
            j: Column of the subdiagonal entry, 0 <= j < n - 1
            tolerance: Relative tolerance. Defaults to machine epsilon.

        Returns:
            True if the matrix splits between rows j and j+1
        """
        self._check_matrix(matrix)
        n = matrix.shape[0]
        if not 0 <= j < n - 1:
            raise ValueError(f"Subdiagonal index j must satisfy 0 <= j < {n - 1}, got {j}")

        tol = self.default_tolerance(matrix) if tolerance is None else float(tolerance)

        if self.use_numba:
            return is_offdiagonal_small_nb_core(matrix, j, tol)
        return is_offdiagonal_small_np_core(matrix, j, tol)


    def block_eigenvalues(
        self,
        block: np.ndarray) -> np.ndarray:
        """
        Compute the eigenvalue(s) of a converged 1x1 or 2x2 diagonal block.

        For real 2x2 blocks the discriminant (a+d)^2 - 4(ad - bc) is evaluated
        through (a - d) and bc to avoid cancellation. A negative discriminant gives
        the conjugate pair (trace +/- i*sqrt(-discriminant)) / 2, positive imaginary
        part first. Complex blocks use the complex quadratic formula directly.

        Args:
            block: Array of shape (1, 1) or (2, 2)

        Returns:
            eigenvalues: complex128 array of shape (block.shape[0],)
        """
        block = np.asarray(block)
        if block.shape not in [(1, 1), (2, 2)]:
            raise ValueError(f"Block must be 1x1 or 2x2, got shape {block.shape}")

        if block.shape == (1, 1):
            return np.array([block[0, 0]], dtype=np.complex128)

        if not self.use_numba:
            return block_eigenvalues_np_core(block)

        if np.iscomplexobj(block):
            a, b, c, d = (complex(x) for x in block.ravel())
            lambda1, lambda2 = eigenvalues_2x2_complex_nb_core(a, b, c, d)
        else:
            a, b, c, d = (float(x) for x in block.ravel())
            lambda1, lambda2 = eigenvalues_2x2_real_nb_core(a, b, c, d)
        return np.array([lambda1, lambda2], dtype=np.complex128)


    def schur_eigenvalues(
        self,
        matrix: np.ndarray,
        lo: int = 0,
        hi: Optional[int] = None,
        tolerance: Optional[float] = None) -> np.ndarray:
        """
        Compute all eigenvalues of a quasi-upper-triangular range [lo, hi].

        Diagonal blocks are delimited with the deflation test: a negligible
        subdiagonal closes a 1x1 block, otherwise rows i and i+1 form a 2x2 block.

        Args:
            matrix: Quasi-upper-triangular matrix (n, n), e.g. the output of
                    SchurOperations.reduce_to_schur
            lo: First index of the range (inclusive). Defaults to 0.
            hi: Last index of the range (inclusive). Defaults to n - 1.
            tolerance: Deflation tolerance. Defaults to machine epsilon.

        Returns:
            eigenvalues: complex128 array of shape (hi - lo + 1,), in diagonal order
        """
        self._check_matrix(matrix)
        n = matrix.shape[0]
        if hi is None:
            hi = n - 1
        if not (0 <= lo and hi < n and lo <= hi):
            raise ValueError(f"Invalid range [{lo}, {hi}] for a {n}x{n} matrix")

        tol = self.default_tolerance(matrix) if tolerance is None else float(tolerance)

        if not self.use_numba:
            return quasi_triangular_eigenvalues_np_core(matrix, lo, hi, tol)

        eigenvalues = np.empty(hi - lo + 1, dtype=np.complex128)
        if np.iscomplexobj(matrix):
            quasi_triangular_eigenvalues_complex_nb_core(matrix, lo, hi, tol, eigenvalues)
        else:
            quasi_triangular_eigenvalues_real_nb_core(matrix, lo, hi, tol, eigenvalues)
        return eigenvalues
