"""
IRAMtools: Eigenvector Operations

This module computes eigenvectors of (quasi-)upper-triangular Schur factors by
shifted back-substitution, and Ritz vectors of the original matrix by mapping
them through the accumulated Schur vectors. Near-singular pivots (repeated or
clustered eigenvalues) are perturbed instead of failing, and complex-conjugate
pairs of real Schur factors are handled in complex arithmetic.

"""

import numpy as np
from typing import Optional, Sequence
from .core_functions import *
from ..eigen_vals.operations import EigenvalueOperations


class EigenvectorOperations:
    """
    A class to compute eigenvectors of Schur factors.
    No data objects. Only methods.

    This class provides methods for:
    - Shifted back-substitution for the leading part of an eigenvector
    - Eigenvectors of a trailing complex-conjugate 2x2 block
    - Full, normalized eigenvectors for any diagonal position
    - Ritz vectors from a Schur factor and its transform
    """

    def __init__(
        self,
        use_numba: bool = True,
        debug: bool = False):
        """
        Initialize the EigenvectorOperations class.

        Args:
            use_numba (bool, optional): Use Numba core functions. Defaults to True.
            debug (bool, optional): Print diagnostics. Defaults to False.
        """
        self.use_numba = use_numba
        self.debug = debug
        self.eigen_ops = EigenvalueOperations(use_numba=use_numba, debug=debug)
        if self.debug:
            print(f"EigenvectorOperations: use_numba={use_numba}, debug={debug}")


    def solve_eigenvector_prefix(
        self,
        triangular_matrix: np.ndarray,
        shift,
        rhs: np.ndarray,
        tolerance: Optional[float] = None) -> None:
        """
        Solve (R - shift I) x = rhs[:k] in place, k = R.shape[0].

        For an eigenvalue R[i, i] of a triangular matrix the call

            x[:i] = -R[:i, i]
            solve_eigenvector_prefix(R[:i, :i], R[i, i], x)

        gives the leading i entries of the eigenvector with x[i] = 1. Pivots
        below tolerance * max(|shift|, max |R[i, i]|) are perturbed. Rows coupled
        by a nonzero subdiagonal entry are solved as a 2x2 system.

        Args:
            triangular_matrix: (k, k) float64 or complex128, (quasi-)upper-triangular.
                               Not modified.
            shift: Real or complex scalar
            rhs: 1D float64 or complex128 array of length >= k, overwritten.
                 Must be complex128 for complex matrices or complex shifts.
            tolerance: Relative pivot tolerance. Defaults to machine epsilon.
        """
        self.eigen_ops._check_matrix(triangular_matrix)
        k = triangular_matrix.shape[0]
        if rhs.ndim != 1 or rhs.shape[0] < k:
            raise ValueError(f"rhs must be a 1D array of length >= {k}, got shape {rhs.shape}")
        if rhs.dtype not in [np.float64, np.complex128]:
            raise TypeError(f"rhs must be float64 or complex128, got {rhs.dtype}")

        complex_shift = np.iscomplexobj(shift) and np.imag(shift) != 0.0
        if (np.iscomplexobj(triangular_matrix) or complex_shift) and rhs.dtype != np.complex128:
            raise TypeError("rhs must be complex128 for a complex matrix or a complex shift")
        shift = complex(shift) if rhs.dtype == np.complex128 else float(np.real(shift))

        tol = EPSILON if tolerance is None else float(tolerance)

        if self.debug:
            print(f"EigenvectorOperations: back-substitution of size {k}, shift={shift}")

        if self.use_numba:
            backward_subst_nb_core(triangular_matrix, shift, rhs, tol)
        else:
            backward_subst_np_core(triangular_matrix, shift, rhs, tol)


    def conjugate_pair_eigenvector(
        self,
        matrix: np.ndarray,
        out: np.ndarray,
        tolerance: Optional[float] = None) -> None:
        """
        Eigenvector for the trailing complex-conjugate pair of a real Schur factor.

        Fills out with an (unnormalized) eigenvector of R for the eigenvalue of the
        trailing 2x2 block with positive imaginary part. The eigenvector of the
        other eigenvalue is its complex conjugate.

        Args:
            matrix: (n, n) float64 quasi-upper-triangular, n >= 2
            out: (n,) complex128 array, overwritten
            tolerance: Relative pivot tolerance. Defaults to machine epsilon.
        """
        self.eigen_ops._check_matrix(matrix)
        n = matrix.shape[0]
        if np.iscomplexobj(matrix):
            raise TypeError("Conjugate pairs only occur in real matrices")
        if n < 2:
            raise ValueError(f"Matrix must be at least 2x2, got shape {matrix.shape}")
        if out.shape != (n,) or out.dtype != np.complex128:
            raise TypeError(f"out must be a complex128 array of shape {(n,)}")
        if np.all(self.eigen_ops.block_eigenvalues(matrix[n - 2:, n - 2:]).imag == 0.0):
            raise ValueError("Trailing 2x2 block has real eigenvalues")

        tol = EPSILON if tolerance is None else float(tolerance)

        if self.use_numba:
            conjugate_pair_eigenvector_nb_core(matrix, out, tol)
        else:
            conjugate_pair_eigenvector_np_core(matrix, out, tol)


    def schur_eigenvector(
        self,
        matrix: np.ndarray,
        i: int,
        tolerance: Optional[float] = None) -> np.ndarray:
        """
        Unit-norm eigenvector of a Schur factor for diagonal position i.

        For a 1x1 block the eigenvalue is R[i, i] and the vector has leading
        entries from back-substitution, a one at position i and zeros below.
        For a real 2x2 block on rows i, i+1 (i.e. a complex-conjugate pair) the
        first row gives the eigenvector for the eigenvalue with positive imaginary
        part and the second row its conjugate. A 2x2 block that was not split
        although its eigenvalues are real (or lie in a complex matrix) gives the
        eigenvectors for its first and second eigenvalue, in the order of
        EigenvalueOperations.schur_eigenvalues.

        Args:
            matrix: (n, n) quasi-upper-triangular, e.g. from SchurOperations.reduce_to_schur
            i: Diagonal position, 0 <= i < n
            tolerance: Deflation and pivot tolerance. Defaults to machine epsilon.

        Returns:
            eigenvector: (n,) float64 for real eigenvalues of real matrices,
                         complex128 otherwise
        """
        self.eigen_ops._check_matrix(matrix)
        n = matrix.shape[0]
        if not 0 <= i < n:
            raise ValueError(f"Position i must satisfy 0 <= i < {n}, got {i}")

        def coupled(j):
            return not self.eigen_ops.is_subdiagonal_negligible(matrix, j, tolerance)

        if i > 0 and coupled(i - 1):
            k = i - 1
        elif i < n - 1 and coupled(i):
            k = i
        else:
            eigenvector = np.zeros(n, dtype=matrix.dtype)
            eigenvector[:i] = -matrix[:i, i]
            eigenvector[i] = 1.0
            self.solve_eigenvector_prefix(matrix[:i, :i], matrix[i, i], eigenvector, tolerance)
            return eigenvector / np.linalg.norm(eigenvector)

        eigenvalues = self.eigen_ops.block_eigenvalues(matrix[k:k + 2, k:k + 2])
        if not np.iscomplexobj(matrix) and np.any(eigenvalues.imag != 0.0):
            if i > k:
                return self.schur_eigenvector(matrix, k, tolerance).conjugate()
            eigenvector = np.zeros(n, dtype=np.complex128)
            self.conjugate_pair_eigenvector(
                matrix[:k + 2, :k + 2], eigenvector[:k + 2], tolerance)
            return eigenvector / np.linalg.norm(eigenvector)

        # Unsplit block: eigenvector of the block itself, then the leading rows
        eigenvalue = eigenvalues[i - k]
        if not np.iscomplexobj(matrix):
            eigenvalue = eigenvalue.real
        a, b = matrix[k, k], matrix[k, k + 1]
        c, d = matrix[k + 1, k], matrix[k + 1, k + 1]
        if abs(b) >= abs(c):
            v0, v1 = b, eigenvalue - a
        else:
            v0, v1 = eigenvalue - d, c

        eigenvector = np.zeros(n, dtype=matrix.dtype)
        eigenvector[k] = v0
        eigenvector[k + 1] = v1
        eigenvector[:k] = -(matrix[:k, k] * v0 + matrix[:k, k + 1] * v1)
        self.solve_eigenvector_prefix(matrix[:k, :k], eigenvalue, eigenvector, tolerance)

        return eigenvector / np.linalg.norm(eigenvector)


    def ritz_vectors(
        self,
        matrix: np.ndarray,
        transform: np.ndarray,
        positions: Optional[Sequence[int]] = None,
        tolerance: Optional[float] = None) -> np.ndarray:
        """
        Ritz vectors from a partial Schur decomposition A Q = Q R.

        Each column is Q y with y = schur_eigenvector(R, i), i.e. an eigenvector
        of A when Q is square and orthogonal/unitary, and a Ritz vector of A when
        Q is an orthonormal Krylov basis and R the projected Schur factor.

        Args:
            matrix: (m, m) Schur factor R
            transform: (N, m) Schur vectors Q
            positions: Diagonal positions to use. Defaults to all m.
            tolerance: Deflation and pivot tolerance. Defaults to machine epsilon.

        Returns:
            vectors: (N, len(positions)), complex128 if any selected eigenvalue is complex
        """
        self.eigen_ops._check_matrix(matrix)
        m = matrix.shape[0]
        if transform.ndim != 2 or transform.shape[1] != m:
            raise ValueError(f"Transform must have {m} columns, got shape {transform.shape}")
        if positions is None:
            positions = range(m)

        vectors = [self.schur_eigenvector(matrix, i, tolerance) for i in positions]
        if len(vectors) == 0:
            return np.zeros((transform.shape[0], 0), dtype=transform.dtype)

        if self.debug:
            print(f"EigenvectorOperations: {len(vectors)} Ritz vectors of length {transform.shape[0]}")
        return transform @ np.column_stack(vectors)
