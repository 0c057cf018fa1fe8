"""
Tests for the Hessenberg-to-Schur reduction.

Covers 2x2 edge cases, partial reductions of larger real and complex
matrices, exceptional shifts, the iteration budget and input validation.
"""

import numpy as np
import pytest
from helpers import (
    EPS,
    conjugate_pair_block,
    embedded_hessenberg_problem,
    is_hessenberg,
    assert_same_eigenvalues
)
from IRAMtools.funcs.schur import SchurOperations
from IRAMtools.funcs.eigen_vals import EigenvalueOperations

USE_NUMBA = [True, False]


def schur_eigenvalues(H):
    return EigenvalueOperations().schur_eigenvalues(H)


def two_by_two_bound(H, use_numba):
    """Absolute 10 eps for the Numba kernels, relative for the LAPACK standardization."""
    if use_numba:
        return 10 * EPS
    return 10 * EPS * np.linalg.norm(H)


class TestTwoByTwo:
    """Reduction of a single 2x2 block with lo=0, hi=1."""

    @pytest.mark.parametrize("use_numba", USE_NUMBA)
    def test_distinct_real_eigenvalues(self, use_numba):
        """Coupled block with real eigenvalues is split exactly."""
        H = np.array([[1.0, 2.0], [3.0, 4.0]])
        H_reduced = H.copy()
        Q = np.eye(2)

        assert SchurOperations(use_numba=use_numba).reduce_to_schur(
            H_reduced, 0, 1, Q, EPS, 2)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < two_by_two_bound(H, use_numba)
        assert H_reduced[1, 0] == 0.0
        assert_same_eigenvalues(schur_eigenvalues(H_reduced), np.linalg.eigvals(H), 1e-12)
        assert_same_eigenvalues(schur_eigenvalues(H_reduced), np.linalg.eigvals(H_reduced), 1e-12)

    @pytest.mark.parametrize("use_numba", USE_NUMBA)
    def test_already_triangular(self, use_numba):
        """Zero subdiagonal stays zero."""
        H = np.array([[1.0, 2.0], [0.0, 4.0]])
        H_reduced = H.copy()
        Q = np.eye(2)

        assert SchurOperations(use_numba=use_numba).reduce_to_schur(
            H_reduced, 0, 1, Q, EPS, 2)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < two_by_two_bound(H, use_numba)
        assert H_reduced[1, 0] == 0.0
        assert_same_eigenvalues(schur_eigenvalues(H_reduced), [1.0, 4.0], 1e-12)

    @pytest.mark.parametrize("use_numba", USE_NUMBA)
    def test_conjugate_eigenvalues(self, use_numba):
        """Complex-conjugate pair stays a 2x2 block."""
        H = np.array([[1.0, 4.0], [-5.0, 3.0]])
        H_reduced = H.copy()
        Q = np.eye(2)

        assert SchurOperations(use_numba=use_numba).reduce_to_schur(
            H_reduced, 0, 1, Q, EPS, 2)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < two_by_two_bound(H, use_numba)
        assert H_reduced[1, 0] != 0.0

        eigenvalues = schur_eigenvalues(H_reduced)
        assert_same_eigenvalues(eigenvalues, np.linalg.eigvals(H), 1e-12)
        assert_same_eigenvalues(eigenvalues, [2.0 + 1j * np.sqrt(19.0), 2.0 - 1j * np.sqrt(19.0)], 1e-12)

    def test_conjugate_block_untouched(self):
        """The Numba path leaves a conjugate-pair block as it is."""
        H = np.array([[1.0, 4.0], [-5.0, 3.0]])
        Q = np.eye(2)
        assert SchurOperations().reduce_to_schur(H, 0, 1, Q)
        np.testing.assert_array_equal(H, [[1.0, 4.0], [-5.0, 3.0]])
        np.testing.assert_array_equal(Q, np.eye(2))

    def test_complex_block(self):
        """Complex 2x2 blocks are always triangularized."""
        H = np.array([[1.0 + 1j, 2.0], [3.0 - 1j, 4.0j]])
        H_reduced = H.copy()
        Q = np.eye(2, dtype=np.complex128)

        assert SchurOperations().reduce_to_schur(H_reduced, 0, 1, Q)
        assert H_reduced[1, 0] == 0.0
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 100 * EPS * np.linalg.norm(H)
        np.testing.assert_allclose(Q.conj().T @ Q, np.eye(2), atol=1e-14)
        assert_same_eigenvalues(np.diag(H_reduced), np.linalg.eigvals(H), 1e-12)


class TestLargerReal:
    """Partial reduction of a real 10x10 matrix on [i, n-1-i]."""

    n = 10

    def check_reduction(self, H, H_reduced, Q, lo, hi):
        schur_ops = SchurOperations()
        for j in range(lo, hi):
            t = H_reduced[j, j] + H_reduced[j + 1, j + 1]
            d = H_reduced[j, j] * H_reduced[j + 1, j + 1] - H_reduced[j + 1, j] * H_reduced[j, j + 1]
            # Either split, or a genuine complex-conjugate pair
            assert schur_ops.is_subdiagonal_negligible(H_reduced, j) or t**2 < 4 * d

        assert is_hessenberg(H_reduced)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 1000 * EPS * np.linalg.norm(H)
        np.testing.assert_allclose(Q.T @ Q, np.eye(self.n), atol=1e-12)
        assert_same_eigenvalues(
            np.linalg.eigvals(H_reduced), np.linalg.eigvals(H), 1e-6 * np.linalg.norm(H))

    @pytest.mark.parametrize("use_numba", USE_NUMBA)
    @pytest.mark.parametrize("i", range(5))
    def test_real_eigenvalues(self, use_numba, i):
        rng = np.random.default_rng(100 + i)
        lo, hi = i, self.n - 1 - i
        blocks = [np.array([[float(k)]]) for k in range(lo + 1, hi + 2)]
        H = embedded_hessenberg_problem(self.n, lo, hi, blocks, rng)
        H_reduced = H.copy()
        Q = np.eye(self.n)

        assert SchurOperations(use_numba=use_numba).reduce_to_schur(H_reduced, lo, hi, Q)
        self.check_reduction(H, H_reduced, Q, lo, hi)

    @pytest.mark.parametrize("use_numba", USE_NUMBA)
    @pytest.mark.parametrize("i", range(4))
    def test_with_conjugate_pairs(self, use_numba, i):
        rng = np.random.default_rng(200 + i)
        lo, hi = i, self.n - 1 - i
        size = hi - lo + 1
        blocks = [conjugate_pair_block(1.0, 2.0), conjugate_pair_block(-3.0, 0.5)]
        blocks += [np.array([[float(k)]]) for k in range(1, size - 3)]
        H = embedded_hessenberg_problem(self.n, lo, hi, blocks, rng)
        H_reduced = H.copy()
        Q = np.eye(self.n)

        assert SchurOperations(use_numba=use_numba).reduce_to_schur(H_reduced, lo, hi, Q)
        self.check_reduction(H, H_reduced, Q, lo, hi)

        eigenvalues = schur_eigenvalues(H_reduced)
        assert np.sum(eigenvalues.imag > 0) == 2
        assert_same_eigenvalues(eigenvalues, np.linalg.eigvals(H), 1e-8 * np.linalg.norm(H))

    def test_random_hessenberg(self):
        """General (non-normal) Hessenberg matrices converge with the default budget."""
        rng = np.random.default_rng(7)
        for _ in range(5):
            H = np.triu(rng.standard_normal((self.n, self.n)), -1)
            H_reduced = H.copy()
            Q = np.eye(self.n)
            assert SchurOperations().reduce_to_schur(H_reduced, 0, self.n - 1, Q)
            self.check_reduction(H, H_reduced, Q, 0, self.n - 1)


class TestLargerComplex:
    """Partial reduction of a complex 10x10 matrix on [i, n-1-i]."""

    n = 10

    @pytest.mark.parametrize("i", range(5))
    def test_triangular_result(self, i):
        rng = np.random.default_rng(300 + i)
        lo, hi = i, self.n - 1 - i
        blocks = [np.array([[k * (1.0 + 1.0j)]]) for k in range(lo + 1, hi + 2)]
        H = embedded_hessenberg_problem(self.n, lo, hi, blocks, rng, np.complex128)
        H_reduced = H.copy()
        Q = np.eye(self.n, dtype=np.complex128)

        assert SchurOperations().reduce_to_schur(H_reduced, lo, hi, Q)
        for j in range(lo, hi):
            assert H_reduced[j + 1, j] == 0.0
        assert is_hessenberg(H_reduced)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 1000 * EPS * np.linalg.norm(H)
        assert_same_eigenvalues(
            np.diag(H_reduced), np.linalg.eigvals(H), 1e-8 * np.linalg.norm(H))

    @pytest.mark.parametrize("i", range(3))
    def test_scipy_path(self, i):
        rng = np.random.default_rng(400 + i)
        lo, hi = i, self.n - 1 - i
        blocks = [np.array([[k * (1.0 + 1.0j)]]) for k in range(lo + 1, hi + 2)]
        H = embedded_hessenberg_problem(self.n, lo, hi, blocks, rng, np.complex128)
        H_reduced = H.copy()
        Q = np.eye(self.n, dtype=np.complex128)

        assert SchurOperations(use_numba=False).reduce_to_schur(H_reduced, lo, hi, Q)
        assert np.max(np.abs(np.tril(H_reduced, -1))) <= 10 * EPS * np.linalg.norm(H)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 1000 * EPS * np.linalg.norm(H)
        assert_same_eigenvalues(
            np.diag(H_reduced), np.linalg.eigvals(H), 1e-8 * np.linalg.norm(H))


class TestExceptionalShifts:
    """The cyclic shift matrix, on which the standard shifts stall."""

    @pytest.mark.parametrize("dtype", [np.float64, np.complex128])
    @pytest.mark.parametrize("n", [4, 5, 6])
    def test_cyclic_shift(self, dtype, n):
        H = np.diag(np.ones(n - 1), -1).astype(dtype)
        H[0, n - 1] = 1.0
        H_reduced = H.copy()
        Q = np.eye(n, dtype=dtype)

        assert SchurOperations().reduce_to_schur(H_reduced, 0, n - 1, Q)
        assert is_hessenberg(H_reduced)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 1000 * EPS * np.linalg.norm(H)
        np.testing.assert_allclose(Q.conj().T @ Q, np.eye(n), atol=1e-12)

        eigen_ops = EigenvalueOperations()
        if dtype == np.complex128:
            assert not np.any(np.tril(H_reduced, -1))
        else:
            for j in range(n - 1):
                if H_reduced[j + 1, j] == 0.0:
                    continue
                # Unsplit blocks are isolated conjugate pairs
                assert np.all(eigen_ops.block_eigenvalues(H_reduced[j:j + 2, j:j + 2]).imag != 0.0)
                assert j == n - 2 or H_reduced[j + 2, j + 1] == 0.0

        roots_of_unity = np.exp(2j * np.pi * np.arange(n) / n)
        assert_same_eigenvalues(eigen_ops.schur_eigenvalues(H_reduced), roots_of_unity, 1e-8)


class TestBudgetAndValidation:
    """Iteration budget, no-op ranges and invalid input."""

    def test_budget_exhausted(self):
        rng = np.random.default_rng(11)
        H = np.triu(rng.standard_normal((8, 8)), -1)
        H_reduced = H.copy()
        Q = np.eye(8)

        assert not SchurOperations().reduce_to_schur(H_reduced, 0, 7, Q, max_iterations=1)
        # Unfinished but still a valid similarity transform
        assert is_hessenberg(H_reduced)
        assert np.linalg.norm(H @ Q - Q @ H_reduced) < 1000 * EPS * np.linalg.norm(H)

    def test_zero_budget_on_split_matrix(self):
        """Deflation alone needs no iterations."""
        H = np.triu(np.arange(1.0, 17.0).reshape(4, 4))
        Q = np.eye(4)
        assert SchurOperations().reduce_to_schur(H, 0, 3, Q, max_iterations=0)

    @pytest.mark.parametrize("dtype", [np.float64, np.complex128])
    def test_triangular_input_unchanged(self, dtype):
        rng = np.random.default_rng(12)
        H = np.triu(rng.standard_normal((6, 6))).astype(dtype)
        H_reduced = H.copy()
        Q = np.eye(6, dtype=dtype)

        assert SchurOperations().reduce_to_schur(H_reduced, 1, 4, Q)
        np.testing.assert_array_equal(H_reduced, H)
        np.testing.assert_array_equal(Q, np.eye(6))

    def test_empty_range(self):
        H = np.ones((3, 3))
        Q = np.eye(3)
        assert SchurOperations().reduce_to_schur(H, 2, 2, Q)
        assert SchurOperations().reduce_to_schur(H, 2, 1, Q)
        np.testing.assert_array_equal(H, np.ones((3, 3)))

    def test_empty_range_out_of_bounds(self):
        schur_ops = SchurOperations()
        with pytest.raises(ValueError):
            schur_ops.reduce_to_schur(np.eye(3), 5, 5, np.eye(3))
        with pytest.raises(ValueError):
            schur_ops.reduce_to_schur(np.eye(3), -1, -1, np.eye(3))
        with pytest.raises(ValueError):
            schur_ops.reduce_to_schur(np.eye(3), 4, 1, np.eye(3))

    def test_not_hessenberg(self):
        H = np.ones((4, 4))
        with pytest.raises(ValueError):
            SchurOperations().reduce_to_schur(H, 0, 3, np.eye(4))

    def test_invalid_input(self):
        schur_ops = SchurOperations()
        with pytest.raises(ValueError):
            schur_ops.reduce_to_schur(np.eye(3), 0, 3, np.eye(3))
        with pytest.raises(ValueError):
            schur_ops.reduce_to_schur(np.eye(3), 0, 2, np.eye(2))
        with pytest.raises(TypeError):
            schur_ops.reduce_to_schur(np.eye(3), 0, 2, np.eye(3, dtype=np.complex128))
        with pytest.raises(TypeError):
            schur_ops.reduce_to_schur(np.eye(3, dtype=np.float32), 0, 2, np.eye(3, dtype=np.float32))

    def test_debug_output(self, capsys):
        rng = np.random.default_rng(13)
        H = np.triu(rng.standard_normal((6, 6)), -1)
        SchurOperations(debug=True).reduce_to_schur(H, 0, 5, np.eye(6), max_iterations=0)
        out = capsys.readouterr().out
        assert "SchurOperations" in out
        assert "Warning" in out
