"""
Shared helpers for the IRAMtools test suite.
"""

import numpy as np
from scipy.linalg import block_diag, hessenberg

EPS = np.finfo(np.float64).eps


def conjugate_pair_block(real_part, imag_part):
    """Real 2x2 normal block with eigenvalues real_part +/- i*imag_part."""
    return np.array([[real_part, imag_part], [-imag_part, real_part]])


def normal_hessenberg_matrix(diagonal_blocks, rng, dtype=np.float64):
    """
    Upper Hessenberg matrix unitarily similar to block_diag(*diagonal_blocks).

    The eigenvalues are known exactly and well conditioned.
    """
    D = block_diag(*diagonal_blocks).astype(dtype)
    n = D.shape[0]
    X = rng.standard_normal((n, n))
    if np.iscomplexobj(D):
        X = X + 1j * rng.standard_normal((n, n))
    U, _ = np.linalg.qr(X)
    return np.triu(hessenberg(U @ D @ U.conj().T), -1)


def embedded_hessenberg_problem(n, lo, hi, diagonal_blocks, rng, dtype=np.float64):
    """Random upper-triangular matrix with a Hessenberg block on [lo, hi]."""
    H = np.triu(rng.standard_normal((n, n))).astype(dtype)
    if np.iscomplexobj(H):
        H += 1j * np.triu(rng.standard_normal((n, n)))
    H[lo:hi + 1, lo:hi + 1] = normal_hessenberg_matrix(diagonal_blocks, rng, dtype)
    return H


def is_hessenberg(matrix):
    return not np.any(np.tril(matrix, -2))


def assert_same_eigenvalues(actual, desired, tol):
    """Match the two multisets greedily by distance and compare within tol."""
    actual = list(np.asarray(actual, dtype=np.complex128))
    desired = np.asarray(desired, dtype=np.complex128)
    assert len(actual) == len(desired)
    for value in desired:
        distances = [abs(value - other) for other in actual]
        closest = int(np.argmin(distances))
        assert distances[closest] <= tol, f"No eigenvalue close to {value}: {actual}"
        actual.pop(closest)
