from numba import njit
import numpy as np
import math
import cmath
from scipy.linalg import schur, LinAlgError
from .constants import *
from ..eigen_vals.core_functions import (
    is_offdiagonal_small_nb_core,
    eigenvalues_2x2_complex_nb_core
)

##########################################################################################
# Core numba JIT functions for rotations and reflectors
##########################################################################################


@njit(cache=True)
def givens_real_nb_core(f, g):
    """
    Real Givens rotation with [c s; -s c] [f; g] = [r; 0].

    Returns:
        (c, s, r)
    """
    if g == 0.0:
        return 1.0, 0.0, f
    r = math.hypot(f, g)
    return f / r, g / r, r


@njit(cache=True)
def givens_complex_nb_core(f, g):
    """
    Complex Givens rotation with [c s; -conj(s) c] [f; g] = [r; 0], c real.

    Returns:
        (c, s, r)
    """
    abs_f = abs(f)
    abs_g = abs(g)
    if abs_g == 0.0:
        return 1.0, 0j, f
    if abs_f == 0.0:
        return 0.0, g.conjugate() / abs_g, abs_g + 0j
    norm = math.hypot(abs_f, abs_g)
    phase = f / abs_f
    return abs_f / norm, phase * g.conjugate() / norm, phase * norm


@njit(cache=True)
def apply_givens_left_nb_core(matrix, c, s, k, first, last):
    """
    Rows k, k+1 <- [c s; -conj(s) c] rows k, k+1, for columns first..last-1.
    """
    for j in range(first, last):
        a = matrix[k, j]
        b = matrix[k + 1, j]
        matrix[k, j] = c * a + s * b
        matrix[k + 1, j] = c * b - s.conjugate() * a


@njit(cache=True)
def apply_givens_right_nb_core(matrix, c, s, k, first, last):
    """
    Columns k, k+1 <- columns k, k+1 times [c s; -conj(s) c]^H, for rows first..last-1.
    """
    for i in range(first, last):
        a = matrix[i, k]
        b = matrix[i, k + 1]
        matrix[i, k] = c * a + s.conjugate() * b
        matrix[i, k + 1] = c * b - s * a


@njit(cache=True)
def householder_3_nb_core(x, y, z):
    """
    Real reflector P = I - beta v v^T with P [x, y, z]^T = [alpha, 0, 0]^T.

    Returns:
        (v0, v1, v2, beta), beta = 0 for the zero vector
    """
    norm = math.hypot(math.hypot(x, y), z)
    if norm == 0.0:
        return 1.0, 0.0, 0.0, 0.0
    alpha = -math.copysign(norm, x)
    v0 = x - alpha
    beta = 2.0 / (v0 * v0 + y * y + z * z)
    return v0, y, z, beta


@njit(cache=True)
def apply_householder_left_nb_core(matrix, v0, v1, v2, beta, k, first, last):
    """
    Rows k..k+2 <- P rows k..k+2, for columns first..last-1.
    """
    for j in range(first, last):
        t = beta * (v0 * matrix[k, j] + v1 * matrix[k + 1, j] + v2 * matrix[k + 2, j])
        matrix[k, j] -= t * v0
        matrix[k + 1, j] -= t * v1
        matrix[k + 2, j] -= t * v2


@njit(cache=True)
def apply_householder_right_nb_core(matrix, v0, v1, v2, beta, k, first, last):
    """
    Columns k..k+2 <- columns k..k+2 times P, for rows first..last-1.
    """
    for i in range(first, last):
        t = beta * (matrix[i, k] * v0 + matrix[i, k + 1] * v1 + matrix[i, k + 2] * v2)
        matrix[i, k] -= t * v0
        matrix[i, k + 1] -= t * v1
        matrix[i, k + 2] -= t * v2


##########################################################################################
# Core numba JIT functions for 2x2 blocks
##########################################################################################


@njit(cache=True)
def split_2x2_real_nb_core(matrix, k, transform):
    """
    Split the real 2x2 block at rows/columns k, k+1 if its eigenvalues are real.

    The rotation is built from the eigenvector (z, c) of [[a, b], [c, d]] for the
    eigenvalue d + z. The block itself is written from closed-form values:

        [[d + z, b - c], [0, d - bc / z]]

    Blocks with a complex-conjugate pair of eigenvalues are left untouched.
    """
    n = matrix.shape[0]
    a = matrix[k, k]
    b = matrix[k, k + 1]
    c = matrix[k + 1, k]
    d = matrix[k + 1, k + 1]
    if c == 0.0:
        return

    p = 0.5 * (a - d)
    bcmax = max(abs(b), abs(c))
    bcmis = min(abs(b), abs(c)) * math.copysign(1.0, b) * math.copysign(1.0, c)
    scale = max(abs(p), bcmax)
    z = (p / scale) * p + (bcmax / scale) * bcmis
    if z < 0.0:
        return

    z = p + math.copysign(math.sqrt(scale) * math.sqrt(z), p)
    tau = math.hypot(c, z)
    cs = z / tau
    sn = c / tau

    matrix[k, k] = d + z
    matrix[k + 1, k + 1] = d if z == 0.0 else d - (bcmax / z) * bcmis
    matrix[k, k + 1] = b - c
    matrix[k + 1, k] = 0.0

    # Rest of rows k, k+1 (right of the block) and columns k, k+1 (above it)
    apply_givens_left_nb_core(matrix, cs, sn, k, k + 2, n)
    apply_givens_right_nb_core(matrix, cs, sn, k, 0, k)
    apply_givens_right_nb_core(transform, cs, sn, k, 0, n)


@njit(cache=True)
def split_2x2_complex_nb_core(matrix, k, transform):
    """
    Triangularize the complex 2x2 block at rows/columns k, k+1.

    The unitary rotation maps the eigenvector (z, c) of the block onto the first
    unit vector, so the subdiagonal vanishes and is set to exactly zero.
    """
    n = matrix.shape[0]
    a = matrix[k, k]
    b = matrix[k, k + 1]
    c = matrix[k + 1, k]
    d = matrix[k + 1, k + 1]

    p = 0.5 * (a - d)
    root = cmath.sqrt(p * p + b * c)
    if (p.conjugate() * root).real < 0.0:
        root = -root
    cs, sn, _ = givens_complex_nb_core(p + root, c)

    apply_givens_left_nb_core(matrix, cs, sn, k, k, n)
    apply_givens_right_nb_core(matrix, cs, sn, k, 0, k + 2)
    apply_givens_right_nb_core(transform, cs, sn, k, 0, n)
    matrix[k + 1, k] = 0.0


##########################################################################################
# Core numba JIT functions for implicit shifted QR steps
##########################################################################################


@njit(cache=True)
def double_shift_step_nb_core(matrix, low, high, transform, exceptional):
    """
    One implicit Francis double-shift QR step on the real Hessenberg range [low, high].

    The shifts are the two eigenvalues of the trailing 2x2 block (or an ad hoc
    pair when exceptional is set), so complex-conjugate shifts are handled in
    real arithmetic. The first column of (H - s1 I)(H - s2 I) defines a 3x3
    reflector; the resulting bulge is chased down the subdiagonal with further
    reflectors and a final Givens rotation. Requires high - low >= 2.

    Rows low..high are updated up to the last column and columns low..high from
    the first row, so the similarity holds for the whole matrix.
    """
    n = matrix.shape[0]

    if exceptional:
        s = abs(matrix[high, high - 1]) + abs(matrix[high - 1, high - 2])
        h11 = EXCEPTIONAL_SHIFT_FACTOR * s + matrix[high, high]
        trace = 2.0 * h11
        det = h11 * h11 - EXCEPTIONAL_SHIFT_OFFDIAG * s * s
    else:
        trace = matrix[high - 1, high - 1] + matrix[high, high]
        det = (matrix[high - 1, high - 1] * matrix[high, high]
               - matrix[high - 1, high] * matrix[high, high - 1])

    x = (matrix[low, low] * matrix[low, low] + matrix[low, low + 1] * matrix[low + 1, low]
         - trace * matrix[low, low] + det)
    y = matrix[low + 1, low] * (matrix[low, low] + matrix[low + 1, low + 1] - trace)
    z = matrix[low + 1, low] * matrix[low + 2, low + 1]

    for k in range(low, high - 1):
        v0, v1, v2, beta = householder_3_nb_core(x, y, z)
        apply_householder_left_nb_core(matrix, v0, v1, v2, beta, k, max(low, k - 1), n)
        if k > low:
            # bulge annihilated
            matrix[k + 1, k - 1] = 0.0
            matrix[k + 2, k - 1] = 0.0
        apply_householder_right_nb_core(matrix, v0, v1, v2, beta, k, 0, min(k + 4, high + 1))
        apply_householder_right_nb_core(transform, v0, v1, v2, beta, k, 0, n)

        x = matrix[k + 1, k]
        y = matrix[k + 2, k]
        if k < high - 2:
            z = matrix[k + 3, k]

    c, s, _ = givens_real_nb_core(x, y)
    apply_givens_left_nb_core(matrix, c, s, high - 1, high - 2, n)
    matrix[high, high - 2] = 0.0
    apply_givens_right_nb_core(matrix, c, s, high - 1, 0, high + 1)
    apply_givens_right_nb_core(transform, c, s, high - 1, 0, n)


@njit(cache=True)
def single_shift_step_nb_core(matrix, low, high, transform, exceptional):
    """
    One implicit single-shift QR step on the complex Hessenberg range [low, high].

    Uses the Wilkinson shift, the eigenvalue of the trailing 2x2 block closest
    to the last diagonal entry, or an ad hoc shift when exceptional is set.
    The bulge created by the first rotation is chased down with Givens rotations.
    """
    n = matrix.shape[0]

    if exceptional:
        shift = matrix[high, high] + EXCEPTIONAL_SHIFT_FACTOR * abs(matrix[high, high - 1])
    else:
        _, shift = eigenvalues_2x2_complex_nb_core(
            matrix[high - 1, high - 1], matrix[high - 1, high],
            matrix[high, high - 1], matrix[high, high])

    f = matrix[low, low] - shift
    g = matrix[low + 1, low]
    for k in range(low, high):
        c, s, _ = givens_complex_nb_core(f, g)
        apply_givens_left_nb_core(matrix, c, s, k, max(low, k - 1), n)
        if k > low:
            matrix[k + 1, k - 1] = 0.0
        apply_givens_right_nb_core(matrix, c, s, k, 0, min(k + 3, high + 1))
        apply_givens_right_nb_core(transform, c, s, k, 0, n)

        if k < high - 1:
            f = matrix[k + 1, k]
            g = matrix[k + 2, k]


##########################################################################################
# Core numba JIT functions for the Hessenberg-to-Schur reduction
##########################################################################################


@njit([local_schurfact_real_sig_64], cache=True)
def local_schurfact_real_nb_core(matrix, lo, hi, transform, tol, maxiter):
    """
    Reduce the real Hessenberg range [lo, hi] to quasi-upper-triangular form.

    Active ranges are kept on an explicit stack. For the current range the
    subdiagonal is scanned from the bottom; the largest negligible entry is set
    to zero, the upper part is pushed and the lower part stays active. 2x2
    ranges are split directly when their eigenvalues are real and kept as
    converged blocks otherwise. Larger ranges get Francis double-shift steps.

    Args:
        matrix: (n, n), overwritten with the Schur factor on [lo, hi]
        lo, hi: Inclusive active range
        transform: (n, n), right-multiplied by every transformation
        tol: Deflation tolerance
        maxiter: Steps allowed on a range between two deflations

    Returns:
        True if the range converged, False if the budget ran out
    """
    ranges = [(lo, hi)]
    while len(ranges) > 0:
        low, high = ranges.pop()
        iteration = 0
        while high > low:
            split = -1
            for j in range(high - 1, low - 1, -1):
                if is_offdiagonal_small_nb_core(matrix, j, tol):
                    split = j
                    break

            if split >= 0:
                matrix[split + 1, split] = 0.0
                if split > low:
                    ranges.append((low, split))
                low = split + 1
                iteration = 0
                continue

            if high - low == 1:
                split_2x2_real_nb_core(matrix, low, transform)
                break

            if iteration >= maxiter:
                return False
            iteration += 1
            double_shift_step_nb_core(
                matrix, low, high, transform, iteration % EXCEPTIONAL_SHIFT_PERIOD == 0)
    return True


@njit([local_schurfact_complex_sig_c128], cache=True)
def local_schurfact_complex_nb_core(matrix, lo, hi, transform, tol, maxiter):
    """
    Reduce the complex Hessenberg range [lo, hi] to upper-triangular form.

    Same driver as local_schurfact_real_nb_core with single-shift steps; every
    block ends up 1x1 and every subdiagonal entry of the range is exactly zero.
    """
    ranges = [(lo, hi)]
    while len(ranges) > 0:
        low, high = ranges.pop()
        iteration = 0
        while high > low:
            split = -1
            for j in range(high - 1, low - 1, -1):
                if is_offdiagonal_small_nb_core(matrix, j, tol):
                    split = j
                    break

            if split >= 0:
                matrix[split + 1, split] = 0.0
                if split > low:
                    ranges.append((low, split))
                low = split + 1
                iteration = 0
                continue

            if high - low == 1:
                split_2x2_complex_nb_core(matrix, low, transform)
                break

            if iteration >= maxiter:
                return False
            iteration += 1
            single_shift_step_nb_core(
                matrix, low, high, transform, iteration % EXCEPTIONAL_SHIFT_PERIOD == 0)
    return True


##########################################################################################
# NumPy/SciPy fallback functions
##########################################################################################


def local_schurfact_np_core(
    matrix: np.ndarray,
    lo: int,
    hi: int,
    transform: np.ndarray) -> bool:
    """
    SciPy fallback for the reduction of the range [lo, hi] to Schur form.

    The block is factorized with scipy.linalg.schur (real Schur form for real
    input), and the Schur vectors Z are applied to the rest of the rows and
    columns of the block and to the transform:

        H[lo:hi, hi:]  <- Z^H H[lo:hi, hi:]
        H[:lo, lo:hi]  <- H[:lo, lo:hi] Z
        Q[:, lo:hi]    <- Q[:, lo:hi] Z

    Returns:
        True on success, False if LAPACK did not converge (nothing is modified)
    """
    output = 'complex' if np.iscomplexobj(matrix) else 'real'
    block = slice(lo, hi + 1)
    try:
        T, Z = schur(matrix[block, block], output=output)
    except LinAlgError:
        return False

    matrix[block, hi + 1:] = Z.conj().T @ matrix[block, hi + 1:]
    matrix[:lo, block] = matrix[:lo, block] @ Z
    matrix[block, block] = T
    transform[:, block] = transform[:, block] @ Z
    return True
