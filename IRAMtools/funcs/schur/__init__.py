"""
IRAMtools Schur Operations Module

In-place reduction of upper Hessenberg matrices to Schur form.

Features:
- Implicit Francis double-shift QR for real matrices (real Schur form)
- Implicit Wilkinson single-shift QR for complex matrices
- Deflation with an explicit stack of active ranges
- Direct splitting of 2x2 blocks with real eigenvalues
- Exceptional shifts against stagnation
- Accumulation of all transformations into a caller-supplied matrix
- SciPy (LAPACK) fallback
"""

# Import main classes
from .operations import SchurOperations


# Import core functions for advanced users
from .core_functions import (
    givens_real_nb_core,
    givens_complex_nb_core,
    householder_3_nb_core,
    split_2x2_real_nb_core,
    split_2x2_complex_nb_core,
    double_shift_step_nb_core,
    single_shift_step_nb_core,
    local_schurfact_real_nb_core,
    local_schurfact_complex_nb_core,
    local_schurfact_np_core
)

# Version info
__version__ = "1.0.0"
__author__ = "IRAMtools developers"

# Define public API
__all__ = [
    'SchurOperations',
    # Core functions for advanced use
    'givens_real_nb_core',
    'givens_complex_nb_core',
    'householder_3_nb_core',
    'split_2x2_real_nb_core',
    'split_2x2_complex_nb_core',
    'double_shift_step_nb_core',
    'single_shift_step_nb_core',
    'local_schurfact_real_nb_core',
    'local_schurfact_complex_nb_core',
    'local_schurfact_np_core'
]
