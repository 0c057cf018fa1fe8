"""
IRAMtools Eigenvalue Operations Module

Reads eigenvalues off converged (quasi-)upper-triangular Schur factors.

Features:
- Relative deflation test for subdiagonal entries
- Cancellation-free closed-form eigenvalues of real and complex 2x2 blocks
- Exact complex-conjugate pairs from real 2x2 blocks
- Eigenvalues of whole quasi-triangular ranges
"""

# Import main classes
from .operations import EigenvalueOperations


# Import core functions for advanced users
from .core_functions import (
    is_offdiagonal_small_nb_core,
    eigenvalues_2x2_real_nb_core,
    eigenvalues_2x2_complex_nb_core,
    quasi_triangular_eigenvalues_real_nb_core,
    quasi_triangular_eigenvalues_complex_nb_core,
    is_offdiagonal_small_np_core,
    block_eigenvalues_np_core,
    quasi_triangular_eigenvalues_np_core
)

# Version info
__version__ = "1.0.0"
__author__ = "IRAMtools developers"

# Define public API
__all__ = [
    'EigenvalueOperations',
    # Core functions for advanced use
    'is_offdiagonal_small_nb_core',
    'eigenvalues_2x2_real_nb_core',
    'eigenvalues_2x2_complex_nb_core',
    'quasi_triangular_eigenvalues_real_nb_core',
    'quasi_triangular_eigenvalues_complex_nb_core',
    'is_offdiagonal_small_np_core',
    'block_eigenvalues_np_core',
    'quasi_triangular_eigenvalues_np_core'
]
