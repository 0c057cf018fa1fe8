"""
IRAMtools Eigenvector Operations Module

Eigenvectors of (quasi-)upper-triangular Schur factors and Ritz vectors.

Features:
- Shifted back-substitution with perturbed near-singular pivots
- Joint solves for 2x2 diagonal blocks
- Complex eigenvectors of real matrices for conjugate pairs
- Ritz vectors through accumulated Schur vectors
"""

# Import main classes
from .operations import EigenvectorOperations


# Import core functions for advanced users
from .core_functions import (
    backward_subst_nb_core,
    conjugate_pair_eigenvector_nb_core,
    backward_subst_np_core,
    conjugate_pair_eigenvector_np_core
)

# Version info
__version__ = "1.0.0"
__author__ = "IRAMtools developers"

# Define public API
__all__ = [
    'EigenvectorOperations',
    # Core functions for advanced use
    'backward_subst_nb_core',
    'conjugate_pair_eigenvector_nb_core',
    'backward_subst_np_core',
    'conjugate_pair_eigenvector_np_core'
]
