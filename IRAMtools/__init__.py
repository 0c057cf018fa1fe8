"""
IRAMtools: dense Schur kernels for the implicitly restarted Arnoldi method.

Sub-packages:
- funcs.schur: in-place Hessenberg-to-Schur reduction
- funcs.eigen_vals: deflation test and eigenvalues of Schur factors
- funcs.eigen_vecs: eigenvectors of Schur factors and Ritz vectors
"""

from .funcs.schur import SchurOperations
from .funcs.eigen_vals import EigenvalueOperations
from .funcs.eigen_vecs import EigenvectorOperations

__version__ = "1.0.0"
__author__ = "IRAMtools developers"

__all__ = [
    'SchurOperations',
    'EigenvalueOperations',
    'EigenvectorOperations'
]
