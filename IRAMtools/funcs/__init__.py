"""
IRAMtools function modules. Each sub-package has constants.py (Numba
signatures and module constants), core_functions.py (Numba kernels and NumPy
fallbacks) and operations.py (the validated *Operations class).
"""
