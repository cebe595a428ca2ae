import numpy as np
from scipy.linalg import cholesky, solve_triangular


def upper_cholesky(matrix: np.ndarray) -> np.ndarray:
    """Upper triangular Cholesky factor `U` of a symmetric matrix, with S = U^T U

    Only the upper triangle of `matrix` is read.

    Raises:
        LinAlgError: `matrix` is not positive definite
    """
    return cholesky(matrix, lower=False, check_finite=True)


def solve_upper(U: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve the triangular system U x = b"""
    return solve_triangular(U, b, lower=False, check_finite=False)


def is_symmetric(matrix: np.ndarray, rtol: float = 1e-5, atol: float = 1e-8) -> bool:
    """Check if a square matrix equals its transpose up to tolerances"""
    return np.allclose(matrix, matrix.T, rtol=rtol, atol=atol)
