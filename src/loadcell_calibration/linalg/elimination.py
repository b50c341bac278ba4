"""
Fixed-size 4x4 Gaussian elimination with partial pivoting.
Used to solve the calibration normal equations and to compute det(A) for diagnostics.
"""

from __future__ import annotations

import numpy as np

SIZE: int = 4  # Only 4x4 systems are supported (one unknown per load cell).


class SingularMatrixError(ValueError):
    """Raised when a 4x4 system has no unique solution (zero pivot)."""


def _as_matrix(matrix: np.ndarray) -> np.ndarray:
    """Return a float64 working copy of a 4x4 matrix."""
    m: np.ndarray = np.array(matrix, dtype=np.float64)  # Always copy, callers keep theirs.
    if m.shape != (SIZE, SIZE):
        raise ValueError(f"Expected a {SIZE}x{SIZE} matrix, got shape {m.shape}.")
    return m


def _select_pivot(m: np.ndarray, col: int) -> tuple[int, float]:
    """Return (row, |value|) of the largest-magnitude entry in column col, rows col..3."""
    pivot: int = col
    max_abs: float = abs(float(m[col, col]))
    for row in range(col + 1, SIZE):
        candidate: float = abs(float(m[row, col]))
        if candidate > max_abs:  # Strict > keeps the first row on ties.
            max_abs = candidate
            pivot = row
    return pivot, max_abs


def _swap_rows(m: np.ndarray, a: int, b: int) -> None:
    """Swap two rows in place."""
    m[[a, b]] = m[[b, a]]


def _eliminate_below(m: np.ndarray, col: int) -> None:
    """Zero out column col below the pivot row by row subtraction."""
    for row in range(col + 1, SIZE):
        factor: float = m[row, col] / m[col, col]
        m[row, col:] -= factor * m[col, col:]


def _forward_eliminate(aug: np.ndarray) -> np.ndarray:
    """Reduce an augmented [A | b] matrix to upper-triangular form in place."""
    for col in range(SIZE):
        pivot, max_abs = _select_pivot(aug, col)
        if max_abs == 0.0:
            raise SingularMatrixError("matrix is singular (zero pivot)")
        if pivot != col:
            _swap_rows(aug, col, pivot)
        _eliminate_below(aug, col)
    return aug


def _back_substitute(aug: np.ndarray) -> np.ndarray:
    """Solve an upper-triangular augmented [U | c] system from the last row up.

    The zero-diagonal check is repeated here so the routine is safe on its own,
    even though forward elimination with pivoting should never leave one behind.
    """
    x: np.ndarray = np.zeros(SIZE, dtype=np.float64)
    for i in range(SIZE - 1, -1, -1):
        if aug[i, i] == 0.0:
            raise SingularMatrixError("singular matrix during back substitution")
        total: float = aug[i, SIZE]
        for j in range(i + 1, SIZE):
            total -= aug[i, j] * x[j]
        x[i] = total / aug[i, i]
    return x


def solve_4x4(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve matrix @ x = rhs for a 4x4 matrix using partial pivoting.

    Raises SingularMatrixError when the matrix has no unique inverse.
    """
    a: np.ndarray = _as_matrix(matrix)
    b: np.ndarray = np.array(rhs, dtype=np.float64)
    if b.shape != (SIZE,):
        raise ValueError(f"Expected a length-{SIZE} vector, got shape {b.shape}.")

    aug: np.ndarray = np.empty((SIZE, SIZE + 1), dtype=np.float64)
    aug[:, :SIZE] = a
    aug[:, SIZE] = b

    _forward_eliminate(aug)
    return _back_substitute(aug)


def determinant_4x4(matrix: np.ndarray) -> float:
    """Return det(matrix) via the same pivoted elimination; 0.0 when singular."""
    m: np.ndarray = _as_matrix(matrix)
    det: float = 1.0
    sign: float = 1.0
    for col in range(SIZE):
        pivot, max_abs = _select_pivot(m, col)
        if max_abs == 0.0:
            return 0.0  # A zero column is a valid diagnostic value, not an error.
        if pivot != col:
            _swap_rows(m, col, pivot)
            sign = -sign
        det *= float(m[col, col])
        _eliminate_below(m, col)
    return det * sign
