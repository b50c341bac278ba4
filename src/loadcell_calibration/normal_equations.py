"""Least-squares normal equations for the per-channel scale-factor fit."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from loadcell_calibration.dataset import (
    CHANNELS,
    PLACEMENT_KEYS,
    CalibrationDataset,
)


@dataclass(frozen=True, eq=False)
class NormalSystem:
    """Normal matrix A = X^T X (+ ridge on the diagonal) and rhs b = X^T y."""

    matrix: np.ndarray  # 4x4, read-only.
    rhs: np.ndarray  # length 4, read-only.
    ridge: float = 0.0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NormalSystem):
            return NotImplemented
        return (
            np.array_equal(self.matrix, other.matrix)
            and np.array_equal(self.rhs, other.rhs)
            and self.ridge == other.ridge
        )


def _freeze(array: np.ndarray) -> np.ndarray:
    """Mark an array read-only so results cannot be mutated after the fit."""
    array.setflags(write=False)
    return array


def design_matrix(dataset: CalibrationDataset) -> np.ndarray:
    """Return X (5x4): each placement minus the zero reference, in placement order."""
    rows: np.ndarray = np.array(dataset.measurement_rows(), dtype=np.float64)
    zero: np.ndarray = np.array(dataset.zero, dtype=np.float64)
    return rows - zero  # Broadcast the zero row over all placements.


def observations(dataset: CalibrationDataset) -> np.ndarray:
    """Return y: the same known weight for every placement."""
    return np.full(len(PLACEMENT_KEYS), dataset.calibration_weight, dtype=np.float64)


def build_normal_system(
    dataset: CalibrationDataset,
    *,
    ridge: float = 0.0,
) -> NormalSystem:
    """Build A and b for (X^T X + ridge * I) f = X^T y."""
    x: np.ndarray = design_matrix(dataset)
    y: np.ndarray = observations(dataset)

    a: np.ndarray = np.zeros((CHANNELS, CHANNELS), dtype=np.float64)
    b: np.ndarray = np.zeros(CHANNELS, dtype=np.float64)
    for i in range(CHANNELS):
        for j in range(CHANNELS):
            a[i, j] = float(np.sum(x[:, i] * x[:, j]))  # A[i][j] = sum_k X[k][i] X[k][j]
        b[i] = float(np.sum(x[:, i] * y))  # b[i] = sum_k X[k][i] y[k]

    # Tikhonov regularization touches only the diagonal of A, never b.
    if ridge != 0:
        for i in range(CHANNELS):
            a[i, i] += ridge

    return NormalSystem(matrix=_freeze(a), rhs=_freeze(b), ridge=float(ridge))
