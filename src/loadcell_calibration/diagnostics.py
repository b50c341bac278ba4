"""
Fit-quality diagnostics for a calibration run.
Residuals are evaluated against the original calibration placements.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from loadcell_calibration.dataset import CHANNELS, CalibrationDataset
from loadcell_calibration.linalg import determinant_4x4
from loadcell_calibration.weight import estimate_weight

OK_RESIDUAL_VARIANCE: float = 1e-6  # Below this the fit is treated as exact.


@dataclass(frozen=True)
class FitDiagnostics:
    """Summary statistics describing how well the factors reproduce the calibration."""

    rss: float  # Residual sum of squares.
    residual_variance: float  # RSS / degrees of freedom.
    determinant: float  # det(A), after ridge if one was applied.
    error_determinant: float  # determinant * residual_variance.
    ok: bool  # residual_variance < threshold.
    degrees_of_freedom: int
    residuals: tuple[float, ...]  # Known weight minus estimate, per placement.


def _residual_variance(rss: float, dof: int) -> float:
    """Normalize RSS by degrees of freedom, or return it as-is when dof <= 0."""
    if dof > 0:
        return rss / dof
    return rss


def evaluate_fit(
    dataset: CalibrationDataset,
    factors: np.ndarray,
    matrix: np.ndarray,
    *,
    ok_threshold: float = OK_RESIDUAL_VARIANCE,
) -> FitDiagnostics:
    """Compute RSS, residual variance, det(A) and the composite error-determinant."""
    residuals: list[float] = []
    rss: float = 0.0
    for row in dataset.measurement_rows():
        estimate: float = estimate_weight(row, dataset.zero, factors)
        residual: float = dataset.calibration_weight - estimate
        residuals.append(residual)
        rss += residual * residual

    dof: int = len(residuals) - CHANNELS
    residual_variance: float = _residual_variance(rss, dof)

    determinant: float = determinant_4x4(matrix)
    return FitDiagnostics(
        rss=rss,
        residual_variance=residual_variance,
        determinant=determinant,
        error_determinant=determinant * residual_variance,
        ok=residual_variance < ok_threshold,
        degrees_of_freedom=dof,
        residuals=tuple(residuals),
    )
