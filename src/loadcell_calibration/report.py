"""Persisted result payload and terminal report for a calibration run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from loadcell_calibration.calibration import CalibrationFit
from loadcell_calibration.dataset import CalibrationDataset
from loadcell_calibration.diagnostics import FitDiagnostics


def build_result_payload(
    dataset: CalibrationDataset,
    fit: CalibrationFit,
    diagnostics: FitDiagnostics,
) -> dict[str, Any]:
    """Return the JSON-serializable calibration result."""
    return {
        "factors": [float(f) for f in fit.factors],
        "residual_variance": diagnostics.residual_variance,
        "rss": diagnostics.rss,
        "det_A": diagnostics.determinant,
        "error_det": diagnostics.error_determinant,
        "calibration_weight": dataset.calibration_weight,
        "calibration_ok": diagnostics.ok,
    }


def write_result_json(path: Path, payload: dict[str, Any]) -> None:
    """Write a result payload as indented UTF-8 JSON, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _format_vector(values: Sequence[float]) -> str:
    return "[" + " ".join(f"{float(v):g}" for v in values) + "]"


def format_report(
    dataset: CalibrationDataset,
    fit: CalibrationFit,
    diagnostics: FitDiagnostics,
    *,
    print_diagnostics: bool = True,
) -> list[str]:
    """Build human-readable report lines for the terminal."""
    lines: list[str] = [
        f"Calibration weight W = {dataset.calibration_weight:g}",
        f"Zero reference (adc): {_format_vector(dataset.zero)}",
        "Computed factors f0..f3 (weight per ADC count):",
    ]
    lines.extend(f"  f{i} = {float(f):.10g}" for i, f in enumerate(fit.factors))

    if print_diagnostics:
        lines.append("Normal matrix A:")
        lines.extend(f"  {_format_vector(row)}" for row in fit.matrix)
        lines.append(f"Vector b: {_format_vector(fit.rhs)}")
        lines.append(f"RSS = {diagnostics.rss:.6g}")
        lines.append(f"Residual variance = {diagnostics.residual_variance:.6g}")
        lines.append(f"det(A) = {diagnostics.determinant:.6g}")
        lines.append(f"Error determinant = {diagnostics.error_determinant:.6g}")

    status: str = "OK" if diagnostics.ok else "NOT CONVERGED"
    lines.append(f"Calibration status: {status}")
    return lines


def format_weight_lines(reading: Sequence[float], weight: float) -> list[str]:
    """Report lines for one estimated reading."""
    return [
        f"Input ADC: {_format_vector(reading)}",
        f"Estimated weight = {weight:.6g} (same units as calibration weight)",
    ]
