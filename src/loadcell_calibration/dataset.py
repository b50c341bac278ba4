"""
Calibration dataset utilities for a 4-channel load-cell array.
Reads calibration JSON exports and raw ADC readings into typed, immutable records.
"""

from __future__ import annotations

# Standard library imports
from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

CHANNELS: int = 4  # One ADC channel per load cell.

# Measurement placements in the fixed order used to build the design matrix.
PLACEMENT_KEYS: tuple[str, ...] = (
    "on_cell_0",
    "on_cell_1",
    "on_cell_2",
    "on_cell_3",
    "on_center",
)

Vector4 = tuple[float, float, float, float]


@dataclass(frozen=True)  # frozen = true means this class is immutable
class CalibrationDataset:
    """One calibration run: a known weight placed at five positions in turn."""

    calibration_weight: float
    zero: Vector4
    on_cell_0: Vector4
    on_cell_1: Vector4
    on_cell_2: Vector4
    on_cell_3: Vector4
    on_center: Vector4

    def measurement_rows(self) -> tuple[Vector4, ...]:
        """Return the five placements ordered cell-0, cell-1, cell-2, cell-3, center."""
        return tuple(getattr(self, key) for key in PLACEMENT_KEYS)


def _is_number(value: Any) -> bool:
    """JSON numbers only: booleans and numeric strings are rejected."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_vector(raw: Any, key: str) -> Vector4:
    """Convert a JSON list into a 4-tuple of floats, rejecting anything else."""
    if not isinstance(raw, (list, tuple)) or len(raw) != CHANNELS:
        raise ValueError(f"'{key}' must be a list of exactly {CHANNELS} numbers.")
    if not all(_is_number(v) for v in raw):
        raise ValueError(f"'{key}' contains a non-numeric value.")
    return tuple(float(v) for v in raw)  # type: ignore[return-value]


def parse_calibration_dict(raw: dict[str, Any]) -> CalibrationDataset:
    """Build a CalibrationDataset from a decoded calibration JSON object."""
    missing: list[str] = [
        key
        for key in ("calibration_weight", "zero", *PLACEMENT_KEYS)
        if key not in raw
    ]
    if missing:
        raise ValueError(f"Missing calibration fields: {missing}")

    if not _is_number(raw["calibration_weight"]):
        raise ValueError("'calibration_weight' must be a number.")
    weight: float = float(raw["calibration_weight"])

    return CalibrationDataset(
        calibration_weight=weight,
        zero=_parse_vector(raw["zero"], "zero"),
        on_cell_0=_parse_vector(raw["on_cell_0"], "on_cell_0"),
        on_cell_1=_parse_vector(raw["on_cell_1"], "on_cell_1"),
        on_cell_2=_parse_vector(raw["on_cell_2"], "on_cell_2"),
        on_cell_3=_parse_vector(raw["on_cell_3"], "on_cell_3"),
        on_center=_parse_vector(raw["on_center"], "on_center"),
    )


def load_calibration_json(path: Path) -> CalibrationDataset:
    """Load a calibration JSON file from disk."""
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Calibration file {path} must contain a JSON object.")
    return parse_calibration_dict(raw)


def parse_reading_csv(text: str) -> Vector4:
    """Parse a comma-separated ADC reading such as '1020,1018,1005,1009'."""
    parts: list[str] = text.split(",")
    if len(parts) != CHANNELS:
        raise ValueError(f"ADC reading must have {CHANNELS} comma-separated values.")
    values: list[float] = []
    for part in parts:
        try:
            values.append(float(part.strip()))
        except ValueError as exc:
            raise ValueError(f"Invalid ADC value {part!r}.") from exc
    return tuple(values)  # type: ignore[return-value]


def load_reading_json(path: Path) -> Vector4:
    """Load an ADC reading from a JSON file shaped like {"adc": [v0, v1, v2, v3]}."""
    raw: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict) or "adc" not in raw:
        raise ValueError(f"ADC file {path} must contain an 'adc' field.")
    return _parse_vector(raw["adc"], "adc")
