"""Calibration pipeline: normal equations -> 4x4 solve -> per-channel scale factors."""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from pathlib import Path
import tomllib  # used for the solver parameters file
from typing import Any, Mapping

import numpy as np

from loadcell_calibration.dataset import CalibrationDataset
from loadcell_calibration.diagnostics import OK_RESIDUAL_VARIANCE
from loadcell_calibration.linalg import solve_4x4
from loadcell_calibration.normal_equations import NormalSystem, build_normal_system

CONFIG_TOML_PATH: Path = (  # Default location for solver parameters.
    Path(__file__).resolve().parent / "calibration_parameters.toml"
)  # Keep this near the package for portability.
RIDGE_ENV_VAR: str = "LOADCELL_RIDGE"


@dataclass(frozen=True)
class CalibrationConfig:
    """Named options for one calibration fit."""

    ridge: float = 0.0
    ok_threshold: float = OK_RESIDUAL_VARIANCE
    print_diagnostics: bool = True


@dataclass(frozen=True, eq=False)
class CalibrationFit:
    """Fitted factors plus the normal system they were solved from."""

    factors: np.ndarray  # Weight per ADC count for each channel, read-only.
    matrix: np.ndarray  # A used for the solve (ridge included).
    rhs: np.ndarray  # b used for the solve.

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalibrationFit):
            return NotImplemented
        return (
            np.array_equal(self.factors, other.factors)
            and np.array_equal(self.matrix, other.matrix)
            and np.array_equal(self.rhs, other.rhs)
        )


def _check_ridge(ridge: float) -> None:
    """Ridge must be a finite, non-negative scalar."""
    if not math.isfinite(ridge) or ridge < 0.0:
        raise ValueError("ridge must be a finite number >= 0.")


def _validate_config(config: CalibrationConfig) -> None:
    """Guard against invalid solver settings."""
    _check_ridge(config.ridge)
    if not math.isfinite(config.ok_threshold) or config.ok_threshold <= 0.0:
        raise ValueError("ok_threshold must be a finite number > 0.")


def _toml_number(solver: dict[str, Any], key: str, default: float) -> float:
    """Read a numeric [solver] entry, rejecting strings, booleans and arrays."""
    value: Any = solver.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"[solver] {key} must be a number, got {value!r}.")
    return float(value)


def load_calibration_config(path: Path = CONFIG_TOML_PATH) -> CalibrationConfig:
    """Load solver settings from the [solver] table of a TOML file."""
    raw: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    solver: Any = raw.get("solver", {})
    if not isinstance(solver, dict):
        raise ValueError(f"[solver] in {path} must be a table.")
    print_diagnostics: Any = solver.get("print_diagnostics", True)
    if not isinstance(print_diagnostics, bool):
        raise ValueError(
            f"[solver] print_diagnostics must be true or false, got {print_diagnostics!r}."
        )
    config = CalibrationConfig(
        ridge=_toml_number(solver, "ridge", 0.0),
        ok_threshold=_toml_number(solver, "ok_threshold", OK_RESIDUAL_VARIANCE),
        print_diagnostics=print_diagnostics,
    )
    _validate_config(config)
    return config


def resolve_ridge(
    cli_ridge: float | None,
    config: CalibrationConfig,
    environ: Mapping[str, str] = os.environ,
) -> float:
    """Pick the ridge value: CLI flag, then LOADCELL_RIDGE, then the config file."""
    if cli_ridge is not None:
        ridge: float = cli_ridge
    elif environ.get(RIDGE_ENV_VAR, "").strip():
        try:
            ridge = float(environ[RIDGE_ENV_VAR])
        except ValueError as exc:
            raise ValueError(
                f"{RIDGE_ENV_VAR} must be a number, got {environ[RIDGE_ENV_VAR]!r}."
            ) from exc
    else:
        ridge = config.ridge
    _check_ridge(ridge)
    return ridge


def fit_scale_factors(
    dataset: CalibrationDataset,
    config: CalibrationConfig = CalibrationConfig(),
) -> CalibrationFit:
    """Least-squares fit of the 4 scale factors.

    SingularMatrixError from the solver is propagated unchanged: degenerate
    placement geometry is fatal and needs new data or a non-zero ridge.
    """
    _validate_config(config)
    system: NormalSystem = build_normal_system(dataset, ridge=config.ridge)
    factors: np.ndarray = solve_4x4(system.matrix, system.rhs)
    factors.setflags(write=False)  # Factors are fixed for the lifetime of the calibration.
    return CalibrationFit(factors=factors, matrix=system.matrix, rhs=system.rhs)
