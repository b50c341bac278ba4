"""Fit load-cell scale factors from a calibration file and optionally estimate a weight."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import NoReturn

# Add `src` to sys.path so this script works even before `pip install -e .`.
PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
SRC_DIR: Path = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from loadcell_calibration.calibration import (
    CONFIG_TOML_PATH,
    CalibrationConfig,
    fit_scale_factors,
    load_calibration_config,
    resolve_ridge,
)
from loadcell_calibration.dataset import (
    CHANNELS,
    CalibrationDataset,
    Vector4,
    load_calibration_json,
    load_reading_json,
    parse_reading_csv,
)
from loadcell_calibration.diagnostics import evaluate_fit
from loadcell_calibration.linalg import SingularMatrixError
from loadcell_calibration.report import (
    build_result_payload,
    format_report,
    format_weight_lines,
    write_result_json,
)
from loadcell_calibration.weight import estimate_weight


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for one calibration run."""
    parser = argparse.ArgumentParser(description="Compute load-cell scale factors.")
    parser.add_argument(
        "--cal",
        type=Path,
        default=Path("calibration.json"),
        help="Path to calibration JSON.",
    )
    parser.add_argument(
        "--adc",
        type=str,
        default="",
        help="Comma-separated 4 ADC values to compute weight, e.g. 1020,1018,1005,1009.",
    )
    parser.add_argument(
        "--adc-file",
        type=Path,
        default=None,
        help='Path to JSON file containing {"adc": [v0,v1,v2,v3]}.',
    )
    parser.add_argument(
        "--ridge",
        type=float,
        default=None,
        help="Ridge regularization added to diag(A). Overrides LOADCELL_RIDGE and --config.",
    )
    parser.add_argument("--config", type=Path, default=CONFIG_TOML_PATH)
    parser.add_argument(
        "--print-diagnostics",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Print A, b and fit diagnostics (default from --config).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to write the calibration result JSON.",
    )
    return parser.parse_args()


def fail(message: str, code: int) -> NoReturn:
    """Print an error on stderr and exit."""
    print(f"error: {message}", file=sys.stderr)
    sys.exit(code)


def main() -> None:
    """Fit factors, print the report, then persist and estimate when requested."""
    args = parse_args()

    try:
        file_config: CalibrationConfig = load_calibration_config(args.config)
        ridge: float = resolve_ridge(args.ridge, file_config)
    except (OSError, ValueError) as exc:
        fail(f"invalid configuration: {exc}", 2)

    print_diagnostics: bool = (
        file_config.print_diagnostics
        if args.print_diagnostics is None
        else args.print_diagnostics
    )
    config = CalibrationConfig(
        ridge=ridge,
        ok_threshold=file_config.ok_threshold,
        print_diagnostics=print_diagnostics,
    )

    try:
        dataset: CalibrationDataset = load_calibration_json(args.cal)
    except (OSError, ValueError) as exc:
        fail(f"reading calibration file: {exc}", 1)

    try:
        fit = fit_scale_factors(dataset, config)
    except SingularMatrixError as exc:
        fail(
            f"calculation error: could not solve normal equations: {exc}. "
            "Add more varied placements or pass a non-zero --ridge.",
            1,
        )

    diagnostics = evaluate_fit(
        dataset, fit.factors, fit.matrix, ok_threshold=config.ok_threshold
    )
    for line in format_report(
        dataset, fit, diagnostics, print_diagnostics=config.print_diagnostics
    ):
        print(line)

    if args.output is not None:
        write_result_json(args.output, build_result_payload(dataset, fit, diagnostics))
        print(f"Result saved: {args.output}")

    reading: Vector4 | None = None
    if args.adc:
        try:
            reading = parse_reading_csv(args.adc)
        except ValueError as exc:
            # Wrong value count is a usage error; a bad number is a data error.
            wrong_count: bool = len(args.adc.split(",")) != CHANNELS
            fail(str(exc), 2 if wrong_count else 1)
    elif args.adc_file is not None:
        try:
            reading = load_reading_json(args.adc_file)
        except (OSError, ValueError) as exc:
            fail(f"reading adc file: {exc}", 1)

    if reading is not None:
        weight: float = estimate_weight(reading, dataset.zero, fit.factors)
        for line in format_weight_lines(reading, weight):
            print(line)


if __name__ == "__main__":
    main()
