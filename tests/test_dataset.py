"""Unit tests for dataset utilities (calibration JSON and ADC reading parsing)."""

from __future__ import annotations  # Use future annotations for forward refs.

import json  # Use json to build calibration files on disk.
from pathlib import Path  # Use Path for type-safe filesystem paths.
from typing import Any

import pytest  # Use pytest for assertions and exception checks.

from loadcell_calibration import dataset  # Import module under test.


def _calibration_dict(**overrides: Any) -> dict[str, Any]:
    """Build a minimal valid calibration JSON object, with optional overrides."""
    raw: dict[str, Any] = {
        "calibration_weight": 100.0,
        "zero": [1000, 1010, 990, 1005],
        "on_cell_0": [1200, 1015, 995, 1010],
        "on_cell_1": [1005, 1210, 1000, 1008],
        "on_cell_2": [1002, 1012, 1190, 1007],
        "on_cell_3": [1004, 1013, 992, 1205],
        "on_center": [1050, 1060, 1040, 1055],
    }
    raw.update(overrides)
    return raw


def test_parse_calibration_dict_happy_path() -> None:
    """parse_calibration_dict returns float tuples in placement order."""
    cal: dataset.CalibrationDataset = dataset.parse_calibration_dict(
        _calibration_dict()
    )

    # Verify numeric conversion and immutability-friendly tuple types.
    assert cal.calibration_weight == 100.0
    assert cal.zero == (1000.0, 1010.0, 990.0, 1005.0)
    assert isinstance(cal.on_cell_0, tuple)

    # Verify the fixed row order: cell-0..cell-3, then center.
    rows = cal.measurement_rows()
    assert len(rows) == 5
    assert rows[0] == cal.on_cell_0
    assert rows[3] == cal.on_cell_3
    assert rows[4] == cal.on_center


def test_parse_calibration_dict_missing_field_raises() -> None:
    """A missing placement is reported by name."""
    raw: dict[str, Any] = _calibration_dict()
    del raw["on_center"]
    with pytest.raises(ValueError, match="on_center"):
        dataset.parse_calibration_dict(raw)


@pytest.mark.parametrize(
    "bad_vector",
    [[1, 2, 3], [1, 2, 3, 4, 5], "1,2,3,4", None],
)
def test_parse_calibration_dict_wrong_channel_count_raises(bad_vector: Any) -> None:
    """Vectors must contain exactly four channels."""
    with pytest.raises(ValueError, match="exactly 4"):
        dataset.parse_calibration_dict(_calibration_dict(on_cell_2=bad_vector))


def test_parse_calibration_dict_non_numeric_raises() -> None:
    """Non-numeric channel values are rejected."""
    with pytest.raises(ValueError, match="non-numeric"):
        dataset.parse_calibration_dict(_calibration_dict(zero=[1, 2, "x", 4]))


def test_parse_calibration_dict_bad_weight_raises() -> None:
    """The calibration weight must be numeric."""
    with pytest.raises(ValueError, match="calibration_weight"):
        dataset.parse_calibration_dict(_calibration_dict(calibration_weight="heavy"))


def test_load_calibration_json_reads_file(tmp_path: Path) -> None:
    """load_calibration_json parses a calibration file from disk."""
    path: Path = tmp_path / "calibration.json"
    path.write_text(json.dumps(_calibration_dict()), encoding="utf-8")
    cal: dataset.CalibrationDataset = dataset.load_calibration_json(path)
    assert cal.on_center == (1050.0, 1060.0, 1040.0, 1055.0)


def test_load_calibration_json_rejects_non_object(tmp_path: Path) -> None:
    """A JSON array is not a calibration record."""
    path: Path = tmp_path / "calibration.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError, match="JSON object"):
        dataset.load_calibration_json(path)


def test_parse_reading_csv_tolerates_whitespace() -> None:
    """Comma-separated readings may include spaces around values."""
    reading = dataset.parse_reading_csv(" 1020, 1018 ,1005,1009.5 ")
    assert reading == (1020.0, 1018.0, 1005.0, 1009.5)


@pytest.mark.parametrize(
    ("text", "expected_error"),
    [
        ("1,2,3", "4 comma-separated"),
        ("1,2,3,4,5", "4 comma-separated"),
        ("1,2,x,4", "Invalid ADC value"),
    ],
)
def test_parse_reading_csv_rejects_malformed(text: str, expected_error: str) -> None:
    """Readings with the wrong count or non-numeric parts are rejected."""
    with pytest.raises(ValueError, match=expected_error):
        dataset.parse_reading_csv(text)


def test_load_reading_json_reads_adc_field(tmp_path: Path) -> None:
    """load_reading_json reads the 'adc' list."""
    path: Path = tmp_path / "adc.json"
    path.write_text(json.dumps({"adc": [1, 2, 3, 4]}), encoding="utf-8")
    assert dataset.load_reading_json(path) == (1.0, 2.0, 3.0, 4.0)


def test_load_reading_json_missing_field_raises(tmp_path: Path) -> None:
    """An ADC file without 'adc' is rejected."""
    path: Path = tmp_path / "adc.json"
    path.write_text(json.dumps({"values": [1, 2, 3, 4]}), encoding="utf-8")
    with pytest.raises(ValueError, match="'adc'"):
        dataset.load_reading_json(path)


@pytest.mark.parametrize(
    "bad_vector",
    [[1, 2, True, 4], [1, 2, "12", 4], [1, None, 3, 4]],
)
def test_parse_calibration_dict_rejects_booleans_and_strings(bad_vector: Any) -> None:
    """Only JSON numbers are accepted as channel values."""
    with pytest.raises(ValueError, match="non-numeric"):
        dataset.parse_calibration_dict(_calibration_dict(on_cell_1=bad_vector))


@pytest.mark.parametrize("bad_weight", [True, "100", None])
def test_parse_calibration_dict_rejects_non_number_weight(bad_weight: Any) -> None:
    """Booleans and numeric strings are not a calibration weight."""
    with pytest.raises(ValueError, match="calibration_weight"):
        dataset.parse_calibration_dict(_calibration_dict(calibration_weight=bad_weight))


def test_load_reading_json_rejects_boolean_channel(tmp_path: Path) -> None:
    """An ADC file with a boolean channel is rejected."""
    path: Path = tmp_path / "adc.json"
    path.write_text(json.dumps({"adc": [1, 2, False, 4]}), encoding="utf-8")
    with pytest.raises(ValueError, match="non-numeric"):
        dataset.load_reading_json(path)
