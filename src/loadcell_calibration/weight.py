"""Convert raw ADC readings into weight using fitted per-channel scale factors."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from loadcell_calibration.dataset import CHANNELS


def _as_vector(values: Sequence[float] | np.ndarray, name: str) -> np.ndarray:
    """Return a float64 length-4 vector, rejecting any other shape."""
    vector: np.ndarray = np.asarray(values, dtype=np.float64)
    if vector.shape != (CHANNELS,):
        raise ValueError(
            f"Expected a length-{CHANNELS} {name} vector, got shape {vector.shape}."
        )
    return vector


def estimate_weight(
    reading: Sequence[float] | np.ndarray,
    zero: Sequence[float] | np.ndarray,
    factors: Sequence[float] | np.ndarray,
) -> float:
    """Return sum_i factors[i] * (reading[i] - zero[i]).

    No plausibility checks: negative or zero deltas yield whatever the factors imply.
    """
    delta: np.ndarray = _as_vector(reading, "reading") - _as_vector(
        zero, "zero"
    )  # Per-channel ADC counts above the zero reference.
    weight: float = 0.0
    for f, d in zip(_as_vector(factors, "factors"), delta):
        weight += float(f) * float(d)
    return weight
