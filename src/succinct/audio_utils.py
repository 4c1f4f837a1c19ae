"""Audio helpers."""

from __future__ import annotations

import numpy as np

INT16_FULL_SCALE = 32768.0


def normalize_block(block) -> np.ndarray:
    data = np.asarray(block)
    if data.dtype == np.int16:
        return data.astype(np.float32) / INT16_FULL_SCALE
    return data.astype(np.float32, copy=False)


def compute_energy(block) -> float:
    """Mean absolute amplitude of one block across all channels, in [0, 1]."""
    data = normalize_block(block)
    if data.size == 0:
        return 0.0
    energy = float(np.mean(np.abs(data)))
    return min(max(energy, 0.0), 1.0)


def smooth_level(previous: float, current: float, smoothing: float = 0.5) -> float:
    if not 0.0 <= smoothing < 1.0:
        raise ValueError("smoothing must be in [0, 1).")
    return smoothing * previous + (1.0 - smoothing) * current
