from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from asb_viewer.config import SmoothingConfig

MS_PER_HOUR = 60 * 60 * 1000
TIME_MODE_MIN_LENGTH = 2


def moving_average(values: Sequence[float], window: int) -> np.ndarray:
    """Trailing mean over up to ``window`` points ending at each index."""
    if window < 1:
        raise ValueError("window must be >= 1")
    series = pd.Series(np.asarray(values, dtype=float))
    return series.rolling(window=window, min_periods=1).mean().to_numpy(dtype=float)


def time_moving_average(
    instants: Sequence[int],
    values: Sequence[float],
    hours: float,
) -> np.ndarray:
    """Trailing mean over earlier-or-equal indices within ``hours`` of each point.

    Only positions ``j <= i`` contribute, so a later row never leaks into an
    earlier average even when its timestamp is closer.
    """
    times = np.asarray(instants, dtype=np.int64)
    data = np.asarray(values, dtype=float)
    if times.shape != data.shape:
        raise ValueError("instants and values must have the same length")
    window_ms = hours * MS_PER_HOUR
    out = np.empty_like(data)
    for idx in range(data.size):
        window_start = times[idx] - window_ms
        in_window = times[: idx + 1] >= window_start
        if not in_window.any():
            out[idx] = data[idx]
            continue
        out[idx] = float(data[: idx + 1][in_window].mean())
    return out


def passes_length_gate(length: int, config: SmoothingConfig) -> bool:
    if config.mode == "time":
        return length > TIME_MODE_MIN_LENGTH
    return length > config.window


def smooth_values(
    instants: Sequence[int],
    values: Sequence[float],
    config: SmoothingConfig,
) -> np.ndarray | None:
    """Smoothed series for the configured mode, or None when smoothing is skipped."""
    if not config.enabled or not passes_length_gate(len(values), config):
        return None
    if config.mode == "time":
        return time_moving_average(instants, values, config.hours)
    return moving_average(values, config.window)
