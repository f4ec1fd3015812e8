from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Sequence

import numpy as np
import pandas as pd

from asb_viewer.detectors.base import Detector, DetectorResult
from asb_viewer.detectors.stats import Statistics, describe
from asb_viewer.preprocess.numeric import finite_values, numeric_columns

Volatility = Literal["low", "medium", "high"]
Trend = Literal["increasing", "decreasing", "stable", "none"]
Scale = Literal["small", "medium", "large"]

HIGH_VOLATILITY_CV = 0.5
MEDIUM_VOLATILITY_CV = 0.2
TREND_SHARE_THRESHOLD = 0.7
MIN_TREND_LENGTH = 3
SEASONAL_PERIODS = (7, 12, 24, 30)
MIN_SEASONALITY_LENGTH = 12
PHASE_VARIANCE_RATIO = 0.1
SEASONAL_PHASE_SHARE = 0.6
MIN_OUTLIER_LENGTH = 4
IQR_MULTIPLIER = 1.5
LARGE_RANGE = 1000
MEDIUM_RANGE = 100


@dataclass(frozen=True)
class Outlier:
    index: int
    value: float


@dataclass(frozen=True)
class Pattern:
    volatility: Volatility
    trend: Trend
    seasonality: int | Literal[False]
    outliers: list[Outlier] = field(default_factory=list)
    range: float = 0.0
    scale: Scale = "small"

    def to_dict(self) -> dict[str, Any]:
        return {
            "volatility": self.volatility,
            "trend": self.trend,
            "seasonality": self.seasonality,
            "outliers": [{"index": item.index, "value": item.value} for item in self.outliers],
            "range": self.range,
            "scale": self.scale,
        }


def classify_volatility(stats: Statistics) -> Volatility:
    # A zero mean leaves the coefficient of variation undefined; report "low".
    if stats.mean == 0:
        return "low"
    cv = stats.std_dev / stats.mean
    if not math.isfinite(cv):
        return "low"
    if cv > HIGH_VOLATILITY_CV:
        return "high"
    if cv > MEDIUM_VOLATILITY_CV:
        return "medium"
    return "low"


def detect_trend(values: Sequence[float]) -> Trend:
    data = np.asarray(values, dtype=float)
    if data.size < MIN_TREND_LENGTH:
        return "none"
    deltas = np.diff(data)
    total = float(deltas.size)
    if np.count_nonzero(deltas > 0) / total > TREND_SHARE_THRESHOLD:
        return "increasing"
    if np.count_nonzero(deltas < 0) / total > TREND_SHARE_THRESHOLD:
        return "decreasing"
    return "stable"


def _is_seasonal(data: np.ndarray, period: int) -> bool:
    cycles = data.size // period
    if cycles < 2:
        return False
    by_phase = data[: cycles * period].reshape(cycles, period)
    phase_mean = by_phase.mean(axis=0)
    phase_variance = by_phase.var(axis=0)
    low_variance = phase_variance < phase_mean * PHASE_VARIANCE_RATIO
    return np.count_nonzero(low_variance) / period > SEASONAL_PHASE_SHARE


def detect_seasonality(
    values: Sequence[float],
    periods: Iterable[int] = SEASONAL_PERIODS,
) -> int | Literal[False]:
    """First candidate period whose phases mostly repeat with low variance."""
    data = np.asarray(values, dtype=float)
    if data.size < MIN_SEASONALITY_LENGTH:
        return False
    for period in periods:
        if data.size >= period * 2 and _is_seasonal(data, period):
            return int(period)
    return False


def detect_outliers(values: Sequence[float]) -> list[Outlier]:
    data = np.asarray(values, dtype=float)
    if data.size < MIN_OUTLIER_LENGTH:
        return []
    ordered = np.sort(data)
    q1 = ordered[math.floor(data.size * 0.25)]
    q3 = ordered[math.floor(data.size * 0.75)]
    iqr = q3 - q1
    lower = q1 - IQR_MULTIPLIER * iqr
    upper = q3 + IQR_MULTIPLIER * iqr
    flagged = np.flatnonzero((data < lower) | (data > upper))
    return [Outlier(index=int(idx), value=float(data[idx])) for idx in flagged]


def classify_scale(value_range: float) -> Scale:
    if value_range > LARGE_RANGE:
        return "large"
    if value_range > MEDIUM_RANGE:
        return "medium"
    return "small"


def detect_pattern(values: Sequence[float]) -> Pattern:
    stats = describe(values)
    value_range = stats.max - stats.min
    return Pattern(
        volatility=classify_volatility(stats),
        trend=detect_trend(values),
        seasonality=detect_seasonality(values),
        outliers=detect_outliers(values),
        range=value_range,
        scale=classify_scale(value_range),
    )


def detect_patterns(df: pd.DataFrame, columns: Iterable[str]) -> dict[str, Pattern]:
    """Pattern per column; columns without any finite value are left out."""
    patterns: dict[str, Pattern] = {}
    for column in columns:
        if column not in df.columns:
            continue
        values = finite_values(df[column])
        if values.size == 0:
            continue
        patterns[column] = detect_pattern(values)
    return patterns


class PatternsDetector(Detector):
    """Patterns for the given columns, or for every numeric column when none are given."""

    name = "patterns"

    def __init__(self, columns: list[str] | None = None) -> None:
        self.columns = columns

    def run(self, df: pd.DataFrame) -> DetectorResult:
        columns = self.columns if self.columns is not None else numeric_columns(df)
        patterns = detect_patterns(df, columns)
        outlier_rows = [
            {"column": column, "index": outlier.index, "value": outlier.value}
            for column, pattern in patterns.items()
            for outlier in pattern.outliers
        ]
        return DetectorResult(
            detector=self.name,
            summary={column: pattern.to_dict() for column, pattern in patterns.items()},
            tables={
                "outliers": pd.DataFrame(outlier_rows, columns=["column", "index", "value"]),
            },
            details={"patterns": patterns},
        )
