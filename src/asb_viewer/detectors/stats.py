from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd

from asb_viewer.detectors.base import Detector, DetectorResult
from asb_viewer.preprocess.numeric import finite_values

DISPLAY_DECIMALS = 4


@dataclass(frozen=True)
class Statistics:
    count: int
    mean: float
    std_dev: float
    min: float
    max: float
    median: float

    def formatted(self) -> dict[str, Any]:
        """Presentation values: floats rendered with four decimals."""
        return {
            "count": self.count,
            "mean": f"{self.mean:.{DISPLAY_DECIMALS}f}",
            "stdDev": f"{self.std_dev:.{DISPLAY_DECIMALS}f}",
            "min": f"{self.min:.{DISPLAY_DECIMALS}f}",
            "max": f"{self.max:.{DISPLAY_DECIMALS}f}",
            "median": f"{self.median:.{DISPLAY_DECIMALS}f}",
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


EMPTY_STATISTICS = Statistics(count=0, mean=0.0, std_dev=0.0, min=0.0, max=0.0, median=0.0)


def upper_median(sorted_values: np.ndarray) -> float:
    """Element at ``floor(n / 2)``; for even n this is the upper of the middle pair."""
    return float(sorted_values[sorted_values.size // 2])


def describe(values: Sequence[float] | np.ndarray) -> Statistics:
    """Descriptive statistics of already-finite values (population std dev)."""
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return EMPTY_STATISTICS
    mean = float(data.mean())
    return Statistics(
        count=int(data.size),
        mean=mean,
        std_dev=float(np.sqrt(np.mean((data - mean) ** 2))),
        min=float(data.min()),
        max=float(data.max()),
        median=upper_median(np.sort(data)),
    )


class StatisticsDetector(Detector):
    """Statistics of the selected value column over the filtered rows."""

    name = "statistics"

    def __init__(self, column: str) -> None:
        self.column = column

    def run(self, df: pd.DataFrame) -> DetectorResult:
        if self.column not in df.columns:
            stats = EMPTY_STATISTICS
        else:
            stats = describe(finite_values(df[self.column]))
        return DetectorResult(
            detector=self.name,
            summary={"column": self.column, **stats.formatted()},
            tables={"statistics": pd.DataFrame([{"column": self.column, **stats.to_dict()}])},
            details={"statistics": stats},
        )
