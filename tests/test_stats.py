from __future__ import annotations

import math

import numpy as np
import pandas as pd

from asb_viewer.detectors.stats import (
    EMPTY_STATISTICS,
    StatisticsDetector,
    describe,
    upper_median,
)


def test_describe_uses_population_std_and_upper_median() -> None:
    stats = describe([4.0, 1.0, 3.0, 2.0])

    assert stats.count == 4
    assert stats.mean == 2.5
    assert math.isclose(stats.std_dev, math.sqrt(1.25))
    assert stats.min == 1.0
    assert stats.max == 4.0
    assert stats.median == 3.0


def test_upper_median_odd_length() -> None:
    assert upper_median(np.array([1.0, 2.0, 3.0])) == 2.0


def test_describe_empty_is_all_zero() -> None:
    assert describe([]) == EMPTY_STATISTICS
    assert EMPTY_STATISTICS.count == 0


def test_formatted_renders_four_decimals() -> None:
    formatted = describe([1.0, 2.0, 3.0, 4.0]).formatted()

    assert formatted == {
        "count": 4,
        "mean": "2.5000",
        "stdDev": "1.1180",
        "min": "1.0000",
        "max": "4.0000",
        "median": "3.0000",
    }


def test_statistics_detector_ignores_unparseable_cells() -> None:
    df = pd.DataFrame({"v": ["1", "abc", "", "3"]})
    result = StatisticsDetector(column="v").run(df)

    stats = result.details["statistics"]
    assert stats.count == 2
    assert stats.mean == 2.0
    assert result.summary["column"] == "v"
    assert result.tables["statistics"].loc[0, "count"] == 2


def test_statistics_detector_missing_column() -> None:
    result = StatisticsDetector(column="missing").run(pd.DataFrame({"v": ["1"]}))
    assert result.details["statistics"] == EMPTY_STATISTICS
