from __future__ import annotations

import pandas as pd

from asb_viewer.detectors.patterns import (
    Outlier,
    PatternsDetector,
    classify_scale,
    classify_volatility,
    detect_outliers,
    detect_pattern,
    detect_patterns,
    detect_seasonality,
    detect_trend,
)
from asb_viewer.detectors.stats import describe


def test_outliers_use_floor_index_quartiles() -> None:
    assert detect_outliers([1, 2, 3, 4, 5, 100]) == [Outlier(index=5, value=100.0)]
    assert detect_outliers([1, 2, 100]) == []


def test_outliers_keep_original_positions() -> None:
    values = [-50.0, 10.0, 11.0, 12.0, 13.0, 14.0, 15.0]
    assert detect_outliers(values) == [Outlier(index=0, value=-50.0)]


def test_trend_classification() -> None:
    assert detect_trend([1, 2, 3, 4]) == "increasing"
    assert detect_trend([4, 3, 2, 1]) == "decreasing"
    assert detect_trend([1, 2, 1, 2]) == "stable"
    assert detect_trend([1, 2]) == "none"


def test_volatility_thresholds() -> None:
    assert classify_volatility(describe([1.0, 9.0])) == "high"
    assert classify_volatility(describe([1.0, 3.0])) == "medium"
    assert classify_volatility(describe([10.0, 10.0, 10.0])) == "low"


def test_volatility_with_zero_or_negative_mean_is_low() -> None:
    assert classify_volatility(describe([-1.0, 1.0])) == "low"
    assert classify_volatility(describe([0.0, 0.0])) == "low"
    assert classify_volatility(describe([-1.0, -9.0])) == "low"


def test_seasonality_first_qualifying_period_wins() -> None:
    weekly = [10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0] * 4
    assert detect_seasonality(weekly) == 7

    monthly = [float(value) for value in range(1, 13)] * 2
    assert detect_seasonality(monthly) == 12


def test_seasonality_requires_enough_points_and_positive_phase_means() -> None:
    assert detect_seasonality([1.0, 2.0] * 5) is False
    assert detect_seasonality([0.0] * 30) is False


def test_scale_bounds() -> None:
    assert classify_scale(1001) == "large"
    assert classify_scale(1000) == "medium"
    assert classify_scale(100) == "small"


def test_detect_pattern_combines_classifiers() -> None:
    pattern = detect_pattern([1.0, 2.0, 3.0, 4.0, 5.0, 100.0])

    assert pattern.trend == "increasing"
    assert pattern.volatility == "high"
    assert pattern.seasonality is False
    assert pattern.outliers == [Outlier(index=5, value=100.0)]
    assert pattern.range == 99.0
    assert pattern.scale == "small"
    assert pattern.to_dict()["outliers"] == [{"index": 5, "value": 100.0}]


def test_detect_patterns_skips_columns_without_numbers() -> None:
    df = pd.DataFrame({"t": ["a", "b"], "v": ["1", "2"]})
    patterns = detect_patterns(df, ["t", "v", "missing"])

    assert list(patterns) == ["v"]


def test_patterns_detector_defaults_to_numeric_columns() -> None:
    df = pd.DataFrame(
        {
            "Epoch": ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05", "2024-01-06"],
            "Easting": ["1", "2", "3", "4", "5", "100"],
        }
    )
    result = PatternsDetector().run(df)

    assert list(result.details["patterns"]) == ["Easting"]
    outliers = result.tables["outliers"]
    assert outliers.to_dict(orient="records") == [{"column": "Easting", "index": 5, "value": 100.0}]
