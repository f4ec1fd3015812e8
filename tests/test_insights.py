from __future__ import annotations

from asb_viewer.detectors.patterns import Outlier, Pattern
from asb_viewer.report.insights import build_insights


def test_insights_emit_one_message_per_condition() -> None:
    patterns = {
        "Easting": Pattern(
            volatility="high",
            trend="increasing",
            seasonality=7,
            outliers=[Outlier(index=1, value=5.0), Outlier(index=3, value=9.0)],
        ),
        "Northing": Pattern(volatility="medium", trend="decreasing", seasonality=False),
    }

    assert build_insights(patterns) == [
        "📈 Easting shows an increasing trend",
        "⚡ Easting has high volatility - consider smoothing",
        "🔄 Easting shows seasonal pattern (period: 7)",
        "🎯 Easting has 2 outliers detected",
        "📉 Northing shows a decreasing trend",
    ]


def test_quiet_patterns_produce_no_insights() -> None:
    patterns = {"v": Pattern(volatility="low", trend="stable", seasonality=False)}
    assert build_insights(patterns) == []
    assert build_insights({}) == []
