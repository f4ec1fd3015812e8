from __future__ import annotations

from typing import Mapping

from asb_viewer.detectors.patterns import Pattern

INCREASING_TEMPLATE = "📈 {column} shows an increasing trend"
DECREASING_TEMPLATE = "📉 {column} shows a decreasing trend"
HIGH_VOLATILITY_TEMPLATE = "⚡ {column} has high volatility - consider smoothing"
SEASONALITY_TEMPLATE = "🔄 {column} shows seasonal pattern (period: {period})"
OUTLIERS_TEMPLATE = "🎯 {column} has {count} outliers detected"


def build_insights(patterns: Mapping[str, Pattern]) -> list[str]:
    """One message per trend, high-volatility, seasonality and outlier condition."""
    insights: list[str] = []
    for column, pattern in patterns.items():
        if pattern.trend == "increasing":
            insights.append(INCREASING_TEMPLATE.format(column=column))
        elif pattern.trend == "decreasing":
            insights.append(DECREASING_TEMPLATE.format(column=column))

        if pattern.volatility == "high":
            insights.append(HIGH_VOLATILITY_TEMPLATE.format(column=column))

        if pattern.seasonality is not False:
            insights.append(SEASONALITY_TEMPLATE.format(column=column, period=pattern.seasonality))

        if pattern.outliers:
            insights.append(OUTLIERS_TEMPLATE.format(column=column, count=len(pattern.outliers)))
    return insights
