from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from asb_viewer.config import AppConfig
from asb_viewer.detectors.patterns import Pattern
from asb_viewer.detectors.registry import default_detectors
from asb_viewer.detectors.stats import Statistics
from asb_viewer.errors import ParseFailure
from asb_viewer.features.grouping import group_rows, is_grouped, resolve_grouping_column
from asb_viewer.features.range_filter import RangeBounds, filter_rows_by_range, resolve_bounds
from asb_viewer.io.read import validate_rows
from asb_viewer.preprocess.numeric import numeric_columns
from asb_viewer.preprocess.time import current_instant
from asb_viewer.report.insights import build_insights
from asb_viewer.viz.traces import Trace, build_traces

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    traces: list[Trace]
    statistics: Statistics
    patterns: dict[str, Pattern]
    insights: list[str]
    bounds: RangeBounds
    grouping_column: str | None = None
    row_count: int = 0
    filtered_row_count: int = 0
    tables: dict[str, pd.DataFrame] = field(default_factory=dict)

    def to_summary(self) -> dict[str, Any]:
        return {
            "statistics": self.statistics.formatted(),
            "patterns": {column: pattern.to_dict() for column, pattern in self.patterns.items()},
            "insights": list(self.insights),
            "bounds": self.bounds.to_dict(),
            "grouping_column": self.grouping_column,
            "row_count": self.row_count,
            "filtered_row_count": self.filtered_row_count,
            "trace_count": len(self.traces),
        }


def _require_selected_columns(df: pd.DataFrame, config: AppConfig) -> None:
    selected = [config.columns.x, config.columns.y]
    if config.chart.dual_axis and config.columns.y2:
        selected.append(config.columns.y2)
    missing = [column for column in selected if column not in df.columns]
    if missing:
        raise ParseFailure(f"Selected columns not found in data: {', '.join(missing)}")


def run_pipeline(rows: pd.DataFrame, config: AppConfig, now_ms: int | None = None) -> PipelineResult:
    """Filter, group and chart the rows and compute statistics and patterns.

    Pure with respect to ``rows``; rerun it whenever rows or selection change.
    ``now_ms`` is the stand-in instant for empty timestamp cells.
    """
    validate_rows(rows)
    _require_selected_columns(rows, config)
    now_ms = current_instant() if now_ms is None else now_ms
    x_column = config.columns.x

    bounds = resolve_bounds(rows, x_column, config.range, now_ms=now_ms)
    filtered = filter_rows_by_range(rows, x_column, bounds, now_ms=now_ms)

    grouping_column = resolve_grouping_column(rows.columns, config.columns)
    groups = group_rows(filtered, grouping_column)
    grouped = is_grouped(groups)
    traces = build_traces(
        groups,
        grouped,
        columns=config.columns,
        chart=config.chart,
        smoothing=config.smoothing,
        now_ms=now_ms,
    )

    results = {
        detector.name: detector.run(filtered)
        for detector in default_detectors(config, pattern_columns=numeric_columns(rows))
    }
    statistics: Statistics = results["statistics"].details["statistics"]
    patterns: dict[str, Pattern] = results["patterns"].details["patterns"]
    LOGGER.info(
        "Pipeline: %s/%s rows in range, %s group(s), %s trace(s)",
        len(filtered),
        len(rows),
        len(groups) if grouped else 1,
        len(traces),
    )

    tables: dict[str, pd.DataFrame] = {}
    for result in results.values():
        tables.update(result.tables)
    return PipelineResult(
        traces=traces,
        statistics=statistics,
        patterns=patterns,
        insights=build_insights(patterns),
        bounds=bounds,
        grouping_column=grouping_column if grouped else None,
        row_count=len(rows),
        filtered_row_count=len(filtered),
        tables=tables,
    )
