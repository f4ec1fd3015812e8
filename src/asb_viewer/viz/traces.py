from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

import pandas as pd

from asb_viewer.config import ChartConfig, ColumnsConfig, SmoothingConfig
from asb_viewer.features.baseline import rebase_for_trace, rebase_to_first_valid
from asb_viewer.features.smoothing import smooth_values
from asb_viewer.preprocess.numeric import to_numeric
from asb_viewer.preprocess.time import instant_to_timestamp, normalize_timestamps

Axis = Literal["primary", "secondary"]

COLOR_PALETTE = (
    "#038357", "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#FF8A80", "#80CBC4", "#81C784", "#FFB74D", "#F06292",
    "#9575CD", "#64B5F6", "#4DB6AC", "#AED581", "#FFD54F",
    "#A1887F", "#90A4AE", "#EF5350", "#26A69A", "#66BB6A",
    "#FFA726", "#EC407A", "#AB47BC", "#42A5F5", "#26C6DA",
)
SECONDARY_ACCENT_COLOR = "#038357"
SECONDARY_MARKER = "square"
OVERLAY_WIDTH = 3
GROUPED_OVERLAY_OPACITY = 0.7
SINGLE_OVERLAY_OPACITY = 0.8


@dataclass(frozen=True)
class TraceStyle:
    kind: str = "scatter"
    mode: str = "lines+markers"
    dashed: bool = False
    marker_symbol: str | None = None
    width: float | None = None
    opacity: float | None = None


@dataclass(frozen=True)
class Trace:
    x: list[int]
    y: list[float]
    label: str
    axis: Axis
    color: str
    style: TraceStyle = field(default_factory=TraceStyle)

    def to_plotly(self) -> dict[str, Any]:
        line: dict[str, Any] = {"color": self.color}
        if self.style.dashed:
            line["dash"] = "dash"
        if self.style.width is not None:
            line["width"] = self.style.width
        payload: dict[str, Any] = {
            "x": [instant_to_timestamp(instant).isoformat() for instant in self.x],
            "y": list(self.y),
            "type": self.style.kind,
            "mode": self.style.mode,
            "name": self.label,
            "line": line,
            "yaxis": "y2" if self.axis == "secondary" else "y",
        }
        if self.style.mode != "lines":
            marker: dict[str, Any] = {"color": self.color}
            if self.style.marker_symbol:
                marker["symbol"] = self.style.marker_symbol
            payload["marker"] = marker
        if self.style.opacity is not None:
            payload["opacity"] = self.style.opacity
        return payload


def palette_color(index: int) -> str:
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]


def series_points(
    rows: pd.DataFrame,
    x_column: str,
    y_column: str,
    now_ms: int | None = None,
) -> tuple[list[int], list[float]]:
    """Index-aligned instants and values with unparseable values dropped."""
    if rows.empty:
        return [], []
    instants = normalize_timestamps(rows[x_column], now_ms=now_ms)
    values = to_numeric(rows[y_column])
    keep = values.notna()
    return instants[keep].tolist(), values[keep].tolist()


def _raw_style(chart: ChartConfig) -> TraceStyle:
    if chart.type == "line":
        return TraceStyle(kind="scatter", mode="lines+markers")
    return TraceStyle(kind=chart.type, mode="markers")


def _single_axis_traces(
    groups: dict[str, pd.DataFrame],
    grouped: bool,
    columns: ColumnsConfig,
    chart: ChartConfig,
    smoothing: SmoothingConfig,
    now_ms: int | None,
) -> list[Trace]:
    traces: list[Trace] = []
    color_index = 0
    for key, rows in groups.items():
        x, y = series_points(rows, columns.x, columns.y, now_ms=now_ms)
        if not y:
            continue
        if chart.zero_baseline:
            y = rebase_for_trace(y)

        color = palette_color(color_index)
        label = f"{key} - {columns.y}" if grouped else columns.y
        traces.append(
            Trace(x=x, y=y, label=label, axis="primary", color=color, style=_raw_style(chart))
        )

        smoothed = smooth_values(x, y, smoothing)
        if smoothed is not None:
            if grouped:
                overlay_color = color
                overlay_style = TraceStyle(
                    mode="lines",
                    dashed=True,
                    width=OVERLAY_WIDTH,
                    opacity=GROUPED_OVERLAY_OPACITY,
                )
            else:
                overlay_color = palette_color(1)
                overlay_style = TraceStyle(
                    mode="lines",
                    width=OVERLAY_WIDTH,
                    opacity=SINGLE_OVERLAY_OPACITY,
                )
            traces.append(
                Trace(
                    x=x,
                    y=smoothed.tolist(),
                    label=f"{label} (Smoothed)",
                    axis="primary",
                    color=overlay_color,
                    style=overlay_style,
                )
            )
        color_index += 1
    return traces


def _dual_axis_traces(
    groups: dict[str, pd.DataFrame],
    grouped: bool,
    columns: ColumnsConfig,
    chart: ChartConfig,
    now_ms: int | None,
) -> list[Trace]:
    if columns.y2 is None:
        raise ValueError("dual-axis charts need a secondary value column (columns.y2)")

    # Grouped traces rebase through the trace step, the ungrouped pair through
    # the standalone utility; both keep each axis's own baseline.
    rebase = rebase_for_trace if grouped else rebase_to_first_valid
    traces: list[Trace] = []
    color_index = 0
    for key, rows in groups.items():
        x1, y1 = series_points(rows, columns.x, columns.y, now_ms=now_ms)
        if not y1:
            continue
        x2, y2 = series_points(rows, columns.x, columns.y2, now_ms=now_ms)
        if chart.zero_baseline:
            y1 = rebase(y1)
            y2 = rebase(y2)

        primary_color = palette_color(color_index)
        secondary_color = SECONDARY_ACCENT_COLOR if grouped else palette_color(1)
        traces.append(
            Trace(
                x=x1,
                y=y1,
                label=f"{key} - {columns.y}" if grouped else columns.y,
                axis="primary",
                color=primary_color,
            )
        )
        if y2:
            traces.append(
                Trace(
                    x=x2,
                    y=y2,
                    label=f"{key} - {columns.y2}" if grouped else columns.y2,
                    axis="secondary",
                    color=secondary_color,
                    style=TraceStyle(dashed=True, marker_symbol=SECONDARY_MARKER),
                )
            )
        color_index += 1
    return traces


def build_traces(
    groups: dict[str, pd.DataFrame],
    grouped: bool,
    columns: ColumnsConfig,
    chart: ChartConfig,
    smoothing: SmoothingConfig,
    now_ms: int | None = None,
) -> list[Trace]:
    """Renderable traces for every group in group order.

    Groups without a single parseable value are omitted; every trace has
    equal-length, non-empty ``x`` and ``y``.
    """
    if chart.dual_axis:
        return _dual_axis_traces(groups, grouped, columns, chart, now_ms)
    return _single_axis_traces(groups, grouped, columns, chart, smoothing, now_ms)


def trace_values(traces: Sequence[Trace], axis: Axis) -> list[float]:
    return [value for trace in traces if trace.axis == axis for value in trace.y]
