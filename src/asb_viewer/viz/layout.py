from __future__ import annotations

from typing import Any, Sequence

from asb_viewer.config import AppConfig
from asb_viewer.viz.traces import SECONDARY_ACCENT_COLOR, Trace, trace_values

VALUE_PADDING_FRACTION = 0.1

_THEME: dict[str, dict[str, str]] = {
    "dark": {
        "font": "#ffffff",
        "grid": "#374151",
        "paper": "#1f2937",
        "plot": "#374151",
    },
    "light": {
        "font": "#000000",
        "grid": "#e5e7eb",
        "paper": "#ffffff",
        "plot": "#ffffff",
    },
}


def optimal_value_range(values: Sequence[float]) -> tuple[float, float]:
    """Value span padded by 10% on each side; ``(0, 1)`` when there are no values."""
    if not values:
        return 0.0, 1.0
    low = min(values)
    high = max(values)
    padding = (high - low) * VALUE_PADDING_FRACTION
    return low - padding, high + padding


def chart_title(config: AppConfig) -> str:
    columns = config.columns
    if config.chart.dual_axis:
        return f"{columns.y} & {columns.y2} vs {columns.x}"
    return f"{columns.y} vs {columns.x}"


def build_layout(config: AppConfig, traces: Sequence[Trace]) -> dict[str, Any]:
    """Plotly-compatible layout for the traces produced under ``config``."""
    chart = config.chart
    theme = _THEME["dark" if chart.dark_mode else "light"]

    yaxis: dict[str, Any] = {
        "title": config.columns.y,
        "showgrid": chart.show_grid,
        "side": "left",
        "gridcolor": theme["grid"],
    }
    layout: dict[str, Any] = {
        "title": {"text": chart_title(config), "font": {"size": 18, "color": theme["font"]}},
        "xaxis": {
            "title": config.columns.x,
            "showgrid": chart.show_grid,
            "type": "date",
            "gridcolor": theme["grid"],
        },
        "yaxis": yaxis,
        "showlegend": chart.show_legend,
        "paper_bgcolor": theme["paper"],
        "plot_bgcolor": theme["plot"],
        "font": {"color": theme["font"]},
        "margin": {"t": 60, "r": 80, "b": 60, "l": 60},
    }
    if chart.auto_scale:
        yaxis["range"] = list(optimal_value_range(trace_values(traces, "primary")))

    if chart.dual_axis:
        yaxis2: dict[str, Any] = {
            "title": config.columns.y2,
            "showgrid": False,
            "overlaying": "y",
            "side": "right",
            "gridcolor": theme["grid"],
            "tickfont": {"color": SECONDARY_ACCENT_COLOR, "size": 12},
            "zeroline": False,
            "showline": True,
            "linecolor": SECONDARY_ACCENT_COLOR,
            "linewidth": 2,
        }
        if chart.auto_scale:
            yaxis2["range"] = list(optimal_value_range(trace_values(traces, "secondary")))
        layout["yaxis2"] = yaxis2
    return layout
