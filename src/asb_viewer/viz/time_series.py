from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import matplotlib.pyplot as plt
import pandas as pd

from asb_viewer.viz.common import save_figure
from asb_viewer.viz.traces import Trace


def _plot_trace(ax: Any, trace: Trace) -> None:
    x = pd.to_datetime(trace.x, unit="ms", utc=True)
    linestyle = "--" if trace.style.dashed else "-"
    alpha = trace.style.opacity if trace.style.opacity is not None else 1.0
    if trace.style.kind == "bar":
        ax.bar(x, trace.y, color=trace.color, alpha=alpha, label=trace.label)
        return
    marker = None
    if trace.style.mode in ("lines+markers", "markers"):
        marker = "s" if trace.style.marker_symbol == "square" else "o"
    ax.plot(
        x,
        trace.y,
        color=trace.color,
        linestyle="none" if trace.style.mode == "markers" else linestyle,
        linewidth=trace.style.width or 1.5,
        marker=marker,
        markersize=3,
        alpha=alpha,
        label=trace.label,
    )


def plot_traces(traces: Sequence[Trace], layout: dict[str, Any], output_path: Path) -> Path:
    """Static export of the chart; secondary traces go on a twin y axis."""
    fig, ax = plt.subplots(figsize=(12, 5))
    secondary = [trace for trace in traces if trace.axis == "secondary"]
    ax2 = ax.twinx() if secondary or "yaxis2" in layout else None

    for trace in traces:
        _plot_trace(ax2 if trace.axis == "secondary" and ax2 is not None else ax, trace)

    ax.set_title(layout.get("title", {}).get("text", ""))
    ax.set_xlabel(layout.get("xaxis", {}).get("title", ""))
    yaxis = layout.get("yaxis", {})
    ax.set_ylabel(yaxis.get("title", ""))
    ax.grid(bool(yaxis.get("showgrid", True)), alpha=0.3)
    if "range" in yaxis:
        ax.set_ylim(*yaxis["range"])

    if ax2 is not None:
        yaxis2 = layout.get("yaxis2", {})
        ax2.set_ylabel(yaxis2.get("title") or "")
        if "range" in yaxis2:
            ax2.set_ylim(*yaxis2["range"])

    if layout.get("showlegend", True) and traces:
        handles, labels = ax.get_legend_handles_labels()
        if ax2 is not None:
            extra_handles, extra_labels = ax2.get_legend_handles_labels()
            handles += extra_handles
            labels += extra_labels
        ax.legend(handles, labels, loc="upper left", fontsize=8)
    return save_figure(fig, output_path)
