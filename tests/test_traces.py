from __future__ import annotations

import pandas as pd
import pytest

from asb_viewer.config import ChartConfig, ColumnsConfig, SmoothingConfig
from asb_viewer.features.grouping import group_rows, is_grouped
from asb_viewer.viz.traces import (
    COLOR_PALETTE,
    SECONDARY_ACCENT_COLOR,
    build_traces,
    palette_color,
    series_points,
    trace_values,
)

COLUMNS = ColumnsConfig(x="Epoch", y="Easting", y2="Northing")
JAN_1 = 1_704_067_200_000
DAY_MS = 24 * 60 * 60 * 1000


def _rows() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Epoch": ["2024-01-01", "2024-01-02", "2024-01-03"],
            "PointName": ["A", "A", "B"],
            "Easting": ["10", "20", "30"],
            "Northing": ["5", "7", "9"],
        }
    )


def _build(df: pd.DataFrame, key: str | None, chart: ChartConfig, smoothing: SmoothingConfig | None = None):
    groups = group_rows(df, key)
    return build_traces(
        groups,
        is_grouped(groups),
        columns=COLUMNS,
        chart=chart,
        smoothing=smoothing or SmoothingConfig(),
        now_ms=JAN_1,
    )


def test_palette_cycles() -> None:
    assert palette_color(0) == "#038357"
    assert palette_color(len(COLOR_PALETTE)) == palette_color(0)


def test_series_points_keeps_x_aligned_with_dropped_values() -> None:
    df = pd.DataFrame({"Epoch": ["2024-01-01", "2024-01-02", "2024-01-03"], "Easting": ["1", "x", "3"]})
    x, y = series_points(df, "Epoch", "Easting")

    assert x == [JAN_1, JAN_1 + 2 * DAY_MS]
    assert y == [1.0, 3.0]


def test_ungrouped_single_axis_trace() -> None:
    traces = _build(_rows(), None, ChartConfig(type="line"))

    assert len(traces) == 1
    trace = traces[0]
    assert trace.label == "Easting"
    assert trace.axis == "primary"
    assert trace.color == COLOR_PALETTE[0]
    assert trace.x == [JAN_1, JAN_1 + DAY_MS, JAN_1 + 2 * DAY_MS]
    assert trace.y == [10.0, 20.0, 30.0]
    assert trace.style.mode == "lines+markers"


def test_zero_baseline_rebases_to_first_value() -> None:
    traces = _build(_rows(), None, ChartConfig(zero_baseline=True))
    assert traces[0].y == [0.0, 10.0, 20.0]


def test_grouped_single_axis_traces_follow_group_order() -> None:
    traces = _build(_rows(), "PointName", ChartConfig(type="scatter"))

    assert [trace.label for trace in traces] == ["A - Easting", "B - Easting"]
    assert [trace.color for trace in traces] == [COLOR_PALETTE[0], COLOR_PALETTE[1]]
    assert traces[0].y == [10.0, 20.0]
    assert traces[1].style.kind == "scatter"
    assert traces[1].style.mode == "markers"


def test_grouped_smoothed_overlay_is_dashed_in_group_color() -> None:
    df = pd.DataFrame(
        {
            "Epoch": [f"2024-01-0{day}" for day in range(1, 6)],
            "PointName": ["A"] * 5,
            "Easting": ["1", "2", "3", "4", "5"],
        }
    )
    traces = _build(df, "PointName", ChartConfig(), SmoothingConfig(enabled=True, window=3))

    assert [trace.label for trace in traces] == ["A - Easting", "A - Easting (Smoothed)"]
    overlay = traces[1]
    assert overlay.color == traces[0].color
    assert overlay.style.dashed
    assert overlay.style.opacity == 0.7
    assert overlay.y == pytest.approx([1.0, 1.5, 2.0, 3.0, 4.0])


def test_ungrouped_smoothed_overlay_uses_second_palette_color() -> None:
    df = pd.DataFrame(
        {
            "Epoch": [f"2024-01-0{day}" for day in range(1, 5)],
            "Easting": ["10", "20", "30", "40"],
        }
    )
    traces = _build(df, None, ChartConfig(zero_baseline=True), SmoothingConfig(enabled=True, window=3))

    assert len(traces) == 2
    assert traces[1].label == "Easting (Smoothed)"
    assert traces[1].color == COLOR_PALETTE[1]
    assert not traces[1].style.dashed
    assert traces[1].y == pytest.approx([0.0, 5.0, 10.0, 20.0])


def test_grouped_dual_axis_emits_two_traces_per_group() -> None:
    traces = _build(_rows(), "PointName", ChartConfig(type="dual_axis"))

    assert [trace.label for trace in traces] == [
        "A - Easting",
        "A - Northing",
        "B - Easting",
        "B - Northing",
    ]
    assert [trace.axis for trace in traces] == ["primary", "secondary", "primary", "secondary"]
    assert traces[0].color == COLOR_PALETTE[0]
    assert traces[2].color == COLOR_PALETTE[1]
    assert traces[1].color == SECONDARY_ACCENT_COLOR
    assert traces[3].color == SECONDARY_ACCENT_COLOR
    assert traces[1].style.dashed
    assert traces[1].style.marker_symbol == "square"


def test_ungrouped_dual_axis_rebases_each_axis_independently() -> None:
    traces = _build(_rows(), None, ChartConfig(type="dual_axis", zero_baseline=True))

    assert [trace.label for trace in traces] == ["Easting", "Northing"]
    assert traces[0].y == [0.0, 10.0, 20.0]
    assert traces[1].y == [0.0, 2.0, 4.0]
    assert traces[1].color == COLOR_PALETTE[1]


def test_groups_without_values_are_skipped_without_using_a_color() -> None:
    df = _rows().assign(Easting=["", "", "30"])
    traces = _build(df, "PointName", ChartConfig())

    assert [trace.label for trace in traces] == ["B - Easting"]
    assert traces[0].color == COLOR_PALETTE[0]


def test_dual_axis_without_secondary_column_raises() -> None:
    groups = group_rows(_rows(), None)
    with pytest.raises(ValueError, match="secondary value column"):
        build_traces(
            groups,
            False,
            columns=ColumnsConfig(x="Epoch", y="Easting", y2=None),
            chart=ChartConfig(type="dual_axis"),
            smoothing=SmoothingConfig(),
        )


def test_to_plotly_maps_axis_and_style() -> None:
    traces = _build(_rows(), None, ChartConfig(type="dual_axis"))
    primary = traces[0].to_plotly()
    secondary = traces[1].to_plotly()

    assert primary["yaxis"] == "y"
    assert primary["x"][0] == "2024-01-01T00:00:00+00:00"
    assert secondary["yaxis"] == "y2"
    assert secondary["line"]["dash"] == "dash"
    assert secondary["marker"]["symbol"] == "square"
    assert trace_values(traces, "secondary") == [5.0, 7.0, 9.0]
