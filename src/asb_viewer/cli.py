from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from asb_viewer.config import AppConfig, load_config
from asb_viewer.errors import ViewerError
from asb_viewer.io.read import load_rows
from asb_viewer.logging import configure_logging
from asb_viewer.pipeline.run_all import recent_files_store, replay, result_cache, run_all
from asb_viewer.pipeline.transform import PipelineResult, run_pipeline

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _apply_overrides(cfg: AppConfig, **overrides: Any) -> AppConfig:
    """Overlay command-line selections on the loaded config and re-validate."""
    data = cfg.model_dump()
    sections = {
        "x": ("columns", "x"),
        "y": ("columns", "y"),
        "y2": ("columns", "y2"),
        "group_by": ("columns", "group_by"),
        "chart_type": ("chart", "type"),
        "zero_baseline": ("chart", "zero_baseline"),
        "smooth": ("smoothing", "enabled"),
        "smoothing_mode": ("smoothing", "mode"),
        "window": ("smoothing", "window"),
        "hours": ("smoothing", "hours"),
    }
    for key, value in overrides.items():
        if value is None:
            continue
        section, field_name = sections[key]
        data[section][field_name] = value
    if overrides.get("start") is not None or overrides.get("end") is not None:
        data["range"] = {"auto": False, "start": overrides.get("start"), "end": overrides.get("end")}
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _echo_result(result: PipelineResult) -> None:
    stats = result.statistics.formatted()
    typer.echo(
        f"Rows: {result.filtered_row_count}/{result.row_count} in range, "
        f"traces: {len(result.traces)}"
    )
    typer.echo(
        "Statistics: "
        + ", ".join(f"{key}={stats[key]}" for key in ("count", "mean", "stdDev", "min", "max", "median"))
    )
    for insight in result.insights:
        typer.echo(f"- {insight}")


def _fail(exc: ViewerError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command()
def run(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    x: str | None = typer.Option(None, help="Time column."),
    y: str | None = typer.Option(None, help="Primary value column."),
    y2: str | None = typer.Option(None, help="Secondary value column (dual axis)."),
    group_by: str | None = typer.Option(None, help="Explicit grouping column."),
    chart_type: str | None = typer.Option(None, help="line, scatter, bar, histogram, box or dual_axis."),
    smooth: bool | None = typer.Option(None, "--smooth/--no-smooth"),
    smoothing_mode: str | None = typer.Option(None, help="count or time."),
    window: int | None = typer.Option(None, help="Points per window (count mode)."),
    hours: int | None = typer.Option(None, help="Window hours (time mode)."),
    zero_baseline: bool | None = typer.Option(None, "--zero-baseline/--no-zero-baseline"),
    start: datetime | None = typer.Option(None, help="Inclusive start; disables auto range."),
    end: datetime | None = typer.Option(None, help="Inclusive end; disables auto range."),
) -> None:
    """Load a CSV export, build chart traces and write statistics and insights."""
    configure_logging()
    cfg = _apply_overrides(
        _load_app_config(config),
        x=x,
        y=y,
        y2=y2,
        group_by=group_by,
        chart_type=chart_type,
        smooth=smooth,
        smoothing_mode=smoothing_mode,
        window=window,
        hours=hours,
        zero_baseline=zero_baseline,
        start=start,
        end=end,
    )
    try:
        result = run_all(csv_path=csv, out_dir=out, config=cfg)
    except ViewerError as exc:
        raise _fail(exc) from exc
    _echo_result(result)
    typer.echo(f"Outputs written to: {out}")


@app.command()
def describe(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    x: str | None = typer.Option(None),
    y: str | None = typer.Option(None),
) -> None:
    """Print statistics and pattern insights without writing outputs."""
    configure_logging("WARNING")
    cfg = _apply_overrides(_load_app_config(config), x=x, y=y)
    try:
        rows = load_rows(csv, retry=cfg.retry)
        result = run_pipeline(rows, cfg)
    except ViewerError as exc:
        raise _fail(exc) from exc
    _echo_result(result)


@app.command("replay")
def replay_command(
    name: str = typer.Argument(..., help="File name as shown by `recent`."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Re-run the pipeline on cached rows of a recently loaded file."""
    configure_logging()
    cfg = _load_app_config(config)
    try:
        result = replay(name=name, out_dir=out, config=cfg)
    except ViewerError as exc:
        raise _fail(exc) from exc
    _echo_result(result)


@app.command()
def recent(
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
    clear: bool = typer.Option(False, help="Forget the recent files list."),
) -> None:
    """List recently loaded files, newest first."""
    cfg = _load_app_config(config)
    store = recent_files_store(cfg)
    if clear:
        store.clear()
        typer.echo("Recent files cleared")
        return
    entries = store.load()
    if not entries:
        typer.echo("No recent files")
        return
    cache = result_cache(cfg)
    for entry in entries:
        loaded_at = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d")
        cached = " (cached)" if cache.has(entry.name) else ""
        typer.echo(f"- {entry.name}  {loaded_at}  {entry.size / 1024:.1f} KB{cached}")


if __name__ == "__main__":
    app()
