from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from asb_viewer.config import AppConfig
from asb_viewer.errors import ParseFailure
from asb_viewer.io.read import load_rows
from asb_viewer.io.recent_files import RecentFilesStore, ResultCache, remember_file
from asb_viewer.io.write import write_json, write_summary, write_table
from asb_viewer.paths import build_output_paths
from asb_viewer.pipeline.transform import PipelineResult, run_pipeline
from asb_viewer.viz.layout import build_layout
from asb_viewer.viz.time_series import plot_traces

LOGGER = logging.getLogger(__name__)


def recent_files_store(config: AppConfig) -> RecentFilesStore:
    return RecentFilesStore(
        config.persistence.recent_files_path,
        max_entries=config.persistence.max_recent_files,
    )


def result_cache(config: AppConfig) -> ResultCache:
    return ResultCache(config.persistence.cache_dir)


def write_outputs(result: PipelineResult, out_dir: Path, config: AppConfig) -> Path:
    paths = build_output_paths(out_dir)
    layout = build_layout(config, result.traces)
    write_json([trace.to_plotly() for trace in result.traces], paths.traces_file)
    write_json(layout, paths.layout_file)
    for name, table in result.tables.items():
        write_table(table, paths.tables / f"{name}.csv")
    summary_path = write_summary(result.to_summary(), paths.summary_file)

    if config.outputs.export_figure and result.traces:
        try:
            plot_traces(
                result.traces,
                layout,
                paths.figures / f"chart.{config.outputs.figures_format}",
            )
        except Exception:  # pragma: no cover
            LOGGER.exception("Failed rendering chart figure")
    return summary_path


def run_rows(
    rows: pd.DataFrame,
    out_dir: Path,
    config: AppConfig,
    now_ms: int | None = None,
) -> PipelineResult:
    result = run_pipeline(rows, config, now_ms=now_ms)
    write_outputs(result, out_dir, config)
    return result


def run_all(csv_path: Path, out_dir: Path, config: AppConfig) -> PipelineResult:
    rows = load_rows(csv_path, retry=config.retry)
    result = run_rows(rows, out_dir, config)
    remember_file(csv_path, rows, recent_files_store(config), result_cache(config))
    return result


def replay(name: str, out_dir: Path, config: AppConfig) -> PipelineResult:
    """Re-run the pipeline on the cached rows of a previously loaded file."""
    cached = result_cache(config).load(name)
    if cached is None:
        raise ParseFailure(f"No cached data for {name}")
    LOGGER.info("Replaying %s from cache (%s rows)", name, len(cached.rows))
    return run_rows(cached.rows, out_dir, config)
