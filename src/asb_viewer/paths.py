from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    chart: Path
    tables: Path
    figures: Path
    summary: Path

    @property
    def traces_file(self) -> Path:
        return self.chart / "traces.json"

    @property
    def layout_file(self) -> Path:
        return self.chart / "layout.json"

    @property
    def summary_file(self) -> Path:
        return self.summary / "summary.json"


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        chart=out_dir / "chart",
        tables=out_dir / "tables",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
    )
    for path in (paths.root, paths.chart, paths.tables, paths.figures, paths.summary):
        path.mkdir(parents=True, exist_ok=True)
    return paths
