from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

ChartType = Literal["line", "scatter", "bar", "histogram", "box", "dual_axis"]
SmoothingMode = Literal["count", "time"]

STATE_DIR_ENV_VAR = "ASB_VIEWER_STATE_DIR"


class ColumnsConfig(BaseModel):
    x: str = "Epoch"
    y: str = "Easting"
    y2: str | None = "Northing"
    group_by: str | None = None
    infer_group_by: bool = True


class SmoothingConfig(BaseModel):
    enabled: bool = False
    mode: SmoothingMode = "count"
    window: int = Field(default=5, ge=3, le=20)
    hours: int = Field(default=24, ge=1, le=168)


class RangeConfig(BaseModel):
    auto: bool = True
    start: datetime | None = None
    end: datetime | None = None

    @model_validator(mode="after")
    def _check_order(self) -> RangeConfig:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("range.start must not be after range.end")
        return self


class ChartConfig(BaseModel):
    type: ChartType = "line"
    zero_baseline: bool = False
    auto_scale: bool = True
    show_grid: bool = True
    show_legend: bool = True
    dark_mode: bool = True

    @property
    def dual_axis(self) -> bool:
        return self.type == "dual_axis"


class RetryConfig(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=1.0, ge=0.0)


class PersistenceConfig(BaseModel):
    state_dir: str = ".asb_viewer"
    recent_files_name: str = "recent_files.json"
    cache_dir_name: str = "cache"
    max_recent_files: int = Field(default=5, ge=1)

    @property
    def recent_files_path(self) -> Path:
        return Path(self.state_dir) / self.recent_files_name

    @property
    def cache_dir(self) -> Path:
        return Path(self.state_dir) / self.cache_dir_name


class OutputsConfig(BaseModel):
    figures_format: str = "png"
    export_figure: bool = True


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    smoothing: SmoothingConfig = Field(default_factory=SmoothingConfig)
    range: RangeConfig = Field(default_factory=RangeConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)

    @model_validator(mode="after")
    def _check_secondary_column(self) -> AppConfig:
        if self.chart.dual_axis and not self.columns.y2:
            raise ValueError("chart.type 'dual_axis' requires columns.y2")
        return self


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path | None = None) -> AppConfig:
    """Load YAML config, or defaults rooted at the working directory when no path is given."""
    if path is None:
        config = AppConfig()
        base_dir = Path.cwd()
    else:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        config = AppConfig.model_validate(data)
        base_dir = path.resolve().parent

    state_dir = os.getenv(STATE_DIR_ENV_VAR) or config.persistence.state_dir
    config.persistence.state_dir = _resolve_optional_path(state_dir, base_dir) or str(base_dir)
    return config
