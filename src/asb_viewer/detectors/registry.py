from __future__ import annotations

from asb_viewer.config import AppConfig
from asb_viewer.detectors.base import Detector
from asb_viewer.detectors.patterns import PatternsDetector
from asb_viewer.detectors.stats import StatisticsDetector


def default_detectors(config: AppConfig, pattern_columns: list[str] | None = None) -> list[Detector]:
    return [
        StatisticsDetector(column=config.columns.y),
        PatternsDetector(columns=pattern_columns),
    ]
