from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class DetectorResult:
    detector: str
    summary: dict[str, Any]
    tables: dict[str, pd.DataFrame]
    details: dict[str, Any] = field(default_factory=dict)


class Detector:
    name: str

    def run(self, df: pd.DataFrame) -> DetectorResult:
        raise NotImplementedError
