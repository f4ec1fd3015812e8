from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd


def write_table(df: pd.DataFrame, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix != ".csv":
        raise ValueError(f"Unsupported table format: {path.suffix}")
    df.to_csv(path, index=False)
    return path


def write_json(data: Any, path: Path, *, sort_keys: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, sort_keys=sort_keys, ensure_ascii=False),
        encoding="utf-8",
    )
    return path


def write_summary(data: dict[str, Any], path: Path) -> Path:
    return write_json(data, path, sort_keys=True)


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
