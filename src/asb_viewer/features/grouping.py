from __future__ import annotations

from typing import Iterable

import pandas as pd

from asb_viewer.config import ColumnsConfig

GROUPING_NAME_HINTS = ("point", "name", "id", "station")


def suggest_grouping_column(columns: Iterable[str]) -> str | None:
    """First column (in order) whose lower-cased name contains a grouping hint."""
    for column in columns:
        lowered = str(column).lower()
        if any(hint in lowered for hint in GROUPING_NAME_HINTS):
            return column
    return None


def resolve_grouping_column(columns: Iterable[str], config: ColumnsConfig) -> str | None:
    available = list(columns)
    if config.group_by:
        return config.group_by if config.group_by in available else None
    if config.infer_group_by:
        return suggest_grouping_column(available)
    return None


def group_rows(df: pd.DataFrame, key_column: str | None) -> dict[str, pd.DataFrame]:
    """Partition rows by raw key value, groups in first-seen order.

    Without a key column, or when the key is empty on every row, all rows form
    a single implicit group keyed by the empty string.
    """
    if key_column is None or key_column not in df.columns or df.empty:
        return {"": df}
    keys = df[key_column].fillna("").astype(str)
    if not keys.str.len().gt(0).any():
        return {"": df}
    groups: dict[str, pd.DataFrame] = {}
    for key, group in df.groupby(keys, sort=False):
        groups[str(key)] = group
    return groups


def is_grouped(groups: dict[str, pd.DataFrame]) -> bool:
    return list(groups) != [""]
