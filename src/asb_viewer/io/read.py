from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from asb_viewer.config import RetryConfig
from asb_viewer.errors import ParseFailure
from asb_viewer.io.retry import read_with_retry
from asb_viewer.preprocess.numeric import numeric_columns

LOGGER = logging.getLogger(__name__)


def rows_to_frame(rows: Iterable[Mapping[str, Any]], columns: list[str]) -> pd.DataFrame:
    """Build the string-cell row frame from parsed records; missing keys become ''."""
    records = [
        {column: "" if row.get(column) is None else str(row.get(column)) for column in columns}
        for row in rows
    ]
    return pd.DataFrame(records, columns=columns, dtype=str)


def validate_rows(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        raise ParseFailure("No data found in the uploaded file")
    if not numeric_columns(df):
        raise ParseFailure("No numeric columns found in the data")
    return df


def read_rows(csv_path: Path) -> pd.DataFrame:
    """Read a CSV export as string cells, keeping header-derived column names."""
    try:
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        df = pd.read_csv(
            csv_path,
            encoding="utf-8-sig",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise ParseFailure(f"No data found in {csv_path.name}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseFailure(f"CSV parsing errors in {csv_path.name}: {exc}") from exc
    df.columns = [str(column) for column in df.columns]
    return validate_rows(df)


def load_rows(csv_path: Path, retry: RetryConfig | None = None) -> pd.DataFrame:
    """Read and validate rows, retrying transient I/O failures."""
    retry = retry or RetryConfig()
    df = read_with_retry(
        lambda: read_rows(csv_path),
        max_attempts=retry.max_attempts,
        base_delay_seconds=retry.base_delay_seconds,
    )
    LOGGER.info("Loaded %s rows x %s columns from %s", len(df), len(df.columns), csv_path)
    return df
