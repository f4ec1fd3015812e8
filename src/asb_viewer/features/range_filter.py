from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from asb_viewer.config import RangeConfig
from asb_viewer.preprocess.time import normalize_timestamps, to_instant

RANGE_PADDING_FRACTION = 0.05


@dataclass(frozen=True)
class RangeBounds:
    start: int | None = None
    end: int | None = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def to_dict(self) -> dict[str, int | None]:
        return {"start": self.start, "end": self.end}


def filter_rows_by_range(
    df: pd.DataFrame,
    x_column: str,
    bounds: RangeBounds,
    now_ms: int | None = None,
) -> pd.DataFrame:
    """Keep rows whose instant lies inside the inclusive bounds, in order."""
    if bounds.is_open or df.empty:
        return df
    instants = normalize_timestamps(df[x_column], now_ms=now_ms)
    mask = pd.Series(True, index=df.index)
    if bounds.start is not None:
        mask &= instants >= bounds.start
    if bounds.end is not None:
        mask &= instants <= bounds.end
    return df.loc[mask]


def optimal_date_range(
    df: pd.DataFrame,
    x_column: str,
    now_ms: int | None = None,
) -> RangeBounds:
    """Data span padded by 5% on each side; open bounds when there is no data."""
    if df.empty or x_column not in df.columns:
        return RangeBounds()
    instants = normalize_timestamps(df[x_column], now_ms=now_ms).sort_values()
    if instants.empty:
        return RangeBounds()
    first = int(instants.iloc[0])
    last = int(instants.iloc[-1])
    padding = (last - first) * RANGE_PADDING_FRACTION
    return RangeBounds(start=round(first - padding), end=round(last + padding))


def resolve_bounds(
    df: pd.DataFrame,
    x_column: str,
    config: RangeConfig,
    now_ms: int | None = None,
) -> RangeBounds:
    if config.auto:
        return optimal_date_range(df, x_column, now_ms=now_ms)
    return RangeBounds(
        start=to_instant(config.start) if config.start is not None else None,
        end=to_instant(config.end) if config.end is not None else None,
    )
