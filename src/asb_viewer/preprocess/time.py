from __future__ import annotations

import logging
import math
import re
import time
from datetime import datetime
from typing import Any

import pandas as pd

from asb_viewer.errors import ConversionFailure

LOGGER = logging.getLogger(__name__)

GPS_EPOCH = pd.Timestamp("1980-01-06T00:00:00Z")
GPS_EPOCH_MS = GPS_EPOCH.value // 1_000_000

# Numeric cells below this are GPS seconds, below the next one Unix seconds,
# anything larger is Unix milliseconds.
GPS_SECONDS_THRESHOLD = 1_000_000_000
UNIX_SECONDS_THRESHOLD = 10_000_000_000

_NUMERIC_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Instants pandas can hold as nanosecond timestamps.
MIN_INSTANT_MS = -(-pd.Timestamp.min.value // 1_000_000)
MAX_INSTANT_MS = pd.Timestamp.max.value // 1_000_000


def current_instant() -> int:
    return int(time.time() * 1000)


def to_instant(value: datetime | pd.Timestamp) -> int:
    """Epoch milliseconds for a datetime; naive values are read as UTC."""
    timestamp = pd.Timestamp(value)
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC")
    return int(timestamp.value // 1_000_000)


def instant_to_timestamp(instant: int) -> pd.Timestamp:
    return pd.Timestamp(instant, unit="ms", tz="UTC")


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_calendar(value: Any) -> int:
    """Parse a calendar date/time string strictly, raising ConversionFailure."""
    if isinstance(value, (datetime, pd.Timestamp)):
        try:
            return to_instant(value)
        except (OverflowError, pd.errors.OutOfBoundsDatetime) as exc:
            raise ConversionFailure(f"out-of-range date: {value!r}") from exc
    if not isinstance(value, str):
        raise ConversionFailure(f"not a calendar string: {value!r}")
    text = value.strip()
    # Bare numbers are epoch offsets, never years or compact dates.
    if _NUMERIC_TEXT.match(text):
        raise ConversionFailure(f"numeric text is not a calendar string: {value!r}")
    try:
        timestamp = pd.Timestamp(text)
        instant = None if pd.isna(timestamp) else to_instant(timestamp)
    except (ValueError, TypeError, OverflowError, pd.errors.OutOfBoundsDatetime) as exc:
        raise ConversionFailure(f"unparseable date: {value!r}") from exc
    if instant is None:
        raise ConversionFailure(f"unparseable date: {value!r}")
    return instant


def is_representable(instant: int) -> bool:
    return MIN_INSTANT_MS <= instant <= MAX_INSTANT_MS


def instant_from_number(number: float) -> int:
    if number < GPS_SECONDS_THRESHOLD:
        return GPS_EPOCH_MS + round(number * 1000)
    if number < UNIX_SECONDS_THRESHOLD:
        return round(number * 1000)
    return round(number)


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_timestamp(value: Any, now_ms: int | None = None) -> int:
    """Best-effort conversion of a raw cell to an instant.

    Empty cells, values that are neither dates nor numbers, and dates or
    numbers outside the range pandas can represent fall back to ``now_ms``
    (or the current wall clock). Numbers are classified by
    magnitude as GPS seconds, Unix seconds or Unix milliseconds.
    """
    if _is_absent(value):
        return current_instant() if now_ms is None else now_ms

    if not isinstance(value, (int, float)):
        try:
            return parse_calendar(value)
        except ConversionFailure:
            pass

    number = _parse_number(value)
    if number is None:
        try:
            return parse_calendar(value)
        except ConversionFailure:
            LOGGER.debug("Falling back to current time for timestamp %r", value)
            return current_instant() if now_ms is None else now_ms

    instant = instant_from_number(number)
    if not is_representable(instant):
        LOGGER.debug("Falling back to current time for out-of-range timestamp %r", value)
        return current_instant() if now_ms is None else now_ms
    return instant


def normalize_timestamps(values: pd.Series, now_ms: int | None = None) -> pd.Series:
    fallback = current_instant() if now_ms is None else now_ms
    if values.empty:
        return pd.Series([], index=values.index, dtype="int64")
    return values.map(lambda value: normalize_timestamp(value, now_ms=fallback)).astype("int64")
