"""Zero-baselining of numeric sequences.

Two policies:

* ``rebase_to_first_valid`` is the standalone utility. Entries that are not
  numbers are returned unchanged. The ungrouped dual-axis traces use it.
* ``rebase_for_trace`` is the trace-construction step. Entries that are not
  numbers become ``0``. Every other trace path uses it. Its inputs are already
  filtered to finite values, so the substitution only matters for direct
  callers.
"""

from __future__ import annotations

import math
from typing import Any, Sequence


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def first_valid_value(values: Sequence[Any]) -> float | None:
    for value in values:
        number = _as_number(value)
        if number is not None:
            return number
    return None


def rebase_to_first_valid(values: Sequence[Any]) -> list[Any]:
    baseline = first_valid_value(values)
    if baseline is None:
        return list(values)
    rebased: list[Any] = []
    for value in values:
        number = _as_number(value)
        rebased.append(value if number is None else number - baseline)
    return rebased


def rebase_for_trace(values: Sequence[Any]) -> list[float]:
    baseline = first_valid_value(values)
    if baseline is None:
        return list(values)
    rebased: list[float] = []
    for value in values:
        number = _as_number(value)
        rebased.append(0.0 if number is None else number - baseline)
    return rebased
