from __future__ import annotations

import numpy as np
import pandas as pd


def to_numeric(values: pd.Series) -> pd.Series:
    """Coerce raw cells to floats; unparseable and non-finite cells become NaN."""
    numeric = pd.to_numeric(values, errors="coerce").astype(float)
    return numeric.where(np.isfinite(numeric))


def finite_values(values: pd.Series) -> np.ndarray:
    numeric = to_numeric(values)
    return numeric.dropna().to_numpy(dtype=float)


def numeric_columns(df: pd.DataFrame) -> list[str]:
    """Columns where at least one cell parses to a finite number, in column order."""
    return [column for column in df.columns if to_numeric(df[column]).notna().any()]
