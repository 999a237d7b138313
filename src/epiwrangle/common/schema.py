"""
Column definitions and validation for signal tables.

A signal table is a DataFrame with at least ``geo_value``, ``time_value`` and
``value``. Retrieval adds revision columns (``issue``, ``lag``, ``stderr``,
``sample_size``) and identity columns (``data_source``, ``signal``).
"""
from typing import Iterable, List

import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from epiwrangle.common.errors import SchemaError


KEY_COLS: List[str] = ['geo_value', 'time_value']
IDENTITY_COLS: List[str] = ['data_source', 'signal']
REQUIRED_COLS: List[str] = KEY_COLS + ['value']

# Dropped by the wide layout, kept by the long layout
REVISION_COLS: List[str] = ['issue', 'stderr', 'sample_size', 'lag']

LONG_COLS: List[str] = IDENTITY_COLS + KEY_COLS + ['dt', 'value']


def validate_signal_frame(
    df: pd.DataFrame,
    required: Iterable[str] = REQUIRED_COLS,
    name: str = 'signal'
) -> None:
    """
    Check that ``df`` carries the required columns.

    Args:
        df: Table to check
        required: Column names that must be present
        name: Label used in the error message

    Raises:
        SchemaError: if ``df`` is not a DataFrame or a column is missing
    """
    if not isinstance(df, pd.DataFrame):
        raise SchemaError(f"{name} must be a pandas DataFrame, got {type(df).__name__}")

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise SchemaError(f"{name} is missing required columns: {missing}")


def normalize_time_values(
    values: pd.Series,
    column: str = 'time_value',
    allow_missing: bool = True
) -> pd.Series:
    """
    Convert a date-like column to day-resolution ``datetime64[ns]``.

    Args:
        values: Column of dates, date strings or timestamps
        column: Column name, used in error messages
        allow_missing: Keep missing dates as NaT instead of rejecting them

    Returns:
        Series of midnight timestamps

    Raises:
        SchemaError: if the column is numeric, cannot be parsed as dates, or
                     has missing dates while allow_missing is False
    """
    if is_numeric_dtype(values) or is_bool_dtype(values):
        raise SchemaError(f"'{column}' must hold dates, got dtype {values.dtype}")

    try:
        converted = pd.to_datetime(values)
    except (ValueError, TypeError) as exc:
        raise SchemaError(f"'{column}' could not be parsed as dates: {exc}") from exc

    if getattr(converted.dt, 'tz', None) is not None:
        converted = converted.dt.tz_localize(None)

    if not allow_missing and converted.isna().any():
        raise SchemaError(
            f"'{column}' has {int(converted.isna().sum())} missing dates"
        )

    return converted.dt.normalize().astype('datetime64[ns]')
