"""
Time shifts for signal tables.

Shifts are applied per geo_value series on a contiguous daily grid, so a shift
of dt days always means dt calendar days:
- dt < 0 (lag): the value at date T is the original value at T+dt
- dt > 0 (lead): the value at date T is the original value at T+dt
- dt = 0: values unchanged
Dates whose source date falls outside the series get a missing value.
"""
import logging
from numbers import Integral
from typing import List, Sequence, Union

import numpy as np
import pandas as pd

from epiwrangle.common.errors import ConfigurationError
from epiwrangle.common.schema import KEY_COLS


logger = logging.getLogger(__name__)

ShiftSpec = Union[None, int, Sequence[int], Sequence[Union[int, Sequence[int]]]]


def complete_dates(df: pd.DataFrame, group_col: str = 'geo_value') -> pd.DataFrame:
    """
    Fill in missing days within each location's own date range.

    Args:
        df: Table with one row per (geo_value, time_value)
        group_col: Location column

    Returns:
        DataFrame sorted by location and date, with inserted rows carrying
        missing values in every non-key column
    """
    if df.empty:
        return df.sort_values(KEY_COLS).reset_index(drop=True)

    spans = df.groupby(group_col, sort=True)['time_value'].agg(['min', 'max'])
    grid = pd.concat(
        [
            pd.DataFrame({
                group_col: geo_value,
                'time_value': pd.date_range(span['min'], span['max'], freq='D'),
            })
            for geo_value, span in spans.iterrows()
        ],
        ignore_index=True
    )
    grid['time_value'] = grid['time_value'].astype('datetime64[ns]')

    completed = grid.merge(df, on=[group_col, 'time_value'], how='left')
    added = len(completed) - len(df)
    if added:
        logger.debug("Inserted %d missing dates across %d locations", added, len(spans))

    return completed[df.columns].reset_index(drop=True)


def shift_values(
    df: pd.DataFrame,
    dt: int,
    value_col: str = 'value',
    group_col: str = 'geo_value'
) -> pd.Series:
    """
    Shift a value column by dt rows within each location.

    Args:
        df: Completed table (see complete_dates), sorted by location and date
        dt: Signed day offset
        value_col: Column to shift
        group_col: Location column; values never cross location boundaries

    Returns:
        Float Series aligned with ``df``
    """
    values = pd.to_numeric(df[value_col], errors='coerce').astype(float)
    if dt == 0:
        return values
    return values.groupby(df[group_col], sort=False).shift(-dt)


def as_shift_list(value, where: str = "shifts") -> List[int]:
    """Validate one shift list (or a single integer shift)."""
    if isinstance(value, (Integral, np.integer)) and not isinstance(value, bool):
        return [int(value)]
    if isinstance(value, (list, tuple, np.ndarray, pd.Series)):
        shifts = list(value)
        for item in shifts:
            if isinstance(item, bool) or not isinstance(item, (Integral, np.integer)):
                raise ConfigurationError(f"Shift values must be integers, got {item!r} in {where}")
        if not shifts:
            raise ConfigurationError(f"Empty shift list in {where}")
        return [int(item) for item in shifts]
    raise ConfigurationError(f"Shifts must be an integer or a list of integers, got {value!r} in {where}")


def normalize_shifts(shifts: ShiftSpec, n_signals: int) -> List[List[int]]:
    """
    Turn a shift specification into one shift list per signal.

    Accepted forms:
        None               -> [[0]] for every signal
        -1 or [-1, 0, 1]   -> the same list for every signal
        [[0], [-1, 1]]     -> one list per signal (length must match)

    Raises:
        ConfigurationError: on a per-signal list of the wrong length or
                            non-integer shift values
    """
    if shifts is None:
        return [[0] for _ in range(n_signals)]

    if isinstance(shifts, (list, tuple)) and any(
        isinstance(item, (list, tuple, np.ndarray, pd.Series)) for item in shifts
    ):
        if len(shifts) != n_signals:
            raise ConfigurationError(
                f"Got {len(shifts)} shift lists for {n_signals} signals; lengths must match"
            )
        return [as_shift_list(item, f"shifts[{i}]") for i, item in enumerate(shifts)]

    shared = as_shift_list(shifts, "shifts")
    return [list(shared) for _ in range(n_signals)]
