"""
Correlations between two signals

Computes correlations between two signal tables, sliced either by location
(one correlation per geo_value, over time) or by date (one correlation per
time_value, across locations). Only the latest issue of each table is used.

Time shifts follow aggregate_signals(): with dt_y = 7, the value of x at
date T is paired with the value of y at T+7.
"""
import logging
import warnings
from typing import Callable, Dict, Optional, Union

import numpy as np
import pandas as pd
from scipy import stats

from epiwrangle.common.errors import ConfigurationError
from epiwrangle.common.schema import KEY_COLS, REQUIRED_COLS, normalize_time_values, validate_signal_frame
from epiwrangle.config import get_setting
from epiwrangle.data.signal import SignalTable, latest_issue, to_table
from epiwrangle.wrangle.shift import as_shift_list, complete_dates, shift_values


logger = logging.getLogger(__name__)

CORRELATION_METHODS: Dict[str, Callable] = {
    'pearson': stats.pearsonr,
    'spearman': stats.spearmanr,
    'kendall': stats.kendalltau,
}

BY_OPTIONS = ('geo_value', 'time_value')


def _keyed_values(x: Union[SignalTable, pd.DataFrame], name: str) -> pd.DataFrame:
    table = to_table(x)
    validate_signal_frame(table.data, REQUIRED_COLS, name=name)
    df = table.data.copy()
    df['time_value'] = normalize_time_values(df['time_value'], allow_missing=False)
    df['geo_value'] = df['geo_value'].astype(str)
    df = latest_issue(SignalTable(df, table.metadata, table.layout), by=KEY_COLS).data
    return df[KEY_COLS + ['value']].drop_duplicates(subset=KEY_COLS, keep='last')


def _single_shift(value, name: str) -> int:
    shifts = as_shift_list(value, name)
    if len(shifts) != 1:
        raise ConfigurationError(f"{name} must be a single integer shift, got {value!r}")
    return shifts[0]


def pairwise_correlation(
    x: np.ndarray,
    y: np.ndarray,
    method: str = 'pearson',
    min_pairs: int = 2
) -> float:
    """
    Correlate two arrays over their complete pairs.

    Args:
        x, y: Equal-length float arrays, NaN marks a missing value
        method: "pearson", "spearman" or "kendall"
        min_pairs: Fewer complete pairs than this gives NaN

    Returns:
        Correlation coefficient, or NaN when undefined
    """
    mask = ~(np.isnan(x) | np.isnan(y))
    if mask.sum() < max(min_pairs, 2):
        return np.nan

    xs, ys = x[mask], y[mask]
    if np.all(xs == xs[0]) or np.all(ys == ys[0]):
        # Undefined for a constant series
        return np.nan

    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        result = CORRELATION_METHODS[method](xs, ys)
    return float(result[0])


def signal_cor(
    x: Union[SignalTable, pd.DataFrame],
    y: Union[SignalTable, pd.DataFrame],
    dt_x: int = 0,
    dt_y: int = 0,
    by: Optional[str] = None,
    method: Optional[str] = None
) -> pd.DataFrame:
    """
    Compute correlations between two signal tables.

    Args:
        x, y: Signal tables to correlate
        dt_x, dt_y: Day shifts applied to x and y before correlating.
                    Negative shifts lag a signal, positive shifts lead it.
        by: "geo_value" for one correlation per location over time,
            "time_value" for one correlation per date across locations
            (config default: geo_value)
        method: "pearson", "spearman" or "kendall" (config default: pearson)

    Returns:
        DataFrame with columns [by, "value"]
    """
    by = by or get_setting('correlation.by', 'geo_value')
    method = method or get_setting('correlation.method', 'pearson')
    min_pairs = int(get_setting('correlation.min_pairs', 2))

    if by not in BY_OPTIONS:
        raise ConfigurationError(f"Unknown by: {by} (expected one of {BY_OPTIONS})")
    if method not in CORRELATION_METHODS:
        raise ConfigurationError(
            f"Unknown method: {method} (expected one of {sorted(CORRELATION_METHODS)})"
        )
    dt_x = _single_shift(dt_x, 'dt_x')
    dt_y = _single_shift(dt_y, 'dt_y')

    left = _keyed_values(x, 'x').rename(columns={'value': 'value_x'})
    right = _keyed_values(y, 'y').rename(columns={'value': 'value_y'})

    # Join by location and date, then fill every location's date range
    z = left.merge(right, on=KEY_COLS, how='outer')
    z = complete_dates(z)
    z['value_x'] = shift_values(z, dt_x, value_col='value_x')
    z['value_y'] = shift_values(z, dt_y, value_col='value_y')

    rows = []
    for key, group in z.groupby(by, sort=True):
        rows.append({
            by: key,
            'value': pairwise_correlation(
                group['value_x'].to_numpy(dtype=float),
                group['value_y'].to_numpy(dtype=float),
                method=method,
                min_pairs=min_pairs,
            ),
        })

    logger.debug("Computed %d %s correlations by %s", len(rows), method, by)
    return pd.DataFrame(rows, columns=[by, 'value'])
