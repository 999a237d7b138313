"""
Signal aggregation - combine several signals into one table

Pipeline per input signal:
1. Validate columns and normalize time_value to dates
2. Keep the latest issue of every (geo_value, time_value)
3. Complete each location's daily date range
4. Shift values by every requested dt (per location)

The shifted copies are then either joined side by side on
(geo_value, time_value) ("wide") or stacked with a dt column ("long").
"""
import logging
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from epiwrangle.common.errors import ConfigurationError, SchemaError
from epiwrangle.common.schema import (
    IDENTITY_COLS,
    KEY_COLS,
    REQUIRED_COLS,
    normalize_time_values,
    validate_signal_frame,
)
from epiwrangle.config import get_setting
from epiwrangle.data.signal import (
    SignalTable,
    combine_metadata,
    fill_identity,
    latest_issue,
    resolve_identity,
    to_table,
)
from epiwrangle.wrangle.naming import SignalKey
from epiwrangle.wrangle.shift import (
    ShiftSpec,
    as_shift_list,
    complete_dates,
    normalize_shifts,
    shift_values,
)


logger = logging.getLogger(__name__)

SignalInput = Union[SignalTable, pd.DataFrame]


def prepare_signal(x: SignalInput, name: str = 'signal') -> SignalTable:
    """
    Validate, de-duplicate and date-complete one input signal.

    Args:
        x: Signal table
        name: Label used in error messages

    Returns:
        SignalTable with one row per (geo_value, time_value), sorted by
        location then date, on a contiguous daily grid per location.
        Identity cells are filled in and geo_value is a string.
    """
    table = to_table(x)
    validate_signal_frame(table.data, REQUIRED_COLS, name=name)
    identity = resolve_identity(table)

    df = fill_identity(table.data, identity)
    df['time_value'] = normalize_time_values(df['time_value'], allow_missing=False)
    if df['geo_value'].isna().any():
        raise SchemaError(f"{name} has missing geo_value entries")
    if not (df['geo_value'].map(type) == str).all():
        logger.debug("Coercing geo_value of %s to strings", name)
        df['geo_value'] = df['geo_value'].astype(str)

    # One signal per table, so an observation is identified by its key alone
    df = latest_issue(SignalTable(df, table.metadata, table.layout), by=KEY_COLS).data
    df = df.drop_duplicates(subset=KEY_COLS, keep='last')
    df = complete_dates(df)

    return SignalTable(df, table.metadata, table.layout)


def _long_column_order(columns) -> List[str]:
    leading = IDENTITY_COLS + KEY_COLS
    trailing = ['dt', 'value']
    return leading + [c for c in columns if c not in leading + trailing] + trailing


def _long_piece(df: pd.DataFrame, key: SignalKey, shifted: pd.Series) -> pd.DataFrame:
    # Rows inserted for missing days take the table's identity
    piece = fill_identity(df, (key.data_source, key.signal))
    piece['dt'] = key.dt
    piece['value'] = shifted
    return piece[_long_column_order(piece.columns)]


def combine_signals(
    pairs: Sequence[Tuple[SignalInput, Sequence[int]]],
    layout: str = 'wide'
) -> SignalTable:
    """
    Combine (signal, shifts) pairs into one wide or long table.

    Args:
        pairs: Each input signal with the list of day shifts to apply to it
        layout: "wide" (one column per signal and shift) or "long" (stacked
                rows with a dt column)

    Returns:
        SignalTable in the requested layout. Its metadata holds one row per
        distinct (data_source, signal).
    """
    if layout not in ('wide', 'long'):
        raise ConfigurationError(f"Unknown layout: {layout} (expected 'wide' or 'long')")
    if not pairs:
        raise ConfigurationError("At least one signal is required")

    tables: List[SignalTable] = []
    identities: List[Tuple[str, str]] = []
    pieces = []

    for i, (signal, shifts) in enumerate(pairs):
        shifts = as_shift_list(shifts, f"shifts for signal {i}")
        table = prepare_signal(signal, name=f"signal {i}")
        identity = resolve_identity(table)
        tables.append(table)
        identities.append(identity)

        logger.debug(
            "Signal %d (%s_%s): %d rows, shifts %s", i, identity[0], identity[1],
            len(table.data), list(shifts)
        )

        df = table.data
        for dt in shifts:
            key = SignalKey(identity[0], identity[1], int(dt))
            shifted = shift_values(df, key.dt)
            if layout == 'wide':
                column = shifted.copy()
                column.index = pd.MultiIndex.from_frame(df[KEY_COLS])
                column.name = key.to_column()
                pieces.append(column)
            else:
                pieces.append(_long_piece(df, key, shifted))

    metadata = combine_metadata(tables, identities)

    if layout == 'wide':
        # Full outer join on (geo_value, time_value); duplicate names are kept
        combined = pd.concat(pieces, axis=1, join='outer').sort_index()
        combined.index.names = KEY_COLS
        combined = combined.reset_index()
    else:
        combined = pd.concat(pieces, ignore_index=True, sort=False)
        combined = combined[_long_column_order(combined.columns)]

    logger.debug("Combined %d signal(s) into %s layout: %s", len(tables), layout, combined.shape)
    return SignalTable(combined, metadata, layout=layout)


def aggregate_signals(
    signals: Union[SignalInput, Sequence[SignalInput]],
    shifts: ShiftSpec = None,
    layout: Optional[str] = None
) -> SignalTable:
    """
    Aggregate one or more signals, optionally shifted in time.

    Args:
        signals: A single signal table or a list of them
        shifts: None (no shift), one list of day shifts applied to every
                signal, or one list per signal
        layout: "wide" or "long" (config default: wide)

    Returns:
        SignalTable in the requested layout

    Examples:
        aggregate_signals(cases, shifts=[-1, 0, 1])
        aggregate_signals([cases, deaths], shifts=[[0], [-7, 0]], layout="long")
    """
    if isinstance(signals, (SignalTable, pd.DataFrame)):
        signals = [signals]
    signals = list(signals)

    layout = layout or get_setting('aggregate.layout', 'wide')
    shift_lists = normalize_shifts(shifts, len(signals))
    return combine_signals(list(zip(signals, shift_lists)), layout=layout)
