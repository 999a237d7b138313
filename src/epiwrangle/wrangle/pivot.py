"""
Pivot between the wide and long aggregate layouts.

to_long() splits every value column back into rows tagged with the
data_source, signal and dt encoded in its name. to_wide() groups rows by
(data_source, signal, dt) and joins one column per group, exactly as
aggregate_signals(..., layout="wide") does.

The wide layout has no room for issue, stderr, sample_size or lag, so a
long -> wide -> long round trip loses those columns.
"""
import logging
from typing import List, Tuple, Union

import pandas as pd

from epiwrangle.common.schema import (
    IDENTITY_COLS,
    KEY_COLS,
    LONG_COLS,
    REVISION_COLS,
    normalize_time_values,
    validate_signal_frame,
)
from epiwrangle.data.signal import SignalTable, to_table
from epiwrangle.wrangle.naming import SignalKey, parse_value_column


logger = logging.getLogger(__name__)


def _known_identities(metadata: pd.DataFrame) -> List[Tuple[str, str]]:
    if not set(IDENTITY_COLS).issubset(metadata.columns):
        return []
    pairs = metadata[IDENTITY_COLS].dropna().astype(str)
    return list(pairs.itertuples(index=False, name=None))


def to_long(x: Union[SignalTable, pd.DataFrame]) -> SignalTable:
    """
    Convert a wide aggregate to the long layout.

    Args:
        x: Wide table with geo_value, time_value and one
           ``value<sign><n>:<data_source>_<signal>`` column per signal/shift

    Returns:
        SignalTable with columns data_source, signal, geo_value, time_value,
        dt, value. Missing values are kept as rows.

    Raises:
        FormatError: if a value column name does not parse
    """
    table = to_table(x)
    df = table.data
    validate_signal_frame(df, KEY_COLS, name='wide table')

    known = _known_identities(table.metadata)
    pieces = []
    # Positional access keeps duplicate column names apart
    for position, column in enumerate(df.columns):
        if column in KEY_COLS:
            continue
        key = parse_value_column(column, known)
        pieces.append(pd.DataFrame({
            'data_source': key.data_source,
            'signal': key.signal,
            'geo_value': df['geo_value'].to_numpy(),
            'time_value': df['time_value'].to_numpy(),
            'dt': key.dt,
            'value': df.iloc[:, position].to_numpy(),
        }, columns=LONG_COLS))

    if pieces:
        long_df = pd.concat(pieces, ignore_index=True)
    else:
        long_df = pd.DataFrame(columns=LONG_COLS)

    logger.debug("Pivoted %d value columns to %d long rows", len(pieces), len(long_df))
    return SignalTable(long_df, table.metadata.copy(), layout='long')


def to_wide(x: Union[SignalTable, pd.DataFrame]) -> SignalTable:
    """
    Convert a long aggregate to the wide layout.

    Args:
        x: Long table with data_source, signal, geo_value, time_value, dt
           and value columns

    Returns:
        SignalTable with geo_value, time_value and one value column per
        (data_source, signal, dt), full-outer-joined on the key columns
    """
    table = to_table(x)
    validate_signal_frame(table.data, LONG_COLS, name='long table')

    df = table.data.drop(columns=[c for c in REVISION_COLS if c in table.data.columns])
    df = df.copy()
    df['time_value'] = normalize_time_values(df['time_value'], allow_missing=False)

    columns = []
    for (data_source, signal, dt), group in df.groupby(
        ['data_source', 'signal', 'dt'], sort=False
    ):
        name = SignalKey(str(data_source), str(signal), int(dt)).to_column()
        # Repeated (data_source, signal, dt) requests become repeated columns
        occurrence = group.groupby(KEY_COLS, sort=False).cumcount()
        for _, part in group.groupby(occurrence, sort=True):
            column = part.set_index(KEY_COLS)['value'].astype(float)
            column.name = name
            columns.append(column)

    if columns:
        wide = pd.concat(columns, axis=1, join='outer').sort_index()
        wide.index.names = KEY_COLS
        wide = wide.reset_index()
    else:
        wide = pd.DataFrame(columns=KEY_COLS)

    logger.debug("Pivoted %d long rows to %d value columns", len(df), len(columns))
    return SignalTable(wide, table.metadata.copy(), layout='wide')
