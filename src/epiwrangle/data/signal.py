"""
Signal tables - BLOCK 1: Data model

This module handles:
1. The SignalTable wrapper pairing a DataFrame with its metadata side-table
2. Building signal tables from external data (as_signal)
3. Selecting one issue per observation (latest_issue / earliest_issue)
4. Resolving a table's (data_source, signal) identity and merging metadata

Metadata is a DataFrame with one row per (data_source, signal) and columns
such as geo_type, time_type, num_locations, mean_value, stdev_value. It is
never stored as a data column; every transform carries it explicitly.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

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


logger = logging.getLogger(__name__)

Layout = Literal["signal", "wide", "long"]
LAYOUTS: Tuple[str, ...] = ("signal", "wide", "long")

MetadataLike = Union[pd.DataFrame, Dict[str, Any], None]


def _metadata_frame(metadata: MetadataLike) -> pd.DataFrame:
    if metadata is None:
        return pd.DataFrame()
    if isinstance(metadata, pd.DataFrame):
        return metadata.reset_index(drop=True)
    if isinstance(metadata, dict):
        return pd.DataFrame([metadata])
    raise SchemaError(f"metadata must be a DataFrame or dict, got {type(metadata).__name__}")


@dataclass(eq=False)
class SignalTable:
    """
    A signal DataFrame together with its metadata side-table.

    Attributes:
        data: Observation rows (signal, wide or long layout)
        metadata: One row per (data_source, signal) with geo_type and
                  optional summary statistics
        layout: "signal" for a single raw signal, "wide" or "long" for
                aggregated tables
    """
    data: pd.DataFrame
    metadata: pd.DataFrame = field(default_factory=pd.DataFrame)
    layout: Layout = "signal"

    def __post_init__(self):
        if not isinstance(self.data, pd.DataFrame):
            raise SchemaError(f"data must be a pandas DataFrame, got {type(self.data).__name__}")
        if self.layout not in LAYOUTS:
            raise ConfigurationError(f"Unknown layout: {self.layout}")
        self.metadata = _metadata_frame(self.metadata)

    @property
    def geo_type(self) -> Optional[str]:
        """First geo_type declared in the metadata, if any."""
        if 'geo_type' not in self.metadata.columns:
            return None
        values = self.metadata['geo_type'].dropna()
        return values.iloc[0] if len(values) else None

    def copy(self) -> 'SignalTable':
        return SignalTable(self.data.copy(), self.metadata.copy(), self.layout)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"SignalTable(layout='{self.layout}', rows={len(self.data)}, "
            f"columns={list(self.data.columns)}, metadata_rows={len(self.metadata)})"
        )


def to_table(x: Union[SignalTable, pd.DataFrame]) -> SignalTable:
    """Wrap a bare DataFrame as a SignalTable with empty metadata."""
    if isinstance(x, SignalTable):
        return x
    if isinstance(x, pd.DataFrame):
        return SignalTable(x)
    raise SchemaError(f"Expected a SignalTable or DataFrame, got {type(x).__name__}")


def as_signal(
    df: pd.DataFrame,
    signal: str,
    geo_type: Optional[str] = None,
    data_source: Optional[str] = None,
    issue: Optional[Any] = None,
    **metadata: Any
) -> SignalTable:
    """
    Build a signal table from external data.

    Args:
        df: DataFrame with geo_value, time_value and value columns
        signal: Name of the measured quantity
        geo_type: Geographic granularity (config default: county)
        data_source: Provenance label (config default: "user")
        issue: Issue date to stamp on every row. If omitted, an existing
               issue column is kept, otherwise the table is single-issue.
        **metadata: Extra metadata fields (e.g. num_locations)

    Returns:
        SignalTable in "signal" layout
    """
    validate_signal_frame(df, REQUIRED_COLS)
    if not signal:
        raise ConfigurationError("signal name must be provided")

    data_source = data_source or get_setting('signal.default_data_source', 'user')
    geo_type = geo_type or get_setting('signal.default_geo_type', 'county')
    geo_types = get_setting('signal.geo_types')
    if geo_types and geo_type not in geo_types:
        raise ConfigurationError(f"Unknown geo_type: {geo_type} (expected one of {geo_types})")

    df = df.copy()
    df['data_source'] = data_source
    df['signal'] = signal
    df['time_value'] = normalize_time_values(df['time_value'], allow_missing=False)
    if issue is not None:
        df['issue'] = pd.Timestamp(issue).normalize()
    elif 'issue' in df.columns:
        df['issue'] = normalize_time_values(df['issue'], 'issue')

    leading = IDENTITY_COLS + KEY_COLS
    df = df[leading + [c for c in df.columns if c not in leading]]

    meta = {
        'data_source': data_source,
        'signal': signal,
        'geo_type': geo_type,
        'time_type': 'day',
    }
    meta.update(metadata)

    return SignalTable(df.reset_index(drop=True), pd.DataFrame([meta]), layout="signal")


def _select_issue(
    x: Union[SignalTable, pd.DataFrame],
    keep: str,
    by: Optional[Sequence[str]] = None
) -> SignalTable:
    table = to_table(x)
    df = table.data
    if 'issue' not in df.columns:
        return table.copy()

    if by is None:
        by = IDENTITY_COLS + KEY_COLS + ['dt']
    group_cols = [c for c in by if c in df.columns]
    # Missing issues sort first so any dated issue wins for "last"
    ordered = df.sort_values('issue', kind='mergesort', na_position='first')
    selected = ordered.drop_duplicates(subset=group_cols, keep=keep)
    selected = selected.sort_index()

    dropped = len(df) - len(selected)
    if dropped:
        logger.debug("Issue selection (%s) dropped %d superseded rows", keep, dropped)

    return SignalTable(selected.reset_index(drop=True), table.metadata.copy(), table.layout)


def latest_issue(
    x: Union[SignalTable, pd.DataFrame],
    by: Optional[Sequence[str]] = None
) -> SignalTable:
    """
    Keep only the most recent issue of every observation.

    Args:
        x: Signal table, possibly holding several issues per
           (geo_value, time_value)
        by: Columns identifying one observation (default: data_source,
            signal, geo_value, time_value and dt, where present)

    Returns:
        SignalTable with one row per observation key
    """
    return _select_issue(x, keep='last', by=by)


def earliest_issue(
    x: Union[SignalTable, pd.DataFrame],
    by: Optional[Sequence[str]] = None
) -> SignalTable:
    """Keep only the first issue of every observation."""
    return _select_issue(x, keep='first', by=by)


def _first_present(frame: pd.DataFrame, column: str) -> Optional[Any]:
    if column not in frame.columns:
        return None
    values = frame[column].dropna()
    return values.iloc[0] if len(values) else None


def resolve_identity(x: Union[SignalTable, pd.DataFrame]) -> Tuple[str, str]:
    """
    Work out which (data_source, signal) a single-signal table holds.

    Explicit data columns are authoritative; metadata fills in whatever the
    columns do not say.

    Returns:
        Tuple of (data_source, signal)

    Raises:
        SchemaError: if neither the columns nor the metadata name it
    """
    table = to_table(x)
    identity = []
    for column in IDENTITY_COLS:
        value = _first_present(table.data, column)
        if value is None:
            value = _first_present(table.metadata, column)
        if value is None:
            raise SchemaError(
                f"Cannot determine '{column}': no such data column or metadata field"
            )
        identity.append(str(value))
    return identity[0], identity[1]


def fill_identity(df: pd.DataFrame, identity: Tuple[str, str]) -> pd.DataFrame:
    """Backfill missing data_source/signal cells (or columns) with ``identity``."""
    df = df.copy()
    for column, value in zip(IDENTITY_COLS, identity):
        if column in df.columns:
            df[column] = df[column].fillna(value)
        else:
            df[column] = value
    return df


def combine_metadata(
    tables: Sequence[SignalTable],
    identities: Optional[Sequence[Tuple[str, str]]] = None
) -> pd.DataFrame:
    """
    Row-wise union of each input's metadata.

    Inputs with different metadata fields are combined with an outer union,
    so fields one input lacks come out missing. Each row is stamped with its
    input's (data_source, signal). Rows sharing that pair are merged: every
    field takes the first non-missing value among them.

    Args:
        tables: Input signal tables
        identities: Precomputed (data_source, signal) per table

    Returns:
        Metadata DataFrame, one row per distinct (data_source, signal)
    """
    if identities is None:
        identities = [resolve_identity(t) for t in tables]

    frames: List[pd.DataFrame] = []
    for table, (data_source, signal) in zip(tables, identities):
        meta = table.metadata.copy()
        if len(meta) == 0:
            meta = meta.reindex([0])
        for column, value in zip(IDENTITY_COLS, (data_source, signal)):
            if column in meta.columns:
                meta[column] = meta[column].fillna(value)
            else:
                meta[column] = value
        frames.append(meta)

    if not frames:
        return pd.DataFrame(columns=IDENTITY_COLS)

    combined = pd.concat(frames, ignore_index=True, sort=False)
    # Same-identity rows merge field by field; the first non-missing value wins
    combined = combined.groupby(IDENTITY_COLS, sort=False, as_index=False).first()
    ordered = IDENTITY_COLS + [c for c in combined.columns if c not in IDENTITY_COLS]
    return combined[ordered].reset_index(drop=True)
