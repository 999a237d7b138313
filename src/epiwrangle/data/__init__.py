"""Signal tables: construction, issue selection, metadata and summaries."""

from epiwrangle.data.signal import (
    SignalTable,
    as_signal,
    combine_metadata,
    earliest_issue,
    fill_identity,
    latest_issue,
    resolve_identity,
    to_table,
)
from epiwrangle.data.summary import SignalSummary, summarize_signal

__all__ = [
    'SignalTable',
    'as_signal',
    'combine_metadata',
    'earliest_issue',
    'fill_identity',
    'latest_issue',
    'resolve_identity',
    'to_table',
    'SignalSummary',
    'summarize_signal',
]
