"""Multi-signal aggregation, time shifts and wide/long pivots."""

from epiwrangle.wrangle.aggregate import aggregate_signals, combine_signals, prepare_signal
from epiwrangle.wrangle.naming import SignalKey, parse_value_column
from epiwrangle.wrangle.pivot import to_long, to_wide
from epiwrangle.wrangle.shift import complete_dates, normalize_shifts, shift_values

__all__ = [
    'aggregate_signals',
    'combine_signals',
    'prepare_signal',
    'SignalKey',
    'parse_value_column',
    'to_long',
    'to_wide',
    'complete_dates',
    'normalize_shifts',
    'shift_values',
]
