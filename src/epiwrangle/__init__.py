# epiwrangle
"""
epiwrangle - multi-signal wrangling for epidemiological time series

Combines time-stamped, geo-located signals (one value per location and day)
into wide or long tables, with per-signal time shifts, and pivots between
the two layouts.

Project Structure:
    epiwrangle/
    ├── common/      - Errors and column definitions
    ├── data/        - Signal tables, issue selection, metadata, summaries
    ├── wrangle/     - Time shifts, aggregation, wide/long pivots
    ├── evaluation/  - Correlations between signals
    └── cli.py       - Command line aggregation of CSV files
"""

from epiwrangle.common.errors import (
    ConfigurationError,
    EpiWrangleError,
    FormatError,
    SchemaError,
)
from epiwrangle.data import (
    SignalSummary,
    SignalTable,
    as_signal,
    earliest_issue,
    latest_issue,
    summarize_signal,
)
from epiwrangle.evaluation import signal_cor
from epiwrangle.wrangle import aggregate_signals, combine_signals, to_long, to_wide

__version__ = "0.1.0"

__all__ = [
    'ConfigurationError',
    'EpiWrangleError',
    'FormatError',
    'SchemaError',
    'SignalSummary',
    'SignalTable',
    'as_signal',
    'earliest_issue',
    'latest_issue',
    'summarize_signal',
    'signal_cor',
    'aggregate_signals',
    'combine_signals',
    'to_long',
    'to_wide',
]
