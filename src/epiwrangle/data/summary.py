"""Per-signal summary statistics, used for quick inspection of a table."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Union

import numpy as np
import pandas as pd

from epiwrangle.common.schema import REQUIRED_COLS, validate_signal_frame
from epiwrangle.data.signal import SignalTable, resolve_identity, to_table


@dataclass
class SignalSummary:
    data_source: str
    signal: str
    geo_type: Optional[str]
    n_rows: int
    n_geo_values: int
    time_min: Optional[pd.Timestamp]
    time_max: Optional[pd.Timestamp]
    n_missing: int
    value_min: float
    value_q1: float
    value_median: float
    value_mean: float
    value_q3: float
    value_max: float

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(self)])

    def format(self) -> str:
        def _date(ts):
            return ts.strftime("%Y-%m-%d") if ts is not None else "NA"

        lines = [
            "A signal table with:",
            f"  data_source:  {self.data_source}",
            f"  signal:       {self.signal}",
            f"  geo_type:     {self.geo_type or 'NA'}",
            f"  rows:         {self.n_rows} ({self.n_missing} missing values)",
            f"  geo_values:   {self.n_geo_values}",
            f"  time range:   {_date(self.time_min)} to {_date(self.time_max)}",
            "Summary of values:",
            f"  min {self.value_min:.4g}  q1 {self.value_q1:.4g}  median {self.value_median:.4g}"
            f"  mean {self.value_mean:.4g}  q3 {self.value_q3:.4g}  max {self.value_max:.4g}",
        ]
        return "\n".join(lines)


def summarize_signal(x: Union[SignalTable, pd.DataFrame]) -> SignalSummary:
    """Compute a SignalSummary for a single-signal table."""
    table = to_table(x)
    df = table.data
    validate_signal_frame(df, REQUIRED_COLS)
    data_source, signal = resolve_identity(table)

    values = pd.to_numeric(df['value'], errors='coerce').dropna()
    if len(values):
        q = values.quantile([0.0, 0.25, 0.5, 0.75, 1.0]).to_numpy(dtype=float)
        mean = float(values.mean())
    else:
        q = np.full(5, np.nan)
        mean = np.nan

    times = pd.to_datetime(df['time_value']).dropna()

    return SignalSummary(
        data_source=data_source,
        signal=signal,
        geo_type=table.geo_type,
        n_rows=int(len(df)),
        n_geo_values=int(df['geo_value'].nunique()),
        time_min=times.min() if len(times) else None,
        time_max=times.max() if len(times) else None,
        n_missing=int(df['value'].isna().sum()),
        value_min=float(q[0]),
        value_q1=float(q[1]),
        value_median=float(q[2]),
        value_mean=mean,
        value_q3=float(q[3]),
        value_max=float(q[4]),
    )
