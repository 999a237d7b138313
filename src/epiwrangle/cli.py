#!/usr/bin/env python3
"""Aggregate signal CSV files into one wide or long table.

Each input CSV needs geo_value, time_value and value columns. Its data_source
and signal are given on the command line, since external files rarely carry
them.

Usage:
  epiwrangle \
    --signal data/cases.csv:usa-facts:confirmed_incidence_num \
    --signal data/deaths.csv:usa-facts:deaths_incidence_num \
    --geo-type state --dt -7 0 --output results/aggregated.csv

Optional:
  --layout long   (one row per signal, shift, location and date)
  --config PATH   (YAML config overriding the packaged defaults)
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import pandas as pd

from epiwrangle import config as config_module
from epiwrangle.common.errors import EpiWrangleError
from epiwrangle.data.signal import SignalTable, as_signal
from epiwrangle.data.summary import summarize_signal
from epiwrangle.wrangle.aggregate import aggregate_signals


def parse_signal_arg(value: str) -> tuple:
    """Split ``PATH:DATA_SOURCE:SIGNAL`` (the path itself may contain colons)."""
    parts = value.rsplit(":", 2)
    if len(parts) != 3 or not all(parts):
        raise argparse.ArgumentTypeError(
            f"Expected PATH:DATA_SOURCE:SIGNAL, got {value!r}"
        )
    return Path(parts[0]), parts[1], parts[2]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate signal CSV files")
    parser.add_argument(
        "--signal",
        type=parse_signal_arg,
        action="append",
        required=True,
        help="Input as PATH:DATA_SOURCE:SIGNAL (repeatable)",
    )
    parser.add_argument(
        "--geo-type",
        type=str,
        default=None,
        help="Geographic granularity of the inputs (config default: county)",
    )
    parser.add_argument(
        "--dt",
        type=int,
        nargs="+",
        default=None,
        help="Day shifts applied to every signal (default: 0)",
    )
    parser.add_argument(
        "--layout",
        choices=["wide", "long"],
        default=None,
        help="Output layout (config default: wide)",
    )
    parser.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output CSV path",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file",
    )
    return parser


def load_signals(specs, geo_type: Optional[str]) -> List[SignalTable]:
    signals = []
    for path, data_source, signal in specs:
        if not path.exists():
            raise SystemExit(f"Input file not found: {path}")
        df = pd.read_csv(path, dtype={"geo_value": str})
        try:
            signals.append(
                as_signal(df, signal=signal, geo_type=geo_type, data_source=data_source)
            )
        except EpiWrangleError as exc:
            raise SystemExit(f"{path}: {exc}") from exc
    return signals


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.config:
        config_module.CONFIG = config_module.load_config(args.config)
    config_module.configure_logging()

    signals = load_signals(args.signal, args.geo_type)

    try:
        result = aggregate_signals(signals, shifts=args.dt, layout=args.layout)
    except EpiWrangleError as exc:
        raise SystemExit(f"Aggregation failed: {exc}") from exc

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    result.data.to_csv(output, index=False, date_format="%Y-%m-%d")

    # Report
    print("Aggregation complete")
    for table in signals:
        print(summarize_signal(table).format())
    print(f"  Layout:       {result.layout}")
    print(f"  Shifts:       {args.dt or [0]}")
    print(f"  Rows:         {len(result.data)}")
    print(f"  Columns:      {len(result.data.columns)}")
    print(f"  Output path:  {output}")


if __name__ == "__main__":
    main()
