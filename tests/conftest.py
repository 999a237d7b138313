"""Shared fixtures for epiwrangle tests."""

import numpy as np
import pandas as pd
import pytest

from epiwrangle.data.signal import SignalTable


def _make_signal(
    data_source="foo",
    signal="foo",
    values=(1, 2, 3, 4, 5),
    start="2020-01-01",
    geo_value="a",
    geo_type="state",
    issue="2020-01-06",
):
    """Build a retrieval-shaped signal table with consecutive daily values."""
    dates = pd.date_range(start, periods=len(values), freq="D")
    df = pd.DataFrame({
        "data_source": data_source,
        "signal": signal,
        "geo_value": geo_value,
        "value": list(values),
        "time_value": dates,
        "issue": pd.Timestamp(issue),
        "stderr": 0.1,
        "sample_size": 10.0,
        "lag": 1,
    })
    metadata = {"data_source": data_source, "signal": signal, "geo_type": geo_type}
    return SignalTable(df, metadata)


@pytest.fixture
def make_signal():
    return _make_signal


@pytest.fixture
def foo():
    return _make_signal("foo", "foo", values=(1, 2, 3, 4, 5))


@pytest.fixture
def bar():
    return _make_signal("bar", "bar", values=(6, 7, 8, 9, 10))


@pytest.fixture
def states_foo():
    df = pd.DataFrame({
        "data_source": "foo",
        "signal": "foo",
        "geo_value": ["pa", "tx", "ri"],
        "value": [1, 2, 3],
        "time_value": pd.Timestamp("2020-01-01"),
        "issue": pd.Timestamp("2020-01-02"),
        "stderr": 0.5,
        "sample_size": 10.0,
        "lag": 1,
    })
    return SignalTable(df, {"data_source": "foo", "signal": "foo", "geo_type": "state"})


@pytest.fixture
def states_bar():
    df = pd.DataFrame({
        "data_source": "bar",
        "signal": "bar",
        "geo_value": ["pa", "tx", "ri"],
        "value": [4, 5, 6],
        "time_value": pd.Timestamp("2020-01-01"),
        "issue": pd.Timestamp("2020-01-02"),
        "stderr": 0.5,
        "sample_size": 10.0,
        "lag": 1,
    })
    return SignalTable(df, {"data_source": "bar", "signal": "bar", "geo_type": "state"})


def assert_values(series, expected):
    """Compare a value column to expected floats, treating NaN as equal."""
    np.testing.assert_array_equal(
        series.to_numpy(dtype=float), np.array(expected, dtype=float)
    )


def dates(start, periods):
    return list(pd.date_range(start, periods=periods, freq="D"))
