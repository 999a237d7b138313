"""Tests for signal tables, issue selection and metadata handling."""

import pandas as pd
import pytest

from epiwrangle.common.errors import ConfigurationError, SchemaError
from epiwrangle.data.signal import (
    SignalTable,
    as_signal,
    combine_metadata,
    earliest_issue,
    latest_issue,
    resolve_identity,
    to_table,
)


@pytest.fixture
def external():
    return pd.DataFrame({
        "time_value": ["2020-10-01", "2020-10-02", "2020-10-01"],
        "geo_value": ["pa", "pa", "tx"],
        "value": [10.0, 12.0, 30.0],
    })


@pytest.fixture
def revised():
    """Two issues of the same two observations."""
    return pd.DataFrame({
        "data_source": "foo",
        "signal": "foo",
        "geo_value": ["a", "a", "a", "a"],
        "time_value": pd.to_datetime(["2020-01-01", "2020-01-01", "2020-01-02", "2020-01-02"]),
        "issue": pd.to_datetime(["2020-01-03", "2020-01-05", "2020-01-05", "2020-01-03"]),
        "value": [1.0, 10.0, 20.0, 2.0],
    })


class TestSignalTable:
    """Tests for the SignalTable wrapper."""

    def test_dict_metadata_becomes_frame(self, foo):
        assert isinstance(foo.metadata, pd.DataFrame)
        assert len(foo.metadata) == 1
        assert foo.geo_type == "state"

    def test_no_metadata(self):
        table = SignalTable(pd.DataFrame({"value": [1.0]}))
        assert table.metadata.empty
        assert table.geo_type is None
        assert len(table) == 1

    def test_rejects_unknown_layout(self):
        with pytest.raises(ConfigurationError):
            SignalTable(pd.DataFrame(), layout="tall")

    def test_rejects_non_frames(self):
        with pytest.raises(SchemaError):
            SignalTable([1, 2, 3])
        with pytest.raises(SchemaError):
            to_table({"value": [1]})

    def test_copy_is_independent(self, foo):
        clone = foo.copy()
        clone.data.loc[0, "value"] = 99
        clone.metadata.loc[0, "geo_type"] = "county"
        assert foo.data.loc[0, "value"] == 1
        assert foo.geo_type == "state"


class TestAsSignal:
    """Tests for as_signal()."""

    def test_builds_signal(self, external):
        table = as_signal(external, signal="hospitalized_increase", geo_type="state",
                          data_source="covid-tracking")

        assert table.layout == "signal"
        assert list(table.data.columns)[:4] == ["data_source", "signal", "geo_value", "time_value"]
        assert (table.data["data_source"] == "covid-tracking").all()
        assert (table.data["signal"] == "hospitalized_increase").all()
        assert table.data["time_value"].iloc[0] == pd.Timestamp("2020-10-01")
        assert table.metadata.iloc[0].to_dict() == {
            "data_source": "covid-tracking",
            "signal": "hospitalized_increase",
            "geo_type": "state",
            "time_type": "day",
        }

    def test_defaults(self, external):
        table = as_signal(external, signal="foo")
        assert table.data["data_source"].iloc[0] == "user"
        assert table.geo_type == "county"

    def test_extra_metadata(self, external):
        table = as_signal(external, signal="foo", num_locations=2)
        assert table.metadata.loc[0, "num_locations"] == 2

    def test_issue_stamp(self, external):
        table = as_signal(external, signal="foo", issue="2020-10-05")
        assert (table.data["issue"] == pd.Timestamp("2020-10-05")).all()

    def test_does_not_modify_input(self, external):
        before = external.copy()
        as_signal(external, signal="foo")
        pd.testing.assert_frame_equal(external, before)

    def test_requires_signal_name(self, external):
        with pytest.raises(ConfigurationError):
            as_signal(external, signal="")

    def test_requires_columns(self, external):
        with pytest.raises(SchemaError, match="value"):
            as_signal(external.drop(columns=["value"]), signal="foo")

    def test_unknown_geo_type(self, external):
        with pytest.raises(ConfigurationError):
            as_signal(external, signal="foo", geo_type="galaxy")

    def test_bad_dates(self, external):
        external["time_value"] = ["not a date", "2020-10-02", "2020-10-01"]
        with pytest.raises(SchemaError):
            as_signal(external, signal="foo")

    def test_missing_dates(self, external):
        external["time_value"] = ["2020-10-01", None, "2020-10-01"]
        with pytest.raises(SchemaError, match="missing dates"):
            as_signal(external, signal="foo")


class TestIssueSelection:
    """Tests for latest_issue() and earliest_issue()."""

    def test_latest_issue(self, revised):
        latest = latest_issue(revised).data
        assert len(latest) == 2
        assert sorted(latest["value"]) == [10.0, 20.0]

    def test_earliest_issue(self, revised):
        earliest = earliest_issue(revised).data
        assert sorted(earliest["value"]) == [1.0, 2.0]

    def test_without_issue_column(self, revised):
        """Tables without an issue column are treated as single-issue."""
        table = revised.drop(columns=["issue"])
        assert len(latest_issue(table).data) == 4

    def test_keeps_metadata(self, revised):
        table = SignalTable(revised, {"geo_type": "state"})
        assert latest_issue(table).geo_type == "state"

    def test_custom_observation_key(self, revised):
        """Rows that differ only in identity collapse when grouped by key."""
        revised.loc[1, "data_source"] = None
        assert len(latest_issue(revised).data) == 3

        latest = latest_issue(revised, by=["geo_value", "time_value"]).data
        assert sorted(latest["value"]) == [10.0, 20.0]


class TestIdentity:
    """Tests for resolve_identity() and combine_metadata()."""

    def test_from_columns(self, foo):
        assert resolve_identity(foo) == ("foo", "foo")

    def test_from_metadata(self):
        df = pd.DataFrame({"geo_value": ["a"], "time_value": ["2020-01-01"], "value": [1.0]})
        table = SignalTable(df, {"data_source": "src", "signal": "sig"})
        assert resolve_identity(table) == ("src", "sig")

    def test_unknown(self):
        df = pd.DataFrame({"geo_value": ["a"], "time_value": ["2020-01-01"], "value": [1.0]})
        with pytest.raises(SchemaError):
            resolve_identity(df)

    def test_combine_metadata_outer_union(self, foo, bar):
        bar = SignalTable(bar.data, {"geo_type": "state", "mean_value": 7.5})
        meta = combine_metadata([foo, bar])

        assert list(meta.columns) == ["data_source", "signal", "geo_type", "mean_value"]
        assert list(meta["signal"]) == ["foo", "bar"]
        assert pd.isna(meta.loc[0, "mean_value"])
        assert meta.loc[1, "mean_value"] == 7.5

    def test_combine_metadata_collapses_duplicates(self, foo):
        assert len(combine_metadata([foo, foo])) == 1

    def test_combine_metadata_merges_same_identity_fields(self, foo):
        """Same-identity rows keep every field either of them carries."""
        other = SignalTable(foo.data, {"geo_type": "state", "num_locations": 3})
        meta = combine_metadata([foo, other])

        assert len(meta) == 1
        assert list(meta.columns) == ["data_source", "signal", "geo_type", "num_locations"]
        assert meta.loc[0, "num_locations"] == 3

    def test_combine_metadata_without_any_metadata(self):
        df = pd.DataFrame({"data_source": "x", "signal": "y", "geo_value": ["a"],
                           "time_value": ["2020-01-01"], "value": [1.0]})
        meta = combine_metadata([SignalTable(df)])
        assert meta.to_dict("records") == [{"data_source": "x", "signal": "y"}]
