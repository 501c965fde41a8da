"""Unit tests for rendering records back to literal-table source."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from literal_table import InvalidArgumentError, Keyword, read_table, to_source


RECORDS = [
    {"name": "Ada", "age": 36, "active": True, "score": 9.5, "note": None},
    {"name": "a|b \"quoted\"", "age": -3, "active": False, "score": 0.25, "note": "---"},
]


class TestToSource:

    def test_layout(self):
        assert to_source([{"b": 2, "a": "x"}]) == (
            "| :a  | :b  |\n"
            "| --- | --- |\n"
            '| "x" | 2   |\n'
        )

    def test_explicit_key_order(self):
        source = to_source([{"a": 1, "b": 2}], keys=["b", "a"])
        assert source.splitlines()[0].split() == ["|", ":b", "|", ":a", "|"]

    def test_sort_key(self):
        source = to_source([{"aa": 1, "b": 2}], sort_key=len)
        assert source.splitlines()[0].split() == ["|", ":b", "|", ":aa", "|"]

    def test_missing_key_is_nil(self):
        source = to_source([{"a": 1}, {"b": 2}])
        assert "nil" in source.splitlines()[2]

    def test_keyword_and_multi_value(self):
        source = to_source([{"k": Keyword("x"), "v": [1, 2]}])
        assert source.splitlines()[2].split() == ["|", ":x", "|", "1", "2", "|"]

    def test_empty(self):
        assert to_source([]) == ""

    @pytest.mark.parametrize("key", ["first name", "a|b", "", "say\"hi\"", "tag#1"])
    def test_key_not_writable_as_keyword(self, key):
        with pytest.raises(InvalidArgumentError):
            to_source([{key: 1}])

    @pytest.mark.parametrize("value", [[], [1], ("x",)])
    def test_short_list_rejected(self, value):
        with pytest.raises(InvalidArgumentError):
            to_source([{"v": value}])


class TestRoundTrip:

    def test_maps_round_trip(self):
        assert read_table(to_source(RECORDS), format="maps") == RECORDS

    def test_interpretation_round_trip(self):
        result = read_table(to_source(RECORDS))
        keys = sorted(RECORDS[0])
        assert result == {
            "col_headers": keys,
            "data": [[record[k] for k in keys] for record in RECORDS],
        }

    def test_round_trip_with_explicit_order(self):
        keys = ["score", "name", "age", "active", "note"]
        result = read_table(to_source(RECORDS, keys=keys), format="table")
        assert result[0] == keys
