"""
Tests for parameter flattening helpers.
"""

from validation_class.core.entities.params_entity import (
    collapse_indexed,
    flatten_params,
    indexed_name,
    parse_indexed_name,
    unflatten_params
)


class TestFlattening:
    """Test suite for nested parameter handling."""

    def test_flatten_nested_structures(self):
        params = {"a": {"b": 1, "c": [1, 2]}, "d": [{"e": 1}, {"e": 2}]}
        assert flatten_params(params) == {
            "a.b": 1,
            "a.c": [1, 2],
            "d:0.e": 1,
            "d:1.e": 2,
        }

    def test_flatten_custom_delimiters(self):
        assert flatten_params({"a": {"b": [{"c": 1}]}}, "/", "#") == {"a/b#0/c": 1}

    def test_unflatten_rebuilds_structure(self):
        flat = {"a.b": 1, "a.c": [1, 2], "d:0.e": 1, "d:1.e": 2}
        assert unflatten_params(flat) == {
            "a": {"b": 1, "c": [1, 2]},
            "d": [{"e": 1}, {"e": 2}],
        }

    def test_unflatten_fills_gaps(self):
        assert unflatten_params({"d:2": "x"}) == {"d": [None, None, "x"]}

    def test_flat_names_pass_through(self):
        assert unflatten_params({"login": "x"}) == {"login": "x"}
        assert flatten_params({"login": "x"}) == {"login": "x"}


class TestIndexedNames:
    """Test suite for ``name:index`` parameters."""

    def test_indexed_name(self):
        assert indexed_name("phone", 2) == "phone:2"
        assert parse_indexed_name("phone:12") == ("phone", 12)
        assert parse_indexed_name("phone") is None

    def test_collapse_known_bases_only(self):
        params = {"tags:0": "a", "tags:2": "c", "other:0": "x", "name": "n"}
        assert collapse_indexed(params, ["tags", "name"]) == {
            "tags": ["a", None, "c"],
            "other:0": "x",
            "name": "n",
        }

    def test_collapse_keeps_existing_base(self):
        params = {"tags": ["z"], "tags:0": "a"}
        assert collapse_indexed(params, ["tags"]) == params
