#!/usr/bin/env python3
"""
Tests for the net document normalizer.

Run with: pytest tests/net/test_normalize.py -v
"""

import math

import pytest

from tokenflow.net import normalize, empty_document, UNBOUNDED
from tokenflow.net.specs import (
    DEFAULT_CONTEXT,
    DEFAULT_NET_TYPE,
    DEFAULT_TOKEN,
    coerce_capacity,
    coerce_coordinate,
    coerce_count,
    coerce_weight,
    to_number,
)
from tokenflow.persist import encode


# =============================================================================
# Document-level defaults
# =============================================================================


class TestDocumentDefaults:
    """Missing or unusable top-level fields"""

    @pytest.mark.parametrize("raw", [None, {}, [], "garbage", 42, [{"places": {}}]])
    def test_anything_becomes_an_empty_document(self, raw):
        doc = normalize(raw)
        assert doc == empty_document()

    def test_empty_document_shape(self):
        doc = empty_document()
        assert doc["@context"] == DEFAULT_CONTEXT
        assert doc["@type"] == DEFAULT_NET_TYPE
        assert doc["token"] == [DEFAULT_TOKEN]
        assert doc["places"] == {}
        assert doc["transitions"] == {}
        assert doc["arcs"] == []

    def test_tags_are_passed_through(self):
        doc = normalize({"@context": "urn:example", "@type": "Workflow"})
        assert doc["@context"] == "urn:example"
        assert doc["@type"] == "Workflow"

    def test_wrong_container_types_become_empty(self):
        doc = normalize({"places": [1, 2], "transitions": "t1", "arcs": {"a": 1}})
        assert doc["places"] == {}
        assert doc["transitions"] == {}
        assert doc["arcs"] == []

    def test_single_token_color(self):
        doc = normalize({"token": ["urn:red", "urn:blue"]})
        assert doc["token"] == ["urn:red"]

        assert normalize({"token": []})["token"] == [DEFAULT_TOKEN]
        assert normalize({"token": "urn:green"})["token"] == ["urn:green"]

    def test_unknown_fields_survive(self):
        doc = normalize({
            "title": "demo",
            "places": {"p1": {"label": "start", "initial": [1]}},
            "arcs": [{"source": "p1", "target": "t1", "note": "hot path"}],
        })
        assert doc["title"] == "demo"
        assert doc["places"]["p1"]["label"] == "start"
        assert doc["arcs"][0]["note"] == "hot path"


# =============================================================================
# Places
# =============================================================================


class TestPlaces:
    """Coercion of place attributes"""

    def test_missing_fields_get_defaults(self):
        place = normalize({"places": {"p1": {}}})["places"]["p1"]
        assert place == {
            "@type": "Place",
            "offset": 0,
            "initial": [0],
            "capacity": [UNBOUNDED],
            "x": 0,
            "y": 0,
        }

    def test_non_mapping_place_becomes_default_place(self):
        place = normalize({"places": {"p1": 7}})["places"]["p1"]
        assert place["initial"] == [0]
        assert place["capacity"] == [UNBOUNDED]

    def test_scalars_are_promoted(self):
        place = normalize({"places": {"p1": {"initial": 3, "capacity": 5}}})["places"]["p1"]
        assert place["initial"] == [3]
        assert place["capacity"] == [5]

    def test_numeric_strings_are_read(self):
        place = normalize({"places": {"p1": {"initial": ["4"], "x": "12", "y": "7.5"}}})["places"]["p1"]
        assert place["initial"] == [4]
        assert place["x"] == 12
        assert place["y"] == 7.5

    def test_bad_initial_falls_back_to_zero(self):
        place = normalize({"places": {"p1": {"initial": ["lots", None, -3, 2.9]}}})["places"]["p1"]
        assert place["initial"] == [0, 0, 0, 2]

    def test_empty_initial_still_has_index_zero(self):
        place = normalize({"places": {"p1": {"initial": []}}})["places"]["p1"]
        assert place["initial"] == [0]

    @pytest.mark.parametrize("capacity", [None, "unbounded", "inf", math.inf, -1, [None], [], {"max": 3}])
    def test_unbounded_capacity_forms(self, capacity):
        place = normalize({"places": {"p1": {"capacity": capacity}}})["places"]["p1"]
        assert place["capacity"] == [UNBOUNDED]

    def test_zero_capacity_is_a_real_bound(self):
        place = normalize({"places": {"p1": {"capacity": [0]}}})["places"]["p1"]
        assert place["capacity"] == [0]

    def test_bad_coordinates_default_to_zero(self):
        place = normalize({"places": {"p1": {"x": "left", "y": None, "offset": "?"}}})["places"]["p1"]
        assert (place["x"], place["y"], place["offset"]) == (0, 0, 0)

    def test_invariant_holds_for_messy_input(self):
        doc = normalize({"places": {
            "a": {"initial": -5, "capacity": -5},
            "b": {"initial": "x", "capacity": "y"},
            "c": {"initial": [float("nan")], "capacity": [float("nan")]},
            "d": {"initial": [True], "capacity": [2.5]},
        }})
        for place in doc["places"].values():
            assert isinstance(place["initial"][0], int)
            assert place["initial"][0] >= 0
            capacity = place["capacity"][0]
            assert capacity is UNBOUNDED or (isinstance(capacity, int) and capacity >= 0)


# =============================================================================
# Transitions and arcs
# =============================================================================


class TestTransitionsAndArcs:
    """Coercion of transitions and arcs"""

    def test_transition_position(self):
        transition = normalize({"transitions": {"t1": {"x": "30", "y": "bad"}}})["transitions"]["t1"]
        assert transition == {"@type": "Transition", "x": 30, "y": 0}

    def test_arc_defaults(self):
        arc = normalize({"arcs": [{"source": "p1", "target": "t1"}]})["arcs"][0]
        assert arc == {
            "@type": "Arrow",
            "source": "p1",
            "target": "t1",
            "weight": [1],
            "inhibitTransition": False,
        }

    def test_scalar_weight_promoted(self):
        arc = normalize({"arcs": [{"source": "p1", "target": "t1", "weight": 3}]})["arcs"][0]
        assert arc["weight"] == [3]

    @pytest.mark.parametrize("weight", [0, -2, "heavy", None, [0], []])
    def test_non_positive_weight_becomes_one(self, weight):
        arc = normalize({"arcs": [{"source": "p1", "target": "t1", "weight": weight}]})["arcs"][0]
        assert arc["weight"] == [1]

    @pytest.mark.parametrize("flag,expected", [(1, True), ("yes", True), (0, False), (None, False), ("", False)])
    def test_inhibit_flag_coerced_to_bool(self, flag, expected):
        arc = normalize({"arcs": [{"source": "p1", "target": "t1", "inhibitTransition": flag}]})["arcs"][0]
        assert arc["inhibitTransition"] is expected

    def test_non_mapping_arcs_dropped(self):
        doc = normalize({"arcs": [None, "p1->t1", {"source": "p1", "target": "t1"}]})
        assert len(doc["arcs"]) == 1

    def test_endpoints_coerced_to_strings(self):
        arc = normalize({"arcs": [{"source": 1, "target": {"id": "t1"}}]})["arcs"][0]
        assert arc["source"] == "1"
        assert arc["target"] == ""


# =============================================================================
# Idempotence and isolation
# =============================================================================


class TestIdempotence:
    """Normalizing twice changes nothing"""

    def test_normalize_is_idempotent(self):
        raw = {
            "places": {"p1": {"initial": "2", "capacity": None}, "p2": {"capacity": 3}},
            "transitions": {"t1": {"x": 10}},
            "arcs": [
                {"source": "p1", "target": "t1", "weight": 2},
                {"source": "t1", "target": "p2", "inhibitTransition": 0},
                {"source": "ghost", "target": "t1"},
            ],
            "meta": {"author": "someone"},
        }
        once = normalize(raw)
        twice = normalize(once)
        assert encode(once) == encode(twice)
        assert once == twice

    def test_result_shares_nothing_with_input(self):
        raw = {"places": {"p1": {"initial": [1], "tags": ["a"]}}}
        doc = normalize(raw)
        doc["places"]["p1"]["tags"].append("b")
        doc["places"]["p1"]["initial"][0] = 9
        assert raw["places"]["p1"]["tags"] == ["a"]
        assert raw["places"]["p1"]["initial"] == [1]

    def test_self_referencing_input(self):
        raw = {"places": {"p1": {"initial": [2]}}}
        raw["loop"] = raw
        raw["places"]["p1"]["parent"] = raw["places"]

        doc = normalize(raw)

        assert "loop" not in doc
        assert "parent" not in doc["places"]["p1"]
        assert doc["places"]["p1"]["initial"] == [2]


# =============================================================================
# Coercion helpers
# =============================================================================


class TestCoercion:
    """Scalar coercion helpers"""

    def test_to_number(self):
        assert to_number(3) == 3
        assert to_number(" 2.5 ") == 2.5
        assert to_number(True) == 1
        assert to_number("nan") is None
        assert to_number(float("nan")) is None
        assert to_number("") is None
        assert to_number([1]) is None

    def test_count_weight_capacity(self):
        assert coerce_count(-1) == 0
        assert coerce_count(3.7) == 3
        assert coerce_weight(0.5) == 1
        assert coerce_weight("4") == 4
        assert coerce_capacity(0) == 0
        assert coerce_capacity("Infinity") is UNBOUNDED

    def test_oversized_integers_read_as_infinite(self):
        assert to_number(10**400) == math.inf
        assert to_number(-10**400) == -math.inf
        assert to_number(10**300) == 10**300
        assert coerce_count(10**400) == 0
        assert coerce_weight(10**400) == 1
        assert coerce_capacity(10**400) is UNBOUNDED
        assert coerce_coordinate(-10**400) == 0


# =============================================================================
# Extreme input
# =============================================================================


def _nested_list(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


def _nested_dict(depth):
    value = {}
    for _ in range(depth):
        value = {"child": value}
    return value


class TestExtremeInput:
    """Inputs at the limits still normalize instead of raising"""

    def test_oversized_integers(self):
        huge = 10**400
        doc = normalize({
            "places": {"p1": {"initial": [huge, -huge], "capacity": [huge], "x": huge, "y": -huge}},
            "transitions": {"t1": {"x": huge}},
            "arcs": [{"source": "p1", "target": "t1", "weight": [huge]}],
        })
        place = doc["places"]["p1"]
        assert place["initial"] == [0, 0]
        assert place["capacity"] == [UNBOUNDED]
        assert (place["x"], place["y"]) == (0, 0)
        assert doc["transitions"]["t1"]["x"] == 0
        assert doc["arcs"][0]["weight"] == [1]

    def test_large_but_representable_integers_are_kept(self):
        doc = normalize({"places": {"p1": {"initial": [10**300], "capacity": [10**300]}}})
        assert doc["places"]["p1"]["initial"] == [10**300]
        assert doc["places"]["p1"]["capacity"] == [10**300]

    @pytest.mark.parametrize("deep", [_nested_list(5000), _nested_dict(5000)])
    def test_deeply_nested_extra_field(self, deep):
        doc = normalize({"places": {"p1": {"initial": [2], "label": deep}}})

        assert doc["places"]["p1"]["initial"] == [2]
        assert "label" in doc["places"]["p1"]
        assert normalize(doc) == doc
        encode(doc)

    def test_deeply_nested_root(self):
        assert normalize(_nested_list(5000)) == empty_document()

        doc = normalize(_nested_dict(5000))
        assert doc["places"] == {}
        assert "child" in doc
