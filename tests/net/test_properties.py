#!/usr/bin/env python3
"""
Property-based tests for the net engine.

Run with: pytest tests/net/test_properties.py -v
"""

import copy

import pytest
from hypothesis import given, strategies as st, settings, HealthCheck

from tokenflow.net import enabled, fire, marking, normalize, UNBOUNDED
from tokenflow.persist import encode


# =============================================================================
# Strategies
# =============================================================================

PLACE_IDS = ["a", "b", "c", "d"]

json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-5, max_value=50),
    st.integers(),
    st.integers(min_value=10**300, max_value=10**400),
    st.integers(min_value=-10**400, max_value=-10**300),
    st.floats(allow_nan=True, allow_infinity=True),
    st.text(max_size=5),
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=3) | st.dictionaries(st.text(max_size=5), children, max_size=3),
    max_leaves=10,
)

raw_places = st.dictionaries(
    st.sampled_from(PLACE_IDS),
    st.fixed_dictionaries({}, optional={
        "initial": json_values,
        "capacity": json_values,
        "x": json_values,
        "y": json_values,
    }),
    max_size=4,
)

raw_arcs = st.lists(
    st.fixed_dictionaries({
        "source": st.sampled_from(PLACE_IDS + ["t1", "t2"]),
        "target": st.sampled_from(PLACE_IDS + ["t1", "t2"]),
    }, optional={
        "weight": json_values,
        "inhibitTransition": json_values,
    }),
    max_size=8,
    unique_by=lambda arc: (arc["source"], arc["target"]),
)

raw_documents = st.fixed_dictionaries({
    "places": raw_places,
    "transitions": st.just({"t1": {}, "t2": {}}),
    "arcs": raw_arcs,
})


# =============================================================================
# Properties
# =============================================================================


class TestPropertyBased:
    """Invariants that hold for any document the normalizer produces"""

    @given(raw=st.one_of(json_values, raw_documents))
    @settings(max_examples=200, deadline=None)
    def test_normalized_places_are_well_formed(self, raw):
        doc = normalize(raw)
        for place in doc["places"].values():
            assert isinstance(place["initial"][0], int) and place["initial"][0] >= 0
            capacity = place["capacity"][0]
            assert capacity is UNBOUNDED or (isinstance(capacity, int) and capacity >= 0)
        for arc in doc["arcs"]:
            assert arc["weight"][0] >= 1
            assert isinstance(arc["inhibitTransition"], bool)

    @given(raw=raw_documents)
    @settings(max_examples=200, deadline=None)
    def test_normalize_is_idempotent(self, raw):
        once = normalize(raw)
        assert encode(normalize(once)) == encode(once)

    @pytest.mark.slow
    @given(raw=raw_documents, transition=st.sampled_from(["t1", "t2"]))
    @settings(
        max_examples=300,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow],
    )
    def test_firing_is_exact_or_nothing(self, raw, transition):
        """Property: a fire either changes nothing or moves exactly the arc weights

        - blocked: the canonical encoding is unchanged
        - applied: each place's count changes by outputs minus ordinary inputs
        - bounded places fed by the transition stay within capacity
        """
        doc = normalize(raw)
        before = copy.deepcopy(doc)
        pre = marking(doc)

        result = fire(doc, transition)

        assert doc == before
        if not enabled(doc, pre, transition):
            assert result.blocked
            assert encode(result.document) == encode(doc)
            return

        expected = dict(pre)
        for arc in doc["arcs"]:
            weight = arc["weight"][0]
            if arc["target"] == transition and arc["source"] in pre and not arc["inhibitTransition"]:
                expected[arc["source"]] -= weight
            if arc["source"] == transition and arc["target"] in pre:
                expected[arc["target"]] += weight

        assert result.marking == expected
        assert all(count >= 0 for count in result.marking.values())
        for place_id, count in result.marking.items():
            capacity = result.document["places"][place_id]["capacity"][0]
            touched = any(
                arc["source"] == transition and arc["target"] == place_id for arc in doc["arcs"]
            )
            if touched and capacity is not UNBOUNDED:
                assert count <= capacity
