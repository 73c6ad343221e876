"""Shared fixtures for tokenflow tests"""

import pytest

from tokenflow.net import normalize


def build_doc(places=None, transitions=None, arcs=None):
    """Normalized document from compact place/transition/arc descriptions."""
    return normalize({
        "places": places or {},
        "transitions": {tid: {} for tid in (transitions or [])},
        "arcs": arcs or [],
    })


@pytest.fixture
def scenario_doc():
    """p1 (1 token, unbounded) -> t1 -> p2 (empty, capacity 1)"""
    return build_doc(
        places={
            "p1": {"initial": [1]},
            "p2": {"initial": [0], "capacity": [1]},
        },
        transitions=["t1"],
        arcs=[
            {"source": "p1", "target": "t1", "weight": [1]},
            {"source": "t1", "target": "p2", "weight": [1]},
        ],
    )


@pytest.fixture
def inhibitor_doc(scenario_doc):
    """scenario_doc plus an empty p3 guarding t1 through an inhibitor arc"""
    raw = dict(scenario_doc)
    raw["places"] = dict(raw["places"], p3={"initial": [0]})
    raw["arcs"] = raw["arcs"] + [
        {"source": "p3", "target": "t1", "weight": [1], "inhibitTransition": True},
    ]
    return normalize(raw)


@pytest.fixture
def make_doc():
    return build_doc
