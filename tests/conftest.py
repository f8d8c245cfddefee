"""
Pytest configuration for morphologycore tests
"""
import copy

import pytest

from morphologycore import Morphology, Section


SCENARIO_RAW = {
    "soma": {"id": "s", "points": [{"position": [0, 0, 0], "radius": 5}]},
    "sections": [
        {
            "id": 0, "parent": None, "children": [1],
            "points": [
                {"position": [0, 0, 0], "radius": 1},
                {"position": [1, 0, 0], "radius": 1},
            ],
        },
        {
            "id": 1, "parent": 0, "children": [],
            "points": [{"position": [1, 0, 0], "radius": 1}],
        },
    ],
}


@pytest.fixture
def scenario_raw():
    """Two sections on a single-point soma; section 1 hangs off section 0"""
    return copy.deepcopy(SCENARIO_RAW)


@pytest.fixture
def branching_raw():
    """A soma with an axon and a forked basal dendrite, children listed before parents"""
    return {
        "soma": {
            "id": "soma",
            "points": [
                {"position": [-1, 0, 0], "radius": 2},
                {"position": [1, 0, 0], "radius": 4},
            ],
        },
        "sections": [
            {"id": "d1", "typename": "basal_dendrite", "typevalue": 3, "parent": "d0", "children": [],
             "points": [{"position": [2, 2, 0], "radius": 0.5}]},
            {"id": "d2", "typename": "basal_dendrite", "typevalue": 3, "parent": "d0", "children": [],
             "points": [{"position": [2, -2, 0], "radius": 0.5}]},
            {"id": "d0", "typename": "basal_dendrite", "typevalue": 3, "parent": None, "children": ["d1", "d2"],
             "points": [{"position": [1, 0, 0], "radius": 1}, {"position": [2, 0, 0], "radius": 0.8}]},
            {"id": "a0", "typename": "axon", "typevalue": 2, "parent": None, "children": [],
             "points": [{"position": [-1, 0, 0], "radius": 0.3}]},
        ],
    }


@pytest.fixture
def scenario_morphology(scenario_raw):
    morphology = Morphology()
    morphology.build_from_raw_morphology(scenario_raw)
    return morphology


@pytest.fixture
def make_section():
    """Factory for standalone sections with a given id"""
    def _make(section_id, typename=None):
        section = Section()
        section.set_id(section_id)
        if typename is not None:
            section.set_typename(typename)
        return section
    return _make
