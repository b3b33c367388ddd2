"""Shared test fixtures for the attribution graph engine."""

import pytest


@pytest.fixture
def geo_document():
    """Geo-style raw document.

    China both sponsors actors and is attacked, so it must be split.
    Lazarus is referenced by a link but missing from the node list.
    """
    return {
        "nodes": [
            {"id": "China", "type": "sponsor", "degree": 99},
            {"id": "Russian Federation", "type": "sponsor"},
            {"id": "APT1", "type": "actor"},
            {"id": "APT28", "type": "actor"},
            {"id": "United States", "type": "victim"},
            {"id": "Germany"},
        ],
        "links": [
            {"source": "China", "target": "APT1", "weight": 3, "type": "sponsor_to_actor"},
            {"source": {"id": "Russian Federation"}, "target": "APT28", "weight": 2, "type": "sponsor_to_actor"},
            {"source": "China", "target": {"id": "APT28"}, "type": "sponsor_to_actor"},
            {"source": "APT1", "target": "United States", "weight": 5, "type": "actor_to_victim"},
            {"source": "APT28", "target": "Germany", "weight": 4, "type": "actor_to_victim"},
            {"source": "APT28", "target": "China", "weight": 2, "type": "Actor_To_Victim"},
            {"source": "APT28", "target": "Lazarus", "type": None},
        ],
    }


@pytest.fixture
def sector_document():
    """Sector-style raw document: sponsors -> actors -> industry sectors."""
    return {
        "nodes": [
            {"id": "Iran (Islamic Republic of)", "type": "sponsor"},
            {"id": "APT33", "type": "actor"},
            {"id": "Energy", "type": "victim"},
            {"id": "Aviation", "type": "victim"},
        ],
        "links": [
            {"source": "Iran (Islamic Republic of)", "target": "APT33", "weight": 2, "type": "sponsor_to_actor"},
            {"source": "APT33", "target": "Energy", "weight": 6, "type": "actor_to_victim"},
            {"source": "APT33", "target": "Aviation", "weight": 3, "type": "actor_to_victim"},
        ],
    }


@pytest.fixture
def node_details():
    """Details document keyed by original entity name."""
    return {
        "China": {
            "total_incidents": 12,
            "targets": {"APT1": 3, "APT28": 1, "APT41": 8},
            "sources": {},
        },
        "APT28": {
            "total_incidents": 7,
            "targets": {"Germany": 4, "China": 2, "Lazarus": 1},
            "sources": {"Russian Federation": 2, "China": 1},
        },
        "Germany": {
            "total_incidents": 4,
            "sources": {"APT28": 4},
            "actors": {"APT28": 4},
        },
    }
