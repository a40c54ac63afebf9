"""
Pytest configuration and fixtures for the evaluator network map.
Provides sample dashboard payloads in the camelCase shape the UI sends.
"""
import pytest

from integrity_graph.config import Settings
from integrity_graph.graph.models import parse_payload


@pytest.fixture
def committee_payload():
    """Three evaluators, two vendors; V1 is evaluated by everyone."""
    return {
        "nodes": [
            {"id": "E1", "name": "Alice Petrova", "type": "evaluator", "biasScore": 65},
            {"id": "E2", "name": "Boris Stojanov", "type": "evaluator", "biasScore": 55},
            {"id": "E3", "name": "Vera Ilieva", "type": "evaluator", "biasScore": 20},
            {"id": "V1", "name": "Alpha Medical", "type": "vendor"},
            {"id": "V2", "name": "Beta Supplies", "type": "vendor"},
        ],
        "edges": [
            {"source": "E1", "target": "V1", "strength": 0.9, "isSuspicious": True, "interactionCount": 7},
            {"source": "E2", "target": "V1", "strength": 0.4, "isSuspicious": False},
            {"source": "E3", "target": "V1", "strength": 0.3, "isSuspicious": False},
            {"source": "E3", "target": "V2", "strength": 0.6, "isSuspicious": False},
        ],
    }


@pytest.fixture
def committee(committee_payload):
    return parse_payload(committee_payload)


@pytest.fixture
def settings():
    return Settings()
