"""
Evaluator Network Graph

Data model and geometry for the evaluator/vendor relationship map.

Components:
- models: Pydantic schemas for the dashboard payload
- positions: Two-layer position map (layout placement + manual overrides)
- layout: Concentric ring layout for evaluators and vendors
- RelationshipGraph: NetworkX-backed view with referential filtering and stats
"""

from .models import (
    Node,
    Edge,
    RootCause,
    MitigationAction,
    CausalAnalysis,
    GraphPayload,
    PayloadError,
    edge_key,
    parse_payload,
)
from .positions import Position, PositionMap
from .layout import layout, node_set_signature
from .relationship_graph import RelationshipGraph

__all__ = [
    'Node',
    'Edge',
    'RootCause',
    'MitigationAction',
    'CausalAnalysis',
    'GraphPayload',
    'PayloadError',
    'edge_key',
    'parse_payload',
    'Position',
    'PositionMap',
    'layout',
    'node_set_signature',
    'RelationshipGraph',
]
