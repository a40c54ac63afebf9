"""
Evaluator Network Integrity Map

Relationship graph and causal insight engine for procurement evaluation
oversight: lays out evaluators and vendors, supports pan/zoom/drag, and
surfaces possible bias or collusion patterns as ranked insights.

Components:
- graph: Payload schemas, position map, ring layout, NetworkX relationship graph
- viewport: Pan/zoom/drag state machine and selection state
- insights: Root-cause mapping and fallback heuristic rules
- render: Pure styling, render context and SVG export
- network_map: EvaluatorNetworkMap component tying it all together

License: Proprietary
"""

from integrity_graph.graph import GraphPayload, PayloadError, parse_payload
from integrity_graph.insights import Insight, derive_insights, rank_insights
from integrity_graph.viewport import ContainerRect, InteractionMode
from integrity_graph.network_map import EvaluatorNetworkMap

__all__ = [
    'GraphPayload',
    'PayloadError',
    'parse_payload',
    'Insight',
    'derive_insights',
    'rank_insights',
    'ContainerRect',
    'InteractionMode',
    'EvaluatorNetworkMap',
]
