"""
Evaluator Network Relationship Graph

In-memory graph of evaluator -> vendor relationships for one render cycle.
Uses NetworkX internally for all graph operations.

Supported operations:
- Referential filtering (edges with missing endpoints are dropped)
- Connections of a node in both directions
- Inbound / outbound relationship counts
- Summary statistics for the dashboard header cards

License: Proprietary
"""

import logging
from typing import Any, Dict, List, Optional

import networkx as nx

from integrity_graph.graph.models import Edge, GraphPayload, Node

logger = logging.getLogger(__name__)


class RelationshipGraph:
    """
    Directed evaluator/vendor graph built on NetworkX.

    The payload is treated as an immutable snapshot. Edges whose source or
    target is not a known node are kept out of the graph but are still
    available through ``payload_edges`` for callers that need the raw list.

    Usage:
        graph = RelationshipGraph(payload)
        graph.connected_nodes("E1")
        graph.get_stats()
    """

    def __init__(self, payload: GraphPayload):
        self._payload = payload
        self._graph = nx.DiGraph()
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        self._dropped_edges = 0

        self._build_graph(payload)
        logger.info(
            f"RelationshipGraph initialized: {self._graph.number_of_nodes()} nodes, "
            f"{len(self._edges)} edges ({self._dropped_edges} dropped)"
        )

    def _build_graph(self, payload: GraphPayload) -> None:
        for node in payload.nodes:
            self._nodes[node.id] = node
            self._graph.add_node(node.id, node_type=node.type, name=node.name)

        for edge in payload.edges:
            if edge.source not in self._nodes or edge.target not in self._nodes:
                self._dropped_edges += 1
                logger.debug(f"Dropping edge {edge.key}: endpoint missing")
                continue

            self._edges.append(edge)
            # Parallel edges collapse in the DiGraph; count them as weight
            if self._graph.has_edge(edge.source, edge.target):
                self._graph[edge.source][edge.target]["multiplicity"] += 1
            else:
                self._graph.add_edge(
                    edge.source, edge.target,
                    strength=edge.strength,
                    is_suspicious=edge.is_suspicious,
                    multiplicity=1,
                )

    # ------------------------------------------------------------------ #
    # ACCESSORS
    # ------------------------------------------------------------------ #

    @property
    def payload(self) -> GraphPayload:
        return self._payload

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[Edge]:
        """Edges whose endpoints both exist."""
        return list(self._edges)

    @property
    def payload_edges(self) -> List[Edge]:
        return list(self._payload.edges)

    @property
    def dropped_edge_count(self) -> int:
        return self._dropped_edges

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node_type(self, node_id: str) -> str:
        node = self._nodes.get(node_id)
        return node.type if node else "unknown"

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def edge_count(self) -> int:
        return len(self._edges)

    # ------------------------------------------------------------------ #
    # TRAVERSAL
    # ------------------------------------------------------------------ #

    def connected_nodes(self, node_id: str) -> List[str]:
        """Opposite endpoints of every edge touching ``node_id``, de-duplicated."""
        if node_id not in self._graph:
            return []
        seen = dict.fromkeys(self._graph.successors(node_id))
        seen.update(dict.fromkeys(self._graph.predecessors(node_id)))
        return list(seen)

    def out_degree(self, node_id: str) -> int:
        """Number of relationships where ``node_id`` is the source."""
        return sum(1 for e in self._edges if e.source == node_id)

    def in_degree(self, node_id: str) -> int:
        """Number of relationships where ``node_id`` is the target."""
        return sum(1 for e in self._edges if e.target == node_id)

    # ------------------------------------------------------------------ #
    # STATISTICS
    # ------------------------------------------------------------------ #

    def get_stats(self, flagged_threshold: float = 50) -> Dict[str, Any]:
        """
        Summary statistics for the header cards.

        Returns:
            Dict with:
                - evaluator_count / vendor_count
                - flagged_evaluator_count: evaluators with bias score above threshold
                - relationship_count / suspicious_count: over the raw payload edges
                - avg_bias_score: mean evaluator bias (missing scores count as 0), 1 decimal
                - dropped_edge_count: edges with a missing endpoint
                - density, connected_components, largest_component_size
        """
        evaluators = [n for n in self._nodes.values() if n.is_evaluator]
        vendors = [n for n in self._nodes.values() if n.is_vendor]
        raw_edges = self._payload.edges

        flagged = [e for e in evaluators if e.bias_score and e.bias_score > flagged_threshold]
        if evaluators:
            avg_bias = sum(e.bias_score or 0 for e in evaluators) / len(evaluators)
        else:
            avg_bias = 0.0

        n_nodes = self._graph.number_of_nodes()
        if n_nodes > 0:
            components = list(nx.weakly_connected_components(self._graph))
            n_components = len(components)
            largest_component = max(len(c) for c in components)
        else:
            n_components = 0
            largest_component = 0

        density = nx.density(self._graph) if n_nodes > 1 else 0

        return {
            "evaluator_count": len(evaluators),
            "vendor_count": len(vendors),
            "flagged_evaluator_count": len(flagged),
            "relationship_count": len(raw_edges),
            "suspicious_count": sum(1 for e in raw_edges if e.is_suspicious),
            "avg_bias_score": round(avg_bias, 1),
            "dropped_edge_count": self._dropped_edges,
            "density": round(density, 6),
            "connected_components": n_components,
            "largest_component_size": largest_component,
        }
