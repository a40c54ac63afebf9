"""
Selection and highlight state.

Hover and selection live on the ViewState; everything visual is derived from
a HighlightState record by the pure styling functions in
integrity_graph.render.styling.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from integrity_graph.graph.models import Edge
from integrity_graph.viewport.state import ViewState


@dataclass(frozen=True)
class HighlightState:
    is_selected: bool = False
    is_hovered: bool = False
    is_connected: bool = False
    is_suspicious: bool = False


def connected_nodes(node_id: str, edges: Iterable[Edge]) -> List[str]:
    """Opposite endpoints of every edge touching ``node_id``.

    Both directions are scanned, so the relation is symmetric. The result is
    de-duplicated and keeps first-seen order.
    """
    connected = {}
    for edge in edges:
        if edge.source == node_id:
            connected[edge.target] = None
        if edge.target == node_id:
            connected[edge.source] = None
    return list(connected)


def click_node(state: ViewState, node_id: str) -> Optional[str]:
    """Toggle selection of ``node_id``. Returns the new selection."""
    state.selected_node_id = None if state.selected_node_id == node_id else node_id
    return state.selected_node_id


def hover_node(state: ViewState, node_id: Optional[str]) -> None:
    state.hovered_node_id = node_id


def hover_edge(state: ViewState, key: Optional[str]) -> None:
    state.hovered_edge_key = key


def selection_neighbourhood(state: ViewState, edges: Iterable[Edge]) -> Set[str]:
    """Nodes connected to the current selection (empty when nothing is selected)."""
    if state.selected_node_id is None:
        return set()
    return set(connected_nodes(state.selected_node_id, edges))


def node_highlight(state: ViewState, node_id: str, neighbourhood: Set[str]) -> HighlightState:
    return HighlightState(
        is_selected=state.selected_node_id == node_id,
        is_hovered=state.hovered_node_id == node_id,
        is_connected=node_id in neighbourhood,
    )


def edge_highlight(state: ViewState, edge: Edge) -> HighlightState:
    selected = state.selected_node_id
    return HighlightState(
        is_hovered=state.hovered_edge_key == edge.key,
        is_connected=selected is not None and selected in (edge.source, edge.target),
        is_suspicious=edge.is_suspicious,
    )
