"""
Viewport and Interaction

Pan/zoom/drag handling and selection state for the evaluator network map.

Components:
- state: ViewState, InteractionMode, ContainerRect
- controller: ViewportController state machine (Idle | Panning | Dragging)
- selection: Selection toggling, hover state and highlight derivation
"""

from .state import ContainerRect, InteractionMode, ViewState
from .controller import ViewportController
from .selection import (
    HighlightState,
    connected_nodes,
    click_node,
    hover_node,
    hover_edge,
    selection_neighbourhood,
    node_highlight,
    edge_highlight,
)

__all__ = [
    'ContainerRect',
    'InteractionMode',
    'ViewState',
    'ViewportController',
    'HighlightState',
    'connected_nodes',
    'click_node',
    'hover_node',
    'hover_edge',
    'selection_neighbourhood',
    'node_highlight',
    'edge_highlight',
]
