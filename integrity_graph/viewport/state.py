"""
View state for the network map.

Zoom, pan, interaction mode and transient hover/selection. Owned by the
viewport controller; never persisted.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from integrity_graph.graph.positions import Position


class InteractionMode(str, Enum):
    """Pointer interaction modes. Panning and dragging never overlap."""
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class ContainerRect:
    """Screen-space bounds of the mounted canvas."""
    left: float
    top: float
    width: float = 0
    height: float = 0


@dataclass
class ViewState:
    zoom: float = 1.0
    pan: Position = Position(0.0, 0.0)
    mode: InteractionMode = InteractionMode.IDLE
    pan_anchor: Optional[Position] = None
    dragged_node_id: Optional[str] = None
    hovered_node_id: Optional[str] = None
    selected_node_id: Optional[str] = None
    hovered_edge_key: Optional[str] = None

    @property
    def transform(self) -> str:
        """SVG transform applied to the graph layer: translate(pan) then scale(zoom)."""
        return f"translate({self.pan.x:g}, {self.pan.y:g}) scale({self.zoom:g})"
