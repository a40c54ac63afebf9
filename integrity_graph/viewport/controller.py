"""
Viewport Controller

Owns zoom, pan and manual node positions for the network map and turns
pointer events into state changes.

Interaction is an explicit state machine:

    IDLE --pointer_down(node)-----> DRAGGING --pointer_up/leave--> IDLE
    IDLE --pointer_down(canvas)---> PANNING  --pointer_up/leave--> IDLE

Transitions out of a non-idle mode only happen on pointer release, so a drag
can never turn into a pan and vice versa.

Rendering applies ``translate(pan) scale(zoom)``, so converting a pointer to
graph space un-translates and then un-scales:

    graph = (client - container_origin - pan) / zoom
"""

import logging
from typing import Callable, Optional

from integrity_graph.config import ViewportConfig
from integrity_graph.graph.positions import Position, PositionMap
from integrity_graph.viewport.state import ContainerRect, InteractionMode, ViewState

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0


class ViewportController:
    """Pan/zoom/drag state machine over a PositionMap.

    Usage:
        controller = ViewportController(positions, container=ContainerRect(10, 20))
        controller.pointer_down(150, 120, node_id="E1")
        controller.pointer_move(180, 140)
        controller.pointer_up()
    """

    def __init__(
        self,
        positions: PositionMap,
        config: Optional[ViewportConfig] = None,
        container: Optional[ContainerRect] = None,
        is_known_node: Optional[Callable[[str], bool]] = None,
    ):
        self.positions = positions
        self.config = config or ViewportConfig()
        self.container = container
        self.state = ViewState()
        self._is_known_node = is_known_node or (lambda node_id: node_id in self.positions)

    # ------------------------------------------------------------------ #
    # COORDINATE TRANSFORMS
    # ------------------------------------------------------------------ #

    def screen_to_graph(self, x: float, y: float) -> Position:
        """Container-relative screen point -> graph space."""
        return Position(
            (x - self.state.pan.x) / self.state.zoom,
            (y - self.state.pan.y) / self.state.zoom,
        )

    def graph_to_screen(self, x: float, y: float) -> Position:
        """Graph space -> container-relative screen point."""
        return Position(
            x * self.state.zoom + self.state.pan.x,
            y * self.state.zoom + self.state.pan.y,
        )

    def mount(self, container: Optional[ContainerRect]) -> None:
        """Attach (or detach with None) the canvas measurement."""
        self.container = container

    # ------------------------------------------------------------------ #
    # POINTER EVENTS
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> InteractionMode:
        return self.state.mode

    def pointer_down(
        self,
        client_x: float,
        client_y: float,
        button: int = PRIMARY_BUTTON,
        node_id: Optional[str] = None,
    ) -> InteractionMode:
        """Start a drag (on a node) or a pan (on empty canvas, primary button)."""
        state = self.state
        if state.mode is not InteractionMode.IDLE:
            logger.debug(f"pointer_down ignored while {state.mode.value}")
            return state.mode

        if node_id is not None:
            if not self._is_known_node(node_id):
                logger.debug(f"pointer_down on unknown node {node_id!r} ignored")
                return state.mode
            state.mode = InteractionMode.DRAGGING
            state.dragged_node_id = node_id
        elif button == PRIMARY_BUTTON:
            state.mode = InteractionMode.PANNING
            state.pan_anchor = Position(client_x - state.pan.x, client_y - state.pan.y)

        return state.mode

    def pointer_move(self, client_x: float, client_y: float) -> bool:
        """Apply the active drag or pan.

        Returns:
            True if the view or a node position changed.
        """
        state = self.state
        if state.mode is InteractionMode.IDLE:
            return False

        # Not mounted yet: nothing to measure against this frame
        if self.container is None:
            return False

        if state.mode is InteractionMode.DRAGGING:
            position = self.screen_to_graph(
                client_x - self.container.left,
                client_y - self.container.top,
            )
            self.positions.override(state.dragged_node_id, position)
            return True

        state.pan = Position(client_x - state.pan_anchor.x, client_y - state.pan_anchor.y)
        return True

    def pointer_up(self) -> None:
        self._release()

    def pointer_leave(self) -> None:
        self._release()

    def _release(self) -> None:
        state = self.state
        state.mode = InteractionMode.IDLE
        state.dragged_node_id = None
        state.pan_anchor = None

    # ------------------------------------------------------------------ #
    # ZOOM
    # ------------------------------------------------------------------ #

    def _clamp_zoom(self, zoom: float) -> float:
        return max(self.config.zoom_min, min(self.config.zoom_max, zoom))

    def wheel(self, delta_y: float) -> float:
        """Scrolling down zooms out, anything else zooms in."""
        factor = self.config.wheel_zoom_out if delta_y > 0 else self.config.wheel_zoom_in
        self.state.zoom = self._clamp_zoom(self.state.zoom * factor)
        return self.state.zoom

    def zoom_in(self) -> float:
        self.state.zoom = self._clamp_zoom(self.state.zoom * self.config.button_zoom_factor)
        return self.state.zoom

    def zoom_out(self) -> float:
        self.state.zoom = self._clamp_zoom(self.state.zoom / self.config.button_zoom_factor)
        return self.state.zoom

    # ------------------------------------------------------------------ #
    # VIEW COMMANDS
    # ------------------------------------------------------------------ #

    def fit_view(self) -> None:
        """Reset zoom and pan, keep manually placed nodes where they are."""
        self.state.zoom = 1.0
        self.state.pan = Position(0.0, 0.0)

    def reset_view(self) -> None:
        """Reset zoom and pan and return every node to its layout placement."""
        self.fit_view()
        discarded = self.positions.override_count
        self.positions.clear_overrides()
        if discarded:
            logger.debug(f"Reset view discarded {discarded} manual position(s)")
