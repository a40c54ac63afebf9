"""
Evaluator Network Map

The interactive relationship map component. Receives a finished graph payload
(plus optional AI causal analysis) from the dashboard, lays it out, handles
pan/zoom/drag and selection, derives integrity insights and reports node
clicks back through a callback.

Usage:
    network_map = EvaluatorNetworkMap(payload, on_node_click=open_profile)
    network_map.mount(ContainerRect(left=10, top=80, width=700, height=550))
    network_map.pointer_down(200, 150, node_id="E1")
    network_map.pointer_move(240, 170)
    network_map.pointer_up()
    svg = network_map.to_svg()
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from integrity_graph.config import Settings
from integrity_graph.graph.layout import layout, node_set_signature
from integrity_graph.graph.models import GraphPayload, parse_payload
from integrity_graph.graph.positions import PositionMap
from integrity_graph.graph.relationship_graph import RelationshipGraph
from integrity_graph.insights.causal_insight_engine import CausalInsightEngine, rank_insights
from integrity_graph.insights.insight_rules import Insight
from integrity_graph.render.render_context import RenderContext, Scene, to_svg
from integrity_graph.viewport import selection
from integrity_graph.viewport.controller import ViewportController
from integrity_graph.viewport.state import ContainerRect, InteractionMode, ViewState

logger = logging.getLogger(__name__)

NodeClickCallback = Callable[[str], None]
PayloadLike = Union[GraphPayload, Mapping[str, Any]]


class EvaluatorNetworkMap:
    """Layout, interaction, selection and insights for one evaluator network."""

    def __init__(
        self,
        payload: PayloadLike,
        on_node_click: Optional[NodeClickCallback] = None,
        settings: Optional[Settings] = None,
        container: Optional[ContainerRect] = None,
    ):
        self.settings = settings or Settings()
        self.on_node_click = on_node_click
        self.show_insights = True

        self.positions = PositionMap()
        self.controller = ViewportController(
            self.positions,
            config=self.settings.viewport,
            container=container,
            is_known_node=self._is_known_node,
        )
        self.engine = CausalInsightEngine(self.settings.insights)

        self._signature = None
        self._graph: Optional[RelationshipGraph] = None
        self._context: Optional[RenderContext] = None
        self.update(payload)

    # ------------------------------------------------------------------ #
    # PAYLOAD
    # ------------------------------------------------------------------ #

    def update(self, payload: PayloadLike) -> None:
        """Replace the graph payload.

        The layout (and any manual positions) is only reset when the node set
        changes; an edge-only or analysis-only update keeps the current view.

        Raises:
            PayloadError: If a raw dict payload fails validation.
        """
        if not isinstance(payload, GraphPayload):
            payload = parse_payload(dict(payload))

        self._graph = RelationshipGraph(payload)

        signature = node_set_signature(payload.nodes)
        if signature != self._signature:
            self.positions.set_base(layout(payload.nodes, self.settings.layout))
            self.positions.clear_overrides()
            self._signature = signature
            self._prune_view_state()
            logger.info(f"Layout recomputed for {len(payload.nodes)} nodes")

        analysis = payload.ai_causal_analysis
        insights = self.engine.derive(payload.nodes, payload.edges, analysis)
        self._context = RenderContext(
            self._graph,
            insights=insights,
            summary=analysis.summary if analysis else None,
            layout_config=self.settings.layout,
            default_interaction_count=self.settings.insights.default_interaction_count,
        )

    def _prune_view_state(self) -> None:
        state = self.state
        if state.selected_node_id and not self._is_known_node(state.selected_node_id):
            state.selected_node_id = None
        if state.hovered_node_id and not self._is_known_node(state.hovered_node_id):
            state.hovered_node_id = None
        if state.dragged_node_id and not self._is_known_node(state.dragged_node_id):
            self.controller.pointer_up()

    def _is_known_node(self, node_id: str) -> bool:
        return self._graph is not None and self._graph.has_node(node_id)

    @property
    def graph(self) -> RelationshipGraph:
        return self._graph

    @property
    def state(self) -> ViewState:
        return self.controller.state

    @property
    def mode(self) -> InteractionMode:
        return self.controller.mode

    # ------------------------------------------------------------------ #
    # INTERACTION
    # ------------------------------------------------------------------ #

    def mount(self, container: Optional[ContainerRect]) -> None:
        self.controller.mount(container)

    def pointer_down(self, client_x: float, client_y: float, button: int = 0,
                     node_id: Optional[str] = None) -> InteractionMode:
        return self.controller.pointer_down(client_x, client_y, button=button, node_id=node_id)

    def pointer_move(self, client_x: float, client_y: float) -> bool:
        return self.controller.pointer_move(client_x, client_y)

    def pointer_up(self) -> None:
        self.controller.pointer_up()

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()

    def wheel(self, delta_y: float) -> float:
        return self.controller.wheel(delta_y)

    def zoom_in(self) -> float:
        return self.controller.zoom_in()

    def zoom_out(self) -> float:
        return self.controller.zoom_out()

    def fit_view(self) -> None:
        self.controller.fit_view()

    def reset_view(self) -> None:
        self.controller.reset_view()

    def click_node(self, node_id: str) -> Optional[str]:
        """Toggle selection, then notify the dashboard once."""
        selected = selection.click_node(self.state, node_id)
        if self.on_node_click is not None:
            self.on_node_click(node_id)
        return selected

    def hover_node(self, node_id: Optional[str]) -> None:
        selection.hover_node(self.state, node_id)

    def hover_edge(self, key: Optional[str]) -> None:
        selection.hover_edge(self.state, key)

    def toggle_insights(self) -> bool:
        self.show_insights = not self.show_insights
        return self.show_insights

    def connected_nodes(self, node_id: str) -> List[str]:
        return selection.connected_nodes(node_id, self._graph.edges)

    # ------------------------------------------------------------------ #
    # DERIVED OUTPUT
    # ------------------------------------------------------------------ #

    @property
    def insights(self) -> List[Insight]:
        return list(self._context.insights)

    @property
    def ranked_insights(self) -> List[Insight]:
        return rank_insights(self._context.insights)

    @property
    def summary(self) -> Optional[str]:
        return self._context.summary

    @property
    def stats(self) -> Dict[str, Any]:
        return self._graph.get_stats(self.settings.insights.flagged_bias_threshold)

    def render(self) -> Scene:
        return self._context.build_scene(self.state, self.positions, self.show_insights)

    def to_svg(self) -> str:
        return to_svg(self.render())
