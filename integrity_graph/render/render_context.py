"""
Render Context

Owns everything derived from one graph payload that rendering needs:
the relationship graph, degree lookups and the insight list. A new context is
built whenever the payload changes and the old one is simply dropped; there
are no module-level caches.

``build_scene`` combines the context with the current view state and
positions into a Scene (plain glyph records), and ``to_svg`` serialises a
Scene as a standalone SVG document.
"""

import html as html_module
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from integrity_graph.config import LayoutConfig
from integrity_graph.graph.positions import PositionMap
from integrity_graph.graph.relationship_graph import RelationshipGraph
from integrity_graph.insights.insight_rules import Insight
from integrity_graph.viewport.selection import (
    edge_highlight,
    node_highlight,
    selection_neighbourhood,
)
from integrity_graph.viewport.state import ViewState
from .styling import (
    COLORS,
    EdgeStyle,
    NodeStyle,
    confidence_band,
    edge_style,
    edge_tooltip,
    node_style,
    node_tooltip,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeGlyph:
    key: str
    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float
    style: EdgeStyle
    tooltip: Optional[Tuple[str, ...]] = None

    @property
    def midpoint(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)


@dataclass(frozen=True)
class NodeGlyph:
    node_id: str
    x: float
    y: float
    style: NodeStyle
    tooltip: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class InsightCard:
    insight: Insight
    band: str


@dataclass
class Scene:
    """Everything needed to draw one frame."""
    width: float
    height: float
    transform: str
    edges: List[EdgeGlyph] = field(default_factory=list)
    nodes: List[NodeGlyph] = field(default_factory=list)
    insight_cards: List[InsightCard] = field(default_factory=list)
    summary: Optional[str] = None

    def node(self, node_id: str) -> Optional[NodeGlyph]:
        for glyph in self.nodes:
            if glyph.node_id == node_id:
                return glyph
        return None


class RenderContext:
    """Per-payload render state, rebuilt from scratch when the payload changes."""

    def __init__(
        self,
        graph: RelationshipGraph,
        insights: Sequence[Insight] = (),
        summary: Optional[str] = None,
        layout_config: Optional[LayoutConfig] = None,
        default_interaction_count: int = 5,
    ):
        self.graph = graph
        self.insights = list(insights)
        self.summary = summary
        self.layout_config = layout_config or LayoutConfig()
        self.default_interaction_count = default_interaction_count
        self._out_degree: Dict[str, int] = {}
        self._in_degree: Dict[str, int] = {}
        for edge in graph.edges:
            self._out_degree[edge.source] = self._out_degree.get(edge.source, 0) + 1
            self._in_degree[edge.target] = self._in_degree.get(edge.target, 0) + 1

    def build_scene(
        self,
        state: ViewState,
        positions: PositionMap,
        show_insights: bool = True,
    ) -> Scene:
        scene = Scene(
            width=self.layout_config.width,
            height=self.layout_config.height,
            transform=state.transform,
            summary=self.summary,
        )
        edges = self.graph.edges
        neighbourhood = selection_neighbourhood(state, edges)

        for edge in edges:
            source = positions.get(edge.source)
            target = positions.get(edge.target)
            if source is None or target is None:
                continue
            highlight = edge_highlight(state, edge)
            tooltip = None
            if highlight.is_hovered:
                tooltip = tuple(edge_tooltip(edge, self.default_interaction_count))
            scene.edges.append(EdgeGlyph(
                key=edge.key,
                source=edge.source,
                target=edge.target,
                x1=source.x, y1=source.y,
                x2=target.x, y2=target.y,
                style=edge_style(edge, highlight),
                tooltip=tooltip,
            ))

        for node in self.graph.nodes:
            pos = positions.get(node.id)
            if pos is None:
                continue
            highlight = node_highlight(state, node.id, neighbourhood)
            tooltip = None
            if highlight.is_hovered or highlight.is_selected:
                tooltip = tuple(node_tooltip(
                    node,
                    self._out_degree.get(node.id, 0),
                    self._in_degree.get(node.id, 0),
                ))
            scene.nodes.append(NodeGlyph(
                node_id=node.id,
                x=pos.x,
                y=pos.y,
                style=node_style(node, highlight, state.dragged_node_id == node.id),
                tooltip=tooltip,
            ))

        if show_insights:
            scene.insight_cards = [
                InsightCard(insight=i, band=confidence_band(i.confidence))
                for i in self.insights
            ]

        logger.debug(f"Scene built: {len(scene.nodes)} nodes, {len(scene.edges)} edges")
        return scene


# ============================================================================
# SVG EXPORT
# ============================================================================

_MARKERS = (
    ("arrowhead", 8, COLORS["marker_default"]),
    ("arrowhead-suspicious", 10, COLORS["edge_suspicious"]),
    ("arrowhead-selected", 10, COLORS["edge_selected"]),
)


def _render_defs() -> str:
    markers = []
    for marker_id, size, fill in _MARKERS:
        markers.append(
            f'<marker id="{marker_id}" markerWidth="{size}" markerHeight="{size}" '
            f'refX="{size - 1}" refY="3" orient="auto">'
            f'<polygon points="0 0, {size} 3, 0 6" fill="{fill}"/></marker>'
        )
    return "<defs>" + "".join(markers) + "</defs>"


def _render_tooltip(x: float, y: float, lines: Sequence[str]) -> str:
    parts = ['<g class="tooltip">']
    height = 20 + 15 * len(lines)
    parts.append(
        f'<rect x="{x:.2f}" y="{y:.2f}" width="140" height="{height}" rx="6" '
        f'fill="white" stroke="#E5E7EB" stroke-width="2"/>'
    )
    for i, line in enumerate(lines):
        parts.append(
            f'<text x="{x + 70:.2f}" y="{y + 20 + 15 * i:.2f}" text-anchor="middle" '
            f'font-size="11">{html_module.escape(line)}</text>'
        )
    parts.append("</g>")
    return "".join(parts)


def _render_edge(glyph: EdgeGlyph) -> str:
    style = glyph.style
    out = (
        f'<line data-edge="{html_module.escape(glyph.key)}" '
        f'x1="{glyph.x1:.2f}" y1="{glyph.y1:.2f}" x2="{glyph.x2:.2f}" y2="{glyph.y2:.2f}" '
        f'stroke="{style.stroke}" stroke-width="{style.width:g}" '
        f'stroke-opacity="{style.opacity:g}" marker-end="url(#{style.marker})"/>'
    )
    if glyph.tooltip:
        mx, my = glyph.midpoint
        out += _render_tooltip(mx - 70, my - 35, glyph.tooltip)
    return out


def _render_node(glyph: NodeGlyph) -> str:
    style = glyph.style
    parts = [f'<g data-node="{html_module.escape(glyph.node_id)}">']
    if style.halo_radius is not None:
        parts.append(
            f'<circle cx="{glyph.x:.2f}" cy="{glyph.y:.2f}" r="{style.halo_radius:g}" '
            f'fill="none" stroke="{style.fill}" stroke-width="2" stroke-opacity="0.3"/>'
        )
    parts.append(
        f'<circle cx="{glyph.x:.2f}" cy="{glyph.y:.2f}" r="{style.radius:g}" '
        f'fill="{style.fill}" stroke="white" stroke-width="3"/>'
    )
    parts.append(
        f'<text x="{glyph.x:.2f}" y="{glyph.y + style.label_dy:.2f}" text-anchor="middle" '
        f'font-size="12">{html_module.escape(style.label)}</text>'
    )
    if glyph.tooltip:
        parts.append(_render_tooltip(glyph.x + 25, glyph.y - 35, glyph.tooltip))
    parts.append("</g>")
    return "".join(parts)


def to_svg(scene: Scene) -> str:
    """Serialise a scene. Edges are drawn first so nodes sit on top."""
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{scene.width:g}" '
        f'height="{scene.height:g}" viewBox="0 0 {scene.width:g} {scene.height:g}">',
        _render_defs(),
        f'<g transform="{scene.transform}">',
    ]
    parts.extend(_render_edge(glyph) for glyph in scene.edges)
    parts.extend(_render_node(glyph) for glyph in scene.nodes)
    parts.append("</g>")
    parts.append("</svg>")
    return "\n".join(parts)
