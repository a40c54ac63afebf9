"""
Pure styling functions for the network map.

Node visuals dispatch on the node's ``type`` tag; edge visuals depend only on
the edge and its highlight flags. No state is read or written here.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from integrity_graph.graph.models import Edge, Node
from integrity_graph.viewport.selection import HighlightState

COLORS = {
    "vendor": "#10B981",
    "evaluator_clean": "#3B82F6",
    "evaluator_warning": "#F59E0B",
    "evaluator_critical": "#EF4444",
    "edge_default": "#D1D5DB",
    "edge_suspicious": "#EF4444",
    "edge_selected": "#3B82F6",
    "marker_default": "#9CA3AF",
}

# Bias score bands for evaluator colour
BIAS_CRITICAL = 70
BIAS_WARNING = 40


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    radius: float
    label: str
    label_dy: float
    halo_radius: Optional[float] = None
    shadow: bool = False
    cursor: str = "grab"


@dataclass(frozen=True)
class EdgeStyle:
    stroke: str
    width: float
    opacity: float
    marker: str


def node_radius(highlight: HighlightState) -> float:
    if highlight.is_selected:
        return 18
    if highlight.is_hovered:
        return 16
    if highlight.is_connected:
        return 14
    return 12


def short_label(name: str) -> str:
    """First word of the display name."""
    return name.split(" ")[0] if name else ""


def bias_band(bias_score: Optional[float]) -> str:
    """'critical', 'warning' or 'clean'. A missing or zero score is clean."""
    if not bias_score:
        return "clean"
    if bias_score > BIAS_CRITICAL:
        return "critical"
    if bias_score > BIAS_WARNING:
        return "warning"
    return "clean"


def _evaluator_style(node: Node, highlight: HighlightState, is_dragging: bool) -> NodeStyle:
    radius = node_radius(highlight)
    return NodeStyle(
        fill=COLORS[f"evaluator_{bias_band(node.bias_score)}"],
        radius=radius,
        label=short_label(node.name),
        label_dy=-30,
        halo_radius=radius + 8 if highlight.is_selected else None,
        shadow=highlight.is_hovered or highlight.is_selected,
        cursor="grabbing" if is_dragging else "grab",
    )


def _vendor_style(node: Node, highlight: HighlightState, is_dragging: bool) -> NodeStyle:
    radius = node_radius(highlight)
    return NodeStyle(
        fill=COLORS["vendor"],
        radius=radius,
        label=short_label(node.name),
        label_dy=35,
        halo_radius=radius + 8 if highlight.is_selected else None,
        shadow=highlight.is_hovered or highlight.is_selected,
        cursor="grabbing" if is_dragging else "grab",
    )


NODE_STYLERS: Dict[str, Callable[[Node, HighlightState, bool], NodeStyle]] = {
    "evaluator": _evaluator_style,
    "vendor": _vendor_style,
}


def node_style(node: Node, highlight: HighlightState, is_dragging: bool = False) -> NodeStyle:
    return NODE_STYLERS[node.type](node, highlight, is_dragging)


def edge_style(edge: Edge, highlight: HighlightState) -> EdgeStyle:
    """Selection beats suspicion for colour; hover beats suspicion for width."""
    if highlight.is_connected:
        stroke, opacity, marker = COLORS["edge_selected"], 0.9, "arrowhead-selected"
    elif highlight.is_suspicious:
        stroke, opacity, marker = COLORS["edge_suspicious"], 0.8, "arrowhead-suspicious"
    else:
        stroke, opacity, marker = COLORS["edge_default"], 0.5, "arrowhead"

    if highlight.is_hovered:
        width = 4
    elif highlight.is_suspicious:
        width = 3
    else:
        width = max(1.5, edge.strength * 3)

    return EdgeStyle(stroke=stroke, width=width, opacity=opacity, marker=marker)


def confidence_band(confidence: float) -> str:
    """Colour band for an insight's confidence bar."""
    if confidence > 85:
        return "high"
    if confidence > 70:
        return "medium"
    return "low"


# ============================================================================
# TOOLTIPS
# ============================================================================

def node_tooltip(node: Node, out_degree: int, in_degree: int) -> List[str]:
    lines = [node.name, "Evaluator" if node.is_evaluator else "Vendor"]
    if node.bias_score is not None:
        lines.append(f"Bias Score: {node.bias_score:.0f}")
        lines.append(f"{out_degree} connections")
    if node.is_vendor:
        lines.append(f"{in_degree} evaluators")
    return lines


def edge_tooltip(edge: Edge, default_interaction_count: int = 5) -> List[str]:
    return [
        f"Strength: {edge.strength * 100:.0f}%",
        f"Interactions: {edge.interaction_count or default_interaction_count}",
        "Suspicious" if edge.is_suspicious else "Normal",
    ]
