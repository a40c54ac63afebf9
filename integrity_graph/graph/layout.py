"""
Concentric Ring Layout

Places evaluators on an outer ring and vendors on an inner ring around the
canvas center. Nodes of each class are spaced evenly in input order, starting
at 12 o'clock and going clockwise in screen coordinates (y grows downwards).

    theta_i = (i / N) * 2*pi - pi/2

Pinned axes (fx / fy) override the computed coordinate.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from integrity_graph.config import LayoutConfig
from integrity_graph.graph.models import Node
from integrity_graph.graph.positions import Position

logger = logging.getLogger(__name__)


def ring_angles(count: int) -> np.ndarray:
    """Evenly spaced angles for ``count`` slots, first slot at the top."""
    if count <= 0:
        return np.empty(0)
    return np.arange(count) / count * 2 * np.pi - np.pi / 2


def _place_ring(
    nodes: Sequence[Node],
    radius: float,
    center: Tuple[float, float],
) -> Dict[str, Position]:
    if not nodes:
        return {}

    angles = ring_angles(len(nodes))
    xs = center[0] + radius * np.cos(angles)
    ys = center[1] + radius * np.sin(angles)

    placed: Dict[str, Position] = {}
    for node, x, y in zip(nodes, xs, ys):
        placed[node.id] = Position(
            x=float(node.fx) if node.fx is not None else float(x),
            y=float(node.fy) if node.fy is not None else float(y),
        )
    return placed


def layout(nodes: Iterable[Node], config: Optional[LayoutConfig] = None) -> Dict[str, Position]:
    """Compute initial positions for every node.

    Args:
        nodes: Evaluator and vendor nodes, in display order.
        config: Canvas geometry. Defaults to LayoutConfig().

    Returns:
        Dict of node id -> Position. Every node gets a finite position.
    """
    config = config or LayoutConfig()
    center = (config.center_x, config.center_y)

    evaluators: List[Node] = []
    vendors: List[Node] = []
    for node in nodes:
        if node.is_evaluator:
            evaluators.append(node)
        elif node.is_vendor:
            vendors.append(node)

    positions = _place_ring(evaluators, config.evaluator_radius, center)
    positions.update(_place_ring(vendors, config.vendor_radius, center))

    logger.debug(
        f"Layout computed: {len(evaluators)} evaluators on r={config.evaluator_radius}, "
        f"{len(vendors)} vendors on r={config.vendor_radius}"
    )
    return positions


def node_set_signature(nodes: Iterable[Node]) -> Tuple:
    """Hashable fingerprint of everything the layout depends on.

    Two payloads with the same signature produce the same layout, so the
    layout only needs recomputing when this changes.
    """
    return tuple((n.id, n.name, n.type, n.fx, n.fy) for n in nodes)
