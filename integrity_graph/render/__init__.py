"""
Network Map Rendering

Components:
- styling: Pure node/edge styling, tooltips and confidence bands
- render_context: Per-payload RenderContext, Scene building and SVG export
"""

from .styling import (
    COLORS,
    NodeStyle,
    EdgeStyle,
    node_style,
    edge_style,
    confidence_band,
    bias_band,
)
from .render_context import (
    RenderContext,
    Scene,
    NodeGlyph,
    EdgeGlyph,
    InsightCard,
    to_svg,
)

__all__ = [
    'COLORS',
    'NodeStyle',
    'EdgeStyle',
    'node_style',
    'edge_style',
    'confidence_band',
    'bias_band',
    'RenderContext',
    'Scene',
    'NodeGlyph',
    'EdgeGlyph',
    'InsightCard',
    'to_svg',
]
