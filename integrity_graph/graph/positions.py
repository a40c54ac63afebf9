"""
Node position map.

Two layers keyed by node id: the base placement computed by the layout
engine, and manual overrides left behind by dragging. Lookups prefer the
override.
"""
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Position:
    """A point in graph space."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class PositionMap:
    """Effective node positions: layout placement overlaid with manual overrides."""

    def __init__(self, base: Optional[Mapping[str, Position]] = None):
        self._base: Dict[str, Position] = dict(base or {})
        self._overrides: Dict[str, Position] = {}

    def set_base(self, base: Mapping[str, Position]) -> None:
        """Replace the layout placement. Overrides are left untouched."""
        self._base = dict(base)

    def get(self, node_id: str) -> Optional[Position]:
        if node_id in self._overrides:
            return self._overrides[node_id]
        return self._base.get(node_id)

    def base(self, node_id: str) -> Optional[Position]:
        return self._base.get(node_id)

    def override(self, node_id: str, position: Position) -> None:
        self._overrides[node_id] = position

    def has_override(self, node_id: str) -> bool:
        return node_id in self._overrides

    def clear_overrides(self) -> None:
        self._overrides.clear()

    @property
    def override_count(self) -> int:
        return len(self._overrides)

    def snapshot(self) -> Dict[str, Position]:
        """Plain dict of effective positions."""
        merged = dict(self._base)
        merged.update(self._overrides)
        return merged

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._overrides or node_id in self._base

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self.snapshot())
