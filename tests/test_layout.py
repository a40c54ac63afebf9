"""
Tests for the concentric ring layout and the position map
"""
import math

import pytest

from integrity_graph.config import LayoutConfig
from integrity_graph.graph.layout import layout, node_set_signature, ring_angles
from integrity_graph.graph.models import Node
from integrity_graph.graph.positions import Position, PositionMap


def _evaluators(n):
    return [Node(id=f"E{i}", name=f"Evaluator {i}", type="evaluator") for i in range(n)]


def _vendors(n):
    return [Node(id=f"V{i}", name=f"Vendor {i}", type="vendor") for i in range(n)]


def _distance(pos, config):
    return math.hypot(pos.x - config.center_x, pos.y - config.center_y)


class TestRingLayout:
    """Tests for layout()"""

    def test_every_node_gets_finite_position(self, committee):
        """Test that all nodes are placed at finite coordinates"""
        positions = layout(committee.nodes)
        assert set(positions) == {n.id for n in committee.nodes}
        for pos in positions.values():
            assert math.isfinite(pos.x) and math.isfinite(pos.y)

    def test_rings_have_expected_radius(self):
        """Test that evaluators sit on the outer ring and vendors on the inner ring"""
        config = LayoutConfig()
        positions = layout(_evaluators(5) + _vendors(3), config)
        for i in range(5):
            assert _distance(positions[f"E{i}"], config) == pytest.approx(config.evaluator_radius)
        for i in range(3):
            assert _distance(positions[f"V{i}"], config) == pytest.approx(config.vendor_radius)

    def test_first_node_at_twelve_o_clock(self):
        """Test that the first slot of each ring is straight above the center"""
        config = LayoutConfig()
        positions = layout(_evaluators(4) + _vendors(2), config)
        assert positions["E0"].x == pytest.approx(350)
        assert positions["E0"].y == pytest.approx(275 - 200)
        assert positions["V0"].x == pytest.approx(350)
        assert positions["V0"].y == pytest.approx(275 - 100)

    def test_clockwise_order(self):
        """Test that the second of four evaluators is at 3 o'clock (screen y grows down)"""
        positions = layout(_evaluators(4))
        assert positions["E1"].x == pytest.approx(550)
        assert positions["E1"].y == pytest.approx(275)

    def test_pinned_axis_wins(self):
        """Test that pinned coordinates override computed ones per axis"""
        nodes = [
            Node(id="E0", name="A", type="evaluator", fx=10, fy=20),
            Node(id="V0", name="B", type="vendor", fx=42),
        ]
        positions = layout(nodes)
        assert positions["E0"] == Position(10, 20)
        assert positions["V0"].x == 42
        assert positions["V0"].y == pytest.approx(175)

    def test_empty_class_skipped(self):
        """Test that a graph with only vendors lays out without dividing by zero"""
        positions = layout(_vendors(2))
        assert set(positions) == {"V0", "V1"}
        assert layout([]) == {}
        assert len(ring_angles(0)) == 0

    def test_custom_geometry(self):
        """Test that the canvas config moves the center and radii"""
        config = LayoutConfig(width=400, height=400, evaluator_radius=150, vendor_radius=50)
        positions = layout(_evaluators(1) + _vendors(1), config)
        assert positions["E0"] == Position(pytest.approx(200), pytest.approx(50))
        assert positions["V0"] == Position(pytest.approx(200), pytest.approx(150))

    def test_signature_changes_on_rename_only(self):
        """Test that the node-set signature tracks ids, names, types and pins"""
        nodes = _evaluators(2)
        renamed = [nodes[0], Node(id="E1", name="Someone Else", type="evaluator")]
        assert node_set_signature(nodes) == node_set_signature(list(nodes))
        assert node_set_signature(nodes) != node_set_signature(renamed)


class TestPositionMap:
    """Tests for the two-layer position map"""

    def test_override_wins_over_base(self):
        """Test that a manual position shadows the layout placement"""
        positions = PositionMap({"A": Position(1, 1), "B": Position(2, 2)})
        positions.override("A", Position(9, 9))
        assert positions.get("A") == Position(9, 9)
        assert positions.base("A") == Position(1, 1)
        assert positions.get("B") == Position(2, 2)
        assert positions.has_override("A")

    def test_clear_overrides_restores_layout(self):
        """Test that clearing overrides falls back to the base layer"""
        positions = PositionMap({"A": Position(1, 1)})
        positions.override("A", Position(9, 9))
        positions.clear_overrides()
        assert positions.get("A") == Position(1, 1)
        assert positions.override_count == 0

    def test_missing_node(self):
        """Test that unknown ids return None"""
        positions = PositionMap()
        assert positions.get("nope") is None
        assert "nope" not in positions
        assert len(positions) == 0

    def test_snapshot_merges_layers(self):
        """Test that snapshot returns effective positions"""
        positions = PositionMap({"A": Position(1, 1)})
        positions.override("B", Position(3, 3))
        assert positions.snapshot() == {"A": Position(1, 1), "B": Position(3, 3)}
        assert sorted(positions) == ["A", "B"]
