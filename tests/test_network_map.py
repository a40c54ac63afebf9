"""
Tests for the EvaluatorNetworkMap facade
"""
from unittest.mock import Mock

import pytest

from integrity_graph.graph.models import PayloadError
from integrity_graph.graph.positions import Position
from integrity_graph.insights.insight_rules import CRITICAL, INFO
from integrity_graph.network_map import EvaluatorNetworkMap
from integrity_graph.viewport.state import ContainerRect, InteractionMode


@pytest.fixture
def network_map(committee_payload):
    return EvaluatorNetworkMap(committee_payload, container=ContainerRect(0, 0, 700, 550))


class TestNodeClick:
    """Tests for click handling"""

    def test_callback_called_once(self, committee_payload):
        """Test that a click toggles selection and notifies exactly once"""
        callback = Mock()
        network_map = EvaluatorNetworkMap(committee_payload, on_node_click=callback)

        assert network_map.click_node("E1") == "E1"
        callback.assert_called_once_with("E1")

        assert network_map.click_node("E1") is None
        assert callback.call_count == 2

    def test_without_callback(self, network_map):
        assert network_map.click_node("V1") == "V1"
        assert network_map.state.selected_node_id == "V1"


class TestInteraction:
    """Tests for drag/pan forwarding"""

    def test_drag_then_reset(self, network_map):
        base = network_map.positions.base("E2")
        assert network_map.pointer_down(0, 0, node_id="E2") is InteractionMode.DRAGGING
        network_map.pointer_move(123, 45)
        network_map.pointer_up()
        assert network_map.positions.get("E2") == Position(123, 45)

        network_map.fit_view()
        assert network_map.positions.get("E2") == Position(123, 45)

        network_map.reset_view()
        assert network_map.positions.get("E2") == base

    def test_unknown_node_not_draggable(self, network_map):
        assert network_map.pointer_down(0, 0, node_id="ghost") is InteractionMode.IDLE

    def test_zoom(self, network_map):
        assert network_map.zoom_in() == pytest.approx(1.2)
        assert network_map.wheel(10) == pytest.approx(1.08)

    def test_toggle_insights(self, network_map):
        assert network_map.toggle_insights() is False
        assert network_map.render().insight_cards == []
        assert network_map.toggle_insights() is True


class TestUpdate:
    """Tests for payload replacement"""

    def test_edge_only_update_keeps_positions(self, network_map, committee_payload):
        """Test that manual positions survive an update that keeps the node set"""
        network_map.positions.override("V2", Position(5, 5))
        committee_payload["edges"] = committee_payload["edges"][:1]
        network_map.update(committee_payload)

        assert network_map.positions.get("V2") == Position(5, 5)
        assert network_map.graph.edge_count() == 1

    def test_node_change_relayouts(self, network_map, committee_payload):
        """Test that a new node set clears overrides and stale selection"""
        network_map.positions.override("V2", Position(5, 5))
        network_map.click_node("V2")
        committee_payload["nodes"] = [n for n in committee_payload["nodes"] if n["id"] != "V2"]
        committee_payload["edges"] = [e for e in committee_payload["edges"] if e["target"] != "V2"]
        network_map.update(committee_payload)

        assert network_map.positions.override_count == 0
        assert "V2" not in network_map.positions
        assert network_map.state.selected_node_id is None

    def test_analysis_replaces_heuristics(self, network_map, committee_payload):
        committee_payload["aiCausalAnalysis"] = {
            "summary": "Favoritism around Alpha Medical",
            "rootCauses": [{
                "type": "vendor_favoritism",
                "description": "Repeated awards",
                "confidence": 0.95,
                "primaryEntities": ["Alpha Medical"],
            }],
        }
        network_map.update(committee_payload)

        assert [(i.type, i.confidence) for i in network_map.insights] == [(CRITICAL, 95)]
        assert network_map.insights[0].affected_node_ids == ("V1",)
        assert network_map.summary == "Favoritism around Alpha Medical"

    def test_invalid_payload(self, network_map):
        with pytest.raises(PayloadError):
            network_map.update({"nodes": "not a list"})


class TestOutputs:
    """Tests for insights, stats and rendering"""

    def test_ranked_insights(self, network_map):
        ranked = network_map.ranked_insights
        assert ranked[0].type == CRITICAL
        assert ranked[-1].type == INFO

    def test_stats(self, network_map):
        assert network_map.stats["flagged_evaluator_count"] == 2

    def test_connected_nodes(self, network_map):
        assert network_map.connected_nodes("V1") == ["E1", "E2", "E3"]

    def test_svg(self, network_map):
        network_map.zoom_in()
        assert "scale(1.2)" in network_map.to_svg()
