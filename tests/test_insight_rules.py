"""
Tests for the fallback insight rules and the rule registry
"""
import pytest

from integrity_graph.graph.models import Edge, Node
from integrity_graph.insights.insight_rules import (
    AVAILABLE_RULES,
    CRITICAL,
    INFO,
    WARNING,
    EvaluatorConsistencyRule,
    HighFrequencyBiasRule,
    Insight,
    InsightContext,
    MultipleEvaluatorsFlaggedRule,
    VendorConcentrationRule,
    create_rule,
    list_available_rules,
)


def _context(nodes, edges):
    return InsightContext.build(nodes, edges)


@pytest.fixture
def alice_and_alpha():
    return [
        Node(id="E1", name="Alice", type="evaluator", bias_score=30),
        Node(id="V1", name="Alpha", type="vendor"),
    ]


class TestHighFrequencyBiasRule:
    """Tests for the high-frequency bias rule"""

    def test_triggers_above_threshold(self, alice_and_alpha):
        """Test the worked example: strength 0.9, 7 interactions, 40% uplift"""
        edges = [Edge(source="E1", target="V1", strength=0.9, is_suspicious=True, interaction_count=7)]
        insights = HighFrequencyBiasRule().evaluate(_context(alice_and_alpha, edges))

        assert len(insights) == 1
        insight = insights[0]
        assert insight.type == CRITICAL
        assert insight.confidence == 92
        assert insight.title == "High-Frequency Bias Pattern Detected"
        assert insight.affected_node_ids == ("E1", "V1")
        assert "Alice shows consistent preference for Alpha across 7 tenders" in insight.description
        assert "40% higher than peer average" in insight.description

    def test_default_interaction_count(self, alice_and_alpha):
        """Test that a missing interaction count is reported as 5"""
        edges = [Edge(source="E1", target="V1", strength=0.85, is_suspicious=True)]
        insights = HighFrequencyBiasRule().evaluate(_context(alice_and_alpha, edges))
        assert "across 5 tenders" in insights[0].description
        assert "35% higher" in insights[0].description

    def test_evaluate_edge_directly(self, alice_and_alpha):
        """Test that the per-edge hook returns None below the threshold"""
        evaluator, vendor = alice_and_alpha
        rule = HighFrequencyBiasRule()
        assert rule.evaluate_edge(Edge(source="E1", target="V1", strength=0.5), evaluator, vendor) is None
        insight = rule.evaluate_edge(Edge(source="E1", target="V1", strength=0.925), evaluator, vendor)
        assert "43% higher" in insight.description

    def test_threshold_is_exclusive(self, alice_and_alpha):
        """Test that strength exactly 0.8 does not trigger"""
        edges = [Edge(source="E1", target="V1", strength=0.8, is_suspicious=True)]
        assert HighFrequencyBiasRule().evaluate(_context(alice_and_alpha, edges)) == []

    def test_requires_suspicious_flag(self, alice_and_alpha):
        edges = [Edge(source="E1", target="V1", strength=0.99)]
        assert HighFrequencyBiasRule().evaluate(_context(alice_and_alpha, edges)) == []

    def test_missing_endpoint_skipped(self, alice_and_alpha):
        """Test that an edge to an unknown vendor never triggers"""
        edges = [Edge(source="E1", target="V9", strength=0.95, is_suspicious=True)]
        assert HighFrequencyBiasRule().evaluate(_context(alice_and_alpha, edges)) == []


class TestEvaluatorConsistencyRule:
    """Tests for the evaluator consistency rule"""

    def test_triggers_per_edge(self):
        """Test that an evaluator with two suspicious edges is reported twice"""
        nodes = [
            Node(id="E1", name="Alice", type="evaluator", bias_score=75),
            Node(id="V1", name="Alpha", type="vendor"),
            Node(id="V2", name="Beta", type="vendor"),
        ]
        edges = [
            Edge(source="E1", target="V1", strength=0.2, is_suspicious=True),
            Edge(source="E1", target="V2", strength=0.2, is_suspicious=True),
        ]
        insights = EvaluatorConsistencyRule().evaluate(_context(nodes, edges))
        assert len(insights) == 2
        assert all(i.type == WARNING and i.confidence == 87 for i in insights)
        assert insights[0].affected_node_ids == ("E1",)
        assert insights[0].title == "Evaluator Consistency Anomaly"

    def test_bias_at_threshold_does_not_trigger(self):
        nodes = [Node(id="E1", name="A", type="evaluator", bias_score=60), Node(id="V1", name="B", type="vendor")]
        edges = [Edge(source="E1", target="V1", is_suspicious=True)]
        assert EvaluatorConsistencyRule().evaluate(_context(nodes, edges)) == []

    def test_missing_bias_score(self):
        nodes = [Node(id="E1", name="A", type="evaluator"), Node(id="V1", name="B", type="vendor")]
        edges = [Edge(source="E1", target="V1", is_suspicious=True)]
        assert EvaluatorConsistencyRule().evaluate(_context(nodes, edges)) == []


class TestMultipleEvaluatorsFlaggedRule:
    """Tests for the multiple evaluators flagged rule"""

    def test_two_flagged(self, committee):
        """Test that bias scores 65 and 55 produce one warning at 78"""
        insights = MultipleEvaluatorsFlaggedRule().evaluate(_context(committee.nodes, committee.edges))
        assert len(insights) == 1
        assert insights[0].type == WARNING
        assert insights[0].confidence == 78
        assert insights[0].affected_node_ids == ("E1", "E2")
        assert insights[0].description.startswith("2 evaluators show elevated bias scores")

    def test_single_flagged(self):
        nodes = [
            Node(id="E1", name="A", type="evaluator", bias_score=90),
            Node(id="E2", name="B", type="evaluator", bias_score=50),
        ]
        assert MultipleEvaluatorsFlaggedRule().evaluate(_context(nodes, [])) == []


class TestVendorConcentrationRule:
    """Tests for the vendor concentration rule"""

    def test_concentrated_vendor(self, committee):
        """Test that V1, evaluated by 3 of 3 evaluators, is reported at 85"""
        insights = VendorConcentrationRule().evaluate(_context(committee.nodes, committee.edges))
        assert len(insights) == 1
        assert insights[0].type == INFO
        assert insights[0].confidence == 85
        assert insights[0].affected_node_ids == ("V1",)
        assert insights[0].description.startswith("Alpha Medical is evaluated by 100% of evaluators")

    def test_half_percent_rounds_up(self):
        """Test that a 112.5% share is reported as 113%"""
        nodes = [Node(id=f"E{i}", name=f"E{i}", type="evaluator") for i in range(8)]
        nodes.append(Node(id="V1", name="Alpha", type="vendor"))
        edges = [Edge(source=f"E{i % 8}", target="V1") for i in range(9)]
        insights = VendorConcentrationRule().evaluate(_context(nodes, edges))
        assert insights[0].description.startswith("Alpha is evaluated by 113% of evaluators")

    def test_no_evaluators(self):
        """Test that a vendor-only graph is skipped"""
        nodes = [Node(id="V1", name="Alpha", type="vendor")]
        edges = [Edge(source="X", target="V1"), Edge(source="Y", target="V1")]
        assert VendorConcentrationRule().evaluate(_context(nodes, edges)) == []

    def test_non_vendor_target_ignored(self):
        """Test that evaluator-targeted edges never produce a concentration insight"""
        nodes = [
            Node(id="E1", name="A", type="evaluator"),
            Node(id="E2", name="B", type="evaluator"),
        ]
        edges = [Edge(source="E1", target="E2"), Edge(source="E1", target="E2")]
        assert VendorConcentrationRule().evaluate(_context(nodes, edges)) == []


class TestRuleRegistry:
    """Tests for create_rule and list_available_rules"""

    def test_create_with_config(self):
        rule = create_rule("vendor_concentration", {"ratio": 0.5})
        assert isinstance(rule, VendorConcentrationRule)
        assert rule.ratio == 0.5

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown rule type"):
            create_rule("coin_flip")

    def test_bad_config(self):
        with pytest.raises(ValueError, match="Invalid config"):
            create_rule("high_frequency_bias", {"no_such_option": 1})

    def test_list_available_rules(self):
        """Test that every registered rule is listed with its metadata"""
        rules = list_available_rules()
        assert [r["rule_type"] for r in rules] == list(AVAILABLE_RULES)
        assert rules[0]["confidence"] == 92


class TestInsight:
    def test_to_dict_uses_camel_case(self):
        insight = Insight(type=INFO, title="t", description="d", confidence=50, affected_node_ids=("V1",))
        assert insight.to_dict()["affectedNodeIds"] == ["V1"]
