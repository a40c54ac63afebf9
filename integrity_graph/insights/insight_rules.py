"""
Insight rule types and their evaluation logic.

Each rule inspects the evaluator network for one integrity pattern and returns
the insights it finds. Rules are only used when no external causal analysis
is supplied. They are independent of each other, so a single suspicious edge
can trigger more than one rule. Edge rules (EdgeRule subclasses) judge one
suspicious relationship at a time.

Supported rule types:
  - high_frequency_bias: Suspicious edge with very high strength
  - evaluator_consistency: Suspicious edge from an evaluator with a high bias score
  - multiple_evaluators_flagged: More than one evaluator with an elevated bias score
  - vendor_concentration: Vendor evaluated by a large share of all evaluators

Confidence values are fixed design constants, not learned.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging
import math

from integrity_graph.graph.models import Edge, Node

logger = logging.getLogger(__name__)

CRITICAL = 'critical'
WARNING = 'warning'
INFO = 'info'

# Severity ordering for ranking (higher = more severe)
SEVERITY_ORDER = {
    INFO: 1,
    WARNING: 2,
    CRITICAL: 3,
}


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (112.5 -> 113)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Insight:
    """A derived, read-only integrity finding."""
    type: str
    title: str
    description: str
    confidence: int
    affected_node_ids: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'confidence': self.confidence,
            'affectedNodeIds': list(self.affected_node_ids),
        }


@dataclass
class InsightContext:
    """Graph snapshot shared by all rules in one evaluation pass.

    Attributes:
        nodes: All nodes, in payload order.
        edges: All payload edges, including ones with missing endpoints.
        nodes_by_id: First node for each id.
        evaluators: Evaluator nodes, in payload order.
    """
    nodes: List[Node]
    edges: List[Edge]
    nodes_by_id: Dict[str, Node] = field(default_factory=dict)
    evaluators: List[Node] = field(default_factory=list)

    @classmethod
    def build(cls, nodes: Sequence[Node], edges: Sequence[Edge]) -> 'InsightContext':
        nodes_by_id: Dict[str, Node] = {}
        for node in nodes:
            nodes_by_id.setdefault(node.id, node)
        return cls(
            nodes=list(nodes),
            edges=list(edges),
            nodes_by_id=nodes_by_id,
            evaluators=[n for n in nodes if n.is_evaluator],
        )

    def suspicious_pairs(self) -> List[Tuple[Edge, Node, Node]]:
        """Suspicious edges whose source and target both exist."""
        pairs = []
        for edge in self.edges:
            if not edge.is_suspicious:
                continue
            source = self.nodes_by_id.get(edge.source)
            target = self.nodes_by_id.get(edge.target)
            if source and target:
                pairs.append((edge, source, target))
        return pairs


@dataclass
class InsightRule:
    """Base insight rule definition.

    Attributes:
        rule_type: Machine-readable rule identifier.
        name: Human-readable rule name (used as the insight title).
        description: Explanation of what the rule detects.
        insight_type: Severity of the insights the rule emits.
        confidence: Fixed confidence (0-100) attached to every emitted insight.
    """
    rule_type: str
    name: str
    description: str
    insight_type: str = INFO
    confidence: int = 0

    def evaluate(self, context: InsightContext) -> List[Insight]:
        """Evaluate the rule against a graph snapshot.

        Returns:
            List of insights, empty when the pattern is not present.
        """
        raise NotImplementedError(f"Rule {self.rule_type} must implement evaluate()")

    def _insight(self, description: str, affected: Sequence[str]) -> Insight:
        return Insight(
            type=self.insight_type,
            title=self.name,
            description=description,
            confidence=self.confidence,
            affected_node_ids=tuple(affected),
        )


class EdgeRule(InsightRule):
    """Rule that inspects one suspicious relationship at a time.

    Consecutive edge rules are run together by the engine, edge by edge, so
    all findings for one relationship stay next to each other.
    """

    def evaluate_edge(self, edge: Edge, evaluator: Node, vendor: Node) -> Optional[Insight]:
        raise NotImplementedError(f"Rule {self.rule_type} must implement evaluate_edge()")

    def evaluate(self, context: InsightContext) -> List[Insight]:
        insights = []
        for edge, evaluator, vendor in context.suspicious_pairs():
            insight = self.evaluate_edge(edge, evaluator, vendor)
            if insight is not None:
                insights.append(insight)
        return insights


class HighFrequencyBiasRule(EdgeRule):
    """Triggers for every suspicious edge whose strength exceeds a threshold.

    The reported uplift is ``(strength - peer_average) * 100`` percent. Edges
    without an interaction count are reported with the default count.
    """

    def __init__(
        self,
        strength_threshold: float = 0.8,
        confidence: int = 92,
        peer_average: float = 0.5,
        default_interaction_count: int = 5,
    ):
        super().__init__(
            rule_type='high_frequency_bias',
            name='High-Frequency Bias Pattern Detected',
            description=f'Suspicious relationship with strength > {strength_threshold}',
            insight_type=CRITICAL,
            confidence=confidence,
        )
        self.strength_threshold = strength_threshold
        self.peer_average = peer_average
        self.default_interaction_count = default_interaction_count

    def evaluate_edge(self, edge: Edge, evaluator: Node, vendor: Node) -> Optional[Insight]:
        if edge.strength <= self.strength_threshold:
            return None
        interactions = edge.interaction_count or self.default_interaction_count
        uplift = round_half_up((edge.strength - self.peer_average) * 100)
        return self._insight(
            f'{evaluator.name} shows consistent preference for {vendor.name} '
            f'across {interactions} tenders. Scores are {uplift}% higher '
            f'than peer average.',
            [edge.source, edge.target],
        )


class EvaluatorConsistencyRule(EdgeRule):
    """Triggers for the evaluator of every suspicious edge whose bias score exceeds a threshold.

    Emits once per qualifying edge, so an evaluator with several suspicious
    relationships is reported several times.
    """

    def __init__(self, bias_threshold: float = 60, confidence: int = 87):
        super().__init__(
            rule_type='evaluator_consistency',
            name='Evaluator Consistency Anomaly',
            description=f'Evaluator on a suspicious relationship with bias score > {bias_threshold}',
            insight_type=WARNING,
            confidence=confidence,
        )
        self.bias_threshold = bias_threshold

    def evaluate_edge(self, edge: Edge, evaluator: Node, vendor: Node) -> Optional[Insight]:
        if not evaluator.bias_score or evaluator.bias_score <= self.bias_threshold:
            return None
        return self._insight(
            f'{evaluator.name} demonstrates scoring patterns that deviate '
            f'significantly from committee consensus. Potential cognitive bias '
            f'or external influence detected.',
            [edge.source],
        )


class MultipleEvaluatorsFlaggedRule(InsightRule):
    """Triggers once when at least ``min_count`` evaluators exceed the bias threshold."""

    def __init__(self, bias_threshold: float = 50, min_count: int = 2, confidence: int = 78):
        super().__init__(
            rule_type='multiple_evaluators_flagged',
            name='Multiple Evaluators Flagged',
            description=f'{min_count}+ evaluators with bias score > {bias_threshold}',
            insight_type=WARNING,
            confidence=confidence,
        )
        self.bias_threshold = bias_threshold
        self.min_count = min_count

    def evaluate(self, context: InsightContext) -> List[Insight]:
        flagged = [
            e for e in context.evaluators
            if e.bias_score and e.bias_score > self.bias_threshold
        ]
        if len(flagged) < self.min_count:
            return []
        return [self._insight(
            f'{len(flagged)} evaluators show elevated bias scores. This may indicate '
            f'systemic issues in evaluation criteria or training requirements.',
            [e.id for e in flagged],
        )]


class VendorConcentrationRule(InsightRule):
    """Triggers for every vendor whose inbound edge count exceeds ``ratio`` x evaluator count.

    Inbound edges are counted over the full payload, one per edge. The rule is
    skipped when the graph has no evaluators.
    """

    def __init__(self, ratio: float = 0.7, confidence: int = 85):
        super().__init__(
            rule_type='vendor_concentration',
            name='Vendor Concentration Pattern',
            description=f'Vendor connected to more than {ratio:.0%} of evaluators',
            insight_type=INFO,
            confidence=confidence,
        )
        self.ratio = ratio

    def evaluate(self, context: InsightContext) -> List[Insight]:
        evaluator_count = len(context.evaluators)
        if evaluator_count == 0:
            return []

        inbound: Dict[str, int] = {}
        for edge in context.edges:
            inbound[edge.target] = inbound.get(edge.target, 0) + 1

        insights = []
        for vendor_id, count in inbound.items():
            if count <= evaluator_count * self.ratio:
                continue
            vendor = context.nodes_by_id.get(vendor_id)
            if vendor is None or not vendor.is_vendor:
                continue
            share = round_half_up(count / evaluator_count * 100)
            insights.append(self._insight(
                f'{vendor.name} is evaluated by {share}% of evaluators. High '
                f'exposure may indicate market dominance or bid frequency.',
                [vendor_id],
            ))
        return insights


# ============================================================================
# RULE REGISTRY
# ============================================================================

AVAILABLE_RULES: Dict[str, type] = {
    'high_frequency_bias': HighFrequencyBiasRule,
    'evaluator_consistency': EvaluatorConsistencyRule,
    'multiple_evaluators_flagged': MultipleEvaluatorsFlaggedRule,
    'vendor_concentration': VendorConcentrationRule,
}


def create_rule(rule_type: str, config: Optional[dict] = None) -> InsightRule:
    """Factory to create a rule instance from a type string and optional config.

    Args:
        rule_type: One of the keys in AVAILABLE_RULES.
        config: Optional dict of keyword arguments passed to the rule constructor.
                For example: {"strength_threshold": 0.9} for HighFrequencyBiasRule,
                {"ratio": 0.5} for VendorConcentrationRule.

    Returns:
        An instantiated InsightRule subclass.

    Raises:
        ValueError: If rule_type is not recognized or the config does not fit.
    """
    config = config or {}
    cls = AVAILABLE_RULES.get(rule_type)
    if not cls:
        raise ValueError(f"Unknown rule type: {rule_type}. Available: {list(AVAILABLE_RULES.keys())}")
    try:
        return cls(**config)
    except TypeError as e:
        raise ValueError(f"Invalid config for rule '{rule_type}': {e}")


def list_available_rules() -> List[dict]:
    """Return metadata about all available rule types.

    Returns:
        List of dicts with rule_type, name, description, insight_type and confidence.
    """
    result = []
    for rule_type, cls in AVAILABLE_RULES.items():
        instance = cls()
        result.append({
            'rule_type': rule_type,
            'name': instance.name,
            'description': instance.description,
            'insight_type': instance.insight_type,
            'confidence': instance.confidence,
        })
    return result
