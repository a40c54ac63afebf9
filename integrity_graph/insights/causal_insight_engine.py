"""
Causal Insight Engine

Derives ranked integrity findings for the evaluator network map.

Priority rule: when the AI causal analysis supplies root causes, insights are
built from them alone and the local heuristics are skipped entirely.
Otherwise the fallback rules run in order. Consecutive edge rules share one
pass over the suspicious relationships, so for each edge its high-frequency
finding is followed by its consistency finding before the next edge.

Usage:
    engine = CausalInsightEngine()
    insights = engine.derive(nodes, edges, analysis)
    # or the module-level shortcut
    insights = derive_insights(nodes, edges, analysis)
"""

import logging
from typing import Dict, List, Optional, Sequence

from integrity_graph.config import InsightConfig
from integrity_graph.graph.models import CausalAnalysis, Edge, Node, RootCause
from .insight_rules import (
    CRITICAL,
    INFO,
    WARNING,
    SEVERITY_ORDER,
    EdgeRule,
    Insight,
    InsightContext,
    InsightRule,
    create_rule,
    round_half_up,
)

logger = logging.getLogger(__name__)

ROOT_CAUSE_TITLES = {
    'evaluator_bias': 'Evaluator Bias Detected',
    'vendor_favoritism': 'Vendor Favoritism Pattern',
}
DEFAULT_ROOT_CAUSE_TITLE = 'Integrity Risk Pattern'


def default_rules(config: Optional[InsightConfig] = None) -> List[InsightRule]:
    """The four fallback heuristics, configured from ``config``."""
    config = config or InsightConfig()
    return [
        create_rule('high_frequency_bias', {
            'strength_threshold': config.high_frequency_strength,
            'confidence': config.high_frequency_confidence,
            'peer_average': config.peer_average_strength,
            'default_interaction_count': config.default_interaction_count,
        }),
        create_rule('evaluator_consistency', {
            'bias_threshold': config.consistency_bias_threshold,
            'confidence': config.consistency_confidence,
        }),
        create_rule('multiple_evaluators_flagged', {
            'bias_threshold': config.flagged_bias_threshold,
            'min_count': config.multiple_flagged_min_count,
            'confidence': config.multiple_flagged_confidence,
        }),
        create_rule('vendor_concentration', {
            'ratio': config.concentration_ratio,
            'confidence': config.concentration_confidence,
        }),
    ]


class CausalInsightEngine:
    """Pure function object: same inputs, same insights. Holds no per-graph state."""

    def __init__(
        self,
        config: Optional[InsightConfig] = None,
        rules: Optional[Sequence[InsightRule]] = None,
    ):
        self.config = config or InsightConfig()
        self.rules = list(rules) if rules is not None else default_rules(self.config)

    # ------------------------------------------------------------------ #
    # EXTERNAL ANALYSIS
    # ------------------------------------------------------------------ #

    def classify_root_cause(self, cause: RootCause) -> str:
        """Bias-type causes are critical above the confidence cut-off, else warnings; the rest are info."""
        if cause.type in self.config.bias_root_cause_types:
            if cause.confidence > self.config.critical_root_cause_confidence:
                return CRITICAL
            return WARNING
        return INFO

    def from_root_cause(self, cause: RootCause, nodes_by_name: Dict[str, Node]) -> Insight:
        affected = [
            nodes_by_name[name].id
            for name in cause.primary_entities
            if name in nodes_by_name
        ]
        return Insight(
            type=self.classify_root_cause(cause),
            title=ROOT_CAUSE_TITLES.get(cause.type, DEFAULT_ROOT_CAUSE_TITLE),
            description=cause.description,
            confidence=round_half_up(cause.confidence * 100),
            affected_node_ids=tuple(affected),
        )

    def from_analysis(self, nodes: Sequence[Node], analysis: CausalAnalysis) -> List[Insight]:
        nodes_by_name: Dict[str, Node] = {}
        for node in nodes:
            nodes_by_name.setdefault(node.name, node)
        return [self.from_root_cause(cause, nodes_by_name) for cause in analysis.root_causes]

    # ------------------------------------------------------------------ #
    # DERIVATION
    # ------------------------------------------------------------------ #

    def derive(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        analysis: Optional[CausalAnalysis] = None,
    ) -> List[Insight]:
        """Derive insights for one graph snapshot.

        Args:
            nodes: Graph nodes.
            edges: Graph edges as supplied (endpoints may be missing).
            analysis: Optional AI causal analysis.

        Returns:
            Insights in generation order. Use rank_insights() for display order.
        """
        if analysis is not None and analysis.has_root_causes:
            insights = self.from_analysis(nodes, analysis)
            logger.debug(f"Derived {len(insights)} insights from external root causes")
            return insights

        context = InsightContext.build(nodes, edges)
        insights: List[Insight] = []
        for group in self._rule_groups():
            if isinstance(group[0], EdgeRule):
                found = self._evaluate_edges(group, context)
            else:
                found = group[0].evaluate(context)
            if found:
                logger.debug(
                    f"Rules {[r.rule_type for r in group]} produced {len(found)} insight(s)"
                )
            insights.extend(found)
        return insights

    def _rule_groups(self) -> List[List[InsightRule]]:
        """Runs of consecutive edge rules become one group; other rules stand alone."""
        groups: List[List[InsightRule]] = []
        for rule in self.rules:
            if isinstance(rule, EdgeRule) and groups and isinstance(groups[-1][0], EdgeRule):
                groups[-1].append(rule)
            else:
                groups.append([rule])
        return groups

    @staticmethod
    def _evaluate_edges(rules: Sequence[EdgeRule], context: InsightContext) -> List[Insight]:
        insights = []
        for edge, evaluator, vendor in context.suspicious_pairs():
            for rule in rules:
                insight = rule.evaluate_edge(edge, evaluator, vendor)
                if insight is not None:
                    insights.append(insight)
        return insights


def derive_insights(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    external_analysis: Optional[CausalAnalysis] = None,
    config: Optional[InsightConfig] = None,
) -> List[Insight]:
    """Module-level shortcut for CausalInsightEngine(config).derive(...)."""
    return CausalInsightEngine(config).derive(nodes, edges, external_analysis)


def rank_insights(insights: Sequence[Insight]) -> List[Insight]:
    """Display order: critical, warning, info; higher confidence first. Stable for ties."""
    return sorted(
        insights,
        key=lambda i: (-SEVERITY_ORDER.get(i.type, 0), -i.confidence),
    )
