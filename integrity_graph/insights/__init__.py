"""
Causal Insight Pipeline

Turns the evaluator network (and, when available, the AI causal analysis)
into typed integrity findings with confidence scores.

Components:
- insight_rules: Declarative fallback heuristics and the rule registry
- causal_insight_engine: Root-cause mapping, rule evaluation and ranking
"""

from .insight_rules import (
    Insight,
    InsightContext,
    InsightRule,
    EdgeRule,
    HighFrequencyBiasRule,
    EvaluatorConsistencyRule,
    MultipleEvaluatorsFlaggedRule,
    VendorConcentrationRule,
    AVAILABLE_RULES,
    SEVERITY_ORDER,
    create_rule,
    list_available_rules,
    round_half_up,
)
from .causal_insight_engine import (
    CausalInsightEngine,
    default_rules,
    derive_insights,
    rank_insights,
)

__all__ = [
    'Insight',
    'InsightContext',
    'InsightRule',
    'EdgeRule',
    'HighFrequencyBiasRule',
    'EvaluatorConsistencyRule',
    'MultipleEvaluatorsFlaggedRule',
    'VendorConcentrationRule',
    'AVAILABLE_RULES',
    'SEVERITY_ORDER',
    'create_rule',
    'list_available_rules',
    'round_half_up',
    'CausalInsightEngine',
    'default_rules',
    'derive_insights',
    'rank_insights',
]
