"""
Pydantic Schemas for the Evaluator Network Map

Input contract supplied by the dashboard: evaluator/vendor nodes, the
relationships between them, and an optional causal analysis computed by the
AI service. Keys are accepted in the camelCase form the dashboard sends
(biasScore, isSuspicious, rootCauses, ...) as well as snake_case.
"""
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from typing import Any, Dict, List, Literal, Optional
import logging

from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

NodeType = Literal["evaluator", "vendor"]


class PayloadError(ValueError):
    """Raised when a graph payload cannot be validated."""


def _none_as_empty(value: Any) -> Any:
    """Explicit null in an optional list field means an empty list."""
    return [] if value is None else value


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# ============================================================================
# GRAPH SCHEMAS
# ============================================================================

class Node(_Schema):
    """Evaluator or vendor vertex.

    Pinning can be given as ``pinned: {x, y}`` or per axis as ``fx`` / ``fy``;
    each axis pins independently.
    """
    id: str
    name: str = ""
    type: NodeType
    bias_score: Optional[float] = Field(None, description="0-100, evaluators only")
    department: Optional[str] = None
    fx: Optional[float] = None
    fy: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_pinned(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("pinned"), dict):
            data = dict(data)
            pinned = data.pop("pinned")
            data.setdefault("fx", pinned.get("x"))
            data.setdefault("fy", pinned.get("y"))
        return data

    @property
    def is_evaluator(self) -> bool:
        return self.type == "evaluator"

    @property
    def is_vendor(self) -> bool:
        return self.type == "vendor"

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


class Edge(_Schema):
    """Directed evaluator -> vendor relationship."""
    source: str
    target: str
    strength: float = Field(0.0, description="0-1")
    is_suspicious: bool = False
    interaction_count: Optional[int] = None
    tender_history: List[str] = Field(default_factory=list)

    @field_validator("tender_history", mode="before")
    @classmethod
    def _null_history(cls, value: Any) -> Any:
        return _none_as_empty(value)

    @property
    def key(self) -> str:
        return edge_key(self.source, self.target)


def edge_key(source: str, target: str) -> str:
    """Identifier used for edge hover state."""
    return f"{source}-{target}"


# ============================================================================
# CAUSAL ANALYSIS SCHEMAS
# ============================================================================

class RootCause(_Schema):
    """One root cause entry produced by the AI causal analysis service."""
    id: Optional[str] = None
    type: str = ""
    description: str = ""
    confidence: float = Field(0.0, description="0-1")
    impact_score: Optional[float] = None
    related_alerts: List[str] = Field(default_factory=list)
    primary_entities: List[str] = Field(default_factory=list)

    @field_validator("related_alerts", "primary_entities", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _none_as_empty(value)


class MitigationAction(_Schema):
    """Suggested follow-up action. Carried through for display only."""
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    owner: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None


class CausalAnalysis(_Schema):
    """Externally computed causal analysis. Supersedes local heuristics when it has root causes."""
    summary: Optional[str] = None
    root_causes: List[RootCause] = Field(default_factory=list)
    mitigation_actions: List[MitigationAction] = Field(default_factory=list)

    @field_validator("root_causes", "mitigation_actions", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _none_as_empty(value)

    @property
    def has_root_causes(self) -> bool:
        return len(self.root_causes) > 0


class GraphPayload(_Schema):
    """Complete input for one render cycle."""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    ai_causal_analysis: Optional[CausalAnalysis] = None

    @field_validator("nodes", "edges", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return _none_as_empty(value)

    @field_validator("nodes")
    @classmethod
    def _drop_duplicate_ids(cls, nodes: List[Node]) -> List[Node]:
        seen = set()
        unique = []
        for node in nodes:
            if node.id in seen:
                logger.warning(f"Duplicate node id {node.id!r} ignored, keeping first occurrence")
                continue
            seen.add(node.id)
            unique.append(node)
        return unique

    @property
    def evaluators(self) -> List[Node]:
        return [n for n in self.nodes if n.is_evaluator]

    @property
    def vendors(self) -> List[Node]:
        return [n for n in self.nodes if n.is_vendor]


def parse_payload(data: Dict[str, Any]) -> GraphPayload:
    """Validate a raw dashboard payload.

    Args:
        data: Dict with ``nodes``, ``edges`` and optional ``aiCausalAnalysis``.

    Returns:
        A validated GraphPayload.

    Raises:
        PayloadError: If the payload does not match the schema.
    """
    try:
        return GraphPayload.model_validate(data)
    except ValidationError as e:
        raise PayloadError(f"Invalid graph payload: {e.error_count()} error(s)\n{e}") from e
