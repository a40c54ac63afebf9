"""
Integrity Graph Configuration

Tunable constants for the evaluator network map. Defaults mirror the values
used by the dashboard; every value can be overridden through environment
variables (or a .env file) prefixed with INTEGRITY_GRAPH_.

Example .env:
    INTEGRITY_GRAPH_EVALUATOR_RADIUS=240
    INTEGRITY_GRAPH_ZOOM_MAX=4
    INTEGRITY_GRAPH_HIGH_FREQUENCY_CONFIDENCE=90
"""
from dataclasses import dataclass, field
import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "INTEGRITY_GRAPH_"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    return int(_env_float(name, default))


@dataclass
class LayoutConfig:
    """Canvas geometry for the concentric ring layout."""
    width: float = 700
    height: float = 550
    evaluator_radius: float = 200
    vendor_radius: float = 100

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def center_y(self) -> float:
        return self.height / 2

    @classmethod
    def from_env(cls) -> "LayoutConfig":
        return cls(
            width=_env_float("CANVAS_WIDTH", cls.width),
            height=_env_float("CANVAS_HEIGHT", cls.height),
            evaluator_radius=_env_float("EVALUATOR_RADIUS", cls.evaluator_radius),
            vendor_radius=_env_float("VENDOR_RADIUS", cls.vendor_radius),
        )


@dataclass
class ViewportConfig:
    """Zoom bounds and step factors."""
    zoom_min: float = 0.5
    zoom_max: float = 3.0
    wheel_zoom_out: float = 0.9
    wheel_zoom_in: float = 1.1
    button_zoom_factor: float = 1.2

    @classmethod
    def from_env(cls) -> "ViewportConfig":
        return cls(
            zoom_min=_env_float("ZOOM_MIN", cls.zoom_min),
            zoom_max=_env_float("ZOOM_MAX", cls.zoom_max),
            wheel_zoom_out=_env_float("WHEEL_ZOOM_OUT", cls.wheel_zoom_out),
            wheel_zoom_in=_env_float("WHEEL_ZOOM_IN", cls.wheel_zoom_in),
            button_zoom_factor=_env_float("BUTTON_ZOOM_FACTOR", cls.button_zoom_factor),
        )


@dataclass
class InsightConfig:
    """Thresholds and fixed confidences for the fallback heuristics.

    The confidences are hand-picked design constants, not learned values.
    """
    # High-frequency bias
    high_frequency_strength: float = 0.8
    high_frequency_confidence: int = 92
    peer_average_strength: float = 0.5
    default_interaction_count: int = 5

    # Evaluator consistency anomaly
    consistency_bias_threshold: float = 60
    consistency_confidence: int = 87

    # Multiple evaluators flagged
    flagged_bias_threshold: float = 50
    multiple_flagged_min_count: int = 2
    multiple_flagged_confidence: int = 78

    # Vendor concentration
    concentration_ratio: float = 0.7
    concentration_confidence: int = 85

    # External root causes
    critical_root_cause_confidence: float = 0.85
    bias_root_cause_types: tuple = ("evaluator_bias", "vendor_favoritism")

    @classmethod
    def from_env(cls) -> "InsightConfig":
        return cls(
            high_frequency_strength=_env_float("HIGH_FREQUENCY_STRENGTH", cls.high_frequency_strength),
            high_frequency_confidence=_env_int("HIGH_FREQUENCY_CONFIDENCE", cls.high_frequency_confidence),
            peer_average_strength=_env_float("PEER_AVERAGE_STRENGTH", cls.peer_average_strength),
            default_interaction_count=_env_int("DEFAULT_INTERACTION_COUNT", cls.default_interaction_count),
            consistency_bias_threshold=_env_float("CONSISTENCY_BIAS_THRESHOLD", cls.consistency_bias_threshold),
            consistency_confidence=_env_int("CONSISTENCY_CONFIDENCE", cls.consistency_confidence),
            flagged_bias_threshold=_env_float("FLAGGED_BIAS_THRESHOLD", cls.flagged_bias_threshold),
            multiple_flagged_min_count=_env_int("MULTIPLE_FLAGGED_MIN_COUNT", cls.multiple_flagged_min_count),
            multiple_flagged_confidence=_env_int("MULTIPLE_FLAGGED_CONFIDENCE", cls.multiple_flagged_confidence),
            concentration_ratio=_env_float("CONCENTRATION_RATIO", cls.concentration_ratio),
            concentration_confidence=_env_int("CONCENTRATION_CONFIDENCE", cls.concentration_confidence),
            critical_root_cause_confidence=_env_float(
                "CRITICAL_ROOT_CAUSE_CONFIDENCE", cls.critical_root_cause_confidence
            ),
        )


@dataclass
class Settings:
    """All configuration for one network map instance."""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    insights: InsightConfig = field(default_factory=InsightConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            layout=LayoutConfig.from_env(),
            viewport=ViewportConfig.from_env(),
            insights=InsightConfig.from_env(),
        )
