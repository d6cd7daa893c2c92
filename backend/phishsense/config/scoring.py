"""
PhishSense Scoring Configuration

ALL scoring thresholds, weights, bonuses and penalties are centralized here.
No magic numbers anywhere else in the detectors or the combiner.

The configuration is read-only once loaded; it is shared across concurrent
analyses without locking.

Usage:
    from phishsense.config.scoring import get_scoring_config
    config = get_scoring_config()

    level = config.thresholds.risk_level_for(score)
"""

import os
import logging
from dataclasses import dataclass, field, asdict, replace
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# RISK LEVEL THRESHOLDS
# =============================================================================

@dataclass(frozen=True)
class RiskThresholds:
    """Thresholds for risk level classification (single source of truth)."""

    medium: int = 35      # >= this = Medium
    high: int = 60        # >= this = High
    # Below medium = Low

    def risk_level_for(self, score: float) -> str:
        """Map a 0-100 score onto Low / Medium / High."""
        if score >= self.high:
            return "High"
        if score >= self.medium:
            return "Medium"
        return "Low"


# =============================================================================
# DETECTOR WEIGHTS
# =============================================================================

@dataclass(frozen=True)
class DetectorWeights:
    """Share of the 100-point total each detector may contribute."""

    rules: float = 0.40
    reputation: float = 0.25
    headers: float = 0.10
    behavior: float = 0.10
    ml: float = 0.10
    misc: float = 0.05

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())


@dataclass(frozen=True)
class SensitivityMultipliers:
    """Scales the weighted sum before adjustments."""

    low: float = 0.8
    medium: float = 1.0
    high: float = 1.2

    def get(self, sensitivity: str) -> float:
        level = (sensitivity or "medium").lower()
        if level not in ("low", "medium", "high"):
            return self.medium
        return getattr(self, level)


# =============================================================================
# RULE DETECTOR
# =============================================================================

@dataclass(frozen=True)
class RuleScoring:
    """Rule detector accumulation and saturation."""

    # A single category counts at most this many matches
    match_cap: int = 3

    # score = 100 * (1 - exp(-raw / saturation_points))
    saturation_points: float = 35.0


# =============================================================================
# HEADER AUTHENTICATOR
# =============================================================================

@dataclass(frozen=True)
class HeaderScoring:
    """Sub-score points and cross-cutting auth adjustments."""

    # Sub-score points per mechanism outcome
    spf_fail_points: int = 35
    dkim_fail_points: int = 35
    dmarc_fail_points: int = 25
    softfail_points: int = 20
    absent_points: int = 15

    # Routing / anomalies
    max_normal_hops: int = 5
    excessive_hops_points: int = 15
    suspicious_header_points: int = 5
    return_path_mismatch_points: int = 20
    reply_to_mismatch_points: int = 15

    # Adjustments applied by the combiner (points added to the final score)
    fail_penalty: int = 10
    softfail_penalty: int = 5
    absent_penalty: int = 5

    # Relief (points removed from the final score)
    pass_bonus: int = 5
    full_pass_bonus: int = 5


# =============================================================================
# REPUTATION ANALYZER
# =============================================================================

@dataclass(frozen=True)
class ReputationScoring:
    """Reputation points per signal."""

    lookalike_distance_one: int = 70
    lookalike_distance_two: int = 55
    homoglyph: int = 75
    embedded_brand: int = 60
    display_name_brand_mismatch: int = 45
    display_email_mismatch: int = 25
    threat_intel_domain: int = 80
    threat_intel_url: int = 60
    suspicious_unicode: int = 25
    numeric_substitution: int = 25
    excessive_hyphens: int = 15
    excessive_digits: int = 15
    uncommon_tld: int = 20

    # Lookalike bounds
    max_lookalike_distance: int = 2
    short_brand_length: int = 6       # brands shorter than this allow distance 1 only
    min_label_length: int = 5         # shorter labels skip fuzzy matching
    embedded_min_length: int = 3

    hyphen_limit: int = 2             # >= this many hyphens is excessive
    digit_limit: int = 4              # >= this many digits is excessive


# =============================================================================
# BEHAVIOR TRACKER
# =============================================================================

@dataclass(frozen=True)
class BehaviorScoring:
    """Sender-history scoring and trust relief."""

    first_contact_points: int = 60
    first_contact_increment: int = 15

    phishing_base_points: int = 30
    phishing_ratio_points: int = 70
    suspicious_ratio_points: int = 25

    dormant_days: int = 180
    dormant_points: int = 10

    trusted_safe_threshold: int = 3
    # Confirmations a trusted record needs before it grants relief
    trusted_confirmation_threshold: int = 1
    trusted_record_bonus: int = 20
    frequent_safe_bonus: int = 15
    bonus_cap: int = 30

    # Relief allowed when a hard rule/authentication failure is present
    hard_failure_relief_cap: int = 10


# =============================================================================
# ML CONFIDENCE ADAPTER
# =============================================================================

@dataclass(frozen=True)
class MLScoring:
    """External classifier handling."""

    confidence_floor: float = 0.5
    high_risk_score: float = 70.0
    medium_risk_score: float = 40.0


# =============================================================================
# MISC CONTENT SIGNALS
# =============================================================================

@dataclass(frozen=True)
class MiscScoring:
    """Content hygiene signals."""

    shouting_subject_points: int = 20
    shouting_min_letters: int = 8
    shouting_ratio: float = 0.7

    exclamation_points: int = 15
    exclamation_limit: int = 3

    generic_greeting_points: int = 20

    link_flood_points: int = 15
    link_flood_limit: int = 5


# =============================================================================
# MASTER CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class ScoringConfig:
    """Master scoring configuration."""

    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    weights: DetectorWeights = field(default_factory=DetectorWeights)
    sensitivity: SensitivityMultipliers = field(default_factory=SensitivityMultipliers)
    rules: RuleScoring = field(default_factory=RuleScoring)
    headers: HeaderScoring = field(default_factory=HeaderScoring)
    reputation: ReputationScoring = field(default_factory=ReputationScoring)
    behavior: BehaviorScoring = field(default_factory=BehaviorScoring)
    ml: MLScoring = field(default_factory=MLScoring)
    misc: MiscScoring = field(default_factory=MiscScoring)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoringConfig":
        """Create config from dictionary, ignoring unknown keys."""
        config = cls()
        sections = {}
        for name, section in config.__dict__.items():
            overrides = data.get(name) or {}
            known = {k: v for k, v in overrides.items() if hasattr(section, k)}
            sections[name] = replace(section, **known) if known else section
        return cls(**sections)

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Create config from environment variables."""
        data: Dict[str, Dict[str, Any]] = {}

        # Risk thresholds
        if os.getenv("RISK_THRESHOLD_MEDIUM"):
            data.setdefault("thresholds", {})["medium"] = int(os.getenv("RISK_THRESHOLD_MEDIUM"))
        if os.getenv("RISK_THRESHOLD_HIGH"):
            data.setdefault("thresholds", {})["high"] = int(os.getenv("RISK_THRESHOLD_HIGH"))

        # Detector weights
        for name in DetectorWeights().as_dict():
            value = os.getenv(f"WEIGHT_{name.upper()}")
            if value:
                data.setdefault("weights", {})[name] = float(value)

        # Rule saturation
        if os.getenv("RULE_SATURATION_POINTS"):
            data.setdefault("rules", {})["saturation_points"] = float(os.getenv("RULE_SATURATION_POINTS"))
        if os.getenv("RULE_MATCH_CAP"):
            data.setdefault("rules", {})["match_cap"] = int(os.getenv("RULE_MATCH_CAP"))

        # ML floor
        if os.getenv("ML_CONFIDENCE_FLOOR"):
            data.setdefault("ml", {})["confidence_floor"] = float(os.getenv("ML_CONFIDENCE_FLOOR"))

        config = cls.from_dict(data)
        if config.weights.total > 1.0 + 1e-9:
            logger.warning(f"Detector weights sum to {config.weights.total:.2f}, above the 100-point total")
        return config


# =============================================================================
# SINGLETON ACCESS
# =============================================================================

_scoring_config: Optional[ScoringConfig] = None


def get_scoring_config() -> ScoringConfig:
    """Get the shared scoring configuration."""
    global _scoring_config
    if _scoring_config is None:
        _scoring_config = ScoringConfig.from_env()
        logger.info("Scoring configuration loaded")
    return _scoring_config


def reset_scoring_config():
    """Drop the cached config so the next access reloads it."""
    global _scoring_config
    _scoring_config = None
    logger.info("Scoring configuration reset to defaults")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def risk_level_for_score(score: float) -> str:
    """Risk level for a stored score, using the shared thresholds."""
    return get_scoring_config().thresholds.risk_level_for(score)
