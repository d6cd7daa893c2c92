"""
PhishSense Analysis Data Models

The combined verdict and the records derived from it.
"""

from pydantic import Field
from typing import Optional, List
from enum import Enum

from .base import CamelModel
from .detection import (
    Finding,
    RuleDetails,
    HeaderDetails,
    ReputationDetails,
    BehaviorDetails,
    MLDetails,
    MiscDetails,
)


class RiskLevel(str, Enum):
    """Risk level classification."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# =============================================================================
# Score breakdown
# =============================================================================

class SubScore(CamelModel):
    """One detector's contribution to the final score."""
    score: float = Field(0.0, ge=0.0, le=100.0, description="Detector sub-score 0-100")
    weight: float = Field(0.0, ge=0.0, description="Effective weight after renormalisation")
    percentage: float = Field(0.0, ge=0.0, description="Points contributed (score x weight)")
    available: bool = True


class RuleSubScore(SubScore):
    details: RuleDetails = Field(default_factory=RuleDetails)


class HeaderSubScore(SubScore):
    details: HeaderDetails = Field(default_factory=HeaderDetails)


class ReputationSubScore(SubScore):
    details: ReputationDetails = Field(default_factory=ReputationDetails)


class BehaviorSubScore(SubScore):
    bonus: int = Field(0, description="Trust adjustment; negative lowers risk")
    details: BehaviorDetails = Field(default_factory=BehaviorDetails)


class MLSubScore(SubScore):
    details: MLDetails = Field(default_factory=MLDetails)


class MiscSubScore(SubScore):
    details: MiscDetails = Field(default_factory=MiscDetails)


class ScoreBreakdown(CamelModel):
    """Per-detector sub-scores."""
    rules: RuleSubScore = Field(default_factory=RuleSubScore)
    headers: HeaderSubScore = Field(default_factory=HeaderSubScore)
    reputation: ReputationSubScore = Field(default_factory=ReputationSubScore)
    behavior: BehaviorSubScore = Field(default_factory=BehaviorSubScore)
    ml: MLSubScore = Field(default_factory=MLSubScore)
    misc: MiscSubScore = Field(default_factory=MiscSubScore)


class ScoreAdjustment(CamelModel):
    """Additive points applied after the weighted sum."""
    source: str = Field(..., description="authentication or trust")
    points: int = Field(..., description="Positive raises risk, negative lowers it")
    reason: str


# =============================================================================
# Result
# =============================================================================

class AnalysisResult(CamelModel):
    """Final verdict for one message."""
    score: int = Field(..., ge=0, le=100, description="Risk score 0-100")
    risk_level: RiskLevel
    summary: str
    findings: List[Finding] = Field(default_factory=list)
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    adjustments: List[ScoreAdjustment] = Field(default_factory=list)
    processing_time: float = Field(0.0, ge=0.0, description="Milliseconds")


# =============================================================================
# Derived records
# =============================================================================

class ScanRecord(CamelModel):
    """Row handed to history persistence."""
    subject: str
    body: str
    from_email: str
    risk_score: int
    verdict: RiskLevel
    keywords: List[str] = Field(default_factory=list)
    links: List[str] = Field(default_factory=list)
    ml_confidence: Optional[float] = None


class LegitimacySnapshot(CamelModel):
    """Reasons a message may be legitimate, for the legitimacy view."""
    trusted_by_user: bool = False
    auth_strong: bool = False
    ml_supports: bool = False
    recommendation: str = "review"
    reasons: List[str] = Field(default_factory=list)
