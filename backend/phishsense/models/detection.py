"""
PhishSense Detection Data Models

Pydantic models for findings and per-detector details.
"""

from pydantic import Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum

from .base import CamelModel


class Severity(str, Enum):
    """Finding severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


SEVERITY_RANK: Dict[str, int] = {
    Severity.LOW.value: 1,
    Severity.MEDIUM.value: 2,
    Severity.HIGH.value: 3,
}


class Finding(CamelModel):
    """A single human-readable observation with a severity and category."""
    text: str = Field(..., description="What was observed")
    severity: Severity = Field(..., description="low, medium or high")
    category: str = Field(..., description="Detector-specific category")
    start_index: Optional[int] = Field(None, description="Offset in body, when located")


# =============================================================================
# Detector details
# =============================================================================

class RuleDetails(CamelModel):
    """Rule detector internals."""
    raw_points: float = 0.0
    match_count: int = 0
    category_points: Dict[str, float] = Field(default_factory=dict)
    keyword_points: float = 0.0
    url_points: float = 0.0
    domain_points: float = 0.0
    attachment_points: float = 0.0
    html_points: float = 0.0
    reason: Optional[str] = None


class AuthSummary(CamelModel):
    """Which mechanisms passed and whether relief was granted."""
    spf_passed: bool = False
    dkim_passed: bool = False
    dmarc_passed: bool = False
    bonus_applied: bool = False


class HeaderDetails(CamelModel):
    """Header authenticator internals."""
    spf_status: Optional[str] = None
    dkim_status: Optional[str] = None
    dmarc_status: Optional[str] = None
    received_count: int = 0
    suspicious_headers: List[str] = Field(default_factory=list)
    return_path_mismatch: bool = False
    reply_to_mismatch: bool = False
    auth_positive_bonus: int = 0
    auth_penalty: int = 0
    auth_summary: AuthSummary = Field(default_factory=AuthSummary)
    reason: Optional[str] = None


class ReputationDetails(CamelModel):
    """Reputation analyzer internals."""
    email_address: Optional[str] = None
    domain: Optional[str] = None
    display_name: Optional[str] = None
    matched_brand: Optional[str] = None
    lookalike_distance: Optional[int] = None
    suspicious_tokens: List[str] = Field(default_factory=list)
    trusted_domain: bool = False
    threat_intel_hits: List[str] = Field(default_factory=list)
    reason: Optional[str] = None


class BehaviorDetails(CamelModel):
    """Behavior tracker internals."""
    total_interactions: int = 0
    phishing_interactions: int = 0
    safe_interactions: int = 0
    suspicious_interactions: int = 0
    days_since_last_interaction: Optional[int] = None
    is_first_interaction: bool = False
    first_seen: Optional[datetime] = None
    last_seen: Optional[datetime] = None
    trusted_sender: bool = False
    reason: Optional[str] = None


class MLDetails(CamelModel):
    """ML adapter internals."""
    confidence: Optional[float] = None
    model_used: Optional[str] = None
    reason: Optional[str] = None


class MiscDetails(CamelModel):
    """Content hygiene internals."""
    signals: List[str] = Field(default_factory=list)
    link_count: int = 0
    exclamation_count: int = 0
    reason: Optional[str] = None
