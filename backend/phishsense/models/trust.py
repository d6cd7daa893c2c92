"""
PhishSense Trust and Pattern Records

Records held by the trust store and the pattern store.
"""

from pydantic import ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from .base import CamelModel


class BehaviorRecord(CamelModel):
    """Interaction history for one sender address or domain."""
    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., description="Sender address or bare domain")
    total_emails: int = Field(0, ge=0)
    safe_count: int = Field(0, ge=0)
    suspicious_count: int = Field(0, ge=0)
    phishing_count: int = Field(0, ge=0)
    first_seen: Optional[datetime] = None
    last_seen: Optional[datetime] = None


class AuthSnapshot(CamelModel):
    """Authentication outcome recorded when the sender was confirmed."""
    model_config = ConfigDict(frozen=True)

    spf: Optional[str] = None
    dkim: Optional[str] = None
    dmarc: Optional[str] = None


class TrustedRecord(CamelModel):
    """Sender the user marked as trusted."""
    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., description="Sender address or bare domain")
    domain: Optional[str] = None
    confirmation_count: int = Field(1, ge=0)
    first_seen: Optional[datetime] = None
    last_confirmed_at: Optional[datetime] = None
    auth_snapshot: Optional[AuthSnapshot] = None
    note: Optional[str] = None


class PatternCategory(str, Enum):
    """Categories a custom pattern may extend."""
    CREDENTIAL = "credential"
    URGENCY = "urgency"
    THREAT = "threat"
    REWARD = "reward"
    FINANCIAL = "financial"
    CUSTOM = "custom"


class CustomPattern(CamelModel):
    """User-defined keyword merged into the keyword tables."""
    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., min_length=1)
    category: PatternCategory = PatternCategory.CUSTOM
    severity: str = Field("medium", pattern="^(low|medium|high)$")
    weight: float = Field(10.0, ge=0.0, le=100.0)
    is_active: bool = True
