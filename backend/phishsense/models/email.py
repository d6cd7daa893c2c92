"""
PhishSense Email Data Models

Pydantic models for the message under analysis and the optional
external inputs that accompany it.
"""

from pydantic import ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from .base import CamelModel
from ..utils.helpers import utc_now


class EmailInput(CamelModel):
    """
    Message to analyze.

    Immutable once built; every detector reads the same instance.
    """
    model_config = ConfigDict(frozen=True)

    subject: str = Field("", description="Subject line")
    body: str = Field("", description="Plain text or HTML body")
    sender: str = Field("", alias="from", description="Raw From value")
    headers: Optional[str] = Field(None, description="Raw header block")
    analyzed_at: datetime = Field(
        default_factory=utc_now,
        description="Reference time for history calculations",
    )

    @property
    def has_content(self) -> bool:
        """True when subject or body carries non-whitespace text."""
        return bool((self.subject or "").strip() or (self.body or "").strip())


class MLOutput(CamelModel):
    """Vote from an external classifier."""
    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=100.0, description="Risk score 0-100")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence 0-1")
    model_used: str = Field("external", description="Classifier name")


class ThreatIntelSnapshot(CamelModel):
    """Known-bad indicators supplied by the caller."""
    model_config = ConfigDict(frozen=True)

    malicious_domains: List[str] = Field(default_factory=list)
    malicious_urls: List[str] = Field(default_factory=list)
