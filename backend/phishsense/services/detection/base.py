"""
PhishSense Detector Base

Every detector returns a DetectorResult: a 0-100 sub-score, its findings
and a typed details record. A detector that cannot run returns a degraded
result instead of raising.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from typing import List, Type

from pydantic import BaseModel

from ...models.detection import Finding

logger = logging.getLogger(__name__)


@dataclass
class DetectorResult:
    """Output of one detector."""
    score: float
    findings: List[Finding] = field(default_factory=list)
    details: BaseModel = None
    available: bool = True
    # Additive trust adjustment (behavior tracker only)
    bonus: int = 0
    # Multiplies the detector's base weight (ML adapter only)
    weight_factor: float = 1.0


class Detector(ABC):
    """
    Common shape of the detectors.

    Subclasses define `name` and `details_model` and implement an async
    `evaluate`; its arguments differ per detector.
    """

    name: str = "detector"
    details_model: Type[BaseModel] = BaseModel

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def degraded(self, reason: str) -> DetectorResult:
        """Zero-score result marking the detector unavailable."""
        return DetectorResult(
            score=0.0,
            findings=[],
            details=self.details_model(reason=reason),
            available=False,
            weight_factor=0.0,
        )


def clamp_score(value: float) -> float:
    """Clamp a sub-score into 0-100."""
    return max(0.0, min(100.0, float(value)))
