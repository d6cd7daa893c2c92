"""
PhishSense ML Confidence Adapter

Passes an external classifier's vote through. The vote's weight in the
combination is scaled by its confidence; votes below the confidence floor
or missing altogether contribute nothing.
"""

from typing import Optional

from ...config.scoring import MLScoring, get_scoring_config
from ...models.detection import Finding, MLDetails, Severity
from ...models.email import MLOutput
from .base import Detector, DetectorResult, clamp_score


class MLConfidenceAdapter(Detector):
    """External model vote."""

    name = "ml"
    details_model = MLDetails

    def __init__(
        self,
        scoring: Optional[MLScoring] = None,
        enabled: bool = True,
        confidence_floor: Optional[float] = None,
    ):
        super().__init__()
        self.scoring = scoring or get_scoring_config().ml
        self.enabled = enabled
        self.confidence_floor = self.scoring.confidence_floor if confidence_floor is None else confidence_floor

    def degraded(self, reason: str) -> DetectorResult:
        result = super().degraded(reason)
        result.details.model_used = reason
        return result

    async def evaluate(self, ml_output: Optional[MLOutput] = None) -> DetectorResult:
        """
        Normalize an external vote.

        Args:
            ml_output: Score, confidence and model name, if a model ran

        Returns:
            DetectorResult whose weight_factor is the vote's confidence
        """
        if not self.enabled:
            return self.degraded("disabled")
        if ml_output is None:
            return self.degraded("unavailable")
        if ml_output.confidence < self.confidence_floor:
            result = self.degraded("low-confidence")
            result.details.confidence = ml_output.confidence
            return result

        score = clamp_score(ml_output.score)
        findings = []
        if score > self.scoring.high_risk_score:
            findings.append(Finding(
                text=f"ML model ({ml_output.model_used}) rates this message as phishing ({score:.0f}/100)",
                severity=Severity.HIGH,
                category="ml",
            ))
        elif score > self.scoring.medium_risk_score:
            findings.append(Finding(
                text=f"ML model ({ml_output.model_used}) rates this message as suspicious ({score:.0f}/100)",
                severity=Severity.MEDIUM,
                category="ml",
            ))

        return DetectorResult(
            score=score,
            findings=findings,
            details=MLDetails(confidence=ml_output.confidence, model_used=ml_output.model_used),
            weight_factor=ml_output.confidence,
        )
