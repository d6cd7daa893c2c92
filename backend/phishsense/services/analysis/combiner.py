"""
PhishSense Score Combiner

Orchestrates all detectors and fuses their sub-scores into one verdict.

    score = clamp(0, 100, round(sum of percentages) + auth adjustment + trust adjustment)

Each percentage is sub-score x effective weight. Effective weights are the
base weights renormalised over the detectors that actually produced a
signal (the ML weight is additionally scaled by the model's confidence),
then multiplied by the sensitivity setting.

Only an absent or empty email stops an analysis. Any detector failure
degrades that detector to a zero contribution with a reason.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from ...config.scoring import ScoringConfig, get_scoring_config
from ...config.settings import get_settings
from ...models.analysis import (
    AnalysisResult,
    RiskLevel,
    ScoreAdjustment,
    ScoreBreakdown,
    RuleSubScore,
    HeaderSubScore,
    ReputationSubScore,
    BehaviorSubScore,
    MLSubScore,
    MiscSubScore,
)
from ...models.detection import Finding, Severity
from ...models.email import EmailInput, MLOutput, ThreatIntelSnapshot
from ...utils.constants import DETECTOR_ORDER
from ...utils.exceptions import InputError, DetectorDegradedError
from ..detection.base import DetectorResult
from ..detection.rule_detector import RuleDetector
from ..detection.header_authenticator import HeaderAuthenticator, is_hard_fail
from ..detection.reputation import ReputationAnalyzer
from ..detection.behavior import BehaviorTracker
from ..detection.ml_adapter import MLConfidenceAdapter
from ..detection.misc import MiscDetector
from ..stores.patterns import PatternStore
from ..stores.trust import TrustStore
from .summary import build_summary

logger = logging.getLogger(__name__)

SUBSCORE_MODELS = {
    "rules": RuleSubScore,
    "headers": HeaderSubScore,
    "reputation": ReputationSubScore,
    "behavior": BehaviorSubScore,
    "ml": MLSubScore,
    "misc": MiscSubScore,
}


class ScoreCombiner:
    """
    Main analysis engine.

    Runs every detector concurrently over the same immutable email, then
    weights, adjusts and classifies the result. Holds only read-only
    configuration, so one instance serves concurrent calls.
    """

    def __init__(
        self,
        pattern_store: Optional[PatternStore] = None,
        trust_store: Optional[TrustStore] = None,
        scoring: Optional[ScoringConfig] = None,
        sensitivity: str = "medium",
        enable_ml: bool = True,
        ml_confidence_floor: Optional[float] = None,
    ):
        self.scoring = scoring or get_scoring_config()
        self.sensitivity = (sensitivity or "medium").lower()

        self.rule_detector = RuleDetector(pattern_store, self.scoring.rules)
        self.header_authenticator = HeaderAuthenticator(self.scoring.headers)
        self.reputation_analyzer = ReputationAnalyzer(pattern_store, self.scoring.reputation)
        self.behavior_tracker = BehaviorTracker(trust_store, self.scoring.behavior)
        self.ml_adapter = MLConfidenceAdapter(self.scoring.ml, enabled=enable_ml, confidence_floor=ml_confidence_floor)
        self.misc_detector = MiscDetector(self.scoring.misc)

    async def combine(
        self,
        email: EmailInput,
        trust_store: Optional[TrustStore] = None,
        ml_output: Optional[MLOutput] = None,
        threat_intel: Optional[ThreatIntelSnapshot] = None,
    ) -> AnalysisResult:
        """
        Analyze one email.

        Args:
            email: Message to analyze
            trust_store: Sender history for this call (optional)
            ml_output: External classifier vote (optional)
            threat_intel: Known-bad domains and URLs (optional)

        Returns:
            AnalysisResult

        Raises:
            InputError: Email missing, or both subject and body empty
        """
        started = time.perf_counter()

        if email is None:
            raise InputError("No email supplied")
        if not email.has_content:
            raise InputError("Email has neither subject nor body")

        logger.info(f"Starting analysis (sensitivity={self.sensitivity})")

        detectors = [
            (self.rule_detector, self.rule_detector.evaluate(email)),
            (self.header_authenticator, self.header_authenticator.evaluate(email)),
            (self.reputation_analyzer, self.reputation_analyzer.evaluate(email, threat_intel)),
            (self.behavior_tracker, self.behavior_tracker.evaluate(email.sender, trust_store, now=email.analyzed_at)),
            (self.ml_adapter, self.ml_adapter.evaluate(ml_output)),
            (self.misc_detector, self.misc_detector.evaluate(email)),
        ]

        # Run all detectors concurrently
        outcomes = await asyncio.gather(*[call for _, call in detectors], return_exceptions=True)

        results: Dict[str, DetectorResult] = {}
        for (detector, _), outcome in zip(detectors, outcomes):
            if isinstance(outcome, DetectorDegradedError):
                logger.warning(f"Detector {detector.name} degraded: {outcome.message}")
                results[detector.name] = detector.degraded(outcome.reason)
            elif isinstance(outcome, Exception):
                logger.error(f"Detector {detector.name} failed: {outcome}")
                results[detector.name] = detector.degraded("detector-error")
            else:
                results[detector.name] = outcome

        weights = self._effective_weights(results)
        percentages = {
            name: round(results[name].score * weights[name], 2)
            for name in DETECTOR_ORDER
        }

        adjustments = self._adjustments(results)
        adjustment_total = sum(a.points for a in adjustments)
        weighted_sum = sum(percentages.values())
        score = int(max(0, min(100, round(weighted_sum) + adjustment_total)))
        risk_level = RiskLevel(self.scoring.thresholds.risk_level_for(score))

        breakdown = self._breakdown(results, weights, percentages)
        findings: List[Finding] = [f for name in DETECTOR_ORDER for f in results[name].findings]
        unavailable = [name for name in DETECTOR_ORDER if not results[name].available]

        summary = build_summary(
            risk_level,
            percentages,
            {name: results[name].findings for name in DETECTOR_ORDER},
            adjustments,
            unavailable,
        )

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            f"Analysis complete: score={score}, risk={risk_level.value}, "
            f"findings={len(findings)}, time={elapsed_ms}ms"
        )

        return AnalysisResult(
            score=score,
            risk_level=risk_level,
            summary=summary,
            findings=findings,
            breakdown=breakdown,
            adjustments=adjustments,
            processing_time=elapsed_ms,
        )

    # =========================================================================
    # Weighting
    # =========================================================================

    def _effective_weights(self, results: Dict[str, DetectorResult]) -> Dict[str, float]:
        """Renormalise base weights over detectors that produced a signal."""
        base = self.scoring.weights.as_dict()
        declared_total = min(1.0, self.scoring.weights.total)
        active = {
            name: base[name] * results[name].weight_factor if results[name].available else 0.0
            for name in DETECTOR_ORDER
        }
        active_total = sum(active.values())
        if active_total <= 0:
            return {name: 0.0 for name in DETECTOR_ORDER}

        multiplier = self.scoring.sensitivity.get(self.sensitivity)
        factor = declared_total / active_total * multiplier
        return {name: round(active[name] * factor, 4) for name in DETECTOR_ORDER}

    # =========================================================================
    # Adjustments
    # =========================================================================

    def _adjustments(self, results: Dict[str, DetectorResult]) -> List[ScoreAdjustment]:
        """Authentication first, then trust."""
        adjustments = []

        headers = results["headers"]
        if headers.available:
            details = headers.details
            points = details.auth_penalty - details.auth_positive_bonus
            if points:
                adjustments.append(ScoreAdjustment(
                    source="authentication",
                    points=points,
                    reason=self._auth_reason(details),
                ))

        behavior = results["behavior"]
        if behavior.available and behavior.bonus:
            points = behavior.bonus
            capped = False
            if points < 0 and self._has_hard_failure(results):
                cap = self.scoring.behavior.hard_failure_relief_cap
                if points < -cap:
                    points = -cap
                    capped = True
            behavior.bonus = points

            if behavior.details.is_first_interaction and points > 0:
                reason = "first message from this sender"
            else:
                reason = "trusted sender"
                if capped:
                    reason += ", relief limited by a hard failure"
            adjustments.append(ScoreAdjustment(source="trust", points=points, reason=reason))

        return adjustments

    @staticmethod
    def _auth_reason(details) -> str:
        parts = []
        for label, status in (("SPF", details.spf_status), ("DKIM", details.dkim_status), ("DMARC", details.dmarc_status)):
            parts.append(f"{label} {status or 'missing'}")
        return ", ".join(parts)

    @staticmethod
    def _has_hard_failure(results: Dict[str, DetectorResult]) -> bool:
        """A high-severity rule finding or a hard-failed auth mechanism."""
        if any(f.severity == Severity.HIGH for f in results["rules"].findings):
            return True
        headers = results["headers"]
        if headers.available:
            statuses = (headers.details.spf_status, headers.details.dkim_status, headers.details.dmarc_status)
            return any(is_hard_fail(s) for s in statuses)
        return False

    # =========================================================================
    # Breakdown
    # =========================================================================

    @staticmethod
    def _breakdown(results, weights, percentages) -> ScoreBreakdown:
        sub_scores = {}
        for name in DETECTOR_ORDER:
            result = results[name]
            fields = dict(
                score=result.score,
                weight=weights[name],
                percentage=percentages[name],
                available=result.available,
                details=result.details,
            )
            if name == "behavior":
                fields["bonus"] = result.bonus if result.available else 0
            sub_scores[name] = SUBSCORE_MODELS[name](**fields)
        return ScoreBreakdown(**sub_scores)


# Singleton instance
_score_combiner: Optional[ScoreCombiner] = None


def get_score_combiner() -> ScoreCombiner:
    """Get the score combiner singleton (built from application settings)."""
    global _score_combiner
    if _score_combiner is None:
        settings = get_settings()
        _score_combiner = ScoreCombiner(
            sensitivity=settings.sensitivity,
            enable_ml=settings.enable_ml,
            ml_confidence_floor=settings.ml_confidence_floor,
        )
    return _score_combiner


async def analyze_email(
    email: EmailInput,
    trust_store: Optional[TrustStore] = None,
    ml_output: Optional[MLOutput] = None,
    threat_intel: Optional[ThreatIntelSnapshot] = None,
) -> AnalysisResult:
    """
    Convenience function to analyze an email.

    Args:
        email: Message to analyze
        trust_store: Optional sender history
        ml_output: Optional external classifier vote
        threat_intel: Optional known-bad indicators

    Returns:
        AnalysisResult
    """
    combiner = get_score_combiner()
    return await combiner.combine(email, trust_store, ml_output, threat_intel)
