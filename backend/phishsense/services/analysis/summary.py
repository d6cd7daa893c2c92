"""
PhishSense Verdict Summary

One templated sentence naming the verdict and its dominant factor,
followed by any additive adjustments and detectors that did not run.
"""

from typing import Dict, List

from ...models.analysis import RiskLevel, ScoreAdjustment
from ...models.detection import Finding, SEVERITY_RANK
from ...utils.constants import DETECTOR_ORDER

LEVEL_PHRASES = {
    RiskLevel.HIGH: "Likely phishing",
    RiskLevel.MEDIUM: "Suspicious",
    RiskLevel.LOW: "Likely safe",
}

FACTOR_NAMES = {
    "rules": "suspicious content",
    "headers": "weak email authentication",
    "reputation": "sender reputation",
    "behavior": "sender history",
    "ml": "the ML model's assessment",
    "misc": "message style",
}


def dominant_detector(points: Dict[str, float]) -> str:
    """Detector with the largest contribution; ties go to the earlier detector."""
    best = None
    for name in DETECTOR_ORDER:
        value = points.get(name, 0.0)
        if value > 0 and (best is None or value > points[best]):
            best = name
    return best


def top_finding(findings: List[Finding]) -> Finding:
    """Highest-severity finding, first one wins ties."""
    ranked = [f for f in findings if f.category not in ("trusted", "trusted_sender")]
    if not ranked:
        return None
    return max(ranked, key=lambda f: SEVERITY_RANK[f.severity.value])


def build_summary(
    risk_level: RiskLevel,
    points: Dict[str, float],
    findings_by_detector: Dict[str, List[Finding]],
    adjustments: List[ScoreAdjustment],
    unavailable: List[str],
) -> str:
    """
    Build the verdict sentence.

    Args:
        risk_level: Final risk level
        points: Percentage points per detector
        findings_by_detector: Findings grouped by detector name
        adjustments: Additive adjustments applied after the weighted sum
        unavailable: Detectors that returned a degraded result

    Returns:
        Summary text
    """
    adjustment_points = {a.source: a.points for a in adjustments}
    auth = adjustment_points.get("authentication", 0)
    trust = adjustment_points.get("trust", 0)

    dominant = dominant_detector(points)
    auth_relief = -min(auth, 0)
    trust_relief = -min(trust, 0)

    if dominant is not None and points[dominant] > max(auth_relief, trust_relief):
        factor = FACTOR_NAMES[dominant]
        finding = top_finding(findings_by_detector.get(dominant, []))
        if finding is not None:
            factor += f" ({finding.category.replace('_', ' ')})"
    elif auth_relief > 0 and auth_relief >= trust_relief:
        factor = "strong authentication"
    elif trust_relief > 0:
        factor = "trusted sender history"
    else:
        factor = "no significant risk signals"

    sentence = f"{LEVEL_PHRASES[risk_level]}: mainly {factor}."

    if adjustments:
        parts = [f"{a.source} {a.points:+d} ({a.reason})" for a in adjustments]
        sentence += " Adjustments: " + "; ".join(parts) + "."

    if unavailable:
        sentence += " Not evaluated: " + ", ".join(unavailable) + "."

    return sentence
