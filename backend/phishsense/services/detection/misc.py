"""
PhishSense Content Hygiene Signals

Small stylistic tells that carry little weight on their own: a shouted
subject, piles of exclamation marks, generic greetings, link floods.
"""

from typing import Optional

from ...config.scoring import MiscScoring, get_scoring_config
from ...models.detection import Finding, MiscDetails, Severity
from ...models.email import EmailInput
from ...utils.constants import GENERIC_GREETINGS
from ...utils.helpers import extract_urls
from .base import Detector, DetectorResult, clamp_score


class MiscDetector(Detector):
    """Content hygiene."""

    name = "misc"
    details_model = MiscDetails

    def __init__(self, scoring: Optional[MiscScoring] = None):
        super().__init__()
        self.scoring = scoring or get_scoring_config().misc

    async def evaluate(self, email: EmailInput) -> DetectorResult:
        subject = email.subject or ""
        body = email.body or ""
        details = MiscDetails()
        findings = []
        points = 0

        letters = [ch for ch in subject if ch.isalpha()]
        if len(letters) >= self.scoring.shouting_min_letters:
            upper_ratio = sum(ch.isupper() for ch in letters) / len(letters)
            if upper_ratio >= self.scoring.shouting_ratio:
                details.signals.append("shouting-subject")
                points += self.scoring.shouting_subject_points
                findings.append(Finding(
                    text="Subject is written mostly in capitals",
                    severity=Severity.LOW,
                    category="style",
                ))

        details.exclamation_count = subject.count("!") + body.count("!")
        if details.exclamation_count >= self.scoring.exclamation_limit:
            details.signals.append("exclamation-marks")
            points += self.scoring.exclamation_points
            findings.append(Finding(
                text=f"Excessive exclamation marks ({details.exclamation_count})",
                severity=Severity.LOW,
                category="style",
            ))

        lowered = body.lower()
        for greeting in GENERIC_GREETINGS:
            position = lowered.find(greeting)
            if position >= 0:
                details.signals.append("generic-greeting")
                points += self.scoring.generic_greeting_points
                findings.append(Finding(
                    text=f"Generic greeting: \"{body[position:position + len(greeting)]}\"",
                    severity=Severity.LOW,
                    category="style",
                    start_index=position,
                ))
                break

        details.link_count = len(extract_urls(body))
        if details.link_count >= self.scoring.link_flood_limit:
            details.signals.append("link-flood")
            points += self.scoring.link_flood_points
            findings.append(Finding(
                text=f"Message contains {details.link_count} links",
                severity=Severity.LOW,
                category="style",
            ))

        return DetectorResult(score=clamp_score(points), findings=findings, details=details)
