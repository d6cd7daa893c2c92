"""
PhishSense Rule Detector

Runs the registered content rules over subject and body and folds their
matches into one saturating 0-100 sub-score.

Points accumulate per category (each category counts at most
`match_cap` occurrences) and saturate as

    score = 100 * (1 - exp(-raw_points / saturation_points))

so adding matches never lowers the score and no finite body reaches 100.
"""

import asyncio
import math
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ...config.scoring import RuleScoring, get_scoring_config
from ...models.detection import Finding, RuleDetails, Severity
from ...models.email import EmailInput
from ..stores.patterns import PatternStore, get_default_pattern_store
from .base import Detector, DetectorResult, clamp_score
from .rules import DetectionRule, RuleMatch, rule_registry, RULE_GROUPS


class RuleDetector(Detector):
    """Keyword, link, domain, attachment and HTML heuristics."""

    name = "rules"
    details_model = RuleDetails

    def __init__(
        self,
        pattern_store: Optional[PatternStore] = None,
        scoring: Optional[RuleScoring] = None,
        rules: Optional[List[DetectionRule]] = None,
    ):
        super().__init__()
        self.pattern_store = pattern_store or get_default_pattern_store()
        self.scoring = scoring or get_scoring_config().rules
        self.rules = rules if rules is not None else rule_registry.get_all_rules()
        self.logger.info(f"Rule detector initialized with {len(self.rules)} rules")

    async def evaluate(self, email: EmailInput) -> DetectorResult:
        """
        Evaluate every rule against the email.

        Args:
            email: Message under analysis

        Returns:
            DetectorResult with RuleDetails
        """
        if not (email.body or "").strip():
            return DetectorResult(score=0.0, details=RuleDetails(reason="empty-body"))

        patterns = self.pattern_store.get_patterns()
        outcomes = await asyncio.gather(
            *[rule.evaluate(email, patterns) for rule in self.rules],
            return_exceptions=True,
        )

        matches: List[RuleMatch] = []
        for rule, outcome in zip(self.rules, outcomes):
            if isinstance(outcome, Exception):
                self.logger.error(f"Rule {rule.rule_id} failed: {outcome}")
                continue
            matches.extend(outcome)

        details = self._score(matches)
        score = clamp_score(100.0 * (1.0 - math.exp(-details.raw_points / self.scoring.saturation_points)))

        self.logger.debug(
            f"Rules: {details.match_count} matches, {details.raw_points:.1f} raw points, score {score:.1f}"
        )
        return DetectorResult(
            score=round(score, 2),
            findings=[self._to_finding(m) for m in matches],
            details=details,
        )

    def _score(self, matches: List[RuleMatch]) -> RuleDetails:
        """Cap each category at its strongest `match_cap` occurrences."""
        occurrences: Dict[str, List[Tuple[float, str]]] = defaultdict(list)
        for match in matches:
            if match.trusted:
                continue
            occurrences[match.category].extend([(match.points, match.group)] * match.count)

        category_points: Dict[str, float] = {}
        group_points: Dict[str, float] = {group: 0.0 for group in RULE_GROUPS}
        for category, items in occurrences.items():
            kept = sorted(items, key=lambda item: item[0], reverse=True)[:self.scoring.match_cap]
            category_points[category] = sum(points for points, _ in kept)
            for points, group in kept:
                group_points[group] = group_points.get(group, 0.0) + points

        return RuleDetails(
            raw_points=sum(category_points.values()),
            match_count=sum(m.count for m in matches if not m.trusted),
            category_points=category_points,
            keyword_points=group_points["keyword"],
            url_points=group_points["url"],
            domain_points=group_points["domain"],
            attachment_points=group_points["attachment"],
            html_points=group_points["html"],
        )

    @staticmethod
    def _to_finding(match: RuleMatch) -> Finding:
        text = f"{match.description}: {match.evidence}"
        if match.count > 1:
            text += f" (x{match.count})"
        return Finding(
            text=text,
            severity=Severity(match.severity),
            category=match.category,
            start_index=match.start_index,
        )
