"""
PhishSense Keyword Rules

Phrase matching over subject and body for the keyword categories
(credential, urgency, threat, reward, financial and custom).
"""

import re
from functools import lru_cache
from typing import List

from ....models.email import EmailInput
from ...stores.patterns import PatternSet
from .base import DetectionRule, RuleMatch, register_rule


@lru_cache(maxsize=2048)
def phrase_pattern(phrase: str) -> "re.Pattern":
    """Whole-phrase matcher; the phrase may not sit inside a longer word."""
    return re.compile(rf'(?<!\w){re.escape(phrase)}(?!\w)', re.IGNORECASE)


@register_rule
class KeywordRule(DetectionRule):
    """Suspicious phrases from every keyword category."""

    rule_id = "KEY-001"
    name = "Suspicious Keywords"
    description = "Suspicious keyword found"
    group = "keyword"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        subject = email.subject or ""
        body = email.body or ""
        matches = []

        for category in patterns.keyword_categories.values():
            for phrase in category.patterns:
                regex = phrase_pattern(phrase)
                subject_hits = len(regex.findall(subject))
                body_hits = list(regex.finditer(body))
                count = subject_hits + len(body_hits)
                if not count:
                    continue

                matches.append(RuleMatch(
                    rule_id=self.rule_id,
                    group=self.group,
                    category=category.name,
                    severity=category.severity_for(phrase),
                    weight=category.weight_for(phrase),
                    description=f"Suspicious {category.name} keyword",
                    evidence=phrase,
                    count=count,
                    start_index=body_hits[0].start() if body_hits else None,
                ))

        return matches
