"""
PhishSense HTML Rules

Obfuscation markers (hidden text, forms, scripts, embeds, encodings) and
anchors whose visible text shows a different domain than their target.
"""

import re
from typing import List

from ....models.email import EmailInput
from ...stores.patterns import PatternSet
from ....utils.helpers import extract_domain_from_url, registrable_domain
from .base import DetectionRule, RuleMatch, register_rule

ANCHOR_PATTERN = re.compile(
    r'<a\b[^>]*?href\s*=\s*["\']([^"\']+)["\'][^>]*>(.*?)</a\s*>',
    re.IGNORECASE | re.DOTALL,
)
TAG_PATTERN = re.compile(r'<[^>]+>')
DOMAIN_TEXT_PATTERN = re.compile(r'^(?:https?://)?[\w-]+(?:\.[\w-]+)+(?:[/:?#]\S*)?$', re.IGNORECASE)


def indicator_pattern(indicator: str) -> "re.Pattern":
    """Indicator matcher tolerant of spaces around colons."""
    return re.compile(re.escape(indicator).replace(":", r"\s*:\s*"), re.IGNORECASE)


@register_rule
class HtmlObfuscationRule(DetectionRule):
    """Hidden content and active HTML in the body."""

    rule_id = "HTML-001"
    name = "HTML Obfuscation"
    description = "HTML element detected"
    group = "html"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        body = email.body or ""
        matches = []
        for indicator_type, indicators in patterns.html_indicators.items():
            for indicator in indicators:
                hits = list(indicator_pattern(indicator).finditer(body))
                if not hits:
                    continue
                matches.append(self.create_match(
                    patterns,
                    "html_obfuscation",
                    evidence=indicator,
                    count=len(hits),
                    start_index=hits[0].start(),
                    description_override=f"HTML element detected ({indicator_type.replace('_', ' ')})",
                ))
        return matches


@register_rule
class AnchorMismatchRule(DetectionRule):
    """Visible link text naming one domain while the href goes to another."""

    rule_id = "HTML-002"
    name = "Deceptive Link Text"
    description = "Link text does not match its destination"
    group = "html"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        body = email.body or ""
        matches = []
        seen = set()

        for anchor in ANCHOR_PATTERN.finditer(body):
            href = anchor.group(1).strip()
            text = TAG_PATTERN.sub('', anchor.group(2)).strip()
            if not href.lower().startswith(('http://', 'https://')):
                continue
            if not text or not DOMAIN_TEXT_PATTERN.match(text):
                continue

            shown = extract_domain_from_url(text)
            target = extract_domain_from_url(href)
            if not shown or not target:
                continue
            if registrable_domain(shown) == registrable_domain(target):
                continue

            key = (shown, target)
            if key in seen:
                continue
            seen.add(key)

            matches.append(self.create_match(
                patterns,
                "link_mismatch",
                evidence=f"{shown} -> {target}",
                start_index=anchor.start(),
            ))

        return matches
