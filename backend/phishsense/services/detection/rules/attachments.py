"""
PhishSense Attachment Rules

Dangerous file names mentioned in the body. Link text is blanked first so
paths inside URLs do not count as attachments.
"""

import re
from typing import List

from ....models.email import EmailInput
from ...stores.patterns import PatternSet
from ....utils.helpers import strip_urls
from .base import DetectionRule, RuleMatch, register_rule


@register_rule
class DangerousAttachmentRule(DetectionRule):
    """File names with executable, script, macro or disk-image extensions."""

    rule_id = "ATT-001"
    name = "Dangerous Attachment"
    description = "Suspicious attachment extension found"
    group = "attachment"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        sanitized = strip_urls(email.body or "")
        matches = []

        for extension in patterns.attachment_extensions:
            regex = re.compile(rf'\b[\w-]+{re.escape(extension)}\b', re.IGNORECASE)
            hits = list(regex.finditer(sanitized))
            if not hits:
                continue
            matches.append(self.create_match(
                patterns,
                "attachment",
                evidence=hits[0].group(0),
                count=len(hits),
                start_index=hits[0].start(),
                description_override=f"Suspicious attachment extension found ({extension})",
            ))

        return matches
