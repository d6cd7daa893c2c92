"""
PhishSense Link and Sender Domain Rules

URL classification (known-bad hosts, IP literals, shorteners, risky TLDs),
sender domain checks, and links that borrow a brand name they do not own.
"""

import re
from typing import List, Dict, Tuple

from ....models.email import EmailInput
from ...stores.patterns import PatternSet
from ....utils.helpers import (
    iter_urls,
    extract_domain_from_url,
    extract_email_parts,
    domain_matches,
    is_ip_address,
)
from .base import DetectionRule, RuleMatch, register_rule

# Brand labels shorter than this are too ambiguous to match inside a host
MIN_BRAND_TOKEN = 4


def collect_urls(body: str) -> Dict[str, Tuple[str, int, int]]:
    """Distinct URLs keyed by lowercase form: (url, first offset, count)."""
    urls: Dict[str, Tuple[str, int, int]] = {}
    for url, start in iter_urls(body):
        key = url.lower()
        if key in urls:
            original, first, count = urls[key]
            urls[key] = (original, first, count + 1)
        else:
            urls[key] = (url, start, 1)
    return urls


def is_trusted_url(url: str, patterns: PatternSet) -> bool:
    lowered = url.lower()
    return any(lowered.startswith(prefix) for prefix in patterns.trusted_url_prefixes)


@register_rule
class SuspiciousUrlRule(DetectionRule):
    """Classify each distinct link in the body."""

    rule_id = "URL-001"
    name = "Suspicious Links"
    description = "Suspicious URL"
    group = "url"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        matches = []

        for url, start, count in collect_urls(email.body or "").values():
            if is_trusted_url(url, patterns):
                matches.append(self.create_trusted_match(url, "Trusted URL"))
                continue

            host = extract_domain_from_url(url)
            if not host:
                continue

            category, reason = self._classify(url, host, patterns)
            if category is None:
                continue

            matches.append(self.create_match(
                patterns,
                category,
                evidence=url,
                count=count,
                start_index=start,
                description_override=f"Suspicious URL ({reason})",
            ))

        return matches

    @staticmethod
    def _classify(url: str, host: str, patterns: PatternSet):
        """First matching category for a link, strongest signal first."""
        if domain_matches(host, list(patterns.suspicious_domains)):
            return "suspicious_domain", "matches known suspicious domain"
        if is_ip_address(host):
            return "ip_url", "raw IP address instead of a domain"
        if domain_matches(host, list(patterns.shorteners)):
            return "url_shortener", "uses URL shortener service"
        if any(host.endswith(tld) for tld in patterns.suspicious_tlds):
            return "suspicious_tld", "high-abuse top-level domain"
        lowered = url.lower()
        if any(keyword in lowered for keyword in patterns.suspicious_url_keywords):
            return "suspicious_url", "contains suspicious keywords in URL"
        return None, None


@register_rule
class SenderDomainRule(DetectionRule):
    """Sender domain on a blocklist or written as an IP literal."""

    rule_id = "DOM-001"
    name = "Sender Domain"
    description = "Suspicious sender domain"
    group = "domain"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        _, address, domain = extract_email_parts(email.sender or "")
        if not domain:
            return []

        if domain_matches(domain, list(patterns.trusted_domains)):
            return [self.create_trusted_match(domain, "Trusted sender domain recognized")]

        if domain_matches(domain, list(patterns.suspicious_domains)):
            return [self.create_match(
                patterns, "suspicious_domain", evidence=domain,
                description_override="Suspicious sender domain",
            )]

        if is_ip_address(domain):
            return [self.create_match(
                patterns, "sender_ip", evidence=address or domain,
                description_override="IP address in sender email",
            )]

        return []


@register_rule
class BrandLinkMismatchRule(DetectionRule):
    """Links whose host names a brand but is not one of its domains."""

    rule_id = "DOM-002"
    name = "Brand Link Mismatch"
    description = "Link uses a brand name on a domain the brand does not own"
    group = "domain"

    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        matches = []

        for url, start, count in collect_urls(email.body or "").values():
            if is_trusted_url(url, patterns):
                continue
            host = extract_domain_from_url(url)
            if not host or is_ip_address(host):
                continue

            tokens = set(re.split(r'[.\-]', host))
            for brand in patterns.brands:
                if domain_matches(host, list(brand.domains)):
                    break
                named = [label for label in brand.labels if len(label) >= MIN_BRAND_TOKEN and label in tokens]
                if named:
                    matches.append(self.create_match(
                        patterns,
                        "domain_mismatch",
                        evidence=host,
                        count=count,
                        start_index=start,
                        description_override=f"Link names {brand.name} but points elsewhere",
                    ))
                    break

        return matches
