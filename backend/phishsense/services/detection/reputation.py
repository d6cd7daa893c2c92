"""
PhishSense Reputation Analyzer

Sender reputation from the From field alone (plus caller-supplied threat
intelligence):
- lookalike and homoglyph imitation of known brands
- display names that claim a brand the address does not belong to
- structural oddities in the domain (mixed scripts, hyphens, digits, TLD)

Known-safe domains score zero and skip the structural checks.
"""

import re
from typing import List, Optional

from ...config.scoring import ReputationScoring, get_scoring_config
from ...models.detection import Finding, ReputationDetails, Severity
from ...models.email import EmailInput, ThreatIntelSnapshot
from ...utils.helpers import (
    extract_email_parts,
    extract_emails,
    domain_matches,
    registrable_domain,
    top_level_domain,
    iter_urls,
    extract_domain_from_url,
)
from ..stores.patterns import PatternStore, PatternSet, BrandProfile, get_default_pattern_store
from .base import Detector, DetectorResult, clamp_score
from .lookalike import find_lookalike, lookalike_points, decode_punycode, scripts_in

LOOKALIKE_TEXT = {
    "homoglyph": "Sender domain {domain} uses look-alike characters to imitate {legit}",
    "numeric_substitution": "Sender domain {domain} swaps letters for digits to imitate {legit}",
    "edit_distance": "Sender domain {domain} is {distance} edit(s) away from {legit}",
    "embedded_brand": "Sender domain {domain} uses the {brand} name but is not a {brand} domain",
}


class ReputationAnalyzer(Detector):
    """Sender address, domain and display-name checks."""

    name = "reputation"
    details_model = ReputationDetails

    def __init__(
        self,
        pattern_store: Optional[PatternStore] = None,
        scoring: Optional[ReputationScoring] = None,
    ):
        super().__init__()
        self.pattern_store = pattern_store or get_default_pattern_store()
        self.scoring = scoring or get_scoring_config().reputation

    async def evaluate(
        self,
        email: EmailInput,
        threat_intel: Optional[ThreatIntelSnapshot] = None,
    ) -> DetectorResult:
        """
        Score the sender.

        Args:
            email: Message under analysis
            threat_intel: Optional known-bad domains and URLs

        Returns:
            DetectorResult with ReputationDetails; degraded when the
            sender has no usable address
        """
        display_name, address, domain = extract_email_parts(email.sender or "")
        if not address or not domain:
            self.logger.debug(f"No sender address in: {email.sender!r}")
            return self.degraded("no-sender-address")

        patterns = self.pattern_store.get_patterns()
        details = ReputationDetails(email_address=address, domain=domain, display_name=display_name)
        findings: List[Finding] = []
        points = 0

        safe_brand = next((b for b in patterns.brands if domain_matches(domain, list(b.domains))), None)
        trusted = safe_brand is not None or domain_matches(domain, list(patterns.trusted_domains))

        if trusted:
            details.trusted_domain = True
            if safe_brand:
                details.matched_brand = safe_brand.name
                details.lookalike_distance = 0
            findings.append(Finding(
                text=f"Sender domain is a known legitimate domain: {domain}",
                severity=Severity.LOW,
                category="trusted",
            ))
        else:
            points += self._check_lookalike(domain, patterns, details, findings)
            points += self._check_domain_structure(domain, patterns, details, findings)
            points += self._check_display_name(display_name, address, domain, patterns, details, findings)

        if threat_intel:
            points += self._check_threat_intel(domain, email.body or "", threat_intel, details, findings)

        score = clamp_score(points)
        self.logger.debug(f"Reputation for {domain}: {score} (brand={details.matched_brand})")
        return DetectorResult(score=score, findings=findings, details=details)

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_lookalike(self, domain, patterns: PatternSet, details: ReputationDetails, findings) -> int:
        match = find_lookalike(domain, patterns.brands, self.scoring)
        if not match:
            return 0

        details.matched_brand = match.brand
        details.lookalike_distance = match.distance
        details.suspicious_tokens.append(f"lookalike:{match.method}")
        for ch in match.substitutions:
            details.suspicious_tokens.append(f"substitution:{ch}")

        findings.append(Finding(
            text=LOOKALIKE_TEXT[match.method].format(
                domain=domain,
                legit=match.legitimate_domain,
                distance=match.distance,
                brand=match.brand,
            ),
            severity=Severity.HIGH,
            category="lookalike",
        ))
        return lookalike_points(match, self.scoring)

    def _check_domain_structure(self, domain, patterns: PatternSet, details: ReputationDetails, findings) -> int:
        points = 0
        decoded = decode_punycode(domain)
        label = registrable_domain(decoded).split('.')[0]

        scripts = scripts_in(decoded)
        is_punycode = any(part.startswith('xn--') for part in domain.split('.'))
        if len(scripts) > 1 or is_punycode:
            token = "mixed-script" if len(scripts) > 1 else "punycode"
            details.suspicious_tokens.append(token)
            points += self.scoring.suspicious_unicode
            findings.append(Finding(
                text=f"Sender domain mixes character sets ({', '.join(scripts) or 'punycode'})",
                severity=Severity.MEDIUM,
                category="homoglyph",
            ))

        if label.count('-') >= self.scoring.hyphen_limit:
            details.suspicious_tokens.append("excessive-hyphens")
            points += self.scoring.excessive_hyphens
            findings.append(Finding(
                text=f"Sender domain has many hyphens: {domain}",
                severity=Severity.LOW,
                category="domain_structure",
            ))

        digit_count = sum(ch.isdigit() for ch in label)
        if digit_count >= self.scoring.digit_limit:
            details.suspicious_tokens.append("excessive-digits")
            points += self.scoring.excessive_digits
            findings.append(Finding(
                text=f"Sender domain has many digits: {domain}",
                severity=Severity.LOW,
                category="domain_structure",
            ))

        tld = top_level_domain(decoded)
        if tld and tld not in patterns.common_tlds:
            details.suspicious_tokens.append(f"uncommon-tld:.{tld}")
            points += self.scoring.uncommon_tld
            findings.append(Finding(
                text=f"Sender uses an uncommon top-level domain: .{tld}",
                severity=Severity.LOW,
                category="domain_structure",
            ))

        return points

    def _check_display_name(self, display_name, address, domain, patterns: PatternSet, details, findings) -> int:
        if not display_name:
            return 0
        points = 0
        lowered = display_name.lower()

        for brand in patterns.brands:
            if not self._names_brand(lowered, brand):
                continue
            if domain_matches(domain, list(brand.domains)):
                continue
            details.suspicious_tokens.append(f"display-name-brand:{brand.key}")
            if details.matched_brand is None:
                details.matched_brand = brand.name
            points += self.scoring.display_name_brand_mismatch
            findings.append(Finding(
                text=f"Display name mentions {brand.name} but the address is {address}",
                severity=Severity.HIGH,
                category="impersonation",
            ))
            break

        embedded = [e.lower() for e in extract_emails(display_name)]
        if any(e != address for e in embedded):
            details.suspicious_tokens.append("display-name-address")
            points += self.scoring.display_email_mismatch
            findings.append(Finding(
                text=f"Display name shows a different address than the sender ({embedded[0]})",
                severity=Severity.MEDIUM,
                category="impersonation",
            ))

        return points

    @staticmethod
    def _names_brand(text: str, brand: BrandProfile) -> bool:
        names = {brand.name.lower(), *brand.keywords}
        return any(re.search(rf'(?<!\w){re.escape(n)}(?!\w)', text) for n in names if n)

    def _check_threat_intel(self, domain, body, intel: ThreatIntelSnapshot, details, findings) -> int:
        points = 0
        bad_domains = [d.lower() for d in intel.malicious_domains]
        bad_urls = {u.lower() for u in intel.malicious_urls}

        if domain_matches(domain, bad_domains):
            details.threat_intel_hits.append(domain)
            points += self.scoring.threat_intel_domain
            findings.append(Finding(
                text=f"Sender domain is on a threat-intelligence list: {domain}",
                severity=Severity.HIGH,
                category="threat_intel",
            ))

        for url, start in iter_urls(body):
            host = extract_domain_from_url(url)
            if url.lower() in bad_urls or (host and domain_matches(host, bad_domains)):
                details.threat_intel_hits.append(url)
                points += self.scoring.threat_intel_url
                findings.append(Finding(
                    text=f"Link matches threat intelligence: {url}",
                    severity=Severity.HIGH,
                    category="threat_intel",
                    start_index=start,
                ))
                break

        return points
