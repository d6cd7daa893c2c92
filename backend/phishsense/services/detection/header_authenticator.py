"""
PhishSense Header Authenticator

Reads SPF, DKIM and DMARC outcomes plus routing anomalies from the raw
header block.

Produces two things:
- a 0-100 sub-score (higher = weaker authentication)
- the authentication adjustment the combiner adds to the final score:
  penalty points for failures and absent mechanisms, relief points when
  mechanisms pass. Relief is withheld whenever any mechanism hard-fails.

Missing headers are weak-neutral: every mechanism counts as absent.
Non-empty headers with no parsable field raise HeaderParsingError, which
the combiner turns into a degraded sub-score.
"""

from typing import Dict, List, Optional

from ...config.scoring import HeaderScoring, get_scoring_config
from ...models.detection import Finding, HeaderDetails, AuthSummary, Severity
from ...models.email import EmailInput
from ...utils.constants import AUTH_HARD_FAIL_STATES, AUTH_SOFT_FAIL_STATES, AUTH_NEUTRAL_STATES
from ...utils.helpers import extract_email_parts, extract_domain_from_email, registrable_domain
from ..parser.header_parser import (
    parse_header_block,
    extract_auth_results,
    count_received_hops,
    extract_address,
    find_suspicious_headers,
)
from .base import Detector, DetectorResult, clamp_score

MECHANISMS = ("spf", "dkim", "dmarc")

ANOMALY_TEXT = {
    "user-agent": "Sending client looks automated (User-Agent)",
    "return-path": "Return-Path carries no valid address",
}


def normalize_status(status: Optional[str]) -> Optional[str]:
    """Collapse neutral outcomes into absent (None)."""
    if status is None:
        return None
    status = status.lower()
    if status in AUTH_NEUTRAL_STATES:
        return None
    return status


def is_hard_fail(status: Optional[str]) -> bool:
    return status in AUTH_HARD_FAIL_STATES


class HeaderAuthenticator(Detector):
    """SPF/DKIM/DMARC and routing checks."""

    name = "headers"
    details_model = HeaderDetails

    def __init__(self, scoring: Optional[HeaderScoring] = None):
        super().__init__()
        self.scoring = scoring or get_scoring_config().headers

    async def evaluate(self, email: EmailInput) -> DetectorResult:
        """
        Authenticate the message headers.

        Args:
            email: Message under analysis

        Returns:
            DetectorResult with HeaderDetails

        Raises:
            HeaderParsingError: Header block present but unparsable
        """
        headers = parse_header_block(email.headers or "")
        raw_auth = extract_auth_results(headers)
        statuses = {mech: normalize_status(raw_auth.get(mech)) for mech in MECHANISMS}

        findings: List[Finding] = []
        points = 0
        penalty = 0

        for mech in MECHANISMS:
            mech_points, mech_penalty, finding = self._assess_mechanism(mech, statuses[mech])
            points += mech_points
            penalty += mech_penalty
            if finding:
                findings.append(finding)

        received_count = count_received_hops(headers)
        if received_count > self.scoring.max_normal_hops:
            points += self.scoring.excessive_hops_points
            findings.append(Finding(
                text=f"Unusually long relay chain: {received_count} Received headers",
                severity=Severity.MEDIUM,
                category="routing",
            ))

        suspicious_headers = find_suspicious_headers(headers)
        for header_name in suspicious_headers:
            points += self.scoring.suspicious_header_points
            findings.append(Finding(
                text=ANOMALY_TEXT.get(header_name, f"Suspicious header present: {header_name}"),
                severity=Severity.LOW,
                category="header_anomaly",
            ))

        sender_domain = self._sender_domain(email, headers)
        return_path_mismatch = self._domain_mismatch(sender_domain, extract_address(headers.get("return-path")))
        if return_path_mismatch:
            points += self.scoring.return_path_mismatch_points
            findings.append(Finding(
                text="Return-Path domain differs from From domain",
                severity=Severity.MEDIUM,
                category="header_anomaly",
            ))

        reply_to_mismatch = self._domain_mismatch(sender_domain, extract_address(headers.get("reply-to")))
        if reply_to_mismatch:
            points += self.scoring.reply_to_mismatch_points
            findings.append(Finding(
                text="Reply-To domain differs from From domain",
                severity=Severity.MEDIUM,
                category="header_anomaly",
            ))

        summary = AuthSummary(
            spf_passed=statuses["spf"] == "pass",
            dkim_passed=statuses["dkim"] == "pass",
            dmarc_passed=statuses["dmarc"] == "pass",
        )
        bonus = self._auth_bonus(statuses, summary)
        summary.bonus_applied = bonus > 0

        details = HeaderDetails(
            spf_status=statuses["spf"],
            dkim_status=statuses["dkim"],
            dmarc_status=statuses["dmarc"],
            received_count=received_count,
            suspicious_headers=suspicious_headers,
            return_path_mismatch=return_path_mismatch,
            reply_to_mismatch=reply_to_mismatch,
            auth_positive_bonus=bonus,
            auth_penalty=penalty,
            auth_summary=summary,
        )

        self.logger.debug(
            f"Headers: spf={statuses['spf']} dkim={statuses['dkim']} dmarc={statuses['dmarc']} "
            f"points={points} penalty={penalty} bonus={bonus}"
        )
        return DetectorResult(score=clamp_score(points), findings=findings, details=details)

    def _assess_mechanism(self, mech: str, status: Optional[str]):
        """Sub-score points, adjustment penalty and finding for one mechanism."""
        label = mech.upper()

        if status is None:
            return (
                self.scoring.absent_points,
                self.scoring.absent_penalty,
                Finding(text=f"No {label} result found", severity=Severity.LOW, category="authentication"),
            )

        if is_hard_fail(status):
            fail_points = {
                "spf": self.scoring.spf_fail_points,
                "dkim": self.scoring.dkim_fail_points,
                "dmarc": self.scoring.dmarc_fail_points,
            }[mech]
            return (
                fail_points,
                self.scoring.fail_penalty,
                Finding(text=f"{label} check failed ({status})", severity=Severity.HIGH, category="authentication"),
            )

        if status in AUTH_SOFT_FAIL_STATES:
            return (
                self.scoring.softfail_points,
                self.scoring.softfail_penalty,
                Finding(text=f"{label} soft failure", severity=Severity.MEDIUM, category="authentication"),
            )

        # pass, or a DKIM signature with no recorded verdict
        return 0, 0, None

    def _auth_bonus(self, statuses: Dict[str, Optional[str]], summary: AuthSummary) -> int:
        """Relief for passing mechanisms; none if anything hard-failed."""
        if any(is_hard_fail(s) for s in statuses.values()):
            return 0
        passed = sum([summary.spf_passed, summary.dkim_passed, summary.dmarc_passed])
        bonus = passed * self.scoring.pass_bonus
        if passed == len(MECHANISMS):
            bonus += self.scoring.full_pass_bonus
        return bonus

    @staticmethod
    def _sender_domain(email: EmailInput, headers) -> Optional[str]:
        _, _, domain = extract_email_parts(email.sender or "")
        if domain:
            return domain
        return extract_domain_from_email(extract_address(headers.get("from")) or "")

    @staticmethod
    def _domain_mismatch(sender_domain: Optional[str], other_address: Optional[str]) -> bool:
        if not sender_domain or not other_address:
            return False
        other_domain = extract_domain_from_email(other_address)
        if not other_domain:
            return False
        return registrable_domain(other_domain) != registrable_domain(sender_domain)
