"""
PhishSense Derived Records

Values built from an AnalysisResult for collaborators: the scan-history
row and the legitimacy snapshot shown next to a verdict.
"""

import re
from typing import List, Optional

from ...config.scoring import get_scoring_config
from ...models.analysis import AnalysisResult, ScanRecord, LegitimacySnapshot
from ...models.email import EmailInput
from ...utils.helpers import extract_email_parts, extract_urls
from ..stores.patterns import PatternStore, get_default_pattern_store
from ..stores.trust import TrustStore

REPEAT_SUFFIX = re.compile(r'\s*\(x\d+\)$')

# ML vote that supports a legitimate verdict
ML_SUPPORT_MAX_SCORE = 40.0
ML_SUPPORT_MIN_CONFIDENCE = 0.5


def matched_keywords(result: AnalysisResult, pattern_store: Optional[PatternStore] = None) -> List[str]:
    """Keyword phrases the rule detector matched, in finding order."""
    store = pattern_store or get_default_pattern_store()
    categories = set(store.get_patterns().keyword_categories)
    keywords = []
    for finding in result.findings:
        if finding.category not in categories:
            continue
        phrase = REPEAT_SUFFIX.sub('', finding.text.split(': ', 1)[-1])
        if phrase not in keywords:
            keywords.append(phrase)
    return keywords


def build_scan_record(
    email: EmailInput,
    result: AnalysisResult,
    pattern_store: Optional[PatternStore] = None,
) -> ScanRecord:
    """
    Build the scan-history row for an analysis.

    Args:
        email: Analyzed message
        result: Its analysis result
        pattern_store: Store used to tell keyword findings apart

    Returns:
        ScanRecord
    """
    _, address, _ = extract_email_parts(email.sender or "")
    links = list(dict.fromkeys(extract_urls(email.body or "")))

    ml = result.breakdown.ml
    ml_confidence = ml.details.confidence if ml.available else None

    return ScanRecord(
        subject=email.subject or "",
        body=email.body or "",
        from_email=address or (email.sender or ""),
        risk_score=result.score,
        verdict=result.risk_level,
        keywords=matched_keywords(result, pattern_store),
        links=links,
        ml_confidence=ml_confidence,
    )


def build_legitimacy_snapshot(
    email: EmailInput,
    result: AnalysisResult,
    trust_store: Optional[TrustStore] = None,
) -> LegitimacySnapshot:
    """
    Collect the reasons a message may be legitimate.

    Authentication counts as strong when no mechanism failed and at least
    one passed. The recommendation is "likely-safe" when the user trusts
    the sender or authentication is strong, otherwise "review".
    """
    if trust_store is not None and email.sender:
        trusted_by_user = trust_store.is_sender_trusted(
            email.sender, min_confirmations=get_scoring_config().behavior.trusted_confirmation_threshold
        )
    else:
        trusted_by_user = result.breakdown.behavior.details.trusted_sender

    headers = result.breakdown.headers
    statuses = [headers.details.spf_status, headers.details.dkim_status, headers.details.dmarc_status]
    auth_strong = (
        headers.available
        and all(s in (None, "pass") for s in statuses)
        and any(s == "pass" for s in statuses)
    )

    ml = result.breakdown.ml
    ml_supports = (
        ml.available
        and ml.score < ML_SUPPORT_MAX_SCORE
        and (ml.details.confidence or 0.0) >= ML_SUPPORT_MIN_CONFIDENCE
    )

    reasons = []
    if trusted_by_user:
        reasons.append("Sender is trusted")
    if auth_strong:
        reasons.append("Sender authentication passed")
    if ml_supports:
        reasons.append("ML model rates the message as safe")

    return LegitimacySnapshot(
        trusted_by_user=trusted_by_user,
        auth_strong=auth_strong,
        ml_supports=ml_supports,
        recommendation="likely-safe" if trusted_by_user or auth_strong else "review",
        reasons=reasons,
    )
