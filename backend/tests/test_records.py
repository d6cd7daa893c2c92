"""
PhishSense Derived Record Tests

Tests for the scan-history record and the legitimacy snapshot.
"""

import asyncio
from datetime import datetime, timezone

from phishsense.models.email import EmailInput, MLOutput

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

PASSING_HEADERS = "Authentication-Results: mx; spf=pass; dkim=pass; dmarc=pass"


def analyze(email, trust_store=None, ml_output=None):
    from phishsense.services.analysis.combiner import ScoreCombiner
    return asyncio.run(ScoreCombiner().combine(email, trust_store, ml_output))


def make_store(trusted_senders=()):
    from phishsense.models.trust import TrustedRecord
    from phishsense.services.stores.trust import TrustStoreSnapshot
    return TrustStoreSnapshot([], [TrustedRecord(sender=s) for s in trusted_senders])


class TestScanRecord:
    """Tests for build_scan_record."""

    def test_record_fields(self):
        from phishsense.services.analysis.records import build_scan_record

        email = EmailInput(
            subject='Action required',
            body='Verify your account at http://bit.ly/abc and http://bit.ly/abc today. Act now.',
            sender='"Support" <support@paypal-support.com>',
            analyzed_at=NOW,
        )
        result = analyze(email, ml_output=MLOutput(score=80, confidence=0.75))
        record = build_scan_record(email, result)

        assert record.from_email == 'support@paypal-support.com'
        assert record.risk_score == result.score
        assert record.verdict == result.risk_level
        assert record.links == ['http://bit.ly/abc']
        assert record.keywords == ['verify your account', 'act now', 'action required']
        assert record.ml_confidence == 0.75

    def test_record_without_ml(self):
        from phishsense.services.analysis.records import build_scan_record

        email = EmailInput(subject='Hello', body='See you soon', sender='Not an address')
        record = build_scan_record(email, analyze(email))

        assert record.ml_confidence is None
        assert record.from_email == 'Not an address'
        assert record.keywords == []
        assert record.links == []


class TestLegitimacySnapshot:
    """Tests for build_legitimacy_snapshot."""

    def test_trusted_and_authenticated(self):
        from phishsense.services.analysis.records import build_legitimacy_snapshot

        email = EmailInput(subject='Hi', body='Notes attached', sender='jane@acmecorp.com', headers=PASSING_HEADERS)
        store = make_store(['jane@acmecorp.com'])
        result = analyze(email, store, MLOutput(score=10, confidence=0.9))
        snapshot = build_legitimacy_snapshot(email, result, store)

        assert snapshot.trusted_by_user
        assert snapshot.auth_strong
        assert snapshot.ml_supports
        assert snapshot.recommendation == 'likely-safe'
        assert len(snapshot.reasons) == 3

    def test_no_headers_needs_review(self):
        from phishsense.services.analysis.records import build_legitimacy_snapshot

        email = EmailInput(subject='Hi', body='Notes attached', sender='alex@northwindtraders.com')
        result = analyze(email, make_store(), MLOutput(score=60, confidence=0.9))
        snapshot = build_legitimacy_snapshot(email, result, make_store())

        assert not snapshot.trusted_by_user
        assert not snapshot.auth_strong
        assert not snapshot.ml_supports
        assert snapshot.recommendation == 'review'
        assert snapshot.reasons == []

    def test_failed_mechanism_is_not_strong(self):
        from phishsense.services.analysis.records import build_legitimacy_snapshot

        email = EmailInput(
            subject='Hi', body='Notes attached', sender='alex@northwindtraders.com',
            headers="Authentication-Results: mx; spf=pass; dkim=fail; dmarc=pass",
        )
        snapshot = build_legitimacy_snapshot(email, analyze(email))
        assert not snapshot.auth_strong

    def test_trust_from_breakdown_without_store(self):
        from phishsense.services.analysis.records import build_legitimacy_snapshot

        email = EmailInput(subject='Hi', body='Notes attached', sender='jane@acmecorp.com')
        result = analyze(email, make_store(['acmecorp.com']))
        snapshot = build_legitimacy_snapshot(email, result)

        assert snapshot.trusted_by_user
        assert snapshot.recommendation == 'likely-safe'

    def test_unconfirmed_trust_entry_not_trusted(self):
        from phishsense.models.trust import TrustedRecord
        from phishsense.services.analysis.records import build_legitimacy_snapshot
        from phishsense.services.stores.trust import TrustStoreSnapshot

        email = EmailInput(subject='Hi', body='Notes attached', sender='jane@acmecorp.com')
        store = TrustStoreSnapshot([], [TrustedRecord(sender='jane@acmecorp.com', confirmation_count=0)])
        snapshot = build_legitimacy_snapshot(email, analyze(email, store), store)

        assert not snapshot.trusted_by_user
        assert snapshot.recommendation == 'review'
