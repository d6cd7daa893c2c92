"""
PhishSense Behavior Tracker Tests

Tests for sender history scoring and the trust adjustment.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SENDER = 'Jane Park <jane@acmecorp.com>'


def make_store(behavior=None, trusted=None):
    from phishsense.services.stores.trust import TrustStoreSnapshot
    return TrustStoreSnapshot(behavior or [], trusted or [])


def history(**kwargs):
    from phishsense.models.trust import BehaviorRecord

    defaults = {
        'sender': 'jane@acmecorp.com',
        'total_emails': 10,
        'safe_count': 10,
        'first_seen': NOW - timedelta(days=400),
        'last_seen': NOW - timedelta(days=3),
    }
    defaults.update(kwargs)
    return BehaviorRecord(**defaults)


def evaluate(store, sender=SENDER):
    from phishsense.services.detection.behavior import BehaviorTracker
    return asyncio.run(BehaviorTracker().evaluate(sender, store, now=NOW))


class TestBehaviorTracker:
    """Tests for sender history."""

    def test_no_store_degrades(self):
        result = evaluate(None)

        assert not result.available
        assert result.bonus == 0
        assert result.details.reason == 'no-trust-store'

    def test_first_contact(self):
        """No history: moderate score and a positive adjustment."""
        result = evaluate(make_store())

        assert result.available
        assert result.score == 60
        assert result.bonus == 15
        assert result.details.is_first_interaction
        assert result.details.total_interactions == 0
        assert [f.category for f in result.findings] == ['first_contact']

    def test_first_contact_with_trusted_record(self):
        from phishsense.models.trust import TrustedRecord

        result = evaluate(make_store(trusted=[TrustedRecord(sender='jane@acmecorp.com')]))

        assert result.score == 0
        assert result.bonus == -20
        assert result.details.trusted_sender

    def test_frequent_safe_sender(self):
        result = evaluate(make_store([history()]))

        assert result.score == 0
        assert result.bonus == -15
        assert result.details.trusted_sender
        assert result.details.safe_interactions == 10
        assert result.details.days_since_last_interaction == 3
        assert not result.details.is_first_interaction

    def test_trust_bonus_capped(self):
        """Trusted record plus safe history stays within the cap."""
        from phishsense.models.trust import TrustedRecord

        store = make_store([history()], [TrustedRecord(sender='jane@acmecorp.com')])
        result = evaluate(store)

        assert result.bonus == -30

    def test_phishing_history(self):
        result = evaluate(make_store([history(total_emails=4, safe_count=2, phishing_count=2)]))

        # 30 base + 70 * 0.5
        assert result.score == pytest.approx(65.0)
        assert result.bonus == 0
        assert not result.details.trusted_sender
        assert result.details.phishing_interactions == 2

    def test_phishing_history_blocks_trust(self):
        from phishsense.models.trust import TrustedRecord

        store = make_store(
            [history(total_emails=10, safe_count=9, phishing_count=1)],
            [TrustedRecord(sender='jane@acmecorp.com')],
        )
        result = evaluate(store)

        assert result.bonus == 0
        assert not result.details.trusted_sender

    def test_suspicious_ratio(self):
        result = evaluate(make_store([history(total_emails=4, safe_count=3, suspicious_count=1)]))

        assert result.score == pytest.approx(6.25)
        # suspicious history rules out the frequent-safe bonus
        assert result.bonus == 0

    def test_dormant_sender(self):
        record = history(last_seen=NOW - timedelta(days=200))
        result = evaluate(make_store([record]))

        assert result.score == 10
        assert result.details.days_since_last_interaction == 200

    def test_domain_fallback(self):
        """History recorded for a domain applies to its addresses."""
        record = history(sender='acmecorp.com')
        result = evaluate(make_store([record]), sender='new.person@acmecorp.com')

        assert result.details.total_interactions == 10
        assert result.details.trusted_sender

    def test_domain_scoped_trust_entry(self):
        """A trust entry with a domain covers other addresses on that domain."""
        from phishsense.models.trust import TrustedRecord

        store = make_store(trusted=[TrustedRecord(sender='alice@acme.com', domain='acme.com')])
        result = evaluate(store, sender='bob@acme.com')

        assert result.details.trusted_sender
        assert result.bonus == -20

    def test_unconfirmed_trust_entry_ignored(self):
        from phishsense.models.trust import TrustedRecord

        store = make_store(trusted=[TrustedRecord(sender='jane@acmecorp.com', confirmation_count=0)])
        result = evaluate(store)

        assert not result.details.trusted_sender
        assert result.bonus == 15
        assert result.score == 60

    @pytest.mark.parametrize('confirmations,trusted', [(2, False), (3, True)])
    def test_confirmation_threshold(self, confirmations, trusted):
        from phishsense.config.scoring import BehaviorScoring
        from phishsense.models.trust import TrustedRecord
        from phishsense.services.detection.behavior import BehaviorTracker

        tracker = BehaviorTracker(scoring=BehaviorScoring(trusted_confirmation_threshold=3))
        store = make_store(
            [history(safe_count=1, total_emails=1)],
            [TrustedRecord(sender='jane@acmecorp.com', confirmation_count=confirmations)],
        )
        result = asyncio.run(tracker.evaluate(SENDER, store, now=NOW))

        assert result.details.trusted_sender is trusted
        assert result.bonus == (-20 if trusted else 0)


class TestTrustStore:
    """Tests for the trust store snapshot."""

    def test_lookup_is_case_insensitive(self):
        store = make_store([history(sender='Jane@AcmeCorp.com')])
        assert store.get_behavior_snapshot('JANE@acmecorp.com') is not None

    def test_is_sender_trusted(self):
        from phishsense.models.trust import TrustedRecord

        store = make_store(trusted=[TrustedRecord(sender='acmecorp.com', confirmation_count=3)])
        assert store.is_sender_trusted('Billing <billing@acmecorp.com>')
        assert not store.is_sender_trusted('someone@northwindtraders.com')

    def test_empty_sender_rejected(self):
        from phishsense.models.trust import BehaviorRecord
        from phishsense.utils.exceptions import StoreError

        with pytest.raises(StoreError):
            make_store([BehaviorRecord(sender='  ')])

    def test_len(self):
        from phishsense.models.trust import TrustedRecord

        store = make_store([history()], [TrustedRecord(sender='acmecorp.com')])
        assert len(store) == 2

    def test_domain_entry_does_not_replace_exact_entry(self):
        from phishsense.models.trust import TrustedRecord

        exact = TrustedRecord(sender='acme.com', confirmation_count=5)
        scoped = TrustedRecord(sender='alice@acme.com', domain='acme.com', confirmation_count=1)
        store = make_store(trusted=[exact, scoped])

        assert store.get_trusted_record('bob@acme.com') is exact
        assert store.get_trusted_record('alice@acme.com') is scoped
        assert len(store) == 2

    def test_is_sender_trusted_min_confirmations(self):
        from phishsense.models.trust import TrustedRecord

        store = make_store(trusted=[TrustedRecord(sender='jane@acmecorp.com', confirmation_count=2)])
        assert store.is_sender_trusted('jane@acmecorp.com', min_confirmations=2)
        assert not store.is_sender_trusted('jane@acmecorp.com', min_confirmations=3)
