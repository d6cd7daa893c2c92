"""
PhishSense Rule Detector Tests

Tests for the content rules and the saturating rule sub-score.
"""

import asyncio
import math

import pytest

from phishsense.models.email import EmailInput


def create_test_email(**kwargs):
    """Create a test email with default values."""
    defaults = {
        'subject': 'Quarterly update',
        'body': 'Hello team, the notes from today are attached below.',
        'sender': 'Dana Lee <dana@northwindtraders.com>',
    }
    defaults.update(kwargs)
    return EmailInput(**defaults)


def evaluate(email, **kwargs):
    from phishsense.services.detection.rule_detector import RuleDetector
    return asyncio.run(RuleDetector(**kwargs).evaluate(email))


def categories(result):
    return [f.category for f in result.findings]


class TestRuleRegistry:
    """Tests for rule registration."""

    def test_rules_registered(self):
        """Every rule group has at least one rule."""
        from phishsense.services.detection.rules import rule_registry, RULE_GROUPS

        assert len(rule_registry.get_all_rules()) >= 7
        for group in RULE_GROUPS:
            assert rule_registry.get_rules_by_group(group), f"No rules in group: {group}"

    def test_rule_ids_unique(self):
        from phishsense.services.detection.rules import rule_registry

        ids = [r.rule_id for r in rule_registry.get_all_rules()]
        assert len(ids) == len(set(ids))


class TestKeywordRules:
    """Tests for keyword matching."""

    def test_keyword_counts_subject_and_body(self):
        """Occurrences in subject and body are counted together."""
        email = create_test_email(
            subject='Please verify your account',
            body='You must verify your account. Verify your account today.',
        )
        result = evaluate(email)

        credential = [f for f in result.findings if f.category == 'credential']
        assert len(credential) == 1
        assert credential[0].text == 'Suspicious credential keyword: verify your account (x3)'
        assert credential[0].severity.value == 'high'
        # start index points at the first body occurrence
        assert credential[0].start_index == email.body.lower().index('verify your account')

    def test_keyword_respects_word_boundaries(self):
        """A keyword inside a longer word does not match."""
        result = evaluate(create_test_email(body='The urgently needed report is ready.'))
        assert 'urgency' not in categories(result)

    def test_keyword_case_insensitive(self):
        result = evaluate(create_test_email(body='ACTION REQUIRED for your mailbox'))
        assert 'urgency' in categories(result)

    def test_category_match_cap(self):
        """A single category counts at most three occurrences."""
        body = ' '.join(['Verify your account.'] * 5)
        result = evaluate(create_test_email(body=body))

        assert result.details.category_points['credential'] == 75
        assert result.details.raw_points == 75
        assert result.details.match_count == 5

    def test_saturating_score(self):
        """Score follows 100 * (1 - exp(-raw / 35)) and never reaches 100."""
        body = ' '.join(['Verify your account.'] * 5)
        result = evaluate(create_test_email(body=body))

        expected = 100 * (1 - math.exp(-75 / 35))
        assert result.score == pytest.approx(expected, abs=0.01)
        assert result.score < 100

    def test_custom_pattern(self):
        """Custom patterns carry their own weight and severity."""
        from phishsense.models.trust import CustomPattern
        from phishsense.services.stores.patterns import StaticPatternStore

        store = StaticPatternStore(custom_patterns=[
            CustomPattern(keyword='quarterly bonus', category='financial', severity='high', weight=40),
        ])
        result = evaluate(create_test_email(body='Claim the quarterly bonus here'), pattern_store=store)

        finding = next(f for f in result.findings if 'quarterly bonus' in f.text)
        assert finding.category == 'financial'
        assert finding.severity.value == 'high'
        assert result.details.raw_points == 40


class TestLinkRules:
    """Tests for link and sender domain rules."""

    def test_url_shortener(self):
        result = evaluate(create_test_email(body='See http://bit.ly/xyz for details'))

        shortener = [f for f in result.findings if f.category == 'url_shortener']
        assert len(shortener) == 1
        assert shortener[0].severity.value == 'medium'
        assert shortener[0].start_index == 4

    def test_ip_url(self):
        result = evaluate(create_test_email(body='Log in at http://192.168.1.10/login'))
        assert 'ip_url' in categories(result)
        assert 'suspicious_url' not in categories(result)

    def test_known_suspicious_host(self):
        result = evaluate(create_test_email(body='Open https://evil.ngrok.io/x'))
        assert 'suspicious_domain' in categories(result)

    def test_trusted_url_adds_no_points(self):
        result = evaluate(create_test_email(body='Manage it at https://www.paypal.com/myaccount'))

        assert categories(result) == ['trusted']
        assert result.details.raw_points == 0
        assert result.score == 0

    def test_brand_named_on_foreign_host(self):
        """A link naming a brand on a domain the brand does not own."""
        result = evaluate(create_test_email(body='Go to https://paypal.secure-login.xyz/verify'))

        assert 'domain_mismatch' in categories(result)
        assert 'suspicious_tld' in categories(result)

    def test_repeated_url_counted_once_per_occurrence(self):
        body = 'http://bit.ly/a and again http://bit.ly/a'
        result = evaluate(create_test_email(body=body))

        shortener = [f for f in result.findings if f.category == 'url_shortener']
        assert len(shortener) == 1
        assert shortener[0].text.endswith('(x2)')

    def test_sender_ip_literal(self):
        result = evaluate(create_test_email(sender='admin@[192.168.0.1]'))
        assert 'sender_ip' in categories(result)


class TestAttachmentRules:
    """Tests for dangerous attachment names."""

    def test_executable_name(self):
        result = evaluate(create_test_email(body='Open invoice_2024.exe to continue'))

        attachment = [f for f in result.findings if f.category == 'attachment']
        assert len(attachment) == 1
        assert 'invoice_2024.exe' in attachment[0].text
        assert attachment[0].severity.value == 'high'

    def test_technology_names_not_flagged(self):
        result = evaluate(create_test_email(body='We rebuilt the dashboard with node.js last week'))
        assert 'attachment' not in categories(result)

    def test_file_inside_url_not_flagged(self):
        result = evaluate(create_test_email(body='Download from http://example.com/setup.exe'))
        assert 'attachment' not in categories(result)


class TestHtmlRules:
    """Tests for HTML obfuscation and deceptive anchors."""

    def test_hidden_text(self):
        result = evaluate(create_test_email(body='<div style="display: none">secret</div><p>Hi</p>'))

        html = [f for f in result.findings if f.category == 'html_obfuscation']
        assert html
        assert html[0].severity.value == 'low'

    def test_anchor_text_mismatch(self):
        body = '<a href="http://evil.example.net/login">www.paypal.com</a>'
        result = evaluate(create_test_email(body=body))

        mismatch = [f for f in result.findings if f.category == 'link_mismatch']
        assert len(mismatch) == 1
        assert 'paypal.com -> evil.example.net' in mismatch[0].text

    def test_anchor_same_domain_ok(self):
        body = '<a href="https://docs.northwindtraders.com/q3">northwindtraders.com/q3</a>'
        result = evaluate(create_test_email(body=body))
        assert 'link_mismatch' not in categories(result)


class TestRuleDetector:
    """Tests for rule detector behavior as a whole."""

    def test_clean_email(self):
        result = evaluate(create_test_email())

        assert result.score == 0
        assert result.findings == []
        assert result.available

    def test_empty_body(self):
        result = evaluate(create_test_email(body='   '))

        assert result.score == 0
        assert result.details.reason == 'empty-body'

    def test_failing_rule_is_skipped(self):
        """One failing rule does not take the others down."""
        from phishsense.services.detection.rules import DetectionRule
        from phishsense.services.detection.rules.keywords import KeywordRule

        class ExplodingRule(DetectionRule):
            rule_id = "TEST-001"

            async def evaluate(self, email, patterns):
                raise RuntimeError("boom")

        result = evaluate(
            create_test_email(body='Act now'),
            rules=[ExplodingRule(), KeywordRule()],
        )
        assert 'urgency' in categories(result)

    def test_adding_indicator_never_lowers_score(self):
        base = create_test_email(body='Please review the attached notes.')
        more = create_test_email(body=base.body + ' Act now and verify your account.')

        assert evaluate(more).score >= evaluate(base).score
