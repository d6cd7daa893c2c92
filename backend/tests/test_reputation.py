"""
PhishSense Reputation Tests

Tests for lookalike matching and sender reputation scoring.
"""

import asyncio

from phishsense.models.email import EmailInput, ThreatIntelSnapshot


def create_test_email(sender, body='Hello, see you soon.'):
    return EmailInput(subject='Hello', body=body, sender=sender)


def evaluate(email, threat_intel=None):
    from phishsense.services.detection.reputation import ReputationAnalyzer
    return asyncio.run(ReputationAnalyzer().evaluate(email, threat_intel))


def find(domain):
    from phishsense.config.scoring import ReputationScoring
    from phishsense.services.detection.lookalike import find_lookalike
    from phishsense.services.stores.patterns import get_default_pattern_store

    brands = get_default_pattern_store().get_patterns().brands
    return find_lookalike(domain, brands, ReputationScoring())


class TestEditDistance:
    """Tests for the Damerau-Levenshtein distance."""

    def test_basic_operations(self):
        from phishsense.services.detection.lookalike import edit_distance

        assert edit_distance('paypal', 'paypal') == 0
        assert edit_distance('paypal', 'paypall') == 1      # insertion
        assert edit_distance('paypal', 'paypl') == 1        # deletion
        assert edit_distance('paypal', 'paypel') == 1       # substitution
        assert edit_distance('', 'abc') == 3

    def test_transposition_costs_one(self):
        from phishsense.services.detection.lookalike import edit_distance

        assert edit_distance('paypal', 'papyal') == 1
        assert edit_distance('google', 'googel') == 1


class TestLookalike:
    """Tests for brand imitation matching."""

    def test_legitimate_domain_is_not_lookalike(self):
        assert find('paypal.com') is None
        assert find('mail.google.com') is None

    def test_unrelated_domain(self):
        assert find('northwindtraders.com') is None

    def test_misspelling(self):
        match = find('paypa.com')
        assert match.brand == 'PayPal'
        assert match.method == 'edit_distance'
        assert match.distance == 1

    def test_distance_two_for_long_brands(self):
        # 'rn' standing in for 'm'
        match = find('rnicrosoft.com')
        assert match.brand == 'Microsoft'
        assert match.method == 'edit_distance'
        assert match.distance == 2

    def test_distance_two_not_allowed_for_short_brands(self):
        assert find('fadax.com') is None

    def test_numeric_substitution(self):
        match = find('paypa1.com')
        assert match.brand == 'PayPal'
        assert match.method == 'numeric_substitution'
        assert '1' in match.substitutions

    def test_homoglyph(self):
        # Cyrillic 'а' in place of Latin 'a'
        match = find('pаypal.com')
        assert match.brand == 'PayPal'
        assert match.method == 'homoglyph'
        assert 'а' in match.substitutions

    def test_punycode_homoglyph(self):
        punycode = 'pаypal.com'.encode('idna').decode('ascii')
        match = find(punycode)
        assert match is not None
        assert match.method == 'homoglyph'

    def test_embedded_brand(self):
        match = find('paypal-support.com')
        assert match.brand == 'PayPal'
        assert match.method == 'embedded_brand'
        assert match.distance == 0

    def test_brand_on_foreign_suffix(self):
        match = find('paypal.help')
        assert match.method == 'embedded_brand'

    def test_short_words_not_flagged(self):
        assert find('applebees.com') is None
        assert find('mydhlparcel.net') is None


class TestReputationAnalyzer:
    """Tests for the reputation detector."""

    def test_lookalike_sender(self):
        result = evaluate(create_test_email('security@paypal-support.com'))

        assert result.score == 60
        assert result.details.email_address == 'security@paypal-support.com'
        assert result.details.domain == 'paypal-support.com'
        assert result.details.matched_brand == 'PayPal'
        assert result.details.lookalike_distance == 0
        assert any(f.category == 'lookalike' for f in result.findings)

    def test_misspelled_sender(self):
        result = evaluate(create_test_email('billing@paypa.com'))

        assert result.score == 70
        assert result.details.lookalike_distance == 1

    def test_legitimate_brand_sender(self):
        result = evaluate(create_test_email('PayPal <service@paypal.com>'))

        assert result.score == 0
        assert result.details.trusted_domain
        assert result.details.matched_brand == 'PayPal'
        assert result.details.lookalike_distance == 0
        assert [f.category for f in result.findings] == ['trusted']

    def test_display_name_brand_mismatch(self):
        result = evaluate(create_test_email('"PayPal Support" <help@northwindtraders.com>'))

        assert result.score == 45
        assert result.details.display_name == 'PayPal Support'
        assert 'display-name-brand:paypal' in result.details.suspicious_tokens
        assert any(f.category == 'impersonation' for f in result.findings)

    def test_display_name_with_other_address(self):
        result = evaluate(create_test_email('"ceo@acmecorp.com" <ceo.office@northwindtraders.com>'))

        assert 'display-name-address' in result.details.suspicious_tokens
        assert result.score == 25

    def test_domain_structure(self):
        result = evaluate(create_test_email('info@secure-account-update-2024.top'))

        tokens = result.details.suspicious_tokens
        assert 'excessive-hyphens' in tokens
        assert 'excessive-digits' in tokens
        assert 'uncommon-tld:.top' in tokens

    def test_no_address_degrades(self):
        result = evaluate(create_test_email('Just A Name'))

        assert not result.available
        assert result.score == 0
        assert result.details.reason == 'no-sender-address'

    def test_threat_intel_domain(self):
        intel = ThreatIntelSnapshot(malicious_domains=['northwindtraders.com'])
        result = evaluate(create_test_email('ops@northwindtraders.com'), intel)

        assert result.score == 80
        assert result.details.threat_intel_hits == ['northwindtraders.com']

    def test_threat_intel_url(self):
        intel = ThreatIntelSnapshot(malicious_urls=['http://collect.example.net/pay'])
        email = create_test_email('ops@northwindtraders.com', body='Pay here: http://collect.example.net/pay')
        result = evaluate(email, intel)

        assert result.score == 60
        finding = next(f for f in result.findings if f.category == 'threat_intel')
        assert finding.start_index == email.body.index('http://')
