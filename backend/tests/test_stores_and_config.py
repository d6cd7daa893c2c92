"""
PhishSense Pattern Store and Configuration Tests
"""

import pytest


class TestPatternStore:
    """Tests for the static pattern store."""

    def test_default_tables_loaded(self):
        from phishsense.services.stores.patterns import get_default_pattern_store

        patterns = get_default_pattern_store().get_patterns()
        assert {'credential', 'urgency', 'threat', 'reward', 'financial'} <= set(patterns.keyword_categories)
        assert any(b.key == 'paypal' for b in patterns.brands)
        assert 'bit.ly' in patterns.shorteners

    def test_brand_labels_from_domains(self):
        from phishsense.services.stores.patterns import get_default_pattern_store

        microsoft = next(b for b in get_default_pattern_store().get_patterns().brands if b.key == 'microsoft')
        assert 'microsoft' in microsoft.labels
        assert 'outlook' in microsoft.labels

    def test_custom_patterns_merge(self):
        from phishsense.models.trust import CustomPattern
        from phishsense.services.stores.patterns import StaticPatternStore

        store = StaticPatternStore(custom_patterns=[
            CustomPattern(keyword='Payroll Update', category='credential', weight=30),
            CustomPattern(keyword='crypto giveaway', category='custom', severity='high', weight=35),
            CustomPattern(keyword='old lure', category='custom', is_active=False),
        ])
        patterns = store.get_patterns()

        credential = patterns.keyword_categories['credential']
        assert 'payroll update' in credential.patterns
        assert credential.weight_for('payroll update') == 30
        assert credential.weight_for('verify your account') == 25

        custom = patterns.keyword_categories['custom']
        assert custom.patterns == ('crypto giveaway',)
        assert custom.severity_for('crypto giveaway') == 'high'
        assert 'old lure' not in patterns.known_patterns

    def test_duplicate_custom_pattern_not_double_counted(self):
        from phishsense.models.trust import CustomPattern
        from phishsense.services.stores.patterns import StaticPatternStore

        store = StaticPatternStore(custom_patterns=[
            CustomPattern(keyword='Verify Your Account', category='custom'),
        ])
        patterns = store.get_patterns()

        assert 'custom' not in patterns.keyword_categories
        occurrences = [c for c in patterns.keyword_categories.values() if 'verify your account' in c.patterns]
        assert len(occurrences) == 1

    def test_empty_tables_warn(self):
        from phishsense.services.stores.patterns import StaticPatternStore
        from phishsense.utils.exceptions import ConfigurationWarning

        with pytest.warns(ConfigurationWarning):
            store = StaticPatternStore(keyword_categories={}, brands={})

        patterns = store.get_patterns()
        assert patterns.keyword_categories == {}
        assert patterns.brands == ()


class TestScoringConfig:
    """Tests for scoring constants."""

    def test_defaults(self):
        from phishsense.config.scoring import ScoringConfig

        config = ScoringConfig()
        assert config.thresholds.medium == 35
        assert config.thresholds.high == 60
        assert config.weights.total == pytest.approx(1.0)
        assert config.sensitivity.get('HIGH') == 1.2
        assert config.sensitivity.get('bogus') == 1.0

    @pytest.mark.parametrize('score,level', [(0, 'Low'), (34, 'Low'), (35, 'Medium'), (59, 'Medium'), (60, 'High'), (100, 'High')])
    def test_risk_levels(self, score, level):
        from phishsense.config.scoring import risk_level_for_score
        assert risk_level_for_score(score) == level

    def test_from_env(self, monkeypatch):
        from phishsense.config.scoring import get_scoring_config, reset_scoring_config

        monkeypatch.setenv('RISK_THRESHOLD_HIGH', '70')
        monkeypatch.setenv('WEIGHT_RULES', '0.35')
        monkeypatch.setenv('RULE_SATURATION_POINTS', '50')
        reset_scoring_config()

        config = get_scoring_config()
        assert config.thresholds.high == 70
        assert config.weights.rules == 0.35
        assert config.rules.saturation_points == 50.0

    def test_from_dict_ignores_unknown_keys(self):
        from phishsense.config.scoring import ScoringConfig

        config = ScoringConfig.from_dict({'thresholds': {'medium': 30, 'critical': 90}, 'nonsense': {'a': 1}})
        assert config.thresholds.medium == 30
        assert not hasattr(config.thresholds, 'critical')

    def test_to_dict_round_trip(self):
        from phishsense.config.scoring import ScoringConfig

        config = ScoringConfig.from_dict({'behavior': {'bonus_cap': 25}})
        assert ScoringConfig.from_dict(config.to_dict()) == config

    def test_settings_from_env(self, monkeypatch):
        from phishsense.config.settings import get_settings

        monkeypatch.setenv('SENSITIVITY', 'high')
        monkeypatch.setenv('ENABLE_ML', 'false')
        get_settings.cache_clear()

        settings = get_settings()
        assert settings.sensitivity == 'high'
        assert settings.enable_ml is False
        assert settings.ml_confidence_floor == 0.5


class TestHelpers:
    """Tests for address and domain helpers."""

    @pytest.mark.parametrize('raw,expected', [
        ('"PayPal Support" <Help@PayPal.com>', ('PayPal Support', 'help@paypal.com', 'paypal.com')),
        ('Jane <jane@acmecorp.com>', ('Jane', 'jane@acmecorp.com', 'acmecorp.com')),
        ('jane@acmecorp.com', (None, 'jane@acmecorp.com', 'acmecorp.com')),
        ('Just A Name', ('Just A Name', None, None)),
        ('', (None, None, None)),
    ])
    def test_extract_email_parts(self, raw, expected):
        from phishsense.utils.helpers import extract_email_parts
        assert extract_email_parts(raw) == expected

    def test_registrable_domain(self):
        from phishsense.utils.helpers import registrable_domain

        assert registrable_domain('mail.paypal.com') == 'paypal.com'
        assert registrable_domain('secure.example.co.uk') == 'example.co.uk'

    def test_iter_urls_offsets(self):
        from phishsense.utils.helpers import iter_urls

        text = 'Go to https://a.example.com/x. Then http://b.example.net'
        assert list(iter_urls(text)) == [('https://a.example.com/x', 6), ('http://b.example.net', 36)]
