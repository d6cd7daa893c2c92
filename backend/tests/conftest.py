"""
PhishSense Test Configuration

Pytest fixtures and configuration.
"""

import pytest


@pytest.fixture(autouse=True)
def fresh_configuration(monkeypatch):
    """Every test starts from default settings and scoring constants."""
    from phishsense.config.settings import get_settings
    from phishsense.config.scoring import reset_scoring_config
    import phishsense.services.analysis.combiner as combiner_module

    for name in ("SENSITIVITY", "ENABLE_ML", "ML_CONFIDENCE_FLOOR", "RISK_THRESHOLD_HIGH",
                 "RISK_THRESHOLD_MEDIUM", "RULE_SATURATION_POINTS", "RULE_MATCH_CAP"):
        monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    reset_scoring_config()
    combiner_module._score_combiner = None
    yield
    get_settings.cache_clear()
    reset_scoring_config()
    combiner_module._score_combiner = None
