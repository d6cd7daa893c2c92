"""
PhishSense ML Adapter and Content Signal Tests
"""

import asyncio

from phishsense.models.email import EmailInput, MLOutput


def evaluate_ml(ml_output, **kwargs):
    from phishsense.services.detection.ml_adapter import MLConfidenceAdapter
    return asyncio.run(MLConfidenceAdapter(**kwargs).evaluate(ml_output))


def evaluate_misc(**kwargs):
    from phishsense.services.detection.misc import MiscDetector

    defaults = {'subject': 'Team lunch', 'body': 'See you at noon.', 'sender': 'amy@acmecorp.com'}
    defaults.update(kwargs)
    return asyncio.run(MiscDetector().evaluate(EmailInput(**defaults)))


class TestMLConfidenceAdapter:
    """Tests for the external model vote."""

    def test_missing_vote(self):
        result = evaluate_ml(None)

        assert not result.available
        assert result.weight_factor == 0
        assert result.details.model_used == 'unavailable'

    def test_disabled(self):
        result = evaluate_ml(MLOutput(score=90, confidence=0.9), enabled=False)

        assert not result.available
        assert result.details.model_used == 'disabled'

    def test_low_confidence(self):
        result = evaluate_ml(MLOutput(score=90, confidence=0.3))

        assert not result.available
        assert result.details.reason == 'low-confidence'
        assert result.details.confidence == 0.3

    def test_custom_floor(self):
        result = evaluate_ml(MLOutput(score=90, confidence=0.3), confidence_floor=0.2)
        assert result.available

    def test_high_vote(self):
        result = evaluate_ml(MLOutput(score=85, confidence=0.8, model_used='distilbert'))

        assert result.available
        assert result.score == 85
        assert result.weight_factor == 0.8
        assert result.details.model_used == 'distilbert'
        assert result.findings[0].severity.value == 'high'

    def test_medium_vote(self):
        result = evaluate_ml(MLOutput(score=55, confidence=0.9))
        assert result.findings[0].severity.value == 'medium'

    def test_low_vote_has_no_finding(self):
        result = evaluate_ml(MLOutput(score=10, confidence=0.9))

        assert result.available
        assert result.findings == []


class TestMiscDetector:
    """Tests for content hygiene signals."""

    def test_clean(self):
        result = evaluate_misc()

        assert result.score == 0
        assert result.details.signals == []

    def test_shouting_subject(self):
        result = evaluate_misc(subject='YOUR ACCOUNT IS LOCKED')
        assert 'shouting-subject' in result.details.signals

    def test_short_caps_subject_ignored(self):
        result = evaluate_misc(subject='FYI')
        assert 'shouting-subject' not in result.details.signals

    def test_exclamation_marks(self):
        result = evaluate_misc(body='Act fast! Last chance! Do it now!')

        assert result.details.exclamation_count == 3
        assert 'exclamation-marks' in result.details.signals

    def test_generic_greeting(self):
        body = 'Dear Customer, your statement is ready.'
        result = evaluate_misc(body=body)

        finding = result.findings[0]
        assert finding.start_index == 0
        assert 'Dear Customer' in finding.text

    def test_link_flood(self):
        body = ' '.join(f'https://example.com/{i}' for i in range(5))
        result = evaluate_misc(body=body)

        assert result.details.link_count == 5
        assert result.score == 15
