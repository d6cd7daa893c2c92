"""
PhishSense Configuration

Application settings and scoring constants.
"""

from .settings import Settings, get_settings
from .scoring import (
    ScoringConfig,
    RiskThresholds,
    DetectorWeights,
    get_scoring_config,
    reset_scoring_config,
    risk_level_for_score,
)

__all__ = [
    'Settings',
    'get_settings',
    'ScoringConfig',
    'RiskThresholds',
    'DetectorWeights',
    'get_scoring_config',
    'reset_scoring_config',
    'risk_level_for_score',
]
