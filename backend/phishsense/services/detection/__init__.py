"""
PhishSense Detection Services

Independent detectors; each returns a DetectorResult.
"""

from .base import Detector, DetectorResult
from .rule_detector import RuleDetector
from .header_authenticator import HeaderAuthenticator
from .reputation import ReputationAnalyzer
from .behavior import BehaviorTracker
from .ml_adapter import MLConfidenceAdapter
from .misc import MiscDetector
from .lookalike import find_lookalike, edit_distance

__all__ = [
    'Detector',
    'DetectorResult',
    'RuleDetector',
    'HeaderAuthenticator',
    'ReputationAnalyzer',
    'BehaviorTracker',
    'MLConfidenceAdapter',
    'MiscDetector',
    'find_lookalike',
    'edit_distance',
]
