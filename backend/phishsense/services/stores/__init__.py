"""
PhishSense Stores

Read-only pattern and trust stores injected into the detectors.
"""

from .patterns import (
    PatternStore,
    StaticPatternStore,
    PatternSet,
    KeywordCategory,
    RuleCategory,
    BrandProfile,
    get_default_pattern_store,
)
from .trust import TrustStore, TrustStoreSnapshot

__all__ = [
    'PatternStore',
    'StaticPatternStore',
    'PatternSet',
    'KeywordCategory',
    'RuleCategory',
    'BrandProfile',
    'get_default_pattern_store',
    'TrustStore',
    'TrustStoreSnapshot',
]
