"""
PhishSense Data Models
"""

from .base import CamelModel
from .email import EmailInput, MLOutput, ThreatIntelSnapshot
from .trust import BehaviorRecord, TrustedRecord, AuthSnapshot, CustomPattern, PatternCategory
from .detection import (
    Severity,
    SEVERITY_RANK,
    Finding,
    RuleDetails,
    AuthSummary,
    HeaderDetails,
    ReputationDetails,
    BehaviorDetails,
    MLDetails,
    MiscDetails,
)
from .analysis import (
    RiskLevel,
    SubScore,
    RuleSubScore,
    HeaderSubScore,
    ReputationSubScore,
    BehaviorSubScore,
    MLSubScore,
    MiscSubScore,
    ScoreBreakdown,
    ScoreAdjustment,
    AnalysisResult,
    ScanRecord,
    LegitimacySnapshot,
)

__all__ = [
    'CamelModel',
    'EmailInput', 'MLOutput', 'ThreatIntelSnapshot',
    'BehaviorRecord', 'TrustedRecord', 'AuthSnapshot', 'CustomPattern', 'PatternCategory',
    'Severity', 'SEVERITY_RANK', 'Finding',
    'RuleDetails', 'AuthSummary', 'HeaderDetails', 'ReputationDetails',
    'BehaviorDetails', 'MLDetails', 'MiscDetails',
    'RiskLevel', 'SubScore', 'RuleSubScore', 'HeaderSubScore',
    'ReputationSubScore', 'BehaviorSubScore', 'MLSubScore', 'MiscSubScore',
    'ScoreBreakdown', 'ScoreAdjustment', 'AnalysisResult',
    'ScanRecord', 'LegitimacySnapshot',
]
