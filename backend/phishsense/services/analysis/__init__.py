"""
PhishSense Analysis Services

Score combination and the records derived from a verdict.
"""

from .combiner import ScoreCombiner, get_score_combiner, analyze_email
from .records import build_scan_record, build_legitimacy_snapshot, matched_keywords
from .summary import build_summary

__all__ = [
    'ScoreCombiner',
    'get_score_combiner',
    'analyze_email',
    'build_scan_record',
    'build_legitimacy_snapshot',
    'matched_keywords',
    'build_summary',
]
