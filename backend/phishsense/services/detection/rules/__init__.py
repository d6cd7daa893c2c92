"""
PhishSense Content Rules

Importing this package registers every rule with the registry.
"""

from .base import DetectionRule, RuleMatch, RuleRegistry, rule_registry, register_rule, RULE_GROUPS
from . import keywords, links, attachments, html  # noqa: F401

__all__ = [
    'DetectionRule',
    'RuleMatch',
    'RuleRegistry',
    'rule_registry',
    'register_rule',
    'RULE_GROUPS',
]
