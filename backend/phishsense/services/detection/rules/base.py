"""
PhishSense Detection Rule Base Class

Abstract base class for the content rules run by the rule detector.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, List
from dataclasses import dataclass

from ....models.email import EmailInput
from ...stores.patterns import PatternSet

logger = logging.getLogger(__name__)


# Rule groups, used for the per-group point totals in RuleDetails
RULE_GROUPS = ("keyword", "url", "domain", "attachment", "html")


@dataclass
class RuleMatch:
    """One distinct match produced by a rule."""
    rule_id: str
    group: str
    category: str
    severity: str
    weight: float
    description: str
    evidence: str
    count: int = 1
    start_index: Optional[int] = None
    trusted: bool = False

    @property
    def points(self) -> float:
        """Points per occurrence; trusted matches never add risk."""
        return 0.0 if self.trusted else self.weight


class DetectionRule(ABC):
    """
    Abstract base class for all content rules.

    Each rule must define:
    - rule_id: Unique identifier (e.g., "URL-001")
    - name: Human-readable name
    - description: What this rule detects
    - group: keyword, url, domain, attachment or html

    Each rule must implement:
    - evaluate(): Return every distinct match (empty list if none)
    """

    rule_id: str = "BASE-000"
    name: str = "Base Rule"
    description: str = "Base detection rule"
    group: str = "keyword"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def evaluate(self, email: EmailInput, patterns: PatternSet) -> List[RuleMatch]:
        """
        Evaluate rule against email.

        Args:
            email: Message under analysis
            patterns: Pattern tables from the injected store

        Returns:
            List of RuleMatch, one per distinct match
        """
        pass

    def create_match(
        self,
        patterns: PatternSet,
        category: str,
        evidence: str,
        count: int = 1,
        start_index: Optional[int] = None,
        description_override: Optional[str] = None,
    ) -> RuleMatch:
        """
        Create a RuleMatch scored from the structural category table.

        Args:
            patterns: Pattern tables holding category weights
            category: Rule category name
            evidence: Matched text
            count: Occurrences of this match
            start_index: Offset of first occurrence in the body
            description_override: Override default description

        Returns:
            RuleMatch instance
        """
        rule_category = patterns.rule_category(category)
        return RuleMatch(
            rule_id=self.rule_id,
            group=self.group,
            category=category,
            severity=rule_category.severity,
            weight=rule_category.weight,
            description=description_override or self.description,
            evidence=evidence,
            count=count,
            start_index=start_index,
        )

    def create_trusted_match(self, evidence: str, description: str) -> RuleMatch:
        """Informational match that contributes no points."""
        return RuleMatch(
            rule_id=self.rule_id,
            group=self.group,
            category="trusted",
            severity="low",
            weight=0.0,
            description=description,
            evidence=evidence,
            trusted=True,
        )


class RuleRegistry:
    """Registry of content rules, filled once at import time."""

    def __init__(self):
        self._rules: List[DetectionRule] = []

    def register(self, rule: DetectionRule) -> None:
        """Register a detection rule."""
        self._rules.append(rule)

    def get_all_rules(self) -> List[DetectionRule]:
        """Get all registered rules."""
        return list(self._rules)

    def get_rules_by_group(self, group: str) -> List[DetectionRule]:
        """Get rules by group."""
        return [r for r in self._rules if r.group == group]


# Global registry
rule_registry = RuleRegistry()


def register_rule(rule_class: type) -> type:
    """Decorator to register a rule class."""
    rule_registry.register(rule_class())
    return rule_class
