"""
PhishSense Pattern Store

Read-only pattern tables used by the rule detector and the reputation
analyzer. A store builds its PatternSet once; detectors receive the store
at construction and never mutate what it returns.
"""

import logging
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Iterable

from ...models.trust import CustomPattern
from ...utils.constants import (
    PHISHING_KEYWORDS,
    RULE_CATEGORIES,
    SHORTENER_DOMAINS,
    SUSPICIOUS_URL_KEYWORDS,
    SUSPICIOUS_TLDS,
    SUSPICIOUS_DOMAINS,
    DANGEROUS_EXTENSIONS,
    HTML_INDICATORS,
    TRUSTED_DOMAINS,
    TRUSTED_URL_PREFIXES,
    BRAND_TARGETS,
    COMMON_TLDS,
)
from ...utils.exceptions import ConfigurationWarning
from ...utils.helpers import base_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordCategory:
    """Keyword phrases sharing a weight and severity."""
    name: str
    weight: float
    severity: str
    patterns: Tuple[str, ...]
    # Per-pattern overrides contributed by custom patterns
    pattern_weights: Mapping[str, float] = field(default_factory=dict)
    pattern_severities: Mapping[str, str] = field(default_factory=dict)

    def weight_for(self, pattern: str) -> float:
        return self.pattern_weights.get(pattern, self.weight)

    def severity_for(self, pattern: str) -> str:
        return self.pattern_severities.get(pattern, self.severity)


@dataclass(frozen=True)
class RuleCategory:
    """Points and severity for a structural rule category."""
    name: str
    weight: float
    severity: str


@dataclass(frozen=True)
class BrandProfile:
    """A commonly impersonated brand."""
    key: str
    name: str
    labels: Tuple[str, ...]
    domains: Tuple[str, ...]
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class PatternSet:
    """Everything the content and reputation checks look for."""
    keyword_categories: Mapping[str, KeywordCategory]
    rule_categories: Mapping[str, RuleCategory]
    shorteners: Tuple[str, ...]
    suspicious_url_keywords: Tuple[str, ...]
    suspicious_tlds: Tuple[str, ...]
    suspicious_domains: Tuple[str, ...]
    attachment_extensions: Tuple[str, ...]
    html_indicators: Mapping[str, Tuple[str, ...]]
    trusted_domains: Tuple[str, ...]
    trusted_url_prefixes: Tuple[str, ...]
    brands: Tuple[BrandProfile, ...]
    common_tlds: Tuple[str, ...]

    def rule_category(self, name: str) -> RuleCategory:
        category = self.rule_categories.get(name)
        if category is None:
            return RuleCategory(name=name, weight=0.0, severity="low")
        return category

    @property
    def known_patterns(self) -> set:
        return {p for c in self.keyword_categories.values() for p in c.patterns}


# =============================================================================
# Store interface
# =============================================================================

class PatternStore(ABC):
    """Source of pattern tables."""

    @abstractmethod
    def get_patterns(self) -> PatternSet:
        """Return the current immutable pattern set."""
        pass


class StaticPatternStore(PatternStore):
    """
    Pattern store built from in-code tables plus optional custom patterns.

    Custom patterns are merged into their category; a keyword already
    present in any category is skipped so it is never counted twice.
    Missing tables produce a ConfigurationWarning rather than an error.
    """

    def __init__(
        self,
        keyword_categories: Optional[Dict[str, Dict]] = None,
        custom_patterns: Optional[Iterable[CustomPattern]] = None,
        trusted_domains: Optional[List[str]] = None,
        trusted_url_prefixes: Optional[List[str]] = None,
        brands: Optional[Dict[str, Dict]] = None,
    ):
        keywords = PHISHING_KEYWORDS if keyword_categories is None else keyword_categories
        brand_table = BRAND_TARGETS if brands is None else brands

        if not keywords:
            self._warn("Keyword pattern table is empty; keyword checks disabled")
        if not brand_table:
            self._warn("Brand table is empty; lookalike checks disabled")

        categories = self._build_keyword_categories(keywords)
        merged = self._merge_custom_patterns(categories, custom_patterns or [])

        self._patterns = PatternSet(
            keyword_categories=merged,
            rule_categories={
                name: RuleCategory(name=name, weight=float(cfg["weight"]), severity=cfg["severity"])
                for name, cfg in RULE_CATEGORIES.items()
            },
            shorteners=tuple(SHORTENER_DOMAINS),
            suspicious_url_keywords=tuple(SUSPICIOUS_URL_KEYWORDS),
            suspicious_tlds=tuple(SUSPICIOUS_TLDS),
            suspicious_domains=tuple(SUSPICIOUS_DOMAINS),
            attachment_extensions=tuple(
                ext for group in DANGEROUS_EXTENSIONS.values() for ext in group
            ),
            html_indicators={k: tuple(v) for k, v in HTML_INDICATORS.items()},
            trusted_domains=tuple(d.lower() for d in (TRUSTED_DOMAINS if trusted_domains is None else trusted_domains)),
            trusted_url_prefixes=tuple(
                p.lower() for p in (TRUSTED_URL_PREFIXES if trusted_url_prefixes is None else trusted_url_prefixes)
            ),
            brands=self._build_brands(brand_table),
            common_tlds=tuple(COMMON_TLDS),
        )

        logger.debug(
            f"Pattern store ready: {len(merged)} keyword categories, "
            f"{len(self._patterns.known_patterns)} keywords, {len(self._patterns.brands)} brands"
        )

    def get_patterns(self) -> PatternSet:
        return self._patterns

    @staticmethod
    def _warn(message: str):
        logger.warning(message)
        warnings.warn(message, ConfigurationWarning, stacklevel=3)

    @staticmethod
    def _build_keyword_categories(table: Dict[str, Dict]) -> Dict[str, KeywordCategory]:
        categories = {}
        for name, cfg in table.items():
            categories[name] = KeywordCategory(
                name=name,
                weight=float(cfg.get("weight", 10)),
                severity=cfg.get("severity", "medium"),
                patterns=tuple(p.lower().strip() for p in cfg.get("patterns", []) if p.strip()),
            )
        return categories

    @staticmethod
    def _merge_custom_patterns(
        categories: Dict[str, KeywordCategory],
        custom_patterns: Iterable[CustomPattern],
    ) -> Dict[str, KeywordCategory]:
        """Fold active custom patterns into the keyword categories."""
        known = {p for c in categories.values() for p in c.patterns}
        additions: Dict[str, List[CustomPattern]] = {}

        for pattern in custom_patterns:
            if not pattern.is_active:
                continue
            keyword = pattern.keyword.lower().strip()
            if not keyword or keyword in known:
                logger.debug(f"Skipping duplicate custom pattern: {pattern.keyword}")
                continue
            known.add(keyword)
            additions.setdefault(pattern.category.value, []).append(pattern)

        merged = dict(categories)
        for category_name, patterns in additions.items():
            existing = merged.get(category_name)
            keywords = tuple(p.keyword.lower().strip() for p in patterns)
            weights = {p.keyword.lower().strip(): p.weight for p in patterns}
            severities = {p.keyword.lower().strip(): p.severity for p in patterns}

            if existing is None:
                first = patterns[0]
                merged[category_name] = KeywordCategory(
                    name=category_name,
                    weight=first.weight,
                    severity=first.severity,
                    patterns=keywords,
                    pattern_weights=weights,
                    pattern_severities=severities,
                )
            else:
                merged[category_name] = KeywordCategory(
                    name=category_name,
                    weight=existing.weight,
                    severity=existing.severity,
                    patterns=existing.patterns + keywords,
                    pattern_weights={**existing.pattern_weights, **weights},
                    pattern_severities={**existing.pattern_severities, **severities},
                )
        return merged

    @staticmethod
    def _build_brands(table: Dict[str, Dict]) -> Tuple[BrandProfile, ...]:
        brands = []
        for key in sorted(table):
            cfg = table[key]
            domains = tuple(d.lower() for d in cfg.get("legitimate_domains", []))
            labels = tuple(sorted({base_label(d) for d in domains if base_label(d)}))
            brands.append(BrandProfile(
                key=key,
                name=cfg.get("name", key),
                labels=labels,
                domains=domains,
                keywords=tuple(k.lower() for k in cfg.get("keywords", [])),
            ))
        return tuple(brands)


# =============================================================================
# Default store
# =============================================================================

_default_store: Optional[StaticPatternStore] = None


def get_default_pattern_store() -> StaticPatternStore:
    """Get the shared built-in pattern store."""
    global _default_store
    if _default_store is None:
        _default_store = StaticPatternStore()
    return _default_store
