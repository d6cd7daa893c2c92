"""
PhishSense API Dependencies

FastAPI dependency injection for settings and the analysis engine.
"""

import logging
from typing import Iterable, Optional

from ..config.settings import Settings, get_settings
from ..models.trust import CustomPattern
from ..services.analysis.combiner import ScoreCombiner, get_score_combiner
from ..services.stores.patterns import StaticPatternStore

logger = logging.getLogger(__name__)


def get_combiner() -> ScoreCombiner:
    """Shared combiner built from application settings."""
    return get_score_combiner()


def build_request_combiner(
    settings: Settings,
    custom_patterns: Optional[Iterable[CustomPattern]] = None,
) -> ScoreCombiner:
    """
    Combiner for a request that carries its own custom patterns.

    The shared combiner is used when there are none.
    """
    patterns = list(custom_patterns or [])
    if not patterns:
        return get_combiner()

    logger.debug(f"Building request combiner with {len(patterns)} custom patterns")
    return ScoreCombiner(
        pattern_store=StaticPatternStore(custom_patterns=patterns),
        sensitivity=settings.sensitivity,
        enable_ml=settings.enable_ml,
        ml_confidence_floor=settings.ml_confidence_floor,
    )


__all__ = ['get_settings', 'get_combiner', 'build_request_combiner']
