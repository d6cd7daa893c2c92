"""
PhishSense Health API Routes

Health check and status endpoints.
"""

import logging

from fastapi import APIRouter, Depends

from ...config.settings import Settings
from ...utils.helpers import utc_now
from ..dependencies import get_settings, get_combiner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "phishsense-api",
        "version": settings.app_version,
    }


@router.get("/ready")
async def readiness_check(settings: Settings = Depends(get_settings)):
    """
    Readiness check: the engine can be built and its rules are loaded.

    Returns:
        Readiness status with component checks
    """
    combiner = get_combiner()
    patterns = combiner.rule_detector.pattern_store.get_patterns()
    return {
        "status": "ready",
        "timestamp": utc_now().isoformat(),
        "checks": {
            "rules_loaded": len(combiner.rule_detector.rules),
            "keyword_categories": len(patterns.keyword_categories),
            "brands": len(patterns.brands),
            "sensitivity": combiner.sensitivity,
            "ml_enabled": settings.enable_ml,
        },
    }
