"""
PhishSense Scoring Configuration API

Read-only view of the scoring constants so consumers classify stored
scores with the same thresholds as the engine.
"""

import logging

from fastapi import APIRouter

from ...config.scoring import get_scoring_config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/scoring", tags=["scoring"])


@router.get("")
async def get_scoring_configuration():
    """
    Get current scoring configuration.

    Returns all thresholds, weights, and settings used for scoring.
    """
    config = get_scoring_config()
    return {
        "success": True,
        "config": config.to_dict(),
        "description": {
            "thresholds": "Risk level thresholds (score >= threshold = that level)",
            "weights": "Base share of the 100-point total per detector",
            "sensitivity": "Multiplier applied to the weighted sum",
            "rules": "Per-category match cap and saturation constant",
            "behavior": "First-contact increment, trust relief and its caps",
        },
    }


@router.get("/thresholds")
async def get_thresholds():
    """Get just the risk level thresholds."""
    thresholds = get_scoring_config().thresholds
    return {
        "high": thresholds.high,
        "medium": thresholds.medium,
        "description": {
            "High": f">= {thresholds.high}",
            "Medium": f">= {thresholds.medium}",
            "Low": f"< {thresholds.medium}",
        },
    }
