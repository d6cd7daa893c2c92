"""
PhishSense Analysis API Routes

Endpoint for analyzing one email.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from ...config.settings import Settings
from ...models.base import CamelModel
from ...models.analysis import AnalysisResult, ScanRecord, LegitimacySnapshot
from ...models.email import EmailInput, MLOutput, ThreatIntelSnapshot
from ...models.trust import BehaviorRecord, TrustedRecord, CustomPattern
from ...services.analysis.records import build_scan_record, build_legitimacy_snapshot
from ...services.stores.trust import TrustStoreSnapshot
from ...utils.exceptions import InputError, StoreError
from ..dependencies import get_settings, build_request_combiner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analysis"])


class AnalyzeRequest(CamelModel):
    """Email plus the optional context the caller holds for it."""
    email: EmailInput
    behavior_records: Optional[List[BehaviorRecord]] = Field(
        None, description="Sender history; omit when no history store is available"
    )
    trusted_records: Optional[List[TrustedRecord]] = None
    custom_patterns: List[CustomPattern] = Field(default_factory=list)
    ml: Optional[MLOutput] = None
    threat_intel: Optional[ThreatIntelSnapshot] = None


class AnalyzeResponse(CamelModel):
    """Verdict with the records derived from it."""
    result: AnalysisResult
    scan_record: ScanRecord
    legitimacy: LegitimacySnapshot


@router.post("", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
):
    """
    Analyze an email.

    Behavior history is evaluated only when behaviorRecords or
    trustedRecords is supplied (an empty list means a known-empty history).

    Returns:
        AnalyzeResponse
    """
    trust_store = None
    if request.behavior_records is not None or request.trusted_records is not None:
        try:
            trust_store = TrustStoreSnapshot(request.behavior_records, request.trusted_records)
        except StoreError as e:
            raise HTTPException(status_code=400, detail=e.message)

    combiner = build_request_combiner(settings, request.custom_patterns)

    try:
        result = await combiner.combine(
            request.email,
            trust_store=trust_store,
            ml_output=request.ml,
            threat_intel=request.threat_intel,
        )
    except InputError as e:
        logger.info(f"Rejected analysis request: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)

    return AnalyzeResponse(
        result=result,
        scan_record=build_scan_record(request.email, result, combiner.rule_detector.pattern_store),
        legitimacy=build_legitimacy_snapshot(request.email, result, trust_store),
    )
