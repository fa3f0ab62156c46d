"""
Indicator API Endpoints

Endpoints for technical indicator calculations over caller-supplied bars.
"""

import logging

from fastapi import APIRouter, HTTPException

from patternsight.schemas.market import BarSeries
from patternsight.schemas.indicators import (
    AnalysisRequest,
    IndicatorSeries,
    LatestIndicators,
    LevelsRequest,
    SeriesRequest,
    SupportResistance,
    TechnicalAnalysis,
)
from patternsight.services.base import ServiceError, ValidationError
from patternsight.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_http_error(e: ServiceError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.message)
    logger.error(f"Indicator calculation failed: {e}")
    return HTTPException(status_code=500, detail=f"Indicator calculation failed: {e.message}")


@router.post("/analyze", response_model=TechnicalAnalysis)
async def analyze(request: AnalysisRequest):
    """
    Get complete technical analysis for a bar sequence.

    Returns:
        - Latest RSI, MACD and moving averages
        - Support/Resistance levels
        - Full indicator series (when include_series is set)
    """
    service = get_indicator_service()
    try:
        return await service.execute(request)
    except ServiceError as e:
        raise _to_http_error(e)


@router.post("/latest", response_model=LatestIndicators)
async def get_latest(request: BarSeries):
    """
    Get latest indicator values for display cards.

    Short histories fall back to RSI 50, MACD 0 and the last close for MAs.
    """
    service = get_indicator_service()
    try:
        return await service.latest(request)
    except ServiceError as e:
        raise _to_http_error(e)


@router.post("/levels", response_model=SupportResistance)
async def get_levels(request: LevelsRequest):
    """
    Get support/resistance levels for a bar sequence.
    """
    service = get_indicator_service()
    try:
        return await service.levels(
            request,
            lookback_period=request.lookback_period,
            min_touches=request.min_touches,
        )
    except ServiceError as e:
        raise _to_http_error(e)


@router.post("/series", response_model=IndicatorSeries)
async def get_series(request: SeriesRequest):
    """
    Get full RSI, MACD and SMA series aligned with the input bars.

    Undefined values (warm-up periods) are returned as null.
    """
    service = get_indicator_service()
    try:
        return await service.series(request)
    except ServiceError as e:
        raise _to_http_error(e)
