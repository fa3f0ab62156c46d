"""
PatternSight Schema Contracts

This module defines the JSON contracts between the indicator engine and its
callers. All API payloads conform to these schemas.
"""

from patternsight.schemas.market import Bar, BarSeries
from patternsight.schemas.indicators import (
    AnalysisRequest,
    LevelsRequest,
    SeriesRequest,
    MACDValues,
    LatestIndicators,
    SupportResistance,
    IndicatorSeries,
    TechnicalAnalysis,
)

__all__ = [
    # Market
    "Bar",
    "BarSeries",
    # Indicators
    "AnalysisRequest",
    "LevelsRequest",
    "SeriesRequest",
    "MACDValues",
    "LatestIndicators",
    "SupportResistance",
    "IndicatorSeries",
    "TechnicalAnalysis",
]
