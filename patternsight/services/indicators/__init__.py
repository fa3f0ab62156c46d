"""
Indicator Engine Service

CONTRACT:
    Input:  BarSeries (OHLCV bars, oldest first)
    Output: TechnicalAnalysis

RESPONSIBILITIES:
    - Calculate RSI, MACD (line, signal, histogram) and simple moving averages
    - Project latest indicator values for display
    - Detect support/resistance levels by extrema clustering

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from patternsight.services.indicators.interface import IndicatorServiceInterface
from patternsight.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
