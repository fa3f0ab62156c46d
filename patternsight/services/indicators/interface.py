"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Optional

from patternsight.services.base import BaseService
from patternsight.schemas.market import BarSeries
from patternsight.schemas.indicators import (
    AnalysisRequest,
    IndicatorSeries,
    LatestIndicators,
    SeriesRequest,
    SupportResistance,
    TechnicalAnalysis,
)


class IndicatorServiceInterface(BaseService[AnalysisRequest, TechnicalAnalysis]):
    """
    Indicator Engine Service Contract.

    INPUT: AnalysisRequest
        - bars: OHLCV bars, oldest first
        - lookback_period / min_touches: level detection tuning (optional)
        - include_series: attach full series for charting

    OUTPUT: TechnicalAnalysis
        - latest: display-card values (never NaN)
        - support_resistance: up to 3 prices per side
        - series: full indicator series (optional)
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> TechnicalAnalysis:
        """Run the full analysis for one bar sequence."""
        pass

    @abstractmethod
    async def latest(self, input_data: BarSeries) -> LatestIndicators:
        """Latest RSI / MACD / MA values for display."""
        pass

    @abstractmethod
    async def levels(
        self,
        input_data: BarSeries,
        lookback_period: Optional[int] = None,
        min_touches: Optional[int] = None,
    ) -> SupportResistance:
        """
        Detect support/resistance levels.

        Args:
            input_data: Bars, oldest first
            lookback_period: Half-window radius (default from settings)
            min_touches: Minimum cluster size (default from settings)

        Returns:
            Up to 3 support and 3 resistance prices, best first
        """
        pass

    @abstractmethod
    async def series(self, input_data: SeriesRequest) -> IndicatorSeries:
        """Full RSI / MACD / SMA series aligned with the input bars."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
