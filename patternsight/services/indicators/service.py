"""
Indicator Engine Service Implementation

Wraps the pure indicator and level functions for the API.
NO I/O - Pure Python/NumPy calculations.
"""

import logging
from typing import Callable, Optional, TypeVar

import numpy as np

from patternsight.core.config import settings
from patternsight.schemas.market import BarSeries
from patternsight.schemas.indicators import (
    AnalysisRequest,
    IndicatorSeries,
    LatestIndicators,
    MACDValues,
    SeriesRequest,
    SupportResistance,
    TechnicalAnalysis,
)
from patternsight.services.base import ServiceError, ValidationError
from patternsight.services.indicators.interface import IndicatorServiceInterface
from patternsight.services.indicators.calculations import (
    OHLCVData,
    to_ohlcv_data,
    rsi,
    macd,
    moving_average,
    latest_indicators,
)
from patternsight.services.indicators.levels import detect_support_resistance

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_optional_list(arr: np.ndarray) -> list[Optional[float]]:
    """Convert a series to JSON-friendly values, NaN becomes None."""
    return [None if np.isnan(v) else float(v) for v in arr]


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Calculates technical indicators and support/resistance levels.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def _prepare(self, input_data: BarSeries) -> OHLCVData:
        """Convert bars to arrays, warning on out-of-order dates."""
        if not input_data.is_ascending():
            logger.warning(
                f"Bars are not in ascending date order "
                f"({input_data.bars[0].date} .. {input_data.bars[-1].date}); "
                f"computing as given"
            )
        return to_ohlcv_data(input_data.bars)

    def _compute(self, operation: str, func: Callable[..., T], *args, **kwargs) -> T:
        """Run a pure calculation, mapping failures to service errors."""
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{operation} failed: {e}")
            raise ServiceError(
                self.name, f"{operation} failed: {e}", {"operation": operation}
            ) from e

    async def execute(self, input_data: AnalysisRequest) -> TechnicalAnalysis:
        """Run the full analysis for one bar sequence."""
        data = self._prepare(input_data)
        logger.debug(f"Analyzing {len(data)} bars")

        latest = self._latest_from(data)
        levels = self._levels_from(
            data, input_data.lookback_period, input_data.min_touches
        )

        series = None
        if input_data.include_series:
            series = self._series_from(
                data, SeriesRequest.model_construct(bars=input_data.bars)
            )

        return TechnicalAnalysis(
            bar_count=len(data),
            last_close=float(data.closes[-1]),
            latest=latest,
            support_resistance=levels,
            series=series,
        )

    async def latest(self, input_data: BarSeries) -> LatestIndicators:
        """Latest RSI / MACD / MA values for display."""
        return self._latest_from(self._prepare(input_data))

    async def levels(
        self,
        input_data: BarSeries,
        lookback_period: Optional[int] = None,
        min_touches: Optional[int] = None,
    ) -> SupportResistance:
        """Detect support/resistance levels."""
        return self._levels_from(self._prepare(input_data), lookback_period, min_touches)

    async def series(self, input_data: SeriesRequest) -> IndicatorSeries:
        """Full RSI / MACD / SMA series aligned with the input bars."""
        return self._series_from(self._prepare(input_data), input_data)

    def _latest_from(self, data: OHLCVData) -> LatestIndicators:
        values = self._compute("latest_indicators", latest_indicators, data)
        return LatestIndicators(
            rsi=values["rsi"],
            macd=MACDValues(**values["macd"]),
            ma20=values["ma20"],
            ma50=values["ma50"],
            ma200=values["ma200"],
        )

    def _levels_from(
        self,
        data: OHLCVData,
        lookback_period: Optional[int],
        min_touches: Optional[int],
    ) -> SupportResistance:
        lookback_period = lookback_period or settings.sr_lookback_period
        min_touches = min_touches or settings.sr_min_touches

        logger.debug(
            f"Detecting levels over {len(data)} bars "
            f"(lookback={lookback_period}, min_touches={min_touches})"
        )
        result = self._compute(
            "detect_support_resistance",
            detect_support_resistance,
            data,
            lookback_period=lookback_period,
            min_touches=min_touches,
        )
        return SupportResistance(support=result.support, resistance=result.resistance)

    def _series_from(self, data: OHLCVData, request: SeriesRequest) -> IndicatorSeries:
        rsi_period = request.rsi_period or settings.rsi_period
        fast = request.macd_fast_period or settings.macd_fast_period
        slow = request.macd_slow_period or settings.macd_slow_period
        signal = request.macd_signal_period or settings.macd_signal_period
        ma_periods = request.ma_periods or settings.ma_periods

        invalid = [p for p in (rsi_period, fast, slow, signal, *ma_periods) if p < 1]
        if invalid:
            raise ValidationError(
                self.name, f"Periods must be >= 1, got {invalid}", {"operation": "series"}
            )

        logger.debug(
            f"Computing series over {len(data)} bars "
            f"(rsi={rsi_period}, macd={fast}/{slow}/{signal}, ma={ma_periods})"
        )

        rsi_arr = self._compute("rsi", rsi, data.closes, rsi_period)
        macd_line, signal_line, histogram = self._compute(
            "macd", macd, data.closes, fast, slow, signal
        )
        moving_averages = {
            period: _to_optional_list(
                self._compute(
                    "moving_average", moving_average, data, period, request.price_field
                )
            )
            for period in ma_periods
        }

        return IndicatorSeries(
            dates=list(data.dates),
            rsi=_to_optional_list(rsi_arr),
            macd=_to_optional_list(macd_line),
            signal=_to_optional_list(signal_line),
            histogram=_to_optional_list(histogram),
            moving_averages=moving_averages,
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
