"""
CONTRACT 2: Indicator Engine

Input: BarSeries (plus optional periods)
Output: TechnicalAnalysis / LatestIndicators / SupportResistance / IndicatorSeries

This module describes the engine's outputs.
Pure Python/NumPy behind it - NO I/O.
"""

from typing import Annotated, Literal, Optional
from pydantic import BaseModel, Field

from patternsight.schemas.market import BarSeries


# =============================================================================
# INPUT: Requests
# =============================================================================


class LevelsRequest(BarSeries):
    """
    Request for support/resistance detection.
    Unset values fall back to configured defaults.
    """

    lookback_period: Optional[int] = Field(
        default=None, ge=1, description="Half-window radius for extrema detection"
    )
    min_touches: Optional[int] = Field(
        default=None, ge=1, description="Minimum cluster size to report"
    )


class AnalysisRequest(LevelsRequest):
    """
    Request for a full analysis.
    Sent by: API
    Received by: Indicator Service
    """

    include_series: bool = Field(
        default=False, description="Include full indicator series for charting"
    )


class SeriesRequest(BarSeries):
    """Request for full indicator series. Unset periods use configured defaults."""

    rsi_period: Optional[int] = Field(default=None, ge=1)
    macd_fast_period: Optional[int] = Field(default=None, ge=1)
    macd_slow_period: Optional[int] = Field(default=None, ge=1)
    macd_signal_period: Optional[int] = Field(default=None, ge=1)
    ma_periods: Optional[list[Annotated[int, Field(ge=1)]]] = Field(
        default=None, description="SMA periods, each >= 1"
    )
    price_field: Literal["open", "high", "low", "close"] = "close"


# =============================================================================
# OUTPUT: Components
# =============================================================================


class MACDValues(BaseModel):
    """Latest MACD values."""

    macd: float
    signal: float
    histogram: float


class LatestIndicators(BaseModel):
    """
    Latest indicator values for display cards.
    Never NaN: short histories fall back to 50 / 0 / last close.
    """

    rsi: float
    macd: MACDValues
    ma20: float
    ma50: float
    ma200: float


class SupportResistance(BaseModel):
    """Support/resistance prices, best first."""

    support: list[float] = Field(..., max_length=3, description="Support levels (best first)")
    resistance: list[float] = Field(
        ..., max_length=3, description="Resistance levels (best first)"
    )


class IndicatorSeries(BaseModel):
    """
    Full indicator series aligned one-to-one with the input bars.
    Undefined values are null.
    """

    dates: list[str]
    rsi: list[Optional[float]]
    macd: list[Optional[float]]
    signal: list[Optional[float]]
    histogram: list[Optional[float]]
    moving_averages: dict[int, list[Optional[float]]] = Field(
        ..., description="SMA series keyed by period"
    )


# =============================================================================
# OUTPUT: TechnicalAnalysis (Complete Response)
# =============================================================================


class TechnicalAnalysis(BaseModel):
    """
    Complete technical analysis for a bar sequence.
    Returned by: Indicator Service
    Consumed by: chart and indicator card views
    """

    bar_count: int = Field(..., ge=0)
    last_close: float
    latest: LatestIndicators
    support_resistance: SupportResistance
    series: Optional[IndicatorSeries] = Field(
        default=None, description="Present when include_series was requested"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "bar_count": 250,
                "last_close": 189.5,
                "latest": {
                    "rsi": 58.3,
                    "macd": {"macd": 1.42, "signal": 0.0, "histogram": 0.0},
                    "ma20": 186.1,
                    "ma50": 181.7,
                    "ma200": 172.4,
                },
                "support_resistance": {
                    "support": [180.2, 174.9],
                    "resistance": [192.3, 197.8],
                },
            }
        }
