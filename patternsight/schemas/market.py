"""
CONTRACT 1: Bar Input

Input for every indicator and level computation: an ordered sequence of
OHLCV bars supplied by the caller. Fetching and caching market data is the
caller's business; this layer only describes the shape.
"""

from pydantic import BaseModel, Field


class Bar(BaseModel):
    """
    Single OHLCV bar (one trading session or intraday slice).

    No range constraints: NaN and negative values pass through and
    propagate arithmetically in the indicator engine.
    """

    date: str = Field(..., description="Calendar date, e.g. 2024-02-05")
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    class Config:
        frozen = True


class BarSeries(BaseModel):
    """
    Bar sequence, ascending by date.

    The engine does not sort; callers are responsible for ordering.
    """

    bars: list[Bar] = Field(..., min_length=1, description="Bars, oldest first")

    def is_ascending(self) -> bool:
        """True when bar dates never decrease."""
        dates = [b.date for b in self.bars]
        return all(a <= b for a, b in zip(dates, dates[1:]))

    class Config:
        json_schema_extra = {
            "example": {
                "bars": [
                    {
                        "date": "2024-02-01",
                        "open": 187.2,
                        "high": 189.6,
                        "low": 186.4,
                        "close": 188.9,
                        "volume": 51200000,
                    },
                    {
                        "date": "2024-02-02",
                        "open": 188.9,
                        "high": 190.1,
                        "low": 187.7,
                        "close": 189.5,
                        "volume": 47800000,
                    },
                ]
            }
        }
