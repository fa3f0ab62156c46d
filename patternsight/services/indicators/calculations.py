"""
Technical Indicator Calculations

Pure Python/NumPy implementations of RSI, MACD and simple moving averages.
NO I/O - All math is deterministic.

Each indicator keeps its own fallback policy for short histories:
RSI fills with a neutral 50, MACD fills with zeros, SMA stays undefined (NaN).
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np


# RSI: value for every index when there is not enough history
RSI_NEUTRAL = 50.0
# RSI: value when the smoothed average loss is zero
RSI_ZERO_LOSS = 100.0
# MACD: value for every index of all three series when history is too short
MACD_SHORT_FILL = 0.0
# SMA: undefined marker for short histories and the warm-up prefix
MA_UNDEFINED = np.nan

DEFAULT_RSI_PERIOD = 14
DEFAULT_MACD_FAST = 12
DEFAULT_MACD_SLOW = 26
DEFAULT_MACD_SIGNAL = 9
DISPLAY_MA_PERIODS = (20, 50, 200)

PRICE_FIELDS = ("open", "high", "low", "close")


@dataclass(frozen=True)
class OHLCVData:
    """OHLCV data arrays for calculations."""

    dates: tuple[str, ...]
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    def __len__(self) -> int:
        return len(self.closes)

    def field(self, name: str) -> np.ndarray:
        """Price array for one of open/high/low/close."""
        if name not in PRICE_FIELDS:
            raise ValueError(f"Unknown price field: {name}")
        return getattr(self, f"{name}s")


def to_ohlcv_data(bars: Iterable) -> OHLCVData:
    """Convert a sequence of bars (anything with date/open/high/low/close/volume) to arrays."""
    bars = list(bars)
    return OHLCVData(
        dates=tuple(b.date for b in bars),
        opens=np.array([b.open for b in bars], dtype=float),
        highs=np.array([b.high for b in bars], dtype=float),
        lows=np.array([b.low for b in bars], dtype=float),
        closes=np.array([b.close for b in bars], dtype=float),
        volumes=np.array([b.volume for b in bars], dtype=float),
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    if len(data) < period:
        return np.full(len(data), MA_UNDEFINED)

    result = np.full(len(data), MA_UNDEFINED)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def moving_average(data: OHLCVData, period: int, field: str = "close") -> np.ndarray:
    """Simple Moving Average over one OHLC field of a bar sequence."""
    return sma(data.field(field), period)


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Indexed by position within `data`, not by bar index: the seed sits at
    data[period - 1] even when the leading values of `data` are NaN, in
    which case the NaN carries through the whole recurrence.
    """
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return RSI_ZERO_LOSS
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: np.ndarray, period: int = DEFAULT_RSI_PERIOD) -> np.ndarray:
    """Relative Strength Index with Wilder's smoothing."""
    if len(closes) < period + 1:
        return np.full(len(closes), RSI_NEUTRAL)

    deltas = np.diff(closes)

    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.full(len(closes), np.nan)
    result[period] = _rsi_value(avg_gain, avg_loss)

    # deltas[i] is the move into bar i + 1
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = DEFAULT_MACD_FAST,
    slow_period: int = DEFAULT_MACD_SLOW,
    signal_period: int = DEFAULT_MACD_SIGNAL,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)

    With fewer than slow_period + signal_period closes all three series are
    zero-filled. Otherwise the signal line is the EMA of the whole MACD line,
    warm-up NaNs included.
    """
    n = len(closes)
    if n < slow_period + signal_period:
        return (
            np.full(n, MACD_SHORT_FILL),
            np.full(n, MACD_SHORT_FILL),
            np.full(n, MACD_SHORT_FILL),
        )

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema
    signal_line = ema(macd_line, signal_period)
    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: np.ndarray) -> Optional[float]:
    """Get last non-NaN value from array."""
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None


def _first_set(*candidates: Optional[float]) -> float:
    """
    First candidate that is present, not NaN and not zero.

    The last candidate is the constant default and is returned unconditionally.
    """
    for value in candidates[:-1]:
        if value is not None and not np.isnan(value) and value != 0:
            return float(value)
    return float(candidates[-1])


def latest_indicators(data: OHLCVData) -> dict:
    """
    Latest indicator values for display cards.

    Missing values fall back to 50 (RSI), 0 (MACD fields) and the last close
    (moving averages). A value of exactly 0 is treated as missing too.
    """
    closes = data.closes
    last_close = float(closes[-1]) if len(closes) > 0 else None

    macd_line, signal_line, histogram = macd(closes)

    result = {
        "rsi": _first_set(get_last_valid(rsi(closes)), RSI_NEUTRAL),
        "macd": {
            "macd": _first_set(get_last_valid(macd_line), MACD_SHORT_FILL),
            "signal": _first_set(get_last_valid(signal_line), MACD_SHORT_FILL),
            "histogram": _first_set(get_last_valid(histogram), MACD_SHORT_FILL),
        },
    }
    for period in DISPLAY_MA_PERIODS:
        result[f"ma{period}"] = _first_set(
            get_last_valid(sma(closes, period)), last_close, 0.0
        )
    return result
