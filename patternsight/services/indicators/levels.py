"""
Support/Resistance Level Detection

Finds local minima (support) and maxima (resistance) over a symmetric
window, folds nearby extrema into clusters and ranks them.
Pure NumPy - no I/O, no shared state.
"""

from dataclasses import dataclass, field
from functools import cmp_to_key

import numpy as np

from patternsight.services.indicators.calculations import OHLCVData


DEFAULT_LOOKBACK_PERIOD = 20
DEFAULT_MIN_TOUCHES = 2

# Relative distance under which an extremum joins an existing cluster
CLUSTER_TOLERANCE = 0.02
MAX_LEVELS = 3

# Short-history fallback: offsets as a fraction of the close range
FALLBACK_NEAR_FRACTION = 0.1
FALLBACK_FAR_FRACTION = 0.25


@dataclass
class PriceLevel:
    """A clustered price level and how many extrema folded into it."""

    level: float
    touches: int = 1


@dataclass(frozen=True)
class SupportResistanceLevels:
    """Ranked support and resistance prices, best first."""

    support: list[float] = field(default_factory=list)
    resistance: list[float] = field(default_factory=list)


def _range_fallback(closes: np.ndarray) -> SupportResistanceLevels:
    """Fixed fractions of the close range, used when history is too short."""
    if len(closes) == 0:
        return SupportResistanceLevels(
            support=[float("nan")] * 2, resistance=[float("nan")] * 2
        )

    min_price = float(np.min(closes))
    max_price = float(np.max(closes))
    price_range = max_price - min_price

    return SupportResistanceLevels(
        support=[
            min_price + price_range * FALLBACK_NEAR_FRACTION,
            min_price + price_range * FALLBACK_FAR_FRACTION,
        ],
        resistance=[
            max_price - price_range * FALLBACK_NEAR_FRACTION,
            max_price - price_range * FALLBACK_FAR_FRACTION,
        ],
    )


def find_extrema(
    highs: np.ndarray, lows: np.ndarray, lookback_period: int
) -> tuple[list[float], list[float]]:
    """
    Local extrema over the window [i - lookback, i + lookback).

    Returns: (support_candidates, resistance_candidates)

    Plateaus yield one candidate per qualifying index. An empty window
    (lookback of zero or less) has no extremum and yields nothing.
    """
    support = []
    resistance = []

    for i in range(lookback_period, len(lows) - lookback_period):
        window = slice(i - lookback_period, i + lookback_period)
        if window.stop <= window.start:
            continue

        if lows[i] == np.min(lows[window]):
            support.append(lows[i])

        if highs[i] == np.max(highs[window]):
            resistance.append(highs[i])

    return support, resistance


def cluster_levels(levels: list[float], min_touches: int) -> list[PriceLevel]:
    """
    Group levels within CLUSTER_TOLERANCE of each other.

    First-fit: each value joins the earliest-created cluster in range (not
    the closest one) and the cluster level becomes the running average.
    """
    clusters: list[PriceLevel] = []

    with np.errstate(divide="ignore", invalid="ignore"):
        for value in levels:
            value = np.float64(value)
            for cluster in clusters:
                if abs(cluster.level - value) / cluster.level < CLUSTER_TOLERANCE:
                    cluster.touches += 1
                    cluster.level = (
                        cluster.level * (cluster.touches - 1) + value
                    ) / cluster.touches
                    break
            else:
                clusters.append(PriceLevel(level=value))

    return [c for c in clusters if c.touches >= min_touches]


def rank_levels(clusters: list[PriceLevel], current_price: float) -> list[PriceLevel]:
    """Order by touches (most first), then by distance to current price (nearest first)."""

    def compare(a: PriceLevel, b: PriceLevel) -> int:
        if a.touches != b.touches:
            return b.touches - a.touches
        diff = abs(a.level - current_price) - abs(b.level - current_price)
        if diff < 0:
            return -1
        if diff > 0:
            return 1
        return 0

    return sorted(clusters, key=cmp_to_key(compare))


def detect_support_resistance(
    data: OHLCVData,
    lookback_period: int = DEFAULT_LOOKBACK_PERIOD,
    min_touches: int = DEFAULT_MIN_TOUCHES,
) -> SupportResistanceLevels:
    """
    Detect support and resistance levels from price data.

    Needs at least 2 * lookback_period bars for extrema detection; shorter
    series get range-fraction levels instead (two per side).
    Returns at most MAX_LEVELS prices per side.
    """
    closes = data.closes
    if len(closes) < lookback_period * 2:
        return _range_fallback(closes)
    if len(closes) == 0:
        return SupportResistanceLevels()

    support_candidates, resistance_candidates = find_extrema(
        data.highs, data.lows, lookback_period
    )

    current_price = closes[-1]
    support = rank_levels(cluster_levels(support_candidates, min_touches), current_price)
    resistance = rank_levels(
        cluster_levels(resistance_candidates, min_touches), current_price
    )

    return SupportResistanceLevels(
        support=[float(c.level) for c in support[:MAX_LEVELS]],
        resistance=[float(c.level) for c in resistance[:MAX_LEVELS]],
    )
