import math

import pytest

from patternsight.services.indicators.levels import (
    MAX_LEVELS,
    PriceLevel,
    cluster_levels,
    detect_support_resistance,
    find_extrema,
    rank_levels,
)


V_LOWS = [16.0, 15.0, 14.0, 13.0, 12.0, 11.0, 10.0, 10.0, 10.0, 11.0, 12.0, 13.0, 14.0, 15.0, 16.0]


def test_short_history_uses_range_fallback(make_ohlcv):
    # 2 * lookback - 1 bars, shape is irrelevant
    closes = [10.0 + (i % 7) for i in range(39)]
    result = detect_support_resistance(make_ohlcv(closes), lookback_period=20)
    assert result.support == pytest.approx([10.6, 11.5])
    assert result.resistance == pytest.approx([15.4, 14.5])


def test_empty_history_is_undefined(make_ohlcv):
    result = detect_support_resistance(make_ohlcv([]))
    assert len(result.support) == 2
    assert len(result.resistance) == 2
    assert all(math.isnan(v) for v in result.support + result.resistance)


def test_zero_lookback_finds_no_extrema(make_ohlcv):
    data = make_ohlcv([1.0, 2.0, 3.0])
    assert find_extrema(data.highs, data.lows, 0) == ([], [])

    result = detect_support_resistance(data, lookback_period=0)
    assert result.support == []
    assert result.resistance == []


def test_empty_history_with_zero_lookback_is_empty(make_ohlcv):
    result = detect_support_resistance(make_ohlcv([]), lookback_period=0)
    assert result.support == []
    assert result.resistance == []


def test_extrema_keep_one_candidate_per_plateau_index(make_ohlcv):
    data = make_ohlcv(
        [low + 0.5 for low in V_LOWS],
        highs=[low + 1.0 for low in V_LOWS],
        lows=V_LOWS,
    )
    support, resistance = find_extrema(data.highs, data.lows, 3)
    assert support == [10.0, 10.0, 10.0]
    assert resistance == []


def test_v_shape_plateau_is_support(make_ohlcv):
    data = make_ohlcv(
        [low + 0.5 for low in V_LOWS],
        highs=[low + 1.0 for low in V_LOWS],
        lows=V_LOWS,
    )
    result = detect_support_resistance(data, lookback_period=3, min_touches=2)
    assert result.support == [10.0]
    assert result.resistance == []

    clusters = cluster_levels([10.0, 10.0, 10.0], 2)
    assert len(clusters) == 1
    assert clusters[0].touches == 3


def test_levels_are_ranked_and_bounded(make_ohlcv):
    lows = [50.0, 10.0, 10.0, 10.0, 20.0, 20.0, 20.0, 30.0, 30.0, 30.0, 40.0, 40.0, 40.0, 99.0]
    highs = [low + 100.0 for low in lows]
    data = make_ohlcv([38.0] * len(lows), highs=highs, lows=lows)

    result = detect_support_resistance(data, lookback_period=1, min_touches=2)

    # 10 has three touches; 20/30/40 tie on two and are ordered by distance to 38
    assert result.support == [10.0, 40.0, 30.0]
    # 110 has only two touches and falls outside the top three
    assert result.resistance == [120.0, 130.0, 140.0]
    assert len(result.support) <= MAX_LEVELS


def test_cluster_running_average():
    clusters = cluster_levels([100.0, 101.5, 103.0], 1)
    assert [(c.level, c.touches) for c in clusters] == [(100.75, 2), (103.0, 1)]


def test_cluster_is_first_fit_not_nearest():
    clusters = cluster_levels([100.0, 103.0, 101.9], 1)
    # 101.9 is closer to 103 but joins the earlier 100 cluster
    assert clusters[0].touches == 2
    assert clusters[0].level == pytest.approx(100.95)
    assert clusters[1].touches == 1
    assert clusters[1].level == 103.0


def test_cluster_min_touches_filter():
    clusters = cluster_levels([100.0, 150.0, 100.5], 2)
    assert len(clusters) == 1
    assert clusters[0].level == pytest.approx(100.25)


def test_cluster_zero_level_does_not_raise():
    clusters = cluster_levels([0.0, 0.0, 5.0], 1)
    assert [c.touches for c in clusters] == [1, 1, 1]


def test_cluster_empty():
    assert cluster_levels([], 2) == []


def test_rank_by_touches_then_distance():
    clusters = [PriceLevel(90.0, 2), PriceLevel(105.0, 2), PriceLevel(100.0, 3)]
    ranked = rank_levels(clusters, 104.0)
    assert [c.level for c in ranked] == [100.0, 105.0, 90.0]


def test_detection_is_idempotent(make_ohlcv):
    closes = [100.0 + (i % 9) * 1.5 - (i % 4) for i in range(120)]
    data = make_ohlcv(closes)
    assert detect_support_resistance(data) == detect_support_resistance(data)
