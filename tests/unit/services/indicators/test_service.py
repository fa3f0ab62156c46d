import logging

import pytest

from patternsight.schemas.indicators import AnalysisRequest, SeriesRequest
from patternsight.schemas.market import BarSeries
from patternsight.services.base import ServiceError, ValidationError
from patternsight.services.indicators import IndicatorService, get_indicator_service


ZIGZAG = [100.0 + (i % 10) for i in range(60)]


@pytest.mark.asyncio
async def test_execute_returns_full_analysis(make_bars):
    service = IndicatorService()
    result = await service.execute(AnalysisRequest(bars=make_bars(ZIGZAG)))

    assert result.bar_count == 60
    assert result.last_close == 109.0
    assert 0 <= result.latest.rsi <= 100
    assert result.latest.ma200 == 109.0
    assert len(result.support_resistance.support) <= 3
    assert len(result.support_resistance.resistance) <= 3
    assert result.series is None


@pytest.mark.asyncio
async def test_execute_with_series(make_bars):
    service = IndicatorService()
    result = await service.execute(
        AnalysisRequest(bars=make_bars(ZIGZAG), include_series=True)
    )

    series = result.series
    assert len(series.dates) == 60
    assert series.dates[0] == "2024-01-01"
    assert all(v is None for v in series.rsi[:14])
    assert series.rsi[14] is not None
    assert all(v is None for v in series.macd[:25])
    assert series.macd[25] is not None
    assert all(v is None for v in series.signal)
    assert set(series.moving_averages) == {20, 50, 200}
    assert all(v is None for v in series.moving_averages[200])
    assert series.moving_averages[20][19] is not None


@pytest.mark.asyncio
async def test_series_custom_periods(make_bars):
    service = IndicatorService()
    result = await service.series(
        SeriesRequest(
            bars=make_bars([1.0, 2.0, 3.0, 4.0]),
            rsi_period=2,
            ma_periods=[2],
        )
    )
    assert result.rsi[:2] == [None, None]
    assert result.rsi[2:] == [100.0, 100.0]
    assert result.macd == [0.0, 0.0, 0.0, 0.0]
    assert result.moving_averages == {2: [None, 1.5, 2.5, 3.5]}


@pytest.mark.asyncio
async def test_series_rejects_configured_zero_period(make_bars, monkeypatch):
    monkeypatch.setattr(
        "patternsight.services.indicators.service.settings.ma_periods", [20, 0]
    )
    service = IndicatorService()
    with pytest.raises(ValidationError) as exc_info:
        await service.series(SeriesRequest(bars=make_bars([1.0, 2.0, 3.0])))
    assert "[0]" in exc_info.value.message


@pytest.mark.asyncio
async def test_execute_series_skips_request_revalidation(make_bars, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("bars revalidated")

    request = AnalysisRequest(bars=make_bars(ZIGZAG), include_series=True)
    monkeypatch.setattr(SeriesRequest, "__init__", fail)
    result = await IndicatorService().execute(request)
    assert len(result.series.dates) == 60


@pytest.mark.asyncio
async def test_levels_zero_lookback_from_settings(make_bars, monkeypatch):
    monkeypatch.setattr(
        "patternsight.services.indicators.service.settings.sr_lookback_period", 0
    )
    result = await IndicatorService().levels(BarSeries(bars=make_bars([1.0, 2.0, 3.0])))
    assert result.support == []
    assert result.resistance == []


@pytest.mark.asyncio
async def test_latest_short_history(make_bars):
    service = IndicatorService()
    result = await service.latest(BarSeries(bars=make_bars([5.0, 6.0, 7.0])))
    assert result.rsi == 50.0
    assert result.macd.macd == 0.0
    assert result.ma20 == 7.0


@pytest.mark.asyncio
async def test_levels_short_history_fallback(make_bars):
    service = IndicatorService()
    result = await service.levels(BarSeries(bars=make_bars([10.0, 20.0, 15.0])))
    assert result.support == pytest.approx([11.0, 12.5])
    assert result.resistance == pytest.approx([19.0, 17.5])


@pytest.mark.asyncio
async def test_unexpected_failure_is_service_error(make_bars, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("broken")

    monkeypatch.setattr(
        "patternsight.services.indicators.service.detect_support_resistance", boom
    )
    service = IndicatorService()
    with pytest.raises(ServiceError) as exc_info:
        await service.levels(BarSeries(bars=make_bars([1.0, 2.0])))
    assert not isinstance(exc_info.value, ValidationError)
    assert exc_info.value.service_name == "IndicatorService"


@pytest.mark.asyncio
async def test_out_of_order_bars_warn(make_bars, caplog):
    bars = list(reversed(make_bars([1.0, 2.0, 3.0])))
    service = IndicatorService()
    with caplog.at_level(logging.WARNING, logger="patternsight.services.indicators.service"):
        result = await service.latest(BarSeries(bars=bars))
    assert "ascending" in caplog.text
    assert result.ma20 == 1.0


@pytest.mark.asyncio
async def test_health_check():
    assert await IndicatorService().health_check() is True


def test_get_indicator_service_is_singleton():
    assert get_indicator_service() is get_indicator_service()
