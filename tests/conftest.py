from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from patternsight.schemas.market import Bar
from patternsight.services.indicators.calculations import to_ohlcv_data


def _bars(closes, highs=None, lows=None, start=date(2024, 1, 1)):
    highs = highs if highs is not None else [c + 1.0 for c in closes]
    lows = lows if lows is not None else [c - 1.0 for c in closes]
    return [
        Bar(
            date=(start + timedelta(days=i)).isoformat(),
            open=close,
            high=high,
            low=low,
            close=close,
            volume=1000.0,
        )
        for i, (close, high, low) in enumerate(zip(closes, highs, lows))
    ]


@pytest.fixture
def make_bars():
    """Factory: closes (plus optional highs/lows) -> list[Bar] on consecutive days."""
    return _bars


@pytest.fixture
def make_ohlcv():
    """Factory: closes (plus optional highs/lows) -> OHLCVData."""

    def factory(closes, highs=None, lows=None):
        return to_ohlcv_data(_bars(closes, highs, lows))

    return factory


@pytest.fixture
def bar_payload():
    """Factory: closes -> JSON-ready bar dicts."""

    def factory(closes):
        return [b.model_dump() for b in _bars(closes)]

    return factory


@pytest.fixture
def client():
    from patternsight.main import app

    with TestClient(app) as c:
        yield c
