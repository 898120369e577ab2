"""Shared fixtures for the test suite."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from avanza_ghostfolio.data.sources import MarketDataSource
from avanza_ghostfolio.types import (
    FundInfo,
    InstrumentKind,
    OrderbookId,
    PriceHistory,
    PricePoint,
    StockInfo,
    SymbolDescriptor,
    TimePeriod,
)


def ms(day: date) -> int:
    """Epoch milliseconds of midnight UTC on a date."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def make_history(
    from_date: date,
    to_date: date,
    points: list[tuple[date, float]],
) -> PriceHistory:
    """Build a PriceHistory bucket from (date, price) pairs."""
    return PriceHistory(
        id="1",
        name="Test Fund",
        from_date=from_date,
        to_date=to_date,
        points=[PricePoint(timestamp=ms(d), price=p) for d, p in points],
    )


class StubDataSource(MarketDataSource):
    """In-memory data source recording every call."""

    def __init__(
        self,
        hits: list[SymbolDescriptor] | None = None,
        histories: dict[TimePeriod, PriceHistory] | None = None,
        stock_info: StockInfo | None = None,
        fund_info: FundInfo | None = None,
    ) -> None:
        self.hits = hits or []
        self.histories = histories or {}
        self.stock_info = stock_info
        self.fund_info = fund_info
        self.searches: list[str] = []
        self.history_calls: list[TimePeriod] = []

    def search(self, query: str) -> list[SymbolDescriptor]:
        self.searches.append(query)
        return list(self.hits)

    def fetch_history(self, symbol_id: str, period: TimePeriod) -> PriceHistory:
        self.history_calls.append(period)
        return self.histories[period]

    def fetch_stock_info(self, symbol_id: str) -> StockInfo:
        assert self.stock_info is not None
        return self.stock_info

    def fetch_fund_info(self, symbol_id: str) -> FundInfo:
        assert self.fund_info is not None
        return self.fund_info


@pytest.fixture
def fund_symbol() -> SymbolDescriptor:
    """A resolved fund symbol."""
    return SymbolDescriptor(
        id=OrderbookId("325406"),
        display="Avanza Global",
        kind=InstrumentKind.FUND,
        currency="SEK",
        last_price="145,23",
    )


@pytest.fixture
def stock_symbol() -> SymbolDescriptor:
    """A resolved stock symbol."""
    return SymbolDescriptor(
        id=OrderbookId("5269"),
        display="Volvo B",
        kind=InstrumentKind.STOCK,
        currency="SEK",
        last_price="251,40",
    )


@pytest.fixture
def stub_source_factory():
    """Factory for StubDataSource instances."""
    return StubDataSource
