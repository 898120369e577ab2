"""Market data sources.

This module provides an abstract interface for the brokerage data the tool
consumes (symbol search, price history, quotes and fund composition) and the
concrete implementation backed by Avanza's web API.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from avanza_ghostfolio.exceptions import UpstreamError
from avanza_ghostfolio.types import (
    FundInfo,
    InstrumentKind,
    OrderbookId,
    PriceHistory,
    SearchHit,
    StockInfo,
    SymbolDescriptor,
    TimePeriod,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MarketDataSource(ABC):
    """Abstract base class for market data sources."""

    @abstractmethod
    def search(self, query: str) -> list[SymbolDescriptor]:
        """Search instruments by free text.

        :param query: Free-text instrument name.
        :returns: Matching symbols, possibly empty.
        :raises UpstreamError: If the request or decoding fails.
        """
        ...

    @abstractmethod
    def fetch_history(self, symbol_id: str, period: TimePeriod) -> PriceHistory:
        """Fetch the price series of one time-period bucket.

        :param symbol_id: Orderbook identifier.
        :param period: Bucket to fetch.
        :returns: The bucket's declared range and its points in provider order.
        :raises UpstreamError: If the request or decoding fails.
        """
        ...

    @abstractmethod
    def fetch_stock_info(self, symbol_id: str) -> StockInfo:
        """Fetch the current quote and listing of a stock.

        :raises UpstreamError: If the request or decoding fails.
        """
        ...

    @abstractmethod
    def fetch_fund_info(self, symbol_id: str) -> FundInfo:
        """Fetch the fund guide including sector and country breakdowns.

        :raises UpstreamError: If the request or decoding fails.
        """
        ...


class AvanzaDataSource(MarketDataSource):
    """Data source backed by Avanza's undocumented web API.

    :param session: HTTP session to use (a new one is created if None).
    :param timeout: Request timeout in seconds.
    """

    BASE_URL = "https://www.avanza.se"

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def search(self, query: str) -> list[SymbolDescriptor]:
        payload = self._get_json("/_api/search/global-search", {"query": query})

        raw_hits: list[Any] = []
        if isinstance(payload, dict):
            for group in payload.get("resultGroups", []):
                raw_hits.extend(group.get("hits", []))
            raw_hits.extend(payload.get("hits", []))

        symbols: list[SymbolDescriptor] = []
        for raw in raw_hits:
            hit = decode_payload(SearchHit, raw, "search hit")
            try:
                kind = InstrumentKind(hit.link.type)
            except ValueError:
                logger.debug(
                    "Treating %s hit %s as OTHER",
                    hit.link.type,
                    hit.link.link_display,
                )
                kind = InstrumentKind.OTHER
            symbols.append(
                SymbolDescriptor(
                    id=OrderbookId(hit.link.orderbook_id),
                    display=hit.link.link_display,
                    kind=kind,
                    currency=hit.currency,
                    last_price=hit.last_price,
                )
            )
        return symbols

    def fetch_history(self, symbol_id: str, period: TimePeriod) -> PriceHistory:
        payload = self._get_json(
            f"/_api/fund-guide/chart/{symbol_id}/{period.value}", {"raw": "true"}
        )
        return decode_payload(PriceHistory, payload, "price history")

    def fetch_stock_info(self, symbol_id: str) -> StockInfo:
        payload = self._get_json(f"/_api/market-guide/stock/{symbol_id}")
        return decode_payload(StockInfo, payload, "stock info")

    def fetch_fund_info(self, symbol_id: str) -> FundInfo:
        payload = self._get_json(f"/_api/fund-guide/guide/{symbol_id}")
        return decode_payload(FundInfo, payload, "fund info")

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        url = f"{self.BASE_URL}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise UpstreamError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {url}: {e}") from e


def decode_payload(model: type[ModelT], payload: Any, what: str) -> ModelT:
    """Validate a JSON payload into a model, mapping failures to UpstreamError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise UpstreamError(f"Unexpected {what} payload: {e}") from e
