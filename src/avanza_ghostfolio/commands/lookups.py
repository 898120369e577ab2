"""Symbol lookups feeding Ghostfolio's asset profile settings.

Covers the scraper configuration Ghostfolio uses to poll prices from Avanza,
the sector and country weights of funds, and the current quote of a stock.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from avanza_ghostfolio.data.sources import MarketDataSource
from avanza_ghostfolio.exceptions import UnsupportedInstrumentError
from avanza_ghostfolio.types import (
    InstrumentKind,
    StockInfo,
    SymbolDescriptor,
    Weight,
)

AVANZA_STOCK_URL = "https://www.avanza.se/_api/market-guide/stock/{id}"
AVANZA_FUND_URL = "https://www.avanza.se/_api/fund-guide/guide/{id}"


def scraper_configuration(symbol: SymbolDescriptor) -> dict[str, Any]:
    """Build the scraper configuration for a symbol.

    Stocks are scraped from the market guide (last quote), funds from the fund
    guide (net asset value).
    """
    if symbol.kind is InstrumentKind.STOCK:
        return {
            "url": AVANZA_STOCK_URL.format(id=symbol.id),
            "selector": "$.quote.last",
        }
    return {
        "url": AVANZA_FUND_URL.format(id=symbol.id),
        "selector": "$.nav",
    }


def scraper_configuration_json(symbol: SymbolDescriptor) -> str:
    """Serialize the scraper configuration for a symbol."""
    return json.dumps(scraper_configuration(symbol))


def get_weights(
    source: MarketDataSource,
    symbol: SymbolDescriptor,
    breakdown: Literal["sectors", "countries"],
) -> list[Weight]:
    """Fetch the sector or country weights of a fund.

    :param source: Market data source.
    :param symbol: Resolved fund symbol.
    :param breakdown: Which breakdown to fetch.
    :returns: Weights as fractions of 1.
    :raises UnsupportedInstrumentError: If the symbol is not a fund.
    """
    if symbol.kind is not InstrumentKind.FUND:
        raise UnsupportedInstrumentError(
            f"{breakdown.capitalize()} are only available for funds, "
            f"{symbol.display} is a {symbol.kind.value}"
        )

    fund = source.fetch_fund_info(symbol.id)
    entries = (
        fund.sector_chart_data if breakdown == "sectors" else fund.country_chart_data
    )
    return [Weight.from_chart_entry(entry) for entry in entries]


def weights_json(weights: list[Weight]) -> str:
    """Serialize weights as ``[{"name": ..., "weight": ...}, ...]``."""
    return json.dumps([weight.model_dump() for weight in weights])


def get_quote(source: MarketDataSource, symbol: SymbolDescriptor) -> StockInfo:
    """Fetch the quote and listing snapshot of a stock.

    :raises UnsupportedInstrumentError: If the symbol is not a stock.
    """
    if symbol.kind is not InstrumentKind.STOCK:
        raise UnsupportedInstrumentError(
            f"Quotes are only available for stocks, {symbol.display} is a "
            f"{symbol.kind.value}"
        )
    return source.fetch_stock_info(symbol.id)
