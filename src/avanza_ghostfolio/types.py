"""Core type definitions for the Avanza to Ghostfolio bridge.

All data models use Pydantic BaseModel for validation of the upstream JSON
payloads and for serialization of the config file and command output.
Upstream payloads are camelCase, so API models use a camelCase alias
generator while still accepting the Python field names.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import NamedTuple, NewType

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Type aliases for domain-specific identifiers
OrderbookId = NewType("OrderbookId", str)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


class MutableModel(BaseModel):
    """Base model for mutable state objects."""

    model_config = ConfigDict(validate_assignment=True)


class ApiModel(BaseModel):
    """Base model for payloads decoded from a camelCase JSON API."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Symbol Types
# ---------------------------------------------------------------------------


class InstrumentKind(str, Enum):
    """Kind of instrument a symbol refers to."""

    STOCK = "STOCK"
    FUND = "FUND"
    # ETFs, certificates and the like; resolvable but without a guide
    OTHER = "OTHER"


class SymbolDescriptor(FrozenModel):
    """Resolved identity of a tradable instrument.

    :param id: Avanza orderbook identifier.
    :param display: Human readable instrument name.
    :param kind: Instrument kind (stock, fund or other).
    :param currency: Trading currency.
    :param last_price: Last traded price as reported by the search endpoint.
    """

    id: OrderbookId
    display: str
    kind: InstrumentKind
    currency: str
    last_price: str

    def describe(self) -> str:
        """Format the descriptor the way it is offered to the operator."""
        return f"{self.kind.value} - {self.display} ({self.last_price} {self.currency})"


class HitLink(ApiModel):
    """Link block of a search hit."""

    type: str
    link_display: str
    orderbook_id: str


class SearchHit(ApiModel):
    """Single hit returned by the global search endpoint."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    link: HitLink
    last_price: str = ""
    currency: str = ""


# ---------------------------------------------------------------------------
# Price History Types
# ---------------------------------------------------------------------------


class TimePeriod(str, Enum):
    """Look-back windows offered by the price-history endpoint.

    Members are declared in order of increasing historical coverage.
    """

    ONE_MONTH = "one_month"
    THREE_MONTHS = "three_months"
    ONE_YEAR = "one_year"
    THREE_YEARS = "three_years"
    FIVE_YEARS = "five_years"
    MAX = "max"

    def next(self) -> TimePeriod | None:
        """Return the next larger period, or None after ``MAX``."""
        members = list(TimePeriod)
        index = members.index(self)
        if index + 1 >= len(members):
            return None
        return members[index + 1]


class PricePoint(FrozenModel):
    """Single point of a price series.

    :param timestamp: Epoch timestamp in milliseconds.
    :param price: Price at that timestamp.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(alias="x")
    price: float = Field(alias="y")

    @property
    def date(self) -> date:
        """UTC calendar date of this point."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc).date()


class PriceHistory(ApiModel):
    """Price series for one bucket as returned by the chart endpoint.

    :param id: Orderbook identifier.
    :param name: Instrument name.
    :param from_date: First date covered by the bucket (YYYY-MM-DD).
    :param to_date: Last date covered by the bucket (YYYY-MM-DD).
    :param points: Price points in provider order.
    """

    id: str = ""
    name: str = ""
    from_date: date
    to_date: date
    points: list[PricePoint] = Field(default_factory=list, alias="dataSerie")


class HistoryRow(NamedTuple):
    """Row of the merged history series."""

    date: date
    price: float


# ---------------------------------------------------------------------------
# Quote and Fund Types
# ---------------------------------------------------------------------------


class Quote(ApiModel):
    """Last quote of a stock."""

    last: float


class Listing(ApiModel):
    """Listing details of a stock."""

    ticker_symbol: str
    currency: str


class StockInfo(ApiModel):
    """Quote and listing snapshot of a stock."""

    orderbook_id: str
    name: str
    isin: str = ""
    instrument_id: str = ""
    quote: Quote
    listing: Listing


class ChartEntry(ApiModel):
    """Named percentage slice of a fund breakdown (``y`` is 0-100)."""

    name: str
    y: float


class FundInfo(ApiModel):
    """Fund guide snapshot including sector and country breakdowns."""

    orderbook_id: str = ""
    name: str = ""
    nav: float | None = None
    currency: str = ""
    sector_chart_data: list[ChartEntry] = Field(default_factory=list)
    country_chart_data: list[ChartEntry] = Field(default_factory=list)


class Weight(FrozenModel):
    """Weight entry in the format Ghostfolio expects (``weight`` is 0-1)."""

    name: str
    weight: float

    @classmethod
    def from_chart_entry(cls, entry: ChartEntry) -> Weight:
        """Convert a percentage chart entry to a fractional weight."""
        return cls(name=entry.name, weight=entry.y / 100.0)


# ---------------------------------------------------------------------------
# Ghostfolio Types
# ---------------------------------------------------------------------------


class MarketData(ApiModel):
    """Asset profile as listed by Ghostfolio's admin market-data endpoint."""

    symbol: str
    data_source: str
    name: str | None = None
    currency: str | None = None
    asset_class: str | None = None
    asset_sub_class: str | None = None
    comment: str | None = None
    countries_count: int = 0
    sectors_count: int = 0
    market_data_item_count: int = 0
    activities_count: int = 0


class GhostfolioAssets(ApiModel):
    """Response of the admin market-data endpoint."""

    count: int = 0
    market_data: list[MarketData] = Field(default_factory=list)


class GhostfolioAccount(ApiModel):
    """Account registered in Ghostfolio."""

    id: str
    name: str
    currency: str | None = None
    balance: float = 0.0
    is_excluded: bool = False
    value: float = 0.0
    transaction_count: int = 0


class AccountResponse(ApiModel):
    """Response of the account endpoint."""

    accounts: list[GhostfolioAccount] = Field(default_factory=list)
    transaction_count: int = 0
    total_balance_in_base_currency: float = 0.0
    total_value_in_base_currency: float = 0.0


# ---------------------------------------------------------------------------
# Transaction Types
# ---------------------------------------------------------------------------


class TransactionType(str, Enum):
    """Ghostfolio activity type."""

    BUY = "BUY"
    DIVIDEND = "DIVIDEND"
    FEE = "FEE"
    INTEREST = "INTEREST"
    ITEM = "ITEM"
    LIABILITY = "LIABILITY"
    SELL = "SELL"
    OTHER = "OTHER"


class TransactionRecord(FrozenModel):
    """Normalized row of an Avanza transaction export.

    :param date: Transaction date as written in the export.
    :param account: Avanza account name or number.
    :param transaction_type: Mapped Ghostfolio activity type.
    :param security: Security name or description.
    :param amount: Number of units.
    :param price_per_unit: Price per unit.
    :param price: Total amount of the transaction.
    :param fee: Brokerage fee.
    :param currency: Transaction currency.
    :param isin: ISIN of the security.
    :param result: Realized result reported by Avanza.
    """

    date: str
    account: str
    transaction_type: TransactionType
    security: str
    amount: float
    price_per_unit: float
    price: float
    fee: float
    currency: str
    isin: str
    result: float


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class GhostfolioConfig(MutableModel):
    """Connection settings for a Ghostfolio instance.

    :param token: Bearer token used for API calls.
    :param base_url: Base URL of the instance, without trailing slash.
    :param account_mapping: Symbol to Ghostfolio account name.
    """

    token: str
    base_url: str
    account_mapping: dict[str, str] = Field(default_factory=dict)


class AppConfig(MutableModel):
    """Contents of the per-user config file.

    :param ghostfolio: Ghostfolio settings, or None until initialised.
    :param avanza_to_ghostfolio_ticker: Avanza symbol to Ghostfolio ticker.
    """

    ghostfolio: GhostfolioConfig | None = None
    avanza_to_ghostfolio_ticker: dict[str, str] = Field(default_factory=dict)
