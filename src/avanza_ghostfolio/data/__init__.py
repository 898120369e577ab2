"""Market data source module."""

from avanza_ghostfolio.data.sources import AvanzaDataSource, MarketDataSource

__all__ = [
    "MarketDataSource",
    "AvanzaDataSource",
]
