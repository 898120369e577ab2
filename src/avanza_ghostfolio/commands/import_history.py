"""Execution of the import command.

Resolves a symbol, backfills its price history over the requested range and
renders it in the ``date;marketPrice`` format Ghostfolio's market data import
accepts.
"""

from __future__ import annotations

from datetime import date, timedelta

from avanza_ghostfolio.data.sources import MarketDataSource
from avanza_ghostfolio.history import backfill, format_history_csv
from avanza_ghostfolio.prompts import Prompter
from avanza_ghostfolio.resolver import resolve_symbol


def default_date_range(today: date | None = None) -> tuple[date, date]:
    """Return the default import range: one year (365 days) back to today."""
    today = today or date.today()
    return today - timedelta(days=365), today


def import_history(
    name: str,
    from_date: date | None,
    to_date: date | None,
    source: MarketDataSource,
    prompter: Prompter,
    today: date | None = None,
) -> str:
    """Build the history text for a symbol.

    :param name: Free-text instrument name.
    :param from_date: First date wanted, defaults to one year ago.
    :param to_date: Last date wanted, defaults to today.
    :param source: Market data source.
    :param prompter: Prompter used for symbol disambiguation.
    :param today: Reference date for defaults and bucket sizing.
    :returns: The rendered history text.
    """
    default_from, default_to = default_date_range(today)
    from_date = from_date or default_from
    to_date = to_date or default_to

    symbol = resolve_symbol(name, source, prompter)
    rows = backfill(source, symbol.id, from_date, to_date, today=today)
    return format_history_csv(rows)
