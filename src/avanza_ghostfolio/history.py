"""Historical price backfill across growing time-period buckets.

Avanza only serves price history in fixed look-back buckets (one month up to
max). A date range is covered by fetching the smallest bucket that reaches
``to_date`` and then walking to larger buckets until the bucket's declared
start is on or before ``from_date``. Points already emitted from a smaller
bucket are suppressed with a timestamp watermark.

Rows are kept in the order they are produced: provider order within a bucket,
buckets from smallest to largest. The merged series is therefore not
guaranteed to be chronological across bucket boundaries.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from decimal import Decimal

from avanza_ghostfolio.data.sources import MarketDataSource
from avanza_ghostfolio.exceptions import UpstreamError
from avanza_ghostfolio.types import HistoryRow, TimePeriod

logger = logging.getLogger(__name__)

HISTORY_HEADER = "date;marketPrice"

# Upper bounds (exclusive, in days between to_date and today) per bucket
PERIOD_THRESHOLDS: tuple[tuple[int, TimePeriod], ...] = (
    (30, TimePeriod.ONE_MONTH),
    (90, TimePeriod.THREE_MONTHS),
    (365, TimePeriod.ONE_YEAR),
    (365 * 3, TimePeriod.THREE_YEARS),
    (365 * 5, TimePeriod.FIVE_YEARS),
)


def initial_time_period(to_date: date, today: date | None = None) -> TimePeriod:
    """Pick the smallest bucket that still reaches back to ``to_date``.

    :param to_date: Last date of the requested range.
    :param today: Reference date (defaults to the current local date).
    :returns: The first bucket to fetch.
    """
    today = today or date.today()
    days = (today - to_date).days
    for threshold, period in PERIOD_THRESHOLDS:
        if days < threshold:
            return period
    return TimePeriod.MAX


def backfill(
    source: MarketDataSource,
    symbol_id: str,
    from_date: date,
    to_date: date,
    today: date | None = None,
) -> list[HistoryRow]:
    """Collect the price history of a symbol between two dates.

    :param source: Data source serving the price-history buckets.
    :param symbol_id: Orderbook identifier.
    :param from_date: First date wanted.
    :param to_date: Last date wanted (points after it are not emitted).
    :param today: Reference date for the first bucket (defaults to today).
    :returns: Rows in production order.
    :raises UpstreamError: If any bucket cannot be fetched; nothing is returned.
    """
    rows: list[HistoryRow] = []
    period: TimePeriod | None = initial_time_period(to_date, today)
    watermark = sys.maxsize

    while period is not None:
        logger.info("Fetching %s history for %s", period.value, symbol_id)
        history = source.fetch_history(symbol_id, period)
        if not history.points:
            raise UpstreamError(
                f"Empty {period.value} price series for symbol {symbol_id}"
            )

        next_watermark = history.points[0].timestamp
        for point in history.points:
            if point.timestamp >= watermark:
                continue
            if point.date > to_date:
                break
            rows.append(HistoryRow(point.date, point.price))
        watermark = next_watermark

        if history.from_date <= from_date:
            break
        period = period.next()

    logger.info("Collected %d rows for %s", len(rows), symbol_id)
    return rows


def format_price(price: float) -> str:
    """Render a price in plain decimal notation.

    The shortest round-tripping digits are used, never an exponent, and
    integral values drop the trailing ``.0``.
    """
    text = format(Decimal(repr(float(price))), "f")
    if text.endswith(".0"):
        return text[:-2]
    return text


def format_history_csv(rows: list[HistoryRow]) -> str:
    """Render rows as the semicolon-delimited text Ghostfolio imports.

    :param rows: Rows as returned by :func:`backfill`.
    :returns: Header line followed by one ``YYYY-MM-DD;price`` line per row.
    """
    lines = [HISTORY_HEADER]
    lines.extend(f"{row.date.isoformat()};{format_price(row.price)}" for row in rows)
    return "\n".join(lines)
