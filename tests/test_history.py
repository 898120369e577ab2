"""Tests for the history backfill across time-period buckets."""

from datetime import date, timedelta

import pytest

from avanza_ghostfolio.exceptions import UpstreamError
from avanza_ghostfolio.history import (
    HISTORY_HEADER,
    backfill,
    format_history_csv,
    format_price,
    initial_time_period,
)
from avanza_ghostfolio.types import HistoryRow, PriceHistory, TimePeriod
from conftest import StubDataSource, make_history, ms

TODAY = date(2024, 6, 1)


class FailingDataSource(StubDataSource):
    """Stub that fails when a given bucket is requested."""

    def __init__(self, fail_on: TimePeriod, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fail_on = fail_on

    def fetch_history(self, symbol_id: str, period: TimePeriod) -> PriceHistory:
        if period is self.fail_on:
            self.history_calls.append(period)
            raise UpstreamError("connection reset")
        return super().fetch_history(symbol_id, period)


class TestInitialTimePeriod:
    """Tests for choosing the first bucket."""

    @pytest.mark.parametrize(
        ("days_ago", "expected"),
        [
            (0, TimePeriod.ONE_MONTH),
            (29, TimePeriod.ONE_MONTH),
            (30, TimePeriod.THREE_MONTHS),
            (89, TimePeriod.THREE_MONTHS),
            (90, TimePeriod.ONE_YEAR),
            (364, TimePeriod.ONE_YEAR),
            (365, TimePeriod.THREE_YEARS),
            (365 * 3 - 1, TimePeriod.THREE_YEARS),
            (365 * 3, TimePeriod.FIVE_YEARS),
            (365 * 5 - 1, TimePeriod.FIVE_YEARS),
            (365 * 5, TimePeriod.MAX),
            (365 * 20, TimePeriod.MAX),
        ],
    )
    def test_smallest_bucket_reaching_to_date(
        self, days_ago: int, expected: TimePeriod
    ) -> None:
        """The first bucket is the smallest whose threshold exceeds the distance."""
        to_date = TODAY - timedelta(days=days_ago)
        assert initial_time_period(to_date, today=TODAY) is expected

    def test_sizing_ignores_from_date(self) -> None:
        """Sizing depends on to_date only, so a long range still starts small."""
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2024, 5, 2), TODAY, [(date(2024, 5, 2), 1.0)]
                ),
                TimePeriod.THREE_MONTHS: make_history(
                    date(2024, 3, 1), TODAY, [(date(2024, 3, 1), 1.0)]
                ),
                TimePeriod.ONE_YEAR: make_history(
                    date(2023, 6, 1), TODAY, [(date(2023, 6, 1), 1.0)]
                ),
            }
        )

        backfill(source, "1", date(2023, 6, 1), TODAY, today=TODAY)

        assert source.history_calls[0] is TimePeriod.ONE_MONTH


class TestBackfill:
    """Tests for the backward bucket walk."""

    def test_single_bucket_covering_range(self) -> None:
        """A bucket starting before from_date ends the walk after one pass."""
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2024, 5, 2),
                    TODAY,
                    [
                        (date(2024, 5, 2), 10.0),
                        (date(2024, 5, 15), 11.0),
                        (date(2024, 6, 1), 12.0),
                    ],
                )
            }
        )

        rows = backfill(source, "1", date(2024, 5, 10), TODAY, today=TODAY)

        assert source.history_calls == [TimePeriod.ONE_MONTH]
        assert rows == [
            HistoryRow(date(2024, 5, 2), 10.0),
            HistoryRow(date(2024, 5, 15), 11.0),
            HistoryRow(date(2024, 6, 1), 12.0),
        ]

    def test_bucket_starting_on_from_date_is_enough(self) -> None:
        """Coverage starting exactly on from_date stops the walk."""
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2024, 5, 2), TODAY, [(date(2024, 5, 2), 10.0)]
                )
            }
        )

        backfill(source, "1", date(2024, 5, 2), TODAY, today=TODAY)

        assert source.history_calls == [TimePeriod.ONE_MONTH]

    def test_points_after_to_date_end_the_bucket_scan(self) -> None:
        """The first point after to_date stops the scan of that bucket."""
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2024, 5, 2),
                    TODAY,
                    [
                        (date(2024, 5, 2), 10.0),
                        (date(2024, 5, 25), 11.0),
                        (date(2024, 5, 10), 12.0),
                    ],
                )
            }
        )

        rows = backfill(source, "1", date(2024, 5, 2), date(2024, 5, 20), today=TODAY)

        assert rows == [HistoryRow(date(2024, 5, 2), 10.0)]

    def test_overlap_with_smaller_bucket_is_suppressed(self) -> None:
        """Points at or past the previous watermark are not emitted twice."""
        shared = [
            (date(2024, 5, 2), 10.0),
            (date(2024, 5, 15), 11.0),
            (date(2024, 6, 1), 12.0),
        ]
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(date(2024, 5, 2), TODAY, shared),
                TimePeriod.THREE_MONTHS: make_history(
                    date(2024, 3, 1),
                    TODAY,
                    [(date(2024, 3, 1), 7.0), (date(2024, 4, 1), 8.0), *shared],
                ),
            }
        )

        rows = backfill(source, "1", date(2024, 3, 15), TODAY, today=TODAY)

        assert source.history_calls == [TimePeriod.ONE_MONTH, TimePeriod.THREE_MONTHS]
        # Production order: smaller bucket first, then the older points.
        assert rows == [
            HistoryRow(date(2024, 5, 2), 10.0),
            HistoryRow(date(2024, 5, 15), 11.0),
            HistoryRow(date(2024, 6, 1), 12.0),
            HistoryRow(date(2024, 3, 1), 7.0),
            HistoryRow(date(2024, 4, 1), 8.0),
        ]
        assert len({row.date for row in rows}) == len(rows)

    def test_no_point_at_or_past_watermark_from_larger_bucket(self) -> None:
        """Nothing newer than the smaller bucket's first point leaks from the next."""
        watermark_day = date(2024, 5, 2)
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    watermark_day, TODAY, [(watermark_day, 10.0)]
                ),
                TimePeriod.THREE_MONTHS: make_history(
                    date(2024, 3, 1),
                    TODAY,
                    [
                        (date(2024, 3, 1), 7.0),
                        (watermark_day, 99.0),
                        (date(2024, 5, 20), 99.0),
                    ],
                ),
            }
        )

        rows = backfill(source, "1", date(2024, 3, 1), TODAY, today=TODAY)

        from_larger = rows[1:]
        assert all(ms(row.date) < ms(watermark_day) for row in from_larger)
        assert 99.0 not in [row.price for row in rows]

    def test_stops_after_max_even_if_range_not_covered(self) -> None:
        """At most one pass per bucket, six in total."""
        histories = {
            period: make_history(
                date(2010, 1, 1), TODAY, [(date(2024, 5, 30), 1.0)]
            )
            for period in TimePeriod
        }
        source = StubDataSource(histories=histories)

        rows = backfill(source, "1", date(1990, 1, 1), TODAY, today=TODAY)

        assert source.history_calls == list(TimePeriod)
        assert len(source.history_calls) == 6
        assert rows == [HistoryRow(date(2024, 5, 30), 1.0)]

    def test_starting_at_max_makes_one_pass(self) -> None:
        """A to_date far in the past starts and ends at the max bucket."""
        source = StubDataSource(
            histories={
                TimePeriod.MAX: make_history(
                    date(2005, 1, 1),
                    TODAY,
                    [(date(2005, 1, 3), 5.0), (date(2010, 1, 4), 6.0)],
                )
            }
        )

        rows = backfill(source, "1", date(2000, 1, 1), date(2012, 1, 1), today=TODAY)

        assert source.history_calls == [TimePeriod.MAX]
        assert len(rows) == 2

    def test_advances_when_first_bucket_does_not_reach_from_date(self) -> None:
        """A one-month bucket covering only the last 30 days does not end the walk."""
        today = date(2023, 6, 1)
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2023, 5, 2),
                    today,
                    [(date(2023, 5, 2), 100.0), (date(2023, 6, 1), 101.0)],
                ),
                TimePeriod.THREE_MONTHS: make_history(
                    date(2023, 3, 1),
                    today,
                    [
                        (date(2023, 3, 1), 90.0),
                        (date(2023, 5, 2), 100.0),
                        (date(2023, 6, 1), 101.0),
                    ],
                ),
                TimePeriod.ONE_YEAR: make_history(
                    date(2022, 6, 1),
                    today,
                    [
                        (date(2022, 6, 1), 80.0),
                        (date(2023, 3, 1), 90.0),
                        (date(2023, 6, 1), 101.0),
                    ],
                ),
            }
        )

        rows = backfill(
            source, "1", date(2023, 1, 1), date(2023, 6, 1), today=today
        )

        assert source.history_calls == [
            TimePeriod.ONE_MONTH,
            TimePeriod.THREE_MONTHS,
            TimePeriod.ONE_YEAR,
        ]
        assert rows[:2] == [
            HistoryRow(date(2023, 5, 2), 100.0),
            HistoryRow(date(2023, 6, 1), 101.0),
        ]
        assert rows[2:] == [
            HistoryRow(date(2023, 3, 1), 90.0),
            HistoryRow(date(2022, 6, 1), 80.0),
        ]

    def test_failure_mid_walk_is_fatal(self) -> None:
        """An upstream failure on a later bucket discards everything."""
        source = FailingDataSource(
            fail_on=TimePeriod.THREE_MONTHS,
            histories={
                TimePeriod.ONE_MONTH: make_history(
                    date(2024, 5, 2), TODAY, [(date(2024, 5, 2), 10.0)]
                )
            },
        )

        with pytest.raises(UpstreamError, match="connection reset"):
            backfill(source, "1", date(2024, 1, 1), TODAY, today=TODAY)

        assert source.history_calls == [TimePeriod.ONE_MONTH, TimePeriod.THREE_MONTHS]

    def test_empty_series_raises(self) -> None:
        """An empty bucket is reported as an upstream failure."""
        source = StubDataSource(
            histories={
                TimePeriod.ONE_MONTH: make_history(date(2024, 5, 2), TODAY, [])
            }
        )

        with pytest.raises(UpstreamError, match="Empty one_month"):
            backfill(source, "1", date(2024, 5, 10), TODAY, today=TODAY)


class TestFormatting:
    """Tests for rendering the merged series."""

    def test_integral_price_has_no_decimal_suffix(self) -> None:
        assert format_price(100.0) == "100"

    def test_fractional_price_kept(self) -> None:
        assert format_price(123.45) == "123.45"

    @pytest.mark.parametrize(
        ("price", "expected"),
        [
            (0.00005, "0.00005"),
            (1e16, "10000000000000000"),
            (1234567.5, "1234567.5"),
        ],
    )
    def test_no_exponent_notation(self, price: float, expected: str) -> None:
        """Very small and very large prices are written out in full."""
        assert format_price(price) == expected

    def test_header_only_for_empty_rows(self) -> None:
        assert format_history_csv([]) == HISTORY_HEADER

    def test_rows_joined_with_newlines(self) -> None:
        """Rows render as date;price lines under the header."""
        rows = [
            HistoryRow(date(2024, 5, 2), 10.0),
            HistoryRow(date(2024, 5, 15), 11.5),
        ]

        assert format_history_csv(rows) == (
            "date;marketPrice\n2024-05-02;10\n2024-05-15;11.5"
        )
