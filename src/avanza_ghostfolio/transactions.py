"""Normalization of Avanza transaction exports into Ghostfolio activities.

Expected CSV layout (semicolon-delimited, with a header row):

    Datum;Konto;Typ av transaktion;Värdepapper/beskrivning;Antal;Kurs;Belopp;Courtage;Valuta;ISIN;Resultat
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from avanza_ghostfolio.exceptions import (
    InputFileError,
    UnknownTransactionTypeError,
)
from avanza_ghostfolio.types import TransactionRecord, TransactionType

logger = logging.getLogger(__name__)

COLUMN_COUNT = 11

# Cash movements between bank and brokerage are not portfolio activities
SKIPPED_TYPES = frozenset(["Insättning", "Uttag"])

AVANZA_TYPE_MAP: dict[str, TransactionType] = {
    "Köp": TransactionType.BUY,
    "Sälj": TransactionType.SELL,
    "Utdelning": TransactionType.DIVIDEND,
    "Utländsk källskatt": TransactionType.FEE,
    "Övrigt": TransactionType.OTHER,
}


def parse_avanza_number(value: str) -> float:
    """Convert an Avanza formatted number to float.

    ``-`` means zero, the decimal separator is a comma and anything
    unparsable counts as zero.
    """
    value = value.strip()
    if value == "-":
        return 0.0
    try:
        return float(value.replace(",", "."))
    except ValueError:
        return 0.0


def map_transaction_type(label: str) -> TransactionType:
    """Map an Avanza transaction label to a Ghostfolio activity type.

    :raises UnknownTransactionTypeError: If the label is not known.
    """
    try:
        return AVANZA_TYPE_MAP[label]
    except KeyError:
        raise UnknownTransactionTypeError(
            f"Unknown transaction type '{label}'"
        ) from None


def _reclassify_other(record: TransactionRecord) -> TransactionRecord:
    """Guess the activity type of an "Övrigt" row from its numbers."""
    if record.amount == 0.0:
        # Reinvested dividends show up as a positive and a negative half;
        # the positive half is a BUY, not a SELL
        if record.price > 0.0:
            return record.model_copy(update={"transaction_type": TransactionType.BUY})
        return record.model_copy(
            update={
                "transaction_type": TransactionType.SELL,
                "price": abs(record.price),
            }
        )
    if record.price < 0.0:
        return record.model_copy(update={"transaction_type": TransactionType.FEE})
    if record.price > 0.0:
        return record.model_copy(
            update={"transaction_type": TransactionType.INTEREST}
        )
    return record


def parse_record(row: list[str]) -> TransactionRecord:
    """Build a record from one CSV row of the 11-column layout.

    :param row: Raw CSV fields.
    :returns: Normalized record.
    :raises UnknownTransactionTypeError: If the type label is not known.
    """
    record = TransactionRecord(
        date=row[0],
        account=row[1],
        transaction_type=map_transaction_type(row[2]),
        security=row[3],
        amount=parse_avanza_number(row[4]),
        price_per_unit=parse_avanza_number(row[5]),
        price=parse_avanza_number(row[6]),
        fee=parse_avanza_number(row[7]),
        currency=row[8],
        isin=row[9],
        result=parse_avanza_number(row[10]),
    )
    if record.transaction_type is TransactionType.OTHER:
        logger.debug("Reclassifying %s", record)
        record = _reclassify_other(record)
    return record


def parse_rows(rows: Iterable[list[str]]) -> Iterator[TransactionRecord]:
    """Normalize data rows (header already removed).

    Rows with a different column count are skipped with a warning; deposits
    and withdrawals are dropped before mapping.
    """
    for line_no, row in enumerate(rows, start=2):
        if len(row) != COLUMN_COUNT:
            logger.warning(
                "Skipping line %d: expected %d columns, got %d",
                line_no,
                COLUMN_COUNT,
                len(row),
            )
            continue
        if row[2] in SKIPPED_TYPES:
            continue
        yield parse_record(row)


def parse_from_file(path: str | Path) -> list[TransactionRecord]:
    """Read and normalize an Avanza transaction export.

    :param path: Path to the semicolon-delimited export.
    :returns: Normalized records in file order.
    :raises InputFileError: If the file cannot be read.
    :raises UnknownTransactionTypeError: If a row has an unmapped type label.
    """
    path = Path(path)
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(f, delimiter=";")
            next(reader, None)
            return list(parse_rows(reader))
    except csv.Error as e:
        raise InputFileError(f"CSV parsing error in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(f"Failed to read transaction file {path}: {e}") from e
