"""Adapter for generic delimited transaction tables.

Each record is read positionally against a :class:`ColumnFormat` (default
``date, description, id, amount``). Separators and the date pattern are
configurable. Tokenizing follows RFC 4180 quoting via the stdlib :mod:`csv`
module.

Failure mode
------------
Per-field: a field that cannot be coerced becomes ``None`` and the record is
kept. A record whose fields are all ``None`` (e.g., a blank line) is dropped.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Iterator

from ...bounds import BoundsTracker
from ...coerce import CoercionContext, coerce_field
from ...logging_setup import get_logger
from ...models import DEFAULT_COLUMN_FORMAT, ColumnFormat, ColumnRole, Transaction

DEFAULT_FIELD_SEPARATOR = ","
DEFAULT_RECORD_SEPARATOR = "\n"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROLE_TO_FIELD = {
    ColumnRole.DATE: "date",
    ColumnRole.DESCRIPTION: "description",
    ColumnRole.AMOUNT: "amount",
    ColumnRole.ID: "id",
}

_log = get_logger("bank2ofx.ingest.adapters.table_csv")


def split_records(text: str, record_separator: str) -> Iterable[str]:
    """Split ``text`` into record strings for :func:`csv.reader`.

    Newline separators are left to the csv module so quoted fields may span
    lines. Any other separator splits the text literally, and line breaks
    around each record (one record per line) are dropped.
    """

    if record_separator in ("\n", "\r\n", "\r"):
        return io.StringIO(text, newline="")
    return [record.strip("\r\n") for record in text.split(record_separator)]


def record_to_transaction(
    fields: list[str], column_format: ColumnFormat, context: CoercionContext
) -> Transaction:
    """Zip ``fields`` against ``column_format`` with per-field null tolerance."""

    values: dict[str, object] = {}
    for raw, role in zip(fields, column_format):
        attr = _ROLE_TO_FIELD.get(role)
        if attr is None:
            continue
        values[attr] = coerce_field(raw, role, context).value
    return Transaction(**values)


class TableParser:
    """Generic delimited table parser (processor ``table``)."""

    name = "table"

    def __init__(
        self,
        *,
        field_separator: str = DEFAULT_FIELD_SEPARATOR,
        record_separator: str = DEFAULT_RECORD_SEPARATOR,
        column_format: ColumnFormat = DEFAULT_COLUMN_FORMAT,
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        if len(field_separator) != 1:
            raise ValueError(f"field separator must be a single character, got {field_separator!r}")
        if not record_separator:
            raise ValueError("record separator must be non-empty")
        self.field_separator = field_separator
        self.record_separator = record_separator
        self.column_format = column_format
        self.context = CoercionContext(date_format=date_format)

    def iter_transactions(self, text: str, bounds: BoundsTracker) -> Iterator[Transaction]:
        reader = csv.reader(
            split_records(text, self.record_separator), delimiter=self.field_separator
        )
        for fields in reader:
            tx = record_to_transaction(fields, self.column_format, self.context)
            if tx.is_empty():
                _log.debug("dropping empty record at line %d", reader.line_num)
                continue
            bounds.update(tx.date)
            yield tx

    def parse(self, text: str, bounds: BoundsTracker) -> list[Transaction]:
        return list(self.iter_transactions(text, bounds))


__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_FIELD_SEPARATOR",
    "DEFAULT_RECORD_SEPARATOR",
    "TableParser",
    "record_to_transaction",
    "split_records",
]
