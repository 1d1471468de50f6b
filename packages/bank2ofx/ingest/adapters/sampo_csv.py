"""Adapter for the legacy Sampo bank CSV export.

Fixed layout: ``date;description;id;amount`` with ``DD.MM.YYYY`` dates and
text fields reduced to ASCII. Rows are all-or-nothing: if any of the four
fields fails to coerce the whole row is dropped (header rows, totals and
other malformed lines fall out this way).

This adapter does not update statement bounds; the caller derives them from
the returned transactions.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator

from ...bounds import BoundsTracker
from ...coerce import CoercionContext, coerce_field
from ...logging_setup import get_logger
from ...models import DEFAULT_COLUMN_FORMAT, Transaction

FIELD_SEPARATOR = ";"
DATE_FORMAT = "%d.%m.%Y"
COLUMN_FORMAT = DEFAULT_COLUMN_FORMAT

_CONTEXT = CoercionContext(date_format=DATE_FORMAT, transliterate=True)

_log = get_logger("bank2ofx.ingest.adapters.sampo_csv")


def row_to_transaction(fields: list[str]) -> Transaction | None:
    """Map one row to a :class:`Transaction`, or ``None`` when any field fails."""

    if len(fields) < len(COLUMN_FORMAT):
        return None
    values: dict[str, object] = {}
    for raw, role in zip(fields, COLUMN_FORMAT):
        coerced = coerce_field(raw, role, _CONTEXT)
        if not coerced.ok:
            return None
        values[role.value] = coerced.value
    tx = Transaction(**values)
    return None if tx.is_empty() else tx


class SampoCsvParser:
    """Legacy Sampo CSV parser (processor ``sampo``)."""

    name = "sampo"

    def iter_transactions(self, text: str) -> Iterator[Transaction]:
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=FIELD_SEPARATOR)
        for fields in reader:
            tx = row_to_transaction(fields)
            if tx is None:
                if fields:
                    _log.debug("discarding malformed row at line %d", reader.line_num)
                continue
            yield tx

    def parse(self, text: str, bounds: BoundsTracker) -> list[Transaction]:
        # ``bounds`` is accepted for interface parity and left untouched.
        return list(self.iter_transactions(text))


__all__ = ["COLUMN_FORMAT", "DATE_FORMAT", "FIELD_SEPARATOR", "SampoCsvParser", "row_to_transaction"]
