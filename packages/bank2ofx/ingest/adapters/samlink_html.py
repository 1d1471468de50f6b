"""Adapter for the legacy Samlink HTML account statement page.

The page is a fixed-width text layout wrapped in HTML. Each transaction sits
on its own ``<TD CLASS="courier1">`` line; the year is not repeated per row
and is carried over from the statement period header
(``DD.MM.YYYY - DD.MM.YYYY``).

Row layout after markup removal and trimming (0-based character offsets)::

    [0, 2)    day of entry
    [2, 4)    month of entry
    [10, 49)  description
    [90, 104) amount digits (whitespace inside is ignored)
    [105]     sign flag, ``+`` or ``-``

The source timezone is not carried into OFX reliably, so every date is
pinned to local noon (midnight plus ``NOON_SHIFT``) to keep consumers from
rolling it over to the neighbouring day.

Lines that do not match are ignored. Matching rows that cannot be decoded
are skipped and logged at DEBUG.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from decimal import Decimal

from ...bounds import BoundsTracker
from ...logging_setup import get_logger
from ...models import Transaction

DAY_SLICE = slice(0, 2)
MONTH_SLICE = slice(2, 4)
DESCRIPTION_SLICE = slice(10, 49)
AMOUNT_SLICE = slice(90, 104)
SIGN_INDEX = 105

NOON_SHIFT = timedelta(hours=12)

ROW_MARKER = '<TD CLASS="courier1">'

_PERIOD_RE = re.compile(r"\d{1,2}\.\d{1,2}\.(\d{4})\s*-\s*\d{1,2}\.\d{1,2}\.\d{4}")
_MARKER_RE = re.compile(re.escape(ROW_MARKER), re.IGNORECASE)
_TAG_RE = re.compile(r"</?[A-Za-z][^>]*>")
_ROW_RE = re.compile(r"^\d{4} \d{4} ")
_ENTITY_RE = re.compile(r"&(#\d+|[A-Za-z]+);")
_WHITESPACE_RE = re.compile(r"\s+")

# Letters that occur in Finnish/Swedish statement text.
ENTITIES: dict[str, str] = {
    "auml": "ä",
    "Auml": "Ä",
    "ouml": "ö",
    "Ouml": "Ö",
    "aring": "å",
    "Aring": "Å",
    "uuml": "ü",
    "Uuml": "Ü",
    "eacute": "é",
    "Eacute": "É",
    "#228": "ä",
    "#196": "Ä",
    "#246": "ö",
    "#214": "Ö",
    "#229": "å",
    "#197": "Å",
    "#252": "ü",
    "#220": "Ü",
    "#233": "é",
    "#201": "É",
}

_log = get_logger("bank2ofx.ingest.adapters.samlink_html")


def decode_entities(text: str) -> str:
    """Replace the known letter entities; unknown entities are left as-is."""

    return _ENTITY_RE.sub(lambda m: ENTITIES.get(m.group(1), m.group(0)), text)


def strip_row_markup(line: str) -> str:
    """Remove the wrapping tags, decode ``&nbsp;``/``&amp;`` and trim."""

    s = _TAG_RE.sub("", line)
    s = s.replace("&nbsp;", " ").replace("&amp;", "&")
    return s.strip()


def parse_amount(row: str) -> Decimal:
    """Combine the sign flag with the amount digits; raises ``ValueError``."""

    digits = _WHITESPACE_RE.sub("", row[AMOUNT_SLICE])
    if "," in digits:
        # Decimal comma; dots are then thousands separators.
        digits = digits.replace(".", "").replace(",", ".")
    value = float(row[SIGN_INDEX] + digits)
    if not math.isfinite(value):
        raise ValueError(f"non-finite amount: {digits!r}")
    return Decimal(repr(value))


@dataclass(slots=True)
class _ScanState:
    year: int
    tz: tzinfo


class SamlinkHtmlParser:
    """Legacy Samlink HTML statement parser (processor ``samlink``).

    ``today`` and ``tz`` default to the current local date and UTC offset,
    captured once per :meth:`parse` call.
    """

    name = "samlink"

    def __init__(self, *, today: datetime | None = None, tz: tzinfo | None = None) -> None:
        self._today = today
        self._tz = tz

    def _initial_state(self) -> _ScanState:
        now = self._today or datetime.now().astimezone()
        tz = self._tz or now.tzinfo or timezone.utc
        return _ScanState(year=now.year, tz=tz)

    def decode_row(self, row: str, state: _ScanState) -> Transaction | None:
        if len(row) <= SIGN_INDEX:
            _log.debug("row too short for fixed layout: %r", row)
            return None
        try:
            midnight = datetime(
                state.year, int(row[MONTH_SLICE]), int(row[DAY_SLICE]), tzinfo=state.tz
            )
            amount = parse_amount(row)
        except ValueError as e:
            _log.debug("skipping undecodable row %r: %s", row, e)
            return None
        description = decode_entities(row[DESCRIPTION_SLICE].strip())
        return Transaction(
            date=midnight + NOON_SHIFT,
            description=description or None,
            amount=amount,
        )

    def iter_transactions(self, text: str, bounds: BoundsTracker) -> Iterator[Transaction]:
        state = self._initial_state()
        for line in text.splitlines():
            row = strip_row_markup(line) if _MARKER_RE.search(line) else None
            if row is None or not _ROW_RE.match(row):
                # Transaction rows never count as period headers.
                period = _PERIOD_RE.search(line)
                if period:
                    state.year = int(period.group(1))
                    _log.debug("statement year set to %d", state.year)
                continue
            tx = self.decode_row(row, state)
            if tx is None:
                continue
            bounds.update(tx.date)
            yield tx

    def parse(self, text: str, bounds: BoundsTracker) -> list[Transaction]:
        return list(self.iter_transactions(text, bounds))


__all__ = [
    "ENTITIES",
    "ROW_MARKER",
    "SamlinkHtmlParser",
    "decode_entities",
    "parse_amount",
    "strip_row_markup",
]
