"""Field coercion: raw text field + column role -> typed value.

Coercion never raises for bad input. :func:`coerce_field` returns a
:class:`Coerced` pair so each parser can apply its own policy: the generic
table parser keeps the (``None``) value of a failed field, while the legacy
CSV dialect drops the whole record when any field fails.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

from .models import ColumnRole

_WHITESPACE_RE = re.compile(r"\s+")


class Coerced(NamedTuple):
    """Outcome of a single field coercion."""

    value: Any
    ok: bool


_FAILED = Coerced(None, False)
_MISSING = Coerced(None, True)


@dataclass(frozen=True, slots=True)
class CoercionContext:
    """Per-parser coercion settings.

    Attributes
    ----------
    date_format:
        ``strptime`` pattern for ``date`` columns.
    transliterate:
        When true, text fields are reduced to ASCII (diacritics stripped).
    """

    date_format: str
    transliterate: bool = False


def to_ascii(text: str) -> str:
    """Best-effort ASCII transliteration (``"Pääkkönen"`` -> ``"Paakkonen"``)."""

    normalized = unicodedata.normalize("NFKD", text)
    return normalized.encode("ascii", "ignore").decode("ascii")


def parse_amount(raw: str) -> Decimal | None:
    """Parse a monetary amount, tolerating common bank-export quirks.

    All whitespace is removed first (``"- 1 234.50"`` -> ``"-1234.50"``). A
    decimal comma is accepted when the text has no dot, and a trailing sign is
    moved to the front (``"4,50-"`` -> ``"-4.50"``). Returns ``None`` for
    anything that is not a finite decimal number.
    """

    s = _WHITESPACE_RE.sub("", raw)
    if not s:
        return None
    s = s.replace("\u2212", "-")
    if "." not in s and s.count(",") == 1:
        s = s.replace(",", ".")
    if len(s) > 1 and s[-1] in "+-" and s[0] not in "+-":
        s = s[-1] + s[:-1]
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    if not d.is_finite():
        return None
    return d


def coerce_field(raw: str | None, role: ColumnRole, context: CoercionContext) -> Coerced:
    """Coerce one raw field according to ``role``.

    Empty fields coerce successfully to ``None``. ``skip`` columns always
    yield ``Coerced(None, True)``; callers do not store them.
    """

    if raw is None:
        return _MISSING

    if role is ColumnRole.DATE:
        s = raw.strip()
        if not s:
            return _MISSING
        try:
            return Coerced(datetime.strptime(s, context.date_format), True)
        except ValueError:
            return _FAILED

    if role is ColumnRole.AMOUNT:
        if not _WHITESPACE_RE.sub("", raw):
            return _MISSING
        amount = parse_amount(raw)
        return _FAILED if amount is None else Coerced(amount, True)

    if role in (ColumnRole.DESCRIPTION, ColumnRole.ID):
        text = to_ascii(raw) if context.transliterate else raw
        text = text.strip()
        return Coerced(text or None, True)

    return _MISSING


__all__ = ["Coerced", "CoercionContext", "coerce_field", "parse_amount", "to_ascii"]
