"""Statement bounds: earliest and latest transaction date of a run."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .models import Transaction


class NoBoundsError(ValueError):
    """Raised when bounds are requested before any dated transaction was seen."""


@dataclass(frozen=True, slots=True)
class StatementBounds:
    first: datetime
    last: datetime

    @classmethod
    def from_transactions(cls, transactions: Iterable[Transaction]) -> StatementBounds:
        tracker = BoundsTracker()
        for tx in transactions:
            tracker.update(tx.date)
        return tracker.bounds


class BoundsTracker:
    """Running min/max over transaction dates.

    Parsers receive a tracker from the caller and call :meth:`update` once per
    retained transaction. ``None`` dates are ignored so the bounds always equal
    dates that actually occur in the set.
    """

    def __init__(self) -> None:
        self._first: datetime | None = None
        self._last: datetime | None = None

    def update(self, date: datetime | None) -> None:
        if date is None:
            return
        if self._first is None or self._last is None:
            self._first = self._last = date
            return
        self._first = min(self._first, date)
        self._last = max(self._last, date)

    @property
    def is_set(self) -> bool:
        return self._first is not None

    @property
    def bounds(self) -> StatementBounds:
        if self._first is None or self._last is None:
            raise NoBoundsError("statement bounds are unset: no dated transactions were parsed")
        return StatementBounds(self._first, self._last)


__all__ = ["BoundsTracker", "NoBoundsError", "StatementBounds"]
