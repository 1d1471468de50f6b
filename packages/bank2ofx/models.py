"""Data models for ``bank2ofx``.

Every source parser produces :class:`Transaction` records; the OFX emitter
consumes them together with :class:`AccountInfo` and the statement bounds.
All objects are created fresh per conversion run and held only in memory.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ---------------------------------------------------------------------------
# Core record
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single normalized bank transaction.

    Any field may be ``None`` when the source did not provide it or when it
    could not be coerced. A transaction whose fields are all ``None`` is never
    retained by a parser.

    Attributes
    ----------
    date:
        Posting timestamp. Timezone-aware when the source carries an offset.
    description:
        Counterparty or memo text.
    amount:
        Signed amount; negative values are debits.
    id:
        Natural identifier provided by the bank (e.g., a reference number).
    """

    date: datetime | None = None
    description: str | None = None
    amount: Decimal | None = None
    id: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


# ---------------------------------------------------------------------------
# Column format descriptor
# ---------------------------------------------------------------------------


class ColumnRole(str, Enum):
    """Semantic role of one positional input column."""

    DATE = "date"
    DESCRIPTION = "description"
    AMOUNT = "amount"
    ID = "id"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class ColumnFormat:
    """Ordered column roles describing how to read a record's fields.

    Only the first ``len(roles)`` fields of a record are interpreted; trailing
    fields are ignored and missing trailing fields are simply absent.
    """

    roles: tuple[ColumnRole, ...]

    @classmethod
    def parse(cls, text: str) -> ColumnFormat:
        """Parse a comma-separated token list such as ``"date,description,id,amount"``.

        Raises ``ValueError`` on an empty list or an unknown token.
        """

        tokens = [t.strip().lower() for t in text.split(",")]
        if not any(tokens):
            raise ValueError("column format must name at least one column")
        roles: list[ColumnRole] = []
        for token in tokens:
            try:
                roles.append(ColumnRole(token))
            except ValueError:
                allowed = ", ".join(r.value for r in ColumnRole)
                raise ValueError(
                    f"unknown column format token {token!r} (expected one of: {allowed})"
                ) from None
        return cls(tuple(roles))

    def __iter__(self) -> Iterator[ColumnRole]:
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.roles)

    def __str__(self) -> str:
        return ",".join(r.value for r in self.roles)


DEFAULT_COLUMN_FORMAT = ColumnFormat(
    (ColumnRole.DATE, ColumnRole.DESCRIPTION, ColumnRole.ID, ColumnRole.AMOUNT)
)


# ---------------------------------------------------------------------------
# Account metadata
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Opaque account identifiers copied into ``BANKACCTFROM``."""

    bank_id: str
    account_id: str

    def __post_init__(self) -> None:
        for name in ("bank_id", "account_id"):
            if not getattr(self, name).strip():
                raise ValueError(f"AccountInfo.{name} must be non-empty")


__all__ = [
    "AccountInfo",
    "ColumnFormat",
    "ColumnRole",
    "DEFAULT_COLUMN_FORMAT",
    "Transaction",
]
