"""Conversion orchestration for the ``bank2ofx`` package.

One run is a single sequential pass: read the whole input, parse it into
transactions with the selected processor, then render the complete OFX
document. Output is only written once rendering has succeeded, so a failed run
never leaves a partial file behind.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO

from .bounds import BoundsTracker, StatementBounds
from .ingest.utils import build_parser, decode_input
from .logging_setup import get_logger
from .models import Transaction
from .ofx import write_statement
from .settings import ConversionSettings

_log = get_logger("bank2ofx.api")


class NoTransactionsError(ValueError):
    """Raised when parsing produced no transactions to emit."""

    def __init__(self, message: str = "no transactions found") -> None:
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ParseResult:
    transactions: list[Transaction]
    bounds: StatementBounds


def parse_transactions(text: str, settings: ConversionSettings) -> ParseResult:
    """Parse decoded ``text`` with the processor named in ``settings``.

    Raises :class:`NoTransactionsError` when nothing was retained and
    :class:`~bank2ofx.bounds.NoBoundsError` when no transaction carries a date.
    """

    parser = build_parser(settings)
    tracker = BoundsTracker()
    transactions = parser.parse(text, tracker)
    _log.info("%s: parsed %d transactions", parser.name, len(transactions))
    if not transactions:
        raise NoTransactionsError()

    if tracker.is_set:
        bounds = tracker.bounds
    else:
        # The sampo processor reports no bounds; derive them from the result.
        _log.debug("%s: no bounds tracked while parsing; deriving from transactions", parser.name)
        bounds = StatementBounds.from_transactions(transactions)
    return ParseResult(transactions, bounds)


def convert_text(
    text: str, settings: ConversionSettings, *, now: datetime | None = None
) -> bytes:
    """Convert decoded input text into an encoded OFX document."""

    return _render(parse_transactions(text, settings), settings, now)


def _render(result: ParseResult, settings: ConversionSettings, now: datetime | None) -> bytes:
    return write_statement(
        result.transactions,
        result.bounds,
        settings.account,
        server_time=now or datetime.now(),
        encoding=settings.output_encoding,
    )


def check_paths(settings: ConversionSettings) -> None:
    """Fail fast on configuration errors involving the filesystem.

    Raises ``FileExistsError`` when the output file already exists and
    ``FileNotFoundError`` when the input file is missing.
    """

    if settings.output_path is not None and settings.output_path.exists():
        raise FileExistsError(f"output file already exists: {settings.output_path}")
    if settings.input_path is not None and not settings.input_path.is_file():
        raise FileNotFoundError(f"input file not found: {settings.input_path}")


def convert(
    settings: ConversionSettings,
    *,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
    now: datetime | None = None,
) -> int:
    """Run one conversion as configured; returns the number of transactions.

    ``stdin``/``stdout`` default to the process's binary standard streams and
    are used when the corresponding path in ``settings`` is ``None``.
    """

    check_paths(settings)

    if settings.input_path is not None:
        data = settings.input_path.read_bytes()
    else:
        data = (stdin or sys.stdin.buffer).read()
    text = decode_input(data, settings.input_encoding)

    result = parse_transactions(text, settings)
    document = _render(result, settings, now)

    if settings.output_path is not None:
        # Exclusive create: never clobber a file that appeared meanwhile.
        with settings.output_path.open("xb") as f:
            f.write(document)
        _log.info("wrote %s", settings.output_path)
    else:
        out = stdout or sys.stdout.buffer
        out.write(document)
        out.flush()
    return len(result.transactions)


__all__ = [
    "NoTransactionsError",
    "ParseResult",
    "check_paths",
    "convert",
    "convert_text",
    "parse_transactions",
]
