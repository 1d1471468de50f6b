"""Ingest utilities shared by the CLI and the conversion API.

Exposes the closed set of source processors and a factory that builds the
matching parser from a :class:`~bank2ofx.settings.ConversionSettings`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

from ..bounds import BoundsTracker
from ..models import Transaction

if TYPE_CHECKING:
    from ..settings import ConversionSettings


class Processor(str, Enum):
    """Source format selector."""

    TABLE = "table"
    SAMPO = "sampo"
    SAMLINK = "samlink"


class SourceParser(Protocol):
    """Produce transactions from decoded input text.

    Parsers that track statement bounds update ``bounds`` once per retained
    transaction; others leave it untouched.
    """

    name: str

    def parse(self, text: str, bounds: BoundsTracker) -> list[Transaction]: ...


def build_parser(settings: ConversionSettings) -> SourceParser:
    """Return the parser for ``settings.processor``."""

    from .adapters.sampo_csv import SampoCsvParser
    from .adapters.samlink_html import SamlinkHtmlParser
    from .adapters.table_csv import TableParser

    processor = Processor(settings.processor)
    if processor is Processor.TABLE:
        return TableParser(
            field_separator=settings.field_separator,
            record_separator=settings.record_separator,
            column_format=settings.column_format,
            date_format=settings.date_format,
        )
    if processor is Processor.SAMPO:
        return SampoCsvParser()
    return SamlinkHtmlParser()


def decode_input(data: bytes, encoding: str) -> str:
    """Decode raw input bytes; a leading UTF-8 BOM is dropped."""

    text = data.decode(encoding)
    return text.removeprefix("\ufeff")


__all__ = ["Processor", "SourceParser", "build_parser", "decode_input"]
