"""Conversion settings.

A single validated, immutable model carries the whole configuration surface of
one run. Validation happens before any input is read, so configuration
mistakes (unknown column token, unknown processor, bad separator or encoding)
abort the run early with a ``pydantic.ValidationError``.
"""

from __future__ import annotations

import codecs
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .ingest.adapters.table_csv import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FIELD_SEPARATOR,
    DEFAULT_RECORD_SEPARATOR,
)
from .ingest.utils import Processor
from .models import DEFAULT_COLUMN_FORMAT, AccountInfo, ColumnFormat

# Shell-friendly spellings accepted for separators.
_SEPARATOR_WORDS = {
    "tab": "\t",
    "newline": "\n",
    "crlf": "\r\n",
    "comma": ",",
    "semicolon": ";",
    "pipe": "|",
}
_ESCAPES = (("\\t", "\t"), ("\\r", "\r"), ("\\n", "\n"))


def decode_separator(value: str) -> str:
    """Turn ``"\\t"``/``"tab"``-style spellings into the literal separator."""

    word = _SEPARATOR_WORDS.get(value.strip().lower()) if value.strip() else None
    if word is not None:
        return word
    for escaped, literal in _ESCAPES:
        value = value.replace(escaped, literal)
    return value


class ConversionSettings(BaseModel):
    """Everything one conversion run needs.

    ``input_path``/``output_path`` of ``None`` mean stdin/stdout.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    input_path: Path | None = None
    output_path: Path | None = None
    input_encoding: str = "utf-8"
    output_encoding: str = "utf-8"
    field_separator: str = DEFAULT_FIELD_SEPARATOR
    record_separator: str = DEFAULT_RECORD_SEPARATOR
    column_format: ColumnFormat = DEFAULT_COLUMN_FORMAT
    date_format: str = DEFAULT_DATE_FORMAT
    processor: Processor = Processor.TABLE
    bank_id: str
    account_id: str

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def _dash_means_stdio(cls, v: object) -> object:
        if v is None or str(v) == "-":
            return None
        return v

    @field_validator("input_encoding", "output_encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown character encoding: {v!r}") from e
        return v

    @field_validator("field_separator", "record_separator", mode="before")
    @classmethod
    def _decode_separator(cls, v: object) -> object:
        return decode_separator(v) if isinstance(v, str) else v

    @field_validator("field_separator")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"field separator must be a single character, got {v!r}")
        return v

    @field_validator("record_separator")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("record separator must be non-empty")
        return v

    @field_validator("column_format", mode="before")
    @classmethod
    def _parse_column_format(cls, v: object) -> object:
        if isinstance(v, str):
            return ColumnFormat.parse(v)
        return v

    @field_validator("bank_id", "account_id")
    @classmethod
    def _present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be non-empty")
        return v

    @model_validator(mode="after")
    def _distinct_separators(self) -> ConversionSettings:
        if self.field_separator == self.record_separator:
            raise ValueError("field and record separators must differ")
        return self

    @property
    def account(self) -> AccountInfo:
        return AccountInfo(bank_id=self.bank_id, account_id=self.account_id)


__all__ = ["ConversionSettings", "decode_separator"]
