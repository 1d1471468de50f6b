"""OFX 2.0 bank statement emitter.

Builds the statement as an :mod:`xml.etree.ElementTree` tree and serializes it
with the XML declaration and the ``<?OFX ...?>`` processing instruction::

    OFX
      SIGNONMSGSRSV1/SONRS      status, DTSERVER, LANGUAGE
      BANKMSGSRSV1/STMTTRNRS    TRNUID, status
        STMTRS                  CURDEF, BANKACCTFROM
          BANKTRANLIST          DTSTART, DTEND, STMTTRN*

Transactions are written once each, in input order.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from .bounds import StatementBounds
from .identity import synthesize_id
from .models import AccountInfo, Transaction

OFX_DATE_FORMAT = "%Y%m%d%H%M%S"

STATUS_CODE = "0"
SEVERITY = "INFO"
LANGUAGE = "ENG"
TRNUID = "0"
CURRENCY = "EUR"
ACCOUNT_TYPE = "CHECKING"
TRANSACTION_TYPE = "POS"

OFX_PI = (
    'OFXHEADER="200" VERSION="200" SECURITY="NONE" OLDFILEUID="NONE" NEWFILEUID="NONE"'
)


def format_date(value: datetime | None) -> str:
    return value.strftime(OFX_DATE_FORMAT) if value is not None else ""


def format_amount(value: Decimal | None) -> str:
    # ``format(..., "f")`` avoids exponent notation such as ``1E+2``.
    return format(value, "f") if value is not None else "0"


def _sub(parent: ET.Element, tag: str, text: str | None = None) -> ET.Element:
    elem = ET.SubElement(parent, tag)
    if text is not None:
        elem.text = text
    return elem


def _status(parent: ET.Element) -> None:
    status = _sub(parent, "STATUS")
    _sub(status, "CODE", STATUS_CODE)
    _sub(status, "SEVERITY", SEVERITY)


def transaction_element(tx: Transaction) -> ET.Element:
    stmttrn = ET.Element("STMTTRN")
    _sub(stmttrn, "TRNTYPE", TRANSACTION_TYPE)
    _sub(stmttrn, "DTPOSTED", format_date(tx.date))
    _sub(stmttrn, "TRNAMT", format_amount(tx.amount))
    _sub(stmttrn, "FITID", synthesize_id(tx))
    _sub(stmttrn, "NAME", tx.description or "")
    return stmttrn


def build_statement(
    transactions: Iterable[Transaction],
    bounds: StatementBounds,
    account: AccountInfo,
    *,
    server_time: datetime,
) -> ET.Element:
    """Return the ``<OFX>`` root element for one bank statement."""

    root = ET.Element("OFX")

    sonrs = _sub(_sub(root, "SIGNONMSGSRSV1"), "SONRS")
    _status(sonrs)
    _sub(sonrs, "DTSERVER", format_date(server_time))
    _sub(sonrs, "LANGUAGE", LANGUAGE)

    stmttrnrs = _sub(_sub(root, "BANKMSGSRSV1"), "STMTTRNRS")
    _sub(stmttrnrs, "TRNUID", TRNUID)
    _status(stmttrnrs)

    stmtrs = _sub(stmttrnrs, "STMTRS")
    _sub(stmtrs, "CURDEF", CURRENCY)
    acct = _sub(stmtrs, "BANKACCTFROM")
    _sub(acct, "BANKID", account.bank_id)
    _sub(acct, "ACCTID", account.account_id)
    _sub(acct, "ACCTTYPE", ACCOUNT_TYPE)

    tranlist = _sub(stmtrs, "BANKTRANLIST")
    _sub(tranlist, "DTSTART", format_date(bounds.first))
    _sub(tranlist, "DTEND", format_date(bounds.last))
    for tx in transactions:
        tranlist.append(transaction_element(tx))

    return root


def render_ofx(root: ET.Element, *, encoding: str = "utf-8") -> bytes:
    """Serialize ``root`` as an OFX 2.0 document encoded with ``encoding``.

    Characters the target encoding cannot represent are written as XML
    character references.
    """

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    document = (
        f'<?xml version="1.0" encoding="{encoding}"?>\n'
        f"<?OFX {OFX_PI}?>\n"
        f"{body}\n"
    )
    return document.encode(encoding, errors="xmlcharrefreplace")


def write_statement(
    transactions: Iterable[Transaction],
    bounds: StatementBounds,
    account: AccountInfo,
    *,
    server_time: datetime,
    encoding: str = "utf-8",
) -> bytes:
    root = build_statement(transactions, bounds, account, server_time=server_time)
    return render_ofx(root, encoding=encoding)


__all__ = [
    "OFX_DATE_FORMAT",
    "build_statement",
    "format_amount",
    "format_date",
    "render_ofx",
    "transaction_element",
    "write_statement",
]
