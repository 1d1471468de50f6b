import xml.etree.ElementTree as ET
from datetime import datetime
from decimal import Decimal

from bank2ofx.bounds import StatementBounds
from bank2ofx.models import AccountInfo, Transaction
from bank2ofx.ofx import build_statement, format_amount, render_ofx, write_statement

ACCOUNT = AccountInfo(bank_id="SAMPOFIHH", account_id="800012-345678")
SERVER_TIME = datetime(2011, 6, 1, 8, 30, 0)


def _txs() -> list[Transaction]:
    return [
        Transaction(
            date=datetime(2010, 2, 7, 13, 54, 52),
            description="Coffee Shop",
            amount=Decimal("-4.50"),
            id="TX1",
        ),
        Transaction(date=datetime(2010, 2, 9), description="Kesäkauppa & Co", amount=Decimal("10")),
    ]


def _bounds() -> StatementBounds:
    return StatementBounds(datetime(2010, 2, 7, 13, 54, 52), datetime(2010, 2, 9))


def test_statement_structure_matches_ofx_layout():
    root = build_statement(_txs(), _bounds(), ACCOUNT, server_time=SERVER_TIME)

    assert root.tag == "OFX"
    assert [c.tag for c in root] == ["SIGNONMSGSRSV1", "BANKMSGSRSV1"]
    sonrs = root.find("SIGNONMSGSRSV1/SONRS")
    assert sonrs.findtext("STATUS/CODE") == "0"
    assert sonrs.findtext("STATUS/SEVERITY") == "INFO"
    assert sonrs.findtext("DTSERVER") == "20110601083000"
    assert sonrs.findtext("LANGUAGE") == "ENG"

    trnrs = root.find("BANKMSGSRSV1/STMTTRNRS")
    assert trnrs.findtext("TRNUID") == "0"
    assert trnrs.findtext("STATUS/CODE") == "0"
    stmtrs = trnrs.find("STMTRS")
    assert stmtrs.findtext("CURDEF") == "EUR"
    assert stmtrs.findtext("BANKACCTFROM/BANKID") == "SAMPOFIHH"
    assert stmtrs.findtext("BANKACCTFROM/ACCTID") == "800012-345678"
    assert stmtrs.findtext("BANKACCTFROM/ACCTTYPE") == "CHECKING"

    tranlist = stmtrs.find("BANKTRANLIST")
    assert tranlist.findtext("DTSTART") == "20100207135452"
    assert tranlist.findtext("DTEND") == "20100209000000"
    trns = tranlist.findall("STMTTRN")
    assert [[c.tag for c in t] for t in trns] == [
        ["TRNTYPE", "DTPOSTED", "TRNAMT", "FITID", "NAME"]
    ] * 2
    assert trns[0].findtext("TRNTYPE") == "POS"
    assert trns[0].findtext("DTPOSTED") == "20100207135452"
    assert trns[0].findtext("TRNAMT") == "-4.50"
    assert trns[0].findtext("FITID") == "TX1"
    assert trns[0].findtext("NAME") == "Coffee Shop"
    assert trns[1].findtext("FITID").startswith("generated_guid_")


def test_missing_amount_and_date_are_emitted_as_zero_and_empty():
    root = build_statement(
        [Transaction(description="No date or amount", id="X")],
        _bounds(),
        ACCOUNT,
        server_time=SERVER_TIME,
    )
    trn = root.find(".//STMTTRN")
    assert trn.findtext("DTPOSTED") == ""
    assert trn.findtext("TRNAMT") == "0"


def test_format_amount_avoids_exponents():
    assert format_amount(Decimal("1E+2")) == "100"
    assert format_amount(Decimal("-4.50")) == "-4.50"


def test_rendered_document_has_headers_and_escapes_text():
    data = write_statement(_txs(), _bounds(), ACCOUNT, server_time=SERVER_TIME)
    text = data.decode("utf-8")
    lines = text.splitlines()

    assert lines[0] == '<?xml version="1.0" encoding="utf-8"?>'
    assert lines[1] == (
        '<?OFX OFXHEADER="200" VERSION="200" SECURITY="NONE" '
        'OLDFILEUID="NONE" NEWFILEUID="NONE"?>'
    )
    assert "<NAME>Kesäkauppa &amp; Co</NAME>" in text
    assert ET.fromstring(data).find(".//BANKID").text == "SAMPOFIHH"


def test_output_encoding_is_applied():
    root = build_statement(_txs(), _bounds(), ACCOUNT, server_time=SERVER_TIME)
    latin = render_ofx(root, encoding="iso-8859-1")
    assert latin.startswith(b'<?xml version="1.0" encoding="iso-8859-1"?>')
    assert "Kesäkauppa".encode("iso-8859-1") in latin

    root = build_statement(
        [Transaction(description="€ 5", id="E")], _bounds(), ACCOUNT, server_time=SERVER_TIME
    )
    ascii_doc = render_ofx(root, encoding="us-ascii")
    assert b"<NAME>&#8364; 5</NAME>" in ascii_doc
    assert ET.fromstring(ascii_doc).findtext(".//NAME") == "€ 5"
