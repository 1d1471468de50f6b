import io
import xml.etree.ElementTree as ET
from pathlib import Path

from typer.testing import CliRunner

from bank2ofx.cli import app, cmd_convert

runner = CliRunner()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_convert_command_writes_output_file(tmp_path):
    src = _write(tmp_path / "in.csv", "2010-02-07 13:54:52,Coffee Shop,TX1,-4.50\n")
    out = tmp_path / "out.ofx"

    result = runner.invoke(
        app,
        [
            "convert",
            "--input", str(src),
            "--output", str(out),
            "--bank-id", "SAMPOFIHH",
            "--account-id", "800012-345678",
        ],
    )

    assert result.exit_code == 0, result.output
    root = ET.fromstring(out.read_bytes())
    assert root.findtext(".//FITID") == "TX1"
    assert root.findtext(".//ACCTID") == "800012-345678"


def test_account_ids_and_options_from_env(tmp_path, monkeypatch):
    src = _write(tmp_path / "in.txt", "Coffee;07/02/2010;-4.50\n")
    out = tmp_path / "out.ofx"
    monkeypatch.setenv("BANK2OFX_BANK_ID", "B1")
    monkeypatch.setenv("BANK2OFX_ACCOUNT_ID", "A1")

    result = runner.invoke(
        app,
        [
            "convert",
            "-i", str(src),
            "-o", str(out),
            "--field-separator", "semicolon",
            "--format", "description,date,amount",
            "--date-format", "%d/%m/%Y",
        ],
    )

    assert result.exit_code == 0, result.output
    root = ET.fromstring(out.read_bytes())
    assert root.findtext(".//BANKID") == "B1"
    assert root.findtext(".//DTPOSTED") == "20100207000000"
    assert root.findtext(".//NAME") == "Coffee"


def test_dotenv_in_working_directory_is_loaded(tmp_path, monkeypatch):
    _write(tmp_path / ".env", "BANK2OFX_BANK_ID=FROMENV\nBANK2OFX_ACCOUNT_ID=ACC\n")
    src = _write(tmp_path / "in.csv", "2010-02-07 13:54:52,Coffee Shop,TX1,-4.50\n")
    out = tmp_path / "out.ofx"
    # Register the variables so values loaded from .env are removed afterwards.
    monkeypatch.delenv("BANK2OFX_BANK_ID", raising=False)
    monkeypatch.delenv("BANK2OFX_ACCOUNT_ID", raising=False)

    result = runner.invoke(app, ["convert", "-i", str(src), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert ET.fromstring(out.read_bytes()).findtext(".//BANKID") == "FROMENV"


def test_existing_output_is_refused(tmp_path):
    src = _write(tmp_path / "in.csv", "2010-02-07 13:54:52,Coffee Shop,TX1,-4.50\n")
    out = _write(tmp_path / "out.ofx", "old")

    result = runner.invoke(
        app,
        ["convert", "-i", str(src), "-o", str(out), "--bank-id", "B", "--account-id", "A"],
    )

    assert result.exit_code == 1
    assert "refusing to overwrite" in result.output
    assert out.read_text() == "old"


def test_unknown_processor_is_a_configuration_error(tmp_path):
    result = runner.invoke(
        app,
        ["convert", "-p", "nordea", "--bank-id", "B", "--account-id", "A"],
    )
    assert result.exit_code == 1
    assert "invalid configuration" in result.output
    assert "processor" in result.output


def test_cmd_convert_reports_empty_input(capsys):
    stdout = io.BytesIO()
    code = cmd_convert(
        input_path=None,
        output_path=None,
        bank_id="B",
        account_id="A",
        stdin=io.BytesIO(b""),
        stdout=stdout,
    )

    assert code == 1
    assert "no transactions found" in capsys.readouterr().err
    assert stdout.getvalue() == b""


def test_cmd_convert_reports_undecodable_input(capsys):
    code = cmd_convert(
        input_path=None,
        output_path=None,
        bank_id="B",
        account_id="A",
        input_encoding="utf-8",
        stdin=io.BytesIO(b"\xff\xfe\xfa"),
        stdout=io.BytesIO(),
    )
    assert code == 1
    assert "cannot decode input as utf-8" in capsys.readouterr().err


def test_cmd_convert_stdin_to_stdout():
    stdout = io.BytesIO()
    code = cmd_convert(
        input_path="-",
        output_path="-",
        bank_id="B",
        account_id="A",
        processor="sampo",
        stdin=io.BytesIO(b"07.02.2010;Kauppa;R1;-1,00\n"),
        stdout=stdout,
    )
    assert code == 0
    assert ET.fromstring(stdout.getvalue()).findtext(".//FITID") == "R1"


def test_no_arguments_shows_help():
    result = runner.invoke(app, [])
    assert "convert" in result.output


def test_cmd_convert_reports_tokenizer_failure(tmp_path, capsys):
    # A single field past the csv module's default field size limit.
    src = _write(tmp_path / "in.csv", "2010-02-07 13:54:52," + "x" * 200_000 + ",TX1,-4.50\n")
    out = tmp_path / "out.ofx"

    code = cmd_convert(
        input_path=str(src),
        output_path=str(out),
        bank_id="B",
        account_id="A",
    )

    assert code == 1
    assert capsys.readouterr().err.startswith("Error: Failed to parse input:")
    assert not out.exists()


def test_input_and_output_paths_from_env(tmp_path, monkeypatch):
    src = _write(tmp_path / "in.csv", "2010-02-07 13:54:52,Coffee Shop,TX1,-4.50\n")
    out = tmp_path / "out.ofx"
    monkeypatch.setenv("BANK2OFX_INPUT", str(src))
    monkeypatch.setenv("BANK2OFX_OUTPUT", str(out))

    result = runner.invoke(app, ["convert", "--bank-id", "B", "--account-id", "A"])

    assert result.exit_code == 0, result.output
    assert ET.fromstring(out.read_bytes()).findtext(".//FITID") == "TX1"
