# ruff: noqa: I001
"""CLI for the ``bank2ofx`` package.

Exposes a callable command handler (:func:`cmd_convert`) and a Typer-based
console interface around it. Defaults for every option may come from
``BANK2OFX_*`` environment variables, loaded from a local ``.env`` with
``python-dotenv`` before the command runs. Conversion logic lives in
:mod:`bank2ofx.api`.
"""

from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import Annotated, BinaryIO

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from .logging_setup import configure_logging


def _format_validation_error(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "settings"
        parts.append(f"{loc}: {e.get('msg', 'invalid value')}")
    return "; ".join(parts)


def cmd_convert(
    *,
    input_path: str | None,
    output_path: str | None,
    bank_id: str,
    account_id: str,
    processor: str = "table",
    input_encoding: str = "utf-8",
    output_encoding: str = "utf-8",
    field_separator: str = ",",
    record_separator: str = "\n",
    column_format: str = "date,description,id,amount",
    date_format: str = "%Y-%m-%d %H:%M:%S",
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """Convert one input statement to OFX.

    Behavior
    --------
    - Validates the configuration; errors are reported before any input is
      read. An existing ``output_path`` is never overwritten.
    - Reads ``input_path`` (or stdin when ``None``/``"-"``), parses it with
      the selected processor and writes the OFX document to ``output_path``
      (or stdout).

    Errors are written to stderr and the function returns ``1``. On success,
    returns ``0``.
    """

    from .api import NoTransactionsError, convert
    from .bounds import NoBoundsError
    from .settings import ConversionSettings

    try:
        settings = ConversionSettings(
            input_path=input_path,
            output_path=output_path,
            input_encoding=input_encoding,
            output_encoding=output_encoding,
            field_separator=field_separator,
            record_separator=record_separator,
            column_format=column_format,
            date_format=date_format,
            processor=processor,
            bank_id=bank_id,
            account_id=account_id,
        )
    except ValidationError as e:
        print(f"Error: invalid configuration: {_format_validation_error(e)}", file=sys.stderr)
        return 1

    try:
        convert(settings, stdin=stdin, stdout=stdout)
    except FileExistsError as e:
        print(f"Error: {e}; refusing to overwrite", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except PermissionError as e:
        print(f"Error: Permission denied: {e.filename}", file=sys.stderr)
        return 1
    except csv.Error as e:
        print(f"Error: Failed to parse input: {e}", file=sys.stderr)
        return 1
    except UnicodeError as e:
        print(
            f"Error: cannot decode input as {settings.input_encoding}: {e}",
            file=sys.stderr,
        )
        return 1
    except (NoTransactionsError, NoBoundsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Convert bank transaction exports (generic delimited tables, Sampo CSV, "
        "Samlink HTML statements) into OFX 2.0 bank statements."
    ),
)


@app.command("convert")
def convert_cmd(
    *,
    input_path: Annotated[
        str | None,
        typer.Option(
            "--input",
            "-i",
            envvar="BANK2OFX_INPUT",
            help="Input file; '-' or omitted reads stdin.",
        ),
    ] = None,
    output_path: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            envvar="BANK2OFX_OUTPUT",
            help="Output file (must not exist); '-' or omitted writes stdout.",
        ),
    ] = None,
    bank_id: Annotated[
        str, typer.Option(envvar="BANK2OFX_BANK_ID", help="Bank identifier for BANKACCTFROM.")
    ],
    account_id: Annotated[
        str,
        typer.Option(envvar="BANK2OFX_ACCOUNT_ID", help="Account identifier for BANKACCTFROM."),
    ],
    processor: Annotated[
        str,
        typer.Option(
            "--processor",
            "-p",
            envvar="BANK2OFX_PROCESSOR",
            help="Source format: table, sampo or samlink.",
        ),
    ] = "table",
    input_encoding: Annotated[
        str, typer.Option(envvar="BANK2OFX_INPUT_ENCODING", help="Input character encoding.")
    ] = "utf-8",
    output_encoding: Annotated[
        str, typer.Option(envvar="BANK2OFX_OUTPUT_ENCODING", help="Output character encoding.")
    ] = "utf-8",
    field_separator: Annotated[
        str,
        typer.Option(
            envvar="BANK2OFX_FIELD_SEPARATOR",
            help="Field separator for 'table' (accepts \\t or 'tab').",
        ),
    ] = ",",
    record_separator: Annotated[
        str,
        typer.Option(
            envvar="BANK2OFX_RECORD_SEPARATOR",
            help="Record separator for 'table' (accepts \\n or 'newline').",
        ),
    ] = "\\n",
    column_format: Annotated[
        str,
        typer.Option(
            "--format",
            envvar="BANK2OFX_FORMAT",
            help="Column roles for 'table': date, description, amount, id, skip.",
        ),
    ] = "date,description,id,amount",
    date_format: Annotated[
        str,
        typer.Option(envvar="BANK2OFX_DATE_FORMAT", help="strptime pattern for 'table' dates."),
    ] = "%Y-%m-%d %H:%M:%S",
) -> None:
    """Convert one statement to OFX."""

    code = cmd_convert(
        input_path=input_path,
        output_path=output_path,
        bank_id=bank_id,
        account_id=account_id,
        processor=processor,
        input_encoding=input_encoding,
        output_encoding=output_encoding,
        field_separator=field_separator,
        record_separator=record_separator,
        column_format=column_format,
        date_format=date_format,
    )
    if code:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    configure_logging("DEBUG" if verbose else None)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m bank2ofx.cli`
    main()
