"""Public interface for the ``bank2ofx`` package.

Re-exports the conversion API and the public models. There is no runtime
logic here, only symbol re-exports.
"""

from .api import NoTransactionsError, ParseResult, convert, convert_text, parse_transactions
from .bounds import BoundsTracker, NoBoundsError, StatementBounds
from .identity import synthesize_id
from .ingest.utils import Processor
from .models import AccountInfo, ColumnFormat, ColumnRole, Transaction
from .settings import ConversionSettings

__all__ = [
    # API
    "convert",
    "convert_text",
    "parse_transactions",
    "ParseResult",
    "NoTransactionsError",
    # Models / types
    "AccountInfo",
    "BoundsTracker",
    "ColumnFormat",
    "ColumnRole",
    "ConversionSettings",
    "NoBoundsError",
    "Processor",
    "StatementBounds",
    "Transaction",
    "synthesize_id",
]
