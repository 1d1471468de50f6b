"""Synthetic FITIDs for transactions without a natural identifier."""

from __future__ import annotations

import hashlib
import json

from .models import Transaction

GENERATED_ID_PREFIX = "generated_guid_"


def fingerprint(tx: Transaction) -> str:
    """Compute a stable MD5 (128-bit) hex digest over the transaction content.

    Fields used: date (ISO 8601, offset included when present), description,
    amount (decimal string) and id. Identical content always yields the same
    digest; distinct transactions with identical content collide.
    """

    payload = {
        "date": tx.date.isoformat() if tx.date is not None else None,
        "description": tx.description,
        "amount": str(tx.amount) if tx.amount is not None else None,
        "id": tx.id,
    }
    # Ensure deterministic JSON serialization
    data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def synthesize_id(tx: Transaction) -> str:
    """Return the natural id, or ``generated_guid_<md5>`` when there is none."""

    if tx.id:
        return tx.id
    return GENERATED_ID_PREFIX + fingerprint(tx)


__all__ = ["GENERATED_ID_PREFIX", "fingerprint", "synthesize_id"]
