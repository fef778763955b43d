"""Content hashing for documents and transaction aggregates."""

import hashlib
import json
from collections.abc import Iterable
from typing import Any


def compute_file_hash(contents: bytes) -> str:
    """Compute SHA256 hash of file contents."""
    return hashlib.sha256(contents).hexdigest()


def compute_aggregate_fingerprint(transactions: Iterable[Any]) -> str:
    """
    Fingerprint an ordered transaction aggregate.

    Order is significant: the same records in a different order produce a
    different fingerprint, as does any change to any field.
    """
    payload = [txn.model_dump(mode="json") for txn in transactions]
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode()).hexdigest()
