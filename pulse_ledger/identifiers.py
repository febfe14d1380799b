import hashlib
import json
from datetime import datetime


class EntryCounter:
    """Monotonic id source. Each sub-ledger owns its own instance."""

    def __init__(self, start: int = 0):
        self._next = start

    def peek(self) -> int:
        return self._next

    def next_entry_id(self) -> int:
        value = self._next
        self._next += 1
        return value


def transaction_signing_data(
    sender: str, receiver: str, amount: int, timestamp: datetime, sequence_number: int
) -> bytes:
    data = {
        "sender": sender,
        "receiver": receiver,
        "amount": amount,
        "timestamp": timestamp.isoformat(),
        "sequence": sequence_number,
    }
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("utf-8")


def derive_transaction_id(
    sender: str, receiver: str, amount: int, timestamp: datetime, sequence_number: int
) -> str:
    """SHA256 over the canonical encoding; the sequence number keeps identical transfers apart."""
    signing_data = transaction_signing_data(sender, receiver, amount, timestamp, sequence_number)
    return hashlib.sha256(signing_data).hexdigest()
