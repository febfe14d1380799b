from datetime import datetime

from pydantic import ValidationError

from .access import AccessControl, require_identity
from .errors import InvalidArgumentError, NotFoundError
from .identifiers import EntryCounter
from .models import Entry, EntryKind, EntryRecorded


class LedgerStore:
    """Owner-gated credit/debit log with a running balance per account.

    Entries are append-only. ``balances`` is updated incrementally on each
    append and always equals the sum of the account's signed amounts.
    """

    def __init__(self, access: AccessControl):
        self.access = access
        self.counter = EntryCounter()
        self.entries: dict[str, list[Entry]] = {}
        self.entries_by_id: dict[int, Entry] = {}
        self.balances: dict[str, int] = {}

    def credit(self, caller: str, account: str, amount: int, label: str, timestamp: datetime) -> EntryRecorded:
        return self._record(caller, account, EntryKind.CREDIT, amount, label, timestamp)

    def debit(self, caller: str, account: str, amount: int, label: str, timestamp: datetime) -> EntryRecorded:
        return self._record(caller, account, EntryKind.DEBIT, amount, label, timestamp)

    def get_entries(self, account: str) -> list[Entry]:
        return list(self.entries.get(account, ()))

    def get_balance(self, account: str) -> int:
        return self.balances.get(account, 0)

    def get_entry(self, entry_id: int) -> Entry:
        entry = self.entries_by_id.get(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        return entry

    def verify_balance(self, account: str) -> bool:
        return sum(e.signed_amount for e in self.entries.get(account, ())) == self.get_balance(account)

    def _record(
        self, caller: str, account: str, kind: EntryKind, amount: int, label: str, timestamp: datetime
    ) -> EntryRecorded:
        self.access.require_owner(caller)
        require_identity(account, "Account")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError(f"Amount must be a positive integer, got {amount!r}")
        if label is None:
            label = ""
        if not isinstance(label, str):
            raise InvalidArgumentError(f"Label must be a string, got {label!r}")

        delta = amount if kind == EntryKind.CREDIT else -amount
        new_balance = self.get_balance(account) + delta
        try:
            entry = Entry(
                id=self.counter.peek(),
                kind=kind,
                signed_amount=delta,
                absolute_amount=amount,
                label=label,
                recorded_at=timestamp,
                account=account,
            )
            event = EntryRecorded(
                account=account,
                entry_id=entry.id,
                kind=kind,
                absolute_amount=amount,
                new_balance=new_balance,
                label=label,
                timestamp=timestamp,
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Malformed {kind.value.lower()} entry: {e}") from e

        # Nothing below can fail; commit.
        self.counter.next_entry_id()
        self.entries.setdefault(account, []).append(entry)
        self.entries_by_id[entry.id] = entry
        self.balances[account] = new_balance
        return event
