import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from .access import AccessControl
from .config import LedgerSettings
from .errors import ConflictError, LedgerError, TransferFailedError
from .ledger_store import LedgerStore
from .log import get_logger
from .models import Entry, OwnershipTransferred, PulseScore, SystemStats, Transaction
from .pulse_store import PulseStore
from .scoring import ScoringEngine

logger = get_logger(__name__)

Clock = Callable[[], datetime]
Custody = Callable[[str, str, int], None]
EventHandler = Callable[[object], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEngine:
    def __init__(
        self,
        owner: str,
        settings: Optional[LedgerSettings] = None,
        clock: Optional[Clock] = None,
        custody: Optional[Custody] = None,
    ):
        self.settings = settings or LedgerSettings()
        self.clock = clock or utc_now
        self.custody = custody
        self.access = AccessControl(owner)
        self.scoring = ScoringEngine(self.settings.scoring)
        self.ledger = LedgerStore(self.access)
        self.pulse = PulseStore(self.scoring)
        self.events: list = []
        self.handlers: list[EventHandler] = []
        self._lock = threading.RLock()
        self._last_timestamp: Optional[datetime] = None
        self._in_custody = False

    @property
    def owner(self) -> str:
        with self._lock:
            return self.access.owner

    def subscribe(self, handler: EventHandler) -> None:
        self.handlers.append(handler)

    def drain_events(self) -> list:
        """Return and clear the notification outbox."""
        with self._lock:
            events, self.events = self.events, []
        return events

    def credit(self, caller: str, account: str, amount: int, label: str = "") -> Entry:
        return self._record_entry("credit", caller, account, amount, label)

    def debit(self, caller: str, account: str, amount: int, label: str = "") -> Entry:
        return self._record_entry("debit", caller, account, amount, label)

    def transfer_ownership(self, caller: str, new_owner: str) -> OwnershipTransferred:
        with self._lock:
            self._reject_reentry()
            try:
                event = self.access.transfer_ownership(caller, new_owner)
            except LedgerError as e:
                logger.warning("ownership_transfer_rejected", caller=caller, new_owner=new_owner, reason=str(e))
                raise
            self.events.append(event)
            logger.info("ownership_transferred", previous_owner=event.previous_owner, new_owner=event.new_owner)
        self._dispatch([event])
        return event

    def record_transaction(self, sender: str, receiver: str, amount: int) -> Transaction:
        with self._lock:
            self._reject_reentry()
            timestamp = self._now()
            try:
                pending = self.pulse.prepare(sender, receiver, amount, timestamp, self.pulse.transaction_count)
            except LedgerError as e:
                logger.warning("transaction_rejected", sender=sender, receiver=receiver, amount=amount, reason=str(e))
                raise

            if self.custody is not None:
                self._in_custody = True
                try:
                    self.custody(sender, receiver, amount)
                except Exception as e:
                    logger.warning("custody_transfer_failed", sender=sender, receiver=receiver, amount=amount)
                    raise TransferFailedError(f"Transfer of {amount} from {sender} to {receiver} failed") from e
                finally:
                    self._in_custody = False

            events = self.pulse.commit(pending)
            self.events.extend(events)
            tx = pending.transaction
            logger.info(
                "transaction_recorded",
                tx_hash=tx.hash,
                sender=sender,
                receiver=receiver,
                amount=amount,
                category=tx.category.value,
            )
        self._dispatch(events)
        return tx

    def get_entries(self, account: str) -> list[Entry]:
        with self._lock:
            return self.ledger.get_entries(account)

    def get_balance(self, account: str) -> int:
        with self._lock:
            return self.ledger.get_balance(account)

    def get_entry(self, entry_id: int) -> Entry:
        with self._lock:
            return self.ledger.get_entry(entry_id)

    def verify_balance(self, account: str) -> bool:
        with self._lock:
            return self.ledger.verify_balance(account)

    def get_pulse_score(self, identity: str) -> PulseScore:
        with self._lock:
            return self.pulse.get_pulse_score(identity)

    def get_user_transactions(self, identity: str) -> list[str]:
        with self._lock:
            return self.pulse.get_user_transactions(identity)

    def get_transaction(self, tx_hash: str) -> Optional[Transaction]:
        with self._lock:
            return self.pulse.get_transaction(tx_hash)

    def get_system_stats(self) -> SystemStats:
        with self._lock:
            return self.pulse.get_system_stats()

    def get_recent_transactions(self, count: int) -> list[str]:
        with self._lock:
            return self.pulse.get_recent_transactions(count)

    def _record_entry(self, kind: str, caller: str, account: str, amount: int, label: str) -> Entry:
        with self._lock:
            self._reject_reentry()
            timestamp = self._now()
            record = self.ledger.credit if kind == "credit" else self.ledger.debit
            try:
                event = record(caller, account, amount, label, timestamp)
            except LedgerError as e:
                logger.warning(f"{kind}_rejected", caller=caller, account=account, amount=amount, reason=str(e))
                raise
            self.events.append(event)
            logger.info(
                "entry_recorded",
                account=account,
                entry_id=event.entry_id,
                kind=event.kind.value,
                amount=amount,
                new_balance=event.new_balance,
            )
            entry = self.ledger.get_entry(event.entry_id)
        self._dispatch([event])
        return entry

    def _reject_reentry(self) -> None:
        # Set only by the thread holding the lock, so this sees re-entry from custody.
        if self._in_custody:
            raise ConflictError("Ledger mutation attempted from inside a custody transfer")

    def _now(self) -> datetime:
        timestamp = self.clock()
        if self._last_timestamp is not None and timestamp < self._last_timestamp:
            logger.warning(
                "clock_went_backwards",
                timestamp=timestamp.isoformat(),
                last_timestamp=self._last_timestamp.isoformat(),
            )
        else:
            self._last_timestamp = timestamp
        return timestamp

    def _dispatch(self, events: list) -> None:
        for event in events:
            for handler in self.handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception("event_handler_failed", event_name=type(event).__name__)
