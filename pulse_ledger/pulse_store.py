from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from .access import require_identity
from .errors import ConflictError, InvalidArgumentError
from .identifiers import EntryCounter, derive_transaction_id
from .models import PulseScore, ScoreUpdated, SystemStats, Transaction, TransactionRecorded
from .scoring import ScoringEngine


@dataclass
class PendingTransaction:
    transaction: Transaction
    sender_score: PulseScore
    receiver_score: PulseScore
    sequence: int
    events: list = field(default_factory=list)


class PulseStore:
    """Global transaction log plus per-identity aggregates.

    The log is an arena of hashes in insertion order; ``user_transactions``
    holds back-references into it per identity.
    """

    def __init__(self, scoring: ScoringEngine):
        self.scoring = scoring
        self.counter = EntryCounter()
        self.transactions: dict[str, Transaction] = {}
        self.log: list[str] = []
        self.user_transactions: dict[str, list[str]] = {}
        self.scores: dict[str, PulseScore] = {}
        self.total_system_volume = 0

    @property
    def transaction_count(self) -> int:
        return self.counter.peek()

    def prepare(
        self, sender: str, receiver: str, amount: int, timestamp: datetime, sequence_count: int
    ) -> PendingTransaction:
        require_identity(sender, "Sender")
        require_identity(receiver, "Receiver")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError(f"Amount must be a positive integer, got {amount!r}")
        if not isinstance(timestamp, datetime):
            raise InvalidArgumentError(f"Timestamp must be a datetime, got {timestamp!r}")

        tx_hash = derive_transaction_id(sender, receiver, amount, timestamp, sequence_count)
        if tx_hash in self.transactions:
            raise ConflictError(f"Transaction {tx_hash} already recorded")

        try:
            transaction = Transaction(
                hash=tx_hash,
                sender=sender,
                receiver=receiver,
                amount=amount,
                recorded_at=timestamp,
                category=self.scoring.categorize(amount),
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Malformed transaction: {e}") from e
        sender_score = self.scoring.apply(self.get_pulse_score(sender), amount, timestamp)
        # A self-transfer counts once per role.
        receiver_base = sender_score if receiver == sender else self.get_pulse_score(receiver)
        receiver_score = self.scoring.apply(receiver_base, amount, timestamp)

        return PendingTransaction(
            transaction=transaction,
            sender_score=sender_score,
            receiver_score=receiver_score,
            sequence=sequence_count,
            events=[
                TransactionRecorded(tx_hash=tx_hash, sender=sender, receiver=receiver, amount=amount),
                ScoreUpdated(identity=sender, new_score=sender_score.score, new_reputation=sender_score.reputation),
                ScoreUpdated(
                    identity=receiver, new_score=receiver_score.score, new_reputation=receiver_score.reputation
                ),
            ],
        )

    def commit(self, pending: PendingTransaction) -> list:
        tx = pending.transaction
        if pending.sequence != self.transaction_count:
            raise ConflictError(
                f"Transaction {tx.hash} was prepared at sequence {pending.sequence}, "
                f"log is now at {self.transaction_count}"
            )
        if tx.hash in self.transactions:
            raise ConflictError(f"Transaction {tx.hash} already recorded")

        self.counter.next_entry_id()
        self.transactions[tx.hash] = tx
        self.log.append(tx.hash)
        self.user_transactions.setdefault(tx.sender, []).append(tx.hash)
        self.user_transactions.setdefault(tx.receiver, []).append(tx.hash)
        self.scores[tx.sender] = pending.sender_score
        self.scores[tx.receiver] = pending.receiver_score
        self.total_system_volume += tx.amount
        return list(pending.events)

    def record_transaction(
        self, sender: str, receiver: str, amount: int, timestamp: datetime, sequence_count: int
    ) -> list:
        return self.commit(self.prepare(sender, receiver, amount, timestamp, sequence_count))

    def get_pulse_score(self, identity: str) -> PulseScore:
        return self.scores.get(identity) or PulseScore()

    def get_user_transactions(self, identity: str) -> list[str]:
        return list(self.user_transactions.get(identity, ()))

    def get_transaction(self, tx_hash: str) -> Optional[Transaction]:
        return self.transactions.get(tx_hash)

    def get_system_stats(self) -> SystemStats:
        return SystemStats(total_transactions=len(self.log), total_volume=self.total_system_volume)

    def get_recent_transactions(self, count: int) -> list[str]:
        if count < 0:
            raise InvalidArgumentError(f"Count must not be negative, got {count}")
        if count == 0:
            return []
        return self.log[-count:][::-1]
