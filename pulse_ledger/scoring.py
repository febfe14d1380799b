from datetime import datetime

from .config import ScoringPolicy
from .models import Category, PulseScore

_TIERS = (Category.MICRO, Category.SMALL, Category.MEDIUM, Category.LARGE)


class ScoringEngine:
    """Pure functions from amounts and aggregates to tiers and scores."""

    def __init__(self, policy: ScoringPolicy):
        self.policy = policy

    def categorize(self, amount: int) -> Category:
        for category, upper in zip(_TIERS, self.policy.thresholds()):
            if amount < upper:
                return category
        return Category.WHALE

    def score(self, total_transactions: int, total_volume: int) -> int:
        # Volume below one whole unit contributes nothing.
        return total_transactions * self.policy.transaction_weight + total_volume // self.policy.unit

    def reputation(self, total_transactions: int) -> int:
        return total_transactions // self.policy.reputation_divisor

    def apply(self, current: PulseScore, amount: int, timestamp: datetime) -> PulseScore:
        total_transactions = current.total_transactions + 1
        total_volume = current.total_volume + amount
        return PulseScore(
            total_transactions=total_transactions,
            total_volume=total_volume,
            score=self.score(total_transactions, total_volume),
            reputation=self.reputation(total_transactions),
            last_update=timestamp,
        )
