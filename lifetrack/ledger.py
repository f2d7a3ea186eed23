from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Sequence, Tuple

from lifetrack.domain import ADD, WITHDRAW, EmergencyTransaction, SavingsBucket, SavingsTransaction
from lifetrack.filters import by_bucket


@dataclass(frozen=True)
class BucketSummary:
    bucket_id: str
    name: str
    balance: float
    target: Optional[float]
    progress: Optional[float]


@dataclass(frozen=True)
class EmergencySummary:
    balance: float
    target: float
    progress: Optional[float]
    remaining: float


def signed_amount(t) -> float:
    # direction comes from the type, the stored amount is a magnitude
    if t.type == ADD:
        return abs(t.amount)
    if t.type == WITHDRAW:
        return -abs(t.amount)
    return 0.0


def running_balance(transactions: Iterable) -> float:
    return reduce(lambda acc, t: acc + signed_amount(t), transactions, 0.0)


def bucket_balance(transactions: Iterable[SavingsTransaction], bucket_id: str) -> float:
    return running_balance(filter(by_bucket(bucket_id), transactions))


def emergency_balance(transactions: Iterable[EmergencyTransaction]) -> float:
    return running_balance(transactions)


def target_progress(balance: float, target: Optional[float]) -> Optional[float]:
    if target is None or target <= 0:
        return None
    return min(100.0, balance / target * 100)


def bucket_summaries(
    buckets: Iterable[SavingsBucket], transactions: Iterable[SavingsTransaction]
) -> Tuple[BucketSummary, ...]:
    transactions = tuple(transactions)
    rows = []
    for b in buckets:
        balance = bucket_balance(transactions, b.id)
        rows.append(BucketSummary(b.id, b.name, balance, b.target, target_progress(balance, b.target)))
    return tuple(rows)


def total_savings(buckets: Iterable[SavingsBucket], transactions: Iterable[SavingsTransaction]) -> float:
    # only live buckets count; orphaned transactions are ignored
    return sum((row.balance for row in bucket_summaries(buckets, transactions)), 0.0)


def emergency_summary(transactions: Iterable[EmergencyTransaction], target: Optional[float]) -> EmergencySummary:
    balance = emergency_balance(transactions)
    goal = target or 0.0
    return EmergencySummary(
        balance=balance,
        target=goal,
        progress=target_progress(balance, goal),
        remaining=max(0.0, goal - balance),
    )


def history(transactions: Sequence) -> Tuple:
    """Transactions newest first, for display."""
    return tuple(sorted(transactions, key=lambda t: t.date, reverse=True))
