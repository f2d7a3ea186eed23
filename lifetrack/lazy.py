from collections import defaultdict
from typing import Callable, Iterable, Iterator, Tuple, TypeVar

from lifetrack.dates import shift_month
from lifetrack.domain import Expense

R = TypeVar("R")


def iter_records(records: Iterable[R], pred: Callable[[R], bool]) -> Iterator[R]:
    for r in records:
        if pred(r):
            yield r


def iter_periods(n: int, year: int, month0: int) -> Iterator[Tuple[int, int]]:
    """Yield the n (year, month0) pairs ending at the given month, oldest first."""
    for back in range(n - 1, -1, -1):
        yield shift_month(year, month0, -back)


def lazy_top_categories(expenses: Iterable[Expense], k: int) -> Iterator[Tuple[str, float]]:
    totals_by_category: dict[str, float] = defaultdict(float)

    for e in expenses:
        totals_by_category[e.category] += e.amount

    ordered = sorted(totals_by_category.items(), key=lambda item: item[1], reverse=True)

    for name, amount in ordered[: max(0, k)]:
        yield name, amount
