"""Monthly activity analytics for investment deposits (EUR) and expenses (RON).

Both subsystems share the same shape: a per-month total, a comparison with
the month before, and an N-month trend ending at the month being viewed.
"""
import logging
import math
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple

from lifetrack.dates import end_of_month_str, month_key, month_label, shift_month
from lifetrack.domain import Asset, Deposit, Expense, Snapshot
from lifetrack.filters import in_month, on_or_before
from lifetrack.lazy import iter_periods, iter_records, lazy_top_categories
from lifetrack.valuation import invested_amount, latest_snapshot

logger = logging.getLogger(__name__)

NEW_LABEL = "New"
NEW_SPEND_LABEL = "New spend"


@dataclass(frozen=True)
class MonthlyFlow:
    deposited: float
    withdrawn: float
    net_flow: float


@dataclass(frozen=True)
class Comparison:
    current: float
    previous: float
    diff: float
    percent: Optional[float]  # None when the previous period was zero
    is_new: bool
    percent_str: str


@dataclass(frozen=True)
class TrendPoint:
    label: str
    year: int
    month0: int
    value: float
    is_anchor: bool


@dataclass(frozen=True)
class Trend:
    points: Tuple[TrendPoint, ...]
    max_value: float

    def __iter__(self) -> Iterator[TrendPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def anchor(self) -> Optional[TrendPoint]:
        return self.points[-1] if self.points else None


@dataclass(frozen=True)
class Mover:
    asset_id: str
    name: str
    amount: float


@dataclass(frozen=True)
class MonthActivity:
    year: int
    month0: int
    flow: MonthlyFlow
    comparison: Comparison
    end_value: float
    previous_end_value: float
    value_change: float
    trend: Trend
    movers: Tuple[Mover, ...]


def monthly_flow(deposits: Iterable[Deposit], year: int, month0: int) -> MonthlyFlow:
    deposited = 0.0
    withdrawn = 0.0
    for d in iter_records(deposits, in_month(year, month0)):
        if d.amount > 0:
            deposited += d.amount
        elif d.amount < 0:
            withdrawn += -d.amount
    return MonthlyFlow(deposited=deposited, withdrawn=withdrawn, net_flow=deposited - withdrawn)


def end_of_month_portfolio_value(
    assets: Iterable[Asset],
    deposits: Iterable[Deposit],
    snapshots: Iterable[Snapshot],
    year: int,
    month0: int,
) -> float:
    """Portfolio value as the live valuation would have shown it at month end."""
    cutoff = end_of_month_str(year, month0)
    deposits = tuple(iter_records(deposits, on_or_before(cutoff)))
    snapshots = tuple(snapshots)

    total = 0.0
    for asset in assets:
        snap = latest_snapshot(snapshots, asset.id, on_or_before=cutoff)
        if snap is not None:
            total += snap.price
        else:
            total += invested_amount(deposits, asset.id)
    return total


def month_over_month(current: float, previous: float, new_label: str = NEW_LABEL) -> Comparison:
    diff = current - previous
    if previous != 0:
        percent = diff * 100 / abs(previous)
        sign = "+" if percent > 0 else "-" if percent < 0 else ""
        # half-up on the magnitude
        rounded = int(math.floor(abs(percent) + 0.5))
        return Comparison(current, previous, diff, percent, False, f"{sign}{rounded}%")
    if current != 0:
        return Comparison(current, previous, diff, None, True, new_label)
    return Comparison(current, previous, diff, 0.0, False, "0%")


def trend(n: int, year: int, month0: int, metric_fn: Callable[[int, int], float]) -> Trend:
    """Evaluate metric_fn(year, month0) over the n months ending at the anchor."""
    points = []
    max_value = 0.0
    for y, m in iter_periods(n, year, month0):
        value = metric_fn(y, m)
        max_value = max(max_value, abs(value))
        points.append(TrendPoint(
            label=month_label(m),
            year=y,
            month0=m,
            value=value,
            is_anchor=(y, m) == (year, month0),
        ))
    return Trend(points=tuple(points), max_value=max_value)


def top_movers(
    deposits: Iterable[Deposit],
    year: int,
    month0: int,
    assets: Iterable[Asset],
    limit: int = 5,
) -> Tuple[Mover, ...]:
    by_asset: dict[str, float] = defaultdict(float)
    for d in iter_records(deposits, in_month(year, month0)):
        by_asset[d.asset_id] += d.amount

    movers = [
        Mover(asset_id=a.id, name=a.name, amount=by_asset[a.id])
        for a in assets
        if by_asset.get(a.id, 0) != 0
    ]
    movers.sort(key=lambda m: m.amount, reverse=True)
    return tuple(movers[: max(0, limit)])


# --- investments


def net_flow(deposits: Sequence[Deposit]) -> Callable[[int, int], float]:
    def _metric(year: int, month0: int) -> float:
        return monthly_flow(deposits, year, month0).net_flow

    return _metric


def investment_comparison(deposits: Iterable[Deposit], year: int, month0: int) -> Comparison:
    deposits = tuple(deposits)
    prev_year, prev_month0 = shift_month(year, month0, -1)
    current = monthly_flow(deposits, year, month0).net_flow
    previous = monthly_flow(deposits, prev_year, prev_month0).net_flow
    return month_over_month(current, previous)


def investment_trend(deposits: Iterable[Deposit], year: int, month0: int, n: int = 4) -> Trend:
    return trend(n, year, month0, net_flow(tuple(deposits)))


def month_activity(
    assets: Iterable[Asset],
    deposits: Iterable[Deposit],
    snapshots: Iterable[Snapshot],
    year: int,
    month0: int,
    *,
    trend_months: int = 4,
    movers_limit: int = 5,
) -> MonthActivity:
    assets = tuple(assets)
    deposits = tuple(deposits)
    snapshots = tuple(snapshots)
    prev_year, prev_month0 = shift_month(year, month0, -1)

    end_value = end_of_month_portfolio_value(assets, deposits, snapshots, year, month0)
    previous_end_value = end_of_month_portfolio_value(assets, deposits, snapshots, prev_year, prev_month0)
    logger.debug("Month activity %s: end value %.2f (previous %.2f)",
                 month_key(year, month0), end_value, previous_end_value)

    return MonthActivity(
        year=year,
        month0=month0,
        flow=monthly_flow(deposits, year, month0),
        comparison=investment_comparison(deposits, year, month0),
        end_value=end_value,
        previous_end_value=previous_end_value,
        value_change=end_value - previous_end_value,
        trend=investment_trend(deposits, year, month0, trend_months),
        movers=top_movers(deposits, year, month0, assets, movers_limit),
    )


# --- expenses


def expense_total(expenses: Iterable[Expense], year: int, month0: int) -> float:
    return sum((e.amount for e in iter_records(expenses, in_month(year, month0))), 0.0)


def expense_comparison(expenses: Iterable[Expense], year: int, month0: int) -> Comparison:
    expenses = tuple(expenses)
    prev_year, prev_month0 = shift_month(year, month0, -1)
    return month_over_month(
        expense_total(expenses, year, month0),
        expense_total(expenses, prev_year, prev_month0),
        new_label=NEW_SPEND_LABEL,
    )


def expense_trend(expenses: Iterable[Expense], year: int, month0: int, n: int = 4) -> Trend:
    expenses = tuple(expenses)
    return trend(n, year, month0, lambda y, m: expense_total(expenses, y, m))


def category_breakdown(
    expenses: Iterable[Expense], year: int, month0: int, limit: int = 5
) -> Tuple[Tuple[str, float], ...]:
    return tuple(lazy_top_categories(iter_records(expenses, in_month(year, month0)), limit))


def frequent_categories(
    categories: Sequence[str], expenses: Iterable[Expense], limit: int = 5
) -> Tuple[str, ...]:
    """Most used categories, ties keeping the user's category order."""
    counts = Counter(e.category for e in expenses)
    ranked = sorted(categories, key=lambda c: counts.get(c, 0), reverse=True)
    return tuple(c for c in ranked[: max(0, limit)] if counts.get(c, 0) > 0)
