"""Asset and portfolio valuation.

An asset with at least one snapshot is marked to market: its current value
is the latest snapshot, whatever was deposited.  Without snapshots the
invested amount (signed sum of deposits) stands in as the value.  All
figures are EUR.
"""
from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Optional, Tuple

from lifetrack.domain import Asset, Deposit, Snapshot
from lifetrack.memo import ordered_snapshots


@dataclass(frozen=True)
class AssetValuation:
    asset_id: str
    name: str
    invested_amount: float
    has_price: bool
    start_price: float
    latest_price: float
    current_value: float
    change: float
    price_change_percent: float
    snapshots: Tuple[Snapshot, ...] = ()


@dataclass(frozen=True)
class PortfolioValuation:
    current_value: float
    invested_amount: float
    change: float
    change_percent: float
    assets: Tuple[AssetValuation, ...] = ()


def return_percent(current_value: float, invested_amount: float) -> float:
    if invested_amount > 0:
        return (current_value - invested_amount) / invested_amount * 100
    return 0.0


def invested_amount(deposits: Iterable[Deposit], asset_id: str) -> float:
    return reduce(
        lambda acc, d: acc + d.amount if d.asset_id == asset_id else acc, deposits, 0.0
    )


def latest_snapshot(
    snapshots: Iterable[Snapshot], asset_id: str, on_or_before: Optional[str] = None
) -> Optional[Snapshot]:
    ordered = ordered_snapshots(tuple(snapshots), asset_id)
    if on_or_before is not None:
        ordered = tuple(s for s in ordered if s.date <= on_or_before)
    return ordered[-1] if ordered else None


def asset_valuation(
    asset: Asset, deposits: Iterable[Deposit], snapshots: Iterable[Snapshot]
) -> AssetValuation:
    invested = invested_amount(deposits, asset.id)
    ordered = ordered_snapshots(tuple(snapshots), asset.id)
    has_price = len(ordered) > 0
    start_price = ordered[0].price if has_price else 0.0
    latest_price = ordered[-1].price if has_price else 0.0
    current = latest_price if has_price else invested

    return AssetValuation(
        asset_id=asset.id,
        name=asset.name,
        invested_amount=invested,
        has_price=has_price,
        start_price=start_price,
        latest_price=latest_price,
        current_value=current,
        change=current - invested,
        price_change_percent=return_percent(current, invested),
        snapshots=ordered,
    )


def portfolio_valuation(
    assets: Iterable[Asset], deposits: Iterable[Deposit], snapshots: Iterable[Snapshot]
) -> PortfolioValuation:
    deposits = tuple(deposits)
    snapshots = tuple(snapshots)
    rows = tuple(asset_valuation(a, deposits, snapshots) for a in assets)

    current = sum((r.current_value for r in rows), 0.0)
    invested = sum((r.invested_amount for r in rows), 0.0)
    return PortfolioValuation(
        current_value=current,
        invested_amount=invested,
        change=current - invested,
        change_percent=return_percent(current, invested),
        assets=rows,
    )
