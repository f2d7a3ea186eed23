from functools import lru_cache
from typing import Tuple

from lifetrack.domain import Snapshot


def snapshot_order_key(s: Snapshot) -> tuple:
    return (s.date, s.created_at or 0)


@lru_cache(maxsize=256)
def ordered_snapshots(snapshots: Tuple[Snapshot, ...], asset_id: str) -> Tuple[Snapshot, ...]:
    """Snapshots of one asset, oldest first.

    Ordered by date, then created_at; sorted() is stable so records that
    tie on both keep their insertion order.
    """
    own = (s for s in snapshots if s.asset_id == asset_id)
    return tuple(sorted(own, key=snapshot_order_key))
