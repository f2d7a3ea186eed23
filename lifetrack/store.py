import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from lifetrack import transforms
from lifetrack.domain import COLLECTIONS, AppData
from lifetrack.errors import RecordNotFoundError, UnknownReferenceError
from lifetrack.events import DATA_CHANGED, EMERGENCY_UPDATED, EventBus, register_default_handlers
from lifetrack.ledger import emergency_balance

logger = logging.getLogger(__name__)


class Store:
    """Owns the current AppData and swaps in a new instance on every change.

    Subscribers on the bus are told which collections changed; they read the
    fresh snapshot from `store.data` and recompute their views from it.
    """

    def __init__(self, data: Optional[AppData] = None, bus: Optional[EventBus] = None):
        self._data = data if data is not None else AppData()
        self.bus = bus if bus is not None else register_default_handlers(EventBus())
        self.alerts: List[dict] = []
        self._emergency = self._emergency_state()

    @property
    def data(self) -> AppData:
        return self._data

    def _commit(self, data: AppData, action: str, *collections: str) -> AppData:
        self._data = data
        logger.debug("%s -> %s", action, ", ".join(collections))
        self.bus.publish(DATA_CHANGED, {"action": action, "collections": collections})
        if "emergency_transactions" in collections or "settings" in collections:
            self._publish_emergency()
        return data

    def _emergency_state(self) -> Tuple[float, float]:
        return (
            emergency_balance(self._data.emergency_transactions),
            self._data.settings.emergency_target or 0,
        )

    def _publish_emergency(self) -> None:
        previous_balance, previous_target = self._emergency
        self._emergency = self._emergency_state()
        balance, target = self._emergency
        payload = {
            "balance": balance,
            "target": target,
            "previous_balance": previous_balance,
            "previous_target": previous_target,
        }
        for result in self.bus.publish(EMERGENCY_UPDATED, payload):
            if "alert" in result:
                self.alerts.append(result)

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection {collection!r}")

    def add(self, collection: str, record) -> AppData:
        self._check_collection(collection)
        checked = transforms.validate_reference(self._data, record)
        if checked.is_left():
            raise UnknownReferenceError(checked.get_error())
        records = transforms.add_record(getattr(self._data, collection), record)
        return self._commit(replace(self._data, **{collection: records}), "add", collection)

    def replace(self, collection: str, record) -> AppData:
        self._check_collection(collection)
        current = getattr(self._data, collection)
        if not transforms.has_record(current, record.id):
            raise RecordNotFoundError(collection, record.id)
        records = transforms.replace_record(current, record)
        return self._commit(replace(self._data, **{collection: records}), "replace", collection)

    def remove(self, collection: str, record_id: str) -> AppData:
        self._check_collection(collection)
        if collection == "assets":
            return self.delete_asset(record_id)
        if collection == "savings_buckets":
            return self.delete_savings_bucket(record_id)
        current = getattr(self._data, collection)
        if not transforms.has_record(current, record_id):
            raise RecordNotFoundError(collection, record_id)
        records = transforms.remove_record(current, record_id)
        return self._commit(replace(self._data, **{collection: records}), "remove", collection)

    def delete_asset(self, asset_id: str) -> AppData:
        if not transforms.has_record(self._data.assets, asset_id):
            raise RecordNotFoundError("assets", asset_id)
        return self._commit(
            transforms.delete_asset(self._data, asset_id),
            "delete_asset", "assets", "snapshots", "trades", "deposits",
        )

    def delete_savings_bucket(self, bucket_id: str) -> AppData:
        if not transforms.has_record(self._data.savings_buckets, bucket_id):
            raise RecordNotFoundError("savings_buckets", bucket_id)
        return self._commit(
            transforms.delete_savings_bucket(self._data, bucket_id),
            "delete_savings_bucket", "savings_buckets", "savings_transactions",
        )

    def upsert_snapshot(self, asset_id: str, date: str, price: float, *, now: Optional[int] = None) -> AppData:
        if not transforms.has_record(self._data.assets, asset_id):
            raise UnknownReferenceError({
                "error": "asset_not_found",
                "message": f"Asset with ID {asset_id} does not exist",
                "asset_id": asset_id,
            })
        snapshots = transforms.upsert_snapshot(self._data.snapshots, asset_id, date, price, now=now)
        return self._commit(replace(self._data, snapshots=snapshots), "upsert_snapshot", "snapshots")

    def update_snapshot(self, snapshot_id: str, date: str, price: float) -> AppData:
        if not transforms.has_record(self._data.snapshots, snapshot_id):
            raise RecordNotFoundError("snapshots", snapshot_id)
        snapshots = transforms.update_snapshot(self._data.snapshots, snapshot_id, date, price)
        return self._commit(replace(self._data, snapshots=snapshots), "update_snapshot", "snapshots")

    def update_settings(self, **changes) -> AppData:
        return self._commit(transforms.update_settings(self._data, **changes), "update_settings", "settings")

    def reset(self) -> AppData:
        return self._commit(AppData(), "reset", *COLLECTIONS, "settings")
