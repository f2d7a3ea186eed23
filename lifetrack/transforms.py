import json
import logging
import re
import time
from dataclasses import asdict, fields, replace
from typing import Optional, Tuple, TypeVar
from uuid import uuid4

from lifetrack.domain import COLLECTIONS, AppData, Settings, Snapshot
from lifetrack.functional import Either, Left, Right

logger = logging.getLogger(__name__)

R = TypeVar("R")

# persisted document key -> AppData attribute
DOCUMENT_KEYS = {
    "assets": "assets",
    "trades": "trades",
    "deposits": "deposits",
    "snapshots": "snapshots",
    "expenses": "expenses",
    "savingsBuckets": "savings_buckets",
    "savingsTransactions": "savings_transactions",
    "emergencyTransactions": "emergency_transactions",
    "healthLogs": "health_logs",
}


def new_id() -> str:
    return uuid4().hex[:12]


def now_millis() -> int:
    return int(time.time() * 1000)


# --- persisted document


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(p.title() for p in rest)


def _build(cls, raw: dict):
    known = {f.name for f in fields(cls)}
    kwargs = {}
    for key, value in raw.items():
        name = _snake(key)
        if name in known:
            kwargs[name] = value
    return cls(**kwargs)


def app_data_from_dict(doc: dict) -> AppData:
    """Build AppData from the persisted camelCase document.

    Missing collections are empty, missing settings fall back to defaults and
    unknown keys are dropped.
    """
    collections = {}
    for doc_key, attr in DOCUMENT_KEYS.items():
        cls = COLLECTIONS[attr]
        collections[attr] = tuple(_build(cls, raw) for raw in doc.get(doc_key) or ())

    settings = _build(Settings, doc.get("settings") or {})
    settings = replace(settings, expense_categories=tuple(settings.expense_categories))
    return AppData(settings=settings, **collections)


def app_data_to_dict(data: AppData) -> dict:
    doc = {}
    for doc_key, attr in DOCUMENT_KEYS.items():
        doc[doc_key] = [
            {_camel(k): v for k, v in asdict(r).items()} for r in getattr(data, attr)
        ]
    settings = {_camel(k): v for k, v in asdict(data.settings).items()}
    settings["expenseCategories"] = list(data.settings.expense_categories)
    doc["settings"] = settings
    return doc


def load_app_data(path: str) -> AppData:
    with open(path, "r", encoding="utf-8") as f:
        doc = json.load(f)
    data = app_data_from_dict(doc)
    logger.debug("Loaded %d assets, %d expenses, %d health logs from %s",
                 len(data.assets), len(data.expenses), len(data.health_logs), path)
    return data


# --- collection mutations


def add_record(records: Tuple[R, ...], record: R) -> Tuple[R, ...]:
    return records + (record,)


def replace_record(records: Tuple[R, ...], record: R) -> Tuple[R, ...]:
    return tuple(record if r.id == record.id else r for r in records)


def remove_record(records: Tuple[R, ...], record_id: str) -> Tuple[R, ...]:
    return tuple(filter(lambda r: r.id != record_id, records))


def has_record(records: Tuple[R, ...], record_id: str) -> bool:
    return any(r.id == record_id for r in records)


def delete_asset(data: AppData, asset_id: str) -> AppData:
    return replace(
        data,
        assets=remove_record(data.assets, asset_id),
        snapshots=tuple(s for s in data.snapshots if s.asset_id != asset_id),
        trades=tuple(t for t in data.trades if t.asset_id != asset_id),
        deposits=tuple(d for d in data.deposits if d.asset_id != asset_id),
    )


def delete_savings_bucket(data: AppData, bucket_id: str) -> AppData:
    return replace(
        data,
        savings_buckets=remove_record(data.savings_buckets, bucket_id),
        savings_transactions=tuple(t for t in data.savings_transactions if t.bucket_id != bucket_id),
    )


def update_settings(data: AppData, **changes) -> AppData:
    if "expense_categories" in changes:
        changes["expense_categories"] = tuple(changes["expense_categories"])
    return replace(data, settings=replace(data.settings, **changes))


def validate_reference(data: AppData, record) -> Either[dict, object]:
    asset_id = getattr(record, "asset_id", None)
    if asset_id is not None and not has_record(data.assets, asset_id):
        return Left({
            "error": "asset_not_found",
            "message": f"Asset with ID {asset_id} does not exist",
            "asset_id": asset_id,
        })

    bucket_id = getattr(record, "bucket_id", None)
    if bucket_id is not None and not has_record(data.savings_buckets, bucket_id):
        return Left({
            "error": "bucket_not_found",
            "message": f"Savings bucket with ID {bucket_id} does not exist",
            "bucket_id": bucket_id,
        })

    return Right(record)


# --- price snapshots


def upsert_snapshot(
    snapshots: Tuple[Snapshot, ...],
    asset_id: str,
    date: str,
    price: float,
    *,
    now: Optional[int] = None,
) -> Tuple[Snapshot, ...]:
    """Record the position value of an asset for a date.

    An existing (asset_id, date) snapshot keeps its id and position and gets
    the new price and a fresh created_at; otherwise a new snapshot is
    appended.  Any further duplicates for the same key are dropped.
    """
    stamp = now_millis() if now is None else now
    result = []
    replaced = False
    for s in snapshots:
        if s.asset_id == asset_id and s.date == date:
            if not replaced:
                result.append(replace(s, price=price, created_at=stamp))
                replaced = True
            continue
        result.append(s)

    if not replaced:
        result.append(Snapshot(id=new_id(), asset_id=asset_id, date=date, price=price, created_at=stamp))
    logger.debug("Upserted snapshot %s@%s (%s)", asset_id, date, "replaced" if replaced else "new")
    return tuple(result)


def update_snapshot(
    snapshots: Tuple[Snapshot, ...], snapshot_id: str, date: str, price: float
) -> Tuple[Snapshot, ...]:
    return tuple(
        replace(s, date=date, price=price) if s.id == snapshot_id else s
        for s in snapshots
    )
