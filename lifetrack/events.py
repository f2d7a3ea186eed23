import logging
from collections import defaultdict
from datetime import datetime
from typing import Callable, DefaultDict, List, NamedTuple

__all__ = [
    'Event', 'EventBus', 'DATA_CHANGED', 'EMERGENCY_UPDATED', 'TARGET_REACHED',
    'data_changed_handler', 'check_target_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    """Synchronous publish/subscribe; handlers run in subscription order."""

    def __init__(self):
        self._subscribers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = tuple(self._subscribers.get(name, ()))
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("Publishing %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]


DATA_CHANGED = "DATA_CHANGED"
EMERGENCY_UPDATED = "EMERGENCY_UPDATED"
TARGET_REACHED = "TARGET_REACHED"


def data_changed_handler(event: Event, payload: dict) -> dict:
    return {"changed": payload.get("collections", ()), "action": payload.get("action", "")}


def _reached(balance: float, target: float) -> bool:
    return target > 0 and balance >= target


def check_target_handler(event: Event, payload: dict) -> dict:
    """Alert when the emergency balance moves from below its target to at or above it."""
    balance = payload.get("balance", 0)
    target = payload.get("target", 0)
    was_reached = _reached(payload.get("previous_balance", 0), payload.get("previous_target", 0))

    if _reached(balance, target) and not was_reached:
        return {
            "event": TARGET_REACHED,
            "alert": f"Emergency fund target reached: {balance:,.2f} / {target:,.2f} RON",
            "balance": balance,
            "target": target,
        }
    return {}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(DATA_CHANGED, data_changed_handler)
    bus.subscribe(EMERGENCY_UPDATED, check_target_handler)
    return bus
