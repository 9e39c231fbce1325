import copy
import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pytest

from order_reminders.reminders.config import ReconcilerConfig
from order_reminders.reminders.filters import Filter
from order_reminders.reminders.reconciler import ReminderReconciler
from order_reminders.reminders.schemas import ReminderNotification


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeRecordStore:
    """In-memory RecordStore. Individual operations can be made to fail."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_on: Dict[tuple, Exception] = {}
        self._ids = itertools.count(1)

    def fail(self, op: str, collection: str, exc: Optional[Exception] = None) -> None:
        self.fail_on[(op, collection)] = exc or RuntimeError(f"{op} on {collection} failed")

    def _maybe_fail(self, op: str, collection: str) -> None:
        exc = self.fail_on.get((op, collection))
        if exc is not None:
            raise exc

    def seed(self, collection: str, record: Mapping[str, Any]) -> str:
        record_id = str(record.get("id") or next(self._ids))
        self.collections.setdefault(collection, {})[record_id] = {**record, "id": record_id}
        return record_id

    def get(self, collection: str, record_id: str) -> Dict[str, Any]:
        return self.collections[collection][record_id]

    def all(self, collection: str) -> List[Dict[str, Any]]:
        return list(self.collections.get(collection, {}).values())

    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[Dict[str, Any]]:
        self.calls.append(("query", collection, tuple(filters)))
        self._maybe_fail("query", collection)
        return [
            copy.deepcopy(r)
            for r in self.collections.get(collection, {}).values()
            if all(f.matches(r) for f in filters)
        ]

    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        self.calls.append(("create", collection, dict(record)))
        self._maybe_fail("create", collection)
        return self.seed(collection, {**record, "id": f"gen-{next(self._ids)}"})

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        self.calls.append(("update", collection, record_id, dict(fields)))
        self._maybe_fail("update", collection)
        self.collections[collection][record_id].update(fields)


class RecordingSink:
    def __init__(self):
        self.sent: List[ReminderNotification] = []
        self.priorities: List[Optional[str]] = []
        self.fail_for_orders: set = set()

    def enqueue(self, notification: ReminderNotification, priority: Optional[str] = None) -> None:
        if notification.payload.get("order_id") in self.fail_for_orders:
            raise RuntimeError("notification create failed")
        self.sent.append(notification)
        self.priorities.append(priority)


def make_schedule(**overrides) -> Dict[str, Any]:
    record = {
        "order_id": "order-1234567890",
        "designer_id": "designer-1",
        "notification_id": "notif-1",
        "is_active": True,
        "reminder_count": 0,
        "max_reminders": 6,
        "next_reminder_at": NOW - timedelta(seconds=30),
        "last_reminder_sent": None,
        "stopped_reason": "none",
        "stopped_at": None,
    }
    record.update(overrides)
    return record


@pytest.fixture
def config() -> ReconcilerConfig:
    return ReconcilerConfig()


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def reconciler(store, sink, config) -> ReminderReconciler:
    return ReminderReconciler(store, sink, config, clock=lambda: NOW)
