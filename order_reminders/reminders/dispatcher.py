import json
import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from order_reminders.utils.timezone import utc_now
from .config import ReconcilerConfig
from .schemas import ReminderNotification
from .store import RecordStore

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def enqueue(self, notification: ReminderNotification, priority: Optional[str] = None) -> None:
        ...


class StoreNotificationSink:
    """Hands reminder notifications to the push fan-out through the record store.

    Each notification becomes a ``notifications`` record (the in-app inbox entry)
    and a ``notification_queue`` record picked up for immediate push delivery.
    Failures propagate to the caller.
    """

    def __init__(
        self,
        store: RecordStore,
        config: ReconcilerConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.config = config
        self._clock = clock

    def enqueue(self, notification: ReminderNotification, priority: Optional[str] = None) -> None:
        now = self._clock()
        data = json.dumps(notification.payload)

        notification_id = self.store.create(
            self.config.notifications_collection,
            {
                "title": notification.title,
                "message": notification.body,
                "type": notification.notification_type,
                "target_audience": notification.audience,
                "is_in_app": True,
                "is_push": True,
                "data": data,
                "scheduled_at": now,
                "status": "sent",
                "created_at": now,
            },
        )

        self.store.create(
            self.config.queue_collection,
            {
                "title": notification.title,
                "message": notification.body,
                "target_audience": notification.audience,
                "data": data,
                "status": "pending",
                "priority": priority or notification.priority,
                "created_at": now,
            },
        )
        logger.info(
            f"📨 [Reminders] Queued notification {notification_id} for {notification.audience} "
            f"(reminder #{notification.payload.get('reminder_number')})"
        )
