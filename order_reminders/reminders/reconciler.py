"""
Reminder reconciler: one pass over the due reminder chains.

Per due chain:
  - order notification already read -> stop every active chain for the pair (acknowledged)
  - otherwise send reminder #(count + 1), then reschedule or stop (max_reached)
  - any processing error -> stop the chain (error) and move on

There is no locking. Two overlapping ticks can both send the same reminder;
updates are last-write-wins.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from order_reminders.utils.timezone import utc_now
from .config import ReconcilerConfig
from .dispatcher import NotificationSink
from .filters import eq, lte
from .metrics import (
    reconcile_ticks_total,
    reminders_cancelled_total,
    reminders_errored_total,
    reminders_max_reached_total,
    reminders_sent_total,
)
from .schemas import AcknowledgmentRecord, ReminderNotification, ReminderSchedule, StoppedReason
from .store import RecordStore

logger = logging.getLogger(__name__)


class ReminderReconciler:
    def __init__(
        self,
        store: RecordStore,
        sink: NotificationSink,
        config: Optional[ReconcilerConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.sink = sink
        self.config = config or ReconcilerConfig()
        self._clock = clock

    def run_tick(self) -> int:
        """Process every due reminder chain. Returns the number of reminders sent.

        Only a failure of the initial due query escapes; everything after it is
        handled per chain.
        """
        reconcile_ticks_total.inc()
        now = self._clock()
        due = self.store.query(
            self.config.schedules_collection,
            [eq("is_active", True), lte("next_reminder_at", now)],
        )
        logger.info(f"🔍 [Reminders] Found {len(due)} due reminders at {now.isoformat()}")

        processed = 0
        for record in due:
            if self._process(record):
                processed += 1

        logger.info(f"✅ [Reminders] Tick finished, sent {processed} of {len(due)}")
        return processed

    def _process(self, record: Dict[str, Any]) -> bool:
        record_id = record.get("id")
        try:
            reminder = ReminderSchedule.model_validate(record)

            if self.is_acknowledged(reminder.order_id, reminder.designer_id):
                stopped = self.cancel_remaining(reminder.order_id, reminder.designer_id)
                logger.info(
                    f"🛑 [Reminders] Order {reminder.order_id} read by designer {reminder.designer_id}, "
                    f"stopped {stopped} chain(s)"
                )
                return False

            reminder_number = reminder.reminder_count + 1
            notification = self.build_notification(reminder, reminder_number)
            self.sink.enqueue(notification, priority=notification.priority)

            self._advance(reminder, reminder_number)
            reminders_sent_total.inc()
            logger.info(f"📣 [Reminders] Sent reminder #{reminder_number} for order {reminder.order_id}")
            return True
        except Exception:
            logger.exception(f"❌ [Reminders] Failed to process reminder {record_id}")
            self._stop_on_error(record_id)
            return False

    def is_acknowledged(self, order_id: str, designer_id: str) -> bool:
        """True when the original order notification was read.

        Lookup failures count as "not read" so reminders keep going.
        """
        try:
            matches = self.store.query(
                self.config.acknowledgments_collection,
                [eq("order_id", order_id), eq("designer_id", designer_id)],
            )
            if not matches:
                return False
            return AcknowledgmentRecord.model_validate(matches[0]).is_read
        except Exception as e:
            logger.warning(
                f"⚠️  [Reminders] Read status lookup failed for order {order_id} "
                f"designer {designer_id}: {e!r}"
            )
            return False

    def cancel_remaining(self, order_id: str, designer_id: str) -> int:
        """Stop every active chain for the pair. Returns how many were stopped.

        Best effort: a failure is logged and the remaining chains stay active
        until the next tick sees them.
        """
        stopped = 0
        try:
            active = self.store.query(
                self.config.schedules_collection,
                [eq("order_id", order_id), eq("designer_id", designer_id), eq("is_active", True)],
            )
            for record in active:
                self.store.update(
                    self.config.schedules_collection,
                    record["id"],
                    self._stopped_fields(StoppedReason.ACKNOWLEDGED),
                )
                stopped += 1
                reminders_cancelled_total.inc()
        except Exception as e:
            logger.error(
                f"❌ [Reminders] Cancelling reminders for order {order_id} designer {designer_id} "
                f"failed after {stopped}: {e!r}"
            )
        return stopped

    def build_notification(self, reminder: ReminderSchedule, reminder_number: int) -> ReminderNotification:
        title = self.config.title_template.format(
            reminder_number=reminder_number,
            short_order_id=reminder.order_id[:8],
        )
        return ReminderNotification(
            title=title,
            body=self.config.body_template,
            audience=f"designer:{reminder.designer_id}",
            payload={
                "order_id": reminder.order_id,
                "original_notification_id": reminder.original_notification_id,
                "type": "reminder",
                "reminder_number": reminder_number,
                "action": "view_order",
            },
            priority=self.config.notification_priority,
            notification_type=self.config.notification_type,
        )

    def _advance(self, reminder: ReminderSchedule, reminder_number: int) -> None:
        max_reminders = reminder.max_reminders or self.config.default_max_reminders
        if reminder_number >= max_reminders:
            self.store.update(
                self.config.schedules_collection,
                reminder.id,
                self._stopped_fields(StoppedReason.MAX_REACHED),
            )
            reminders_max_reached_total.inc()
            logger.info(f"🏁 [Reminders] Chain {reminder.id} reached {max_reminders} reminders, stopped")
            return

        now = self._clock()
        self.store.update(
            self.config.schedules_collection,
            reminder.id,
            {
                "reminder_count": reminder_number,
                "last_reminder_sent": now,
                "next_reminder_at": now + self.config.resend_interval,
            },
        )

    def _stop_on_error(self, record_id: Any) -> None:
        if record_id is None:
            logger.error("❌ [Reminders] Cannot stop a due record without an id")
            return
        try:
            self.store.update(
                self.config.schedules_collection,
                record_id,
                self._stopped_fields(StoppedReason.ERROR),
            )
            reminders_errored_total.inc()
        except Exception as e:
            # Stays active; the next tick retries it
            logger.error(f"❌ [Reminders] Could not mark reminder {record_id} as failed: {e!r}")

    def _stopped_fields(self, reason: StoppedReason) -> Dict[str, Any]:
        return {
            "is_active": False,
            "stopped_reason": reason.value,
            "stopped_at": self._clock(),
        }
