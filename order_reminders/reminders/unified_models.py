"""
Tables backing the record store collections.
"""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from order_reminders.db.base import Base
from order_reminders.utils.timezone import utc_now


def _new_id() -> str:
    return str(uuid.uuid4())


class ReminderScheduleRow(Base):
    """One reminder chain per (order, designer). Rows are deactivated, never deleted."""
    __tablename__ = "reminder_schedule"

    id = Column(String(36), primary_key=True, default=_new_id)
    order_id = Column(String, nullable=False)
    designer_id = Column(String, nullable=False)
    notification_id = Column(String, nullable=True)  # the original order notification

    is_active = Column(Boolean, nullable=False, default=True)
    reminder_count = Column(Integer, nullable=False, default=0)
    max_reminders = Column(Integer, nullable=False, default=6)
    next_reminder_at = Column(DateTime(timezone=True), nullable=True)
    last_reminder_sent = Column(DateTime(timezone=True), nullable=True)
    stopped_reason = Column(String, nullable=False, default="none")
    stopped_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_reminder_schedule_active_next", "is_active", "next_reminder_at"),
        Index("ix_reminder_schedule_order_designer", "order_id", "designer_id"),
    )


class OrderNotificationRow(Base):
    """Read state of the original order notification, written by the ordering flow"""
    __tablename__ = "order_notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    order_id = Column(String, nullable=False)
    designer_id = Column(String, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_order_notifications_order_designer", "order_id", "designer_id"),
    )


class NotificationRow(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String, nullable=False)
    target_audience = Column(String, nullable=False, index=True)
    is_in_app = Column(Boolean, nullable=False, default=True)
    is_push = Column(Boolean, nullable=False, default=True)
    data = Column(Text, nullable=True)  # JSON-encoded payload
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=False, default="sent")
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


class NotificationQueueRow(Base):
    """Pending deliveries picked up by the push fan-out"""
    __tablename__ = "notification_queue"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    target_audience = Column(String, nullable=False)
    data = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)
    priority = Column(String, nullable=False, default="normal")
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
