"""
Schemas for reminder chains, acknowledgment records and tick results.

Field names match the stored documents exactly; ``original_notification_id`` is
stored as ``notification_id``.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from order_reminders.utils.timezone import to_utc_aware


class StoppedReason(str, Enum):
    NONE = "none"
    MAX_REACHED = "max_reached"
    ACKNOWLEDGED = "acknowledged"
    ERROR = "error"


class ReminderSchedule(BaseModel):
    """One reminder chain for an (order, designer) pair"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    order_id: str
    designer_id: str
    original_notification_id: Optional[str] = Field(default=None, alias="notification_id")
    is_active: bool = True
    reminder_count: int = Field(default=0, ge=0)
    # None means "use the configured default"
    max_reminders: Optional[int] = Field(default=None, gt=0)
    next_reminder_at: Optional[datetime] = None
    last_reminder_sent: Optional[datetime] = None
    stopped_reason: StoppedReason = StoppedReason.NONE
    stopped_at: Optional[datetime] = None

    @field_validator("reminder_count", mode="before")
    @classmethod
    def _count_defaults_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("max_reminders", mode="before")
    @classmethod
    def _unset_max_reminders(cls, v: Any) -> Any:
        return v or None

    @field_validator("stopped_reason", mode="before")
    @classmethod
    def _stopped_reason_defaults_to_none(cls, v: Any) -> Any:
        return StoppedReason.NONE if v is None else v

    @field_validator("next_reminder_at", "last_reminder_sent", "stopped_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_utc_aware(v)


class AcknowledgmentRecord(BaseModel):
    """Read state of the original order notification"""
    model_config = ConfigDict(extra="ignore")

    order_id: str
    designer_id: str
    is_read: bool = False

    @field_validator("is_read", mode="before")
    @classmethod
    def _unread_when_missing(cls, v: Any) -> Any:
        return False if v is None else v


class ReminderNotification(BaseModel):
    """A single follow-up notification built by the reconciler"""
    title: str
    body: str
    audience: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    priority: str = "high"
    notification_type: str = "order_reminder"


class TickResult(BaseModel):
    """Outcome of one reconciliation tick as reported to the trigger"""
    success: bool
    processed_count: Optional[int] = None
    message: Optional[str] = None
    error: Optional[str] = None
