import logging
from typing import Optional

from sqlalchemy.orm import Session

from .config import ReconcilerConfig
from .dispatcher import StoreNotificationSink
from .metrics import reconcile_tick_failures_total
from .reconciler import ReminderReconciler
from .schemas import TickResult
from .store import SqlRecordStore, default_collections

logger = logging.getLogger(__name__)


def build_reconciler(db: Session, config: Optional[ReconcilerConfig] = None) -> ReminderReconciler:
    """Wire a reconciler to the SQL record store behind ``db``."""
    config = config or ReconcilerConfig.from_settings()
    store = SqlRecordStore(db, default_collections(config))
    return ReminderReconciler(store, StoreNotificationSink(store, config), config)


def run_tick(reconciler: ReminderReconciler) -> TickResult:
    """Run one tick and report it as a result object. Never raises."""
    logger.info("🕒 [Reminders] Starting reconciliation tick")
    try:
        processed = reconciler.run_tick()
    except Exception as e:
        reconcile_tick_failures_total.inc()
        logger.error(f"❌ [Reminders] Reconciliation tick failed: {e!r}")
        return TickResult(success=False, error=str(e) or e.__class__.__name__)
    return TickResult(
        success=True,
        processed_count=processed,
        message=f"Processed {processed} reminders",
    )
