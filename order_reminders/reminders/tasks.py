import logging

from celery import shared_task
from sqlalchemy.orm import Session

from order_reminders.db.session import SessionLocal
from .exceptions import ReconcileTickError
from .runner import build_reconciler, run_tick

logger = logging.getLogger(__name__)


@shared_task(name="reminders.reconcile")
def reconcile_reminders_task() -> dict:
    """Periodic tick. Returns the result dict; raises so a failed tick is a FAILURE state."""
    db: Session = SessionLocal()
    try:
        result = run_tick(build_reconciler(db))
    finally:
        db.close()

    if not result.success:
        raise ReconcileTickError(result.error)
    return result.model_dump(exclude_none=True)
