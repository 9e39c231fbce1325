"""
Record store contract used by the reconciler, plus the SQLAlchemy implementation.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Type

from sqlalchemy import Column, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from order_reminders.db.base import Base
from order_reminders.utils.timezone import to_utc_aware
from .config import ReconcilerConfig
from .exceptions import RecordStoreError, UnknownCollectionError, UnknownFieldError
from .filters import OPERATOR_FUNCS, Filter
from .unified_models import (
    NotificationQueueRow,
    NotificationRow,
    OrderNotificationRow,
    ReminderScheduleRow,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[Dict[str, Any]]:
        ...

    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        ...

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into the record; fields not named are left untouched."""
        ...


def default_collections(config: ReconcilerConfig) -> Dict[str, Type[Base]]:
    return {
        config.schedules_collection: ReminderScheduleRow,
        config.acknowledgments_collection: OrderNotificationRow,
        config.notifications_collection: NotificationRow,
        config.queue_collection: NotificationQueueRow,
    }


def _to_wire(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_utc_aware(value)
    return value


class SqlRecordStore:
    """RecordStore over SQLAlchemy tables; each call commits on its own."""

    def __init__(self, db: Session, collections: Optional[Mapping[str, Type[Base]]] = None):
        self.db = db
        self.collections = dict(collections or default_collections(ReconcilerConfig()))

    def _model(self, collection: str) -> Type[Base]:
        try:
            return self.collections[collection]
        except KeyError:
            raise UnknownCollectionError(collection) from None

    def _column(self, collection: str, field: str) -> Column:
        column = self._model(collection).__table__.columns.get(field)
        if column is None:
            raise UnknownFieldError(collection, field)
        return column

    def query(self, collection: str, filters: Sequence[Filter] = ()) -> List[Dict[str, Any]]:
        model = self._model(collection)
        stmt = select(model)
        for f in filters:
            stmt = stmt.where(OPERATOR_FUNCS[f.operator](self._column(collection, f.field), _to_wire(f.value)))
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RecordStoreError(f"Query on {collection} failed: {exc}") from exc
        return [
            {c.name: _to_wire(getattr(row, c.key)) for c in model.__table__.columns}
            for row in rows
        ]

    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        model = self._model(collection)
        values = {self._column(collection, k).key: _to_wire(v) for k, v in record.items()}
        row = model(**values)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RecordStoreError(f"Create in {collection} failed: {exc}") from exc
        logger.debug(f"[Store] created {collection}/{row.id}")
        return str(row.id)

    def update(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        model = self._model(collection)
        values = {self._column(collection, k).key: _to_wire(v) for k, v in fields.items()}
        try:
            result = self.db.execute(
                update(model)
                .where(model.id == record_id)
                .values(**values)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RecordStoreError(f"Update of {collection}/{record_id} failed: {exc}") from exc
        if result.rowcount == 0:
            raise RecordStoreError(f"Record {collection}/{record_id} not found")
