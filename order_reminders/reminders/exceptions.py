class RecordStoreError(Exception):
    """Raised when the record store cannot complete a query, create or update."""


class UnknownCollectionError(RecordStoreError):
    def __init__(self, collection: str):
        super().__init__(f"Unknown collection: {collection}")
        self.collection = collection


class UnknownFieldError(RecordStoreError):
    def __init__(self, collection: str, field: str):
        super().__init__(f"Unknown field '{field}' on collection {collection}")
        self.collection = collection
        self.field = field


class ReconcileTickError(Exception):
    """Raised by the Celery trigger so a failed tick shows up as a FAILURE task state."""
