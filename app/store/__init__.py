"""Reference store: the uploaded lookup database and the process-wide slot that holds it."""
from app.store.reference import (
    REQUIRED_TABLES,
    ReferenceClass,
    ReferenceCollection,
    ReferenceProperty,
    ReferenceStore,
    SchemaReport,
    discover_schema,
)
from app.store.slot import StoreSlot

__all__ = [
    "REQUIRED_TABLES",
    "ReferenceClass",
    "ReferenceCollection",
    "ReferenceProperty",
    "ReferenceStore",
    "SchemaReport",
    "StoreSlot",
    "discover_schema",
]
