from __future__ import annotations
import logging
import threading
from typing import Optional
from app.core.errors import StoreUninitialized
from app.store.reference import ReferenceStore

log = logging.getLogger(__name__)


class StoreSlot:
    """
    Holds the single active reference store for this process.

    Only one uploaded reference db is active at a time and every session sees
    the same one. Resolver code never reads the slot directly: routes take the
    handle out with current() and pass it along.
    """

    def __init__(self) -> None:
        self._store: Optional[ReferenceStore] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._store is not None

    def current(self) -> ReferenceStore:
        store = self._store
        if store is None:
            raise StoreUninitialized()
        return store

    def peek(self) -> Optional[ReferenceStore]:
        return self._store

    def replace(self, store: ReferenceStore) -> Optional[ReferenceStore]:
        """Activate a new store and close the previous one. Returns the previous handle."""
        with self._lock:
            previous, self._store = self._store, store
        if previous is not None:
            previous.close()
        log.info("Reference store activated", extra={"store_id": store.store_id})
        return previous

    def clear(self) -> None:
        with self._lock:
            previous, self._store = self._store, None
        if previous is not None:
            previous.close()
            log.info("Reference store cleared", extra={"store_id": previous.store_id})
