"""Upload, activation and deletion of the reference database file."""
from __future__ import annotations
import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, Callable, Optional
from app.core.errors import ValidationError
from app.store.reference import ReferenceStore, SchemaReport, discover_schema
from app.store.slot import StoreSlot

log = logging.getLogger(__name__)

ALLOWED_SUFFIX = ".db"


class UploadProgress:
    """Percentage of bytes received. Never goes backwards; informational only."""

    def __init__(self, total_bytes: Optional[int], on_change: Optional[Callable[[int], None]] = None):
        self.total_bytes = total_bytes
        self.received = 0
        self.percent = 0
        self._on_change = on_change

    def advance(self, n: int) -> None:
        self.received += n
        if not self.total_bytes:
            return
        percent = min(100, (self.received * 100) // self.total_bytes)
        if percent > self.percent:
            self.percent = percent
            if self._on_change:
                self._on_change(percent)

    def finish(self) -> None:
        if self.percent < 100:
            self.percent = 100
            if self._on_change:
                self._on_change(100)


class ReferenceDbManager:
    """
    Owns the fixed upload location and keeps the store slot in step with it.

    A new upload is staged next to the destination and only replaces the
    active database once it has passed schema validation.
    """

    def __init__(self, uploads_dir: Path, slot: StoreSlot, db_name: str = "references.db",
                 chunk_size: int = 1024 * 1024):
        self.uploads_dir = Path(uploads_dir)
        self.slot = slot
        self.db_name = db_name
        self.chunk_size = chunk_size

    @property
    def destination(self) -> Path:
        return self.uploads_dir / self.db_name

    def accept_upload(self, filename: Optional[str], stream: Optional[BinaryIO],
                      total_bytes: Optional[int] = None) -> ReferenceStore:
        """
        Store an uploaded .db file and make it the active reference store.

        Raises:
            ValidationError: no file, or not a .db file
            InvalidDatabase: not a readable SQLite database
            SchemaMismatch: required tables missing
        """
        if stream is None or not filename:
            raise ValidationError("No file uploaded", missing=["file"])
        if not filename.endswith(ALLOWED_SUFFIX):
            raise ValidationError("Only .db files are allowed", details={"fileName": filename})

        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        staging = self.uploads_dir / f".{self.db_name}.{uuid.uuid4().hex}.part"
        progress = UploadProgress(
            total_bytes,
            on_change=lambda pct: log.debug("Upload of %s at %d%%", filename, pct),
        )
        try:
            with open(staging, "wb") as out:
                while True:
                    chunk = stream.read(self.chunk_size)
                    if not chunk:
                        break
                    out.write(chunk)
                    progress.advance(len(chunk))
            progress.finish()

            # validate before touching the active database
            ReferenceStore.open(staging).close()
            os.replace(staging, self.destination)
        finally:
            if staging.exists():
                staging.unlink()

        store = ReferenceStore.open(self.destination)
        self.slot.replace(store)
        log.info("Reference DB uploaded successfully (%d bytes)", progress.received,
                 extra={"store_id": store.store_id})
        return store

    def delete(self) -> Path:
        """Remove the uploaded file, if any, and deactivate the store. Idempotent."""
        self.slot.clear()
        if self.destination.exists():
            self.destination.unlink()
            log.info("Uploaded database file deleted")
        return self.destination

    def discover_schema(self) -> SchemaReport:
        store = self.slot.current()
        return discover_schema(store.path)
