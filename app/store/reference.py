"""Read-only handle over an uploaded reference database (SQLite)."""
from __future__ import annotations
import logging
import sqlite3
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool
from sqlalchemy.exc import SQLAlchemyError
from app.core.errors import InvalidDatabase, SchemaMismatch, ValidationError

log = logging.getLogger(__name__)

# t_object and t_membership are never queried; they only gate schema validity.
REQUIRED_TABLES = ("t_class", "t_collection", "t_property", "t_object", "t_membership")


@dataclass(frozen=True)
class ReferenceClass:
    lang_id: int
    class_id: int
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ReferenceCollection:
    collection_id: int
    child_class_id: int
    parent_class_id: int


@dataclass(frozen=True)
class ReferenceProperty:
    lang_id: int
    name: str
    description: Optional[str]
    collection_id: int


@dataclass
class SchemaReport:
    """Result of comparing a database's tables against REQUIRED_TABLES."""
    available_tables: List[str]
    required_tables: List[str] = field(default_factory=lambda: list(REQUIRED_TABLES))

    @property
    def found_tables(self) -> List[str]:
        return [t for t in self.required_tables if t in self.available_tables]

    @property
    def missing_tables(self) -> List[str]:
        return [t for t in self.required_tables if t not in self.available_tables]

    @property
    def is_valid(self) -> bool:
        return not self.missing_tables

    def to_dict(self) -> dict:
        return {
            "availableTables": self.available_tables,
            "requiredTables": self.required_tables,
            "foundTables": self.found_tables,
            "missingTables": self.missing_tables,
            "isValid": self.is_valid,
        }


def _readonly_uri(path: Path) -> str:
    # percent-encoded so "#" and "?" in the path cannot end it early
    return f"file:{quote(path.resolve().as_posix())}?mode=ro"


def _readonly_engine(path: Path) -> Engine:
    # mode=ro keeps sqlite from creating an empty file or writing to the upload
    uri = _readonly_uri(path)
    return create_engine(
        "sqlite://",
        creator=lambda: sqlite3.connect(uri, uri=True, check_same_thread=False),
        poolclass=QueuePool,
    )


def _require_file(path: Path) -> None:
    if not path.is_file():
        raise ValidationError(f"Database file not found: {path.name}")


def discover_schema(path: Path) -> SchemaReport:
    """Inspect any SQLite file without activating it as the reference store."""
    path = Path(path)
    _require_file(path)
    engine = _readonly_engine(path)
    try:
        tables = inspect(engine).get_table_names()
    except SQLAlchemyError as e:
        raise InvalidDatabase(details={"reason": str(e.__cause__ or e)}) from e
    finally:
        engine.dispose()
    log.info("Available tables: %s", tables)
    return SchemaReport(available_tables=tables)


class ReferenceStore:
    """
    One opened reference database.

    Every handle gets its own opaque store_id so identifiers derived from it
    can be told apart from ones derived from a later upload.
    """

    def __init__(self, path: Path, engine: Engine, tables: List[str], class_columns: List[str]):
        self.path = path
        self.store_id = uuid.uuid4().hex
        self.tables = tables
        self._engine = engine
        self._class_columns = class_columns

    @classmethod
    def open(cls, path: Path) -> "ReferenceStore":
        """
        Open and validate a reference database.

        Raises:
            ValidationError: file does not exist
            InvalidDatabase: file is not a readable SQLite database
            SchemaMismatch: one or more REQUIRED_TABLES are absent
        """
        path = Path(path)
        _require_file(path)
        engine = _readonly_engine(path)
        try:
            inspector = inspect(engine)
            tables = inspector.get_table_names()
            report = SchemaReport(available_tables=tables)
            if not report.is_valid:
                log.warning("Reference db rejected, missing tables: %s", report.missing_tables)
                raise SchemaMismatch(
                    available_tables=report.available_tables,
                    missing_tables=report.missing_tables,
                    required_tables=report.required_tables,
                )
            class_columns = [c["name"] for c in inspector.get_columns("t_class")]
        except SQLAlchemyError as e:
            engine.dispose()
            raise InvalidDatabase(details={"reason": str(e.__cause__ or e)}) from e
        except SchemaMismatch:
            engine.dispose()
            raise

        store = cls(path=path, engine=engine, tables=tables, class_columns=class_columns)
        log.info("Opened reference db %s", path.name, extra={"store_id": store.store_id})
        return store

    def close(self) -> None:
        self._engine.dispose()
        log.info("Closed reference db %s", self.path.name, extra={"store_id": self.store_id})

    def summary(self) -> dict:
        return {
            "storeId": self.store_id,
            "dbPath": str(self.path),
            "schema": {name: name for name in REQUIRED_TABLES},
        }

    def find_class(self, name: str) -> Optional[ReferenceClass]:
        """Exact, case-sensitive match on t_class.name."""
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT lang_id, class_id, name FROM t_class WHERE name = :name"),
                {"name": name},
            ).first()
        if row is None:
            return None
        return ReferenceClass(lang_id=row.lang_id, class_id=row.class_id, name=row.name)

    def list_classes(self) -> List[ReferenceClass]:
        description = "description" if "description" in self._class_columns else "NULL"
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(f"SELECT lang_id, class_id, name, {description} AS description FROM t_class ORDER BY name")
            ).all()
        return [
            ReferenceClass(lang_id=r.lang_id, class_id=r.class_id, name=r.name, description=r.description)
            for r in rows
        ]

    def find_collection(self, child_class_id: int, parent_class_id: int) -> Optional[ReferenceCollection]:
        # (child, parent) is assumed unique; the first row wins if it is not.
        with self._engine.connect() as conn:
            row = conn.execute(
                text(
                    "SELECT collection_id, child_class_id, parent_class_id FROM t_collection "
                    "WHERE child_class_id = :child AND parent_class_id = :parent"
                ),
                {"child": child_class_id, "parent": parent_class_id},
            ).first()
        if row is None:
            return None
        return ReferenceCollection(
            collection_id=row.collection_id,
            child_class_id=row.child_class_id,
            parent_class_id=row.parent_class_id,
        )

    def properties_for_collection(self, collection_id: int) -> List[ReferenceProperty]:
        """All properties of a collection, ordered by name (sqlite BINARY collation, case-sensitive)."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(
                    "SELECT lang_id, name, description, collection_id FROM t_property "
                    "WHERE collection_id = :collection_id ORDER BY name"
                ),
                {"collection_id": collection_id},
            ).all()
        return [
            ReferenceProperty(
                lang_id=r.lang_id,
                name=r.name,
                description=r.description,
                collection_id=r.collection_id,
            )
            for r in rows
        ]
