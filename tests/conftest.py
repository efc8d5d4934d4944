"""Shared fixtures: small reference databases built with SQLAlchemy."""
from pathlib import Path
import pytest
from sqlalchemy import create_engine, text
from app.store.reference import REQUIRED_TABLES, ReferenceStore

TABLE_DDL = {
    "t_class": "CREATE TABLE t_class (class_id INTEGER PRIMARY KEY, lang_id INTEGER, name TEXT, description TEXT)",
    "t_collection": (
        "CREATE TABLE t_collection (collection_id INTEGER PRIMARY KEY, parent_class_id INTEGER, "
        "child_class_id INTEGER, name TEXT)"
    ),
    "t_property": (
        "CREATE TABLE t_property (property_id INTEGER PRIMARY KEY AUTOINCREMENT, collection_id INTEGER, "
        "lang_id INTEGER, name TEXT, description TEXT)"
    ),
    "t_object": "CREATE TABLE t_object (object_id INTEGER PRIMARY KEY, class_id INTEGER, name TEXT)",
    "t_membership": (
        "CREATE TABLE t_membership (membership_id INTEGER PRIMARY KEY, collection_id INTEGER, "
        "parent_object_id INTEGER, child_object_id INTEGER)"
    ),
}

# (class_id, lang_id, name, description)
DEFAULT_CLASSES = [
    (1, 1, "System", "The system"),
    (3, 7, "Generator", "Generating unit"),
    (4, 8, "Node", "Electrical node"),
    (5, 9, "Fuel", "Fuel type"),
]

# (collection_id, parent_class_id, child_class_id)
DEFAULT_COLLECTIONS = [
    (5, 1, 3),
    (6, 1, 4),
]

# (collection_id, lang_id, name, description)
DEFAULT_PROPERTIES = [
    (5, 101, "MaxCapacity", "Maximum generating capacity"),
    (5, 102, "FuelCost", "Cost of fuel"),
    (6, 201, "Voltage", "Nominal voltage"),
    (6, 202, "load", "Demand at the node"),
    (6, 203, "Area", "Region the node belongs to"),
]


def build_reference_db(path: Path, tables=REQUIRED_TABLES, classes=None, collections=None, properties=None) -> Path:
    classes = DEFAULT_CLASSES if classes is None else classes
    collections = DEFAULT_COLLECTIONS if collections is None else collections
    properties = DEFAULT_PROPERTIES if properties is None else properties

    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        for table in tables:
            conn.execute(text(TABLE_DDL[table]))
        if "t_class" in tables:
            for class_id, lang_id, name, description in classes:
                conn.execute(
                    text("INSERT INTO t_class (class_id, lang_id, name, description) VALUES (:c, :l, :n, :d)"),
                    {"c": class_id, "l": lang_id, "n": name, "d": description},
                )
        if "t_collection" in tables:
            for collection_id, parent_id, child_id in collections:
                conn.execute(
                    text(
                        "INSERT INTO t_collection (collection_id, parent_class_id, child_class_id) "
                        "VALUES (:c, :p, :ch)"
                    ),
                    {"c": collection_id, "p": parent_id, "ch": child_id},
                )
        if "t_property" in tables:
            for collection_id, lang_id, name, description in properties:
                conn.execute(
                    text(
                        "INSERT INTO t_property (collection_id, lang_id, name, description) "
                        "VALUES (:c, :l, :n, :d)"
                    ),
                    {"c": collection_id, "l": lang_id, "n": name, "d": description},
                )
    engine.dispose()
    return path


@pytest.fixture
def make_reference_db(tmp_path):
    """Factory: make_reference_db(name="x.db", tables=..., classes=..., ...) -> Path."""
    def _make(name: str = "references.db", **kwargs) -> Path:
        return build_reference_db(tmp_path / name, **kwargs)
    return _make


@pytest.fixture
def reference_db(make_reference_db) -> Path:
    return make_reference_db("source.db")


@pytest.fixture
def store(reference_db):
    store = ReferenceStore.open(reference_db)
    yield store
    store.close()
