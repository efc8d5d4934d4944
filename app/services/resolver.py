"""
Identifier resolution: class name -> class ids -> collection -> properties.

Both lookups are pure reads against the store handle they are given.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List
from app.core.errors import NotFound, ValidationError
from app.store.reference import ReferenceProperty, ReferenceStore

log = logging.getLogger(__name__)

# The System class is assumed to occupy lang_id 1 in every reference db.
# Nothing checks this: a store whose System class sits elsewhere yields wrong
# parent ids without an error.
SYSTEM_CLASS_LANG_ID = 1
SYSTEM_OBJECT_NAME = "System"


@dataclass(frozen=True)
class ClassResolution:
    child_class_lang_id: int
    child_class_id: int
    parent_class_lang_id: int
    child_class_name: str
    child_object_name: str
    parent_object_name: str
    store_id: str


@dataclass(frozen=True)
class PropertyResolution:
    collection_id: int
    properties: List[ReferenceProperty]

    @property
    def count(self) -> int:
        return len(self.properties)


def resolve_class(
    store: ReferenceStore,
    child_object_name: str,
    child_class_name: str,
    parent_object_name: str = SYSTEM_OBJECT_NAME,
) -> ClassResolution:
    """
    Look up a class by exact name.

    Object names are passed through untouched; objects do not need to exist
    in the reference db before they are configured.
    """
    if not child_class_name:
        raise ValidationError.missing_fields(["childClassName"])

    row = store.find_class(child_class_name)
    if row is None:
        raise NotFound(
            "child class",
            child_class_name,
            message=f"Child class '{child_class_name}' not found in t_class table",
        )

    log.debug("Resolved class %s -> lang_id=%s class_id=%s", child_class_name, row.lang_id, row.class_id,
              extra={"store_id": store.store_id})
    return ClassResolution(
        child_class_lang_id=row.lang_id,
        child_class_id=row.class_id,
        parent_class_lang_id=SYSTEM_CLASS_LANG_ID,
        child_class_name=row.name,
        child_object_name=child_object_name,
        parent_object_name=parent_object_name,
        store_id=store.store_id,
    )


def resolve_properties(
    store: ReferenceStore,
    child_class_id: int,
    parent_class_id: int = SYSTEM_CLASS_LANG_ID,
) -> PropertyResolution:
    """Properties available to a (child class, parent class) collection, ordered by name."""
    collection = store.find_collection(child_class_id, parent_class_id)
    if collection is None:
        raise NotFound(
            "collection",
            {"childClassId": child_class_id, "parentClassId": parent_class_id},
            message=(
                f"No collection found for child_class_id={child_class_id} "
                f"and parent_class_id={parent_class_id}"
            ),
        )

    properties = store.properties_for_collection(collection.collection_id)
    log.debug("Collection %s has %d properties", collection.collection_id, len(properties),
              extra={"store_id": store.store_id})
    return PropertyResolution(collection_id=collection.collection_id, properties=properties)
