from fastapi import APIRouter, Depends
from app.api.deps import get_store
from app.core.errors import ValidationError
from app.schemas.lookup import (
    ClassIdsRequest,
    ClassIdsResponse,
    PropertiesRequest,
    PropertiesResponse,
    PropertyOut,
)
from app.services.resolver import resolve_class, resolve_properties
from app.store.reference import ReferenceStore

router = APIRouter(prefix="/lookup")

@router.post("/class-ids", response_model=ClassIdsResponse)
def get_class_ids(req: ClassIdsRequest, store: ReferenceStore = Depends(get_store)):
    missing = [name for name, value in (("childObjectName", req.child_object_name),
                                        ("childClassName", req.child_class_name)) if not value]
    if missing:
        raise ValidationError.missing_fields(missing)

    resolution = resolve_class(store, req.child_object_name, req.child_class_name, req.parent_object_name)
    return ClassIdsResponse(
        child_class_lang_id=resolution.child_class_lang_id,
        parent_class_lang_id=resolution.parent_class_lang_id,
        child_object_name=resolution.child_object_name,
        parent_object_name=resolution.parent_object_name,
        child_class_id=resolution.child_class_id,
        child_class_name=resolution.child_class_name,
    )

@router.post("/properties", response_model=PropertiesResponse)
def get_properties(req: PropertiesRequest, store: ReferenceStore = Depends(get_store)):
    if not req.child_class_id:
        raise ValidationError.missing_fields(["childClassId"])

    result = resolve_properties(store, req.child_class_id, req.parent_class_id)
    return PropertiesResponse(
        properties=[
            PropertyOut(property_lang_id=p.lang_id, name=p.name, description=p.description)
            for p in result.properties
        ],
        count=result.count,
        collection_id=result.collection_id,
    )
