import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile
from app.api.deps import get_db_manager, get_sessions, get_store
from app.schemas.reference import (
    DeleteResponse,
    ObjectClassesResponse,
    ObjectClassOut,
    SchemaReportResponse,
    UploadResponse,
)
from app.services.uploads import ReferenceDbManager
from app.store.reference import ReferenceStore
from app.wizard.sessions import WizardSessions

log = logging.getLogger(__name__)

router = APIRouter(prefix="/reference-db")

@router.post("", response_model=UploadResponse)
def upload_reference_db(
    file: Optional[UploadFile] = File(None),
    manager: ReferenceDbManager = Depends(get_db_manager),
    sessions: WizardSessions = Depends(get_sessions),
):
    store = manager.accept_upload(
        filename=file.filename if file else None,
        stream=file.file if file else None,
        total_bytes=file.size if file else None,
    )
    # identifiers derived from the previous upload are stale now
    stale = sessions.on_store_replaced(store)
    if stale:
        log.warning("%d wizard session(s) have objects that no longer resolve", len(stale),
                    extra={"store_id": store.store_id})

    summary = store.summary()
    return UploadResponse(
        message="Reference DB uploaded successfully",
        db_path=summary["dbPath"],
        store_id=store.store_id,
        db_schema=summary["schema"],
    )

@router.delete("", response_model=DeleteResponse)
def delete_reference_db(
    manager: ReferenceDbManager = Depends(get_db_manager),
    sessions: WizardSessions = Depends(get_sessions),
):
    path = manager.delete()
    sessions.on_store_cleared()
    return DeleteResponse(message="Uploaded database file deleted successfully", db_path=str(path))

@router.get("/schema", response_model=SchemaReportResponse)
def discover_schema(manager: ReferenceDbManager = Depends(get_db_manager)):
    report = manager.discover_schema()
    return SchemaReportResponse(
        available_tables=report.available_tables,
        required_tables=report.required_tables,
        found_tables=report.found_tables,
        missing_tables=report.missing_tables,
        is_valid=report.is_valid,
    )

@router.get("/classes", response_model=ObjectClassesResponse)
def list_object_classes(store: ReferenceStore = Depends(get_store)):
    classes = store.list_classes()
    return ObjectClassesResponse(
        object_classes=[
            ObjectClassOut(class_lang_id=c.lang_id, class_id=c.class_id, name=c.name, description=c.description)
            for c in classes
        ],
        count=len(classes),
    )
