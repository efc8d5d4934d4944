import logging
from fastapi import APIRouter, Depends
from app.api.deps import get_artifacts, get_sessions, get_slot, get_store
from app.schemas.common import MessageResponse
from app.schemas.configurations import ConfigurationCreated
from app.schemas.wizard import (
    ObjectOut,
    ObjectUpdateRequest,
    ObjectUpdateResponse,
    PropertySpecOut,
    PropertyUpdateRequest,
    RunProfileUpdateRequest,
    SessionOut,
    StudyUpdateRequest,
)
from app.services.artifacts import ArtifactStore
from app.services.assembler import build_configuration
from app.store.reference import ReferenceStore
from app.store.slot import StoreSlot
from app.wizard.sessions import WizardSessions

log = logging.getLogger(__name__)

router = APIRouter(prefix="/wizard/sessions")

@router.post("", response_model=SessionOut)
def create_session(sessions: WizardSessions = Depends(get_sessions)):
    _, form = sessions.create()
    return SessionOut.from_form(form)

@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: str, sessions: WizardSessions = Depends(get_sessions)):
    return SessionOut.from_form(sessions.get(session_id))

@router.delete("/{session_id}", response_model=MessageResponse)
def delete_session(session_id: str, sessions: WizardSessions = Depends(get_sessions)):
    sessions.drop(session_id)
    return MessageResponse(message="Wizard session closed")

@router.post("/{session_id}/reset", response_model=SessionOut)
def reset_session(session_id: str, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    form.reset()
    return SessionOut.from_form(form)

@router.put("/{session_id}/study", response_model=SessionOut)
def update_study(session_id: str, req: StudyUpdateRequest, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    model_info = req.model_info
    form.update_study(
        study_id=req.study_id,
        changeset_id=req.changeset_id,
        model_name=model_info.name if model_info and "name" in model_info.model_fields_set else None,
        model_display_name=(
            model_info.display_name if model_info and "display_name" in model_info.model_fields_set else None
        ),
        dashboard_id=req.dashboard_id,
    )
    return SessionOut.from_form(form)

@router.put("/{session_id}/run-profile", response_model=SessionOut)
def update_run_profile(session_id: str, req: RunProfileUpdateRequest,
                       sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    form.update_run_profile(
        engine_version=req.engine_version,
        operating_system=req.operating_system,
        cores=req.cores,
        memory=req.memory,
    )
    return SessionOut.from_form(form)

@router.post("/{session_id}/objects", response_model=ObjectOut)
def add_object(session_id: str, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    return ObjectOut.from_form(form, form.add_object())

@router.patch("/{session_id}/objects/{object_id}", response_model=ObjectUpdateResponse)
def update_object(
    session_id: str,
    object_id: str,
    req: ObjectUpdateRequest,
    sessions: WizardSessions = Depends(get_sessions),
    slot: StoreSlot = Depends(get_slot),
):
    form = sessions.get(session_id)
    # a failed lookup comes back as a warning, never as an error response
    update = form.update_object_fields(
        object_id,
        {field: getattr(req, field) for field in req.model_fields_set},
        store=slot.peek(),
    )
    return ObjectUpdateResponse(
        object=ObjectOut.from_form(form, update.object),
        resolved=update.resolved,
        warnings=[update.warning] if update.warning else [],
    )

@router.delete("/{session_id}/objects/{object_id}", response_model=SessionOut)
def delete_object(session_id: str, object_id: str, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    form.delete_object(object_id)
    return SessionOut.from_form(form)

@router.post("/{session_id}/objects/{object_id}/properties", response_model=ObjectOut)
def add_property(session_id: str, object_id: str, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    form.add_property(object_id)
    return ObjectOut.from_form(form, form.get_object(object_id))

@router.patch("/{session_id}/objects/{object_id}/properties/{index}", response_model=PropertySpecOut)
def update_property(session_id: str, object_id: str, index: int, req: PropertyUpdateRequest,
                    sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    prop = form.get_property(object_id, index)
    for field in ("property_lang_id", "type"):
        if field in req.model_fields_set:
            prop = form.update_property(object_id, index, field, getattr(req, field))
    return PropertySpecOut.from_spec(prop)

@router.delete("/{session_id}/objects/{object_id}/properties/{index}", response_model=ObjectOut)
def delete_property(session_id: str, object_id: str, index: int, sessions: WizardSessions = Depends(get_sessions)):
    form = sessions.get(session_id)
    form.delete_property(object_id, index)
    return ObjectOut.from_form(form, form.get_object(object_id))

@router.post("/{session_id}/generate", response_model=ConfigurationCreated)
def generate(
    session_id: str,
    sessions: WizardSessions = Depends(get_sessions),
    store: ReferenceStore = Depends(get_store),
    artifacts: ArtifactStore = Depends(get_artifacts),
):
    form = sessions.get(session_id)
    generated = build_configuration(**form.to_assembly_inputs())
    file_path = artifacts.write(generated.file_name, generated.document)
    log.info("Configuration %s created", generated.file_name,
             extra={"session_id": session_id, "store_id": store.store_id})
    return ConfigurationCreated(
        message="JSON configuration created successfully",
        file_name=generated.file_name,
        file_path=str(file_path),
        configuration=generated.document,
    )
