"""Builds the final app configuration document from the wizard inputs."""
from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from app.core.errors import ValidationError
from app.wizard.models import ModelInfo, ObjectSpec, RunProfile

# Applied only while building the document, never written back to the form.
DEFAULT_ENGINE_VERSION = "10.0 R07"
DEFAULT_OPERATING_SYSTEM = "Linux"
DEFAULT_CORES = 2
DEFAULT_MEMORY = "16GB"

BUTTONS_CONFIG = (
    {"name": "save", "displayName": "Save"},
    {"name": "run", "displayName": "Run App"},
)


@dataclass(frozen=True)
class GeneratedConfiguration:
    file_name: str
    document: Dict[str, Any]


def artifact_file_name(now_ms: Optional[int] = None) -> str:
    """app-<unix millis>.json. Two builds in the same millisecond share a name."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"app-{now_ms}.json"


def _check_required(
    study_id: str,
    changeset_id: str,
    model_info: Optional[ModelInfo],
    dashboard_id: str,
    objects: Optional[Sequence[ObjectSpec]],
    run_profile: Optional[RunProfile],
) -> None:
    missing = []
    if not study_id:
        missing.append("studyId")
    if not changeset_id:
        missing.append("changesetId")
    if model_info is None or not (model_info.name or model_info.display_name):
        missing.append("modelInfo")
    if not dashboard_id:
        missing.append("dashboardId")
    if objects is None:
        missing.append("objects")
    if run_profile is None:
        missing.append("runConfiguration")
    if missing:
        raise ValidationError.missing_fields(missing)


def _input_property(obj: ObjectSpec) -> Dict[str, Any]:
    # childClassId and childClassName stay behind: only the lang id is emitted
    return {
        "childObjectName": obj.child_object_name,
        "childClassLangId": obj.child_class_lang_id,
        "parentClassLangId": obj.parent_class_lang_id,
        "parentObjectName": obj.parent_object_name,
        "properties": [
            {"propertyLangId": prop.property_lang_id, "type": getattr(prop.type, "value", prop.type)}
            for prop in obj.properties
        ],
    }


def _run_config(run_profile: RunProfile) -> Dict[str, Any]:
    operating_system = run_profile.operating_system or DEFAULT_OPERATING_SYSTEM
    return {
        "engine": {
            "displayName": run_profile.engine_version or DEFAULT_ENGINE_VERSION,
            "operatingSystem": operating_system,
        },
        "workerPool": {
            "os": operating_system,
            "cores": run_profile.cores or DEFAULT_CORES,
            "memory": run_profile.memory or DEFAULT_MEMORY,
        },
    }


def assemble(
    study_id: str,
    changeset_id: str,
    model_info: ModelInfo,
    dashboard_id: str,
    objects: Sequence[ObjectSpec],
    run_profile: RunProfile,
) -> Dict[str, Any]:
    """
    Build the configuration document. Pure: inputs are read, never modified.

    Raises:
        ValidationError: naming every missing required input
    """
    _check_required(study_id, changeset_id, model_info, dashboard_id, objects, run_profile)

    input_properties: List[Dict[str, Any]] = [_input_property(obj) for obj in objects]
    return {
        "studyId": study_id,
        "changesetId": changeset_id,
        "modelInfo": {"name": model_info.name, "displayName": model_info.display_name},
        "buttonsConfig": [dict(button) for button in BUTTONS_CONFIG],
        "inputProperties": input_properties,
        "dashboards": [{"configId": dashboard_id}],
        "horizon": {"enabled": True},
        "runConfig": _run_config(run_profile),
    }


def build_configuration(
    study_id: str,
    changeset_id: str,
    model_info: ModelInfo,
    dashboard_id: str,
    objects: Sequence[ObjectSpec],
    run_profile: RunProfile,
    now_ms: Optional[int] = None,
) -> GeneratedConfiguration:
    document = assemble(study_id, changeset_id, model_info, dashboard_id, objects, run_profile)
    return GeneratedConfiguration(file_name=artifact_file_name(now_ms), document=document)
