from typing import Dict, List, Optional, Union
from app.schemas.common import CamelModel
from app.schemas.configurations import ModelInfoIn
from app.schemas.lookup import PropertyOut
from app.wizard.form import FormModel
from app.wizard.models import ObjectSpec, PropertySpec, PropertyType


class PropertySpecOut(CamelModel):
    property_lang_id: str
    type: PropertyType

    @classmethod
    def from_spec(cls, prop: PropertySpec) -> "PropertySpecOut":
        return cls(property_lang_id=prop.property_lang_id, type=prop.type)


class ObjectOut(CamelModel):
    id: str
    child_object_name: str
    child_class_name: str
    child_class_lang_id: Optional[int] = None
    child_class_id: Optional[int] = None
    parent_class_lang_id: int
    parent_object_name: str
    properties: List[PropertySpecOut]
    candidate_properties: List[PropertyOut]

    @classmethod
    def from_form(cls, form: FormModel, obj: ObjectSpec) -> "ObjectOut":
        return cls(
            id=obj.id,
            child_object_name=obj.child_object_name,
            child_class_name=obj.child_class_name,
            child_class_lang_id=obj.child_class_lang_id,
            child_class_id=obj.child_class_id,
            parent_class_lang_id=obj.parent_class_lang_id,
            parent_object_name=obj.parent_object_name,
            properties=[PropertySpecOut.from_spec(p) for p in obj.properties],
            candidate_properties=[
                PropertyOut(property_lang_id=p.lang_id, name=p.name, description=p.description)
                for p in form.candidate_menu(obj.id)
            ],
        )


class StudyOut(CamelModel):
    study_id: str
    changeset_id: str
    model_info: ModelInfoIn
    dashboard_id: str


class RunProfileOut(CamelModel):
    engine_version: str
    operating_system: str
    cores: int
    memory: str


class SessionOut(CamelModel):
    session_id: str
    study: StudyOut
    objects: List[ObjectOut]
    run_profile: RunProfileOut
    warnings: Dict[str, str] = {}

    @classmethod
    def from_form(cls, form: FormModel, warnings: Optional[Dict[str, str]] = None) -> "SessionOut":
        study = form.study
        profile = form.run_profile
        return cls(
            session_id=form.session_id,
            study=StudyOut(
                study_id=study.study_id,
                changeset_id=study.changeset_id,
                model_info=ModelInfoIn(name=study.model_info.name, display_name=study.model_info.display_name),
                dashboard_id=study.dashboard_id,
            ),
            objects=[ObjectOut.from_form(form, obj) for obj in form.objects],
            run_profile=RunProfileOut(
                engine_version=profile.engine_version,
                operating_system=profile.operating_system,
                cores=profile.cores,
                memory=profile.memory,
            ),
            warnings=warnings or {},
        )


class StudyUpdateRequest(CamelModel):
    study_id: Optional[str] = None
    changeset_id: Optional[str] = None
    model_info: Optional[ModelInfoIn] = None
    dashboard_id: Optional[str] = None


class RunProfileUpdateRequest(CamelModel):
    engine_version: Optional[str] = None
    operating_system: Optional[str] = None
    cores: Optional[int] = None
    memory: Optional[str] = None


class ObjectUpdateRequest(CamelModel):
    child_object_name: Optional[str] = None
    child_class_name: Optional[str] = None
    parent_object_name: Optional[str] = None


class ObjectUpdateResponse(CamelModel):
    object: ObjectOut
    resolved: bool
    warnings: List[str] = []


class PropertyUpdateRequest(CamelModel):
    property_lang_id: Optional[Union[str, int]] = None
    type: Optional[PropertyType] = None
