from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import Field, field_validator
from app.schemas.common import CamelModel
from app.wizard.models import ModelInfo, ObjectSpec, PropertySpec, PropertyType, RunProfile


class ModelInfoIn(CamelModel):
    name: str = ""
    display_name: str = ""

    def to_model_info(self) -> ModelInfo:
        return ModelInfo(name=self.name, display_name=self.display_name)


class PropertySpecIn(CamelModel):
    property_lang_id: Union[str, int] = ""
    type: PropertyType = PropertyType.TEXT

    def to_spec(self) -> PropertySpec:
        return PropertySpec(property_lang_id=str(self.property_lang_id), type=self.type)


class ObjectSpecIn(CamelModel):
    child_object_name: str = ""
    child_class_name: str = ""
    child_class_lang_id: Optional[int] = None
    child_class_id: Optional[int] = None
    parent_class_lang_id: int = 1
    parent_object_name: str = "System"
    properties: List[PropertySpecIn] = []

    @field_validator("child_class_lang_id", "child_class_id", mode="before")
    @classmethod
    def _blank_is_unresolved(cls, v):
        # unresolved objects come through with "" for their derived ids
        return None if v == "" else v

    def to_spec(self) -> ObjectSpec:
        return ObjectSpec(
            child_object_name=self.child_object_name,
            child_class_name=self.child_class_name,
            child_class_lang_id=self.child_class_lang_id,
            child_class_id=self.child_class_id,
            parent_class_lang_id=self.parent_class_lang_id,
            parent_object_name=self.parent_object_name,
            properties=[p.to_spec() for p in self.properties],
        )


class RunConfigurationIn(CamelModel):
    # null is treated like an empty value; the assembler fills in defaults
    engine_version: Optional[str] = None
    operating_system: Optional[str] = None
    cores: Optional[int] = None
    memory: Optional[str] = None

    def to_run_profile(self) -> RunProfile:
        return RunProfile(
            engine_version=self.engine_version or "",
            operating_system=self.operating_system or "",
            cores=self.cores or 0,
            memory=self.memory or "",
        )


class CreateConfigurationRequest(CamelModel):
    # Everything is optional here so the assembler can report all missing fields at once.
    study_id: Optional[str] = Field(None, examples=["study-42"])
    changeset_id: Optional[str] = Field(None, examples=["cs-7"])
    model_info: Optional[ModelInfoIn] = None
    dashboard_id: Optional[str] = None
    objects: Optional[List[ObjectSpecIn]] = None
    run_configuration: Optional[RunConfigurationIn] = None

    def to_assembly_inputs(self) -> Dict[str, Any]:
        return {
            "study_id": self.study_id or "",
            "changeset_id": self.changeset_id or "",
            "model_info": self.model_info.to_model_info() if self.model_info else None,
            "dashboard_id": self.dashboard_id or "",
            "objects": [o.to_spec() for o in self.objects] if self.objects is not None else None,
            "run_profile": self.run_configuration.to_run_profile() if self.run_configuration else None,
        }


class ConfigurationCreated(CamelModel):
    message: str
    file_name: str
    file_path: str
    configuration: Dict[str, Any]


class ConfigurationInfo(CamelModel):
    file_name: str
    file_path: str
    created_at: datetime


class ConfigurationsResponse(CamelModel):
    configurations: List[ConfigurationInfo]
