"""Dataclasses for the wizard form state."""
from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from app.services.resolver import SYSTEM_CLASS_LANG_ID, SYSTEM_OBJECT_NAME


class PropertyType(str, Enum):
    TEXT = "0"
    FILE_PICKER = "1"


@dataclass
class PropertySpec:
    """One property selection on an object."""
    property_lang_id: str = ""
    type: PropertyType = PropertyType.TEXT


@dataclass
class ObjectSpec:
    """
    One object entry of the form.

    The lang/class id fields are derived by resolution, never typed in.
    resolved_store_id names the reference store they came from.
    """
    child_object_name: str = ""
    child_class_name: str = ""
    child_class_lang_id: Optional[int] = None
    child_class_id: Optional[int] = None
    parent_class_lang_id: int = SYSTEM_CLASS_LANG_ID
    parent_object_name: str = SYSTEM_OBJECT_NAME
    properties: List[PropertySpec] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    resolved_store_id: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.child_class_lang_id is not None

    def clear_derived(self) -> None:
        self.child_class_lang_id = None
        self.child_class_id = None
        self.parent_class_lang_id = SYSTEM_CLASS_LANG_ID
        self.resolved_store_id = None


@dataclass
class ModelInfo:
    name: str = ""
    display_name: str = ""


@dataclass
class StudyInfo:
    study_id: str = ""
    changeset_id: str = ""
    model_info: ModelInfo = field(default_factory=ModelInfo)
    dashboard_id: str = ""


@dataclass
class RunProfile:
    engine_version: str = ""
    operating_system: str = ""
    cores: int = 0
    memory: str = ""
