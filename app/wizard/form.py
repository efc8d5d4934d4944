from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from app.core.errors import AppBuilderError, NotFound, ValidationError
from app.services.resolver import resolve_class, resolve_properties
from app.store.reference import ReferenceProperty, ReferenceStore
from app.wizard import options
from app.wizard.models import (
    ModelInfo,
    ObjectSpec,
    PropertySpec,
    PropertyType,
    RunProfile,
    StudyInfo,
)

log = logging.getLogger(__name__)

OBJECT_FIELDS = ("child_object_name", "child_class_name", "parent_object_name")
NAME_FIELDS = ("child_object_name", "child_class_name")
PROPERTY_FIELDS = ("property_lang_id", "type")


@dataclass
class ObjectUpdate:
    """Outcome of an object edit. warning is set when resolution was attempted and failed."""
    object: ObjectSpec
    resolved: bool = False
    warning: Optional[str] = None


class FormModel:
    """
    Wizard state owned by one session.

    Candidate property menus are keyed by ObjectSpec.id, so deleting or
    reordering objects never hands one object's menu to another. Every
    mutation holds the form lock: an upload can re-resolve objects while a
    request for the same session edits them.
    """

    def __init__(self, session_id: str = "-"):
        self.session_id = session_id
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.study = StudyInfo()
            self.run_profile = RunProfile(
                engine_version=options.INITIAL_ENGINE_VERSION,
                operating_system=options.INITIAL_OPERATING_SYSTEM,
                cores=options.INITIAL_CORES,
                memory=options.INITIAL_MEMORY,
            )
            self.objects: List[ObjectSpec] = []
            self._menus: Dict[str, List[ReferenceProperty]] = {}
            self.add_object()

    @property
    def _log_extra(self) -> dict:
        return {"session_id": self.session_id}

    # -- objects -----------------------------------------------------------

    def get_object(self, object_id: str) -> ObjectSpec:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        raise NotFound("object", object_id)

    def add_object(self) -> ObjectSpec:
        obj = ObjectSpec(properties=[PropertySpec()])
        with self._lock:
            self.objects.append(obj)
        return obj

    def delete_object(self, object_id: str) -> None:
        with self._lock:
            obj = self.get_object(object_id)
            self.objects.remove(obj)
            self._menus.pop(obj.id, None)

    def update_object(self, object_id: str, field: str, value: str,
                      store: Optional[ReferenceStore] = None) -> ObjectUpdate:
        """
        Set one name field. Once both the object and class names are filled in
        and a store is loaded, resolution runs straight away.
        """
        return self.update_object_fields(object_id, {field: value}, store=store)

    def update_object_fields(self, object_id: str, values: Dict[str, str],
                             store: Optional[ReferenceStore] = None) -> ObjectUpdate:
        """Set several name fields at once; resolution runs at most once afterwards."""
        unknown = [f for f in values if f not in OBJECT_FIELDS]
        if unknown:
            raise ValidationError(f"Unknown object field: {', '.join(unknown)}",
                                  details={"allowed": list(OBJECT_FIELDS)})
        with self._lock:
            obj = self.get_object(object_id)
            for field, value in values.items():
                setattr(obj, field, value or "")

            update = ObjectUpdate(object=obj)
            names_changed = any(f in NAME_FIELDS for f in values)
            if names_changed and store is not None and obj.child_object_name and obj.child_class_name:
                update.resolved, update.warning = self._resolve(obj, store)
        return update

    def _resolve(self, obj: ObjectSpec, store: ReferenceStore) -> Tuple[bool, Optional[str]]:
        """
        Fill derived ids and the candidate menu. Returns (class resolved, warning)
        instead of raising. Callers hold the form lock.
        """
        try:
            resolution = resolve_class(store, obj.child_object_name, obj.child_class_name,
                                       obj.parent_object_name)
        except (AppBuilderError, SQLAlchemyError) as e:
            message = e.message if isinstance(e, AppBuilderError) else str(e)
            log.warning("Could not fetch class IDs: %s", message, extra=self._log_extra)
            return False, message

        obj.child_class_lang_id = resolution.child_class_lang_id
        obj.child_class_id = resolution.child_class_id
        obj.parent_class_lang_id = resolution.parent_class_lang_id
        obj.resolved_store_id = resolution.store_id

        try:
            menu = resolve_properties(store, obj.child_class_id, obj.parent_class_lang_id)
        except (AppBuilderError, SQLAlchemyError) as e:
            message = e.message if isinstance(e, AppBuilderError) else str(e)
            log.warning("Could not fetch properties: %s", message, extra=self._log_extra)
            self._menus[obj.id] = []
            return True, message
        self._menus[obj.id] = list(menu.properties)
        return True, None

    def candidate_menu(self, object_id: str) -> List[ReferenceProperty]:
        with self._lock:
            self.get_object(object_id)
            return list(self._menus.get(object_id, []))

    # -- properties --------------------------------------------------------

    def get_property(self, object_id: str, index: int) -> PropertySpec:
        obj = self.get_object(object_id)
        if index < 0 or index >= len(obj.properties):
            raise NotFound("property", index)
        return obj.properties[index]

    def add_property(self, object_id: str) -> PropertySpec:
        prop = PropertySpec()
        with self._lock:
            self.get_object(object_id).properties.append(prop)
        return prop

    def delete_property(self, object_id: str, index: int) -> None:
        with self._lock:
            self.get_property(object_id, index)
            del self.get_object(object_id).properties[index]

    def update_property(self, object_id: str, index: int, field: str, value: Any) -> PropertySpec:
        if field not in PROPERTY_FIELDS:
            raise ValidationError(f"Unknown property field: {field}", details={"allowed": list(PROPERTY_FIELDS)})
        with self._lock:
            prop = self.get_property(object_id, index)
            if field == "type":
                try:
                    prop.type = PropertyType(str(value))
                except ValueError:
                    raise ValidationError(
                        f"Invalid property type: {value}",
                        details={"allowed": [t.value for t in PropertyType]},
                    )
            else:
                prop.property_lang_id = "" if value is None else str(value)
        return prop

    # -- study / run profile -----------------------------------------------

    def update_study(self, study_id: Optional[str] = None, changeset_id: Optional[str] = None,
                     model_name: Optional[str] = None, model_display_name: Optional[str] = None,
                     dashboard_id: Optional[str] = None) -> StudyInfo:
        with self._lock:
            if study_id is not None:
                self.study.study_id = study_id
            if changeset_id is not None:
                self.study.changeset_id = changeset_id
            if model_name is not None:
                self.study.model_info.name = model_name
            if model_display_name is not None:
                self.study.model_info.display_name = model_display_name
            if dashboard_id is not None:
                self.study.dashboard_id = dashboard_id
        return self.study

    def update_run_profile(self, engine_version: Optional[str] = None, operating_system: Optional[str] = None,
                           cores: Optional[int] = None, memory: Optional[str] = None) -> RunProfile:
        checks = (
            ("engineVersion", engine_version, options.ENGINE_VERSIONS),
            ("operatingSystem", operating_system, options.OPERATING_SYSTEMS),
            ("cores", cores, options.CORE_COUNTS),
            ("memory", memory, options.MEMORY_SIZES),
        )
        for name, value, allowed in checks:
            if value is not None and value not in allowed:
                raise ValidationError(f"Invalid {name}: {value}", details={"allowed": allowed})

        with self._lock:
            if engine_version is not None:
                self.run_profile.engine_version = engine_version
            if operating_system is not None:
                self.run_profile.operating_system = operating_system
            if cores is not None:
                self.run_profile.cores = cores
            if memory is not None:
                self.run_profile.memory = memory
        return self.run_profile

    # -- store lifecycle ---------------------------------------------------

    def on_store_replaced(self, store: ReferenceStore) -> Dict[str, str]:
        """
        Re-resolve every object whose ids came from a different store.
        Returns warnings keyed by object id for the ones that no longer resolve.
        """
        warnings: Dict[str, str] = {}
        with self._lock:
            for obj in self.objects:
                if obj.resolved_store_id == store.store_id:
                    continue
                obj.clear_derived()
                self._menus.pop(obj.id, None)
                if obj.child_object_name and obj.child_class_name:
                    _, warning = self._resolve(obj, store)
                    if warning:
                        warnings[obj.id] = warning
        return warnings

    def on_store_cleared(self) -> None:
        with self._lock:
            for obj in self.objects:
                obj.clear_derived()
            self._menus.clear()

    def to_assembly_inputs(self) -> Dict[str, Any]:
        """Keyword arguments for services.assembler.assemble."""
        with self._lock:
            return {
                "study_id": self.study.study_id,
                "changeset_id": self.study.changeset_id,
                "model_info": ModelInfo(
                    name=self.study.model_info.name,
                    display_name=self.study.model_info.display_name,
                ),
                "dashboard_id": self.study.dashboard_id,
                "objects": list(self.objects),
                "run_profile": self.run_profile,
            }
