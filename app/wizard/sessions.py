from __future__ import annotations
import logging
import threading
import uuid
from typing import Dict, Tuple
from app.core.errors import NotFound
from app.store.reference import ReferenceStore
from app.wizard.form import FormModel

log = logging.getLogger(__name__)


class WizardSessions:
    """In-memory wizard sessions. Nothing survives a process restart."""

    def __init__(self) -> None:
        self._forms: Dict[str, FormModel] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._forms)

    def create(self) -> Tuple[str, FormModel]:
        session_id = uuid.uuid4().hex
        form = FormModel(session_id=session_id)
        with self._lock:
            self._forms[session_id] = form
        log.info("Wizard session started", extra={"session_id": session_id})
        return session_id, form

    def get(self, session_id: str) -> FormModel:
        form = self._forms.get(session_id)
        if form is None:
            raise NotFound("session", session_id, message="Wizard session not found")
        return form

    def drop(self, session_id: str) -> None:
        with self._lock:
            if self._forms.pop(session_id, None) is None:
                raise NotFound("session", session_id, message="Wizard session not found")
        log.info("Wizard session closed", extra={"session_id": session_id})

    def on_store_replaced(self, store: ReferenceStore) -> Dict[str, Dict[str, str]]:
        """Re-resolve every session against a newly uploaded store."""
        with self._lock:
            forms = list(self._forms.items())
        warnings = {}
        for session_id, form in forms:
            form_warnings = form.on_store_replaced(store)
            if form_warnings:
                warnings[session_id] = form_warnings
        return warnings

    def on_store_cleared(self) -> None:
        with self._lock:
            forms = list(self._forms.values())
        for form in forms:
            form.on_store_cleared()
