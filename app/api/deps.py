"""FastAPI dependencies. Shared objects live on app.state and are handed to routes explicitly."""
from fastapi import Depends, Request
from app.core.config import Settings
from app.services.artifacts import ArtifactStore
from app.services.uploads import ReferenceDbManager
from app.store.reference import ReferenceStore
from app.store.slot import StoreSlot
from app.wizard.sessions import WizardSessions


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_slot(request: Request) -> StoreSlot:
    return request.app.state.store_slot


def get_store(slot: StoreSlot = Depends(get_slot)) -> ReferenceStore:
    return slot.current()


def get_db_manager(request: Request) -> ReferenceDbManager:
    return request.app.state.db_manager


def get_artifacts(request: Request) -> ArtifactStore:
    return request.app.state.artifacts


def get_sessions(request: Request) -> WizardSessions:
    return request.app.state.sessions
