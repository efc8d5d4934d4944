from datetime import datetime, timezone
from pathlib import Path
from fastapi import APIRouter, Depends
from app.api.deps import get_settings, get_slot
from app.core.config import Settings
from app.schemas.reference import HealthResponse
from app.store.slot import StoreSlot
from app.wizard import options

router = APIRouter()

@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings), slot: StoreSlot = Depends(get_slot)):
    store = slot.peek()
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uploads_dir=Path(settings.uploads_dir).exists(),
        output_dir=Path(settings.output_dir).exists(),
        db_schema=store.summary() if store else None,
    )

@router.get("/options")
def get_options():
    return options.as_dict()
