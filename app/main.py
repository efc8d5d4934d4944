import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import Settings, settings
from app.core.errors import AppBuilderError
from app.core.logging import configure_logging
from app.api.routes import router as api_router
from app.services.artifacts import ArtifactStore
from app.services.uploads import ReferenceDbManager
from app.store.slot import StoreSlot
from app.wizard.sessions import WizardSessions

configure_logging(settings.log_level)
log = logging.getLogger(__name__)


def ensure_directories(app_settings: Settings) -> None:
    """Create the upload and output directories if they are missing."""
    for directory in (app_settings.uploads_dir, app_settings.output_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    log.info("Starting API server...")
    try:
        ensure_directories(app.state.settings)
        log.info("API server startup complete")
    except Exception as e:
        log.error("API startup failed: %s", e, exc_info=True)
        raise
    yield
    # Shutdown
    log.info("Shutting down API server...")
    app.state.store_slot.clear()


async def app_error_handler(request: Request, exc: AppBuilderError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    fields = [".".join(str(p) for p in e.get("loc", ())[1:]) or str(e.get("loc")) for e in errors]
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid or missing parameters: {', '.join(fields)}", "details": {"errors": errors}},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Unexpected server error", "details": None})


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(
        title=app_settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    slot = StoreSlot()
    app.state.settings = app_settings
    app.state.store_slot = slot
    app.state.sessions = WizardSessions()
    app.state.artifacts = ArtifactStore(Path(app_settings.output_dir))
    app.state.db_manager = ReferenceDbManager(
        uploads_dir=Path(app_settings.uploads_dir),
        slot=slot,
        db_name=app_settings.reference_db_name,
        chunk_size=app_settings.upload_chunk_size,
    )

    app.add_exception_handler(AppBuilderError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(api_router, prefix="/v1")
    return app


app = create_app()
