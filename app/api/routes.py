from fastapi import APIRouter
from app.api.routes_health import router as health_router
from app.api.routes_reference import router as reference_router
from app.api.routes_lookup import router as lookup_router
from app.api.routes_configurations import router as configurations_router
from app.api.routes_wizard import router as wizard_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(reference_router, tags=["reference-db"])
router.include_router(lookup_router, tags=["lookup"])
router.include_router(configurations_router, tags=["configurations"])
router.include_router(wizard_router, tags=["wizard"])
