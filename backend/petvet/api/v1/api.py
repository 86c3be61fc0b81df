"""Module: api."""

from fastapi import APIRouter

# Core operational routes (health/auth).
from petvet.api.v1.routes.health import router as health_router
from petvet.api.v1.routes.auth import router as auth_router

# Role-scoped domain routes used by the frontend pages.
from petvet.api.v1.routes.pets import router as pets_router
from petvet.api.v1.routes.vet import router as vet_router
from petvet.api.v1.routes.owner import router as owner_router
from petvet.api.v1.routes.admin import router as admin_router
from petvet.api.v1.routes.directory import router as directory_router

api_router = APIRouter()

# Register operational endpoints first for service-level concerns.
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# Register business/domain endpoints consumed by the application UI.
api_router.include_router(pets_router, prefix="/pets", tags=["pets"])
api_router.include_router(vet_router, prefix="/vet", tags=["vet"])
api_router.include_router(owner_router, prefix="/owner", tags=["owner"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
api_router.include_router(directory_router, prefix="/directory", tags=["directory"])
