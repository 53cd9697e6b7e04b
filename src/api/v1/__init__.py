"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.analytics import router as analytics_router
from api.v1.routes.auth import router as auth_router
from api.v1.routes.handles import onboarding_router
from api.v1.routes.handles import router as handles_router
from api.v1.routes.imports import router as imports_router
from api.v1.routes.profiles import me_router
from api.v1.routes.profiles import router as profiles_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(handles_router)
router.include_router(onboarding_router)
router.include_router(profiles_router)
router.include_router(me_router)
router.include_router(analytics_router)
router.include_router(imports_router)
