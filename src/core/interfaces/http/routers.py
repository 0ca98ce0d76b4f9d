"""API router configuration."""

from fastapi import APIRouter

from src.modules.briefs.interfaces.router import router as briefs_router
from src.modules.sources.interfaces.router import router as sources_router
from src.modules.users.interfaces.router import router as users_router

api_router = APIRouter()

# Briefs
api_router.include_router(briefs_router)

# Community sources, owned sources and subscriptions
api_router.include_router(sources_router)

# Profile
api_router.include_router(users_router)
