from fastapi import APIRouter

from .routes import health_router, users_router

API_V1_STR = "/api/v1"


def build_api_router(prefix: str = API_V1_STR) -> APIRouter:
    """Create the versioned API router"""
    api_router = APIRouter(prefix=prefix)
    api_router.include_router(health_router)
    api_router.include_router(users_router)
    return api_router
