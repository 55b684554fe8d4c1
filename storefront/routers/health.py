from fastapi import APIRouter

from ..config.database import get_database_manager
from ..config.settings import get_settings
from ..schemas.common import HealthCheckResponse, RootResponse
from ..utils.text import utcnow

router = APIRouter()

RESOURCES = {
    "products": "/products",
    "users": "/users",
    "orders": "/orders",
    "authors": "/authors",
    "posts": "/posts",
    "accounts": "/accounts",
    "reports": "/reports",
}


@router.get("/", response_model=RootResponse, tags=["Root"])
async def root():
    """Served with or without a database"""
    settings = get_settings()
    return RootResponse(
        message=f"Welcome to {settings.app_name}",
        version=settings.app_version,
        resources=RESOURCES,
        timestamp=utcnow(),
    )


@router.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check():
    settings = get_settings()
    return HealthCheckResponse(
        status="healthy",
        service=settings.app_name,
        database_name=settings.database_name,
        database=await get_database_manager().ping(),
        version=settings.app_version,
        timestamp=utcnow(),
    )
