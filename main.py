"""newsbrief Backend - 新闻简报服务入口。"""

from collections.abc import Callable
from typing import Any, cast

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from src.core.application import security as app_security
from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.data_service import DataServiceGateway
from src.core.infrastructure.data_service.dependencies import create_http_client
from src.core.infrastructure.health import HealthStatus
from src.core.infrastructure.logging import setup_logging
from src.core.infrastructure.security import unified_auth
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.briefs.application import dependencies as briefs_app_deps
from src.modules.briefs.infrastructure import dependencies as briefs_infra_deps
from src.modules.sources.application import dependencies as sources_app_deps
from src.modules.sources.infrastructure import dependencies as sources_infra_deps
from src.modules.users.application import dependencies as users_app_deps
from src.modules.users.infrastructure import dependencies as users_infra_deps

APP_VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


openapi_security_schemes = {
    "BearerAuth": {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Access token issued by the data service auth endpoints",
    },
}


def custom_openapi():
    """Customize OpenAPI schema to include the bearer scheme."""
    if app.openapi_schema:
        return app.openapi_schema
    from fastapi.openapi.utils import get_openapi

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema["components"] = schema.get("components", {})
    schema["components"]["securitySchemes"] = openapi_security_schemes
    app.openapi_schema = schema
    return schema


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting newsbrief backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    http = create_http_client()
    app.state.data_service = DataServiceGateway.from_settings(http)
    logger.info(f"Data service: {settings.DATA_SERVICE_URL}")

    try:
        yield
    finally:
        await http.aclose()
        logger.info("Shutting down newsbrief backend...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "新闻简报服务 - 每日简报、社区新闻源与订阅管理\n\n"
        "## 认证方式\n\n"
        "- **Bearer**: 数据服务签发的 access token，由后端向数据服务校验"
    ),
    version=APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)
app.openapi = cast(Callable[[], dict[str, Any]], custom_openapi)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[app_security.get_current_auth] = (
    unified_auth.get_current_auth
)
app.dependency_overrides[app_security.get_optional_auth] = (
    unified_auth.get_optional_auth
)

app.dependency_overrides[users_app_deps.get_user_profile_repository] = (
    users_infra_deps.get_user_profile_repository
)

app.dependency_overrides[sources_app_deps.get_news_source_repository] = (
    sources_infra_deps.get_news_source_repository
)
app.dependency_overrides[sources_app_deps.get_public_news_source_repository] = (
    sources_infra_deps.get_public_news_source_repository
)
app.dependency_overrides[sources_app_deps.get_subscription_repository] = (
    sources_infra_deps.get_subscription_repository
)
app.dependency_overrides[sources_app_deps.get_public_subscription_repository] = (
    sources_infra_deps.get_public_subscription_repository
)

app.dependency_overrides[briefs_app_deps.get_brief_repository] = (
    briefs_infra_deps.get_brief_repository
)
app.dependency_overrides[briefs_app_deps.get_official_brief_repository] = (
    briefs_infra_deps.get_official_brief_repository
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    只检查数据服务的可达性：
    - healthy: 数据服务正常响应
    - degraded: 数据服务可达但返回 5xx
    - unhealthy: 数据服务不可达
    """
    gateway: DataServiceGateway = app.state.data_service
    data_service_health = await gateway.health_check()

    if data_service_health.status == HealthStatus.OK:
        overall_status = "healthy"
    elif data_service_health.status == HealthStatus.DEGRADED:
        overall_status = "degraded"
    else:
        overall_status = "unhealthy"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "components": {"data_service": data_service_health.to_dict()},
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to newsbrief API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
