"""
FastAPI application for the Agent Demo Platform.
"""

import ipaddress
import logging
import random
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict

from agent_demo.core.config import get_settings
from agent_demo.core.error_handlers import register_exception_handlers
from agent_demo.middleware import CacheControlMiddleware
from agent_demo.routes import demo, health
from agent_demo.routes.admin import include_admin_routers
from agent_demo.services.catalog.catalog_repository import CatalogRepository
from agent_demo.services.catalog_service import CatalogService
from agent_demo.services.chat.chat_repository import ChatRepository
from agent_demo.services.chat_service import ChatService
from agent_demo.services.matching.answer_matcher import AnswerMatcher
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_fastapi_instrumentator import metrics as instrumentator_metrics

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("agent_demo.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")

    settings = get_settings()
    app.state.settings = settings

    # Create data directories (avoid import-time I/O)
    settings.ensure_data_dirs()

    catalog_repository = CatalogRepository(settings.CATALOG_DB_PATH)
    chat_repository = ChatRepository(settings.CHAT_DB_PATH)
    app.state.catalog_repository = catalog_repository
    app.state.chat_repository = chat_repository

    matcher = AnswerMatcher(
        catalog_repository,
        threshold=settings.MATCH_THRESHOLD,
        rng=random.Random(settings.VARIANT_RANDOM_SEED),
    )
    app.state.catalog_service = CatalogService(catalog_repository, settings)
    app.state.chat_service = ChatService(
        chat_repository,
        catalog_repository,
        matcher,
        history_limit=settings.CHAT_HISTORY_LIMIT,
        session_list_limit=settings.CHAT_SESSION_LIST_LIMIT,
    )
    logger.info("Catalog and chat services initialized")

    yield

    logger.info("Application shutdown...")
    app.state.catalog_service = None
    app.state.chat_service = None
    chat_repository.close()
    catalog_repository.close()


# Create FastAPI application
app = FastAPI(
    title=get_settings().PROJECT_NAME,
    docs_url="/api/docs",
    openapi_url=f"{get_settings().API_V1_STR}/openapi.json",
    lifespan=lifespan,
)


def custom_openapi() -> Dict[str, Any]:
    """Generate the OpenAPI schema with the admin security schemes attached."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema["components"] = openapi_schema.get("components", {})
    openapi_schema["components"]["securitySchemes"] = {
        "AdminApiKeyAuth": {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "Enter the token with the `Bearer ` prefix, e.g. `Bearer abcdef12345`",
        },
        "AdminApiKeyHeader": {
            "type": "apiKey",
            "in": "header",
            "name": "X-API-KEY",
        },
    }

    # Login and logout are open; every other admin route needs a key
    for path, operations in openapi_schema["paths"].items():
        if not path.startswith("/admin/") or path.startswith("/admin/auth/"):
            continue
        for method, operation in operations.items():
            if method == "parameters" or not isinstance(operation, dict):
                continue
            operation["security"] = [
                {"AdminApiKeyAuth": []},
                {"AdminApiKeyHeader": []},
            ]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi  # type: ignore[method-assign]

# Starlette forbids wildcard origins together with credentials
_origins = get_settings().CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False if _origins == ["*"] else True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(CacheControlMiddleware)
logger.info("Cache control middleware registered")

# HTTP metrics go to the default REGISTRY; /metrics is served below
instrumentator = Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_respect_env_var=False,
    should_instrument_requests_inprogress=True,
    excluded_handlers=["/health", "/health/ready", "/health/live", "/metrics"],
    inprogress_name="http_requests_inprogress",
    inprogress_labels=True,
)
instrumentator.add(instrumentator_metrics.default())
instrumentator.instrument(app)
logger.info("Prometheus metrics instrumentation initialized")


def _is_private_client(request: Request) -> bool:
    client_host = (request.client.host if request.client else "") or ""
    if client_host in {"localhost", "testclient"}:
        return True
    host = client_host
    if host.startswith("[") and "]" in host:
        # Bracketed IPv6, optionally followed by a port
        host = host[1 : host.index("]")]
    elif host.count(":") == 1:
        # IPv4 or hostname with a port; bare IPv6 has several colons
        host = host.rsplit(":", 1)[0]
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local


@app.get("/metrics", include_in_schema=False)
async def metrics(request: Request):
    """
    Prometheus metrics endpoint.

    In production only private and loopback clients may scrape it; everyone
    else gets a 404.
    """
    environment = str(get_settings().ENVIRONMENT).strip().lower()
    if environment in {"production", "prod"} and not _is_private_client(request):
        raise HTTPException(status_code=404)

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
app.include_router(health.router)
app.include_router(demo.router)
include_admin_routers(app)

register_exception_handlers(app)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    # Bind to 0.0.0.0 only in DEBUG mode (container/development)
    host = "0.0.0.0" if settings.DEBUG else "127.0.0.1"

    uvicorn.run(
        "agent_demo.main:app",
        host=host,
        port=8000,
        reload=settings.DEBUG,
    )
