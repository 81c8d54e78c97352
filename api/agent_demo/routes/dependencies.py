"""
FastAPI dependency providers for services built during application startup.
"""

from agent_demo.services.catalog_service import CatalogService
from agent_demo.services.chat_service import ChatService
from fastapi import HTTPException, Request, status


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is still initializing",
        )
    return service


def get_catalog_service(request: Request) -> CatalogService:
    return _from_state(request, "catalog_service")


def get_chat_service(request: Request) -> ChatService:
    return _from_state(request, "chat_service")
