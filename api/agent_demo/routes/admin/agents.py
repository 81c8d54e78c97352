"""
Admin agent management routes.
"""

import logging
from typing import Optional

from agent_demo.core.security import verify_admin_access
from agent_demo.models.catalog import (
    Agent,
    AgentCreateRequest,
    AgentListResponse,
    AgentUpdateRequest,
    ContentStatus,
    StatusUpdateRequest,
)
from agent_demo.routes.dependencies import get_catalog_service
from agent_demo.services.catalog_service import CatalogService
from fastapi import APIRouter, Depends, Response, status

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin Agents"],
    dependencies=[Depends(verify_admin_access)],
    responses={
        401: {"description": "Unauthorized - Invalid or missing API key"},
        403: {"description": "Forbidden - Insufficient permissions"},
    },
)


@router.get("/agents", response_model=AgentListResponse)
async def list_agents(
    domain_id: Optional[str] = None,
    status: Optional[ContentStatus] = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """List agents, optionally filtered by domain and status."""
    agents = service.list_agents(domain_id=domain_id, status=status)
    return AgentListResponse(agents=agents, total_count=len(agents))


@router.post("/agents", response_model=Agent, status_code=status.HTTP_201_CREATED)
async def create_agent(
    request: AgentCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    logger.info(f"Admin request to create agent: {request.name}")
    return service.create_agent(request)


@router.get("/agents/{agent_id}", response_model=Agent)
async def get_agent(agent_id: str, service: CatalogService = Depends(get_catalog_service)):
    return service.get_agent(agent_id)


@router.put("/agents/{agent_id}", response_model=Agent)
async def update_agent(
    agent_id: str,
    request: AgentUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    logger.info(f"Admin request to update agent {agent_id}")
    return service.update_agent(agent_id, request)


@router.put("/agents/{agent_id}/status", response_model=Agent)
async def update_agent_status(
    agent_id: str,
    request: StatusUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Publish (Final) or withdraw (Draft) an agent."""
    logger.info(f"Admin request to set agent {agent_id} status to {request.status}")
    return service.update_agent_status(agent_id, request.status)


@router.delete("/agents/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agent(agent_id: str, service: CatalogService = Depends(get_catalog_service)):
    """Delete an agent together with its questions, answers and variants."""
    logger.info(f"Admin request to delete agent {agent_id}")
    service.delete_agent(agent_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
