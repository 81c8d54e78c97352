"""
Admin domain management routes.
"""

import logging
from typing import List

from agent_demo.core.security import verify_admin_access
from agent_demo.models.catalog import Domain, DomainCreateRequest, DomainUpdateRequest
from agent_demo.routes.dependencies import get_catalog_service
from agent_demo.services.catalog_service import CatalogService
from fastapi import APIRouter, Depends, Response, status

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin Domains"],
    dependencies=[Depends(verify_admin_access)],
    responses={
        401: {"description": "Unauthorized - Invalid or missing API key"},
        403: {"description": "Forbidden - Insufficient permissions"},
    },
)


@router.get("/domains", response_model=List[Domain])
async def list_domains(service: CatalogService = Depends(get_catalog_service)):
    """List every domain, active or not, ordered by name."""
    return service.list_domains()


@router.post("/domains", response_model=Domain, status_code=status.HTTP_201_CREATED)
async def create_domain(
    request: DomainCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    logger.info(f"Admin request to create domain: {request.name}")
    return service.create_domain(request)


@router.put("/domains/{domain_id}", response_model=Domain)
async def update_domain(
    domain_id: str,
    request: DomainUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    logger.info(f"Admin request to update domain {domain_id}")
    return service.update_domain(domain_id, request)


@router.delete("/domains/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_domain(
    domain_id: str, service: CatalogService = Depends(get_catalog_service)
):
    """Delete an empty domain. Refused with 409 while agents still belong to it."""
    logger.info(f"Admin request to delete domain {domain_id}")
    service.delete_domain(domain_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
