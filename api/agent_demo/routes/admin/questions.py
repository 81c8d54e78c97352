"""
Admin question and variant management routes.

Saving a question (create or edit) regenerates both variant sets from scratch.
Variants can afterwards be hidden from matching one by one via the approval
endpoints without being deleted.
"""

import logging
from typing import Optional

from agent_demo.core.security import verify_admin_access
from agent_demo.models.catalog import (
    AuditEntry,
    QuestionCreateRequest,
    QuestionDetail,
    QuestionListResponse,
    QuestionUpdateRequest,
    StatusUpdateRequest,
    VariantApprovalRequest,
    VariantPreview,
    VariantPreviewRequest,
    VariantPreviewResponse,
)
from agent_demo.routes.dependencies import get_catalog_service
from agent_demo.services.catalog_service import CatalogService
from fastapi import APIRouter, Depends, Query, Response, status

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin Questions"],
    dependencies=[Depends(verify_admin_access)],
    responses={
        401: {"description": "Unauthorized - Invalid or missing API key"},
        403: {"description": "Forbidden - Insufficient permissions"},
    },
)


@router.get("/agents/{agent_id}/questions", response_model=QuestionListResponse)
async def list_questions(
    agent_id: str, service: CatalogService = Depends(get_catalog_service)
):
    """All questions of an agent with answers and variants, oldest first."""
    questions = service.list_questions(agent_id)
    return QuestionListResponse(questions=questions, total_count=len(questions))


@router.post(
    "/agents/{agent_id}/questions",
    response_model=QuestionDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_question(
    agent_id: str,
    request: QuestionCreateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    logger.info(f"Admin request to add question to agent {agent_id}")
    return service.create_question(
        agent_id, request.question_text, request.answer_text, request.answer_html
    )


@router.get("/questions/{question_id}", response_model=QuestionDetail)
async def get_question(
    question_id: str, service: CatalogService = Depends(get_catalog_service)
):
    return service.get_question(question_id)


@router.put("/questions/{question_id}", response_model=QuestionDetail)
async def update_question(
    question_id: str,
    request: QuestionUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Replace question and answer content.

    Status falls back to Draft unless the request sets one.
    """
    logger.info(f"Admin request to update question {question_id}")
    return service.update_question(
        question_id,
        request.question_text,
        request.answer_text,
        request.answer_html,
        status=request.status,
    )


@router.put("/questions/{question_id}/status", response_model=QuestionDetail)
async def update_question_status(
    question_id: str,
    request: StatusUpdateRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Set question and answer status together."""
    logger.info(f"Admin request to set question {question_id} status to {request.status}")
    return service.update_question_status(question_id, request.status)


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: str, service: CatalogService = Depends(get_catalog_service)
):
    logger.info(f"Admin request to delete question {question_id}")
    service.delete_question(question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/questions/{question_id}/variants/regenerate", response_model=QuestionDetail
)
async def regenerate_variants(
    question_id: str, service: CatalogService = Depends(get_catalog_service)
):
    logger.info(f"Admin request to regenerate variants for question {question_id}")
    return service.regenerate_variants(question_id)


@router.put("/question-variants/{variant_id}/approval")
async def set_question_variant_approval(
    variant_id: str,
    request: VariantApprovalRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    service.set_variant_approval("question", variant_id, request.is_approved)
    return {"id": variant_id, "is_approved": request.is_approved}


@router.put("/answer-variants/{variant_id}/approval")
async def set_answer_variant_approval(
    variant_id: str,
    request: VariantApprovalRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    service.set_variant_approval("answer", variant_id, request.is_approved)
    return {"id": variant_id, "is_approved": request.is_approved}


@router.post("/preview-variants", response_model=VariantPreviewResponse)
async def preview_variants(
    request: VariantPreviewRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Run the generator on arbitrary text without saving anything."""
    variants = service.preview_variants(request.text, request.kind, request.html)
    return VariantPreviewResponse(
        variants=[
            VariantPreview(
                text=v.text, html=v.html, technique=v.technique, confidence=v.confidence
            )
            for v in variants
        ],
        total_count=len(variants),
    )


@router.get("/audit", response_model=list[AuditEntry])
async def list_audit_entries(
    limit: int = Query(50, ge=1, le=500),
    entity_type: Optional[str] = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """Most recent admin actions first."""
    return service.list_audit_entries(limit=limit, entity_type=entity_type)
