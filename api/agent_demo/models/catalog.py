from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentStatus = Literal["Draft", "Final"]
AgentEnvironment = Literal["Agentforce", "Copilot", "Custom", "Other"]


def _strip_text(v: Any) -> Any:
    # Runs before length checks so whitespace-only input fails min_length
    if not isinstance(v, str):
        return v
    return v.replace("\x00", "").strip()


# ============================================
# Stored records
# ============================================


class Domain(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class Agent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    domain_id: str
    domain_name: Optional[str] = None  # Joined for listings
    name: str
    environment: AgentEnvironment
    version: str
    developed_by: str
    description: Optional[str] = None
    status: ContentStatus = "Draft"
    access_count: int = Field(default=0, ge=0)
    question_count: int = Field(default=0, ge=0)
    last_updated: datetime
    created_at: datetime


class QuestionVariant(BaseModel):
    id: str
    question_id: str
    variant_text: str
    technique: str
    confidence: float = Field(ge=0.0, le=1.0)
    is_approved: bool = True


class AnswerVariant(BaseModel):
    id: str
    answer_id: str
    variant_text: str
    variant_html: Optional[str] = None
    technique: str
    confidence: float = Field(ge=0.0, le=1.0)
    is_approved: bool = True


class Answer(BaseModel):
    id: str
    question_id: str
    text: str
    html: Optional[str] = None
    status: ContentStatus = "Draft"
    variants: List[AnswerVariant] = Field(default_factory=list)


class QuestionDetail(BaseModel):
    """A question together with its single answer and both variant sets."""

    id: str
    agent_id: str
    text: str
    status: ContentStatus = "Draft"
    created_at: datetime
    updated_at: datetime
    answer: Answer
    variants: List[QuestionVariant] = Field(default_factory=list)


class DomainWithAgents(Domain):
    agents: List[Agent] = Field(default_factory=list)


class AuditEntry(BaseModel):
    id: int
    actor: str
    action: str
    entity_type: str
    entity_id: str
    old_values: Optional[dict] = None
    new_values: Optional[dict] = None
    created_at: datetime


# ============================================
# Admin requests
# ============================================


class DomainCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)

    _strip = field_validator("name", "description", mode="before")(_strip_text)


class DomainUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    is_active: Optional[bool] = None

    _strip = field_validator("name", "description", mode="before")(_strip_text)


class AgentCreateRequest(BaseModel):
    domain_id: str
    name: str = Field(min_length=1, max_length=255)
    environment: AgentEnvironment
    version: str = Field(min_length=1, max_length=50)
    developed_by: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    status: ContentStatus = "Draft"

    _strip = field_validator(
        "name", "version", "developed_by", "description", mode="before"
    )(_strip_text)


class AgentUpdateRequest(BaseModel):
    domain_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    environment: Optional[AgentEnvironment] = None
    version: Optional[str] = Field(None, min_length=1, max_length=50)
    developed_by: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    status: Optional[ContentStatus] = None

    _strip = field_validator(
        "name", "version", "developed_by", "description", mode="before"
    )(_strip_text)


class StatusUpdateRequest(BaseModel):
    status: ContentStatus


class QuestionCreateRequest(BaseModel):
    question_text: str = Field(min_length=5, max_length=2000)
    answer_text: str = Field(min_length=5, max_length=10000)
    answer_html: Optional[str] = Field(None, max_length=15000)

    _strip = field_validator("question_text", "answer_text", mode="before")(_strip_text)


class QuestionUpdateRequest(QuestionCreateRequest):
    status: Optional[ContentStatus] = None  # Omitted: content edits reset to Draft


class VariantApprovalRequest(BaseModel):
    is_approved: bool


class VariantPreviewRequest(BaseModel):
    text: str = Field(min_length=1, max_length=10000)
    html: Optional[str] = Field(None, max_length=15000)
    kind: Literal["question", "answer"] = "question"


class VariantPreview(BaseModel):
    text: str
    html: str
    technique: str
    confidence: float


class VariantPreviewResponse(BaseModel):
    variants: List[VariantPreview]
    total_count: int = Field(ge=0)


class AgentListResponse(BaseModel):
    agents: List[Agent]
    total_count: int = Field(ge=0)


class QuestionListResponse(BaseModel):
    questions: List[QuestionDetail]
    total_count: int = Field(ge=0)
