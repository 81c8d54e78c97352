"""
Catalog service for the Agent Demo Platform.

Wraps the catalog repository with the rules administrators rely on:
- variants are regenerated whenever question content is saved
- question and answer always share a status
- domains cannot be deleted while they still own agents
- every admin mutation leaves an audit entry
"""

import logging
import random
import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from agent_demo.core.config import Settings
from agent_demo.core.exceptions import (
    AgentNotFoundError,
    DomainAlreadyExistsError,
    DomainNotEmptyError,
    DomainNotFoundError,
    QuestionNotFoundError,
    VariantNotFoundError,
)
from agent_demo.models.catalog import (
    Agent,
    AgentCreateRequest,
    AgentUpdateRequest,
    AuditEntry,
    Domain,
    DomainCreateRequest,
    DomainUpdateRequest,
    QuestionDetail,
)
from agent_demo.services.catalog.catalog_repository import CatalogRepository
from agent_demo.services.matching.paraphrase_rules import VariantKind
from agent_demo.services.matching.variant_generator import Variant, generate_variants

logger = logging.getLogger(__name__)

ADMIN_ACTOR = "admin"


class CatalogService:
    """Admin-facing operations over domains, agents and questions."""

    def __init__(self, repository: CatalogRepository, settings: Settings):
        self.repository = repository
        self.settings = settings

    def _rng(self) -> random.Random:
        # Fresh per generation run; seeded only when pinned in settings
        return random.Random(self.settings.VARIANT_RANDOM_SEED)

    def _generate(
        self, question_text: str, answer_text: str, answer_html: Optional[str]
    ) -> Tuple[List[Variant], List[Variant]]:
        rng = self._rng()
        question_variants = generate_variants(
            question_text,
            "question",
            rng=rng,
            max_variants=self.settings.MAX_VARIANTS,
        )
        answer_variants = generate_variants(
            answer_text,
            "answer",
            source_html=answer_html,
            rng=rng,
            max_variants=self.settings.MAX_VARIANTS,
        )
        return question_variants, answer_variants

    def _audit(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.repository.record_audit(
            ADMIN_ACTOR, action, entity_type, entity_id, old_values, new_values
        )

    # ============================================
    # Domains
    # ============================================

    def list_domains(self) -> List[Domain]:
        return self.repository.list_domains()

    def create_domain(self, request: DomainCreateRequest) -> Domain:
        try:
            domain = self.repository.create_domain(request.name, request.description)
        except sqlite3.IntegrityError as e:
            raise DomainAlreadyExistsError(request.name) from e
        self._audit("CREATE", "domain", domain.id, new_values=request.model_dump())
        return domain

    def update_domain(self, domain_id: str, request: DomainUpdateRequest) -> Domain:
        existing = self.repository.get_domain(domain_id)
        if existing is None:
            raise DomainNotFoundError(domain_id)

        changes = request.model_dump(exclude_unset=True)
        try:
            updated = self.repository.update_domain(domain_id, changes)
        except sqlite3.IntegrityError as e:
            raise DomainAlreadyExistsError(changes.get("name", existing.name)) from e
        if updated is None:
            raise DomainNotFoundError(domain_id)

        self._audit(
            "UPDATE",
            "domain",
            domain_id,
            old_values=existing.model_dump(include=set(changes)),
            new_values=changes,
        )
        return updated

    def delete_domain(self, domain_id: str) -> None:
        existing = self.repository.get_domain(domain_id)
        if existing is None:
            raise DomainNotFoundError(domain_id)
        if self.repository.count_agents(domain_id) > 0:
            raise DomainNotEmptyError(domain_id)

        self.repository.delete_domain(domain_id)
        self._audit("DELETE", "domain", domain_id, old_values={"name": existing.name})

    # ============================================
    # Agents
    # ============================================

    def list_agents(
        self, domain_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Agent]:
        return self.repository.list_agents(domain_id=domain_id, status=status)

    def get_agent(self, agent_id: str) -> Agent:
        agent = self.repository.get_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return agent

    def create_agent(self, request: AgentCreateRequest) -> Agent:
        if self.repository.get_domain(request.domain_id) is None:
            raise DomainNotFoundError(request.domain_id)
        agent = self.repository.create_agent(request.model_dump())
        self._audit("CREATE", "agent", agent.id, new_values=request.model_dump())
        return agent

    def update_agent(self, agent_id: str, request: AgentUpdateRequest) -> Agent:
        existing = self.get_agent(agent_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        if "domain_id" in changes and self.repository.get_domain(changes["domain_id"]) is None:
            raise DomainNotFoundError(changes["domain_id"])

        updated = self.repository.update_agent(agent_id, changes)
        if updated is None:
            raise AgentNotFoundError(agent_id)

        self._audit(
            "UPDATE",
            "agent",
            agent_id,
            old_values=existing.model_dump(include=set(changes), mode="json"),
            new_values=changes,
        )
        return updated

    def update_agent_status(self, agent_id: str, status: str) -> Agent:
        return self.update_agent(agent_id, AgentUpdateRequest(status=status))

    def delete_agent(self, agent_id: str) -> None:
        existing = self.get_agent(agent_id)
        self.repository.delete_agent(agent_id)
        self._audit("DELETE", "agent", agent_id, old_values={"name": existing.name})

    # ============================================
    # Questions
    # ============================================

    def list_questions(self, agent_id: str) -> List[QuestionDetail]:
        self.get_agent(agent_id)
        return self.repository.list_questions(agent_id)

    def get_question(self, question_id: str) -> QuestionDetail:
        question = self.repository.get_question(question_id)
        if question is None:
            raise QuestionNotFoundError(question_id)
        return question

    def create_question(
        self,
        agent_id: str,
        question_text: str,
        answer_text: str,
        answer_html: Optional[str] = None,
    ) -> QuestionDetail:
        """Create a Draft question with its answer and freshly generated variants.

        Variant generation is best-effort: when it fails the question is still
        saved, just without variants.

        Raises:
            AgentNotFoundError: If the agent does not exist
        """
        self.get_agent(agent_id)
        question_variants, answer_variants = self._generate(
            question_text, answer_text, answer_html
        )
        detail = self.repository.create_question_with_variants(
            agent_id,
            question_text,
            answer_text,
            answer_html,
            question_variants,
            answer_variants,
        )
        self._audit(
            "CREATE",
            "question",
            detail.id,
            new_values={
                "question_text": question_text,
                "variant_count": len(question_variants) + len(answer_variants),
            },
        )
        return detail

    def update_question(
        self,
        question_id: str,
        question_text: str,
        answer_text: str,
        answer_html: Optional[str] = None,
        status: Optional[str] = None,
    ) -> QuestionDetail:
        """Replace question and answer content and regenerate every variant.

        Without an explicit ``status`` both rows drop back to Draft, so edited
        content has to be re-published before demo users see it.

        Raises:
            QuestionNotFoundError: If the question does not exist
        """
        existing = self.get_question(question_id)
        new_status = status or "Draft"
        question_variants, answer_variants = self._generate(
            question_text, answer_text, answer_html
        )
        updated = self.repository.replace_question_content(
            question_id,
            question_text,
            answer_text,
            answer_html,
            new_status,
            question_variants,
            answer_variants,
        )
        if updated is None:
            raise QuestionNotFoundError(question_id)

        self._audit(
            "UPDATE",
            "question",
            question_id,
            old_values={"question_text": existing.text, "status": existing.status},
            new_values={"question_text": question_text, "status": new_status},
        )
        return updated

    def update_question_status(self, question_id: str, status: str) -> QuestionDetail:
        existing = self.get_question(question_id)
        if not self.repository.set_question_status(question_id, status):
            raise QuestionNotFoundError(question_id)
        self._audit(
            "STATUS_CHANGE",
            "question",
            question_id,
            old_values={"status": existing.status},
            new_values={"status": status},
        )
        return self.get_question(question_id)

    def regenerate_variants(self, question_id: str) -> QuestionDetail:
        """Discard both variant sets and generate them again from current content."""
        existing = self.get_question(question_id)
        question_variants, answer_variants = self._generate(
            existing.text, existing.answer.text, existing.answer.html
        )
        updated = self.repository.replace_variants(
            question_id, question_variants, answer_variants
        )
        if updated is None:
            raise QuestionNotFoundError(question_id)
        self._audit("REGENERATE_VARIANTS", "question", question_id)
        return updated

    def delete_question(self, question_id: str) -> None:
        existing = self.get_question(question_id)
        self.repository.delete_question(question_id)
        self._audit(
            "DELETE", "question", question_id, old_values={"question_text": existing.text}
        )

    def set_variant_approval(
        self, kind: VariantKind, variant_id: str, is_approved: bool
    ) -> None:
        """Approve or hide a generated variant; hidden variants stay stored."""
        if kind == "question":
            found = self.repository.set_question_variant_approval(variant_id, is_approved)
            label = "Question variant"
        else:
            found = self.repository.set_answer_variant_approval(variant_id, is_approved)
            label = "Answer variant"
        if not found:
            raise VariantNotFoundError(label, variant_id)
        self._audit(
            "APPROVAL_CHANGE",
            f"{kind}_variant",
            variant_id,
            new_values={"is_approved": is_approved},
        )

    def preview_variants(
        self, text: str, kind: VariantKind, html: Optional[str] = None
    ) -> List[Variant]:
        """Run the generator without persisting anything."""
        return generate_variants(
            text,
            kind,
            source_html=html,
            rng=self._rng(),
            max_variants=self.settings.MAX_VARIANTS,
        )

    # ============================================
    # Audit
    # ============================================

    def list_audit_entries(
        self, limit: int = 50, entity_type: Optional[str] = None
    ) -> List[AuditEntry]:
        return self.repository.list_audit_entries(limit=limit, entity_type=entity_type)
