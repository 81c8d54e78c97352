"""Tests for the SQLite catalog repository."""

import sqlite3
from pathlib import Path

import pytest
from agent_demo.services.catalog.catalog_repository import CatalogRepository
from agent_demo.services.matching.variant_generator import Variant


def _variant(text: str, technique: str = "synonym_replacement") -> Variant:
    return Variant(text=text, html=text, technique=technique, confidence=0.9)


@pytest.fixture
def agent(catalog_repo: CatalogRepository):
    domain = catalog_repo.create_domain("Banking", "Retail banking")
    return catalog_repo.create_agent(
        {
            "domain_id": domain.id,
            "name": "Card Assistant",
            "environment": "Agentforce",
            "version": "2.1",
            "developed_by": "Payments",
            "status": "Final",
        }
    )


@pytest.fixture
def question(catalog_repo: CatalogRepository, agent):
    return catalog_repo.create_question_with_variants(
        agent.id,
        "How do I block my card?",
        "Open the app and tap Block card.",
        "<p>Open the app and tap <b>Block card</b>.</p>",
        [_variant("How can I freeze my card?"), _variant("Block my card")],
        [_variant("Tap Block card in the app.")],
    )


class TestSchema:
    def test_database_file_created_with_private_mode(self, catalog_repo):
        assert Path(catalog_repo.db_path).exists()
        assert oct(Path(catalog_repo.db_path).stat().st_mode)[-3:] == "600"

    def test_reopening_keeps_data(self, catalog_repo, agent):
        catalog_repo.close()
        with CatalogRepository(catalog_repo.db_path) as reopened:
            assert reopened.get_agent(agent.id).name == "Card Assistant"


class TestDomains:
    def test_duplicate_name_raises_integrity_error(self, catalog_repo):
        catalog_repo.create_domain("Travel")
        with pytest.raises(sqlite3.IntegrityError):
            catalog_repo.create_domain("Travel")

    def test_update_ignores_unknown_columns(self, catalog_repo):
        domain = catalog_repo.create_domain("Travel")
        updated = catalog_repo.update_domain(
            domain.id, {"description": "Trips", "id": "hijack", "is_active": False}
        )
        assert updated.id == domain.id
        assert updated.description == "Trips"
        assert updated.is_active is False

    def test_update_missing_domain_returns_none(self, catalog_repo):
        assert catalog_repo.update_domain("missing", {"name": "x"}) is None

    def test_names_are_stored_verbatim(self, catalog_repo):
        catalog_repo.create_domain("Travel'; DROP TABLE domains; --")
        assert [d.name for d in catalog_repo.list_domains()] == [
            "Travel'; DROP TABLE domains; --"
        ]


class TestAgents:
    def test_agent_listing_joins_domain_and_counts_questions(self, catalog_repo, question):
        (agent,) = catalog_repo.list_agents()
        assert agent.domain_name == "Banking"
        assert agent.question_count == 1

    def test_unknown_domain_is_rejected(self, catalog_repo):
        with pytest.raises(sqlite3.IntegrityError):
            catalog_repo.create_agent(
                {
                    "domain_id": "nope",
                    "name": "Orphan",
                    "environment": "Other",
                    "version": "1",
                    "developed_by": "Nobody",
                }
            )

    def test_increment_access_count(self, catalog_repo, agent):
        catalog_repo.increment_access_count(agent.id)
        catalog_repo.increment_access_count(agent.id)
        assert catalog_repo.get_agent(agent.id).access_count == 2

    def test_delete_agent_cascades_to_questions(self, catalog_repo, agent, question):
        assert catalog_repo.delete_agent(agent.id)
        assert catalog_repo.get_question(question.id) is None
        count = catalog_repo._reader_conn.execute(
            "SELECT COUNT(*) FROM question_variants"
        ).fetchone()[0]
        assert count == 0

    def test_published_domains_only_list_final_agents(self, catalog_repo, agent):
        empty = catalog_repo.create_domain("Empty")
        catalog_repo.create_agent(
            {
                "domain_id": empty.id,
                "name": "Draft Bot",
                "environment": "Custom",
                "version": "0.1",
                "developed_by": "Lab",
            }
        )
        published = catalog_repo.list_published_domains()
        assert [d.name for d in published] == ["Banking"]
        assert [a.name for a in published[0].agents] == ["Card Assistant"]

    def test_inactive_domain_is_not_published(self, catalog_repo, agent):
        catalog_repo.update_domain(agent.domain_id, {"is_active": False})
        assert catalog_repo.list_published_domains() == []


class TestQuestions:
    def test_created_question_is_draft_with_variants(self, question):
        assert question.status == "Draft"
        assert question.answer.status == "Draft"
        assert question.answer.html == "<p>Open the app and tap <b>Block card</b>.</p>"
        assert [v.variant_text for v in question.variants] == [
            "How can I freeze my card?",
            "Block my card",
        ]
        assert [v.variant_text for v in question.answer.variants] == [
            "Tap Block card in the app."
        ]
        assert all(v.is_approved for v in question.variants)

    def test_replace_content_swaps_every_variant_row(self, catalog_repo, question):
        old_ids = {v.id for v in question.variants}

        updated = catalog_repo.replace_question_content(
            question.id,
            "How do I unblock my card?",
            "Tap Unblock card.",
            None,
            "Draft",
            [_variant("How can I unfreeze my card?")],
            [],
        )

        assert updated.text == "How do I unblock my card?"
        assert [v.variant_text for v in updated.variants] == ["How can I unfreeze my card?"]
        assert not old_ids & {v.id for v in updated.variants}
        assert updated.answer.variants == []

    def test_replace_content_of_missing_question(self, catalog_repo):
        assert (
            catalog_repo.replace_question_content("missing", "q", "a", None, "Draft", [], [])
            is None
        )

    def test_status_moves_question_and_answer_together(self, catalog_repo, question):
        assert catalog_repo.set_question_status(question.id, "Final")
        reloaded = catalog_repo.get_question(question.id)
        assert (reloaded.status, reloaded.answer.status) == ("Final", "Final")

    def test_status_of_missing_question(self, catalog_repo):
        assert catalog_repo.set_question_status("missing", "Final") is False


class TestMatchCandidates:
    def test_only_final_content_of_final_agent(self, catalog_repo, agent, question):
        assert catalog_repo.list_match_candidates(agent.id) == []

        catalog_repo.set_question_status(question.id, "Final")
        (candidate,) = catalog_repo.list_match_candidates(agent.id)
        assert candidate.id == question.id

        catalog_repo.update_agent(agent.id, {"status": "Draft"})
        assert catalog_repo.list_match_candidates(agent.id) == []

    def test_unapproved_variants_are_filtered_not_deleted(self, catalog_repo, agent, question):
        catalog_repo.set_question_status(question.id, "Final")
        hidden = question.variants[0]
        assert catalog_repo.set_question_variant_approval(hidden.id, False)

        (candidate,) = catalog_repo.list_match_candidates(agent.id)
        assert hidden.id not in {v.id for v in candidate.variants}

        stored = catalog_repo.get_question(question.id)
        assert {v.id: v.is_approved for v in stored.variants}[hidden.id] is False

    def test_answer_variant_approval(self, catalog_repo, agent, question):
        catalog_repo.set_question_status(question.id, "Final")
        (answer_variant,) = question.answer.variants
        assert catalog_repo.set_answer_variant_approval(answer_variant.id, False)
        (candidate,) = catalog_repo.list_match_candidates(agent.id)
        assert candidate.answer.variants == []

    def test_unknown_variant_approval(self, catalog_repo):
        assert catalog_repo.set_question_variant_approval("missing", False) is False
        assert catalog_repo.set_answer_variant_approval("missing", False) is False


class TestAudit:
    def test_entries_newest_first_with_json_values(self, catalog_repo):
        catalog_repo.record_audit("admin", "CREATE", "domain", "d-1", new_values={"name": "A"})
        catalog_repo.record_audit("admin", "DELETE", "agent", "a-1", old_values={"name": "B"})

        entries = catalog_repo.list_audit_entries()
        assert [e.action for e in entries] == ["DELETE", "CREATE"]
        assert entries[1].new_values == {"name": "A"}
        assert [e.entity_id for e in catalog_repo.list_audit_entries(entity_type="domain")] == [
            "d-1"
        ]
