"""
Pytest configuration and fixtures for the Agent Demo API.

This module provides:
- An isolated data directory and environment per test
- Catalog and chat repositories backed by temporary SQLite files
- Seeded random sources for reproducible variant sets
- A FastAPI test client running the full application lifespan
"""

import random
from pathlib import Path
from typing import Generator

import pytest
from agent_demo.core.config import Settings, reset_settings
from agent_demo.services.catalog.catalog_repository import CatalogRepository
from agent_demo.services.catalog_service import CatalogService
from agent_demo.services.chat.chat_repository import ChatRepository
from agent_demo.services.chat_service import ChatService
from agent_demo.services.matching.answer_matcher import AnswerMatcher
from fastapi.testclient import TestClient

TEST_ADMIN_KEY = "test-admin-key-with-enough-length"


@pytest.fixture
def test_data_dir(tmp_path: Path) -> str:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return str(data_dir)


@pytest.fixture
def test_settings(test_data_dir: str) -> Settings:
    """Settings pointing at the temporary data directory with a pinned seed."""
    return Settings(
        DATA_DIR=test_data_dir,
        ADMIN_API_KEY=TEST_ADMIN_KEY,
        COOKIE_SECURE=False,
        ENVIRONMENT="testing",
        VARIANT_RANDOM_SEED=7,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def catalog_repo(test_settings: Settings) -> Generator[CatalogRepository, None, None]:
    repo = CatalogRepository(test_settings.CATALOG_DB_PATH)
    yield repo
    repo.close()


@pytest.fixture
def chat_repo(test_settings: Settings) -> Generator[ChatRepository, None, None]:
    repo = ChatRepository(test_settings.CHAT_DB_PATH)
    yield repo
    repo.close()


@pytest.fixture
def catalog_service(catalog_repo: CatalogRepository, test_settings: Settings) -> CatalogService:
    return CatalogService(catalog_repo, test_settings)


@pytest.fixture
def chat_service(
    chat_repo: ChatRepository, catalog_repo: CatalogRepository
) -> ChatService:
    matcher = AnswerMatcher(catalog_repo, threshold=0.3, rng=random.Random(3))
    return ChatService(chat_repo, catalog_repo, matcher)


@pytest.fixture
def published_agent(catalog_service: CatalogService):
    """A Final agent in a "Retail" domain, without questions."""
    from agent_demo.models.catalog import AgentCreateRequest, DomainCreateRequest

    domain = catalog_service.create_domain(
        DomainCreateRequest(name="Retail", description="Shop assistants")
    )
    return catalog_service.create_agent(
        AgentCreateRequest(
            domain_id=domain.id,
            name="Store Helper",
            environment="Copilot",
            version="1.0",
            developed_by="Support Team",
            status="Final",
        )
    )


@pytest.fixture
def test_client(
    test_data_dir: str, monkeypatch: pytest.MonkeyPatch
) -> Generator[TestClient, None, None]:
    """Full application client with an isolated environment.

    Settings are read from the environment, so the cache is reset before the
    lifespan runs and again after the client shuts down.
    """
    monkeypatch.setenv("DATA_DIR", test_data_dir)
    monkeypatch.setenv("ADMIN_API_KEY", TEST_ADMIN_KEY)
    monkeypatch.setenv("COOKIE_SECURE", "false")
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("VARIANT_RANDOM_SEED", "7")
    reset_settings()

    from agent_demo.main import app

    with TestClient(app) as client:
        yield client
    reset_settings()


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {TEST_ADMIN_KEY}"}
