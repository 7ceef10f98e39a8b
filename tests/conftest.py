"""Root conftest: shared fixtures for all tests.

Provides:
- The documented default rule configuration
- A stubbed-LLM classifier
- API client with session and classifier dependency overrides

No test touches a real database or LLM.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from feedback_intel.services.classifier import FeedbackClassifier, RuleConfiguration
from feedback_intel.services.config_store import DEFAULT_CLASSIFICATION_RULES, clear_rules_cache

from tests.helpers.mock_factories import StubChatCompletion


@pytest.fixture(autouse=True)
def _reset_rules_cache():
    """The in-process rules cache is module state; isolate every test."""
    clear_rules_cache()
    yield
    clear_rules_cache()


@pytest.fixture
def default_rules() -> RuleConfiguration:
    return RuleConfiguration.from_dict(DEFAULT_CLASSIFICATION_RULES)


@pytest.fixture
def stub_llm() -> StubChatCompletion:
    return StubChatCompletion()


@pytest.fixture
def classifier(stub_llm: StubChatCompletion) -> FeedbackClassifier:
    return FeedbackClassifier(
        llm=stub_llm,
        classification_model="test-large",
        theme_model="test-small",
    )


@pytest.fixture
def mock_db() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    return db


@pytest.fixture
async def api_client(mock_db: AsyncMock, classifier: FeedbackClassifier):
    """HTTP client with the DB session and classifier replaced by test doubles."""
    from feedback_intel.api.deps import get_classifier
    from feedback_intel.core.database import get_db, get_direct_db
    from feedback_intel.main import app

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_direct_db] = override_db
    app.dependency_overrides[get_classifier] = lambda: classifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
