import pytest
from fastapi.testclient import TestClient

from app.api.deps import (
    get_assistant,
    get_conversation_store,
    get_language_model,
    get_retrieval,
)
from app.core.conversation_state import ConversationStore
from app.main import app
from fakes import FakeAssistant, FakeLanguageModel, FakeRetrieval


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def retrieval() -> FakeRetrieval:
    return FakeRetrieval()


@pytest.fixture
def failing_model() -> FakeLanguageModel:
    return FakeLanguageModel(error=ConnectionError("model unreachable"))


@pytest.fixture
def assistant() -> FakeAssistant:
    return FakeAssistant(["Hello", " founder"])


@pytest.fixture
def client(store, retrieval, failing_model, assistant):
    app.dependency_overrides[get_conversation_store] = lambda: store
    app.dependency_overrides[get_retrieval] = lambda: retrieval
    app.dependency_overrides[get_language_model] = lambda: failing_model
    app.dependency_overrides[get_assistant] = lambda: assistant
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
