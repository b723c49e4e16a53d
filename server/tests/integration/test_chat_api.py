"""API tests for the chat endpoints, with providers replaced by doubles."""

import pytest
from fastapi.testclient import TestClient

from apologist.api.dependencies import get_rag_service
from apologist.main import app

from conftest import FakeCompleter, FakeSearcher, make_passage


@pytest.fixture
def client_for(make_rag):
    """Build a TestClient whose orchestrator uses the given doubles."""

    def _client(**kwargs):
        rag = make_rag(**kwargs)
        app.dependency_overrides[get_rag_service] = lambda: rag
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()


def test_chat_returns_camel_case_response(client_for, searcher):
    client = client_for(searcher=searcher)

    response = client.post("/api/chat", json={"message": "What is the Trinity?"})

    assert response.status_code == 200
    body = response.json()
    assert body["answer"] == "A grounded answer."
    assert body["topic"] == "Trinity"
    assert body["difficulty"] == "Intermediate"
    assert body["retrievalStatus"] == "retrieved"
    assert len(body["sources"]) == 3
    assert "chunkIndex" in body["sources"][0]["metadata"]
    assert body["scriptureReferences"]["bible"] == ["Matthew 28:19", "2 Corinthians 13:14"]


def test_chat_accepts_history_and_options(client_for):
    searcher = FakeSearcher(passages=[make_passage(topic=f"T{i}") for i in range(4)])
    completer = FakeCompleter()
    client = client_for(searcher=searcher, completer=completer)

    response = client.post(
        "/api/chat",
        json={
            "message": "Why the cross?",
            "history": [
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello! How can I help?"},
            ],
            "options": {"topK": 2, "maxTokens": 500, "filter": {"difficulty": "Beginner"}},
        },
    )

    assert response.status_code == 200
    assert len(response.json()["sources"]) == 2
    _, top_k, search_filter = searcher.calls[0]
    assert top_k == 2
    assert search_filter.difficulty == "Beginner"
    sent = completer.calls[0]
    assert sent["max_tokens"] == 500
    assert [m["role"] for m in sent["messages"]] == ["system", "user", "assistant", "user"]


def test_degraded_chat_is_still_a_success(client_for):
    client = client_for(searcher=FakeSearcher(passages=[]))

    response = client.post("/api/chat", json={"message": "asdkjasdkj random"})

    assert response.status_code == 200
    body = response.json()
    assert body["sources"] == []
    assert body["topic"] == "General Apologetics"
    assert body["retrievalStatus"] == "no_matches"


def test_empty_message_is_rejected(client_for):
    completer = FakeCompleter()
    client = client_for(completer=completer)

    response = client.post("/api/chat", json={"message": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required."
    assert completer.calls == []


def test_missing_message_is_unprocessable(client_for):
    client = client_for()

    assert client.post("/api/chat", json={}).status_code == 422


def test_completion_failure_maps_to_502(client_for):
    client = client_for(completer=FakeCompleter(error=RuntimeError("provider down")))

    response = client.post("/api/chat", json={"message": "What is the Trinity?"})

    assert response.status_code == 502
    assert "provider down" in response.json()["detail"]
    assert "answer" not in response.json()


def test_status_reports_providers(client_for, searcher):
    client = client_for(searcher=searcher)

    body = client.get("/api/status").json()

    assert body["retrieval_enabled"] is True
    assert body["fallback_enabled"] is True
    assert body["document_count"] == 3


def test_health_and_root(client_for):
    client = client_for()

    assert client.get("/api/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200
