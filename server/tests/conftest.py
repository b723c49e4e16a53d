"""
Pytest configuration and shared fixtures for the apologist RAG tests.
"""
import asyncio
import os

import pytest

# Set test environment before the settings singleton is created
os.environ.setdefault("OPENROUTER_API_KEY", "test_key")
os.environ.setdefault("RETRIEVAL_ENABLED", "true")

from apologist.core.config import Settings
from apologist.core.exceptions import RetrievalError
from apologist.models import (
    PassageMetadata,
    RetrievedPassage,
    ScriptureReferenceSet,
)
from apologist.services.rag import ApologeticsRAG


def make_passage(
    text="Passage text",
    topic="Trinity",
    difficulty="Intermediate",
    source="apologetics-content.md",
    score=0.9,
    passage_id=None,
    bible=None,
    quran=None,
) -> RetrievedPassage:
    return RetrievedPassage(
        id=passage_id or f"{source}:{topic}:{score}",
        score=score,
        text=text,
        metadata=PassageMetadata(
            source=source,
            topic=topic,
            difficulty=difficulty,
            scripture_references=ScriptureReferenceSet(
                bible=bible or [], quran=quran or []
            ),
        ),
    )


class FakeEmbedder:
    """Embedding provider double that can fail or stall."""

    def __init__(self, vector=None, error=None, delay=0.0):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.error = error
        self.delay = delay
        self.calls = []

    async def embed(self, text):
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.vector


class FakeSearcher:
    """Vector search double returning canned passages."""

    def __init__(self, passages=None, error=None, delay=0.0):
        self.passages = passages or []
        self.error = error
        self.delay = delay
        self.calls = []

    async def search(self, vector, top_k, search_filter=None):
        self.calls.append((vector, top_k, search_filter))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.passages)

    def document_count(self):
        return len(self.passages)


class FakeCompleter:
    """Completion provider double that records the messages it was sent."""

    def __init__(self, answer="A grounded answer.", error=None, delay=0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls = []

    async def complete(self, messages, temperature=0.7, max_tokens=2000):
        self.calls.append(
            {"messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.answer


@pytest.fixture
def config():
    """Settings with short timeouts so timeout paths run quickly."""
    cfg = Settings()
    cfg.TOP_K = 5
    cfg.TEMPERATURE = 0.7
    cfg.MAX_TOKENS = 2000
    cfg.HISTORY_TURNS = 6
    cfg.EMBEDDING_TIMEOUT = 0.2
    cfg.SEARCH_TIMEOUT = 0.2
    cfg.COMPLETION_TIMEOUT = 0.2
    cfg.COMPLETION_RETRIES = 1
    cfg.RETRIEVAL_ENABLED = True
    cfg.FALLBACK_ENABLED = True
    return cfg


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def searcher():
    return FakeSearcher(
        passages=[
            make_passage("The Father, Son, and Holy Spirit are one God (Matthew 28:19).", score=0.95),
            make_passage("Baptize in the name of the Father, Son and Spirit.", score=0.9),
            make_passage("Grace be with you (2 Corinthians 13:14).", score=0.85),
        ]
    )


@pytest.fixture
def completer():
    return FakeCompleter()


@pytest.fixture
def make_rag(config):
    """Factory for an orchestrator wired to the given doubles."""

    def _make(embedder=None, searcher=None, completer=None, **overrides):
        for key, value in overrides.items():
            setattr(config, key, value)
        return ApologeticsRAG(
            embedder=embedder if embedder is not None else FakeEmbedder(),
            searcher=searcher if searcher is not None else FakeSearcher(),
            completer=completer if completer is not None else FakeCompleter(),
            config=config,
            system_prompt="You are a test apologist.",
        )

    return _make


@pytest.fixture
def retrieval_error():
    return RetrievalError("vector store offline")
