"""Tests for the LangChain embedding provider."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from apologist.core.exceptions import RetrievalError
from apologist.services.embeddings import LangChainEmbeddingProvider


@pytest.fixture
def embeddings():
    model = MagicMock()
    model.aembed_query = AsyncMock(return_value=[0.5, 0.25, 0.125])
    return model


@pytest.mark.asyncio
async def test_embed_returns_floats(embeddings):
    vector = await LangChainEmbeddingProvider(embeddings).embed("Who is Jesus?")

    assert vector == [0.5, 0.25, 0.125]
    embeddings.aembed_query.assert_awaited_once_with("Who is Jesus?")


@pytest.mark.asyncio
async def test_embed_rejects_empty_text(embeddings):
    with pytest.raises(RetrievalError):
        await LangChainEmbeddingProvider(embeddings).embed("  ")

    embeddings.aembed_query.assert_not_awaited()


@pytest.mark.asyncio
async def test_model_errors_are_wrapped(embeddings):
    embeddings.aembed_query.side_effect = OSError("model not downloaded")

    with pytest.raises(RetrievalError, match="model not downloaded"):
        await LangChainEmbeddingProvider(embeddings).embed("Who is Jesus?")


@pytest.mark.asyncio
async def test_empty_vector_is_an_error(embeddings):
    embeddings.aembed_query.return_value = []

    with pytest.raises(RetrievalError, match="empty vector"):
        await LangChainEmbeddingProvider(embeddings).embed("Who is Jesus?")
