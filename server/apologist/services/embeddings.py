import logging
from typing import List

from langchain_core.embeddings import Embeddings
from langchain_huggingface import HuggingFaceEmbeddings

from apologist.core.config import settings
from apologist.core.exceptions import RetrievalError

logger = logging.getLogger(__name__)


def get_embeddings() -> HuggingFaceEmbeddings:
    """Get HuggingFace embeddings model."""
    return HuggingFaceEmbeddings(
        model_name=settings.EMBEDDING_MODEL,
        model_kwargs={"device": "cpu"},
        encode_kwargs={"normalize_embeddings": True},
    )


class LangChainEmbeddingProvider:
    """Embedding provider backed by any LangChain ``Embeddings`` model."""

    def __init__(self, embeddings: Embeddings):
        self.embeddings = embeddings

    async def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise RetrievalError("Cannot embed empty text")
        try:
            # aembed_query runs sentence-transformers in an executor
            vector = await self.embeddings.aembed_query(text)
        except Exception as e:
            raise RetrievalError(f"Failed to generate embedding: {e}") from e

        if not vector:
            raise RetrievalError("Embedding model returned an empty vector")
        return [float(x) for x in vector]
