import logging
from functools import lru_cache

from apologist.core.config import settings
from apologist.services.embeddings import LangChainEmbeddingProvider
from apologist.services.llm import OpenRouterCompletionProvider
from apologist.services.rag import ApologeticsRAG
from apologist.services.vector_store import ChromaSearchProvider, get_vector_store

logger = logging.getLogger(__name__)


def build_rag_service() -> ApologeticsRAG:
    """
    Wire the orchestrator to the real providers.

    If the vector store cannot be opened the service still starts with
    retrieval disabled, answering from fallback context only.
    """
    embedder = None
    searcher = None

    if settings.RETRIEVAL_ENABLED:
        try:
            store = get_vector_store()
            embedder = LangChainEmbeddingProvider(store.embeddings)
            searcher = ChromaSearchProvider(store)
            logger.info("Vector store '%s' initialized", settings.COLLECTION_NAME)
        except Exception as e:
            logger.error("Vector store initialization failed, retrieval disabled: %s", e)

    return ApologeticsRAG(
        embedder=embedder,
        searcher=searcher,
        completer=OpenRouterCompletionProvider(),
    )


@lru_cache(maxsize=1)
def get_rag_service() -> ApologeticsRAG:
    """Process-wide orchestrator instance for FastAPI ``Depends``."""
    return build_rag_service()
