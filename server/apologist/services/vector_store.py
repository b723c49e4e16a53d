"""
Vector search over the apologetics collection in ChromaDB.

The LangChain Chroma wrapper returns ``(Document, distance)`` pairs with
free-form metadata. ``ChromaSearchProvider`` converts those once into
``RetrievedPassage`` models so nothing downstream touches raw metadata.
"""

import asyncio
import json
import logging
from typing import List, Optional, Tuple

import chromadb
from chromadb.config import Settings as ChromaSettings
from langchain_chroma import Chroma
from langchain_core.documents import Document

from apologist.core.config import settings
from apologist.core.exceptions import RetrievalError
from apologist.models import (
    PassageMetadata,
    RetrievedPassage,
    ScriptureReferenceSet,
    SearchFilter,
)
from apologist.services.embeddings import get_embeddings

logger = logging.getLogger(__name__)


# to_passage scores hits as 1 - distance
COLLECTION_METADATA = {"hnsw:space": "cosine"}


def open_store(client, embeddings, collection_name: Optional[str] = None) -> Chroma:
    """Open (or create) the apologetics collection on a Chroma client."""
    return Chroma(
        client=client,
        collection_name=collection_name or settings.COLLECTION_NAME,
        embedding_function=embeddings,
        collection_metadata=COLLECTION_METADATA,
    )


def get_vector_store() -> Chroma:
    """Get or create ChromaDB vector store."""
    embeddings = get_embeddings()

    client = chromadb.PersistentClient(
        path=settings.CHROMA_PERSIST_DIR,
        settings=ChromaSettings(anonymized_telemetry=False),
    )

    return open_store(client, embeddings)


def build_where(search_filter: Optional[SearchFilter]) -> Optional[dict]:
    """Translate a SearchFilter into a Chroma ``where`` clause."""
    if search_filter is None:
        return None
    conditions = search_filter.as_dict()
    if not conditions:
        return None
    if len(conditions) == 1:
        return conditions
    return {"$and": [{key: value} for key, value in conditions.items()]}


def _decode_references(raw) -> ScriptureReferenceSet:
    # Chroma metadata values must be scalars, so ingestion stores JSON text
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return ScriptureReferenceSet()
    if not isinstance(raw, dict):
        return ScriptureReferenceSet()
    return ScriptureReferenceSet(
        bible=[str(r) for r in raw.get("bible") or []],
        quran=[str(r) for r in raw.get("quran") or []],
    )


def to_passage(doc: Document, distance: float, position: int) -> RetrievedPassage:
    """Convert a Chroma search hit into a RetrievedPassage."""
    meta = dict(doc.metadata or {})
    refs = _decode_references(meta.pop("scriptureReferences", None))
    metadata = PassageMetadata.model_validate({**meta, "scripture_references": refs})

    passage_id = getattr(doc, "id", None) or meta.get("id")
    if not passage_id:
        passage_id = f"{metadata.source}:{metadata.chunk_index}:{position}"

    return RetrievedPassage(
        id=str(passage_id),
        # Cosine distance, so score is cosine similarity in [-1, 1]
        score=1.0 - float(distance),
        text=doc.page_content or "",
        metadata=metadata,
    )


class ChromaSearchProvider:
    """Vector search provider backed by a LangChain Chroma store."""

    def __init__(self, store: Chroma):
        self.store = store

    async def search(
        self,
        vector: List[float],
        top_k: int = 5,
        search_filter: Optional[SearchFilter] = None,
    ) -> List[RetrievedPassage]:
        where = build_where(search_filter)
        try:
            hits: List[Tuple[Document, float]] = await asyncio.to_thread(
                self.store.similarity_search_by_vector_with_relevance_scores,
                embedding=vector,
                k=top_k,
                filter=where,
            )
        except Exception as e:
            raise RetrievalError(f"Failed to search vector store: {e}") from e

        passages = [to_passage(doc, dist, i) for i, (doc, dist) in enumerate(hits)]
        logger.debug("Vector search returned %d passages", len(passages))
        return passages[:top_k]

    def document_count(self) -> int:
        """Number of stored chunks, or 0 when the collection is unreachable."""
        try:
            return self.store._collection.count()
        except Exception as e:
            logger.warning("Could not count documents: %s", e)
            return 0
