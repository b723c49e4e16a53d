from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from apologist.api.dependencies import get_rag_service
from apologist.core.config import settings
from apologist.core.exceptions import CompletionFailure, QueryValidationError
from apologist.models import RAGResponse, RetrievalOptions, Turn
from apologist.services.rag import ApologeticsRAG

router = APIRouter()


class ChatRequest(BaseModel):
    message: str
    history: List[Turn] = Field(default_factory=list)
    options: Optional[RetrievalOptions] = None


@router.post("/chat", response_model=RAGResponse)
async def chat(request: ChatRequest, rag: ApologeticsRAG = Depends(get_rag_service)):
    """
    Answer an apologetics question.

    Retrieval problems never fail the request: the answer is then grounded
    in local fallback context and ``retrievalStatus`` says why. Only a
    failed model call is an error.
    """
    try:
        return await rag.generate_response(
            request.message, history=request.history, options=request.options
        )
    except QueryValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CompletionFailure as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/status")
def status(rag: ApologeticsRAG = Depends(get_rag_service)):
    """Report which providers are configured."""
    document_count = None
    count = getattr(rag.searcher, "document_count", None)
    if callable(count):
        document_count = count()

    return {
        "llm_configured": bool(settings.OPENROUTER_API_KEY),
        "llm_model": settings.LLM_MODEL,
        "retrieval_enabled": rag.embedder is not None and rag.searcher is not None,
        "fallback_enabled": rag.config.FALLBACK_ENABLED,
        "collection": settings.COLLECTION_NAME,
        "document_count": document_count,
    }


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
