"""
Apologetics RAG orchestrator.

Sequences embedding, vector search, context assembly, scripture reference
extraction and completion for one question, and decides how to degrade
when a dependency fails:

- embedding or search failure, or no matches: answer from local fallback
  context (or no context), never an error for the caller
- completion failure: ``CompletionFailure``, no invented answer
- empty question: ``QueryValidationError`` before any provider call

Providers are passed in, so the orchestrator has no global state and can
serve concurrent requests.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)

from apologist.core.config import Settings, settings
from apologist.core.exceptions import CompletionFailure, QueryValidationError
from apologist.models import (
    RAGResponse,
    RetrievalOptions,
    RetrievedPassage,
    ScriptureReferenceSet,
    SearchFilter,
    Turn,
)
from apologist.services.context import (
    build_context,
    build_fallback_context,
    build_messages,
)
from apologist.services.fallback import build_fallback
from apologist.services.prompts import load_system_prompt
from apologist.services.scripture import extract_scripture_references
from apologist.services.voting import vote

logger = logging.getLogger(__name__)

STATUS_RETRIEVED = "retrieved"
STATUS_EMBEDDING_FAILED = "embedding_failed"
STATUS_SEARCH_FAILED = "search_failed"
STATUS_NO_MATCHES = "no_matches"
STATUS_DISABLED = "disabled"


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, CompletionFailure) and error.transient


class EmbeddingProvider(Protocol):
    async def embed(self, text: str) -> List[float]: ...


class SearchProvider(Protocol):
    async def search(
        self,
        vector: List[float],
        top_k: int,
        search_filter: Optional[SearchFilter] = None,
    ) -> List[RetrievedPassage]: ...


class CompletionProvider(Protocol):
    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        max_tokens: int,
    ) -> str: ...


def collect_references(passages: Sequence[RetrievedPassage]) -> ScriptureReferenceSet:
    """References cited in the passage text, then those tagged at ingestion."""
    found = extract_scripture_references(" ".join(p.text for p in passages))
    bible, quran = list(found.bible), list(found.quran)
    for passage in passages:
        tagged = passage.metadata.scripture_references
        bible.extend(tagged.bible)
        quran.extend(tagged.quran)
    return ScriptureReferenceSet(bible=bible, quran=quran)


class ApologeticsRAG:
    """Answers apologetics questions with retrieval and graceful fallback."""

    def __init__(
        self,
        embedder: Optional[EmbeddingProvider],
        searcher: Optional[SearchProvider],
        completer: CompletionProvider,
        config: Optional[Settings] = None,
        system_prompt: Optional[str] = None,
    ):
        self.embedder = embedder
        self.searcher = searcher
        self.completer = completer
        self.config = config or settings
        self.system_prompt = system_prompt or load_system_prompt(self.config.PROFILE_PATH)

    def resolve_options(self, options: Optional[RetrievalOptions]) -> RetrievalOptions:
        """Fill options the caller left unset from the configured defaults."""
        merged = {
            "top_k": self.config.TOP_K,
            "temperature": self.config.TEMPERATURE,
            "max_tokens": self.config.MAX_TOKENS,
        }
        if options is not None:
            merged.update(options.model_dump(exclude_unset=True))
        return RetrievalOptions.model_validate(merged)

    async def retrieve(
        self, query: str, options: RetrievalOptions
    ) -> Tuple[List[RetrievedPassage], str]:
        """
        Embed the query and search the index.

        Never raises for provider failures; the second element of the
        result says which path was taken.
        """
        if not self.config.RETRIEVAL_ENABLED or self.embedder is None or self.searcher is None:
            return [], STATUS_DISABLED

        try:
            vector = await asyncio.wait_for(
                self.embedder.embed(query), timeout=self.config.EMBEDDING_TIMEOUT
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Embedding timed out after %.1fs, using fallback context",
                self.config.EMBEDDING_TIMEOUT,
                extra={"retrieval_status": STATUS_EMBEDDING_FAILED},
            )
            return [], STATUS_EMBEDDING_FAILED
        except Exception as e:
            logger.warning(
                "Embedding failed, using fallback context: %s",
                e,
                extra={"retrieval_status": STATUS_EMBEDDING_FAILED},
            )
            return [], STATUS_EMBEDDING_FAILED

        try:
            passages = await asyncio.wait_for(
                self.searcher.search(vector, options.top_k, options.filter),
                timeout=self.config.SEARCH_TIMEOUT,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Vector search timed out after %.1fs, using fallback context",
                self.config.SEARCH_TIMEOUT,
                extra={"retrieval_status": STATUS_SEARCH_FAILED},
            )
            return [], STATUS_SEARCH_FAILED
        except Exception as e:
            logger.warning(
                "Vector search failed, using fallback context: %s",
                e,
                extra={"retrieval_status": STATUS_SEARCH_FAILED},
            )
            return [], STATUS_SEARCH_FAILED

        if not passages:
            logger.info(
                "No matching passages for query",
                extra={"retrieval_status": STATUS_NO_MATCHES},
            )
            return [], STATUS_NO_MATCHES

        return list(passages)[: options.top_k], STATUS_RETRIEVED

    async def _attempt_completion(
        self, messages: List[Dict[str, str]], options: RetrievalOptions
    ) -> str:
        try:
            answer = await asyncio.wait_for(
                self.completer.complete(
                    messages,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                ),
                timeout=self.config.COMPLETION_TIMEOUT,
            )
        except asyncio.TimeoutError:
            raise CompletionFailure(
                f"Model provider timed out after {self.config.COMPLETION_TIMEOUT:g}s",
                transient=True,
            ) from None
        except CompletionFailure:
            raise
        except Exception as e:
            raise CompletionFailure(f"Failed to generate answer: {e}") from e

        if not isinstance(answer, str) or not answer.strip():
            raise CompletionFailure("Model provider returned an empty answer")
        return answer.strip()

    async def _complete(
        self, messages: List[Dict[str, str]], options: RetrievalOptions
    ) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(1 + self.config.COMPLETION_RETRIES),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return await retrying(self._attempt_completion, messages, options)
        except CompletionFailure as e:
            logger.error("Completion failed: %s", e)
            raise

    async def generate_response(
        self,
        query: str,
        history: Optional[Sequence[Turn]] = None,
        options: Optional[RetrievalOptions] = None,
    ) -> RAGResponse:
        """
        Answer a question.

        Args:
            query: The user's question
            history: Prior conversation turns, oldest first
            options: top_k, temperature, max_tokens and metadata filter

        Returns:
            RAGResponse, possibly built from fallback context

        Raises:
            QueryValidationError: the question is empty
            CompletionFailure: the model could not produce an answer
        """
        if query is None or not query.strip():
            raise QueryValidationError("Message is required.")
        query = query.strip()
        try:
            turns = [Turn.model_validate(turn) for turn in history or []]
        except ValidationError as e:
            raise QueryValidationError(f"Invalid conversation history: {e}") from e
        opts = self.resolve_options(options)

        passages, status = await self.retrieve(query, opts)

        if passages:
            context = build_context(passages, query)
            references = collect_references(passages)
        else:
            blurb = build_fallback(query) if self.config.FALLBACK_ENABLED else None
            context = build_fallback_context(blurb, query) if blurb else ""
            references = extract_scripture_references(query)

        messages = build_messages(
            query,
            context,
            turns,
            system_prompt=self.system_prompt,
            history_turns=self.config.HISTORY_TURNS,
        )
        answer = await self._complete(messages, opts)

        topic, difficulty = vote(passages)
        logger.info(
            "Answered query with %d sources (topic=%s, difficulty=%s)",
            len(passages),
            topic,
            difficulty,
            extra={"retrieval_status": status},
        )

        return RAGResponse(
            answer=answer,
            sources=passages,
            scripture_references=references,
            topic=topic,
            difficulty=difficulty,
            retrieval_status=status,
        )
