"""
Data models for the apologetics RAG pipeline.

These pydantic classes are the typed boundary between the orchestrator and
its providers: vendor responses are converted into them once, so the core
never reaches into raw vendor payloads.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TOPIC = "General Apologetics"
DEFAULT_DIFFICULTY = "Intermediate"
DIFFICULTY_LEVELS = ("Beginner", "Intermediate", "Advanced")


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names alongside snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Turn(BaseModel):
    """A prior message in the conversation."""
    role: Literal["user", "assistant", "system"]
    content: str


class SearchFilter(BaseModel):
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    source: Optional[str] = None

    def as_dict(self) -> dict:
        """Only the constraints that were actually set."""
        return self.model_dump(exclude_none=True)


class RetrievalOptions(CamelModel):
    top_k: int = Field(default=5, ge=1, le=50)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, ge=1)
    filter: Optional[SearchFilter] = None


class ScriptureReferenceSet(BaseModel):
    """Bible and Quran citations, each deduplicated in first-seen order."""
    bible: List[str] = Field(default_factory=list)
    quran: List[str] = Field(default_factory=list)

    @field_validator("bible", "quran")
    @classmethod
    def _dedupe(cls, refs: List[str]) -> List[str]:
        return list(dict.fromkeys(refs))

    def is_empty(self) -> bool:
        return not self.bible and not self.quran


class PassageMetadata(CamelModel):
    source: str = "unknown"
    topic: str = DEFAULT_TOPIC
    difficulty: str = DEFAULT_DIFFICULTY
    scripture_references: ScriptureReferenceSet = Field(
        default_factory=ScriptureReferenceSet
    )
    chunk_index: int = 0
    total_chunks: int = 0

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value) -> str:
        if not value:
            return DEFAULT_DIFFICULTY
        label = str(value).strip().capitalize()
        return label if label in DIFFICULTY_LEVELS else DEFAULT_DIFFICULTY

    @field_validator("topic", "source", mode="before")
    @classmethod
    def _blank_to_default(cls, value, info):
        if value is None or not str(value).strip():
            return DEFAULT_TOPIC if info.field_name == "topic" else "unknown"
        return str(value)


class RetrievedPassage(BaseModel):
    id: str
    score: float
    text: str
    metadata: PassageMetadata = Field(default_factory=PassageMetadata)


class RAGResponse(CamelModel):
    answer: str
    sources: List[RetrievedPassage] = Field(default_factory=list)
    scripture_references: ScriptureReferenceSet = Field(
        default_factory=ScriptureReferenceSet
    )
    topic: str = DEFAULT_TOPIC
    difficulty: str = DEFAULT_DIFFICULTY
    retrieval_status: str = "retrieved"
