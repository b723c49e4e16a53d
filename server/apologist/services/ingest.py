"""
Loading apologetics content into the vector store.

Supported inputs:
- Markdown articles, split into one chunk per ``### `` heading; the
  heading becomes the chunk's topic
- Bible verse JSON files shaped ``{"verses": [{"reference", "text",
  "topic", "difficulty"}]}``

Chroma only accepts scalar metadata, so scripture references are stored
as JSON text and decoded again by the search provider.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

from langchain_core.documents import Document

from apologist.models import DEFAULT_DIFFICULTY, DEFAULT_TOPIC, ScriptureReferenceSet
from apologist.services.scripture import extract_scripture_references

logger = logging.getLogger(__name__)


def chunk_id(source: str, index: int) -> str:
    # UUID5 is deterministic, so re-ingesting a file overwrites its chunks
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{source}:{index}"))


def _make_document(
    text: str,
    source: str,
    topic: str,
    difficulty: str,
    index: int,
    total: int,
    references: Optional[ScriptureReferenceSet] = None,
) -> Document:
    refs = references or extract_scripture_references(text)
    return Document(
        id=chunk_id(source, index),
        page_content=text,
        metadata={
            "source": source,
            "topic": topic,
            "difficulty": difficulty,
            "chunkIndex": index,
            "totalChunks": total,
            "scriptureReferences": json.dumps(refs.model_dump()),
        },
    )


def chunk_markdown(
    text: str, source: str, difficulty: str = DEFAULT_DIFFICULTY
) -> List[Document]:
    """Split markdown into one document per ``### `` section."""
    sections = []
    topic = None
    buffer: List[str] = []

    for line in text.splitlines():
        if line.startswith("### "):
            if topic and buffer:
                sections.append((topic, "\n".join(buffer).strip()))
            topic = line[4:].strip()
            buffer = [line]
        elif topic:
            buffer.append(line)

    if topic and buffer:
        sections.append((topic, "\n".join(buffer).strip()))

    total = len(sections)
    return [
        _make_document(body, source, section_topic, difficulty, i, total)
        for i, (section_topic, body) in enumerate(sections)
    ]


def load_bible_verses(path: Path) -> List[Document]:
    """Load a verse file into one document per verse."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    verses = data.get("verses", []) if isinstance(data, dict) else []
    source = path.name
    kept = []
    for i, verse in enumerate(verses):
        text = (verse.get("text") or "").strip()
        if not text:
            logger.warning("Skipping verse %d in %s: no text", i, source)
            continue
        kept.append((verse, text))

    total = len(kept)
    documents = []
    for i, (verse, text) in enumerate(kept):
        reference = verse.get("reference")
        refs = extract_scripture_references(f"{reference} {text}" if reference else text)
        difficulty = str(verse.get("difficulty") or DEFAULT_DIFFICULTY).capitalize()
        documents.append(
            _make_document(
                text,
                source,
                verse.get("topic") or DEFAULT_TOPIC,
                difficulty,
                i,
                total,
                references=refs,
            )
        )

    return documents


def load_path(path: Path) -> List[Document]:
    """Load one file, choosing the loader by suffix."""
    suffix = path.suffix.lower()
    if suffix in (".md", ".markdown"):
        return chunk_markdown(path.read_text(encoding="utf-8"), source=path.name)
    if suffix == ".json":
        return load_bible_verses(path)
    raise ValueError(f"Unsupported file type: {path}")


def ingest_paths(paths: Iterable[Path], store) -> int:
    """
    Load every file and add the chunks to the vector store.

    Args:
        paths: Markdown or verse JSON files
        store: LangChain vector store (e.g. Chroma)

    Returns:
        Number of chunks written
    """
    total = 0
    for path in paths:
        documents = load_path(Path(path))
        if not documents:
            logger.warning("No chunks found in %s", path)
            continue
        store.add_documents(documents, ids=[doc.id for doc in documents])
        logger.info("Ingested %d chunks from %s", len(documents), path)
        total += len(documents)
    return total
