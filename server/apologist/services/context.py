"""
Context assembly for the completion prompt.

Turns retrieved passages into a labeled context block and builds the final
chat message list (system prompt with context, recent history, question).
"""

from typing import Dict, List, Optional, Sequence

from apologist.models import RetrievedPassage, ScriptureReferenceSet, Turn


def _format_refs(refs: List[str]) -> str:
    return ", ".join(refs) if refs else "None"


def format_passage(index: int, passage: RetrievedPassage) -> str:
    """Render one passage as a labeled block."""
    meta = passage.metadata
    refs: ScriptureReferenceSet = meta.scripture_references
    return "\n".join([
        f"Source {index} ({meta.source}):",
        f"Topic: {meta.topic}",
        passage.text,
        f"Difficulty: {meta.difficulty}",
        f"Bible References: {_format_refs(refs.bible)}",
        f"Quran References: {_format_refs(refs.quran)}",
    ])


def build_context(passages: Sequence[RetrievedPassage], query: str) -> str:
    """
    Build the context string from retrieved passages.

    Passages are emitted in the order given. The search provider already
    ranks them, so no sorting happens here.

    Args:
        passages: Retrieved passages in provider order
        query: The user's question, restated in the header

    Returns:
        Header plus one block per passage, separated by blank lines
    """
    header = "\n".join([
        f"User Question: {query}",
        "",
        "Relevant Information from Apologetics Database:",
    ])
    blocks = [format_passage(i, p) for i, p in enumerate(passages, start=1)]
    return "\n\n".join([header, *blocks])


def build_fallback_context(blurb: str, query: str) -> str:
    """Wrap a local fallback blurb in the same header as retrieved context."""
    return "\n".join([
        f"User Question: {query}",
        "",
        "General Background:",
        blurb,
    ])


def build_messages(
    query: str,
    context: str,
    history: Optional[Sequence[Turn]],
    system_prompt: str,
    history_turns: int = 6,
) -> List[Dict[str, str]]:
    """Build the message list for the chat completion call."""
    system_content = f"{system_prompt}\n\n{context}" if context else system_prompt
    messages = [{"role": "system", "content": system_content}]

    # Only the most recent turns, to stay within the token budget
    recent = list(history or [])[-history_turns:] if history_turns > 0 else []
    messages.extend({"role": turn.role, "content": turn.content} for turn in recent)

    messages.append({"role": "user", "content": query})
    return messages
