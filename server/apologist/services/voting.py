from collections import Counter
from typing import Iterable, Sequence, Tuple

from apologist.models import DEFAULT_DIFFICULTY, DEFAULT_TOPIC, RetrievedPassage


def _majority(labels: Iterable[str], default: str) -> str:
    counts = Counter(labels)
    if not counts:
        return default
    # Counter keeps insertion order and max() returns the first maximal item,
    # so ties go to the label seen first.
    return max(counts, key=counts.__getitem__)


def vote(passages: Sequence[RetrievedPassage]) -> Tuple[str, str]:
    """Dominant (topic, difficulty) across passages, defaults when empty."""
    topic = _majority((p.metadata.topic for p in passages), DEFAULT_TOPIC)
    difficulty = _majority(
        (p.metadata.difficulty for p in passages), DEFAULT_DIFFICULTY
    )
    return topic, difficulty
