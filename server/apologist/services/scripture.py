"""
Scripture reference extraction.

Scans free text for Bible citations (``Book Chapter:Verse[-Verse]``) and
Quran citations (``Surah N[:M[-M2]]``) and returns them normalized and
deduplicated in the order they first appear.
"""

import re
from typing import List

from apologist.models import ScriptureReferenceSet

# Canonical names of the 66 books, Old Testament then New Testament
BIBLE_BOOKS = [
    "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy", "Joshua",
    "Judges", "Ruth", "Samuel", "Kings", "Chronicles", "Ezra", "Nehemiah",
    "Esther", "Job", "Psalms", "Proverbs", "Ecclesiastes", "Song of Solomon",
    "Isaiah", "Jeremiah", "Lamentations", "Ezekiel", "Daniel", "Hosea", "Joel",
    "Amos", "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk", "Zephaniah",
    "Haggai", "Zechariah", "Malachi",
    "Matthew", "Mark", "Luke", "John", "Acts", "Romans", "Corinthians",
    "Galatians", "Ephesians", "Philippians", "Colossians", "Thessalonians",
    "Timothy", "Titus", "Philemon", "Hebrews", "James", "Peter", "Jude",
    "Revelation",
]

# Books that come in numbered parts (1 Samuel, 2 Kings, 3 John, ...)
NUMBERED_BOOKS = {
    "Samuel", "Kings", "Chronicles", "Corinthians", "Thessalonians",
    "Timothy", "Peter", "John",
}

BOOK_ALIASES = {
    "psalm": "Psalms",
    "song of songs": "Song of Solomon",
    "revelations": "Revelation",
}

ROMAN_NUMERALS = {"i": "1", "ii": "2", "iii": "3"}

_CANONICAL = {name.lower(): name for name in BIBLE_BOOKS}
_CANONICAL.update(BOOK_ALIASES)


def _book_alternation() -> str:
    names = sorted(_CANONICAL, key=len, reverse=True)
    return "|".join(re.escape(name).replace(r"\ ", r"\s+") for name in names)


BIBLE_PATTERN = re.compile(
    r"\b(?:(?P<num>[1-3]|iii|ii|i)\s+)?"
    r"(?P<book>" + _book_alternation() + r")\.?\s+"
    r"(?P<chapter>\d{1,3}):(?P<verse>\d{1,3})"
    r"(?:\s*[-–]\s*(?P<end>\d{1,3}))?\b",
    re.IGNORECASE,
)

QURAN_PATTERN = re.compile(
    r"\b(?:surah|sura|quran|qur'an)\s+(?P<surah>\d{1,3})"
    r"(?::(?P<ayah>\d{1,3})(?:\s*[-–]\s*(?P<end>\d{1,3}))?)?\b",
    re.IGNORECASE,
)


def _normalize_bible(match: re.Match) -> str:
    book_key = re.sub(r"\s+", " ", match.group("book")).lower()
    book = _CANONICAL[book_key]

    num = match.group("num")
    if num and book in NUMBERED_BOOKS:
        book = f"{ROMAN_NUMERALS.get(num.lower(), num)} {book}"

    ref = f"{book} {int(match.group('chapter'))}:{int(match.group('verse'))}"
    if match.group("end"):
        ref += f"-{int(match.group('end'))}"
    return ref


def _normalize_quran(match: re.Match) -> str:
    ref = f"Surah {int(match.group('surah'))}"
    if match.group("ayah"):
        ref += f":{int(match.group('ayah'))}"
        if match.group("end"):
            ref += f"-{int(match.group('end'))}"
    return ref


def extract_bible_references(text: str) -> List[str]:
    """Bible citations in ``text``, normalized, first-seen order, no duplicates."""
    if not text:
        return []
    refs = (_normalize_bible(m) for m in BIBLE_PATTERN.finditer(text))
    return list(dict.fromkeys(refs))


def extract_quran_references(text: str) -> List[str]:
    """Quran citations in ``text``, normalized to ``Surah N[:M[-E]]``."""
    if not text:
        return []
    refs = (_normalize_quran(m) for m in QURAN_PATTERN.finditer(text))
    return list(dict.fromkeys(refs))


def extract_scripture_references(text: str) -> ScriptureReferenceSet:
    """
    Extract Bible and Quran references from arbitrary text.

    Args:
        text: Passage text, a user question, or a model answer

    Returns:
        ScriptureReferenceSet with both lists deduplicated. Text without
        citations yields empty lists, never an error.
    """
    return ScriptureReferenceSet(
        bible=extract_bible_references(text),
        quran=extract_quran_references(text),
    )
