"""
Local fallback context.

When retrieval is unavailable (embedding or search failed, or the index
returned nothing) the orchestrator still wants some grounding for the
model. This module keeps a small, ordered table of topic blurbs and picks
one by whole-word keyword match against the user's question, so "since"
or "business" does not pick the blurb on sin.
"""

import re
from typing import Optional, Sequence, Tuple

# Ordered: the first entry whose keywords match the query wins.
FALLBACK_TOPICS: Sequence[Tuple[Tuple[str, ...], str]] = (
    (
        ("trinity",),
        "The Trinity is the Christian doctrine that God exists as three distinct "
        "persons: Father, Son, and Holy Spirit, yet is one God. Each person is "
        "fully God, sharing one divine nature, and the doctrine is drawn from "
        "passages such as Matthew 28:19 and 2 Corinthians 13:14.",
    ),
    (
        ("jesus", "christ"),
        "Jesus Christ is the Son of God, fully divine and fully human. He came "
        "to earth to save humanity from sin through his death and resurrection, "
        "and his identity is affirmed in passages such as John 1:1 and "
        "Colossians 2:9.",
    ),
    (
        ("bible", "scripture"),
        "The Bible is the inspired Word of God, containing the Old and New "
        "Testaments. It is the primary source of Christian doctrine and "
        "practice, and its manuscript tradition is exceptionally well attested "
        "(2 Timothy 3:16).",
    ),
    (
        ("salvation", "faith"),
        "Christian faith is trust in Jesus Christ for salvation. Salvation is "
        "received by grace through faith rather than earned by works "
        "(Ephesians 2:8-9), and involves both intellectual assent and personal "
        "commitment to follow Christ.",
    ),
    (
        ("sin",),
        "Sin is any thought, word, or deed that falls short of God's holy "
        "standard. Scripture teaches that all have sinned (Romans 3:23) and "
        "that the penalty of sin is death, while the gift of God is eternal "
        "life in Christ (Romans 6:23).",
    ),
    (
        ("resurrection",),
        "The bodily resurrection of Jesus is the foundation of the Christian "
        "faith (1 Corinthians 15:14). The empty tomb, the post-resurrection "
        "appearances, and the transformation of the disciples are the "
        "historical lines of evidence usually offered for it.",
    ),
    (
        ("heaven",),
        "Heaven is the dwelling place of God and the eternal home of those "
        "reconciled to him through Christ. Scripture describes it as a place "
        "without death, mourning, or pain (Revelation 21:4).",
    ),
    (
        ("commandments",),
        "The Ten Commandments (Exodus 20:1-17) summarize God's moral law. "
        "Jesus taught that the whole law hangs on loving God and loving one's "
        "neighbor (Matthew 22:37-40).",
    ),
    (
        ("quran",),
        "The Quran is the holy book of Islam. Christian apologists engage it "
        "respectfully, noting for example that it affirms earlier revelation "
        "(Surah 5:46-47) while disagreeing with the Bible on the crucifixion "
        "and divinity of Jesus.",
    ),
    (
        ("prophet",),
        "Biblical prophets spoke on God's behalf, and a true prophet's words "
        "must agree with previous revelation and come to pass "
        "(Deuteronomy 18:21-22). Christians see Jesus as the fulfillment of "
        "the prophetic tradition (Hebrews 1:1-2).",
    ),
)

_PATTERNS = [
    (
        re.compile(
            r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")s?\b",
            re.IGNORECASE,
        ),
        blurb,
    )
    for keywords, blurb in FALLBACK_TOPICS
]


def build_fallback(query: str) -> Optional[str]:
    """
    Pick a topic blurb for the query by keyword match.

    The table is scanned in order and the first entry with any keyword
    appearing as a whole word (or its plural) in the query is returned, so
    "jesus and the trinity" yields the Trinity blurb.

    Returns:
        The blurb, or None when no keyword matches.
    """
    if not query:
        return None

    for pattern, blurb in _PATTERNS:
        if pattern.search(query):
            return blurb
    return None
