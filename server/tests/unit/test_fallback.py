"""Tests for the local fallback context builder."""

from apologist.services.fallback import FALLBACK_TOPICS, build_fallback


def _blurb_for(keyword):
    for keywords, blurb in FALLBACK_TOPICS:
        if keyword in keywords:
            return blurb
    raise KeyError(keyword)


def test_trinity_question_gets_trinity_blurb():
    assert build_fallback("Tell me about the Trinity") == _blurb_for("trinity")


def test_unrelated_question_gets_nothing():
    assert build_fallback("What's the weather?") is None


def test_first_table_entry_wins():
    # "jesus" and "trinity" both match; trinity comes first in the table
    assert build_fallback("Is Jesus part of the Trinity?") == _blurb_for("trinity")
    assert build_fallback("What does the Quran say about prophets?") == _blurb_for("quran")


def test_matching_is_case_insensitive():
    assert build_fallback("HOW DO I RECEIVE SALVATION") == _blurb_for("salvation")


def test_any_keyword_of_an_entry_matches():
    assert build_fallback("Who is Christ?") == _blurb_for("jesus")
    assert build_fallback("Can scripture be trusted?") == _blurb_for("bible")


def test_empty_query():
    assert build_fallback("") is None


def test_keywords_match_whole_words_only():
    assert build_fallback("Since when is this business open?") is None
    assert build_fallback("Are all sins equal?") == _blurb_for("sin")
    assert build_fallback("Who were the prophets?") == _blurb_for("prophet")
