"""
Static word tables and word-shape predicates used by the pacing engine.

Everything here is a pure lookup: no state, no failure modes. A word that is
in neither table is an ordinary content word.
"""

from __future__ import annotations

import re

# Closed-class words the eye skims over.
FUNCTION_WORDS = frozenset([
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did",
    "of", "to", "in", "at", "by", "for", "with", "on", "from", "into",
    "it", "its", "he", "she", "we", "they", "me", "him", "us", "them",
    "my", "his", "her", "our", "your", "their",
    "this", "that", "these", "those",
    "as", "if", "than", "then", "not", "no",
    "up", "out", "about", "just", "also", "very", "too", "so",
    "can", "could", "will", "would", "shall", "should", "may", "might", "must",
    "am", "get", "got", "much", "many", "some", "any",
    "all", "each", "every", "both", "few", "more", "most", "other",
    "own", "same", "such",
])

# Words that usually open a clause or phrase.
PHRASE_BOUNDARY_WORDS = frozenset([
    "which", "who", "whom", "whose", "where", "when", "while",
    "because", "although", "though", "since", "unless", "until",
    "however", "therefore", "moreover", "furthermore", "nevertheless",
    "meanwhile", "otherwise", "consequently", "accordingly",
    "but", "yet", "and", "or", "nor",
    "after", "before", "during", "between", "through", "against",
    "whether", "whereas", "whereby",
])

CLEAN_RE = re.compile(r"[^a-z'-]")
SENTENCE_END_RE = re.compile(r"[.!?]$")
CLAUSE_END_RE = re.compile(r"[,;:]$")
DASH_END_RE = re.compile(r"[—–\-]$")
UPPER_START_RE = re.compile(r"^[A-Z]")
DIGIT_RE = re.compile(r"\d")
ALL_DIGITS_RE = re.compile(r"^\d+$")
QUOTE_START_RE = re.compile(r"^[\"'“‘(]")

SAMPLE_TEXT = """The art of reading is not merely about speed. It is about rhythm, comprehension, and the natural flow of language through your mind.

When you read silently, your brain processes words at varying speeds. Short function words like "the" and "is" fly past almost invisibly, while longer, more complex words demand additional processing time. Your internal voice naturally pauses at the boundaries between clauses, however brief those pauses may be.

This speed reader models that natural rhythm. Instead of displaying every word at the same mechanical pace, it accelerates through familiar words and decelerates for complexity. It pauses at punctuation, breathes between paragraphs, and prepares you for what comes next.

The goal is not just to read faster. It is to read naturally, at whatever pace feels comfortable, while training your brain to process text more efficiently over time."""


def clean_word(word: str) -> str:
    """Lower-case ``word`` and keep only letters, apostrophes and hyphens."""
    if not word:
        return ""
    return CLEAN_RE.sub("", word.lower())


def is_function_word(word: str) -> bool:
    return clean_word(word) in FUNCTION_WORDS


def is_phrase_boundary(word: str) -> bool:
    return clean_word(word) in PHRASE_BOUNDARY_WORDS


def ends_sentence(word: str) -> bool:
    return bool(word) and bool(SENTENCE_END_RE.search(word))


def ends_clause(word: str) -> bool:
    return bool(word) and bool(CLAUSE_END_RE.search(word))


def ends_dash(word: str) -> bool:
    return bool(word) and bool(DASH_END_RE.search(word))


def starts_upper(word: str) -> bool:
    return bool(word) and bool(UPPER_START_RE.match(word))


def has_digit(word: str) -> bool:
    return bool(word) and bool(DIGIT_RE.search(word))


def is_all_digits(word: str) -> bool:
    return bool(word) and bool(ALL_DIGITS_RE.match(word))


def starts_quote(word: str) -> bool:
    return bool(word) and bool(QUOTE_START_RE.match(word))
