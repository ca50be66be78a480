"""
Move chapter positions from raw word offsets onto token indices.

Tokenization splits glued words and drops page numbers, so a raw offset
scaled by the global token/word ratio lands near a heading but rarely on it.
Each heading is therefore looked up again in a bounded window around that
estimate. The window looks further ahead than behind: headings tend to show
up after their estimate because front matter and page furniture are dropped.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .structure import ChapterRecord

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.6
ROMAN_FOLLOW_WINDOW = 10

ROMAN_TITLE_RE = re.compile(r"^([IVXLC]+)(?:\s*[:\-–—.]\s*|\s+)(.+)$", re.IGNORECASE)
NON_LETTER_RE = re.compile(r"[^a-zA-Z]")
NON_ALNUM_LOWER_RE = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class SearchProfile:
    lookback: int
    lookahead: int
    max_words: int
    allow_substring: bool = False


# Detected headings, searched in token space around the ratio estimate.
STANDARD_PROFILE = SearchProfile(lookback=500, lookahead=1500, max_words=4)
# Outline entries, searched in raw word space forward from their page start.
OUTLINE_PROFILE = SearchProfile(lookback=0, lookahead=3000, max_words=5, allow_substring=True)


def raw_word_count(text: str) -> int:
    return len((text or "").split())


def _norm(word: str) -> str:
    return NON_ALNUM_LOWER_RE.sub("", word.lower())


def _significant_words(text: str) -> List[str]:
    return [w for w in text.split() if len(w) > 1]


def _word_at(words: Sequence[str], i: int) -> Optional[str]:
    if 0 <= i < len(words):
        return words[i]
    return None


def _find_roman_heading(title: str, words: Sequence[str], start: int, end: int) -> Optional[int]:
    m = ROMAN_TITLE_RE.match(title.strip())
    if not m:
        return None
    roman, rest = m.group(1).upper(), m.group(2)
    rest_words = _significant_words(rest)
    if not rest_words:
        return None
    first_word = NON_LETTER_RE.sub("", rest_words[0]).lower()
    if not first_word:
        return None

    for i in range(start, end):
        if NON_LETTER_RE.sub("", words[i]).upper() != roman:
            continue
        for k in range(1, ROMAN_FOLLOW_WINDOW + 1):
            following = _word_at(words, i + k)
            if following is not None and NON_LETTER_RE.sub("", following).lower() == first_word:
                return i
    return None


def _find_title_window(title: str, words: Sequence[str], start: int, end: int, profile: SearchProfile) -> Optional[int]:
    title_words = [_norm(w) for w in _significant_words(title)[: profile.max_words]]
    if not title_words:
        return None
    needed = len(title_words) * MATCH_THRESHOLD

    for i in range(start, end):
        matches = 0
        for j, tw in enumerate(title_words):
            candidate = _word_at(words, i + j)
            if candidate is None:
                break
            ww = _norm(candidate)
            if tw == ww or (profile.allow_substring and len(tw) > 3 and tw in ww):
                matches += 1
        if matches >= needed:
            return i
    return None


def locate_title(title: str, words: Sequence[str], estimate: int, profile: SearchProfile = STANDARD_PROFILE) -> Optional[int]:
    """
    Return the index in ``words`` where ``title`` starts, or ``None``.

    The search covers ``[estimate - lookback, estimate + lookahead)`` clamped
    to ``words``. Roman numeral headings ("IV. The Storm") are tried first by
    numeral plus the first title word; then a window of the first
    ``max_words`` title words is slid across the range and the first position
    where at least 60% of them match is taken.
    """
    start = max(0, estimate - profile.lookback)
    end = min(len(words), estimate + profile.lookahead)
    if start >= end:
        return None

    found = _find_roman_heading(title, words, start, end)
    if found is not None:
        return found
    return _find_title_window(title, words, start, end, profile)


def resolve_chapters(chapters: Sequence[ChapterRecord], tokens: Sequence[str], raw_words: int) -> List[ChapterRecord]:
    """
    Rewrite raw-offset chapter records into token-index records.

    Unmatched titles keep their ratio estimate. The result is sorted by
    token index and every index lies in ``[0, len(tokens)]``.
    """
    ratio = len(tokens) / max(1, raw_words)
    resolved: List[ChapterRecord] = []

    for chapter in chapters:
        estimated = min(len(tokens), max(0, math.floor(chapter.word_index * ratio)))
        found = locate_title(chapter.title, tokens, estimated, STANDARD_PROFILE)
        if found is None:
            logger.debug("Chapter %r not found near token %d, keeping estimate", chapter.title[:25], estimated)
            found = estimated
        else:
            logger.debug("Chapter %r anchored at token %d (estimate %d)", chapter.title[:25], found, estimated)
        resolved.append(replace(chapter, word_index=found))

    resolved.sort(key=lambda ch: ch.word_index)
    return resolved
