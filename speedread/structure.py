"""
Heading detection on raw text.

Positions produced here are raw word offsets (whitespace words of the
original text). They are provisional: ``speedread.anchoring`` moves them into
token space once the text has been tokenized.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

MIN_HEADING_CHARS = 5
MAX_HEADING_CHARS = 80
MAX_HEADING_WORDS = 12
DEDUP_KEY_CHARS = 25
TITLE_DISPLAY_CHARS = 50

LINE_SPLIT_RE = re.compile(r"\n+")

_NUMERAL = r"(\d+|[IVXLC]+)"
_SEPARATOR = r"[:.\-–—]"

# (pattern, level); first match wins.
CHAPTER_PATTERNS: Tuple[Tuple[re.Pattern, int], ...] = (
    (re.compile(rf"^Chapter\s+{_NUMERAL}\s*{_SEPARATOR}\s*.+", re.IGNORECASE), 1),
    (re.compile(rf"^Part\s+{_NUMERAL}\s*{_SEPARATOR}\s*.+", re.IGNORECASE), 0),
    (re.compile(rf"^Book\s+{_NUMERAL}\s*{_SEPARATOR}?\s*", re.IGNORECASE), 0),
    (re.compile(rf"^Appendix\s+[A-Z]\s*{_SEPARATOR}", re.IGNORECASE), 1),
    (re.compile(r"^(Introduction|Conclusion|Preface|Foreword|Prologue|Epilogue)$", re.IGNORECASE), 1),
)


@dataclass(frozen=True)
class ChapterRecord:
    """A heading and its position; ``word_index`` is raw or token space depending on stage."""

    title: str
    word_index: int
    level: int = 1

    def to_dict(self) -> Dict[str, object]:
        return {"title": self.title, "wordIndex": self.word_index, "level": self.level}


def _display_title(line: str) -> str:
    if len(line) > TITLE_DISPLAY_CHARS:
        return line[:TITLE_DISPLAY_CHARS] + "..."
    return line


def _heading_level(line: str) -> Optional[int]:
    for pattern, level in CHAPTER_PATTERNS:
        if pattern.match(line):
            return level
    return None


def detect_chapters(text: str, outline: Optional[Sequence[ChapterRecord]] = None) -> List[ChapterRecord]:
    """
    Find chapter-like headings in ``text``.

    A non-empty ``outline`` (e.g. a PDF bookmark tree already mapped to raw
    offsets) is trusted over pattern detection and returned unchanged.
    """
    if outline:
        return list(outline)

    chapters: List[ChapterRecord] = []
    seen: Set[str] = set()
    word_index = 0

    for line in LINE_SPLIT_RE.split(text or ""):
        trimmed = line.strip()
        words_in_line = trimmed.split()

        if (
            MIN_HEADING_CHARS <= len(trimmed) <= MAX_HEADING_CHARS
            and len(words_in_line) <= MAX_HEADING_WORDS
        ):
            level = _heading_level(trimmed)
            if level is not None:
                key = trimmed.lower()[:DEDUP_KEY_CHARS]
                if key not in seen:
                    seen.add(key)
                    chapters.append(ChapterRecord(_display_title(trimmed), word_index, level))

        word_index += len(words_in_line)

    chapters.sort(key=lambda ch: ch.word_index)
    return chapters
