"""Load-time pipeline: raw text (+ optional outline) to tokens and chapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from .anchoring import raw_word_count, resolve_chapters
from .structure import ChapterRecord, detect_chapters
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class ProcessedText:
    tokens: List[str]
    paragraph_starts: Set[int] = field(default_factory=set)
    chapters: List[ChapterRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "tokens": self.tokens,
            "paragraph_starts": sorted(self.paragraph_starts),
            "chapters": [ch.to_dict() for ch in self.chapters],
        }


def process_text(raw_text: str, outline: Optional[Sequence[ChapterRecord]] = None) -> ProcessedText:
    """
    Tokenize ``raw_text`` and anchor its chapters on the token sequence.

    ``outline`` entries carry raw word offsets, like detected headings.
    """
    raw_text = raw_text or ""
    tokenized = tokenize(raw_text, outline)
    candidates = detect_chapters(raw_text, outline)

    # Placeholder tokens are not content; chapters collapse to the start.
    emitted = [] if tokenized.placeholder else tokenized.tokens
    chapters = resolve_chapters(candidates, emitted, raw_word_count(raw_text))

    logger.info(
        "Processed %d raw words into %d tokens, %d paragraphs, %d chapters",
        raw_word_count(raw_text), len(tokenized.tokens), len(tokenized.paragraph_starts), len(chapters),
    )
    return ProcessedText(tokenized.tokens, tokenized.paragraph_starts, chapters)
