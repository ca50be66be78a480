"""
Turns raw book text into display tokens plus paragraph-start indices.

Extracted text is frequently missing spaces (``wordWord``, ``end.Next``,
``page12Chapter``), so the text is repaired with an ordered list of boundary
rules before it is split. Every rule is idempotent on its own output; the
order between rules is part of the contract because later rules see the
spaces inserted by earlier ones.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterable, List, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)

Rule = Tuple[re.Pattern, str]

LONG_WORD_LENGTH = 15
FOOTNOTE_NUMBER_LIMIT = 500

FALLBACK_TOKENS: Tuple[str, ...] = (
    "No", "text", "found", "in", "file.", "Try", "a", "different", "file.",
)

PARAGRAPH_RE = re.compile(r"\n\n+")
WHITESPACE_RE = re.compile(r"\s+")


def _rule(pattern: str, flags: int = 0) -> Rule:
    return re.compile(pattern, flags), r"\1 \2"


# -------------------------------
# Boundary rules (applied to the whole text, in this order)
# -------------------------------
BOUNDARY_RULES: Tuple[Rule, ...] = (
    _rule(r"([a-z])([A-Z])"),            # wordWord
    _rule(r"([.!?])([A-Z])"),            # end.Next
    _rule(r"(\d)([A-Z])"),               # 12Chapter
    _rule(r"([a-z])(\d)"),               # page12
    _rule(r"([.,;:!?])([a-zA-Z])"),      # one,two
    _rule(r"([”])([a-zA-Z])"),           # ”Then  (closing quote)
    _rule(r"([a-zA-Z])([“‘])"),          # said“  (opening quote)
)

# Words so common that finding them glued inside a long token is a good
# sign the token is several words.
GLUED_COMMON_WORDS: Tuple[str, ...] = (
    "the", "and", "of", "to", "in", "was", "that",
    "with", "for", "by", "be", "had", "his", "not",
)


def _glued_word_rules(words: Iterable[str]) -> Tuple[Rule, ...]:
    rules: List[Rule] = []
    for word in words:
        rules.append(_rule(rf"({word})([a-z])", re.IGNORECASE))
        rules.append(_rule(rf"([a-z])({word})", re.IGNORECASE))
    return tuple(rules)


LONG_WORD_RULES: Tuple[Rule, ...] = (
    _rule(r"([a-z])([A-Z])"),
    _rule(r"([.!?,;:])([a-zA-Z])"),
    _rule(r"(\.)(\d)"),
    _rule(r"(\d)([a-zA-Z])"),
) + _glued_word_rules(GLUED_COMMON_WORDS)

FOOTNOTE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^\.?\d{1,3}$"),   # 12, .12
    re.compile(r"^\[\d+\]$"),      # [12]
    re.compile(r"^\(\d+\)$"),      # (12)
)
NUMBERED_DOT_RE = re.compile(r"^0*(\d{1,3})\.$")


@dataclass
class TokenizedText:
    tokens: List[str]
    paragraph_starts: Set[int] = field(default_factory=set)
    placeholder: bool = False


def repair_boundaries(text: str, rules: Sequence[Rule] = BOUNDARY_RULES) -> str:
    """Apply ``rules`` to ``text`` left to right, each as one substitution pass."""
    return reduce(lambda acc, rule: rule[0].sub(rule[1], acc), rules, text)


def split_long_word(word: str) -> List[str]:
    """
    Break a suspiciously long token into the words it was glued from.

    Returns ``[word]`` unchanged when the token is short enough or when the
    repair finds nothing to split on.
    """
    if len(word) <= LONG_WORD_LENGTH:
        return [word]
    parts = repair_boundaries(word, LONG_WORD_RULES).split()
    return parts if len(parts) > 1 else [word]


def is_footnote_or_page_number(word: str) -> bool:
    if any(p.match(word) for p in FOOTNOTE_PATTERNS):
        return True
    m = NUMBERED_DOT_RE.match(word)
    return bool(m) and int(m.group(1)) < FOOTNOTE_NUMBER_LIMIT


def _paragraph_tokens(paragraph: str) -> List[str]:
    words = WHITESPACE_RE.sub(" ", paragraph).strip().split(" ")
    tokens: List[str] = []
    for word in words:
        if not word:
            continue
        tokens.extend(split_long_word(word))
    return [t for t in tokens if not is_footnote_or_page_number(t)]


def tokenize(text: str, outline: Optional[Sequence[object]] = None) -> TokenizedText:
    """
    Tokenize raw text for display.

    ``outline`` is accepted for call-site symmetry with chapter detection and
    is ignored. The result always holds at least one token.
    """
    cleaned = repair_boundaries(text or "")

    tokens: List[str] = []
    paragraph_starts: Set[int] = set()
    for paragraph in PARAGRAPH_RE.split(cleaned):
        para_tokens = _paragraph_tokens(paragraph)
        if para_tokens:
            paragraph_starts.add(len(tokens))
            tokens.extend(para_tokens)

    if not tokens:
        logger.info("No readable text found, using placeholder tokens")
        return TokenizedText(tokens=list(FALLBACK_TOKENS), paragraph_starts=set(), placeholder=True)

    return TokenizedText(tokens=tokens, paragraph_starts=paragraph_starts)
