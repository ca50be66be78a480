"""
Per-word display durations for RSVP playback.

``calculate_word_delay`` is a hand-tuned model of the inner reading voice:
short function words glide, long content words dwell, clause openers and
punctuation pause, and a slow sine wave plus a little noise keeps the rhythm
from sounding mechanical. It is stateless; the caller supplies the sentence
position of the word (see ``sentence_context``).
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Collection, Optional, Protocol, Sequence

from . import lexicon
from .config import MAX_WPM, MIN_WPM

PARAGRAPH_PAUSE = 1.2
CHUNK_STEP = 0.3


class RandomSource(Protocol):
    def random(self) -> float:
        ...


_default_rng = random.Random()


@dataclass(frozen=True)
class DelayOptions:
    context_mode: bool = False
    speed_multiplier: float = 1.0
    chunk_size: int = 1
    word_position: int = 0
    is_first_of_sentence: bool = False
    is_after_comma: bool = False
    words_into_sentence: int = 0
    next_word: str = ""


def base_delay(wpm: float) -> float:
    """Milliseconds per word at ``wpm``, with ``wpm`` clamped to the supported range."""
    wpm = max(MIN_WPM, min(MAX_WPM, wpm))
    return 60000.0 / wpm


def _chunk_factor(chunk_size: int) -> float:
    if chunk_size > 1:
        return 1 + (chunk_size - 1) * CHUNK_STEP
    return 1.0


def _context_delay(word: str, base: float, options: DelayOptions) -> float:
    delay = base / (options.speed_multiplier or 1.0)
    delay *= _chunk_factor(options.chunk_size)
    if lexicon.ends_sentence(word):
        delay *= 1.8
    if lexicon.ends_clause(word):
        delay *= 1.3
    return delay


def calculate_word_delay(
    word: str,
    wpm: float,
    options: Optional[DelayOptions] = None,
    rng: Optional[RandomSource] = None,
) -> float:
    """Return how long ``word`` should stay on screen, in milliseconds."""
    options = options or DelayOptions()
    rng = rng or _default_rng
    word = word or ""
    base = base_delay(wpm)

    if options.context_mode:
        return _context_delay(word, base, options)

    clean = lexicon.clean_word(word)
    is_function = lexicon.is_function_word(word)
    is_boundary = lexicon.is_phrase_boundary(word)

    multiplier = 1.0

    # 1. word class
    if is_function and len(clean) <= 3:
        multiplier = 0.6
    elif is_function:
        multiplier = 0.75
    elif len(clean) >= 8:
        multiplier = 1.15 + (len(clean) - 8) * 0.04

    # 2. clause opener
    if is_boundary and not options.is_first_of_sentence:
        multiplier *= 1.25

    # 3. lookahead
    if options.next_word:
        next_clean = lexicon.clean_word(options.next_word)
        if lexicon.is_phrase_boundary(options.next_word):
            multiplier *= 1.1
        if len(next_clean) >= 10:
            multiplier *= 1.08

    # 4. sentence position: orient, cruise, fatigue
    if options.is_first_of_sentence:
        multiplier *= 1.2
    elif options.is_after_comma:
        multiplier *= 1.12
    if 2 <= options.words_into_sentence <= 5 and not is_function:
        multiplier *= 0.95
    if options.words_into_sentence > 12:
        multiplier *= 1 + (options.words_into_sentence - 12) * 0.01

    # 5. punctuation (additive)
    if lexicon.ends_sentence(word):
        multiplier += 0.85
    elif lexicon.ends_clause(word):
        multiplier += 0.3
    elif lexicon.ends_dash(word):
        multiplier += 0.4

    # 6. markers
    if not options.is_first_of_sentence and lexicon.starts_upper(word):
        multiplier *= 1.15
    if lexicon.has_digit(word):
        multiplier += 0.35
    if lexicon.is_all_digits(word):
        multiplier += 0.15
    if lexicon.starts_quote(word):
        multiplier *= 1.1

    # 7. breathing wave and micro-texture
    breath_wave = math.sin(options.word_position * 0.4) * 0.05
    micro_variation = (rng.random() - 0.5) * 0.06
    multiplier *= 1 + breath_wave + micro_variation

    return base * multiplier * _chunk_factor(options.chunk_size)


def sentence_context(tokens: Sequence[str], index: int, **overrides) -> DelayOptions:
    """
    Build the ``DelayOptions`` for ``tokens[index]`` from its neighbours.

    Extra keyword arguments (``context_mode``, ``chunk_size``, ...) are passed
    through to ``DelayOptions``.
    """
    prev_word = tokens[index - 1] if 0 < index <= len(tokens) else ""
    next_word = tokens[index + 1] if 0 <= index < len(tokens) - 1 else ""

    words_into_sentence = 0
    for i in range(min(index, len(tokens)) - 1, -1, -1):
        if lexicon.ends_sentence(tokens[i]):
            break
        words_into_sentence += 1

    return DelayOptions(
        word_position=index,
        is_first_of_sentence=index == 0 or lexicon.ends_sentence(prev_word),
        is_after_comma=lexicon.ends_clause(prev_word),
        words_into_sentence=words_into_sentence,
        next_word=next_word,
        **overrides,
    )


def playback_delay(
    tokens: Sequence[str],
    paragraph_starts: Collection[int],
    index: int,
    wpm: float,
    *,
    context_mode: bool = False,
    speed_multiplier: float = 1.0,
    chunk_size: int = 1,
    spotlight: bool = False,
    rng: Optional[RandomSource] = None,
) -> float:
    """
    Delay before advancing past ``tokens[index]`` during playback.

    Spotlight mode (context view only) uses constant timing so it stays in
    step with a linear sweep. Paragraph starts after the first token get an
    extra pause.
    """
    word = tokens[index] if 0 <= index < len(tokens) else ""

    if context_mode and spotlight:
        delay = base_delay(wpm) / (speed_multiplier or 1.0) * _chunk_factor(chunk_size)
    else:
        options = sentence_context(
            tokens,
            index,
            context_mode=context_mode,
            speed_multiplier=speed_multiplier,
            chunk_size=chunk_size,
        )
        delay = calculate_word_delay(word, wpm, options, rng)

    if index > 0 and index in paragraph_starts:
        delay *= PARAGRAPH_PAUSE
    return delay
