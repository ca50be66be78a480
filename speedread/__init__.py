"""Text normalization, chapter anchoring and word pacing for RSVP speed reading."""

from .anchoring import OUTLINE_PROFILE, STANDARD_PROFILE, SearchProfile, locate_title, resolve_chapters
from .document import ProcessedText, process_text
from .pacing import DelayOptions, calculate_word_delay, playback_delay, sentence_context
from .structure import ChapterRecord, detect_chapters
from .tokenizer import TokenizedText, tokenize

__all__ = [
    "ChapterRecord",
    "DelayOptions",
    "OUTLINE_PROFILE",
    "ProcessedText",
    "STANDARD_PROFILE",
    "SearchProfile",
    "TokenizedText",
    "calculate_word_delay",
    "detect_chapters",
    "locate_title",
    "playback_delay",
    "process_text",
    "resolve_chapters",
    "sentence_context",
    "tokenize",
]
