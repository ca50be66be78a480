"""
Plain text and heading outlines from .txt, .pdf and .epub files.

Outline positions are raw word offsets into the returned text, found by
searching for each bookmark title from the start of the page (PDF) or spine
document (EPUB) it points at.
"""

from __future__ import annotations

import logging
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .anchoring import OUTLINE_PROFILE, locate_title
from .config import ALLOWED_EXTENSIONS
from .structure import ChapterRecord

logger = logging.getLogger(__name__)

MAX_OUTLINE_LEVEL = 2

BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "pre", "tr", "br"]


class ExtractionError(RuntimeError):
    pass


@dataclass
class ExtractedText:
    text: str
    outline: List[ChapterRecord] = field(default_factory=list)


def normalize_whitespace(text: str) -> str:
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n[ \t]+", "\n", text)
    text = re.sub(r"[ \t]{2,}", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _place_outline_entry(title: str, words: Sequence[str], start: int, level: int) -> ChapterRecord:
    found = locate_title(title, words, start, OUTLINE_PROFILE)
    if found is None:
        logger.debug("Outline entry %r not found, using offset %d", title[:25], start)
        found = start
    return ChapterRecord(title=title, word_index=found, level=min(level, MAX_OUTLINE_LEVEL))


# -------------------------------
# TXT
# -------------------------------
def extract_text_from_txt(path: str) -> ExtractedText:
    try:
        raw = Path(path).read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        raise ExtractionError(f"Could not read text file: {exc}") from exc
    return ExtractedText(normalize_whitespace(raw))


# -------------------------------
# PDF
# -------------------------------
def _pdf_outline(reader: PdfReader, words: Sequence[str], page_word_counts: Sequence[int]) -> List[ChapterRecord]:
    entries: List[ChapterRecord] = []

    def walk(items: list, level: int) -> None:
        for item in items:
            if isinstance(item, list):
                walk(item, level + 1)
                continue
            page_index = reader.get_destination_page_number(item)
            page_number = 1 if page_index is None or page_index < 0 else page_index + 1
            # Start one page early; extracted headings often sit at the end of the previous page.
            start = page_word_counts[max(0, page_number - 2)] if page_number > 1 else 0
            entries.append(_place_outline_entry(str(item.title), words, start, level))

    try:
        walk(reader.outline, 0)
    except (PdfReadError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Could not read PDF outline: %s", exc)
        return []
    return entries


def extract_text_from_pdf(path: str) -> ExtractedText:
    try:
        reader = PdfReader(path)
    except (PdfReadError, OSError) as exc:
        raise ExtractionError(f"Could not open PDF: {exc}") from exc

    pages_text: List[str] = []
    page_word_counts: List[int] = [0]
    total = 0
    for i, page in enumerate(reader.pages):
        try:
            txt = page.extract_text() or ""
        except Exception as exc:
            logger.warning("Skipping unreadable PDF page %d: %s", i + 1, exc)
            txt = ""
        pages_text.append(txt)
        total += len(txt.split())
        page_word_counts.append(total)

    text = normalize_whitespace("\n\n".join(pages_text))
    outline = _pdf_outline(reader, text.split(), page_word_counts)
    logger.info("PDF loaded: %d pages, %d words, %d outline entries", len(reader.pages), total, len(outline))
    return ExtractedText(text, outline)


# -------------------------------
# EPUB
# -------------------------------
def _html_to_text(content: bytes) -> str:
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup(["head", "script", "style", "nav"]):
        tag.decompose()
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_after("\n\n")
    return normalize_whitespace(soup.get_text())


def _spine_documents(book: epub.EpubBook) -> List[epub.EpubItem]:
    items: List[epub.EpubItem] = []
    for idref, _linear in book.spine:
        item = book.get_item_with_id(idref)
        if item is not None and item.get_type() == ebooklib.ITEM_DOCUMENT:
            items.append(item)
    if not items:
        items = list(book.get_items_of_type(ebooklib.ITEM_DOCUMENT))
    return items


def _epub_outline(toc: list, words: Sequence[str], offsets: Dict[str, int]) -> List[ChapterRecord]:
    entries: List[ChapterRecord] = []

    def walk(items: Sequence, level: int) -> None:
        for item in items:
            if isinstance(item, (tuple, list)):
                section, children = item[0], item[1]
                add(section, level)
                walk(children, level + 1)
            else:
                add(item, level)

    def add(link: object, level: int) -> None:
        title = (getattr(link, "title", None) or "").strip()
        href = (getattr(link, "href", None) or "").split("#", 1)[0]
        if not title:
            return
        start = offsets.get(href, offsets.get(Path(href).name, 0))
        entries.append(_place_outline_entry(title, words, start, level))

    walk(toc, 0)
    return entries


def extract_text_from_epub(path: str) -> ExtractedText:
    try:
        book = epub.read_epub(path)
    except (epub.EpubException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise ExtractionError(f"Invalid EPUB file: {exc}") from exc

    parts: List[str] = []
    offsets: Dict[str, int] = {}
    total = 0
    for item in _spine_documents(book):
        text = _html_to_text(item.get_content())
        offsets[item.get_name()] = total
        offsets.setdefault(Path(item.get_name()).name, total)
        if text:
            parts.append(text)
            total += len(text.split())

    text = normalize_whitespace("\n\n".join(parts))
    outline = _epub_outline(book.toc, text.split(), offsets)
    logger.info("EPUB loaded: %d documents, %d words, %d toc entries", len(parts), total, len(outline))
    return ExtractedText(text, outline)


def allowed_file(filename: str) -> bool:
    return Path(filename).suffix.lower() in ALLOWED_EXTENSIONS


def extract_text_from_file(path: str, filename: Optional[str] = None) -> ExtractedText:
    ext = Path(filename or path).suffix.lower()
    if ext == ".txt":
        return extract_text_from_txt(path)
    if ext == ".pdf":
        return extract_text_from_pdf(path)
    if ext == ".epub":
        return extract_text_from_epub(path)
    raise ExtractionError(f"Unsupported file type: {ext} (expected .txt, .pdf or .epub)")
