"""PyMuPDF text extraction into positioned timetable fragments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple, Union

import fitz  # type: ignore

from standbydesk.errors import DocumentUnreadable
from standbydesk.model import TextFragment
from standbydesk.settings import DEFAULT_SETTINGS, LayoutTolerances

LOGGER = logging.getLogger(__name__)

Word = Tuple[float, float, float, float, str]

DocumentLike = Union[str, Path, bytes, "fitz.Document"]


@dataclass(slots=True)
class PageFragments:
    """All text fragments of one page in upward-Y page coordinates."""

    page_index: int
    width: float
    height: float
    fragments: List[TextFragment]


def open_document(source: DocumentLike) -> "fitz.Document":
    """Open ``source`` as a PDF, raising ``DocumentUnreadable`` on failure."""

    if isinstance(source, fitz.Document):
        return source
    try:
        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(str(Path(source).expanduser()), filetype="pdf")
    except (RuntimeError, ValueError, OSError) as exc:
        raise DocumentUnreadable(f"Cannot open timetable PDF: {exc}") from exc


def iter_page_fragments(
    source: DocumentLike,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> Iterator[PageFragments]:
    """Yield ``PageFragments`` for every page of ``source`` in page order."""

    doc = open_document(source)
    close_doc = doc is not source
    try:
        for page_index in range(doc.page_count):
            try:
                page = doc.load_page(page_index)
                raw_words = page.get_text("words")
            except RuntimeError as exc:
                raise DocumentUnreadable(f"Cannot read page {page_index + 1}: {exc}") from exc
            rect = page.rect
            fragments = join_words(raw_words, float(rect.y1), tolerances.word_join_gap)
            LOGGER.debug("Page %d: %d words -> %d fragments", page_index + 1, len(raw_words), len(fragments))
            yield PageFragments(
                page_index=page_index,
                width=float(rect.width),
                height=float(rect.height),
                fragments=fragments,
            )
    finally:
        if close_doc:
            doc.close()


def join_words(raw_words: Sequence[Sequence[object]], page_bottom: float, gap_ratio: float) -> List[TextFragment]:
    """Merge MuPDF words sharing a text line into fragments.

    Words on the same ``(block, line)`` are joined while the horizontal gap
    stays below ``gap_ratio`` times the word height, so a two-word name stays
    whole while widely spaced column headers remain separate.
    """

    fragments: List[TextFragment] = []
    current: List[Word] = []
    current_key: Tuple[int, int] | None = None

    def flush() -> None:
        if current:
            fragment = _fragment_from_words(current, page_bottom)
            if fragment is not None:
                fragments.append(fragment)
            current.clear()

    for entry in raw_words:
        if len(entry) < 5:
            continue
        text = str(entry[4]).strip()
        if not text:
            continue
        x0, y0, x1, y1 = map(float, entry[0:4])
        key = (int(entry[5]), int(entry[6])) if len(entry) >= 7 else None  # type: ignore[arg-type]
        if current and key == current_key:
            prev = current[-1]
            height = max(prev[3] - prev[1], y1 - y0, 1.0)
            if x0 - prev[2] <= height * gap_ratio:
                current.append((x0, y0, x1, y1, text))
                continue
        flush()
        current_key = key
        current.append((x0, y0, x1, y1, text))
    flush()
    return fragments


def _fragment_from_words(words: Sequence[Word], page_bottom: float) -> TextFragment | None:
    text = " ".join(word[4] for word in words).strip()
    if not text:
        return None
    x0 = min(word[0] for word in words)
    top = min(word[1] for word in words)
    bottom = max(word[3] for word in words)
    center_y = (top + bottom) / 2.0
    return TextFragment(text=text, x=x0, y=page_bottom - center_y)


__all__ = ["PageFragments", "iter_page_fragments", "join_words", "open_document"]
