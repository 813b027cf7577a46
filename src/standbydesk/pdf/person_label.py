"""Person name resolution from the text above a timetable header."""

from __future__ import annotations

import re
from typing import Optional

from standbydesk.settings import DEFAULT_SETTINGS, LayoutTolerances

from .spatial_index import FragmentIndex

_BARE_NUMBER_RE = re.compile(r"^\d+$")


def is_boilerplate(text: str, tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout) -> bool:
    """Return ``True`` for organisation names, week markers and bare numbers."""

    if not text or text in tolerances.stop_tokens:
        return True
    if any(token in text for token in tolerances.stop_substrings):
        return True
    return bool(_BARE_NUMBER_RE.match(text))


def identify_person(
    index: FragmentIndex,
    header_y: float,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> Optional[str]:
    """Return the topmost non-boilerplate text above the header band."""

    best: Optional[str] = None
    best_y = float("-inf")
    for fragment in index.above(header_y + tolerances.header_buffer):
        if is_boilerplate(fragment.text, tolerances):
            continue
        if best is None or fragment.y > best_y:
            best = fragment.text
            best_y = fragment.y
    return best


__all__ = ["identify_person", "is_boilerplate"]
