from __future__ import annotations

import re
from bisect import bisect_left, bisect_right
from typing import Collection, Iterable, Iterator, List, Pattern, Sequence, Tuple

from standbydesk.model import TextFragment


class FragmentIndex:
    """Read-only index over a page's fragments, sorted by ``y`` for range queries."""

    def __init__(self, fragments: Sequence[TextFragment]):
        self._fragments = list(fragments)
        self._rows: List[Tuple[float, int, TextFragment]] = sorted(
            ((fragment.y, order, fragment) for order, fragment in enumerate(self._fragments)),
            key=lambda item: (item[0], item[1]),
        )
        self._ys = [row[0] for row in self._rows]

    @classmethod
    def build(cls, fragments: Iterable[TextFragment]) -> "FragmentIndex":
        entries: List[TextFragment] = []
        for fragment in fragments:
            text = fragment.text.strip()
            if not text:
                continue
            if text != fragment.text:
                fragment = TextFragment(text=text, x=fragment.x, y=fragment.y)
            entries.append(fragment)
        return cls(entries)

    def __iter__(self) -> Iterator[TextFragment]:
        return iter(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def within(self, x0: float, x1: float, y0: float, y1: float) -> List[TextFragment]:
        """Return fragments with ``x0 <= x < x1`` and ``y0 <= y <= y1`` in page order."""

        lo = bisect_left(self._ys, y0)
        hi = bisect_right(self._ys, y1)
        hits = [row for row in self._rows[lo:hi] if x0 <= row[2].x < x1]
        hits.sort(key=lambda row: row[1])
        return [row[2] for row in hits]

    def above(self, y: float) -> List[TextFragment]:
        """Return fragments strictly above ``y`` in page order."""

        idx = bisect_right(self._ys, y)
        hits = sorted(self._rows[idx:], key=lambda row: row[1])
        return [row[2] for row in hits]

    def exact(self, texts: Collection[str]) -> List[TextFragment]:
        return [fragment for fragment in self._fragments if fragment.text in texts]

    def matching(self, pattern: Pattern[str] | str) -> List[Tuple[TextFragment, "re.Match[str]"]]:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        hits = []
        for fragment in self._fragments:
            match = compiled.fullmatch(fragment.text)
            if match is not None:
                hits.append((fragment, match))
        return hits


__all__ = ["FragmentIndex"]
