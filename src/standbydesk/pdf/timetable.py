"""Per-page timetable parsing and weekly schedule assembly."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from standbydesk.model import TextFragment, WeeklyFreeMatrix
from standbydesk.settings import DEFAULT_SETTINGS, Settings

from .cells import resolve_free_periods
from .fragments import DocumentLike, iter_page_fragments
from .grid_header import HeaderDetection, detect_header
from .person_label import identify_person
from .spatial_index import FragmentIndex

LOGGER = logging.getLogger(__name__)

SKIP_NO_HEADER = "no_header"
SKIP_NO_PERSON = "no_person"


class DuplicatePolicy(str, Enum):
    """How to treat a person whose name appears on more than one page."""

    KEEP = "keep"
    MERGE = "merge"
    FIRST = "first"


@dataclass(frozen=True, slots=True)
class SkippedPage:
    page_index: int
    reason: str


@dataclass(slots=True)
class PageParse:
    """Outcome of parsing one page: a schedule or a skip reason."""

    page_index: int
    schedule: Optional[WeeklyFreeMatrix] = None
    header: Optional[HeaderDetection] = None
    skipped: Optional[SkippedPage] = None


@dataclass(slots=True)
class ExtractionResult:
    schedules: List[WeeklyFreeMatrix] = field(default_factory=list)
    skipped: List[SkippedPage] = field(default_factory=list)
    pages_total: int = 0
    duplicates: List[str] = field(default_factory=list)

    @property
    def pages_parsed(self) -> int:
        return self.pages_total - len(self.skipped)


def parse_page(
    page_index: int,
    fragments: Sequence[TextFragment],
    settings: Settings = DEFAULT_SETTINGS,
) -> PageParse:
    """Parse one page's fragments into a ``WeeklyFreeMatrix`` when possible."""

    index = FragmentIndex.build(fragments)
    header = detect_header(index, settings.layout, settings.weekdays, settings.periods)
    if header is None:
        return PageParse(page_index=page_index, skipped=SkippedPage(page_index, SKIP_NO_HEADER))

    person = identify_person(index, header.header_y, settings.layout)
    if person is None:
        return PageParse(
            page_index=page_index,
            header=header,
            skipped=SkippedPage(page_index, SKIP_NO_PERSON),
        )

    free = resolve_free_periods(index, header, settings.layout, settings.weekdays, settings.periods)
    return PageParse(
        page_index=page_index,
        schedule=WeeklyFreeMatrix(person_name=person, free_periods=free),
        header=header,
    )


def extract_schedules(
    source: DocumentLike,
    settings: Settings = DEFAULT_SETTINGS,
    *,
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP,
    on_page_skipped: Optional[Callable[[SkippedPage], None]] = None,
) -> ExtractionResult:
    """Return one weekly free-period matrix per person found in ``source``.

    Unusable pages are reported through ``on_page_skipped`` and the result;
    an unreadable document raises ``DocumentUnreadable``.
    """

    result = ExtractionResult()
    by_name: Dict[str, WeeklyFreeMatrix] = {}

    for page in iter_page_fragments(source, settings.layout):
        result.pages_total += 1
        parsed = parse_page(page.page_index, page.fragments, settings)
        schedule = parsed.schedule
        if schedule is None:
            skipped = parsed.skipped or SkippedPage(page.page_index, SKIP_NO_HEADER)
            LOGGER.info("Page %d skipped: %s", page.page_index + 1, skipped.reason)
            result.skipped.append(skipped)
            if on_page_skipped is not None:
                on_page_skipped(skipped)
            continue

        existing = by_name.get(schedule.person_name)
        if existing is None:
            by_name[schedule.person_name] = schedule
            result.schedules.append(schedule)
            LOGGER.debug("Page %d parsed for %s", page.page_index + 1, schedule.person_name)
            continue

        LOGGER.warning(
            "Page %d repeats %s (policy=%s)",
            page.page_index + 1,
            schedule.person_name,
            duplicate_policy.value,
        )
        result.duplicates.append(schedule.person_name)
        if duplicate_policy is DuplicatePolicy.KEEP:
            result.schedules.append(schedule)
        elif duplicate_policy is DuplicatePolicy.MERGE:
            _intersect_into(existing, schedule, settings.weekdays)

    return result


def _intersect_into(target: WeeklyFreeMatrix, other: WeeklyFreeMatrix, weekdays: Sequence[str]) -> None:
    for day in weekdays:
        if day not in target.free_periods and day not in other.free_periods:
            continue
        mine = set(target.free_periods.get(day, ()))
        theirs = set(other.free_periods.get(day, ()))
        target.free_periods[day] = sorted(mine & theirs)


__all__ = [
    "DuplicatePolicy",
    "ExtractionResult",
    "PageParse",
    "SKIP_NO_HEADER",
    "SKIP_NO_PERSON",
    "SkippedPage",
    "extract_schedules",
    "parse_page",
]
