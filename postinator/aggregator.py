"""Turn raw time-tracking records into the ranked list shown on a stats image."""
from __future__ import annotations

import calendar
import logging
import re
import string
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .constants import (
    FALLBACK_COLOR,
    MAX_STAT_ITEMS,
    MIN_CAPTION_YEAR,
    MONTHS,
    TOP_ITEMS_WITH_OTHER,
    Color,
)
from .errors import DateRangeUnparsable
from .models import ProjectMapping, RawUsageRecord, StatItem

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"#[0-9A-Fa-f]{6}")
_YEAR_RE = re.compile(r"(\d{4})(?!\d)")
_TOKEN_STRIP = string.punctuation + "«»“”„—–"


def parse_hex_color(value: Optional[str]) -> Color:
    """Parse ``#RRGGBB``; anything else yields the fallback gray."""
    if not value or not _HEX_COLOR_RE.fullmatch(value):
        return FALLBACK_COLOR
    return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16), 255)


class StatsAggregator:
    """Bucket, rank and cap usage records using the configured mappings."""

    def __init__(self, mappings: Sequence[ProjectMapping], other: ProjectMapping) -> None:
        self.mappings = list(mappings)
        self.other = other

        self._display_by_alias: Dict[str, str] = {}
        self._colors: Dict[str, Color] = {}
        for mapping in self.mappings:
            self._colors[mapping.display_name] = parse_hex_color(mapping.color)
            for alias in mapping.aliases:
                self._display_by_alias[alias.casefold()] = mapping.display_name

    def resolve(self, project_name: str) -> str:
        """Return the display name a raw project name is bucketed under.

        Unmapped names are lower-cased so spellings differing only in case
        share a bucket.
        """
        return self._display_by_alias.get(project_name.casefold(), project_name.lower())

    def color_for(self, label: str) -> Color:
        return self._colors.get(label, FALLBACK_COLOR)

    def bucket(
        self, records: Iterable[RawUsageRecord], project_names: Mapping[int, str]
    ) -> Dict[str, int]:
        """Sum seconds per display name; records under one second are ignored."""
        buckets: Dict[str, int] = defaultdict(int)
        for record in records:
            if record.tracked_seconds < 1:
                continue
            raw_name = project_names.get(record.project_id)
            if raw_name is None:
                logger.warning("Unknown project id %s, bucketing under its id", record.project_id)
                raw_name = str(record.project_id)
            buckets[self.resolve(raw_name)] += record.tracked_seconds
        return {label: seconds for label, seconds in buckets.items() if seconds > 0}

    def aggregate(
        self, records: Iterable[RawUsageRecord], project_names: Mapping[int, str]
    ) -> List[StatItem]:
        """Return at most six items, largest first, with "other" last when capped."""
        ranked = sorted(
            self.bucket(records, project_names).items(),
            key=lambda entry: (-entry[1], entry[0]),
        )

        if len(ranked) <= MAX_STAT_ITEMS:
            return [StatItem(label, seconds, self.color_for(label)) for label, seconds in ranked]

        items = [
            StatItem(label, seconds, self.color_for(label))
            for label, seconds in ranked[:TOP_ITEMS_WITH_OTHER]
        ]
        other_seconds = sum(seconds for _, seconds in ranked[TOP_ITEMS_WITH_OTHER:])
        items.append(
            StatItem(self.other.display_name, other_seconds, parse_hex_color(self.other.color))
        )
        logger.debug(
            "Folded %d buckets into %r", len(ranked) - TOP_ITEMS_WITH_OTHER, self.other.display_name
        )
        return items


def total_seconds(items: Iterable[StatItem]) -> int:
    return sum(item.seconds for item in items)


# ------------------------------------------------------------------
# Caption date range
# ------------------------------------------------------------------
def _month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def parse_caption_date_range(caption: str, today: Optional[date] = None) -> Tuple[date, date]:
    """Derive the reporting period named in a caption.

    A month name selects that month (of the named year, or the current one),
    a lone year selects the whole year, and anything else selects the
    current month.
    """
    if caption is None or not caption.strip():
        raise DateRangeUnparsable("caption is empty", stage="dates")

    today = today or date.today()
    month: Optional[int] = None
    year: Optional[int] = None

    for raw_token in caption.casefold().split():
        token = raw_token.strip(_TOKEN_STRIP)
        if token in MONTHS:
            month = MONTHS[token]
            continue
        year_match = _YEAR_RE.match(token)
        if year_match and int(year_match.group(1)) > MIN_CAPTION_YEAR:
            year = int(year_match.group(1))

    if month is not None:
        return _month_bounds(year or today.year, month)
    if year is not None:
        return date(year, 1, 1), date(year, 12, 31)
    return _month_bounds(today.year, today.month)
