"""Tests for aggregator module."""

from __future__ import annotations

from datetime import date

import pytest

from postinator.aggregator import (
    StatsAggregator,
    parse_caption_date_range,
    parse_hex_color,
    total_seconds,
)
from postinator.constants import FALLBACK_COLOR
from postinator.errors import DateRangeUnparsable
from postinator.models import ProjectMapping, RawUsageRecord, StatItem, format_duration

OTHER = ProjectMapping(display_name="other", color="#D35400")


def records(*pairs: tuple[int, int]) -> list[RawUsageRecord]:
    """Build records from ``(project_id, seconds)`` pairs."""
    return [RawUsageRecord(owner_id=1, project_id=pid, tracked_seconds=sec) for pid, sec in pairs]


@pytest.fixture
def aggregator() -> StatsAggregator:
    mappings = [
        ProjectMapping("writing", "#F2C94C", ("Novel", "blog posts")),
        ProjectMapping("reading", "#27AE60", ("Books",)),
    ]
    return StatsAggregator(mappings, OTHER)


class TestParseHexColor:
    def test_valid_color(self) -> None:
        assert parse_hex_color("#FF00FF") == (255, 0, 255, 255)

    def test_lowercase_digits(self) -> None:
        assert parse_hex_color("#0a0b0c") == (10, 11, 12, 255)

    @pytest.mark.parametrize("value", ["FF00FF", "#FFF", "#GG0000", "", None, "#FF00FF00"])
    def test_malformed_values_use_fallback(self, value: str) -> None:
        assert parse_hex_color(value) == FALLBACK_COLOR == (128, 128, 128, 255)


class TestFormatDuration:
    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "00:00"),
            (59, "00:00"),
            (60, "00:01"),
            (1800, "00:30"),
            (3599, "00:59"),
            (5400, "01:30"),
            (100 * 3600 + 61, "100:01"),
        ],
    )
    def test_truncates_to_minutes(self, seconds: int, expected: str) -> None:
        assert format_duration(seconds) == expected


class TestAggregate:
    def test_aliases_match_case_insensitively(self, aggregator: StatsAggregator) -> None:
        names = {1: "NOVEL", 2: "Blog Posts", 3: "books"}
        items = aggregator.aggregate(records((1, 600), (2, 600), (3, 300)), names)

        assert [(i.label, i.seconds) for i in items] == [("writing", 1200), ("reading", 300)]
        assert items[0].color == (242, 201, 76, 255)

    def test_unmapped_project_lowercased_and_gray(self, aggregator: StatsAggregator) -> None:
        items = aggregator.aggregate(records((5, 120)), {5: "Gym"})
        assert items == [StatItem("gym", 120, FALLBACK_COLOR)]

    def test_unmapped_names_differing_in_case_share_bucket(self, aggregator: StatsAggregator) -> None:
        items = aggregator.aggregate(records((5, 120), (6, 60)), {5: "Gym", 6: "GYM"})
        assert [(i.label, i.seconds) for i in items] == [("gym", 180)]

    def test_unmapped_name_equal_to_display_name_uses_mapping_color(
        self, aggregator: StatsAggregator
    ) -> None:
        items = aggregator.aggregate(records((5, 120)), {5: "reading"})
        assert items[0].color == (39, 174, 96, 255)

    def test_unknown_project_id_bucketed_under_id(self, aggregator: StatsAggregator) -> None:
        items = aggregator.aggregate(records((42, 90)), {})
        assert items[0].label == "42"

    def test_zero_second_records_create_no_buckets(self, aggregator: StatsAggregator) -> None:
        items = aggregator.aggregate(records((1, 0), (5, 0), (6, 30)), {1: "novel", 5: "gym", 6: "java"})
        assert [i.label for i in items] == ["java"]

    def test_empty_input_gives_empty_list(self, aggregator: StatsAggregator) -> None:
        assert aggregator.aggregate([], {}) == []

    def test_sorted_descending_with_label_tie_break(self, aggregator: StatsAggregator) -> None:
        names = {1: "b", 2: "a", 3: "c"}
        items = aggregator.aggregate(records((1, 100), (2, 100), (3, 500)), names)
        assert [i.label for i in items] == ["c", "a", "b"]

    def test_six_buckets_emitted_without_other(self, aggregator: StatsAggregator) -> None:
        names = {i: f"p{i}" for i in range(6)}
        items = aggregator.aggregate(records(*[(i, (i + 1) * 60) for i in range(6)]), names)
        assert len(items) == 6
        assert "other" not in [i.label for i in items]

    def test_eight_buckets_fold_into_other(self, aggregator: StatsAggregator) -> None:
        names = {i: f"p{i}" for i in range(8)}
        secs = [100, 900, 300, 800, 200, 700, 600, 500]
        items = aggregator.aggregate(records(*enumerate(secs)), names)

        assert len(items) == 6
        assert [i.seconds for i in items[:5]] == [900, 800, 700, 600, 500]
        assert items[-1].label == "other"
        assert items[-1].seconds == 300 + 200 + 100
        assert items[-1].color == (211, 84, 0, 255)

    def test_other_is_last_even_when_largest(self, aggregator: StatsAggregator) -> None:
        names = {i: f"p{i}" for i in range(10)}
        secs = [10, 10, 10, 10, 10, 9, 9, 9, 9, 9]
        items = aggregator.aggregate(records(*enumerate(secs)), names)
        assert items[-1].label == "other"
        assert items[-1].seconds == 45 > items[0].seconds

    def test_conservation_of_seconds(self, aggregator: StatsAggregator) -> None:
        names = {i: f"p{i}" for i in range(12)}
        names.update({20: "novel", 21: "blog posts"})
        raw = records(*[(i, i * 37 + 1) for i in range(12)], (20, 61), (21, 3599), (3, 0), (4, 7))

        items = aggregator.aggregate(raw, names)

        assert total_seconds(items) == sum(r.tracked_seconds for r in raw if r.tracked_seconds >= 1)
        assert all(i.color[3] == 255 for i in items)

    def test_end_to_end_example(self) -> None:
        agg = StatsAggregator([], OTHER)
        items = agg.aggregate(records((1, 1800), (2, 3600)), {1: "writing", 2: "reading"})

        assert [(i.label, i.duration_text) for i in items] == [("reading", "01:00"), ("writing", "00:30")]
        assert format_duration(total_seconds(items)) == "01:30"


class TestParseCaptionDateRange:
    TODAY = date(2024, 3, 15)

    def test_month_in_current_year(self) -> None:
        assert parse_caption_date_range("ИЮНЬ", self.TODAY) == (date(2024, 6, 1), date(2024, 6, 30))

    def test_month_is_case_insensitive(self) -> None:
        assert parse_caption_date_range("мой июнь", self.TODAY) == (date(2024, 6, 1), date(2024, 6, 30))

    def test_month_with_year(self) -> None:
        result = parse_caption_date_range("ФЕВРАЛЬ 2023", self.TODAY)
        assert result == (date(2023, 2, 1), date(2023, 2, 28))

    def test_leap_february(self) -> None:
        assert parse_caption_date_range("2024 февраль", self.TODAY)[1] == date(2024, 2, 29)

    def test_cyrillic_november_matches(self) -> None:
        result = parse_caption_date_range("НОЯБРЬ", self.TODAY)
        assert result == (date(2024, 11, 1), date(2024, 11, 30))

    def test_year_only(self) -> None:
        assert parse_caption_date_range("2021", self.TODAY) == (date(2021, 1, 1), date(2021, 12, 31))

    def test_years_up_to_2000_ignored(self) -> None:
        assert parse_caption_date_range("1999", self.TODAY) == (date(2024, 3, 1), date(2024, 3, 31))

    @pytest.mark.parametrize("caption", ["июнь 2022г", "июнь 2022г.", "Июнь, 2022 г."])
    def test_year_with_suffix(self, caption: str) -> None:
        assert parse_caption_date_range(caption, self.TODAY) == (date(2022, 6, 1), date(2022, 6, 30))

    def test_five_digit_number_is_not_a_year(self) -> None:
        assert parse_caption_date_range("20225", self.TODAY) == (date(2024, 3, 1), date(2024, 3, 31))

    def test_punctuation_around_tokens(self) -> None:
        assert parse_caption_date_range("«Май», 2022!", self.TODAY) == (date(2022, 5, 1), date(2022, 5, 31))

    def test_no_tokens_defaults_to_current_month(self) -> None:
        assert parse_caption_date_range("hello world", self.TODAY) == (date(2024, 3, 1), date(2024, 3, 31))

    @pytest.mark.parametrize("caption", ["", "   ", "\n\t"])
    def test_blank_caption_rejected(self, caption: str) -> None:
        with pytest.raises(DateRangeUnparsable):
            parse_caption_date_range(caption, self.TODAY)

    def test_defaults_to_real_today(self) -> None:
        start, end = parse_caption_date_range("anything")
        today = date.today()
        assert start == date(today.year, today.month, 1)
        assert end.month == today.month and end >= start
