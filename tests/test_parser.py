"""Tests for @reminder: annotation extraction."""

from __future__ import annotations

from datetime import date, time
from textwrap import dedent

from src.reminders.parser import DEFAULT_ALERT_MINUTES, ReminderRecord, parse_reminders


class TestParseReminders:
    def test_full_annotation(self) -> None:
        [r] = parse_reminders("@reminder: 2024-05-01 09:00-10:00 Dentist !15")
        assert r == ReminderRecord(
            date=date(2024, 5, 1),
            start_time=time(9, 0),
            end_time=time(10, 0),
            title="Dentist",
            alert_minutes=15,
            should_delete=False,
        )

    def test_date_only_uses_default_alert(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 Meeting")
        assert r.start_time is None
        assert r.end_time is None
        assert r.alert_minutes == DEFAULT_ALERT_MINUTES == 30
        assert r.should_delete is False

    def test_alert_and_delete_combined(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 10:00-11:00 Sync !5 !delete")
        assert r.start_time == time(10, 0)
        assert r.end_time == time(11, 0)
        assert r.title == "Sync"
        assert r.alert_minutes == 5
        assert r.should_delete is True

    def test_delete_without_alert(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 Sync !delete")
        assert r.title == "Sync"
        assert r.alert_minutes == 30
        assert r.should_delete is True

    def test_delete_marker_glued_to_title(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 Sync!delete")
        assert r.title == "Sync"
        assert r.should_delete is True

    def test_start_without_end(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 14:30 Call plumber")
        assert r.start_time == time(14, 30)
        assert r.end_time is None
        assert r.title == "Call plumber"

    def test_zero_alert_kept(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 Quiet event !0")
        assert r.alert_minutes == 0

    def test_title_trimmed(self) -> None:
        [r] = parse_reminders("@reminder: 2099-01-01 09:00   Team  lunch   \n")
        assert r.title == "Team  lunch"

    def test_preserves_document_order(self) -> None:
        text = dedent("""\
            # Notes

            @reminder: 2099-03-01 Second in time, first in text
            some prose in between
            @reminder: 2099-01-01 First in time
        """)
        titles = [r.title for r in parse_reminders(text)]
        assert titles == ["Second in time, first in text", "First in time"]

    def test_annotation_mid_line(self) -> None:
        [r] = parse_reminders("- [ ] todo @reminder: 2099-01-01 Renew passport\n")
        assert r.title == "Renew passport"

    def test_crlf_line_endings(self) -> None:
        records = parse_reminders("@reminder: 2099-01-01 A !10\r\n@reminder: 2099-01-02 B\r\n")
        assert [(r.title, r.alert_minutes) for r in records] == [("A", 10), ("B", 30)]


class TestMalformedAnnotations:
    def test_not_a_date(self) -> None:
        assert parse_reminders("@reminder: not-a-date Foo") == []

    def test_impossible_date(self) -> None:
        assert parse_reminders("@reminder: 2099-02-30 Foo") == []

    def test_impossible_time(self) -> None:
        assert parse_reminders("@reminder: 2099-01-01 25:00-26:00 Foo") == []

    def test_missing_title(self) -> None:
        assert parse_reminders("@reminder: 2099-01-01\n") == []

    def test_unknown_bang_token(self) -> None:
        assert parse_reminders("@reminder: 2099-01-01 Foo !urgent") == []

    def test_title_does_not_span_lines(self) -> None:
        assert parse_reminders("@reminder: 2099-01-01\nNext line text\n") == []

    def test_bad_line_does_not_hide_good_one(self) -> None:
        text = "@reminder: nope Foo\n@reminder: 2099-01-01 Bar\n"
        assert [r.title for r in parse_reminders(text)] == ["Bar"]

    def test_plain_text_ignored(self) -> None:
        assert parse_reminders("Nothing to see here.\nremind me later!\n") == []
