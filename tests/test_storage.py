"""Tests for the line codec and the flat-file store."""

import logging
import os
from datetime import date

import pytest

from ironlist.entry import Entry
from ironlist.storage import (
    EntryLineFormat, MalformedLineError, Storage, sort_entries, split_fields,
)


class TestSplitFields:
    """Test field tokenization."""

    def test_tabs_separate(self):
        assert split_fields("2025-01-01\tTask\ta,b") == ["2025-01-01", "Task", "a,b"]

    def test_four_spaces_separate(self):
        assert split_fields("2025-01-01    Task    a,b") == ["2025-01-01", "Task", "a,b"]

    def test_three_spaces_do_not_separate(self):
        assert split_fields("2025-01-01   Task") == ["2025-01-01   Task"]

    def test_long_space_runs_and_mixed_separators(self):
        assert split_fields("2025-01-01        Call   mom\t  family ") == [
            "2025-01-01", "Call   mom", "family",
        ]

    def test_empty_fields_dropped(self):
        assert split_fields("2025-01-01\t\t\tTask\t") == ["2025-01-01", "Task"]


class TestEntryLineFormat:
    """Test parsing and formatting of single lines."""

    def test_parse_full_line(self):
        entry = EntryLineFormat.from_line("2025-01-10    Buy milk    home, errand ,\n")

        assert entry == Entry(date(2025, 1, 10), "Buy milk", ["home", "errand"])

    def test_parse_without_tags(self):
        entry = EntryLineFormat.from_line("2025-01-10\tBuy milk")

        assert entry.tags == []

    @pytest.mark.parametrize("line", [
        "",
        "2025-01-10",
        "not-a-date\tTask",
        "2025-1-10\tTask",
        "2025-02-30\tTask",
        "2025-01-10   Task with three spaces",
    ])
    def test_rejects_malformed(self, line):
        assert EntryLineFormat.from_line(line) is None

    def test_parse_or_raise(self):
        with pytest.raises(MalformedLineError) as exc_info:
            EntryLineFormat.parse_or_raise("garbage")
        assert exc_info.value.line == "garbage"

    def test_format_is_tab_separated(self):
        entry = Entry(date(2025, 1, 10), "Buy milk", ["home", "errand"])

        assert EntryLineFormat.to_line(entry) == "2025-01-10\tBuy milk\thome,errand"

    def test_format_without_tags_has_no_trailing_separator(self):
        entry = Entry(date(2025, 1, 10), "Buy milk")

        assert EntryLineFormat.to_line(entry) == "2025-01-10\tBuy milk"

    def test_round_trip(self):
        entry = Entry(date(2024, 2, 29), "Leap   day", ["Work", "x"])

        assert EntryLineFormat.from_line(EntryLineFormat.to_line(entry)) == entry


class TestStorage:
    """Test loading and writing the task file."""

    def test_load_keeps_file_order(self, todo_file):
        entries = Storage(todo_file).load()

        assert [e.description for e in entries] == ["Buy milk", "Pay rent", "Write report"]

    def test_load_sorted(self, todo_file):
        entries = Storage(todo_file).load_sorted()

        assert [e.date.day for e in entries] == [5, 7, 10]

    def test_sort_is_stable(self):
        day = date(2025, 3, 1)
        entries = [Entry(date(2025, 4, 1), "late"), Entry(day, "first"), Entry(day, "second")]

        assert [e.description for e in sort_entries(entries)] == ["first", "second", "late"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Storage(tmp_path / "missing.txt").load()

    def test_malformed_lines_are_skipped_and_logged(self, tmp_path, caplog):
        path = tmp_path / "todo.txt"
        path.write_text("2025-01-01\tGood\nbad line\n\n2025-01-02\tAlso good\n", encoding="utf-8")
        storage = Storage(path)

        with caplog.at_level(logging.WARNING, logger="ironlist"):
            entries = storage.load()

        assert [e.description for e in entries] == ["Good", "Also good"]
        assert storage.skipped == [(2, "bad line"), (3, "")]
        assert "Skipping malformed line 2" in caplog.text

    def test_undecodable_line_is_skipped(self, tmp_path, caplog):
        path = tmp_path / "todo.txt"
        path.write_bytes(b"2025-01-01\tGood\n2025-01-02\t\xff\xfe\n")

        with caplog.at_level(logging.ERROR, logger="ironlist"):
            entries = Storage(path).load()

        assert len(entries) == 1
        assert "Error reading line 2" in caplog.text

    def test_append_normalizes_and_creates_parents(self, tmp_path):
        path = tmp_path / "nested" / "todo.txt"
        storage = Storage(path)

        entry = storage.append("2025-01-10    Buy milk    home,errand")

        assert entry.tags == ["home", "errand"]
        assert path.read_text(encoding="utf-8") == "2025-01-10\tBuy milk\thome,errand\n"

    def test_append_rejects_malformed_without_writing(self, tmp_path):
        path = tmp_path / "todo.txt"

        with pytest.raises(MalformedLineError):
            Storage(path).append("tomorrow buy milk")
        assert not path.exists()

    def test_rewrite_replaces_contents(self, todo_file):
        storage = Storage(todo_file)
        entries = storage.load_sorted()
        entries[0].description = "Pay rent early"

        storage.rewrite(entries)

        assert todo_file.read_text(encoding="utf-8") == (
            "2025-01-05\tPay rent early\thome,complete\n"
            "2025-01-07\tWrite report\twork\n"
            "2025-01-10\tBuy milk\thome,errand\n"
        )
        assert not [p for p in os.listdir(todo_file.parent) if p.endswith(".tmp")]
