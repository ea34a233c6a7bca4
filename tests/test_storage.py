"""
Journal Storage Tests
=====================

INVARIANTS TESTED:
1. Append N entries, reload -> N identical entries in insertion order
2. Missing or corrupt journal -> empty history, not an error
3. A torn trailing line is skipped and does not swallow later appends
4. Write failures surface as StorageError
5. Document export is atomic and reloadable
"""

import errno
import json
import os

import pytest

from fractal_journal.contracts.base import ErrorCode, StorageError
from fractal_journal.contracts.events import JournalEntry, ObserverSnapshot, TurnContext
from fractal_journal.storage import (
    FileJournalBackend, InMemoryJournalBackend, StorageConfig,
    create_backend, export_document, load_document,
)
from tests.fixtures import MYSTIC, REALIST, make_turn


def make_entries(count):
    entries = []
    for i in range(count):
        observer = REALIST if i % 2 == 0 else MYSTIC
        entries.append(JournalEntry(
            turn=make_turn(entropy=0.1 + i * 0.37, delta_o=1.0 + i / 7, turn_id=f"turn-{i:06d}"),
            context=TurnContext(
                affinity=1.0 if i == 0 else 0.7,
                interference="No interference detected.",
                previous_observer=None if i == 0 else "Grounded Realist",
            ),
            observer=ObserverSnapshot.of(observer),
        ))
    return entries


class TestFileJournalBackend:

    def test_round_trip_preserves_order_and_fields(self, tmp_path):
        backend = FileJournalBackend(tmp_path / "journal.jsonl")
        entries = make_entries(5)
        for entry in entries:
            backend.append(entry)

        reloaded = FileJournalBackend(tmp_path / "journal.jsonl").load()
        assert reloaded == entries

    def test_one_record_per_line(self, tmp_path):
        path = tmp_path / "journal.jsonl"
        backend = FileJournalBackend(path)
        for entry in make_entries(3):
            backend.append(entry)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 3
        record = json.loads(lines[0])
        assert record["metrics"]["entropy"] == pytest.approx(0.1)
        assert record["observer"]["symbol"] == "🧱"
        assert record["context"]["previous_observer"] is None

    def test_missing_file_is_empty_history(self, tmp_path):
        assert FileJournalBackend(tmp_path / "nope.jsonl").load() == []

    def test_corrupt_file_is_empty_history(self, tmp_path):
        path = tmp_path / "journal.jsonl"
        path.write_text("this is not json\n{\"input\": 3}\n", encoding="utf-8")

        backend = FileJournalBackend(path)
        assert backend.load() == []
        assert backend.skipped_lines == 2

    def test_torn_tail_is_skipped_and_isolated(self, tmp_path):
        path = tmp_path / "journal.jsonl"
        backend = FileJournalBackend(path)
        first, second = make_entries(2)
        backend.append(first)
        with open(path, "a", encoding="utf-8") as f:
            f.write('{"input": "half a rec')

        assert backend.load() == [first]

        backend.append(second)
        assert backend.load() == [first, second]
        assert backend.skipped_lines == 1

    def test_failed_sync_rolls_back_line(self, tmp_path, monkeypatch):
        path = tmp_path / "journal.jsonl"
        backend = FileJournalBackend(path)
        first, second = make_entries(2)
        backend.append(first)
        before = path.read_bytes()

        def broken_fsync(fd):
            raise OSError(errno.EIO, "I/O error")

        monkeypatch.setattr(os, "fsync", broken_fsync)
        with pytest.raises(StorageError) as exc:
            backend.append(second)

        assert exc.value.code == ErrorCode.WRITE_FAILED
        assert path.read_bytes() == before
        assert backend.load() == [first]

    def test_invalid_utf8_line_is_skipped(self, tmp_path):
        path = tmp_path / "journal.jsonl"
        backend = FileJournalBackend(path)
        entry = make_entries(1)[0]
        backend.append(entry)
        good = path.read_bytes()
        path.write_bytes(good.replace(b"hello", b"hel\xfflo") + good)

        assert backend.load() == [entry]
        assert backend.skipped_lines == 1

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        backend = FileJournalBackend(blocker / "journal.jsonl")

        with pytest.raises(StorageError) as exc:
            backend.append(make_entries(1)[0])
        assert exc.value.code == ErrorCode.WRITE_FAILED


class TestInMemoryJournalBackend:

    def test_round_trip(self):
        backend = InMemoryJournalBackend()
        entries = make_entries(3)
        for entry in entries:
            backend.append(entry)
        assert backend.load() == entries

    def test_load_returns_copy(self):
        backend = InMemoryJournalBackend()
        backend.append(make_entries(1)[0])
        backend.load().clear()
        assert len(backend.load()) == 1


class TestDocumentExport:

    def test_export_and_reload(self, tmp_path):
        entries = make_entries(4)
        path = export_document(entries, tmp_path / "journal.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data.keys()) == ["journal"]
        assert len(data["journal"]) == 4
        assert load_document(path) == entries

    def test_export_leaves_no_temp_files(self, tmp_path):
        export_document(make_entries(2), tmp_path / "journal.json")
        assert [p.name for p in tmp_path.iterdir()] == ["journal.json"]

    def test_export_replaces_previous_document(self, tmp_path):
        target = tmp_path / "journal.json"
        export_document(make_entries(3), target)
        export_document(make_entries(1), target)
        assert len(load_document(target)) == 1

    def test_load_missing_document(self, tmp_path):
        assert load_document(tmp_path / "absent.json") == []


class TestCreateBackend:

    def test_file_backend_per_timeline(self, tmp_path):
        config = StorageConfig(backend_type="file", storage_dir=str(tmp_path))
        backend = create_backend(config, 2)
        assert isinstance(backend, FileJournalBackend)
        assert backend.path == tmp_path / "symbolic_journal_timeline2.jsonl"

    def test_memory_backend(self):
        assert isinstance(create_backend(StorageConfig(backend_type="memory"), 1), InMemoryJournalBackend)
