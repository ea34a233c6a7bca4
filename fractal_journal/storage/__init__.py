"""
Journal Storage Layer

RESPONSIBILITY: Append-only persistence of journal entries, one target per timeline
ALLOWED INPUTS: Immutable JournalEntry records
OUTPUTS: Ordered entry lists, whole-collection document exports

WHAT THIS LAYER MUST NOT DO:
============================
- Compute metrics, tags or affinity
- Edit or delete an entry once written (append-only)
- Fail on a missing or corrupt journal (that is an empty history)

FAILURE POLICY:
===============
- Each append writes one JSON line, then fsyncs. If either step fails the
  file is truncated back to its previous length, so a failed append
  never leaves a record behind.
- An interrupted append can leave at most one torn trailing line. Loading
  skips lines that do not decode, parse or validate, so the earlier history
  survives unchanged.
- Any OSError on write surfaces as StorageError.
- Document exports go through a temp file and os.replace, so the target
  holds either the previous or the new document, never a truncated one.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union
import json
import os
import tempfile

from pydantic import ValidationError

from ..contracts.base import ErrorCode, StorageError
from ..contracts.events import JournalEntry
from .schema import (
    JournalDocument, JournalRecord, entry_from_record, record_from_entry
)


# =============================================================================
# STORAGE INTERFACES (Dependency Inversion)
# =============================================================================

class JournalBackend:
    """
    Abstract journal backend interface.

    Implementations can use different storage systems (memory, file)
    while keeping the same append-only semantics.
    """

    def append(self, entry: JournalEntry) -> None:
        """Persist one entry after all existing ones."""
        raise NotImplementedError

    def load(self) -> List[JournalEntry]:
        """All persisted entries in insertion order."""
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


# =============================================================================
# IN-MEMORY BACKEND (Reference Implementation)
# =============================================================================

class InMemoryJournalBackend(JournalBackend):
    """Append-only list. Suitable for testing and throwaway sessions."""

    def __init__(self):
        self._entries: List[JournalEntry] = []

    def append(self, entry: JournalEntry) -> None:
        self._entries.append(entry)

    def load(self) -> List[JournalEntry]:
        return list(self._entries)

    def describe(self) -> str:
        return "memory"


# =============================================================================
# FILE BACKEND (JSON Lines)
# =============================================================================

class FileJournalBackend(JournalBackend):
    """
    JSON Lines journal: one validated record per line.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._skipped_lines: int = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def skipped_lines(self) -> int:
        """Corrupt lines ignored by the most recent load."""
        return self._skipped_lines

    def append(self, entry: JournalEntry) -> None:
        line = record_from_entry(entry).model_dump_json()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            prefix = "\n" if self._has_torn_tail() else ""
            data = (prefix + line + "\n").encode('utf-8')
            # Unbuffered, so nothing is left to flush after a rollback
            with open(self._path, 'ab', buffering=0) as f:
                offset = f.seek(0, os.SEEK_END)
                try:
                    f.write(data)
                    os.fsync(f.fileno())
                except OSError:
                    # A failed append leaves the file as it was
                    f.truncate(offset)
                    raise
        except OSError as e:
            raise StorageError(
                ErrorCode.WRITE_FAILED, f"Could not append to journal {self._path}: {e}"
            ) from e

    def load(self) -> List[JournalEntry]:
        self._skipped_lines = 0
        try:
            with open(self._path, 'rb') as f:
                lines = f.readlines()
        except OSError:
            # Missing or unreadable journal: empty history
            return []

        entries = []
        for raw in lines:
            if not raw.strip():
                continue
            try:
                record = JournalRecord.model_validate(json.loads(raw.decode('utf-8')))
            except (UnicodeDecodeError, json.JSONDecodeError, ValidationError):
                self._skipped_lines += 1
                continue
            entries.append(entry_from_record(record))
        return entries

    def describe(self) -> str:
        return str(self._path)

    def _has_torn_tail(self) -> bool:
        """True when the file ends mid-line (an earlier write was cut short)."""
        try:
            with open(self._path, 'rb') as f:
                f.seek(0, os.SEEK_END)
                if f.tell() == 0:
                    return False
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False


# =============================================================================
# DOCUMENT EXPORT
# =============================================================================

def export_document(entries: List[JournalEntry], target: Union[str, Path]) -> Path:
    """Write the whole collection as {"journal": [...]} with an atomic rename."""
    path = Path(target)
    document = JournalDocument(journal=[record_from_entry(e) for e in entries])
    payload = json.dumps(document.model_dump(), indent=4, ensure_ascii=False)

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=path.parent, prefix=f".{path.name}.", suffix=".tmp",
            delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(
            ErrorCode.EXPORT_FAILED, f"Could not export journal document to {path}: {e}"
        ) from e

    return path


def load_document(source: Union[str, Path]) -> List[JournalEntry]:
    """Read an exported document; missing or corrupt documents are empty."""
    try:
        with open(source, 'r', encoding='utf-8') as f:
            document = JournalDocument.model_validate(json.load(f))
    except (OSError, json.JSONDecodeError, ValidationError):
        return []
    return [entry_from_record(r) for r in document.journal]


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class StorageConfig:
    """Configuration for journal storage."""
    backend_type: str = "file"  # "memory" or "file"
    storage_dir: str = "."
    journal_template: str = "symbolic_journal_timeline{timeline}.jsonl"


def create_backend(config: StorageConfig, timeline_id: int) -> JournalBackend:
    """Create the journal backend for one timeline."""
    if config.backend_type == "file":
        name = config.journal_template.format(timeline=timeline_id)
        return FileJournalBackend(Path(config.storage_dir) / name)
    return InMemoryJournalBackend()


__all__ = [
    "JournalBackend",
    "InMemoryJournalBackend",
    "FileJournalBackend",
    "export_document",
    "load_document",
    "StorageConfig",
    "create_backend",
]
