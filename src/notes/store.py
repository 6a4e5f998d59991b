"""NoteStore: file-per-note persistence backed by the title index.

Layout of the storage directory (default ``notes/``)::

    notes/
        notes_index.txt     title:path rows, one per save
        app.log             written by notes.logging_setup
        <sanitized>.txt     one file per note

Index rows hold paths relative to the parent of the storage directory
(``notes/My_Note.txt``).  Every operation converts I/O and format problems
into a plain result at this boundary and logs them; nothing is retried.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from notes.codec import NoteFormatError, decode_note, encode_note
from notes.config import NotesConfig
from notes.index import NoteIndex
from notes.note import DISPLAY_FORMAT, Note, now

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")

APPEND_SEPARATOR = "=== APPENDED CONTENT ==="
EXPORT_HEADER = "=== NOTES EXPORT ==="


def sanitize_filename(title: str) -> str:
    """Replace every character outside ``[A-Za-z0-9._-]`` with ``_``."""
    return _UNSAFE_CHARS_RE.sub("_", title)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ReadStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class ReadResult:
    """Outcome of :meth:`NoteStore.read`; truthy only when a note was decoded."""

    status: ReadStatus
    note: Note | None = None
    reason: str = ""

    @classmethod
    def ok(cls, note: Note) -> "ReadResult":
        return cls(ReadStatus.OK, note=note)

    @classmethod
    def not_found(cls, path: Path) -> "ReadResult":
        return cls(ReadStatus.NOT_FOUND, reason=f"Note file not found: {path}")

    @classmethod
    def failed(cls, reason: str) -> "ReadResult":
        return cls(ReadStatus.FAILED, reason=reason)

    def __bool__(self) -> bool:
        return self.status is ReadStatus.OK


@dataclass(frozen=True)
class StorageStats:
    """Note count from the index next to a raw listing of the storage directory.

    ``file_count`` and ``total_bytes`` cover every regular file in the
    directory (index, log and export files included), so they do not have to
    agree with ``note_count``.
    """

    note_count: int
    file_count: int
    total_bytes: int
    storage_dir: Path

    def to_dict(self) -> dict[str, Any]:
        return {
            "note_count": self.note_count,
            "file_count": self.file_count,
            "total_bytes": self.total_bytes,
            "storage_dir": str(self.storage_dir),
        }

    def render(self) -> str:
        return (
            "=== App Statistics ===\n"
            f"Total Notes: {self.note_count}\n"
            f"Total Files: {self.file_count}\n"
            f"Total Storage Used: {self.total_bytes} bytes\n"
            f"Notes Directory: {self.storage_dir}"
        )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class NoteStore:
    """Saves, reads, deletes and exports notes under one storage directory."""

    def __init__(
        self,
        config: NotesConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or NotesConfig()
        self.log = logger or logging.getLogger(__name__)
        self.storage_dir = self.config.storage_dir.resolve()
        self.index = NoteIndex(self.storage_dir / self.config.index_file)
        self._ensure_storage_dir()

    def _ensure_storage_dir(self) -> None:
        if not self.storage_dir.exists():
            self.storage_dir.mkdir(parents=True)
            self.log.info("Created notes directory: %s", self.storage_dir)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def path_for(self, title: str) -> Path:
        """Absolute file path for a note titled *title*."""
        return self.storage_dir / f"{sanitize_filename(title)}.txt"

    def index_path_for(self, title: str) -> str:
        """The path string recorded in the index for *title*."""
        return f"{self.storage_dir.name}/{sanitize_filename(title)}.txt"

    def _resolve(self, path: Path | str) -> Path:
        # relative paths are anchored where index rows are anchored
        return self.storage_dir.parent / path

    # ------------------------------------------------------------------
    # Save / read
    # ------------------------------------------------------------------

    def save(self, note: Note, append: bool = False) -> bool:
        """Write *note* to its file and record it in the index.

        Overwrite mode truncates the file; append mode adds a separator block
        and the encoded note after the existing content.  Either way a new
        index row is appended.
        """
        path = self.path_for(note.title)
        try:
            self._ensure_storage_dir()
            with path.open("a" if append else "w", encoding="utf-8") as fh:
                if append:
                    fh.write(f"\n{APPEND_SEPARATOR}\n")
                    fh.write(f"Appended at: {now().strftime(DISPLAY_FORMAT)}\n")
                fh.write(encode_note(note))
            self.index.append(note.title, self.index_path_for(note.title))
        except OSError:
            self.log.exception("Failed to save note: %s", note.title)
            return False
        self.log.info("Note saved successfully: %s (append: %s)", path, append)
        return True

    def read(self, path: Path | str) -> ReadResult:
        """Decode the note stored at *path*.

        A missing file is ``NOT_FOUND``; an unreadable or malformed one is
        ``FAILED`` with the reason attached.
        """
        resolved = self._resolve(path)
        try:
            with resolved.open(encoding="utf-8") as fh:
                note = decode_note(fh.read())
        except FileNotFoundError:
            self.log.warning("Note file not found: %s", resolved)
            return ReadResult.not_found(resolved)
        except NoteFormatError as exc:
            self.log.error("Failed to read note: %s - %s", resolved, exc)
            return ReadResult.failed(str(exc))
        except (OSError, UnicodeDecodeError) as exc:
            self.log.exception("Failed to read note: %s", resolved)
            return ReadResult.failed(str(exc))
        self.log.info("Note read successfully: %s", resolved)
        return ReadResult.ok(note)

    def find(self, title: str) -> ReadResult:
        """Read the note stored under the file name derived from *title*."""
        return self.read(self.path_for(title))

    def read_all(self) -> list[Note]:
        """Read every note reachable through the index, in index order.

        Rows whose file is gone or undecodable are skipped, and duplicate rows
        yield the same note more than once.
        """
        notes: list[Note] = []
        try:
            entries = self.index.list_all()
        except (OSError, UnicodeDecodeError):
            self.log.exception("Failed to read notes index: %s", self.index.index_path)
            return notes
        if not entries and not self.index.index_path.exists():
            self.log.info("Notes index file not found. No notes exist yet.")
        for entry in entries:
            result = self.read(entry.path)
            if result:
                notes.append(result.note)
        return notes

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, title: str) -> bool:
        """Remove the note file for *title* and drop all of its index rows."""
        path = self.path_for(title)
        if not path.exists():
            self.log.warning("Note file does not exist: %s", title)
            return False
        try:
            path.unlink()
        except OSError:
            self.log.exception("Failed to delete note: %s", title)
            return False
        try:
            self.index.remove_all_entries_for(title)
        except (OSError, UnicodeDecodeError):
            self.log.warning("Failed to update index after removing %s", title, exc_info=True)
        self.log.info("Note deleted successfully: %s", path)
        return True

    # ------------------------------------------------------------------
    # Export / search / statistics
    # ------------------------------------------------------------------

    def export_all(self, path: Path | str) -> bool:
        """Write every note into one file; relative paths land in the storage dir."""
        notes = self.read_all()
        target = self.storage_dir / path

        parts = [
            f"{EXPORT_HEADER}\n",
            f"Export Date: {now().strftime(DISPLAY_FORMAT)}\n",
            f"Total Notes: {len(notes)}\n\n",
        ]
        for number, note in enumerate(notes, start=1):
            parts.append(f"NOTE {number}:\n{encode_note(note)}\n")

        try:
            with target.open("w", encoding="utf-8") as fh:
                fh.write("".join(parts))
        except OSError:
            self.log.exception("Failed to export notes to %s", target)
            return False
        self.log.info("Notes exported successfully to: %s", target)
        return True

    def search(self, term: str) -> list[Note]:
        """Case-insensitive substring search across title and content."""
        q = term.lower()
        return [n for n in self.read_all() if q in n.title.lower() or q in n.content.lower()]

    def statistics(self) -> StorageStats:
        note_count = len(self.read_all())
        file_count = 0
        total_bytes = 0
        if self.storage_dir.is_dir():
            for entry in self.storage_dir.iterdir():
                if not entry.is_file():
                    continue
                try:
                    size = entry.stat().st_size
                except FileNotFoundError:
                    # removed between listing and stat
                    continue
                file_count += 1
                total_bytes += size
        return StorageStats(note_count, file_count, total_bytes, self.storage_dir)
