"""NoteIndex: the flat ``title:path`` file that maps note titles to files."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple


class IndexEntry(NamedTuple):
    title: str
    path: str


class NoteIndex:
    """Append-only index file, scanned linearly and rewritten on removal.

    Rows are never de-duplicated: saving the same title twice leaves two rows
    pointing at the same file.  Missing-file handling is the only error this
    class absorbs; any other ``OSError`` reaches the caller.
    """

    def __init__(self, index_path: Path) -> None:
        self.index_path = Path(index_path)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append(self, title: str, path: str) -> None:
        """Add one ``title:path`` row, creating the index file if absent."""
        with self.index_path.open("a", encoding="utf-8") as fh:
            fh.write(f"{title}:{path}\n")

    def remove_all_entries_for(self, title: str) -> None:
        """Rewrite the index without any row that starts with ``title:``."""
        if not self.index_path.exists():
            return
        prefix = f"{title}:"
        kept = [line for line in self._read_lines() if not line.startswith(prefix)]
        with self.index_path.open("w", encoding="utf-8") as fh:
            fh.writelines(f"{line}\n" for line in kept)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_all(self) -> list[IndexEntry]:
        """Return every well-formed row in file order.

        Blank lines and rows with no colon or more than one colon are skipped.
        """
        if not self.index_path.exists():
            return []
        entries: list[IndexEntry] = []
        for line in self._read_lines():
            if not line.strip():
                continue
            parts = line.split(":")
            if len(parts) != 2:
                continue
            entries.append(IndexEntry(parts[0], parts[1].strip()))
        return entries

    def _read_lines(self) -> list[str]:
        # only \n, \r and \r\n end a row; titles may hold other line separators
        with self.index_path.open(encoding="utf-8") as fh:
            return [line.rstrip("\n") for line in fh]
