"""Unit tests for notes.store.NoteStore."""

import logging
import os
from datetime import datetime
from pathlib import Path

import pytest

from notes.codec import encode_note
from notes.config import NotesConfig
from notes.index import IndexEntry
from notes.note import Note
from notes.store import NoteStore, ReadStatus, sanitize_filename

# ---------------------------------------------------------------------------
# sanitize_filename / paths
# ---------------------------------------------------------------------------


class TestPaths:
    def test_sanitize_replaces_unsafe_characters(self):
        assert sanitize_filename("My/Note:1") + ".txt" == "My_Note_1.txt"

    def test_sanitize_keeps_safe_characters(self):
        assert sanitize_filename("a-B_9.v2") == "a-B_9.v2"

    def test_sanitize_spaces_and_unicode(self):
        assert sanitize_filename("café list") == "caf__list"

    def test_path_for(self, store: NoteStore):
        assert store.path_for("My/Note:1") == store.storage_dir / "My_Note_1.txt"

    def test_index_path_relative_to_parent(self, store: NoteStore):
        assert store.index_path_for("A b") == "notes/A_b.txt"

    def test_storage_dir_created(self, tmp_path: Path):
        target = tmp_path / "deep" / "notes"
        NoteStore(NotesConfig(storage_dir=target))
        assert target.is_dir()


# ---------------------------------------------------------------------------
# save / read
# ---------------------------------------------------------------------------


class TestSaveAndRead:
    def test_save_then_read(self, store: NoteStore):
        note = Note("Groceries", "milk\neggs")
        assert store.save(note)
        result = store.read(store.path_for("Groceries"))
        assert result.status is ReadStatus.OK
        assert result.note.title == "Groceries"
        assert result.note.content == "milk\neggs"

    def test_save_writes_encoded_block(self, store: NoteStore):
        note = Note("A", "body")
        store.save(note)
        assert store.path_for("A").read_text(encoding="utf-8") == encode_note(note)

    def test_overwrite_replaces_content(self, store: NoteStore):
        store.save(Note("A", "first"))
        store.save(Note("A", "second"))
        assert store.find("A").note.content == "second"

    def test_every_save_appends_index_row(self, store: NoteStore):
        store.save(Note("A", "first"))
        store.save(Note("A", "second"))
        assert store.index.list_all() == [IndexEntry("A", "notes/A.txt")] * 2

    def test_read_relative_index_path(self, store: NoteStore):
        store.save(Note("A", "body"))
        assert store.read("notes/A.txt").note.content == "body"

    def test_read_missing_is_not_found(self, store: NoteStore):
        result = store.read(store.storage_dir / "ghost.txt")
        assert result.status is ReadStatus.NOT_FOUND
        assert not result

    def test_read_malformed_is_failed(self, store: NoteStore):
        path = store.storage_dir / "broken.txt"
        path.write_text("just some text\n", encoding="utf-8")
        result = store.read(path)
        assert result.status is ReadStatus.FAILED
        assert "Invalid note file format" in result.reason

    def test_read_bad_timestamp_is_failed(self, store: NoteStore):
        path = store.storage_dir / "bad.txt"
        path.write_text("TITLE:x\nCREATED:soon\nMODIFIED:soon\nCONTENT:\n---END_NOTE---\n", encoding="utf-8")
        assert store.read(path).status is ReadStatus.FAILED

    def test_save_failure_returns_false(self, store: NoteStore, caplog):
        store.path_for("Blocked").mkdir()
        with caplog.at_level(logging.ERROR, logger="tests.notes"):
            assert store.save(Note("Blocked", "x")) is False
        assert "Failed to save note" in caplog.text
        assert store.index.list_all() == []


# ---------------------------------------------------------------------------
# Append mode
# ---------------------------------------------------------------------------


class TestAppendMode:
    def test_file_holds_both_blocks(self, store: NoteStore):
        first = Note("T", "original")
        store.save(first)
        store.save(Note("T", "extra"), append=True)

        text = store.path_for("T").read_text(encoding="utf-8")
        assert text.startswith(encode_note(first))
        assert "\n=== APPENDED CONTENT ===\nAppended at: " in text
        assert text.count("---END_NOTE---") == 2
        assert text.index("original") < text.index("=== APPENDED CONTENT ===") < text.index("extra")

    def test_read_yields_first_block(self, store: NoteStore):
        store.save(Note("T", "original"))
        store.save(Note("T", "extra"), append=True)
        assert store.find("T").note.content == "original"

    def test_append_adds_index_row(self, store: NoteStore):
        store.save(Note("T", "original"))
        store.save(Note("T", "extra"), append=True)
        assert len(store.index.list_all()) == 2


# ---------------------------------------------------------------------------
# read_all
# ---------------------------------------------------------------------------


class TestReadAll:
    def test_empty(self, store: NoteStore):
        assert store.read_all() == []

    def test_index_order(self, store: NoteStore):
        for title in ("b", "a", "c"):
            store.save(Note(title, title.upper()))
        assert [n.title for n in store.read_all()] == ["b", "a", "c"]

    def test_duplicate_rows_yield_duplicates(self, store: NoteStore):
        store.save(Note("A", "x"))
        store.save(Note("A", "y"))
        assert [n.content for n in store.read_all()] == ["y", "y"]

    def test_stale_rows_skipped(self, store: NoteStore):
        store.save(Note("A", "x"))
        store.save(Note("B", "y"))
        store.path_for("A").unlink()
        assert [n.title for n in store.read_all()] == ["B"]

    def test_malformed_index_line_skipped(self, store: NoteStore):
        store.save(Note("A", "x"))
        with store.index.index_path.open("a", encoding="utf-8") as fh:
            fh.write("garbage_no_colon\n")
        assert [n.title for n in store.read_all()] == ["A"]

    def test_undecodable_index_yields_nothing(self, store: NoteStore, caplog):
        store.save(Note("A", "x"))
        with store.index.index_path.open("ab") as fh:
            fh.write(b"\xff\xfe:bad\n")
        with caplog.at_level(logging.ERROR, logger="tests.notes"):
            assert store.read_all() == []
            assert store.search("x") == []
            assert store.statistics().note_count == 0
            assert store.export_all("export.txt") is True
        assert "Failed to read notes index" in caplog.text


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_removes_file_and_rows(self, store: NoteStore):
        store.save(Note("A", "x"))
        store.save(Note("A", "y"))
        store.save(Note("AB", "z"))
        assert store.delete("A") is True
        assert not store.path_for("A").exists()
        assert store.index.list_all() == [IndexEntry("AB", "notes/AB.txt")]
        assert [n.title for n in store.read_all()] == ["AB"]

    def test_missing_note_leaves_index(self, store: NoteStore):
        store.index.append("Ghost", "notes/Ghost.txt")
        assert store.delete("Ghost") is False
        assert store.index.list_all() == [IndexEntry("Ghost", "notes/Ghost.txt")]

    def test_unremovable_file_returns_false(self, store: NoteStore):
        # a directory at the note path exists but cannot be unlinked as a file
        store.path_for("Dir").mkdir()
        store.index.append("Dir", "notes/Dir.txt")
        assert store.delete("Dir") is False
        assert len(store.index.list_all()) == 1

    def test_undecodable_index_still_deletes(self, store: NoteStore, caplog):
        store.save(Note("A", "x"))
        with store.index.index_path.open("ab") as fh:
            fh.write(b"\xff\xfe:bad\n")
        with caplog.at_level(logging.WARNING, logger="tests.notes"):
            assert store.delete("A") is True
        assert not store.path_for("A").exists()
        assert "Failed to update index after removing A" in caplog.text


# ---------------------------------------------------------------------------
# export_all
# ---------------------------------------------------------------------------


class TestExportAll:
    def test_writes_header_and_numbered_notes(self, store: NoteStore):
        ts = datetime(2024, 1, 1, 8, 0, 0)
        first = Note.from_storage("one", "1", ts, ts)
        second = Note.from_storage("two", "2", ts, ts)
        store.save(first)
        store.save(second)

        assert store.export_all("export.txt")
        text = (store.storage_dir / "export.txt").read_text(encoding="utf-8")
        assert text.startswith("=== NOTES EXPORT ===\nExport Date: ")
        assert "Total Notes: 2\n\n" in text
        assert f"NOTE 1:\n{encode_note(first)}\nNOTE 2:\n{encode_note(second)}\n" in text

    def test_overwrites_previous_export(self, store: NoteStore):
        target = store.storage_dir / "export.txt"
        target.write_text("old stuff", encoding="utf-8")
        store.export_all("export.txt")
        assert "old stuff" not in target.read_text(encoding="utf-8")

    def test_absolute_path(self, store: NoteStore, tmp_path: Path):
        target = tmp_path / "elsewhere.txt"
        assert store.export_all(target)
        assert "Total Notes: 0" in target.read_text(encoding="utf-8")

    def test_unwritable_target_returns_false(self, store: NoteStore, tmp_path: Path):
        assert store.export_all(tmp_path / "missing_dir" / "export.txt") is False


# ---------------------------------------------------------------------------
# search / statistics
# ---------------------------------------------------------------------------


class TestSearch:
    def test_matches_title_and_content_case_insensitive(self, store: NoteStore):
        store.save(Note("Shopping", "milk"))
        store.save(Note("Work", "Buy MILK for office"))
        store.save(Note("Other", "nothing"))
        assert [n.title for n in store.search("milk")] == ["Shopping", "Work"]
        assert [n.title for n in store.search("shop")] == ["Shopping"]

    def test_no_match(self, store: NoteStore):
        store.save(Note("A", "x"))
        assert store.search("zzz_no_match_zzz") == []


class TestStatistics:
    def test_empty_storage(self, store: NoteStore):
        stats = store.statistics()
        assert (stats.note_count, stats.file_count, stats.total_bytes) == (0, 0, 0)

    def test_counts_diverge_with_stray_files(self, store: NoteStore):
        store.save(Note("A", "x"))
        (store.storage_dir / "stray.log").write_text("hello", encoding="utf-8")
        stats = store.statistics()
        assert stats.note_count == 1
        # note file, index file and stray file
        assert stats.file_count == 3
        expected = sum(p.stat().st_size for p in store.storage_dir.iterdir())
        assert stats.total_bytes == expected

    def test_file_vanishing_during_listing_skipped(self, store: NoteStore, monkeypatch):
        store.save(Note("A", "x"))
        ghost = store.storage_dir / "vanished.txt"
        real_iterdir = Path.iterdir
        real_is_file = Path.is_file

        def _iterdir(self):
            yield from real_iterdir(self)
            if self == store.storage_dir:
                yield ghost

        monkeypatch.setattr(Path, "iterdir", _iterdir)
        monkeypatch.setattr(Path, "is_file", lambda self: self == ghost or real_is_file(self))
        stats = store.statistics()
        # note file and index file only
        assert stats.file_count == 2

    def test_render(self, store: NoteStore):
        text = store.statistics().render()
        assert text.startswith("=== App Statistics ===\nTotal Notes: 0\n")
        assert f"Notes Directory: {store.storage_dir}" in text
        assert store.statistics().to_dict()["storage_dir"] == str(store.storage_dir)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestStoreLogging:
    def test_not_found_logged_as_warning(self, store: NoteStore, caplog):
        with caplog.at_level(logging.WARNING, logger="tests.notes"):
            store.read(store.storage_dir / "ghost.txt")
        assert any(r.levelno == logging.WARNING and "not found" in r.getMessage() for r in caplog.records)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_unreadable_file_is_failed(self, store: NoteStore):
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            pytest.skip("root ignores file permissions")
        store.save(Note("Locked", "x"))
        path = store.path_for("Locked")
        path.chmod(0)
        try:
            assert store.read(path).status is ReadStatus.FAILED
        finally:
            path.chmod(0o644)
