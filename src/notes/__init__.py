"""Flat-file notes manager."""

from notes.codec import NoteFormatError, decode_note, encode_note
from notes.config import ConfigError, NotesConfig, load_config
from notes.db import NotesDB
from notes.index import IndexEntry, NoteIndex
from notes.note import Note
from notes.store import NoteStore, ReadResult, ReadStatus, StorageStats, sanitize_filename

__all__ = [
    "Note",
    "NoteIndex",
    "IndexEntry",
    "NoteStore",
    "NotesDB",
    "ReadResult",
    "ReadStatus",
    "StorageStats",
    "NotesConfig",
    "ConfigError",
    "NoteFormatError",
    "decode_note",
    "encode_note",
    "load_config",
    "sanitize_filename",
]
