"""Shared fixtures for the notes test-suite."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from notes.config import NotesConfig
from notes.store import NoteStore


@pytest.fixture()
def config(tmp_path: Path) -> NotesConfig:
    return NotesConfig(storage_dir=tmp_path / "notes")


@pytest.fixture()
def store(config: NotesConfig) -> NoteStore:
    """Store with a plain module logger, so nothing is written into the storage dir."""
    return NoteStore(config, logger=logging.getLogger("tests.notes"))
