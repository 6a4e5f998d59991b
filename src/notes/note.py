"""Core Note dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

#: Human-facing timestamp format used by ``str(note)`` and the export header.
DISPLAY_FORMAT = "%d-%m-%Y %H:%M:%S"


def now() -> datetime:
    """Current local time, truncated to the whole seconds the file format stores."""
    return datetime.now().replace(microsecond=0)


@dataclass
class Note:
    """A single note: title, multi-line content and two timestamps."""

    title: str
    content: str = ""
    created_at: datetime = field(default_factory=now)
    modified_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.modified_at is None:
            self.modified_at = self.created_at

    @classmethod
    def from_storage(
        cls,
        title: str,
        content: str,
        created_at: datetime,
        modified_at: datetime,
    ) -> "Note":
        """Rebuild a note whose timestamps were read back from disk."""
        return cls(title=title, content=content, created_at=created_at, modified_at=modified_at)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_title(self, title: str) -> None:
        self.title = title
        self._touch()

    def set_content(self, content: str) -> None:
        self.content = content
        self._touch()

    def _touch(self) -> None:
        # modified_at never goes behind created_at, even if the clock does
        self.modified_at = max(now(), self.created_at)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def formatted_created(self) -> str:
        return self.created_at.strftime(DISPLAY_FORMAT)

    @property
    def formatted_modified(self) -> str:
        return self.modified_at.strftime(DISPLAY_FORMAT)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "modified_at": self.modified_at,
        }

    def __str__(self) -> str:
        return (
            f"Title: {self.title}\n"
            f"Created: {self.formatted_created}\n"
            f"Modified: {self.formatted_modified}\n"
            f"Content: {self.content}"
        )
