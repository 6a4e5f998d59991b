"""Line-oriented text codec for stored notes.

Every note file holds one block::

    TITLE:<title>
    CREATED:<yyyy-MM-ddTHH:mm:ss>
    MODIFIED:<yyyy-MM-ddTHH:mm:ss>
    CONTENT:
    <zero or more content lines>
    ---END_NOTE---

Header prefixes are only recognised before the ``CONTENT:`` line.  Once in
content mode every line up to the terminator belongs to the body, even one
that happens to start with ``TITLE:``.
"""

from __future__ import annotations

from datetime import datetime

from notes.note import Note

TITLE_PREFIX = "TITLE:"
CREATED_PREFIX = "CREATED:"
MODIFIED_PREFIX = "MODIFIED:"
CONTENT_MARKER = "CONTENT:"
END_MARKER = "---END_NOTE---"

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# control characters and space; other Unicode whitespace stays part of the content
_TRIM_CHARS = "".join(map(chr, range(33)))


class NoteFormatError(ValueError):
    """Raised when text cannot be decoded into a :class:`Note`."""


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse a stored timestamp; malformed text raises :class:`NoteFormatError`."""
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise NoteFormatError(f"Invalid timestamp {text!r}") from exc


def encode_note(note: Note) -> str:
    """Serialise *note* into its five-field block, newline-terminated."""
    return (
        f"{TITLE_PREFIX}{note.title}\n"
        f"{CREATED_PREFIX}{format_timestamp(note.created_at)}\n"
        f"{MODIFIED_PREFIX}{format_timestamp(note.modified_at)}\n"
        f"{CONTENT_MARKER}\n"
        f"{note.content}\n"
        f"{END_MARKER}\n"
    )


def decode_note(text: str) -> Note:
    """Decode the first note block found in *text*.

    Scanning stops at the first ``---END_NOTE---`` line, so anything after it
    (for instance blocks added by an append-mode save) is ignored.  Content may
    be empty; title and both timestamps are required.
    """
    title: str | None = None
    created: datetime | None = None
    modified: datetime | None = None
    body: list[str] = []
    in_content = False

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    for line in lines:
        if line == END_MARKER:
            break
        if in_content:
            body.append(line + "\n")
        elif line.startswith(TITLE_PREFIX):
            title = line[len(TITLE_PREFIX) :]
        elif line.startswith(CREATED_PREFIX):
            created = parse_timestamp(line[len(CREATED_PREFIX) :])
        elif line.startswith(MODIFIED_PREFIX):
            modified = parse_timestamp(line[len(MODIFIED_PREFIX) :])
        elif line == CONTENT_MARKER:
            in_content = True

    if title is None or created is None or modified is None:
        raise NoteFormatError("Invalid note file format")

    return Note.from_storage(title, "".join(body).strip(_TRIM_CHARS), created, modified)
