import marimo

__generated_with = "0.13.10"
app = marimo.App(width="full", app_title="Notes")


# ---------------------------------------------------------------------------
# Bootstrap: config, logger, store
# ---------------------------------------------------------------------------


@app.cell
def _setup():
    import sys
    from pathlib import Path

    import marimo as mo

    _ROOT = Path(__file__).parent.parent
    _SRC = _ROOT / "src"

    if str(_SRC) not in sys.path:
        sys.path.insert(0, str(_SRC))

    from notes.config import load_config
    from notes.db import NotesDB
    from notes.logging_setup import setup_logging
    from notes.note import Note
    from notes.store import NoteStore

    # storage dir follows NOTES_DIR / NOTES_CONFIG, like the notes-app command
    _config = load_config()
    store = NoteStore(_config, logger=setup_logging(_config))
    return Note, NotesDB, store, mo


@app.cell
def _state(mo):
    get_selected, set_selected = mo.state("")
    get_revision, set_revision = mo.state(0)
    return get_revision, get_selected, set_revision, set_selected


# ---------------------------------------------------------------------------
# New note form
# ---------------------------------------------------------------------------


@app.cell
def _create_form(mo, Note, store, set_revision):
    def _save(value):
        title = (value or {}).get("title", "").strip()
        if not title:
            return
        note = Note(title, (value.get("content") or "").strip())
        store.save(note, append=bool(value.get("append")))
        set_revision(lambda r: r + 1)

    create_form = (
        mo.md(
            """
            **New note**

            {title}

            {content}

            {append}
            """
        )
        .batch(
            title=mo.ui.text(label="Title", full_width=True),
            content=mo.ui.text_area(label="Content", full_width=True, rows=6),
            append=mo.ui.checkbox(label="Append to existing file"),
        )
        .form(on_change=_save, submit_button_label="Save")
    )
    return (create_form,)


# ---------------------------------------------------------------------------
# Sidebar: search + note list
# ---------------------------------------------------------------------------


@app.cell
def _search(mo):
    search_input = mo.ui.text(placeholder="Search notes…", label="", full_width=True)
    return (search_input,)


@app.cell
def _sidebar(mo, NotesDB, store, get_revision, set_selected, search_input):
    get_revision()  # re-run after every save
    query = search_input.value.strip() or None

    with NotesDB(store) as _db:
        results = _db.table_view(search=query, order_by="title")

    def _make_link(title):
        return mo.ui.button(
            label=title,
            on_click=lambda _: set_selected(title),
            kind="ghost",
            full_width=True,
        )

    sidebar = mo.vstack(
        [
            mo.md("## Notes"),
            search_input,
            mo.divider(),
            *[_make_link(t) for t in results["title"].to_list()],
        ],
        gap="4px",
    )
    table_panel = mo.ui.table(results)
    return sidebar, table_panel


# ---------------------------------------------------------------------------
# Viewer
# ---------------------------------------------------------------------------


@app.cell
def _viewer(mo, store, get_revision, get_selected):
    get_revision()
    selected = get_selected()
    result = store.find(selected) if selected else None

    if result is None:
        viewer = mo.md("_Select a note from the sidebar._")
    elif not result:
        viewer = mo.callout(mo.md(f"Note not found: **{selected}**"), kind="warn")
    else:
        note = result.note
        viewer = mo.vstack(
            [
                mo.md(f"# {note.title}"),
                mo.md(f"_Created {note.formatted_created} · Modified {note.formatted_modified}_"),
                mo.divider(),
                mo.plain_text(note.content),
            ]
        )
    return (viewer,)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@app.cell
def _stats(mo, store, get_revision):
    get_revision()
    stats = store.statistics()
    stats_panel = mo.hstack(
        [
            mo.stat(stats.note_count, label="Notes"),
            mo.stat(stats.file_count, label="Files"),
            mo.stat(f"{stats.total_bytes} B", label="Storage used"),
        ],
        gap="12px",
    )
    return (stats_panel,)


# ---------------------------------------------------------------------------
# Main layout
# ---------------------------------------------------------------------------


@app.cell
def _main_layout(mo, sidebar, table_panel, viewer, create_form, stats_panel):
    tabs = mo.ui.tabs(
        {
            "Note": viewer,
            "Table": table_panel,
            "New": create_form,
            "Statistics": stats_panel,
        }
    )

    layout = mo.hstack(
        [
            mo.vstack([sidebar], style={"width": "220px", "min-width": "180px", "padding": "8px"}),
            mo.vstack([tabs], style={"flex": "1", "padding": "8px"}),
        ],
        align="start",
        gap="0",
    )
    return (layout,)


@app.cell
def _render(layout):
    layout  # noqa: B018  — marimo displays the last expression as cell output
    return


if __name__ == "__main__":
    app.run()
