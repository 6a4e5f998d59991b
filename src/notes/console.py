"""Interactive text menu over :class:`notes.store.NoteStore`.

Run it with the ``notes-app`` command::

    notes-app --storage-dir ~/notes

Multi-line content is typed line by line and finished with a line holding
only ``END``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

import click
from rich.console import Console
from rich.rule import Rule

from notes.config import load_config
from notes.logging_setup import setup_logging
from notes.note import Note
from notes.store import NoteStore

END_OF_INPUT = "END"

MENU = (
    ("1", "Create New Note"),
    ("2", "View All Notes"),
    ("3", "Read Specific Note"),
    ("4", "Edit Note"),
    ("5", "Delete Note"),
    ("6", "Append to Note"),
    ("7", "Export All Notes"),
    ("8", "Search Notes"),
    ("9", "Show App Statistics"),
    ("0", "Exit"),
)


class NotesConsole:
    """Menu loop; every action is guarded so one failure never ends the session."""

    def __init__(
        self,
        store: NoteStore,
        *,
        console: Console | None = None,
        input_func: Callable[[], str] = input,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.console = console or Console()
        self._input = input_func
        self.log = logger or store.log
        self.actions: dict[str, Callable[[], None]] = {
            "1": self.create_note,
            "2": self.view_all_notes,
            "3": self.read_note,
            "4": self.edit_note,
            "5": self.delete_note,
            "6": self.append_to_note,
            "7": self.export_notes,
            "8": self.search_notes,
            "9": self.show_statistics,
        }

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def ask(self, prompt: str) -> str:
        self.console.print(prompt, end="", markup=False, highlight=False)
        return self._input().strip()

    def ask_title(self, prompt: str = "Enter note title: ") -> str:
        title = self.ask(prompt)
        if not title:
            raise ValueError("Note title cannot be empty!")
        return title

    def read_block(self, prompt: str) -> str:
        """Collect lines until a literal ``END`` line and return them trimmed."""
        self.console.print(f"{prompt} (type '{END_OF_INPUT}' on a new line to finish):")
        lines: list[str] = []
        while True:
            line = self._input()
            if line == END_OF_INPUT:
                break
            lines.append(line)
        return "\n".join(lines).strip()

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def show_menu(self) -> None:
        self.console.print(Rule("NOTES APP"))
        for key, label in MENU:
            self.console.print(f"{key + '.':<4}{label}")
        self.console.print(Rule())

    def run(self) -> None:
        self.console.print("[bold]=== Welcome to Notes App ===[/bold]")
        while True:
            self.show_menu()
            try:
                choice = self.ask("Enter your choice: ")
            except EOFError:
                break
            if choice == "0":
                self.console.print("Thank you for using Notes App!")
                break
            action = self.actions.get(choice)
            if action is None:
                self.console.print("[yellow]Invalid choice! Please enter a number from the menu.[/yellow]")
                continue
            try:
                action()
            except EOFError:
                break
            except ValueError as exc:
                self.console.print(f"[red]Input Error:[/red] {exc}")
            except Exception as exc:  # noqa: BLE001
                self.log.exception("Unexpected error in menu action %s", choice)
                self.console.print(f"[red]An unexpected error occurred:[/red] {exc}")
                self.console.print("The application will continue running...")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _print_notes(self, notes: list[Note], label: str) -> None:
        for number, note in enumerate(notes, start=1):
            self.console.print(f"--- {label} {number} ---", highlight=False)
            self.console.print(str(note), markup=False, highlight=False)
            self.console.print()

    def create_note(self) -> None:
        self.console.print("\n=== Create New Note ===")
        title = self.ask_title()
        content = self.read_block("Enter note content")
        if self.store.save(Note(title, content)):
            self.console.print("[green]✓[/green] Note created and saved successfully!")
            self.console.print(f"File: {self.store.path_for(title).name}", markup=False)
        else:
            self.console.print("[red]✗[/red] Failed to save note. Check the logs for details.")

    def view_all_notes(self) -> None:
        self.console.print("\n=== All Notes ===")
        notes = self.store.read_all()
        if not notes:
            self.console.print("No notes found. Create your first note!")
            return
        self.console.print(f"Found {len(notes)} note(s):\n")
        self._print_notes(notes, "Note")

    def read_note(self) -> None:
        self.console.print("\n=== Read Specific Note ===")
        title = self.ask_title()
        result = self.store.find(title)
        if result:
            self.console.print("\n--- Note Found ---")
            self.console.print(str(result.note), markup=False, highlight=False)
        else:
            self.console.print(f"Note not found: {title}", markup=False)

    def edit_note(self) -> None:
        self.console.print("\n=== Edit Note ===")
        title = self.ask_title("Enter note title to edit: ")
        result = self.store.find(title)
        if not result:
            self.console.print(f"Note not found: {title}", markup=False)
            return
        self.console.print("\nCurrent note:")
        self.console.print(str(result.note), markup=False, highlight=False)
        result.note.set_content(self.read_block("\nEnter new content"))
        if self.store.save(result.note):
            self.console.print("[green]✓[/green] Note updated successfully!")
        else:
            self.console.print("[red]✗[/red] Failed to update note.")

    def delete_note(self) -> None:
        self.console.print("\n=== Delete Note ===")
        title = self.ask_title("Enter note title to delete: ")
        answer = self.ask(f"Are you sure you want to delete '{title}'? (y/N): ").lower()
        if answer not in ("y", "yes"):
            self.console.print("Delete operation cancelled.")
            return
        if self.store.delete(title):
            self.console.print("[green]✓[/green] Note deleted successfully!")
        else:
            self.console.print("[red]✗[/red] Failed to delete note or note not found.")

    def append_to_note(self) -> None:
        self.console.print("\n=== Append to Note ===")
        title = self.ask_title("Enter note title to append to: ")
        if not self.store.find(title):
            self.console.print(f"Note not found: {title}", markup=False)
            return
        content = self.read_block("Enter content to append")
        if self.store.save(Note(title, content), append=True):
            self.console.print("[green]✓[/green] Content appended successfully!")
        else:
            self.console.print("[red]✗[/red] Failed to append content.")

    def export_notes(self) -> None:
        self.console.print("\n=== Export All Notes ===")
        name = self.ask("Enter export file name (without extension): ")
        if not name:
            name = f"notes_export_{int(time.time() * 1000)}"
        file_name = f"{name}.txt"
        if self.store.export_all(file_name):
            self.console.print(f"[green]✓[/green] Notes exported successfully to: {file_name}")
        else:
            self.console.print("[red]✗[/red] Failed to export notes.")

    def search_notes(self) -> None:
        self.console.print("\n=== Search Notes ===")
        term = self.ask("Enter search term: ")
        matches = self.store.search(term)
        if not matches:
            self.console.print(f"No notes found containing: {term}", markup=False)
            return
        self.console.print(f"Found {len(matches)} matching note(s):\n")
        self._print_notes(matches, "Match")

    def show_statistics(self) -> None:
        self.console.print()
        self.console.print(self.store.statistics().render(), markup=False, highlight=False)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


@click.command()
@click.option("--storage-dir", "-d", type=click.Path(file_okay=False, path_type=Path), help="Notes directory")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="YAML config file")
@click.version_option(version="0.1.0")
def main(storage_dir: Path | None, config_path: Path | None) -> None:
    """Text-based notes manager backed by plain files."""
    config = load_config(config_path, storage_dir=storage_dir)
    logger = setup_logging(config)
    store = NoteStore(config, logger=logger)
    NotesConsole(store, logger=logger).run()


if __name__ == "__main__":
    main()
