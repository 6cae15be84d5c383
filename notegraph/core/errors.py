# notegraph/core/errors.py

from __future__ import annotations


class NoteGraphError(Exception):
    """Base class for note graph errors."""


class NoteNotFoundError(NoteGraphError, KeyError):
    """A title that must exist in the vault is absent."""

    def __init__(self, title: str):
        super().__init__(title)
        self.title = title

    def __str__(self) -> str:
        return f"note not found: {self.title!r}"


class DuplicateTitleError(NoteGraphError):
    """
    A second note would get a title already in use.

    add_or_update_note() never raises this: adding an existing title
    is an update. Only rename_note() can collide.
    """

    def __init__(self, title: str):
        super().__init__(title)
        self.title = title

    def __str__(self) -> str:
        return f"note already exists: {self.title!r}"


class InvalidTitleError(NoteGraphError, ValueError):
    """Title is empty or whitespace only."""
