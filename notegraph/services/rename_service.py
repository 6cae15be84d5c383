# notegraph/services/rename_service.py

from __future__ import annotations

import logging

from notegraph.core.errors import DuplicateTitleError, NoteNotFoundError
from notegraph.core.graph import NoteGraph
from notegraph.infrastructure.vault_repo import VaultRepository

log = logging.getLogger(__name__)


def rename_note_in_vault(
    graph: NoteGraph,
    repo: VaultRepository,
    *,
    old_title: str,
    new_title: str,
) -> list[str]:
    """
    Rename a note on disk and in the graph, rewriting wikilinks in every
    note that referenced it.

    `old_title` is looked up through the graph, so a case-insensitive graph
    finds "CSS.md" from "css". Title errors (NoteNotFoundError,
    DuplicateTitleError, InvalidTitleError) are raised before anything
    changes. The file is renamed before the graph; if the graph rename
    fails the file is moved back.

    Returns titles of notes whose files were rewritten.
    """
    note = graph.get(old_title)
    if note is None:
        raise NoteNotFoundError(old_title)

    current = note.title
    new_title = (new_title or "").strip()
    repo.stem_for(new_title)

    clash = graph.get(new_title)
    if clash is not None and clash is not note:
        raise DuplicateTitleError(new_title)

    original = repo.note_path(current)
    moved = repo.rename(current, new_title)
    try:
        changed = graph.rename_note(current, new_title)
    except Exception:
        log.exception("Graph rename failed, restoring %s", original)
        moved.replace(original)
        raise

    for title in changed:
        repo.write(title, graph.get(title).body)

    log.info("Renamed %s -> %s, rewrote %d file(s)", current, new_title, len(changed))
    return changed
