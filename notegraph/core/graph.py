# notegraph/core/graph.py

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from notegraph.core.errors import DuplicateTitleError, InvalidTitleError, NoteNotFoundError
from notegraph.core.models import Link, Note
from notegraph.core.wikilinks import parse_links, rewrite_wikilinks_targets, target_candidates


class NoteGraph:
    """
    In-memory vault: title -> Note, plus a backlink index.

    notes[key]    = Note
    incoming[dst] = {src1, src2, ...}   (keys)

    `dst` may be virtual (no note with that title yet): such links are
    dangling until a note with the title is added. A link such as [[C#]]
    is indexed under every reading ("C#" and "C"); queries pick the
    longest reading that names a note.

    Keys are titles with surrounding whitespace stripped, casefolded when
    the graph is case-insensitive. Nothing here is thread-safe; mutate from
    one thread only.
    """

    def __init__(
        self,
        *,
        case_sensitive: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.case_sensitive = bool(case_sensitive)
        self._log = logger or logging.getLogger(__name__)

        self._notes: dict[str, Note] = {}
        self._incoming: dict[str, set[str]] = {}

    # ───────────────────────── keys ─────────────────────────

    def title_key(self, title: str) -> str:
        key = (title or "").strip()
        return key if self.case_sensitive else key.casefold()

    def _require_key(self, title: str) -> str:
        key = self.title_key(title)
        if not key:
            raise InvalidTitleError(f"note title must not be blank: {title!r}")
        return key

    # ───────────────────────── mutation ─────────────────────────

    def add_or_update_note(self, title: str, body: str | None) -> Note:
        """
        Insert a note, or replace the body of an existing one.

        Outbound links are re-parsed from the new body. An existing note
        keeps the title spelling it was first stored with.
        """
        key = self._require_key(title)
        body = body or ""

        note = self._notes.get(key)
        if note is None:
            note = Note(title=title.strip())
            self._notes[key] = note
            self._log.debug("Note added: %s", note.title)
        else:
            self._log.debug("Note updated: %s", note.title)

        old_targets = self._target_keys(note)

        note.body = body
        note.links = tuple(parse_links(note.title, body))

        self._reindex(key, old_targets, self._target_keys(note))
        return note

    def remove_note(self, title: str) -> bool:
        """
        Delete the note if present. Returns True if something was removed.

        Links from other notes to this title are left in place and become
        dangling.
        """
        key = self.title_key(title)
        note = self._notes.pop(key, None) if key else None
        if note is None:
            return False

        self._reindex(key, self._target_keys(note), set())
        self._log.debug("Note removed: %s", note.title)
        return True

    def rename_note(
        self,
        old_title: str,
        new_title: str,
        *,
        rewrite_links: bool = True,
    ) -> list[str]:
        """
        Rename a note and rewrite [[old_title]] references across the vault.

        Returns titles of notes whose bodies were rewritten.
        """
        old_key = self.title_key(old_title)
        note = self._notes.get(old_key) if old_key else None
        if note is None:
            raise NoteNotFoundError(old_title)

        new_key = self._require_key(new_title)
        if new_key != old_key and new_key in self._notes:
            raise DuplicateTitleError(new_title)

        new_title = new_title.strip()
        old_display = note.title

        changed: list[str] = []
        if rewrite_links:
            for key in self._incoming.get(old_key, set()).copy():
                src = self._notes.get(key)
                if src is None:
                    continue
                text, did_change = rewrite_wikilinks_targets(
                    src.body,
                    old_title=old_display,
                    new_title=new_title,
                    case_sensitive=self.case_sensitive,
                    exists=self._has_title,
                )
                if did_change:
                    self.add_or_update_note(src.title, text)
                    changed.append(src.title)

        # re-key the note in place so vault order is unchanged
        note = self._notes[old_key]
        self._reindex(old_key, self._target_keys(note), set())

        self._notes = {
            (new_key if key == old_key else key): value
            for key, value in self._notes.items()
        }
        note.title = new_title
        note.links = tuple(parse_links(new_title, note.body))
        self._reindex(new_key, set(), self._target_keys(note))

        changed = [new_title if t == old_display else t for t in changed]
        self._log.info(
            "Note renamed: %s -> %s (rewritten=%d)", old_display, new_title, len(changed)
        )
        return sorted(changed, key=str.lower)

    def load(self, records: Iterable[tuple[str, str]]) -> int:
        """Bulk upsert of (title, body) pairs. Returns the number applied."""
        count = 0
        for title, body in records:
            self.add_or_update_note(title, body)
            count += 1
        self._log.info("Loaded %d notes (total=%d)", count, len(self._notes))
        return count

    def clear(self) -> None:
        self._notes.clear()
        self._incoming.clear()

    def rebuild_index(self) -> None:
        """
        Recompute the backlink index from the notes.
        Expensive, but safe.
        """
        self._incoming.clear()
        for key, note in self._notes.items():
            for dst in self._target_keys(note):
                self._incoming.setdefault(dst, set()).add(key)

    # ───────────────────────── queries ─────────────────────────

    def get(self, title: str) -> Note | None:
        key = self.title_key(title)
        return self._notes.get(key) if key else None

    def __contains__(self, title: object) -> bool:
        return isinstance(title, str) and self.get(title) is not None

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(list(self._notes.values()))

    def titles(self) -> list[str]:
        return sorted((n.title for n in self._notes.values()), key=str.lower)

    def resolve_link(self, source_title: str, target_title: str) -> bool:
        """
        True if a note titled target_title exists.

        source_title does not affect the answer; a link resolves the same
        way from any note.
        """
        key = self.title_key(target_title)
        return bool(key) and key in self._notes

    def backlinks(self, title: str) -> Iterator[Note]:
        """
        Notes with at least one link to `title`, in vault order.

        Empty when no note is titled `title`: links to a missing note are
        dangling, not backlinks. Each call starts a fresh scan of the
        current state.
        """
        key = self.title_key(title)
        if not key or key not in self._notes:
            return
        sources = set(self._incoming.get(key, ()))
        if not sources:
            return
        for src_key, note in list(self._notes.items()):
            if src_key not in sources:
                continue
            if any(self._resolve_key(link) == key for link in note.links):
                yield note

    def dangling_links(self) -> Iterator[Link]:
        """Every link whose target has no note, in vault and body order."""
        for note in list(self._notes.values()):
            for link in note.links:
                if self._resolve_key(link) not in self._notes:
                    yield link

    def outgoing_links(self, title: str) -> list[Link]:
        note = self.get(title)
        return list(note.links) if note is not None else []

    def edges(self) -> Iterator[tuple[str, str, bool]]:
        """
        (source, target, resolved) for every distinct link pair.

        Resolved targets are reported with the target note's own title.
        """
        for note in list(self._notes.values()):
            seen: set[str] = set()
            for link in note.links:
                key = self._resolve_key(link)
                if key in seen:
                    continue
                seen.add(key)
                dst = self._notes.get(key)
                if dst is not None:
                    yield note.title, dst.title, True
                else:
                    yield note.title, link.target_title, False

    def outgoing_snapshot(self) -> dict[str, list[str]]:
        """{src_title: [dst_title, ...]} for the snapshot builder."""
        out: dict[str, list[str]] = {}
        for src, dst, _ in self.edges():
            targets = out.setdefault(src, [])
            if dst not in targets:
                targets.append(dst)
        return out

    # ───────────────────────── internal ─────────────────────────

    def _has_title(self, title: str) -> bool:
        return self.title_key(title) in self._notes

    def _resolve_key(self, link: Link) -> str:
        """Key of the longest target reading that names a note, else the plain one."""
        for title, _ in target_candidates(link.full_target):
            key = self.title_key(title)
            if key in self._notes:
                return key
        return self.title_key(link.target_title)

    def _target_keys(self, note: Note) -> set[str]:
        keys: set[str] = set()
        for link in note.links:
            keys.update(self.title_key(t) for t, _ in target_candidates(link.full_target))
            keys.add(self.title_key(link.target_title))
        return keys

    def _reindex(self, src: str, old_targets: set[str], new_targets: set[str]) -> None:
        if old_targets == new_targets:
            return

        # 1. Remove obsolete incoming links
        for removed in old_targets - new_targets:
            incoming_set = self._incoming.get(removed)
            if incoming_set:
                incoming_set.discard(src)
                if not incoming_set:
                    self._incoming.pop(removed, None)

        # 2. Add new incoming links
        for added in new_targets - old_targets:
            self._incoming.setdefault(added, set()).add(src)
