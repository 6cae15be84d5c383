# notegraph/infrastructure/vault_repo.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from notegraph.core.errors import InvalidTitleError
from notegraph.core.filenames import safe_filename
from notegraph.infrastructure.filesystem import atomic_write_text, read_note_text

log = logging.getLogger(__name__)

NOTE_SUFFIX = ".md"


@dataclass(frozen=True)
class VaultRepository:
    """
    One markdown file per note.

    The note title is the file stem; subfolders are scanned too. Files
    found by iter_notes() keep their path, even when the stem is not what
    safe_filename() would produce ("a:b.md"). New notes are written to
    <vault_dir>/<safe_filename(title)>.md.
    """

    vault_dir: Path
    _paths: dict[str, Path] = field(default_factory=dict, init=False, repr=False, compare=False)

    def ensure(self) -> None:
        self.vault_dir.mkdir(parents=True, exist_ok=True)

    def stem_for(self, title: str) -> str:
        """File stem for a new note. Raises InvalidTitleError if none exists."""
        try:
            return safe_filename(title)
        except ValueError as exc:
            raise InvalidTitleError(f"no file name possible for title {title!r}") from exc

    def note_path(self, title: str) -> Path:
        existing = self._find(title)
        if existing is not None:
            return existing
        return self.vault_dir / f"{self.stem_for(title)}{NOTE_SUFFIX}"

    def list_paths(self) -> list[Path]:
        if not self.vault_dir.is_dir():
            return []
        return sorted(
            (p for p in self.vault_dir.rglob(f"*{NOTE_SUFFIX}") if p.is_file()),
            key=lambda p: str(p).lower(),
        )

    def list_titles(self) -> list[str]:
        return sorted((p.stem for p in self.list_paths()), key=str.lower)

    def iter_notes(self) -> Iterator[tuple[str, str]]:
        """
        Yield (title, body) for every readable note.

        Unreadable / undecodable files are logged and skipped. When two
        subfolders hold the same stem, the first path in sort order wins
        and the other is logged and skipped.
        """
        seen: dict[str, Path] = {}
        for path in self.list_paths():
            first = seen.get(path.stem)
            if first is not None:
                log.warning("Skipping duplicate note title %r: %s (already read %s)", path.stem, path, first)
                continue
            try:
                text = read_note_text(path)
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("Skipping unreadable note %s: %s", path, exc)
                continue
            seen[path.stem] = path
            self._paths[path.stem] = path
            yield path.stem, text

    def read(self, title: str) -> str:
        return read_note_text(self.note_path(title))

    def write(self, title: str, text: str) -> Path:
        path = self.note_path(title)
        atomic_write_text(path, text or "", encoding="utf-8")
        self._paths[title.strip()] = path
        log.debug("Note saved: %s", path)
        return path

    def delete(self, title: str) -> bool:
        path = self._find(title)
        if path is None:
            return False
        path.unlink()
        self._forget(path)
        log.debug("Note deleted: %s", path)
        return True

    def rename(self, old_title: str, new_title: str) -> Path:
        src = self._find(old_title)
        if src is None:
            raise FileNotFoundError(self.vault_dir / f"{old_title}{NOTE_SUFFIX}")

        dst = src.with_name(f"{self.stem_for(new_title)}{NOTE_SUFFIX}")
        if dst.exists() and dst.resolve() != src.resolve():
            raise FileExistsError(dst)

        src.replace(dst)
        self._forget(src)
        self._paths[new_title.strip()] = dst
        log.debug("Note file renamed: %s -> %s", src, dst)
        return dst

    # ───────────────────────── internal ─────────────────────────

    def _find(self, title: str) -> Path | None:
        title = (title or "").strip()
        if not title:
            return None

        known = self._paths.get(title)
        if known is not None and known.is_file():
            return known

        try:
            safe = safe_filename(title)
        except ValueError:
            safe = None

        fallback = None
        for path in self.list_paths():
            if path.stem == title:
                return path
            if fallback is None and path.stem == safe:
                fallback = path
        return fallback

    def _forget(self, path: Path) -> None:
        for title in [t for t, p in self._paths.items() if p == path]:
            del self._paths[title]
