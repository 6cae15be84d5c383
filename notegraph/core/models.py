# notegraph/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Link:
    """
    One [[wikilink]] occurrence inside a note body.

    [[Target]]              -> target_title="Target"
    [[Target|Alias]]        -> alias="Alias"
    [[Target#Heading]]      -> section="#Heading"
    [[Target^block|Alias]]  -> section="^block", alias="Alias"

    The split is syntactic only. A note titled "C#" is still reachable:
    NoteGraph tries full_target before target_title.
    """

    source_title: str
    target_title: str
    alias: str | None = None
    section: str | None = None
    raw_target: str = field(default="", compare=False, repr=False)

    @property
    def full_target(self) -> str:
        """Target text before the suffix split: [[C#]] -> "C#"."""
        return self.raw_target or f"{self.target_title}{self.section or ''}"

    @property
    def label(self) -> str:
        return self.alias if self.alias is not None else self.target_title


@dataclass
class Note:
    title: str
    body: str = ""
    links: tuple[Link, ...] = field(default_factory=tuple)
