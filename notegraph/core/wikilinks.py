# notegraph/core/wikilinks.py

from __future__ import annotations

import re
from typing import Callable

from notegraph.core.models import Link


# [[target]]
# [[target|alias]]
WIKILINK_RE = re.compile(r"\[\[([^\]]+)\]\]")


def parse_links(source_title: str, markdown_text: str | None) -> list[Link]:
    """
    Parse wikilinks from a note body into Link records, in body order.

    Supported:
      [[Note]]
      [[Note|Alias]]
      [[Note#Heading]]
      [[Note^block]]

    Links without a target ([[]], [[|x]], [[#Heading]]) are skipped.
    Repeated links are kept: one record per occurrence.
    """
    links: list[Link] = []

    if not markdown_text:
        return links

    for match in WIKILINK_RE.finditer(markdown_text):
        inner = (match.group(1) or "").strip()
        if not inner:
            continue

        target, alias = _split_alias(inner)
        base, suffix = _split_suffix(target)
        if not base:
            continue

        links.append(
            Link(
                source_title=source_title,
                target_title=base,
                alias=alias or None,
                section=suffix or None,
                raw_target=target,
            )
        )

    return links


def target_candidates(target: str) -> list[tuple[str, str]]:
    """
    Possible (title, suffix) readings of a link target, longest title first.

      "C# #Intro" -> [("C# #Intro", ""), ("C#", "#Intro"), ("C", "# #Intro")]

    The last entry is the plain [[Note#Heading]] reading. Callers pick the
    first title that names an existing note.
    """
    target = (target or "").strip()
    out: list[tuple[str, str]] = []
    seen: set[str] = set()

    cuts = [len(target)] + sorted(
        (i for i, ch in enumerate(target) if ch in "#^"), reverse=True
    )
    for cut in cuts:
        title = target[:cut].strip()
        if title and title not in seen:
            seen.add(title)
            out.append((title, target[cut:]))
    return out


def extract_wikilink_targets(markdown_text: str | None) -> set[str]:
    """Distinct base targets referenced by the text."""
    return {link.target_title for link in parse_links("", markdown_text)}


def rewrite_wikilinks_targets(
    markdown_text: str,
    *,
    old_title: str,
    new_title: str,
    case_sensitive: bool = True,
    exists: Callable[[str], bool] | None = None,
) -> tuple[str, bool]:
    """
    Rewrite wikilinks in markdown from old_title → new_title.

    Handles:
      [[Old]]
      [[Old|Alias]]
      [[Old#Heading]]
      [[Old^block]]

    Alias and suffix are kept. Returns (text, changed).

    A target such as [[C#]] may name note "C#" or heading "#" of note "C".
    With `exists`, each link is read the way the graph resolves it: the
    longest reading that names an existing note, else the plain one.
    Without it, the longest reading equal to old_title is rewritten.
    """
    if not markdown_text:
        return markdown_text, False

    old_key = _match_key(old_title, case_sensitive)
    new_title = (new_title or "").strip()

    if not old_key or not new_title:
        return markdown_text, False

    changed = False

    def pick(target: str) -> tuple[str, str] | None:
        candidates = target_candidates(target)
        if not candidates:
            return None
        if exists is None:
            for title, suffix in candidates:
                if _match_key(title, case_sensitive) == old_key:
                    return title, suffix
            return None
        for title, suffix in candidates:
            if exists(title):
                return title, suffix
        return candidates[-1]

    def replacer(match: re.Match) -> str:
        nonlocal changed

        inner = (match.group(1) or "").strip()
        if not inner:
            return match.group(0)

        target, alias = _split_alias(inner)
        chosen = pick(target)
        if chosen is None or _match_key(chosen[0], case_sensitive) != old_key:
            return match.group(0)

        changed = True
        target = f"{new_title}{chosen[1].strip()}"

        if alias is not None:
            return f"[[{target}|{alias}]]"
        return f"[[{target}]]"

    rewritten = WIKILINK_RE.sub(replacer, markdown_text)
    return rewritten, changed


# ───────────────────────── helpers ─────────────────────────


def _match_key(title: str, case_sensitive: bool) -> str:
    key = (title or "").strip()
    return key if case_sensitive else key.casefold()


def _split_alias(raw: str) -> tuple[str, str | None]:
    """
    Split 'target|alias' → (target, alias)
    """
    if "|" in raw:
        target, alias = raw.split("|", 1)
        return target.strip(), alias.strip()
    return raw.strip(), None


def _split_suffix(target: str) -> tuple[str, str]:
    """
    Split Obsidian-style suffixes:
      Note#Heading
      Note^block
    The earliest separator wins.
    """
    positions = [i for i in (target.find("#"), target.find("^")) if i >= 0]
    if not positions:
        return target.strip(), ""
    cut = min(positions)
    return target[:cut].strip(), target[cut:].strip()
