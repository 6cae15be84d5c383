# notegraph/core/filenames.py

from __future__ import annotations

import re
import unicodedata


WINDOWS_RESERVED_NAMES = {
    "con", "prn", "aux", "nul",
    *(f"com{i}" for i in range(1, 10)),
    *(f"lpt{i}" for i in range(1, 10)),
}

INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*\u0000-\u001f]')
WHITESPACE_RE = re.compile(r"\s+")

MAX_FILENAME_LENGTH = 120


def safe_filename(title: str, *, max_len: int = MAX_FILENAME_LENGTH) -> str:
    """
    Map a note title to the stem of its file in the vault.

    Same title always gives the same stem (Windows / macOS / Linux safe).
    Raises ValueError when nothing usable is left of the title.
    """
    if title is None:
        raise ValueError("safe_filename(): title is None")

    name = unicodedata.normalize("NFKC", str(title))
    name = "".join(ch for ch in name if unicodedata.category(ch)[0] != "C")
    name = WHITESPACE_RE.sub(" ", name.strip())

    name = name.replace("/", "-").replace("\\", "-")
    name = INVALID_CHARS_RE.sub("_", name)

    # Windows: no trailing dot or space
    name = name.rstrip(" .")
    if not name:
        raise ValueError(f"safe_filename(): no usable characters in {title!r}")

    base = name.split(".", 1)[0].strip().lower()
    if base in WINDOWS_RESERVED_NAMES:
        name = f"_{name}"

    if len(name) > max_len:
        name = name[:max_len].rstrip(" .")

    return name
