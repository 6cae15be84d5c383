from .errors import DuplicateTitleError, InvalidTitleError, NoteGraphError, NoteNotFoundError
from .filenames import safe_filename
from .graph import NoteGraph
from .models import Link, Note
from .snapshot import GraphSnapshot, build_graph_snapshot, normalize_graph_mode
from .wikilinks import extract_wikilink_targets, parse_links, rewrite_wikilinks_targets

__all__ = ["NoteGraph",
           "Note",
           "Link",
           "parse_links",
           "extract_wikilink_targets",
           "rewrite_wikilinks_targets",
           "safe_filename",
           "GraphSnapshot",
           "build_graph_snapshot",
           "normalize_graph_mode",
           "NoteGraphError",
           "NoteNotFoundError",
           "DuplicateTitleError",
           "InvalidTitleError",
           ]
