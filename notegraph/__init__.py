from .core.errors import DuplicateTitleError, InvalidTitleError, NoteGraphError, NoteNotFoundError
from .core.graph import NoteGraph
from .core.models import Link, Note
from .core.snapshot import GraphSnapshot, build_graph_snapshot
from .core.wikilinks import extract_wikilink_targets, parse_links, rewrite_wikilinks_targets
from .infrastructure.vault_repo import VaultRepository

__version__ = "0.1.0"

__all__ = ['NoteGraph',
           'Note',
           'Link',
           'parse_links',
           'extract_wikilink_targets',
           'rewrite_wikilinks_targets',
           'GraphSnapshot',
           'build_graph_snapshot',
           'VaultRepository',
           'NoteGraphError',
           'NoteNotFoundError',
           'DuplicateTitleError',
           'InvalidTitleError',
           ]
