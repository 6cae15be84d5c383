from .graph_service import GraphService
from .rename_service import rename_note_in_vault

__all__ = ["GraphService", "rename_note_in_vault"]
