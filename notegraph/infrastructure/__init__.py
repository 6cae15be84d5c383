from .filesystem import atomic_write_text, read_note_text
from .vault_repo import VaultRepository

__all__ = ["atomic_write_text", "read_note_text", "VaultRepository"]
