# notegraph/settings.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

APP_NAME = "notegraph"
ORG_NAME = "notegraph"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

GRAPH_MODE_DEFAULT = "global"
GRAPH_DEPTH_DEFAULT = 1
GRAPH_MAX_NODES_DEFAULT = 400
GRAPH_DEBOUNCE_MS = 1200


@dataclass(frozen=True)
class SettingsKeys:
    VAULT_DIR: str = "vault/dir"
    CASE_SENSITIVE: str = "graph/case_sensitive"
    GRAPH_MODE: str = "graph/mode"
    GRAPH_DEPTH: str = "graph/depth"
    GRAPH_MAX_NODES: str = "graph/max_nodes"


KEYS = SettingsKeys()


def open_settings(path: Path | None = None) -> QSettings:
    """User settings store, or an INI file when a path is given."""
    if path is not None:
        return QSettings(str(path), QSettings.Format.IniFormat)
    return QSettings(ORG_NAME, APP_NAME)


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except (TypeError, ValueError):
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    # INI-backed settings hand booleans back as "true" / "false"
    val = settings.value(key, default)
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        s = val.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
        return default
    try:
        return bool(int(val))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class GraphConfig:
    vault_dir: Path | None = None
    case_sensitive: bool = True
    mode: str = GRAPH_MODE_DEFAULT
    depth: int = GRAPH_DEPTH_DEFAULT
    max_nodes: int = GRAPH_MAX_NODES_DEFAULT

    @classmethod
    def from_settings(cls, settings: QSettings) -> "GraphConfig":
        vault = get_str(settings, KEYS.VAULT_DIR, "").strip()
        return cls(
            vault_dir=Path(vault) if vault else None,
            case_sensitive=get_bool(settings, KEYS.CASE_SENSITIVE, True),
            mode=get_str(settings, KEYS.GRAPH_MODE, GRAPH_MODE_DEFAULT),
            depth=get_int(settings, KEYS.GRAPH_DEPTH, GRAPH_DEPTH_DEFAULT),
            max_nodes=get_int(settings, KEYS.GRAPH_MAX_NODES, GRAPH_MAX_NODES_DEFAULT),
        )

    def save(self, settings: QSettings) -> None:
        if self.vault_dir is not None:
            settings.setValue(KEYS.VAULT_DIR, str(self.vault_dir))
        settings.setValue(KEYS.CASE_SENSITIVE, self.case_sensitive)
        settings.setValue(KEYS.GRAPH_MODE, self.mode)
        settings.setValue(KEYS.GRAPH_DEPTH, self.depth)
        settings.setValue(KEYS.GRAPH_MAX_NODES, self.max_nodes)
        settings.sync()
