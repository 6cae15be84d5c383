# notegraph/services/graph_service.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, QThreadPool, QTimer, Slot

from notegraph.core.graph import NoteGraph
from notegraph.settings import GRAPH_DEBOUNCE_MS, GraphConfig
from notegraph.workers.graph_build import GraphBuildWorker
from notegraph.workers.vault_load import VaultLoadWorker


class GraphService(QObject):
    """
    Orchestrates background work around one NoteGraph.

    Responsibilities:
    - load a vault from disk off the UI thread, apply it on this thread
    - debounce snapshot rebuilds
    - manage req_id (drop stale results)
    """

    def __init__(
        self,
        *,
        graph: NoteGraph,
        config: GraphConfig,
        on_loaded: Callable[[dict], None],
        on_built: Callable[[dict], None],
        on_failed: Callable[[str], None],
        thread_pool: Optional[QThreadPool] = None,
        debounce_ms: int = GRAPH_DEBOUNCE_MS,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__()

        self.graph = graph
        self.config = config
        self._pool = thread_pool or QThreadPool.globalInstance()
        self._on_loaded = on_loaded
        self._on_built = on_built
        self._on_failed = on_failed
        self._log = logger or logging.getLogger(__name__)

        self._load_req_id = 0
        self._build_req_id = 0
        self._center: str | None = None

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(int(debounce_ms))
        self._debounce_timer.timeout.connect(self._build_now)

    # ───────────────────────── public API ─────────────────────────

    def load_vault(self, vault_dir: Path) -> int:
        """Start reading a vault. Returns the request id."""
        self._load_req_id += 1
        req_id = self._load_req_id

        worker = VaultLoadWorker(req_id=req_id, vault_dir=vault_dir)
        worker.signals.finished.connect(self._handle_loaded)
        worker.signals.failed.connect(self._handle_load_failed)

        self._log.info("Vault load requested: %s (req=%d)", vault_dir, req_id)
        self._pool.start(worker)
        return req_id

    def request_build(self, *, center: str | None = None, immediate: bool = False) -> None:
        """
        Request graph snapshot rebuild.

        If immediate=False → debounced.
        If immediate=True  → build immediately.
        """
        self._center = center
        if immediate:
            self.stop()
            self._build_now()
        else:
            self._debounce_timer.start()

    def stop(self) -> None:
        if self._debounce_timer.isActive():
            self._debounce_timer.stop()

    # ───────────────────────── internals ─────────────────────────

    def _build_now(self) -> None:
        self._build_req_id += 1
        req_id = self._build_req_id

        worker = GraphBuildWorker(
            req_id=req_id,
            mode=self.config.mode,
            depth=self.config.depth,
            center=self._center,
            outgoing_snapshot=self.graph.outgoing_snapshot(),
            existing_titles={note.title for note in self.graph},
            max_nodes=self.config.max_nodes,
        )
        worker.signals.finished.connect(self._handle_built)
        worker.signals.failed.connect(self._handle_build_failed)

        self._pool.start(worker)

    @Slot(int, dict)
    def _handle_loaded(self, req_id: int, payload: dict) -> None:
        if req_id != self._load_req_id:
            return
        self.graph.clear()
        self.graph.load((title, body) for title, body in payload.get("records", []))
        self._log.info("Vault loaded: %s stats=%s", payload.get("vault_dir"), payload.get("stats"))
        self._on_loaded(payload)

    @Slot(int, str)
    def _handle_load_failed(self, req_id: int, error: str) -> None:
        if req_id != self._load_req_id:
            return
        self._log.error("Vault load failed: %s", error)
        self._on_failed(error)

    @Slot(int, dict)
    def _handle_built(self, req_id: int, payload: dict) -> None:
        if req_id != self._build_req_id:
            return
        self._on_built(payload)

    @Slot(int, str)
    def _handle_build_failed(self, req_id: int, error: str) -> None:
        if req_id != self._build_req_id:
            return
        self._log.error("Graph build failed: %s", error)
        self._on_failed(error)
