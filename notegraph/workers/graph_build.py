# notegraph/workers/graph_build.py

from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal

from notegraph.core.snapshot import build_graph_snapshot


class GraphBuildSignals(QObject):
    finished = Signal(int, dict)   # req_id, payload
    failed = Signal(int, str)      # req_id, error


class GraphBuildWorker(QRunnable):
    """
    Background worker that builds a graph snapshot.

    Works on a copy of the outgoing links, never on the live NoteGraph.
    """

    def __init__(
        self,
        *,
        req_id: int,
        mode: str,
        depth: int,
        center: str | None,
        outgoing_snapshot: dict[str, list[str]],
        existing_titles: set[str],
        max_nodes: int | None = None,
        include_dangling: bool = True,
    ):
        super().__init__()

        self.req_id = req_id
        self.mode = mode
        self.depth = depth
        self.center = center
        self.outgoing = {src: list(dsts) for src, dsts in outgoing_snapshot.items()}
        self.existing_titles = set(existing_titles)
        self.max_nodes = max_nodes
        self.include_dangling = include_dangling

        self.signals = GraphBuildSignals()

    def run(self) -> None:
        try:
            payload = self._run_internal()
            self.signals.finished.emit(self.req_id, payload)
        except Exception as exc:
            self.signals.failed.emit(self.req_id, str(exc))

    def _run_internal(self) -> dict:
        snapshot = build_graph_snapshot(
            outgoing_snapshot=self.outgoing,
            existing_titles=self.existing_titles,
            mode=self.mode,
            depth=self.depth,
            center=self.center,
            max_nodes=self.max_nodes,
            include_dangling=self.include_dangling,
        )
        return snapshot.to_payload()
