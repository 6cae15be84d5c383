# notegraph/workers/vault_load.py

from __future__ import annotations

import time
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal

from notegraph.infrastructure.vault_repo import VaultRepository


class VaultLoadSignals(QObject):
    """
    finished(req_id, payload)
    failed(req_id, error_message)
    """
    finished = Signal(int, dict)
    failed = Signal(int, str)


class VaultLoadWorker(QRunnable):
    """
    Background worker that reads every note of a vault from disk.

    Only reads files: the NoteGraph is filled on the caller's thread.

    OUTPUT:
      payload = {
        vault_dir: str,
        records: list[tuple[str, str]],   # (title, body)
        stats: {...}
      }
    """

    def __init__(self, *, req_id: int, vault_dir: Path):
        super().__init__()
        self.req_id = req_id
        self.repo = VaultRepository(Path(vault_dir))
        self.signals = VaultLoadSignals()

    def run(self) -> None:
        try:
            payload = self._run_internal()
            self.signals.finished.emit(self.req_id, payload)
        except Exception as exc:
            self.signals.failed.emit(self.req_id, str(exc))

    # ───────────────────────── internal ─────────────────────────

    def _run_internal(self) -> dict:
        t0 = time.perf_counter()

        if not self.repo.vault_dir.is_dir():
            raise FileNotFoundError(f"vault directory not found: {self.repo.vault_dir}")

        total = len(self.repo.list_paths())
        records = list(self.repo.iter_notes())

        return {
            "vault_dir": str(self.repo.vault_dir),
            "records": records,
            "stats": {
                "files": total,
                "loaded": len(records),
                "skipped": total - len(records),
                "time_ms": (time.perf_counter() - t0) * 1000.0,
            },
        }
