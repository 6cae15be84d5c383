import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QCoreApplication

from notegraph.core.graph import NoteGraph
from notegraph.infrastructure.vault_repo import VaultRepository
from notegraph.services.graph_service import GraphService
from notegraph.settings import GraphConfig
from notegraph.workers.graph_build import GraphBuildWorker
from notegraph.workers.vault_load import VaultLoadWorker


@pytest.fixture(scope="module")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


def test_vault_load_worker_reads_notes(tmp_path):
    repo = VaultRepository(tmp_path)
    repo.write("A", "[[B]]")
    repo.write("B", "")
    (tmp_path / "Bad.md").write_bytes(b"\xff\xfe\xfa")

    payload = VaultLoadWorker(req_id=1, vault_dir=tmp_path)._run_internal()

    assert sorted(payload["records"]) == [("A", "[[B]]"), ("B", "")]
    assert payload["stats"]["files"] == 3
    assert payload["stats"]["skipped"] == 1


def test_vault_load_worker_reports_failure(qapp, tmp_path):
    worker = VaultLoadWorker(req_id=7, vault_dir=tmp_path / "missing")
    failures = []
    worker.signals.failed.connect(lambda rid, err: failures.append((rid, err)))

    worker.run()

    assert len(failures) == 1
    assert failures[0][0] == 7
    assert "not found" in failures[0][1]


def test_graph_build_worker_payload():
    g = NoteGraph()
    g.add_or_update_note("A", "[[B]] [[Ghost]]")
    g.add_or_update_note("B", "")

    worker = GraphBuildWorker(
        req_id=1,
        mode="global",
        depth=1,
        center=None,
        outgoing_snapshot=g.outgoing_snapshot(),
        existing_titles={n.title for n in g},
    )
    payload = worker._run_internal()

    assert payload["nodes"] == ["A", "B", "Ghost"]
    assert payload["edges"] == [("A", "B"), ("A", "Ghost")]


def test_graph_build_worker_copies_snapshot():
    outgoing = {"A": ["B"]}
    worker = GraphBuildWorker(
        req_id=1, mode="global", depth=1, center=None,
        outgoing_snapshot=outgoing, existing_titles={"A"},
    )
    outgoing["A"].append("C")
    assert worker._run_internal()["nodes"] == ["A", "B"]


class _RecordingPool:
    """Stands in for QThreadPool: keeps workers instead of running them."""

    def __init__(self):
        self.started = []

    def start(self, worker):
        self.started.append(worker)


def _service(graph, loaded, failed, built=None, pool=None):
    return GraphService(
        graph=graph,
        config=GraphConfig(),
        on_loaded=loaded.append,
        on_built=built.append if built is not None else (lambda payload: None),
        on_failed=failed.append,
        thread_pool=pool,
    )


def test_service_applies_current_load(qapp):
    g = NoteGraph()
    g.add_or_update_note("Stale", "")
    loaded, failed = [], []
    service = _service(g, loaded, failed)
    service._load_req_id = 2

    service._handle_loaded(1, {"records": [("Old", "")]})
    assert loaded == []
    assert g.titles() == ["Stale"]

    service._handle_loaded(2, {"records": [("HTML", "[[CSS]]"), ("CSS", "")]})
    assert len(loaded) == 1
    assert g.titles() == ["CSS", "HTML"]
    assert [n.title for n in g.backlinks("CSS")] == ["HTML"]


def test_service_drops_stale_failures(qapp):
    loaded, failed = [], []
    service = _service(NoteGraph(), loaded, failed)
    service._load_req_id = 3

    service._handle_load_failed(2, "old error")
    service._handle_load_failed(3, "boom")
    assert failed == ["boom"]


def _web_graph():
    g = NoteGraph()
    g.add_or_update_note("HTML", "[[CSS]] [[JavaScript]]")
    g.add_or_update_note("CSS", "")
    return g


def test_immediate_build_starts_worker(qapp):
    pool = _RecordingPool()
    built, failed = [], []
    service = _service(_web_graph(), [], failed, built=built, pool=pool)

    service.request_build(center="CSS", immediate=True)

    assert len(pool.started) == 1
    worker = pool.started[0]
    assert isinstance(worker, GraphBuildWorker)
    assert worker.req_id == 1
    assert worker.center == "CSS"
    assert worker.outgoing == {"HTML": ["CSS", "JavaScript"]}
    assert worker.existing_titles == {"HTML", "CSS"}

    worker.run()
    assert len(built) == 1
    assert built[0]["nodes"] == ["CSS", "HTML", "JavaScript"]
    assert failed == []


def test_debounced_build_waits_for_timer(qapp):
    pool = _RecordingPool()
    service = _service(_web_graph(), [], [], pool=pool)

    service.request_build()
    assert service._debounce_timer.isActive()
    assert pool.started == []

    service.stop()
    assert not service._debounce_timer.isActive()
    assert pool.started == []

    service.request_build()
    service.request_build()
    service._debounce_timer.timeout.emit()
    assert len(pool.started) == 1


def test_immediate_build_cancels_pending_timer(qapp):
    pool = _RecordingPool()
    service = _service(_web_graph(), [], [], pool=pool)

    service.request_build()
    service.request_build(immediate=True)

    assert not service._debounce_timer.isActive()
    assert len(pool.started) == 1


def test_stale_build_results_dropped(qapp):
    pool = _RecordingPool()
    built, failed = [], []
    service = _service(_web_graph(), [], failed, built=built, pool=pool)

    service.request_build(immediate=True)
    service.request_build(immediate=True)
    first, second = pool.started
    assert (first.req_id, second.req_id) == (1, 2)

    service._handle_built(1, {"nodes": ["old"]})
    service._handle_build_failed(1, "old error")
    assert built == []
    assert failed == []

    service._handle_build_failed(2, "boom")
    service._handle_built(2, {"nodes": ["new"]})
    assert failed == ["boom"]
    assert built == [{"nodes": ["new"]}]
