import sys
import os
import io

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from notegraph import main as cli
from notegraph.core.errors import InvalidTitleError, NoteNotFoundError
from notegraph.infrastructure.vault_repo import VaultRepository
from notegraph.settings import GraphConfig, open_settings


@pytest.fixture
def vault(tmp_path):
    repo = VaultRepository(tmp_path / "vault")
    repo.ensure()
    repo.write("HTML", "See [[CSS]] and [[JavaScript|JS Basics]]")
    repo.write("CSS", "")
    repo.write("Layout", "[[css]]")
    return repo


def _run(vault, *argv, case_sensitive=True):
    args = cli.build_parser().parse_args(["--vault", str(vault.vault_dir), *argv])
    config = GraphConfig(vault_dir=vault.vault_dir, case_sensitive=case_sensitive)
    out = io.StringIO()
    code = cli.run_command(args, config, out=out)
    return code, out.getvalue().splitlines()


def test_notes(vault):
    assert _run(vault, "notes") == (0, ["CSS", "HTML", "Layout"])


def test_backlinks(vault):
    assert _run(vault, "backlinks", "CSS") == (0, ["HTML"])
    assert _run(vault, "backlinks", "CSS", case_sensitive=False) == (0, ["HTML", "Layout"])


def test_links(vault):
    code, lines = _run(vault, "links", "HTML")
    assert code == 0
    assert lines == ["CSS\tok", "JavaScript (JS Basics)\tmissing"]


def test_dangling(vault):
    code, lines = _run(vault, "dangling")
    assert lines == ["HTML -> JavaScript", "Layout -> css"]

    code, lines = _run(vault, "dangling", case_sensitive=False)
    assert lines == ["HTML -> JavaScript"]


def test_graph_local(vault):
    code, lines = _run(vault, "graph", "--mode", "local", "--center", "CSS", "--depth", "1")
    assert code == 0
    assert lines == ["CSS", "HTML", "HTML -> CSS"]


def test_rename(vault):
    code, lines = _run(vault, "rename", "CSS", "Styles")
    assert code == 0
    assert lines == ["HTML"]
    assert "[[Styles]]" in vault.read("HTML")


def test_rename_missing_raises(vault):
    with pytest.raises(NoteNotFoundError):
        _run(vault, "rename", "Ghost", "Other")


def test_case_flags():
    parser = cli.build_parser()
    assert parser.parse_args(["notes"]).case_sensitive is None
    assert parser.parse_args(["--ignore-case", "notes"]).case_sensitive is False
    assert parser.parse_args(["--case-sensitive", "notes"]).case_sensitive is True


def test_resolve_config_prefers_flags(tmp_path):
    ini = tmp_path / "s.ini"
    GraphConfig(vault_dir=tmp_path / "stored", case_sensitive=False, mode="local").save(open_settings(ini))

    args = cli.build_parser().parse_args(["--settings", str(ini), "notes"])
    cfg = cli.resolve_config(args)
    assert cfg.vault_dir == tmp_path / "stored"
    assert cfg.case_sensitive is False
    assert cfg.mode == "local"

    args = cli.build_parser().parse_args(
        ["--settings", str(ini), "--vault", str(tmp_path), "--case-sensitive", "notes"]
    )
    cfg = cli.resolve_config(args)
    assert cfg.vault_dir == tmp_path
    assert cfg.case_sensitive is True


def test_main_missing_vault(tmp_path, monkeypatch):
    monkeypatch.setattr("notegraph.logging_setup.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    code = cli.main(["--settings", str(tmp_path / "s.ini"), "--vault", str(tmp_path / "nope"), "notes"])
    assert code == 1


def test_rename_case_insensitive_renames_file(vault):
    code, lines = _run(vault, "rename", "css", "Styles", case_sensitive=False)
    assert (code, lines) == (0, ["HTML", "Layout"])
    assert vault.list_titles() == ["HTML", "Layout", "Styles"]
    assert vault.read("Layout") == "[[Styles]]"


def test_rename_to_unusable_title(vault):
    with pytest.raises(InvalidTitleError):
        _run(vault, "rename", "CSS", "...")
    assert vault.list_titles() == ["CSS", "HTML", "Layout"]


def test_main_rename_to_unusable_title_fails_cleanly(vault, tmp_path, monkeypatch):
    monkeypatch.setattr("notegraph.logging_setup.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    code = cli.main(
        ["--settings", str(tmp_path / "s.ini"), "--vault", str(vault.vault_dir), "rename", "CSS", "..."]
    )
    assert code == 1
    assert vault.list_titles() == ["CSS", "HTML", "Layout"]
