# notegraph/main.py
"""Command-line entrypoint.

Loads a vault folder into a NoteGraph and answers link queries:
backlinks, outbound links, dangling links, graph snapshots, rename.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from notegraph.core.errors import NoteGraphError
from notegraph.core.graph import NoteGraph
from notegraph.core.snapshot import GRAPH_MODES, build_graph_snapshot
from notegraph.infrastructure.vault_repo import VaultRepository
from notegraph.logging_setup import install_global_exception_hooks, setup_logging
from notegraph.services.rename_service import rename_note_in_vault
from notegraph.settings import GraphConfig, open_settings


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="notegraph", description="Wikilink graph of a markdown vault")
    p.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to notes folder (vault); defaults to the stored setting or ./vault",
    )
    case = p.add_mutually_exclusive_group()
    case.add_argument("--ignore-case", dest="case_sensitive", action="store_false", default=None)
    case.add_argument("--case-sensitive", dest="case_sensitive", action="store_true", default=None)
    p.add_argument("--settings", type=Path, default=None, help="INI settings file")
    p.add_argument("-v", "--verbose", action="store_true")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("notes", help="List note titles")

    bl = sub.add_parser("backlinks", help="Notes linking to TITLE")
    bl.add_argument("title")

    ln = sub.add_parser("links", help="Outbound links of TITLE")
    ln.add_argument("title")

    sub.add_parser("dangling", help="Links to notes that do not exist")

    gr = sub.add_parser("graph", help="Print graph nodes and edges")
    gr.add_argument("--mode", choices=GRAPH_MODES, default=None)
    gr.add_argument("--center", default=None)
    gr.add_argument("--depth", type=int, default=None)
    gr.add_argument("--max-nodes", type=int, default=None)

    rn = sub.add_parser("rename", help="Rename a note and rewrite links to it")
    rn.add_argument("old_title")
    rn.add_argument("new_title")

    return p


def resolve_config(args: argparse.Namespace) -> GraphConfig:
    stored = GraphConfig.from_settings(open_settings(args.settings))

    vault = args.vault or stored.vault_dir or Path.cwd() / "vault"
    case_sensitive = stored.case_sensitive if args.case_sensitive is None else args.case_sensitive

    return GraphConfig(
        vault_dir=Path(vault),
        case_sensitive=case_sensitive,
        mode=stored.mode,
        depth=stored.depth,
        max_nodes=stored.max_nodes,
    )


def load_graph(config: GraphConfig) -> tuple[NoteGraph, VaultRepository]:
    repo = VaultRepository(config.vault_dir)
    graph = NoteGraph(case_sensitive=config.case_sensitive)
    graph.load(repo.iter_notes())
    return graph, repo


def run_command(args: argparse.Namespace, config: GraphConfig, out=None) -> int:
    out = out or sys.stdout
    graph, repo = load_graph(config)

    if args.command == "notes":
        for title in graph.titles():
            print(title, file=out)

    elif args.command == "backlinks":
        for note in graph.backlinks(args.title):
            print(note.title, file=out)

    elif args.command == "links":
        for link in graph.outgoing_links(args.title):
            status = "ok" if graph.resolve_link(link.source_title, link.target_title) else "missing"
            alias = f" ({link.alias})" if link.alias else ""
            print(f"{link.target_title}{alias}\t{status}", file=out)

    elif args.command == "dangling":
        for link in graph.dangling_links():
            print(f"{link.source_title} -> {link.target_title}", file=out)

    elif args.command == "graph":
        center = args.center
        if center is not None:
            note = graph.get(center)
            center = note.title if note is not None else center
        snapshot = build_graph_snapshot(
            outgoing_snapshot=graph.outgoing_snapshot(),
            existing_titles=graph.titles(),
            mode=args.mode or config.mode,
            depth=args.depth if args.depth is not None else config.depth,
            center=center,
            max_nodes=args.max_nodes if args.max_nodes is not None else config.max_nodes,
        )
        for node in snapshot.nodes:
            print(node, file=out)
        for src, dst in snapshot.edges:
            print(f"{src} -> {dst}", file=out)

    elif args.command == "rename":
        for title in rename_note_in_vault(
            graph, repo, old_title=args.old_title, new_title=args.new_title
        ):
            print(title, file=out)

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log = setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING)
    install_global_exception_hooks(log)

    config = resolve_config(args)
    if not config.vault_dir.is_dir():
        log.error("Vault directory not found: %s", config.vault_dir)
        return 1

    try:
        return run_command(args, config)
    except (NoteGraphError, OSError) as exc:
        log.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
