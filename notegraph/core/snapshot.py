# notegraph/core/snapshot.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Iterable

GRAPH_MODES = ("global", "local")


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: list[str]
    edges: list[tuple[str, str]]
    stats: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {"nodes": list(self.nodes), "edges": list(self.edges), "stats": dict(self.stats)}


def normalize_graph_mode(mode: str, depth: int | str) -> tuple[str, int]:
    mode = (mode or "").strip().lower()
    if mode not in GRAPH_MODES:
        mode = "global"
    try:
        depth_i = int(depth)
    except (TypeError, ValueError):
        depth_i = 1
    return mode, max(1, depth_i)


def build_graph_snapshot(
    *,
    outgoing_snapshot: dict[str, list[str]],
    existing_titles: Iterable[str],
    mode: str = "global",
    depth: int = 1,
    center: str | None = None,
    max_nodes: int | None = None,
    include_dangling: bool = True,
) -> GraphSnapshot:
    """
    Build nodes / edges for a graph view from an outgoing-link snapshot.

    INPUT:
      - outgoing_snapshot: {src: [dst1, dst2, ...]}
      - existing_titles: titles of notes that exist

    Targets outside existing_titles are virtual nodes (dangling links);
    they are dropped when include_dangling is False.
    """
    t0 = time.perf_counter()
    mode, depth = normalize_graph_mode(mode, depth)

    existing = set(existing_titles)
    title_set = set(existing)
    edges_all: list[tuple[str, str]] = []

    for src, dst_list in outgoing_snapshot.items():
        title_set.add(src)
        for dst in dst_list:
            if dst not in existing and not include_dangling:
                continue
            title_set.add(dst)
            if src != dst:
                edges_all.append((src, dst))

    # preserve order & uniqueness
    edges_all = list(dict.fromkeys(edges_all))
    nodes_all = sorted(title_set, key=str.lower)

    if mode == "local" and center and center in title_set:
        nodes, edges = _local(nodes_all, edges_all, center=center, depth=depth)
    else:
        nodes, edges = _limit_global(nodes_all, edges_all, center=center, max_nodes=max_nodes)

    dt_ms = (time.perf_counter() - t0) * 1000.0
    return GraphSnapshot(
        nodes=nodes,
        edges=edges,
        stats={
            "mode": mode,
            "depth": depth,
            "nodes_all": len(nodes_all),
            "edges_all": len(edges_all),
            "time_ms": dt_ms,
        },
    )


# ───────────── global mode ─────────────


def _limit_global(
    nodes: list[str],
    edges: list[tuple[str, str]],
    *,
    center: str | None,
    max_nodes: int | None,
) -> tuple[list[str], list[tuple[str, str]]]:
    """
    Keep the highest-degree nodes when the graph is too big.
    The center (if any) is always kept.
    """
    if max_nodes is None or len(nodes) <= max_nodes:
        return nodes, edges

    max_nodes = max(1, int(max_nodes))

    degree = {n: 0 for n in nodes}
    for a, b in edges:
        degree[a] += 1
        degree[b] += 1

    ranked = sorted(nodes, key=lambda n: (-degree.get(n, 0), n.lower()))
    keep = ranked[:max_nodes]

    if center and center in degree and center not in keep:
        keep[-1] = center

    keep_set = set(keep)
    filtered_edges = [(a, b) for (a, b) in edges if a in keep_set and b in keep_set]
    return sorted(keep_set, key=str.lower), filtered_edges


# ───────────── local mode ─────────────


def _local(
    nodes: list[str],
    edges: list[tuple[str, str]],
    *,
    center: str,
    depth: int,
) -> tuple[list[str], list[tuple[str, str]]]:
    """Neighbourhood of center up to `depth` hops, ignoring edge direction."""
    adj: dict[str, set[str]] = {n: set() for n in nodes}
    for a, b in edges:
        adj.setdefault(a, set()).add(b)
        adj.setdefault(b, set()).add(a)

    visited = {center}
    frontier = {center}
    for _ in range(depth):
        nxt: set[str] = set()
        for v in frontier:
            nxt |= adj.get(v, set())
        nxt -= visited
        visited |= nxt
        frontier = nxt

    sub_edges = [(a, b) for (a, b) in edges if a in visited and b in visited]
    return sorted(visited, key=str.lower), sub_edges
