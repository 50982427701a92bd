#!/usr/bin/env python3
"""Draw who got which chore, and how the load sits across the weeks."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import networkx as nx

from chore_scheduler import Schedule
from export_schedule import load_schedule_csv

LAYOUT_CHOICES = ("bipartite", "spring")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Visualize a chore plan")
    ap.add_argument("--plan", default="chore_plan.csv", type=Path)
    ap.add_argument("--out-dir", default=Path("chore_graphs"), type=Path, help="Directory for generated images")
    ap.add_argument("--out-prefix", default="chore_graph", type=str, help="Base filename prefix for images")
    ap.add_argument("--layouts", nargs="+", default=list(LAYOUT_CHOICES), choices=LAYOUT_CHOICES)
    ap.add_argument("--dpi", type=int, default=200, help="Output DPI")
    ap.add_argument("--skip-heatmap", action="store_true", help="Skip the person × week load heatmap")
    return ap.parse_args(argv)


def build_assignment_graph(schedule: Schedule) -> nx.Graph:
    """Bipartite graph: people on one side, chore names on the other.

    Edge ``weight`` counts how often the person got the chore; ``weeks`` lists
    the (1-based) weeks it happened in.
    """
    graph = nx.Graph()
    for person in schedule.participants:
        graph.add_node(("person", person), label=person, bipartite=0, load=0)
    for w in range(len(schedule)):
        for person in schedule.participants:
            for name in schedule.tasks_for(w, person):
                task_node = ("task", name)
                if task_node not in graph:
                    graph.add_node(task_node, label=name, bipartite=1)
                pnode = ("person", person)
                graph.nodes[pnode]["load"] += 1
                if graph.has_edge(pnode, task_node):
                    graph.edges[pnode, task_node]["weight"] += 1
                    graph.edges[pnode, task_node]["weeks"].append(w + 1)
                else:
                    graph.add_edge(pnode, task_node, weight=1, weeks=[w + 1])
    if not graph.nodes:
        raise RuntimeError("No assignments to visualize")
    return graph


def repeated_pairs(graph: nx.Graph) -> List[Tuple[str, str, int]]:
    """(person, chore, count) for every chore a person got more than once."""
    out: List[Tuple[str, str, int]] = []
    for a, b, data in graph.edges(data=True):
        person, task = (a, b) if a[0] == "person" else (b, a)
        if data["weight"] > 1:
            out.append((person[1], task[1], data["weight"]))
    return sorted(out, key=lambda t: (-t[2], t[0], t[1]))


def _layout(graph: nx.Graph, layout: str) -> Dict[tuple, Tuple[float, float]]:
    if layout == "bipartite":
        people = [n for n, d in graph.nodes(data=True) if d["bipartite"] == 0]
        return nx.bipartite_layout(graph, people)
    if len(graph.nodes) == 1:
        return {next(iter(graph.nodes)): (0.0, 0.0)}
    return nx.spring_layout(graph, seed=42)


def draw_graph_variants(graph: nx.Graph, out_dir: Path, out_prefix: str, *, layouts: List[str], dpi: int) -> List[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    prefix = Path(out_prefix).stem or "chore_graph"
    generated: List[Path] = []
    colors = ["tab:purple" if d["bipartite"] == 0 else "tab:green" for _, d in graph.nodes(data=True)]
    labels = {n: d["label"] for n, d in graph.nodes(data=True)}
    widths = [1.0 + 1.5 * (d["weight"] - 1) for _, _, d in graph.edges(data=True)]
    edge_colors = ["tab:red" if d["weight"] > 1 else "tab:gray" for _, _, d in graph.edges(data=True)]

    for layout in layouts:
        positions = _layout(graph, layout)
        fig, ax = plt.subplots(figsize=(11, 8))
        nx.draw_networkx_nodes(graph, positions, ax=ax, node_color=colors, node_size=700, alpha=0.9)
        nx.draw_networkx_edges(graph, positions, ax=ax, width=widths, edge_color=edge_colors)
        nx.draw_networkx_labels(graph, positions, labels=labels, ax=ax, font_size=8)
        ax.set_title(f"Chore assignments ({layout} layout; red = repeated)")
        ax.set_axis_off()
        out_path = out_dir / f"{prefix}_{layout}.png"
        fig.tight_layout()
        fig.savefig(out_path, dpi=dpi)
        plt.close(fig)
        generated.append(out_path)
    return generated


def plot_week_heatmap(schedule: Schedule, out_path: Path, *, dpi: int) -> Path:
    people = list(schedule.participants)
    grid = [[schedule.load(w, p) for w in range(len(schedule))] for p in people]
    fig, ax = plt.subplots(figsize=(max(4, len(schedule) + 2), max(3, 0.5 * len(people) + 2)))
    im = ax.imshow(grid, cmap="viridis", aspect="auto")
    ax.set_xticks(range(len(schedule)))
    ax.set_xticklabels([f"Week {w + 1}" for w in range(len(schedule))])
    ax.set_yticks(range(len(people)))
    ax.set_yticklabels(people)
    for i, row in enumerate(grid):
        for j, val in enumerate(row):
            ax.text(j, i, str(val), ha="center", va="center", color="white", fontsize=8)
    fig.colorbar(im, ax=ax, label="Chores")
    ax.set_title("Chores per person and week")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=dpi)
    plt.close(fig)
    return out_path


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if not args.plan.exists():
        raise SystemExit(f"Missing file: {args.plan}")
    schedule = load_schedule_csv(args.plan)
    try:
        graph = build_assignment_graph(schedule)
    except RuntimeError as exc:
        raise SystemExit(f"{args.plan}: {exc}")
    for path in draw_graph_variants(graph, args.out_dir, args.out_prefix, layouts=args.layouts, dpi=args.dpi):
        print(f"Wrote graph to {path}")
    for person, task, count in repeated_pairs(graph):
        print(f"[info] {person} got '{task}' {count}x")
    if not args.skip_heatmap:
        prefix = Path(args.out_prefix).stem or "chore_graph"
        path = plot_week_heatmap(schedule, args.out_dir / f"{prefix}_weeks.png", dpi=args.dpi)
        print(f"Wrote analysis chart to {path}")


if __name__ == "__main__":
    main()
