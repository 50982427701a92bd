from __future__ import annotations

from pathlib import Path

import visualize_schedule as viz
from tests.utils import make_schedule, run_script


def _sample():
    return make_schedule(
        ["A", "B"],
        [
            {"A": ["Dishes"], "B": ["Trash"]},
            {"A": ["Dishes"], "B": ["Dishes"]},
        ],
    )


def test_graph_counts_assignments_per_person_and_task() -> None:
    graph = viz.build_assignment_graph(_sample())
    assert graph.edges[("person", "A"), ("task", "Dishes")]["weight"] == 2
    assert graph.edges[("person", "A"), ("task", "Dishes")]["weeks"] == [1, 2]
    assert graph.nodes[("person", "B")]["load"] == 2
    assert viz.repeated_pairs(graph) == [("A", "Dishes", 2)]


def test_draws_graph_and_heatmap(tmp_path: Path) -> None:
    sched = _sample()
    graph = viz.build_assignment_graph(sched)
    paths = viz.draw_graph_variants(graph, tmp_path, "plan", layouts=["bipartite", "spring"], dpi=60)
    assert [p.name for p in paths] == ["plan_bipartite.png", "plan_spring.png"]
    heat = viz.plot_week_heatmap(sched, tmp_path / "weeks.png", dpi=60)
    assert heat.exists()


def test_script_exits_cleanly_on_empty_plan(tmp_path: Path) -> None:
    plan = tmp_path / "plan.csv"
    plan.write_text("Woche,Kind,Aufgaben\n", encoding="utf-8")
    result = run_script("visualize_schedule.py", "--plan", str(plan), "--out-dir", str(tmp_path / "g"), cwd=tmp_path)
    assert result.returncode != 0
    assert "No assignments to visualize" in result.stderr
    assert "Traceback" not in result.stderr
