from __future__ import annotations

import json
from pathlib import Path

import report_schedule as report
from export_schedule import write_csv
from tests.utils import make_schedule, run_script


def _sample():
    return make_schedule(
        ["A", "B"],
        [
            {"A": ["Dishes", "Trash"], "B": ["Vacuum"]},
            {"A": ["Dishes"], "B": []},
        ],
    )


def test_build_report_counts_loads_and_repeats() -> None:
    rows = report.build_report(_sample())
    by_person = {r["Person"]: r for r in rows}
    assert by_person["A"]["TotalTasks"] == 3
    assert by_person["A"]["Week1"] == 2 and by_person["A"]["Week2"] == 1
    assert by_person["A"]["RepeatAssignments"] == 1
    assert by_person["A"]["RepeatTasks"] == "Dishes"
    assert by_person["B"]["RepeatAssignments"] == 0


def test_week_progress_with_done_flags_and_filter() -> None:
    sched = _sample()
    done = report.toggle_done({}, 0, "A", 1)
    assert done == {"0|A|1": True}
    assert report.week_progress(sched, 0, done, ["A", "B"]) == {"total": 3, "done": 1, "percent": 33}
    assert report.week_progress(sched, 0, done, report.visible_participants(sched, "A")) == {
        "total": 2, "done": 1, "percent": 50,
    }
    assert report.week_progress(sched, 1, done, ["B"]) == {"total": 0, "done": 0, "percent": 0}
    assert report.toggle_done(done, 0, "A", 1) == {"0|A|1": False}
    assert report.visible_participants(sched, "Nobody") == ["A", "B"]


def test_done_state_round_trip_and_bad_file(tmp_path: Path) -> None:
    path = tmp_path / "done.json"
    report.save_done({"0|A|0": True}, path)
    assert report.load_done(path) == {"0|A|0": True}
    path.write_text("{broken", encoding="utf-8")
    assert report.load_done(path) == {}
    assert report.load_done(tmp_path / "missing.json") == {}


def test_plot_loads_writes_pngs(tmp_path: Path) -> None:
    written = report.plot_loads(_sample(), tmp_path / "bars.png", tmp_path / "lorenz.png", dpi=60)
    assert [p.name for p in written] == ["bars.png", "lorenz.png"]
    assert all(p.exists() for p in written)


def test_report_script_toggles_and_summarizes(tmp_path: Path) -> None:
    plan = write_csv(_sample(), tmp_path / "plan.csv")
    done = tmp_path / "done.json"
    result = run_script(
        "report_schedule.py",
        "--plan", str(plan),
        "--out", str(tmp_path / "report.csv"),
        "--summary", str(tmp_path / "summary.txt"),
        "--done", str(done),
        "--toggle", "1", "A", "2",
        cwd=tmp_path,
    )
    assert result.returncode == 0, result.stderr
    assert "'Trash' is now done" in result.stdout
    assert json.loads(done.read_text(encoding="utf-8")) == {"0|A|1": True}
    summary = (tmp_path / "summary.txt").read_text(encoding="utf-8")
    assert "Participants: 2 (total tasks=4)" in summary
    assert "Week 1: 1/3 done (33%)" in summary
    assert "A (1)" in summary


def test_report_script_rejects_unknown_chore(tmp_path: Path) -> None:
    plan = write_csv(_sample(), tmp_path / "plan.csv")
    result = run_script(
        "report_schedule.py",
        "--plan", str(plan),
        "--summary", "-",
        "--out", str(tmp_path / "report.csv"),
        "--toggle", "2", "B", "1",
        cwd=tmp_path,
    )
    assert result.returncode != 0
    assert "No chore #1 for B in week 2" in result.stderr
