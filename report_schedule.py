#!/usr/bin/env python3
"""Summarize an exported chore plan.

Reads the plan CSV written by ``plan_chores.py`` and emits a per-person
CSV/console summary: how many chores each person got per week, how often the
same chore came back to the same person, and how far the plan is done according
to the completion flags kept in ``chore_done.json``.

Completion flags are keyed ``"<week>|<person>|<index>"`` (week and index
0-based, index = position in that person's list for the week). They belong to
this report only and never go back into the scheduler.
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from chore_scheduler import Schedule
from export_schedule import load_schedule_csv

DONE_PATH = Path("chore_done.json")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Generate a per-person chore report", formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--plan", default="chore_plan.csv", type=Path, help="CSV produced by plan_chores.py")
    ap.add_argument("--out", default=Path("reports") / "chore_report.csv", type=Path, help="Where to write the per-person CSV report")
    ap.add_argument("--summary", default=Path("reports") / "chore_report.txt", type=Path, help="Plaintext summary (set to '-' to skip)")
    ap.add_argument("--done", default=DONE_PATH, type=Path, help="JSON file with completion flags")
    ap.add_argument("--toggle", nargs=3, metavar=("WEEK", "PERSON", "ITEM"),
                    help="Flip the done flag of one chore (WEEK and ITEM are 1-based)")
    ap.add_argument("--reset-done", action="store_true", help="Clear all completion flags")
    ap.add_argument("--only", default="", help="Limit weekly progress to this person")
    ap.add_argument("--plots-bars", default="", help="PNG with per-person load bars (empty = skip)")
    ap.add_argument("--plots-lorenz", default="", help="PNG with the load distribution curve (empty = skip)")
    return ap.parse_args(argv)

# ------------------------ Completion flags ----------------------------

def done_key(week: int, person: str, idx: int) -> str:
    return f"{week}|{person}|{idx}"


def load_done(path: Path) -> Dict[str, bool]:
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        print(f"[warn] Ignoring unreadable done-state {path}: {exc}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): bool(v) for k, v in data.items()}


def save_done(done: Dict[str, bool], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(done, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def toggle_done(done: Dict[str, bool], week: int, person: str, idx: int) -> Dict[str, bool]:
    key = done_key(week, person, idx)
    updated = dict(done)
    updated[key] = not done.get(key, False)
    return updated


def visible_participants(schedule: Schedule, current: str = "") -> List[str]:
    """Only ``current`` when it is a known participant, otherwise everybody."""
    if current and current in schedule.participants:
        return [current]
    return list(schedule.participants)


def week_progress(schedule: Schedule, week: int, done: Dict[str, bool], people: Sequence[str]) -> Dict[str, int]:
    total = 0
    finished = 0
    for person in people:
        for i, _ in enumerate(schedule.tasks_for(week, person)):
            total += 1
            if done.get(done_key(week, person, i)):
                finished += 1
    pct = round(100 * finished / total) if total else 0
    return {"total": total, "done": finished, "percent": pct}

# ------------------------ Report --------------------------------------

def build_report(schedule: Schedule) -> List[Dict[str, object]]:
    report: List[Dict[str, object]] = []
    for person in schedule.participants:
        names = [n for w in range(len(schedule)) for n in schedule.tasks_for(w, person)]
        counts = Counter(names)
        repeats = sum(max(0, c - 1) for c in counts.values())
        row: Dict[str, object] = {"Person": person, "TotalTasks": len(names)}
        for w in range(len(schedule)):
            row[f"Week{w + 1}"] = schedule.load(w, person)
        row["DistinctTasks"] = len(counts)
        row["RepeatAssignments"] = repeats
        row["RepeatTasks"] = " | ".join(sorted(n for n, c in counts.items() if c > 1))
        report.append(row)
    return report


def write_report(rows: List[Dict[str, object]], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        path.write_text("Person,TotalTasks,DistinctTasks,RepeatAssignments,RepeatTasks\n", encoding="utf-8")
        return
    fieldnames = list(rows[0].keys())
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def write_summary(rows: List[Dict[str, object]], path: Path, progress: List[Dict[str, int]] | None = None) -> None:
    if str(path) == "-":
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["Chore report"]
    if not rows:
        lines.append("No participants found.")
    else:
        totals = [int(row["TotalTasks"]) for row in rows]
        lines.append(f"Participants: {len(rows)} (total tasks={sum(totals)})")
        lines.append(f"Load spread: min={min(totals)} max={max(totals)} range={max(totals) - min(totals)}")
        repeat_heavy = [row for row in rows if int(row["RepeatAssignments"]) > 0]
        if repeat_heavy:
            lines.append("Repeated chores: " + ", ".join(f"{row['Person']} ({row['RepeatAssignments']})" for row in repeat_heavy))
    for w, prog in enumerate(progress or []):
        lines.append(f"Week {w + 1}: {prog['done']}/{prog['total']} done ({prog['percent']}%)")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

# ------------------------ Plots ---------------------------------------

def plot_loads(schedule: Schedule, bars_path: str | Path = "", lorenz_path: str | Path = "", dpi: int = 160) -> List[Path]:
    written: List[Path] = []
    totals = schedule.totals()
    people_sorted = sorted(schedule.participants, key=lambda p: (totals.get(p, 0), p))

    if bars_path:
        plt.figure(figsize=(max(6, len(people_sorted)), 5))
        bottom = [0] * len(people_sorted)
        for w in range(len(schedule)):
            vals = [schedule.load(w, p) for p in people_sorted]
            plt.bar(people_sorted, vals, bottom=bottom, label=f"Week {w + 1}")
            bottom = [b + v for b, v in zip(bottom, vals)]
        plt.xticks(rotation=60, ha='right')
        plt.ylabel("Chores")
        plt.title("Per-person load, stacked by week")
        plt.legend()
        plt.tight_layout()
        Path(bars_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(bars_path, dpi=dpi)
        plt.close('all')
        written.append(Path(bars_path))

    if lorenz_path and totals:
        xs = sorted(totals.values())
        cum = [0.0]; s = 0.0
        for v in xs: s += v; cum.append(s)
        if s > 0: cum = [c / s for c in cum]
        plt.figure(figsize=(6, 5))
        plt.plot([i / len(xs) for i in range(len(cum))], cum, marker='o')
        plt.plot([0, 1], [0, 1], '--')
        plt.xlabel("Fraction of people (sorted)")
        plt.ylabel("Fraction of total load")
        plt.title("Load distribution (Lorenz-like)")
        plt.tight_layout()
        Path(lorenz_path).parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(lorenz_path, dpi=dpi)
        plt.close('all')
        written.append(Path(lorenz_path))
    return written


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    if not args.plan.exists():
        raise SystemExit(f"Missing file: {args.plan}")
    schedule = load_schedule_csv(args.plan)

    done = load_done(args.done)
    if args.reset_done:
        done = {}
        save_done(done, args.done)
        print(f"Cleared completion flags in {args.done}")
    if args.toggle:
        week_raw, person, item_raw = args.toggle
        week, item = int(week_raw) - 1, int(item_raw) - 1
        if not (0 <= week < len(schedule)) or not (0 <= item < schedule.load(week, person)):
            raise SystemExit(f"No chore #{item_raw} for {person} in week {week_raw}")
        done = toggle_done(done, week, person, item)
        save_done(done, args.done)
        state = "done" if done[done_key(week, person, item)] else "open"
        print(f"Week {week_raw}, {person}: '{schedule.tasks_for(week, person)[item]}' is now {state}")

    people = visible_participants(schedule, args.only)
    progress = [week_progress(schedule, w, done, people) for w in range(len(schedule))]
    rows = build_report(schedule)
    write_report(rows, args.out)
    write_summary(rows, args.summary, progress)
    for w, prog in enumerate(progress):
        print(f"Week {w + 1}: {prog['done']}/{prog['total']} done ({prog['percent']}%)")
    print(f"Wrote report to {args.out}")
    if str(args.summary) != "-":
        print(f"Summary saved to {args.summary}")

    if args.plots_bars or args.plots_lorenz:
        for path in plot_loads(schedule, args.plots_bars, args.plots_lorenz):
            print(f"Wrote plot to {path}", file=sys.stderr)


if __name__ == "__main__":
    main()
