#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Plan chores for a group of people over a number of weeks.

Inputs come from ``chore_settings.json`` (or the built-in defaults) and can be
overridden per run:

* ``--kids``     comma separated participant names
* ``--tasks``    ``"Name: N"`` entries separated by newlines or commas
* ``--weeks``    number of weeks
* ``--targets``  max chores per person for each week, e.g. ``5,5,3,2``
* ``--seed``     seed of the shuffle (``--reshuffle`` picks a fresh one)

Outputs:

* ``chore_plan.csv``   – ``Woche,Kind,Aufgaben`` export
* optional decision log CSV with every placement the builder made
* stdout: the plan, week by week
"""

from __future__ import annotations

import argparse
import json
import random
from pathlib import Path
from typing import Sequence

import chore_inputs as inputs
from chore_scheduler import PlacementLog, Schedule, SchedulerError, build_config, generate_schedule
from export_schedule import write_csv


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Distribute chores fairly over people and weeks",
                                 formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    ap.add_argument("--settings", default=inputs.SETTINGS_PATH, type=Path,
                    help="JSON file with saved settings (missing file = defaults)")
    ap.add_argument("--kids", help="Comma separated participant names")
    ap.add_argument("--tasks", help='Tasks, one per line or comma separated, optional ": count"')
    ap.add_argument("--tasks-file", type=Path, help="Read the task list from this text file")
    ap.add_argument("--weeks", type=int, help="Number of weeks")
    ap.add_argument("--targets", help="Weekly target per person, e.g. 5,5,3,2")
    ap.add_argument("--seed", type=int, help="Shuffle seed")
    ap.add_argument("--reshuffle", action="store_true", help="Ignore --seed and pick a random one")
    ap.add_argument("--max-tries", type=int, help="Upper bound on build attempts (default from config)")
    ap.add_argument("--retry-reshuffle", action="store_true",
                    help="Reshuffle the task order on every retry instead of repeating it")
    ap.add_argument("--config", type=Path, help="Optional JSON file with CONFIG overrides")
    ap.add_argument("--out", default=Path("chore_plan.csv"), type=Path, help="CSV export of the plan")
    ap.add_argument("--decision-log", type=Path, help="Optional CSV with every placement decision")
    ap.add_argument("--save-settings", action="store_true", help="Store the inputs used in --settings")
    ap.add_argument("--only", nargs="?", const="", default=None,
                    help="Print only this person (no value = the first participant)")
    return ap.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> dict:
    settings = inputs.load_settings(args.settings)
    if args.kids is not None:
        settings["kids"] = args.kids
    if args.tasks_file is not None:
        if not args.tasks_file.exists():
            raise SystemExit(f"Missing file: {args.tasks_file}")
        settings["tasks"] = args.tasks_file.read_text(encoding="utf-8")
    if args.tasks is not None:
        settings["tasks"] = args.tasks
    if args.weeks is not None:
        settings["weeks"] = args.weeks
    if args.targets is not None:
        settings["targets"] = args.targets
    if args.seed is not None:
        settings["seed"] = args.seed
    if args.reshuffle:
        settings["seed"] = random.randrange(10 ** 9)
    return settings


def format_schedule(schedule: Schedule, targets: Sequence[int], only: str | None = None) -> str:
    people = list(schedule.participants)
    if only is not None:
        current = only or people[0]
        if current in people:
            people = [current]
    lines = []
    for w in range(len(schedule)):
        lines.append(f"Week {w + 1}")
        for person in people:
            tasks = schedule.tasks_for(w, person)
            listing = ", ".join(tasks) if tasks else "- none -"
            lines.append(f"  {person} (target {targets[w]}/week): {listing}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    overrides: dict = {}
    if args.config:
        if not args.config.exists():
            raise SystemExit(f"Missing file: {args.config}")
        overrides = json.loads(args.config.read_text(encoding="utf-8"))
    if args.retry_reshuffle:
        overrides["RETRY_RESHUFFLE"] = True
    cfg = build_config(overrides)

    settings = resolve_settings(args)
    kids = inputs.parse_name_list(str(settings["kids"]))
    tasks = inputs.parse_tasks(str(settings["tasks"]))
    targets = inputs.parse_int_list(str(settings["targets"]))
    weeks = int(settings["weeks"])
    seed = int(settings["seed"])

    summary = inputs.capacity_summary(kids, tasks, targets)
    print(f"Task occurrences: {summary['task_count']} | capacity (people x weekly targets): {summary['capacity']}")

    log = PlacementLog() if args.decision_log else None
    try:
        schedule = generate_schedule(kids, tasks, weeks, targets, seed=seed, max_tries=args.max_tries,
                                     config=cfg, log=log)
    except SchedulerError as exc:
        raise SystemExit(f"ERROR: {exc}")
    finally:
        if log is not None:
            log.write_csv(args.decision_log)

    if args.save_settings:
        inputs.save_settings(settings, args.settings)
        print(f"Saved settings → {args.settings}")

    print(format_schedule(schedule, targets, args.only))
    write_csv(schedule, args.out, config=cfg)
    print(f"Wrote plan (seed {seed}, attempt {schedule.attempts}) → {args.out.resolve()}")
    if log is not None:
        print(f"Wrote decision log → {args.decision_log}")


if __name__ == "__main__":
    main()
