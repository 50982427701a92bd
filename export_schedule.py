# -*- coding: utf-8 -*-
"""CSV export of a finished chore plan.

Format (one row per week × participant, weeks 1-indexed, participants in
input order)::

    Woche,Kind,Aufgaben
    1,Mael,"Abwaschen; Zimmer aufräumen"
    1,Lenas,""

The task field is always double-quoted; ``load_schedule_csv`` reads such a file
back into a ``Schedule`` for reporting.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from chore_inputs import trim
from chore_scheduler import DEFAULT_CONFIG, Schedule


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _cell(value: str) -> str:
    if any(ch in value for ch in (',', '"', '\n', '\r')):
        return _quote(value)
    return value


def export_csv(schedule: Schedule, participants: Sequence[str] | None = None, config: dict | None = None) -> str:
    export_cfg = (config or DEFAULT_CONFIG)["EXPORT"]
    sep = export_cfg["TASK_SEPARATOR"]
    people = list(participants) if participants is not None else list(schedule.participants)
    rows = [",".join(export_cfg["HEADER"])]
    for w in range(len(schedule)):
        for person in people:
            tasks = schedule.tasks_for(w, person)
            rows.append(f"{w + 1},{_cell(person)},{_quote(sep.join(tasks))}")
    return "\n".join(rows)


def write_csv(schedule: Schedule, path: Path, participants: Sequence[str] | None = None,
              config: dict | None = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv(schedule, participants, config) + "\n", encoding="utf-8")
    return path


def load_schedule_csv(path: Path, config: dict | None = None) -> Schedule:
    """Rebuild a ``Schedule`` from an exported plan (seed is unknown afterwards)."""
    export_cfg = (config or DEFAULT_CONFIG)["EXPORT"]
    week_col, person_col, tasks_col = export_cfg["HEADER"]
    # split on the full separator so names like "Bad;Keller" survive
    sep = export_cfg["TASK_SEPARATOR"]

    text = Path(path).read_bytes().decode("utf-8-sig", errors="replace")
    rdr = csv.DictReader(io.StringIO(text))
    missing = [c for c in (week_col, person_col, tasks_col) if c not in (rdr.fieldnames or [])]
    if missing:
        raise ValueError(f"{path}: missing columns {', '.join(missing)}")

    people: List[str] = []
    by_week: Dict[int, Dict[str, Tuple[str, ...]]] = {}
    for row in rdr:
        week = int(trim(row.get(week_col, "")))
        person = trim(row.get(person_col, ""))
        if not person:
            continue
        if person not in people:
            people.append(person)
        raw = row.get(tasks_col) or ""
        tasks = tuple(trim(t) for t in raw.split(sep) if trim(t)) if sep else (raw,)
        by_week.setdefault(week, {})[person] = tasks

    n_weeks = max(by_week) if by_week else 0
    weeks = tuple(by_week.get(w + 1, {}) for w in range(n_weeks))
    return Schedule(participants=tuple(people), weeks=weeks, seed=None)
