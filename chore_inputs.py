# -*- coding: utf-8 -*-
"""Text parsing and saved settings for the chore planner.

The scheduler itself only accepts clean values. This module turns the
free-form inputs people type (``"Abwaschen: 4"`` lines, comma separated names,
``"5,5,3,2"`` targets) into those values and keeps the last used settings in a
small JSON file.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, List

from chore_scheduler import DEFAULT_CONFIG, TaskDefinition

SETTINGS_PATH = Path("chore_settings.json")

DEFAULT_SETTINGS: Dict[str, object] = {
    "kids": "Mael, Lenas, Elea",
    "tasks": "\n".join([
        "Abwaschen: 4",
        "Staubsaugen: 4",
        "Tisch decken: 4",
        "Wäsche zusammenlegen: 4",
        "Müll rausbringen: 4",
        "Bad putzen: 3",
        "Zimmer aufräumen: 6",
    ]),
    "weeks": 4,
    "targets": "5,5,3,2",
    "seed": DEFAULT_CONFIG["DEFAULT_SEED"],
}
DEFAULT_WEEKS = int(DEFAULT_SETTINGS["weeks"])
DEFAULT_SEED = int(DEFAULT_SETTINGS["seed"])

TASK_LINE_RE = re.compile(r"^(.*?):\s*(\d+)$")
LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def trim(s: str) -> str:
    return (s or "").strip()

# ------------------------ Parsers -------------------------------------

def parse_tasks(text: str) -> List[TaskDefinition]:
    """One task per line (or comma); ``Name: N`` sets the count, otherwise 1."""
    out: List[TaskDefinition] = []
    for raw in re.split(r"\n|,", text or ""):
        line = trim(raw)
        if not line:
            continue
        m = TASK_LINE_RE.match(line)
        if not m:
            out.append(TaskDefinition(name=line, count=1))
        else:
            out.append(TaskDefinition(name=trim(m.group(1)), count=int(m.group(2))))
    return out


def parse_name_list(text: str) -> List[str]:
    return [trim(s) for s in re.split(r",|\n", text or "") if trim(s)]


def parse_int_list(text: str) -> List[int]:
    """Comma/whitespace separated integers; tokens without a leading number are dropped."""
    values: List[int] = []
    for tok in re.split(r",|\s+", text or ""):
        m = LEADING_INT_RE.match(trim(tok))
        if m:
            values.append(int(m.group(0)))
    return values


def _to_int(value, default: int) -> int:
    m = LEADING_INT_RE.match(trim(str(value)))
    return int(m.group(0)) if m else default


def coerce_weeks(value) -> int:
    n = _to_int(value, DEFAULT_WEEKS)
    return n if n > 0 else DEFAULT_WEEKS


def coerce_seed(value) -> int:
    return _to_int(value, DEFAULT_SEED)

# ------------------------ Settings ------------------------------------

def load_settings(path: Path = SETTINGS_PATH) -> Dict[str, object]:
    """Saved settings merged over the defaults; a missing file yields the defaults."""
    settings = dict(DEFAULT_SETTINGS)
    path = Path(path)
    if path.exists():
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a JSON object")
        for key in DEFAULT_SETTINGS:
            if key in data and data[key] is not None:
                settings[key] = data[key]
    settings["weeks"] = coerce_weeks(settings["weeks"])
    settings["seed"] = coerce_seed(settings["seed"])
    return settings


def save_settings(settings: Dict[str, object], path: Path = SETTINGS_PATH) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {k: settings.get(k, DEFAULT_SETTINGS[k]) for k in DEFAULT_SETTINGS}
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return path


def capacity_summary(participants: List[str], tasks: List[TaskDefinition], targets: List[int]) -> Dict[str, int]:
    """Task occurrences vs. capacity (participants × sum of weekly targets)."""
    return {
        "task_count": sum(t.count for t in tasks),
        "capacity": sum(targets) * len(participants),
    }
