"""Fixtures and helpers for scheduler tests."""
from __future__ import annotations

import os
import subprocess
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, Sequence, Tuple

from chore_scheduler import Schedule, TaskInstance

ROOT = Path(__file__).resolve().parents[1]

PARTICIPANTS: Tuple[str, ...] = ("X", "Y", "Z")
SCENARIO_A_TASKS = [("T1", 6), ("T2", 6)]


def instances(*specs: Tuple[str, int]) -> list:
    """``instances(("T", 2), ("U", 1))`` → T#1, T#2, U#1 in that order."""
    out = []
    for name, count in specs:
        for k in range(count):
            out.append(TaskInstance(name=name, id=f"{name}#{k + 1}"))
    return out


def make_schedule(participants: Sequence[str], weeks: Iterable[Dict[str, Sequence[str]]], seed: int | None = None) -> Schedule:
    return Schedule(
        participants=tuple(participants),
        weeks=tuple(weeks),
        seed=seed,
    )


def expanded_names(catalogue: Iterable[Tuple[str, int]]) -> Counter:
    c: Counter = Counter()
    for name, count in catalogue:
        c[name] += count
    return c


def run_script(name: str, *args: str, cwd: Path) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env.setdefault("MPLBACKEND", "Agg")
    return subprocess.run(
        [sys.executable, str(ROOT / name), *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
