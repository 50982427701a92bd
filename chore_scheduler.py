#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Seeded greedy chore scheduler.

Distributes a catalogue of recurring chores over participants and weeks:

* every task definition ``(name, count)`` is expanded into ``count`` instances
* the instance order is shuffled once with a seeded Mulberry32 generator
* a greedy builder places each instance into a (week, participant) slot while
  respecting the per-participant weekly target (hard) and avoiding repeated
  chores for the same participant (soft, two-pass)
* a bounded retry loop wraps the builder and fails loudly when no attempt
  succeeds

Same inputs + same seed ⇒ the same schedule. Schedules are only reproducible
with this exact generator; the constants below must not change.
"""

from __future__ import annotations

import copy
import csv
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

# =============== CONFIG ==============================================
DEFAULT_CONFIG = {
    "MAX_TRIES": 500,
    "DEFAULT_SEED": 42,
    # False: every retry reuses the single seed permutation (strict parity).
    # True: attempts 2..n reshuffle the previous order with the same generator.
    "RETRY_RESHUFFLE": False,
    "EXPORT": {
        "HEADER": ["Woche", "Kind", "Aufgaben"],
        "TASK_SEPARATOR": "; ",
    },
}


def deep_update(dst: dict, src: dict) -> dict:
    """Recursively merge ``src`` into ``dst`` (in-place)."""

    for key, value in (src or {}).items():
        if isinstance(value, dict) and isinstance(dst.get(key), dict):
            deep_update(dst[key], value)
        else:
            dst[key] = copy.deepcopy(value)
    return dst


def build_config(overrides: dict | None = None) -> dict:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if overrides:
        unknown = sorted(k for k in overrides if k not in DEFAULT_CONFIG)
        if unknown:
            raise KeyError(f"Unknown config keys: {', '.join(unknown)}")
        deep_update(cfg, overrides)
    if int(cfg["MAX_TRIES"]) <= 0:
        raise ValueError("MAX_TRIES must be >0")
    return cfg

# =====================================================================

# -------------------- Errors --------------------
class SchedulerError(ValueError):
    """Base class for every failure raised by the scheduler."""


class ValidationError(SchedulerError):
    pass


class CapacityError(SchedulerError):
    def __init__(self, instance_count: int, capacity: int):
        self.instance_count = instance_count
        self.capacity = capacity
        super().__init__(
            f"Too many task occurrences ({instance_count}) for the chosen weekly targets "
            f"(capacity {capacity})."
        )


class SchedulingFailure(SchedulerError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not build a valid plan in {attempts} attempts - adjust tasks or weekly targets."
        )

# -------------------- Random source --------------------
MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK32


class SeededRandom:
    """Mulberry32 generator owning its own 32-bit state."""

    def __init__(self, seed: int):
        self.state = int(seed) & MASK32

    def next(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & MASK32
        t = self.state
        r = _imul(t ^ (t >> 15), t | 1)
        r ^= (r + _imul(r ^ (r >> 7), r | 61)) & MASK32
        return ((r ^ (r >> 14)) & MASK32) / 4294967296


def shuffle(items: Sequence, rng: SeededRandom) -> list:
    """Fisher-Yates shuffle into a new list; draws ``len(items) - 1`` values."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng.next() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out

# -------------------- Model types --------------------
@dataclass(frozen=True)
class TaskDefinition:
    name: str
    count: int


@dataclass(frozen=True)
class TaskInstance:
    name: str
    id: str


CatalogueEntry = Union[TaskDefinition, Tuple[str, int]]


def _as_definition(entry: CatalogueEntry) -> TaskDefinition:
    if isinstance(entry, TaskDefinition):
        return entry
    name, count = entry
    return TaskDefinition(name=name, count=count)


def expand_tasks(catalogue: Iterable[CatalogueEntry]) -> List[TaskInstance]:
    defs = [_as_definition(e) for e in catalogue]
    if not defs:
        raise ValidationError("No tasks given: the task catalogue is empty.")
    instances: List[TaskInstance] = []
    for d in defs:
        if not str(d.name).strip():
            raise ValidationError("Task names must not be blank.")
        if isinstance(d.count, bool) or not isinstance(d.count, int) or d.count < 0:
            raise ValidationError(f"Task '{d.name}' needs a count >= 0 (got {d.count!r}).")
        for k in range(d.count):
            instances.append(TaskInstance(name=d.name, id=f"{d.name}#{k + 1}"))
    return instances


@dataclass(frozen=True)
class CapacityModel:
    per_week: Tuple[int, ...]
    total: int

    @classmethod
    def from_targets(cls, weeks: int, participants: Sequence[str], targets: Sequence[int]) -> "CapacityModel":
        if len(targets) != weeks:
            raise ValidationError(
                f"Weekly targets must have exactly {weeks} values (got {len(targets)})."
            )
        per_week = tuple(int(n) * len(participants) for n in targets)
        return cls(per_week=per_week, total=sum(per_week))

    def check(self, instance_count: int) -> None:
        if instance_count > self.total:
            raise CapacityError(instance_count, self.total)


WeekPlan = Mapping[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Schedule:
    """Finished plan: ``weeks[w][participant]`` is the tuple of task names in assignment order.

    Weeks are stored as read-only mappings keyed by every participant (in input
    order), so neither the plan nor its weeks can be changed after the fact.
    """

    participants: Tuple[str, ...]
    weeks: Tuple[WeekPlan, ...]
    seed: Optional[int] = None
    attempts: int = 1

    def __post_init__(self) -> None:
        people = tuple(self.participants)
        frozen = tuple(
            MappingProxyType({p: tuple(week.get(p, ())) for p in people})
            for week in self.weeks
        )
        object.__setattr__(self, "participants", people)
        object.__setattr__(self, "weeks", frozen)

    def __hash__(self) -> int:
        return hash((
            self.participants,
            tuple(tuple(week.items()) for week in self.weeks),
            self.seed,
            self.attempts,
        ))

    def __len__(self) -> int:
        return len(self.weeks)

    def __getitem__(self, week: int) -> WeekPlan:
        return self.weeks[week]

    def __iter__(self) -> Iterator[WeekPlan]:
        return iter(self.weeks)

    def tasks_for(self, week: int, participant: str) -> Tuple[str, ...]:
        return self.weeks[week].get(participant, ())

    def load(self, week: int, participant: str) -> int:
        return len(self.tasks_for(week, participant))

    def task_names(self) -> List[str]:
        return [name for week in self.weeks for p in self.participants for name in week.get(p, ())]

    def totals(self) -> Dict[str, int]:
        return {p: sum(len(week.get(p, ())) for week in self.weeks) for p in self.participants}

# -------------------- Decision log --------------------
PLACEMENT_FIELDS = ["Step", "Attempt", "Instance", "Week", "Participant", "Pass", "Status", "Note"]


class PlacementLog:
    def __init__(self):
        self.rows: List[Dict[str, object]] = []
        self.step = 0

    def log(self, attempt: int, inst: Optional[TaskInstance], week: Optional[int], participant: str,
            pass_name: str, status: str, note: str = "") -> None:
        self.step += 1
        self.rows.append({
            "Step": self.step, "Attempt": attempt,
            "Instance": (inst.id if inst else ""),
            "Week": ("" if week is None else week + 1),
            "Participant": participant, "Pass": pass_name,
            "Status": status, "Note": note,
        })

    def write_csv(self, out: Path) -> None:
        with Path(out).open("w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=PLACEMENT_FIELDS)
            w.writeheader()
            for r in self.rows:
                w.writerow({k: r.get(k, "") for k in PLACEMENT_FIELDS})

# -------------------- Validation --------------------
def validate_inputs(participants: Sequence[str], catalogue: Sequence[CatalogueEntry], weeks: int,
                    weekly_targets: Sequence[int], max_tries: int) -> None:
    if not participants:
        raise ValidationError("No participants given.")
    if any(not str(p).strip() for p in participants):
        raise ValidationError("Participant names must not be blank.")
    dupes = sorted({p for p in participants if list(participants).count(p) > 1})
    if dupes:
        raise ValidationError(f"Participant names must be unique (duplicates: {', '.join(dupes)}).")
    if not catalogue:
        raise ValidationError("No tasks given: the task catalogue is empty.")
    if isinstance(weeks, bool) or not isinstance(weeks, int) or weeks <= 0:
        raise ValidationError(f"Invalid number of weeks: {weeks!r} (must be a positive integer).")
    if len(weekly_targets) != weeks:
        raise ValidationError(
            f"Weekly targets must have exactly {weeks} values (got {len(weekly_targets)})."
        )
    for w, n in enumerate(weekly_targets):
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValidationError(f"Weekly target for week {w + 1} must be an integer >= 0 (got {n!r}).")
    if isinstance(max_tries, bool) or not isinstance(max_tries, int) or max_tries <= 0:
        raise ValidationError(f"max_tries must be a positive integer (got {max_tries!r}).")

# -------------------- Builder --------------------
def build_attempt(
    instances: Sequence[TaskInstance],
    participants: Sequence[str],
    weekly_targets: Sequence[int],
    capacity: CapacityModel,
    *,
    attempt: int = 1,
    log: PlacementLog | None = None,
) -> Optional[List[Dict[str, List[str]]]]:
    """Place every instance once, in the given order.

    Returns the per-week ``{participant: [task, ...]}`` lists, or ``None`` as
    soon as one instance fits nowhere.
    """
    weeks = len(weekly_targets)
    schedule: List[Dict[str, List[str]]] = [{p: [] for p in participants} for _ in range(weeks)]
    week_load: List[Dict[str, int]] = [{p: 0 for p in participants} for _ in range(weeks)]
    used: Dict[Tuple[str, str], int] = {}
    w_ptr = 0

    for inst in instances:
        placed = False
        for turn in range(weeks):
            w = (w_ptr + turn) % weeks
            used_week = sum(week_load[w].values())
            if used_week >= capacity.per_week[w]:
                continue

            # sorted() is stable: equal loads keep participant input order
            by_load = sorted(participants, key=lambda p: week_load[w][p])
            target = weekly_targets[w]

            chosen = None
            pass_name = "first"
            for p in by_load:
                if used.get((p, inst.name), 0) == 0 and week_load[w][p] < target:
                    chosen = p
                    break
            if chosen is None:
                pass_name = "fallback"
                for p in by_load:
                    if week_load[w][p] < target:
                        chosen = p
                        break
            if chosen is None:
                continue

            schedule[w][chosen].append(inst.name)
            week_load[w][chosen] += 1
            used[(chosen, inst.name)] = used.get((chosen, inst.name), 0) + 1
            w_ptr = (w_ptr + 1) % weeks
            placed = True
            if log is not None:
                note = "repeat" if used[(chosen, inst.name)] > 1 else ""
                log.log(attempt, inst, w, chosen, pass_name, "Assigned", note)
            break

        if not placed:
            if log is not None:
                log.log(attempt, inst, None, "", "", "Unplaced", "no participant below target")
            return None
    return schedule

# -------------------- Retry controller --------------------
def generate_schedule(
    participants: Sequence[str],
    catalogue: Sequence[CatalogueEntry],
    weeks: int,
    weekly_targets: Sequence[int],
    seed: int | None = None,
    max_tries: int | None = None,
    *,
    config: dict | None = None,
    log: PlacementLog | None = None,
) -> Schedule:
    """Validate, expand, capacity-check, shuffle once, then build with bounded retries."""
    cfg = config if config is not None else build_config()
    seed = cfg["DEFAULT_SEED"] if seed is None else seed
    max_tries = cfg["MAX_TRIES"] if max_tries is None else max_tries
    participants = list(participants)
    weekly_targets = list(weekly_targets)

    validate_inputs(participants, catalogue, weeks, weekly_targets, max_tries)
    instances = expand_tasks(catalogue)
    if not instances:
        raise ValidationError("The task catalogue expands to no task occurrences (all counts are 0).")
    capacity = CapacityModel.from_targets(weeks, participants, weekly_targets)
    capacity.check(len(instances))

    rng = SeededRandom(seed)
    order = shuffle(instances, rng)

    for attempt in range(1, max_tries + 1):
        if attempt > 1 and cfg.get("RETRY_RESHUFFLE"):
            order = shuffle(order, rng)
        built = build_attempt(order, participants, weekly_targets, capacity, attempt=attempt, log=log)
        if built is not None:
            return Schedule(
                participants=tuple(participants),
                weeks=tuple(built),
                seed=int(seed),
                attempts=attempt,
            )
    raise SchedulingFailure(max_tries)
