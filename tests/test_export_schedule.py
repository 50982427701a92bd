from __future__ import annotations

from pathlib import Path

from chore_scheduler import build_config, generate_schedule
from export_schedule import export_csv, load_schedule_csv, write_csv
from tests.utils import make_schedule


def _sample():
    return make_schedule(
        ["Mael", "Lenas"],
        [
            {"Mael": ["Abwaschen", "Zimmer aufräumen"], "Lenas": []},
            {"Mael": [], "Lenas": ["Bad putzen"]},
        ],
    )


def test_export_matches_expected_layout() -> None:
    assert export_csv(_sample()) == "\n".join([
        "Woche,Kind,Aufgaben",
        '1,Mael,"Abwaschen; Zimmer aufräumen"',
        '1,Lenas,""',
        '2,Mael,""',
        '2,Lenas,"Bad putzen"',
    ])


def test_export_honours_participant_order_and_config() -> None:
    cfg = build_config({"EXPORT": {"TASK_SEPARATOR": " + "}})
    text = export_csv(_sample(), participants=["Lenas", "Mael"], config=cfg)
    lines = text.splitlines()
    assert lines[1] == '1,Lenas,""'
    assert lines[2] == '1,Mael,"Abwaschen + Zimmer aufräumen"'


def test_export_escapes_quotes_and_commas() -> None:
    sched = make_schedule(["Ann, Jr."], [{"Ann, Jr.": ['Say "hi"']}])
    assert export_csv(sched).splitlines()[1] == '1,"Ann, Jr.","Say ""hi"""'


def test_written_plan_reads_back(tmp_path: Path) -> None:
    sched = generate_schedule(["Mael", "Lenas", "Elea"], [("Abwaschen", 4), ("Bad putzen", 3)], 3, [2, 2, 1], seed=11)
    path = write_csv(sched, tmp_path / "out" / "plan.csv")
    loaded = load_schedule_csv(path)
    assert loaded.participants == sched.participants
    assert loaded.weeks == sched.weeks
    assert loaded.seed is None


def test_task_names_with_semicolons_read_back(tmp_path: Path) -> None:
    sched = make_schedule(["Mael"], [{"Mael": ["Bad;Keller", "Abwaschen"]}])
    loaded = load_schedule_csv(write_csv(sched, tmp_path / "plan.csv"))
    assert loaded.tasks_for(0, "Mael") == ("Bad;Keller", "Abwaschen")
