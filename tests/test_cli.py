"""Tests for the command-line interface."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from benefitsengine.cli import main
from benefitsengine.storage.repository import SQLiteRateStore


if TYPE_CHECKING:
    from pathlib import Path


def _run(db_path: Path, *args: str) -> None:
    main(["--db", str(db_path), "--today", "2025-06-01", *args])


@pytest.fixture
def seeded_db(db_path: Path) -> Path:
    _run(db_path, "init-db", "--sample")
    return db_path


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 0
    assert "init-db" in capsys.readouterr().out


def test_init_db_with_sample(db_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(db_path, "init-db", "--sample")
    assert "Rate store ready" in capsys.readouterr().out
    assert SQLiteRateStore(db_path).get_stats()["plans"] == 3


def test_enroll_and_history(seeded_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(seeded_db, "enroll", "prt-rivera", "plan-acme-ppo", "-e", "2024-03-01", "-c", "family")
    assert "Created 3 enrollment record(s)" in capsys.readouterr().out

    store = SQLiteRateStore(seeded_db)
    employee = store.list_enrollments("prt-rivera")[0]
    assert employee.dependent_id is None
    (entry,) = store.load_rate_history(employee.id)
    assert entry.rate_id == "rate-ppo-40-2024"

    _run(seeded_db, "history", employee.id)
    assert "open" in capsys.readouterr().out


def test_renew(seeded_db: Path) -> None:
    _run(seeded_db, "enroll", "prt-chen", "plan-acme-hmo", "-e", "2024-03-01", "-o", "opt-hmo-ee")
    _run(seeded_db, "renew", "plan-acme-hmo", "--date", "2025-01-01", "--group", "grp-acme")

    store = SQLiteRateStore(seeded_db)
    (enrollment,) = store.list_enrollments("prt-chen")
    assert len(store.load_rate_history(enrollment.id)) == 2
    (renewal,) = store.list_renewals("grp-acme")

    # Re-running the stored renewal changes nothing
    _run(seeded_db, "renew", "--id", renewal.id)
    assert len(store.load_rate_history(enrollment.id)) == 2


def test_renew_with_failures_exits_2(seeded_db: Path) -> None:
    store = SQLiteRateStore(seeded_db)
    store.add_plan_option("plan-acme-hmo", "Legacy", option_id="opt-old")
    store.add_rate("300", date(2024, 1, 1), option_id="opt-old", end_date=date(2024, 12, 31))
    _run(seeded_db, "enroll", "prt-chen", "plan-acme-hmo", "-e", "2024-03-01", "-o", "opt-old")

    with pytest.raises(SystemExit) as exc_info:
        _run(seeded_db, "renew", "plan-acme-hmo", "--date", "2025-01-01")
    assert exc_info.value.code == 2


def test_add_dependent(seeded_db: Path) -> None:
    _run(seeded_db, "add-dependent", "prt-chen", "Spouse", "--name", "Lee Chen",
         "--dob", "1970-02-02")
    (spouse,) = SQLiteRateStore(seeded_db).load_dependents("prt-chen")
    assert spouse.dob == date(1970, 2, 2)


def test_read_commands(seeded_db: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(seeded_db, "rates", "--option", "opt-hmo-ee")
    _run(seeded_db, "rates", "--plan", "plan-mapd-gold")
    _run(seeded_db, "enrollments", "prt-rivera")
    _run(seeded_db, "stats")
    out = capsys.readouterr().out
    assert "195.00" in out
    assert "Statistics" in out


@pytest.mark.parametrize(
    "args",
    [
        ("enroll", "prt-nobody", "plan-acme-hmo", "-e", "2025-01-01", "-o", "opt-hmo-ee"),
        ("enroll", "prt-chen", "plan-acme-ppo", "-e", "2025-01-01", "-c", "employee-spouse"),
        ("enroll", "prt-chen", "plan-acme-hmo", "-e", "not-a-date", "-o", "opt-hmo-ee"),
        ("enroll", "prt-chen", "plan-acme-hmo", "-o", "opt-hmo-ee", "--override", "lots"),
        ("enroll", "prt-chen", "plan-acme-hmo", "-e", "2025-01-01", "-o", "opt-hmo-ee",
         "--override", "-50"),
        ("enroll", "prt-chen", "plan-acme-hmo", "-e", "2025-01-01", "-o", "opt-hmo-ee",
         "--override", "NaN"),
        ("enroll", "prt-chen", "plan-acme-hmo", "-e", "2025-01-01", "-o", "opt-hmo-ee",
         "--override", "Infinity"),
        ("renew", "plan-acme-hmo"),
        ("rates",),
        ("history", "missing"),
    ],
)
def test_errors_exit_1(
    seeded_db: Path, capsys: pytest.CaptureFixture[str], args: tuple[str, ...]
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run(seeded_db, *args)
    assert exc_info.value.code == 1
    assert "Error" in capsys.readouterr().out
