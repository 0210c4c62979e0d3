"""SQLite-backed rate store."""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from benefitsengine.core.dates import day_before, format_date
from benefitsengine.core.errors import (
    RateHistoryInvariantError,
    RecordInUseError,
    RecordNotFoundError,
    ValidationError,
)
from benefitsengine.core.models import (
    ContributionPolicy,
    Dependent,
    Group,
    Participant,
    Plan,
    PlanOption,
    Rate,
)
from benefitsengine.core.types import ContributionType, PlanFamily, PlanType, Relationship
from benefitsengine.storage.base import RateStore
from benefitsengine.storage.converters import (
    enrollment_to_params,
    history_to_params,
    plan_to_params,
    rate_to_params,
    row_to_dependent,
    row_to_enrollment,
    row_to_group,
    row_to_history,
    row_to_option,
    row_to_participant,
    row_to_plan,
    row_to_rate,
    row_to_renewal,
)
from benefitsengine.storage.schema import INIT_SCHEMA


if TYPE_CHECKING:
    from collections.abc import Iterator

    from benefitsengine.core.models import Enrollment, RateHistoryEntry, Renewal

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


class SQLiteRateStore(RateStore):
    """SQLite store for plans, rates, participants, enrollments and rate history.

    Write transactions use ``BEGIN IMMEDIATE``, which takes the database
    write lock up front, so two renewals of the same plan never interleave
    their close/append steps. ``db_path`` must be a file; every operation
    opens its own connection.
    """

    def __init__(self, db_path: str | Path = "benefits.db", timeout: float = 30.0) -> None:
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._local = threading.local()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[SQLiteRateStore]:
        if getattr(self._local, "conn", None) is not None:
            yield self
            return
        conn = self._connect()
        conn.execute("BEGIN IMMEDIATE")
        self._local.conn = conn
        try:
            yield self
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")
        finally:
            self._local.conn = None
            conn.close()

    def _init_db(self) -> None:
        with self._connection() as conn:
            conn.executescript(INIT_SCHEMA)

    def _fetch_one(self, sql: str, params: tuple[Any, ...], what: str, key: str) -> sqlite3.Row:
        with self._connection() as conn:
            row = conn.execute(sql, params).fetchone()
        if row is None:
            msg = f"{what} not found: {key}"
            raise RecordNotFoundError(msg, context={"id": key})
        return row

    # Groups

    def create_group(
        self, name: str, number_of_classes: int = 1, group_id: str | None = None
    ) -> Group:
        group = Group(id=group_id or new_id(), name=name, number_of_classes=number_of_classes)
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO groups (id, name, number_of_classes) VALUES (?, ?, ?)",
                (group.id, group.name, group.number_of_classes),
            )
        return group

    def get_group(self, group_id: str) -> Group:
        return row_to_group(
            self._fetch_one("SELECT * FROM groups WHERE id = ?", (group_id,), "Group", group_id)
        )

    # Plans and options

    def add_plan(
        self,
        name: str,
        plan_type: PlanType,
        *,
        family: PlanFamily = PlanFamily.GROUP,
        group_id: str | None = None,
        effective_date: date | None = None,
        termination_date: date | None = None,
        contribution: ContributionPolicy | None = None,
        plan_id: str | None = None,
    ) -> Plan:
        if family is PlanFamily.GROUP and group_id is None:
            raise ValidationError("Group plans need a group", context={"plan": name})
        plan = Plan(
            id=plan_id or new_id(),
            name=name,
            plan_type=plan_type,
            family=family,
            group_id=group_id,
            effective_date=effective_date,
            termination_date=termination_date,
            contribution=contribution or ContributionPolicy(),
        )
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO plans
                (id, group_id, family, name, plan_type, effective_date, termination_date,
                 contribution_type, contribution_value, spouse_contribution_value,
                 child_contribution_value)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                plan_to_params(plan),
            )
        return plan

    def get_plan(self, plan_id: str) -> Plan:
        return row_to_plan(
            self._fetch_one("SELECT * FROM plans WHERE id = ?", (plan_id,), "Plan", plan_id)
        )

    def list_plans(self, group_id: str | None = None) -> list[Plan]:
        with self._connection() as conn:
            if group_id is None:
                rows = conn.execute("SELECT * FROM plans ORDER BY family, name").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM plans WHERE group_id = ? ORDER BY name", (group_id,)
                ).fetchall()
        return [row_to_plan(r) for r in rows]

    def terminate_plan(self, plan_id: str, termination_date: date) -> None:
        with self._connection() as conn:
            cur = conn.execute(
                "UPDATE plans SET termination_date = ? WHERE id = ?",
                (format_date(termination_date), plan_id),
            )
        if cur.rowcount == 0:
            raise RecordNotFoundError(f"Plan not found: {plan_id}", context={"id": plan_id})

    def delete_plan(self, plan_id: str) -> None:
        """Delete a plan with its options and rates; refused while enrolled."""
        with self.transaction(), self._connection() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM enrollments WHERE plan_id = ?", (plan_id,)
            ).fetchone()[0]
            if count:
                msg = f"Plan {plan_id} still has {count} enrollment(s)"
                raise RecordInUseError(msg, context={"plan_id": plan_id, "enrollments": count})
            conn.execute("DELETE FROM renewal_plans WHERE plan_id = ?", (plan_id,))
            cur = conn.execute("DELETE FROM plans WHERE id = ?", (plan_id,))
            if cur.rowcount == 0:
                raise RecordNotFoundError(f"Plan not found: {plan_id}", context={"id": plan_id})

    def add_plan_option(self, plan_id: str, label: str, option_id: str | None = None) -> PlanOption:
        option = PlanOption(id=option_id or new_id(), plan_id=plan_id, label=label)
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO plan_options (id, plan_id, label) VALUES (?, ?, ?)",
                (option.id, option.plan_id, option.label),
            )
        return option

    def get_plan_option(self, option_id: str) -> PlanOption:
        return row_to_option(
            self._fetch_one(
                "SELECT * FROM plan_options WHERE id = ?", (option_id,), "Plan option", option_id
            )
        )

    def list_plan_options(self, plan_id: str) -> list[PlanOption]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM plan_options WHERE plan_id = ? ORDER BY label", (plan_id,)
            ).fetchall()
        return [row_to_option(r) for r in rows]

    # Rates

    def add_rate(
        self,
        rate: Decimal | str | float,
        start_date: date,
        *,
        option_id: str | None = None,
        plan_id: str | None = None,
        end_date: date | None = None,
        contribution_type: ContributionType | None = None,
        class_amounts: dict[int, Decimal] | None = None,
        rate_id: str | None = None,
    ) -> Rate:
        """Add a rate to a plan option, or directly to a Medicare plan.

        An open-ended rate that started before ``start_date`` is closed the
        day before, so the new rate takes over from it.
        """
        amount = Decimal(str(rate))
        if amount < 0:
            raise ValidationError("Rate must not be negative", context={"rate": amount})
        if end_date is not None and end_date < start_date:
            raise ValidationError(
                "Rate end date precedes start date",
                context={"start_date": start_date, "end_date": end_date},
            )
        if option_id is not None:
            plan_id = self.get_plan_option(option_id).plan_id
        elif plan_id is None:
            raise ValidationError("A rate needs a plan option or a plan")

        new_rate = Rate(
            id=rate_id or new_id(),
            rate=amount,
            start_date=start_date,
            end_date=end_date,
            plan_option_id=option_id,
            plan_id=plan_id,
            contribution_type=contribution_type,
            class_amounts=class_amounts or {},
        )
        owner_sql = "plan_option_id = ?" if option_id else "plan_id = ? AND plan_option_id IS NULL"
        with self.transaction(), self._connection() as conn:
            cur = conn.execute(
                f"""UPDATE rates SET end_date = ?
                WHERE {owner_sql} AND end_date IS NULL AND start_date < ?""",
                (format_date(day_before(start_date)), option_id or plan_id,
                 format_date(start_date)),
            )
            if cur.rowcount:
                logger.info("Closed %d open rate(s) before %s", cur.rowcount, start_date)
            conn.execute(
                """INSERT INTO rates
                (id, plan_id, plan_option_id, rate, start_date, end_date,
                 contribution_type, class_amounts)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                rate_to_params(new_rate),
            )
        return new_rate

    def get_rate(self, rate_id: str) -> Rate:
        return row_to_rate(
            self._fetch_one("SELECT * FROM rates WHERE id = ?", (rate_id,), "Rate", rate_id)
        )

    def delete_rate(self, rate_id: str) -> None:
        """Delete a rate that no enrollment history refers to."""
        with self.transaction(), self._connection() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM enrollment_rate_history WHERE rate_id = ?", (rate_id,)
            ).fetchone()[0]
            if count:
                msg = f"Rate {rate_id} is referenced by {count} history entr(ies)"
                raise RecordInUseError(msg, context={"rate_id": rate_id, "entries": count})
            cur = conn.execute("DELETE FROM rates WHERE id = ?", (rate_id,))
            if cur.rowcount == 0:
                raise RecordNotFoundError(f"Rate not found: {rate_id}", context={"id": rate_id})

    def load_candidate_rates(
        self, *, option_id: str | None = None, plan_id: str | None = None
    ) -> list[Rate]:
        with self._connection() as conn:
            if option_id is not None:
                rows = conn.execute(
                    "SELECT * FROM rates WHERE plan_option_id = ? ORDER BY start_date",
                    (option_id,),
                ).fetchall()
            elif plan_id is not None:
                rows = conn.execute(
                    """SELECT * FROM rates WHERE plan_id = ? AND plan_option_id IS NULL
                    ORDER BY start_date""",
                    (plan_id,),
                ).fetchall()
            else:
                msg = "load_candidate_rates needs option_id or plan_id"
                raise ValueError(msg)
        return [row_to_rate(r) for r in rows]

    # Participants and dependents

    def add_participant(
        self,
        name: str,
        *,
        group_id: str | None = None,
        dob: date | None = None,
        hire_date: date | None = None,
        termination_date: date | None = None,
        class_number: int | None = None,
        participant_id: str | None = None,
    ) -> Participant:
        participant = Participant(
            id=participant_id or new_id(),
            name=name,
            group_id=group_id,
            dob=dob,
            hire_date=hire_date,
            termination_date=termination_date,
            class_number=class_number,
        )
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO participants
                (id, group_id, name, dob, hire_date, termination_date, class_number)
                VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (participant.id, participant.group_id, participant.name,
                 format_date(participant.dob), format_date(participant.hire_date),
                 format_date(participant.termination_date), participant.class_number),
            )
        return participant

    def get_participant(self, participant_id: str) -> Participant:
        return row_to_participant(
            self._fetch_one(
                "SELECT * FROM participants WHERE id = ?",
                (participant_id,), "Participant", participant_id,
            )
        )

    def terminate_participant(self, participant_id: str, termination_date: date) -> None:
        with self._connection() as conn:
            cur = conn.execute(
                "UPDATE participants SET termination_date = ? WHERE id = ?",
                (format_date(termination_date), participant_id),
            )
        if cur.rowcount == 0:
            msg = f"Participant not found: {participant_id}"
            raise RecordNotFoundError(msg, context={"id": participant_id})

    def add_dependent(
        self,
        participant_id: str,
        relationship: Relationship,
        *,
        name: str = "",
        dob: date | None = None,
        dependent_id: str | None = None,
    ) -> Dependent:
        dependent = Dependent(
            id=dependent_id or new_id(),
            participant_id=participant_id,
            name=name,
            relationship=relationship,
            dob=dob,
        )
        with self._connection() as conn:
            conn.execute(
                """INSERT INTO dependents (id, participant_id, name, relationship, dob)
                VALUES (?, ?, ?, ?, ?)""",
                (dependent.id, dependent.participant_id, dependent.name,
                 dependent.relationship.value, format_date(dependent.dob)),
            )
        return dependent

    def load_dependents(self, participant_id: str) -> list[Dependent]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM dependents WHERE participant_id = ? ORDER BY relationship DESC, dob",
                (participant_id,),
            ).fetchall()
        return [row_to_dependent(r) for r in rows]

    # Enrollments and rate history

    def create_enrollments(self, enrollments: list[Enrollment]) -> list[str]:
        ids = [e.id or new_id() for e in enrollments]
        params = [
            enrollment_to_params(e.model_copy(update={"id": eid}))
            for e, eid in zip(enrollments, ids, strict=True)
        ]
        with self._connection() as conn:
            conn.executemany(
                """INSERT INTO enrollments
                (id, participant_id, plan_id, plan_option_id, dependent_id, coverage,
                 effective_date, termination_date, rate_override, primary_enrollment_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                params,
            )
        return ids

    def list_enrollments(
        self, participant_id: str, plan_id: str | None = None
    ) -> list[Enrollment]:
        sql = "SELECT * FROM enrollments WHERE participant_id = ?"
        params: list[Any] = [participant_id]
        if plan_id is not None:
            sql += " AND plan_id = ?"
            params.append(plan_id)
        sql += " ORDER BY plan_id, dependent_id IS NOT NULL, effective_date"
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [row_to_enrollment(r) for r in rows]

    def get_enrollment(self, enrollment_id: str) -> Enrollment:
        return row_to_enrollment(
            self._fetch_one(
                "SELECT * FROM enrollments WHERE id = ?",
                (enrollment_id,), "Enrollment", enrollment_id,
            )
        )

    def terminate_enrollment(self, enrollment_id: str, termination_date: date) -> None:
        with self._connection() as conn:
            cur = conn.execute(
                "UPDATE enrollments SET termination_date = ? WHERE id = ?",
                (format_date(termination_date), enrollment_id),
            )
        if cur.rowcount == 0:
            msg = f"Enrollment not found: {enrollment_id}"
            raise RecordNotFoundError(msg, context={"id": enrollment_id})

    def load_active_enrollments(self, plan_id: str, as_of: date) -> list[Enrollment]:
        day = format_date(as_of)
        with self._connection() as conn:
            rows = conn.execute(
                """SELECT e.* FROM enrollments e
                JOIN participants p ON p.id = e.participant_id
                WHERE e.plan_id = ?
                  AND e.effective_date <= ?
                  AND (e.termination_date IS NULL OR e.termination_date >= ?)
                  AND (p.hire_date IS NULL OR p.hire_date <= ?)
                  AND (p.termination_date IS NULL OR p.termination_date >= ?)
                ORDER BY e.participant_id, e.dependent_id IS NOT NULL, e.id""",
                (plan_id, day, day, day, day),
            ).fetchall()
        return [row_to_enrollment(r) for r in rows]

    def append_rate_history(self, entries: list[RateHistoryEntry]) -> list[str]:
        ids = [e.id or new_id() for e in entries]
        params = [
            history_to_params(e.model_copy(update={"id": eid}))
            for e, eid in zip(entries, ids, strict=True)
        ]
        with self._connection() as conn:
            conn.executemany(
                """INSERT INTO enrollment_rate_history
                (id, enrollment_id, rate_id, start_date, end_date, rate_amount,
                 contribution_type, contribution_value, employer_amount, employee_amount)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                params,
            )
        return ids

    def close_rate_histories(self, closures: dict[str, date]) -> None:
        if not closures:
            return
        with self._connection() as conn:
            cur = conn.executemany(
                "UPDATE enrollment_rate_history SET end_date = ? WHERE id = ? AND end_date IS NULL",
                [(format_date(end), entry_id) for entry_id, end in closures.items()],
            )
            if cur.rowcount != len(closures):
                msg = "Rate history entry was already closed by another writer"
                raise RateHistoryInvariantError(
                    msg, context={"expected": len(closures), "closed": cur.rowcount}
                )

    def load_rate_histories(
        self, enrollment_ids: list[str]
    ) -> dict[str, list[RateHistoryEntry]]:
        result: dict[str, list[RateHistoryEntry]] = {eid: [] for eid in enrollment_ids}
        if not enrollment_ids:
            return result
        with self._connection() as conn:
            # Chunked to stay under SQLite's bound-parameter limit
            for i in range(0, len(enrollment_ids), 500):
                chunk = enrollment_ids[i:i + 500]
                ph = ",".join("?" * len(chunk))
                rows = conn.execute(
                    f"""SELECT * FROM enrollment_rate_history
                    WHERE enrollment_id IN ({ph}) ORDER BY start_date""",
                    chunk,
                ).fetchall()
                for row in rows:
                    result[row["enrollment_id"]].append(row_to_history(row))
        return result

    # Renewals

    def create_renewal(
        self, renewal_date: date, plan_ids: list[str], group_id: str | None = None
    ) -> Renewal:
        if not plan_ids:
            raise ValidationError("Select at least one plan to renew")
        renewal_id = new_id()
        with self.transaction(), self._connection() as conn:
            conn.execute(
                "INSERT INTO renewals (id, group_id, renewal_date) VALUES (?, ?, ?)",
                (renewal_id, group_id, format_date(renewal_date)),
            )
            conn.executemany(
                "INSERT INTO renewal_plans (renewal_id, plan_id) VALUES (?, ?)",
                [(renewal_id, pid) for pid in dict.fromkeys(plan_ids)],
            )
        return self.get_renewal(renewal_id)

    def get_renewal(self, renewal_id: str) -> Renewal:
        row = self._fetch_one(
            "SELECT * FROM renewals WHERE id = ?", (renewal_id,), "Renewal", renewal_id
        )
        with self._connection() as conn:
            plan_rows = conn.execute(
                "SELECT plan_id FROM renewal_plans WHERE renewal_id = ? ORDER BY plan_id",
                (renewal_id,),
            ).fetchall()
        return row_to_renewal(row, [r["plan_id"] for r in plan_rows])

    def list_renewals(self, group_id: str | None = None) -> list[Renewal]:
        with self._connection() as conn:
            if group_id is None:
                rows = conn.execute(
                    "SELECT id FROM renewals ORDER BY renewal_date DESC"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT id FROM renewals WHERE group_id = ? ORDER BY renewal_date DESC",
                    (group_id,),
                ).fetchall()
        return [self.get_renewal(r["id"]) for r in rows]

    # Maintenance

    def get_stats(self) -> dict[str, Any]:
        with self._connection() as conn:
            counts = {
                table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]  # noqa: S608
                for table in (
                    "groups", "plans", "plan_options", "rates", "participants",
                    "dependents", "enrollments", "enrollment_rate_history", "renewals",
                )
            }
            by_type = conn.execute(
                "SELECT plan_type, COUNT(*) AS cnt FROM plans GROUP BY plan_type"
            ).fetchall()
            open_entries = conn.execute(
                "SELECT COUNT(*) FROM enrollment_rate_history WHERE end_date IS NULL"
            ).fetchone()[0]
        return {
            **counts,
            "plans_by_type": {r["plan_type"]: r["cnt"] for r in by_type},
            "open_history_entries": open_entries,
        }

    def load_sample_data(self) -> None:
        """Load a small demo book of business: one group, three plans, three people."""
        with self._connection() as conn:
            if conn.execute("SELECT COUNT(*) FROM groups").fetchone()[0] > 0:
                return

        y2024, y2025, end2024 = date(2024, 1, 1), date(2025, 1, 1), date(2024, 12, 31)
        with self.transaction():
            self.create_group("Acme Manufacturing", number_of_classes=2, group_id="grp-acme")

            # Age-banded PPO: percentage contribution, reduced for dependents
            self.add_plan(
                "Acme PPO (Age Banded)", PlanType.AGE_BANDED, group_id="grp-acme",
                effective_date=y2024, plan_id="plan-acme-ppo",
                contribution=ContributionPolicy(
                    type=ContributionType.PERCENTAGE, value=Decimal("50"),
                    spouse_value=Decimal("25"), child_value=Decimal("25"),
                ),
            )
            for label, old, new in (
                ("0", "150.00", "165.00"), ("30", "320.00", "350.00"),
                ("40", "410.00", "445.00"), ("50", "560.00", "610.00"),
            ):
                option = self.add_plan_option("plan-acme-ppo", label, option_id=f"opt-ppo-{label}")
                self.add_rate(old, y2024, option_id=option.id, end_date=end2024,
                              rate_id=f"rate-ppo-{label}-2024")
                self.add_rate(new, y2025, option_id=option.id, rate_id=f"rate-ppo-{label}-2025")

            # Composite HMO: flat tiers, per-class dollar contributions on the rate
            self.add_plan(
                "Acme HMO (Composite)", PlanType.COMPOSITE, group_id="grp-acme",
                effective_date=y2024, plan_id="plan-acme-hmo",
                contribution=ContributionPolicy(type=ContributionType.DOLLAR, value=Decimal("300")),
            )
            for slug, label, old, new in (
                ("ee", "Employee Only", "500.00", "540.00"),
                ("fam", "Employee + Family", "1250.00", "1340.00"),
            ):
                option = self.add_plan_option("plan-acme-hmo", label, option_id=f"opt-hmo-{slug}")
                self.add_rate(
                    old, y2024, option_id=option.id, end_date=end2024,
                    contribution_type=ContributionType.DOLLAR,
                    class_amounts={1: Decimal("400"), 2: Decimal("250")},
                    rate_id=f"rate-hmo-{slug}-2024",
                )
                self.add_rate(
                    new, y2025, option_id=option.id, contribution_type=ContributionType.DOLLAR,
                    class_amounts={1: Decimal("425"), 2: Decimal("275")},
                    rate_id=f"rate-hmo-{slug}-2025",
                )

            # Medicare plan priced directly, no options
            self.add_plan(
                "Medicare Advantage Gold", PlanType.OTHER, family=PlanFamily.MEDICARE,
                effective_date=y2024, plan_id="plan-mapd-gold",
            )
            self.add_rate("180.00", y2024, plan_id="plan-mapd-gold", end_date=end2024,
                          rate_id="rate-mapd-2024")
            self.add_rate("195.00", y2025, plan_id="plan-mapd-gold", rate_id="rate-mapd-2025")

            self.add_participant(
                "Dana Rivera", group_id="grp-acme", dob=date(1983, 5, 14),
                hire_date=date(2020, 2, 1), class_number=1, participant_id="prt-rivera",
            )
            self.add_dependent("prt-rivera", Relationship.SPOUSE, name="Alex Rivera",
                               dob=date(1985, 9, 2), dependent_id="dep-rivera-spouse")
            self.add_dependent("prt-rivera", Relationship.CHILD, name="Jo Rivera",
                               dob=date(2015, 6, 30), dependent_id="dep-rivera-child")
            self.add_participant(
                "Sam Chen", group_id="grp-acme", dob=date(1968, 11, 20),
                hire_date=date(2018, 8, 15), class_number=2, participant_id="prt-chen",
            )
            self.add_participant(
                "Grace Okafor", dob=date(1955, 3, 3), participant_id="prt-okafor",
            )
        logger.info("Loaded sample data into %s", self.db_path)
