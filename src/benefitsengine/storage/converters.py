"""Converters between database rows and model objects.

Dates and money cross the boundary here and nowhere else: dates are
stored as ``YYYY-MM-DD`` text, amounts as decimal text.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from benefitsengine.core.dates import format_date, to_date
from benefitsengine.core.models import (
    ContributionPolicy,
    Dependent,
    Enrollment,
    Group,
    Participant,
    Plan,
    PlanOption,
    Rate,
    RateHistoryEntry,
    Renewal,
)
from benefitsengine.core.types import (
    ContributionType,
    CoverageSelection,
    PlanFamily,
    PlanType,
    Relationship,
)


if TYPE_CHECKING:
    import sqlite3


def to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def from_decimal(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _contribution_type(value: str | None) -> ContributionType | None:
    return ContributionType(value) if value else None


def row_to_group(row: sqlite3.Row) -> Group:
    return Group(id=row["id"], name=row["name"], number_of_classes=row["number_of_classes"])


def row_to_plan(row: sqlite3.Row) -> Plan:
    """Convert database row to Plan object."""
    return Plan(
        id=row["id"],
        name=row["name"],
        plan_type=PlanType(row["plan_type"]),
        family=PlanFamily(row["family"]),
        group_id=row["group_id"],
        effective_date=to_date(row["effective_date"]),
        termination_date=to_date(row["termination_date"]),
        contribution=ContributionPolicy(
            type=_contribution_type(row["contribution_type"]),
            value=to_decimal(row["contribution_value"]),
            spouse_value=to_decimal(row["spouse_contribution_value"]),
            child_value=to_decimal(row["child_contribution_value"]),
        ),
    )


def plan_to_params(plan: Plan) -> tuple[Any, ...]:
    c = plan.contribution
    return (
        plan.id, plan.group_id, plan.family.value, plan.name, plan.plan_type.value,
        format_date(plan.effective_date), format_date(plan.termination_date),
        c.type.value if c.type else None, from_decimal(c.value),
        from_decimal(c.spouse_value), from_decimal(c.child_value),
    )


def row_to_option(row: sqlite3.Row) -> PlanOption:
    return PlanOption(id=row["id"], plan_id=row["plan_id"], label=row["label"])


def row_to_rate(row: sqlite3.Row) -> Rate:
    """Convert database row to Rate object."""
    raw_classes = json.loads(row["class_amounts"] or "{}")
    return Rate(
        id=row["id"],
        rate=Decimal(row["rate"]),
        start_date=to_date(row["start_date"]),
        end_date=to_date(row["end_date"]),
        plan_option_id=row["plan_option_id"],
        plan_id=row["plan_id"],
        contribution_type=_contribution_type(row["contribution_type"]),
        class_amounts={int(k): Decimal(v) for k, v in raw_classes.items() if v is not None},
    )


def rate_to_params(rate: Rate) -> tuple[Any, ...]:
    return (
        rate.id, rate.plan_id, rate.plan_option_id, str(rate.rate),
        format_date(rate.start_date), format_date(rate.end_date),
        rate.contribution_type.value if rate.contribution_type else None,
        json.dumps({str(k): str(v) for k, v in rate.class_amounts.items()}),
    )


def row_to_participant(row: sqlite3.Row) -> Participant:
    return Participant(
        id=row["id"],
        name=row["name"],
        group_id=row["group_id"],
        dob=to_date(row["dob"]),
        hire_date=to_date(row["hire_date"]),
        termination_date=to_date(row["termination_date"]),
        class_number=row["class_number"],
    )


def row_to_dependent(row: sqlite3.Row) -> Dependent:
    return Dependent(
        id=row["id"],
        participant_id=row["participant_id"],
        name=row["name"] or "",
        relationship=Relationship(row["relationship"]),
        dob=to_date(row["dob"]),
    )


def row_to_enrollment(row: sqlite3.Row) -> Enrollment:
    """Convert database row to Enrollment object."""
    return Enrollment(
        id=row["id"],
        participant_id=row["participant_id"],
        plan_id=row["plan_id"],
        plan_option_id=row["plan_option_id"],
        dependent_id=row["dependent_id"],
        coverage=CoverageSelection(row["coverage"]) if row["coverage"] else None,
        effective_date=to_date(row["effective_date"]),
        termination_date=to_date(row["termination_date"]),
        rate_override=to_decimal(row["rate_override"]),
        primary_enrollment_id=row["primary_enrollment_id"],
    )


def enrollment_to_params(enrollment: Enrollment) -> tuple[Any, ...]:
    return (
        enrollment.id, enrollment.participant_id, enrollment.plan_id,
        enrollment.plan_option_id, enrollment.dependent_id,
        enrollment.coverage.value if enrollment.coverage else None,
        format_date(enrollment.effective_date), format_date(enrollment.termination_date),
        from_decimal(enrollment.rate_override), enrollment.primary_enrollment_id,
    )


def row_to_history(row: sqlite3.Row) -> RateHistoryEntry:
    """Convert database row to RateHistoryEntry object."""
    return RateHistoryEntry(
        id=row["id"],
        enrollment_id=row["enrollment_id"],
        rate_id=row["rate_id"],
        start_date=to_date(row["start_date"]),
        end_date=to_date(row["end_date"]),
        rate_amount=Decimal(row["rate_amount"]),
        contribution_type=_contribution_type(row["contribution_type"]),
        contribution_value=to_decimal(row["contribution_value"]),
        employer_amount=Decimal(row["employer_amount"]),
        employee_amount=Decimal(row["employee_amount"]),
    )


def history_to_params(entry: RateHistoryEntry) -> tuple[Any, ...]:
    return (
        entry.id, entry.enrollment_id, entry.rate_id,
        format_date(entry.start_date), format_date(entry.end_date),
        str(entry.rate_amount),
        entry.contribution_type.value if entry.contribution_type else None,
        from_decimal(entry.contribution_value),
        str(entry.employer_amount), str(entry.employee_amount),
    )


def row_to_renewal(row: sqlite3.Row, plan_ids: list[str]) -> Renewal:
    return Renewal(
        id=row["id"],
        group_id=row["group_id"],
        renewal_date=to_date(row["renewal_date"]),
        plan_ids=plan_ids,
    )
