"""Enrollment materialization.

Expands one "enroll in plan X" request into enrollment records and their
opening rate-history entries, then persists them in a single transaction.
Age-banded plans fan out to one record per covered person; composite and
other plans produce a single record.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from benefitsengine.core.errors import BenefitsError, ValidationError
from benefitsengine.core.models import Enrollment
from benefitsengine.core.types import CoverageSelection, PlanType, Relationship
from benefitsengine.engine.binding import RateBinder
from benefitsengine.engine.history import open_entry


if TYPE_CHECKING:
    from datetime import date

    from benefitsengine.core.models import (
        Dependent,
        EnrollmentRequest,
        Participant,
        Plan,
        Rate,
    )
    from benefitsengine.storage.base import RateStore

logger = logging.getLogger(__name__)


class Binding(NamedTuple):
    """An enrollment about to be written with the rate it binds to."""

    enrollment: Enrollment
    rate: Rate
    start_date: date
    relationship: Relationship | None = None


class EnrollmentMaterializer:
    """Creates enrollments and their opening rate history."""

    def __init__(
        self, store: RateStore, *, today: date | None = None, money_places: int = 2
    ) -> None:
        self._store = store
        self._today = today
        self._money_places = money_places

    def _binder(self) -> RateBinder:
        return RateBinder(self._store, today=self._today, money_places=self._money_places)

    def materialize(self, request: EnrollmentRequest) -> list[Enrollment]:
        """Validate, resolve and persist an enrollment request.

        Returns:
            The created enrollments, employee record first.

        Raises:
            ValidationError: Missing effective date, DOB, coverage or option.
            NoActiveRateError: A covered person has no rate on the effective date.
        """
        if request.effective_date is None:
            raise ValidationError(
                "Effective date is required", context={"plan_id": request.plan_id}
            )
        effective = request.effective_date
        plan = self._store.get_plan(request.plan_id)
        participant = self._store.get_participant(request.participant_id)
        if plan.terminated_before(effective):
            msg = f"Plan {plan.name!r} terminates before {effective}"
            raise ValidationError(msg, context={"plan_id": plan.id, "termination": plan.termination_date})

        binder = self._binder()
        match plan.plan_type:
            case PlanType.AGE_BANDED:
                bindings = self._bind_age_banded(binder, plan, participant, request, effective)
            case PlanType.COMPOSITE:
                bindings = self._bind_composite(binder, plan, participant, request, effective)
            case PlanType.OTHER:
                bindings = self._bind_other(binder, plan, participant, request, effective)
            case _:
                raise ValueError(f"Unknown plan type: {plan.plan_type!r}")

        created = self._persist(binder, plan, participant, bindings)
        logger.info(
            "Enrolled participant %s in plan %s: %d record(s) effective %s",
            participant.id, plan.id, len(created), effective,
        )
        return created

    def _bind_age_banded(
        self,
        binder: RateBinder,
        plan: Plan,
        participant: Participant,
        request: EnrollmentRequest,
        effective: date,
    ) -> list[Binding]:
        if request.coverage is None:
            msg = f"Select who is covered for age-banded plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id})
        if request.rate_override is not None:
            msg = "Rate overrides are not supported for age-banded plans"
            raise ValidationError(msg, context={"plan_id": plan.id})
        if participant.dob is None:
            msg = f"Participant must have a date of birth for age-banded plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id, "participant_id": participant.id})

        coverage = request.coverage
        covered = covered_dependents(self._store.load_dependents(participant.id), coverage, plan)

        base = Enrollment(
            participant_id=participant.id,
            plan_id=plan.id,
            coverage=coverage,
            effective_date=effective,
        )
        bindings = [
            Binding(
                base,
                binder.age_banded_rate(plan, participant.dob, effective, who="employee"),
                effective,
            )
        ]
        for dep in covered:
            rate = binder.age_banded_rate(
                plan, dep.dob, effective, who=f"{dep.relationship.value.lower()} {dep.name}".strip()
            )
            record = base.model_copy(update={"dependent_id": dep.id})
            bindings.append(Binding(record, rate, effective, dep.relationship))
        return bindings

    def _bind_composite(
        self,
        binder: RateBinder,
        plan: Plan,
        participant: Participant,
        request: EnrollmentRequest,
        effective: date,
    ) -> list[Binding]:
        if request.plan_option_id is None:
            msg = f"Plan option is required for composite plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id})
        self._check_option(plan, request.plan_option_id)
        rate = binder.option_rate(plan, request.plan_option_id, effective)
        record = Enrollment(
            participant_id=participant.id,
            plan_id=plan.id,
            plan_option_id=request.plan_option_id,
            coverage=request.coverage or CoverageSelection.EMPLOYEE_ONLY,
            effective_date=effective,
            rate_override=request.rate_override,
        )
        return [Binding(record, rate, effective)]

    def _bind_other(
        self,
        binder: RateBinder,
        plan: Plan,
        participant: Participant,
        request: EnrollmentRequest,
        effective: date,
    ) -> list[Binding]:
        if not binder.has_rate_source(plan, request.plan_option_id):
            msg = f"Plan option is required for plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id})
        if request.plan_option_id is not None:
            self._check_option(plan, request.plan_option_id)
        record = Enrollment(
            participant_id=participant.id,
            plan_id=plan.id,
            plan_option_id=request.plan_option_id,
            effective_date=effective,
            rate_override=request.rate_override,
        )
        rate = binder.rate_for(plan, record, participant.dob, effective, who="employee")
        return [Binding(record, rate, effective)]

    def _check_option(self, plan: Plan, option_id: str) -> None:
        option = self._store.get_plan_option(option_id)
        if option.plan_id != plan.id:
            msg = f"Option {option.label!r} does not belong to plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id, "option_id": option_id})

    def _reject_duplicates(
        self, store: RateStore, participant_id: str, plan: Plan, bindings: list[Binding]
    ) -> None:
        existing = store.list_enrollments(participant_id, plan.id)
        for binding in bindings:
            record = binding.enrollment
            if any(
                e.dependent_id == record.dependent_id
                and (e.termination_date is None or e.termination_date >= record.effective_date)
                for e in existing
            ):
                msg = f"Already enrolled in plan {plan.name!r}"
                raise ValidationError(
                    msg,
                    context={
                        "plan_id": plan.id,
                        "participant_id": participant_id,
                        "dependent_id": record.dependent_id,
                    },
                )

    def _persist(
        self,
        binder: RateBinder,
        plan: Plan,
        participant: Participant,
        bindings: list[Binding],
    ) -> list[Enrollment]:
        if not bindings:
            return []
        with self._store.transaction() as tx:
            # Checked under the write lock so concurrent requests cannot both pass
            self._reject_duplicates(tx, participant.id, plan, bindings)
            ids = tx.create_enrollments([b.enrollment for b in bindings])
            created = [
                b.enrollment.model_copy(update={"id": eid})
                for b, eid in zip(bindings, ids, strict=True)
            ]
            entries = [
                binder.entry(
                    plan,
                    enrollment.id,
                    b.rate,
                    b.start_date,
                    class_number=participant.class_number,
                    relationship=b.relationship,
                    rate_override=enrollment.rate_override,
                )
                for b, enrollment in zip(bindings, created, strict=True)
            ]
            tx.append_rate_history(entries)
        return created

    def extend_for_dependent(self, dependent: Dependent) -> list[Enrollment]:
        """Add a newly recorded dependent to the participant's existing coverage.

        Every active employee enrollment whose coverage already implies the
        dependent's relationship gains a record for them, effective from the
        start of the employee record's current rate period. Age-banded
        records are priced from the dependent's own band; composite records
        bind the employee record's tier and reference it as their primary.
        Plans that cannot be extended are logged and skipped.
        """
        participant = self._store.get_participant(dependent.participant_id)
        existing = self._store.list_enrollments(participant.id)
        binder = self._binder()
        created: list[Enrollment] = []

        for primary in existing:
            if primary.dependent_id is not None or primary.termination_date is not None:
                continue
            if primary.coverage is None or not primary.coverage.implies(dependent.relationship):
                continue
            plan = self._store.get_plan(primary.plan_id)
            try:
                bindings = self._extension_bindings(binder, plan, primary, dependent)
                created.extend(self._persist(binder, plan, participant, bindings))
            except BenefitsError as e:
                logger.warning(
                    "Could not add dependent %s to plan %s: %s", dependent.id, plan.id, e
                )

        if created:
            logger.info("Added dependent %s to %d existing plan(s)", dependent.id, len(created))
        return created

    def _extension_bindings(
        self, binder: RateBinder, plan: Plan, primary: Enrollment, dependent: Dependent
    ) -> list[Binding]:
        if plan.plan_type is PlanType.OTHER:
            return []

        current = open_entry(self._store.load_rate_history(primary.id), primary.id)
        as_of = current.start_date if current is not None else primary.effective_date
        record = Enrollment(
            participant_id=primary.participant_id,
            plan_id=plan.id,
            dependent_id=dependent.id,
            coverage=primary.coverage,
            effective_date=as_of,
        )
        who = f"{dependent.relationship.value.lower()} {dependent.name}".strip()
        if plan.plan_type is PlanType.COMPOSITE:
            record = record.model_copy(
                update={
                    "plan_option_id": primary.plan_option_id,
                    "primary_enrollment_id": primary.id,
                }
            )
        rate = binder.rate_for(plan, record, dependent.dob, as_of, who=who)
        return [Binding(record, rate, as_of, dependent.relationship)]


def covered_dependents(
    dependents: list[Dependent], coverage: CoverageSelection, plan: Plan
) -> list[Dependent]:
    """Dependents implied by ``coverage``; each must be on file with a DOB."""
    covered: list[Dependent] = []
    for relationship, wanted, label in (
        (Relationship.SPOUSE, coverage.includes_spouse, "spouse"),
        (Relationship.CHILD, coverage.includes_children, "child"),
    ):
        if not wanted:
            continue
        matching = [d for d in dependents if d.relationship is relationship]
        if not matching:
            msg = f"Add a {label} dependent before selecting {coverage.value!r} for plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id, "coverage": coverage.value})
        missing = [d.id for d in matching if d.dob is None]
        if missing:
            msg = f"All {label} dependents need a date of birth for plan {plan.name!r}"
            raise ValidationError(msg, context={"plan_id": plan.id, "dependents": missing})
        covered.extend(matching)
    return covered
