"""Renewal processing: re-bind active enrollments to the rates in force on a renewal date."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benefitsengine.core.dates import day_before
from benefitsengine.core.errors import NoActiveRateError, ValidationError
from benefitsengine.core.models import RenewalFailure, RenewalReport
from benefitsengine.engine.binding import RateBinder
from benefitsengine.engine.history import open_entry


if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from benefitsengine.core.models import (
        Dependent,
        Enrollment,
        Participant,
        Plan,
        RateHistoryEntry,
    )
    from benefitsengine.storage.base import RateStore

logger = logging.getLogger(__name__)


class RenewalProcessor:
    """Processes renewals plan by plan.

    Each plan is renewed inside its own store transaction: either every
    history change for that plan commits or none does. Enrollments whose
    rate cannot be resolved are reported and skipped without failing the
    rest of the plan. Re-running a renewal for the same date is a no-op
    for enrollments whose open entry already starts on that date.
    """

    def __init__(
        self, store: RateStore, *, today: date | None = None, money_places: int = 2
    ) -> None:
        self._store = store
        self._today = today
        self._money_places = money_places

    def process(self, renewal_date: date, plan_ids: Iterable[str]) -> RenewalReport:
        """Renew every active enrollment under ``plan_ids`` as of ``renewal_date``.

        All plan ids are looked up before anything is written, so an
        unknown id fails the call without renewing any plan.

        Raises:
            RecordNotFoundError: A plan id does not exist.
            RateHistoryInvariantError: An enrollment already has two open
                entries; the plan being processed is rolled back.
        """
        unique_ids = list(dict.fromkeys(plan_ids))
        if not unique_ids:
            raise ValidationError("Select at least one plan to renew")
        plans = [self._store.get_plan(pid) for pid in unique_ids]

        report = RenewalReport(renewal_date=renewal_date, plan_ids=unique_ids)
        for plan in plans:
            report.merge(self._renew_plan(plan, renewal_date))

        logger.info(
            "Renewal %s: %d renewed, %d unchanged, %d failed across %d plan(s)",
            renewal_date, len(report.succeeded), len(report.unchanged),
            len(report.failed), len(plans),
        )
        return report

    def _renew_plan(self, plan: Plan, renewal_date: date) -> RenewalReport:
        partial = RenewalReport(renewal_date=renewal_date, plan_ids=[plan.id])
        if plan.terminated_before(renewal_date):
            logger.info("Plan %s terminated %s, nothing to renew", plan.id, plan.termination_date)
            return partial

        binder = RateBinder(self._store, today=self._today, money_places=self._money_places)
        with self._store.transaction() as tx:
            enrollments = tx.load_active_enrollments(plan.id, renewal_date)
            histories = tx.load_rate_histories([e.id for e in enrollments])
            people = _PeopleCache(tx)

            closures: dict[str, date] = {}
            new_entries: list[RateHistoryEntry] = []
            for enrollment in enrollments:
                current = open_entry(histories.get(enrollment.id, []), enrollment.id)
                if current is not None and current.start_date == renewal_date:
                    partial.unchanged.append(enrollment.id)
                    continue
                if current is not None and current.start_date > renewal_date:
                    self._fail(
                        partial, plan, enrollment,
                        f"Current rate starts {current.start_date}, after the renewal date",
                    )
                    continue

                participant = people.participant(enrollment.participant_id)
                dependent = people.dependent(enrollment)
                who = "employee" if dependent is None else dependent.relationship.value.lower()
                dob = participant.dob if dependent is None else dependent.dob
                try:
                    rate = binder.rate_for(plan, enrollment, dob, renewal_date, who=who)
                except (NoActiveRateError, ValidationError) as e:
                    self._fail(partial, plan, enrollment, str(e))
                    continue

                if current is not None:
                    closures[current.id] = day_before(renewal_date)
                new_entries.append(
                    binder.entry(
                        plan,
                        enrollment.id,
                        rate,
                        renewal_date,
                        class_number=participant.class_number,
                        relationship=dependent.relationship if dependent else None,
                        rate_override=enrollment.rate_override,
                    )
                )
                partial.succeeded.append(enrollment.id)

            tx.close_rate_histories(closures)
            tx.append_rate_history(new_entries)

        logger.info(
            "Renewed plan %s on %s: %d renewed, %d unchanged, %d failed",
            plan.id, renewal_date, len(partial.succeeded), len(partial.unchanged),
            len(partial.failed),
        )
        return partial

    def _fail(self, report: RenewalReport, plan: Plan, enrollment: Enrollment, reason: str) -> None:
        logger.warning(
            "Renewal skipped enrollment %s (participant %s, plan %s): %s",
            enrollment.id, enrollment.participant_id, plan.id, reason,
        )
        report.failed.append(
            RenewalFailure(
                participant_id=enrollment.participant_id,
                plan_id=plan.id,
                enrollment_id=enrollment.id,
                reason=reason,
            )
        )


class _PeopleCache:
    """Participants and dependents read once per renewed plan."""

    def __init__(self, store: RateStore) -> None:
        self._store = store
        self._participants: dict[str, Participant] = {}
        self._dependents: dict[str, dict[str, Dependent]] = {}

    def participant(self, participant_id: str) -> Participant:
        if participant_id not in self._participants:
            self._participants[participant_id] = self._store.get_participant(participant_id)
        return self._participants[participant_id]

    def dependent(self, enrollment: Enrollment) -> Dependent | None:
        if enrollment.dependent_id is None:
            return None
        pid = enrollment.participant_id
        if pid not in self._dependents:
            self._dependents[pid] = {d.id: d for d in self._store.load_dependents(pid)}
        return self._dependents[pid].get(enrollment.dependent_id)
