"""Abstract rate store consumed by the enrollment and renewal engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from contextlib import AbstractContextManager
    from datetime import date

    from benefitsengine.core.models import (
        Dependent,
        Enrollment,
        Participant,
        Plan,
        PlanOption,
        Rate,
        RateHistoryEntry,
    )


class RateStore(ABC):
    """Persistence contract for plans, rates, enrollments and rate history.

    Implementations must make ``transaction()`` an all-or-nothing write
    unit that also serializes concurrent writers; the engine relies on it
    for atomic materialization and per-plan renewal batches.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[RateStore]:
        """Open a write transaction; commits on exit, rolls back on error."""
        ...

    # Reads

    @abstractmethod
    def get_plan(self, plan_id: str) -> Plan: ...

    @abstractmethod
    def get_participant(self, participant_id: str) -> Participant: ...

    @abstractmethod
    def get_plan_option(self, option_id: str) -> PlanOption: ...

    @abstractmethod
    def list_plan_options(self, plan_id: str) -> list[PlanOption]: ...

    @abstractmethod
    def load_candidate_rates(
        self, *, option_id: str | None = None, plan_id: str | None = None
    ) -> list[Rate]:
        """Rates of a plan option, or the direct rates of a Medicare plan."""
        ...

    @abstractmethod
    def load_active_enrollments(self, plan_id: str, as_of: date) -> list[Enrollment]:
        """Enrollments under ``plan_id`` whose participant and record are active on ``as_of``."""
        ...

    @abstractmethod
    def load_dependents(self, participant_id: str) -> list[Dependent]: ...

    @abstractmethod
    def list_enrollments(
        self, participant_id: str, plan_id: str | None = None
    ) -> list[Enrollment]: ...

    @abstractmethod
    def load_rate_histories(
        self, enrollment_ids: list[str]
    ) -> dict[str, list[RateHistoryEntry]]:
        """History entries for many enrollments in one read, keyed by enrollment id."""
        ...

    def load_rate_history(self, enrollment_id: str) -> list[RateHistoryEntry]:
        return self.load_rate_histories([enrollment_id]).get(enrollment_id, [])

    # Writes

    @abstractmethod
    def create_enrollments(self, enrollments: list[Enrollment]) -> list[str]: ...

    @abstractmethod
    def append_rate_history(self, entries: list[RateHistoryEntry]) -> list[str]: ...

    @abstractmethod
    def close_rate_histories(self, closures: dict[str, date]) -> None:
        """Set ``end_date`` on many open history entries (entry id -> end date)."""
        ...

    def close_rate_history(self, entry_id: str, end_date: date) -> None:
        self.close_rate_histories({entry_id: end_date})
