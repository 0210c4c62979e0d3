"""Service facade wiring the rate store to the enrollment and renewal engine."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from benefitsengine.config.settings import Settings
from benefitsengine.core.errors import ValidationError
from benefitsengine.engine.materializer import EnrollmentMaterializer
from benefitsengine.engine.renewal import RenewalProcessor
from benefitsengine.engine.resolver import display_rate
from benefitsengine.storage.repository import SQLiteRateStore


if TYPE_CHECKING:
    from collections.abc import Iterable

    from benefitsengine.core.models import (
        Dependent,
        Enrollment,
        EnrollmentRequest,
        Rate,
        Renewal,
        RenewalReport,
    )
    from benefitsengine.core.types import Relationship
    from benefitsengine.storage.base import RateStore

logger = logging.getLogger(__name__)


class BenefitsService:
    """Entry point used by the CLI and other front ends.

    Writes go through the materializer and renewal processor; the only
    read-side rate query offered here is the display resolution.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        store: RateStore | None = None,
        today: date | None = None,
    ) -> None:
        if settings is None:
            settings = Settings()
        self.settings = settings
        self.store = store or SQLiteRateStore(
            settings.database.path, timeout=settings.database.timeout_seconds
        )
        self.today = today
        places = settings.engine.money_places
        self._materializer = EnrollmentMaterializer(self.store, today=today, money_places=places)
        self._renewals = RenewalProcessor(self.store, today=today, money_places=places)

    def enroll(self, request: EnrollmentRequest) -> list[Enrollment]:
        """Materialize an enrollment request."""
        participant = self.store.get_participant(request.participant_id)
        self._check_class(participant.class_number)
        return self._materializer.materialize(request)

    def add_dependent(
        self,
        participant_id: str,
        relationship: Relationship,
        *,
        name: str = "",
        dob: date | None = None,
    ) -> tuple[Dependent, list[Enrollment]]:
        """Record a dependent and extend existing coverage that implies them.

        Returns:
            The stored dependent and any enrollments created for them.
        """
        self.store.get_participant(participant_id)
        dependent = self.store.add_dependent(participant_id, relationship, name=name, dob=dob)
        created = self._materializer.extend_for_dependent(dependent)
        return dependent, created

    def schedule_renewal(
        self, renewal_date: date, plan_ids: list[str], group_id: str | None = None
    ) -> Renewal:
        for plan_id in plan_ids:
            self.store.get_plan(plan_id)
        renewal = self.store.create_renewal(renewal_date, plan_ids, group_id)
        logger.info("Scheduled renewal %s on %s for %d plan(s)", renewal.id, renewal_date, len(plan_ids))
        return renewal

    def run_renewal(self, renewal_id: str) -> RenewalReport:
        renewal = self.store.get_renewal(renewal_id)
        return self.process_renewal(renewal.renewal_date, renewal.plan_ids)

    def process_renewal(self, renewal_date: date, plan_ids: Iterable[str]) -> RenewalReport:
        return self._renewals.process(renewal_date, plan_ids)

    def current_rate(
        self, *, option_id: str | None = None, plan_id: str | None = None
    ) -> Rate | None:
        """Rate to display as current; never use it to bind an enrollment."""
        rates = self.store.load_candidate_rates(option_id=option_id, plan_id=plan_id)
        return display_rate(rates, self.today or date.today())

    def _check_class(self, class_number: int | None) -> None:
        limit = self.settings.engine.max_classes
        if class_number is not None and not 1 <= class_number <= limit:
            msg = f"Class number must be between 1 and {limit}"
            raise ValidationError(msg, context={"class_number": class_number})
