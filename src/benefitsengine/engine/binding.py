"""Rate lookup and history-entry construction.

``RateBinder`` is the one resolution path used both when enrollments are
materialized and when they are renewed, so a renewal re-binds exactly the
way the original enrollment was bound.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from benefitsengine.core.dates import age_on
from benefitsengine.core.errors import NoActiveRateError, ValidationError
from benefitsengine.core.models import RateHistoryEntry
from benefitsengine.core.types import PlanType
from benefitsengine.engine.age_band import match_age_band
from benefitsengine.engine.contribution import compute_contribution
from benefitsengine.engine.resolver import resolve_rate


if TYPE_CHECKING:
    from decimal import Decimal

    from benefitsengine.core.models import Enrollment, Plan, PlanOption, Rate
    from benefitsengine.core.types import Relationship
    from benefitsengine.storage.base import RateStore


class RateBinder:
    """Resolves binding rates for one operation, caching rate tables it reads.

    Create a fresh binder per materialization or per renewed plan; the
    cache is not invalidated.
    """

    def __init__(self, store: RateStore, *, today: date | None = None, money_places: int = 2) -> None:
        self._store = store
        self.today = today or date.today()
        self.money_places = money_places
        self._rates: dict[tuple[str | None, str | None], list[Rate]] = {}
        self._options: dict[str, list[PlanOption]] = {}

    def candidates(self, *, option_id: str | None = None, plan_id: str | None = None) -> list[Rate]:
        key = (option_id, None if option_id else plan_id)
        if key not in self._rates:
            self._rates[key] = self._store.load_candidate_rates(option_id=option_id, plan_id=plan_id)
        return self._rates[key]

    def options(self, plan_id: str) -> list[PlanOption]:
        if plan_id not in self._options:
            self._options[plan_id] = self._store.list_plan_options(plan_id)
        return self._options[plan_id]

    def age_banded_rate(self, plan: Plan, dob: date, as_of: date, *, who: str) -> Rate:
        """Match the person's current age to a band and resolve its rate on ``as_of``."""
        age = age_on(dob, self.today)
        option = match_age_band(age, self.options(plan.id))
        if option is None:
            msg = f"No age bands configured for plan {plan.name!r}"
            raise NoActiveRateError(msg, plan_id=plan.id, as_of=as_of, context={"person": who})
        rate = resolve_rate(self.candidates(option_id=option.id), as_of)
        if rate is None:
            msg = f"No active rate for {who} age option {option.label!r} of plan {plan.name!r}"
            raise NoActiveRateError(
                msg, plan_id=plan.id, option_id=option.id, as_of=as_of,
                context={"person": who, "age": age},
            )
        return rate

    def option_rate(self, plan: Plan, option_id: str, as_of: date) -> Rate:
        rate = resolve_rate(self.candidates(option_id=option_id), as_of)
        if rate is None:
            msg = f"No active rate for option {option_id} of plan {plan.name!r}"
            raise NoActiveRateError(msg, plan_id=plan.id, option_id=option_id, as_of=as_of)
        return rate

    def plan_rate(self, plan: Plan, as_of: date) -> Rate:
        rate = resolve_rate(self.candidates(plan_id=plan.id), as_of)
        if rate is None:
            msg = f"No active rate for plan {plan.name!r}"
            raise NoActiveRateError(msg, plan_id=plan.id, as_of=as_of)
        return rate

    def has_rate_source(self, plan: Plan, option_id: str | None) -> bool:
        return option_id is not None or plan.is_medicare

    def rate_for(
        self, plan: Plan, enrollment: Enrollment, dob: date | None, as_of: date, *, who: str
    ) -> Rate:
        """Resolve the rate an existing enrollment binds to on ``as_of``."""
        match plan.plan_type:
            case PlanType.AGE_BANDED:
                if dob is None:
                    msg = f"{who} has no date of birth for age-banded plan {plan.name!r}"
                    raise ValidationError(msg, context={"plan_id": plan.id, "person": who})
                return self.age_banded_rate(plan, dob, as_of, who=who)
            case PlanType.COMPOSITE | PlanType.OTHER:
                if enrollment.plan_option_id is not None:
                    return self.option_rate(plan, enrollment.plan_option_id, as_of)
                if plan.is_medicare:
                    return self.plan_rate(plan, as_of)
                msg = f"Enrollment in plan {plan.name!r} has no plan option to price"
                raise NoActiveRateError(msg, plan_id=plan.id, as_of=as_of)
        raise ValueError(f"Unknown plan type: {plan.plan_type!r}")

    def entry(
        self,
        plan: Plan,
        enrollment_id: str,
        rate: Rate,
        start_date: date,
        *,
        class_number: int | None = None,
        relationship: Relationship | None = None,
        rate_override: Decimal | None = None,
    ) -> RateHistoryEntry:
        """Build an open history entry with the contribution captured now."""
        amount = rate.rate if rate_override is None else rate_override
        contribution = compute_contribution(
            rate,
            plan.contribution,
            class_number,
            plan_type=plan.plan_type,
            relationship=relationship,
            amount=amount,
            places=self.money_places,
        )
        return RateHistoryEntry(
            enrollment_id=enrollment_id,
            rate_id=rate.id,
            start_date=start_date,
            end_date=None,
            rate_amount=amount,
            contribution_type=contribution.type,
            contribution_value=contribution.value,
            employer_amount=contribution.employer,
            employee_amount=contribution.employee,
        )
