"""Employer/employee contribution split."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from benefitsengine.core.models import Contribution
from benefitsengine.core.types import ContributionType, PlanType


if TYPE_CHECKING:
    from benefitsengine.core.models import ContributionPolicy, Rate
    from benefitsengine.core.types import Relationship

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def select_policy(
    rate: Rate,
    policy: ContributionPolicy,
    plan_type: PlanType,
    class_number: int | None = None,
    relationship: Relationship | None = None,
) -> tuple[ContributionType | None, Decimal | None]:
    """Pick the contribution type and value that apply to one record.

    Composite rates may define their own per-class amount; it takes
    precedence over the plan policy when present for ``class_number``.
    Composite and age-banded dependent records use the spouse or child value.
    """
    match plan_type:
        case PlanType.COMPOSITE:
            if relationship is not None:
                return policy.type, policy.value_for(relationship)
            amount = rate.class_amounts.get(class_number) if class_number is not None else None
            ctype = rate.contribution_type or policy.type
            if amount is not None and ctype is not None:
                return ctype, amount
            return policy.type, policy.value
        case PlanType.AGE_BANDED:
            return policy.type, policy.value_for(relationship)
        case PlanType.OTHER:
            return policy.type, policy.value
    raise ValueError(f"Unknown plan type: {plan_type!r}")


def split_amount(
    amount: Decimal,
    ctype: ContributionType | None,
    value: Decimal | None,
    places: int = 2,
) -> Contribution:
    """Split ``amount`` so that employer + employee == amount and employee >= 0."""
    if ctype is None or value is None:
        employer = ZERO
    elif ctype is ContributionType.PERCENTAGE:
        quantum = Decimal(1).scaleb(-places)
        employer = (amount * value / HUNDRED).quantize(quantum, rounding=ROUND_HALF_UP)
    else:
        employer = value
    employer = min(max(employer, ZERO), amount)
    return Contribution(employer=employer, employee=amount - employer, type=ctype, value=value)


def compute_contribution(
    rate: Rate,
    policy: ContributionPolicy,
    class_number: int | None = None,
    *,
    plan_type: PlanType = PlanType.OTHER,
    relationship: Relationship | None = None,
    amount: Decimal | None = None,
    places: int = 2,
) -> Contribution:
    """Compute the employer-paid and employee-responsible parts of a rate.

    Args:
        rate: The resolved rate.
        policy: The plan-level contribution policy.
        class_number: Participant class, used by composite per-class amounts.
        plan_type: Type of the plan the rate belongs to.
        relationship: Dependent relationship for age-banded dependent records.
        amount: Priced amount when it differs from ``rate.rate`` (rate override).
        places: Decimal places percentage contributions are rounded to.

    Returns:
        The contribution split; ``employer + employee`` equals the priced amount.
    """
    priced = rate.rate if amount is None else amount
    ctype, value = select_policy(rate, policy, plan_type, class_number, relationship)
    return split_amount(priced, ctype, value, places)
