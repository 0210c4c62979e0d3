"""Tests for the employer/employee contribution split."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from benefitsengine.core.models import ContributionPolicy
from benefitsengine.core.types import ContributionType, PlanType, Relationship
from benefitsengine.engine.contribution import compute_contribution, select_policy, split_amount


if TYPE_CHECKING:
    from collections.abc import Callable

    from benefitsengine.core.models import Rate


PCT = ContributionType.PERCENTAGE
DOLLAR = ContributionType.DOLLAR


class TestSplitAmount:
    def test_percentage(self) -> None:
        result = split_amount(Decimal("445.00"), PCT, Decimal("50"))
        assert result.employer == Decimal("222.50")
        assert result.employee == Decimal("222.50")

    def test_percentage_rounds_half_up(self) -> None:
        result = split_amount(Decimal("100.01"), PCT, Decimal("50"))
        assert result.employer == Decimal("50.01")
        assert result.employee == Decimal("50.00")

    def test_percentage_respects_places(self) -> None:
        result = split_amount(Decimal("100"), PCT, Decimal("33.3333"), places=0)
        assert result.employer == Decimal("33")
        assert result.employee == Decimal("67")

    def test_dollar(self) -> None:
        result = split_amount(Decimal("120"), DOLLAR, Decimal("20"))
        assert result.employer == Decimal("20")
        assert result.employee == Decimal("100")

    def test_dollar_above_rate_is_capped(self) -> None:
        result = split_amount(Decimal("120"), DOLLAR, Decimal("500"))
        assert result.employer == Decimal("120")
        assert result.employee == Decimal("0")

    def test_negative_value_is_floored(self) -> None:
        result = split_amount(Decimal("120"), DOLLAR, Decimal("-5"))
        assert result.employer == Decimal("0")
        assert result.employee == Decimal("120")

    def test_percentage_over_hundred_is_capped(self) -> None:
        result = split_amount(Decimal("80"), PCT, Decimal("150"))
        assert result.employer == Decimal("80")
        assert result.employee == Decimal("0")

    @pytest.mark.parametrize(("ctype", "value"), [(None, Decimal("50")), (PCT, None), (None, None)])
    def test_missing_policy_means_employee_pays_all(
        self, ctype: ContributionType | None, value: Decimal | None
    ) -> None:
        result = split_amount(Decimal("100"), ctype, value)
        assert result.employer == Decimal("0")
        assert result.employee == Decimal("100")

    @pytest.mark.parametrize(
        ("amount", "ctype", "value"),
        [
            ("0", PCT, "50"),
            ("0.01", PCT, "50"),
            ("999.99", PCT, "12.5"),
            ("333.33", PCT, "66.6667"),
            ("10", DOLLAR, "10"),
            ("10", DOLLAR, "10.01"),
            ("1250.00", DOLLAR, "0"),
        ],
    )
    def test_parts_sum_to_amount(self, amount: str, ctype: ContributionType, value: str) -> None:
        result = split_amount(Decimal(amount), ctype, Decimal(value))
        assert result.total == Decimal(amount)
        assert result.employee >= 0
        assert result.employer >= 0


class TestSelectPolicy:
    def test_composite_class_amount_takes_precedence(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate("120", contribution_type=DOLLAR, class_amounts={1: Decimal("20")})
        assert select_policy(rate, percentage_policy, PlanType.COMPOSITE, 1) == (DOLLAR, Decimal("20"))

    def test_composite_without_class_amount_uses_plan_policy(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate("120", contribution_type=DOLLAR, class_amounts={1: Decimal("20")})
        assert select_policy(rate, percentage_policy, PlanType.COMPOSITE, 2) == (PCT, Decimal("50"))
        assert select_policy(rate, percentage_policy, PlanType.COMPOSITE, None) == (PCT, Decimal("50"))

    def test_composite_class_amount_inherits_plan_type(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate("200", class_amounts={1: Decimal("10")})
        assert select_policy(rate, percentage_policy, PlanType.COMPOSITE, 1) == (PCT, Decimal("10"))

    def test_age_banded_dependent_values(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate()
        assert select_policy(rate, percentage_policy, PlanType.AGE_BANDED) == (PCT, Decimal("50"))
        assert select_policy(
            rate, percentage_policy, PlanType.AGE_BANDED, relationship=Relationship.SPOUSE
        ) == (PCT, Decimal("25"))

    def test_other_ignores_class_amounts(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate(class_amounts={1: Decimal("20")}, contribution_type=DOLLAR)
        assert select_policy(rate, percentage_policy, PlanType.OTHER, 1) == (PCT, Decimal("50"))


class TestComputeContribution:
    def test_spouse_record(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        result = compute_contribution(
            make_rate("350.00"), percentage_policy,
            plan_type=PlanType.AGE_BANDED, relationship=Relationship.SPOUSE,
        )
        assert result.employer == Decimal("87.50")
        assert result.employee == Decimal("262.50")
        assert result.value == Decimal("25")

    def test_override_amount_is_split(
        self, make_rate: Callable[..., Rate], percentage_policy: ContributionPolicy
    ) -> None:
        rate = make_rate("540", contribution_type=DOLLAR, class_amounts={1: Decimal("425")})
        result = compute_contribution(
            rate, percentage_policy, 1, plan_type=PlanType.COMPOSITE, amount=Decimal("450")
        )
        assert result.employer == Decimal("425")
        assert result.employee == Decimal("25")

    def test_no_policy(self, make_rate: Callable[..., Rate]) -> None:
        result = compute_contribution(make_rate("100"), ContributionPolicy())
        assert result.employer == Decimal("0")
        assert result.employee == Decimal("100")
        assert result.type is None
