"""Data models for plans, rates, enrollments and renewals."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from benefitsengine.core.types import (  # noqa: TC001 - Pydantic needs at runtime
    ContributionType,
    CoverageSelection,
    PlanFamily,
    PlanType,
    Relationship,
)


class ContributionPolicy(BaseModel):
    """Employer contribution policy attached to a plan.

    ``value`` applies to the employee record; ``spouse_value`` and
    ``child_value`` apply to dependent records of an age-banded enrollment.
    """

    type: ContributionType | None = None
    value: Decimal | None = None
    spouse_value: Decimal | None = None
    child_value: Decimal | None = None

    model_config = {"frozen": True}

    def value_for(self, relationship: Relationship | None) -> Decimal | None:
        if relationship is None:
            return self.value
        if relationship is Relationship.SPOUSE:
            return self.spouse_value
        return self.child_value


class Group(BaseModel):
    """An employer group."""
    id: str
    name: str
    number_of_classes: int = Field(default=1, ge=1)


class Plan(BaseModel):
    """A coverage product owned by a group, or a global Medicare plan."""
    id: str
    name: str
    plan_type: PlanType
    family: PlanFamily = PlanFamily.GROUP
    group_id: str | None = None
    effective_date: date | None = None
    termination_date: date | None = None
    contribution: ContributionPolicy = Field(default_factory=ContributionPolicy)

    @property
    def is_medicare(self) -> bool:
        return self.family is PlanFamily.MEDICARE

    def terminated_before(self, day: date) -> bool:
        return self.termination_date is not None and self.termination_date < day


class PlanOption(BaseModel):
    """A named bucket under a plan: an age threshold or a composite tier."""
    id: str
    plan_id: str
    label: str

    @property
    def band(self) -> int | None:
        """The label as an age threshold, or None when it is not numeric."""
        try:
            return int(self.label.strip())
        except ValueError:
            return None


class Rate(BaseModel):
    """A priced value valid over ``[start_date, end_date]``.

    Composite rates may carry their own per-class employer contribution
    amounts in ``class_amounts`` (class number -> amount).
    """

    id: str
    rate: Decimal
    start_date: date
    end_date: date | None = None
    plan_option_id: str | None = None
    plan_id: str | None = None
    contribution_type: ContributionType | None = None
    class_amounts: dict[int, Decimal] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def covers(self, day: date) -> bool:
        return self.start_date <= day and (self.end_date is None or self.end_date >= day)


class Participant(BaseModel):
    """An enrolled employee or Medicare client."""
    id: str
    name: str
    group_id: str | None = None
    dob: date | None = None
    hire_date: date | None = None
    termination_date: date | None = None
    class_number: int | None = None

    def active_on(self, day: date) -> bool:
        if self.hire_date is not None and self.hire_date > day:
            return False
        return self.termination_date is None or self.termination_date >= day


class Dependent(BaseModel):
    """A spouse or child of a participant."""
    id: str
    participant_id: str
    name: str = ""
    relationship: Relationship
    dob: date | None = None


class Enrollment(BaseModel):
    """Binding of a participant (or one of their dependents) to a plan.

    ``primary_enrollment_id`` marks a composite dependent record that is
    priced through the employee record and carries no rate history.
    """

    id: str | None = None
    participant_id: str
    plan_id: str
    plan_option_id: str | None = None
    dependent_id: str | None = None
    coverage: CoverageSelection | None = None
    effective_date: date
    termination_date: date | None = None
    rate_override: Decimal | None = Field(default=None, ge=0)
    primary_enrollment_id: str | None = None

    @property
    def is_rider(self) -> bool:
        return self.primary_enrollment_id is not None

    def active_on(self, day: date) -> bool:
        if self.effective_date > day:
            return False
        return self.termination_date is None or self.termination_date >= day


class Contribution(BaseModel):
    """Split of a priced amount between employer and employee."""
    employer: Decimal
    employee: Decimal
    type: ContributionType | None = None
    value: Decimal | None = None

    model_config = {"frozen": True}

    @property
    def total(self) -> Decimal:
        return self.employer + self.employee


class RateHistoryEntry(BaseModel):
    """Which rate applied to an enrollment over ``[start_date, end_date]``."""
    id: str | None = None
    enrollment_id: str
    rate_id: str
    start_date: date
    end_date: date | None = None
    rate_amount: Decimal
    contribution_type: ContributionType | None = None
    contribution_value: Decimal | None = None
    employer_amount: Decimal
    employee_amount: Decimal

    @property
    def is_open(self) -> bool:
        return self.end_date is None


class EnrollmentRequest(BaseModel):
    """An "enroll participant in plan X" request.

    Age-banded plans need ``coverage``; composite plans need
    ``plan_option_id``.
    """

    participant_id: str
    plan_id: str
    effective_date: date | None = None
    coverage: CoverageSelection | None = None
    plan_option_id: str | None = None
    rate_override: Decimal | None = Field(default=None, ge=0)


class Renewal(BaseModel):
    """A scheduled renewal of a set of plans on a date."""
    id: str
    group_id: str | None = None
    renewal_date: date
    plan_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)


class RenewalFailure(BaseModel):
    """An enrollment that could not be re-bound during a renewal."""
    participant_id: str
    plan_id: str
    enrollment_id: str
    reason: str


class RenewalReport(BaseModel):
    """Outcome of processing a renewal."""
    renewal_date: date
    plan_ids: list[str] = Field(default_factory=list)
    succeeded: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    failed: list[RenewalFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: RenewalReport) -> None:
        self.succeeded.extend(other.succeeded)
        self.unchanged.extend(other.unchanged)
        self.failed.extend(other.failed)
