"""Core type definitions and enums."""

from __future__ import annotations

from enum import Enum


class PlanType(str, Enum):
    """How a plan prices its coverage."""

    AGE_BANDED = "Age Banded"
    COMPOSITE = "Composite"
    OTHER = "Other"


class PlanFamily(str, Enum):
    """Who owns a plan: an employer group or the global Medicare catalog."""

    GROUP = "group"
    MEDICARE = "medicare"


class ContributionType(str, Enum):
    """Employer contribution policy kinds."""

    PERCENTAGE = "Percentage"
    DOLLAR = "Dollar Amount"


class Relationship(str, Enum):
    """Dependent relationship to the participant."""

    SPOUSE = "Spouse"
    CHILD = "Child"


class CoverageSelection(str, Enum):
    """Who an enrollment covers besides the employee."""

    EMPLOYEE_ONLY = "Employee"
    EMPLOYEE_SPOUSE = "Employee and Spouse"
    EMPLOYEE_CHILDREN = "Employee and Children"
    EMPLOYEE_SPOUSE_CHILDREN = "Employee, Spouse, and Children"

    @property
    def includes_spouse(self) -> bool:
        return self in (CoverageSelection.EMPLOYEE_SPOUSE, CoverageSelection.EMPLOYEE_SPOUSE_CHILDREN)

    @property
    def includes_children(self) -> bool:
        return self in (
            CoverageSelection.EMPLOYEE_CHILDREN,
            CoverageSelection.EMPLOYEE_SPOUSE_CHILDREN,
        )

    def implies(self, relationship: Relationship) -> bool:
        """Whether a dependent with ``relationship`` is covered by this selection."""
        if relationship is Relationship.SPOUSE:
            return self.includes_spouse
        return self.includes_children


class RateStatus(str, Enum):
    """Display status of a rate relative to a reference day."""

    PENDING = "Pending"
    ACTIVE = "Active"
    ENDED = "Ended"
