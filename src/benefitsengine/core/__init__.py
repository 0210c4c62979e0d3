"""Core module - models, enums, dates and errors."""

from __future__ import annotations

from benefitsengine.core.errors import (
    BenefitsError,
    NoActiveRateError,
    RateHistoryInvariantError,
    RecordInUseError,
    RecordNotFoundError,
    ValidationError,
)
from benefitsengine.core.models import (
    Contribution,
    ContributionPolicy,
    Dependent,
    Enrollment,
    EnrollmentRequest,
    Group,
    Participant,
    Plan,
    PlanOption,
    Rate,
    RateHistoryEntry,
    Renewal,
    RenewalFailure,
    RenewalReport,
)
from benefitsengine.core.types import (
    ContributionType,
    CoverageSelection,
    PlanFamily,
    PlanType,
    RateStatus,
    Relationship,
)


__all__ = [
    # Errors
    "BenefitsError",
    # Models
    "Contribution",
    "ContributionPolicy",
    # Types
    "ContributionType",
    "CoverageSelection",
    "Dependent",
    "Enrollment",
    "EnrollmentRequest",
    "Group",
    "NoActiveRateError",
    "Participant",
    "Plan",
    "PlanFamily",
    "PlanOption",
    "PlanType",
    "Rate",
    "RateHistoryEntry",
    "RateHistoryInvariantError",
    "RateStatus",
    "RecordInUseError",
    "RecordNotFoundError",
    "Relationship",
    "Renewal",
    "RenewalFailure",
    "RenewalReport",
    "ValidationError",
]
