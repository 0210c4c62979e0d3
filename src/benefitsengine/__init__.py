"""benefitsengine - Rate resolution and enrollment engine for benefits administration.

This package provides:
- Temporal rate tables per plan option (or per Medicare plan)
- Age-band matching and point-in-time rate resolution
- Employer/employee contribution splitting
- Enrollment materialization with an append-only rate history
- Plan renewals that re-bind every active enrollment to current rates
"""

from __future__ import annotations

from benefitsengine.config.settings import Settings
from benefitsengine.core.errors import (
    BenefitsError,
    NoActiveRateError,
    RateHistoryInvariantError,
    ValidationError,
)
from benefitsengine.core.models import (
    Enrollment,
    EnrollmentRequest,
    Rate,
    RateHistoryEntry,
    RenewalReport,
)
from benefitsengine.core.types import CoverageSelection, PlanType
from benefitsengine.orchestrator.service import BenefitsService
from benefitsengine.storage.repository import SQLiteRateStore


__version__ = "0.1.0"

__all__ = [
    "BenefitsError",
    "BenefitsService",
    "CoverageSelection",
    "Enrollment",
    "EnrollmentRequest",
    "NoActiveRateError",
    "PlanType",
    "Rate",
    "RateHistoryEntry",
    "RateHistoryInvariantError",
    "RenewalReport",
    "SQLiteRateStore",
    "Settings",
    "ValidationError",
]
