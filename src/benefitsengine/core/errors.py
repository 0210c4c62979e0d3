"""Exception hierarchy for the rate-resolution and enrollment engine.

Every error carries a ``context`` dict of identifiers (plan, option,
participant, dates) so a failure can be traced back to the rate table or
record that caused it.
"""

from __future__ import annotations

from typing import Any


class BenefitsError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    def format_context(self) -> str:
        """One-line ``key=value`` summary of the context."""
        return " | ".join(f"{k}={v}" for k, v in self.context.items() if v is not None)

    def __str__(self) -> str:
        summary = self.format_context()
        return f"{self.message} ({summary})" if summary else self.message


class ValidationError(BenefitsError):
    """The request is incomplete or inconsistent; retrying will not help."""


class NoActiveRateError(BenefitsError):
    """No rate covers the requested date for a required lookup."""

    def __init__(
        self,
        message: str,
        *,
        plan_id: str | None = None,
        option_id: str | None = None,
        as_of: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        merged = {"plan_id": plan_id, "option_id": option_id, "as_of": as_of}
        merged.update(context or {})
        super().__init__(message, context=merged)
        self.plan_id = plan_id
        self.option_id = option_id
        self.as_of = as_of


class RateHistoryInvariantError(BenefitsError):
    """An enrollment has more than one open rate-history entry."""


class RecordNotFoundError(BenefitsError):
    """A referenced record does not exist in the store."""


class RecordInUseError(BenefitsError):
    """A delete was refused because other records still reference the target."""
