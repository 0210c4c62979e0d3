"""Temporal rate resolution.

Two distinct queries live here. ``resolve_rate`` is the binding lookup used
when enrollments are created or renewed. ``display_rate`` is the read-only
"what applies right now" lookup for screens and reports, with a
Pending/Ended fallback that must never feed a binding write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from benefitsengine.core.types import RateStatus


if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from benefitsengine.core.models import Rate


def resolve_rate(candidates: Iterable[Rate], day: date) -> Rate | None:
    """Return the rate active on ``day``.

    A rate is active when ``start_date <= day`` and its ``end_date`` is
    open or not before ``day``. Overlapping active rates resolve to the
    one with the latest ``start_date``.
    """
    best: Rate | None = None
    for rate in candidates:
        if not rate.covers(day):
            continue
        if best is None or rate.start_date > best.start_date:
            best = rate
    return best


def rate_status(rate: Rate, today: date) -> RateStatus:
    if rate.start_date > today:
        return RateStatus.PENDING
    if rate.end_date is None or rate.end_date >= today:
        return RateStatus.ACTIVE
    return RateStatus.ENDED


def display_rate(candidates: Iterable[Rate], today: date) -> Rate | None:
    """Rate to show as current: Active, else next Pending, else last Ended."""
    rates = list(candidates)
    active = resolve_rate(rates, today)
    if active is not None:
        return active

    pending = [r for r in rates if rate_status(r, today) is RateStatus.PENDING]
    if pending:
        return min(pending, key=lambda r: r.start_date)

    ended = [r for r in rates if rate_status(r, today) is RateStatus.ENDED]
    if ended:
        return max(ended, key=lambda r: r.start_date)
    return None
