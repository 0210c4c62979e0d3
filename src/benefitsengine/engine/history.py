"""Rate-history helpers shared by materialization and renewal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benefitsengine.core.errors import RateHistoryInvariantError


if TYPE_CHECKING:
    from collections.abc import Iterable

    from benefitsengine.core.models import RateHistoryEntry

logger = logging.getLogger(__name__)


def open_entry(entries: Iterable[RateHistoryEntry], enrollment_id: str) -> RateHistoryEntry | None:
    """Return the single open history entry of an enrollment.

    Raises:
        RateHistoryInvariantError: If more than one entry is open. Nothing
            is corrected automatically; the data has to be fixed by hand.
    """
    open_entries = [e for e in entries if e.is_open]
    if len(open_entries) > 1:
        logger.error(
            "Enrollment %s has %d open rate history entries: %s",
            enrollment_id, len(open_entries), ", ".join(str(e.id) for e in open_entries),
        )
        msg = f"Enrollment {enrollment_id} has {len(open_entries)} open rate history entries"
        raise RateHistoryInvariantError(
            msg,
            context={"enrollment_id": enrollment_id, "entries": [e.id for e in open_entries]},
        )
    return open_entries[0] if open_entries else None
