"""Age-band matching for age-banded plans."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence

    from benefitsengine.core.models import PlanOption


def match_age_band(age: int, options: Sequence[PlanOption]) -> PlanOption | None:
    """Pick the plan option whose age threshold applies to ``age``.

    An option labelled with exactly ``age`` wins. Otherwise the highest
    threshold not above ``age`` is used, and an age below every threshold
    falls back to the lowest one. Options whose label is not numeric are
    ignored.

    Args:
        age: Age in whole years.
        options: Candidate options of one age-banded plan.

    Returns:
        The matching option, or None if no option has a numeric label.
    """
    banded = [(opt.band, opt) for opt in options if opt.band is not None]
    if not banded:
        return None

    for band, opt in banded:
        if band == age:
            return opt

    banded.sort(key=lambda item: item[0], reverse=True)
    for band, opt in banded:
        if age >= band:
            return opt
    return banded[-1][1]
