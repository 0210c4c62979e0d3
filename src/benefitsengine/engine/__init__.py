"""Rate-resolution and enrollment engine."""

from benefitsengine.engine.age_band import match_age_band
from benefitsengine.engine.binding import RateBinder
from benefitsengine.engine.contribution import compute_contribution
from benefitsengine.engine.materializer import EnrollmentMaterializer
from benefitsengine.engine.renewal import RenewalProcessor
from benefitsengine.engine.resolver import display_rate, rate_status, resolve_rate

__all__ = [
    "EnrollmentMaterializer",
    "RateBinder",
    "RenewalProcessor",
    "compute_contribution",
    "display_rate",
    "match_age_band",
    "rate_status",
    "resolve_rate",
]
