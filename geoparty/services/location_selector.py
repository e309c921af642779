import random
from dataclasses import dataclass

from geoparty.config import settings
from geoparty.data.locations import CANDIDATE_LOCATIONS, CandidateLocation

MAX_JITTER_DEGREES = 0.075
# Ground-level imagery is not served near the poles.
MAX_IMAGERY_LATITUDE = 85.0


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    name: str | None = None


def clamp_to_imagery_range(lat: float, lng: float) -> tuple[float, float]:
    """Clamp latitude to the imagery band and wrap longitude into [-180, 180)."""
    lat = max(-MAX_IMAGERY_LATITUDE, min(MAX_IMAGERY_LATITUDE, lat))
    lng = ((lng + 180.0) % 360.0) - 180.0
    return lat, lng


def select_location(
    rng: random.Random | None = None,
    jitter_degrees: float | None = None,
    candidates: list[CandidateLocation] | None = None,
) -> Location:
    """Pick a candidate uniformly at random and offset it by up to +/- jitter in each axis."""
    rng = rng or random.Random()
    jitter = settings.location_jitter_degrees if jitter_degrees is None else jitter_degrees
    if jitter < 0 or jitter > MAX_JITTER_DEGREES:
        raise ValueError(f"jitter_degrees must be between 0 and {MAX_JITTER_DEGREES}")

    pool = candidates if candidates is not None else CANDIDATE_LOCATIONS
    if not pool:
        raise ValueError("No candidate locations to choose from")

    candidate = rng.choice(pool)
    lat = candidate.lat + rng.uniform(-jitter, jitter)
    lng = candidate.lng + rng.uniform(-jitter, jitter)
    lat, lng = clamp_to_imagery_range(lat, lng)
    return Location(lat=lat, lng=lng, name=candidate.name)
