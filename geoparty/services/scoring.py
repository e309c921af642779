"""Distance and point calculation for a single guess.

Two scoring policies are supported and looked up by name:

  exponential: 5000 * e^(-10 * d / 40075), rounded, never below 0
  tiered:      fixed values per distance band, then 5000 - d/2 beyond 5000 km

Both return an int in [0, 5000].
"""

import enum
import math
from typing import Callable

EARTH_RADIUS_KM = 6371.0
EARTH_CIRCUMFERENCE_KM = 40075.0
MAX_POINTS_PER_ROUND = 5000

# (upper bound in km, exclusive) -> points
TIERED_BANDS: list[tuple[float, int]] = [
    (1, 5000),
    (10, 4500),
    (50, 4000),
    (100, 3500),
    (500, 3000),
    (1000, 2500),
    (2500, 2000),
    (5000, 1500),
]


class ScoringPolicyName(str, enum.Enum):
    exponential = "exponential"
    tiered = "tiered"


ScoringPolicy = Callable[[float], int]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two (lat, lng) points given in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push `a` slightly outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _check_distance(distance_km: float) -> None:
    if distance_km < 0 or math.isnan(distance_km):
        raise ValueError(f"Distance must be a non-negative number, got {distance_km}")


def exponential_points(distance_km: float) -> int:
    _check_distance(distance_km)
    points = round(MAX_POINTS_PER_ROUND * math.exp(-10 * distance_km / EARTH_CIRCUMFERENCE_KM))
    return max(0, int(points))


def tiered_points(distance_km: float) -> int:
    _check_distance(distance_km)
    for upper_bound, points in TIERED_BANDS:
        if distance_km < upper_bound:
            return points
    return max(0, MAX_POINTS_PER_ROUND - math.floor(distance_km / 2))


SCORING_POLICIES: dict[ScoringPolicyName, ScoringPolicy] = {
    ScoringPolicyName.exponential: exponential_points,
    ScoringPolicyName.tiered: tiered_points,
}


def get_scoring_policy(name: str | ScoringPolicyName) -> ScoringPolicy:
    try:
        return SCORING_POLICIES[ScoringPolicyName(name)]
    except ValueError:
        raise ValueError(f"Unknown scoring policy '{name}'") from None
