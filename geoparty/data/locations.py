from dataclasses import dataclass


@dataclass(frozen=True)
class CandidateLocation:
    name: str
    lat: float
    lng: float


# City centres with dependable ground-level imagery coverage.
CANDIDATE_LOCATIONS: list[CandidateLocation] = [
    CandidateLocation(name="London", lat=51.5074, lng=-0.1278),
    CandidateLocation(name="Paris", lat=48.8566, lng=2.3522),
    CandidateLocation(name="Tokyo", lat=35.6762, lng=139.6503),
    CandidateLocation(name="Sydney", lat=-33.8688, lng=151.2093),
    CandidateLocation(name="New York", lat=40.7128, lng=-74.0060),
    CandidateLocation(name="San Francisco", lat=37.7749, lng=-122.4194),
    CandidateLocation(name="Berlin", lat=52.5200, lng=13.4050),
    CandidateLocation(name="Rome", lat=41.9028, lng=12.4964),
    CandidateLocation(name="Beijing", lat=39.9526, lng=116.4074),
    CandidateLocation(name="Singapore", lat=1.3521, lng=103.8198),
    CandidateLocation(name="Moscow", lat=55.7558, lng=37.6173),
    CandidateLocation(name="Los Angeles", lat=34.0522, lng=-118.2437),
    CandidateLocation(name="Marseille", lat=43.2965, lng=5.3698),
    CandidateLocation(name="Prague", lat=50.1109, lng=14.4094),
    CandidateLocation(name="Stockholm", lat=59.3293, lng=18.0686),
    CandidateLocation(name="Vienna", lat=48.2082, lng=16.3738),
    CandidateLocation(name="Warsaw", lat=52.2297, lng=21.0122),
    CandidateLocation(name="Budapest", lat=47.4979, lng=19.0402),
    CandidateLocation(name="Lisbon", lat=38.7223, lng=-9.1393),
    CandidateLocation(name="Madrid", lat=40.4168, lng=-3.7038),
    CandidateLocation(name="Portland", lat=45.5017, lng=-122.6750),
    CandidateLocation(name="Seattle", lat=47.6062, lng=-122.3321),
    CandidateLocation(name="Denver", lat=39.7392, lng=-104.9903),
    CandidateLocation(name="Chicago", lat=41.8781, lng=-87.6298),
    CandidateLocation(name="Miami", lat=25.7617, lng=-80.1918),
    CandidateLocation(name="Sao Paulo", lat=-23.5505, lng=-46.6333),
    CandidateLocation(name="Cape Town", lat=-33.8688, lng=18.4241),
    CandidateLocation(name="Nile Delta", lat=31.2357, lng=30.4415),
    CandidateLocation(name="New Delhi", lat=28.6139, lng=77.2090),
    CandidateLocation(name="Bangkok", lat=13.7563, lng=100.5018),
]


def list_candidates() -> list[CandidateLocation]:
    return list(CANDIDATE_LOCATIONS)
