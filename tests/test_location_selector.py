import random

import pytest

from geoparty.data.locations import CANDIDATE_LOCATIONS, CandidateLocation, list_candidates
from geoparty.services.location_selector import (
    MAX_IMAGERY_LATITUDE,
    MAX_JITTER_DEGREES,
    Location,
    clamp_to_imagery_range,
    select_location,
)


class TestCandidateTable:
    def test_has_thirty_candidates(self):
        assert len(list_candidates()) == 30

    def test_coordinates_in_range(self):
        for candidate in CANDIDATE_LOCATIONS:
            assert -90 <= candidate.lat <= 90
            assert -180 <= candidate.lng <= 180
            assert candidate.name


class TestSelectLocation:
    def test_within_jitter_of_a_candidate(self):
        rng = random.Random(7)
        for _ in range(200):
            location = select_location(rng, jitter_degrees=0.05)
            candidate = next(c for c in CANDIDATE_LOCATIONS if c.name == location.name)
            assert abs(location.lat - candidate.lat) <= 0.05
            assert abs(location.lng - candidate.lng) <= 0.05

    def test_zero_jitter_returns_candidate(self):
        location = select_location(random.Random(1), jitter_degrees=0)
        assert (location.lat, location.lng, location.name) in {
            (c.lat, c.lng, c.name) for c in CANDIDATE_LOCATIONS
        }

    def test_deterministic_for_seed(self):
        assert select_location(random.Random(3)) == select_location(random.Random(3))

    def test_uses_every_candidate_eventually(self):
        rng = random.Random(11)
        seen = {select_location(rng).name for _ in range(2000)}
        assert seen == {c.name for c in CANDIDATE_LOCATIONS}

    def test_custom_candidates(self):
        only = [CandidateLocation(name="Null Island", lat=0.0, lng=0.0)]
        location = select_location(random.Random(0), jitter_degrees=0.01, candidates=only)
        assert location.name == "Null Island"
        assert abs(location.lat) <= 0.01

    @pytest.mark.parametrize("jitter", [-0.01, MAX_JITTER_DEGREES + 0.001])
    def test_jitter_out_of_range(self, jitter):
        with pytest.raises(ValueError):
            select_location(random.Random(0), jitter_degrees=jitter)

    def test_empty_candidates(self):
        with pytest.raises(ValueError):
            select_location(random.Random(0), candidates=[])

    def test_location_is_immutable(self):
        location = Location(lat=1.0, lng=2.0)
        with pytest.raises(AttributeError):
            location.lat = 3.0  # type: ignore[misc]


class TestClamp:
    def test_latitude_clamped(self):
        assert clamp_to_imagery_range(89.9, 0)[0] == MAX_IMAGERY_LATITUDE
        assert clamp_to_imagery_range(-89.9, 0)[0] == -MAX_IMAGERY_LATITUDE

    def test_longitude_wrapped(self):
        assert clamp_to_imagery_range(0, 180.05)[1] == pytest.approx(-179.95)
        assert clamp_to_imagery_range(0, -180.05)[1] == pytest.approx(179.95)

    def test_inside_range_untouched(self):
        assert clamp_to_imagery_range(51.5, -0.12) == (51.5, pytest.approx(-0.12))
