"""Tests for the per-participant round state machine."""

import random
from dataclasses import FrozenInstanceError

import pytest

from geoparty.services.location_selector import Location
from geoparty.services.round_engine import (
    ROUNDS_PER_GAME,
    GameSummary,
    Guess,
    Round,
    RoundEngine,
    RoundPhase,
    RoundStateError,
)
from geoparty.services.scoring import exponential_points, haversine_km, tiered_points

NEW_YORK = Location(lat=40.7128, lng=-74.0060, name="New York")


class RecordingView:
    def __init__(self, log: list, round_: Round):
        self.log = log
        self.log.append(("created", round_.number))

    def show_round(self, round_):
        self.log.append(("round", round_.number))

    def show_guess(self, guess):
        self.log.append(("guess", guess))

    def show_result(self, round_):
        self.log.append(("result", round_.number))

    def dispose(self):
        self.log.append(("dispose",))


def fixed_engine(scoring=exponential_points, target=NEW_YORK, **kwargs) -> RoundEngine:
    return RoundEngine(scoring=scoring, location_source=lambda: target, **kwargs)


def play_round(engine: RoundEngine, lat: float, lng: float) -> Round:
    engine.place_guess(lat, lng)
    return engine.submit()


# ---------------------------------------------------------------------------
# Single round transitions
# ---------------------------------------------------------------------------


class TestRoundTransitions:
    def test_start_enters_awaiting_guess(self):
        engine = fixed_engine()
        first = engine.start()
        assert first.number == 1
        assert first.target == NEW_YORK
        assert engine.state.phase == RoundPhase.awaiting_guess
        assert engine.state.round_number == 1

    def test_cannot_start_twice(self):
        engine = fixed_engine()
        engine.start()
        with pytest.raises(RoundStateError):
            engine.start()

    def test_place_guess_before_start(self):
        with pytest.raises(RoundStateError):
            fixed_engine().place_guess(1, 2)

    def test_latest_click_wins(self):
        engine = fixed_engine()
        engine.start()
        engine.place_guess(10, 10)
        engine.place_guess(40.7128, -74.0060)
        assert engine.state.phase == RoundPhase.guess_placed
        assert engine.current_round.guess == Guess(lat=40.7128, lng=-74.0060)

    def test_submit_without_guess_is_rejected(self):
        engine = fixed_engine()
        engine.start()
        with pytest.raises(RoundStateError):
            engine.submit()
        assert engine.state.phase == RoundPhase.awaiting_guess
        assert engine.state.score == 0

    def test_perfect_guess_scores_5000(self):
        engine = fixed_engine()
        engine.start()
        completed = play_round(engine, 40.7128, -74.0060)
        assert completed.completed is True
        assert completed.distance_km == 0
        assert completed.points == 5000
        assert engine.state.score == 5000
        assert engine.state.phase == RoundPhase.round_complete

    def test_perfect_guess_scores_5000_tiered(self):
        engine = fixed_engine(scoring=tiered_points)
        engine.start()
        assert play_round(engine, 40.7128, -74.0060).points == 5000

    def test_distance_and_points_use_policy(self):
        engine = fixed_engine(scoring=tiered_points)
        engine.start()
        completed = play_round(engine, 51.5074, -0.1278)
        expected = haversine_km(51.5074, -0.1278, NEW_YORK.lat, NEW_YORK.lng)
        assert completed.distance_km == pytest.approx(expected)
        assert completed.points == tiered_points(expected)
        assert engine.state.total_distance_km == pytest.approx(expected)

    def test_completed_round_is_immutable(self):
        engine = fixed_engine()
        engine.start()
        completed = play_round(engine, 0, 0)
        with pytest.raises(FrozenInstanceError):
            completed.points = 5000  # type: ignore[misc]

    def test_resubmit_is_rejected(self):
        engine = fixed_engine()
        engine.start()
        completed = play_round(engine, 0, 0)
        with pytest.raises(RoundStateError):
            engine.submit()
        assert engine.current_round == completed
        assert engine.state.score == completed.points

    def test_guess_after_submit_is_rejected(self):
        engine = fixed_engine()
        engine.start()
        completed = play_round(engine, 0, 0)
        with pytest.raises(RoundStateError):
            engine.place_guess(40.7128, -74.0060)
        assert engine.current_round.guess == completed.guess

    def test_next_round_requires_completion(self):
        engine = fixed_engine()
        engine.start()
        engine.place_guess(1, 1)
        with pytest.raises(RoundStateError):
            engine.next_round()

    def test_next_round_clears_guess_and_picks_new_target(self):
        targets = iter([NEW_YORK, Location(lat=48.8566, lng=2.3522, name="Paris")])
        engine = RoundEngine(scoring=exponential_points, location_source=lambda: next(targets))
        engine.start()
        play_round(engine, 0, 0)
        second = engine.next_round()
        assert isinstance(second, Round)
        assert second.number == 2
        assert second.guess is None
        assert second.target.name == "Paris"
        assert engine.state.phase == RoundPhase.awaiting_guess


# ---------------------------------------------------------------------------
# Full game
# ---------------------------------------------------------------------------


class TestFullGame:
    def test_five_rounds_then_game_complete(self):
        engine = fixed_engine()
        engine.start()
        guesses = [(40.7128, -74.0060), (40.0, -74.0), (41.0, -73.0), (35.0, -80.0), (0.0, 0.0)]
        completed = []
        result = None
        for lat, lng in guesses:
            completed.append(play_round(engine, lat, lng))
            result = engine.next_round()

        assert isinstance(result, GameSummary)
        assert engine.is_finished
        assert engine.state.phase == RoundPhase.game_complete
        assert result.final_score == sum(r.points for r in completed)
        assert result.total_distance_km == pytest.approx(sum(r.distance_km for r in completed))
        assert result.average_distance_km == pytest.approx(result.total_distance_km / 5)
        assert [r.number for r in result.rounds] == [1, 2, 3, 4, 5]

    def test_no_round_after_game_complete(self):
        engine = fixed_engine()
        engine.start()
        for _ in range(ROUNDS_PER_GAME):
            play_round(engine, 0, 0)
            engine.next_round()
        with pytest.raises(RoundStateError):
            engine.next_round()
        with pytest.raises(RoundStateError):
            engine.place_guess(1, 1)
        assert engine.state.round_number == ROUNDS_PER_GAME

    def test_score_never_exceeds_max_per_completed_round(self):
        engine = RoundEngine(rng=random.Random(2))
        engine.start()
        rng = random.Random(99)
        for done in range(1, ROUNDS_PER_GAME + 1):
            play_round(engine, rng.uniform(-80, 80), rng.uniform(-180, 180))
            assert engine.state.score <= 5000 * done
            engine.next_round()

    def test_round_number_only_increases(self):
        engine = fixed_engine()
        engine.start()
        seen = [engine.state.round_number]
        for _ in range(ROUNDS_PER_GAME):
            play_round(engine, 0, 0)
            engine.next_round()
            seen.append(engine.state.round_number)
        assert seen == sorted(seen)
        assert seen[-1] == ROUNDS_PER_GAME


# ---------------------------------------------------------------------------
# View adapter lifecycle and reporting
# ---------------------------------------------------------------------------


class TestRoundView:
    def test_view_created_per_round_and_disposed(self):
        log: list = []
        engine = fixed_engine(view_factory=lambda r: RecordingView(log, r))
        engine.start()
        engine.place_guess(1, 2)
        engine.submit()
        engine.next_round()
        assert log == [
            ("created", 1),
            ("round", 1),
            ("guess", Guess(lat=1, lng=2)),
            ("result", 1),
            ("dispose",),
            ("created", 2),
            ("round", 2),
        ]

    def test_last_view_disposed_on_game_complete(self):
        log: list = []
        engine = fixed_engine(view_factory=lambda r: RecordingView(log, r))
        engine.start()
        for _ in range(ROUNDS_PER_GAME):
            play_round(engine, 0, 0)
            engine.next_round()
        assert log[-1] == ("dispose",)
        assert log.count(("dispose",)) == ROUNDS_PER_GAME


class TestRoundResultPayload:
    def test_payload_for_completed_round(self):
        engine = fixed_engine()
        engine.start()
        play_round(engine, 40.7128, -74.0060)
        payload = engine.round_result_payload()
        assert payload == {
            "round_number": 1,
            "guess_lat": 40.7128,
            "guess_lng": -74.0060,
            "actual_lat": 40.7128,
            "actual_lng": -74.0060,
            "distance_km": 0,
            "points": 5000,
        }

    def test_payload_requires_completed_round(self):
        engine = fixed_engine()
        engine.start()
        with pytest.raises(RoundStateError):
            engine.round_result_payload()
