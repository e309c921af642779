"""Per-participant round progression.

A game is a fixed sequence of rounds. Each round moves through:

  awaiting_guess -> guess_placed -> round_complete

and then either on to the next round's awaiting_guess or, after the last
round, to game_complete. Completed rounds are frozen; the engine replaces
the current Round object on every transition instead of mutating it.

Rendering (markers, the guess/target line) is delegated to a RoundView
created when a round starts and disposed when it ends.
"""

import enum
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Protocol

from geoparty.config import settings
from geoparty.services.location_selector import Location, select_location
from geoparty.services.scoring import ScoringPolicy, get_scoring_policy, haversine_km

logger = logging.getLogger(__name__)

ROUNDS_PER_GAME = 5


class RoundPhase(str, enum.Enum):
    awaiting_guess = "awaiting_guess"
    guess_placed = "guess_placed"
    round_complete = "round_complete"
    game_complete = "game_complete"


class RoundStateError(ValueError):
    """An action was attempted in a phase that does not allow it."""


@dataclass(frozen=True)
class Guess:
    lat: float
    lng: float


@dataclass(frozen=True)
class Round:
    number: int
    target: Location
    guess: Guess | None = None
    distance_km: float | None = None
    points: int | None = None
    completed: bool = False


@dataclass(frozen=True)
class GameSummary:
    final_score: int
    total_distance_km: float
    average_distance_km: float
    rounds: list[Round]


@dataclass
class GameState:
    round_number: int = 0
    score: int = 0
    total_distance_km: float = 0.0
    phase: RoundPhase = RoundPhase.awaiting_guess
    current_round: Round | None = None
    completed_rounds: list[Round] = field(default_factory=list)


class RoundView(Protocol):
    def show_round(self, round_: Round) -> None: ...

    def show_guess(self, guess: Guess) -> None: ...

    def show_result(self, round_: Round) -> None: ...

    def dispose(self) -> None: ...


class NullRoundView:
    def show_round(self, round_: Round) -> None:
        pass

    def show_guess(self, guess: Guess) -> None:
        pass

    def show_result(self, round_: Round) -> None:
        pass

    def dispose(self) -> None:
        pass


LocationSource = Callable[[], Location]
RoundViewFactory = Callable[[Round], RoundView]


class RoundEngine:
    def __init__(
        self,
        scoring: ScoringPolicy | None = None,
        location_source: LocationSource | None = None,
        view_factory: RoundViewFactory | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.scoring = scoring or get_scoring_policy(settings.scoring_policy)
        rng = rng or random.Random()
        self.location_source = location_source or (lambda: select_location(rng))
        self.view_factory = view_factory or (lambda _round: NullRoundView())
        self.state = GameState()
        self._view: RoundView | None = None

    @property
    def current_round(self) -> Round | None:
        return self.state.current_round

    @property
    def is_finished(self) -> bool:
        return self.state.phase == RoundPhase.game_complete

    def start(self) -> Round:
        if self.state.round_number != 0:
            raise RoundStateError("Game has already started")
        return self._begin_round(1)

    def place_guess(self, lat: float, lng: float) -> Round:
        """Record a pending guess. A later call before submit() replaces it."""
        if self.state.phase not in (RoundPhase.awaiting_guess, RoundPhase.guess_placed):
            raise RoundStateError(f"Cannot place a guess in phase {self.state.phase.value}")
        current = self._require_round()

        guess = Guess(lat=lat, lng=lng)
        self.state.current_round = replace(current, guess=guess)
        self.state.phase = RoundPhase.guess_placed
        self._view_call("show_guess", guess)
        return self.state.current_round

    def submit(self) -> Round:
        if self.state.phase != RoundPhase.guess_placed:
            raise RoundStateError(f"Cannot submit in phase {self.state.phase.value}")
        current = self._require_round()
        if current.guess is None:
            raise RoundStateError("No guess placed")

        distance = haversine_km(current.guess.lat, current.guess.lng, current.target.lat, current.target.lng)
        points = self.scoring(distance)
        completed = replace(current, distance_km=distance, points=points, completed=True)

        self.state.current_round = completed
        self.state.completed_rounds.append(completed)
        self.state.score += points
        self.state.total_distance_km += distance
        self.state.phase = RoundPhase.round_complete
        logger.debug(
            "Round %s complete: %.1f km, %s points (total %s)",
            completed.number,
            distance,
            points,
            self.state.score,
        )
        self._view_call("show_result", completed)
        return completed

    def next_round(self) -> Round | GameSummary:
        """Advance past a completed round: a fresh Round, or the summary after the last one."""
        if self.state.phase != RoundPhase.round_complete:
            raise RoundStateError(f"Cannot advance in phase {self.state.phase.value}")

        self._dispose_view()
        if self.state.round_number < ROUNDS_PER_GAME:
            return self._begin_round(self.state.round_number + 1)

        self.state.phase = RoundPhase.game_complete
        summary = self.summary()
        logger.info(
            "Game complete: %s points, average distance %.1f km",
            summary.final_score,
            summary.average_distance_km,
        )
        return summary

    def summary(self) -> GameSummary:
        return GameSummary(
            final_score=self.state.score,
            total_distance_km=self.state.total_distance_km,
            average_distance_km=self.state.total_distance_km / ROUNDS_PER_GAME,
            rounds=list(self.state.completed_rounds),
        )

    def round_result_payload(self) -> dict[str, Any]:
        """Body for reporting the completed round to the session coordinator."""
        current = self._require_round()
        if not current.completed:
            raise RoundStateError("Round is not complete")
        return {
            "round_number": current.number,
            "guess_lat": current.guess.lat if current.guess else None,
            "guess_lng": current.guess.lng if current.guess else None,
            "actual_lat": current.target.lat,
            "actual_lng": current.target.lng,
            "distance_km": round(current.distance_km) if current.distance_km is not None else None,
            "points": current.points or 0,
        }

    def _begin_round(self, number: int) -> Round:
        new_round = Round(number=number, target=self.location_source())
        self.state.round_number = number
        self.state.current_round = new_round
        self.state.phase = RoundPhase.awaiting_guess
        self._view = self.view_factory(new_round)
        self._view.show_round(new_round)
        return new_round

    def _require_round(self) -> Round:
        if self.state.current_round is None:
            raise RoundStateError("Game has not started")
        return self.state.current_round

    def _view_call(self, method: str, arg: Any) -> None:
        if self._view is not None:
            getattr(self._view, method)(arg)

    def _dispose_view(self) -> None:
        if self._view is not None:
            self._view.dispose()
            self._view = None
