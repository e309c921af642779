from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from geoparty.models.game_session import GameMode, SessionStatus, ViewMode
from geoparty.models.session_player import Team
from geoparty.services.scoring import MAX_POINTS_PER_ROUND
from geoparty.services.round_engine import ROUNDS_PER_GAME


class SessionCreate(BaseModel):
    game_mode: GameMode = GameMode.freeplay
    view_mode: ViewMode = ViewMode.normal


class SessionCreated(BaseModel):
    session_id: str


class SuccessResponse(BaseModel):
    success: bool = True


class SessionPlayerResponse(BaseModel):
    id: int
    user_id: int
    team: Team
    score: int
    rounds_completed: int
    joined_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    id: str
    creator_id: int
    game_mode: GameMode
    view_mode: ViewMode
    max_players: int
    current_players: int
    status: SessionStatus
    created_at: datetime
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    players: list[SessionPlayerResponse] = []

    model_config = {"from_attributes": True}


class RoundResultCreate(BaseModel):
    round_number: int = Field(ge=1, le=ROUNDS_PER_GAME)
    guess_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    guess_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    actual_lat: float = Field(ge=-90, le=90)
    actual_lng: float = Field(ge=-180, le=180)
    distance_km: Optional[int] = Field(default=None, ge=0)
    points: int = Field(ge=0, le=MAX_POINTS_PER_ROUND)

    @model_validator(mode="after")
    def check_guess_pair(self) -> "RoundResultCreate":
        if (self.guess_lat is None) != (self.guess_lng is None):
            raise ValueError("guess_lat and guess_lng must be given together")
        return self


class RoundResultResponse(BaseModel):
    id: int
    session_id: str
    user_id: int
    round_number: int
    guess_lat: Optional[float]
    guess_lng: Optional[float]
    actual_lat: float
    actual_lng: float
    distance_km: Optional[int]
    points: int
    created_at: datetime

    model_config = {"from_attributes": True}
