import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from geoparty.models.base import Base


class GameMode(str, enum.Enum):
    one_v_one = "1v1"
    two_v_two = "2v2"
    freeplay = "freeplay"


class ViewMode(str, enum.Enum):
    normal = "normal"
    no_moving = "noMoving"
    no_zoom = "noZoom"


class SessionStatus(str, enum.Enum):
    waiting = "waiting"
    playing = "playing"
    finished = "finished"


MAX_PLAYERS_BY_MODE: dict[GameMode, int] = {
    GameMode.one_v_one: 2,
    GameMode.two_v_two: 4,
    GameMode.freeplay: 1,
}


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    # Persist the wire values ("1v1", "noMoving") rather than the member names.
    return [member.value for member in enum_cls]


class GameSession(Base):
    __tablename__ = "game_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    game_mode: Mapped[GameMode] = mapped_column(
        Enum(GameMode, name="gamemode", values_callable=_enum_values),
        nullable=False,
        default=GameMode.freeplay,
    )
    view_mode: Mapped[ViewMode] = mapped_column(
        Enum(ViewMode, name="viewmode", values_callable=_enum_values),
        nullable=False,
        default=ViewMode.normal,
    )
    max_players: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    current_players: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="sessionstatus"), nullable=False, default=SessionStatus.waiting
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    finished_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
