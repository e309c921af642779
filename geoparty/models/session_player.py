import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from geoparty.models.base import Base


class Team(str, enum.Enum):
    team1 = "team1"
    team2 = "team2"
    solo = "solo"


class SessionPlayer(Base):
    __tablename__ = "session_players"
    __table_args__ = (UniqueConstraint("session_id", "user_id", name="uq_session_players_session_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("game_sessions.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    team: Mapped[Team] = mapped_column(Enum(Team), nullable=False, default=Team.solo)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rounds_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
