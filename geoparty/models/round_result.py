from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from geoparty.models.base import Base


class RoundResult(Base):
    __tablename__ = "round_results"
    __table_args__ = (
        UniqueConstraint(
            "session_id", "user_id", "round_number", name="uq_round_results_session_user_round"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("game_sessions.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    guess_lat: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    guess_lng: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    actual_lat: Mapped[float] = mapped_column(Float, nullable=False)
    actual_lng: Mapped[float] = mapped_column(Float, nullable=False)
    distance_km: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
