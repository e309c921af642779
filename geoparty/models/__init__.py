from geoparty.models.base import Base  # noqa: F401
from geoparty.models.game_session import GameMode, GameSession, SessionStatus, ViewMode  # noqa: F401
from geoparty.models.round_result import RoundResult  # noqa: F401
from geoparty.models.session_player import SessionPlayer, Team  # noqa: F401
from geoparty.models.user import User  # noqa: F401
