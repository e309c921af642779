import logging
import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from geoparty.models.game_session import (
    MAX_PLAYERS_BY_MODE,
    GameMode,
    GameSession,
    SessionStatus,
    ViewMode,
)
from geoparty.models.round_result import RoundResult
from geoparty.models.session_player import SessionPlayer, Team
from geoparty.models.user import User
from geoparty.services.round_engine import ROUNDS_PER_GAME

logger = logging.getLogger(__name__)

SESSION_CODE_BYTES = 12


class SessionError(ValueError):
    pass


class SessionNotFound(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session '{session_id}' not found")


class SessionFull(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Session is full")


class SessionClosed(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Session has already finished")


class AlreadyJoined(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Already joined this session")


class NotInSession(SessionError):
    def __init__(self, session_id: str) -> None:
        super().__init__("Not a player in this session")


class RoundAlreadyRecorded(SessionError):
    def __init__(self, round_number: int) -> None:
        super().__init__(f"Result for round {round_number} already recorded")


class PersistenceUnavailable(Exception):
    """Storage could not be reached; mutating operations fail outright."""


@asynccontextmanager
async def _unit_of_work(db: AsyncSession, action: str) -> AsyncIterator[None]:
    try:
        yield
    except OperationalError as exc:
        await db.rollback()
        logger.error("Storage unavailable during %s: %s", action, exc)
        raise PersistenceUnavailable(f"Storage unavailable during {action}") from exc


def generate_session_code() -> str:
    return secrets.token_urlsafe(SESSION_CODE_BYTES)


def team_for_slot(game_mode: GameMode, slot: int, max_players: int) -> Team:
    """Team for the player taking 0-based `slot` (the creator is slot 0).

    The first half of the slots, rounded down, goes to team1. With an odd
    max_players the middle slot goes to team2.
    """
    if game_mode == GameMode.freeplay:
        return Team.solo
    return Team.team1 if 2 * slot < max_players else Team.team2


async def _load_session(db: AsyncSession, session_id: str) -> GameSession | None:
    result = await db.execute(
        select(GameSession)
        .where(GameSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_session(db: AsyncSession, session_id: str) -> GameSession | None:
    try:
        return await _load_session(db, session_id)
    except OperationalError as exc:
        logger.warning("Storage unavailable reading session %s: %s", session_id, exc)
        return None


async def get_session_players(db: AsyncSession, session_id: str) -> list[SessionPlayer]:
    try:
        result = await db.execute(
            select(SessionPlayer)
            .where(SessionPlayer.session_id == session_id)
            .order_by(SessionPlayer.id)
            .execution_options(populate_existing=True)
        )
    except OperationalError as exc:
        logger.warning("Storage unavailable listing players of %s: %s", session_id, exc)
        return []
    return list(result.scalars().all())


async def get_player_in_session(db: AsyncSession, session_id: str, user_id: int) -> SessionPlayer | None:
    result = await db.execute(
        select(SessionPlayer).where(
            SessionPlayer.session_id == session_id, SessionPlayer.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def list_round_results(db: AsyncSession, session_id: str) -> list[RoundResult]:
    try:
        result = await db.execute(
            select(RoundResult)
            .where(RoundResult.session_id == session_id)
            .order_by(RoundResult.round_number, RoundResult.user_id)
        )
    except OperationalError as exc:
        logger.warning("Storage unavailable listing round results of %s: %s", session_id, exc)
        return []
    return list(result.scalars().all())


async def create_session(
    db: AsyncSession, game_mode: GameMode, view_mode: ViewMode, creator: User
) -> GameSession:
    async with _unit_of_work(db, "create_session"):
        session_id = generate_session_code()
        while await _load_session(db, session_id) is not None:
            session_id = generate_session_code()

        max_players = MAX_PLAYERS_BY_MODE[game_mode]
        game_session = GameSession(
            id=session_id,
            creator_id=creator.id,
            game_mode=game_mode,
            view_mode=view_mode,
            max_players=max_players,
            current_players=1,
            status=SessionStatus.waiting,
        )
        db.add(game_session)
        await db.flush()

        # Creator takes the first slot
        db.add(
            SessionPlayer(
                session_id=session_id,
                user_id=creator.id,
                team=team_for_slot(game_mode, 0, max_players),
                score=0,
                rounds_completed=0,
            )
        )
        await db.commit()
        await db.refresh(game_session)

    logger.info("Session %s created by user %s (%s, %s)", session_id, creator.id, game_mode.value, view_mode.value)
    return game_session


async def join_session(db: AsyncSession, session_id: str, user: User) -> SessionPlayer:
    """Admit `user` to the session.

    The capacity check and the increment are one conditional UPDATE, so
    concurrent joins can never push current_players past max_players. The
    value it returns is this joiner's slot and decides the team.
    """
    user_id = user.id
    async with _unit_of_work(db, "join_session"):
        if await get_player_in_session(db, session_id, user_id) is not None:
            raise AlreadyJoined(session_id)

        result = await db.execute(
            update(GameSession)
            .where(
                GameSession.id == session_id,
                GameSession.current_players < GameSession.max_players,
                GameSession.status != SessionStatus.finished,
            )
            .values(current_players=GameSession.current_players + 1)
            .returning(GameSession.current_players, GameSession.max_players, GameSession.game_mode)
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            # No row matched, so nothing was written. Committing ends the
            # transaction without expiring the caller's loaded objects.
            await db.commit()
            game_session = await _load_session(db, session_id)
            if game_session is None:
                raise SessionNotFound(session_id)
            if game_session.status == SessionStatus.finished:
                raise SessionClosed(session_id)
            logger.info("User %s rejected from full session %s", user_id, session_id)
            raise SessionFull(session_id)

        current_players, max_players, game_mode = row
        player = SessionPlayer(
            session_id=session_id,
            user_id=user_id,
            team=team_for_slot(game_mode, current_players - 1, max_players),
            score=0,
            rounds_completed=0,
        )
        db.add(player)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AlreadyJoined(session_id) from None
        await db.refresh(player)

    logger.info("User %s joined session %s as %s", user_id, session_id, player.team.value)
    return player


async def start_game(db: AsyncSession, session_id: str) -> GameSession:
    async with _unit_of_work(db, "start_game"):
        game_session = await _load_session(db, session_id)
        if game_session is None:
            raise SessionNotFound(session_id)
        if game_session.status == SessionStatus.finished:
            raise SessionClosed(session_id)
        if game_session.status == SessionStatus.playing:
            return game_session

        game_session.status = SessionStatus.playing
        game_session.started_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(game_session)

    logger.info("Session %s started", session_id)
    return game_session


async def save_round_result(
    db: AsyncSession,
    session_id: str,
    user: User,
    round_number: int,
    actual_lat: float,
    actual_lng: float,
    points: int,
    guess_lat: float | None = None,
    guess_lng: float | None = None,
    distance_km: int | None = None,
) -> RoundResult:
    """Record one round for one player and fold it into the player's score.

    A round without a guess is stored with 0 points. When every player in
    the session has completed the final round, the session is finished.
    """
    user_id = user.id
    async with _unit_of_work(db, "save_round_result"):
        game_session = await _load_session(db, session_id)
        if game_session is None:
            raise SessionNotFound(session_id)
        if game_session.status == SessionStatus.finished:
            raise SessionClosed(session_id)

        player = await get_player_in_session(db, session_id, user_id)
        if player is None:
            raise NotInSession(session_id)

        existing = await db.execute(
            select(RoundResult.id).where(
                RoundResult.session_id == session_id,
                RoundResult.user_id == user_id,
                RoundResult.round_number == round_number,
            )
        )
        if existing.first() is not None:
            raise RoundAlreadyRecorded(round_number)

        if guess_lat is None or guess_lng is None:
            guess_lat = guess_lng = None
            points = 0

        round_result = RoundResult(
            session_id=session_id,
            user_id=user_id,
            round_number=round_number,
            guess_lat=guess_lat,
            guess_lng=guess_lng,
            actual_lat=actual_lat,
            actual_lng=actual_lng,
            distance_km=distance_km,
            points=points,
        )
        db.add(round_result)
        player.score += points
        player.rounds_completed += 1
        await db.flush()

        await _finish_if_all_players_done(db, game_session)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise RoundAlreadyRecorded(round_number) from None
        await db.refresh(round_result)

    logger.info(
        "Round %s saved for user %s in session %s: %s points",
        round_number,
        user_id,
        session_id,
        points,
    )
    return round_result


async def _finish_if_all_players_done(db: AsyncSession, game_session: GameSession) -> None:
    result = await db.execute(select(SessionPlayer).where(SessionPlayer.session_id == game_session.id))
    players = list(result.scalars().all())
    if players and all(p.rounds_completed >= ROUNDS_PER_GAME for p in players):
        game_session.status = SessionStatus.finished
        game_session.finished_at = datetime.now(timezone.utc)
        logger.info("Session %s finished", game_session.id)
