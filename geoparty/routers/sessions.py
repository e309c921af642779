from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from geoparty.database import get_db
from geoparty.dependencies import get_current_user
from geoparty.models.game_session import GameSession
from geoparty.models.user import User
from geoparty.schemas.session import (
    RoundResultCreate,
    RoundResultResponse,
    SessionCreate,
    SessionCreated,
    SessionPlayerResponse,
    SessionResponse,
    SuccessResponse,
)
from geoparty.services.session_service import (
    AlreadyJoined,
    NotInSession,
    PersistenceUnavailable,
    RoundAlreadyRecorded,
    SessionClosed,
    SessionError,
    SessionFull,
    SessionNotFound,
    create_session,
    get_session,
    get_session_players,
    join_session,
    list_round_results,
    save_round_result,
    start_game,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])

_STATUS_BY_ERROR: dict[type[SessionError], int] = {
    SessionNotFound: status.HTTP_404_NOT_FOUND,
    SessionFull: status.HTTP_409_CONFLICT,
    RoundAlreadyRecorded: status.HTTP_409_CONFLICT,
    NotInSession: status.HTTP_403_FORBIDDEN,
    AlreadyJoined: status.HTTP_400_BAD_REQUEST,
    SessionClosed: status.HTTP_400_BAD_REQUEST,
}


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, PersistenceUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(exc))


async def _get_session_or_404(db: AsyncSession, session_id: str) -> GameSession:
    game_session = await get_session(db, session_id)
    if game_session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return game_session


async def _session_response(db: AsyncSession, game_session: GameSession) -> SessionResponse:
    players = await get_session_players(db, game_session.id)
    return SessionResponse(
        id=game_session.id,
        creator_id=game_session.creator_id,
        game_mode=game_session.game_mode,
        view_mode=game_session.view_mode,
        max_players=game_session.max_players,
        current_players=game_session.current_players,
        status=game_session.status,
        created_at=game_session.created_at,
        started_at=game_session.started_at,
        finished_at=game_session.finished_at,
        players=[SessionPlayerResponse.model_validate(p) for p in players],
    )


@router.post("", response_model=SessionCreated, status_code=status.HTTP_201_CREATED)
async def create_new_session(
    body: SessionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        game_session = await create_session(
            db, game_mode=body.game_mode, view_mode=body.view_mode, creator=current_user
        )
    except PersistenceUnavailable as e:
        raise _http_error(e)
    return SessionCreated(session_id=game_session.id)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session_info(session_id: str, db: AsyncSession = Depends(get_db)):
    game_session = await _get_session_or_404(db, session_id)
    return await _session_response(db, game_session)


@router.post("/{session_id}/join", response_model=SuccessResponse)
async def join_session_endpoint(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        await join_session(db, session_id=session_id, user=current_user)
    except (SessionError, PersistenceUnavailable) as e:
        raise _http_error(e)
    return SuccessResponse()


@router.post("/{session_id}/start", response_model=SuccessResponse)
async def start_game_endpoint(
    session_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        await start_game(db, session_id=session_id)
    except (SessionError, PersistenceUnavailable) as e:
        raise _http_error(e)
    return SuccessResponse()


@router.post("/{session_id}/rounds", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def save_round_result_endpoint(
    session_id: str,
    body: RoundResultCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        await save_round_result(
            db,
            session_id=session_id,
            user=current_user,
            round_number=body.round_number,
            actual_lat=body.actual_lat,
            actual_lng=body.actual_lng,
            points=body.points,
            guess_lat=body.guess_lat,
            guess_lng=body.guess_lng,
            distance_km=body.distance_km,
        )
    except (SessionError, PersistenceUnavailable) as e:
        raise _http_error(e)
    return SuccessResponse()


@router.get("/{session_id}/rounds", response_model=list[RoundResultResponse])
async def list_session_rounds(session_id: str, db: AsyncSession = Depends(get_db)):
    """Every recorded round in the session, ordered by round then player."""
    await _get_session_or_404(db, session_id)
    return await list_round_results(db, session_id)
