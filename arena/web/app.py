"""
FastAPI application for the battle arena.

Endpoints:
    POST   /api/arenas                       Create an arena
    GET    /api/arenas                       List arenas
    GET    /api/arenas/{id}                  Arena definition
    PATCH  /api/arenas/{id}                  Open/close an arena
    POST   /api/arenas/{id}/sessions         Start a battle session
    GET    /api/arenas/{id}/results          Stored sessions, newest first
    DELETE /api/arenas/{id}/results          Delete one player's sessions
    GET    /api/arenas/{id}/leaderboard      Aggregated leaderboard
    GET    /api/sessions/{sid}               Session state
    POST   /api/sessions/{sid}/results       Record a decision
    POST   /api/sessions/{sid}/undo          Take back the last decision
    POST   /api/sessions/{sid}/finish        Save a completed session
    DELETE /api/sessions/{sid}               Drop a session
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from arena import config
from arena.tournament.aggregation import aggregate_results
from arena.tournament.models import Arena, Competitor
from arena.tournament.storage import ArenaStorage
from arena.tournament.exceptions import (
    ArenaClosedError,
    ArenaNotFoundError,
    EmptyScheduleError,
    InvalidScoreError,
    NothingToUndoError,
    SessionCompleteError,
    SessionIncompleteError,
    SessionSavedError
)
from arena.web.models import (
    ArenaResponse, CreateArenaRequest, UpdateArenaRequest,
    StartSessionRequest, RecordResultRequest, RecordResultResponse,
    SessionState, FinishSessionResponse, SessionResultSummary,
    LeaderboardResponse
)
from arena.web.session_manager import LiveSession, SessionManager, serialize_result

logger = logging.getLogger(__name__)

# Global instances, set during lifespan
_storage: Optional[ArenaStorage] = None
_manager: Optional[SessionManager] = None


def get_storage() -> ArenaStorage:
    assert _storage is not None, "Storage not initialized"
    return _storage


def get_manager() -> SessionManager:
    assert _manager is not None, "Session manager not initialized"
    return _manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _storage, _manager
    _storage = ArenaStorage(data_dir=config.DATA_DIR)
    _manager = SessionManager(_storage)
    logger.info("Arena storage at %s", _storage.db_path)
    yield
    _manager = None
    _storage = None


app = FastAPI(
    title="Battle Arena",
    description="Head-to-head comparison tournaments with cross-session leaderboards",
    version="1.0.0",
    lifespan=lifespan
)


def _arena_response(arena: Arena) -> ArenaResponse:
    return ArenaResponse(
        arena_id=arena.arena_id,
        title=arena.title,
        description=arena.description,
        items=[c.to_dict() for c in arena.items],
        is_open=arena.is_open,
        created_at=arena.created_at
    )


def _require_arena(storage: ArenaStorage, arena_id: str) -> Arena:
    arena = storage.load_arena(arena_id)
    if arena is None:
        raise HTTPException(status_code=404, detail="Arena not found")
    return arena


def _require_session(manager: SessionManager, session_id: str) -> LiveSession:
    session = manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# =============================================================================
# Arenas
# =============================================================================

@app.post("/api/arenas", response_model=ArenaResponse, status_code=201)
async def create_arena(
    request: CreateArenaRequest,
    storage: ArenaStorage = Depends(get_storage)
):
    """Create a new arena."""
    try:
        arena = storage.create_arena(
            title=request.title,
            description=request.description,
            items=[Competitor(**item.model_dump()) for item in request.items],
            is_open=request.is_open
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _arena_response(arena)


@app.get("/api/arenas")
async def list_arenas(
    limit: int = Query(default=20, le=100),
    storage: ArenaStorage = Depends(get_storage)
):
    """List recent arenas."""
    return {"arenas": storage.list_arenas(limit=limit)}


@app.get("/api/arenas/{arena_id}", response_model=ArenaResponse)
async def get_arena(arena_id: str, storage: ArenaStorage = Depends(get_storage)):
    """Get an arena definition."""
    return _arena_response(_require_arena(storage, arena_id))


@app.patch("/api/arenas/{arena_id}", response_model=ArenaResponse)
async def update_arena(
    arena_id: str,
    request: UpdateArenaRequest,
    storage: ArenaStorage = Depends(get_storage)
):
    """Open or close an arena for new sessions."""
    try:
        arena = storage.set_arena_open(arena_id, request.is_open)
    except ArenaNotFoundError:
        raise HTTPException(status_code=404, detail="Arena not found")
    return _arena_response(arena)


@app.post("/api/arenas/{arena_id}/sessions", response_model=SessionState, status_code=201)
async def start_session(
    arena_id: str,
    request: StartSessionRequest,
    storage: ArenaStorage = Depends(get_storage),
    manager: SessionManager = Depends(get_manager)
):
    """Start a battle session for a player."""
    arena = _require_arena(storage, arena_id)
    try:
        session = manager.create_session(arena, request.player_name, seed=request.seed)
    except ArenaClosedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except EmptyScheduleError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SessionState(**manager.get_state(session))


@app.get("/api/arenas/{arena_id}/results")
async def list_results(arena_id: str, storage: ArenaStorage = Depends(get_storage)):
    """List stored sessions for an arena, newest first."""
    _require_arena(storage, arena_id)
    results = [
        SessionResultSummary(
            result_id=a.result_id,
            player_name=a.player_name,
            completed_at=a.completed_at,
            final_scores=a.final_scores
        )
        for a in storage.load_results(arena_id)
    ]
    return {"results": results, "total": len(results)}


@app.delete("/api/arenas/{arena_id}/results")
async def delete_player_results(
    arena_id: str,
    player_name: str = Query(min_length=1),
    storage: ArenaStorage = Depends(get_storage)
):
    """Delete every stored session of one player."""
    _require_arena(storage, arena_id)
    deleted = storage.delete_player_results(arena_id, player_name)
    return {"deleted": deleted}


@app.get("/api/arenas/{arena_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    arena_id: str,
    include_unknown: bool = False,
    storage: ArenaStorage = Depends(get_storage)
):
    """Aggregate every stored session into a ranked leaderboard."""
    arena = _require_arena(storage, arena_id)
    sessions = storage.load_results(arena_id)
    items = aggregate_results(sessions, arena.items, include_unknown=include_unknown)
    return LeaderboardResponse(
        arena_id=arena_id,
        total_sessions=len(sessions),
        items=[item.to_dict() for item in items]
    )


# =============================================================================
# Sessions
# =============================================================================

@app.get("/api/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str, manager: SessionManager = Depends(get_manager)):
    """Get current session state."""
    session = _require_session(manager, session_id)
    return SessionState(**manager.get_state(session))


@app.post("/api/sessions/{session_id}/results", response_model=RecordResultResponse)
async def record_result(
    session_id: str,
    request: RecordResultRequest,
    manager: SessionManager = Depends(get_manager)
):
    """Record a decision for the current match."""
    session = _require_session(manager, session_id)
    try:
        result = manager.record_result(
            session,
            score_a=request.score_a,
            score_b=request.score_b,
            position=request.position
        )
    except SessionCompleteError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidScoreError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return RecordResultResponse(
        result=serialize_result(result),
        state=SessionState(**manager.get_state(session))
    )


@app.post("/api/sessions/{session_id}/undo", response_model=SessionState)
async def undo(session_id: str, manager: SessionManager = Depends(get_manager)):
    """Take back the most recent decision."""
    session = _require_session(manager, session_id)
    try:
        manager.undo(session)
    except (NothingToUndoError, SessionSavedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SessionState(**manager.get_state(session))


@app.post("/api/sessions/{session_id}/finish", response_model=FinishSessionResponse)
async def finish_session(session_id: str, manager: SessionManager = Depends(get_manager)):
    """Save a completed session."""
    session = _require_session(manager, session_id)
    try:
        artifact = manager.finish(session)
    except (SessionIncompleteError, SessionSavedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ArenaNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    standings = [
        {"rank": s.rank, "score": s.score, "competitor": s.competitor.to_dict()}
        for s in session.battle.standings()
    ]
    return FinishSessionResponse(
        result_id=artifact.result_id,
        completed_at=artifact.completed_at,
        standings=standings
    )


@app.delete("/api/sessions/{session_id}")
async def end_session(session_id: str, manager: SessionManager = Depends(get_manager)):
    """Drop a session from memory."""
    _require_session(manager, session_id)
    manager.end_session(session_id)
    return {"status": "ended"}


@app.get("/api/sessions")
async def list_sessions(manager: SessionManager = Depends(get_manager)):
    """List live sessions."""
    return {"sessions": manager.list_active_sessions()}
