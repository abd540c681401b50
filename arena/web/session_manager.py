"""
Battle session manager for the web interface.

Keeps live sessions in memory between requests and hands finished ones to
storage exactly once.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, List, Any

from arena.tournament.models import Arena, Match, MatchResult
from arena.tournament.runner import start_session
from arena.tournament.scoring import BattleSession, SessionArtifact, split_from_position
from arena.tournament.storage import ArenaStorage
from arena.tournament.exceptions import SessionSavedError

logger = logging.getLogger(__name__)


@dataclass
class LiveSession:
    """A session being played through the API."""
    session_id: str
    arena_id: str
    battle: BattleSession
    artifact: Optional[SessionArtifact] = None

    @property
    def saved(self) -> bool:
        return self.artifact is not None


def serialize_match(match: Optional[Match]) -> Optional[Dict[str, Any]]:
    if match is None:
        return None
    return match.to_dict()


def serialize_result(result: MatchResult) -> Dict[str, Any]:
    return result.to_dict(include_media=True)


class SessionManager:
    """
    Manages live battle sessions.

    Handles session creation, recording decisions, undo and saving.
    """

    def __init__(self, storage: ArenaStorage):
        """
        Initialize session manager.

        Args:
            storage: Backend that receives finished sessions
        """
        self.storage = storage
        self.sessions: Dict[str, LiveSession] = {}

    def create_session(
        self,
        arena: Arena,
        player_name: str,
        seed: Optional[int] = None
    ) -> LiveSession:
        """
        Start a new session for a player.

        Raises:
            ArenaClosedError: If the arena is closed
            EmptyScheduleError: If nothing can be scheduled
        """
        battle = start_session(arena, player_name, seed)
        session = LiveSession(
            session_id=str(uuid.uuid4()),
            arena_id=arena.arena_id,
            battle=battle
        )
        self.sessions[session.session_id] = session
        logger.info(
            "Started session %s for %s in arena %s (%d matches)",
            session.session_id, player_name, arena.arena_id, battle.total_matches
        )
        return session

    def get_session(self, session_id: str) -> Optional[LiveSession]:
        """Get a session by ID."""
        return self.sessions.get(session_id)

    def get_state(self, session: LiveSession) -> Dict[str, Any]:
        """Get the current session state as a dictionary."""
        battle = session.battle
        return {
            "session_id": session.session_id,
            "arena_id": session.arena_id,
            "player_name": battle.player_name,
            "current_match": serialize_match(battle.current_match),
            "match_number": battle.match_number,
            "total_matches": battle.total_matches,
            "completed_count": battle.completed_count,
            "progress": battle.progress,
            "round_label": battle.round_label,
            "can_undo": battle.can_undo and not session.saved,
            "is_complete": battle.is_complete,
            "saved": session.saved,
            "scores": battle.final_scores,
        }

    def record_result(
        self,
        session: LiveSession,
        score_a: Optional[int] = None,
        score_b: Optional[int] = None,
        position: Optional[float] = None
    ) -> MatchResult:
        """
        Record a decision for the current match.

        Takes either an explicit split or a slider position.

        Raises:
            SessionCompleteError: If all matches are played
            InvalidScoreError: If the split is invalid
        """
        if position is not None:
            score_a, score_b = split_from_position(position)
        return session.battle.record(score_a, score_b)

    def undo(self, session: LiveSession) -> MatchResult:
        """
        Take back the last decision.

        Raises:
            SessionSavedError: If the session was already saved
            NothingToUndoError: If nothing has been recorded
        """
        if session.saved:
            raise SessionSavedError("Session already saved")
        return session.battle.undo()

    def finish(self, session: LiveSession) -> SessionArtifact:
        """
        Save a completed session.

        Raises:
            SessionSavedError: If already saved
            SessionIncompleteError: If matches remain
        """
        if session.saved:
            raise SessionSavedError("Session already saved")

        artifact = session.battle.to_artifact(session.arena_id)
        self.storage.save_session_result(artifact)
        session.artifact = artifact
        return artifact

    def end_session(self, session_id: str):
        """Drop a session from memory."""
        session = self.sessions.pop(session_id, None)
        if session and not session.saved:
            logger.info("Discarded unsaved session %s", session_id)

    def list_active_sessions(self) -> List[Dict[str, Any]]:
        """List sessions still held in memory."""
        return [
            {
                "session_id": s.session_id,
                "arena_id": s.arena_id,
                "player_name": s.battle.player_name,
                "completed_count": s.battle.completed_count,
                "total_matches": s.battle.total_matches,
                "saved": s.saved,
            }
            for s in self.sessions.values()
        ]
