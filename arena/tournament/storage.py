"""
Storage backend for arenas and finished sessions.

Uses SQLite for arena definitions and per-session results.
"""

import json
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone

from arena.tournament.models import Arena, Competitor, MatchResult, validate_roster
from arena.tournament.scoring import SessionArtifact
from arena.tournament.exceptions import ArenaNotFoundError

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ArenaStorage:
    """
    Handles persistent storage of arenas and session results.

    Uses SQLite tables in the arena.db database.
    """

    def __init__(self, data_dir: str = "data"):
        """
        Initialize storage backend.

        Args:
            data_dir: Base directory for data storage
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / "arena.db"

        # Ensure directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize SQLite database schema."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS arenas (
                    arena_id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    items TEXT NOT NULL,
                    is_open INTEGER DEFAULT 1,
                    created_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS arena_results (
                    result_id TEXT PRIMARY KEY,
                    arena_id TEXT NOT NULL,
                    player_name TEXT NOT NULL,
                    results TEXT,
                    final_scores TEXT NOT NULL,
                    completed_at TEXT NOT NULL,
                    FOREIGN KEY (arena_id) REFERENCES arenas(arena_id)
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS idx_results_arena ON arena_results(arena_id)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_results_player ON arena_results(arena_id, player_name)")

            conn.commit()

    # ------------------------------------------------------------------
    # Arenas
    # ------------------------------------------------------------------

    def create_arena(
        self,
        title: str,
        description: str,
        items: List[Competitor],
        is_open: bool = True,
        arena_id: Optional[str] = None
    ) -> Arena:
        """
        Create a new arena record.

        Args:
            title: Arena title
            description: Arena description shown before a session starts
            items: Competing items; ids must be unique
            is_open: Whether new sessions may start
            arena_id: Optional ID (auto-generated if None)

        Returns:
            The stored Arena

        Raises:
            ValueError: If fewer than 2 items or duplicate item ids
        """
        validate_roster(items)

        arena = Arena(
            arena_id=arena_id or uuid.uuid4().hex[:12],
            title=title,
            description=description,
            items=list(items),
            is_open=is_open,
            created_at=_now()
        )

        with self._connect() as conn:
            conn.execute("""
                INSERT INTO arenas (arena_id, title, description, items, is_open, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                arena.arena_id,
                arena.title,
                arena.description,
                json.dumps([item.to_dict() for item in arena.items]),
                int(arena.is_open),
                arena.created_at
            ))
            conn.commit()

        logger.info("Created arena %s with %d items", arena.arena_id, len(items))
        return arena

    def load_arena(self, arena_id: str) -> Optional[Arena]:
        """Load an arena by ID."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM arenas WHERE arena_id = ?",
                (arena_id,)
            ).fetchone()

        if not row:
            return None
        return self._row_to_arena(row)

    def list_arenas(self, limit: int = 20) -> List[Dict[str, Any]]:
        """List recent arenas."""
        with self._connect() as conn:
            cursor = conn.execute("""
                SELECT arena_id, title, description, is_open, created_at
                FROM arenas
                ORDER BY created_at DESC
                LIMIT ?
            """, (limit,))
            rows = [dict(row) for row in cursor.fetchall()]

        for row in rows:
            row['is_open'] = bool(row['is_open'])
        return rows

    def set_arena_open(self, arena_id: str, is_open: bool) -> Arena:
        """
        Open or close an arena for new sessions.

        Raises:
            ArenaNotFoundError: If the arena does not exist
        """
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE arenas SET is_open = ? WHERE arena_id = ?",
                (int(is_open), arena_id)
            )
            conn.commit()

        if cursor.rowcount == 0:
            raise ArenaNotFoundError(f"Arena not found: {arena_id}")

        logger.info("Arena %s is now %s", arena_id, "open" if is_open else "closed")
        return self.load_arena(arena_id)

    def _row_to_arena(self, row: sqlite3.Row) -> Arena:
        return Arena(
            arena_id=row['arena_id'],
            title=row['title'],
            description=row['description'] or '',
            items=[Competitor.from_dict(d) for d in json.loads(row['items'])],
            is_open=bool(row['is_open']),
            created_at=row['created_at']
        )

    # ------------------------------------------------------------------
    # Session results
    # ------------------------------------------------------------------

    def save_session_result(self, artifact: SessionArtifact) -> str:
        """
        Save a finished session.

        Match history is stored with competitor images stripped.

        Returns:
            result_id of the stored record

        Raises:
            ArenaNotFoundError: If artifact.arena_id is unknown
        """
        if artifact.arena_id is None or self.load_arena(artifact.arena_id) is None:
            raise ArenaNotFoundError(f"Arena not found: {artifact.arena_id}")

        result_id = artifact.result_id or str(uuid.uuid4())
        completed_at = artifact.completed_at or _now()
        history = [r.to_dict(include_media=False) for r in (artifact.results or [])]

        with self._connect() as conn:
            conn.execute("""
                INSERT INTO arena_results
                (result_id, arena_id, player_name, results, final_scores, completed_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                result_id,
                artifact.arena_id,
                artifact.player_name,
                json.dumps(history),
                json.dumps(artifact.final_scores),
                completed_at
            ))
            conn.commit()

        artifact.result_id = result_id
        artifact.completed_at = completed_at
        logger.info(
            "Saved session %s for %s in arena %s",
            result_id, artifact.player_name, artifact.arena_id
        )
        return result_id

    def load_results(self, arena_id: str) -> List[SessionArtifact]:
        """Load all finished sessions for an arena, newest first."""
        with self._connect() as conn:
            cursor = conn.execute("""
                SELECT * FROM arena_results
                WHERE arena_id = ?
                ORDER BY completed_at DESC
            """, (arena_id,))
            rows = cursor.fetchall()

        return [
            SessionArtifact(
                player_name=r['player_name'],
                final_scores=json.loads(r['final_scores']),
                results=[MatchResult.from_dict(d) for d in json.loads(r['results'] or '[]')],
                arena_id=r['arena_id'],
                result_id=r['result_id'],
                completed_at=r['completed_at']
            )
            for r in rows
        ]

    def delete_player_results(self, arena_id: str, player_name: str) -> int:
        """
        Delete every stored session of one player in an arena.

        Returns:
            Number of sessions removed
        """
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM arena_results WHERE arena_id = ? AND player_name = ?",
                (arena_id, player_name)
            )
            conn.commit()

        logger.info(
            "Deleted %d sessions for %s in arena %s",
            cursor.rowcount, player_name, arena_id
        )
        return cursor.rowcount
