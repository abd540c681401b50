"""
Session runner that drives one participant through an arena.

Handles schedule creation, the interactive decision loop with undo, and
saving the finished session.
"""

import random
from dataclasses import dataclass
from typing import Callable, Optional

from arena.tournament.models import Arena
from arena.tournament.scheduler import generate_schedule
from arena.tournament.scoring import BattleSession, SessionArtifact, split_from_position
from arena.tournament.storage import ArenaStorage
from arena.tournament.exceptions import (
    ArenaClosedError,
    EmptyScheduleError,
    NothingToUndoError
)
from arena.tournament.display import (
    format_session_header,
    format_match,
    format_match_result,
    format_standings
)

UNDO_COMMANDS = ('u', 'undo')
QUIT_COMMANDS = ('q', 'quit')


def start_session(
    arena: Arena,
    player_name: str,
    seed: Optional[int] = None
) -> BattleSession:
    """
    Schedule a new session for a player.

    Args:
        arena: Arena to play
        player_name: Participant name
        seed: Optional seed for a reproducible schedule

    Raises:
        ArenaClosedError: If the arena is closed for new responses
        EmptyScheduleError: If the arena has fewer than 2 items
    """
    if not arena.is_open:
        raise ArenaClosedError(f"Arena {arena.arena_id} is closed for new responses")

    rng = random.Random(seed) if seed is not None else None
    matches = generate_schedule(arena.items, rng=rng)
    if not matches:
        raise EmptyScheduleError(f"Arena {arena.arena_id} needs at least 2 items")

    return BattleSession(player_name, arena.items, matches)


@dataclass
class SessionConfig:
    """Configuration for a terminal session."""
    player_name: str
    seed: Optional[int] = None
    save_results: bool = True
    data_dir: str = "data"


class SessionRunner:
    """
    Runs a session in the terminal.

    Each prompt takes a slider position 0-100 (0 fully favours the left
    item, 100 the right), 'u' to undo or 'q' to quit.

    Usage:
        runner = SessionRunner(config)
        artifact = runner.run(arena)
    """

    def __init__(
        self,
        config: SessionConfig,
        storage: Optional[ArenaStorage] = None,
        verbose: bool = True,
        input_fn: Optional[Callable[[str], str]] = None
    ):
        """
        Initialize the session runner.

        Args:
            config: Session configuration
            storage: Optional storage backend (creates default if saving)
            verbose: Print match results and standings
            input_fn: Source of user decisions (default: input)
        """
        self.config = config
        self.storage = storage
        if self.storage is None and config.save_results:
            self.storage = ArenaStorage(config.data_dir)
        self.verbose = verbose
        self.input_fn = input_fn or input

    def run(self, arena: Arena) -> Optional[SessionArtifact]:
        """
        Play every scheduled match.

        Returns:
            The finished SessionArtifact, or None if the player quit
        """
        session = start_session(arena, self.config.player_name, self.config.seed)

        if self.verbose:
            print(format_session_header(
                arena.title,
                session.player_name,
                len(arena.items),
                session.total_matches
            ))

        while not session.is_complete:
            match = session.current_match
            prompt = format_match(
                match, session.match_number, session.total_matches, session.round_label
            )
            answer = self.input_fn(f"{prompt}\n  position (0-100), u=undo, q=quit: ").strip().lower()

            if answer in QUIT_COMMANDS:
                if self.verbose:
                    print("Session abandoned.")
                return None

            if answer in UNDO_COMMANDS:
                try:
                    removed = session.undo()
                except NothingToUndoError:
                    if self.verbose:
                        print("  Nothing to undo.")
                    continue
                if self.verbose:
                    print(f"  Undid: {format_match_result(removed)}")
                continue

            try:
                position = float(answer)
            except ValueError:
                if self.verbose:
                    print("  Enter a number between 0 and 100.")
                continue

            result = session.record(*split_from_position(position))

            if self.verbose:
                print(f"  {format_match_result(result)}")

        artifact = session.to_artifact(arena.arena_id)

        if self.config.save_results:
            self.storage.save_session_result(artifact)

        if self.verbose:
            print("\n" + format_standings(session.standings()))

        return artifact
