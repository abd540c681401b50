"""
Custom exceptions for the tournament engine.

Scoring and session errors are ValueErrors: they signal a caller mistake
(bad score split, acting on a finished session) rather than a system fault.

- InvalidScoreError: score split outside [0, 100] or not summing to 100
- SessionError: base for session state violations
- SessionCompleteError: recording into a finished session
- SessionIncompleteError: asking for the artifact of an unfinished session
- NothingToUndoError: undo with no results recorded
- SessionSavedError: changing a session already handed to storage
- ArenaClosedError: starting a session in a closed arena
- EmptyScheduleError: arena too small to schedule a single match
- StorageError: base for persistence failures
- ArenaNotFoundError: unknown arena id
"""


class InvalidScoreError(ValueError):
    """Score split is not a valid division of 100 points."""
    pass


class SessionError(ValueError):
    """Base exception for session state violations."""
    pass


class SessionCompleteError(SessionError):
    """Every scheduled match already has a result."""
    pass


class SessionIncompleteError(SessionError):
    """Session still has unplayed matches."""
    pass


class NothingToUndoError(SessionError):
    """No result to take back."""
    pass


class SessionSavedError(SessionError):
    """Session was already saved and can no longer change."""
    pass


class ArenaClosedError(SessionError):
    """Arena does not accept new sessions."""
    pass


class EmptyScheduleError(SessionError):
    """No matches could be scheduled."""
    pass


class StorageError(Exception):
    """Base exception for storage errors."""
    pass


class ArenaNotFoundError(StorageError):
    """Arena id does not exist."""
    pass
