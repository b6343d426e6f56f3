"""
Session Manager - Creates and tracks generation sessions.

LIFECYCLE:
1. User generates an empire -> new session holding it, reroll available
2. User rerolls one category -> empire replaced, reroll spent
3. User generates again -> same session reset with the new empire,
   reroll available again
4. User leaves -> session ended and dropped from memory

CONCURRENCY:
- One session per user, owned by that caller
- Sessions are plain mutable objects with no locking; callers sharing
  one across threads must synchronize themselves

No persistence - sessions are in-memory only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import time
import uuid

from ..engine_core.result import GeneratedEmpire
from ..engine_core.reroll import RerollCategory


@dataclass
class GenerationSession:
    """
    A caller-held handle on one generated empire.

    The reroll flag is session-wide: one reroll in total, whichever
    category it is spent on.
    """
    session_id: str
    empire: GeneratedEmpire
    created_at: float = field(default_factory=time.time)
    reroll_used: bool = False

    def can_reroll(self) -> bool:
        return not self.reroll_used

    def reroll_availability(self) -> dict[str, bool]:
        """Per-category availability; all true until the one reroll is spent."""
        available = self.can_reroll()
        return {category.value: available for category in RerollCategory}

    def apply_reroll(self, empire: GeneratedEmpire):
        """Replace the empire with a rerolled one and spend the reroll."""
        self.empire = empire
        self.reroll_used = True

    def reset(self, empire: GeneratedEmpire):
        """Start over with a freshly generated empire."""
        self.empire = empire
        self.reroll_used = False


class SessionManager:
    """
    Manages generation sessions.

    Responsibilities:
    - Create sessions for new empires
    - Look sessions up by id
    - Drop ended or stale sessions
    """

    def __init__(self):
        self._sessions: dict[str, GenerationSession] = {}

    def create_session(self, empire: GeneratedEmpire) -> GenerationSession:
        session = GenerationSession(session_id=str(uuid.uuid4()), empire=empire)
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> GenerationSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        return self._sessions.pop(session_id, None) is not None

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Drop sessions older than max_age_seconds.

        Returns the number of sessions removed.
        """
        cutoff = time.time() - max_age_seconds
        stale = [sid for sid, s in self._sessions.items() if s.created_at < cutoff]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
