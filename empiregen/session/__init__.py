"""
Session Module - Caller-held generation sessions.

A session holds one generated empire and its single reroll:
- Created when a user generates an empire
- Reset when the same user generates again
- Ended when the user leaves

Sessions are EPHEMERAL: no persistence, in-memory only.
"""

from .manager import GenerationSession, SessionManager

__all__ = [
    "GenerationSession",
    "SessionManager",
]
