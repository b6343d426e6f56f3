"""
Engine errors.

Both are expected business outcomes, not defects: callers retry a failed
generation, and tell "no reroll left" apart from "no alternatives" by
catching RerollUnavailable before RerollFailure.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import EmpireState


class GenerationFailure(Exception):
    """A generation step had no candidates, or a retry cap ran out."""

    def __init__(self, step: str, message: str, state: EmpireState | None = None):
        self.step = step
        self.message = message
        self.state = state
        super().__init__(f"Generation failed at {step}: {message}")


class RerollFailure(Exception):
    """A reroll could not produce a valid replacement."""

    def __init__(self, category: str, message: str):
        self.category = category
        self.message = message
        super().__init__(f"Reroll of {category} failed: {message}")


class RerollUnavailable(RerollFailure):
    """The session's single reroll has already been spent."""

    def __init__(self, category: str):
        super().__init__(category, "reroll already used for this session")
