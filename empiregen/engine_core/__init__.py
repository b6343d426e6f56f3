"""
Engine Core - Random empire generation and single-category rerolls.

The engine:
1. Tracks the partial selection (EmpireState)
2. Filters the catalog for what the selection still allows
3. Generates a complete, consistent empire step by step
4. Rerolls one category and repairs everything downstream of it
"""

from .state import EmpireState
from .result import GeneratedEmpire, SecondarySpecies
from .weighted import weighted_choice
from .compatibility import CompatibilityFilter
from .errors import GenerationFailure, RerollFailure, RerollUnavailable
from .generator import EmpireGenerator, greedy_fill
from .reroll import RerollCategory, RerollEngine

__all__ = [
    "EmpireState",
    "GeneratedEmpire",
    "SecondarySpecies",
    "weighted_choice",
    "CompatibilityFilter",
    "GenerationFailure",
    "RerollFailure",
    "RerollUnavailable",
    "EmpireGenerator",
    "greedy_fill",
    "RerollCategory",
    "RerollEngine",
]
