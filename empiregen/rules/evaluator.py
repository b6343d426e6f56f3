"""
Requirement Evaluator - Checks RequirementBlocks against a partial selection.

Rules:
- An absent or empty block is satisfied.
- Categories the selection has not decided yet are skipped; they are
  checked again once that category is actually picked.
- Every predicate of every decided category must hold.
- Each cross-category OR group needs one branch that holds entirely
  (a branch on an undecided category counts as holding).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, AbstractSet, Iterable, assert_never

from .model import Nor, Not, Or, Requirement, RequirementBlock, Value

if TYPE_CHECKING:
    from ..engine_core.state import EmpireState


def check_requirement(requirement: Requirement, selected: AbstractSet[str]) -> bool:
    """Evaluate one predicate against the selected ids of its category."""
    match requirement:
        case Value(value=value):
            return value in selected
        case Not(value=value):
            return value not in selected
        case Nor(values=values):
            return not any(v in selected for v in values)
        case Or(values=values):
            return any(v in selected for v in values)
        case _:
            assert_never(requirement)


def _all_hold(requirements: Iterable[Requirement], selected: AbstractSet[str]) -> bool:
    return all(check_requirement(r, selected) for r in requirements)


class RequirementEvaluator:
    """
    Pure predicate over (block, state).

    Usage:
        evaluator = RequirementEvaluator()
        if evaluator.evaluate_both(civic.potential, civic.possible, state):
            ...
    """

    def evaluate(self, block: RequirementBlock | None, state: EmpireState) -> bool:
        if block is None or block.is_empty:
            return True

        for category, requirements in block.categories.items():
            if not state.has_category(category):
                continue
            if not _all_hold(requirements, state.values_for(category)):
                return False

        for group in block.cross_category_ors:
            if not self._any_branch_holds(group, state):
                return False

        return True

    def evaluate_both(
        self,
        potential: RequirementBlock | None,
        possible: RequirementBlock | None,
        state: EmpireState,
    ) -> bool:
        """Both blocks must hold. This is the universal compatibility check."""
        return self.evaluate(potential, state) and self.evaluate(possible, state)

    def _any_branch_holds(self, group, state: EmpireState) -> bool:
        for category, requirements in group.items():
            if not state.has_category(category):
                return True
            if _all_hold(requirements, state.values_for(category)):
                return True
        return False


_default = RequirementEvaluator()


def evaluate(block: RequirementBlock | None, state: EmpireState) -> bool:
    return _default.evaluate(block, state)


def evaluate_both(
    potential: RequirementBlock | None,
    possible: RequirementBlock | None,
    state: EmpireState,
) -> bool:
    return _default.evaluate_both(potential, possible, state)
