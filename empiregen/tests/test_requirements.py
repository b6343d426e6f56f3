"""
Tests for requirement compilation and evaluation.

Tests:
- Compiling potential/possible blocks into typed predicates
- Evaluating against partial selections (undecided categories deferred)
- Cross-category OR groups
"""

import pytest

from ..engine_core.state import EmpireState
from ..parser import parse_text
from ..rules import (
    Nor,
    Not,
    Or,
    RequirementBlock,
    RequirementCategory,
    RequirementEvaluator,
    Value,
    check_requirement,
    compile_requirements,
)

ETHICS = RequirementCategory.ETHICS
AUTHORITY = RequirementCategory.AUTHORITY


def compile_text(text: str) -> RequirementBlock:
    return compile_requirements(parse_text(text).children[0])


@pytest.fixture
def evaluator():
    return RequirementEvaluator()


class TestCompiler:
    """Tests for compile_requirements."""

    def test_all_predicate_kinds(self):
        block = compile_text("""
            possible = {
                ethics = {
                    value = ethic_a
                    NOT = { value = ethic_b }
                    NOR = { value = ethic_c value = ethic_d }
                    OR = { value = ethic_e value = ethic_f }
                }
            }
        """)
        assert block.get(ETHICS) == (
            Value("ethic_a"),
            Not("ethic_b"),
            Nor(("ethic_c", "ethic_d")),
            Or(("ethic_e", "ethic_f")),
        )

    def test_multiple_categories(self):
        block = compile_text("""
            potential = {
                ethics = { NOT = { value = ethic_gestalt_consciousness } }
                authority = { value = auth_democratic }
            }
        """)
        assert block.has_category(ETHICS)
        assert block.get(AUTHORITY) == (Value("auth_democratic"),)
        assert block.has_positive(AUTHORITY)
        assert not block.has_positive(ETHICS)

    def test_text_always_and_unknown_keys_skipped(self):
        block = compile_text("""
            possible = {
                always = yes
                text = tooltip_key
                has_global_flag = something
                ethics = {
                    NOR = { text = tooltip value = ethic_x }
                }
            }
        """)
        assert list(block.categories) == [ETHICS]
        assert block.get(ETHICS) == (Nor(("ethic_x",)),)

    def test_cross_category_or(self):
        block = compile_text("""
            possible = {
                OR = {
                    ethics = { value = ethic_xenophile }
                    authority = { value = auth_democratic }
                }
            }
        """)
        assert block.categories == {}
        assert block.cross_category_ors == ({
            ETHICS: (Value("ethic_xenophile"),),
            AUTHORITY: (Value("auth_democratic"),),
        },)

    def test_absent_or_empty_block_is_none(self):
        assert compile_requirements(None) is None
        assert compile_text("possible = { }") is None
        assert compile_text("possible = { always = yes }") is None

    def test_repeated_category_blocks_are_combined(self):
        block = compile_text("""
            possible = {
                ethics = { NOT = { value = a } }
                ethics = { NOT = { value = b } }
            }
        """)
        assert block.get(ETHICS) == (Not("a"), Not("b"))


class TestCheckRequirement:
    """Tests for single predicates."""

    @pytest.mark.parametrize("requirement, selected, expected", [
        (Value("a"), {"a", "b"}, True),
        (Value("a"), {"b"}, False),
        (Not("a"), {"b"}, True),
        (Not("a"), {"a"}, False),
        (Nor(("a", "b")), {"c"}, True),
        (Nor(("a", "b")), {"b", "c"}, False),
        (Or(("a", "b")), {"b"}, True),
        (Or(("a", "b")), {"c"}, False),
    ])
    def test_predicates(self, requirement, selected, expected):
        assert check_requirement(requirement, selected) is expected


class TestEvaluator:
    """Tests for RequirementEvaluator."""

    def test_nor_example(self, evaluator):
        """NOR over two ethics rejects either, accepts neither."""
        block = RequirementBlock(categories={
            ETHICS: (Nor(("ethic_authoritarian", "ethic_fanatic_authoritarian")),),
        })
        egalitarian = EmpireState.empty().with_ethics(["ethic_egalitarian", "ethic_pacifist"])
        authoritarian = EmpireState.empty().with_ethics(["ethic_authoritarian", "ethic_pacifist"])

        assert evaluator.evaluate(block, egalitarian)
        assert not evaluator.evaluate(block, authoritarian)

    def test_none_and_empty_always_hold(self, evaluator):
        state = EmpireState.empty().with_ethics(["ethic_x"])
        assert evaluator.evaluate(None, state)
        assert evaluator.evaluate(RequirementBlock(), state)

    def test_undecided_category_is_deferred(self, evaluator):
        """A rule on an unpicked category does not fail yet."""
        block = RequirementBlock(categories={AUTHORITY: (Value("auth_democratic"),)})
        undecided = EmpireState.empty().with_ethics(["ethic_x"])
        decided = undecided.with_authority("auth_dictatorial")

        assert evaluator.evaluate(block, undecided)
        assert not evaluator.evaluate(block, decided)

    def test_all_categories_must_hold(self, evaluator):
        block = RequirementBlock(categories={
            ETHICS: (Value("ethic_x"),),
            AUTHORITY: (Not("auth_imperial"),),
        })
        state = EmpireState.empty().with_ethics(["ethic_x"])
        assert evaluator.evaluate(block, state.with_authority("auth_democratic"))
        assert not evaluator.evaluate(block, state.with_authority("auth_imperial"))

    def test_cross_category_or_needs_one_branch(self, evaluator):
        block = RequirementBlock(cross_category_ors=({
            ETHICS: (Value("ethic_xenophile"),),
            AUTHORITY: (Value("auth_democratic"),),
        },))
        base = EmpireState.empty().with_ethics(["ethic_militarist"])

        assert evaluator.evaluate(block, base.with_authority("auth_democratic"))
        assert not evaluator.evaluate(block, base.with_authority("auth_oligarchic"))
        xenophile = EmpireState.empty().with_ethics(["ethic_xenophile"]).with_authority("auth_oligarchic")
        assert evaluator.evaluate(block, xenophile)

    def test_cross_category_or_branch_on_undecided_category_holds(self, evaluator):
        block = RequirementBlock(cross_category_ors=({
            ETHICS: (Value("ethic_xenophile"),),
            AUTHORITY: (Value("auth_democratic"),),
        },))
        state = EmpireState.empty().with_ethics(["ethic_militarist"])
        assert evaluator.evaluate(block, state)

    def test_country_type_is_always_default(self, evaluator):
        npc_only = RequirementBlock(categories={
            RequirementCategory.COUNTRY_TYPE: (Value("ai_empire"),),
        })
        assert not evaluator.evaluate(npc_only, EmpireState.empty())

    def test_evaluate_both(self, evaluator):
        potential = RequirementBlock(categories={ETHICS: (Not("ethic_gestalt_consciousness"),)})
        possible = RequirementBlock(categories={AUTHORITY: (Value("auth_democratic"),)})
        state = EmpireState.empty().with_ethics(["ethic_pacifist"])

        assert evaluator.evaluate_both(potential, possible, state.with_authority("auth_democratic"))
        assert not evaluator.evaluate_both(potential, possible, state.with_authority("auth_oligarchic"))
        gestalt = EmpireState.empty().with_ethics(["ethic_gestalt_consciousness"])
        assert not evaluator.evaluate_both(potential, None, gestalt)
