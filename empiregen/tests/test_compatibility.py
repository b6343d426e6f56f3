"""
Tests for CompatibilityFilter.
"""

import pytest

from ..engine_core import CompatibilityFilter, EmpireState


def ids(entities):
    return {e.id for e in entities}


@pytest.fixture
def compat(catalog):
    return CompatibilityFilter(catalog)


@pytest.fixture
def regular_state():
    return EmpireState.empty().with_ethics(
        ["ethic_fanatic_egalitarian", "ethic_pacifist"]
    )


@pytest.fixture
def gestalt_state():
    return EmpireState.empty().with_ethics(["ethic_gestalt_consciousness"])


class TestAuthorities:
    """Tests for authority filtering."""

    def test_regular_ethics(self, compat, regular_state):
        assert ids(compat.compatible_authorities(regular_state)) == {"auth_democratic"}

    def test_authoritarian_ethics(self, compat):
        state = EmpireState.empty().with_ethics(["ethic_authoritarian", "ethic_militarist", "ethic_xenophobe"])
        assert ids(compat.compatible_authorities(state)) == {"auth_oligarchic", "auth_dictatorial"}

    def test_gestalt_ethics(self, compat, gestalt_state):
        assert ids(compat.compatible_authorities(gestalt_state)) == {
            "auth_hive_mind", "auth_machine_intelligence",
        }

    def test_gestalt_authorities(self, compat):
        assert ids(compat.gestalt_authorities()) == {"auth_hive_mind", "auth_machine_intelligence"}


class TestCivics:
    """Tests for civic filtering."""

    def test_gestalt_civics(self, compat, gestalt_state):
        hive = ids(compat.compatible_civics(gestalt_state.with_authority("auth_hive_mind")))
        assert hive == {"civic_hive_strength_of_legions", "civic_hive_devouring_swarm", "civic_hive_one_mind"}

    def test_not_pickable_at_start_excluded(self, compat, regular_state):
        civics = ids(compat.compatible_civics(regular_state.with_authority("auth_democratic")))
        assert "civic_ancient_preservers" not in civics
        assert "civic_mining_guilds" in civics

    def test_selected_civic_excluded(self, compat, regular_state):
        state = regular_state.with_authority("auth_democratic").with_civic("civic_mining_guilds")
        assert "civic_mining_guilds" not in ids(compat.compatible_civics(state))

    def test_civic_against_other_civic(self, compat):
        state = (
            EmpireState.empty()
            .with_ethics(["ethic_fanatic_materialist", "ethic_xenophile"])
            .with_authority("auth_democratic")
        )
        assert "civic_agrarian_idyll" in ids(compat.compatible_civics(state))
        with_warriors = state.with_civic("civic_warrior_culture")
        assert "civic_agrarian_idyll" not in ids(compat.compatible_civics(with_warriors))

    def test_cross_category_or(self, compat):
        base = EmpireState.empty().with_ethics(["ethic_militarist", "ethic_xenophobe", "ethic_materialist"])
        assert "civic_free_haven" in ids(compat.compatible_civics(base.with_authority("auth_democratic")))
        assert "civic_free_haven" not in ids(compat.compatible_civics(base.with_authority("auth_oligarchic")))

    def test_species_rule_deferred_until_species_picked(self, compat, regular_state):
        state = regular_state.with_authority("auth_democratic")
        assert "civic_anglers" in ids(compat.compatible_civics(state))
        lithoid = state.with_species("LITHOID", "LITHOID")
        assert "civic_anglers" not in ids(compat.compatible_civics(lithoid))


class TestOrigins:
    """Tests for origin filtering."""

    def test_machine_intelligence_origins(self, compat, gestalt_state):
        state = gestalt_state.with_authority("auth_machine_intelligence")
        assert ids(compat.compatible_origins(state)) == {"origin_default", "origin_remnants", "origin_machine"}

    def test_regular_origins(self, compat, regular_state):
        state = regular_state.with_authority("auth_democratic")
        origins = ids(compat.compatible_origins(state))
        assert "origin_legendary_leader" not in origins
        assert {"origin_necrophage", "origin_broken_shackles", "origin_life_seeded"} <= origins


class TestTraits:
    """Tests for species and leader trait filtering."""

    def test_archetype_gate(self, compat, regular_state):
        machine = ids(compat.compatible_traits("MACHINE", regular_state))
        assert machine == {
            "trait_logic_engines", "trait_mass_produced", "trait_custom_made", "trait_efficient_processors",
        }
        assert "trait_aquatic" not in ids(compat.compatible_traits("LITHOID", regular_state))

    def test_allowed_ethics(self, compat, regular_state):
        assert "trait_devout" not in ids(compat.compatible_traits("BIOLOGICAL", regular_state))
        spiritual = regular_state.with_ethics(["ethic_fanatic_spiritualist", "ethic_pacifist"])
        assert "trait_devout" in ids(compat.compatible_traits("BIOLOGICAL", spiritual))

    def test_leader_class_gate(self, compat, regular_state):
        scientist = ids(compat.compatible_leader_traits("scientist", regular_state))
        official = ids(compat.compatible_leader_traits("official", regular_state))
        assert "leader_trait_spark_of_genius" in scientist
        assert "leader_trait_spark_of_genius" not in official
        assert compat.compatible_leader_traits("admiral", regular_state) == []


class TestPools:
    """Tests for the unconditioned pools."""

    def test_selectable_archetypes(self, compat):
        assert ids(compat.selectable_archetypes()) == {"BIOLOGICAL", "LITHOID", "MACHINE"}

    def test_species_classes_for(self, compat):
        assert ids(compat.species_classes_for("BIOLOGICAL")) == {"HUM", "MAM", "REP", "INF"}
        assert compat.species_classes_for("MACHINE") == []

    def test_regular_and_gestalt_ethics(self, compat):
        assert len(compat.regular_ethics()) == 16
        assert compat.gestalt_ethic().id == "ethic_gestalt_consciousness"
