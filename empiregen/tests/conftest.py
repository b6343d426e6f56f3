"""
Pytest fixtures for Empiregen tests.

The `game_dir` fixture writes a small but complete game installation to a
temp directory. It is shaped like the real data (same directory layout,
block structure and rule syntax) and is rich enough that every generation
step always has a candidate.
"""

import random
from pathlib import Path

import pytest

from ..catalog import Catalog, load_catalog
from ..config import GeneratorConfig
from ..engine_core import EmpireGenerator, RerollEngine
from ..session import SessionManager


NOT_GESTALT = "potential = { ethics = { NOT = { value = ethic_gestalt_consciousness } } }"


def _ethic_pair(name: str, category: str) -> str:
    return f"""
ethic_{name} = {{
    cost = 1
    category = "{category}"
    fanatic_variant = ethic_fanatic_{name}
    random_weight = {{ base = @ethic_weight }}
}}
ethic_fanatic_{name} = {{
    cost = 2
    category = "{category}"
    regular_variant = ethic_{name}
    random_weight = {{ base = @ethic_weight }}
}}
"""


SCRIPTED_VARIABLES = """
@ethic_weight = 10
@civic_weight = @ethic_weight
"""

ETHICS = "ethic_categories = { col = { } xen = { } pol = { } spi = { } }\n" + "".join([
    _ethic_pair("authoritarian", "col"),
    _ethic_pair("egalitarian", "col"),
    _ethic_pair("xenophobe", "xen"),
    _ethic_pair("xenophile", "xen"),
    _ethic_pair("militarist", "pol"),
    _ethic_pair("pacifist", "pol"),
    _ethic_pair("materialist", "spi"),
    _ethic_pair("spiritualist", "spi"),
]) + """
ethic_gestalt_consciousness = {
    cost = 3
    category = "hive"
    random_weight = { base = 0 }
}
"""

AUTHORITIES = f"""
auth_democratic = {{
    election_type = democratic
    {NOT_GESTALT}
    possible = {{
        ethics = {{
            NOR = {{
                text = civic_tooltip_not_authoritarian
                value = ethic_authoritarian
                value = ethic_fanatic_authoritarian
            }}
        }}
    }}
    random_weight = {{ base = 5 }}
}}
auth_oligarchic = {{
    election_type = oligarchic
    {NOT_GESTALT}
    possible = {{
        ethics = {{
            NOT = {{ value = ethic_fanatic_authoritarian }}
            NOT = {{ value = ethic_fanatic_egalitarian }}
        }}
    }}
    random_weight = {{ base = 5 }}
}}
auth_dictatorial = {{
    election_type = autocratic
    has_heir = no
    {NOT_GESTALT}
    possible = {{
        ethics = {{ NOR = {{ value = ethic_egalitarian value = ethic_fanatic_egalitarian }} }}
    }}
    random_weight = {{ base = 5 }}
}}
auth_hive_mind = {{
    potential = {{ ethics = {{ value = ethic_gestalt_consciousness }} }}
    possible = {{ species_archetype = {{ NOT = {{ value = MACHINE }} }} }}
}}
auth_machine_intelligence = {{
    potential = {{ ethics = {{ value = ethic_gestalt_consciousness }} }}
}}
auth_ancient_machine = {{
    potential = {{ country_type = {{ value = ai_empire }} }}
}}
"""

CIVICS = f"""
civic_mining_guilds = {{
    {NOT_GESTALT}
    random_weight = {{ base = @civic_weight }}
}}
civic_meritocracy = {{
    {NOT_GESTALT}
    possible = {{ authority = {{ NOT = {{ value = auth_dictatorial }} }} }}
}}
civic_technocracy = {{
    {NOT_GESTALT}
    possible = {{ ethics = {{ OR = {{ value = ethic_materialist value = ethic_fanatic_materialist }} }} }}
}}
civic_warrior_culture = {{
    {NOT_GESTALT}
    possible = {{ ethics = {{ OR = {{ value = ethic_militarist value = ethic_fanatic_militarist }} }} }}
}}
civic_agrarian_idyll = {{
    {NOT_GESTALT}
    possible = {{
        ethics = {{ NOR = {{ value = ethic_militarist value = ethic_fanatic_militarist }} }}
        civics = {{ NOT = {{ value = civic_warrior_culture }} }}
    }}
}}
civic_free_haven = {{
    {NOT_GESTALT}
    possible = {{
        OR = {{
            ethics = {{ value = ethic_xenophile }}
            authority = {{ value = auth_democratic }}
        }}
    }}
}}
civic_anglers = {{
    {NOT_GESTALT}
    possible = {{ species_archetype = {{ NOT = {{ value = LITHOID }} }} }}
    traits = {{ trait = trait_aquatic }}
}}
civic_syncretic_evolution = {{
    {NOT_GESTALT}
    has_secondary_species = {{
        title = "civic_syncretic_evolution_secondary_species"
        traits = {{ trait = trait_syncretic_proles }}
    }}
}}
civic_ancient_preservers = {{
    {NOT_GESTALT}
    pickable_at_start = no
}}
civic_hive_strength_of_legions = {{
    potential = {{ authority = {{ value = auth_hive_mind }} }}
}}
civic_hive_devouring_swarm = {{
    potential = {{ authority = {{ value = auth_hive_mind }} }}
}}
civic_hive_one_mind = {{
    potential = {{ authority = {{ value = auth_hive_mind }} }}
}}
civic_machine_servitor = {{
    potential = {{ authority = {{ value = auth_machine_intelligence }} }}
}}
civic_machine_assimilator = {{
    potential = {{ authority = {{ value = auth_machine_intelligence }} }}
}}
civic_machine_builder = {{
    potential = {{ authority = {{ value = auth_machine_intelligence }} }}
}}
"""

ORIGINS = f"""
origin_default = {{
    is_origin = yes
}}
origin_life_seeded = {{
    is_origin = yes
    habitability_preference = pc_gaia
    possible = {{ authority = {{ NOT = {{ value = auth_machine_intelligence }} }} }}
}}
origin_remnants = {{
    is_origin = yes
}}
origin_necrophage = {{
    is_origin = yes
    {NOT_GESTALT}
    traits = {{ trait = trait_necrophage }}
}}
origin_legendary_leader = {{
    is_origin = yes
    possible = {{ authority = {{ value = auth_dictatorial }} }}
}}
origin_broken_shackles = {{
    is_origin = yes
    {NOT_GESTALT}
    has_secondary_species = {{
        title = "origin_broken_shackles_secondary_species"
    }}
    playable = {{ host_has_dlc = "Overlord" }}
}}
origin_machine = {{
    is_origin = yes
    possible = {{ authority = {{ value = auth_machine_intelligence }} }}
}}
origin_sealed_away = {{
    is_origin = yes
    playable = {{ always = no }}
}}
"""

ARCHETYPES = """
BIOLOGICAL = {
    species_trait_points = 2
    species_max_traits = 5
}
LITHOID = {
    inherit_trait_points_from = BIOLOGICAL
}
MACHINE = {
    species_trait_points = 4
    species_max_traits = 5
    robotic = yes
}
ROBOT = {
    species_trait_points = 0
    species_max_traits = 4
    robotic = yes
}
PRESAPIENT = {
    species_trait_points = 0
    species_max_traits = 0
}
OTHER = { }
"""

SPECIES_CLASSES = """
HUM = { archetype = BIOLOGICAL }
MAM = { archetype = BIOLOGICAL }
REP = { archetype = BIOLOGICAL }
INF = { archetype = BIOLOGICAL }
LITHOID = { archetype = LITHOID }
PRE_HUM = { archetype = PRESAPIENT }
LATE_ARRIVALS = {
    archetype = BIOLOGICAL
    playable = { has_global_flag = game_started }
}
SHIPSET_ONLY = { graphical_culture = mammalian_01 }
"""

SPECIES_TRAITS = """
trait_intelligent = {
    cost = 2
    allowed_archetypes = { BIOLOGICAL LITHOID }
}
trait_strong = {
    cost = 1
    allowed_archetypes = { BIOLOGICAL LITHOID }
    opposites = { trait_weak }
}
trait_weak = {
    cost = -1
    allowed_archetypes = { BIOLOGICAL LITHOID }
    opposites = { trait_strong }
}
trait_rapid_breeders = {
    cost = { base = 2 }
    allowed_archetypes = { BIOLOGICAL LITHOID }
    opposites = { trait_slow_breeders }
}
trait_slow_breeders = {
    cost = -1
    allowed_archetypes = { BIOLOGICAL LITHOID }
    opposites = { trait_rapid_breeders }
}
trait_sedentary = {
    cost = -1
    allowed_archetypes = { BIOLOGICAL LITHOID }
}
trait_aquatic = {
    cost = 1
    allowed_archetypes = { BIOLOGICAL }
    allowed_planet_classes = { pc_ocean }
}
trait_devout = {
    cost = 1
    allowed_archetypes = { BIOLOGICAL LITHOID }
    allowed_ethics = { ethic_spiritualist ethic_fanatic_spiritualist }
}
trait_syncretic_proles = {
    cost = 1
    allowed_archetypes = { BIOLOGICAL }
    initial = no
}
trait_auto_mod_biological = {
    cost = 0
    allowed_archetypes = { BIOLOGICAL }
    auto_mod = yes
}
trait_logic_engines = {
    cost = 2
    allowed_archetypes = { MACHINE }
}
trait_mass_produced = {
    cost = 1
    allowed_archetypes = { MACHINE }
    opposites = { trait_custom_made }
}
trait_custom_made = {
    cost = -1
    allowed_archetypes = { MACHINE }
    opposites = { trait_mass_produced }
}
trait_efficient_processors = {
    cost = 1
    allowed_archetypes = { MACHINE }
}
"""

LEADER_TRAITS = """
leader_trait_charismatic = {
    leader_class = { official commander scientist }
    starting_ruler_trait = yes
    cost = 1
    opposites = { leader_trait_abrasive }
    inline_script = { script = trait/icon ICON = "GFX_leader_trait_charismatic" }
}
leader_trait_abrasive = {
    leader_class = { official commander scientist }
    starting_ruler_trait = yes
    cost = -1
    opposites = { leader_trait_charismatic }
}
leader_trait_resilient = {
    leader_class = { official commander scientist }
    starting_ruler_trait = yes
    cost = 1
}
leader_trait_spark_of_genius = {
    leader_class = { scientist }
    starting_ruler_trait = yes
    cost = 1
}
leader_trait_charismatic_2 = {
    leader_class = { official }
    starting_ruler_trait = yes
    replace_traits = { leader_trait_charismatic }
}
leader_trait_veteran = {
    leader_class = { commander }
}
"""

PLANET_CLASSES = """
pc_desert = {
    colonizable = yes
    initial = yes
    climate = dry
}
pc_ocean = {
    colonizable = yes
    initial = yes
    climate = wet
}
pc_arctic = {
    colonizable = yes
    initial = yes
    climate = cold
}
pc_tundra = {
    colonizable = yes
    initial = yes
    climate = cold
}
pc_gaia = {
    colonizable = yes
    initial = no
}
pc_barren = {
    colonizable = no
}
"""

GRAPHICAL_CULTURES = """
mammalian_01 = { }
reptilian_01 = { fallback = mammalian_01 }
avian_01 = { fallback = mammalian_01 }
pirate_01 = { selectable = { always = no } }
"""

GAME_FILES = {
    "common/scripted_variables/00_scripted_variables.txt": SCRIPTED_VARIABLES,
    "common/ethics/00_ethics.txt": ETHICS,
    "common/governments/authorities/00_authorities.txt": AUTHORITIES,
    "common/governments/civics/00_civics.txt": CIVICS,
    "common/governments/civics/01_origins.txt": ORIGINS,
    "common/species_archetypes/00_archetypes.txt": ARCHETYPES,
    "common/species_classes/00_species_classes.txt": SPECIES_CLASSES,
    "common/traits/04_species_traits.txt": SPECIES_TRAITS,
    "common/traits/00_leader_traits.txt": LEADER_TRAITS,
    "common/planet_classes/00_planet_classes.txt": PLANET_CLASSES,
    "common/graphical_culture/00_graphical_culture.txt": GRAPHICAL_CULTURES,
}

BIOLOGICAL_CLASSES = {"HUM", "MAM", "REP", "INF"}


def write_game_dir(root: Path, files: dict[str, str] = GAME_FILES) -> Path:
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def game_dir(tmp_path: Path) -> Path:
    """A synthetic game installation on disk."""
    return write_game_dir(tmp_path / "game")


@pytest.fixture
def catalog(game_dir: Path) -> Catalog:
    return load_catalog(game_dir)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def generator(catalog: Catalog, rng: random.Random) -> EmpireGenerator:
    return EmpireGenerator(catalog, GeneratorConfig(), rng)


@pytest.fixture
def gestalt_generator(catalog: Catalog) -> EmpireGenerator:
    """Always produces gestalt empires."""
    return EmpireGenerator(catalog, GeneratorConfig(gestalt_chance=1.0), random.Random(99))


@pytest.fixture
def regular_generator(catalog: Catalog) -> EmpireGenerator:
    """Never produces gestalt empires."""
    return EmpireGenerator(catalog, GeneratorConfig(gestalt_chance=0.0), random.Random(7))


@pytest.fixture
def reroll_engine(generator: EmpireGenerator) -> RerollEngine:
    return RerollEngine(generator)


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()
