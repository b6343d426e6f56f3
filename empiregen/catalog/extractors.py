"""
Catalog Extractors - Parsed game data trees to typed catalog entities.

One function per entity kind. Each takes the combined root node of the
matching game directory and returns the player-relevant entities,
skipping non-playable, NPC-only or otherwise non-selectable entries.
"""

from __future__ import annotations
import logging

from ..parser.tree import Node
from ..rules.compiler import compile_requirements
from ..rules.model import RequirementBlock, RequirementCategory, Value
from .entities import (
    GESTALT_AUTHORITIES,
    GESTALT_ETHIC,
    Authority,
    Civic,
    Ethic,
    GraphicalCulture,
    LeaderTrait,
    Origin,
    PlanetClass,
    SecondarySpeciesConfig,
    SpeciesArchetype,
    SpeciesClass,
    SpeciesTrait,
)

logger = logging.getLogger(__name__)

# Origins that always start on a specific planet class
ORIGIN_FIXED_HOMEWORLDS = {
    "origin_life_seeded": "pc_gaia",
    "origin_void_dwellers": "pc_habitat",
    "origin_post_apocalyptic": "pc_nuked",
    "origin_machine": "pc_machine",
    "origin_remnants": "pc_relic",
    "origin_shattered_ring": "pc_ringworld_habitable",
    "origin_ocean_paradise": "pc_ocean",
    "origin_red_giant": "pc_volcanic",
    "origin_cosmic_dawn": "pc_volcanic",
    "origin_void_machines": "pc_habitat",
}

# Origins whose ruler gets the budgeted luminary trait picks
EXTENDED_LEADER_TRAIT_ORIGINS = {"origin_legendary_leader"}


def _entity_blocks(root: Node):
    for node in root.children:
        # Empty blocks like `x = { }` are still entities
        if node.key is not None and node.value is None:
            yield node


def _random_weight(node: Node) -> int:
    weight = node.child("random_weight")
    return weight.child_int("base", 1) if weight else 1


def _requirements(node: Node, key: str) -> RequirementBlock | None:
    return compile_requirements(node.child(key))


def _list(node: Node, key: str) -> tuple[str, ...]:
    child = node.child(key)
    return tuple(child.bare_values()) if child else ()


def _is_unplayable(node: Node, block_key: str = "playable") -> bool:
    """True for `playable = { always = no }` style entries."""
    block = node.child(block_key)
    return block is not None and not block.child_bool("always", True)


def extract_ethics(root: Node) -> list[Ethic]:
    ethics = []
    for node in _entity_blocks(root):
        cost = node.child_int("cost", 0)
        # ethic_categories and similar helper blocks carry no cost
        if cost <= 0:
            logger.debug("Skipping non-selectable ethic entry: %s", node.key)
            continue
        ethics.append(Ethic(
            id=node.key,
            cost=cost,
            category=node.child_value("category"),
            is_fanatic=cost == 2,
            is_gestalt=node.key == GESTALT_ETHIC,
            regular_variant=node.child_value("regular_variant"),
            fanatic_variant=node.child_value("fanatic_variant"),
            tags=_list(node, "tags"),
            random_weight=_random_weight(node),
        ))
    logger.info("Extracted %d ethics", len(ethics))
    return ethics


def _is_non_player_authority(potential: RequirementBlock | None) -> bool:
    # country_type = { value = ai_empire } marks NPC-only authorities
    if potential is None:
        return False
    return Value("ai_empire") in potential.get(RequirementCategory.COUNTRY_TYPE)


def extract_authorities(root: Node) -> list[Authority]:
    authorities = []
    for node in _entity_blocks(root):
        potential = _requirements(node, "potential")
        if _is_non_player_authority(potential):
            logger.debug("Skipping non-player authority: %s", node.key)
            continue
        authorities.append(Authority(
            id=node.key,
            election_type=node.child_value("election_type") or "none",
            has_heir=node.child_bool("has_heir", False),
            potential=potential,
            possible=_requirements(node, "possible"),
            random_weight=_random_weight(node),
            is_gestalt=node.key in GESTALT_AUTHORITIES,
        ))
    logger.info("Extracted %d player authorities", len(authorities))
    return authorities


def _trait_ids(node: Node | None) -> tuple[str, ...]:
    """Values of `trait = X` leaves inside a `traits = { ... }` block."""
    if node is None:
        return ()
    return tuple(t.value for t in node.children_with("trait") if t.value is not None)


def extract_secondary_species(node: Node) -> SecondarySpeciesConfig | None:
    block = node.child("has_secondary_species")
    if block is None:
        return None
    return SecondarySpeciesConfig(
        title=block.child_value("title"),
        enforced_trait_ids=_trait_ids(block.child("traits")),
    )


def extract_civics(root: Node) -> list[Civic]:
    """Civics share their directory with origins; origins are skipped."""
    civics = []
    for node in _entity_blocks(root):
        if node.child_bool("is_origin", False):
            continue
        civics.append(Civic(
            id=node.key,
            potential=_requirements(node, "potential"),
            possible=_requirements(node, "possible"),
            pickable_at_start=node.child_bool("pickable_at_start", True),
            random_weight=_random_weight(node),
            secondary_species=extract_secondary_species(node),
            enforced_trait_ids=_trait_ids(node.child("traits")),
        ))
    logger.info("Extracted %d civics", len(civics))
    return civics


def extract_origins(root: Node) -> list[Origin]:
    origins = []
    for node in _entity_blocks(root):
        if not node.child_bool("is_origin", False):
            continue
        if _is_unplayable(node):
            logger.debug("Skipping non-playable origin: %s", node.key)
            continue

        playable = node.child("playable")
        origins.append(Origin(
            id=node.key,
            potential=_requirements(node, "potential"),
            possible=_requirements(node, "possible"),
            dlc_requirement=playable.child_value("host_has_dlc") if playable else None,
            random_weight=_random_weight(node),
            secondary_species=extract_secondary_species(node),
            enforced_trait_ids=_trait_ids(node.child("traits")),
            fixed_homeworld=ORIGIN_FIXED_HOMEWORLDS.get(node.key),
            habitability_preference=node.child_value("habitability_preference"),
            extended_leader_traits=node.key in EXTENDED_LEADER_TRAIT_ORIGINS,
        ))
    logger.info("Extracted %d playable origins", len(origins))
    return origins


def extract_archetypes(root: Node) -> list[SpeciesArchetype]:
    """
    Archetypes may inherit trait points and max traits from another
    archetype via `inherit_trait_points_from`. Unset values default to 0.
    """
    raw = {}
    for node in _entity_blocks(root):
        raw[node.key] = (
            node.child_int("species_trait_points", -1),
            node.child_int("species_max_traits", -1),
            node.child_bool("robotic", False),
            node.child_value("inherit_trait_points_from"),
        )

    archetypes = []
    for archetype_id, (points, max_traits, robotic, parent_id) in raw.items():
        if parent_id is not None:
            parent = raw.get(parent_id)
            if parent is None:
                logger.warning("Archetype %s inherits from unknown archetype %s", archetype_id, parent_id)
            else:
                if points < 0:
                    points = parent[0]
                if max_traits < 0:
                    max_traits = parent[1]
        archetypes.append(SpeciesArchetype(
            id=archetype_id,
            trait_points=max(points, 0),
            max_traits=max(max_traits, 0),
            robotic=robotic,
        ))
    logger.info("Extracted %d species archetypes", len(archetypes))
    return archetypes


def extract_species_classes(root: Node) -> list[SpeciesClass]:
    classes = []
    for node in _entity_blocks(root):
        archetype = node.child_value("archetype")
        # Shipset-only entries have no archetype
        if archetype is None or archetype == "PRESAPIENT":
            continue
        if _is_unplayable(node):
            continue
        playable = node.child("playable")
        # Only available after game start, not in the creator
        if playable is not None and playable.child_value("has_global_flag") == "game_started":
            continue
        classes.append(SpeciesClass(id=node.key, archetype=archetype))
    logger.info("Extracted %d playable species classes", len(classes))
    return classes


def _trait_cost(cost_node: Node) -> int:
    # cost = 2  or  cost = { base = 3 ... }
    if cost_node.is_leaf:
        return int(float(cost_node.value))
    if cost_node.is_block:
        return cost_node.child_int("base", 0)
    return 0


def extract_species_traits(root: Node) -> list[SpeciesTrait]:
    """
    Creation-eligible species traits: those with allowed_archetypes and a
    cost, and neither `initial = no` nor `auto_mod = yes`.
    """
    traits = []
    for node in _entity_blocks(root):
        archetypes = node.child("allowed_archetypes")
        cost_node = node.child("cost")
        if archetypes is None or cost_node is None:
            continue
        if not node.child_bool("initial", True) or node.child_bool("auto_mod", False):
            continue

        playable = node.child("playable")
        traits.append(SpeciesTrait(
            id=node.key,
            cost=_trait_cost(cost_node),
            allowed_archetypes=tuple(archetypes.bare_values()),
            allowed_species_classes=_list(node, "species_class"),
            allowed_planet_classes=_list(node, "allowed_planet_classes"),
            opposites=_list(node, "opposites"),
            initial=True,
            randomized=node.child_bool("randomized", True),
            dlc_requirement=playable.child_value("host_has_dlc") if playable else None,
            tags=_list(node, "tags"),
            allowed_origins=_list(node, "allowed_origins"),
            forbidden_origins=_list(node, "forbidden_origins"),
            allowed_civics=_list(node, "allowed_civics"),
            forbidden_civics=_list(node, "forbidden_civics"),
            allowed_ethics=_list(node, "allowed_ethics"),
            forbidden_ethics=_list(node, "forbidden_ethics"),
        ))
    logger.info("Extracted %d creation-eligible species traits", len(traits))
    return traits


def extract_leader_traits(root: Node) -> list[LeaderTrait]:
    """Starting ruler traits, skipping tier-2 traits that replace others."""
    traits = []
    for node in _entity_blocks(root):
        if not node.child_bool("starting_ruler_trait", False):
            continue
        replaces = node.child("replace_traits")
        if replaces is not None and replaces.bare_values():
            continue
        inline = node.child("inline_script")
        traits.append(LeaderTrait(
            id=node.key,
            leader_classes=_list(node, "leader_class"),
            forbidden_origins=_list(node, "forbidden_origins"),
            allowed_ethics=_list(node, "allowed_ethics"),
            allowed_origins=_list(node, "allowed_origins"),
            allowed_civics=_list(node, "allowed_civics"),
            forbidden_civics=_list(node, "forbidden_civics"),
            forbidden_ethics=_list(node, "forbidden_ethics"),
            cost=node.child_int("cost", 0),
            opposites=_list(node, "opposites"),
            gfx_key=inline.child_value("ICON") if inline else None,
        ))
    logger.info("Extracted %d starting ruler traits", len(traits))
    return traits


def extract_planet_classes(root: Node) -> list[PlanetClass]:
    """Colonizable starting planet classes (initial = yes)."""
    planets = []
    for node in _entity_blocks(root):
        if not node.child_bool("colonizable", False) or not node.child_bool("initial", False):
            continue
        if not node.child_bool("starting_planet", True):
            continue
        planets.append(PlanetClass(id=node.key, climate=node.child_value("climate") or "unknown"))
    logger.info("Extracted %d habitable planet classes", len(planets))
    return planets


def extract_graphical_cultures(root: Node) -> list[GraphicalCulture]:
    """Player-selectable shipsets; `selectable = { always = no }` is NPC-only."""
    cultures = [
        GraphicalCulture(id=node.key)
        for node in _entity_blocks(root)
        if not _is_unplayable(node, "selectable")
    ]
    logger.info("Extracted %d player-selectable graphical cultures", len(cultures))
    return cultures
