"""
Empire Generator - Random, rule-consistent empire configurations.

Strictly ordered pipeline; each step narrows the partial selection the
next step is evaluated against:

    1. ethics            (budget 3: gestalt, fanatic + regular, or 3 regular)
    2. authority         (weighted)
    3. civics            (two weighted picks)
    4. origin            (uniform)
    5. archetype, class  (uniform), then civics re-validated and redone once
    6. traits            (shuffled greedy fill; enforced traits prepended)
    7. homeworld         (origin-fixed, else habitable list narrowed by traits)
    8. shipset
    9. leader            (class and ruler traits)
    10. secondary species (when the origin or a civic asks for one)

An empty candidate set anywhere raises GenerationFailure naming the step.
Nothing earlier is retried except the one civics redo in step 5.

The pick_* and build_* methods are reused by the reroll engine to repair
the parts of an empire that depend on a rerolled category.
"""

from __future__ import annotations
import logging
import random
from typing import Iterable, Sequence

from ..catalog.catalog import Catalog
from ..catalog.entities import (
    BIOLOGICAL,
    GESTALT_ETHIC,
    MACHINE_INTELLIGENCE,
    Authority,
    Civic,
    Ethic,
    Origin,
    SpeciesArchetype,
    SpeciesTrait,
)
from ..config import GeneratorConfig
from .compatibility import CompatibilityFilter
from .errors import GenerationFailure
from .result import GeneratedEmpire, SecondarySpecies
from .state import EmpireState
from .weighted import by_random_weight, weighted_choice

logger = logging.getLogger(__name__)

# Secondary species enforced trait costs; unlisted traits are free
SECONDARY_ENFORCED_TRAIT_COSTS = {"trait_syncretic_proles": 1}

# Infernal species cannot start on cold worlds but always may on volcanic ones
HOT_ONLY_SPECIES_CLASS = "INF"
HOT_PLANET = "pc_volcanic"
COLD_PLANETS = frozenset({"pc_arctic", "pc_alpine", "pc_tundra"})


def greedy_fill(
    candidates: Iterable,
    budget: int,
    max_picks: int,
    taken: Iterable[str] = (),
    excluded: Iterable[str] = (),
    points_spent: int = 0,
) -> tuple[list, int]:
    """
    Accept candidates in order while the pick count stays under max_picks
    and the running point total stays within [0, budget].

    Negative-cost candidates give points back. A candidate is skipped if it
    is excluded, already taken, or opposes (in either direction) something
    taken; each accepted candidate's opposites are excluded from then on.

    Works on anything with id, cost and opposites. Returns the accepted
    candidates and the final point total.
    """
    picked = []
    taken = set(taken)
    blocked = set(excluded) | taken

    for candidate in candidates:
        if len(picked) >= max_picks:
            break
        if candidate.id in blocked or not taken.isdisjoint(candidate.opposites):
            continue
        total = points_spent + candidate.cost
        if total > budget or total < 0:
            continue
        picked.append(candidate)
        points_spent = total
        taken.add(candidate.id)
        blocked.add(candidate.id)
        blocked.update(candidate.opposites)

    return picked, points_spent


def is_gestalt_ethics(ethics: Iterable[str]) -> bool:
    return GESTALT_ETHIC in ethics


class EmpireGenerator:
    """
    Usage:
        generator = EmpireGenerator(catalog, GeneratorConfig(), random.Random())
        empire = generator.generate()

    One random source is reused for every call on this instance.
    """

    def __init__(
        self,
        catalog: Catalog,
        config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.catalog = catalog
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random()
        self.compat = CompatibilityFilter(catalog)

    def generate(self) -> GeneratedEmpire:
        """Generate one complete empire. Raises GenerationFailure."""
        ethics = self.pick_ethics()
        state = EmpireState.empty().with_ethics(e.id for e in ethics)

        authority = self.pick_authority(state)
        state = state.with_authority(authority.id)

        civics = self.pick_civics(state)
        state = state.with_civics(c.id for c in civics)

        origin = self.pick_origin(state)
        state = state.with_origin(origin.id)

        archetype = self.pick_archetype(state)
        species_class = self.pick_species_class(archetype)
        state = state.with_species(species_class, archetype.id)

        # Civic rules may reference the species picked after them
        if not self._civics_still_valid(civics, state):
            logger.debug("Civics %s invalid for species %s, picking again",
                         [c.id for c in civics], species_class)
            civics = self.pick_civics(state.with_civics(()))
            state = state.with_civics(c.id for c in civics)

        traits, enforced, points_used = self.build_species_traits(archetype, state, origin, civics)
        state = state.with_traits(traits)

        homeworld = self.pick_homeworld(origin, traits, species_class)
        habitability = self.pick_habitability_preference(origin, homeworld)
        shipset = self.pick_shipset()
        leader_class = self.pick_leader_class()
        leader_traits = self.pick_leader_traits(leader_class, state, origin)
        secondary = self.generate_secondary_species(origin, civics, species_class)

        empire = GeneratedEmpire(
            ethics=tuple(e.id for e in ethics),
            authority=authority.id,
            civics=tuple(c.id for c in civics),
            origin=origin.id,
            species_archetype=archetype.id,
            species_class=species_class,
            species_traits=tuple(traits),
            trait_points_used=points_used,
            trait_points_budget=archetype.trait_points,
            homeworld=homeworld,
            habitability_preference=habitability,
            shipset=shipset,
            leader_class=leader_class,
            leader_traits=tuple(leader_traits),
            secondary_species=secondary,
            enforced_trait_ids=tuple(enforced),
        )
        logger.info(
            "Generated empire: ethics=%s authority=%s civics=%s origin=%s species=%s/%s "
            "traits=%s (%d/%dpts) homeworld=%s shipset=%s leader=%s/%s secondary=%s",
            list(empire.ethics), empire.authority, list(empire.civics), empire.origin,
            empire.species_archetype, empire.species_class, list(empire.species_traits),
            empire.trait_points_used, empire.trait_points_budget, empire.homeworld,
            empire.shipset, empire.leader_class, list(empire.leader_traits),
            secondary.species_class if secondary else "none",
        )
        return empire

    # -- Ethics ---------------------------------------------------------------

    def pick_ethics(self) -> list[Ethic]:
        if self.rng.random() < self.config.gestalt_chance:
            gestalt = self.compat.gestalt_ethic()
            if gestalt is not None:
                return [gestalt]

        regular = self.compat.regular_ethics()
        fanatics = [e for e in regular if e.is_fanatic]
        normals = [e for e in regular if not e.is_fanatic]

        if fanatics and self.rng.random() < 0.5:
            fanatic = weighted_choice(fanatics, by_random_weight, self.rng)
            others = [e for e in normals if not e.shares_axis(fanatic)]
            if others:
                return [fanatic, weighted_choice(others, by_random_weight, self.rng)]

        return self._pick_three_regular(normals)

    def _pick_three_regular(self, normals: Sequence[Ethic]) -> list[Ethic]:
        picked: list[Ethic] = []
        remaining = list(normals)
        while len(picked) < self.config.ethics_budget and remaining:
            choice = weighted_choice(remaining, by_random_weight, self.rng)
            picked.append(choice)
            remaining = [e for e in remaining if not e.shares_axis(choice)]

        if len(picked) < self.config.ethics_budget:
            raise GenerationFailure(
                "ethics",
                f"only {len(picked)} regular ethics on distinct axes",
                EmpireState.empty(),
            )
        return picked

    # -- Government -----------------------------------------------------------

    def pick_authority(self, state: EmpireState) -> Authority:
        candidates = self.compat.compatible_authorities(state)
        if not candidates:
            raise GenerationFailure("authority", f"no authority compatible with ethics {sorted(state.ethics)}", state)
        return weighted_choice(candidates, by_random_weight, self.rng)

    def pick_civic(self, state: EmpireState) -> Civic:
        candidates = self.compat.compatible_civics(state)
        if not candidates:
            raise GenerationFailure("civics", f"no civic compatible with {sorted(state.civics) or 'empty selection'}", state)
        return weighted_choice(candidates, by_random_weight, self.rng)

    def pick_civics(self, state: EmpireState) -> list[Civic]:
        """Pick civics one at a time; each pick joins the state the next is checked against."""
        picked: list[Civic] = []
        for _ in range(self.config.civic_count):
            civic = self.pick_civic(state)
            picked.append(civic)
            state = state.with_civic(civic.id)
        return picked

    def pick_origin(
        self,
        state: EmpireState,
        exclude: str | None = None,
        locked: Sequence[Authority | Civic] = (),
    ) -> Origin:
        """
        Uniform pick among compatible origins. Rules of every entity in
        `locked` must still hold with the candidate origin in place.
        """
        evaluator = self.compat.evaluator
        candidates = [
            o for o in self.compat.compatible_origins(state)
            if o.id != exclude
            and all(evaluator.evaluate_both(e.potential, e.possible, state.with_origin(o.id)) for e in locked)
        ]
        if not candidates:
            raise GenerationFailure("origin", "no compatible origin", state)
        return self.rng.choice(candidates)

    def _civics_still_valid(self, civics: Sequence[Civic], state: EmpireState) -> bool:
        evaluator = self.compat.evaluator
        return all(evaluator.evaluate_both(c.potential, c.possible, state) for c in civics)

    # -- Species --------------------------------------------------------------

    def pick_archetype(self, state: EmpireState) -> SpeciesArchetype:
        """
        Gestalt machine intelligences need a robotic archetype; every other
        empire, hive minds included, needs a non-robotic one.
        """
        robotic = is_gestalt_ethics(state.ethics) and state.authority == MACHINE_INTELLIGENCE
        archetypes = [a for a in self.compat.selectable_archetypes() if a.robotic == robotic]
        if not archetypes:
            raise GenerationFailure("species_archetype", "no selectable archetype", state)
        return self.rng.choice(archetypes)

    def pick_species_class(self, archetype: SpeciesArchetype) -> str:
        classes = self.compat.species_classes_for(archetype.id)
        if not classes:
            # Archetypes like MACHINE double as their own class
            return archetype.id
        return self.rng.choice(classes).id

    # -- Traits ---------------------------------------------------------------

    def collect_enforced_trait_ids(self, origin: Origin, civics: Sequence[Civic]) -> list[str]:
        """Origin-enforced ids first, then each civic's, without duplicates."""
        enforced = list(origin.enforced_trait_ids)
        for civic in civics:
            enforced.extend(t for t in civic.enforced_trait_ids if t not in enforced)
        return enforced

    def pick_traits(
        self,
        archetype: SpeciesArchetype,
        state: EmpireState,
        taken: Iterable[str] = (),
        excluded: Iterable[str] = (),
        budget: int | None = None,
        max_picks: int | None = None,
    ) -> tuple[list[SpeciesTrait], int]:
        pool = self.compat.compatible_traits(archetype.id, state)
        self.rng.shuffle(pool)
        return greedy_fill(
            pool,
            budget=archetype.trait_points if budget is None else budget,
            max_picks=archetype.max_traits if max_picks is None else max_picks,
            taken=taken,
            excluded=excluded,
        )

    def build_species_traits(
        self,
        archetype: SpeciesArchetype,
        state: EmpireState,
        origin: Origin,
        civics: Sequence[Civic],
    ) -> tuple[list[str], list[str], int]:
        """
        Full trait list for a species: enforced ids first, then the random
        fill. Returns (trait ids, enforced ids, points used by random traits).
        """
        enforced = self.collect_enforced_trait_ids(origin, civics)
        picked, points_used = self.pick_traits(
            archetype, state, taken=enforced, excluded=self.blocked_by(enforced)
        )
        return enforced + [t.id for t in picked], enforced, points_used

    def blocked_by(self, trait_ids: Iterable[str]) -> set[str]:
        """The given ids plus every known opposite of them."""
        blocked = set()
        for trait_id in trait_ids:
            blocked.add(trait_id)
            trait = self.compat.find_trait(trait_id)
            if trait is not None:
                blocked.update(trait.opposites)
        return blocked

    def trait_planet_restriction(self, trait_ids: Iterable[str]) -> frozenset[str] | None:
        """
        Intersection of allowed_planet_classes over every restricting trait,
        or None when no trait restricts the homeworld.
        """
        restriction: set[str] | None = None
        for trait_id in trait_ids:
            trait = self.compat.find_trait(trait_id)
            if trait is None or not trait.allowed_planet_classes:
                continue
            allowed = set(trait.allowed_planet_classes)
            restriction = allowed if restriction is None else restriction & allowed
        return frozenset(restriction) if restriction is not None else None

    # -- Homeworld ------------------------------------------------------------

    def homeworld_candidates(self, species_class: str, trait_ids: Iterable[str]) -> list[str]:
        planets = [p.id for p in self.compat.habitable_planet_classes()]

        if species_class == HOT_ONLY_SPECIES_CLASS:
            if HOT_PLANET not in planets:
                planets.append(HOT_PLANET)
            planets = [p for p in planets if p not in COLD_PLANETS]

        restriction = self.trait_planet_restriction(trait_ids)
        if restriction is not None:
            planets = [p for p in planets if p in restriction]
        return planets

    def pick_homeworld(
        self,
        origin: Origin,
        trait_ids: Iterable[str],
        species_class: str,
        exclude: str | None = None,
    ) -> str:
        if origin.fixed_homeworld and origin.fixed_homeworld != exclude:
            return origin.fixed_homeworld
        if origin.fixed_homeworld:
            raise GenerationFailure("homeworld", f"origin {origin.id} fixes the homeworld")

        planets = [p for p in self.homeworld_candidates(species_class, trait_ids) if p != exclude]
        if not planets:
            raise GenerationFailure("homeworld", f"no habitable planet class for {species_class}")
        return self.rng.choice(planets)

    def pick_habitability_preference(self, origin: Origin, homeworld: str) -> str:
        """
        The origin's explicit preference wins. Origins with a fixed, unusual
        homeworld get a random standard class. Otherwise the homeworld.
        """
        if origin.habitability_preference:
            return origin.habitability_preference
        if origin.fixed_homeworld:
            standard = self.compat.habitable_planet_classes()
            if standard:
                return self.rng.choice(standard).id
        return homeworld

    # -- Shipset and leader ---------------------------------------------------

    def pick_shipset(self, exclude: str | None = None) -> str:
        shipsets = [s.id for s in self.compat.selectable_shipsets() if s.id != exclude]
        if not shipsets:
            raise GenerationFailure("shipset", "no selectable shipset")
        return self.rng.choice(shipsets)

    def pick_leader_class(self) -> str:
        return self.rng.choice(self.config.leader_classes)

    def pick_leader_traits(self, leader_class: str, state: EmpireState, origin: Origin) -> list[str]:
        """
        Luminary origins get a budgeted multi-pick, positive traits tried
        first. Everyone else gets one uniformly picked trait, or none when
        no trait fits.
        """
        pool = self.compat.compatible_leader_traits(leader_class, state)
        if not pool:
            return []

        if not origin.extended_leader_traits:
            return [self.rng.choice(pool).id]

        positive = [t for t in pool if t.cost > 0]
        negative = [t for t in pool if t.cost < 0]
        self.rng.shuffle(positive)
        self.rng.shuffle(negative)
        picked, _ = greedy_fill(
            positive + negative,
            budget=self.config.luminary_budget,
            max_picks=self.config.luminary_max_picks,
        )
        return [t.id for t in picked]

    # -- Secondary species ----------------------------------------------------

    def generate_secondary_species(
        self,
        origin: Origin,
        civics: Sequence[Civic],
        primary_class: str,
        exclude_class: str | None = None,
    ) -> SecondarySpecies | None:
        """
        Secondary species for the origin's config, else the first civic
        (in pick order) with one. None when nothing asks for one.
        """
        config = origin.secondary_species
        if config is None:
            config = next((c.secondary_species for c in civics if c.secondary_species), None)
        if config is None:
            return None

        biological = self.compat.species_classes_for(BIOLOGICAL)
        candidates = [sc for sc in biological if sc.id not in (primary_class, exclude_class)]
        if not candidates and exclude_class is None:
            candidates = biological
        if not candidates:
            raise GenerationFailure("secondary_species", "no biological species class available")
        species_class = self.rng.choice(candidates).id

        enforced = list(config.enforced_trait_ids)
        enforced_cost = sum(SECONDARY_ENFORCED_TRAIT_COSTS.get(t, 0) for t in enforced)
        budget = self.config.secondary_trait_budget

        state = EmpireState.empty().with_species(species_class, BIOLOGICAL)
        pool = self.compat.compatible_traits(BIOLOGICAL, state)
        self.rng.shuffle(pool)
        additional, points = greedy_fill(
            pool,
            budget=budget,
            max_picks=self.config.secondary_max_traits - len(enforced),
            taken=enforced,
            excluded=self.blocked_by(enforced),
            points_spent=enforced_cost,
        )

        return SecondarySpecies(
            title=config.title,
            species_class=species_class,
            enforced_traits=tuple(enforced),
            additional_traits=tuple(t.id for t in additional),
            trait_points_used=points,
            trait_points_budget=budget,
            max_trait_picks=self.config.secondary_max_traits,
        )
