"""
Reroll Engine - Change exactly one category of a generated empire.

A session gets one reroll in total, not one per category. Each category
has its own repair rule that re-validates and regenerates whatever depends
on it causally:

    ETHICS              fresh generations until one yields different ethics
                        that fit the kept authority, civics and origin;
                        traits and leader traits they no longer allow are
                        redrawn; gestalt empires fall back to a regime change
    AUTHORITY           compatible alternative, weighted; gestalt empires
                        fall back to a gestalt switch
    CIVIC1 / CIVIC2     alternative that the authority, origin and other
                        civic still accept; traits and leader traits redrawn
                        where their gates changed; secondary species
                        regenerated
    ORIGIN              alternative origin the authority and civics accept;
                        secondary species, traits, leader traits, homeworld
                        and habitability regenerated
    TRAITS              new random fill around the enforced traits
    TRAIT               one non-enforced trait swapped in place
    HOMEWORLD           alternative habitable planet class
    SHIPSET / LEADER / SECONDARY_SPECIES
                        same pools as generation, excluding the current value

Regime change and gestalt switch adopt a whole fresh empire because the
change is impossible in place. Both are capped by config.max_attempts.

A failed reroll raises RerollFailure and leaves the session untouched.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, assert_never

from ..catalog.entities import MACHINE_INTELLIGENCE, Authority, Civic, Origin, SpeciesArchetype
from .errors import GenerationFailure, RerollFailure, RerollUnavailable
from .generator import EmpireGenerator, is_gestalt_ethics
from .result import GeneratedEmpire
from .weighted import by_random_weight, weighted_choice

if TYPE_CHECKING:
    from ..session.manager import GenerationSession

logger = logging.getLogger(__name__)


class RerollCategory(str, Enum):
    ETHICS = "ethics"
    AUTHORITY = "authority"
    CIVIC1 = "civic1"
    CIVIC2 = "civic2"
    ORIGIN = "origin"
    TRAITS = "traits"
    TRAIT = "trait"
    HOMEWORLD = "homeworld"
    SHIPSET = "shipset"
    LEADER = "leader"
    SECONDARY_SPECIES = "secondary_species"


class RerollEngine:
    """
    Usage:
        engine = RerollEngine(generator)
        empire = engine.reroll(session, RerollCategory.CIVIC1)
    """

    def __init__(self, generator: EmpireGenerator):
        self.generator = generator
        self.catalog = generator.catalog
        self.compat = generator.compat
        self.evaluator = generator.compat.evaluator
        self.rng = generator.rng
        self.max_attempts = generator.config.max_attempts

    def reroll(
        self,
        session: GenerationSession,
        category: RerollCategory,
        trait_id: str | None = None,
    ) -> GeneratedEmpire:
        """
        Reroll one category of the session's empire.

        Raises RerollUnavailable if the session's reroll is spent, and
        RerollFailure if no valid replacement exists.
        """
        try:
            category = RerollCategory(category)
        except ValueError as e:
            raise RerollFailure(str(category), f"unknown reroll category {category!r}") from e
        if not session.can_reroll():
            raise RerollUnavailable(category.value)

        previous = session.empire
        try:
            updated = self._reroll(previous, category, trait_id)
        except GenerationFailure as e:
            raise RerollFailure(category.value, e.message) from e

        session.apply_reroll(updated)
        logger.info("Rerolled %s: changed %s", category.value, _changed_fields(previous, updated))
        return updated

    def _reroll(self, empire: GeneratedEmpire, category: RerollCategory, trait_id: str | None) -> GeneratedEmpire:
        match category:
            case RerollCategory.ETHICS:
                return self.reroll_ethics(empire)
            case RerollCategory.AUTHORITY:
                return self.reroll_authority(empire)
            case RerollCategory.CIVIC1:
                return self.reroll_civic(empire, 0)
            case RerollCategory.CIVIC2:
                return self.reroll_civic(empire, 1)
            case RerollCategory.ORIGIN:
                return self.reroll_origin(empire)
            case RerollCategory.TRAITS:
                return self.reroll_traits(empire)
            case RerollCategory.TRAIT:
                return self.reroll_trait(empire, trait_id)
            case RerollCategory.HOMEWORLD:
                return self.reroll_homeworld(empire)
            case RerollCategory.SHIPSET:
                return empire.with_shipset(self.generator.pick_shipset(exclude=empire.shipset))
            case RerollCategory.LEADER:
                return self.reroll_leader(empire)
            case RerollCategory.SECONDARY_SPECIES:
                return self.reroll_secondary_species(empire)
        assert_never(category)

    # -- Political layer ------------------------------------------------------

    def reroll_ethics(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        authority = self._authority(empire)
        civics = self._civics(empire)
        origin = self._origin(empire)

        for attempt in range(self.max_attempts):
            fresh = self._try_generate()
            if fresh is None or set(fresh.ethics) == set(empire.ethics):
                continue
            if is_gestalt_ethics(fresh.ethics) != authority.is_gestalt:
                continue
            state = empire.to_state().with_ethics(fresh.ethics)
            if all(self.evaluator.evaluate_both(e.potential, e.possible, state)
                   for e in (authority, *civics, origin)):
                return self._revalidate_dependents(empire, empire.with_ethics(fresh.ethics), origin, civics)
            logger.debug("Ethics reroll attempt %d: %s incompatible", attempt + 1, list(fresh.ethics))

        if is_gestalt_ethics(empire.ethics):
            return self._regime_change(empire)
        raise RerollFailure(
            RerollCategory.ETHICS.value,
            f"no compatible ethics found in {self.max_attempts} attempts",
        )

    def _regime_change(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        """Adopt a whole fresh non-gestalt empire."""
        logger.info("Gestalt ethics cannot change in place, attempting regime change")
        fresh = self._generate_until(lambda e: not is_gestalt_ethics(e.ethics))
        if fresh is None:
            raise RerollFailure(
                RerollCategory.ETHICS.value,
                f"regime change found no non-gestalt empire in {self.max_attempts} attempts",
            )
        return fresh

    def reroll_authority(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        current = self._authority(empire)
        archetype = self._archetype(empire)
        civics = self._civics(empire)
        origin = self._origin(empire)
        base = empire.to_state().with_authority(None)

        candidates = []
        for authority in self.compat.compatible_authorities(base):
            if authority.id == current.id or not _fits_empire(authority, empire, archetype):
                continue
            state = base.with_authority(authority.id)
            if all(self.evaluator.evaluate_both(e.potential, e.possible, state) for e in (*civics, origin)):
                candidates.append(authority)

        if candidates:
            return empire.with_authority(weighted_choice(candidates, by_random_weight, self.rng).id)
        if current.is_gestalt:
            return self._gestalt_switch(empire, current)
        raise RerollFailure(RerollCategory.AUTHORITY.value, "no alternative authority fits this empire")

    def _gestalt_switch(self, empire: GeneratedEmpire, current: Authority) -> GeneratedEmpire:
        """
        Hive mind and machine intelligence need different archetypes, so the
        switch adopts a whole fresh empire with the other gestalt authority.
        """
        target = next((a.id for a in self.compat.gestalt_authorities() if a.id != current.id), None)
        if target is None:
            raise RerollFailure(RerollCategory.AUTHORITY.value, "no other gestalt authority exists")

        logger.info("Attempting gestalt switch %s -> %s", current.id, target)
        fresh = self._generate_until(lambda e: e.authority == target)
        if fresh is None:
            raise RerollFailure(
                RerollCategory.AUTHORITY.value,
                f"gestalt switch to {target} failed in {self.max_attempts} attempts",
            )
        return fresh

    def reroll_civic(self, empire: GeneratedEmpire, slot: int) -> GeneratedEmpire:
        category = (RerollCategory.CIVIC1, RerollCategory.CIVIC2)[slot]
        authority = self._authority(empire)
        origin = self._origin(empire)
        civics = self._civics(empire)
        other = civics[1 - slot]

        kept_enforced = self.generator.collect_enforced_trait_ids(origin, [other])
        state = (
            empire.to_state()
            .with_civics([other.id])
            .with_traits([*kept_enforced, *empire.random_trait_ids])
        )
        locked = (authority, other, origin)
        candidates = [
            c for c in self.compat.compatible_civics(state)
            if c.id != empire.civics[slot]
            and all(self.evaluator.evaluate_both(e.potential, e.possible, state.with_civic(c.id)) for e in locked)
        ]
        if not candidates:
            raise RerollFailure(category.value, "no alternative civic fits this empire")

        civic = weighted_choice(candidates, by_random_weight, self.rng)
        civics[slot] = civic
        updated = self._revalidate_dependents(empire, empire.with_civic(slot, civic.id), origin, civics)

        return updated.with_secondary_species(
            self.generator.generate_secondary_species(origin, civics, empire.species_class)
        )

    def reroll_origin(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        civics = self._civics(empire)
        state = empire.to_state().with_origin(None).with_traits(())
        origin = self.generator.pick_origin(
            state, exclude=empire.origin, locked=(self._authority(empire), *civics)
        )

        updated = empire.with_origin(origin.id).with_secondary_species(
            self.generator.generate_secondary_species(origin, civics, empire.species_class)
        )
        updated = self._rebuild_traits(updated, origin, civics)

        # Homeworld follows the new origin
        leader_traits = self.generator.pick_leader_traits(empire.leader_class, updated.to_state(), origin)
        homeworld = self.generator.pick_homeworld(origin, updated.species_traits, empire.species_class)
        return updated.with_leader(empire.leader_class, leader_traits).with_homeworld(
            homeworld, self.generator.pick_habitability_preference(origin, homeworld)
        )

    # -- Species --------------------------------------------------------------

    def reroll_traits(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        archetype = self._archetype(empire)
        enforced = list(empire.enforced_trait_ids)
        state = empire.to_state().with_traits(())
        current = set(empire.random_trait_ids)

        for _ in range(self.max_attempts):
            picked, points = self.generator.pick_traits(
                archetype, state, taken=enforced, excluded=self.generator.blocked_by(enforced)
            )
            if {t.id for t in picked} != current:
                break
        else:
            raise RerollFailure(RerollCategory.TRAITS.value, "no different trait selection available")

        updated = empire.with_traits([*enforced, *(t.id for t in picked)], points)
        return self._refresh_homeworld(empire, updated)

    def reroll_trait(self, empire: GeneratedEmpire, trait_id: str | None) -> GeneratedEmpire:
        category = RerollCategory.TRAIT.value
        if trait_id is None:
            raise RerollFailure(category, "a trait id is required")
        if trait_id in empire.enforced_trait_ids:
            raise RerollFailure(category, f"{trait_id} is enforced and cannot be rerolled")
        if trait_id not in empire.species_traits:
            raise RerollFailure(category, f"{trait_id} is not one of this species' traits")

        archetype = self._archetype(empire)
        kept = [t for t in empire.random_trait_ids if t != trait_id]
        kept_cost = sum(self._trait_cost(t) for t in kept)
        remaining = empire.trait_points_budget - kept_cost

        all_kept = [*empire.enforced_trait_ids, *kept]
        blocked = self.generator.blocked_by(all_kept) | {trait_id}
        candidates = [
            t for t in self.compat.compatible_traits(archetype.id, empire.to_state())
            if t.id not in blocked
            and set(all_kept).isdisjoint(t.opposites)
            and t.cost <= remaining
            and kept_cost + t.cost >= 0
        ]
        if not candidates:
            raise RerollFailure(category, f"no replacement for {trait_id} fits the remaining budget")

        replacement = self.rng.choice(candidates)
        traits = [replacement.id if t == trait_id else t for t in empire.species_traits]
        updated = empire.with_traits(traits, kept_cost + replacement.cost)
        return self._refresh_homeworld(empire, updated)

    def reroll_homeworld(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        origin = self._origin(empire)
        if origin.fixed_homeworld:
            raise RerollFailure(RerollCategory.HOMEWORLD.value, f"origin {origin.id} fixes the homeworld")
        homeworld = self.generator.pick_homeworld(
            origin, empire.species_traits, empire.species_class, exclude=empire.homeworld
        )
        return empire.with_homeworld(homeworld, self.generator.pick_habitability_preference(origin, homeworld))

    def reroll_leader(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        origin = self._origin(empire)
        state = empire.to_state()
        current = (empire.leader_class, empire.leader_traits)

        for _ in range(self.max_attempts):
            leader_class = self.generator.pick_leader_class()
            traits = tuple(self.generator.pick_leader_traits(leader_class, state, origin))
            if (leader_class, traits) != current:
                return empire.with_leader(leader_class, traits)
        raise RerollFailure(RerollCategory.LEADER.value, "no different leader available")

    def reroll_secondary_species(self, empire: GeneratedEmpire) -> GeneratedEmpire:
        if empire.secondary_species is None:
            raise RerollFailure(RerollCategory.SECONDARY_SPECIES.value, "this empire has no secondary species")
        secondary = self.generator.generate_secondary_species(
            self._origin(empire),
            self._civics(empire),
            empire.species_class,
            exclude_class=empire.secondary_species.species_class,
        )
        return empire.with_secondary_species(secondary)

    # -- Helpers --------------------------------------------------------------

    def _rebuild_traits(self, empire: GeneratedEmpire, origin: Origin, civics: list[Civic]) -> GeneratedEmpire:
        """New random fill around the enforced traits of origin and civics. Homeworld is left as is."""
        state = empire.to_state().with_traits(())
        traits, enforced, points = self.generator.build_species_traits(
            self._archetype(empire), state, origin, civics
        )
        return empire.with_traits(traits, points, enforced)

    def _revalidate_dependents(
        self,
        previous: GeneratedEmpire,
        updated: GeneratedEmpire,
        origin: Origin,
        civics: list[Civic],
    ) -> GeneratedEmpire:
        """
        Redraw species traits when the enforced set changed or a kept random
        trait is no longer allowed, and leader traits when one of them is no
        longer allowed. The homeworld follows any change in trait planet
        restrictions.
        """
        state = updated.to_state()
        enforced = self.generator.collect_enforced_trait_ids(origin, civics)
        allowed = {t.id for t in self.compat.compatible_traits(updated.species_archetype, state)}
        if enforced != list(updated.enforced_trait_ids) or not allowed.issuperset(updated.random_trait_ids):
            logger.debug("Species traits %s no longer fit, redrawing", list(updated.random_trait_ids))
            updated = self._rebuild_traits(updated, origin, civics)

        state = updated.to_state()
        allowed_leader = {t.id for t in self.compat.compatible_leader_traits(updated.leader_class, state)}
        if not allowed_leader.issuperset(updated.leader_traits):
            logger.debug("Leader traits %s no longer fit, redrawing", list(updated.leader_traits))
            updated = updated.with_leader(
                updated.leader_class,
                self.generator.pick_leader_traits(updated.leader_class, state, origin),
            )

        return self._refresh_homeworld(previous, updated)

    def _refresh_homeworld(self, previous: GeneratedEmpire, updated: GeneratedEmpire) -> GeneratedEmpire:
        """Re-pick homeworld and habitability only if trait planet restrictions changed."""
        before = self.generator.trait_planet_restriction(previous.species_traits)
        after = self.generator.trait_planet_restriction(updated.species_traits)
        if before == after:
            return updated

        origin = self._origin(updated)
        homeworld = self.generator.pick_homeworld(origin, updated.species_traits, updated.species_class)
        return updated.with_homeworld(homeworld, self.generator.pick_habitability_preference(origin, homeworld))

    def _try_generate(self) -> GeneratedEmpire | None:
        try:
            return self.generator.generate()
        except GenerationFailure as e:
            logger.debug("Fresh generation failed during reroll: %s", e)
            return None

    def _generate_until(self, accept: Callable[[GeneratedEmpire], bool]) -> GeneratedEmpire | None:
        for attempt in range(self.max_attempts):
            fresh = self._try_generate()
            if fresh is not None and accept(fresh):
                logger.debug("Accepted fresh empire after %d attempt(s)", attempt + 1)
                return fresh
        return None

    def _trait_cost(self, trait_id: str) -> int:
        trait = self.compat.find_trait(trait_id)
        return trait.cost if trait is not None else 0

    def _authority(self, empire: GeneratedEmpire) -> Authority:
        return _require(self.catalog.find_authority(empire.authority), "authority", empire.authority)

    def _origin(self, empire: GeneratedEmpire) -> Origin:
        return _require(self.catalog.find_origin(empire.origin), "origin", empire.origin)

    def _archetype(self, empire: GeneratedEmpire) -> SpeciesArchetype:
        return _require(self.catalog.find_archetype(empire.species_archetype), "archetype", empire.species_archetype)

    def _civics(self, empire: GeneratedEmpire) -> list[Civic]:
        return [_require(self.catalog.find_civic(c), "civic", c) for c in empire.civics]


def _require(entity, kind: str, entity_id: str):
    if entity is None:
        raise RerollFailure(kind, f"{kind} {entity_id} is not in the catalog")
    return entity


def _fits_empire(authority: Authority, empire: GeneratedEmpire, archetype: SpeciesArchetype) -> bool:
    """Gestalt authorities need gestalt ethics and the matching archetype robotic-ness."""
    if authority.is_gestalt != is_gestalt_ethics(empire.ethics):
        return False
    if authority.is_gestalt:
        return (authority.id == MACHINE_INTELLIGENCE) == archetype.robotic
    return not archetype.robotic


def _changed_fields(before: GeneratedEmpire, after: GeneratedEmpire) -> Iterable[str]:
    old, new = before.to_dict(), after.to_dict()
    return [key for key, value in new.items() if old[key] != value]
