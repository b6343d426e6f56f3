"""
Empiregen CLI - Command-line interface for the generator.

Usage:
    empiregen generate [game_path]              Generate a random empire
    empiregen generate [game_path] --reroll X   ...then spend the reroll on X
    empiregen validate [game_path]              Load and validate the catalog
    empiregen parse <file>                      Dump a parsed data file

game_path defaults to $EMPIREGEN_GAME_PATH.
"""

import argparse
import json
import logging
import random
import sys

from .config import Settings
from .engine_core.reroll import RerollCategory


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Empiregen - Random Empire Generator",
        prog="empiregen",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a random empire")
    generate_parser.add_argument("game_path", nargs="?", help="Game installation directory")
    generate_parser.add_argument("--seed", type=int, help="Seed the random source")
    generate_parser.add_argument("--reroll", choices=[c.value for c in RerollCategory],
                                 help="Reroll one category after generating")
    generate_parser.add_argument("--trait", help="Trait id for --reroll trait")
    generate_parser.add_argument("--json", action="store_true", help="Print JSON")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate the entity catalog")
    validate_parser.add_argument("game_path", nargs="?", help="Game installation directory")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse one data file and print its tree")
    parse_parser.add_argument("file", help="Path to a data file")

    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.command == "generate":
        cmd_generate(args)
    elif args.command == "validate":
        cmd_validate(args)
    elif args.command == "parse":
        cmd_parse(args)
    else:
        parser.print_help()
        sys.exit(1)


def _game_path(args, settings: Settings) -> str:
    game_path = args.game_path or settings.game_path
    if not game_path:
        print("Error: no game path given and EMPIREGEN_GAME_PATH is not set")
        sys.exit(1)
    return game_path


def cmd_generate(args):
    """Generate an empire and optionally reroll one category."""
    from .api import APIService, ErrorResponse, RerollRequest
    from .catalog import CatalogValidationError, load_catalog

    settings = Settings.from_env()
    try:
        catalog = load_catalog(_game_path(args, settings))
    except CatalogValidationError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"  - {error}")
        sys.exit(1)

    rng = random.Random(args.seed) if args.seed is not None else random.Random()
    service = APIService(catalog=catalog, config=settings.generator, rng=rng)

    response = service.generate()
    if not isinstance(response, ErrorResponse) and args.reroll:
        response = service.reroll(
            response.session_id,
            RerollRequest(category=args.reroll, trait_id=args.trait),
        )

    if isinstance(response, ErrorResponse):
        print(f"Error [{response.error_code.value}]: {response.error}")
        sys.exit(2)

    if args.json:
        print(json.dumps(response.model_dump(mode="json"), indent=2))
    else:
        _print_empire(response.empire)


def _print_empire(empire):
    print(f"Ethics:      {', '.join(empire.ethics)}")
    print(f"Authority:   {empire.authority}")
    print(f"Civics:      {', '.join(empire.civics)}")
    print(f"Origin:      {empire.origin}")
    print(f"Species:     {empire.species_class} ({empire.species_archetype})")
    print(f"Traits:      {', '.join(empire.species_traits) or '-'} "
          f"[{empire.trait_points_used}/{empire.trait_points_budget}]")
    print(f"Homeworld:   {empire.homeworld} (prefers {empire.habitability_preference})")
    print(f"Shipset:     {empire.shipset}")
    print(f"Leader:      {empire.leader_class} {', '.join(empire.leader_traits)}".rstrip())
    if empire.secondary_species:
        secondary = empire.secondary_species
        traits = secondary.enforced_traits + secondary.additional_traits
        print(f"Secondary:   {secondary.species_class} ({', '.join(traits) or '-'})")


def cmd_validate(args):
    """Load the catalog and report validation results."""
    from .catalog import Catalog, validate_catalog
    from .parser import GameFiles

    settings = Settings.from_env()
    catalog = Catalog.from_game_files(GameFiles.load(_game_path(args, settings)))
    result = validate_catalog(catalog)

    for kind, count in catalog.summary().items():
        print(f"{kind:>20}: {count}")

    if result.warnings:
        print("\nWarnings:")
        for warning in result.warnings:
            print(f"  - {warning}")

    if result.errors:
        print("\nErrors:")
        for error in result.errors:
            print(f"  - {error}")
        sys.exit(1)

    print("\nCatalog is valid.")


def cmd_parse(args):
    """Parse one file and print its tree."""
    from .parser import ParseError, TokenizeError, parse_file

    try:
        root = parse_file(args.file, {})
    except FileNotFoundError:
        print(f"Error: File not found: {args.file}")
        sys.exit(1)
    except (TokenizeError, ParseError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    for node in root.children:
        _print_node(node, 0)


def _print_node(node, depth: int):
    indent = "    " * depth
    if node.is_bare_value:
        print(f"{indent}{node.value}")
    elif node.is_leaf:
        print(f"{indent}{node.key} = {node.value}")
    else:
        print(f"{indent}{node.key} = {{")
        for child in node.children:
            _print_node(child, depth + 1)
        print(f"{indent}}}")


if __name__ == "__main__":
    main()
