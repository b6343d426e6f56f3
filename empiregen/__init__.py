"""
Empiregen - Random Empire Generator

A rules-driven generator that builds one consistent empire configuration
from a catalog of rule-gated game entities. The package provides:
- A parser for the nested-block game data dialect
- Typed eligibility requirements and their evaluator
- Catalog extraction from parsed game files
- Weighted random generation and a single-use reroll engine
"""

__version__ = "0.1.0"
