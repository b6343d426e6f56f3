"""Eligibility rules - typed requirement predicates, compiler and evaluator."""

from .model import (
    Nor,
    Not,
    Or,
    Requirement,
    RequirementBlock,
    RequirementCategory,
    Value,
)
from .compiler import compile_category, compile_requirements
from .evaluator import RequirementEvaluator, check_requirement, evaluate, evaluate_both

__all__ = [
    "Nor",
    "Not",
    "Or",
    "Requirement",
    "RequirementBlock",
    "RequirementCategory",
    "Value",
    "compile_category",
    "compile_requirements",
    "RequirementEvaluator",
    "check_requirement",
    "evaluate",
    "evaluate_both",
]
