"""
Models package for routetree

Contains data structures and type definitions for patterns, matches,
route tables and the command-line pipeline.
"""

from .state import ProgramState, pipeline
from .tokens import (
    LiteralToken,
    VariableToken,
    GroupToken,
    Token,
    VariableDescriptor,
    CompiledRule,
)
from .match import RouteMatch
from .table import RouteDefinition, RouteTable

__all__ = [
    "ProgramState",
    "pipeline",
    "LiteralToken",
    "VariableToken",
    "GroupToken",
    "Token",
    "VariableDescriptor",
    "CompiledRule",
    "RouteMatch",
    "RouteDefinition",
    "RouteTable",
]
