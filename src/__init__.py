"""
routetree - Hierarchical route matching and generation

Compiles bracket/brace route patterns to regular expressions, matches
locations against a tree of nested routes and generates links back from
route names and parameters.
"""

__version__ = "1.0.0"

from .lib import (
    Compiler,
    Parser,
    Route,
    Router,
    Transition,
    LOG,
    state_connectToLogger,
)
from .lib.errors import (
    RouteError,
    PatternError,
    PatternSyntaxError,
    DuplicateVariableError,
    RepeatCardinalityError,
    UnknownParentError,
    UnknownRouteError,
    MissingParameterError,
    PatternMismatchError,
    RouteTableError,
)

__all__ = [
    "Compiler",
    "Parser",
    "Route",
    "Router",
    "Transition",
    "LOG",
    "state_connectToLogger",
    "RouteError",
    "PatternError",
    "PatternSyntaxError",
    "DuplicateVariableError",
    "RepeatCardinalityError",
    "UnknownParentError",
    "UnknownRouteError",
    "MissingParameterError",
    "PatternMismatchError",
    "RouteTableError",
    "__version__",
]
