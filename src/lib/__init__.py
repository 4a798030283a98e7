"""
routetree library: pattern parser and compiler, route tree, router, transitions
"""

from .parser import Parser
from .compiler import Compiler
from .route import Route
from .router import Router
from .transition import Transition
from .errors import RouteError
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "Route",
    "Router",
    "Transition",
    "RouteError",
    "LOG",
    "state_connectToLogger",
]
