"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the command-line pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: routesFile, match, origin, link, param, listRoutes, verbosity
        - env_check: routesPath, envOK
        - table_load: routeTable
        - tree_build: router
        - request_resolve: result
        - results_report: (no additions, terminal stage)

    Attributes:
        routesFile: Route table file given on the command line
        match: Location to match
        origin: Location of the state being left (for transitions)
        link: Route name to generate a link for
        param: KEY=VALUE parameter strings
        listRoutes: List the route table
        verbosity: Logging verbosity level (0-3)
        envOK: Environment validation passed
        routesPath: Resolved route table path
        routeTable: Validated route table
        router: Router built from the route table
        result: Output lines and exit status of the request
    """

    # CLI arguments
    routesFile: str = field(default="")
    match: Optional[str] = field(default=None)
    origin: Optional[str] = field(default=None)
    link: Optional[str] = field(default=None)
    param: List[str] = field(default_factory=list)
    listRoutes: bool = field(default=False)
    verbosity: int = field(default=1)

    # Pipeline state
    envOK: bool = field(default=False)
    routesPath: Path = field(default=Path("/"))
    routeTable: Optional[Any] = field(default=None)  # RouteTable at runtime
    router: Optional[Any] = field(default=None)  # Router at runtime
    result: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(cls: Type[PS], options: Namespace) -> PS:
        """
        Create ProgramState from an argparse Namespace.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        if filtered_options.get("param") is None:
            filtered_options["param"] = []
        return cls(**filtered_options)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            table_load,
            tree_build,
            request_resolve,
            results_report
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
