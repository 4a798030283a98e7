#!/usr/bin/env python3
"""
routetree - Hierarchical route matching and generation

Command-line front end over a YAML route table: list its routes, match a
location against it, compute the transition from a previous location, or
generate a link from a route name.

Usage:
    routetree routes.yaml --list
    routetree routes.yaml --match '/post/12?page=2'
    routetree routes.yaml --from /post/12 --match /post/13
    routetree routes.yaml --link post.id --param id=12

Exit status:
    0 on success, 1 on errors, 2 when the location matches no route
"""

import json
import sys
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .config import appsettings
from .lib import LOG, RouteError, state_connectToLogger
from .lib.lexer import pattern_highlight
from .lib.table import router_build, table_load as routeTable_load
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="routetree - match locations and generate links from a route table",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("routesFile", type=str, help="YAML route table file")

parser.add_argument("--list", dest="listRoutes", action="store_true", help="List the route table")

parser.add_argument("--match", default=None, type=str, help="Location to match (path and query)")

parser.add_argument(
    "--from",
    dest="origin",
    default=None,
    type=str,
    help="Location of the state being left, used with --match to compute a transition",
)

parser.add_argument("--link", default=None, type=str, help="Dotted route name to generate a link for")

parser.add_argument(
    "--param",
    action="append",
    default=[],
    type=str,
    help="Link parameter as KEY=VALUE (repeat a KEY for list values)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def params_parse(pairs: List[str]) -> Dict[str, Any]:
    """
    Turn KEY=VALUE strings into a parameter mapping

    A key given several times maps to the list of its values.

    Example:
        ['id=1', 'tag=a', 'tag=b'] → {'id': '1', 'tag': ['a', 'b']}
    """
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the route table path.

    Exits:
        1 if the route table file does not exist
    """
    state = inputstate.copy()
    LOG("Checking environment...", level=2)

    routes_path = Path(state.routesFile)
    if not routes_path.is_file():
        print(f"Error: Route table not found: {routes_path}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.routesPath = routes_path
    state.envOK = True
    LOG(f"Route table: {routes_path}", level=2)
    return state


def table_load(inputstate: ProgramState) -> ProgramState:
    """
    Read and validate the route table.

    Exits:
        1 if the file cannot be parsed or fails validation
    """
    state = inputstate.copy()
    try:
        state.routeTable = routeTable_load(state.routesPath)
    except RouteError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def tree_build(inputstate: ProgramState) -> ProgramState:
    """
    Build the route tree, compiling every pattern.

    Exits:
        1 if a pattern is invalid or a parent route is missing
    """
    state = inputstate.copy()
    try:
        state.router = router_build(state.routeTable)
    except RouteError as e:
        print(f"Route table error: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"Built route tree with {len(state.routeTable.routes)} routes", level=1)
    return state


def routes_list(router: Any) -> List[str]:
    lines = []
    for route in router.route.walk():
        pattern = route.pattern
        if route.query_names:
            pattern += "?" + "&".join("{" + name + "}" for name in route.query_names)
        shown = pattern_highlight(pattern) if appsettings.highlight_patterns else pattern
        lines.append(f"{route.name:<24} /{shown}")
    return lines


def match_describe(router: Any, location: str, origin: Optional[str]) -> Optional[List[str]]:
    from_params: Dict[str, Any] = {}
    if origin:
        previous = router.match(origin)
        if previous is None:
            raise ValueError(f"No route matches the --from location {origin!r}")
        router.commit(previous)
        from_params = previous.params

    transition = router.match(location)
    if transition is None:
        return None

    return [
        f"route:    {transition.to_route.name}",
        f"params:   {json.dumps(transition.params, sort_keys=True)}",
        f"disabled: {[route.name for route in transition.disabled(from_params)]}",
        f"enabled:  {[route.name for route in transition.enabled(from_params)]}",
    ]


def request_resolve(inputstate: ProgramState) -> ProgramState:
    """
    Run the requested operations against the route tree.

    Returns:
        ProgramState with added field:
            - result: Dict containing:
                - lines: List[str] output lines
                - status: int exit status

    Exits:
        1 if link generation or parameter parsing fails
    """
    state = inputstate.copy()
    router = state.router
    lines: List[str] = []
    status = 0

    try:
        if state.listRoutes:
            lines.extend(routes_list(router))

        if state.match:
            described = match_describe(router, state.match, state.origin)
            if described is None:
                print(f"No route matches {state.match!r}", file=sys.stderr)
                status = 2
            else:
                lines.extend(described)

        if state.link:
            lines.append(router.link(state.link, params_parse(state.param)))
    except (RouteError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    state.result = {"lines": lines, "status": status}
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Print the request results.

    Exits:
        1 if result is None
    """
    state = inputstate.copy()
    if state.result is None:
        print("Error: No result available", file=sys.stderr)
        sys.exit(1)

    for line in state.result["lines"]:
        print(line)
    return state


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - resolve a request against a route table.

    Orchestrates the pipeline:
        1. env_check: Validate the route table path
        2. table_load: Read and validate the YAML route table
        3. tree_build: Build the route tree
        4. request_resolve: List, match and link
        5. results_report: Print results

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit status
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    final = pipeline(state, env_check, table_load, tree_build, request_resolve, results_report)
    return final.result["status"] if final.result else 1


if __name__ == "__main__":
    sys.exit(main())
