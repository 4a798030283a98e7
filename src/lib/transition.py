"""
Transition between two route tree states

Computes which routes are exited (disabled) and entered (enabled) when
moving from one matched route to another.

Two routes of the ancestor chains are considered the same state when they
are the same node, their query variables are string-equal in both parameter
mappings, and their generated links are identical under both mappings.

Example:
    With routes 'a', 'a.b' and 'a.c' and identical params:
    Transition(from_route=<a.b>, to_route=<a.c>).disabled() → [<a.b>]
    Transition(from_route=<a.b>, to_route=<a.c>).enabled()  → [<a.c>]
"""

from typing import Any, Dict, List, Mapping, Optional

from .errors import MissingParameterError, PatternMismatchError
from .log import LOG
from .route import Route


class Transition:
    """
    Pair of route tree states plus the target parameters

    Attributes:
        from_route: Route being left, None on the first transition
        to_route: Route being entered
        params: Parameters of the target state
        scope: Link scope used when comparing generated links
    """

    def __init__(
        self,
        from_route: Optional[Route],
        to_route: Route,
        params: Optional[Dict[str, Any]] = None,
        scope: Optional[str] = None,
    ) -> None:
        self.from_route = from_route
        self.to_route = to_route
        self.params: Dict[str, Any] = dict(params or {})
        self.scope = scope

    def __repr__(self) -> str:
        source = self.from_route.name if self.from_route else None
        return f"Transition(from={source!r}, to={self.to_route.name!r})"

    def junction_index(self, from_params: Optional[Mapping[str, Any]] = None) -> int:
        """
        Length of the common part of both ancestor chains

        Args:
            from_params: Parameters of the state being left

        Returns:
            Index of the first route that differs between the chains
        """
        if self.from_route is None:
            return 0

        from_params = from_params or {}
        origin = self.from_route.hierarchy()
        target = self.to_route.hierarchy()

        index = 0
        for source, destination in zip(origin, target):
            if source is not destination:
                break
            if not source.params_match(from_params, self.params):
                break
            if not self.links_equal(source, from_params):
                break
            index += 1

        LOG(f"{self!r} shares {index} route(s)", level=3)
        return index

    def links_equal(self, route: Route, from_params: Mapping[str, Any]) -> bool:
        """
        Check a route generates the same link under both parameter mappings

        A mapping which cannot generate the route's link (missing or
        mismatching variable) makes the route differ.
        """
        try:
            before = route.link(from_params, scope=self.scope)
            after = route.link(self.params, scope=self.scope)
        except (MissingParameterError, PatternMismatchError) as e:
            LOG(f"Route '{route.name}' cannot be compared: {e}", level=3)
            return False
        return before == after

    def disabled(self, from_params: Optional[Mapping[str, Any]] = None) -> List[Route]:
        """
        Routes to exit, deepest first

        Args:
            from_params: Parameters of the state being left
        """
        if self.from_route is None:
            return []
        origin = self.from_route.hierarchy()
        index = self.junction_index(from_params)
        return list(reversed(origin[index:]))

    def enabled(self, from_params: Optional[Mapping[str, Any]] = None) -> List[Route]:
        """
        Routes to enter, shallowest first

        Args:
            from_params: Parameters of the state being left
        """
        target = self.to_route.hierarchy()
        return target[self.junction_index(from_params):]

    def junction(self, from_params: Optional[Mapping[str, Any]] = None) -> Optional[Route]:
        """Return the deepest route kept active, parent of the first enabled one"""
        enabled = self.enabled(from_params)
        return enabled[0].parent if enabled else None
