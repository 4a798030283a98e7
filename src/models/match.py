"""
Route matching result model
"""

from dataclasses import dataclass, field
from typing import Any, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.route import Route


@dataclass
class RouteMatch:
    """
    Result of a successful Route.match()

    Attributes:
        route: Deepest route whose pattern fully matched the path
        params: Defaults, declared query variables and path variables merged
                (path variables win over query variables of the same name)

    Example:
        For pattern "post/{id}?{foo}" matching "post/123" with query {"foo": "bar"}:
        RouteMatch(route=<Route post>, params={"id": "123", "foo": "bar"})
    """
    route: "Route"
    params: Dict[str, Any] = field(default_factory=dict)
