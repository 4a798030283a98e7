"""
Router: route tree facade

Owns the root route and the application base path, resolves locations to
transitions and route names to links. Listening for location changes,
history manipulation and event emission are left to the embedding
application, which reports completed transitions back with commit().

Example:
    >>> router = Router()
    >>> router.add('post', 'post/{id}')
    Route(name='post', pattern='post/{id}')
    >>> transition = router.match('/post/123?page=2')
    >>> transition.to_route.name, transition.params
    ('post', {'id': '123'})
    >>> router.link('post', {'id': '456'})
    '/post/456'
"""

import re
from typing import Any, Dict, Mapping, Optional, Union

from ..config import appsettings
from . import querystring
from .log import LOG
from .route import Names, Route, names_split
from .transition import Transition

# Absolute or protocol-relative URL
ABSOLUTE_URL = re.compile(r'^(?:[a-z][a-z0-9+.-]*:)?//', re.IGNORECASE)


class Router:
    """
    Resolves locations and route names against a route tree

    Attributes:
        base_path: Normalized base path ('' or '/app')
        route: Root of the route tree
        current_route: Route of the last committed transition
        current_params: Parameters of the last committed transition
    """

    def __init__(self, base_path: Optional[str] = None, delimiter: Optional[str] = None) -> None:
        self.base_path = appsettings.basePath_normalize(base_path)
        self._base_path_regex = re.compile(
            '^(' + re.escape(self.base_path) + '$|' + re.escape(self.base_path) + '/)'
        )
        self.route = Route(delimiter=delimiter)
        self.current_route: Optional[Route] = None
        self.current_params: Dict[str, Any] = {}

    def add(
        self,
        name: Names,
        pattern: str = '',
        content: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Route:
        """Add a route to the tree (see Route.add())"""
        return self.route.add(name, pattern, content, params)

    def fetch(self, name: Names) -> Route:
        """Return a route from its dotted name (see Route.fetch())"""
        return self.route.fetch(name)

    def location_normalize(self, location: str) -> str:
        """
        Strip the base path and a trailing index file from a location

        Example:
            With base path '/app': '/app/post/1' → '/post/1', '/app/index.html' → '/'
        """
        path, _, query = location.partition('?')
        path = '/' + path.lstrip('/')
        if self.base_path:
            path = '/' + self._base_path_regex.sub('', path, count=1)
        index = appsettings.index_file
        if index and path.endswith('/' + index):
            path = path[:-len(index)]
        path = '/' + path.lstrip('/')
        return path + ('?' + query if query else '')

    def match(self, location: str) -> Optional[Transition]:
        """
        Return the transition to the route matching a location

        Redirections declared through a 'redirect_to' content key are
        followed. The transition starts from the current route.

        Args:
            location: Path with an optional query string ('/post/1?page=2')

        Returns:
            Transition, or None if no route matches
        """
        location = self.location_normalize(location)
        path, _, query = location.partition('?')
        result = self.route.match(path.lstrip('/'), querystring.parse(query) if query else {})

        if result is None:
            LOG(f"No route matches '{location}'", level=2)
            return None

        route = self.redirects_follow(result.route)
        LOG(f"'{location}' matches route '{route.name}'", level=2)
        return Transition(
            from_route=self.current_route,
            to_route=route,
            params=result.params,
        )

    def redirects_follow(self, route: Route) -> Route:
        seen = {route.name}
        while route.content.get('redirect_to'):
            target = route.content['redirect_to']
            if target in seen:
                raise ValueError(f"Redirection loop on route `'{target}'`.")
            seen.add(target)
            route = self.route.fetch(target)
        return route

    def commit(self, transition: Transition) -> None:
        """Record a completed transition as the current state"""
        self.current_route = transition.to_route
        self.current_params = dict(transition.params)

    def is_active(self, name: str, params: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Check if a route (or one of its descendants) is the current route

        Args:
            name: Dotted route name
            params: Parameters which must equal (as strings) the current ones
        """
        if self.current_route is None:
            return False
        current = self.current_route.name
        if name != current and not current.startswith(name + '.'):
            return False
        for key, value in (params or {}).items():
            if str(self.current_params.get(key)) != str(value):
                return False
        return True

    def link(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        query: Union[str, Mapping[str, Any], None] = None,
        **options: Any,
    ) -> str:
        """
        Generate a link from a route name

        Args:
            name: Dotted route name, '.' for the current route, or an
                  absolute URL returned unchanged
            params: Variable values
            query: Query string or mapping; defaults to the declared query
                   variables of the route chain picked out of params
            **options: base_path, scope, absolute, scheme, host (see Route.link())

        Raises:
            ValueError: If '.' is used with no current route
            UnknownRouteError: If the route does not exist
        """
        if name and ABSOLUTE_URL.match(name):
            return name

        if name == '.':
            if self.current_route is None:
                raise ValueError("No current route available, the `'.'` shortcut can't be used.")
            name = self.current_route.name

        params = params or {}
        route = self.redirects_follow(self.route.fetch(name))

        if query is None:
            query = self.queryParams_build(route.name, params)

        options.setdefault('base_path', self.base_path)
        return route.link(params, query=query, **options)

    def queryParams_build(self, name: Names, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Pick the declared query variables of a route chain out of params

        Example:
            With routes 'post' ('post?{page}') and 'post.id' ('/{id}?{tab}'):
            queryParams_build('post.id', {'id': 1, 'page': 2, 'tab': 'x'})
            → {'page': 2, 'tab': 'x'}
        """
        result: Dict[str, Any] = {}
        route = self.route
        for segment in names_split(name):
            route = route.fetch([segment])
            result.update(route.queryParams_build(params))
        return result
