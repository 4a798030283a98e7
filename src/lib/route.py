"""
Route tree node

A Route owns one compiled pattern, its named children, free-form attached
data and a (non-owning) reference to its parent. The root route is created
empty; descendants are attached with add(), which compiles their pattern
immediately.

A child's pattern is its parent's pattern with the child's own fragment
appended after a single '/':

    root.add('post', '/post')        # pattern 'post'
    root.add('post.id', '/{id}')     # pattern 'post/{id}'

Matching walks the tree depth-first, first declared child first, and returns
the deepest route whose pattern fully matches the path. Generation walks the
token tree of a route and substitutes validated, percent-encoded values.
"""

import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import quote, unquote

from ..config import appsettings
from ..models.match import RouteMatch
from ..models.tokens import GroupToken, LiteralToken, VariableDescriptor
from . import querystring
from .compiler import Compiler, rule_make
from .errors import (
    MissingParameterError,
    PatternMismatchError,
    UnknownParentError,
    UnknownRouteError,
)
from .log import LOG
from .parser import Parser

# Query variables suffix: "?{foo}&{bar}" at the end of a pattern
QUERY_SUFFIX = re.compile(r'\?(\{\w+\}(?:&\{\w+\})*)$')
QUERY_NAME = re.compile(r'\{(\w+)\}')

# Characters left unescaped by percent-encoding of path values
SAFE_CHARS = "-_.!~*'()"

Names = Union[str, Sequence[str]]

_MISSING = object()


def pattern_split(pattern: str) -> Tuple[str, List[str]]:
    """
    Split the query variables suffix off a pattern

    Args:
        pattern: Route pattern, possibly ending with "?{a}&{b}"

    Returns:
        Tuple of the path pattern and the declared query variable names

    Example:
        >>> pattern_split('post/{id}?{foo}&{bar}')
        ('post/{id}', ['foo', 'bar'])
    """
    match = QUERY_SUFFIX.search(pattern)
    if not match:
        return pattern, []
    return pattern[:match.start()], QUERY_NAME.findall(match.group(1))


def names_split(names: Optional[Names]) -> List[str]:
    if names is None or (isinstance(names, str) and not names):
        raise ValueError("A route's name can't be empty.")
    if isinstance(names, str):
        return names.split('.')
    return list(names)


class Route:
    """
    Node of a route tree

    Attributes:
        name: Full dotted name from the root ('' for the root)
        params: Default parameters merged at generation and match time
        content: Opaque payload attached to the route (may hold 'redirect_to')
        parent: Parent route, None for the root
        children: Child routes by name segment, in declaration order
        delimiter: Path delimiter used for default captures
    """

    def __init__(
        self,
        name: str = '',
        pattern: str = '',
        content: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        parent: Optional["Route"] = None,
        delimiter: Optional[str] = None,
    ) -> None:
        self.name = name
        self.params: Dict[str, Any] = dict(params or {})
        self.content: Dict[str, Any] = content if content is not None else {}
        self.parent = parent
        self.children: Dict[str, Route] = {}
        self.delimiter = delimiter or appsettings.delimiter
        self._data: Dict[str, Any] = {}
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"Route(name={self.name!r}, pattern={self._pattern!r})"

    def __iter__(self) -> Iterator[Tuple[str, "Route"]]:
        return iter(list(self.children.items()))

    # ------------------------------------------------------------------
    # Pattern
    # ------------------------------------------------------------------

    @property
    def pattern(self) -> str:
        """Path pattern without leading '/' and without query suffix"""
        return self._pattern

    @pattern.setter
    def pattern(self, pattern: str) -> None:
        path_pattern, query_names = pattern_split(pattern or '')
        self._pattern = path_pattern.lstrip('/')
        self.query_names: List[str] = query_names

        self._token = Parser(self.delimiter).tokenize(self._pattern)
        self._rule = Compiler().compile(self._token)

        # Compiled once here, reused by every match()
        self._prefix_regex = re.compile(self._rule.regex)
        self._full_regex = re.compile('(?:' + self._rule.regex + ')/?')
        self._repeat_regexes: Dict[str, re.Pattern[str]] = {
            variable.name: re.compile(rule_make(variable.repeat_pattern, '/').regex)
            for variable in self._rule.variables
            if variable.repeat_pattern is not None
        }

    @property
    def token(self) -> GroupToken:
        return self._token

    @property
    def regex(self) -> str:
        return self._rule.regex

    @property
    def variables(self) -> List[VariableDescriptor]:
        return self._rule.variables

    def pattern_join(self, pattern: str) -> str:
        """
        Append a child pattern fragment to this route's pattern

        Example:
            For a route with pattern 'post':
            pattern_join('/{id}?{page}') → 'post/{id}?{page}'
        """
        fragment, query_names = pattern_split(pattern or '')
        fragment = fragment.lstrip('/')

        if self._pattern and fragment:
            joined = self._pattern + '/' + fragment
        else:
            joined = self._pattern or fragment

        if query_names:
            joined += '?' + '&'.join('{' + name + '}' for name in query_names)
        return joined

    # ------------------------------------------------------------------
    # Custom data
    # ------------------------------------------------------------------

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: Union[str, Mapping[str, Any]], value: Any = _MISSING) -> "Route":
        """
        Set one custom data value, or several from a mapping

        Args:
            name: Field name, or a mapping of field names to values
            value: Field value (omitted for bulk set)

        Returns:
            self

        Raises:
            TypeError: If a bulk set is given something other than a mapping
        """
        if value is not _MISSING:
            self._data[name] = value  # type: ignore[index]
            return self
        if not isinstance(name, Mapping):
            raise TypeError('A mapping is required to set data in bulk.')
        self._data.update(name)
        return self

    def isset(self, name: str) -> bool:
        return self._data.get(name) is not None

    def unset(self, name: str) -> "Route":
        self._data.pop(name, None)
        return self

    def clear(self) -> "Route":
        self._data = {}
        return self

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def hierarchy(self) -> List["Route"]:
        """
        Return all the route's ancestors followed by the route itself

        Returns:
            Root-first list of routes
        """
        routes: List[Route] = []
        current: Optional[Route] = self
        while current is not None:
            routes.insert(0, current)
            current = current.parent
        return routes

    def walk(self) -> Iterator["Route"]:
        """Yield all descendant routes, depth-first in declaration order"""
        for _, child in self:
            yield child
            yield from child.walk()

    def add(
        self,
        names: Names,
        pattern: str = '',
        content: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> "Route":
        """
        Add a descendant route

        Every segment of the dotted name but the last must already exist.

        Args:
            names: Dotted route name ('post.id') or list of name segments
            pattern: Pattern fragment, relative to the parent's pattern
            content: Payload attached to the route
            params: Default parameters of the route

        Returns:
            The created route

        Raises:
            ValueError: If the name is empty
            UnknownParentError: If an intermediate route is missing
            PatternError: If the resulting pattern does not compile
        """
        names = names_split(names)
        head = names[0]

        if len(names) > 1:
            if head not in self.children:
                raise UnknownParentError(head)
            return self.children[head].add(names[1:], pattern, content, params)

        if head in self.children:
            LOG(f"Replacing route '{head}' of '{self.name}'", level=2)

        child = Route(
            name=f"{self.name}.{head}" if self.name else head,
            pattern=self.pattern_join(pattern),
            content=content,
            params=params,
            parent=self,
            delimiter=self.delimiter,
        )
        self.children[head] = child
        LOG(f"Added route '{child.name}': {child.pattern} → {child.regex}", level=2)
        return child

    def fetch(self, names: Names) -> "Route":
        """
        Return a descendant route from its dotted name

        Args:
            names: Dotted route name or list of name segments
                   (an empty list returns this route)

        Raises:
            ValueError: If the name is None or an empty string
            UnknownRouteError: If a name segment is missing
        """
        route = self
        for name in names_split(names):
            if name not in route.children:
                raise UnknownRouteError(name, route.name)
            route = route.children[name]
        return route

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(
        self,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RouteMatch]:
        """
        Match a path against this route and its descendants

        The route's regex must match a prefix of the path before any child is
        tried; children are tried in declaration order and the first match
        wins. Without a matching child, the route itself must match the whole
        path (trailing slash optional).

        Args:
            path: Path without leading '/' (e.g. 'post/123')
            query: Parsed query string of the location
            query_params: Query variables accumulated from ancestor routes

        Returns:
            RouteMatch, or None if neither this route nor a descendant matches
        """
        if not self._prefix_regex.match(path):
            return None

        query = query or {}
        accumulated = dict(query_params or {})
        for name, value in self.queryParams_build(query).items():
            accumulated.setdefault(name, value)

        for _, child in self:
            result = child.match(path, query, accumulated)
            if result is not None:
                return result

        matches = self._full_regex.fullmatch(path)
        if not matches:
            return None

        LOG(f"Route '{self.name}' matched '{path}'", level=3)
        variables = self.variables_build(matches)
        return RouteMatch(route=self, params=self.params_merge(variables, accumulated))

    def variables_build(self, matches: "re.Match[str]") -> Dict[str, Any]:
        """
        Combine the route's variables with the regex matched values

        Values are percent-decoded. Repeatable variables are split into a
        list, one element per repetition; an element holding '/' is itself
        split into a list before its parts are decoded.

        Example:
            Pattern 'post[/{id}]*' matching 'post/1/2' → {'id': ['1', '2']}
            Pattern 'post[/{id}]' matching 'post'      → {'id': None}
            Pattern 'tag/{name}' matching 'tag/a%20b'  → {'name': 'a b'}
        """
        variables: Dict[str, Any] = {}

        for index, variable in enumerate(self.variables, start=1):
            value = matches.group(index)

            if variable.repeat_pattern is None:
                variables[variable.name] = unquote(value) if value else None
                continue

            values: List[Any] = []
            if value:
                for repetition in self._repeat_regexes[variable.name].finditer(value):
                    item = next((group for group in repetition.groups() if group is not None), None)
                    if item is None:
                        continue
                    if '/' in item:
                        values.append([unquote(part) for part in item.split('/')])
                    else:
                        values.append(unquote(item))
            variables[variable.name] = values

        return variables

    def params_merge(self, variables: Dict[str, Any], query_params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Merge defaults, query variables and path variables

        Path variables take precedence over query variables of the same name.
        An absent optional path variable (None or []) does not hide a default
        or query value.
        """
        params = dict(self.params)
        params.update(query_params)
        for name, value in variables.items():
            if (value is None or value == []) and name in params:
                continue
            params[name] = value
        return params

    def queryParams_build(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Pick the route's declared query variables out of a mapping

        Example:
            For pattern 'post/{id}?{foo}':
            queryParams_build({'foo': 'bar', 'bar': 'foo'}) → {'foo': 'bar'}
        """
        return {
            name: params[name]
            for name in self.query_names
            if params.get(name) is not None
        }

    def params_match(self, from_params: Mapping[str, Any], to_params: Mapping[str, Any]) -> bool:
        """Check the route's query variables are equal (as strings) in both mappings"""
        for name in self.query_names:
            if str(from_params.get(name)) != str(to_params.get(name)):
                return False
        return True

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def path(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Generate the route path

        Args:
            params: Variable values, merged over the route's defaults.
                    Repeatable variables take a list (or a single value).

        Returns:
            Path with a leading '/' ('' for an empty pattern)

        Raises:
            MissingParameterError: If a required variable has no value
            PatternMismatchError: If a value fails its capture pattern

        Example:
            Pattern 'foo[/{bar}]': path() → '/foo', path({'bar': 'baz'}) → '/foo/baz'
        """
        merged = {**self.params, **(params or {})}
        path = self.token_path(self._token, merged).lstrip('/')
        return '/' + path if path else path

    def token_path(self, token: GroupToken, params: Mapping[str, Any]) -> str:
        """
        Build the path of a token tree level

        Returns '' for the whole level as soon as one of its variables is
        missing and the level is optional.
        """
        path = ''

        for child in token.children:
            if isinstance(child, LiteralToken):
                path += child.text
                continue

            if isinstance(child, GroupToken):
                if child.repeat:
                    name = child.repeat
                    value = params.get(name)
                    if isinstance(value, (list, tuple)):
                        values = list(value)
                    else:
                        values = [] if value is None else [value]
                    if not values and not child.optional:
                        raise MissingParameterError(name, self.name, self._pattern)
                    for item in values:
                        path += self.token_path(child, {**params, name: item})
                else:
                    path += self.token_path(child, params)
                continue

            value = params.get(child.name)
            if value is None:
                if not token.optional:
                    raise MissingParameterError(child.name, self.name, self._pattern)
                return ''
            path += self.value_encode(child.name, child.pattern, value)

        return path

    @staticmethod
    def value_encode(name: str, pattern: str, value: Any) -> str:
        """
        Percent-encode a variable value and validate it against its pattern

        List values are encoded item by item and joined with '/'.

        Raises:
            PatternMismatchError: If the encoded value fails the pattern
        """
        parts = value if isinstance(value, (list, tuple)) else [value]
        encoded = '/'.join(quote(str(part), safe=SAFE_CHARS) for part in parts)
        if not re.fullmatch(pattern, encoded):
            raise PatternMismatchError(name, pattern, encoded)
        return encoded

    def link(
        self,
        params: Optional[Mapping[str, Any]] = None,
        *,
        base_path: Optional[str] = None,
        scope: Optional[str] = None,
        absolute: bool = False,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
        query: Union[str, Mapping[str, Any], None] = None,
    ) -> str:
        """
        Generate the route path with its prefixes

        Args:
            params: Variable values (see path())
            base_path: Application base path (defaults to the configured one)
            scope: Extra prefix inserted after the base path
            absolute: Prefix the link with scheme and host
            scheme: Scheme of absolute links (defaults to the configured one)
            host: Host of absolute links (defaults to the configured one)
            query: Query string or mapping appended after '?'

        Returns:
            The link

        Example:
            Pattern 'foo/{bar}' with base_path='app', absolute=True,
            scheme='https', host='www.example.com':
            link({'bar': 'baz'}) → 'https://www.example.com/app/foo/baz'
        """
        prefix = appsettings.basePath_normalize(base_path)
        if scope:
            prefix += '/' + scope.strip('/')
        link = (prefix + self.path(params)) or '/'

        if isinstance(query, str):
            query = querystring.parse(query)
        if query:
            serialized = querystring.serialize(query)
            if serialized:
                link += '?' + serialized

        if absolute:
            scheme = scheme or appsettings.default_scheme
            host = host or appsettings.default_host
            link = f"{scheme}://{host}{link}"
        return link
