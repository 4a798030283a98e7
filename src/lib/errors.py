"""
Exception hierarchy for route patterns and route trees

Every error is synchronous and fatal for the operation that raised it.
A path that matches no route is not an error: Route.match() returns None.
"""

from typing import Any


class RouteError(Exception):
    """Base class of all routetree errors"""
    pass


class PatternError(RouteError):
    """Raised when a pattern cannot be compiled"""
    pass


class PatternSyntaxError(PatternError, SyntaxError):
    """Raised when group brackets of a pattern are unbalanced"""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            f"Number of opening '[' and closing ']' does not match in `'{pattern}'`."
        )


class DuplicateVariableError(PatternError):
    """Raised when a variable name is declared twice in one pattern"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot use the same placeholder `{name}` twice.")


class RepeatCardinalityError(PatternError):
    """Raised when a repeatable group holds more than one variable"""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(
            f"Only a single placeholder is allowed in repeatable segments, got `'{pattern}'`."
        )


class UnknownParentError(RouteError, LookupError):
    """Raised by add() when an intermediate route of a dotted name is missing"""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing parent route `'{name}'`.")


class UnknownRouteError(RouteError, LookupError):
    """Raised by fetch() when a segment of a dotted name is missing"""

    def __init__(self, name: str, parent: str) -> None:
        self.name = name
        self.parent = parent
        super().__init__(f"Missing children route `'{name}'` for `'{parent}'`.")


class MissingParameterError(RouteError, ValueError):
    """Raised by path() when a required variable has no value"""

    def __init__(self, name: str, route: str, pattern: str) -> None:
        self.name = name
        self.route = route
        self.pattern = pattern
        super().__init__(
            f"Missing parameters `'{name}'` for route: `'{route}#/{pattern}'`."
        )


class PatternMismatchError(RouteError, ValueError):
    """Raised by path() when a value does not match its capture sub-pattern"""

    def __init__(self, name: str, pattern: str, value: Any) -> None:
        self.name = name
        self.pattern = pattern
        self.value = value
        super().__init__(
            f"Expected `'{name}'` to match `'{pattern}'`, but received `'{value}'`."
        )


class RouteTableError(RouteError):
    """Raised when a route table file cannot be loaded"""
    pass
