"""
Token tree and compiled rule models

Type-safe structures produced by the pattern parser and consumed by the
pattern compiler and the route tree.

A token tree is made of three token kinds:
- LiteralToken: text matched verbatim
- VariableToken: a {name} or {name:regex} placeholder
- GroupToken: a [...] optional or [...]*, [...]+ repeatable group

The root of every token tree is itself a GroupToken (optional=False,
greedy='') whose raw_pattern is the full pattern string.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class LiteralToken:
    """
    Literal text segment of a pattern

    Attributes:
        text: Text to match verbatim (e.g., "/post/")
    """
    text: str


@dataclass(frozen=True)
class VariableToken:
    """
    Placeholder variable of a pattern

    Attributes:
        name: Variable name (word characters only)
        pattern: Capture sub-pattern, either explicit ({id:[0-9]+} gives
                 "[0-9]+") or the default "[^/]+" built from the delimiter

    Example:
        "{id:[0-9]{8}}" → VariableToken(name="id", pattern="[0-9]{8}")
    """
    name: str
    pattern: str


@dataclass(frozen=True)
class GroupToken:
    """
    Bracketed group of a pattern (or the root of a token tree)

    Attributes:
        optional: Whether the group may be absent ('?' and '*' groups)
        greedy: Repetition suffix: '?', '*' or '+' ('' for the root)
        repeat: Name of the variable bound to a '*'/'+' group, None otherwise
        raw_pattern: Raw sub-pattern between the brackets
        children: Nested tokens in left-to-right order

    Example:
        "[/{id}]*" → GroupToken(
            optional=True, greedy="*", repeat="id", raw_pattern="/{id}",
            children=[LiteralToken("/"), VariableToken("id", "[^/]+")]
        )
    """
    optional: bool
    greedy: str
    repeat: Optional[str]
    raw_pattern: str
    children: List["Token"] = field(default_factory=list)

    @property
    def repeatable(self) -> bool:
        return self.greedy in ("*", "+")


Token = Union[LiteralToken, VariableToken, GroupToken]


@dataclass(frozen=True)
class VariableDescriptor:
    """
    Variable entry of a compiled rule

    Attributes:
        name: Variable name
        repeat_pattern: Raw sub-pattern of the repeatable group holding the
                        variable, None for ordinary variables. The repeated
                        run is split into values with it at match time.
    """
    name: str
    repeat_pattern: Optional[str] = None


@dataclass(frozen=True)
class CompiledRule:
    """
    Regular expression and ordered variables of a pattern

    The order of `variables` is the order of the capturing groups in `regex`
    (group 1 is variables[0]).

    Attributes:
        regex: Regular expression source (unanchored)
        variables: Variable descriptors, one per capturing group

    Example:
        "/test[/{name}[/{id:[0-9]+}]]" → CompiledRule(
            regex="/test(?:/([^/]+)(?:/([0-9]+))?)?",
            variables=[VariableDescriptor("name"), VariableDescriptor("id")]
        )
    """
    regex: str
    variables: List[VariableDescriptor] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [variable.name for variable in self.variables]
