"""
Compiler for route pattern token trees

Transforms a token tree into a single regular expression plus the ordered
list of variables bound to its capturing groups.

Compilation rules:
- Literal tokens are regex-escaped
- Variables become capturing groups around their capture pattern
- Optional groups become (?:<inner>)?
- Repeatable groups become ((?:<inner>)<greedy>): the whole repeated run is
  captured as one string and split into values at match time, since a
  regex group captures only its last repetition

Example:
    >>> Compiler().compile(Parser().tokenize('/test[/{name}[/{id:[0-9]+}]*]'))
    CompiledRule(regex='/test(?:/([^/]+)((?:/[0-9]+)*))?',
                 variables=[VariableDescriptor(name='name', repeat_pattern=None),
                            VariableDescriptor(name='id', repeat_pattern='/{id:[0-9]+}')])
"""

import re
from typing import List, Optional, Set

from ..models.tokens import (
    CompiledRule,
    GroupToken,
    LiteralToken,
    VariableDescriptor,
    VariableToken,
)
from .errors import DuplicateVariableError, RepeatCardinalityError
from .log import LOG
from .parser import Parser

# Characters escaped in literal pattern text
ESCAPE_CHARS = re.compile(r'[|\\{}()\[\]^$+*?.]')


def literal_escape(text: str) -> str:
    """Escape regex metacharacters of a literal pattern segment"""
    return ESCAPE_CHARS.sub(lambda match: '\\' + match.group(0), text)


class Compiler:
    """
    Compiles token trees to CompiledRule objects

    Responsibilities:
    - Compose the regex of nested groups
    - Keep variables in capturing group order
    - Reject duplicate variables anywhere in the tree
    - Reject repeatable groups with more than one variable
    """

    def compile(self, token: GroupToken, repeat_pattern: Optional[str] = None) -> CompiledRule:
        """
        Compile a token tree

        Args:
            token: Root (or group) token to compile
            repeat_pattern: Raw sub-pattern of the enclosing repeatable group,
                            set while compiling inside one. Variables are then
                            emitted as plain fragments since the group itself
                            captures the whole run.

        Returns:
            CompiledRule with the unanchored regex and its variables

        Raises:
            DuplicateVariableError: If a variable name appears twice
            RepeatCardinalityError: If a repeatable group has several variables
        """
        regex = ''
        variables: List[VariableDescriptor] = []
        seen: Set[str] = set()

        for child in token.children:
            if isinstance(child, LiteralToken):
                regex += literal_escape(child.text)

            elif isinstance(child, GroupToken):
                if child.repeatable and repeat_pattern is None:
                    rule = self.compile(child, repeat_pattern=child.raw_pattern)
                    if len(rule.variables) > 1:
                        raise RepeatCardinalityError(child.raw_pattern)
                    if rule.variables:
                        regex += '((?:' + rule.regex + ')' + child.greedy + ')'
                    else:
                        regex += '(?:' + rule.regex + ')' + child.greedy
                elif child.repeatable:
                    # Nested inside another repeatable group
                    rule = self.compile(child, repeat_pattern=repeat_pattern)
                    regex += '(?:' + rule.regex + ')' + child.greedy
                else:
                    rule = self.compile(child, repeat_pattern=repeat_pattern)
                    regex += '(?:' + rule.regex + ')?'

                for variable in rule.variables:
                    self.variable_declare(variable.name, seen)
                    variables.append(variable)

            elif isinstance(child, VariableToken):
                self.variable_declare(child.name, seen)
                if repeat_pattern is not None:
                    variables.append(VariableDescriptor(child.name, repeat_pattern))
                    regex += child.pattern
                else:
                    variables.append(VariableDescriptor(child.name))
                    regex += '(' + child.pattern + ')'

        return CompiledRule(regex=regex, variables=variables)

    @staticmethod
    def variable_declare(name: str, seen: Set[str]) -> None:
        if name in seen:
            raise DuplicateVariableError(name)
        seen.add(name)


def rule_make(pattern: str, delimiter: Optional[str] = None) -> CompiledRule:
    """
    Tokenize and compile a pattern in one step

    Args:
        pattern: Route pattern
        delimiter: Path delimiter (defaults to the configured one)

    Returns:
        CompiledRule for the pattern
    """
    rule = Compiler().compile(Parser(delimiter).tokenize(pattern))
    LOG(f"Compiled '{pattern}' → {rule.regex}", level=3)
    return rule
