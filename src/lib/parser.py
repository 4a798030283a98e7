"""
Parser for route pattern syntax

Transforms a route pattern string into a token tree.

The parser operates in two phases:
1. Splitting: Separate top-level [...] groups from literal text
2. Tokenizing: Extract {name} / {name:regex} variables from literal text
   and recurse into each group's sub-pattern

Pattern syntax:
- `{name}`          variable capturing [^/]+
- `{name:regex}`    variable with explicit capture (regex may hold balanced {})
- `[sub]`           optional group
- `[sub]*`          optional repeatable group (exactly one variable)
- `[sub]+`          required repeatable group (exactly one variable)

Example:
    >>> root = Parser().tokenize('/test/{param}')
    >>> root.children
    [LiteralToken(text='/test/'), VariableToken(name='param', pattern='[^/]+')]
"""

import re
from typing import List, Optional, Tuple, Union

from ..config import appsettings
from ..models.tokens import GroupToken, LiteralToken, Token, VariableToken
from .errors import PatternSyntaxError
from .log import LOG

# Start of a variable: "{name}" or "{name:" (capture follows)
VARIABLE_HEAD = re.compile(r'\{(\w+)(:|\})')

Segment = Union[str, Tuple[str, str]]


class Parser:
    """
    Parser for route patterns

    Handles:
    - Nested optional and repeatable groups
    - Variables with default or custom capture patterns
    - Braces inside custom captures (e.g. {id:[0-9]{8}})
    - Brackets inside custom captures (e.g. {id:[0-9]+} inside [...])
    """

    def __init__(self, delimiter: Optional[str] = None):
        """
        Initialize parser

        Args:
            delimiter: Path delimiter used to build the default capture
                       pattern; defaults to the configured delimiter
        """
        self.delimiter = delimiter or appsettings.delimiter

    @property
    def default_capture(self) -> str:
        return '[^' + re.escape(self.delimiter) + ']+'

    def tokenize(self, pattern: str) -> GroupToken:
        """
        Tokenize a route pattern into a token tree

        Args:
            pattern: Route pattern (e.g. "/post[/{id:[0-9]+}]*")

        Returns:
            Root GroupToken (optional=False, greedy='') holding the tokens

        Raises:
            PatternSyntaxError: If group brackets are unbalanced
        """
        children, _ = self.pattern_tokenize(pattern)
        LOG(f"Tokenized '{pattern}' into {len(children)} top-level tokens", level=3)
        return GroupToken(
            optional=False,
            greedy='',
            repeat=None,
            raw_pattern=pattern,
            children=children,
        )

    def pattern_tokenize(self, pattern: str) -> Tuple[List[Token], Optional[str]]:
        """
        Recursively tokenize a pattern

        Args:
            pattern: Pattern or group sub-pattern

        Returns:
            Tuple of the token list and the name of the last variable seen in
            the pattern (None when the pattern declares no variable). The last
            variable of a '*'/'+' group becomes that group's repeat variable.
        """
        tokens: List[Token] = []
        last: Optional[str] = None

        for part in self.split(pattern):
            if isinstance(part, str):
                segment_tokens, segment_last = self.segment_tokenize(part)
                tokens.extend(segment_tokens)
                last = segment_last or last
                continue

            sub_pattern, greedy = part
            children, inner_last = self.pattern_tokenize(sub_pattern)
            repeatable = greedy in ('*', '+')

            tokens.append(GroupToken(
                optional=greedy in ('?', '*'),
                greedy=greedy,
                repeat=inner_last if repeatable else None,
                raw_pattern=sub_pattern,
                children=children,
            ))
            last = inner_last or last

        return tokens, last

    def segment_tokenize(self, segment: str) -> Tuple[List[Token], Optional[str]]:
        """
        Tokenize a segment which holds no [...] group

        Literal text around variables is kept as separate LiteralTokens.

        Args:
            segment: Pattern text with groups filtered out

        Returns:
            Tuple of the token list and the last variable name (or None)

        Example:
            "post/id-{id}.json" → [LiteralToken("post/id-"),
                                   VariableToken("id", "[^/]+"),
                                   LiteralToken(".json")]
        """
        tokens: List[Token] = []
        literal = ''
        last: Optional[str] = None
        pos = 0

        while pos < len(segment):
            match = VARIABLE_HEAD.match(segment, pos)
            if not match:
                literal += segment[pos]
                pos += 1
                continue

            name = match.group(1)
            if match.group(2) == '}':
                capture = self.default_capture
                end = match.end()
            else:
                close = self.brace_findMatching(segment, pos)
                if close == -1:
                    # Unterminated capture, keep it as literal text
                    literal += segment[pos]
                    pos += 1
                    continue
                capture = segment[match.end():close] or self.default_capture
                end = close + 1

            if literal:
                tokens.append(LiteralToken(literal))
                literal = ''
            tokens.append(VariableToken(name=name, pattern=capture))
            last = name
            pos = end

        if literal:
            tokens.append(LiteralToken(literal))

        return tokens, last

    @staticmethod
    def brace_findMatching(text: str, start_pos: int) -> int:
        """
        Find matching closing brace using depth tracking

        Args:
            text: Text to scan
            start_pos: Character position of opening '{'

        Returns:
            Position of the matching '}', or -1 if the text ends first

        Example:
            For "{id:[0-9]{8}}" at position 0: returns 12

            Depth tracking: {1 id:[0-9] {2 8 }1 }0
        """
        depth = 1
        pos = start_pos + 1

        while pos < len(text):
            if text[pos] == '{':
                depth += 1
            elif text[pos] == '}':
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1

        return -1

    def split(self, pattern: str) -> List[Segment]:
        """
        Split a pattern into literal segments and top-level groups

        Literal segments are returned as strings, groups as a
        (sub_pattern, greedy) tuple where greedy is '?', '*' or '+'.
        {...} runs are copied verbatim so brackets inside a custom
        capture are not taken as group delimiters.

        Args:
            pattern: Route pattern

        Returns:
            List of segments in pattern order

        Raises:
            PatternSyntaxError: If '[' and ']' are unbalanced

        Example:
            "/user[/{id}]*" → ['/user', ('/{id}', '*')]
        """
        segments: List[Segment] = []
        buffer = ''
        opened = 0
        pos = 0
        length = len(pattern)

        while pos < length:
            char = pattern[pos]

            if char == '{':
                close = self.brace_findMatching(pattern, pos)
                end = length if close == -1 else close + 1
                buffer += pattern[pos:end]
                pos = end
                continue

            if char == '[':
                opened += 1
                if opened == 1:
                    if buffer:
                        segments.append(buffer)
                    buffer = ''
                else:
                    buffer += char
            elif char == ']':
                opened -= 1
                if opened < 0:
                    raise PatternSyntaxError(pattern)
                if opened == 0:
                    greedy = '?'
                    if pos + 1 < length and pattern[pos + 1] in ('*', '+'):
                        greedy = pattern[pos + 1]
                        pos += 1
                    segments.append((buffer, greedy))
                    buffer = ''
                else:
                    buffer += char
            else:
                buffer += char
            pos += 1

        if opened:
            raise PatternSyntaxError(pattern)
        if buffer:
            segments.append(buffer)

        return segments


def tokenize(pattern: str, delimiter: Optional[str] = None) -> GroupToken:
    """Tokenize a pattern with a default Parser"""
    return Parser(delimiter).tokenize(pattern)
