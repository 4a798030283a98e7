"""
Custom Pygments lexer for route pattern syntax highlighting

Used when listing a route table on the command line.

Token types:
- Text: Literal path text
- Punctuation: Braces of variables, brackets of groups
- Name.Variable: Variable names
- String.Regex: Custom capture patterns
- Operator: Group repetition suffixes (*, +)
- Keyword: Query suffix marker and separators (?, &)
- Name.Attribute: Query variable names
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Operator,
)


class RoutePatternLexer(RegexLexer):
    """
    Lexer for route patterns

    Example:
        post[/{id:[0-9]+}]*?{page}

    Tokens:
        post → Text
        [ → Punctuation
        { → Punctuation
        id → Name.Variable
        [0-9]+ → String.Regex
        ]* → Punctuation, Operator
        ? → Keyword
        page → Name.Attribute
    """

    name = 'RoutePattern'
    aliases = ['routepattern', 'route']
    filenames = []

    tokens = {
        'root': [
            # Query variables suffix
            (r'\?(?=\{\w+\})', Keyword, 'query'),

            # Variable with custom capture
            (r'(\{)(\w+)(:)', bygroups(Punctuation, Name.Variable, Punctuation), 'capture'),

            # Variable with default capture
            (r'(\{)(\w+)(\})', bygroups(Punctuation, Name.Variable, Punctuation)),

            # Group delimiters
            (r'\[', Punctuation),
            (r'(\])([*+])', bygroups(Punctuation, Operator)),
            (r'\]', Punctuation),

            # Everything else is literal text
            (r'[^?{}\[\]]+', Text),
            (r'.', Text),
        ],

        'capture': [
            # Nested braces inside a capture pattern (e.g. [0-9]{8})
            (r'\{', String.Regex, 'capture-nested'),
            (r'\}', Punctuation, '#pop'),
            (r'[^{}]+', String.Regex),
        ],

        'capture-nested': [
            (r'\{', String.Regex, '#push'),
            (r'\}', String.Regex, '#pop'),
            (r'[^{}]+', String.Regex),
        ],

        'query': [
            (r'(\{)(\w+)(\})', bygroups(Punctuation, Name.Attribute, Punctuation)),
            (r'&', Keyword),
            (r'.', Text),
        ],
    }


def get_lexer() -> RoutePatternLexer:
    """
    Get the RoutePatternLexer instance

    Returns:
        RoutePatternLexer instance ready for use with Pygments
    """
    return RoutePatternLexer()


def pattern_highlight(pattern: str) -> str:
    """
    Highlight a route pattern for terminal output

    Args:
        pattern: Route pattern

    Returns:
        Pattern with ANSI color codes, without trailing newline
    """
    return highlight(pattern, get_lexer(), TerminalFormatter()).rstrip('\n')
