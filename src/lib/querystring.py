"""
Query string parsing and serialization

Maps a query string to an ordered dict of str or list-of-str values, and back.
Repeated keys and bracketed keys (`a[]=1&a[]=2`, `a[0]=1&a[1]=2`) become lists.
"""

import re
from typing import Any, Dict, List, Mapping, Tuple, Union
from urllib.parse import parse_qsl, urlencode

QueryValue = Union[str, List[str]]

# "name[]" or "name[<index>]"
BRACKET_KEY = re.compile(r'^(.+?)\[(\d*)\]$')


def parse(query: str) -> Dict[str, QueryValue]:
    """
    Parse a query string

    Args:
        query: Query string, with or without a leading '?'

    Returns:
        Ordered mapping of names to values

    Example:
        >>> parse('foo=bar&id[]=1&id[]=2')
        {'foo': 'bar', 'id': ['1', '2']}
    """
    result: Dict[str, QueryValue] = {}

    for key, value in parse_qsl(query.lstrip('?'), keep_blank_values=True):
        bracket = BRACKET_KEY.match(key)
        if bracket:
            name = bracket.group(1)
            current = result.get(name)
            if isinstance(current, list):
                current.append(value)
            elif current is None:
                result[name] = [value]
            else:
                result[name] = [current, value]
            continue

        current = result.get(key)
        if current is None:
            result[key] = value
        elif isinstance(current, list):
            current.append(value)
        else:
            result[key] = [current, value]

    return result


def serialize(params: Mapping[str, Any]) -> str:
    """
    Serialize a mapping to a query string (without leading '?')

    None values are skipped, lists use the `name[]=` form.

    Example:
        >>> serialize({'foo': 'bar', 'id': ['1', '2']})
        'foo=bar&id%5B%5D=1&id%5B%5D=2'
    """
    pairs: List[Tuple[str, str]] = []

    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{name}[]", str(item)) for item in value)
        else:
            pairs.append((name, str(value)))

    return urlencode(pairs)
