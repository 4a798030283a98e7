"""
Route table loader

Reads a YAML route table, validates it and builds a Router from it.
"""

from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from ..models.table import RouteTable
from .errors import RouteTableError
from .log import LOG
from .router import Router


def table_load(path: Union[str, Path]) -> RouteTable:
    """
    Load and validate a route table file

    Args:
        path: Path to the YAML file

    Returns:
        Validated RouteTable

    Raises:
        RouteTableError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document: Any = yaml.safe_load(f)
    except OSError as e:
        raise RouteTableError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RouteTableError(f"Failed to parse {path}: {e}") from e

    if document is None:
        document = {}
    if isinstance(document, list):
        document = {'routes': document}

    try:
        table = RouteTable.model_validate(document)
    except ValidationError as e:
        raise RouteTableError(f"Invalid route table {path}: {e}") from e

    LOG(f"Loaded {len(table.routes)} route definitions from {path.name}", level=2)
    return table


def router_build(table: RouteTable) -> Router:
    """
    Build a Router from a route table

    Routes are added in file order, so parents must come first.

    Raises:
        UnknownParentError: If a route is listed before its parent
        PatternError: If a pattern does not compile
    """
    router = Router(base_path=table.base_path)
    for definition in table.routes:
        router.add(
            definition.name,
            definition.pattern,
            dict(definition.content),
            dict(definition.params),
        )
    return router
