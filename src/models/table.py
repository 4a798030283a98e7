"""
Route table file models

A route table is a YAML document listing routes in declaration order.
Parents must be listed before their children:

    base_path: app
    routes:
      - name: post
        pattern: /post?{page}
        content:
          component: PostList
      - name: post.id
        pattern: /{id:[0-9]+}
        params:
          id: "1"
      - name: home
        pattern: /
        content:
          redirect_to: post
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RouteDefinition(BaseModel):
    """
    One route of a route table

    Attributes:
        name: Dotted route name
        pattern: Pattern fragment relative to the parent route
        content: Payload attached to the route
        params: Default parameters
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    pattern: str = ""
    content: Dict[str, Any] = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def name_check(cls, value: str) -> str:
        if any(not segment for segment in value.split(".")):
            raise ValueError(f"invalid dotted route name: {value!r}")
        return value


class RouteTable(BaseModel):
    """
    Route table document

    Attributes:
        base_path: Base path of the application (overrides the configured one)
        routes: Route definitions in declaration order
    """

    model_config = ConfigDict(extra="forbid")

    base_path: str | None = None
    routes: List[RouteDefinition] = Field(default_factory=list)
