from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class RoutingAttributes:
    """
    Routing intent declared by one annotation occurrence.

    Empty `methods` means "no HTTP method constraint at this scope".
    Empty `paths` means "no path added at this scope".
    Tuples keep declaration order and duplicates.
    """

    methods: tuple[str, ...] = ()
    paths: tuple[str, ...] = ()


class Endpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    http_method: str
    http_path: str
    file_path: str
    declaration_id: str  # com.example.UserController#list
