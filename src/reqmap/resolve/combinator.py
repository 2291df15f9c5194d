from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from reqmap.domain.models import Endpoint, RoutingAttributes

X = TypeVar("X")
Y = TypeVar("Y")
R = TypeVar("R")


def cartesian_product(xs: Sequence[X], ys: Sequence[Y], combine: Callable[[X, Y], R]) -> list[R]:
    # x-major: every y for the first x, then every y for the second x, ...
    return [combine(x, y) for x in xs for y in ys]


def fold_paths(attribute_sets: Sequence[RoutingAttributes]) -> list[str]:
    """
    Concatenate path templates scope by scope, outermost first.

    A scope without paths keeps the accumulated paths as they are.
    No separator is inserted and nothing is normalized or deduplicated.
    """
    acc: list[str] = [""]
    for attrs in attribute_sets:
        if not attrs.paths:
            continue
        acc = cartesian_product(acc, attrs.paths, lambda outer, inner: outer + inner)
    return acc


def fold_methods(attribute_sets: Sequence[RoutingAttributes]) -> list[str]:
    """
    Inner scopes override outer ones; a scope without methods is transparent.
    """
    acc: list[str] = []
    for attrs in attribute_sets:
        if attrs.methods:
            acc = list(attrs.methods)
    return acc


def combine(
    attribute_sets: Sequence[RoutingAttributes],
    file_path: str,
    declaration_id: str,
) -> list[Endpoint]:
    """
    attribute_sets must be ordered class scope first, then method scope.
    Returns an empty list when no HTTP method resolves at any scope.
    """
    methods = fold_methods(attribute_sets)
    paths = fold_paths(attribute_sets)
    return cartesian_product(
        methods,
        paths,
        lambda method, path: Endpoint(
            http_method=method,
            http_path=path,
            file_path=file_path,
            declaration_id=declaration_id,
        ),
    )
