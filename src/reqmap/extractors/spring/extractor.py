from __future__ import annotations

from typing import Collection, Optional

from reqmap.domain.models import RoutingAttributes
from reqmap.extractors.spring.parser import Annotation, MethodDeclaration


def routing_attributes(annotation: Annotation) -> RoutingAttributes:
    # `path` and its alias `value` are both honoured, path first
    paths = annotation.values("path", "string") + annotation.values("value", "string")
    methods = annotation.values("method", "symbol")
    return RoutingAttributes(methods=methods, paths=paths)


def extract_attribute_sets(
    declaration: MethodDeclaration,
    annotation_names: Collection[str],
) -> Optional[list[RoutingAttributes]]:
    """
    Return the routing attributes that apply to one method, class scope first.

    None means the method itself is not annotated and must be skipped,
    even when its enclosing type carries the annotation.
    """
    own = declaration.annotation(annotation_names)
    if own is None:
        return None

    sets: list[RoutingAttributes] = []
    enclosing = declaration.enclosing_annotation(annotation_names)
    if enclosing is not None:
        sets.append(routing_attributes(enclosing))
    sets.append(routing_attributes(own))
    return sets
