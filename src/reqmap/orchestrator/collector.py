from __future__ import annotations

from typing import Collection, Iterable

from reqmap.domain.models import Endpoint
from reqmap.extractors.spring.extractor import extract_attribute_sets
from reqmap.extractors.spring.parser import MethodDeclaration
from reqmap.resolve.combinator import combine


class EndpointCollector:
    """
    Append-only endpoint accumulator for one run.

    Files are fed one at a time; declarations from different files never interact.
    """

    def __init__(self, annotation_names: Collection[str]) -> None:
        self.annotation_names = frozenset(annotation_names)
        self.endpoints: list[Endpoint] = []
        # annotated methods dropped because no HTTP method resolved at any scope
        self.unresolved: list[str] = []

    def __len__(self) -> int:
        return len(self.endpoints)

    def collect(self, declarations: Iterable[MethodDeclaration], file_path: str) -> int:
        """Process one file's declarations. Returns how many endpoints were added."""
        before = len(self.endpoints)

        for decl in declarations:
            attribute_sets = extract_attribute_sets(decl, self.annotation_names)
            if attribute_sets is None:
                continue

            endpoints = combine(attribute_sets, file_path=file_path, declaration_id=decl.declaration_id)
            if not endpoints:
                self.unresolved.append(decl.declaration_id)
            self.endpoints.extend(endpoints)

        return len(self.endpoints) - before
