"""
In-memory identifier reference graph for one package.

This is the reference implementation of the graph capability consumed by
grouping. Any object exposing the same methods (all_identifiers,
identifiers_from, identifiers_to, strongly_connected_components,
external_identifiers_from, without_test_identifiers) can be passed instead.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Set

from contextbundle.schemas import ExternalID
from .components import strongly_connected_components, weakly_connected_components


class DependencyGraph:
    """
    Directed graph of package-level identifiers.

    An edge X -> Y means "X references Y". Edges to identifiers that are not
    part of the package are dropped; references into other packages are kept
    separately as ExternalIDs.
    """

    def __init__(
        self,
        uses: Mapping[str, Iterable[str]],
        identifiers: Optional[Iterable[str]] = None,
        test_identifiers: Iterable[str] = (),
        external_uses: Optional[Mapping[str, Iterable[ExternalID]]] = None,
    ):
        """
        Initialize the graph.

        Args:
            uses: Forward references (identifier -> identifiers it references)
            identifiers: All identifiers of the package. Defaults to every
                identifier mentioned in `uses`.
            test_identifiers: Identifiers declared in test files
            external_uses: References leaving the package
        """
        if identifiers is None:
            known: Set[str] = set(uses)
            for targets in uses.values():
                known.update(targets)
        else:
            known = set(identifiers)

        self._identifiers: Set[str] = known
        self._test_identifiers: Set[str] = set(test_identifiers) & known

        self._uses: Dict[str, Set[str]] = {}
        self._used_by: Dict[str, Set[str]] = {}
        for source, targets in uses.items():
            if source not in known:
                continue
            for target in targets:
                if target not in known:
                    continue
                self._uses.setdefault(source, set()).add(target)
                self._used_by.setdefault(target, set()).add(source)

        self._external_uses: Dict[str, Set[ExternalID]] = {}
        for source, refs in (external_uses or {}).items():
            if source in known:
                self._external_uses[source] = set(refs)

    def all_identifiers(self) -> List[str]:
        return sorted(self._identifiers)

    def is_test_identifier(self, identifier: str) -> bool:
        return identifier in self._test_identifiers

    def identifiers_from(self, identifier: str) -> List[str]:
        """Identifiers that `identifier` references (forward edges)."""
        return sorted(self._uses.get(identifier, ()))

    def identifiers_to(self, identifier: str) -> List[str]:
        """Identifiers that reference `identifier` (backward edges)."""
        return sorted(self._used_by.get(identifier, ()))

    def external_identifiers_from(self, identifier: str) -> List[ExternalID]:
        """References from `identifier` into other packages, sorted by (import path, id)."""
        refs = self._external_uses.get(identifier, ())
        return sorted(refs, key=lambda ref: (ref.import_path, ref.id))

    def strongly_connected_components(self) -> List[Set[str]]:
        return strongly_connected_components(self._identifiers, self._uses)

    def weakly_connected_components(self) -> List[Set[str]]:
        return weakly_connected_components(self._identifiers, self._uses)

    def without_identifiers(self, identifiers: Iterable[str]) -> "DependencyGraph":
        """Return a copy of the graph with `identifiers` (and their edges) removed."""
        removed = set(identifiers)
        remaining = self._identifiers - removed
        return DependencyGraph(
            uses={source: targets for source, targets in self._uses.items() if source in remaining},
            identifiers=remaining,
            test_identifiers=self._test_identifiers - removed,
            external_uses={
                source: refs for source, refs in self._external_uses.items() if source in remaining
            },
        )

    def without_test_identifiers(self) -> "DependencyGraph":
        return self.without_identifiers(self._test_identifiers)

    def __len__(self) -> int:
        return len(self._identifiers)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._identifiers
