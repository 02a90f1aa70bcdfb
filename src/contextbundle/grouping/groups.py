"""
Identifier grouping.

Collapses a package's identifier reference graph into IdentifierGroups:
- identifiers that form a cycle (a strongly connected component) share a group
- identifiers declared in the same block (`const ( ... )`) share a group
- everything else gets its own group

The resulting groups, linked by DirectDeps/UsedByDeps, form a DAG that
contexts are built from.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from contextbundle.exceptions import ConfigError, MissingSnippetError, SnippetLookupError
from contextbundle.identifiers import PACKAGE_IDENTIFIER, is_exported_identifier
from contextbundle.logging_config import logger
from contextbundle.schemas import Snippet
from contextbundle.snippets import SnippetModule, SnippetPackage, synthetic_package_snippet
from contextbundle.tokens import CountTokensFunc
from contextbundle.tracing import trace
from .config import GroupOptions, get_group_options
from .policy import identifier_is_documented


@dataclass(eq=False)
class IdentifierGroup:
    """
    A set of identifiers included in or excluded from a context as one unit.

    Groups compare and hash by identity: they are shared by reference across
    every Context built from the same grouping run.
    """

    ids: List[str]
    snippets: Dict[str, Snippet] = field(default_factory=dict)
    body_tokens: int = 0  # docs, signatures and bodies of the distinct snippets
    snippet_tokens: int = 0  # docs and signatures only
    is_documented: bool = False  # every id is documented; external groups always are
    is_test_file: bool = False

    # Groups this group references. Includes external groups.
    direct_deps: List["IdentifierGroup"] = field(default_factory=list)

    # Groups that reference this group. Never contains external groups, and
    # external groups never have any.
    used_by_deps: List["IdentifierGroup"] = field(default_factory=list)

    is_external: bool = False
    external_import_path: str = ""

    @property
    def lead_id(self) -> str:
        return self.ids[0] if self.ids else ""

    def get_snippet(self, identifier: str) -> Snippet:
        """Return the snippet for a member id; asking for a non-member is a programming error."""
        snippet = self.snippets.get(identifier)
        if snippet is None:
            raise SnippetLookupError(identifier, self.ids)
        return snippet

    def distinct_snippets(self) -> List[Snippet]:
        """The group's snippets in id order, each shared snippet once."""
        seen = set()
        distinct = []
        for identifier in self.ids:
            snippet = self.snippets.get(identifier)
            if snippet is None or id(snippet) in seen:
                continue
            seen.add(id(snippet))
            distinct.append(snippet)
        return distinct

    def all_direct_deps_documented(self) -> bool:
        """True if every direct (not transitive) dependency is documented."""
        return all(dep.is_documented for dep in self.direct_deps)

    def has_exported_identifier(self) -> bool:
        return any(is_exported_identifier(i) for i in self.ids)

    def is_package_group(self) -> bool:
        return self.ids == [PACKAGE_IDENTIFIER]

    def to_dict(self) -> Dict[str, Any]:
        """Summarize the group (edges by lead id) for JSON output."""
        return {
            "ids": list(self.ids),
            "body_tokens": self.body_tokens,
            "snippet_tokens": self.snippet_tokens,
            "is_documented": self.is_documented,
            "is_test_file": self.is_test_file,
            "is_external": self.is_external,
            "external_import_path": self.external_import_path,
            "direct_deps": [dep.lead_id for dep in self.direct_deps],
            "used_by_deps": [dep.lead_id for dep in self.used_by_deps],
        }

    def __repr__(self) -> str:
        # Edges are summarized; a full repr would recurse through the graph.
        prefix = f"{self.external_import_path}." if self.is_external else ""
        return (
            f"IdentifierGroup({prefix}{','.join(self.ids)}, "
            f"deps={len(self.direct_deps)}, used_by={len(self.used_by_deps)})"
        )


@dataclass
class GroupingStats:
    """Counters describing one grouping run."""
    group_count: int = 0
    cyclic_groups: int = 0
    block_groups: int = 0
    external_groups: int = 0
    documented_groups: int = 0
    has_package_group: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_count": self.group_count,
            "cyclic_groups": self.cyclic_groups,
            "block_groups": self.block_groups,
            "external_groups": self.external_groups,
            "documented_groups": self.documented_groups,
            "has_package_group": self.has_package_group,
        }


def sort_by_lead_id(groups: Iterable[IdentifierGroup]) -> List[IdentifierGroup]:
    """Sort groups by lead id; external groups sort after same-named internal ones."""
    return sorted(groups, key=lambda g: (g.lead_id, g.is_external, g.external_import_path))


def filter_groups_for_identifiers(
    groups: Sequence[IdentifierGroup],
    identifiers: Iterable[str],
) -> List[IdentifierGroup]:
    """
    Return the groups containing at least one of the identifiers.

    Input order is preserved and each group appears at most once.
    """
    wanted = set(identifiers)
    if not wanted or not groups:
        return []
    return [g for g in groups if any(i in wanted for i in g.ids)]


@trace
def build_groups(
    graph,
    package: SnippetPackage,
    options: Optional[GroupOptions] = None,
    module: Optional[SnippetModule] = None,
) -> List[IdentifierGroup]:
    """
    Build identifier groups for a package.

    Args:
        graph: Dependency graph of the package (see graph.DependencyGraph)
        package: Snippets of the package
        options: Grouping options (defaults to get_group_options())
        module: Other packages, used to resolve external dependencies.
            Required when options.include_external_deps is set.

    Returns:
        Groups in construction order: cyclic groups, block groups,
        singletons, then the package group if requested. External groups
        are reachable only through direct_deps.

    Raises:
        MissingSnippetError: An identifier of the graph has no snippet
        ExternalResolutionError: An external package failed to load
        ConfigError: External deps requested without a module
    """
    options = options or get_group_options()
    count_tokens = options.token_counter()

    if options.include_external_deps and module is None:
        raise ConfigError("include_external_deps requires a SnippetModule to resolve import paths")

    if not options.include_test_files:
        graph = graph.without_test_identifiers()

    stats = GroupingStats()
    all_ids = graph.all_identifiers()

    id_to_snippet: Dict[str, Snippet] = {}
    for identifier in all_ids:
        snippet = package.get_snippet(identifier)
        if snippet is not None:
            id_to_snippet[identifier] = snippet

    groups: List[IdentifierGroup] = []
    id_to_group: Dict[str, IdentifierGroup] = {}

    # Cycles can never be split
    for component in graph.strongly_connected_components():
        if len(component) > 1:
            group = IdentifierGroup(ids=sorted(component))
            groups.append(group)
            for identifier in component:
                id_to_group[identifier] = group
            stats.cyclic_groups += 1

    # Blocks run after cycles so a block straddling a cycle lands in the cycle's group
    processed = set()
    for identifier in all_ids:
        snippet = id_to_snippet.get(identifier)
        if snippet is None or id(snippet) in processed:
            continue
        processed.add(id(snippet))
        if len(snippet.ids) > 1:
            if _merge_block(snippet.ids, groups, id_to_group):
                stats.block_groups += 1

    for identifier in all_ids:
        if identifier not in id_to_group:
            group = IdentifierGroup(ids=[identifier])
            groups.append(group)
            id_to_group[identifier] = group

    for group in groups:
        if len(group.ids) > 1:
            group.ids.sort()

    for group in groups:
        _measure_group(group, id_to_snippet, package, options, count_tokens)

    _link_groups(groups, graph, id_to_group)

    if options.include_package_docs and not package.is_test_package:
        groups.append(_package_group(groups, package, count_tokens))
        stats.has_package_group = True

    if options.include_external_deps:
        from .external import add_external_groups
        stats.external_groups = add_external_groups(module, graph, groups, count_tokens)

    stats.group_count = len(groups)
    stats.documented_groups = sum(1 for g in groups if g.is_documented)
    logger.debug(f"Grouped package {package.import_path}: {stats.to_dict()}")

    return groups


def _merge_block(
    block_ids: Sequence[str],
    groups: List[IdentifierGroup],
    id_to_group: Dict[str, IdentifierGroup],
) -> bool:
    """
    Put every identifier of a block declaration into one group.

    Reuses the group of any block member that is already grouped. If members
    sit in several different groups, those groups are merged into the first.

    Returns:
        True if a new group was created
    """
    existing: List[IdentifierGroup] = []
    for block_id in block_ids:
        group = id_to_group.get(block_id)
        if group is not None and not any(group is e for e in existing):
            existing.append(group)

    created = not existing
    if created:
        target = IdentifierGroup(ids=[])
        groups.append(target)
    else:
        target = existing[0]

    members = set(target.ids)
    for other in existing[1:]:
        for identifier in other.ids:
            if identifier not in members:
                target.ids.append(identifier)
                members.add(identifier)
            id_to_group[identifier] = target
        groups.remove(other)
        logger.debug(f"Merged group {other.ids} into {target.ids} to keep a block together")

    for block_id in block_ids:
        if block_id not in members:
            target.ids.append(block_id)
            members.add(block_id)
        id_to_group[block_id] = target

    return created


def _measure_group(
    group: IdentifierGroup,
    id_to_snippet: Dict[str, Snippet],
    package: SnippetPackage,
    options: GroupOptions,
    count_tokens: CountTokensFunc,
) -> None:
    """Fill in snippets, token costs, documentation and test-file status."""
    body_tokens = 0
    snippet_tokens = 0
    all_documented = True
    counted = set()

    for identifier in group.ids:
        snippet = id_to_snippet.get(identifier) or package.get_snippet(identifier)
        if snippet is None:
            raise MissingSnippetError(identifier)
        group.snippets[identifier] = snippet

        if id(snippet) not in counted:
            counted.add(id(snippet))
            snippet_tokens += count_tokens(snippet.short_view())
            body_tokens += count_tokens(snippet.full_view())

        if not identifier_is_documented(snippet, identifier, options):
            all_documented = False

        if snippet.is_test:
            group.is_test_file = True

    group.body_tokens = body_tokens
    group.snippet_tokens = snippet_tokens
    group.is_documented = all_documented


def _link_groups(
    groups: List[IdentifierGroup],
    graph,
    id_to_group: Dict[str, IdentifierGroup],
) -> None:
    """Derive direct_deps / used_by_deps between groups from identifier edges."""
    for group in groups:
        direct: Dict[IdentifierGroup, None] = {}
        used_by: Dict[IdentifierGroup, None] = {}

        for identifier in group.ids:
            for dep_id in graph.identifiers_from(identifier):
                dep_group = id_to_group.get(dep_id)
                if dep_group is not None and dep_group is not group:
                    direct[dep_group] = None

            for user_id in graph.identifiers_to(identifier):
                user_group = id_to_group.get(user_id)
                if user_group is not None and user_group is not group:
                    used_by[user_group] = None

        group.direct_deps = sort_by_lead_id(direct)
        group.used_by_deps = sort_by_lead_id(used_by)


def _package_group(
    groups: List[IdentifierGroup],
    package: SnippetPackage,
    count_tokens: CountTokensFunc,
) -> IdentifierGroup:
    """
    Synthesize the group for package-level documentation.

    With package docs, the package group is usage context for every group.
    Without them, documenting the package first needs everything else
    documented, so it depends on every non-test group instead.
    """
    package_group = IdentifierGroup(ids=[PACKAGE_IDENTIFIER])
    snippet = package.get_snippet(PACKAGE_IDENTIFIER)

    if snippet is not None:
        package_group.is_documented = True
        package_group.body_tokens = count_tokens(snippet.full_view())
        package_group.snippet_tokens = count_tokens(snippet.short_view())
        for group in groups:
            group.used_by_deps = sort_by_lead_id(group.used_by_deps + [package_group])
    else:
        # The placeholder is rendered but has no documentation to pay for
        snippet = synthetic_package_snippet(package.name)
        package_group.is_documented = False
        package_group.direct_deps = sort_by_lead_id(g for g in groups if not g.is_test_file)

    package_group.snippets[PACKAGE_IDENTIFIER] = snippet
    return package_group
